"""Command group: backups written before each overwrite."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from waybarctl.commands._base import WbGroup
from waybarctl.infrastructure.gateway import BACKUP_MARKER, GatewayError, describe_backup
from waybarctl.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from pathlib import Path

    from waybarctl.commands._context import AppContext

_BACKUP_EXAMPLES = """\
  waybarctl backup list
  waybarctl backup restore config.jsonc.backup.20250101T120000"""


@click.group(cls=WbGroup, examples=_BACKUP_EXAMPLES)
def backup() -> None:
    """List and restore config backups."""


def _config_dir(app: AppContext) -> Path:
    paths = app.store.paths
    if paths is not None:
        return paths.config_dir
    return app.run(app.gateway.detect_paths).config_dir


@backup.command("list")
@click.pass_obj
def list_backups(app: AppContext) -> None:
    """List backups in the Waybar config directory, newest first."""
    op = "list_backups"
    try:
        config_dir = _config_dir(app)
        backups = app.run(app.gateway.list_backups, config_dir)
    except GatewayError as exc:
        app.emit(ServiceResult.fail(op, ErrorCode.IO_ERROR, exc.message))
        return
    items = [describe_backup(p) for p in backups]
    app.emit(ServiceResult(ok=True, op=op, data={"config_dir": str(config_dir), "items": items}))


@backup.command()
@click.argument("name")
@click.pass_obj
def restore(app: AppContext, name: str) -> None:
    """Copy backup NAME back over the file it was taken from.

    The current file is backed up first. Run ``waybarctl load`` afterwards
    to edit the restored config.
    """
    op = "restore_backup"
    if BACKUP_MARKER not in name:
        msg = f"Not a backup file name: {name}"
        app.emit(ServiceResult.fail(op, ErrorCode.INVALID_INPUT, msg))
        return
    try:
        config_dir = _config_dir(app)
        source = config_dir / name
        target = config_dir / describe_backup(source)["original"]
        previous = app.run(app.gateway.restore_backup, source, target)
    except GatewayError as exc:
        code = ErrorCode.BACKUP_NOT_FOUND if "not found" in exc.message else ErrorCode.IO_ERROR
        app.emit(ServiceResult.fail(op, code, exc.message))
        return
    app.emit(
        ServiceResult(
            ok=True,
            op=op,
            data={
                "path": str(target),
                "restored_from": str(source),
                "backup": str(previous) if previous else None,
            },
            warnings=["Session not updated; run 'waybarctl load' to edit the restored file"],
        )
    )
