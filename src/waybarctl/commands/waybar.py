"""Command group: control the running Waybar process."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from waybarctl.commands._base import WbGroup
from waybarctl.infrastructure.gateway import GatewayError
from waybarctl.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable
    from typing import Any

    from waybarctl.commands._context import AppContext

_WAYBAR_EXAMPLES = """\
  waybarctl waybar status
  waybarctl waybar reload
  waybarctl waybar restart --timeout 5
  waybarctl waybar detect"""


@click.group(cls=WbGroup, examples=_WAYBAR_EXAMPLES)
def waybar() -> None:
    """Reload, start, stop, or inspect Waybar."""


def _call[T](app: AppContext, op: str, func: Callable[..., Awaitable[T]], **kwargs: Any) -> T:
    try:
        return app.run(func, **kwargs)
    except GatewayError as exc:
        app.emit(ServiceResult.fail(op, ErrorCode.PROCESS_ERROR, exc.message))
        raise  # unreachable: emit exits on failure


@waybar.command()
@click.pass_obj
def reload(app: AppContext) -> None:
    """Send SIGUSR2 so Waybar re-reads its config and style."""
    reloaded = _call(app, "reload", app.gateway.reload)
    warnings = [] if reloaded else ["Waybar is not running"]
    app.emit(ServiceResult(ok=True, op="reload", data={"reloaded": reloaded}, warnings=warnings))


@waybar.command()
@click.pass_obj
def start(app: AppContext) -> None:
    """Start Waybar in the background."""
    started = _call(app, "start", app.gateway.start)
    warnings = [] if started else ["Waybar is already running"]
    app.emit(ServiceResult(ok=True, op="start", data={"started": started}, warnings=warnings))


@waybar.command()
@click.pass_obj
def stop(app: AppContext) -> None:
    """Stop Waybar."""
    stopped = _call(app, "stop", app.gateway.stop)
    warnings = [] if stopped else ["Waybar is not running"]
    app.emit(ServiceResult(ok=True, op="stop", data={"stopped": stopped}, warnings=warnings))


@waybar.command()
@click.option("--timeout", type=float, default=3.0, show_default=True, help="Seconds to wait.")
@click.pass_obj
def restart(app: AppContext, timeout: float) -> None:
    """Stop Waybar, wait for it to exit, then start it again."""
    _call(app, "restart", app.gateway.restart, timeout=timeout)
    app.emit(ServiceResult(ok=True, op="restart", data={"restarted": True}))


@waybar.command()
@click.pass_obj
def status(app: AppContext) -> None:
    """Report whether Waybar is running and with which pids."""
    pids = _call(app, "status", app.gateway.pids)
    app.emit(ServiceResult(ok=True, op="status", data={"running": bool(pids), "pids": pids}))


@waybar.command()
@click.pass_obj
def detect(app: AppContext) -> None:
    """Detect the Wayland compositor (workspace modules depend on it)."""
    compositor = _call(app, "detect", app.gateway.detect_compositor)
    app.emit(ServiceResult(ok=True, op="detect", data={"compositor": compositor.value}))
