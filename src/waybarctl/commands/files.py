"""Commands: config file lifecycle (load, save, validate, import, reset)."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from waybarctl.commands._base import WbCommand
from waybarctl.infrastructure.gateway import ConfigPaths, GatewayError
from waybarctl.services.result import ErrorCode, ServiceResult

if TYPE_CHECKING:
    from waybarctl.commands._context import AppContext

_path_type = click.Path(dir_okay=False, path_type=Path)


def _explicit_paths(
    app: AppContext, config_file: Path | None, style_file: Path | None
) -> ConfigPaths | None:
    """Paths from ``--config-file``/``--style-file``; None means auto-detect."""
    if config_file is None:
        return None
    config_file = config_file.expanduser().resolve()
    if style_file is None:
        style_file = config_file.parent / app.settings.paths.style_file
    return ConfigPaths(config_file.parent, config_file, style_file.expanduser().resolve())


@click.command(
    cls=WbCommand,
    examples="""\
  waybarctl load
  waybarctl load --config-file ~/.config/waybar/config.jsonc
  waybarctl load --ignore-validation""",
)
@click.option("--config-file", type=_path_type, default=None, help="Config file to read.")
@click.option("--style-file", type=_path_type, default=None, help="Stylesheet to read.")
@click.option("--ignore-validation", is_flag=True, help="Load even if validation fails.")
@click.pass_obj
def load(
    app: AppContext,
    config_file: Path | None,
    style_file: Path | None,
    ignore_validation: bool,
) -> None:
    """Load the Waybar config and stylesheet, replacing the session."""
    store = app.store
    if store.dirty:
        click.echo("WARNING: discarding unsaved changes", err=True)
    result = app.run(
        store.load,
        paths=_explicit_paths(app, config_file, style_file),
        ignore_validation=ignore_validation,
    )
    if result.ok:
        app.persist()
    app.emit(result)


@click.command(
    cls=WbCommand,
    examples="""\
  waybarctl save
  waybarctl save --no-reload
  waybarctl save --multi --config-file /tmp/config.jsonc""",
)
@click.option("--config-file", type=_path_type, default=None, help="Write here instead.")
@click.option("--style-file", type=_path_type, default=None, help="Write CSS here instead.")
@click.option("--reload/--no-reload", "reload", default=None, help="Signal Waybar afterwards.")
@click.option("--style/--no-style", "write_style", default=None, help="Also write style.css.")
@click.option("--multi/--single", "multi_bar", default=None, help="Write every enabled bar.")
@click.pass_obj
def save(
    app: AppContext,
    config_file: Path | None,
    style_file: Path | None,
    reload: bool | None,
    write_style: bool | None,
    multi_bar: bool | None,
) -> None:
    """Validate and write the config, then reload Waybar."""
    defaults = app.settings.save
    result = app.run(
        app.store.save,
        paths=_explicit_paths(app, config_file, style_file),
        write_style=defaults.write_style if write_style is None else write_style,
        reload=defaults.reload if reload is None else reload,
        multi_bar=defaults.multi_bar if multi_bar is None else multi_bar,
    )
    if result.ok:
        app.persist()
    app.emit(result)


@click.command(cls=WbCommand)
@click.pass_obj
def validate(app: AppContext) -> None:
    """Validate the whole session config and list every problem."""
    validation = app.store.validate()
    if validation.success:
        app.emit(ServiceResult(ok=True, op="validate", data=validation.to_dict()))
        return
    app.emit(
        ServiceResult.fail(
            "validate",
            ErrorCode.VALIDATION_FAILED,
            f"Configuration has {validation.error_count} validation error(s)",
            detail={"errors": validation.errors},
        )
    )


@click.command(
    "import",
    cls=WbCommand,
    examples="""\
  waybarctl import ~/dotfiles/waybar/config.jsonc
  waybarctl import bar.json --css bar.css --name laptop""",
)
@click.argument("file", type=_path_type)
@click.option("--css", "css_file", type=_path_type, default=None, help="Stylesheet to merge.")
@click.option("--name", "bar_name", default=None, help="Name for the imported bar.")
@click.pass_obj
def import_cmd(app: AppContext, file: Path, css_file: Path | None, bar_name: str | None) -> None:
    """Merge bar(s) from a native Waybar FILE into the session (one undo step)."""
    gateway = app.gateway
    try:
        native = app.run(gateway.read_config, file)
        css = app.run(gateway.read_style, css_file) if css_file else None
    except GatewayError as exc:
        app.emit(ServiceResult.fail("import_bar", ErrorCode.IO_ERROR, exc.message))
        return
    app.commit(app.store.import_bar(native, css=css, bar_name=bar_name))


@click.command(cls=WbCommand)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation.")
@click.pass_obj
def reset(app: AppContext, yes: bool) -> None:
    """Remove every bar and style from the session (undoable)."""
    if not yes:
        click.confirm("Remove all bars and styles?", abort=True, err=True)
    app.commit(app.store.reset_config())
