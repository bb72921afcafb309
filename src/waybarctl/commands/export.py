"""Command group: export the session in native Waybar formats."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

import click

from waybarctl.commands._base import WbGroup
from waybarctl.domain.native import config_to_multi_native, config_to_native, dump_native
from waybarctl.domain.stylesheet import styles_to_css
from waybarctl.services.result import ServiceResult

if TYPE_CHECKING:
    from waybarctl.commands._context import AppContext

_EXPORT_EXAMPLES = """\
  waybarctl export json
  waybarctl export json --multi --output /tmp/waybar.json
  waybarctl export css --output /tmp/style.css"""

_output_option = click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write to a file instead of stdout.",
)


@click.group(cls=WbGroup, examples=_EXPORT_EXAMPLES)
def export() -> None:
    """Print or write the native config and stylesheet."""


def _emit_export(app: AppContext, op: str, content: str, output: Path | None) -> None:
    data: dict[str, Any]
    if output is None:
        data = {"content": content}
    else:
        app.write_output(output, content)
        data = {"path": str(output)}
    app.emit(ServiceResult(ok=True, op=op, data=data))


@export.command("json")
@click.option("--multi", is_flag=True, help="All enabled bars, keyed by bar name.")
@_output_option
@click.pass_obj
def export_json(app: AppContext, multi: bool, output: Path | None) -> None:
    """Native JSON config (first enabled bar unless --multi)."""
    config = app.store.config
    native = config_to_multi_native(config) if multi else config_to_native(config)
    _emit_export(app, "export_json", dump_native(native), output)


@export.command("css")
@_output_option
@click.pass_obj
def export_css(app: AppContext, output: Path | None) -> None:
    """Stylesheet generated from the enabled styles."""
    css = styles_to_css(app.store.config.styles)
    _emit_export(app, "export_css", css + "\n" if css else "", output)
