"""Command group: bars (create, list, show, update, delete, duplicate, select)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from waybarctl.commands._base import WbGroup
from waybarctl.commands._params import parse_assignments
from waybarctl.services.result import ErrorCode, ServiceResult
from waybarctl.services.store import bar_data

if TYPE_CHECKING:
    from waybarctl.commands._context import AppContext

_BAR_EXAMPLES = """\
  waybarctl bar create main --set position=top --set height=30
  waybarctl bar list
  waybarctl bar show
  waybarctl bar update --set layer=overlay --unset margin
  waybarctl bar duplicate 3f1c... --name secondary"""


@click.group(cls=WbGroup, examples=_BAR_EXAMPLES)
def bar() -> None:
    """Manage bars."""


@bar.command(
    examples="""\
  waybarctl bar create
  waybarctl bar create main --set position=top --set height=30
  waybarctl bar create side --set position=left --disabled"""
)
@click.argument("name", required=False)
@click.option("--set", "assignments", multiple=True, metavar="KEY=VALUE", help="Bar setting.")
@click.option("--disabled", is_flag=True, help="Create the bar disabled.")
@click.pass_obj
def create(app: AppContext, name: str | None, assignments: tuple[str, ...], disabled: bool) -> None:
    """Create a bar and make it the current bar."""
    settings = parse_assignments(assignments)
    app.commit(app.store.create_bar(name, settings=settings, enabled=not disabled))


@bar.command("list")
@click.pass_obj
def list_bars(app: AppContext) -> None:
    """List bars; the current bar is marked with ``*``."""
    store = app.store
    result = ServiceResult(
        ok=True,
        op="list_bars",
        data={
            "items": [bar_data(b) for b in store.config.bars],
            "current": store.current_bar_id,
        },
    )
    app.emit(result)


@bar.command()
@click.argument("bar_id", required=False)
@click.pass_obj
def show(app: AppContext, bar_id: str | None) -> None:
    """Show a bar's settings and modules (default: current bar)."""
    resolved = app.resolve_bar(bar_id)
    found = app.store.config.get_bar(resolved)
    if found is None:
        app.emit(
            ServiceResult.fail("show_bar", ErrorCode.BAR_NOT_FOUND, f"No bar with id {resolved}")
        )
        return
    app.emit(
        ServiceResult(ok=True, op="show_bar", data={"bar": bar_data(found, with_modules=True)})
    )


@bar.command(
    examples="""\
  waybarctl bar update --name top-bar
  waybarctl bar update --set height=28 --set 'output=["DP-1","HDMI-A-1"]'
  waybarctl bar update 3f1c... --unset margin --disable"""
)
@click.argument("bar_id", required=False)
@click.option("--name", default=None, help="New name.")
@click.option("--set", "assignments", multiple=True, metavar="KEY=VALUE", help="Bar setting.")
@click.option("--unset", multiple=True, metavar="KEY", help="Remove a bar setting.")
@click.option("--enable/--disable", "enabled", default=None, help="Toggle the bar.")
@click.pass_obj
def update(
    app: AppContext,
    bar_id: str | None,
    name: str | None,
    assignments: tuple[str, ...],
    unset: tuple[str, ...],
    enabled: bool | None,
) -> None:
    """Change a bar's name, enabled flag, or settings."""
    settings = parse_assignments(assignments, unset)
    result = app.store.update_bar(
        app.resolve_bar(bar_id), name=name, enabled=enabled, settings=settings or None
    )
    app.commit(result)


@bar.command()
@click.argument("bar_id")
@click.pass_obj
def delete(app: AppContext, bar_id: str) -> None:
    """Delete a bar and all of its modules."""
    app.commit(app.store.delete_bar(bar_id))


@bar.command()
@click.argument("bar_id", required=False)
@click.option("--name", default=None, help="Name for the copy (default: '<name> (Copy)').")
@click.pass_obj
def duplicate(app: AppContext, bar_id: str | None, name: str | None) -> None:
    """Copy a bar with all its modules under fresh ids."""
    app.commit(app.store.duplicate_bar(app.resolve_bar(bar_id), name=name))


@bar.command()
@click.argument("bar_id")
@click.pass_obj
def select(app: AppContext, bar_id: str) -> None:
    """Make BAR_ID the current bar for bar-scoped commands."""
    app.commit(app.store.set_current_bar(bar_id))
