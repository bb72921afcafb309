"""Command group: CSS styles (add, update, delete, list)."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from waybarctl.commands._base import WbGroup
from waybarctl.domain.models import CSSProperty
from waybarctl.domain.stylesheet import IMPORTANT_SUFFIX
from waybarctl.services.result import ErrorCode, ServiceResult
from waybarctl.services.store import style_data

if TYPE_CHECKING:
    from collections.abc import Iterable

    from waybarctl.commands._context import AppContext

_STYLE_EXAMPLES = """\
  waybarctl style add 'window#waybar' --set background-color=#1e1e2e --set color=#cdd6f4
  waybarctl style add '#clock' --set 'font-weight=bold !important'
  waybarctl style update 5b0d... --set padding='0 8px' --unset margin
  waybarctl style list"""


@click.group(cls=WbGroup, examples=_STYLE_EXAMPLES)
def style() -> None:
    """Manage CSS rules written to style.css."""


def _parse_declaration(item: str) -> CSSProperty:
    prop, sep, value = item.partition("=")
    if not sep or not prop.strip():
        msg = f"Expected PROPERTY=VALUE, got {item!r}"
        raise click.BadParameter(msg, param_hint="--set")
    value = value.strip()
    important = value.endswith(IMPORTANT_SUFFIX)
    if important:
        value = value[: -len(IMPORTANT_SUFFIX)].strip()
    return CSSProperty(property=prop.strip(), value=value, important=important)


def _apply_declarations(
    current: Iterable[CSSProperty], assignments: Iterable[str], unset: Iterable[str]
) -> list[CSSProperty]:
    """Replace declarations in place, append new ones, drop unset ones."""
    properties = list(current)
    for item in assignments:
        decl = _parse_declaration(item)
        index = next(
            (i for i, p in enumerate(properties) if p.property == decl.property), None
        )
        if index is None:
            properties.append(decl)
        else:
            properties[index] = decl
    removed = set(unset)
    return [p for p in properties if p.property not in removed]


@style.command(
    examples="""\
  waybarctl style add '#battery.critical' --set color=#f38ba8
  waybarctl style add '#workspaces button' --name Workspaces --set padding='0 5px'"""
)
@click.argument("selector")
@click.option("--set", "assignments", multiple=True, metavar="PROPERTY=VALUE", help="Declaration.")
@click.option("--name", default=None, help="Display name (default: 'Style for SELECTOR').")
@click.option("--disabled", is_flag=True, help="Add the rule disabled.")
@click.pass_obj
def add(
    app: AppContext,
    selector: str,
    assignments: tuple[str, ...],
    name: str | None,
    disabled: bool,
) -> None:
    """Add a CSS rule for SELECTOR."""
    properties = _apply_declarations([], assignments, ())
    app.commit(app.store.add_style(selector, properties, name=name, enabled=not disabled))


@style.command()
@click.argument("style_id")
@click.option("--selector", default=None, help="New selector.")
@click.option("--name", default=None, help="New display name.")
@click.option("--set", "assignments", multiple=True, metavar="PROPERTY=VALUE", help="Declaration.")
@click.option("--unset", multiple=True, metavar="PROPERTY", help="Remove a declaration.")
@click.option("--enable/--disable", "enabled", default=None, help="Toggle the rule.")
@click.pass_obj
def update(
    app: AppContext,
    style_id: str,
    selector: str | None,
    name: str | None,
    assignments: tuple[str, ...],
    unset: tuple[str, ...],
    enabled: bool | None,
) -> None:
    """Change a rule's selector, name, declarations, or enabled flag."""
    existing = app.store.config.get_style(style_id)
    properties = None
    if existing is not None and (assignments or unset):
        properties = _apply_declarations(existing.properties, assignments, unset)
    result = app.store.update_style(
        style_id, name=name, selector=selector, enabled=enabled, properties=properties
    )
    app.commit(result)


@style.command()
@click.argument("style_id")
@click.pass_obj
def delete(app: AppContext, style_id: str) -> None:
    """Delete a CSS rule."""
    app.commit(app.store.delete_style(style_id))


@style.command("list")
@click.option("--selector", "contains", default=None, help="Only selectors containing this text.")
@click.pass_obj
def list_styles(app: AppContext, contains: str | None) -> None:
    """List CSS rules in output order."""
    styles = app.store.config.styles
    if contains:
        styles = [s for s in styles if contains in s.selector]
    app.emit(ServiceResult(ok=True, op="list_styles", data={"items": [style_data(s) for s in styles]}))


@style.command()
@click.argument("style_id")
@click.pass_obj
def show(app: AppContext, style_id: str) -> None:
    """Show one CSS rule."""
    found = app.store.config.get_style(style_id)
    if found is None:
        msg = f"No style with id {style_id}"
        app.emit(ServiceResult.fail("show_style", ErrorCode.STYLE_NOT_FOUND, msg))
        return
    app.emit(ServiceResult(ok=True, op="list_styles", data={"items": [style_data(found)]}))
