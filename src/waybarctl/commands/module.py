"""Command group: modules (add, update, delete, move, reorder, list, types).

Modules can be addressed by internal id or by native id (``battery#bat0``)
as long as the native id is unique within the bar.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import click

from waybarctl.commands._base import WbGroup
from waybarctl.commands._params import POSITIONS, parse_assignments, parse_json_object
from waybarctl.domain.catalog import MODULE_CATALOG, modules_by_category
from waybarctl.domain.types import ModuleCategory
from waybarctl.services.result import ErrorCode, ServiceResult
from waybarctl.services.store import KEEP, module_data

if TYPE_CHECKING:
    from waybarctl.commands._context import AppContext

_MODULE_EXAMPLES = """\
  waybarctl module add clock --position center --set interval=1
  waybarctl module add battery --name bat0 --position right --defaults
  waybarctl module update battery#bat0 --set full-at=95
  waybarctl module move clock left --index 0
  waybarctl module reorder right pulseaudio network battery#bat0
  waybarctl module types --category hardware"""

_bar_option = click.option("--bar", "bar_id", default=None, help="Bar id (default: current bar).")


@click.group(cls=WbGroup, examples=_MODULE_EXAMPLES)
def module() -> None:
    """Manage modules of a bar."""


def _resolve_module(app: AppContext, bar_id: str, ref: str) -> str:
    """Map an internal id or a unique native id to an internal id.

    Unknown refs pass through so the store reports MODULE_NOT_FOUND.
    """
    found = app.store.config.get_bar(bar_id)
    if found is None or found.get_module(ref) is not None:
        return ref
    matches = [m for m in found.modules if m.native_id == ref]
    if len(matches) > 1:
        msg = f"'{ref}' matches {len(matches)} modules; use the internal id"
        raise click.BadParameter(msg, param_hint="MODULE")
    return matches[0].id if matches else ref


@module.command(
    examples="""\
  waybarctl module add clock --position center
  waybarctl module add battery --name bat0 --defaults --set full-at=95
  waybarctl module add custom/spotify --config '{"exec": "spotify-status", "interval": 5}'"""
)
@click.argument("module_type")
@_bar_option
@click.option(
    "-p",
    "--position",
    type=click.Choice(POSITIONS),
    default="left",
    show_default=True,
    help="Zone to append to.",
)
@click.option("--name", "custom_name", default=None, help="Custom name (native id TYPE#NAME).")
@click.option("--set", "assignments", multiple=True, metavar="KEY=VALUE", help="Config option.")
@click.option("--config", "config_json", default=None, help="Config as a JSON object.")
@click.option("--defaults", is_flag=True, help="Fill in the type's default options.")
@click.option("--disabled", is_flag=True, help="Add the module disabled.")
@click.pass_obj
def add(
    app: AppContext,
    module_type: str,
    bar_id: str | None,
    position: str,
    custom_name: str | None,
    assignments: tuple[str, ...],
    config_json: str | None,
    defaults: bool,
    disabled: bool,
) -> None:
    """Append a MODULE_TYPE module to a zone of a bar."""
    config = parse_json_object(config_json, param_hint="--config") or {}
    config.update(parse_assignments(assignments))
    result = app.store.add_module(
        app.resolve_bar(bar_id),
        module_type,
        position=position,
        custom_name=custom_name,
        config=config,
        enabled=not disabled,
        with_defaults=defaults,
    )
    app.commit(result)


@module.command(
    examples="""\
  waybarctl module update clock --set format='{:%H:%M}'
  waybarctl module update battery#bat0 --unset format-alt
  waybarctl module update 9a2e... --config '{"interval": 5}' --replace
  waybarctl module update cpu --disable"""
)
@click.argument("module_ref")
@_bar_option
@click.option("--name", "custom_name", default=None, help="New custom name.")
@click.option("--clear-name", is_flag=True, help="Remove the custom name.")
@click.option("--set", "assignments", multiple=True, metavar="KEY=VALUE", help="Config option.")
@click.option("--unset", multiple=True, metavar="KEY", help="Remove a config option.")
@click.option("--config", "config_json", default=None, help="Config as a JSON object.")
@click.option("--replace", is_flag=True, help="Replace the whole config instead of merging.")
@click.option("--enable/--disable", "enabled", default=None, help="Toggle the module.")
@click.pass_obj
def update(
    app: AppContext,
    module_ref: str,
    bar_id: str | None,
    custom_name: str | None,
    clear_name: bool,
    assignments: tuple[str, ...],
    unset: tuple[str, ...],
    config_json: str | None,
    replace: bool,
    enabled: bool | None,
) -> None:
    """Change a module's config, custom name, or enabled flag."""
    resolved_bar = app.resolve_bar(bar_id)
    config = parse_json_object(config_json, param_hint="--config")
    updates = parse_assignments(assignments, unset)
    if updates:
        config = {**(config or {}), **updates}

    name = None if clear_name else (custom_name if custom_name is not None else KEEP)
    result = app.store.update_module(
        resolved_bar,
        _resolve_module(app, resolved_bar, module_ref),
        custom_name=name,
        enabled=enabled,
        config=config,
        replace_config=replace,
    )
    app.commit(result)


@module.command()
@click.argument("module_ref")
@_bar_option
@click.pass_obj
def delete(app: AppContext, module_ref: str, bar_id: str | None) -> None:
    """Remove a module from a bar."""
    resolved_bar = app.resolve_bar(bar_id)
    module_id = _resolve_module(app, resolved_bar, module_ref)
    app.commit(app.store.delete_module(resolved_bar, module_id))


@module.command()
@click.argument("module_ref")
@click.argument("position", type=click.Choice(POSITIONS))
@_bar_option
@click.option("--index", type=int, default=sys.maxsize, help="Target slot (default: end).")
@click.pass_obj
def move(
    app: AppContext, module_ref: str, position: str, bar_id: str | None, index: int
) -> None:
    """Move a module to POSITION, at --index within that zone."""
    resolved_bar = app.resolve_bar(bar_id)
    result = app.store.move_module(
        resolved_bar, _resolve_module(app, resolved_bar, module_ref), position, index
    )
    app.commit(result)


@module.command()
@click.argument("position", type=click.Choice(POSITIONS))
@click.argument("module_refs", nargs=-1, required=True)
@_bar_option
@click.pass_obj
def reorder(
    app: AppContext, position: str, module_refs: tuple[str, ...], bar_id: str | None
) -> None:
    """Set the order of modules in POSITION; unlisted modules go last."""
    resolved_bar = app.resolve_bar(bar_id)
    ids = [_resolve_module(app, resolved_bar, ref) for ref in module_refs]
    app.commit(app.store.reorder_modules(resolved_bar, position, ids))


@module.command("list")
@_bar_option
@click.option("-p", "--position", type=click.Choice(POSITIONS), default=None)
@click.pass_obj
def list_modules(app: AppContext, bar_id: str | None, position: str | None) -> None:
    """List a bar's modules by zone and order."""
    resolved_bar = app.resolve_bar(bar_id)
    found = app.store.config.get_bar(resolved_bar)
    if found is None:
        msg = f"No bar with id {resolved_bar}"
        app.emit(ServiceResult.fail("list_modules", ErrorCode.BAR_NOT_FOUND, msg))
        return
    positions = [position] if position else list(POSITIONS)
    items = [module_data(m) for p in positions for m in found.modules_at(p)]
    app.emit(ServiceResult(ok=True, op="list_modules", data={"bar_id": found.id, "items": items}))


@module.command()
@click.option(
    "--category",
    type=click.Choice([c.value for c in ModuleCategory]),
    default=None,
    help="Only this category.",
)
@click.pass_obj
def types(app: AppContext, category: str | None) -> None:
    """List the module types that can be added."""
    infos = modules_by_category(ModuleCategory(category)) if category else list(MODULE_CATALOG)
    items = [
        {
            "type": info.type.value,
            "display_name": info.display_name,
            "category": info.category.value,
            "requires_wm": info.requires_wm.value if info.requires_wm else None,
            "description": info.description,
        }
        for info in infos
    ]
    app.emit(ServiceResult(ok=True, op="module_types", data={"items": items}))
