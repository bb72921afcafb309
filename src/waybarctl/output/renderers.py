"""Operation-specific Rich renderers for ServiceResult.

Each renderer writes to a Rich Console (backed by StringIO). Renderers are
dispatched by ``result.op`` in :func:`render_result`; unknown ops fall
through to a generic key-value renderer.

User-supplied strings (selectors, format strings, names) go through
:class:`rich.text.Text`, never markup, so ``[...]`` in them prints as-is.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from waybarctl.output.console import create_console, get_output, style_for_position

if TYPE_CHECKING:
    from rich.console import Console

    from waybarctl.services.result import ServiceResult

Renderer = Callable[["ServiceResult", "Console"], None]


# ── Public API ────────────────────────────────────────────────────────


def render_result(result: ServiceResult, *, verbose: bool = False) -> str:
    """Render a ServiceResult to a styled string via Rich."""
    console = create_console()
    if result.ok:
        renderer = _OP_RENDERERS.get(result.op, _render_generic)
        renderer(result, console)
        if verbose:
            _render_meta(console, result)
    else:
        _render_error(result, console, verbose=verbose)
    return get_output(console).rstrip("\n")


def render_quiet(result: ServiceResult) -> str:
    """Minimal output: ids for listings, raw content for exports."""
    if not result.ok:
        msg = result.error.message if result.error else "Unknown error"
        return f"ERROR: {result.op} — {msg}"

    if "content" in result.data:
        return str(result.data["content"]).rstrip("\n")

    items = result.data.get("items")
    if isinstance(items, list):
        return "\n".join(_extract_id(item) for item in items if _extract_id(item))

    for key in ("bar", "module", "style"):
        entity = result.data.get(key)
        if isinstance(entity, dict) and entity.get("id"):
            return str(entity["id"])

    return f"OK: {result.op}"


# ── Helpers ───────────────────────────────────────────────────────────


def _extract_id(item: Any) -> str:
    if isinstance(item, dict):
        for key in ("id", "type", "name"):
            val = item.get(key)
            if val is not None:
                return str(val)
    return ""


def _compact(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def _status_line(console: Console, result: ServiceResult) -> None:
    console.print(Text("OK", style="wb.ok"), Text(f"  {result.op}", style="wb.op"))


def _field(console: Console, key: str, value: Any) -> None:
    if key == "id" or key.endswith("_id"):
        style = "wb.id"
    elif key == "native_id":
        style = "wb.native"
    elif key.endswith("file") or key in ("path", "backup", "config_dir"):
        style = "wb.path"
    elif key == "name":
        style = "wb.title"
    else:
        style = ""
    console.print(Text(f"  {key}: ", style="wb.key"), Text(_compact(value), style=style))


def _render_meta(console: Console, result: ServiceResult) -> None:
    if not result.meta:
        return
    console.print()
    console.print(Text("  meta:", style="dim"))
    for key, value in result.meta.items():
        console.print(Text(f"    {key}: {_compact(value)}"))


def _errors_table(errors: dict[str, list[str]]) -> Table:
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Path", style="wb.native", no_wrap=True)
    table.add_column("Message")
    for path, messages in errors.items():
        for message in messages:
            table.add_row(Text(path), Text(message))
    return table


def _position_text(position: str) -> Text:
    return Text(position, style=style_for_position(position))


# ── Error renderer ────────────────────────────────────────────────────


def _render_error(result: ServiceResult, console: Console, *, verbose: bool = False) -> None:
    err = result.error
    msg = err.message if err else "Unknown error"
    console.print(
        Text("ERROR", style="wb.error"),
        Text(f"  {result.op}", style="wb.op"),
        Text(" — "),
        Text(msg),
    )
    if err is None:
        return

    errors = err.detail.get("errors")
    if isinstance(errors, dict) and errors:
        console.print(_errors_table(errors))

    if verbose:
        console.print(Text(f"  code: {err.code}", style="dim"))
        for key, value in err.detail.items():
            if key != "errors":
                console.print(Text(f"    {key}: {_compact(value)}"))


# ── Mutation renderers ────────────────────────────────────────────────


_ENTITY_KEYS = ("id", "name", "native_id", "type", "position", "order", "selector", "enabled")


def _render_mutation(result: ServiceResult, console: Console) -> None:
    """Status line, then the changed entity's key fields or the plain payload."""
    _status_line(console, result)
    data = result.data
    entity = next(
        (data[k] for k in ("bar", "module", "style") if isinstance(data.get(k), dict)), None
    )
    if entity is not None:
        for key in _ENTITY_KEYS:
            if key in entity and entity[key] is not None:
                _field(console, key, entity[key])
    for key, value in data.items():
        if key not in ("bar", "module", "style"):
            _field(console, key, value)


def _render_import(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for bar in result.data.get("bars", []):
        console.print(
            Text("  bar ", style="wb.key"),
            Text(str(bar.get("name")), style="wb.title"),
            Text(f"  {bar.get('module_count', 0)} module(s)", style="dim"),
        )
    _field(console, "styles", result.data.get("styles", 0))


def _render_history(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    d = result.data
    console.print(
        Text(f"  undo: {d.get('undo_count', 0)}"),
        Text(f"  redo: {d.get('redo_count', 0)}"),
        Text(f"  limit: {d.get('limit', '')}", style="dim"),
    )


# ── Bars ──────────────────────────────────────────────────────────────


def _render_bar_table(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    current = result.data.get("current")
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("", no_wrap=True)
    table.add_column("ID", style="wb.id", no_wrap=True)
    table.add_column("Name", style="wb.title")
    table.add_column("Position")
    table.add_column("Modules", justify="right")
    table.add_column("Enabled")
    for bar in items:
        settings = bar.get("settings", {})
        table.add_row(
            "*" if bar.get("id") == current else "",
            Text(str(bar.get("id", ""))),
            Text(str(bar.get("name") or "")),
            Text(str(settings.get("position", ""))),
            str(bar.get("module_count", 0)),
            "yes" if bar.get("enabled") else Text("no", style="wb.disabled"),
        )
    console.print(table)
    console.print(f"\n{len(items)} bar(s)")


def _modules_table(modules: list[dict[str, Any]]) -> Table:
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Position", no_wrap=True)
    table.add_column("#", justify="right")
    table.add_column("Module", style="wb.native", no_wrap=True)
    table.add_column("ID", style="wb.id", no_wrap=True)
    table.add_column("Config")
    for module in modules:
        native = Text(str(module.get("native_id", "")))
        if not module.get("enabled", True):
            native.stylize("wb.disabled")
        table.add_row(
            _position_text(str(module.get("position", ""))),
            str(module.get("order", "")),
            native,
            Text(str(module.get("id", ""))),
            Text(_compact(module.get("config") or {}), overflow="ellipsis", no_wrap=True),
        )
    return table


def _render_bar_detail(result: ServiceResult, console: Console) -> None:
    bar = result.data.get("bar", {})
    settings = bar.get("settings", {})
    body = Text()
    body.append("id: ", style="wb.key")
    body.append(str(bar.get("id", "")), style="wb.id")
    body.append(f"\nenabled: {bar.get('enabled')}  order: {bar.get('order')}")
    for key, value in settings.items():
        body.append(f"\n{key}: ", style="wb.key")
        body.append(_compact(value))
    title = Text(str(bar.get("name") or "Unnamed bar"))
    console.print(Panel(body, title=title, border_style="dim", expand=False))
    modules = bar.get("modules", [])
    if modules:
        console.print(_modules_table(modules))
    else:
        console.print(Text("  no modules", style="dim"))


def _render_module_table(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    console.print(_modules_table(items))
    console.print(f"\n{len(items)} module(s)")


def _render_module_types(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Type", style="wb.native", no_wrap=True)
    table.add_column("Name", style="wb.title")
    table.add_column("Category")
    table.add_column("Requires")
    table.add_column("Description")
    for item in items:
        table.add_row(
            Text(str(item.get("type", ""))),
            Text(str(item.get("display_name", ""))),
            str(item.get("category", "")),
            str(item.get("requires_wm") or ""),
            Text(str(item.get("description", ""))),
        )
    console.print(table)


# ── Styles ────────────────────────────────────────────────────────────


def _render_style_list(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("ID", style="wb.id", no_wrap=True)
    table.add_column("Selector", style="wb.native")
    table.add_column("Declarations")
    for style in items:
        declarations = "; ".join(
            f"{p['property']}: {p['value']}{' !important' if p.get('important') else ''}"
            for p in style.get("properties", [])
        )
        selector = Text(str(style.get("selector", "")))
        if not style.get("enabled", True):
            selector.stylize("wb.disabled")
        table.add_row(Text(str(style.get("id", ""))), selector, Text(declarations))
    console.print(table)
    console.print(f"\n{len(items)} style(s)")


# ── Validation, files, process ────────────────────────────────────────


def _render_validate(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    console.print(Text("  configuration is valid", style="wb.ok"))


def _render_export(result: ServiceResult, console: Console) -> None:
    path = result.data.get("path")
    if path:
        _status_line(console, result)
        _field(console, "path", path)
        return
    # Verbatim: long lines must not wrap at console width
    console.print(Text(str(result.data.get("content", "")).rstrip("\n")), soft_wrap=True)


def _render_save(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key in ("config_file", "style_file", "backup", "outcome"):
        value = result.data.get(key)
        if value:
            _field(console, key, value)


def _render_load(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key in ("config_file", "style_file", "bars", "modules", "styles"):
        if key in result.data:
            _field(console, key, result.data[key])
    validation = result.data.get("validation") or {}
    errors = validation.get("errors") or {}
    if errors:
        console.print(_errors_table(errors))


def _render_backups(result: ServiceResult, console: Console) -> None:
    items = result.data.get("items", [])
    table = Table(show_header=True, pad_edge=False, expand=False)
    table.add_column("Backup", style="wb.path", no_wrap=True)
    table.add_column("Of")
    table.add_column("Created")
    for item in items:
        table.add_row(
            Text(str(item.get("name", ""))),
            Text(str(item.get("original", ""))),
            str(item.get("created_at") or ""),
        )
    console.print(table)
    console.print(f"\n{len(items)} backup(s)")


def _render_generic(result: ServiceResult, console: Console) -> None:
    _status_line(console, result)
    for key, value in result.data.items():
        _field(console, key, value)


_OP_RENDERERS: dict[str, Renderer] = {
    # Bars
    "create_bar": _render_mutation,
    "update_bar": _render_mutation,
    "delete_bar": _render_mutation,
    "duplicate_bar": _render_mutation,
    "set_current_bar": _render_mutation,
    "list_bars": _render_bar_table,
    "show_bar": _render_bar_detail,
    # Modules
    "add_module": _render_mutation,
    "update_module": _render_mutation,
    "delete_module": _render_mutation,
    "move_module": _render_mutation,
    "reorder_modules": _render_mutation,
    "list_modules": _render_module_table,
    "module_types": _render_module_types,
    # Styles
    "add_style": _render_mutation,
    "update_style": _render_mutation,
    "delete_style": _render_mutation,
    "list_styles": _render_style_list,
    # Config lifecycle
    "load": _render_load,
    "save": _render_save,
    "validate": _render_validate,
    "import_bar": _render_import,
    "reset_config": _render_mutation,
    "export_json": _render_export,
    "export_css": _render_export,
    # History
    "undo": _render_history,
    "redo": _render_history,
    "history": _render_history,
    # Backups
    "list_backups": _render_backups,
}
