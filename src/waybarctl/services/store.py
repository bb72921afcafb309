"""ConfigStore — the coordinating service for one editing session.

The store owns the live :class:`~waybarctl.domain.models.WaybarConfig` and
is the only place it changes. Every mutation follows the same path:

1. look up the target (unknown id -> ``ok=False``, nothing recorded),
2. build the new root with ``model_copy(update=...)``,
3. record the previous root in history, swap in the new one,
4. mark dirty and (re)start the debounced validation timer.

Collaborators are injected: the gateway for host I/O, the history engine
for undo/redo. Load and save are the only async operations.

INVARIANT: Save validates before any gateway call. A failed validation
returns ``VALIDATION_FAILED`` without touching the filesystem.
INVARIANT: Within each position, module ``order`` values stay 0..n-1 after
add, delete, move, and reorder.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping, Sequence
from enum import StrEnum
from pathlib import Path
from typing import Any

from waybarctl.domain.ids import new_id
from waybarctl.domain.models import (
    BarConfig,
    BarDefinition,
    ConfigMetadata,
    CSSProperty,
    ModuleInstance,
    StyleDefinition,
    WaybarConfig,
)
from waybarctl.domain.module_schemas import module_defaults
from waybarctl.domain.native import (
    DEFAULT_IMPORTED_BAR_NAME,
    NativeFormatError,
    config_to_native,
    config_to_native_list,
    dump_native,
    merge_bar_into_config,
    native_to_bar,
    native_to_config,
    parse_native_text,
)
from waybarctl.domain.stylesheet import css_to_styles, styles_to_css
from waybarctl.domain.types import BAR_SETTING_KEYS, ModulePosition
from waybarctl.domain.validation import ValidationResult, validate_full_config
from waybarctl.infrastructure.gateway import (
    DEFAULT_STYLE_FILE,
    ConfigGateway,
    ConfigPaths,
    GatewayError,
)
from waybarctl.infrastructure.state import SessionHistory, SessionState
from waybarctl.services.debounce import Debouncer
from waybarctl.services.history import DEFAULT_HISTORY_LIMIT, HistoryEngine
from waybarctl.services.result import ErrorCode, ServiceResult

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_DELAY = 0.3
DEFAULT_BAR_NAME = "New Bar"

# Sentinel for "leave unchanged" where None is a meaningful new value.
KEEP: Any = object()


class SaveOutcome(StrEnum):
    """Terminal states of a successful save."""

    SAVED = "saved"
    SAVED_RELOAD_FAILED = "saved_reload_failed"
    SAVED_RELOAD_SKIPPED = "saved_reload_skipped"


# ---------------------------------------------------------------------------
# Result payloads
# ---------------------------------------------------------------------------


def module_data(module: ModuleInstance) -> dict[str, Any]:
    return {
        "id": module.id,
        "type": module.type,
        "custom_name": module.custom_name,
        "native_id": module.native_id,
        "position": module.position,
        "order": module.order,
        "enabled": module.enabled,
        "config": module.config,
    }


def bar_data(bar: BarDefinition, *, with_modules: bool = False) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": bar.id,
        "name": bar.name,
        "enabled": bar.enabled,
        "order": bar.order,
        "settings": bar.config.to_native(),
        "module_count": len(bar.modules),
    }
    if with_modules:
        data["modules"] = [
            module_data(m)
            for position in ModulePosition
            for m in bar.modules_at(position)
        ]
    return data


def style_data(style: StyleDefinition) -> dict[str, Any]:
    return {
        "id": style.id,
        "name": style.name,
        "selector": style.selector,
        "enabled": style.enabled,
        "properties": [p.model_dump() for p in style.properties],
    }


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def _merge_mapping(base: Mapping[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Shallow merge where a ``None`` update removes the key."""
    merged = dict(base)
    for key, value in updates.items():
        if value is None:
            merged.pop(key, None)
        else:
            merged[key] = value
    return merged


def _unknown_setting_warnings(settings: Mapping[str, Any]) -> list[str]:
    return [f'Ignored unknown bar setting "{key}"' for key in settings if key not in BAR_SETTING_KEYS]


def _numbered_import_name(document: Any, index: int) -> str | None:
    """Fallback name for an unnamed bar in a multi-bar import, None if it has a name."""
    name = document.get("name") if isinstance(document, Mapping) else None
    if isinstance(name, str) and name:
        return None
    return f"{DEFAULT_IMPORTED_BAR_NAME} {index + 1}"


def _apply_orders(
    modules: Iterable[ModuleInstance],
    placement: Mapping[str, tuple[str, int]],
) -> list[ModuleInstance]:
    """Apply ``{module_id: (position, order)}`` keeping list order and unchanged instances."""
    out: list[ModuleInstance] = []
    for module in modules:
        target = placement.get(module.id)
        if target is None or target == (module.position, module.order):
            out.append(module)
        else:
            position, order = target
            out.append(module.model_copy(update={"position": position, "order": order}))
    return out


def _sequence(ordered: Sequence[ModuleInstance], position: str) -> dict[str, tuple[str, int]]:
    return {m.id: (position, index) for index, m in enumerate(ordered)}


def _replace_bar(config: WaybarConfig, bar: BarDefinition) -> WaybarConfig:
    bars = [bar if b.id == bar.id else b for b in config.bars]
    return config.model_copy(update={"bars": bars})


def _clone_bar(bar: BarDefinition, *, name: str | None, order: int) -> BarDefinition:
    modules = [
        m.model_copy(update={"id": new_id(), "config": copy.deepcopy(m.config)})
        for m in bar.modules
    ]
    return bar.model_copy(
        update={
            "id": new_id(),
            "name": name,
            "order": order,
            "config": BarConfig.from_native(bar.config.to_native()),
            "modules": modules,
        }
    )


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class ConfigStore:
    """Live config, history, validation, and file flows for one session."""

    def __init__(
        self,
        gateway: ConfigGateway,
        *,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        debounce_delay: float = DEFAULT_DEBOUNCE_DELAY,
        state: SessionState | None = None,
    ) -> None:
        self._gateway = gateway
        state = state or SessionState()
        self._config = state.config
        self._history: HistoryEngine[WaybarConfig] = HistoryEngine(
            history_limit,
            past=state.history.past,
            future=state.history.future,
        )
        self._current_bar_id = state.current_bar_id
        self._dirty = state.dirty
        self._paths: ConfigPaths | None = None
        if state.config_path:
            config_file = Path(state.config_path)
            style_file = (
                Path(state.style_path)
                if state.style_path
                else config_file.parent / DEFAULT_STYLE_FILE
            )
            self._paths = ConfigPaths(config_file.parent, config_file, style_file)
        self._validation: ValidationResult | None = None
        self._debouncer = Debouncer(self._run_auto_validation, debounce_delay)

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def config(self) -> WaybarConfig:
        return self._config

    @property
    def history(self) -> HistoryEngine[WaybarConfig]:
        return self._history

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def paths(self) -> ConfigPaths | None:
        return self._paths

    @property
    def validation(self) -> ValidationResult | None:
        """Result of the last validation pass, manual or debounced."""
        return self._validation

    @property
    def validation_pending(self) -> bool:
        return self._debouncer.pending

    @property
    def current_bar_id(self) -> str | None:
        return self._current_bar_id

    @property
    def current_bar(self) -> BarDefinition | None:
        if self._current_bar_id is None:
            return None
        return self._config.get_bar(self._current_bar_id)

    def session_state(self) -> SessionState:
        """Snapshot of everything needed to resume this session later."""
        return SessionState(
            config=self._config,
            history=SessionHistory(past=self._history.past, future=self._history.future),
            config_path=str(self._paths.config_file) if self._paths else None,
            style_path=str(self._paths.style_file) if self._paths else None,
            current_bar_id=self._current_bar_id,
            dirty=self._dirty,
        )

    def history_info(self) -> dict[str, Any]:
        return {
            "can_undo": self._history.can_undo,
            "can_redo": self._history.can_redo,
            "undo_count": self._history.undo_count,
            "redo_count": self._history.redo_count,
            "limit": self._history.limit,
        }

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _set_config(self, config: WaybarConfig) -> None:
        self._config = config
        if self._current_bar_id is not None and config.get_bar(self._current_bar_id) is None:
            self._current_bar_id = config.bars[0].id if config.bars else None

    def _commit(
        self,
        op: str,
        config: WaybarConfig,
        data: dict[str, Any] | None = None,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        self._history.record(self._config)
        self._set_config(config)
        self._dirty = True
        self._debouncer.trigger()
        logger.debug("%s applied (undo=%d)", op, self._history.undo_count)
        return ServiceResult(
            ok=True,
            op=op,
            data=data or {},
            warnings=warnings or [],
            meta={"history": self.history_info()},
        )

    def _unchanged(
        self, op: str, data: dict[str, Any], warnings: list[str] | None = None
    ) -> ServiceResult:
        """Result for an update that changes nothing: no snapshot, redo stack kept."""
        return ServiceResult(
            ok=True,
            op=op,
            data=data,
            warnings=[*(warnings or []), "Nothing to change"],
            meta={"history": self.history_info()},
        )

    def _find_bar(self, op: str, bar_id: str) -> BarDefinition | ServiceResult:
        bar = self._config.get_bar(bar_id)
        if bar is None:
            return ServiceResult.fail(
                op, ErrorCode.BAR_NOT_FOUND, f"No bar with id {bar_id}", detail={"bar_id": bar_id}
            )
        return bar

    def _find_module(
        self, op: str, bar_id: str, module_id: str
    ) -> tuple[BarDefinition, ModuleInstance] | ServiceResult:
        bar = self._find_bar(op, bar_id)
        if isinstance(bar, ServiceResult):
            return bar
        module = bar.get_module(module_id)
        if module is None:
            return ServiceResult.fail(
                op,
                ErrorCode.MODULE_NOT_FOUND,
                f"No module with id {module_id} in bar {bar_id}",
                detail={"bar_id": bar_id, "module_id": module_id},
            )
        return bar, module

    def _find_style(self, op: str, style_id: str) -> StyleDefinition | ServiceResult:
        style = self._config.get_style(style_id)
        if style is None:
            return ServiceResult.fail(
                op,
                ErrorCode.STYLE_NOT_FOUND,
                f"No style with id {style_id}",
                detail={"style_id": style_id},
            )
        return style

    def _run_auto_validation(self) -> None:
        self._validation = validate_full_config(self._config)
        if not self._validation.success:
            logger.info("Auto-validation: %d error(s)", self._validation.error_count)

    # ------------------------------------------------------------------
    # Bars
    # ------------------------------------------------------------------

    def create_bar(
        self,
        name: str | None = None,
        *,
        settings: Mapping[str, Any] | None = None,
        enabled: bool = True,
    ) -> ServiceResult:
        """Append a new empty bar and make it the current bar."""
        op = "create_bar"
        settings = dict(settings or {})
        bar = BarDefinition(
            name=name or DEFAULT_BAR_NAME,
            enabled=enabled,
            order=len(self._config.bars),
            config=BarConfig.from_native(settings),
        )
        config = self._config.model_copy(update={"bars": [*self._config.bars, bar]})
        result = self._commit(
            op, config, {"bar": bar_data(bar)}, _unknown_setting_warnings(settings)
        )
        self._current_bar_id = bar.id
        return result

    def update_bar(
        self,
        bar_id: str,
        *,
        name: str | None = None,
        enabled: bool | None = None,
        settings: Mapping[str, Any] | None = None,
    ) -> ServiceResult:
        """Rename, toggle, or change settings. A ``None`` setting value unsets the key."""
        op = "update_bar"
        bar = self._find_bar(op, bar_id)
        if isinstance(bar, ServiceResult):
            return bar

        update: dict[str, Any] = {}
        warnings: list[str] = []
        if name is not None:
            update["name"] = name
        if enabled is not None:
            update["enabled"] = enabled
        if settings:
            warnings = _unknown_setting_warnings(settings)
            merged = _merge_mapping(bar.config.to_native(), settings)
            update["config"] = BarConfig.from_native(merged)

        updated = bar.model_copy(update=update)
        if updated == bar:
            return self._unchanged(op, {"bar": bar_data(bar)}, warnings)
        return self._commit(
            op, _replace_bar(self._config, updated), {"bar": bar_data(updated)}, warnings
        )

    def delete_bar(self, bar_id: str) -> ServiceResult:
        """Remove a bar and its modules; remaining bars are renumbered."""
        op = "delete_bar"
        bar = self._find_bar(op, bar_id)
        if isinstance(bar, ServiceResult):
            return bar

        remaining = [b for b in self._config.bars if b.id != bar_id]
        bars = [
            b if b.order == index else b.model_copy(update={"order": index})
            for index, b in enumerate(remaining)
        ]
        return self._commit(
            op,
            self._config.model_copy(update={"bars": bars}),
            {"id": bar_id, "name": bar.name, "modules_removed": len(bar.modules)},
        )

    def duplicate_bar(self, bar_id: str, *, name: str | None = None) -> ServiceResult:
        """Deep-clone a bar with fresh ids for the bar and every module."""
        op = "duplicate_bar"
        bar = self._find_bar(op, bar_id)
        if isinstance(bar, ServiceResult):
            return bar

        clone = _clone_bar(
            bar,
            name=name or f"{bar.name or DEFAULT_BAR_NAME} (Copy)",
            order=len(self._config.bars),
        )
        config = self._config.model_copy(update={"bars": [*self._config.bars, clone]})
        return self._commit(op, config, {"bar": bar_data(clone), "source_id": bar_id})

    def set_current_bar(self, bar_id: str) -> ServiceResult:
        """Select the bar that bar-scoped commands act on. Not recorded in history."""
        op = "set_current_bar"
        bar = self._find_bar(op, bar_id)
        if isinstance(bar, ServiceResult):
            return bar
        self._current_bar_id = bar.id
        return ServiceResult(ok=True, op=op, data={"bar": bar_data(bar)})

    # ------------------------------------------------------------------
    # Modules
    # ------------------------------------------------------------------

    def add_module(
        self,
        bar_id: str,
        module_type: str,
        *,
        position: str = ModulePosition.LEFT,
        custom_name: str | None = None,
        config: Mapping[str, Any] | None = None,
        enabled: bool = True,
        with_defaults: bool = False,
    ) -> ServiceResult:
        """Append a module at the end of *position*.

        With *with_defaults*, the type's schema defaults are filled in
        underneath any explicit *config* values.
        """
        op = "add_module"
        bar = self._find_bar(op, bar_id)
        if isinstance(bar, ServiceResult):
            return bar

        module_config = dict(module_defaults(module_type)) if with_defaults else {}
        module_config.update(config or {})
        module = ModuleInstance(
            type=module_type,
            custom_name=custom_name or None,
            position=str(position),
            order=len(bar.modules_at(str(position))),
            config=module_config,
            enabled=enabled,
        )

        warnings: list[str] = []
        if any(m.native_id == module.native_id for m in bar.modules):
            warnings.append(
                f"Bar already has a module with id {module.native_id}; "
                "set a custom name before saving"
            )

        updated = bar.model_copy(update={"modules": [*bar.modules, module]})
        return self._commit(
            op,
            _replace_bar(self._config, updated),
            {"bar_id": bar_id, "module": module_data(module)},
            warnings,
        )

    def update_module(
        self,
        bar_id: str,
        module_id: str,
        *,
        custom_name: str | None = KEEP,
        enabled: bool | None = None,
        config: Mapping[str, Any] | None = None,
        replace_config: bool = False,
    ) -> ServiceResult:
        """Change a module's name, enabled flag, or config.

        Config updates are merged key by key (``None`` removes a key) unless
        *replace_config* is set. Use :meth:`move_module` to change position.
        """
        op = "update_module"
        found = self._find_module(op, bar_id, module_id)
        if isinstance(found, ServiceResult):
            return found
        bar, module = found

        update: dict[str, Any] = {}
        if custom_name is not KEEP:
            update["custom_name"] = custom_name or None
        if enabled is not None:
            update["enabled"] = enabled
        if config is not None:
            update["config"] = (
                dict(config) if replace_config else _merge_mapping(module.config, config)
            )

        updated_module = module.model_copy(update=update)
        if updated_module == module:
            return self._unchanged(op, {"bar_id": bar_id, "module": module_data(module)})
        modules = [updated_module if m.id == module_id else m for m in bar.modules]
        updated = bar.model_copy(update={"modules": modules})
        return self._commit(
            op,
            _replace_bar(self._config, updated),
            {"bar_id": bar_id, "module": module_data(updated_module)},
        )

    def delete_module(self, bar_id: str, module_id: str) -> ServiceResult:
        """Remove a module and close the gap in its position's ordering."""
        op = "delete_module"
        found = self._find_module(op, bar_id, module_id)
        if isinstance(found, ServiceResult):
            return found
        bar, module = found

        survivors = [m for m in bar.modules if m.id != module_id]
        same_position = sorted(
            (m for m in survivors if m.position == module.position), key=lambda m: m.order
        )
        modules = _apply_orders(survivors, _sequence(same_position, module.position))
        updated = bar.model_copy(update={"modules": modules})
        return self._commit(
            op,
            _replace_bar(self._config, updated),
            {"bar_id": bar_id, "id": module_id, "native_id": module.native_id},
        )

    def reorder_modules(
        self, bar_id: str, position: str, module_ids: Sequence[str]
    ) -> ServiceResult:
        """Set the order of *position* to follow *module_ids*.

        Modules of that position missing from the list keep their relative
        order after the listed ones. Ids not in that position are ignored
        with a warning.
        """
        op = "reorder_modules"
        bar = self._find_bar(op, bar_id)
        if isinstance(bar, ServiceResult):
            return bar

        current = bar.modules_at(position)
        by_id = {m.id: m for m in current}
        warnings: list[str] = []
        listed: dict[str, ModuleInstance] = {}
        for module_id in module_ids:
            module = by_id.get(module_id)
            if module is None:
                warnings.append(f"Module {module_id} is not in position {position}; ignored")
            else:
                listed.setdefault(module_id, module)
        ordered = [*listed.values(), *(m for m in current if m.id not in listed)]

        modules = _apply_orders(bar.modules, _sequence(ordered, position))
        updated = bar.model_copy(update={"modules": modules})
        return self._commit(
            op,
            _replace_bar(self._config, updated),
            {"bar_id": bar_id, "position": str(position), "order": [m.id for m in ordered]},
            warnings,
        )

    def move_module(
        self, bar_id: str, module_id: str, to_position: str, to_index: int
    ) -> ServiceResult:
        """Move a module to *to_index* within *to_position* (clamped to the zone size)."""
        op = "move_module"
        found = self._find_module(op, bar_id, module_id)
        if isinstance(found, ServiceResult):
            return found
        bar, module = found

        to_position = str(to_position)
        source = [m for m in bar.modules_at(module.position) if m.id != module_id]
        target = source if to_position == module.position else bar.modules_at(to_position)
        index = max(0, min(to_index, len(target)))
        target.insert(index, module)

        placement = _sequence(source, module.position)
        placement.update(_sequence(target, to_position))
        modules = _apply_orders(bar.modules, placement)
        updated = bar.model_copy(update={"modules": modules})
        moved = updated.get_module(module_id)
        return self._commit(
            op,
            _replace_bar(self._config, updated),
            {"bar_id": bar_id, "module": module_data(moved) if moved else {}},
        )

    # ------------------------------------------------------------------
    # Styles
    # ------------------------------------------------------------------

    def add_style(
        self,
        selector: str,
        properties: Iterable[CSSProperty] = (),
        *,
        name: str | None = None,
        enabled: bool = True,
    ) -> ServiceResult:
        op = "add_style"
        selector = selector.strip()
        style = StyleDefinition(
            name=name or f"Style for {selector}",
            selector=selector,
            properties=list(properties),
            enabled=enabled,
        )
        config = self._config.model_copy(update={"styles": [*self._config.styles, style]})
        return self._commit(op, config, {"style": style_data(style)})

    def update_style(
        self,
        style_id: str,
        *,
        name: str | None = None,
        selector: str | None = None,
        enabled: bool | None = None,
        properties: Iterable[CSSProperty] | None = None,
    ) -> ServiceResult:
        """Change style fields; *properties* replaces the whole declaration list."""
        op = "update_style"
        style = self._find_style(op, style_id)
        if isinstance(style, ServiceResult):
            return style

        update: dict[str, Any] = {}
        if name is not None:
            update["name"] = name
        if selector is not None:
            update["selector"] = selector.strip()
        if enabled is not None:
            update["enabled"] = enabled
        if properties is not None:
            update["properties"] = list(properties)

        updated = style.model_copy(update=update)
        if updated == style:
            return self._unchanged(op, {"style": style_data(style)})
        styles = [updated if s.id == style_id else s for s in self._config.styles]
        return self._commit(
            op, self._config.model_copy(update={"styles": styles}), {"style": style_data(updated)}
        )

    def delete_style(self, style_id: str) -> ServiceResult:
        op = "delete_style"
        style = self._find_style(op, style_id)
        if isinstance(style, ServiceResult):
            return style
        styles = [s for s in self._config.styles if s.id != style_id]
        return self._commit(
            op,
            self._config.model_copy(update={"styles": styles}),
            {"id": style_id, "selector": style.selector},
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def replace_config(
        self, config: WaybarConfig, *, paths: ConfigPaths | None = None
    ) -> ServiceResult:
        """Swap in a whole new root. History is cleared; the store is clean."""
        op = "replace_config"
        self._debouncer.cancel()
        self._history.clear()
        self._config = config
        self._current_bar_id = config.bars[0].id if config.bars else None
        self._dirty = False
        if paths is not None:
            self._paths = paths
        self._validation = None
        return ServiceResult(
            ok=True,
            op=op,
            data={"bars": len(config.bars), "styles": len(config.styles)},
            meta={"history": self.history_info()},
        )

    def reset_config(self) -> ServiceResult:
        """Drop all bars and styles. Undoable; leaves the store clean."""
        op = "reset_config"
        removed = {"bars": len(self._config.bars), "styles": len(self._config.styles)}
        config = self._config.model_copy(update={"bars": [], "styles": []})
        result = self._commit(op, config, removed)
        self._current_bar_id = None
        self._dirty = False
        return result

    def import_bar(
        self,
        native: str | Mapping[str, Any] | list[Any],
        *,
        css: str | None = None,
        bar_name: str | None = None,
    ) -> ServiceResult:
        """Merge native bar(s), and optionally CSS rules, as a single undo step.

        A bar whose name (then id) matches an existing bar replaces it;
        anything else is appended. Parsed styles are appended.
        """
        op = "import_bar"
        try:
            data = parse_native_text(native) if isinstance(native, str) else native
            documents = data if isinstance(data, list) else [data]
            # A forced name only makes sense for a single bar; unnamed bars of a
            # multi-bar array are numbered so they cannot replace one another.
            multi = len(documents) > 1
            results = [
                native_to_bar(
                    dict(doc) if isinstance(doc, Mapping) else doc,
                    bar_name=_numbered_import_name(doc, index) if multi else bar_name,
                )
                for index, doc in enumerate(documents)
            ]
        except NativeFormatError as exc:
            return ServiceResult.fail(op, ErrorCode.PARSE_ERROR, str(exc))
        if not results:
            return ServiceResult.fail(op, ErrorCode.INVALID_INPUT, "No bar objects to import")

        warnings = [w for r in results for w in r.warnings]
        styles = css_to_styles(css) if css else None
        if styles is not None:
            warnings.extend(styles.warnings)

        # One history entry for the whole sequence: the first step records,
        # the rest run paused.
        imported: list[dict[str, Any]] = []
        first, *rest = results
        self._commit(op, merge_bar_into_config(self._config, first.data))
        imported.append(bar_data(first.data))
        with self._history.paused_block():
            for result in rest:
                self._commit(op, merge_bar_into_config(self._config, result.data))
                imported.append(bar_data(result.data))
            if styles is not None and styles.data:
                config = self._config.model_copy(
                    update={"styles": [*self._config.styles, *styles.data]}
                )
                self._commit(op, config)

        return ServiceResult(
            ok=True,
            op=op,
            data={"bars": imported, "styles": len(styles.data) if styles else 0},
            warnings=warnings,
            meta={"history": self.history_info()},
        )

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def undo(self) -> ServiceResult:
        op = "undo"
        previous = self._history.undo(self._config)
        if previous is None:
            return ServiceResult.fail(op, ErrorCode.NOTHING_TO_UNDO, "Nothing to undo")
        self._set_config(previous)
        self._dirty = True
        self._debouncer.trigger()
        return ServiceResult(ok=True, op=op, data=self.history_info())

    def redo(self) -> ServiceResult:
        op = "redo"
        following = self._history.redo(self._config)
        if following is None:
            return ServiceResult.fail(op, ErrorCode.NOTHING_TO_REDO, "Nothing to redo")
        self._set_config(following)
        self._dirty = True
        self._debouncer.trigger()
        return ServiceResult(ok=True, op=op, data=self.history_info())

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def validate(self) -> ValidationResult:
        """Validate now, superseding any pending debounced pass."""
        self._debouncer.cancel()
        self._validation = validate_full_config(self._config)
        return self._validation

    def flush_validation(self) -> ValidationResult | None:
        """Run a pending debounced validation immediately, if there is one."""
        self._debouncer.flush()
        return self._validation

    def close(self) -> None:
        """Cancel the pending validation timer."""
        self._debouncer.cancel()

    # ------------------------------------------------------------------
    # File flows
    # ------------------------------------------------------------------

    async def _resolve_paths(self, paths: ConfigPaths | None) -> ConfigPaths:
        if paths is not None:
            return paths
        if self._paths is not None:
            return self._paths
        return await self._gateway.detect_paths()

    async def load(
        self,
        *,
        paths: ConfigPaths | None = None,
        ignore_validation: bool = False,
    ) -> ServiceResult:
        """Read config and stylesheet from disk and replace the live root.

        The stylesheet is optional: a read failure is a warning. Parse
        errors always abort; validation errors abort unless
        *ignore_validation* is set.
        """
        op = "load"
        warnings: list[str] = []

        try:
            paths = paths or await self._gateway.detect_paths()
            text = await self._gateway.read_config(paths.config_file)
        except GatewayError as exc:
            return ServiceResult.fail(op, ErrorCode.IO_ERROR, exc.message)

        try:
            css = await self._gateway.read_style(paths.style_file)
        except GatewayError as exc:
            logger.info("Stylesheet not loaded: %s", exc.message)
            warnings.append(f"Stylesheet not loaded: {exc.message}")
            css = ""

        try:
            transformed = native_to_config(parse_native_text(text))
        except NativeFormatError as exc:
            return ServiceResult.fail(
                op,
                ErrorCode.PARSE_ERROR,
                f"Cannot parse {paths.config_file}: {exc}",
                detail={"path": str(paths.config_file)},
                warnings=warnings,
            )
        warnings.extend(transformed.warnings)

        parsed_styles = css_to_styles(css)
        warnings.extend(parsed_styles.warnings)

        metadata = ConfigMetadata()
        config = transformed.data.model_copy(
            update={"styles": parsed_styles.data, "metadata": metadata}
        )

        validation = validate_full_config(config)
        if not validation.success:
            if not ignore_validation:
                return ServiceResult.fail(
                    op,
                    ErrorCode.VALIDATION_FAILED,
                    f"Configuration has {validation.error_count} validation error(s)",
                    detail={"errors": validation.errors, "path": str(paths.config_file)},
                    warnings=warnings,
                )
            warnings.append(f"Loaded with {validation.error_count} validation error(s)")

        self.replace_config(config, paths=paths)
        self._validation = validation
        logger.info("Loaded %s (%d bar(s))", paths.config_file, len(config.bars))
        return ServiceResult(
            ok=True,
            op=op,
            data={
                **paths.to_dict(),
                "bars": len(config.bars),
                "modules": sum(len(b.modules) for b in config.bars),
                "styles": len(config.styles),
                "validation": validation.to_dict(),
            },
            warnings=warnings,
        )

    async def save(
        self,
        *,
        paths: ConfigPaths | None = None,
        write_style: bool = True,
        reload: bool = True,
        multi_bar: bool = False,
    ) -> ServiceResult:
        """Validate, write config (and stylesheet), then ask Waybar to reload.

        A failed config write fails the save. A failed stylesheet write or
        reload is a warning; the save still succeeds and ``data["outcome"]``
        says whether Waybar picked up the change.
        """
        op = "save"
        validation = self.validate()
        if not validation.success:
            return ServiceResult.fail(
                op,
                ErrorCode.VALIDATION_FAILED,
                f"Configuration has {validation.error_count} validation error(s)",
                detail={"errors": validation.errors},
            )

        try:
            paths = await self._resolve_paths(paths)
        except GatewayError as exc:
            return ServiceResult.fail(op, ErrorCode.IO_ERROR, exc.message)

        native: Any = (
            config_to_native_list(self._config) if multi_bar else config_to_native(self._config)
        )
        try:
            backup = await self._gateway.write_config(paths.config_file, dump_native(native))
        except GatewayError as exc:
            return ServiceResult.fail(
                op,
                ErrorCode.WRITE_FAILED,
                exc.message,
                detail={"path": str(paths.config_file)},
            )

        warnings: list[str] = []
        data: dict[str, Any] = {
            "config_file": str(paths.config_file),
            "backup": str(backup) if backup else None,
            "style_file": None,
        }

        css = styles_to_css(self._config.styles)
        if write_style and css:
            try:
                await self._gateway.write_style(paths.style_file, css + "\n")
                data["style_file"] = str(paths.style_file)
            except GatewayError as exc:
                warnings.append(f"Stylesheet not saved: {exc.message}")

        self._config = self._config.model_copy(
            update={"metadata": self._config.metadata.touched()}
        )
        self._paths = paths
        self._dirty = False

        outcome = SaveOutcome.SAVED
        if not reload:
            outcome = SaveOutcome.SAVED_RELOAD_SKIPPED
        else:
            try:
                if not await self._gateway.reload():
                    outcome = SaveOutcome.SAVED_RELOAD_SKIPPED
                    warnings.append("Waybar is not running; changes apply on next start")
            except GatewayError as exc:
                outcome = SaveOutcome.SAVED_RELOAD_FAILED
                warnings.append(f"Saved, but Waybar reload failed: {exc.message}")

        data["outcome"] = outcome
        logger.info("Saved %s (%s)", paths.config_file, outcome)
        return ServiceResult(ok=True, op=op, data=data, warnings=warnings)
