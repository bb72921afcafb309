"""Validation Engine — schema checks and cross-entity conflict detection.

Every entrypoint returns a :class:`ValidationResult` whose ``errors`` map a
dotted field path (``bars.0.modules.2.config.interval``) to the ordered list
of messages for that field. Nothing here raises for invalid input: all
problems are collected, never short-circuited, except that a root-shape
failure in :func:`validate_full_config` returns the root errors alone.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ValidationError

from waybarctl.domain.models import (
    BarConfig,
    BarDefinition,
    ModuleInstance,
    StyleDefinition,
    WaybarConfig,
)
from waybarctl.domain.module_schemas import get_module_schema
from waybarctl.domain.schemas import (
    BarConfigSchema,
    BarDefinitionSchema,
    ModuleInstanceSchema,
    StyleDefinitionSchema,
    WaybarConfigSchema,
)
from waybarctl.domain.types import BAR_LEVEL_KEYS

ROOT_PATH = "root"

ValidationErrors = dict[str, list[str]]


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of one validation pass."""

    success: bool
    errors: ValidationErrors = field(default_factory=dict)

    @property
    def error_count(self) -> int:
        return sum(len(messages) for messages in self.errors.values())

    def to_dict(self) -> dict[str, Any]:
        return {"success": self.success, "errors": self.errors}

    @classmethod
    def from_errors(cls, errors: ValidationErrors) -> ValidationResult:
        return cls(success=not errors, errors=errors)


VALID = ValidationResult(success=True)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _join(prefix: str, path: str) -> str:
    if not prefix:
        return path
    if not path or path == ROOT_PATH:
        return prefix
    return f"{prefix}.{path}"


def _merge(target: ValidationErrors, errors: Mapping[str, list[str]], prefix: str = "") -> None:
    """Copy *errors* into *target* under *prefix*, extending existing paths."""
    for path, messages in errors.items():
        target.setdefault(_join(prefix, path), []).extend(messages)


def flatten_errors(exc: ValidationError) -> ValidationErrors:
    """Turn a pydantic error into ``{dotted.path: [messages]}``."""
    errors: ValidationErrors = {}
    for issue in exc.errors(include_url=False):
        path = ".".join(str(part) for part in issue["loc"]) or ROOT_PATH
        errors.setdefault(path, []).append(issue["msg"])
    return errors


def _check(schema: type[BaseModel], payload: Any) -> ValidationResult:
    try:
        schema.model_validate(payload)
    except ValidationError as exc:
        return ValidationResult(success=False, errors=flatten_errors(exc))
    return VALID


def _bar_config_payload(config: BarConfig | Mapping[str, Any]) -> Any:
    return config.to_native() if isinstance(config, BarConfig) else config


def _module_payload(module: ModuleInstance) -> dict[str, Any]:
    return {
        "id": module.id,
        "type": module.type,
        "custom_name": module.custom_name,
        "position": module.position,
        "order": module.order,
        "config": module.config,
        "enabled": module.enabled,
    }


def _bar_payload(bar: BarDefinition) -> dict[str, Any]:
    return {
        "id": bar.id,
        "name": bar.name,
        "enabled": bar.enabled,
        "order": bar.order,
        "config": bar.config.to_native(),
        "modules": list(bar.modules),
    }


def _style_payload(style: StyleDefinition) -> dict[str, Any]:
    return style.model_dump()


def _root_payload(config: WaybarConfig) -> dict[str, Any]:
    return {
        "bars": list(config.bars),
        "styles": list(config.styles),
        "metadata": config.metadata.model_dump(),
    }


# ---------------------------------------------------------------------------
# Bars
# ---------------------------------------------------------------------------


def validate_bar_config(config: BarConfig | Mapping[str, Any]) -> ValidationResult:
    """Check bar settings: vocabularies, positive dimensions, flag types."""
    return _check(BarConfigSchema, _bar_config_payload(config))


def validate_bar_definition(bar: BarDefinition) -> ValidationResult:
    """Check the bar's own fields and settings, not its modules."""
    return _check(BarDefinitionSchema, _bar_payload(bar))


# ---------------------------------------------------------------------------
# Modules
# ---------------------------------------------------------------------------


def validate_module_instance(module: ModuleInstance) -> ValidationResult:
    """Check module shape (id, type, position, order, enabled), ignoring config."""
    return _check(ModuleInstanceSchema, _module_payload(module))


def validate_module_config(module_type: str, config: Any) -> ValidationResult:
    """Check a config payload against the schema for *module_type*."""
    schema = get_module_schema(module_type)
    if schema is None:
        return ValidationResult(
            success=False, errors={"type": [f"Unknown module type: {module_type}"]}
        )
    return _check(schema, config)


def validate_module(module: ModuleInstance) -> ValidationResult:
    """Shape first; if that passes, the config with paths under ``config.``."""
    shape = validate_module_instance(module)
    if not shape.success:
        return shape

    result = validate_module_config(module.type, module.config)
    if result.success:
        return VALID
    errors: ValidationErrors = {}
    _merge(errors, result.errors, "config")
    return ValidationResult(success=False, errors=errors)


def detect_module_conflicts(modules: Iterable[ModuleInstance]) -> ValidationResult:
    """Report every module whose native id repeats an earlier one in the list.

    The first occurrence is never flagged, so N modules sharing an id yield
    N - 1 errors, each at ``modules.<index>`` of the later module.
    """
    errors: ValidationErrors = {}
    seen: set[str] = set()
    for index, module in enumerate(modules):
        native_id = module.native_id
        if native_id in seen:
            errors[f"modules.{index}"] = [
                f"Duplicate module ID: {native_id}. Module IDs must be unique within a bar."
            ]
        else:
            seen.add(native_id)
    return ValidationResult.from_errors(errors)


def detect_bar_key_collisions(modules: Iterable[ModuleInstance]) -> ValidationResult:
    """Report modules whose native id is also a bar-level key (e.g. ``mode``).

    Such a module's config would overwrite the bar setting on export.
    """
    errors: ValidationErrors = {}
    for index, module in enumerate(modules):
        native_id = module.native_id
        if native_id in BAR_LEVEL_KEYS:
            errors[f"modules.{index}"] = [
                f'Module ID "{native_id}" collides with the bar-level key of the same '
                "name. Give the module a custom name."
            ]
    return ValidationResult.from_errors(errors)


# ---------------------------------------------------------------------------
# Styles
# ---------------------------------------------------------------------------


def validate_style(style: StyleDefinition) -> ValidationResult:
    return _check(StyleDefinitionSchema, _style_payload(style))


def validate_styles(styles: Iterable[StyleDefinition]) -> ValidationResult:
    """Validate each style, paths prefixed with ``styles.<index>``."""
    errors: ValidationErrors = {}
    for index, style in enumerate(styles):
        result = validate_style(style)
        if not result.success:
            _merge(errors, result.errors, f"styles.{index}")
    return ValidationResult.from_errors(errors)


# ---------------------------------------------------------------------------
# Full config
# ---------------------------------------------------------------------------


def validate_bar(bar: BarDefinition, prefix: str = "") -> ValidationResult:
    """Everything about one bar: definition, each module, id conflicts, key collisions."""
    errors: ValidationErrors = {}

    definition = validate_bar_definition(bar)
    _merge(errors, definition.errors, prefix)

    for index, module in enumerate(bar.modules):
        result = validate_module(module)
        _merge(errors, result.errors, _join(prefix, f"modules.{index}"))

    _merge(errors, detect_module_conflicts(bar.modules).errors, prefix)
    _merge(errors, detect_bar_key_collisions(bar.modules).errors, prefix)
    return ValidationResult.from_errors(errors)


def validate_full_config(config: WaybarConfig) -> ValidationResult:
    """Validate the whole aggregate and collect every error.

    Succeeds only if the root shape, every bar, module and style pass and no
    bar has a native id conflict.
    """
    root = _check(WaybarConfigSchema, _root_payload(config))
    if not root.success:
        return root

    errors: ValidationErrors = {}
    for index, bar in enumerate(config.bars):
        _merge(errors, validate_bar(bar, f"bars.{index}").errors)
    _merge(errors, validate_styles(config.styles).errors)
    return ValidationResult.from_errors(errors)
