"""Native format transforms — domain model <-> Waybar JSON.

Waybar reads one JSON object per bar. Bar settings and module configs
share the same top-level namespace:

- keys in :data:`~waybarctl.domain.types.BAR_SETTING_KEYS` are bar settings,
- ``modules-left`` / ``modules-center`` / ``modules-right`` list native ids,
- every other key is a native id mapping to that module's config object.

A file may also hold a JSON array of such objects (one per bar). Waybar
tolerates ``//`` and ``/* */`` comments (JSONC), so those are stripped
before parsing.

Parsing never instantiates unreferenced module configs; they come back as
warnings on the :class:`TransformResult`.
"""

from __future__ import annotations

import copy
import json
from dataclasses import dataclass, field
from typing import Any

from waybarctl.domain.ids import decode_native_id, new_id
from waybarctl.domain.models import BarConfig, BarDefinition, ModuleInstance, WaybarConfig
from waybarctl.domain.types import BAR_SETTING_KEYS, MODULE_ARRAY_KEYS

DEFAULT_IMPORTED_BAR_NAME = "Imported Bar"


class NativeFormatError(ValueError):
    """The input is not a structurally usable Waybar config."""


@dataclass(frozen=True)
class TransformResult[T]:
    """Transformed data plus non-fatal warnings."""

    data: T
    warnings: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Text level
# ---------------------------------------------------------------------------


def strip_jsonc_comments(text: str) -> str:
    """Remove ``//`` line comments and ``/* */`` block comments.

    Comment markers inside string literals are preserved. Newlines that end
    a line comment are kept so parser error positions stay meaningful.
    """
    out: list[str] = []
    i = 0
    n = len(text)
    in_string = False
    while i < n:
        ch = text[i]
        if in_string:
            out.append(ch)
            if ch == "\\" and i + 1 < n:
                out.append(text[i + 1])
                i += 2
                continue
            if ch == '"':
                in_string = False
            i += 1
            continue

        if ch == '"':
            in_string = True
            out.append(ch)
            i += 1
        elif text.startswith("//", i):
            end = text.find("\n", i)
            if end == -1:
                break
            i = end
        elif text.startswith("/*", i):
            end = text.find("*/", i + 2)
            if end == -1:
                break
            i = end + 2
        else:
            out.append(ch)
            i += 1
    return "".join(out)


def parse_native_text(text: str) -> dict[str, Any] | list[Any]:
    """Parse JSONC text into a bar object or a list of bar objects.

    Raises:
        NativeFormatError: If the text is not valid JSON after comment
            stripping, or the top-level value is neither object nor array.
    """
    try:
        data = json.loads(strip_jsonc_comments(text))
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON: {exc}"
        raise NativeFormatError(msg) from exc
    if not isinstance(data, (dict, list)):
        msg = f"Top-level value must be an object or array, got {type(data).__name__}"
        raise NativeFormatError(msg)
    return data


def dump_native(data: dict[str, Any] | list[Any]) -> str:
    """Serialize native data as 2-space indented JSON."""
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


# ---------------------------------------------------------------------------
# Domain -> native
# ---------------------------------------------------------------------------


def bar_to_native(bar: BarDefinition) -> dict[str, Any]:
    """Convert one bar to its Waybar JSON object.

    Disabled modules are dropped. A module whose native id equals a bar
    setting key overwrites that key; the validation layer reports such
    collisions before a save gets this far.
    """
    out: dict[str, Any] = bar.config.to_native()

    enabled = sorted((m for m in bar.modules if m.enabled), key=lambda m: m.order)
    zones: dict[str, list[str]] = {position: [] for position in MODULE_ARRAY_KEYS}
    for module in enabled:
        if module.position in zones:
            zones[module.position].append(module.native_id)

    for position, key in MODULE_ARRAY_KEYS.items():
        if zones[position]:
            out[key] = zones[position]

    for module in enabled:
        out[module.native_id] = copy.deepcopy(module.config)

    return out


def config_to_native(config: WaybarConfig) -> dict[str, Any]:
    """Single-bar export: the first enabled bar, else the first bar, else ``{}``."""
    bar = next((b for b in config.bars if b.enabled), None)
    if bar is None and config.bars:
        bar = config.bars[0]
    if bar is None:
        return {}
    return bar_to_native(bar)


def config_to_multi_native(config: WaybarConfig) -> dict[str, dict[str, Any]]:
    """Multi-bar export: every enabled bar keyed by its name, or its id if unnamed."""
    return {(bar.name or bar.id): bar_to_native(bar) for bar in config.bars if bar.enabled}


def config_to_native_list(config: WaybarConfig) -> list[dict[str, Any]]:
    """Every enabled bar as the JSON array Waybar reads for multi-bar setups."""
    return [bar_to_native(bar) for bar in config.bars if bar.enabled]


# ---------------------------------------------------------------------------
# Native -> domain
# ---------------------------------------------------------------------------


def _module_ids(data: dict[str, Any], key: str) -> list[str]:
    raw = data.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list) or not all(isinstance(item, str) for item in raw):
        msg = f"'{key}' must be a list of module id strings"
        raise NativeFormatError(msg)
    return raw


def native_to_bar(
    data: dict[str, Any],
    *,
    bar_id: str | None = None,
    bar_name: str | None = None,
) -> TransformResult[BarDefinition]:
    """Convert one Waybar JSON object into a :class:`BarDefinition`.

    Module ``order`` restarts at 0 for each position. Module configs not
    referenced by any ``modules-*`` array are reported as warnings.

    Raises:
        NativeFormatError: If *data* is not an object or a ``modules-*``
            value is not a list of strings.
    """
    if not isinstance(data, dict):
        msg = f"Bar config must be a JSON object, got {type(data).__name__}"
        raise NativeFormatError(msg)

    settings: dict[str, Any] = {}
    module_configs: dict[str, Any] = {}
    for key, value in data.items():
        if key in BAR_SETTING_KEYS:
            settings[key] = value
        elif key not in MODULE_ARRAY_KEYS.values():
            module_configs[key] = value

    modules: list[ModuleInstance] = []
    referenced: set[str] = set()
    for position, key in MODULE_ARRAY_KEYS.items():
        for order, native_id in enumerate(_module_ids(data, key)):
            referenced.add(native_id)
            module_type, custom_name = decode_native_id(native_id)
            modules.append(
                ModuleInstance(
                    type=module_type,
                    custom_name=custom_name,
                    position=position,
                    order=order,
                    config=copy.deepcopy(module_configs.get(native_id, {})),
                    enabled=True,
                )
            )

    warnings = [
        f'Module configuration "{native_id}" exists but is not referenced in any '
        "modules-left/center/right array"
        for native_id in module_configs
        if native_id not in referenced
    ]

    name = settings.get("name")
    bar = BarDefinition(
        id=bar_id or new_id(),
        name=bar_name or (name if isinstance(name, str) and name else DEFAULT_IMPORTED_BAR_NAME),
        enabled=True,
        order=0,
        config=BarConfig.from_native(settings),
        modules=modules,
    )
    return TransformResult(data=bar, warnings=warnings)


def native_to_config(
    data: dict[str, Any] | list[Any],
    existing: WaybarConfig | None = None,
) -> TransformResult[WaybarConfig]:
    """Convert a native document (one bar object or a list of them) to a config.

    Styles and metadata are carried over from *existing* when given.
    """
    documents = data if isinstance(data, list) else [data]
    bars: list[BarDefinition] = []
    warnings: list[str] = []
    for index, document in enumerate(documents):
        result = native_to_bar(document)
        bars.append(result.data.model_copy(update={"order": index}))
        if len(documents) > 1:
            warnings.extend(f"bar {index}: {w}" for w in result.warnings)
        else:
            warnings.extend(result.warnings)

    if existing is not None:
        config = WaybarConfig(bars=bars, styles=existing.styles, metadata=existing.metadata)
    else:
        config = WaybarConfig(bars=bars)
    return TransformResult(data=config, warnings=warnings)


def merge_bar_into_config(config: WaybarConfig, bar: BarDefinition) -> WaybarConfig:
    """Merge an imported bar: replace a bar matched by name (then id), else append.

    A replaced bar keeps its original ``order``; an appended bar gets
    ``order = len(config.bars)``.
    """
    index: int | None = None
    if bar.name is not None:
        index = next((i for i, b in enumerate(config.bars) if b.name == bar.name), None)
    if index is None:
        index = next((i for i, b in enumerate(config.bars) if b.id == bar.id), None)

    bars = list(config.bars)
    if index is not None:
        bars[index] = bar.model_copy(update={"order": config.bars[index].order})
    else:
        bars.append(bar.model_copy(update={"order": len(config.bars)}))

    return config.model_copy(update={"bars": bars, "metadata": config.metadata.touched()})
