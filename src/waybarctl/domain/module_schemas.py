"""Per-module-type config schemas.

Every module type validates its config against :class:`CommonModuleConfig`
(formatting, tooltip, states, click/scroll actions) or a subclass that
adds typed fields with Waybar's defaults. Module configs are open maps:
keys a schema does not know are allowed through untouched.

INVARIANT: :data:`MODULE_SCHEMAS` has an entry for every
:class:`~waybarctl.domain.types.ModuleType` member (checked at import).
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr

from waybarctl.domain.schemas import (
    NonNegativeInt,
    Number,
    PositiveInt,
    PositiveNumber,
)
from waybarctl.domain.types import ModuleType, resolve_module_type

UnitInterval = Annotated[Number, Field(ge=0, le=1)]
Percent = Annotated[int, Field(ge=0, le=100, strict=True)]
AltClick = Literal["click", "click-right", "click-middle", "click-backward", "click-forward"]
ClockAction = Literal["tz_up", "tz_down", "shift_up", "shift_down"]


class _ModuleSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")


class InteractiveActions(_ModuleSchema):
    """Click and scroll handlers shared by every module."""

    on_click: StrictStr | None = Field(default=None, alias="on-click")
    on_click_release: StrictStr | None = Field(default=None, alias="on-click-release")
    on_double_click: StrictStr | None = Field(default=None, alias="on-double-click")
    on_triple_click: StrictStr | None = Field(default=None, alias="on-triple-click")
    on_click_middle: StrictStr | None = Field(default=None, alias="on-click-middle")
    on_click_right: StrictStr | None = Field(default=None, alias="on-click-right")
    on_scroll_up: StrictStr | None = Field(default=None, alias="on-scroll-up")
    on_scroll_down: StrictStr | None = Field(default=None, alias="on-scroll-down")
    on_update: StrictStr | None = Field(default=None, alias="on-update")


class CommonModuleConfig(InteractiveActions):
    """Fields every module understands."""

    format: StrictStr | None = None
    format_icons: list[StrictStr] | dict[str, StrictStr] | None = Field(
        default=None, alias="format-icons"
    )
    max_length: PositiveInt | None = Field(default=None, alias="max-length")
    min_length: PositiveInt | None = Field(default=None, alias="min-length")
    align: UnitInterval | None = None
    rotate: Number | None = None

    tooltip: StrictBool = True
    tooltip_format: StrictStr | None = Field(default=None, alias="tooltip-format")

    states: dict[str, Number] | None = None
    return_type: Literal["", "json"] | None = Field(default=None, alias="return-type")


# --- System ---


class BatteryConfig(CommonModuleConfig):
    """Battery. States are ``<=`` thresholds, unlike most modules."""

    bat: StrictStr | None = None
    adapter: StrictStr | None = None
    interval: PositiveInt = 60
    full_at: Percent = Field(default=99, alias="full-at")
    design_capacity: StrictBool = Field(default=False, alias="design-capacity")
    format_time: StrictStr | None = Field(default=None, alias="format-time")
    format_charging: StrictStr | None = Field(default=None, alias="format-charging")
    format_plugged: StrictStr | None = Field(default=None, alias="format-plugged")
    format_full: StrictStr | None = Field(default=None, alias="format-full")
    format_discharging: StrictStr | None = Field(default=None, alias="format-discharging")
    format_alt: StrictStr | None = Field(default=None, alias="format-alt")
    weighted_average: StrictBool = Field(default=False, alias="weighted-average")


class CpuConfig(CommonModuleConfig):
    interval: PositiveInt = 10
    format_alt: StrictStr | None = Field(default=None, alias="format-alt")
    format_alt_click: AltClick | None = Field(default=None, alias="format-alt-click")


class MemoryConfig(CommonModuleConfig):
    interval: PositiveInt = 30
    format_alt: StrictStr | None = Field(default=None, alias="format-alt")
    format_alt_click: AltClick | None = Field(default=None, alias="format-alt-click")


class DiskConfig(CommonModuleConfig):
    interval: PositiveInt = 30
    path: StrictStr = "/"
    format_alt: StrictStr | None = Field(default=None, alias="format-alt")


class TemperatureConfig(CommonModuleConfig):
    interval: PositiveInt = 10
    thermal_zone: NonNegativeInt | None = Field(default=None, alias="thermal-zone")
    hwmon_path: StrictStr | list[StrictStr] | None = Field(default=None, alias="hwmon-path")
    hwmon_path_abs: StrictStr | None = Field(default=None, alias="hwmon-path-abs")
    input_filename: StrictStr | None = Field(default=None, alias="input-filename")
    critical_threshold: Number = Field(default=80, alias="critical-threshold")
    format_critical: StrictStr | None = Field(default=None, alias="format-critical")


class NetworkConfig(CommonModuleConfig):
    interface: StrictStr | None = None
    interface_type: Literal["ethernet", "wifi"] | None = Field(
        default=None, alias="interface-type"
    )
    interval: PositiveInt = 60
    format_ethernet: StrictStr | None = Field(default=None, alias="format-ethernet")
    format_wifi: StrictStr | None = Field(default=None, alias="format-wifi")
    format_linked: StrictStr | None = Field(default=None, alias="format-linked")
    format_disconnected: StrictStr | None = Field(default=None, alias="format-disconnected")
    format_disabled: StrictStr | None = Field(default=None, alias="format-disabled")
    format_alt: StrictStr | None = Field(default=None, alias="format-alt")
    tooltip_format_wifi: StrictStr | None = Field(default=None, alias="tooltip-format-wifi")
    tooltip_format_ethernet: StrictStr | None = Field(
        default=None, alias="tooltip-format-ethernet"
    )
    tooltip_format_disconnected: StrictStr | None = Field(
        default=None, alias="tooltip-format-disconnected"
    )


# --- Hardware ---


class BacklightConfig(CommonModuleConfig):
    device: StrictStr | None = None
    interval: PositiveInt | None = None
    format_alt: StrictStr | None = Field(default=None, alias="format-alt")
    scroll_step: PositiveNumber = Field(default=1.0, alias="scroll-step")
    reverse_scrolling: StrictBool = Field(default=False, alias="reverse-scrolling")


class PulseaudioConfig(CommonModuleConfig):
    format_bluetooth: StrictStr | None = Field(default=None, alias="format-bluetooth")
    format_bluetooth_muted: StrictStr | None = Field(
        default=None, alias="format-bluetooth-muted"
    )
    format_muted: StrictStr | None = Field(default=None, alias="format-muted")
    format_source: StrictStr | None = Field(default=None, alias="format-source")
    format_source_muted: StrictStr | None = Field(default=None, alias="format-source-muted")
    scroll_step: PositiveNumber = Field(default=1.0, alias="scroll-step")
    reverse_scrolling: StrictBool = Field(default=False, alias="reverse-scrolling")
    smooth_scrolling_threshold: PositiveNumber | None = Field(
        default=None, alias="smooth-scrolling-threshold"
    )
    max_volume: PositiveNumber = Field(default=100, alias="max-volume")
    ignored_sinks: list[StrictStr] | None = Field(default=None, alias="ignored-sinks")


# --- Window manager ---


class HyprlandWorkspacesConfig(CommonModuleConfig):
    all_outputs: StrictBool = Field(default=False, alias="all-outputs")
    active_only: StrictBool = Field(default=False, alias="active-only")
    move_to_monitor: StrictBool = Field(default=False, alias="move-to-monitor")
    format_window_separator: StrictStr | None = Field(
        default=None, alias="format-window-separator"
    )
    window_rewrite_default: StrictStr | None = Field(default=None, alias="window-rewrite-default")
    window_rewrite: dict[str, StrictStr] | None = Field(default=None, alias="window-rewrite")
    show_special: StrictBool = Field(default=False, alias="show-special")
    special_only: StrictBool = Field(default=False, alias="special-only")
    sort_by_number: StrictBool = Field(default=False, alias="sort-by-number")
    sort_by_name: StrictBool = Field(default=False, alias="sort-by-name")


# --- Utility ---


class CalendarFormat(_ModuleSchema):
    months: StrictStr | None = None
    days: StrictStr | None = None
    weeks: StrictStr | None = None
    weekdays: StrictStr | None = None
    today: StrictStr | None = None


class CalendarConfig(_ModuleSchema):
    mode: Literal["year", "month"] = "month"
    mode_mon_col: StrictInt = Field(default=3, alias="mode-mon-col")
    weeks_pos: StrictStr | None = Field(default=None, alias="weeks-pos")
    on_scroll: StrictInt = Field(default=1, alias="on-scroll")
    format: CalendarFormat | None = None


class ClockActions(_ModuleSchema):
    on_click_right: Literal["mode", "tz_up", "tz_down", "shift_up", "shift_down"] | None = Field(
        default=None, alias="on-click-right"
    )
    on_click_forward: ClockAction | None = Field(default=None, alias="on-click-forward")
    on_click_backward: ClockAction | None = Field(default=None, alias="on-click-backward")
    on_scroll_up: ClockAction | None = Field(default=None, alias="on-scroll-up")
    on_scroll_down: ClockAction | None = Field(default=None, alias="on-scroll-down")


class ClockConfig(CommonModuleConfig):
    interval: PositiveInt = 60
    timezone: StrictStr | None = None
    timezones: list[StrictStr] | None = None
    locale: StrictStr | None = None
    format_alt: StrictStr | None = Field(default=None, alias="format-alt")
    calendar: CalendarConfig | None = None
    actions: ClockActions | None = None


class TrayConfig(CommonModuleConfig):
    icon_size: PositiveInt = Field(default=16, alias="icon-size")
    spacing: NonNegativeInt = 10
    show_passive_items: StrictBool = Field(default=True, alias="show-passive-items")
    reverse_direction: StrictBool = Field(default=False, alias="reverse-direction")


class CustomConfig(CommonModuleConfig):
    exec: StrictStr | None = None
    exec_if: StrictStr | None = Field(default=None, alias="exec-if")
    exec_on_event: StrictBool = Field(default=True, alias="exec-on-event")
    interval: PositiveInt | Literal["once"] | None = None
    restart_interval: PositiveInt | None = Field(default=None, alias="restart-interval")
    signal: PositiveInt | None = None
    return_type: Literal["", "json"] = Field(default="", alias="return-type")
    escape: StrictBool = False


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

MODULE_SCHEMAS: dict[ModuleType, type[CommonModuleConfig]] = {
    # System
    ModuleType.BATTERY: BatteryConfig,
    ModuleType.CPU: CpuConfig,
    ModuleType.MEMORY: MemoryConfig,
    ModuleType.DISK: DiskConfig,
    ModuleType.TEMPERATURE: TemperatureConfig,
    ModuleType.NETWORK: NetworkConfig,
    ModuleType.LOAD: CommonModuleConfig,
    ModuleType.UPOWER: CommonModuleConfig,
    # Hardware
    ModuleType.BACKLIGHT: BacklightConfig,
    ModuleType.PULSEAUDIO: PulseaudioConfig,
    ModuleType.BLUETOOTH: CommonModuleConfig,
    ModuleType.KEYBOARD_STATE: CommonModuleConfig,
    # Window manager
    ModuleType.WORKSPACES: CommonModuleConfig,
    ModuleType.TASKBAR: CommonModuleConfig,
    ModuleType.WINDOW: CommonModuleConfig,
    ModuleType.MODE: CommonModuleConfig,
    ModuleType.LANGUAGE: CommonModuleConfig,
    ModuleType.HYPRLAND_WORKSPACES: HyprlandWorkspacesConfig,
    ModuleType.HYPRLAND_WINDOW: CommonModuleConfig,
    ModuleType.HYPRLAND_LANGUAGE: CommonModuleConfig,
    ModuleType.HYPRLAND_SUBMAP: CommonModuleConfig,
    ModuleType.SWAY_WORKSPACES: CommonModuleConfig,
    ModuleType.SWAY_WINDOW: CommonModuleConfig,
    ModuleType.SWAY_MODE: CommonModuleConfig,
    ModuleType.SWAY_LANGUAGE: CommonModuleConfig,
    ModuleType.RIVER_TAGS: CommonModuleConfig,
    ModuleType.DWL_TAGS: CommonModuleConfig,
    # Media
    ModuleType.MPD: CommonModuleConfig,
    ModuleType.MPRIS: CommonModuleConfig,
    ModuleType.CAVA: CommonModuleConfig,
    # Utility
    ModuleType.CLOCK: ClockConfig,
    ModuleType.TRAY: TrayConfig,
    ModuleType.IDLE_INHIBITOR: CommonModuleConfig,
    ModuleType.USER: CommonModuleConfig,
    ModuleType.GAMEMODE: CommonModuleConfig,
    ModuleType.PRIVACY: CommonModuleConfig,
    ModuleType.POWER_PROFILES_DAEMON: CommonModuleConfig,
    ModuleType.SYSTEMD_FAILED_UNITS: CommonModuleConfig,
    ModuleType.IMAGE: CommonModuleConfig,
    ModuleType.GROUP: CommonModuleConfig,
    ModuleType.CUSTOM: CustomConfig,
}

_missing = set(ModuleType) - set(MODULE_SCHEMAS)
if _missing:  # pragma: no cover
    msg = f"Module types without a config schema: {sorted(_missing)}"
    raise RuntimeError(msg)


def get_module_schema(module_type: str) -> type[CommonModuleConfig] | None:
    """Return the config schema for *module_type*, or None if the type is unknown."""
    resolved = resolve_module_type(module_type)
    return MODULE_SCHEMAS[resolved] if resolved is not None else None


def module_defaults(module_type: str) -> dict[str, Any]:
    """Default config for *module_type*, keyed by native option names.

    Only options that carry a default are included. Unknown types get ``{}``.
    """
    schema = get_module_schema(module_type)
    if schema is None:
        return {}
    return schema().model_dump(by_alias=True, exclude_none=True)
