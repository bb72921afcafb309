"""Closed vocabularies for the Waybar configuration model.

Module types are grouped into five categories (system, hardware, window
manager, media, utility). Bar-level keys are the fixed set of top-level
native keys that belong to the bar rather than to a module.
"""

from __future__ import annotations

from enum import StrEnum


class ModuleType(StrEnum):
    """Every Waybar module type the editor knows how to configure."""

    # System
    BATTERY = "battery"
    CPU = "cpu"
    MEMORY = "memory"
    DISK = "disk"
    TEMPERATURE = "temperature"
    NETWORK = "network"
    LOAD = "load"
    UPOWER = "upower"
    # Hardware
    BACKLIGHT = "backlight"
    PULSEAUDIO = "pulseaudio"
    BLUETOOTH = "bluetooth"
    KEYBOARD_STATE = "keyboard-state"
    # Window manager (generic)
    WORKSPACES = "workspaces"
    TASKBAR = "taskbar"
    WINDOW = "window"
    MODE = "mode"
    LANGUAGE = "language"
    # Window manager (compositor-specific)
    HYPRLAND_WORKSPACES = "hyprland/workspaces"
    HYPRLAND_WINDOW = "hyprland/window"
    HYPRLAND_LANGUAGE = "hyprland/language"
    HYPRLAND_SUBMAP = "hyprland/submap"
    SWAY_WORKSPACES = "sway/workspaces"
    SWAY_WINDOW = "sway/window"
    SWAY_MODE = "sway/mode"
    SWAY_LANGUAGE = "sway/language"
    RIVER_TAGS = "river/tags"
    DWL_TAGS = "dwl/tags"
    # Media
    MPD = "mpd"
    MPRIS = "mpris"
    CAVA = "cava"
    # Utility
    CLOCK = "clock"
    TRAY = "tray"
    IDLE_INHIBITOR = "idle_inhibitor"
    USER = "user"
    GAMEMODE = "gamemode"
    PRIVACY = "privacy"
    POWER_PROFILES_DAEMON = "power-profiles-daemon"
    SYSTEMD_FAILED_UNITS = "systemd-failed-units"
    IMAGE = "image"
    GROUP = "group"
    CUSTOM = "custom"


class ModuleCategory(StrEnum):
    """Palette grouping for module types."""

    SYSTEM = "system"
    HARDWARE = "hardware"
    WM = "wm"
    MEDIA = "media"
    UTILITY = "utility"


class ModulePosition(StrEnum):
    """The three horizontal zones of a bar."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class Compositor(StrEnum):
    """Wayland compositors recognised by environment detection."""

    HYPRLAND = "hyprland"
    SWAY = "sway"
    RIVER = "river"
    DWL = "dwl"
    NIRI = "niri"
    UNKNOWN = "unknown"

    @classmethod
    def from_name(cls, name: str) -> Compositor:
        """Map a desktop/process name to a compositor, ``UNKNOWN`` if unrecognised."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            return cls.UNKNOWN


# Native array key for each zone, in emission order.
MODULE_ARRAY_KEYS: dict[str, str] = {
    ModulePosition.LEFT: "modules-left",
    ModulePosition.CENTER: "modules-center",
    ModulePosition.RIGHT: "modules-right",
}

# Top-level native keys that carry bar settings (everything else is a module config).
BAR_SETTING_KEYS: frozenset[str] = frozenset(
    {
        "layer",
        "position",
        "output",
        "height",
        "width",
        "margin",
        "margin-top",
        "margin-bottom",
        "margin-left",
        "margin-right",
        "spacing",
        "mode",
        "exclusive",
        "passthrough",
        "gtk-layer-shell",
        "ipc",
        "name",
        "reload_style_on_change",
    }
)

BAR_LEVEL_KEYS: frozenset[str] = BAR_SETTING_KEYS | frozenset(MODULE_ARRAY_KEYS.values())

CUSTOM_MODULE_PREFIX = "custom/"


def resolve_module_type(value: str) -> ModuleType | None:
    """Map a type string to :class:`ModuleType`, or None if unknown.

    Waybar names script modules ``custom/<name>``; all of them share the
    ``custom`` config schema.
    """
    if value.startswith(CUSTOM_MODULE_PREFIX) and len(value) > len(CUSTOM_MODULE_PREFIX):
        return ModuleType.CUSTOM
    try:
        return ModuleType(value)
    except ValueError:
        return None
