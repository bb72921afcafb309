"""Module catalog — display metadata for every module type.

Used by ``waybarctl module types`` to list what can be placed on a bar.
"""

from __future__ import annotations

from dataclasses import dataclass

from waybarctl.domain.types import Compositor, ModuleCategory, ModuleType


@dataclass(frozen=True)
class ModuleInfo:
    """Palette entry for a module type."""

    type: ModuleType
    display_name: str
    description: str
    category: ModuleCategory
    requires_wm: Compositor | None = None


_SYS = ModuleCategory.SYSTEM
_HW = ModuleCategory.HARDWARE
_WM = ModuleCategory.WM
_MEDIA = ModuleCategory.MEDIA
_UTIL = ModuleCategory.UTILITY

MODULE_CATALOG: tuple[ModuleInfo, ...] = (
    ModuleInfo(ModuleType.BATTERY, "Battery", "Battery status and percentage", _SYS),
    ModuleInfo(ModuleType.CPU, "CPU", "CPU usage percentage", _SYS),
    ModuleInfo(ModuleType.MEMORY, "Memory", "RAM usage information", _SYS),
    ModuleInfo(ModuleType.DISK, "Disk", "Disk space usage", _SYS),
    ModuleInfo(ModuleType.TEMPERATURE, "Temperature", "System temperature sensors", _SYS),
    ModuleInfo(ModuleType.NETWORK, "Network", "Network connection status", _SYS),
    ModuleInfo(ModuleType.LOAD, "Load", "System load average", _SYS),
    ModuleInfo(ModuleType.UPOWER, "UPower", "UPower device information", _SYS),
    ModuleInfo(ModuleType.BACKLIGHT, "Backlight", "Screen brightness", _HW),
    ModuleInfo(ModuleType.PULSEAUDIO, "PulseAudio", "Audio volume", _HW),
    ModuleInfo(ModuleType.BLUETOOTH, "Bluetooth", "Bluetooth connection status", _HW),
    ModuleInfo(
        ModuleType.KEYBOARD_STATE,
        "Keyboard State",
        "Keyboard lock states (Caps Lock, Num Lock)",
        _HW,
    ),
    ModuleInfo(ModuleType.WORKSPACES, "Workspaces", "Workspace switcher", _WM),
    ModuleInfo(ModuleType.TASKBAR, "Taskbar", "Open windows as a taskbar", _WM),
    ModuleInfo(ModuleType.WINDOW, "Window Title", "Active window title", _WM),
    ModuleInfo(ModuleType.MODE, "Mode", "Current window manager mode", _WM),
    ModuleInfo(ModuleType.LANGUAGE, "Language", "Current keyboard layout", _WM),
    ModuleInfo(
        ModuleType.HYPRLAND_WORKSPACES,
        "Hyprland Workspaces",
        "Hyprland workspaces with window rewriting",
        _WM,
        Compositor.HYPRLAND,
    ),
    ModuleInfo(
        ModuleType.HYPRLAND_WINDOW,
        "Hyprland Window",
        "Hyprland active window title",
        _WM,
        Compositor.HYPRLAND,
    ),
    ModuleInfo(
        ModuleType.HYPRLAND_LANGUAGE,
        "Hyprland Language",
        "Hyprland keyboard layout",
        _WM,
        Compositor.HYPRLAND,
    ),
    ModuleInfo(
        ModuleType.HYPRLAND_SUBMAP,
        "Hyprland Submap",
        "Hyprland submap mode",
        _WM,
        Compositor.HYPRLAND,
    ),
    ModuleInfo(
        ModuleType.SWAY_WORKSPACES, "Sway Workspaces", "Sway workspaces", _WM, Compositor.SWAY
    ),
    ModuleInfo(
        ModuleType.SWAY_WINDOW, "Sway Window", "Sway active window title", _WM, Compositor.SWAY
    ),
    ModuleInfo(ModuleType.SWAY_MODE, "Sway Mode", "Sway binding mode", _WM, Compositor.SWAY),
    ModuleInfo(
        ModuleType.SWAY_LANGUAGE, "Sway Language", "Sway keyboard layout", _WM, Compositor.SWAY
    ),
    ModuleInfo(ModuleType.RIVER_TAGS, "River Tags", "River tags", _WM, Compositor.RIVER),
    ModuleInfo(ModuleType.DWL_TAGS, "DWL Tags", "DWL tags", _WM, Compositor.DWL),
    ModuleInfo(ModuleType.MPD, "MPD", "Music Player Daemon status", _MEDIA),
    ModuleInfo(ModuleType.MPRIS, "MPRIS", "Media player status via MPRIS", _MEDIA),
    ModuleInfo(ModuleType.CAVA, "Cava", "Audio visualizer", _MEDIA),
    ModuleInfo(ModuleType.CLOCK, "Clock", "Date and time", _UTIL),
    ModuleInfo(ModuleType.TRAY, "System Tray", "System tray icons", _UTIL),
    ModuleInfo(ModuleType.IDLE_INHIBITOR, "Idle Inhibitor", "Idle inhibition toggle", _UTIL),
    ModuleInfo(ModuleType.USER, "User", "Current user information", _UTIL),
    ModuleInfo(ModuleType.GAMEMODE, "GameMode", "GameMode status", _UTIL),
    ModuleInfo(ModuleType.PRIVACY, "Privacy", "Camera and microphone indicators", _UTIL),
    ModuleInfo(
        ModuleType.POWER_PROFILES_DAEMON, "Power Profiles", "Power profile selector", _UTIL
    ),
    ModuleInfo(
        ModuleType.SYSTEMD_FAILED_UNITS, "Failed Systemd Units", "Failed systemd units", _UTIL
    ),
    ModuleInfo(ModuleType.IMAGE, "Image", "Static image", _UTIL),
    ModuleInfo(ModuleType.GROUP, "Group", "Group of modules", _UTIL),
    ModuleInfo(ModuleType.CUSTOM, "Custom", "Script-driven custom module", _UTIL),
)

_BY_TYPE: dict[str, ModuleInfo] = {info.type: info for info in MODULE_CATALOG}


def get_module_info(module_type: str) -> ModuleInfo | None:
    """Look up catalog metadata for *module_type*."""
    return _BY_TYPE.get(module_type)


def modules_by_category(category: str) -> list[ModuleInfo]:
    """All catalog entries in *category*, in catalog order."""
    return [info for info in MODULE_CATALOG if info.category == category]
