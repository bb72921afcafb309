"""Tests for the closed vocabularies and the module catalog."""

import pytest

from waybarctl.domain.catalog import MODULE_CATALOG, get_module_info, modules_by_category
from waybarctl.domain.types import (
    BAR_LEVEL_KEYS,
    BAR_SETTING_KEYS,
    MODULE_ARRAY_KEYS,
    Compositor,
    ModuleCategory,
    ModulePosition,
    ModuleType,
    resolve_module_type,
)


class TestModuleType:
    def test_values_are_native_names(self) -> None:
        assert ModuleType.HYPRLAND_WORKSPACES == "hyprland/workspaces"
        assert ModuleType.IDLE_INHIBITOR == "idle_inhibitor"
        assert ModuleType.KEYBOARD_STATE == "keyboard-state"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("clock", ModuleType.CLOCK),
            ("custom", ModuleType.CUSTOM),
            ("custom/spotify", ModuleType.CUSTOM),
            ("custom/", None),
            ("bogus", None),
        ],
    )
    def test_resolve(self, value: str, expected: ModuleType | None) -> None:
        assert resolve_module_type(value) is expected


class TestPositions:
    def test_array_keys(self) -> None:
        assert MODULE_ARRAY_KEYS[ModulePosition.LEFT] == "modules-left"
        assert MODULE_ARRAY_KEYS[ModulePosition.CENTER] == "modules-center"
        assert MODULE_ARRAY_KEYS[ModulePosition.RIGHT] == "modules-right"

    def test_bar_level_keys_include_arrays(self) -> None:
        assert BAR_SETTING_KEYS < BAR_LEVEL_KEYS
        assert "modules-left" in BAR_LEVEL_KEYS
        assert "mode" in BAR_LEVEL_KEYS


class TestCompositor:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Hyprland", Compositor.HYPRLAND),
            ("sway", Compositor.SWAY),
            (" niri ", Compositor.NIRI),
            ("GNOME", Compositor.UNKNOWN),
        ],
    )
    def test_from_name(self, name: str, expected: Compositor) -> None:
        assert Compositor.from_name(name) is expected


class TestCatalog:
    def test_every_type_listed_once(self) -> None:
        types = [info.type for info in MODULE_CATALOG]
        assert sorted(types) == sorted(ModuleType)

    def test_get_module_info(self) -> None:
        info = get_module_info("battery")
        assert info is not None
        assert info.category is ModuleCategory.SYSTEM
        assert get_module_info("nope") is None

    def test_compositor_specific_modules(self) -> None:
        info = get_module_info("hyprland/workspaces")
        assert info is not None
        assert info.requires_wm is Compositor.HYPRLAND

    def test_by_category(self) -> None:
        media = modules_by_category(ModuleCategory.MEDIA)
        assert {info.type for info in media} == {ModuleType.MPD, ModuleType.MPRIS, ModuleType.CAVA}
