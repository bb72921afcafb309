"""Tests for native id encoding/decoding and internal ids."""

import pytest

from waybarctl.domain.ids import decode_native_id, encode_native_id, new_id


class TestEncodeNativeId:
    def test_plain_type(self) -> None:
        assert encode_native_id("battery") == "battery"

    def test_with_custom_name(self) -> None:
        assert encode_native_id("battery", "bat0") == "battery#bat0"

    def test_empty_custom_name_is_ignored(self) -> None:
        assert encode_native_id("clock", "") == "clock"

    def test_slashed_type(self) -> None:
        assert encode_native_id("hyprland/workspaces", "ws") == "hyprland/workspaces#ws"


class TestDecodeNativeId:
    @pytest.mark.parametrize(
        ("native_id", "expected"),
        [
            ("battery", ("battery", None)),
            ("battery#bat0", ("battery", "bat0")),
            ("custom/spotify", ("custom/spotify", None)),
            ("custom#a#b", ("custom", "a#b")),
            ("clock#", ("clock", None)),
        ],
    )
    def test_decode(self, native_id: str, expected: tuple[str, str | None]) -> None:
        assert decode_native_id(native_id) == expected

    def test_round_trip(self) -> None:
        for module_type, name in [("cpu", None), ("battery", "bat1"), ("sway/mode", "m")]:
            assert decode_native_id(encode_native_id(module_type, name)) == (module_type, name)


class TestNewId:
    def test_unique(self) -> None:
        ids = {new_id() for _ in range(100)}
        assert len(ids) == 100

    def test_uuid_shape(self) -> None:
        value = new_id()
        assert len(value) == 36
        assert value.count("-") == 4
