"""Tests for the local filesystem gateway."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import anyio
import pytest

from waybarctl.domain.types import Compositor
from waybarctl.infrastructure.gateway import (
    BACKUP_MARKER,
    GatewayError,
    LocalGateway,
    backup_path_for,
    default_config_dir,
    describe_backup,
)


class TestPaths:
    def test_default_config_dir_uses_xdg(self) -> None:
        assert default_config_dir({"XDG_CONFIG_HOME": "/x"}) == Path("/x/waybar")

    def test_default_config_dir_fallback(self) -> None:
        assert default_config_dir({}) == Path.home() / ".config" / "waybar"

    def test_detect_prefers_jsonc(self, tmp_path: Path) -> None:
        (tmp_path / "config").write_text("{}")
        (tmp_path / "config.jsonc").write_text("{}")
        paths = anyio.run(LocalGateway(config_dir=tmp_path).detect_paths)
        assert paths.config_file == tmp_path / "config.jsonc"
        assert paths.style_file == tmp_path / "style.css"

    def test_detect_plain_config(self, tmp_path: Path) -> None:
        (tmp_path / "config").write_text("{}")
        paths = anyio.run(LocalGateway(config_dir=tmp_path).detect_paths)
        assert paths.config_file == tmp_path / "config"

    def test_detect_from_env(self, tmp_path: Path) -> None:
        (tmp_path / "waybar").mkdir()
        gateway = LocalGateway(env={"XDG_CONFIG_HOME": str(tmp_path)})
        paths = anyio.run(gateway.detect_paths)
        assert paths.config_dir == tmp_path / "waybar"

    def test_explicit_file_names(self, tmp_path: Path) -> None:
        gateway = LocalGateway(config_dir=tmp_path, config_file="top.json", style_file="top.css")
        paths = anyio.run(gateway.detect_paths)
        assert paths.config_file == tmp_path / "top.json"
        assert paths.style_file == tmp_path / "top.css"

    def test_missing_dir(self, tmp_path: Path) -> None:
        gateway = LocalGateway(config_dir=tmp_path / "nope")
        with pytest.raises(GatewayError, match="not found"):
            anyio.run(gateway.detect_paths)


class TestFiles:
    def test_read_missing(self, tmp_path: Path) -> None:
        with pytest.raises(GatewayError, match="Config file not found") as info:
            anyio.run(LocalGateway().read_config, tmp_path / "config")
        assert info.value.path == tmp_path / "config"

    def test_write_new_file_has_no_backup(self, tmp_path: Path) -> None:
        target = tmp_path / "sub" / "config.jsonc"
        backup = anyio.run(LocalGateway().write_config, target, "{}\n")
        assert backup is None
        assert target.read_text() == "{}\n"

    def test_overwrite_creates_backup(self, tmp_path: Path) -> None:
        target = tmp_path / "config.jsonc"
        target.write_text("old")
        backup = anyio.run(LocalGateway().write_config, target, "new")
        assert backup is not None
        assert backup.parent == tmp_path
        assert backup.name.startswith("config.jsonc" + BACKUP_MARKER)
        assert backup.read_text() == "old"
        assert target.read_text() == "new"

    @pytest.mark.parametrize(
        ("method", "kind"), [("read_config", "Config"), ("read_style", "CSS")]
    )
    def test_invalid_utf8(self, tmp_path: Path, method: str, kind: str) -> None:
        target = tmp_path / "file"
        target.write_bytes(b'{"name": "\xff\xfe"}')
        with pytest.raises(GatewayError, match=f"{kind} file .* is not valid UTF-8"):
            anyio.run(getattr(LocalGateway(), method), target)

    def test_empty_stylesheet_rejected(self, tmp_path: Path) -> None:
        target = tmp_path / "style.css"
        with pytest.raises(GatewayError, match="cannot be empty"):
            anyio.run(LocalGateway().write_style, target, "  \n")
        assert not target.exists()

    def test_style_round_trip(self, tmp_path: Path) -> None:
        target = tmp_path / "style.css"
        gateway = LocalGateway()
        anyio.run(gateway.write_style, target, "#clock { color: red; }\n")
        assert anyio.run(gateway.read_style, target) == "#clock { color: red; }\n"


class TestBackups:
    def test_backup_name(self) -> None:
        when = datetime(2025, 3, 4, 5, 6, 7, tzinfo=UTC)
        path = backup_path_for(Path("/w/config.jsonc"), when)
        assert path == Path("/w/config.jsonc.backup.20250304T050607")

    def test_describe_backup(self) -> None:
        info = describe_backup(Path("/w/style.css.backup.20250304T050607"))
        assert info["original"] == "style.css"
        assert info["created_at"] == "2025-03-04T05:06:07+00:00"

    def test_describe_unparseable_stamp(self) -> None:
        assert describe_backup(Path("/w/config.backup.later"))["created_at"] is None

    def test_list_newest_first(self, tmp_path: Path) -> None:
        for stamp in ("20250101T000000", "20250301T000000", "20250201T000000"):
            (tmp_path / f"config.jsonc.backup.{stamp}").write_text("{}")
        (tmp_path / "config.jsonc").write_text("{}")
        backups = anyio.run(LocalGateway().list_backups, tmp_path)
        assert [p.name[-15:] for p in backups] == [
            "20250301T000000",
            "20250201T000000",
            "20250101T000000",
        ]

    def test_list_orders_by_timestamp_across_files(self, tmp_path: Path) -> None:
        names = [
            "style.css.backup.20250101T000000",
            "config.jsonc.backup.20250301T000000",
            "config.jsonc.backup.20250301T000000-2",
            "style.css.backup.20250201T000000",
            "config.backup.later",
        ]
        for name in names:
            (tmp_path / name).write_text("x")
        backups = anyio.run(LocalGateway().list_backups, tmp_path)
        assert [p.name for p in backups] == [
            "config.jsonc.backup.20250301T000000-2",
            "config.jsonc.backup.20250301T000000",
            "style.css.backup.20250201T000000",
            "style.css.backup.20250101T000000",
            "config.backup.later",
        ]

    def test_restore_backs_up_target(self, tmp_path: Path) -> None:
        target = tmp_path / "config.jsonc"
        target.write_text("current")
        backup = tmp_path / "config.jsonc.backup.20240101T000000"
        backup.write_text("old")

        previous = anyio.run(LocalGateway().restore_backup, backup, target)
        assert target.read_text() == "old"
        assert previous is not None
        assert previous.read_text() == "current"

    def test_restore_missing_backup(self, tmp_path: Path) -> None:
        with pytest.raises(GatewayError, match="Backup file not found"):
            anyio.run(
                LocalGateway().restore_backup,
                tmp_path / "config.backup.x",
                tmp_path / "config",
            )


class TestCompositor:
    def test_no_wayland_session(self) -> None:
        gateway = LocalGateway(env={"XDG_CURRENT_DESKTOP": "Hyprland"})
        assert anyio.run(gateway.detect_compositor) is Compositor.UNKNOWN

    @pytest.mark.parametrize(
        ("env", "expected"),
        [
            ({"XDG_CURRENT_DESKTOP": "Hyprland"}, Compositor.HYPRLAND),
            ({"XDG_CURRENT_DESKTOP": "sway:wlroots"}, Compositor.SWAY),
            ({"XDG_CURRENT_DESKTOP": "GNOME", "WAYLAND_COMPOSITOR": "niri"}, Compositor.NIRI),
        ],
    )
    def test_from_environment(self, env: dict[str, str], expected: Compositor) -> None:
        gateway = LocalGateway(env={"WAYLAND_DISPLAY": "wayland-1", **env})
        assert anyio.run(gateway.detect_compositor) is expected


class TestBackupCollisions:
    def test_same_second_backups_are_kept(self, tmp_path: Path) -> None:
        target = tmp_path / "config.jsonc"
        target.write_text("v1")
        gateway = LocalGateway()
        first = anyio.run(gateway.write_config, target, "v2")
        second = anyio.run(gateway.write_config, target, "v3")
        assert first is not None
        assert second is not None
        assert first.read_text() == "v1"
        assert second.read_text() == "v2"

    def test_restore_just_taken_backup(self, tmp_path: Path) -> None:
        target = tmp_path / "config.jsonc"
        target.write_text("original")
        gateway = LocalGateway()
        backup = anyio.run(gateway.write_config, target, "edited")
        assert backup is not None
        anyio.run(gateway.restore_backup, backup, target)
        assert target.read_text() == "original"
        assert backup.read_text() == "original"

    def test_describe_suffixed_backup(self) -> None:
        info = describe_backup(Path("/w/config.backup.20250304T050607-2"))
        assert info["created_at"] == "2025-03-04T05:06:07+00:00"
