"""Shared pytest fixtures for waybarctl tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

from waybarctl.domain.types import Compositor
from waybarctl.infrastructure.gateway import ConfigPaths, GatewayError
from waybarctl.services.store import ConfigStore

SAMPLE_NATIVE = """\
// main bar
{
  "layer": "top",
  "position": "top",
  "height": 30,
  "modules-left": ["hyprland/workspaces"],
  "modules-center": ["clock"],
  "modules-right": ["pulseaudio", "battery#bat0", "battery#bat1"],
  "hyprland/workspaces": {"all-outputs": true},
  "clock": {"format": "{:%H:%M}", "interval": 60},
  "pulseaudio": {"scroll-step": 5},
  "battery#bat0": {"bat": "BAT0"},
  "battery#bat1": {"bat": "BAT1"}
}
"""

SAMPLE_CSS = """\
/* base */
window#waybar {
  background-color: #1e1e2e;
  color: #cdd6f4;
}

#clock {
  font-weight: bold !important;
}
"""


class FakeGateway:
    """In-memory gateway that records every call.

    Files live in ``self.files``; set ``write_error`` / ``reload_error`` /
    ``running`` to steer the failure paths.
    """

    def __init__(self, root: Path | None = None) -> None:
        root = root or Path("/fake/waybar")
        self.paths = ConfigPaths(root, root / "config.jsonc", root / "style.css")
        self.files: dict[Path, str] = {}
        self.calls: list[str] = []
        self.running = True
        self.write_error: str | None = None
        self.style_write_error: str | None = None
        self.reload_error: str | None = None
        self.detect_error: str | None = None
        self.compositor = Compositor.HYPRLAND

    async def detect_paths(self) -> ConfigPaths:
        self.calls.append("detect_paths")
        if self.detect_error:
            raise GatewayError(self.detect_error)
        return self.paths

    async def read_config(self, path: Path) -> str:
        self.calls.append("read_config")
        return self._read(path, "Config")

    async def write_config(self, path: Path, content: str) -> Path | None:
        self.calls.append("write_config")
        if self.write_error:
            raise GatewayError(self.write_error, path=path)
        return self._write(path, content)

    async def read_style(self, path: Path) -> str:
        self.calls.append("read_style")
        return self._read(path, "CSS")

    async def write_style(self, path: Path, content: str) -> Path | None:
        self.calls.append("write_style")
        if self.style_write_error:
            raise GatewayError(self.style_write_error, path=path)
        return self._write(path, content)

    async def list_backups(self, config_dir: Path) -> list[Path]:
        self.calls.append("list_backups")
        return sorted((p for p in self.files if ".backup." in p.name), reverse=True)

    async def restore_backup(self, backup: Path, target: Path) -> Path | None:
        self.calls.append("restore_backup")
        if backup not in self.files:
            raise GatewayError(f"Backup file not found: {backup}", path=backup)
        self.files[target] = self.files[backup]
        return None

    async def reload(self) -> bool:
        self.calls.append("reload")
        if self.reload_error:
            raise GatewayError(self.reload_error)
        return self.running

    async def is_running(self) -> bool:
        return self.running

    async def pids(self) -> list[int]:
        return [4242] if self.running else []

    async def start(self) -> bool:
        self.calls.append("start")
        started = not self.running
        self.running = True
        return started

    async def stop(self) -> bool:
        self.calls.append("stop")
        stopped = self.running
        self.running = False
        return stopped

    async def restart(self, *, timeout: float = 3.0) -> None:
        self.calls.append("restart")
        self.running = True

    async def detect_compositor(self) -> Compositor:
        return self.compositor

    def _read(self, path: Path, kind: str) -> str:
        if path not in self.files:
            raise GatewayError(f"{kind} file not found: {path}", path=path)
        return self.files[path]

    def _write(self, path: Path, content: str) -> Path | None:
        backup = None
        if path in self.files:
            backup = path.with_name(f"{path.name}.backup.20250101T000000")
            self.files[backup] = self.files[path]
        self.files[path] = content
        return backup


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def store(gateway: FakeGateway) -> ConfigStore:
    s = ConfigStore(gateway)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def loaded_gateway(gateway: FakeGateway) -> FakeGateway:
    """Fake gateway holding a sample config and stylesheet."""
    gateway.files[gateway.paths.config_file] = SAMPLE_NATIVE
    gateway.files[gateway.paths.style_file] = SAMPLE_CSS
    return gateway


@pytest.fixture
def waybar_dir(tmp_path: Path) -> Path:
    """A Waybar config directory with the sample config and stylesheet."""
    directory = tmp_path / "waybar"
    directory.mkdir()
    (directory / "config.jsonc").write_text(SAMPLE_NATIVE, encoding="utf-8")
    (directory / "style.css").write_text(SAMPLE_CSS, encoding="utf-8")
    return directory


@pytest.fixture
def _isolated_cli(tmp_path: Path, waybar_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the CLI at a temp Waybar dir and state file; never signal a real Waybar.

    Use via ``@pytest.mark.usefixtures("_isolated_cli")`` on command test classes.
    """
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("WAYBARCTL_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "xdg-state"))
    monkeypatch.setenv("WAYBARCTL_PATHS__CONFIG_DIR", str(waybar_dir))
    monkeypatch.setenv("WAYBARCTL_STATE__PATH", str(tmp_path / "state.json"))
    monkeypatch.setenv("WAYBARCTL_SAVE__RELOAD", "false")


@pytest.fixture
def sample_native() -> str:
    return SAMPLE_NATIVE


@pytest.fixture
def sample_css() -> str:
    return SAMPLE_CSS
