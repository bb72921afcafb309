"""Tests for waybarctl.toml discovery."""

from pathlib import Path

import pytest

from waybarctl.config.discovery import CONFIG_FILENAME, find_config, user_config_path


@pytest.fixture(autouse=True)
def _clean_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("WAYBARCTL_CONFIG", raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


class TestFindConfig:
    def test_none_found(self, tmp_path: Path) -> None:
        assert find_config(tmp_path) is None

    def test_in_start_dir(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        assert find_config(tmp_path) == tmp_path / CONFIG_FILENAME

    def test_walks_up(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config(nested) == tmp_path.resolve() / CONFIG_FILENAME

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        explicit = tmp_path / "other.toml"
        explicit.write_text("")
        monkeypatch.setenv("WAYBARCTL_CONFIG", str(explicit))
        assert find_config(tmp_path) == explicit

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv("WAYBARCTL_CONFIG", str(tmp_path / "missing.toml"))
        assert find_config(tmp_path) is None

    def test_user_config_fallback(self, tmp_path: Path) -> None:
        user = user_config_path()
        assert user == tmp_path / "xdg" / "waybarctl" / CONFIG_FILENAME
        user.parent.mkdir(parents=True)
        user.write_text("")
        start = tmp_path / "project"
        start.mkdir()
        assert find_config(start) == user
