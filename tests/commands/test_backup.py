"""Tests for the backup command group."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner, Result

from waybarctl.cli import cli


def _run(runner: CliRunner, *args: str) -> Result:
    return runner.invoke(cli, ["--json", *args])


def _data(result: Result) -> dict[str, Any]:
    return json.loads(result.stdout)["data"]


@pytest.mark.usefixtures("_isolated_cli")
class TestBackupCommands:
    def test_list_empty(self, cli_runner: CliRunner, waybar_dir: Path) -> None:
        data = _data(_run(cli_runner, "backup", "list"))
        assert data["config_dir"] == str(waybar_dir)
        assert data["items"] == []

    def test_save_then_restore(self, cli_runner: CliRunner, waybar_dir: Path) -> None:
        original = (waybar_dir / "config.jsonc").read_text()
        _run(cli_runner, "load")
        _run(cli_runner, "bar", "update", "--set", "height=44")
        assert _run(cli_runner, "save", "--no-style").exit_code == 0
        assert '"height": 44' in (waybar_dir / "config.jsonc").read_text()

        items = _data(_run(cli_runner, "backup", "list"))["items"]
        assert [item["original"] for item in items] == ["config.jsonc"]

        result = _run(cli_runner, "backup", "restore", items[0]["name"])
        assert result.exit_code == 0, result.output
        assert _data(result)["path"] == str(waybar_dir / "config.jsonc")
        assert (waybar_dir / "config.jsonc").read_text() == original
        assert any("waybarctl load" in w for w in json.loads(result.stdout)["warnings"])

    def test_restore_rejects_plain_name(self, cli_runner: CliRunner) -> None:
        result = _run(cli_runner, "backup", "restore", "config.jsonc")
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "INVALID_INPUT"

    def test_restore_missing(self, cli_runner: CliRunner) -> None:
        result = _run(cli_runner, "backup", "restore", "config.jsonc.backup.20200101T000000")
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "BACKUP_NOT_FOUND"

    def test_list_missing_dir(
        self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("WAYBARCTL_PATHS__CONFIG_DIR", str(tmp_path / "nope"))
        result = _run(cli_runner, "backup", "list")
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "IO_ERROR"
