"""Tests for load, save, validate, import, and reset."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
from click.testing import CliRunner, Result

from waybarctl.cli import cli
from waybarctl.domain.native import parse_native_text


def _run(runner: CliRunner, *args: str, **kwargs: Any) -> Result:
    return runner.invoke(cli, ["--json", *args], **kwargs)


def _data(result: Result) -> dict[str, Any]:
    return json.loads(result.stdout)["data"]


def _error(result: Result) -> dict[str, Any]:
    return json.loads(result.stderr)["error"]


@pytest.mark.usefixtures("_isolated_cli")
class TestLoad:
    def test_load_detected_dir(self, cli_runner: CliRunner, waybar_dir: Path) -> None:
        result = _run(cli_runner, "load")
        assert result.exit_code == 0, result.output
        data = _data(result)
        assert data["config_file"] == str(waybar_dir / "config.jsonc")
        assert data["bars"] == 1
        assert data["modules"] == 5
        assert data["styles"] == 2

    def test_load_explicit_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        other = tmp_path / "other"
        other.mkdir()
        (other / "bar.json").write_text('{"modules-left": ["cpu"], "cpu": {}}')
        result = _run(cli_runner, "load", "--config-file", str(other / "bar.json"))
        assert result.exit_code == 0, result.output
        data = _data(result)
        assert data["style_file"] == str((other / "style.css").resolve())
        assert data["modules"] == 1
        assert any("Stylesheet not loaded" in w for w in json.loads(result.stdout)["warnings"])

    def test_load_parse_error(self, cli_runner: CliRunner, waybar_dir: Path) -> None:
        (waybar_dir / "config.jsonc").write_text("{oops")
        result = _run(cli_runner, "load")
        assert result.exit_code == 1
        assert _error(result)["code"] == "PARSE_ERROR"

    def test_load_invalid_then_ignore(self, cli_runner: CliRunner, waybar_dir: Path) -> None:
        (waybar_dir / "config.jsonc").write_text('{"height": 0}')
        rejected = _run(cli_runner, "load")
        assert rejected.exit_code == 1
        assert _error(rejected)["code"] == "VALIDATION_FAILED"

        accepted = _run(cli_runner, "load", "--ignore-validation")
        assert accepted.exit_code == 0
        assert _data(accepted)["validation"]["success"] is False

    def test_load_discards_dirty_session(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "bar", "create", "scratch")
        result = cli_runner.invoke(cli, ["load"])
        assert result.exit_code == 0
        assert "discarding unsaved changes" in result.stderr


@pytest.mark.usefixtures("_isolated_cli")
class TestSave:
    def test_load_edit_save(self, cli_runner: CliRunner, waybar_dir: Path) -> None:
        _run(cli_runner, "load")
        _run(cli_runner, "module", "add", "cpu", "-p", "right", "--set", "interval=5")
        result = _run(cli_runner, "save")
        assert result.exit_code == 0, result.output
        data = _data(result)
        assert data["outcome"] == "saved_reload_skipped"
        assert data["backup"] is not None
        assert Path(data["backup"]).exists()

        written = parse_native_text((waybar_dir / "config.jsonc").read_text())
        assert written["modules-right"][-1] == "cpu"
        assert written["cpu"] == {"interval": 5}
        assert "#clock" in (waybar_dir / "style.css").read_text()

        history = _data(_run(cli_runner, "history"))
        assert history["dirty"] is False

    def test_invalid_config_not_written(self, cli_runner: CliRunner, waybar_dir: Path) -> None:
        before = (waybar_dir / "config.jsonc").read_text()
        _run(cli_runner, "load")
        _run(cli_runner, "bar", "update", "--set", "height=-1")
        result = _run(cli_runner, "save")
        assert result.exit_code == 1
        error = _error(result)
        assert error["code"] == "VALIDATION_FAILED"
        assert "bars.0.config.height" in error["detail"]["errors"]
        assert (waybar_dir / "config.jsonc").read_text() == before
        assert not list(waybar_dir.glob("*.backup.*"))

    def test_save_elsewhere_multi(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        _run(cli_runner, "bar", "create", "top", "--set", "position=top")
        _run(cli_runner, "bar", "create", "bottom", "--set", "position=bottom")
        target = tmp_path / "out" / "config.json"
        result = _run(cli_runner, "save", "--config-file", str(target), "--multi", "--no-style")
        assert result.exit_code == 0, result.output
        written = parse_native_text(target.read_text())
        assert [bar["position"] for bar in written] == ["top", "bottom"]
        assert not (target.parent / "style.css").exists()


@pytest.mark.usefixtures("_isolated_cli")
class TestValidate:
    def test_valid(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "load")
        result = _run(cli_runner, "validate")
        assert result.exit_code == 0
        assert _data(result)["success"] is True

    def test_invalid_lists_paths(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "bar", "create", "main")
        _run(cli_runner, "module", "add", "clock", "--set", "interval=0")
        result = _run(cli_runner, "validate")
        assert result.exit_code == 1
        assert "bars.0.modules.0.config.interval" in _error(result)["detail"]["errors"]

    def test_human_error_table(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "bar", "create", "main", "--set", "layer=middle")
        result = cli_runner.invoke(cli, ["validate"])
        assert result.exit_code == 1
        assert "bars.0.config.layer" in result.stderr


@pytest.mark.usefixtures("_isolated_cli")
class TestImport:
    def test_import_with_css(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        (tmp_path / "laptop.json").write_text('{"modules-right": ["battery"], "battery": {}}')
        (tmp_path / "laptop.css").write_text("#battery { color: green; }")
        result = _run(
            cli_runner, "import", str(tmp_path / "laptop.json"),
            "--css", str(tmp_path / "laptop.css"), "--name", "laptop",
        )
        assert result.exit_code == 0, result.output
        data = _data(result)
        assert data["bars"][0]["name"] == "laptop"
        assert data["styles"] == 1

        undone = _run(cli_runner, "undo")
        assert undone.exit_code == 0
        assert _data(_run(cli_runner, "bar", "list"))["items"] == []
        assert _data(_run(cli_runner, "style", "list"))["items"] == []

    def test_import_missing_file(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        result = _run(cli_runner, "import", str(tmp_path / "nope.json"))
        assert result.exit_code == 1
        assert _error(result)["code"] == "IO_ERROR"


@pytest.mark.usefixtures("_isolated_cli")
class TestReset:
    def test_reset_requires_confirmation(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "bar", "create", "main")
        result = _run(cli_runner, "reset", input="n\n")
        assert result.exit_code == 1
        assert len(_data(_run(cli_runner, "bar", "list"))["items"]) == 1

    def test_reset_and_undo(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "bar", "create", "main")
        result = _run(cli_runner, "reset", "--yes")
        assert result.exit_code == 0
        assert _data(result) == {"bars": 1, "styles": 0}
        assert _data(_run(cli_runner, "bar", "list"))["items"] == []
        _run(cli_runner, "undo")
        assert len(_data(_run(cli_runner, "bar", "list"))["items"]) == 1
