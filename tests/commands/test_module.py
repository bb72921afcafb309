"""Tests for the module command group."""

from __future__ import annotations

import json
from typing import Any

import pytest
from click.testing import CliRunner, Result

from waybarctl.cli import cli


def _run(runner: CliRunner, *args: str) -> Result:
    return runner.invoke(cli, ["--json", *args])


def _data(result: Result) -> dict[str, Any]:
    return json.loads(result.stdout)["data"]


def _native_ids(runner: CliRunner, position: str) -> list[str]:
    items = _data(_run(runner, "module", "list", "--position", position))["items"]
    return [m["native_id"] for m in items]


@pytest.fixture
def bar(cli_runner: CliRunner, _isolated_cli: None) -> str:
    return _data(_run(cli_runner, "bar", "create", "main"))["bar"]["id"]


@pytest.mark.usefixtures("bar")
class TestModuleAdd:
    def test_add_with_set(self, cli_runner: CliRunner) -> None:
        result = _run(cli_runner, "module", "add", "clock", "-p", "center", "--set", "interval=1")
        assert result.exit_code == 0, result.output
        module = _data(result)["module"]
        assert module["position"] == "center"
        assert module["config"] == {"interval": 1}

    def test_add_with_name_and_defaults(self, cli_runner: CliRunner) -> None:
        result = _run(
            cli_runner, "module", "add", "battery", "--name", "bat0", "--defaults",
            "--set", "full-at=95",
        )
        module = _data(result)["module"]
        assert module["native_id"] == "battery#bat0"
        assert module["config"]["full-at"] == 95
        assert module["config"]["interval"] == 60

    def test_add_config_json(self, cli_runner: CliRunner) -> None:
        result = _run(
            cli_runner, "module", "add", "custom/spotify",
            "--config", '{"exec": "spotify-status", "interval": 5}',
        )
        assert _data(result)["module"]["config"]["exec"] == "spotify-status"

    def test_add_config_not_object(self, cli_runner: CliRunner) -> None:
        result = _run(cli_runner, "module", "add", "clock", "--config", "[1]")
        assert result.exit_code == 2
        assert "JSON object" in result.output

    def test_add_to_explicit_bar(self, cli_runner: CliRunner) -> None:
        result = _run(cli_runner, "module", "add", "clock", "--bar", "missing")
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "BAR_NOT_FOUND"

    def test_duplicate_warns(self, cli_runner: CliRunner) -> None:
        cli_runner.invoke(cli, ["module", "add", "clock"])
        result = cli_runner.invoke(cli, ["module", "add", "clock", "-p", "right"])
        assert result.exit_code == 0
        assert "already has a module" in result.stderr


@pytest.mark.usefixtures("bar")
class TestModuleEdit:
    def test_update_by_native_id(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "module", "add", "clock", "--set", "interval=1", "--set", "format=x")
        result = _run(
            cli_runner, "module", "update", "clock", "--set", "interval=5", "--unset", "format"
        )
        assert _data(result)["module"]["config"] == {"interval": 5}

    def test_update_replace(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "module", "add", "clock", "--set", "interval=1")
        result = _run(
            cli_runner, "module", "update", "clock", "--config", '{"format": "y"}', "--replace"
        )
        assert _data(result)["module"]["config"] == {"format": "y"}

    def test_rename_and_clear_name(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "module", "add", "battery")
        renamed = _data(_run(cli_runner, "module", "update", "battery", "--name", "bat0"))
        assert renamed["module"]["native_id"] == "battery#bat0"
        cleared = _data(_run(cli_runner, "module", "update", "battery#bat0", "--clear-name"))
        assert cleared["module"]["native_id"] == "battery"

    def test_ambiguous_native_id(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "module", "add", "clock")
        _run(cli_runner, "module", "add", "clock", "-p", "right")
        result = _run(cli_runner, "module", "delete", "clock")
        assert result.exit_code == 2
        assert "matches 2 modules" in result.output

    def test_unknown_module(self, cli_runner: CliRunner) -> None:
        result = _run(cli_runner, "module", "update", "nope", "--disable")
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "MODULE_NOT_FOUND"

    def test_delete(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "module", "add", "clock")
        _run(cli_runner, "module", "add", "cpu")
        assert _run(cli_runner, "module", "delete", "clock").exit_code == 0
        items = _data(_run(cli_runner, "module", "list"))["items"]
        assert [(m["native_id"], m["order"]) for m in items] == [("cpu", 0)]


@pytest.mark.usefixtures("bar")
class TestModuleOrdering:
    def test_move_across_zones(self, cli_runner: CliRunner) -> None:
        for module_type in ("clock", "cpu"):
            _run(cli_runner, "module", "add", module_type)
        _run(cli_runner, "module", "add", "tray", "-p", "right")
        result = _run(cli_runner, "module", "move", "clock", "right", "--index", "0")
        assert result.exit_code == 0, result.output
        assert _native_ids(cli_runner, "left") == ["cpu"]
        assert _native_ids(cli_runner, "right") == ["clock", "tray"]

    def test_move_defaults_to_end(self, cli_runner: CliRunner) -> None:
        for module_type in ("clock", "cpu", "memory"):
            _run(cli_runner, "module", "add", module_type)
        _run(cli_runner, "module", "move", "clock", "left")
        assert _native_ids(cli_runner, "left") == ["cpu", "memory", "clock"]

    def test_reorder(self, cli_runner: CliRunner) -> None:
        for module_type in ("clock", "cpu", "memory"):
            _run(cli_runner, "module", "add", module_type)
        result = _run(cli_runner, "module", "reorder", "left", "memory", "clock")
        assert result.exit_code == 0
        assert _native_ids(cli_runner, "left") == ["memory", "clock", "cpu"]


@pytest.mark.usefixtures("_isolated_cli")
class TestModuleTypes:
    def test_all_types(self, cli_runner: CliRunner) -> None:
        items = _data(_run(cli_runner, "module", "types"))["items"]
        types = {item["type"] for item in items}
        assert {"clock", "battery", "hyprland/workspaces"} <= types

    def test_filter_by_category(self, cli_runner: CliRunner) -> None:
        items = _data(_run(cli_runner, "module", "types", "--category", "hardware"))["items"]
        assert items
        assert {item["category"] for item in items} == {"hardware"}

    def test_human_table(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["module", "types"])
        assert result.exit_code == 0
        assert "clock" in result.stdout
