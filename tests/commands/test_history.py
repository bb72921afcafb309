"""Tests for undo, redo, and history across CLI invocations."""

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


def _module_types(runner: CliRunner) -> list[str]:
    return [m["type"] for m in _data(_run(runner, "module", "list"))["items"]]


@pytest.mark.usefixtures("_isolated_cli")
class TestUndoRedo:
    def test_undo_then_redo(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "bar", "create", "main")
        _run(cli_runner, "module", "add", "clock")
        _run(cli_runner, "module", "add", "cpu")

        undone = _run(cli_runner, "undo")
        assert undone.exit_code == 0
        assert _data(undone)["can_redo"] is True
        assert _module_types(cli_runner) == ["clock"]

        assert _run(cli_runner, "redo").exit_code == 0
        assert _module_types(cli_runner) == ["clock", "cpu"]

    def test_undo_steps_stop_at_empty(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "bar", "create", "main")
        _run(cli_runner, "module", "add", "clock")
        result = _run(cli_runner, "undo", "-n", "5")
        assert result.exit_code == 0
        assert _data(result)["undo_count"] == 0
        assert _data(result)["redo_count"] == 2

    def test_nothing_to_undo(self, cli_runner: CliRunner) -> None:
        result = _run(cli_runner, "undo")
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "NOTHING_TO_UNDO"

    def test_nothing_to_redo(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "bar", "create", "main")
        result = _run(cli_runner, "redo")
        assert result.exit_code == 1
        assert json.loads(result.stderr)["error"]["code"] == "NOTHING_TO_REDO"

    def test_new_change_clears_redo(self, cli_runner: CliRunner) -> None:
        _run(cli_runner, "bar", "create", "main")
        _run(cli_runner, "module", "add", "clock")
        _run(cli_runner, "undo")
        _run(cli_runner, "module", "add", "cpu")
        assert _run(cli_runner, "redo").exit_code == 1

    def test_steps_must_be_positive(self, cli_runner: CliRunner) -> None:
        assert _run(cli_runner, "undo", "-n", "0").exit_code == 2


@pytest.mark.usefixtures("_isolated_cli")
class TestHistoryCommand:
    def test_fresh_session(self, cli_runner: CliRunner) -> None:
        data = _data(_run(cli_runner, "history"))
        assert data == {
            "can_undo": False,
            "can_redo": False,
            "undo_count": 0,
            "redo_count": 0,
            "limit": 50,
            "dirty": False,
        }

    def test_limit_from_env(
        self, cli_runner: CliRunner, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("WAYBARCTL_HISTORY__LIMIT", "2")
        _run(cli_runner, "bar", "create", "main")
        for module_type in ("clock", "cpu", "memory"):
            _run(cli_runner, "module", "add", module_type)
        data = _data(_run(cli_runner, "history"))
        assert data["undo_count"] == 2
        assert data["limit"] == 2
        assert data["dirty"] is True

    def test_human_output(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(cli, ["history"])
        assert result.exit_code == 0
        assert "undo: 0" in result.stdout
