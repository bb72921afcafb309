"""Shared parsing for ``KEY=VALUE`` style options."""

from __future__ import annotations

import json
from collections.abc import Iterable
from typing import Any

import click

POSITIONS = ("left", "center", "right")


def parse_value(raw: str) -> Any:
    """Interpret *raw* as JSON when it parses (``30``, ``true``, ``[1,2]``), else as text."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def parse_assignments(
    assignments: Iterable[str], unset: Iterable[str] = ()
) -> dict[str, Any]:
    """Build an update mapping from ``--set KEY=VALUE`` and ``--unset KEY`` options.

    Unset keys map to None, which the store treats as "remove".
    """
    updates: dict[str, Any] = {}
    for item in assignments:
        key, sep, raw = item.partition("=")
        if not sep or not key.strip():
            msg = f"Expected KEY=VALUE, got {item!r}"
            raise click.BadParameter(msg, param_hint="--set")
        updates[key.strip()] = parse_value(raw)
    for key in unset:
        updates[key] = None
    return updates


def parse_json_object(raw: str | None, *, param_hint: str) -> dict[str, Any] | None:
    if raw is None:
        return None
    try:
        value = json.loads(raw)
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON: {exc.msg}"
        raise click.BadParameter(msg, param_hint=param_hint) from exc
    if not isinstance(value, dict):
        msg = "Expected a JSON object"
        raise click.BadParameter(msg, param_hint=param_hint)
    return value
