"""Persisted editing session — live config plus undo/redo stacks.

Each CLI invocation is a short-lived process, so the editing session is
kept on disk between invocations: ``waybarctl module add`` followed by
``waybarctl undo`` works because both read and write the same state file.

File layout (JSON)::

    {"waybar-config-storage": {
        "config": {...},
        "history": {"past": [...], "future": [...]},
        "config_path": "...",
        "style_path": "...",
        "current_bar_id": "...",
        "dirty": false}}
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from waybarctl.domain.models import WaybarConfig

logger = logging.getLogger(__name__)

STORAGE_KEY = "waybar-config-storage"


class StateError(Exception):
    """The state file exists but cannot be read or written."""


class SessionHistory(BaseModel):
    model_config = {"frozen": True}

    past: list[WaybarConfig] = Field(default_factory=list)
    future: list[WaybarConfig] = Field(default_factory=list)


class SessionState(BaseModel):
    """Everything needed to resume an editing session."""

    model_config = {"frozen": True}

    config: WaybarConfig = Field(default_factory=WaybarConfig)
    history: SessionHistory = Field(default_factory=SessionHistory)
    config_path: str | None = None
    style_path: str | None = None
    current_bar_id: str | None = None
    dirty: bool = False


def default_state_path(env: dict[str, str] | None = None) -> Path:
    """``$XDG_STATE_HOME/waybarctl/state.json`` (``~/.local/state`` fallback)."""
    env = dict(os.environ) if env is None else env
    xdg = env.get("XDG_STATE_HOME")
    base = Path(xdg) if xdg else Path.home() / ".local" / "state"
    return base / "waybarctl" / "state.json"


class StateFile:
    """Load and save :class:`SessionState` under :data:`STORAGE_KEY`."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> SessionState | None:
        """Return the stored session, or None if there is none yet."""
        if not self.path.is_file():
            return None
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            msg = f"Cannot read state file {self.path}: {exc}"
            raise StateError(msg) from exc

        payload = raw.get(STORAGE_KEY) if isinstance(raw, dict) else None
        if payload is None:
            return None
        try:
            return SessionState.model_validate(payload)
        except ValidationError as exc:
            msg = f"State file {self.path} is corrupt: {exc.error_count()} error(s)"
            raise StateError(msg) from exc

    def save(self, state: SessionState) -> None:
        data: dict[str, Any] = {
            STORAGE_KEY: state.model_dump(mode="json", by_alias=True, warnings=False)
        }
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
            tmp.replace(self.path)
        except OSError as exc:
            msg = f"Cannot write state file {self.path}: {exc}"
            raise StateError(msg) from exc
        logger.debug("Saved session state to %s", self.path)

    def clear(self) -> bool:
        """Delete the state file. Returns False if there was nothing to delete."""
        if not self.path.exists():
            return False
        self.path.unlink()
        return True
