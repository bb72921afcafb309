"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, ``waybarctl.toml`` only contains
overrides. An empty or missing file is a valid configuration.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field

# --- waybarctl.toml sections ---


class PathsConfig(BaseModel):
    """[paths] section. Unset values fall back to Waybar's own locations."""

    model_config = {"frozen": True}

    config_dir: Path | None = None
    config_file: str | None = None
    style_file: str = "style.css"


class HistoryConfig(BaseModel):
    """[history] section."""

    model_config = {"frozen": True}

    limit: int = Field(default=50, ge=1)


class ValidationConfig(BaseModel):
    """[validation] section."""

    model_config = {"frozen": True}

    debounce_ms: int = Field(default=300, ge=0)


class SaveConfig(BaseModel):
    """[save] section."""

    model_config = {"frozen": True}

    reload: bool = True
    write_style: bool = True
    multi_bar: bool = False


class StateConfig(BaseModel):
    """[state] section. ``path`` defaults to ``$XDG_STATE_HOME/waybarctl/state.json``."""

    model_config = {"frozen": True}

    path: Path | None = None
