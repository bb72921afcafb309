"""Config file discovery.

Lookup order for ``waybarctl.toml``:

1. ``WAYBARCTL_CONFIG`` env var (must point at an existing file),
2. walk-up from the working directory, similar to how git finds .git/,
3. ``$XDG_CONFIG_HOME/waybarctl/waybarctl.toml``.
"""

from __future__ import annotations

import os
from pathlib import Path

CONFIG_FILENAME = "waybarctl.toml"
CONFIG_ENV_VAR = "WAYBARCTL_CONFIG"


def user_config_path() -> Path:
    xdg = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "waybarctl" / CONFIG_FILENAME


def find_config(start: Path | None = None) -> Path | None:
    """Return the settings file to use, or None if there is none."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path)
        if p.is_file():
            return p
        return None

    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent

    user_path = user_config_path()
    return user_path if user_path.is_file() else None
