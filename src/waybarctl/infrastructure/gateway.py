"""File I/O Gateway — Waybar paths, config files, backups, and the Waybar process.

The store talks to the outside world only through :class:`ConfigGateway`.
:class:`LocalGateway` is the real implementation: file access runs in a
worker thread, process control shells out to ``pgrep`` / ``pkill``.

INVARIANT: Every overwrite of an existing file is preceded by a copy named
``<file>.backup.<YYYYMMDDTHHMMSS>`` in the same directory (``-N`` is
appended when that name is already taken).

All failures raise :class:`GatewayError`. "Waybar is not running" is not a
failure: :meth:`LocalGateway.reload` returns False instead.
"""

from __future__ import annotations

import logging
import os
import shutil
import signal
import subprocess
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Protocol

import anyio

from waybarctl.domain.types import Compositor

logger = logging.getLogger(__name__)

WAYBAR_PROCESS = "waybar"
RELOAD_SIGNAL = signal.SIGUSR2
CONFIG_FILE_CANDIDATES = ("config.jsonc", "config")
DEFAULT_STYLE_FILE = "style.css"
BACKUP_MARKER = ".backup."
BACKUP_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S"

# Probed in this order when the environment does not name the compositor.
COMPOSITOR_PROCESSES: tuple[tuple[str, Compositor], ...] = (
    ("Hyprland", Compositor.HYPRLAND),
    ("sway", Compositor.SWAY),
    ("river", Compositor.RIVER),
    ("dwl", Compositor.DWL),
    ("niri", Compositor.NIRI),
)


class GatewayError(Exception):
    """An I/O or process-control operation failed."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path


@dataclass(frozen=True)
class ConfigPaths:
    """Resolved Waybar file locations."""

    config_dir: Path
    config_file: Path
    style_file: Path

    def to_dict(self) -> dict[str, str]:
        return {
            "config_dir": str(self.config_dir),
            "config_file": str(self.config_file),
            "style_file": str(self.style_file),
        }


class ConfigGateway(Protocol):
    """Everything the store needs from the host system."""

    async def detect_paths(self) -> ConfigPaths: ...

    async def read_config(self, path: Path) -> str: ...

    async def write_config(self, path: Path, content: str) -> Path | None: ...

    async def read_style(self, path: Path) -> str: ...

    async def write_style(self, path: Path, content: str) -> Path | None: ...

    async def list_backups(self, config_dir: Path) -> list[Path]: ...

    async def restore_backup(self, backup: Path, target: Path) -> Path | None: ...

    async def reload(self) -> bool: ...

    async def is_running(self) -> bool: ...

    async def pids(self) -> list[int]: ...

    async def start(self) -> bool: ...

    async def stop(self) -> bool: ...

    async def restart(self, *, timeout: float = 3.0) -> None: ...

    async def detect_compositor(self) -> Compositor: ...


# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------


def default_config_dir(env: Mapping[str, str] | None = None) -> Path:
    """``$XDG_CONFIG_HOME/waybar``, falling back to ``~/.config/waybar``."""
    env = os.environ if env is None else env
    xdg = env.get("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "waybar"


def backup_path_for(path: Path, when: datetime | None = None) -> Path:
    stamp = (when or datetime.now(UTC)).strftime(BACKUP_TIMESTAMP_FORMAT)
    return path.with_name(f"{path.name}{BACKUP_MARKER}{stamp}")


def _create_backup(path: Path) -> Path | None:
    if not path.exists():
        return None
    base = backup_path_for(path)
    backup = base
    # Never overwrite an earlier backup taken within the same second
    counter = 1
    while backup.exists():
        backup = base.with_name(f"{base.name}-{counter}")
        counter += 1
    shutil.copy2(path, backup)
    logger.debug("Backed up %s to %s", path, backup)
    return backup


def _read_text(path: Path, kind: str) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        msg = f"{kind} file not found: {path}"
        raise GatewayError(msg, path=path) from exc
    except OSError as exc:
        msg = f"Cannot read {kind.lower()} file {path}: {exc.strerror or exc}"
        raise GatewayError(msg, path=path) from exc
    except UnicodeDecodeError as exc:
        msg = f"{kind} file {path} is not valid UTF-8"
        raise GatewayError(msg, path=path) from exc


def _write_text(path: Path, content: str) -> Path | None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        backup = _create_backup(path)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot write {path}: {exc.strerror or exc}"
        raise GatewayError(msg, path=path) from exc
    return backup


# ---------------------------------------------------------------------------
# Local implementation
# ---------------------------------------------------------------------------


class LocalGateway:
    """Gateway backed by the local filesystem and process table."""

    def __init__(
        self,
        *,
        config_dir: Path | None = None,
        config_file: str | None = None,
        style_file: str = DEFAULT_STYLE_FILE,
        env: Mapping[str, str] | None = None,
    ) -> None:
        self._config_dir = config_dir
        self._config_file = config_file
        self._style_file = style_file
        self._env = os.environ if env is None else env

    # --- Paths ---

    async def detect_paths(self) -> ConfigPaths:
        config_dir = self._config_dir or default_config_dir(self._env)
        if not await anyio.Path(config_dir).is_dir():
            msg = f"Waybar config directory not found: {config_dir}"
            raise GatewayError(msg, path=config_dir)

        if self._config_file:
            config_file = config_dir / self._config_file
        else:
            config_file = config_dir / CONFIG_FILE_CANDIDATES[0]
            for name in CONFIG_FILE_CANDIDATES:
                if await anyio.Path(config_dir / name).is_file():
                    config_file = config_dir / name
                    break

        return ConfigPaths(
            config_dir=config_dir,
            config_file=config_file,
            style_file=config_dir / self._style_file,
        )

    # --- Files ---

    async def read_config(self, path: Path) -> str:
        return await anyio.to_thread.run_sync(_read_text, path, "Config")

    async def write_config(self, path: Path, content: str) -> Path | None:
        backup = await anyio.to_thread.run_sync(_write_text, path, content)
        logger.info("Wrote config %s", path)
        return backup

    async def read_style(self, path: Path) -> str:
        return await anyio.to_thread.run_sync(_read_text, path, "CSS")

    async def write_style(self, path: Path, content: str) -> Path | None:
        if not content.strip():
            msg = "CSS content cannot be empty"
            raise GatewayError(msg, path=path)
        backup = await anyio.to_thread.run_sync(_write_text, path, content)
        logger.info("Wrote stylesheet %s", path)
        return backup

    # --- Backups ---

    async def list_backups(self, config_dir: Path) -> list[Path]:
        """Backup files in *config_dir*, newest first."""

        def _scan() -> list[Path]:
            try:
                entries = [p for p in config_dir.iterdir() if BACKUP_MARKER in p.name]
            except OSError as exc:
                msg = f"Cannot list {config_dir}: {exc.strerror or exc}"
                raise GatewayError(msg, path=config_dir) from exc
            return sorted(entries, key=_backup_sort_key, reverse=True)

        return await anyio.to_thread.run_sync(_scan)

    async def restore_backup(self, backup: Path, target: Path) -> Path | None:
        """Copy *backup* over *target*, backing up *target* first."""

        def _restore() -> Path | None:
            if not backup.is_file():
                msg = f"Backup file not found: {backup}"
                raise GatewayError(msg, path=backup)
            try:
                previous = _create_backup(target)
                shutil.copy2(backup, target)
            except OSError as exc:
                msg = f"Cannot restore {backup} to {target}: {exc.strerror or exc}"
                raise GatewayError(msg, path=target) from exc
            return previous

        previous = await anyio.to_thread.run_sync(_restore)
        logger.info("Restored %s from %s", target, backup)
        return previous

    # --- Process control ---

    async def _run(self, *args: str) -> subprocess.CompletedProcess[bytes]:
        try:
            return await anyio.run_process(list(args), check=False)
        except OSError as exc:
            msg = f"Failed to execute {args[0]}: {exc}"
            raise GatewayError(msg) from exc

    async def _process_running(self, name: str) -> bool:
        result = await self._run("pgrep", "-x", name)
        return result.returncode == 0

    async def is_running(self) -> bool:
        return await self._process_running(WAYBAR_PROCESS)

    async def pids(self) -> list[int]:
        result = await self._run("pgrep", "-x", WAYBAR_PROCESS)
        if result.returncode != 0:
            return []
        return [int(line) for line in result.stdout.decode().split() if line.isdigit()]

    async def reload(self) -> bool:
        """Signal Waybar to reload config and style. False if it is not running."""
        if not await self.is_running():
            logger.info("Waybar is not running; reload skipped")
            return False
        result = await self._run("pkill", f"-{RELOAD_SIGNAL.name}", "-x", WAYBAR_PROCESS)
        stderr = result.stderr.decode().strip()
        if result.returncode != 0 and stderr:
            msg = f"Failed to reload Waybar: {stderr}"
            raise GatewayError(msg)
        logger.info("Sent %s to waybar", RELOAD_SIGNAL.name)
        return True

    async def start(self) -> bool:
        """Launch Waybar in the background. False if it was already running."""
        if await self.is_running():
            return False

        def _spawn() -> None:
            subprocess.Popen(
                [WAYBAR_PROCESS],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )

        try:
            await anyio.to_thread.run_sync(_spawn)
        except OSError as exc:
            msg = f"Failed to start Waybar: {exc}"
            raise GatewayError(msg) from exc
        logger.info("Started waybar")
        return True

    async def stop(self) -> bool:
        """Terminate Waybar. False if it was not running."""
        if not await self.is_running():
            return False
        result = await self._run("pkill", "-x", WAYBAR_PROCESS)
        stderr = result.stderr.decode().strip()
        if result.returncode != 0 and stderr:
            msg = f"Failed to stop Waybar: {stderr}"
            raise GatewayError(msg)
        logger.info("Stopped waybar")
        return True

    async def restart(self, *, timeout: float = 3.0) -> None:
        await self.stop()
        with anyio.move_on_after(timeout):
            while await self.is_running():
                await anyio.sleep(0.1)
        if await self.is_running():
            msg = f"Waybar did not exit within {timeout:g}s"
            raise GatewayError(msg)
        await self.start()

    # --- Environment ---

    async def detect_compositor(self) -> Compositor:
        """Identify the running Wayland compositor.

        Requires ``WAYLAND_DISPLAY``. Tries ``XDG_CURRENT_DESKTOP``, then
        ``WAYLAND_COMPOSITOR``, then looks for a known compositor process.
        """
        if not self._env.get("WAYLAND_DISPLAY"):
            return Compositor.UNKNOWN

        for var in ("XDG_CURRENT_DESKTOP", "WAYLAND_COMPOSITOR"):
            value = self._env.get(var)
            if not value:
                continue
            # XDG_CURRENT_DESKTOP may be a colon-separated list
            for part in value.split(":"):
                compositor = Compositor.from_name(part)
                if compositor is not Compositor.UNKNOWN:
                    return compositor

        for process, compositor in COMPOSITOR_PROCESSES:
            try:
                if await self._process_running(process):
                    return compositor
            except GatewayError:
                logger.debug("Process probe for %s failed", process, exc_info=True)
                break
        return Compositor.UNKNOWN


def describe_backup(path: Path) -> dict[str, Any]:
    """Backup listing row: name, original file, timestamp (ISO) when parseable."""
    original, _, stamp = path.name.partition(BACKUP_MARKER)
    stamp = stamp.partition("-")[0]
    created: str | None
    try:
        created = datetime.strptime(stamp, BACKUP_TIMESTAMP_FORMAT).replace(tzinfo=UTC).isoformat()
    except ValueError:
        created = None
    return {"name": path.name, "path": str(path), "original": original, "created_at": created}


def _backup_sort_key(path: Path) -> tuple[str, int, str]:
    """Order by timestamp, then collision counter; unparseable stamps sort oldest."""
    counter = path.name.partition(BACKUP_MARKER)[2].partition("-")[2]
    created = describe_backup(path)["created_at"] or ""
    return created, int(counter) if counter.isdigit() else 0, path.name
