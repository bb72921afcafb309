"""AppContext — shared Click context for all commands.

Created once by the root CLI group and passed to subcommands with
``@click.pass_obj``. Builds the gateway and store lazily so ``--help``
never touches the state file, persists the session after successful
mutations, and routes results to stdout/stderr with the right exit code.
"""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TYPE_CHECKING, Any

import anyio
import click

from waybarctl.config.logging import configure_logging
from waybarctl.infrastructure.gateway import LocalGateway
from waybarctl.infrastructure.state import StateError, StateFile, default_state_path
from waybarctl.output.formatters import OutputSettings, format_result
from waybarctl.services.store import ConfigStore

if TYPE_CHECKING:
    from waybarctl.config.settings import WaybarSettings
    from waybarctl.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy."""

    def __init__(self, settings: WaybarSettings) -> None:
        self.settings = settings
        self._gateway: LocalGateway | None = None
        self._store: ConfigStore | None = None
        configure_logging(
            verbose=settings.verbose, quiet=settings.quiet, log_json=settings.log_json
        )

    @property
    def gateway(self) -> LocalGateway:
        if self._gateway is None:
            paths = self.settings.paths
            self._gateway = LocalGateway(
                config_dir=paths.config_dir,
                config_file=paths.config_file,
                style_file=paths.style_file,
            )
        return self._gateway

    @property
    def state_file(self) -> StateFile:
        return StateFile(self.settings.state.path or default_state_path())

    @property
    def store(self) -> ConfigStore:
        """The session store, resumed from the state file on first access."""
        if self._store is None:
            try:
                session = self.state_file.load()
            except StateError as exc:
                raise click.ClickException(str(exc)) from exc
            self._store = ConfigStore(
                self.gateway,
                history_limit=self.settings.history.limit,
                debounce_delay=self.settings.validation.debounce_ms / 1000,
                state=session,
            )
        return self._store

    def run[T](self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Run an async gateway or store call to completion."""
        return anyio.run(functools.partial(func, *args, **kwargs))

    def resolve_bar(self, bar_id: str | None) -> str:
        """Explicit ``--bar`` wins; otherwise the session's current bar."""
        if bar_id:
            return bar_id
        current = self.store.current_bar_id
        if current is None:
            msg = "No bar selected. Pass --bar or run 'waybarctl bar select ID'."
            raise click.UsageError(msg)
        return current

    def persist(self) -> None:
        if self._store is None:
            return
        self._store.close()
        try:
            self.state_file.save(self._store.session_state())
        except StateError as exc:
            raise click.ClickException(str(exc)) from exc

    def commit(self, result: ServiceResult) -> None:
        """Persist the session after a successful mutation, then emit.

        Runs the pending validation pass so problems introduced by this
        change are reported right away as a warning.
        """
        if result.ok:
            validation = self.store.flush_validation()
            if validation is not None and not validation.success:
                note = (
                    f"Configuration now has {validation.error_count} validation error(s); "
                    "run 'waybarctl validate' for details"
                )
                result = result.model_copy(update={"warnings": [*result.warnings, note]})
            self.persist()
        self.emit(result)

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success: stdout; warnings go to stderr so piped output stays clean.
        * Failure: stderr, exit code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)

    def write_output(self, path: Path, content: str) -> None:
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            msg = f"Cannot write {path}: {exc.strerror or exc}"
            raise click.ClickException(msg) from exc
