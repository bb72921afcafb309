"""Commands: undo, redo, history."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from waybarctl.commands._base import WbCommand
from waybarctl.services.result import ServiceResult

if TYPE_CHECKING:
    from collections.abc import Callable

    from waybarctl.commands._context import AppContext


@click.command(cls=WbCommand)
@click.option("-n", "--steps", type=click.IntRange(min=1), default=1, help="How many steps.")
@click.pass_obj
def undo(app: AppContext, steps: int) -> None:
    """Revert the last change."""
    _step(app, app.store.undo, steps)


@click.command(cls=WbCommand)
@click.option("-n", "--steps", type=click.IntRange(min=1), default=1, help="How many steps.")
@click.pass_obj
def redo(app: AppContext, steps: int) -> None:
    """Re-apply the last undone change."""
    _step(app, app.store.redo, steps)


def _step(app: AppContext, action: Callable[[], ServiceResult], steps: int) -> None:
    # Stop at the first empty stack, but keep the steps already taken.
    result = action()
    for _ in range(steps - 1):
        if not result.ok:
            break
        following = action()
        if not following.ok:
            break
        result = following
    app.commit(result)


@click.command("history", cls=WbCommand)
@click.pass_obj
def history_cmd(app: AppContext) -> None:
    """Show how many undo and redo steps are available."""
    store = app.store
    data = {**store.history_info(), "dirty": store.dirty}
    app.emit(ServiceResult(ok=True, op="history", data=data))
