"""Single-slot debounce timer.

Each :meth:`Debouncer.trigger` replaces the pending call rather than
stacking another one, so only the last trigger in a burst runs.

Inside a running asyncio event loop the call is scheduled with
``loop.call_later``. Outside one (plain synchronous CLI use) there is no
clock to wait on, so the call stays pending until :meth:`flush` runs it
or :meth:`cancel` drops it.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Debouncer:
    """Coalesce bursts of triggers into one delayed call."""

    def __init__(self, callback: Callable[[], object], delay: float) -> None:
        self._callback = callback
        self._delay = delay
        self._handle: asyncio.TimerHandle | None = None
        self._pending = False

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def pending(self) -> bool:
        return self._pending

    def trigger(self) -> None:
        """(Re)start the timer."""
        self._cancel_handle()
        self._pending = True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        self._handle = loop.call_later(self._delay, self._fire)

    def flush(self) -> bool:
        """Run the pending call now. Returns False if nothing was pending."""
        if not self._pending:
            return False
        self._cancel_handle()
        self._fire()
        return True

    def cancel(self) -> None:
        self._cancel_handle()
        self._pending = False

    def _cancel_handle(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._pending = False
        logger.debug("Debounced call firing after %.3fs", self._delay)
        self._callback()
