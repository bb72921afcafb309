"""History Engine — bounded linear undo/redo over immutable snapshots.

Snapshots are references to frozen aggregates, not copies: consecutive
snapshots share every bar, module, and style that did not change.

Semantics:

- :meth:`HistoryEngine.record` is called with the state *before* a
  mutation. It pushes that state onto the past stack (evicting the oldest
  entry over the limit) and clears the future stack.
- While paused, :meth:`record` does nothing. A paused multi-step sequence
  therefore costs at most the one snapshot recorded before pausing.
- :meth:`undo` / :meth:`redo` take the current state and return the state
  to restore, or None when the corresponding stack is empty.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from contextlib import contextmanager

DEFAULT_HISTORY_LIMIT = 50


class HistoryEngine[T]:
    """Past/future stacks of snapshots of type ``T``."""

    def __init__(
        self,
        limit: int = DEFAULT_HISTORY_LIMIT,
        *,
        past: list[T] | None = None,
        future: list[T] | None = None,
    ) -> None:
        if limit < 1:
            msg = f"History limit must be positive, got {limit}"
            raise ValueError(msg)
        self._limit = limit
        self._past: deque[T] = deque(past or [], maxlen=limit)
        self._future: list[T] = list(future or [])
        self._paused = False

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def can_undo(self) -> bool:
        return bool(self._past)

    @property
    def can_redo(self) -> bool:
        return bool(self._future)

    @property
    def undo_count(self) -> int:
        return len(self._past)

    @property
    def redo_count(self) -> int:
        return len(self._future)

    @property
    def past(self) -> list[T]:
        """Past snapshots, oldest first."""
        return list(self._past)

    @property
    def future(self) -> list[T]:
        """Future snapshots, the next redo target last."""
        return list(self._future)

    # ------------------------------------------------------------------
    # Recording
    # ------------------------------------------------------------------

    def record(self, snapshot: T) -> None:
        """Record the state preceding a mutation."""
        if self._paused:
            return
        self._past.append(snapshot)
        self._future.clear()

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    @contextmanager
    def paused_block(self) -> Iterator[None]:
        """Suspend recording for the duration of the block."""
        was_paused = self._paused
        self._paused = True
        try:
            yield
        finally:
            self._paused = was_paused

    def clear(self) -> None:
        self._past.clear()
        self._future.clear()

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def undo(self, current: T) -> T | None:
        if not self._past:
            return None
        previous = self._past.pop()
        self._future.append(current)
        return previous

    def redo(self, current: T) -> T | None:
        if not self._future:
            return None
        following = self._future.pop()
        self._past.append(current)
        return following
