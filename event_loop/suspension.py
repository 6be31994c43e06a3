"""Tracked-await bookkeeping.

The waiting count is the only way the driver can tell that a computation is
still logically alive while nothing is queued for it.
"""

# =============================================================================
# 1. IMPORTS
# =============================================================================

from __future__ import annotations

# Standard library
import typing as t
from dataclasses import dataclass

if t.TYPE_CHECKING:
    from event_loop.future import Future

# =============================================================================
# 2. SUSPENSION TRACKER
# =============================================================================


class SuspensionTracker:
    """Counter of futures currently awaited through a tracked await."""

    def __init__(self) -> None:
        self._count = 0

    def enter(self) -> None:
        self._count += 1

    def leave(self) -> None:
        if self._count == 0:
            raise RuntimeError("leave() called with no tracked await in flight")
        self._count -= 1

    @property
    def count(self) -> int:
        return self._count

    def is_idle(self) -> bool:
        return self._count == 0


# =============================================================================
# 3. AWAIT MARKERS
# =============================================================================


@dataclass(frozen=True)
class TrackedAwait:
    """Marker yielded from an async function to await a future with tracking."""

    future: Future[t.Any]


def await_tracked(future: Future[t.Any]) -> TrackedAwait:
    """Wrap a future so awaiting it holds the loop open.

    Usage inside a function started with ``EventLoop.spawn``::

        value = yield await_tracked(future)

    Args:
        future: Future to await.

    Returns:
        Marker understood by the async function runner.
    """
    return TrackedAwait(future)
