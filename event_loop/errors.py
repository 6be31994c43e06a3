"""Exceptions raised by the event loop simulator."""

# =============================================================================
# 1. IMPORTS
# =============================================================================

# Standard library
import typing as t

# =============================================================================
# 2. EXCEPTIONS
# =============================================================================


class EventLoopError(Exception):
    """Base class for all simulator errors."""


class TaskExecutionError(EventLoopError):
    """A task outside any Future raised; the simulation cannot continue.

    Attributes:
        label: Label of the failing task.
        tick: Tick on which the task ran.
    """

    def __init__(self, label: str, tick: int, error: BaseException) -> None:
        super().__init__(
            f"Task '{label}' failed on tick {tick}: {type(error).__name__}: {error}"
        )
        self.label = label
        self.tick = tick


class FutureRejectedError(EventLoopError):
    """Raised at an await point when the rejection reason is not an exception.

    Attributes:
        reason: The original rejection value.
    """

    def __init__(self, reason: t.Any) -> None:
        super().__init__(f"Future rejected with {reason!r}")
        self.reason = reason


class LoopStalledError(EventLoopError):
    """The loop hit its configured tick limit without terminating."""

    def __init__(self, max_ticks: int, waiting_count: int, pending_timers: int) -> None:
        super().__init__(
            f"Event loop did not terminate within {max_ticks} ticks "
            f"(promise: {waiting_count}, api: {pending_timers})"
        )
        self.max_ticks = max_ticks
        self.waiting_count = waiting_count
        self.pending_timers = pending_timers


class LoopStateError(EventLoopError):
    """Operation not valid in the loop's current state."""
