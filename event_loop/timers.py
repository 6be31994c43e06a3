"""Virtual timer registry.

Timers count down in virtual milliseconds. Expired timers are removed and
their tasks handed to the macrotask queue in insertion order.
"""

# =============================================================================
# 1. IMPORTS
# =============================================================================

# Standard library
from collections.abc import Callable

# Project/local
from logging_config import get_logger
from scheduler_types import Task, Timer

logger = get_logger(__name__)

# =============================================================================
# 2. TIMER REGISTRY
# =============================================================================


class TimerRegistry:
    """Set of pending virtual timers, kept in insertion order."""

    def __init__(self, on_expire: Callable[[Task], None]) -> None:
        """Initialise registry.

        Args:
            on_expire: Receives each expired timer's task (the driver passes
                its macrotask enqueue operation).
        """
        self._on_expire = on_expire
        self._timers: list[Timer] = []
        self._next_id = 0
        self.fired = 0

    def schedule(self, task: Task, duration_ms: float) -> int:
        """Register a timer.

        Args:
            task: Task to enqueue on expiry.
            duration_ms: Virtual milliseconds until expiry.

        Returns:
            Timer identifier, unique within this registry.
        """
        timer = Timer(timer_id=self._next_id, remaining=duration_ms, task=task)
        self._next_id += 1
        self._timers.append(timer)
        logger.debug(
            f"Timer {timer.timer_id} ({task.label}) scheduled for {duration_ms:.0f}ms"
        )
        return timer.timer_id

    def advance(self, tick_size_ms: float) -> int:
        """Decrement every timer and promote the expired ones.

        Args:
            tick_size_ms: Virtual milliseconds elapsed.

        Returns:
            Number of timers that expired.
        """
        still_pending: list[Timer] = []
        expired: list[Timer] = []
        for timer in self._timers:
            timer.remaining -= tick_size_ms
            if timer.is_expired():
                expired.append(timer)
            else:
                still_pending.append(timer)
        self._timers = still_pending

        for timer in expired:
            logger.debug(f"Timer {timer.timer_id} ({timer.task.label}) expired")
            self._on_expire(timer.task)

        self.fired += len(expired)
        return len(expired)

    def is_idle(self) -> bool:
        """Check whether no timers are pending.

        Returns:
            True iff the registry holds zero timers.
        """
        return not self._timers

    def __len__(self) -> int:
        return len(self._timers)

    def pending(self) -> list[Timer]:
        """Snapshot of pending timers in insertion order."""
        return list(self._timers)
