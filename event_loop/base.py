"""Base scheduler interface.

This module defines the abstract base class for the narrow operations that
futures, timers, and async functions use to request work from the loop that
owns the shared queues.
"""

# =============================================================================
# 1. IMPORTS
# =============================================================================

from __future__ import annotations

# Standard library
import typing as t
from abc import ABC, abstractmethod

# Project/local
from constants import TIMER_LABEL
from scheduler_types import Callback, Task

if t.TYPE_CHECKING:
    from event_loop.suspension import SuspensionTracker

# =============================================================================
# 2. BASE SCHEDULER
# =============================================================================


class TaskScheduler(ABC):
    """Abstract base class for anything that can accept queued work."""

    @abstractmethod
    def queue_microtask(self, task: Task) -> None:
        """Append a task to the microtask queue.

        Args:
            task: Task to run before the next macrotask.
        """
        raise NotImplementedError

    @abstractmethod
    def queue_macrotask(self, task: Task) -> None:
        """Append a task to the macrotask queue.

        Args:
            task: Task to run on a later tick.
        """
        raise NotImplementedError

    @abstractmethod
    def set_timeout(
        self, callback: Callback, delay_ms: float, label: str = TIMER_LABEL
    ) -> int:
        """Register a virtual timer.

        Args:
            callback: Zero-argument callable run as a macrotask on expiry.
            delay_ms: Virtual milliseconds until expiry.
            label: Name for logs and traces.

        Returns:
            Timer identifier.
        """
        raise NotImplementedError

    @property
    @abstractmethod
    def suspensions(self) -> SuspensionTracker:
        """Counter of tracked awaits currently in flight."""
        raise NotImplementedError
