"""Macrotask and microtask queues.

Both queues are strict FIFO. Tasks are popped before they run, so a task
never executes while it is still queued.
"""

# =============================================================================
# 1. IMPORTS
# =============================================================================

# Standard library
from collections import deque
from collections.abc import Callable

# Project/local
from logging_config import get_logger
from scheduler_types import Task

logger = get_logger(__name__)

# =============================================================================
# 2. TASK QUEUES
# =============================================================================


class TaskQueues:
    """The two ordered task queues of the loop."""

    def __init__(self) -> None:
        """Initialise empty queues."""
        self._micro: deque[Task] = deque()
        self._macro: deque[Task] = deque()

    def enqueue_micro(self, task: Task) -> None:
        """Append a microtask.

        Args:
            task: Task to append.
        """
        logger.debug(f"queue microtask {task.label}")
        self._micro.append(task)

    def enqueue_macro(self, task: Task) -> None:
        """Append a macrotask.

        Args:
            task: Task to append.
        """
        logger.debug(f"queue macrotask {task.label}")
        self._macro.append(task)

    def dequeue_macro(self) -> Task | None:
        """Remove the oldest macrotask.

        Returns:
            The task, or None if the queue is empty.
        """
        if not self._macro:
            return None
        return self._macro.popleft()

    def drain_micro(self, run: Callable[[Task], None]) -> int:
        """Run microtasks until the queue is empty.

        Microtasks appended while draining run in the same drain, after
        everything queued before them.

        Args:
            run: Executes one task (the driver supplies its error handling).

        Returns:
            Number of microtasks executed.
        """
        count = 0
        while self._micro:
            task = self._micro.popleft()
            run(task)
            count += 1
        return count

    @property
    def micro_empty(self) -> bool:
        return not self._micro

    @property
    def macro_empty(self) -> bool:
        return not self._macro

    @property
    def micro_length(self) -> int:
        return len(self._micro)

    @property
    def macro_length(self) -> int:
        return len(self._macro)

    def macro_labels(self) -> list[str]:
        """Labels of queued macrotasks, oldest first."""
        return [task.label for task in self._macro]
