"""Tick-driven scheduler driver.

This module implements the event loop itself. Each tick runs exactly one
macrotask followed by a full microtask drain, or, if no macrotask is queued,
checks whether the simulation is finished. Virtual timers are then advanced
by one tick. The loop terminates only when the macrotask queue, the
microtask queue and the timer registry are all empty and no tracked await is
in flight.
"""

# =============================================================================
# 1. IMPORTS
# =============================================================================

from __future__ import annotations

# Standard library
import inspect
import typing as t
from collections.abc import Callable
from dataclasses import dataclass

# Project/local
from constants import (
    MS_PER_SECOND,
    ROOT_TASK_LABEL,
    TIMER_LABEL,
    UNNAMED_LABEL,
    LoopState,
)
from event_loop.base import TaskScheduler
from event_loop.coroutines import AsyncFunction
from event_loop.errors import LoopStalledError, LoopStateError, TaskExecutionError
from event_loop.future import Future, Initializer
from event_loop.queues import TaskQueues
from event_loop.suspension import SuspensionTracker
from event_loop.timers import TimerRegistry
from logging_config import LogSink, StatusLineSink, get_logger
from scheduler_types import Callback, LoopConfig, RunSummary, Task, TickRecord

logger = get_logger(__name__)

# =============================================================================
# 2. SCHEDULER STATE
# =============================================================================


@dataclass
class SchedulerState:
    """All mutable shared state of one loop.

    Attributes:
        queues: Macrotask and microtask queues.
        timers: Pending virtual timers.
        suspensions: Tracked awaits in flight.
    """

    queues: TaskQueues
    timers: TimerRegistry
    suspensions: SuspensionTracker

    @classmethod
    def create(cls) -> SchedulerState:
        """Build empty state with timers wired to the macrotask queue."""
        queues = TaskQueues()
        return cls(
            queues=queues,
            timers=TimerRegistry(on_expire=queues.enqueue_macro),
            suspensions=SuspensionTracker(),
        )


# =============================================================================
# 3. EVENT LOOP
# =============================================================================


class EventLoop(TaskScheduler):
    """Deterministic single-threaded event loop over virtual time."""

    def __init__(
        self,
        config: LoopConfig | None = None,
        sink: LogSink | None = None,
        name: str = UNNAMED_LABEL,
    ) -> None:
        """Initialise event loop.

        Args:
            config: Loop configuration (defaults to LoopConfig()).
            sink: Receives the live idle status line (defaults to stdout).
            name: Label used in logs and in the run summary.
        """
        self.config = config if config is not None else LoopConfig()
        self.name = name
        self._sink: LogSink = sink if sink is not None else StatusLineSink()
        self._state = SchedulerState.create()
        self._loop_state = LoopState.IDLE
        self._tick = 0
        self._idle_ms = 0.0
        self._status_line_open = False
        self._summary = RunSummary(scenario=name)

    # -------------------------------------------------------------------------
    # Narrow operations used by futures, timers and async functions
    # -------------------------------------------------------------------------

    def queue_microtask(self, task: Task) -> None:
        self._state.queues.enqueue_micro(task)

    def queue_macrotask(self, task: Task) -> None:
        self._state.queues.enqueue_macro(task)

    def set_timeout(
        self, callback: Callback, delay_ms: float, label: str = TIMER_LABEL
    ) -> int:
        return self._state.timers.schedule(Task(callback, label), delay_ms)

    @property
    def suspensions(self) -> SuspensionTracker:
        return self._state.suspensions

    # -------------------------------------------------------------------------
    # Future helpers
    # -------------------------------------------------------------------------

    def create_future(
        self, initializer: Initializer | None = None, name: str = UNNAMED_LABEL
    ) -> Future[t.Any]:
        """Create a Future bound to this loop.

        Args:
            initializer: Called synchronously with ``resolve`` and ``reject``.
            name: Label for logging.

        Returns:
            New Future.
        """
        return Future(self, initializer, name=name)

    def sleep(
        self, delay_ms: float, value: t.Any = None, name: str = "sleep"
    ) -> Future[t.Any]:
        """Future that resolves with ``value`` once a virtual timer fires.

        Args:
            delay_ms: Virtual milliseconds to wait.
            value: Resolution value.
            name: Label for the Future and its timer.

        Returns:
            Timer-backed Future.
        """

        def start(resolve: Callable[..., None], _reject: Callable[..., None]) -> None:
            self.set_timeout(lambda: resolve(value), delay_ms, label=f"{name}.{TIMER_LABEL}")

        return Future(self, start, name=name)

    def spawn(
        self, fn: Callable[..., t.Any], *args: t.Any, name: str | None = None
    ) -> Future[t.Any]:
        """Call an async function (a generator function) and return its Future.

        The function body runs synchronously up to its first ``yield``. A
        plain function is accepted too; its return value resolves the Future
        and an exception it raises rejects it. A returned Future is followed.

        Args:
            fn: Generator function yielding Futures or ``await_tracked`` markers.
            *args: Arguments passed to ``fn``.
            name: Label for the returned Future (defaults to the function name).

        Returns:
            Future of the function's result.
        """
        label = name if name is not None else getattr(fn, "__name__", UNNAMED_LABEL)
        try:
            outcome = fn(*args)
        except Exception as exc:
            return Future.rejected(self, exc, name=label)
        if isinstance(outcome, Future):
            return Future.resolved(self, None, name=label).then(lambda _: outcome)
        if not inspect.isgenerator(outcome):
            return Future.resolved(self, outcome, name=label)
        return AsyncFunction(self, outcome, label).future

    # -------------------------------------------------------------------------
    # Introspection
    # -------------------------------------------------------------------------

    @property
    def loop_state(self) -> LoopState:
        return self._loop_state

    @property
    def tick(self) -> int:
        """Number of ticks executed so far."""
        return self._tick

    @property
    def now_ms(self) -> float:
        """Virtual time elapsed."""
        return self._tick * self.config.tick_size_ms

    @property
    def scheduler_state(self) -> SchedulerState:
        return self._state

    @property
    def summary(self) -> RunSummary:
        return self._summary

    def is_finished(self) -> bool:
        """Evaluate the termination predicate.

        Returns:
            True iff no timers are pending, both queues are empty and no
            tracked await is in flight.
        """
        state = self._state
        return (
            state.timers.is_idle()
            and state.queues.macro_empty
            and state.queues.micro_empty
            and state.suspensions.is_idle()
        )

    # -------------------------------------------------------------------------
    # Driving
    # -------------------------------------------------------------------------

    def run(
        self, root: Callback | None = None, label: str = ROOT_TASK_LABEL
    ) -> RunSummary:
        """Run ticks until the loop terminates.

        Args:
            root: Optional root task, queued as a macrotask before starting.
            label: Label of the root task.

        Returns:
            Summary of the run.

        Raises:
            LoopStateError: If the loop has already terminated.
            TaskExecutionError: If a task outside any Future raises.
            LoopStalledError: If ``max_ticks`` is reached first.
        """
        if self._loop_state == LoopState.TERMINATED:
            raise LoopStateError(f"Event loop '{self.name}' has already terminated")
        if root is not None:
            self.queue_macrotask(Task(root, label))

        self._loop_state = LoopState.RUNNING
        logger.info(
            f"Event loop '{self.name}' started "
            f"(tick={self.config.tick_size_ms:g}ms, "
            f"queued macrotasks={self._state.queues.macro_length})"
        )

        max_ticks = self.config.max_ticks
        while self._loop_state == LoopState.RUNNING:
            if max_ticks is not None and self._tick >= max_ticks:
                self._close_status_line()
                raise LoopStalledError(
                    max_ticks,
                    waiting_count=self._state.suspensions.count,
                    pending_timers=len(self._state.timers),
                )
            self.run_tick()

        return self._summary

    def run_tick(self) -> TickRecord:
        """Execute a single tick.

        Returns:
            Record of what happened during the tick.
        """
        if self._loop_state == LoopState.TERMINATED:
            raise LoopStateError(f"Event loop '{self.name}' has already terminated")
        self._loop_state = LoopState.RUNNING

        tick_size = self.config.tick_size_ms
        queues = self._state.queues
        self._tick += 1
        record = TickRecord(tick=self._tick, now_ms=(self._tick - 1) * tick_size)

        task = queues.dequeue_macro()
        if task is not None:
            self._close_status_line()
            record.macrotask = task.label
            try:
                self._execute(task)
                record.microtasks_run = queues.drain_micro(self._execute)
            except TaskExecutionError:
                self._finish_record(record)
                raise
            self._summary.macrotasks_run += 1
            self._summary.microtasks_run += record.microtasks_run
            self._idle_ms = 0.0
        elif self.is_finished():
            self._terminate(record)
            return record
        else:
            self._record_idle_tick()

        self._summary.timers_fired += self._state.timers.advance(tick_size)
        self._finish_record(record)
        return record

    # =========================================================================
    # PRIVATE HELPERS
    # =========================================================================

    def _execute(self, task: Task) -> None:
        """Run one task; failures here are outside any Future and fatal."""
        logger.debug(f"run {task.label}")
        try:
            task.run()
        except Exception as exc:
            self._close_status_line()
            self._loop_state = LoopState.TERMINATED
            logger.error(f"Task '{task.label}' failed on tick {self._tick}: {exc!r}")
            raise TaskExecutionError(task.label, self._tick, exc) from exc

    def _record_idle_tick(self) -> None:
        tick_size = self.config.tick_size_ms
        self._idle_ms += tick_size
        self._summary.total_idle_ms += tick_size
        self._summary.max_idle_ms = max(self._summary.max_idle_ms, self._idle_ms)

        if self.config.status_line:
            self._sink.write(
                f"EventLoop: Idle for {self._idle_ms / MS_PER_SECOND:g} seconds "
                f"(promise: {self._state.suspensions.count}, "
                f"api: {len(self._state.timers)})"
            )
            self._status_line_open = True

    def _close_status_line(self) -> None:
        if self._status_line_open:
            self._sink.write("\n")
            self._status_line_open = False

    def _terminate(self, record: TickRecord) -> None:
        self._close_status_line()
        self._loop_state = LoopState.TERMINATED
        self._summary.terminated = True
        self._finish_record(record)
        logger.info(
            f"Event loop terminated after {self._summary.ticks} ticks "
            f"({self.now_ms:.0f}ms virtual, "
            f"{self._summary.macrotasks_run} macrotasks, "
            f"{self._summary.microtasks_run} microtasks)"
        )

    def _finish_record(self, record: TickRecord) -> None:
        state = self._state
        record.macro_queue_length = state.queues.macro_length
        record.pending_timers = len(state.timers)
        record.waiting_count = state.suspensions.count
        record.idle_ms = self._idle_ms

        self._summary.ticks = self._tick
        self._summary.virtual_time_ms = self.now_ms
        if self.config.record_trace:
            self._summary.trace.append(record)
