"""Core data types for the event loop simulator.

This module defines the data structures shared across the simulator: queued
tasks, the settlement result union, future handlers, virtual timers, loop
configuration, and the per-tick trace and run summary records.
"""

# =============================================================================
# 1. IMPORTS
# =============================================================================

from __future__ import annotations

# Standard library
import typing as t
from collections.abc import Callable
from dataclasses import dataclass, field

# Project/local
from constants import (
    DEFAULT_TICK_SIZE_MS,
    UNNAMED_LABEL,
    MetricField,
    TraceField,
)

# =============================================================================
# 2. TYPES & CONSTANTS
# =============================================================================

T = t.TypeVar("T")

Callback = Callable[[], t.Any]

# =============================================================================
# 3. TASKS
# =============================================================================


@dataclass(frozen=True)
class Task:
    """A queued unit of work.

    Attributes:
        callback: Zero-argument callable to execute.
        label: Human-readable name used only for logging and traces.
    """

    callback: Callback
    label: str = UNNAMED_LABEL

    def run(self) -> t.Any:
        """Execute the task's callback."""
        return self.callback()


# =============================================================================
# 4. SETTLEMENT RESULT
# =============================================================================


@dataclass(frozen=True)
class Ok(t.Generic[T]):
    """Successful settlement carrying a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    """Failed settlement carrying a rejection reason.

    The reason is usually an exception, but any value is accepted the same
    way a reject function in an event-driven runtime accepts any value.
    """

    error: t.Any

    @property
    def is_ok(self) -> bool:
        return False


Result = Ok | Err


# =============================================================================
# 5. FUTURE HANDLERS
# =============================================================================


@dataclass
class Handler:
    """One `then` registration waiting for its parent to settle.

    Attributes:
        on_fulfilled: Called with the value if the parent resolves.
        on_rejected: Called with the reason if the parent rejects.
        settle_child: Settles the Future returned by `then`.
    """

    on_fulfilled: Callable[[t.Any], t.Any] | None
    on_rejected: Callable[[t.Any], t.Any] | None
    settle_child: Callable[[Result], None]


# =============================================================================
# 6. VIRTUAL TIMERS
# =============================================================================


@dataclass
class Timer:
    """A pending virtual timer.

    Attributes:
        timer_id: Unique identifier within its registry.
        remaining: Virtual milliseconds left before expiry.
        task: Task handed to the macrotask queue on expiry.
    """

    timer_id: int
    remaining: float
    task: Task

    def is_expired(self) -> bool:
        """Check whether the timer has run down.

        Returns:
            True if remaining time is zero or negative.
        """
        return self.remaining <= 0.0


# =============================================================================
# 7. LOOP CONFIGURATION
# =============================================================================


@dataclass
class LoopConfig:
    """Configuration for the scheduler driver.

    Attributes:
        tick_size_ms: Virtual milliseconds per tick; also the timer decrement.
        max_ticks: Abort with LoopStalledError after this many ticks (None
            runs until the termination predicate holds).
        record_trace: Keep a TickRecord for every tick.
        status_line: Write the live idle status line to the sink.
    """

    tick_size_ms: float = DEFAULT_TICK_SIZE_MS
    max_ticks: int | None = None
    record_trace: bool = True
    status_line: bool = True

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.tick_size_ms <= 0:
            raise ValueError(f"tick_size_ms must be positive, got {self.tick_size_ms}")
        if self.max_ticks is not None and self.max_ticks <= 0:
            raise ValueError(f"max_ticks must be positive, got {self.max_ticks}")


# =============================================================================
# 8. TRACE & SUMMARY
# =============================================================================


@dataclass
class TickRecord:
    """What the driver did during one tick.

    Attributes:
        tick: Tick index, starting at 1.
        now_ms: Virtual time at the start of the tick.
        macrotask: Label of the macrotask run (None on an idle tick).
        microtasks_run: Microtasks drained after the macrotask.
        macro_queue_length: Macrotasks still queued after timers advanced.
        pending_timers: Timers left in the registry after timers advanced.
        waiting_count: Tracked awaits in flight at the end of the tick.
        idle_ms: Accumulated idle time at the end of the tick.
    """

    tick: int
    now_ms: float
    macrotask: str | None = None
    microtasks_run: int = 0
    macro_queue_length: int = 0
    pending_timers: int = 0
    waiting_count: int = 0
    idle_ms: float = 0.0

    def to_dict(self) -> dict[str, t.Any]:
        """Convert to dictionary using StrEnum field names.

        Returns:
            Dictionary representation.
        """
        return {
            TraceField.TICK: self.tick,
            TraceField.NOW_MS: self.now_ms,
            TraceField.MACROTASK: self.macrotask,
            TraceField.MICROTASKS_RUN: self.microtasks_run,
            TraceField.MACRO_QUEUE_LENGTH: self.macro_queue_length,
            TraceField.PENDING_TIMERS: self.pending_timers,
            TraceField.WAITING_COUNT: self.waiting_count,
            TraceField.IDLE_MS: self.idle_ms,
        }

    @classmethod
    def from_dict(cls, data: dict[str, t.Any]) -> TickRecord:
        """Create TickRecord from dictionary.

        Args:
            data: Dictionary with tick record data.

        Returns:
            TickRecord instance.
        """
        return cls(
            tick=int(data[TraceField.TICK]),
            now_ms=float(data[TraceField.NOW_MS]),
            macrotask=data.get(TraceField.MACROTASK),
            microtasks_run=int(data.get(TraceField.MICROTASKS_RUN, 0)),
            macro_queue_length=int(data.get(TraceField.MACRO_QUEUE_LENGTH, 0)),
            pending_timers=int(data.get(TraceField.PENDING_TIMERS, 0)),
            waiting_count=int(data.get(TraceField.WAITING_COUNT, 0)),
            idle_ms=float(data.get(TraceField.IDLE_MS, 0.0)),
        )


@dataclass
class RunSummary:
    """Aggregate statistics for one driver run.

    Attributes:
        scenario: Name of the scenario or root task that was run.
        ticks: Number of ticks executed, including the terminating one.
        virtual_time_ms: Virtual time elapsed.
        macrotasks_run: Macrotasks executed.
        microtasks_run: Microtasks executed.
        timers_fired: Timers promoted to the macrotask queue.
        total_idle_ms: Sum of idle time across all idle stretches.
        max_idle_ms: Longest single idle stretch.
        terminated: Whether the termination predicate was reached.
        trace: Per-tick records (empty if tracing was disabled).
    """

    scenario: str = UNNAMED_LABEL
    ticks: int = 0
    virtual_time_ms: float = 0.0
    macrotasks_run: int = 0
    microtasks_run: int = 0
    timers_fired: int = 0
    total_idle_ms: float = 0.0
    max_idle_ms: float = 0.0
    terminated: bool = False
    trace: list[TickRecord] = field(default_factory=lambda: [])

    def to_summary_dict(self) -> dict[str, t.Any]:
        """Convert summary to dictionary using StrEnum field names.

        Returns:
            Dictionary with all summary values (trace excluded).
        """
        return {
            MetricField.SCENARIO: self.scenario,
            MetricField.TICKS: self.ticks,
            MetricField.VIRTUAL_TIME_MS: round(self.virtual_time_ms, 2),
            MetricField.MACROTASKS_RUN: self.macrotasks_run,
            MetricField.MICROTASKS_RUN: self.microtasks_run,
            MetricField.TIMERS_FIRED: self.timers_fired,
            MetricField.TOTAL_IDLE_MS: round(self.total_idle_ms, 2),
            MetricField.MAX_IDLE_MS: round(self.max_idle_ms, 2),
            MetricField.TERMINATED: self.terminated,
        }

    @classmethod
    def from_summary_dict(cls, data: dict[str, t.Any]) -> RunSummary:
        """Create RunSummary from a summary dictionary.

        Args:
            data: Dictionary produced by to_summary_dict.

        Returns:
            RunSummary instance with an empty trace.
        """
        return cls(
            scenario=str(data.get(MetricField.SCENARIO, UNNAMED_LABEL)),
            ticks=int(data[MetricField.TICKS]),
            virtual_time_ms=float(data[MetricField.VIRTUAL_TIME_MS]),
            macrotasks_run=int(data[MetricField.MACROTASKS_RUN]),
            microtasks_run=int(data[MetricField.MICROTASKS_RUN]),
            timers_fired=int(data.get(MetricField.TIMERS_FIRED, 0)),
            total_idle_ms=float(data.get(MetricField.TOTAL_IDLE_MS, 0.0)),
            max_idle_ms=float(data.get(MetricField.MAX_IDLE_MS, 0.0)),
            terminated=bool(data.get(MetricField.TERMINATED, False)),
        )

    def print_summary(self) -> None:
        """Print summary."""
        print(f"\n{self.scenario} run:")
        print("-" * 50)
        print(f"  Ticks: {self.ticks}")
        print(f"  Virtual Time: {self.virtual_time_ms:.0f} ms")
        print(f"  Macrotasks Run: {self.macrotasks_run}")
        print(f"  Microtasks Run: {self.microtasks_run}")
        print(f"  Timers Fired: {self.timers_fired}")
        print(f"  Total Idle: {self.total_idle_ms:.0f} ms")
        print(f"  Longest Idle: {self.max_idle_ms:.0f} ms")
        print(f"  Terminated: {self.terminated}")
