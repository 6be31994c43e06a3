"""Constants and enumerations for the event loop simulator.

This module defines all string constants as StrEnum to ensure type safety
and prevent typos throughout the codebase.
"""

# =============================================================================
# 1. IMPORTS
# =============================================================================

# Standard library
from enum import StrEnum

# =============================================================================
# 2. STATE MACHINES
# =============================================================================


class FutureState(StrEnum):
    """Settlement states of a Future."""

    PENDING = "pending"
    RESOLVED = "resolved"
    REJECTED = "rejected"


class LoopState(StrEnum):
    """Lifecycle states of the scheduler driver."""

    IDLE = "idle"  # Constructed, run() not called yet
    RUNNING = "running"
    TERMINATED = "terminated"


# =============================================================================
# 3. FIELD NAMES
# =============================================================================


class TraceField(StrEnum):
    """Field names for per-tick trace records."""

    TICK = "tick"
    NOW_MS = "now_ms"
    MACROTASK = "macrotask"
    MICROTASKS_RUN = "microtasks_run"
    MACRO_QUEUE_LENGTH = "macro_queue_length"
    PENDING_TIMERS = "pending_timers"
    WAITING_COUNT = "waiting_count"
    IDLE_MS = "idle_ms"


class MetricField(StrEnum):
    """Field names for run summaries."""

    SCENARIO = "scenario"
    TICKS = "ticks"
    VIRTUAL_TIME_MS = "virtual_time_ms"
    MACROTASKS_RUN = "macrotasks_run"
    MICROTASKS_RUN = "microtasks_run"
    TIMERS_FIRED = "timers_fired"
    TOTAL_IDLE_MS = "total_idle_ms"
    MAX_IDLE_MS = "max_idle_ms"
    TERMINATED = "terminated"


class TraceFileField(StrEnum):
    """Top-level keys of a saved trace file."""

    SUMMARY = "summary"
    TICKS = "ticks"


# =============================================================================
# 4. SCENARIOS
# =============================================================================


class ScenarioName(StrEnum):
    """Built-in root task scenarios."""

    TIMER_CHAIN = "timer_chain"
    SELF_AWAIT = "self_await"
    SAME_TICK_TIMERS = "same_tick_timers"
    NESTED_FUTURES = "nested_futures"
    RANDOM_TIMERS = "random_timers"


# =============================================================================
# 5. LABELS
# =============================================================================

ROOT_TASK_LABEL = "main"
UNNAMED_LABEL = "unnamed"
TIMER_LABEL = "timeout"

# =============================================================================
# 6. NUMERIC CONSTANTS
# =============================================================================

# Default values
DEFAULT_TICK_SIZE_MS = 100.0  # Virtual milliseconds per driver tick

# Time constants
MS_PER_SECOND = 1000.0

# Scenario constants
TIMER_CHAIN_DELAY_MS = 1000.0
RANDOM_TIMERS_DEFAULT_COUNT = 10
RANDOM_TIMERS_MAX_DELAY_MS = 2000.0
RANDOM_TIMERS_DEFAULT_SEED = 42
SELF_AWAIT_MAX_TICKS = 50

# Output defaults
DEFAULT_TRACE_DIR = "traces"
DEFAULT_FIGURE_DIR = "figures"
