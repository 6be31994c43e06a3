"""Event loop simulator components."""

from event_loop.base import TaskScheduler
from event_loop.coroutines import AsyncFunction
from event_loop.driver import EventLoop, SchedulerState
from event_loop.errors import (
    EventLoopError,
    FutureRejectedError,
    LoopStalledError,
    LoopStateError,
    TaskExecutionError,
)
from event_loop.future import Future
from event_loop.queues import TaskQueues
from event_loop.suspension import SuspensionTracker, TrackedAwait, await_tracked
from event_loop.timers import TimerRegistry

__all__ = [
    "AsyncFunction",
    "EventLoop",
    "EventLoopError",
    "Future",
    "FutureRejectedError",
    "LoopStalledError",
    "LoopStateError",
    "SchedulerState",
    "SuspensionTracker",
    "TaskExecutionError",
    "TaskQueues",
    "TaskScheduler",
    "TimerRegistry",
    "TrackedAwait",
    "await_tracked",
]
