# tests/test_driver.py

from __future__ import annotations

import pytest

from constants import LoopState
from event_loop import (
    EventLoop,
    LoopStalledError,
    LoopStateError,
    TaskExecutionError,
    await_tracked,
)
from logging_config import NullSink
from scenarios import Recorder, build_timer_chain
from scheduler_types import LoopConfig, Task

from .fakes import RecordingSink


def test_timer_chain_keeps_loop_alive_until_chain_drains(loop: EventLoop) -> None:
    recorder = Recorder()

    summary = loop.run(build_timer_chain(loop, recorder))

    assert recorder.events == [
        "promise1",
        "a started",
        "end",
        "promise2",
        "promise3",
        "promise4",
        "after 1",
    ]
    assert summary.terminated
    assert loop.loop_state == LoopState.TERMINATED
    assert summary.ticks == 12
    assert summary.virtual_time_ms == 1200.0
    assert summary.macrotasks_run == 2
    assert summary.timers_fired == 1
    assert summary.total_idle_ms == 900.0
    assert summary.max_idle_ms == 900.0
    assert loop.suspensions.count == 0


def test_timer_chain_trace(loop: EventLoop) -> None:
    summary = loop.run(build_timer_chain(loop, Recorder()))
    trace = summary.trace

    first = trace[0]
    assert first.macrotask == "main"
    assert first.microtasks_run == 0
    assert first.pending_timers == 1
    assert first.waiting_count == 1

    idle = [record.tick for record in trace if record.macrotask is None]
    assert idle == [2, 3, 4, 5, 6, 7, 8, 9, 10, 12]

    fired = trace[10]
    assert fired.tick == 11
    assert fired.macrotask == "b.timeout"
    assert fired.microtasks_run == 10
    assert fired.waiting_count == 0
    assert fired.idle_ms == 0.0

    assert trace[9].waiting_count == 1
    assert trace[9].idle_ms == 900.0


def test_idle_status_line(loop: EventLoop, recording_sink: RecordingSink) -> None:
    loop.run(build_timer_chain(loop, Recorder()))

    writes = recording_sink.writes
    assert writes[0] == "EventLoop: Idle for 0.1 seconds (promise: 1, api: 1)"
    assert writes[8] == "EventLoop: Idle for 0.9 seconds (promise: 1, api: 1)"
    assert writes[9] == "\n"
    assert len(writes) == 10


def test_status_line_can_be_disabled(recording_sink: RecordingSink) -> None:
    loop = EventLoop(config=LoopConfig(status_line=False), sink=recording_sink)

    loop.run(build_timer_chain(loop, Recorder()))

    assert recording_sink.writes == []


def test_empty_loop_terminates_on_first_tick(loop: EventLoop) -> None:
    summary = loop.run()

    assert summary.terminated
    assert summary.ticks == 1
    assert summary.macrotasks_run == 0


def test_run_after_termination_raises(loop: EventLoop) -> None:
    loop.run()

    with pytest.raises(LoopStateError):
        loop.run()


def test_one_macrotask_per_tick_with_microtasks_first(loop: EventLoop) -> None:
    events: list[str] = []

    def root() -> None:
        loop.queue_macrotask(Task(lambda: events.append("macro 2"), "macro-2"))
        loop.queue_microtask(Task(lambda: events.append("micro 1"), "micro-1"))
        events.append("root")

    summary = loop.run(root)

    assert events == ["root", "micro 1", "macro 2"]
    assert [record.macrotask for record in summary.trace] == ["main", "macro-2", None]
    assert summary.trace[0].microtasks_run == 1


def test_macrotasks_queued_before_run_keep_fifo_order(loop: EventLoop) -> None:
    events: list[str] = []
    loop.queue_macrotask(Task(lambda: events.append("first"), "first"))
    loop.queue_macrotask(Task(lambda: events.append("second"), "second"))

    summary = loop.run()

    assert events == ["first", "second"]
    assert summary.macrotasks_run == 2


def test_root_task_exception_is_fatal(loop: EventLoop) -> None:
    error = ValueError("root broke")

    def root() -> None:
        raise error

    with pytest.raises(TaskExecutionError) as info:
        loop.run(root)

    assert info.value.label == "main"
    assert info.value.tick == 1
    assert info.value.__cause__ is error
    assert loop.loop_state == LoopState.TERMINATED


def test_timer_callback_exception_is_fatal(loop: EventLoop) -> None:
    def boom() -> None:
        raise RuntimeError("timer broke")

    with pytest.raises(TaskExecutionError) as info:
        loop.run(lambda: loop.set_timeout(boom, 200.0, label="bad-timer"))

    assert info.value.label == "bad-timer"
    assert info.value.tick == 3
    assert loop.summary.ticks == 3
    assert loop.summary.virtual_time_ms == 300.0
    assert loop.summary.trace[-1].tick == 3
    assert loop.summary.trace[-1].macrotask == "bad-timer"


def test_continuation_exception_stays_inside_future(loop: EventLoop) -> None:
    outcomes: list[str] = []

    def explode(_: object) -> None:
        raise RuntimeError("contained")

    def root() -> None:
        loop.sleep(100.0).then(explode).catch(lambda error: outcomes.append(str(error)))

    summary = loop.run(root)

    assert summary.terminated
    assert outcomes == ["contained"]


def test_tracked_await_on_unsettled_future_stalls() -> None:
    loop = EventLoop(config=LoopConfig(max_ticks=5), sink=NullSink())
    never = loop.create_future(name="never")

    def waiter():
        yield await_tracked(never)

    with pytest.raises(LoopStalledError) as info:
        loop.run(lambda: loop.spawn(waiter))

    assert info.value.waiting_count == 1
    assert info.value.pending_timers == 0
    assert loop.tick == 5
    assert not loop.summary.terminated


def test_untracked_await_does_not_hold_loop_open(loop: EventLoop) -> None:
    never = loop.create_future(name="never")

    def waiter():
        yield never

    summary = loop.run(lambda: loop.spawn(waiter))

    assert summary.terminated
    assert summary.ticks == 2
    assert never.is_pending()


def test_tick_size_controls_timer_resolution(recording_sink: RecordingSink) -> None:
    loop = EventLoop(config=LoopConfig(tick_size_ms=250.0), sink=recording_sink)
    fired_at: list[int] = []

    loop.run(lambda: loop.set_timeout(lambda: fired_at.append(loop.tick), 1000.0))

    assert fired_at == [5]
    assert loop.now_ms == 6 * 250.0


def test_run_tick_steps_one_tick_at_a_time(loop: EventLoop) -> None:
    loop.queue_macrotask(Task(lambda: loop.set_timeout(lambda: None, 100.0), "root"))

    first = loop.run_tick()
    second = loop.run_tick()
    third = loop.run_tick()

    assert first.macrotask == "root"
    assert second.macrotask == "timeout"
    assert third.macrotask is None
    assert loop.loop_state == LoopState.TERMINATED


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"tick_size_ms": 0.0}, "tick_size_ms"),
        ({"tick_size_ms": -10.0}, "tick_size_ms"),
        ({"max_ticks": 0}, "max_ticks"),
    ],
)
def test_invalid_config_is_rejected(kwargs: dict, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        LoopConfig(**kwargs)


def test_trace_can_be_disabled() -> None:
    loop = EventLoop(config=LoopConfig(record_trace=False), sink=NullSink())

    summary = loop.run(build_timer_chain(loop, Recorder()))

    assert summary.trace == []
    assert summary.ticks == 12
