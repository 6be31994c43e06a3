# tests/test_coroutines.py

from __future__ import annotations

import typing as t

from constants import FutureState
from event_loop import EventLoop, Future, FutureRejectedError, await_tracked
from scheduler_types import Err, Ok


def test_spawn_runs_synchronously_until_first_yield(loop: EventLoop) -> None:
    events: list[str] = []

    def body():
        events.append("started")
        yield loop.sleep(100.0)
        events.append("resumed")

    loop.spawn(body)
    events.append("after spawn")

    assert events == ["started", "after spawn"]

    loop.run()

    assert events == ["started", "after spawn", "resumed"]


def test_return_value_resolves_spawned_future(loop: EventLoop) -> None:
    spawned: dict[str, Future[t.Any]] = {}

    def body():
        first = yield await_tracked(loop.sleep(100.0, 20))
        second = yield await_tracked(loop.sleep(100.0, 22))
        return first + second

    loop.run(lambda: spawned.setdefault("f", loop.spawn(body, name="adder")))

    assert spawned["f"].name == "adder"
    assert spawned["f"].result == Ok(42)


def test_tracked_await_counts_while_suspended(loop: EventLoop) -> None:
    def body():
        yield await_tracked(loop.sleep(300.0))

    loop.spawn(body)

    assert loop.suspensions.count == 1

    loop.run()

    assert loop.suspensions.count == 0


def test_rejection_is_raised_at_the_await_point(loop: EventLoop) -> None:
    spawned: dict[str, Future[t.Any]] = {}

    def body():
        try:
            yield await_tracked(Future.rejected(loop, ValueError("nope")))
        except ValueError as exc:
            return f"handled {exc}"
        return "not reached"

    summary = loop.run(lambda: spawned.setdefault("f", loop.spawn(body)))

    assert spawned["f"].result == Ok("handled nope")
    assert summary.terminated
    assert loop.suspensions.count == 0


def test_non_exception_reason_is_wrapped(loop: EventLoop) -> None:
    spawned: dict[str, Future[t.Any]] = {}

    def body():
        try:
            yield await_tracked(Future.rejected(loop, "plain reason"))
        except FutureRejectedError as exc:
            return exc.reason

    loop.run(lambda: spawned.setdefault("f", loop.spawn(body)))

    assert spawned["f"].result == Ok("plain reason")


def test_uncaught_error_rejects_spawned_future(loop: EventLoop) -> None:
    spawned: dict[str, Future[t.Any]] = {}
    error = KeyError("lost")

    def body():
        yield await_tracked(Future.rejected(loop, error))

    summary = loop.run(lambda: spawned.setdefault("f", loop.spawn(body)))

    assert spawned["f"].state == FutureState.REJECTED
    assert spawned["f"].result == Err(error)
    assert summary.terminated
    assert loop.suspensions.count == 0


def test_uncaught_non_exception_reason_rejects_with_original_reason(
    loop: EventLoop,
) -> None:
    spawned: dict[str, Future[t.Any]] = {}

    def body():
        yield await_tracked(Future.rejected(loop, "plain reason"))

    summary = loop.run(lambda: spawned.setdefault("f", loop.spawn(body)))

    assert spawned["f"].result == Err("plain reason")
    assert summary.terminated
    assert loop.suspensions.count == 0


def test_yielding_a_non_future_raises_type_error(loop: EventLoop) -> None:
    spawned: dict[str, Future[t.Any]] = {}

    def body():
        yield 42

    loop.run(lambda: spawned.setdefault("f", loop.spawn(body)))

    result = spawned["f"].result
    assert isinstance(result, Err)
    assert isinstance(result.error, TypeError)


def test_plain_function_result_is_wrapped(loop: EventLoop) -> None:
    spawned: dict[str, Future[t.Any]] = {}

    def plain(value: int) -> int:
        return value * 2

    def broken() -> None:
        raise RuntimeError("sync failure")

    def root() -> None:
        spawned["ok"] = loop.spawn(plain, 21)
        spawned["bad"] = loop.spawn(broken)

    loop.run(root)

    assert spawned["ok"].result == Ok(42)
    assert spawned["bad"].state == FutureState.REJECTED


def test_plain_function_returning_future_is_followed(loop: EventLoop) -> None:
    spawned: dict[str, Future[t.Any]] = {}

    def delegate() -> Future[t.Any]:
        return loop.sleep(100.0, "slept")

    loop.run(lambda: spawned.setdefault("f", loop.spawn(delegate)))

    assert spawned["f"].result == Ok("slept")


def test_sleep_resolves_on_the_tick_after_expiry(loop: EventLoop) -> None:
    seen: list[tuple[int, str]] = []

    loop.run(lambda: loop.sleep(300.0, "v").then(lambda value: seen.append((loop.tick, value))))

    assert seen == [(4, "v")]
