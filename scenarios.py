"""Root task scenarios for exercising the event loop.

Each scenario builds a root task for a fresh loop. Root tasks report what
they observe through a recorder, so the order of callbacks, continuations
and timers can be inspected after the run.
"""

# =============================================================================
# 1. IMPORTS
# =============================================================================

# Standard library
import random
import typing as t
from collections.abc import Callable
from dataclasses import dataclass, field, replace

# Project/local
from constants import (
    RANDOM_TIMERS_DEFAULT_COUNT,
    RANDOM_TIMERS_DEFAULT_SEED,
    RANDOM_TIMERS_MAX_DELAY_MS,
    SELF_AWAIT_MAX_TICKS,
    TIMER_CHAIN_DELAY_MS,
    ScenarioName,
)
from event_loop import EventLoop, Future, LoopStalledError, await_tracked
from logging_config import LogSink, get_logger
from scheduler_types import Callback, LoopConfig, RunSummary

logger = get_logger(__name__)

# =============================================================================
# 2. RECORDER
# =============================================================================


@dataclass
class Recorder:
    """Collects the messages a scenario reports, in order."""

    events: list[str] = field(default_factory=lambda: [])

    def note(self, message: str) -> None:
        logger.info(message)
        self.events.append(message)


RootBuilder = Callable[[EventLoop, Recorder], Callback]

# =============================================================================
# 3. SCENARIO BUILDERS
# =============================================================================


def build_timer_chain(loop: EventLoop, recorder: Recorder) -> Callback:
    """Timer-resolved Future with three chained continuations, awaited tracked."""

    def main() -> None:
        def start(resolve: Callable[..., None], _reject: Callable[..., None]) -> None:
            recorder.note("promise1")
            loop.set_timeout(lambda: resolve(), TIMER_CHAIN_DELAY_MS, label="b.timeout")

        chain = (
            loop.create_future(start, name="b")
            .then(lambda _: recorder.note("promise2"))
            .then(lambda _: recorder.note("promise3"))
            .then(lambda _: recorder.note("promise4"))
        )

        def waiter() -> t.Generator[t.Any, t.Any, bool]:
            recorder.note("a started")
            yield await_tracked(chain)
            recorder.note("after 1")
            return True

        loop.spawn(waiter, name="a")
        recorder.note("end")

    return main


def build_self_await(loop: EventLoop, recorder: Recorder) -> Callback:
    """Like the timer chain, but the async function then awaits itself.

    Its own Future can never settle, so the waiting count never returns to
    zero and the loop idles until its tick limit.
    """

    def main() -> None:
        def start(resolve: Callable[..., None], _reject: Callable[..., None]) -> None:
            loop.set_timeout(lambda: resolve(), TIMER_CHAIN_DELAY_MS, label="b.timeout")

        chain = loop.create_future(start, name="b").then(
            lambda _: recorder.note("promise2")
        )
        own: dict[str, Future[t.Any]] = {}

        def waiter() -> t.Generator[t.Any, t.Any, bool]:
            yield await_tracked(chain)
            recorder.note("after 1")
            yield await_tracked(own["a"])
            recorder.note("after 2")
            return True

        own["a"] = loop.spawn(waiter, name="a")
        recorder.note("end")

    return main


def build_same_tick_timers(loop: EventLoop, recorder: Recorder) -> Callback:
    """Timers expiring on the same tick fire in the order they were set."""

    def main() -> None:
        for name, delay in (("A", 300.0), ("B", 250.0), ("C", 300.0)):
            loop.set_timeout(
                lambda name=name: recorder.note(f"timer {name}"),
                delay,
                label=f"timer-{name}",
            )
        loop.set_timeout(lambda: recorder.note("timer D"), 400.0, label="timer-D")

    return main


def build_nested_futures(loop: EventLoop, recorder: Recorder) -> Callback:
    """A continuation returning a Future makes the chain wait for it."""

    def main() -> None:
        outer = loop.sleep(200.0, "outer", name="outer")
        chained = outer.then(
            lambda value: loop.sleep(300.0, f"{value}+inner", name="inner")
        )
        chained.then(lambda value: recorder.note(f"chain resolved with {value}"))

        failing = outer.then(lambda _: _raise(ValueError("boom")))
        failing.then(lambda _: recorder.note("skipped")).catch(
            lambda error: recorder.note(f"caught {error}")
        )

    return main


def build_random_timers(
    loop: EventLoop,
    recorder: Recorder,
    seed: int | None = RANDOM_TIMERS_DEFAULT_SEED,
    num_timers: int = RANDOM_TIMERS_DEFAULT_COUNT,
) -> Callback:
    """Seeded batch of timers, each followed by a short continuation chain."""
    rng = random.Random(seed)
    delays = [
        round(rng.uniform(0.0, RANDOM_TIMERS_MAX_DELAY_MS), 1) for _ in range(num_timers)
    ]

    def main() -> None:
        for index, delay in enumerate(delays):
            fired = loop.sleep(delay, index, name=f"sleep-{index}")
            fired.then(lambda i: recorder.note(f"timer {i} fired")).then(
                lambda _, i=index: recorder.note(f"timer {i} continued")
            )

    return main


# =============================================================================
# 4. SCENARIO REGISTRY
# =============================================================================


@dataclass
class Scenario:
    """A named root task and the loop settings it needs."""

    name: ScenarioName
    description: str
    build: RootBuilder
    max_ticks: int | None = None


SCENARIOS: dict[ScenarioName, Scenario] = {
    ScenarioName.TIMER_CHAIN: Scenario(
        name=ScenarioName.TIMER_CHAIN,
        description="1000ms timer resolving a three-step then chain",
        build=build_timer_chain,
    ),
    ScenarioName.SELF_AWAIT: Scenario(
        name=ScenarioName.SELF_AWAIT,
        description="async function awaiting its own Future (never terminates)",
        build=build_self_await,
        max_ticks=SELF_AWAIT_MAX_TICKS,
    ),
    ScenarioName.SAME_TICK_TIMERS: Scenario(
        name=ScenarioName.SAME_TICK_TIMERS,
        description="timers expiring on the same tick",
        build=build_same_tick_timers,
    ),
    ScenarioName.NESTED_FUTURES: Scenario(
        name=ScenarioName.NESTED_FUTURES,
        description="continuation returning a Future, plus a raising one",
        build=build_nested_futures,
    ),
    ScenarioName.RANDOM_TIMERS: Scenario(
        name=ScenarioName.RANDOM_TIMERS,
        description="seeded random timers with continuations",
        build=build_random_timers,
    ),
}


# =============================================================================
# 5. PUBLIC API
# =============================================================================


def run_scenario(
    name: ScenarioName,
    config: LoopConfig | None = None,
    sink: LogSink | None = None,
) -> tuple[RunSummary, list[str]]:
    """Run a scenario on a fresh loop.

    A scenario that stalls (hits its tick limit) is not an error here: the
    partial summary is returned with ``terminated`` left False.

    Args:
        name: Scenario to run.
        config: Loop configuration; the scenario's tick limit applies when
            the config does not set one.
        sink: Status line sink.

    Returns:
        Tuple of (run summary, recorded events).
    """
    scenario = SCENARIOS[name]
    config = config if config is not None else LoopConfig()
    if config.max_ticks is None and scenario.max_ticks is not None:
        config = replace(config, max_ticks=scenario.max_ticks)

    loop = EventLoop(config=config, sink=sink, name=str(scenario.name))
    recorder = Recorder()
    root = scenario.build(loop, recorder)

    logger.info(f"Running scenario {scenario.name}: {scenario.description}")
    try:
        summary = loop.run(root)
    except LoopStalledError as exc:
        logger.warning(f"Scenario {scenario.name} stalled: {exc}")
        summary = loop.summary

    return summary, recorder.events


# =============================================================================
# 6. PRIVATE HELPERS
# =============================================================================


def _raise(error: Exception) -> t.NoReturn:
    raise error
