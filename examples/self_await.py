"""Example: An async function awaiting its own Future never lets the loop finish."""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from event_loop import EventLoop, LoopStalledError, await_tracked
from scheduler_types import LoopConfig

loop = EventLoop(config=LoopConfig(max_ticks=30), name="self_await")
own = {}


def waiter():
    yield await_tracked(loop.sleep(500, name="nap"))
    print("\nwoke up, now awaiting myself")
    yield await_tracked(own["a"])
    print("unreachable")


def main():
    own["a"] = loop.spawn(waiter, name="a")


try:
    loop.run(main)
except LoopStalledError as exc:
    print()
    print(f"Stalled as expected: {exc}")
    print(f"Waiting count: {loop.suspensions.count}")
