# tests/fakes.py

from __future__ import annotations

from event_loop import EventLoop


class RecordingSink:
    """Log sink that keeps every write for assertions."""

    def __init__(self) -> None:
        self.writes: list[str] = []

    def write(self, text: str) -> None:
        self.writes.append(text)


def drain_microtasks(loop: EventLoop) -> int:
    """Run the loop's microtask queue to a fixed point outside the driver."""
    return loop.scheduler_state.queues.drain_micro(lambda task: task.run())
