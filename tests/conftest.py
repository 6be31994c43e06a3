# tests/conftest.py

from __future__ import annotations

import os

# Headless backend for plot tests; must be set before matplotlib is imported
os.environ.setdefault("MPLBACKEND", "Agg")

import pytest

from event_loop import EventLoop
from scheduler_types import LoopConfig

from .fakes import RecordingSink


@pytest.fixture()
def recording_sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture()
def loop(recording_sink: RecordingSink) -> EventLoop:
    """Fresh loop with the default 100ms tick and a recording sink."""
    return EventLoop(config=LoopConfig(), sink=recording_sink, name="test")
