# tests/test_trace_io.py

from __future__ import annotations

import json
from pathlib import Path

import pytest

from constants import ScenarioName
from logging_config import NullSink
from scenarios import run_scenario
from trace_io import load_trace_from_file, save_trace_to_file


def test_saved_trace_loads_back(tmp_path: Path) -> None:
    summary, _ = run_scenario(ScenarioName.TIMER_CHAIN, sink=NullSink())
    path = tmp_path / "nested" / "timer_chain.json"

    save_trace_to_file(summary, path)
    loaded = load_trace_from_file(path)

    assert loaded.to_summary_dict() == summary.to_summary_dict()
    assert loaded.trace == summary.trace


def test_saved_trace_uses_plain_field_names(tmp_path: Path) -> None:
    summary, _ = run_scenario(ScenarioName.SAME_TICK_TIMERS, sink=NullSink())
    path = tmp_path / "trace.json"

    save_trace_to_file(summary, path)
    data = json.loads(path.read_text(encoding="utf-8"))

    assert data["summary"]["scenario"] == "same_tick_timers"
    assert data["ticks"][0]["macrotask"] == "main"


def test_loading_unrelated_json_fails(tmp_path: Path) -> None:
    path = tmp_path / "other.json"
    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")

    with pytest.raises(ValueError):
        load_trace_from_file(path)
