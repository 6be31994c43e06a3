# tests/test_plot.py

from __future__ import annotations

from pathlib import Path

from constants import ScenarioName
from logging_config import NullSink
from plot import plot_scenario_comparison, plot_tick_timeline
from scenarios import run_scenario
from scheduler_types import RunSummary


def test_tick_timeline_is_written(tmp_path: Path) -> None:
    summary, _ = run_scenario(ScenarioName.TIMER_CHAIN, sink=NullSink())
    output = tmp_path / "timeline.png"

    plot_tick_timeline(summary, output)

    assert output.exists()
    assert output.stat().st_size > 0


def test_timeline_without_trace_is_skipped(tmp_path: Path) -> None:
    output = tmp_path / "empty.png"

    plot_tick_timeline(RunSummary(scenario="empty"), output)

    assert not output.exists()


def test_scenario_comparison_is_written(tmp_path: Path) -> None:
    summaries = [
        run_scenario(name, sink=NullSink())[0]
        for name in (ScenarioName.TIMER_CHAIN, ScenarioName.NESTED_FUTURES)
    ]
    output = tmp_path / "comparison.png"

    plot_scenario_comparison(summaries, output)

    assert output.exists()
