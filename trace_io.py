"""Run trace persistence.

This module saves a run summary and its per-tick trace to JSON and loads it
back, so runs can be plotted or compared later.
"""

# =============================================================================
# 1. IMPORTS
# =============================================================================

# Standard library
import json
from pathlib import Path

# Project/local
from constants import TraceFileField
from logging_config import get_logger
from scheduler_types import RunSummary, TickRecord

logger = get_logger(__name__)

# =============================================================================
# 2. PUBLIC API
# =============================================================================


def save_trace_to_file(summary: RunSummary, filepath: Path) -> None:
    """Save a run summary and its trace to a JSON file.

    Args:
        summary: Run to save.
        filepath: Where to save the data.
    """
    data = {
        TraceFileField.SUMMARY: summary.to_summary_dict(),
        TraceFileField.TICKS: [record.to_dict() for record in summary.trace],
    }
    filepath.parent.mkdir(parents=True, exist_ok=True)
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)
    logger.info(f"Saved {len(summary.trace)} tick records to {filepath}")


def load_trace_from_file(filepath: Path) -> RunSummary:
    """Load a run summary and its trace from a JSON file.

    Args:
        filepath: File written by save_trace_to_file.

    Returns:
        RunSummary with its trace restored.

    Raises:
        ValueError: If the file is not a saved trace.
    """
    with open(filepath, encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict) or TraceFileField.SUMMARY not in data:
        raise ValueError(f"{filepath} is not a saved event loop trace")

    summary = RunSummary.from_summary_dict(data[TraceFileField.SUMMARY])
    summary.trace = [
        TickRecord.from_dict(record) for record in data.get(TraceFileField.TICKS, [])
    ]
    return summary
