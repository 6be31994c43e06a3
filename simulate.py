"""Run the built-in scenarios and save their traces."""

# =============================================================================
# 1. IMPORTS
# =============================================================================

# Standard library
import json
from pathlib import Path

# Project/local
from constants import DEFAULT_TRACE_DIR, ScenarioName
from logging_config import get_logger, setup_logging
from scenarios import SCENARIOS, run_scenario
from scheduler_types import LoopConfig, RunSummary
from trace_io import save_trace_to_file

logger = get_logger(__name__)

# =============================================================================
# 2. RUNNER
# =============================================================================


def run_all_scenarios(
    output_dir: Path,
    config: LoopConfig | None = None,
) -> dict[ScenarioName, RunSummary]:
    """Run every scenario and write one trace file per scenario.

    Args:
        output_dir: Directory for trace files.
        config: Loop configuration shared by all runs.

    Returns:
        Mapping of scenario name to run summary.
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    summaries: dict[ScenarioName, RunSummary] = {}

    for name in SCENARIOS:
        summary, events = run_scenario(name, config=config)
        logger.info(f"{name}: {len(events)} events recorded")
        save_trace_to_file(summary, output_dir / f"{name}.json")
        summaries[name] = summary

    return summaries


# =============================================================================
# 3. MAIN ENTRY POINT
# =============================================================================


def main() -> None:
    """Run all scenarios and print a summary of each."""
    setup_logging(verbose=False)

    print("=" * 70)
    print("Event Loop Simulation")
    print("=" * 70)
    print()

    output_dir = Path(DEFAULT_TRACE_DIR)
    summaries = run_all_scenarios(output_dir)

    for summary in summaries.values():
        summary.print_summary()

    stalled = [name for name, summary in summaries.items() if not summary.terminated]
    if stalled:
        print(f"\nStalled scenarios: {', '.join(stalled)}")

    # Save combined summary for plotting
    results_path = output_dir / "summary.json"
    with results_path.open("w") as f:
        json.dump(
            {name: summary.to_summary_dict() for name, summary in summaries.items()},
            f,
            indent=2,
        )

    print(f"\nTraces saved to: {output_dir.absolute()}/")
    print()


if __name__ == "__main__":
    main()
