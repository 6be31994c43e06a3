"""Example: Run the timer chain demo and print the observed ordering."""

# =============================================================================
# 1. IMPORTS
# =============================================================================

# Standard library
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Project/local
from constants import ScenarioName
from logging_config import setup_logging
from scenarios import run_scenario

# =============================================================================
# 2. MAIN ENTRY POINT
# =============================================================================


def main() -> None:
    """Run the timer chain scenario."""
    setup_logging(verbose="-v" in sys.argv)

    print("Running timer chain scenario...")
    summary, events = run_scenario(ScenarioName.TIMER_CHAIN)

    print("\nObserved order:")
    for index, event in enumerate(events, start=1):
        print(f"  {index}. {event}")

    summary.print_summary()

    print("\nFirst ticks:")
    for record in summary.trace[:3]:
        print(f"  {record.to_dict()}")


if __name__ == "__main__":
    main()
