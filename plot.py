"""Generate plots of event loop runs from saved traces."""

# =============================================================================
# 1. IMPORTS
# =============================================================================

# Standard library
from pathlib import Path

# Third-party
import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

# Project/local
from constants import DEFAULT_FIGURE_DIR, DEFAULT_TRACE_DIR, MS_PER_SECOND
from logging_config import get_logger, setup_logging
from scheduler_types import RunSummary
from trace_io import load_trace_from_file

logger = get_logger(__name__)

# =============================================================================
# 2. PLOT CONFIGURATION
# =============================================================================

sns.set_theme(style="whitegrid", context="paper", palette="colorblind")
plt.rcParams.update({
    "font.family": "serif",
    "font.size": 10,
    "axes.labelsize": 11,
    "axes.titlesize": 12,
    "xtick.labelsize": 9,
    "ytick.labelsize": 9,
    "legend.fontsize": 9,
    "figure.dpi": 150,
    "savefig.dpi": 150,
    "savefig.bbox": "tight",
    "savefig.pad_inches": 0.1,
})

# Colour scheme
COLOURS = {
    "macrotask": "#2E86AB",  # Blue
    "microtask": "#A23B72",  # Purple/Pink
    "timers": "#F18F01",  # Orange
    "waiting": "#3B8B5A",  # Green
    "idle": "#7F7F7F",  # Grey
}

# =============================================================================
# 3. PLOTTING FUNCTIONS
# =============================================================================


def plot_tick_timeline(summary: RunSummary, output_path: Path) -> None:
    """Plot what the loop did on every tick of one run.

    Top panel: microtasks drained per tick, with macrotask ticks marked.
    Bottom panel: pending timers, tracked awaits and accumulated idle time.

    Args:
        summary: Run with a recorded trace.
        output_path: Path to save figure.
    """
    if not summary.trace:
        logger.warning(f"No trace recorded for {summary.scenario}, skipping timeline")
        return

    ticks = np.array([record.tick for record in summary.trace])
    microtasks = np.array([record.microtasks_run for record in summary.trace])
    ran_macrotask = np.array(
        [record.macrotask is not None for record in summary.trace]
    )
    timers = np.array([record.pending_timers for record in summary.trace])
    waiting = np.array([record.waiting_count for record in summary.trace])
    idle_s = np.array([record.idle_ms for record in summary.trace]) / MS_PER_SECOND

    fig, (ax1, ax2) = plt.subplots(2, 1, figsize=(10, 6), sharex=True)

    ax1.bar(
        ticks,
        microtasks,
        color=COLOURS["microtask"],
        alpha=0.8,
        edgecolor="black",
        linewidth=0.5,
        label="Microtasks drained",
    )
    ax1.scatter(
        ticks[ran_macrotask],
        np.zeros(int(ran_macrotask.sum())),
        color=COLOURS["macrotask"],
        marker="^",
        s=40,
        zorder=3,
        label="Macrotask run",
    )
    ax1.set_ylabel("Count", fontweight="bold")
    ax1.set_title(f"Tick Timeline: {summary.scenario}", fontweight="bold", fontsize=13)
    ax1.legend(frameon=True, fancybox=True)
    ax1.spines["top"].set_visible(False)
    ax1.spines["right"].set_visible(False)

    ax2.step(ticks, timers, where="mid", color=COLOURS["timers"], label="Pending timers")
    ax2.step(ticks, waiting, where="mid", color=COLOURS["waiting"], label="Tracked awaits")
    ax2.set_xlabel("Tick", fontweight="bold")
    ax2.set_ylabel("Count", fontweight="bold")
    ax2.spines["top"].set_visible(False)

    idle_ax = ax2.twinx()
    idle_ax.fill_between(ticks, idle_s, step="mid", color=COLOURS["idle"], alpha=0.25)
    idle_ax.set_ylabel("Idle (seconds)", fontweight="bold")

    ax2.legend(frameon=True, fancybox=True, loc="upper left")

    plt.tight_layout()
    plt.savefig(output_path)
    logger.info(f"Saved tick timeline to {output_path}")
    plt.close(fig)


def plot_scenario_comparison(summaries: list[RunSummary], output_path: Path) -> None:
    """Create a bar chart comparing runs.

    Args:
        summaries: Runs to compare.
        output_path: Path to save figure.
    """
    if not summaries:
        logger.warning("No runs to compare")
        return

    fig, axes = plt.subplots(1, 3, figsize=(12, 3.5))
    names = [summary.scenario for summary in summaries]
    x = np.arange(len(summaries))

    metrics_data = [
        {
            "title": "Ticks",
            "ylabel": "Count",
            "values": [summary.ticks for summary in summaries],
            "colour": COLOURS["macrotask"],
        },
        {
            "title": "Microtasks Run",
            "ylabel": "Count",
            "values": [summary.microtasks_run for summary in summaries],
            "colour": COLOURS["microtask"],
        },
        {
            "title": "Total Idle Time",
            "ylabel": "Time (seconds)",
            "values": [summary.total_idle_ms / MS_PER_SECOND for summary in summaries],
            "colour": COLOURS["idle"],
        },
    ]

    for ax, data in zip(axes, metrics_data, strict=True):
        bars = ax.bar(
            x,
            data["values"],
            color=data["colour"],
            alpha=0.8,
            edgecolor="black",
            linewidth=0.5,
        )

        # Add value labels on bars
        for bar in bars:
            height = bar.get_height()
            ax.text(
                bar.get_x() + bar.get_width() / 2.0,
                height,
                f"{height:g}",
                ha="center",
                va="bottom",
                fontsize=8,
            )

        ax.set_title(data["title"], fontweight="bold")
        ax.set_ylabel(data["ylabel"])
        ax.set_xticks(x)
        ax.set_xticklabels(names, rotation=30, ha="right")
        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)

    plt.tight_layout()
    plt.savefig(output_path)
    logger.info(f"Saved scenario comparison to {output_path}")
    plt.close(fig)


# =============================================================================
# 4. MAIN ENTRY POINT
# =============================================================================


def main() -> None:
    """Generate plots for every saved trace."""
    setup_logging(verbose=True)

    print("=" * 70)
    print("Generating Event Loop Plots")
    print("=" * 70)
    print()

    trace_dir = Path(DEFAULT_TRACE_DIR)
    trace_files = sorted(
        path for path in trace_dir.glob("*.json") if path.name != "summary.json"
    )
    if not trace_files:
        print(f"Error: No traces found in {trace_dir}")
        print("Please run simulate.py first to generate traces.")
        return

    output_dir = Path(DEFAULT_FIGURE_DIR)
    output_dir.mkdir(exist_ok=True)

    summaries = [load_trace_from_file(path) for path in trace_files]
    for summary in summaries:
        plot_tick_timeline(summary, output_dir / f"timeline_{summary.scenario}.png")

    plot_scenario_comparison(summaries, output_dir / "scenario_comparison.png")

    print()
    print(f"Figures saved to: {output_dir.absolute()}/")
    print()
    print("Generated files:")
    for plot_file in output_dir.glob("*.png"):
        print(f"  - {plot_file.name}")
    print()


if __name__ == "__main__":
    main()
