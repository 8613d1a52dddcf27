"""
Scenario Comparison: rent and vacancy with uncertainty bands

Runs every scenario N times with different seeds and plots the mean of a
monthly metric ± 95% confidence interval over time.

What this shows:
- Which scenarios are path-dependent (wide bands)
- Which settle to the same market regardless of random variation (tight bands)
- When rents in different scenarios start to diverge

Usage:
    python scripts/compare_scenarios.py
    python scripts/compare_scenarios.py --runs 30 --steps 120 --out output/scenarios.png
"""

import sys
import argparse
import time
from pathlib import Path

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.patches as mpatches

sys.path.insert(0, str(Path(__file__).parent.parent))
from rentmarket.model import RentalMarketModel
from rentmarket.constants import SCENARIOS
from rentmarket.logging_config import setup_logging


# Colour palette, one per scenario, order matches SCENARIOS dict
PALETTE = {
    "baseline":         "#1a56db",
    "housing-shortage": "#dc2626",
    "oversupply":       "#059669",
    "neglect":          "#d97706",
    "low-income":       "#7c3aed",
    "unequal-incomes":  "#64748b",
}

METRICS = {
    "mean_rent":      "Mean rent",
    "vacancy_rate":   "Vacancy rate (share of empty units)",
    "unhoused_count": "Unhoused tenants",
}


def run_scenario(scenario_id: str, runs: int, steps: int) -> dict[str, np.ndarray]:
    """
    Run one scenario N times.
    Returns {metric: array of shape (runs, steps)}, one value per month per run.
    """
    params = SCENARIOS[scenario_id]["params"]
    matrices = {metric: np.zeros((runs, steps)) for metric in METRICS}

    for r in range(runs):
        m = RentalMarketModel(**params, seed=r * 31337)
        m.run(steps)
        h = m.get_history()
        for metric, matrix in matrices.items():
            series = h[metric]
            # Pad / truncate to exactly `steps` values (burn-in months are not collected)
            n = min(len(series), steps)
            matrix[r, :n] = series[:n]
            if n < steps:
                matrix[r, n:] = series[-1] if series else 0.0

    return matrices


def plot(
    results: dict[str, np.ndarray],
    steps: int,
    runs: int,
    out_path: str,
    metric_label: str,
):
    fig, ax = plt.subplots(figsize=(12, 6))

    months = list(range(1, steps + 1))
    handles = []

    for scenario_id, matrix in results.items():
        title = SCENARIOS[scenario_id]["title"]
        color = PALETTE.get(scenario_id, "#888")

        mean = matrix.mean(axis=0)
        std  = matrix.std(axis=0)
        # 95% CI via normal approximation
        ci   = 1.96 * std / np.sqrt(runs)

        ax.plot(months, mean, color=color, linewidth=2, label=title)
        ax.fill_between(months, mean - ci, mean + ci, color=color, alpha=0.15)

        handles.append(mpatches.Patch(color=color, label=title))

    ax.set_xlabel("Month", fontsize=12)
    ax.set_ylabel(metric_label, fontsize=12)
    ax.set_title(
        f"Rental Market Simulation: Scenario Comparison\n"
        f"{metric_label}, mean ± 95% CI across {runs} runs per scenario",
        fontsize=13, fontweight="bold",
    )
    ax.set_xlim(1, steps)
    ax.set_ylim(bottom=0)
    ax.legend(handles=handles, loc="upper left", fontsize=10, framealpha=0.9)
    ax.grid(axis="y", alpha=0.3)
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)

    fig.text(
        0.5, -0.02,
        f"Generated with Python/Mesa: {runs} runs × {steps} months × {len(results)} scenarios = "
        f"{runs * steps * len(results):,} simulated months",
        ha="center", fontsize=9, color="#888",
    )

    plt.tight_layout()
    Path(out_path).parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(out_path, dpi=150, bbox_inches="tight")
    plt.close(fig)
    print(f"  Saved → {out_path}")


def main():
    parser = argparse.ArgumentParser(description="Compare all scenarios with uncertainty bands")
    parser.add_argument("--runs",  type=int, default=30,  help="Runs per scenario")
    parser.add_argument("--steps", type=int, default=120, help="Months per run")
    parser.add_argument("--out",   type=str, default="output/scenario_comparison.png")
    parser.add_argument("--quick", action="store_true",   help="Fast preview (5 runs)")
    parser.add_argument("--log-level", type=str, default="WARNING", help="Console and log file level")
    args = parser.parse_args()

    setup_logging(args.log_level)

    runs  = 5 if args.quick else args.runs
    steps = args.steps

    total_sims = runs * len(SCENARIOS)
    print(f"Scenario comparison")
    print(f"  Scenarios: {list(SCENARIOS.keys())}")
    print(f"  {runs} runs × {steps} months × {len(SCENARIOS)} scenarios = {total_sims} simulations")
    print()

    results = {metric: {} for metric in METRICS}
    t0 = time.time()

    for i, scenario_id in enumerate(SCENARIOS):
        title = SCENARIOS[scenario_id]["title"]
        print(f"  [{i+1}/{len(SCENARIOS)}] {title} ...", end="", flush=True)
        matrices = run_scenario(scenario_id, runs, steps)
        for metric, matrix in matrices.items():
            results[metric][scenario_id] = matrix
        rent = matrices["mean_rent"][:, -1]
        print(f" mean rent M{steps}: {rent.mean():.1f} ± {rent.std():.1f}")

    elapsed = time.time() - t0
    print(f"\n  Done in {elapsed:.1f}s")
    print()

    # One figure per metric; the first keeps the requested name
    for j, (metric, label) in enumerate(METRICS.items()):
        out = args.out if j == 0 else args.out.replace(".png", f"_{metric}.png")
        plot(results[metric], steps, runs, out, metric_label=label)


if __name__ == "__main__":
    main()
