#!/usr/bin/env python3
"""
Iteration Strategy Sweep

Runs Grover searches over integers 0..N-1 on the local simulator under every
iteration strategy, records each run with pandas and plots the observed
success rate next to the ideal sin^2((2k+1)theta) curve.

Too few iterations leave the target under-amplified; too many rotate past
it. The sweep shows how far each strategy sits from the optimum.

Usage:
    python scripts/run_strategy_sweep.py
    python scripts/run_strategy_sweep.py --size 32 --target 7 --target 19 --repeats 20
    python scripts/run_strategy_sweep.py --no-plot --seed 42
"""

from __future__ import annotations
import argparse
import sys
from pathlib import Path
from datetime import datetime

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))


def run_sweep(size: int, targets: list[int], repeats: int, seed: int | None):
    """Run the sweep with a single attempt per search."""
    from easyq.backends.simulator import SimulatorBackend
    from easyq.experiment_logging import summarize_success, sweep_iteration_strategies
    from easyq.search import SamplingStrategy, SearchOptions

    opts = SearchOptions(
        sampling_strategy=SamplingStrategy.FULL_SCAN,
        max_attempts=1,
    )
    df = sweep_iteration_strategies(
        collection_size=size,
        targets=targets,
        repeats=repeats,
        options=opts,
        backend=SimulatorBackend(seed=seed),
    )
    summary = summarize_success(df)
    ideal = df.groupby("strategy", as_index=False)["ideal_success_probability"].first()
    return df, summary.merge(ideal, on="strategy")


def plot_summary(summary, size: int, n_targets: int, output_path: Path):
    """Bar chart of observed vs ideal success rate per strategy."""
    import matplotlib.pyplot as plt

    labels = [f"{s}\n(k={k})" for s, k in zip(summary["strategy"], summary["iterations"])]
    x = range(len(labels))

    fig, ax = plt.subplots(figsize=(7, 4))
    ax.bar([i - 0.2 for i in x], summary["success_rate"] * 100, width=0.4,
           color='#3498db', label='Observed')
    ax.bar([i + 0.2 for i in x], summary["ideal_success_probability"] * 100, width=0.4,
           color='#95a5a6', label='Ideal $\\sin^2((2k+1)\\theta)$')

    # Uniform guessing baseline
    ax.axhline(y=100 * n_targets / size, color='gray', linestyle='--', alpha=0.7,
               label=f'Random guess ({100 * n_targets / size:.1f}%)')

    ax.set_xticks(list(x))
    ax.set_xticklabels(labels, fontsize=9)
    ax.set_ylabel('Success rate [%]', fontsize=12)
    ax.set_ylim(0, 105)
    ax.set_title(f'Success Rate by Iteration Strategy\n($N={size}$, $M={n_targets}$)', fontsize=12)
    ax.grid(True, axis='y', alpha=0.3)
    ax.legend(loc='upper right', fontsize=9)

    plt.tight_layout()
    output_path.parent.mkdir(parents=True, exist_ok=True)
    plt.savefig(output_path, dpi=300, bbox_inches='tight')
    print(f"Saved: {output_path}")


def main():
    parser = argparse.ArgumentParser(
        description="Compare Grover iteration strategies on the local simulator"
    )
    parser.add_argument(
        "--size", "-n", type=int, default=16,
        help="Collection size N (default: 16)"
    )
    parser.add_argument(
        "--target", "-t", type=int, action="append",
        help="Matching value, repeatable (default: 11)"
    )
    parser.add_argument(
        "--repeats", "-r", type=int, default=10,
        help="Searches per strategy (default: 10)"
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Simulator seed"
    )
    parser.add_argument(
        "--output-dir", type=Path, default=project_root / "results",
        help="Directory for the CSV and figure"
    )
    parser.add_argument(
        "--no-plot", action="store_true",
        help="Skip the matplotlib figure"
    )
    args = parser.parse_args()
    targets = args.target or [11]

    print("=" * 70)
    print(f"Iteration strategy sweep: N = {args.size}, targets = {targets}")
    print("=" * 70)

    df, summary = run_sweep(args.size, targets, args.repeats, args.seed)
    print(summary.to_string(index=False))

    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    args.output_dir.mkdir(parents=True, exist_ok=True)
    csv_path = args.output_dir / f"strategy-sweep-{timestamp}.csv"
    df.to_csv(csv_path, index=False)
    print(f"\nResults saved to: {csv_path}")

    if not args.no_plot:
        plot_summary(summary, args.size, len(set(targets)), args.output_dir / f"strategy-sweep-{timestamp}.png")


if __name__ == "__main__":
    main()
