"""
Plotting script for RL experiment results.
Generates learning curves and comparison plots from MetricsCallback CSVs.
"""

import os
import argparse
from typing import Dict, Optional

import numpy as np
import pandas as pd
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt


COLORS = {"dqn": "#2ecc71", "ppo": "#3498db", "sac": "#e74c3c"}


def load_metrics(log_dir: str, run: str) -> Optional[pd.DataFrame]:
    """Load the metrics CSV of a run, from log_dir/run/ or log_dir itself."""
    algo = run.split("_")[0]
    for csv_path in (
        os.path.join(log_dir, run, f"{algo}_metrics.csv"),
        os.path.join(log_dir, f"{algo}_metrics.csv"),
    ):
        if os.path.exists(csv_path):
            return pd.read_csv(csv_path)
    return None


def smooth(data: np.ndarray, window: int = 10) -> np.ndarray:
    """Apply rolling average smoothing."""
    if len(data) < window:
        return data
    kernel = np.ones(window) / window
    return np.convolve(data, kernel, mode="valid")


def _plot_series(ax, df: pd.DataFrame, column: str, window: int, **kwargs):
    values = smooth(df[column].values.astype(float), window)
    ax.plot(df["timestep"].values[:len(values)], values, linewidth=2, **kwargs)


def plot_learning_curve(df: pd.DataFrame, run: str, output_dir: str, window: int = 50) -> str:
    """Plot reward, length, score and survival curves for one run."""
    fig, axes = plt.subplots(2, 2, figsize=(14, 10))
    fig.suptitle(f"{run} Learning Curves", fontsize=16, fontweight="bold")

    panels = [
        (axes[0, 0], "reward", "Episode Reward", None),
        (axes[0, 1], "length", "Episode Length", "orange"),
        (axes[1, 0], "score", "Game Score", "purple"),
        (axes[1, 1], "survival_rate", "Survival Rate", "green"),
    ]
    for ax, column, label, color in panels:
        if column not in df.columns:
            ax.axis("off")
            continue
        _plot_series(ax, df, column, window, color=color)
        ax.set_xlabel("Timesteps")
        ax.set_ylabel(label)
        ax.set_title(f"{label} vs Timesteps")
        ax.grid(True, alpha=0.3)
    if "survival_rate" in df.columns:
        axes[1, 1].set_ylim(0, 1.1)

    plt.tight_layout()

    os.makedirs(output_dir, exist_ok=True)
    save_path = os.path.join(output_dir, f"{run}_learning_curve.png")
    plt.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close(fig)

    print(f"Saved {run} learning curve to {save_path}")
    return save_path


def plot_comparison(data: Dict[str, pd.DataFrame], output_dir: str, window: int = 50) -> str:
    """Overlay reward and score curves of several runs."""
    fig, axes = plt.subplots(1, 2, figsize=(14, 5))
    fig.suptitle("Run Comparison", fontsize=16, fontweight="bold")

    for ax, column, label in ((axes[0], "reward", "Episode Reward"), (axes[1], "score", "Game Score")):
        for run, df in data.items():
            _plot_series(ax, df, column, window, label=run, color=COLORS.get(run.split("_")[0]))
        ax.set_xlabel("Timesteps")
        ax.set_ylabel(label)
        ax.set_title(f"{label} Comparison")
        ax.legend()
        ax.grid(True, alpha=0.3)

    plt.tight_layout()

    os.makedirs(output_dir, exist_ok=True)
    save_path = os.path.join(output_dir, "run_comparison.png")
    plt.savefig(save_path, dpi=150, bbox_inches="tight")
    plt.close(fig)

    print(f"Saved comparison plot to {save_path}")
    return save_path


def generate_summary_report(data: Dict[str, pd.DataFrame], output_dir: str) -> str:
    """Write a text summary of every run."""
    report_lines = [
        "=" * 60,
        "SHOOTER TRAINING SUMMARY",
        "=" * 60,
    ]

    for run, df in data.items():
        final = df.tail(100)
        report_lines += [
            f"\n{run}:",
            "-" * 40,
            f"  Total Episodes: {len(df)}",
            f"  Total Timesteps: {df['timestep'].max():,}",
            f"  Mean Reward: {df['reward'].mean():.2f} ± {df['reward'].std():.2f}",
            f"  Best Score: {df['score'].max()}",
            "  Final Performance (last 100 episodes):",
            f"    Mean Reward: {final['reward'].mean():.2f}",
            f"    Mean Score: {final['score'].mean():.1f}",
            f"    Mean Kills: {final['kills'].mean():.1f}",
            f"    Survival Rate: {final['survival_rate'].mean():.2%}",
        ]

    report_lines.append("\n" + "=" * 60)
    report = "\n".join(report_lines)
    print(report)

    os.makedirs(output_dir, exist_ok=True)
    report_path = os.path.join(output_dir, "training_summary.txt")
    with open(report_path, "w") as f:
        f.write(report)

    print(f"\nSaved summary report to {report_path}")
    return report_path


def main():
    parser = argparse.ArgumentParser(description="Plot shooter training results")
    parser.add_argument("--log-dir", type=str, default="./logs", help="Directory containing run logs")
    parser.add_argument("--output-dir", type=str, default="./plots", help="Directory to save plots")
    parser.add_argument("--window", type=int, default=50, help="Smoothing window size (default: 50)")
    parser.add_argument(
        "--runs",
        nargs="+",
        default=["ppo_health_baseline", "dqn_health_baseline", "sac_health_baseline"],
        help="Run names (algo_rules_reward) to plot",
    )

    args = parser.parse_args()

    print(f"Loading metrics from {args.log_dir}...")

    data = {}
    for run in args.runs:
        df = load_metrics(args.log_dir, run)
        if df is None or len(df) == 0:
            print(f"  No data found for {run}")
            continue
        print(f"  Loaded {run}: {len(df)} episodes")
        data[run] = df

    if not data:
        print("\nNo data found! Make sure training has generated metrics files.")
        return

    for run, df in data.items():
        plot_learning_curve(df, run, args.output_dir, args.window)

    if len(data) > 1:
        plot_comparison(data, args.output_dir, args.window)

    generate_summary_report(data, args.output_dir)

    print(f"\nAll plots saved to {args.output_dir}/")


if __name__ == "__main__":
    main()
