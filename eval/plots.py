"""Generate figures: per-server utilisation bars, arrival-rate sweep curves."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt


def plot_server_utilization(
    report: dict[str, Any],
    output_path: str | Path,
) -> Path:
    """Bar chart of utilisation per server, with the aggregate as a dashed line."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    utils = report.get("server_utilization", [])
    labels = [f"Doctor {i + 1}" for i in range(len(utils))]

    fig, ax = plt.subplots(figsize=(max(5, len(utils) * 0.8), 4))
    ax.bar(labels, [u * 100 for u in utils], alpha=0.8)
    ax.axhline(report.get("utilization", 0) * 100, linestyle="--", color="black", label="overall")
    ax.set_ylabel("Utilization (%)")
    ax.set_ylim(0, 105)
    ax.set_title("Per-server utilization")
    ax.legend()
    plt.xticks(rotation=45, ha="right")
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close()
    return output_path


def plot_sweep(
    csv_path: str | Path,
    output_path: str | Path | None = None,
) -> Path:
    """Simulated mean wait (with CI) and Erlang C wait against arrival rate."""
    import pandas as pd

    df = pd.read_csv(csv_path)
    if output_path is None:
        output_path = Path(csv_path).parent / "sweep_wait.png"
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if "lambda" not in df.columns or "average_wait_mean" not in df.columns:
        return output_path

    fig, ax = plt.subplots()
    ax.errorbar(
        df["lambda"],
        df["average_wait_mean"],
        yerr=[
            (df["average_wait_mean"] - df["average_wait_ci_lower"]).clip(lower=0),
            (df["average_wait_ci_upper"] - df["average_wait_mean"]).clip(lower=0),
        ],
        marker="o",
        markersize=4,
        capsize=3,
        label="simulated",
    )
    if "theory_wait" in df.columns:
        theory = df.dropna(subset=["theory_wait"])
        ax.plot(theory["lambda"], theory["theory_wait"], linestyle="--", label="Erlang C")
    ax.set_xlabel("Arrival rate (per minute)")
    ax.set_ylabel("Mean wait (minutes)")
    ax.set_title("Mean wait vs arrival rate")
    ax.legend()
    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close()
    return output_path


def generate_all_plots(results_dir: str | Path = "results") -> None:
    """Generate all plots from results dir if corresponding CSVs/JSONs exist."""
    results_dir = Path(results_dir)
    if (results_dir / "sweep_results.csv").exists():
        plot_sweep(results_dir / "sweep_results.csv", results_dir / "sweep_wait.png")
        print("Saved sweep_wait.png")
    if (results_dir / "report.json").exists():
        with open(results_dir / "report.json") as f:
            report = json.load(f)
        plot_server_utilization(report, results_dir / "server_utilization.png")
        print("Saved server_utilization.png")


if __name__ == "__main__":
    import argparse

    p = argparse.ArgumentParser()
    p.add_argument("--results_dir", type=str, default="results")
    args = p.parse_args()
    generate_all_plots(results_dir=args.results_dir)
