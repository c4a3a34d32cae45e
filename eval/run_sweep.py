"""Sweep the arrival rate over a list of values and save a CSV of summaries."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Any

from eval.run_replications import evaluate_scenario, extract_scenario, load_config


def run_sweep(
    params: dict[str, Any],
    arrival_rates: list[float],
    K: int,
    base_seed: int = 0,
    results_dir: str | Path | None = None,
) -> list[dict[str, Any]]:
    """One row per arrival rate; written to results_dir/sweep_results.csv when given."""
    base = extract_scenario(params)
    rows: list[dict[str, Any]] = []
    for lam in arrival_rates:
        scenario = dict(base)
        scenario["lambda"] = float(lam)
        summary = evaluate_scenario(scenario, K, base_seed)
        mean_m = summary["mean_metrics"]
        theory = summary["theory"]
        wait_ci = summary["ci95"]["average_wait"]
        rows.append(
            {
                "lambda": scenario["lambda"],
                "mu": scenario["mu"],
                "n_servers": scenario["n_servers"],
                "rho": theory["rho"],
                "average_wait_mean": mean_m["average_wait"],
                "average_wait_ci_lower": wait_ci[0],
                "average_wait_ci_upper": wait_ci[1],
                "theory_wait": theory["theory_wait"],
                "average_queue_length_mean": mean_m["average_queue_length"],
                "theory_queue_length": theory["theory_queue_length"],
                "max_queue_length_mean": mean_m["max_queue_length"],
                "utilization_mean": mean_m["utilization"],
                "total_served_mean": mean_m["total_served"],
            }
        )

    if results_dir is not None and rows:
        results_dir = Path(results_dir)
        results_dir.mkdir(parents=True, exist_ok=True)
        out_csv = results_dir / "sweep_results.csv"
        with open(out_csv, "w", newline="") as f:
            w = csv.DictWriter(f, fieldnames=list(rows[0].keys()))
            w.writeheader()
            w.writerows(rows)
        print(f"Wrote {out_csv} with {len(rows)} arrival rates.")
    return rows


def main(
    arrival_rates: list[float],
    K: int | None = None,
    config_path: str | Path | None = None,
    results_dir: str | Path = "results",
    base_seed: int | None = None,
) -> list[dict[str, Any]]:
    params = load_config(config_path)
    reps = params.get("replications", {})
    K = K if K is not None else reps.get("K", 20)
    base_seed = base_seed if base_seed is not None else reps.get("base_seed", 0)
    return run_sweep(params, arrival_rates, K, base_seed, results_dir)


if __name__ == "__main__":
    import argparse
    p = argparse.ArgumentParser()
    p.add_argument("--rates", type=str, required=True, help="Comma-separated arrival rates")
    p.add_argument("--K", type=int, default=None)
    p.add_argument("--config", type=str, default=None)
    p.add_argument("--results_dir", type=str, default="results")
    p.add_argument("--seed", type=int, default=None)
    args = p.parse_args()
    rates = [float(r) for r in args.rates.split(",") if r.strip()]
    main(rates, K=args.K, config_path=args.config, results_dir=args.results_dir, base_seed=args.seed)
