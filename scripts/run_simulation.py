#!/usr/bin/env python3
"""
OPD Queue Simulation Runner
Accepts scenario parameters from a config file and/or flags, runs the M/M/c
simulation (once, or K seeded replications), and prints or saves the report.

Usage:
  python scripts/run_simulation.py --time 480 --arrival-rate 0.2 --service-rate 0.1 --doctors 2
  python scripts/run_simulation.py --config config/default.yaml --replications 20 --json
  python scripts/run_simulation.py --sweep 0.05,0.1,0.15 --replications 10 --results_dir results
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

# Add project root to path
PROJECT_ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from env_config import get_default_seed
from eval.metrics import compare_with_theory
from eval.plots import plot_server_utilization, plot_sweep
from eval.run_replications import evaluate_scenario, load_config
from eval.run_sweep import run_sweep
from scenarios.models import ScenarioModel, scenario_json_schema
from scenarios.schema import scenario_to_engine_kwargs
from sim.errors import InvalidParameterError
from sim.runner import SimulationEngine

EXIT_OK = 0
EXIT_INVALID = 2


class SimulationRunner:
    """Runs scenarios and logs progress to console and, optionally, a file."""

    def __init__(self, log_file: str | Path | None = None, quiet: bool = False):
        self.log_file = Path(log_file) if log_file else None
        self.quiet = quiet
        if self.log_file is not None:
            self.log_file.parent.mkdir(parents=True, exist_ok=True)

    def log(self, message: str, level: str = "INFO") -> None:
        """Log message to file and console."""
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        log_message = f"[{timestamp}] {level}: {message}"

        if not self.quiet:
            print(log_message, file=sys.stderr)

        if self.log_file is not None:
            with open(self.log_file, "a") as f:
                f.write(log_message + "\n")

    def run_single(self, scenario: dict[str, Any], seed: int | None) -> dict[str, Any]:
        self.log(
            f"Running single simulation: T={scenario['T']}, lambda={scenario['lambda']}, "
            f"mu={scenario['mu']}, doctors={scenario['n_servers']}, seed={seed}"
        )
        engine = SimulationEngine(**scenario_to_engine_kwargs(scenario), seed=seed)
        report = engine.run().to_dict()
        report["theory"] = compare_with_theory(report, scenario)
        self.log(
            f"Completed: arrived={report['total_arrived']}, served={report['total_served']}, "
            f"waiting_at_end={report['units_waiting']}"
        )
        if report["utilization"] > 1.0:
            self.log(f"Utilization above 1.0 ({report['utilization']:.4f})", "WARNING")
        return report

    def run_replicated(self, scenario: dict[str, Any], K: int, base_seed: int) -> dict[str, Any]:
        self.log(f"Running {K} replications from seed {base_seed}")
        summary = evaluate_scenario(scenario, K, base_seed)
        self.log(
            f"Mean wait {summary['mean_metrics']['average_wait']:.3f} "
            f"(95% CI {summary['ci95']['average_wait'][0]:.3f}..{summary['ci95']['average_wait'][1]:.3f})"
        )
        if not summary["theory"]["stable"]:
            self.log(f"Offered load rho={summary['theory']['rho']:.3f} >= 1; queue is unstable", "WARNING")
        return summary

    def run_sweep(
        self,
        scenario: dict[str, Any],
        rates: list[float],
        K: int,
        base_seed: int,
        results_dir: str | Path,
    ) -> list[dict[str, Any]]:
        self.log(f"Sweeping arrival rate over {rates} with K={K}")
        rows = run_sweep(scenario, rates, K, base_seed, results_dir)
        self.log(f"Sweep finished: {len(rows)} rows in {results_dir}")
        return rows


def format_report(report: dict[str, Any]) -> str:
    """Human-readable banner and results block for a single run."""
    lines = [
        "=====================================",
        f"Simulation Time: {report['horizon']:.2f} minutes",
        f"Arrival Rate: {report['arrival_rate']:.4f} patients/minute",
        f"Service Rate: {report['service_rate']:.4f} patients/minute per doctor",
        f"Number of Doctors: {report['server_count']}",
        "=====================================",
        "SIMULATION RESULTS",
        "=====================================",
        f"Total Patients Arrived: {report['total_arrived']}",
        f"Total Patients Served: {report['total_served']}",
        f"Patients Still Waiting: {report['units_waiting']}",
        f"Average Waiting Time: {report['average_wait']:.2f} minutes",
        f"Maximum Waiting Time: {report['max_wait']:.2f} minutes",
        f"Average Queue Length: {report['average_queue_length']:.2f} patients",
        f"Maximum Queue Length: {report['max_queue_length']} patients",
        f"Service Utilization: {report['utilization'] * 100:.2f}%",
        "",
        "Per-Doctor Statistics:",
        "----------------------",
    ]
    for i, u in enumerate(report["server_utilization"], start=1):
        lines.append(f"Doctor {i} Utilization: {u * 100:.2f}%")
    theory = report.get("theory")
    if theory and theory.get("stable"):
        lines += [
            "",
            "Erlang C reference (steady state):",
            f"  Mean wait: {theory['theory_wait']:.2f} minutes",
            f"  Mean queue length: {theory['theory_queue_length']:.2f} patients",
            f"  Utilization: {theory['theory_utilization'] * 100:.2f}%",
        ]
    lines.append("=====================================")
    return "\n".join(lines)


def build_scenario(args: argparse.Namespace) -> dict[str, Any]:
    """Config file values overridden by flags, validated through ScenarioModel."""
    params = load_config(args.config)
    raw = {
        "T": params["T"],
        "lambda": params["lambda"],
        "mu": params["mu"],
        "n_servers": params["n_servers"],
    }
    overrides = {
        "T": args.time,
        "lambda": args.arrival_rate,
        "mu": args.service_rate,
        "n_servers": args.doctors,
    }
    for key, value in overrides.items():
        if value is not None:
            raw[key] = value
    return ScenarioModel.model_validate(raw).to_scenario_dict()


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the OPD M/M/c queue simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python scripts/run_simulation.py --time 480 --arrival-rate 0.2 --service-rate 0.1 --doctors 2
  python scripts/run_simulation.py --replications 20 --seed 7 --json
  python scripts/run_simulation.py --sweep 0.05,0.1,0.15,0.19 --results_dir results
        """,
    )
    parser.add_argument("--config", type=str, default=None, help="Scenario YAML (default: config/default.yaml)")
    parser.add_argument("--time", type=float, default=None, help="Simulation horizon in minutes")
    parser.add_argument("--arrival-rate", type=float, default=None, help="Patients per minute (lambda)")
    parser.add_argument("--service-rate", type=float, default=None, help="Services per minute per doctor (mu)")
    parser.add_argument("--doctors", type=int, default=None, help="Number of doctors (c)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed (default: MMC_SIM_SEED or unseeded)")
    parser.add_argument("--replications", type=int, default=None, help="Run K seeded replications")
    parser.add_argument("--sweep", type=str, default=None, help="Comma-separated arrival rates to sweep")
    parser.add_argument("--results_dir", type=str, default="results", help="Directory for sweep CSV")
    parser.add_argument("--json", action="store_true", help="Print the report as JSON")
    parser.add_argument("--output", type=str, default=None, help="Write the JSON report to this file")
    parser.add_argument("--plot", type=str, default=None, help="Save a utilization/sweep plot to this PNG")
    parser.add_argument("--log-file", type=str, default=None, help="Append log lines to this file")
    parser.add_argument("--quiet", action="store_true", help="Suppress log lines on stderr")
    parser.add_argument("--schema", action="store_true", help="Print the JSON schema for scenario input and exit")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)
    if args.schema:
        print(json.dumps(scenario_json_schema(), indent=2))
        return EXIT_OK
    runner = SimulationRunner(log_file=args.log_file, quiet=args.quiet)

    try:
        scenario = build_scenario(args)
        seed = args.seed if args.seed is not None else get_default_seed()

        if args.sweep:
            rates = [float(r) for r in args.sweep.split(",") if r.strip()]
            K = (
                args.replications
                if args.replications is not None
                else load_config(args.config)["replications"]["K"]
            )
            rows = runner.run_sweep(scenario, rates, K, seed or 0, args.results_dir)
            result: Any = rows
            if args.plot:
                plot_sweep(Path(args.results_dir) / "sweep_results.csv", args.plot)
        elif args.replications is not None:
            result = runner.run_replicated(scenario, args.replications, seed or 0)
            if args.plot:
                plot_server_utilization(result["mean_metrics"], args.plot)
        else:
            result = runner.run_single(scenario, seed)
            if args.plot:
                plot_server_utilization(result, args.plot)
    except (ValidationError, InvalidParameterError) as e:
        runner.log(f"Invalid parameters: {e}", "ERROR")
        return EXIT_INVALID
    except ValueError as e:
        runner.log(f"Invalid input: {e}", "ERROR")
        return EXIT_INVALID

    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        with open(out, "w") as f:
            json.dump(result, f, indent=2)
        runner.log(f"Saved report to {out}")

    if args.json or args.sweep or args.replications is not None:
        print(json.dumps(result, indent=2))
    else:
        print(format_report(result))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
