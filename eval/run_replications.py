"""Run K seeded replications of a scenario and summarise them."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from env_config import get_config_path
from scenarios.schema import DEFAULT_SCENARIO, SCENARIO_SCHEMA, validate_scenario
from sim.errors import InvalidParameterError
from sim.runner import run_simulation
from eval.metrics import aggregate_metrics, compare_with_theory, confidence_interval_95

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "default.yaml"

# Metrics that get a 95% CI in the summary
CI_METRICS = ("average_wait", "average_queue_length", "utilization", "total_served")


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """Load config YAML; flatten `sim` and `replications` into params for run_simulation."""
    if config_path is None:
        config_path = get_config_path() or DEFAULT_CONFIG_PATH
    path = Path(config_path)
    if not path.exists():
        return _default_params()
    with open(path) as f:
        cfg = yaml.safe_load(f) or {}
    return _config_to_params(cfg)


def _default_params() -> dict[str, Any]:
    params: dict[str, Any] = dict(DEFAULT_SCENARIO)
    params["replications"] = {"K": 20, "base_seed": 0}
    return params


def _config_to_params(cfg: dict[str, Any]) -> dict[str, Any]:
    sim = cfg.get("sim", {}) or {}
    reps = cfg.get("replications", {}) or {}
    params: dict[str, Any] = {key: sim.get(key, DEFAULT_SCENARIO[key]) for key in SCENARIO_SCHEMA}
    params["replications"] = {
        "K": reps.get("K", 20),
        "base_seed": reps.get("base_seed", 0),
    }
    return params


def extract_scenario(params: dict[str, Any]) -> dict[str, Any]:
    """Scenario keys only, validated. Raises InvalidParameterError."""
    scenario = {key: params.get(key, DEFAULT_SCENARIO[key]) for key in SCENARIO_SCHEMA}
    valid, errors = validate_scenario(scenario)
    if not valid:
        raise InvalidParameterError("; ".join(errors))
    return scenario


def run_replications(
    params: dict[str, Any],
    K: int,
    base_seed: int = 0,
) -> tuple[dict[str, Any], dict[str, Any], list[dict]]:
    """
    Run K simulations with seeds base_seed .. base_seed+K-1.
    Returns (mean_metrics, std_metrics, all_metrics_list).
    """
    if K < 1:
        raise InvalidParameterError(f"K must be at least 1, got {K}")
    scenario = extract_scenario(params)
    metrics_list: list[dict] = []
    for i in range(K):
        metrics_list.append(run_simulation(scenario, seed=base_seed + i))
    mean_metrics, std_metrics = aggregate_metrics(metrics_list)
    return mean_metrics, std_metrics, metrics_list


def evaluate_scenario(
    params: dict[str, Any],
    K: int,
    base_seed: int = 0,
) -> dict[str, Any]:
    """
    Run K replications and return summary: means, stds, 95% CIs, theory comparison.
    """
    scenario = extract_scenario(params)
    mean_m, std_m, all_metrics = run_replications(scenario, K, base_seed)
    ci = {k: confidence_interval_95([m[k] for m in all_metrics]) for k in CI_METRICS}
    return {
        "scenario": scenario,
        "K": K,
        "base_seed": base_seed,
        "mean_metrics": mean_m,
        "std_metrics": std_m,
        "ci95": ci,
        "theory": compare_with_theory(mean_m, scenario),
    }
