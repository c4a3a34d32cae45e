"""Aggregation, confidence intervals, and analytic M/M/c reference values."""

from __future__ import annotations

import math
from typing import Any

import numpy as np


def aggregate_metrics(metrics_list: list[dict]) -> tuple[dict, dict]:
    """
    Aggregate K replications: mean and std per metric.
    List-valued metrics (per-server utilisation) are averaged element-wise.
    """
    if not metrics_list:
        return {}, {}

    keys = list(metrics_list[0].keys())
    means: dict[str, Any] = {}
    stds: dict[str, Any] = {}
    for k in keys:
        vals = [m.get(k, 0) for m in metrics_list]
        if isinstance(vals[0], bool):
            means[k] = vals[0]
        elif isinstance(vals[0], (int, float)):
            means[k] = float(np.mean(vals))
            stds[k] = float(np.std(vals)) if len(vals) > 1 else 0.0
        elif isinstance(vals[0], list) and vals[0] and all(len(v) == len(vals[0]) for v in vals):
            arr = np.array(vals, dtype=float)
            means[k] = arr.mean(axis=0).tolist()
            stds[k] = arr.std(axis=0).tolist() if len(vals) > 1 else [0.0] * arr.shape[1]
        else:
            means[k] = vals[0]

    return means, stds


def confidence_interval_95(values: list[float]) -> tuple[float, float]:
    """Return (lower, upper) 95% CI for mean."""
    if len(values) < 2:
        return (float(values[0]), float(values[0])) if values else (0.0, 0.0)
    n = len(values)
    mean = np.mean(values)
    se = np.std(values, ddof=1) / (n ** 0.5)
    # Approximate 1.96 for 95%
    margin = 1.96 * se
    return (float(mean - margin), float(mean + margin))


def erlang_c(c: int, lambda_rate: float, mu: float) -> tuple[float, float, float, float]:
    """
    Return (P_wait, W_q, L_q, rho) for an M/M/c queue in steady state.
    Raises ValueError for invalid arguments or an unstable system.
    """
    if c < 1 or lambda_rate <= 0 or mu <= 0:
        raise ValueError("Invalid parameters")
    a = lambda_rate / mu
    rho = a / c
    if rho >= 1.0:
        raise ValueError("System unstable: arrival rate >= c * mu")
    sum_terms = sum((a**k) / math.factorial(k) for k in range(c))
    last = (a**c) / math.factorial(c) / (1.0 - rho)
    p_wait = last / (sum_terms + last)
    w_q = p_wait / (c * mu - lambda_rate)
    l_q = lambda_rate * w_q  # Little's law
    return p_wait, w_q, l_q, rho


def compare_with_theory(metrics: dict[str, Any], scenario: dict[str, Any]) -> dict[str, Any]:
    """Simulated vs analytic wait, queue length, and utilisation. Theory is None when rho >= 1."""
    c = int(scenario["n_servers"])
    lam = float(scenario["lambda"])
    mu = float(scenario["mu"])
    rho = lam / (c * mu)
    try:
        p_wait, w_q, l_q, _ = erlang_c(c, lam, mu)
    except ValueError:
        p_wait = w_q = l_q = None
    stable = w_q is not None
    return {
        "rho": rho,
        "stable": stable,
        "theory_p_wait": p_wait,
        "theory_wait": w_q,
        "sim_wait": metrics.get("average_wait"),
        "theory_queue_length": l_q,
        "sim_queue_length": metrics.get("average_queue_length"),
        "theory_utilization": rho if stable else None,
        "sim_utilization": metrics.get("utilization"),
    }
