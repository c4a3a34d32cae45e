"""Schema and dict-level validation for simulation scenarios."""

from __future__ import annotations

import math
import numbers
from typing import Any

# Keys use the config-file names: T (minutes), lambda and mu (per minute)
SCENARIO_SCHEMA = {
    "T": float,
    "lambda": float,
    "mu": float,
    "n_servers": int,
}

# Defaults from the OPD web form
DEFAULT_SCENARIO: dict[str, Any] = {
    "T": 480.0,
    "lambda": 0.2,
    "mu": 0.1,
    "n_servers": 2,
}


def validate_scenario(scenario: dict[str, Any]) -> tuple[bool, list[str]]:
    """
    Validate a scenario dict. Returns (valid, list of error messages).
    Missing keys are filled from DEFAULT_SCENARIO by the caller, not here.
    """
    errors: list[str] = []
    if not isinstance(scenario, dict):
        return False, ["scenario must be a dict"]

    for key, kind in SCENARIO_SCHEMA.items():
        if key not in scenario:
            errors.append(f"{key} is required")
            continue
        value = scenario[key]
        if isinstance(value, bool):
            errors.append(f"{key} must be a number")
            continue
        if kind is int:
            if not isinstance(value, numbers.Integral):
                errors.append(f"{key} must be an integer")
                continue
        elif not isinstance(value, numbers.Real):
            errors.append(f"{key} must be a number")
            continue
        if not math.isfinite(value) or value <= 0:
            errors.append(f"{key} must be positive")

    unknown = sorted(set(scenario) - set(SCENARIO_SCHEMA))
    for key in unknown:
        errors.append(f"unknown key: {key}")

    return len(errors) == 0, errors


def offered_load(scenario: dict[str, Any]) -> float:
    """rho = lambda / (c * mu); >= 1 means the queue grows without bound."""
    return scenario["lambda"] / (scenario["n_servers"] * scenario["mu"])


def scenario_to_engine_kwargs(scenario: dict[str, Any]) -> dict[str, Any]:
    """Map config-style keys to SimulationEngine keyword arguments."""
    return {
        "horizon": float(scenario["T"]),
        "arrival_rate": float(scenario["lambda"]),
        "service_rate": float(scenario["mu"]),
        "server_count": int(scenario["n_servers"]),
    }
