"""Variate sources: exponential and uniform durations for arrivals and service."""

from __future__ import annotations

import math
from typing import Any, Iterable

import numpy as np

from sim.errors import InvalidParameterError

# Largest uniform draw we accept before taking log(1 - u)
U_CLAMP = 0.999999


class VariateGenerator:
    """
    Inverse-CDF variate generator.

    `rng` is any object with a `random()` method returning a float in [0, 1)
    (numpy Generator by default). Pass a seed for reproducible runs, or a
    scripted object to control every draw in tests.
    """

    def __init__(self, rng: Any = None, seed: int | None = None) -> None:
        self.rng = rng if rng is not None else np.random.default_rng(seed)

    def _uniform01(self) -> float:
        u = float(self.rng.random())
        if u >= 1.0:
            u = U_CLAMP
        return u

    def exponential(self, rate: float) -> float:
        """Exponential duration with mean 1/rate: -ln(1 - U) / rate."""
        if rate <= 0:
            raise InvalidParameterError(f"rate must be positive, got {rate}")
        u = self._uniform01()
        return -math.log(1.0 - u) / rate

    def uniform(self, low: float, high: float) -> float:
        if low >= high:
            raise InvalidParameterError(f"low must be less than high, got {low} >= {high}")
        return low + self._uniform01() * (high - low)


class ConstantVariates:
    """Deterministic source: every exponential draw returns `value`."""

    def __init__(self, value: float) -> None:
        if value <= 0:
            raise InvalidParameterError(f"constant duration must be positive, got {value}")
        self.value = float(value)

    def exponential(self, rate: float) -> float:
        if rate <= 0:
            raise InvalidParameterError(f"rate must be positive, got {rate}")
        return self.value

    def uniform(self, low: float, high: float) -> float:
        if low >= high:
            raise InvalidParameterError(f"low must be less than high, got {low} >= {high}")
        return (low + high) / 2.0


class ScriptedVariates:
    """Returns the given durations in order, then repeats the last one."""

    def __init__(self, values: Iterable[float]) -> None:
        self.values = [float(v) for v in values]
        if not self.values:
            raise InvalidParameterError("scripted variates need at least one value")
        if any(v < 0 for v in self.values):
            raise InvalidParameterError("scripted durations must be non-negative")
        if self.values[-1] <= 0:
            raise InvalidParameterError("last scripted duration must be positive")
        self.position = 0

    def _next(self) -> float:
        idx = min(self.position, len(self.values) - 1)
        self.position += 1
        return self.values[idx]

    def exponential(self, rate: float) -> float:
        if rate <= 0:
            raise InvalidParameterError(f"rate must be positive, got {rate}")
        return self._next()

    def uniform(self, low: float, high: float) -> float:
        """Next scripted value, clamped into [low, high]."""
        if low >= high:
            raise InvalidParameterError(f"low must be less than high, got {low} >= {high}")
        return min(max(self._next(), low), high)
