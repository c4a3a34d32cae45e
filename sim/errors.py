"""Exceptions raised by the simulator."""

from __future__ import annotations


class InvalidParameterError(ValueError):
    """A simulation or variate parameter is out of range."""


class SimulationStateError(RuntimeError):
    """An operation was attempted in a state that does not allow it."""
