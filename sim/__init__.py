"""Discrete-event M/M/c simulator for an outpatient queue."""

from sim.entities import ArrivalUnit, Server, UnitStatus
from sim.errors import InvalidParameterError, SimulationStateError
from sim.events import DepartureEvent, EventType, PendingDepartures
from sim.runner import SimulationEngine, SimulationReport, run_simulation
from sim.variates import ConstantVariates, ScriptedVariates, VariateGenerator
from sim.waitline import WaitLine

__all__ = [
    "ArrivalUnit",
    "Server",
    "UnitStatus",
    "InvalidParameterError",
    "SimulationStateError",
    "DepartureEvent",
    "EventType",
    "PendingDepartures",
    "SimulationEngine",
    "SimulationReport",
    "run_simulation",
    "ConstantVariates",
    "ScriptedVariates",
    "VariateGenerator",
    "WaitLine",
]
