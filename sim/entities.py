"""Simulator entities: ArrivalUnit, Server."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from sim.errors import SimulationStateError

# Sentinel for timestamps that have not happened yet
UNSET = -1.0

# Unit status
STATUS_WAITING = "waiting"
STATUS_IN_SERVICE = "in_service"
STATUS_SERVED = "served"


class UnitStatus(str, Enum):
    WAITING = STATUS_WAITING
    IN_SERVICE = STATUS_IN_SERVICE
    SERVED = STATUS_SERVED


@dataclass
class ArrivalUnit:
    """One arriving unit of work (a patient)."""

    id: int
    arrival_time: float
    service_start: float = UNSET  # set when a server picks the unit up
    departure_time: float = UNSET  # set when service completes

    def __hash__(self) -> int:
        return hash(self.id)

    @property
    def has_started_service(self) -> bool:
        return self.service_start >= 0

    @property
    def has_departed(self) -> bool:
        return self.departure_time >= 0

    @property
    def status(self) -> UnitStatus:
        if self.has_departed:
            return UnitStatus.SERVED
        if self.has_started_service:
            return UnitStatus.IN_SERVICE
        return UnitStatus.WAITING

    @property
    def waiting_time(self) -> float:
        """service_start - arrival_time, or 0 before service starts."""
        if not self.has_started_service:
            return 0.0
        return self.service_start - self.arrival_time

    @property
    def service_time(self) -> float:
        """departure_time - service_start, or 0 before departure."""
        if not self.has_departed or not self.has_started_service:
            return 0.0
        return self.departure_time - self.service_start

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "arrival_time": self.arrival_time,
            "service_start": self.service_start if self.has_started_service else None,
            "departure_time": self.departure_time if self.has_departed else None,
            "waiting_time": self.waiting_time,
            "service_time": self.service_time,
            "status": self.status.value,
        }


@dataclass
class Server:
    """A doctor/server; serves one unit at a time."""

    id: int
    current_unit: ArrivalUnit | None = None
    busy_time: float = 0.0  # simulated time spent serving, capped at the horizon

    @property
    def is_available(self) -> bool:
        return self.current_unit is None

    def assign(self, unit: ArrivalUnit) -> None:
        if self.current_unit is not None:
            raise SimulationStateError(
                f"server {self.id} is already serving unit {self.current_unit.id}"
            )
        self.current_unit = unit

    def release(self, current_time: float, horizon: float) -> ArrivalUnit:
        """Free the server and credit busy time up to min(current_time, horizon)."""
        unit = self.current_unit
        if unit is None:
            raise SimulationStateError(f"server {self.id} has no unit to release")
        if unit.has_started_service:
            effective = min(current_time, horizon)
            self.add_busy_time(effective - unit.service_start)
        self.current_unit = None
        return unit

    def add_busy_time(self, duration: float) -> None:
        if duration > 0:
            self.busy_time += duration

    def utilization(self, horizon: float) -> float:
        if horizon <= 0:
            return 0.0
        return self.busy_time / horizon

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "available": self.is_available,
            "current_unit_id": self.current_unit.id if self.current_unit else None,
            "busy_time": self.busy_time,
        }
