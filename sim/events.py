"""Departure events and the pending-departure heap."""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from enum import Enum

from sim.entities import ArrivalUnit, Server


class EventType(str, Enum):
    ARRIVAL = "arrival"
    QUEUED = "queued"
    SERVICE_START = "service_start"
    DEPARTURE = "departure"


@dataclass(order=True)
class DepartureEvent:
    """Scheduled completion. Ordered by (time, sequence)."""

    time: float
    sequence: int
    unit: ArrivalUnit = field(compare=False)
    server: Server = field(compare=False)


class PendingDepartures:
    """
    Min-heap of scheduled completions.

    The sequence number is the scheduling order, so equal departure times
    come out first-scheduled first.
    """

    def __init__(self) -> None:
        self._heap: list[DepartureEvent] = []
        self._counter = 0

    def schedule(self, unit: ArrivalUnit, server: Server, time: float) -> DepartureEvent:
        self._counter += 1
        ev = DepartureEvent(time=time, sequence=self._counter, unit=unit, server=server)
        heapq.heappush(self._heap, ev)
        return ev

    def peek(self) -> DepartureEvent | None:
        return self._heap[0] if self._heap else None

    def pop(self) -> DepartureEvent:
        return heapq.heappop(self._heap)

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)
