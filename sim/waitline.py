"""FIFO wait-line with a time-weighted queue-length integral."""

from __future__ import annotations

from collections import deque

from sim.entities import ArrivalUnit
from sim.errors import SimulationStateError


class WaitLine:
    """
    Units waiting for a free server, oldest first.

    Every length change first integrates length * dt since the previous
    change, so `area / horizon` is the time-average queue length once
    `finalize(horizon)` has been called.
    """

    def __init__(self, start_time: float = 0.0) -> None:
        self._units: deque[ArrivalUnit] = deque()
        self.current_length = 0
        self.max_length = 0
        self.area = 0.0
        self.last_change_time = start_time
        self.finalized = False

    def _integrate(self, now: float) -> None:
        self.area += self.current_length * (now - self.last_change_time)

    def enqueue(self, unit: ArrivalUnit, now: float) -> None:
        self._integrate(now)
        self._units.append(unit)
        self.current_length += 1
        if self.current_length > self.max_length:
            self.max_length = self.current_length
        self.last_change_time = now

    def dequeue(self, now: float) -> ArrivalUnit | None:
        self._integrate(now)
        unit = None
        if self._units:
            unit = self._units.popleft()
            self.current_length -= 1
        self.last_change_time = now
        return unit

    def finalize(self, end_time: float) -> None:
        """Extend the integral to end_time. Call once, after the last event."""
        if self.finalized:
            raise SimulationStateError("wait-line already finalized")
        self._integrate(end_time)
        self.last_change_time = end_time
        self.finalized = True

    def average_length(self, horizon: float) -> float:
        if horizon <= 0:
            return 0.0
        return self.area / horizon

    def is_empty(self) -> bool:
        return not self._units

    def size(self) -> int:
        return len(self._units)

    def __len__(self) -> int:
        return len(self._units)
