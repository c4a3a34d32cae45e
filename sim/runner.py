"""M/M/c engine: next-event time advance over arrivals and departures."""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from typing import Any

from sim.entities import ArrivalUnit, Server
from sim.errors import InvalidParameterError, SimulationStateError
from sim.events import DepartureEvent, EventType, PendingDepartures
from sim.variates import VariateGenerator
from sim.waitline import WaitLine


@dataclass
class SimulationReport:
    """Statistics for one run over [0, horizon]."""

    horizon: float
    arrival_rate: float
    service_rate: float
    server_count: int
    total_arrived: int
    total_served: int
    units_waiting: int  # still in the wait-line when the loop ended
    units_in_service: int
    average_wait: float
    max_wait: float
    average_service_time: float
    average_queue_length: float
    max_queue_length: int
    utilization: float  # not clamped; may overshoot 1.0 slightly near the boundary
    server_utilization: list[float] = field(default_factory=list)
    server_busy_time: list[float] = field(default_factory=list)
    served_units: list[ArrivalUnit] = field(default_factory=list, repr=False)
    trace: list[tuple] = field(default_factory=list, repr=False)
    servers: list[Server] = field(default_factory=list, repr=False)

    def to_dict(self, include_units: bool = False) -> dict[str, Any]:
        d: dict[str, Any] = {
            "horizon": self.horizon,
            "arrival_rate": self.arrival_rate,
            "service_rate": self.service_rate,
            "server_count": self.server_count,
            "total_arrived": self.total_arrived,
            "total_served": self.total_served,
            "units_waiting": self.units_waiting,
            "units_in_service": self.units_in_service,
            "average_wait": self.average_wait,
            "max_wait": self.max_wait,
            "average_service_time": self.average_service_time,
            "average_queue_length": self.average_queue_length,
            "max_queue_length": self.max_queue_length,
            "utilization": self.utilization,
            "server_utilization": list(self.server_utilization),
            "server_busy_time": list(self.server_busy_time),
        }
        if include_units:
            d["served_units"] = [u.to_dict() for u in self.served_units]
            d["servers"] = [s.to_dict() for s in self.servers]
        return d


def validate_parameters(
    horizon: float, arrival_rate: float, service_rate: float, server_count: int
) -> None:
    """Raise InvalidParameterError unless every parameter is positive and finite."""
    for name, value in (
        ("horizon", horizon),
        ("arrival_rate", arrival_rate),
        ("service_rate", service_rate),
    ):
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise InvalidParameterError(f"{name} must be a number, got {value!r}")
        if not math.isfinite(value) or value <= 0:
            raise InvalidParameterError(f"{name} must be positive and finite, got {value}")
    if isinstance(server_count, bool) or not isinstance(server_count, numbers.Integral):
        raise InvalidParameterError(f"server_count must be an integer, got {server_count!r}")
    if server_count <= 0:
        raise InvalidParameterError(f"server_count must be positive, got {server_count}")


class SimulationEngine:
    """
    Single-run M/M/c FIFO simulator.

    Arrivals stop once the horizon is reached; in-flight services drain
    afterwards. A departure wins an exact time tie with an arrival.
    Departures after the horizon do not start new services, so units
    still queued at that point are reported as `units_waiting`.
    """

    def __init__(
        self,
        horizon: float,
        arrival_rate: float,
        service_rate: float,
        server_count: int,
        variates: Any = None,
        service_variates: Any = None,
        seed: int | None = None,
        record_trace: bool = False,
    ) -> None:
        validate_parameters(horizon, arrival_rate, service_rate, server_count)

        self.horizon = float(horizon)
        self.arrival_rate = float(arrival_rate)
        self.service_rate = float(service_rate)
        self.arrival_variates = variates if variates is not None else VariateGenerator(seed=seed)
        self.service_variates = (
            service_variates if service_variates is not None else self.arrival_variates
        )
        self.record_trace = record_trace

        self.servers = [Server(id=i) for i in range(1, server_count + 1)]
        self.wait_line = WaitLine()
        self.pending = PendingDepartures()
        self.served: list[ArrivalUnit] = []
        self.trace: list[tuple] = []
        self.total_arrived = 0
        self.current_time = 0.0
        self.next_arrival_time = math.inf
        self._next_unit_id = 1
        self._has_run = False

    def run(self) -> SimulationReport:
        """Simulate the whole horizon and return the statistics."""
        if self._has_run:
            raise SimulationStateError("engine has already run; create a new one")
        self._has_run = True

        T = self.horizon
        self.next_arrival_time = self.arrival_variates.exponential(self.arrival_rate)

        while True:
            nxt = self.pending.peek()
            if nxt is not None and (self.current_time >= T or nxt.time <= self.next_arrival_time):
                self._process_departure(self.pending.pop())
            elif self.current_time < T and self.next_arrival_time <= T:
                self._process_arrival()
            elif nxt is not None:
                self._process_departure(self.pending.pop())
            else:
                break

        self._finalize()
        return self._build_report()

    def _record(self, event_type: EventType, unit: ArrivalUnit, server: Server | None) -> None:
        if self.record_trace:
            self.trace.append(
                (
                    self.current_time,
                    event_type.value,
                    unit.id,
                    server.id if server is not None else None,
                    self.wait_line.current_length,
                )
            )

    def _find_available_server(self) -> Server | None:
        for server in self.servers:
            if server.is_available:
                return server
        return None

    def _start_service(self, unit: ArrivalUnit, server: Server) -> DepartureEvent:
        unit.service_start = self.current_time
        server.assign(unit)
        self._record(EventType.SERVICE_START, unit, server)
        duration = self.service_variates.exponential(self.service_rate)
        return self.pending.schedule(unit, server, self.current_time + duration)

    def _process_arrival(self) -> None:
        self.current_time = self.next_arrival_time
        unit = ArrivalUnit(id=self._next_unit_id, arrival_time=self.current_time)
        self._next_unit_id += 1
        self.total_arrived += 1
        self._record(EventType.ARRIVAL, unit, None)

        server = self._find_available_server()
        if server is not None:
            self._start_service(unit, server)
        else:
            self.wait_line.enqueue(unit, self.current_time)
            self._record(EventType.QUEUED, unit, None)

        if self.current_time < self.horizon:
            gap = self.arrival_variates.exponential(self.arrival_rate)
            self.next_arrival_time = self.current_time + gap
        else:
            self.next_arrival_time = math.inf

    def _process_departure(self, ev: DepartureEvent) -> None:
        self.current_time = ev.time
        unit = ev.server.release(self.current_time, self.horizon)
        unit.departure_time = self.current_time
        self.served.append(unit)
        self._record(EventType.DEPARTURE, unit, ev.server)

        if not self.wait_line.is_empty() and self.current_time < self.horizon:
            next_unit = self.wait_line.dequeue(self.current_time)
            if next_unit is not None:
                self._start_service(next_unit, ev.server)

    def _finalize(self) -> None:
        self.wait_line.finalize(self.horizon)
        for server in self.servers:
            unit = server.current_unit
            if unit is not None and unit.has_started_service:
                if unit.service_start < self.horizon:
                    server.add_busy_time(self.horizon - unit.service_start)

    def _build_report(self) -> SimulationReport:
        T = self.horizon
        n_served = len(self.served)
        waits = [u.waiting_time for u in self.served]
        services = [u.service_time for u in self.served]
        total_busy = sum(s.busy_time for s in self.servers)
        return SimulationReport(
            horizon=T,
            arrival_rate=self.arrival_rate,
            service_rate=self.service_rate,
            server_count=len(self.servers),
            total_arrived=self.total_arrived,
            total_served=n_served,
            units_waiting=self.wait_line.size(),
            units_in_service=sum(1 for s in self.servers if not s.is_available),
            average_wait=sum(waits) / n_served if n_served else 0.0,
            max_wait=max(waits) if waits else 0.0,
            average_service_time=sum(services) / n_served if n_served else 0.0,
            average_queue_length=self.wait_line.average_length(T),
            max_queue_length=self.wait_line.max_length,
            utilization=total_busy / (T * len(self.servers)),
            server_utilization=[s.utilization(T) for s in self.servers],
            server_busy_time=[s.busy_time for s in self.servers],
            served_units=list(self.served),
            trace=list(self.trace),
            servers=list(self.servers),
        )


def run_simulation(
    params: dict[str, Any],
    seed: int | None = None,
    include_units: bool = False,
) -> dict[str, Any]:
    """
    Run one simulation from a params dict (keys T, lambda, mu, n_servers).
    Returns the report as a dict.
    """
    engine = SimulationEngine(
        horizon=params.get("T", 480.0),
        arrival_rate=params.get("lambda", 0.2),
        service_rate=params.get("mu", 0.1),
        server_count=params.get("n_servers", 2),
        seed=seed,
    )
    return engine.run().to_dict(include_units=include_units)
