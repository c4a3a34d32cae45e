#!/usr/bin/env python3
"""
Deterministic engine scenarios driven by constant/scripted variates.
Every expected number below is traced by hand from the event timeline.
"""

import sys
import unittest
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from sim.runner import SimulationEngine
from sim.variates import ConstantVariates, ScriptedVariates


def make_engine(horizon, server_count, arrivals, services, record_trace=False):
    return SimulationEngine(
        horizon=horizon,
        arrival_rate=1.0,
        service_rate=1.0,
        server_count=server_count,
        variates=arrivals,
        service_variates=services,
        record_trace=record_trace,
    )


class TestSingleServerNoQueue(unittest.TestCase):
    """Gap a=1, service s=0.5, one server, horizon 10a."""

    def setUp(self):
        engine = make_engine(10.0, 1, ConstantVariates(1.0), ConstantVariates(0.5))
        self.report = engine.run()

    def test_ten_arrivals_at_multiples_of_gap(self):
        self.assertEqual(self.report.total_arrived, 10)
        self.assertEqual(
            [u.arrival_time for u in self.report.served_units],
            [float(i) for i in range(1, 11)],
        )
        self.assertEqual([u.id for u in self.report.served_units], list(range(1, 11)))

    def test_no_waiting(self):
        self.assertEqual(self.report.total_served, 10)
        self.assertEqual(self.report.average_wait, 0.0)
        self.assertEqual(self.report.max_queue_length, 0)
        self.assertEqual(self.report.average_queue_length, 0.0)
        self.assertEqual(self.report.units_waiting, 0)

    def test_last_unit_starting_at_horizon_earns_no_busy_time(self):
        last = self.report.served_units[-1]
        self.assertEqual(last.service_start, 10.0)
        self.assertEqual(last.departure_time, 10.5)
        # nine full services of 0.5 inside [0, 10]
        self.assertAlmostEqual(self.report.server_busy_time[0], 4.5)
        self.assertAlmostEqual(self.report.utilization, 0.45)
        self.assertAlmostEqual(self.report.server_utilization[0], 0.45)


class TestTwoServersWithQueue(unittest.TestCase):
    """Gap a=1, service s=3a, two servers, horizon 10."""

    def setUp(self):
        engine = make_engine(10.0, 2, ConstantVariates(1.0), ConstantVariates(3.0), record_trace=True)
        self.report = engine.run()
        self.by_id = {u.id: u for u in self.report.served_units}

    def test_third_and_fourth_arrivals_queue_and_keep_order(self):
        u3, u4 = self.by_id[3], self.by_id[4]
        self.assertEqual(u3.arrival_time, 3.0)
        self.assertEqual(u4.arrival_time, 4.0)
        self.assertEqual(u3.service_start, 4.0)
        self.assertEqual(u4.service_start, 5.0)
        self.assertGreater(u3.waiting_time, 0.0)
        self.assertGreater(u4.waiting_time, 0.0)
        self.assertLess(u3.service_start, u4.service_start)

    def test_departure_wins_tie_with_arrival(self):
        # unit 1 departs at t=4, the same instant unit 4 arrives
        rows_at_4 = [row for row in self.report.trace if row[0] == 4.0]
        kinds = [(row[1], row[2]) for row in rows_at_4]
        self.assertEqual(
            kinds,
            [("departure", 1), ("service_start", 3), ("arrival", 4), ("queued", 4)],
        )

    def test_arrival_at_horizon_is_not_admitted_after_tied_departure(self):
        # departure at t=10 advances the clock to the horizon first
        self.assertEqual(self.report.total_arrived, 9)
        arrivals = [row for row in self.report.trace if row[1] == "arrival"]
        self.assertEqual(arrivals[-1][0], 9.0)

    def test_counts_and_conservation(self):
        self.assertEqual(self.report.total_served, 6)
        self.assertEqual(self.report.units_waiting, 3)
        self.assertEqual(self.report.units_in_service, 0)
        self.assertEqual(
            self.report.total_arrived,
            self.report.total_served + self.report.units_waiting,
        )
        self.assertEqual(sorted(self.by_id), [1, 2, 3, 4, 5, 6])

    def test_no_service_starts_after_horizon(self):
        starts = [row[0] for row in self.report.trace if row[1] == "service_start"]
        self.assertTrue(all(t < 10.0 for t in starts))
        u6 = self.by_id[6]
        self.assertEqual(u6.departure_time, 11.0)

    def test_waits(self):
        waits = [self.by_id[i].waiting_time for i in range(1, 7)]
        self.assertEqual(waits, [0.0, 0.0, 1.0, 1.0, 2.0, 2.0])
        self.assertAlmostEqual(self.report.average_wait, 1.0)
        self.assertEqual(self.report.max_wait, 2.0)

    def test_queue_length_statistics(self):
        # lengths 1,1,1,2,2,2 over [3,9) then 3 over [9,10]
        self.assertEqual(self.report.max_queue_length, 3)
        self.assertAlmostEqual(self.report.average_queue_length, 1.2)

    def test_utilization_capped_at_horizon(self):
        self.assertAlmostEqual(self.report.server_busy_time[0], 9.0)
        self.assertAlmostEqual(self.report.server_busy_time[1], 8.0)
        self.assertAlmostEqual(self.report.server_utilization[0], 0.9)
        self.assertAlmostEqual(self.report.server_utilization[1], 0.8)
        self.assertAlmostEqual(self.report.utilization, 0.85)


class TestTieBreaksAndServerSelection(unittest.TestCase):
    """Two departures and one arrival all due at t=3."""

    def setUp(self):
        engine = make_engine(
            3.5,
            2,
            ConstantVariates(1.0),
            ScriptedVariates([2.0, 1.0, 5.0]),
            record_trace=True,
        )
        self.report = engine.run()

    def test_event_order(self):
        events = [(row[0], row[1], row[2], row[3]) for row in self.report.trace]
        self.assertEqual(
            events,
            [
                (1.0, "arrival", 1, None),
                (1.0, "service_start", 1, 1),
                (2.0, "arrival", 2, None),
                (2.0, "service_start", 2, 2),
                (3.0, "departure", 1, 1),
                (3.0, "departure", 2, 2),
                (3.0, "arrival", 3, None),
                (3.0, "service_start", 3, 1),
                (8.0, "departure", 3, 1),
            ],
        )

    def test_busy_time(self):
        self.assertAlmostEqual(self.report.server_busy_time[0], 2.5)
        self.assertAlmostEqual(self.report.server_busy_time[1], 1.0)
        self.assertEqual(self.report.total_arrived, 3)
        self.assertEqual(self.report.total_served, 3)


class TestEdgeRuns(unittest.TestCase):
    """Runs with nothing, or almost nothing, happening."""

    def test_first_arrival_after_horizon(self):
        report = make_engine(10.0, 2, ConstantVariates(20.0), ConstantVariates(1.0)).run()
        self.assertEqual(report.total_arrived, 0)
        self.assertEqual(report.total_served, 0)
        self.assertEqual(report.average_wait, 0.0)
        self.assertEqual(report.average_queue_length, 0.0)
        self.assertEqual(report.utilization, 0.0)
        self.assertEqual(report.server_utilization, [0.0, 0.0])

    def test_first_arrival_exactly_at_horizon(self):
        report = make_engine(10.0, 1, ConstantVariates(10.0), ConstantVariates(4.0)).run()
        self.assertEqual(report.total_arrived, 1)
        self.assertEqual(report.total_served, 1)
        self.assertEqual(report.served_units[0].service_start, 10.0)
        self.assertEqual(report.server_busy_time, [0.0])
        self.assertEqual(report.utilization, 0.0)

    def test_long_service_crossing_horizon(self):
        report = make_engine(10.0, 1, ConstantVariates(6.0), ConstantVariates(100.0)).run()
        # unit 1 served from 6 to 106; unit 2 arrives at 12 > horizon and never enters
        self.assertEqual(report.total_arrived, 1)
        self.assertEqual(report.server_busy_time, [4.0])
        self.assertAlmostEqual(report.utilization, 0.4)


def run_all_tests():
    """Run all scenario tests and return results."""
    suite = unittest.defaultTestLoader.loadTestsFromModule(sys.modules[__name__])
    result = unittest.TextTestRunner(verbosity=2).run(suite)
    return result.wasSuccessful()


if __name__ == "__main__":
    run_all_tests()
