"""
Tests for the greedy-versus-optimal allocation analysis.
"""

import sys
from pathlib import Path
import unittest

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from gridcoord import GridController, GridConfig, ManualClock, ValidationLevel
from gridcoord.analysis import compare_policies, optimal_assignment, simulate_first_fit
from gridcoord.config import SubstationConfig
from gridcoord.demand import RequestState, create_request
from gridcoord.exceptions import AnalysisError


def make_grid(*substations):
    clock = ManualClock()
    config = GridConfig(substations=[SubstationConfig(sid, cap) for sid, cap in substations])
    return GridController(config, clock=clock), clock


class TestFirstFitSimulation(unittest.TestCase):
    """The dry run agrees with the live scheduler."""

    def test_matches_live_cycle(self):
        grid, clock = make_grid(("S01", 50.0), ("S02", 40.0), ("S03", 60.0))
        for kind, consumer, mw in [("ind", "I1", 45.0), ("com", "C1", 30.0), ("res", "R1", 25.0),
                                   ("res", "R2", 20.0), ("com", "C2", 70.0)]:
            grid.submit_demand(kind, consumer, mw)
            clock.advance(1)

        pending = grid.pending_requests()
        plan = simulate_first_fit(pending, [s.available() for s in grid.substations])
        grid.run_scheduler()

        ids = [s.id for s in grid.substations]
        for request in pending:
            index = plan.assignment[request.request_id]
            if request.state == RequestState.ALLOCATED:
                self.assertEqual(ids[index], request.substation_id)
            else:
                self.assertIsNone(index)
        self.assertAlmostEqual(plan.served_mw, grid.last_cycle.allocated_mw)
        self.assertAlmostEqual(plan.shed_mw, grid.last_cycle.shed_mw)

    def test_does_not_touch_inputs(self):
        available = [10.0, 5.0]
        request = create_request("res", "R1", 8.0, ManualClock().now())
        simulate_first_fit([request], available)
        self.assertEqual(available, [10.0, 5.0])
        self.assertEqual(request.state, RequestState.CREATED)


class TestOptimalAssignment(unittest.TestCase):
    """Exact assignment with PuLP."""

    def test_optimum_beats_first_fit_on_packing(self):
        grid, clock = make_grid(("S01", 50.0), ("S02", 40.0))
        grid.submit_demand("ind", "I1", 30.0)
        clock.advance(1)
        grid.submit_demand("ind", "I2", 45.0)

        comparison = compare_policies(grid)
        self.assertAlmostEqual(comparison.greedy.served_mw, 30.0)
        self.assertEqual(comparison.greedy.shed_count, 1)
        self.assertAlmostEqual(comparison.optimal.served_mw, 75.0)
        self.assertEqual(comparison.optimal.shed_count, 0)
        self.assertAlmostEqual(comparison.served_gap_mw, 45.0)
        self.assertFalse(comparison.is_greedy_optimal)
        self.assertEqual(comparison.optimal.solver_status, "Optimal")

        # Analysis leaves the controller untouched.
        self.assertEqual(grid.pending_count, 2)
        self.assertTrue(all(s.used_mw == 0.0 for s in grid.substations))

    def test_higher_class_is_never_traded_for_volume(self):
        now = ManualClock().now()
        industrial = create_request("ind", "I1", 10.0, now)
        residential = create_request("res", "R1", 45.0, now)
        plan = optimal_assignment([industrial, residential], [50.0])
        self.assertEqual(plan.assignment[industrial.request_id], 0)
        self.assertIsNone(plan.assignment[residential.request_id])
        self.assertAlmostEqual(plan.served_by_class["industrial"], 10.0)
        self.assertAlmostEqual(plan.served_mw, 10.0)

    def test_respects_capacity(self):
        now = ManualClock().now()
        requests = [create_request("com", f"C{i}", mw, now)
                    for i, mw in enumerate([12.0, 9.0, 7.0, 6.0, 5.0])]
        plan = optimal_assignment(requests, [20.0, 11.0])
        for index, capacity in enumerate([20.0, 11.0]):
            load = sum(r.megawatts for r in requests if plan.assignment[r.request_id] == index)
            self.assertLessEqual(load, capacity + 1e-6)
        self.assertAlmostEqual(plan.served_mw, 30.0)

    def test_greedy_already_optimal(self):
        grid, _ = make_grid(("S01", 50.0))
        grid.submit_demand("com", "C1", 20.0)
        grid.submit_demand("com", "C2", 20.0)
        comparison = compare_policies(grid)
        self.assertTrue(comparison.is_greedy_optimal)
        self.assertAlmostEqual(comparison.to_dict()["served_gap_mw"], 0.0)

    def test_no_capacity(self):
        request = create_request("res", "R1", 5.0, ManualClock().now())
        plan = optimal_assignment([request], [])
        self.assertIsNone(plan.assignment[request.request_id])
        self.assertEqual(plan.shed_mw, 5.0)

    def test_rejects_non_finite_demand(self):
        grid, _ = make_grid(("S01", 50.0))
        grid.config.validation_level = ValidationLevel.PERMISSIVE
        grid.submit_demand("res", "R1", float("nan"))
        with self.assertRaises(AnalysisError):
            compare_policies(grid)


if __name__ == "__main__":
    unittest.main()
