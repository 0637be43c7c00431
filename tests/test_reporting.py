"""
Tests for grid snapshots, summaries and the status text.
"""

import sys
from pathlib import Path
import unittest
from datetime import timedelta

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from gridcoord import GridController, GridConfig, ManualClock, format_status, summarize
from gridcoord.config import SubstationConfig
from gridcoord.reporting import GridSnapshot


class TestSnapshot(unittest.TestCase):
    """Read-only views of controller state."""

    def setUp(self):
        self.clock = ManualClock()
        config = GridConfig(substations=[SubstationConfig("S01", 50.0),
                                         SubstationConfig("S02", 40.0)])
        self.grid = GridController(config, clock=self.clock)
        self.grid.submit_demand("ind", "I1", 30.0)
        self.grid.run_scheduler()

    def test_substation_statuses(self):
        snapshot = self.grid.snapshot()
        s01 = snapshot.get_substation("S01")
        self.assertEqual((s01.used_mw, s01.capacity_mw, s01.available_mw, s01.online),
                         (30.0, 50.0, 20.0, True))
        self.assertIsNone(snapshot.get_substation("S09"))
        self.assertEqual(snapshot.taken_at, self.clock.now())

    def test_pending_in_dequeue_order(self):
        self.grid.submit_demand("res", "R1", 5.0)
        self.clock.advance(1)
        self.grid.submit_demand("com", "C1", 5.0)
        snapshot = self.grid.snapshot()
        self.assertEqual([p.consumer_id for p in snapshot.pending], ["C1", "R1"])
        self.assertEqual(snapshot.pending[0].priority_class, "commercial")
        self.assertEqual(self.grid.pending_count, 2)

    def test_snapshot_does_not_track_later_changes(self):
        snapshot = self.grid.snapshot()
        self.grid.submit_demand("com", "C1", 10.0)
        self.grid.run_scheduler()
        self.assertEqual(snapshot.get_substation("S01").used_mw, 30.0)
        self.assertEqual(self.grid.snapshot().get_substation("S01").used_mw, 40.0)

    def test_maintenance_listing(self):
        job = self.grid.schedule_maintenance_after("S02", 0)
        self.grid.run_scheduler()
        snapshot = self.grid.snapshot()
        self.assertEqual(len(snapshot.maintenance), 1)
        entry = snapshot.maintenance[0]
        self.assertEqual((entry.job_id, entry.substation_id, entry.state),
                         (job.job_id, "S02", "in_progress"))
        self.assertFalse(snapshot.get_substation("S02").online)
        self.assertEqual(snapshot.get_substation("S02").available_mw, 0.0)

    def test_to_dict(self):
        self.grid.submit_demand("res", "R1", 2.5)
        data = self.grid.snapshot().to_dict()
        self.assertEqual([s["id"] for s in data["substations"]], ["S01", "S02"])
        self.assertEqual(data["pending"][0]["megawatts"], 2.5)
        self.assertEqual(data["maintenance"], [])
        self.assertIsInstance(data["taken_at"], str)


class TestSummary(unittest.TestCase):
    """Aggregate figures."""

    def test_summary_figures(self):
        clock = ManualClock()
        config = GridConfig(substations=[SubstationConfig("S01", 50.0),
                                         SubstationConfig("S02", 40.0)])
        grid = GridController(config, clock=clock)
        grid.submit_demand("ind", "I1", 30.0)
        grid.run_scheduler()
        grid.submit_demand("res", "R1", 4.0)
        grid.submit_demand("res", "R2", 6.0)

        summary = summarize(grid.snapshot())
        self.assertEqual(summary["substations"], 2)
        self.assertEqual(summary["online"], 2)
        self.assertAlmostEqual(summary["total_capacity_mw"], 90.0)
        self.assertAlmostEqual(summary["used_mw"], 30.0)
        self.assertAlmostEqual(summary["available_mw"], 60.0)
        self.assertAlmostEqual(summary["mean_utilization"], 0.3)
        self.assertAlmostEqual(summary["peak_utilization"], 0.6)
        self.assertEqual(summary["pending_requests"], 2)
        self.assertAlmostEqual(summary["pending_mw_by_class"]["residential"], 10.0)
        self.assertAlmostEqual(summary["pending_mw"], 10.0)

    def test_offline_capacity_excluded(self):
        clock = ManualClock()
        config = GridConfig(substations=[SubstationConfig("S01", 50.0),
                                         SubstationConfig("S02", 40.0)])
        grid = GridController(config, clock=clock)
        grid.schedule_maintenance_after("S01", 0)
        grid.run_scheduler()
        summary = summarize(grid.snapshot())
        self.assertEqual(summary["online"], 1)
        self.assertAlmostEqual(summary["online_capacity_mw"], 40.0)
        self.assertAlmostEqual(summary["available_mw"], 40.0)

    def test_empty_grid(self):
        summary = summarize(GridSnapshot(taken_at=ManualClock().now()))
        self.assertEqual(summary["substations"], 0)
        self.assertEqual(summary["total_capacity_mw"], 0.0)
        self.assertEqual(summary["mean_utilization"], 0.0)


class TestStatusText(unittest.TestCase):
    """Rendering for the status command."""

    def test_format_status(self):
        clock = ManualClock()
        grid = GridController(GridConfig.default(), clock=clock)
        grid.submit_demand("ind", "I1", 30.0)
        grid.run_scheduler()
        grid.schedule_maintenance_after("S02", 0)
        grid.run_scheduler()
        clock.advance(timedelta(seconds=5))
        grid.submit_demand("res", "C101", 25.5)

        text = format_status(grid.snapshot())
        lines = text.splitlines()
        self.assertEqual(lines[0], "--- Grid Status ---")
        self.assertIn("  S01: 30/50 MW (ONLINE)", lines)
        self.assertIn("  S02: 0/40 MW (OFFLINE)", lines)
        self.assertIn("  S03: 0/60 MW (ONLINE)", lines)
        self.assertIn("  C101 (25.5MW, pr=1)", lines)
        self.assertTrue(any(line.startswith("  S02 [in_progress]") for line in lines))
        self.assertLess(lines.index("Pending Demands:"), lines.index("Maintenance Jobs:"))


if __name__ == "__main__":
    unittest.main()
