"""
Tests for grid configuration: validation, file round trips and controller setup.
"""

import sys
import json
import tempfile
from pathlib import Path
import unittest

# Add the src directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from gridcoord import GridController, ManualClock
from gridcoord.config import (
    ConfigFormat, GridConfig, MonitoringConfig, SubstationConfig, ValidationLevel
)
from gridcoord.exceptions import ConfigurationError


class TestGridConfig(unittest.TestCase):
    """Configuration validation and serialisation."""

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)
        self.dir = Path(self.tmp.name)

    def test_default_grid(self):
        config = GridConfig.default()
        self.assertEqual([(s.id, s.capacity_mw) for s in config.substations],
                         [("S01", 50.0), ("S02", 40.0), ("S03", 60.0)])
        self.assertEqual(config.maintenance.default_duration_seconds, 3600)
        self.assertEqual(config.validation_level, ValidationLevel.STRICT)
        self.assertEqual(config.monitoring.log_level, "INFO")
        self.assertTrue(config.validate().is_valid)

    def test_validation_errors(self):
        config = GridConfig(
            name="",
            substations=[SubstationConfig("S01", 50.0), SubstationConfig("S01", 10.0),
                         SubstationConfig("", -1.0)],
            monitoring=MonitoringConfig(log_level="LOUD", max_history=0),
        )
        config.maintenance.default_duration_seconds = 0
        result = config.validate()
        self.assertFalse(result.is_valid)
        joined = "\n".join(result.errors)
        self.assertIn("Grid name cannot be empty", joined)
        self.assertIn("Duplicate substation id: S01", joined)
        self.assertIn("Capacity must be > 0 MW", joined)
        self.assertIn("Invalid log level: LOUD", joined)
        self.assertIn("maintenance: Default maintenance duration", joined)

    def test_empty_grid_warns(self):
        result = GridConfig().validate()
        self.assertTrue(result.is_valid)
        self.assertEqual(len(result.warnings), 1)

    def test_yaml_round_trip(self):
        config = GridConfig.default()
        config.name = "Test Grid"
        config.validation_level = ValidationLevel.WARN
        path = self.dir / "grid.yaml"
        config.save_to_file(path)

        loaded = GridConfig.load_from_file(path)
        self.assertEqual(loaded.to_dict(), config.to_dict())
        self.assertEqual(loaded.validation_level, ValidationLevel.WARN)

    def test_json_round_trip(self):
        config = GridConfig.default()
        path = self.dir / "grid.json"
        config.save_to_file(path, format=ConfigFormat.JSON)
        self.assertEqual(json.loads(path.read_text())["substations"][1]["id"], "S02")
        self.assertEqual(GridConfig.load_from_file(path).to_dict(), config.to_dict())

    def test_from_dict_defaults(self):
        config = GridConfig.from_dict({"substations": [{"id": "A", "capacity_mw": 5}]})
        self.assertEqual(config.name, "Smart Grid")
        self.assertEqual(config.substations[0].capacity_mw, 5)
        self.assertEqual(config.monitoring.max_history, 1000)
        self.assertEqual(config.monitoring.log_level, "INFO")

    def test_bad_validation_level(self):
        with self.assertRaises(ConfigurationError):
            GridConfig.from_dict({"validation_level": "lenient"})

    def test_malformed_substation_entry(self):
        with self.assertRaises(ConfigurationError):
            GridConfig.from_dict({"substations": [{"capacity_mw": 5}]})

    def test_load_errors(self):
        with self.assertRaises(FileNotFoundError):
            GridConfig.load_from_file(self.dir / "missing.yaml")

        unsupported = self.dir / "grid.toml"
        unsupported.write_text("name = 'x'")
        with self.assertRaises(ValueError):
            GridConfig.load_from_file(unsupported)

        broken = self.dir / "broken.yaml"
        broken.write_text("substations: [\n")
        with self.assertRaises(ConfigurationError):
            GridConfig.load_from_file(broken)

        scalar = self.dir / "scalar.yaml"
        scalar.write_text("just a string\n")
        with self.assertRaises(ConfigurationError):
            GridConfig.load_from_file(scalar)

    def test_merge(self):
        base = GridConfig.default()
        override = GridConfig(name="Override")
        merged = base.merge(override)
        self.assertEqual(merged.name, "Override")
        self.assertEqual(merged.substations, [])

    def test_validate_and_log(self):
        config = GridConfig(monitoring=MonitoringConfig(log_level="LOUD"))
        with self.assertLogs("gridcoord.config", level="ERROR"):
            self.assertFalse(config.validate_and_log())

    def test_controller_from_config_file(self):
        path = self.dir / "grid.yaml"
        path.write_text(
            "name: Two Stations\n"
            "substations:\n"
            "  - {id: N1, capacity_mw: 20}\n"
            "  - {id: N2, capacity_mw: 30}\n"
            "validation_level: permissive\n"
        )
        grid = GridController.from_config_file(path, clock=ManualClock())
        self.assertEqual([s.id for s in grid.substations], ["N1", "N2"])
        self.assertEqual(grid.config.validation_level, ValidationLevel.PERMISSIVE)


if __name__ == "__main__":
    unittest.main()
