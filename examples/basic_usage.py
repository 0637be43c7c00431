"""
Basic usage example of the grid demand coordinator.
This example demonstrates core functionality including:
- Configuring a grid from a YAML file
- Submitting demand from the three consumer classes
- Running scheduling cycles around a maintenance window
- Reading snapshots and cycle summaries
"""

from datetime import timedelta
from pathlib import Path

from gridcoord import GridController, GridConfig, ManualClock, summarize, format_status
from gridcoord.analysis import compare_policies


def main():
    config = GridConfig.load_from_file(Path(__file__).parent / "grid.yaml")
    clock = ManualClock()
    grid = GridController(config, clock=clock)

    print(f"Grid: {config.name}")
    print(f"Substations: {[s.id for s in grid.substations]}")

    # Morning demand
    grid.submit_demand("ind", "SMELTER-1", 45.0)
    clock.advance(1)
    grid.submit_demand("com", "MALL-7", 30.0)
    clock.advance(1)
    grid.submit_demand("res", "BLOCK-12", 35.0)
    clock.advance(1)
    grid.submit_demand("res", "BLOCK-14", 25.0)

    comparison = compare_policies(grid)
    print("\nBefore balancing:")
    print(f"  first fit would serve {comparison.greedy.served_mw:g} MW")
    print(f"  optimal assignment serves {comparison.optimal.served_mw:g} MW")

    grid.run_scheduler()
    print(f"\nCycle 1: {grid.last_cycle.to_dict()}")
    print(format_status(grid.snapshot()))

    # Take S03 down for an hour starting in five minutes
    grid.schedule_maintenance_after("S03", 300)
    clock.advance(timedelta(minutes=10))
    grid.submit_demand("com", "OFFICE-2", 15.0)
    grid.run_scheduler()
    print(f"\nCycle 2: {grid.last_cycle.to_dict()}")
    print(format_status(grid.snapshot()))

    clock.advance(timedelta(hours=1))
    grid.run_scheduler()
    print("\nAfter maintenance:")
    for key, value in summarize(grid.snapshot()).items():
        print(f"  {key}: {value}")


if __name__ == "__main__":
    main()
