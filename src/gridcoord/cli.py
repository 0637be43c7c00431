"""Interactive command interpreter for the grid controller.

Usage:
  gridcoord
  gridcoord --config grid.yaml
  gridcoord --log-level DEBUG

Commands read from stdin:
  report <consumerID> <res|com|ind> <MW>
  balance
  maintenance <subID> <delaySec>
  status
  analyze
  help
  exit
"""

import argparse
import logging
import sys
from typing import Callable, Dict, List, Optional, TextIO

from .analysis import compare_policies
from .config import GridConfig
from .core import GridController
from .exceptions import GridError, InvalidRequestClassError, ValidationError
from .reporting import format_status

logger = logging.getLogger("gridcoord.cli")

BANNER = (
    "Smart Grid CLI - Demand-Response Coordinator\n"
    "Enter commands to manage grid.\n"
    "Type 'help' for detailed syntax and examples.\n"
)

HELP_TEXT = """Available commands:
  report <consumerID> <res|com|ind> <MW>   -- Submit a demand request.
       e.g.: report C101 res 25.5
  balance                                  -- Run scheduling: allocate or shed load.
       e.g.: balance
  maintenance <subID> <delaySec>           -- Schedule maintenance after delay.
       e.g.: maintenance S02 300   (start in 5 min, lasts {duration})
  status                                   -- Show grid, demands, maintenance.
       e.g.: status
  analyze                                  -- Compare greedy allocation with the optimum.
  help                                     -- Show this help message.
  exit                                     -- Quit the program."""


def _describe_duration(seconds: float) -> str:
    if seconds % 3600 == 0:
        return f"{int(seconds // 3600)}h"
    if seconds % 60 == 0:
        return f"{int(seconds // 60)} min"
    return f"{seconds:g}s"


class GridShell:
    """Parses command lines and drives a :class:`GridController`."""

    def __init__(self, controller: GridController, out: TextIO = None):
        self.controller = controller
        self.out = out or sys.stdout
        self._commands: Dict[str, Callable[[List[str]], bool]] = {
            "exit": self.do_exit,
            "help": self.do_help,
            "report": self.do_report,
            "balance": self.do_balance,
            "maintenance": self.do_maintenance,
            "status": self.do_status,
            "analyze": self.do_analyze,
        }

    def write(self, text: str) -> None:
        print(text, file=self.out)

    def handle(self, line: str) -> bool:
        """Execute one command line; return False when the session should end."""
        parts = line.split()
        if not parts:
            return True
        command = self._commands.get(parts[0])
        if command is None:
            self.write("Unknown command. Type 'help' for list of commands.")
            return True
        return command(parts[1:])

    def run(self, stream: TextIO = None) -> None:
        """Read commands until ``exit`` or end of input."""
        stream = stream or sys.stdin
        self.write(BANNER)
        while True:
            self.out.write("> ")
            self.out.flush()
            line = stream.readline()
            if not line:
                break
            if not self.handle(line):
                break

    def do_exit(self, args: List[str]) -> bool:
        self.write("Exiting Smart Grid CLI. Goodbye!")
        return False

    def do_help(self, args: List[str]) -> bool:
        duration = self.controller.config.maintenance.default_duration_seconds
        self.write(HELP_TEXT.format(duration=_describe_duration(duration)))
        return True

    def do_report(self, args: List[str]) -> bool:
        usage = "Usage: report <consumerID> <res|com|ind> <MW>"
        if len(args) < 3:
            self.write(usage)
            return True
        consumer_id, kind, raw_mw = args[0], args[1], args[2]
        try:
            megawatts = float(raw_mw)
        except ValueError:
            self.write(usage)
            return True

        try:
            self.controller.submit_demand(kind, consumer_id, megawatts)
        except InvalidRequestClassError:
            self.write("Invalid type. Use 'res', 'com', or 'ind'.")
            return True
        except ValidationError as e:
            self.write(f"Rejected: {e}")
            return True
        self.write(f"Demand recorded for {consumer_id}.")
        return True

    def do_balance(self, args: List[str]) -> bool:
        self.controller.run_scheduler()
        summary = self.controller.last_cycle
        self.write("Load balancing complete.")
        if summary is not None and summary.processed:
            self.write(
                f"  {summary.allocated} allocated ({summary.allocated_mw:g} MW), "
                f"{summary.shed} shed ({summary.shed_mw:g} MW)."
            )
        return True

    def do_maintenance(self, args: List[str]) -> bool:
        usage = "Usage: maintenance <subID> <delaySec>"
        if len(args) < 2:
            self.write(usage)
            return True
        substation_id = args[0]
        try:
            delay = int(args[1])
        except ValueError:
            self.write(usage)
            return True

        try:
            self.controller.schedule_maintenance_after(substation_id, delay)
        except ValidationError as e:
            self.write(f"Rejected: {e}")
            return True
        self.write(f"Maintenance scheduled for {substation_id} starting in {delay} seconds.")
        return True

    def do_status(self, args: List[str]) -> bool:
        self.write(format_status(self.controller.snapshot()))
        return True

    def do_analyze(self, args: List[str]) -> bool:
        if not self.controller.pending_count:
            self.write("No pending demand to analyse.")
            return True
        try:
            comparison = compare_policies(self.controller)
        except GridError as e:
            logger.error(f"Analysis failed: {e}")
            self.write(f"Analysis failed: {e}")
            return True
        self.write(
            f"First fit serves {comparison.greedy.served_mw:g} MW "
            f"(shed {comparison.greedy.shed_count}); "
            f"optimal serves {comparison.optimal.served_mw:g} MW "
            f"(shed {comparison.optimal.shed_count})."
        )
        return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gridcoord",
        description="Demand-response coordinator for a simplified power grid",
    )
    parser.add_argument("--config", help="YAML or JSON grid configuration file")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the configured log level",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = GridConfig.load_from_file(args.config) if args.config else GridConfig.default()
    except (OSError, ValueError, GridError) as e:
        print(f"Could not load configuration: {e}", file=sys.stderr)
        return 1

    if args.log_level:
        config.monitoring.log_level = args.log_level
        config._setup_logging()
    if not config.validate_and_log():
        return 1

    shell = GridShell(GridController(config))
    shell.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
