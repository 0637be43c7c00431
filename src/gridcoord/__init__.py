"""Grid demand coordinator library initialization."""

from .core import GridController
from .config import GridConfig, ValidationLevel
from .clock import Clock, SystemClock, ManualClock
from .demand import DemandRequest, PriorityClass, RequestState, create_request
from .substation import Substation
from .maintenance import MaintenanceJob, MaintenanceState
from .reporting import GridSnapshot, summarize, format_status
from .exceptions import GridError

__version__ = "0.1.0"
__license__ = "MIT"

__all__ = [
    "GridController",
    "GridConfig",
    "ValidationLevel",
    "Clock",
    "SystemClock",
    "ManualClock",
    "DemandRequest",
    "PriorityClass",
    "RequestState",
    "create_request",
    "Substation",
    "MaintenanceJob",
    "MaintenanceState",
    "GridSnapshot",
    "summarize",
    "format_status",
    "GridError"
]
