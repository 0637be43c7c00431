"""Event definitions for the grid controller."""

from enum import Enum
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field
from datetime import datetime

class EventType(str, Enum):
    """Types of grid events."""
    # Intake events
    DEMAND_RECEIVED = "demand_received"
    MAINTENANCE_SCHEDULED = "maintenance_scheduled"
    SUBSTATION_ADDED = "substation_added"

    # Allocation events
    DEMAND_ALLOCATED = "demand_allocated"
    DEMAND_SHED = "demand_shed"

    # Maintenance events
    MAINTENANCE_STARTED = "maintenance_started"
    MAINTENANCE_COMPLETED = "maintenance_completed"
    SUBSTATION_OFFLINE = "substation_offline"
    SUBSTATION_ONLINE = "substation_online"

    # Cycle events
    CYCLE_COMPLETE = "cycle_complete"

@dataclass
class GridEvent:
    """Something that happened on the grid."""
    type: EventType
    timestamp: datetime
    substation_id: Optional[str] = None
    consumer_id: Optional[str] = None
    megawatts: Optional[float] = None
    details: Dict[str, Any] = field(default_factory=dict)

@dataclass
class CycleSummary:
    """Outcome of one scheduling cycle."""
    cycle: int
    timestamp: datetime
    processed: int = 0
    allocated: int = 0
    shed: int = 0
    allocated_mw: float = 0.0
    shed_mw: float = 0.0
    requeued: int = 0
    offline_substations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cycle": self.cycle,
            "timestamp": self.timestamp.isoformat(),
            "processed": self.processed,
            "allocated": self.allocated,
            "shed": self.shed,
            "allocated_mw": self.allocated_mw,
            "shed_mw": self.shed_mw,
            "requeued": self.requeued,
            "offline_substations": list(self.offline_substations),
        }
