"""Maintenance windows that take substations offline."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class MaintenanceState(Enum):
    """Maintenance job state; only ever moves forward."""
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    DONE = "done"


@dataclass
class MaintenanceJob:
    """A maintenance window ``[start, end)`` on one substation.

    The job refers to its substation by id only. A job naming an id that
    is not registered never affects any substation.
    """
    substation_id: str
    start: datetime
    end: datetime
    state: MaintenanceState = MaintenanceState.SCHEDULED
    job_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])

    def advance(self, now: datetime) -> bool:
        """Move the job forward against ``now``; return True if the state changed.

        Both transitions are checked on every call, so a job whose whole
        window has elapsed goes straight from SCHEDULED to DONE.
        """
        previous = self.state
        if self.state == MaintenanceState.SCHEDULED and now >= self.start:
            self.state = MaintenanceState.IN_PROGRESS
        if self.state == MaintenanceState.IN_PROGRESS and now >= self.end:
            self.state = MaintenanceState.DONE
        return self.state != previous

    @property
    def in_progress(self) -> bool:
        return self.state == MaintenanceState.IN_PROGRESS

    @property
    def duration_seconds(self) -> float:
        return (self.end - self.start).total_seconds()
