"""Read-only snapshots of grid state for display and analysis."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import numpy as np

from .demand import DemandRequest, PriorityClass
from .maintenance import MaintenanceJob
from .substation import Substation


@dataclass(frozen=True)
class SubstationStatus:
    """Point-in-time view of one substation."""
    id: str
    used_mw: float
    capacity_mw: float
    available_mw: float
    online: bool


@dataclass(frozen=True)
class PendingDemand:
    """A request still waiting for the next cycle."""
    consumer_id: str
    megawatts: float
    priority: int
    priority_class: str
    timestamp: datetime
    request_id: str


@dataclass(frozen=True)
class MaintenanceStatus:
    """A maintenance job and its current state."""
    job_id: str
    substation_id: str
    start: datetime
    end: datetime
    state: str


@dataclass(frozen=True)
class GridSnapshot:
    """Everything the display layer needs, copied out of the controller."""
    taken_at: datetime
    substations: List[SubstationStatus] = field(default_factory=list)
    pending: List[PendingDemand] = field(default_factory=list)
    maintenance: List[MaintenanceStatus] = field(default_factory=list)

    def get_substation(self, substation_id: str) -> Optional[SubstationStatus]:
        for status in self.substations:
            if status.id == substation_id:
                return status
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "taken_at": self.taken_at.isoformat(),
            "substations": [
                {
                    "id": s.id,
                    "used_mw": s.used_mw,
                    "capacity_mw": s.capacity_mw,
                    "available_mw": s.available_mw,
                    "online": s.online,
                }
                for s in self.substations
            ],
            "pending": [
                {
                    "consumer_id": p.consumer_id,
                    "megawatts": p.megawatts,
                    "priority": p.priority,
                    "priority_class": p.priority_class,
                    "timestamp": p.timestamp.isoformat(),
                    "request_id": p.request_id,
                }
                for p in self.pending
            ],
            "maintenance": [
                {
                    "job_id": m.job_id,
                    "substation_id": m.substation_id,
                    "start": m.start.isoformat(),
                    "end": m.end.isoformat(),
                    "state": m.state,
                }
                for m in self.maintenance
            ],
        }


def take_snapshot(
    substations: Iterable[Substation],
    pending: Iterable[DemandRequest],
    maintenance_jobs: Iterable[MaintenanceJob],
    taken_at: datetime
) -> GridSnapshot:
    """Copy live objects into an immutable snapshot."""
    return GridSnapshot(
        taken_at=taken_at,
        substations=[
            SubstationStatus(s.id, s.used_mw, s.capacity_mw, s.available(), s.online)
            for s in substations
        ],
        pending=[
            PendingDemand(r.consumer_id, r.megawatts, r.priority,
                          r.priority_class.name.lower(), r.timestamp, r.request_id)
            for r in pending
        ],
        maintenance=[
            MaintenanceStatus(j.job_id, j.substation_id, j.start, j.end, j.state.value)
            for j in maintenance_jobs
        ],
    )


def summarize(snapshot: GridSnapshot) -> Dict[str, Any]:
    """Aggregate capacity and demand figures for a snapshot."""
    capacity = np.array([s.capacity_mw for s in snapshot.substations], dtype=float)
    used = np.array([s.used_mw for s in snapshot.substations], dtype=float)
    available = np.array([s.available_mw for s in snapshot.substations], dtype=float)
    online = np.array([s.online for s in snapshot.substations], dtype=bool)

    if capacity.size:
        utilization = np.divide(used, capacity, out=np.zeros_like(used), where=capacity > 0)
        mean_utilization = float(np.mean(utilization))
        peak_utilization = float(np.max(utilization))
    else:
        mean_utilization = peak_utilization = 0.0

    pending_by_class = {member.name.lower(): 0.0 for member in PriorityClass}
    for demand in snapshot.pending:
        pending_by_class[demand.priority_class] += demand.megawatts

    return {
        "substations": int(capacity.size),
        "online": int(np.count_nonzero(online)),
        "total_capacity_mw": float(np.sum(capacity)),
        "online_capacity_mw": float(np.sum(capacity[online])),
        "used_mw": float(np.sum(used)),
        "available_mw": float(np.sum(available)),
        "mean_utilization": mean_utilization,
        "peak_utilization": peak_utilization,
        "pending_requests": len(snapshot.pending),
        "pending_mw": float(sum(pending_by_class.values())),
        "pending_mw_by_class": pending_by_class,
        "maintenance_jobs": len(snapshot.maintenance),
    }


def _mw(value: float) -> str:
    return f"{value:g}"


def format_status(snapshot: GridSnapshot) -> str:
    """Render the status block shown by the ``status`` command."""
    lines = ["--- Grid Status ---", "Substations:"]
    for s in snapshot.substations:
        state = "ONLINE" if s.online else "OFFLINE"
        lines.append(f"  {s.id}: {_mw(s.used_mw)}/{_mw(s.capacity_mw)} MW ({state})")

    lines.append("Pending Demands:")
    for p in snapshot.pending:
        lines.append(f"  {p.consumer_id} ({_mw(p.megawatts)}MW, pr={p.priority})")

    lines.append("Maintenance Jobs:")
    for m in snapshot.maintenance:
        lines.append(
            f"  {m.substation_id} [{m.state}] "
            f"{m.start.strftime('%Y-%m-%d %H:%M:%S')} -> {m.end.strftime('%Y-%m-%d %H:%M:%S')}"
        )
    return "\n".join(lines)
