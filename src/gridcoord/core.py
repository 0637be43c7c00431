"""Core grid controller: demand intake, maintenance and the scheduling cycle."""

import heapq
import itertools
import logging
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple, Union

from .clock import Clock, SystemClock
from .config import GridConfig, ValidationLevel
from .demand import DemandRequest, PriorityClass, RequestState, create_request
from .events import CycleSummary, EventType, GridEvent
from .exceptions import (
    DemandError,
    DuplicateSubstationError,
    SubstationNotFoundError,
    ValidationError,
    ValidationRangeError,
)
from .maintenance import MaintenanceJob, MaintenanceState
from .reporting import GridSnapshot, take_snapshot
from .substation import Substation
from .validation import PowerValidator, WindowValidator, validate_identifier

# Heap entries sort on (-priority, timestamp, arrival sequence).
_HeapEntry = Tuple[int, datetime, int, DemandRequest]


class GridController:
    """Owns the substations, pending demand and maintenance jobs of one grid.

    Each call to :meth:`run_scheduler` advances every maintenance job,
    recomputes which substations are online, then drains all pending demand
    in priority order and places each request on the first substation (in
    registration order) with enough available capacity. Requests that fit
    nowhere are shed. Nothing here is thread-safe; callers that share a
    controller across threads must serialise every call.
    """

    def __init__(self, config: Optional[GridConfig] = None, clock: Optional[Clock] = None):
        self.config = config or GridConfig()
        self.clock = clock or SystemClock()
        self.logger = logging.getLogger("gridcoord.controller")

        self.substations: List[Substation] = []
        self._substation_index: Dict[str, Substation] = {}
        self.maintenance_jobs: List[MaintenanceJob] = []
        self._pending: List[_HeapEntry] = []
        self._sequence = itertools.count()

        self._cycle_count = 0
        self._cycle_history: List[CycleSummary] = []
        self._events: List[GridEvent] = []
        self._max_history = self.config.monitoring.max_history

        for substation in self.config.substations:
            self.add_substation(substation.id, substation.capacity_mw)

    @classmethod
    def from_config_file(cls, path, clock: Optional[Clock] = None) -> "GridController":
        """Build a controller from a YAML or JSON configuration file."""
        config = GridConfig.load_from_file(path)
        config.validate_and_log()
        return cls(config, clock=clock)

    # ------------------------------------------------------------------
    # Setup and intake

    def add_substation(self, substation_id: str, capacity_mw: float) -> Substation:
        """Register a substation; allocation tries substations in this order."""
        self._check(validate_identifier, substation_id, "Substation id")
        self._check(PowerValidator.validate_power, capacity_mw)
        if substation_id in self._substation_index:
            self._check(self._reject_duplicate, substation_id)

        substation = Substation(substation_id, capacity_mw)
        self.substations.append(substation)
        self._substation_index.setdefault(substation_id, substation)
        self.logger.info(f"Added substation {substation_id} ({capacity_mw} MW)")
        self._record_event(EventType.SUBSTATION_ADDED, substation_id=substation_id,
                           megawatts=capacity_mw)
        return substation

    def get_substation(self, substation_id: str) -> Substation:
        """Look up a substation by id."""
        try:
            return self._substation_index[substation_id]
        except KeyError:
            raise SubstationNotFoundError(f"Unknown substation: {substation_id}")

    def receive_demand(self, request: DemandRequest) -> None:
        """Queue an already-built request for the next cycle.

        Only freshly created requests are accepted; a request that is already
        queued, allocated or shed raises :class:`DemandError`.
        """
        if request.state != RequestState.CREATED:
            raise DemandError(
                f"Request {request.request_id} from {request.consumer_id} is already "
                f"{request.state.value}"
            )
        self._check(PowerValidator.validate_power, request.megawatts)

        request.mark_queued()
        heapq.heappush(
            self._pending,
            (-request.priority, request.timestamp, next(self._sequence), request)
        )
        self.logger.debug(
            f"Queued {request.priority_class.name.lower()} demand from "
            f"{request.consumer_id}: {request.megawatts} MW"
        )
        self._record_event(EventType.DEMAND_RECEIVED, consumer_id=request.consumer_id,
                           megawatts=request.megawatts,
                           details={"priority": request.priority,
                                    "request_id": request.request_id})

    def submit_demand(
        self,
        kind: Union[PriorityClass, str],
        consumer_id: str,
        megawatts: float
    ) -> DemandRequest:
        """Create a request stamped with the controller's clock and queue it."""
        request = create_request(kind, consumer_id, megawatts, self.clock.now())
        self.receive_demand(request)
        return request

    def schedule_maintenance(
        self,
        substation_id: str,
        start: datetime,
        end: datetime
    ) -> MaintenanceJob:
        """Schedule a maintenance window ``[start, end)`` on a substation.

        The substation id is not checked; a job for an unknown id is kept but
        never affects any substation.
        """
        self._check(WindowValidator.validate_window, start, end)

        job = MaintenanceJob(substation_id, start, end)
        self.maintenance_jobs.append(job)
        if substation_id not in self._substation_index:
            self.logger.debug(f"Maintenance job {job.job_id} targets unknown substation {substation_id}")
        self.logger.info(
            f"Maintenance {job.job_id} scheduled on {substation_id}: "
            f"{start.isoformat()} -> {end.isoformat()}"
        )
        self._record_event(EventType.MAINTENANCE_SCHEDULED, substation_id=substation_id,
                           details={"job_id": job.job_id,
                                    "start": start.isoformat(),
                                    "end": end.isoformat()})
        return job

    def schedule_maintenance_after(
        self,
        substation_id: str,
        delay_seconds: float,
        duration_seconds: Optional[float] = None
    ) -> MaintenanceJob:
        """Schedule a window starting ``delay_seconds`` from now.

        The window lasts ``duration_seconds``, or the configured default
        (one hour unless overridden).
        """
        if duration_seconds is None:
            duration_seconds = self.config.maintenance.default_duration_seconds
        try:
            start = self.clock.now() + timedelta(seconds=delay_seconds)
            end = start + timedelta(seconds=duration_seconds)
        except OverflowError:
            raise ValidationRangeError(
                f"Maintenance window of {duration_seconds}s starting in {delay_seconds}s "
                f"is out of range"
            )
        return self.schedule_maintenance(substation_id, start, end)

    # ------------------------------------------------------------------
    # Scheduling cycle

    def run_scheduler(self) -> None:
        """Run one full scheduling cycle."""
        now = self.clock.now()
        self._cycle_count += 1
        summary = CycleSummary(cycle=self._cycle_count, timestamp=now)

        self._advance_maintenance(now)
        summary.offline_substations = [s.id for s in self.substations if not s.online]

        batch = []
        while self._pending:
            batch.append(heapq.heappop(self._pending)[3])

        for request in batch:
            substation = self._allocate(request)
            summary.processed += 1
            if substation is not None:
                request.mark_allocated(substation.id)
                summary.allocated += 1
                summary.allocated_mw += request.megawatts
                self.logger.debug(
                    f"Allocated {request.megawatts} MW for {request.consumer_id} on {substation.id}"
                )
                self._record_event(EventType.DEMAND_ALLOCATED, timestamp=now,
                                   substation_id=substation.id,
                                   consumer_id=request.consumer_id,
                                   megawatts=request.megawatts)
            else:
                request.mark_shed()
                summary.shed += 1
                summary.shed_mw += request.megawatts
                self.logger.info(
                    f"Shed {request.megawatts} MW for {request.consumer_id}: no substation has capacity"
                )
                self._record_event(EventType.DEMAND_SHED, timestamp=now,
                                   consumer_id=request.consumer_id,
                                   megawatts=request.megawatts,
                                   details={"priority": request.priority})

        # Only requests that did not reach a terminal state go back on the heap.
        for request in batch:
            if request.state == RequestState.QUEUED:
                heapq.heappush(
                    self._pending,
                    (-request.priority, request.timestamp, next(self._sequence), request)
                )
                summary.requeued += 1

        self.logger.info(
            f"Cycle {summary.cycle}: {summary.allocated} allocated "
            f"({summary.allocated_mw:.1f} MW), {summary.shed} shed ({summary.shed_mw:.1f} MW)"
        )
        self._record_cycle(summary)
        self._record_event(EventType.CYCLE_COMPLETE, timestamp=now, details=summary.to_dict())

    def _advance_maintenance(self, now: datetime) -> None:
        """Advance every job, then derive each substation's online flag.

        A substation is offline iff at least one of its jobs is in progress,
        so overlapping windows combine regardless of job order.
        """
        for job in self.maintenance_jobs:
            previous = job.state
            if job.advance(now):
                if previous == MaintenanceState.SCHEDULED:
                    self._record_event(EventType.MAINTENANCE_STARTED, timestamp=now,
                                       substation_id=job.substation_id,
                                       details={"job_id": job.job_id})
                if job.state == MaintenanceState.DONE:
                    self._record_event(EventType.MAINTENANCE_COMPLETED, timestamp=now,
                                       substation_id=job.substation_id,
                                       details={"job_id": job.job_id})

        under_maintenance = {job.substation_id for job in self.maintenance_jobs if job.in_progress}
        for substation in self.substations:
            online = substation.id not in under_maintenance
            if substation.set_online(online):
                if online:
                    self.logger.info(f"Substation {substation.id} back online")
                    self._record_event(EventType.SUBSTATION_ONLINE, timestamp=now,
                                       substation_id=substation.id)
                else:
                    self.logger.info(f"Substation {substation.id} offline for maintenance")
                    self._record_event(EventType.SUBSTATION_OFFLINE, timestamp=now,
                                       substation_id=substation.id)

    def _allocate(self, request: DemandRequest) -> Optional[Substation]:
        """First fit over substations in registration order."""
        for substation in self.substations:
            if substation.allocate(request.megawatts):
                return substation
        return None

    # ------------------------------------------------------------------
    # Queries

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def pending_requests(self) -> List[DemandRequest]:
        """Pending requests in the order the next cycle will try them."""
        return [entry[3] for entry in sorted(self._pending)]

    def snapshot(self) -> GridSnapshot:
        """Read-only view of substations, pending demand and maintenance."""
        return take_snapshot(self.substations, self.pending_requests(),
                             self.maintenance_jobs, self.clock.now())

    @property
    def last_cycle(self) -> Optional[CycleSummary]:
        return self._cycle_history[-1] if self._cycle_history else None

    def get_cycle_history(self) -> List[CycleSummary]:
        return list(self._cycle_history)

    def get_events(self, event_type: Optional[EventType] = None) -> List[GridEvent]:
        """Recorded events, optionally filtered by type."""
        if event_type is None:
            return list(self._events)
        return [e for e in self._events if e.type == event_type]

    # ------------------------------------------------------------------
    # Internals

    def _check(self, validate: Callable[..., None], *args) -> None:
        """Run a validator according to the configured validation level."""
        level = self.config.validation_level
        if level == ValidationLevel.PERMISSIVE:
            return
        try:
            validate(*args)
        except ValidationError as e:
            if level == ValidationLevel.STRICT:
                raise
            self.logger.warning(f"Accepting invalid input: {e}")

    @staticmethod
    def _reject_duplicate(substation_id: str) -> None:
        raise DuplicateSubstationError(f"Substation {substation_id} already registered")

    def _record_cycle(self, summary: CycleSummary) -> None:
        self._cycle_history.append(summary)
        if len(self._cycle_history) > self._max_history:
            self._cycle_history = self._cycle_history[-self._max_history:]

    def _record_event(self, event_type: EventType, timestamp: Optional[datetime] = None, **kwargs) -> None:
        self._events.append(GridEvent(type=event_type,
                                      timestamp=timestamp or self.clock.now(),
                                      **kwargs))
        if len(self._events) > self._max_history:
            self._events = self._events[-self._max_history:]
