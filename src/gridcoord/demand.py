"""Demand request model.

A demand request is a single consumer's ask for power. The consumer class
(residential, commercial, industrial) fixes the request's priority at
creation; only the lifecycle state and the allocation target change
afterwards.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional, Union

from .exceptions import InvalidRequestClassError


class PriorityClass(IntEnum):
    """Consumer class; the integer value is the scheduling priority."""
    RESIDENTIAL = 1
    COMMERCIAL = 2
    INDUSTRIAL = 3

    @property
    def code(self) -> str:
        """Short code used by the command interpreter."""
        return _CLASS_CODES[self]

    @classmethod
    def from_code(cls, code: Union[str, int]) -> "PriorityClass":
        """Parse a short code (``res``/``com``/``ind``), a full class name or a priority value."""
        if isinstance(code, int) and not isinstance(code, bool):
            try:
                return cls(code)
            except ValueError:
                pass
        elif isinstance(code, str):
            key = code.strip().lower()
            for member, short in _CLASS_CODES.items():
                if key in (short, member.name.lower()):
                    return member
        raise InvalidRequestClassError(
            f"Invalid request class {code!r}. Use 'res', 'com', or 'ind'."
        )


_CLASS_CODES = {
    PriorityClass.RESIDENTIAL: "res",
    PriorityClass.COMMERCIAL: "com",
    PriorityClass.INDUSTRIAL: "ind",
}


class RequestState(Enum):
    """Lifecycle of a demand request."""
    CREATED = "created"
    QUEUED = "queued"
    ALLOCATED = "allocated"
    SHED = "shed"
    COMPLETED = "completed"


TERMINAL_STATES = frozenset({RequestState.ALLOCATED, RequestState.SHED, RequestState.COMPLETED})

# Fields that may not be reassigned once the request exists.
_IMMUTABLE_FIELDS = frozenset({"consumer_id", "megawatts", "priority_class", "timestamp", "request_id"})


@dataclass
class DemandRequest:
    """A power demand tagged with its consumer class."""
    consumer_id: str
    megawatts: float
    priority_class: PriorityClass
    timestamp: datetime
    state: RequestState = RequestState.CREATED
    substation_id: Optional[str] = None
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __setattr__(self, name, value):
        if name in _IMMUTABLE_FIELDS and name in self.__dict__:
            raise AttributeError(f"DemandRequest.{name} is read-only")
        super().__setattr__(name, value)

    @property
    def priority(self) -> int:
        """Scheduling priority; higher is served first."""
        return int(self.priority_class)

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def mark_queued(self) -> None:
        self.state = RequestState.QUEUED

    def mark_allocated(self, substation_id: str) -> None:
        self.state = RequestState.ALLOCATED
        self.substation_id = substation_id

    def mark_shed(self) -> None:
        self.state = RequestState.SHED


def create_request(
    kind: Union[PriorityClass, str, int],
    consumer_id: str,
    megawatts: float,
    timestamp: datetime
) -> DemandRequest:
    """Build a request of the given consumer class.

    ``kind`` is either a :class:`PriorityClass` or a code accepted by
    :meth:`PriorityClass.from_code`. An unknown class raises
    :class:`InvalidRequestClassError` and nothing is created.
    """
    if not isinstance(kind, PriorityClass):
        kind = PriorityClass.from_code(kind)
    return DemandRequest(
        consumer_id=consumer_id,
        megawatts=megawatts,
        priority_class=kind,
        timestamp=timestamp,
    )
