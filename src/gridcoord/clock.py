"""Time providers for the grid controller."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Optional, Union


class Clock(ABC):
    """Source of the current instant used by a scheduling cycle."""

    @abstractmethod
    def now(self) -> datetime:
        """Return the current instant."""
        pass


class SystemClock(Clock):
    """Wall-clock time."""

    def now(self) -> datetime:
        return datetime.now()


class ManualClock(Clock):
    """Clock that only moves when told to; used by simulations and tests."""

    def __init__(self, start: Optional[datetime] = None):
        self._now = start or datetime(2024, 1, 1, 0, 0, 0)

    def now(self) -> datetime:
        return self._now

    def set(self, instant: datetime) -> None:
        """Jump to an absolute instant."""
        self._now = instant

    def advance(self, delta: Union[timedelta, int, float]) -> datetime:
        """Move forward by a timedelta or a number of seconds."""
        if not isinstance(delta, timedelta):
            delta = timedelta(seconds=delta)
        self._now = self._now + delta
        return self._now
