"""Capacity-limited substations that demand is allocated against."""

from typing import Any, Dict


class Substation:
    """A substation with a fixed capacity and an online flag.

    ``used_mw`` changes only through :meth:`allocate` and :meth:`deallocate`;
    ``online`` changes only through :meth:`set_online`, which the controller
    calls from its maintenance step.
    """

    def __init__(self, substation_id: str, capacity_mw: float):
        self.id = substation_id
        self.capacity_mw = capacity_mw
        self.used_mw = 0.0
        self.online = True

    def __repr__(self) -> str:
        state = "online" if self.online else "offline"
        return f"Substation({self.id!r}, {self.used_mw}/{self.capacity_mw} MW, {state})"

    def available(self) -> float:
        """Capacity left for new allocations; zero while offline."""
        if not self.online:
            return 0.0
        return max(0.0, self.capacity_mw - self.used_mw)

    def allocate(self, mw: float) -> bool:
        """Reserve ``mw`` if it fits; return whether it did."""
        if mw < 0:
            return False
        if self.available() >= mw:
            self.used_mw += mw
            return True
        return False

    def deallocate(self, mw: float) -> None:
        """Release ``mw``, never going below zero."""
        self.used_mw = max(0.0, self.used_mw - mw)

    def set_online(self, online: bool) -> bool:
        """Set the online flag; return True if it changed."""
        changed = self.online != online
        self.online = online
        return changed

    @property
    def utilization(self) -> float:
        if self.capacity_mw <= 0:
            return 0.0
        return self.used_mw / self.capacity_mw

    def get_metrics(self) -> Dict[str, Any]:
        """Get current substation metrics."""
        return {
            "id": self.id,
            "capacity_mw": self.capacity_mw,
            "used_mw": self.used_mw,
            "available_mw": self.available(),
            "utilization": self.utilization,
            "online": self.online,
        }
