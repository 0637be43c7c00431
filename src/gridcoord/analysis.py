"""Allocation analysis: how much the greedy first-fit policy leaves on the table.

The live scheduler is greedy on purpose. These tools dry-run it and compare
it against an exact assignment solved as a mixed-integer program, without
touching controller state.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import numpy as np
from pulp import (
    LpProblem, LpMaximize, LpVariable, lpSum, LpStatus, LpBinary, PULP_CBC_CMD
)

from .core import GridController
from .demand import DemandRequest, PriorityClass
from .exceptions import AnalysisError

logger = logging.getLogger("gridcoord.analysis")

# Slack allowed when pinning a higher class's optimum before solving the next.
_LEXICOGRAPHIC_TOLERANCE = 1e-6


@dataclass
class AllocationPlan:
    """Where each request would go under some policy."""
    policy: str
    assignment: Dict[str, Optional[int]]
    served_mw: float
    shed_mw: float
    served_by_class: Dict[str, float] = field(default_factory=dict)
    solver_status: Optional[str] = None

    @property
    def shed_count(self) -> int:
        return sum(1 for index in self.assignment.values() if index is None)


@dataclass
class AllocationComparison:
    """Greedy plan next to the optimal plan for the same demand."""
    greedy: AllocationPlan
    optimal: AllocationPlan

    @property
    def served_gap_mw(self) -> float:
        """Extra MW the optimal plan serves.

        Negative when first fit serves more lower-class load than the
        optimum, which protects higher classes first.
        """
        return self.optimal.served_mw - self.greedy.served_mw

    @property
    def is_greedy_optimal(self) -> bool:
        greedy, optimal = self.greedy.served_by_class, self.optimal.served_by_class
        return all(abs(optimal[name] - greedy[name]) <= 1e-6 for name in optimal)

    def to_dict(self) -> Dict[str, object]:
        return {
            "greedy_served_mw": self.greedy.served_mw,
            "optimal_served_mw": self.optimal.served_mw,
            "served_gap_mw": self.served_gap_mw,
            "greedy_shed": self.greedy.shed_count,
            "optimal_shed": self.optimal.shed_count,
            "solver_status": self.optimal.solver_status,
        }


def _check_inputs(requests: Sequence[DemandRequest], available: Sequence[float]) -> np.ndarray:
    for request in requests:
        if not math.isfinite(request.megawatts) or request.megawatts < 0:
            raise AnalysisError(
                f"Cannot analyse request {request.request_id} with {request.megawatts} MW"
            )
    capacity = np.asarray(available, dtype=float)
    if capacity.size and (not np.all(np.isfinite(capacity)) or np.any(capacity < 0)):
        raise AnalysisError("Available capacities must be finite and non-negative")
    return capacity


def _served_by_class(requests: Sequence[DemandRequest], assignment: Dict[str, Optional[int]]) -> Dict[str, float]:
    served = {member.name.lower(): 0.0 for member in PriorityClass}
    for request in requests:
        if assignment[request.request_id] is not None:
            served[request.priority_class.name.lower()] += request.megawatts
    return served


def simulate_first_fit(requests: Sequence[DemandRequest], available: Sequence[float]) -> AllocationPlan:
    """Dry-run the live policy on copies of the capacities.

    ``requests`` must already be in dequeue order.
    """
    remaining = _check_inputs(requests, available).copy()
    assignment: Dict[str, Optional[int]] = {}
    served = shed = 0.0

    for request in requests:
        fits = np.flatnonzero(remaining >= request.megawatts)
        if fits.size:
            index = int(fits[0])
            remaining[index] -= request.megawatts
            assignment[request.request_id] = index
            served += request.megawatts
        else:
            assignment[request.request_id] = None
            shed += request.megawatts

    return AllocationPlan(
        policy="first_fit",
        assignment=assignment,
        served_mw=served,
        shed_mw=shed,
        served_by_class=_served_by_class(requests, assignment),
    )


def optimal_assignment(requests: Sequence[DemandRequest], available: Sequence[float]) -> AllocationPlan:
    """Best whole-request assignment, one substation per request.

    Classes are optimised lexicographically: served industrial MW first,
    then commercial with industrial pinned, then residential. A higher class
    is never traded away for more lower-class load.
    """
    capacity = _check_inputs(requests, available)
    total_mw = float(sum(r.megawatts for r in requests))
    if not requests or capacity.size == 0:
        assignment = {r.request_id: None for r in requests}
        return AllocationPlan("optimal", assignment, 0.0, total_mw,
                              _served_by_class(requests, assignment), "Trivial")

    prob = LpProblem("Demand_Assignment", LpMaximize)
    x = {
        (i, j): LpVariable(f"x_{i}_{j}", cat=LpBinary)
        for i in range(len(requests))
        for j in range(capacity.size)
    }

    for i in range(len(requests)):
        prob += lpSum(x[i, j] for j in range(capacity.size)) <= 1, f"one_site_{i}"
    for j in range(capacity.size):
        prob += (
            lpSum(requests[i].megawatts * x[i, j] for i in range(len(requests))) <= float(capacity[j]),
            f"capacity_{j}"
        )

    solver = PULP_CBC_CMD(msg=False)
    status = "Not Solved"
    for level in sorted({r.priority_class for r in requests}, reverse=True):
        members = [i for i, r in enumerate(requests) if r.priority_class == level]
        served_expr = lpSum(requests[i].megawatts * x[i, j]
                            for i in members for j in range(capacity.size))
        prob.setObjective(served_expr)
        prob.solve(solver)
        status = LpStatus[prob.status]
        if status != "Optimal":
            raise AnalysisError(f"Solver status for {level.name.lower()} pass: {status}")
        best = served_expr.value() or 0.0
        prob += served_expr >= best - _LEXICOGRAPHIC_TOLERANCE, f"pin_{level.name.lower()}"
        logger.debug(f"{level.name.lower()} optimum: {best:.3f} MW")

    assignment: Dict[str, Optional[int]] = {}
    served = 0.0
    for i, request in enumerate(requests):
        chosen = [j for j in range(capacity.size) if (x[i, j].value() or 0.0) > 0.5]
        assignment[request.request_id] = chosen[0] if chosen else None
        if chosen:
            served += request.megawatts

    return AllocationPlan(
        policy="optimal",
        assignment=assignment,
        served_mw=served,
        shed_mw=total_mw - served,
        served_by_class=_served_by_class(requests, assignment),
        solver_status=status,
    )


def compare_policies(controller: GridController) -> AllocationComparison:
    """Compare greedy and optimal plans for the controller's pending demand.

    Uses capacities as they stand now; maintenance transitions that the next
    cycle would apply are not anticipated.
    """
    requests: List[DemandRequest] = controller.pending_requests()
    available = [s.available() for s in controller.substations]
    greedy = simulate_first_fit(requests, available)
    optimal = optimal_assignment(requests, available)
    logger.info(
        f"Greedy serves {greedy.served_mw:.1f} MW, optimal {optimal.served_mw:.1f} MW "
        f"across {len(requests)} pending requests"
    )
    return AllocationComparison(greedy=greedy, optimal=optimal)
