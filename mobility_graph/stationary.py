from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np

from mobility_core.mobility_math import _log

LOG = logging.getLogger(__name__)

ITERATING = "iterating"
CONVERGED = "converged"
CAP_EXCEEDED = "cap_exceeded"


@dataclass(frozen=True)
class StationaryOutcome:
    totals: np.ndarray
    state: str
    iterations: int
    last_diff: float

    @property
    def converged(self) -> bool:
        return self.state == CONVERGED


def solve_stationary(
    p0: np.ndarray,
    influence: np.ndarray,
    *,
    damping: float = 0.8,
    damping_decay: float = 0.8,
    threshold: float = 0.1,
    max_iterations: int = 1000,
) -> StationaryOutcome:
    """
    Damped power iteration of ``p0`` through the influence matrix.

    Each step computes ``res = I @ p0``, compares ``a * sum(res)`` with the
    previous step, carries ``res`` forward as the next ``p0`` and adds the
    damped ``a * res`` to the running total (seeded with ``p0``). ``a``
    shrinks by ``damping_decay`` per step. The loop ends in ``converged``
    once the change is ``<= threshold`` or in ``cap_exceeded`` after
    ``max_iterations``; both keep the accumulated totals.
    """
    current = np.array(p0, dtype=np.float64)
    totals = current.copy()
    a = damping
    last_sum = 0.0
    diff = float("inf")
    iterations = 0
    state = ITERATING

    while state == ITERATING:
        res = influence @ current
        step_sum = a * float(res.sum())
        diff = abs(step_sum - last_sum)

        current = res
        totals += res * a
        a *= damping_decay
        last_sum = step_sum
        iterations += 1

        if diff <= threshold:
            state = CONVERGED
        elif iterations >= max_iterations:
            state = CAP_EXCEEDED

    if state == CAP_EXCEEDED:
        LOG.warning(
            "stationary-cap-exceeded",
            extra={"iterations": iterations, "last_diff": diff, "threshold": threshold},
        )
    _log("stationary_solved", state=state, iterations=iterations, last_diff=diff)
    return StationaryOutcome(totals=totals, state=state, iterations=iterations, last_diff=diff)
