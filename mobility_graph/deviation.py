from __future__ import annotations

import math
from typing import Any, Mapping, Sequence, Tuple

import numpy as np

from mobility_core.mobility_math import _log, safe_reciprocal


def _safe_float(value: Any, default: float = math.nan) -> float:
    try:
        return float(value)
    except Exception:
        return default


def _position(node: Mapping[str, Any]) -> Tuple[float, float]:
    return _safe_float(node.get("x")), _safe_float(node.get("y"))


def positional_deviation(
    nodes: Sequence[Mapping[str, Any]],
    adjacent: np.ndarray,
    degree: np.ndarray,
    hops: np.ndarray,
    base_spacing: float = 50.0,
    mode: str = "last",
) -> np.ndarray:
    """
    Per-node gap between drawn edge length and graph-implied edge length.

    For every directly adjacent pair (i, j) the deviation is
    ``|dist(i, j) - spacing * hops(i, j)| / (spacing * hops(i, j))``.
    In ``last`` mode each node keeps only the deviation of its last adjacent
    node in ``nodes`` order; ``mean`` mode sums them. Either way the result is
    divided by the node degree. Pairs missing a finite position are skipped
    and zero-degree nodes score 0.
    """
    n = len(nodes)
    if n == 0:
        return np.zeros(0)

    xy = np.array([_position(node) for node in nodes], dtype=np.float64)
    placed = np.isfinite(xy).all(axis=1)
    scored = adjacent & placed[:, None] & placed[None, :]
    np.fill_diagonal(scored, False)

    delta = xy[:, None, :] - xy[None, :, :]
    actual = np.sqrt((delta ** 2).sum(axis=-1))
    ideal = base_spacing * hops
    with np.errstate(divide="ignore", invalid="ignore"):
        deviation = np.abs(actual - ideal) / ideal
    deviation = np.where(scored, deviation, 0.0)

    if mode == "mean":
        picked = deviation.sum(axis=1)
    else:
        has_neighbor = scored.any(axis=1)
        last = n - 1 - np.argmax(scored[:, ::-1], axis=1)
        picked = np.where(has_neighbor, deviation[np.arange(n), last], 0.0)

    pos = picked * safe_reciprocal(degree)
    unplaced = int(n - np.count_nonzero(placed))
    if unplaced:
        _log("deviation_unplaced_nodes", count=unplaced, nodes=n)
    return pos
