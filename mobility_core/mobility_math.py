from __future__ import annotations

import json
import logging
from typing import Any

import numpy as np

LOG = logging.getLogger(__name__)


def _log(event: str, **fields: Any) -> None:
    if not LOG.isEnabledFor(logging.DEBUG):
        return
    payload = {"event": event, **fields}
    LOG.debug(json.dumps(payload, sort_keys=True, default=str))


def safe_reciprocal(values: Any) -> np.ndarray:
    """1/x where x > 0, else 0. Degree zero never becomes a divisor."""
    arr = np.asarray(values, dtype=np.float64)
    out = np.zeros_like(arr)
    np.divide(1.0, arr, out=out, where=arr > 0)
    return out


def linear_rescale(
    values: Any,
    *,
    lo: float = 0.2,
    hi: float = 1.0,
    degenerate: float = 0.6,
    label: str | None = None,
) -> np.ndarray:
    """
    Linearly map values from [min, max] onto [lo, hi].

    All-equal input has no usable domain, so every value maps to
    ``degenerate``. Non-finite input is treated the same way instead of
    leaking NaN into the output.
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return arr
    if not np.all(np.isfinite(arr)):
        _log("rescale_non_finite", label=label, count=int(np.count_nonzero(~np.isfinite(arr))))
        return np.full_like(arr, degenerate)
    d_min = float(arr.min())
    d_max = float(arr.max())
    if d_max == d_min:
        _log("rescale_degenerate", label=label, value=d_min, fallback=degenerate)
        return np.full_like(arr, degenerate)
    t = (arr - d_min) / (d_max - d_min)
    out = lo * (1.0 - t) + hi * t
    return np.clip(out, lo, hi)
