from __future__ import annotations

import numpy as np

from mobility_core.mobility_math import safe_reciprocal


def influence_matrix(hops: np.ndarray, degree: np.ndarray) -> np.ndarray:
    """
    Row-stochastic influence matrix over direct neighbours.

    ``I[i, j] = 1/degree(i)`` when ``hops(i, j) == 1`` and ``i != j``, else 0.
    Rows of zero-degree nodes stay all zero.
    """
    direct = np.asarray(hops) == 1
    np.fill_diagonal(direct, False)
    weights = safe_reciprocal(degree)
    return np.where(direct, weights[:, None], 0.0)
