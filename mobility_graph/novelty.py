from __future__ import annotations

from typing import Any, Hashable, Iterable, Mapping, Sequence

import numpy as np

from mobility_core.identity import IdentityExtractor, default_identity, endpoint_identity


def move_seed(pos: np.ndarray, is_new: np.ndarray) -> np.ndarray:
    """Carried-over nodes move by their deviation, new nodes get +1 on top."""
    return np.asarray(pos, dtype=np.float64) + np.asarray(is_new, dtype=np.float64)


def seed_vector(
    mov: np.ndarray,
    new_links: Iterable[Mapping[str, Any]],
    ids: Sequence[Hashable],
    degree: np.ndarray,
    identity: IdentityExtractor = default_identity,
) -> np.ndarray:
    """
    Initial move-probability vector ``p0``.

    Each link absent from the previous snapshot injects ``1/degree`` into
    both of its endpoints; then every node adds its own ``mov``. Endpoints
    outside ``ids`` and zero-degree endpoints are skipped.
    """
    pos = {nid: i for i, nid in enumerate(ids)}
    targets = []
    for link in new_links:
        for end in ("source", "target"):
            i = pos.get(endpoint_identity(link.get(end), identity))
            if i is not None and degree[i] > 0:
                targets.append(i)

    p0 = np.zeros(len(ids), dtype=np.float64)
    if targets:
        idx = np.array(targets, dtype=np.intp)
        np.add.at(p0, idx, 1.0 / degree[idx])
    return p0 + mov
