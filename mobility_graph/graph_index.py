from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterable, Mapping, Sequence

import numpy as np

from mobility_core.identity import IdentityExtractor, default_identity, endpoint_identity
from mobility_core.mobility_math import _log


@dataclass
class GraphIndex:
    adjacency: Dict[Hashable, Dict[Hashable, int]] = field(default_factory=dict)
    degree: Dict[Hashable, int] = field(default_factory=dict)

    def degree_vector(self, ids: Sequence[Hashable]) -> np.ndarray:
        return np.array([self.degree.get(nid, 0) for nid in ids], dtype=np.float64)

    def adjacency_matrix(self, ids: Sequence[Hashable]) -> np.ndarray:
        pos = {nid: i for i, nid in enumerate(ids)}
        matrix = np.zeros((len(ids), len(ids)), dtype=bool)
        for src, row in self.adjacency.items():
            i = pos.get(src)
            if i is None:
                continue
            for tgt in row:
                j = pos.get(tgt)
                if j is not None:
                    matrix[i, j] = True
        return matrix


def build_index(
    links: Iterable[Mapping[str, Any]],
    identity: IdentityExtractor = default_identity,
) -> GraphIndex:
    """
    Symmetric adjacency and degree table for one snapshot.

    Endpoints that only appear on links are indexed like any other node;
    callers pick the ids they care about through ``degree_vector`` and
    ``adjacency_matrix``.
    """
    graph = GraphIndex()
    self_loops = 0
    for link in links:
        src = endpoint_identity(link.get("source"), identity)
        tgt = endpoint_identity(link.get("target"), identity)
        if src is None or tgt is None:
            continue
        if src == tgt:
            self_loops += 1
            continue
        graph.adjacency.setdefault(src, {})[tgt] = 1
        graph.adjacency.setdefault(tgt, {})[src] = 1

    graph.degree = {nid: len(row) for nid, row in graph.adjacency.items()}
    if self_loops:
        _log("self_loops_skipped", count=self_loops)
    return graph
