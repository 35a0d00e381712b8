from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterator, MutableMapping, Optional, Sequence

import numpy as np

from mobility_core.config import DEFAULT_CONFIG, MobilityConfig
from mobility_core.identity import IdentityExtractor, default_identity
from mobility_core.mobility_math import _log, linear_rescale
from mobility_graph.deviation import positional_deviation
from mobility_graph.graph_index import build_index
from mobility_graph.novelty import move_seed, seed_vector
from mobility_graph.shortest_paths import distance_matrix, shortest_path_table
from mobility_graph.snapshot_diff import diff_snapshots
from mobility_graph.stationary import StationaryOutcome, solve_stationary
from mobility_graph.transition import influence_matrix

LOG = logging.getLogger(__name__)


@dataclass(frozen=True)
class MobilityRecord:
    pos: float = 0.0
    mov: float = 0.0
    mobility: float = 1.0

    def to_dict(self) -> Dict[str, float]:
        return {"pos": self.pos, "mov": self.mov, "mobility": self.mobility}


@dataclass
class MobilityResult:
    records: Dict[Hashable, MobilityRecord] = field(default_factory=dict)
    is_initial_run: bool = True
    outcome: Optional[StationaryOutcome] = None

    def __getitem__(self, node_id: Hashable) -> MobilityRecord:
        return self.records[node_id]

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.records

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)

    def mobility(self) -> Dict[Hashable, float]:
        return {nid: rec.mobility for nid, rec in self.records.items()}

    def apply(self, nodes: Sequence[MutableMapping[str, Any]], identity: IdentityExtractor = default_identity) -> None:
        for node in nodes:
            rec = self.records.get(identity(node))
            if rec is None:
                continue
            node["pos"] = rec.pos
            node["mov"] = rec.mov
            node["mobility"] = rec.mobility


def compute_mobility(
    previous_nodes: Sequence[Any],
    previous_links: Sequence[Any],
    current_nodes: Sequence[Any],
    current_links: Sequence[Any],
    identity: IdentityExtractor = default_identity,
    config: Optional[MobilityConfig] = None,
) -> MobilityResult:
    """
    Mobility of every current node relative to the previous snapshot.

    Returns one record per unique current node id and leaves the inputs
    untouched. The first run (no previous nodes or links) skips the
    positional deviation term, so every node starts from ``pos = 0``.
    """
    cfg = config or DEFAULT_CONFIG
    diff = diff_snapshots(previous_nodes, previous_links, current_nodes, current_links, identity)
    ids = diff.current_node_ids
    if not ids:
        return MobilityResult(is_initial_run=diff.is_initial_run)

    graph = build_index(current_links, identity)
    hops = distance_matrix(shortest_path_table(graph.adjacency), ids)
    degree = graph.degree_vector(ids)

    if diff.is_initial_run:
        pos = np.zeros(len(ids))
    else:
        pos = positional_deviation(
            diff.current_nodes,
            graph.adjacency_matrix(ids),
            degree,
            hops,
            base_spacing=cfg.base_spacing,
            mode=cfg.deviation_mode,
        )

    is_new = np.array([diff.is_new_node(nid) for nid in ids], dtype=bool)
    mov = move_seed(pos, is_new)
    p0 = seed_vector(mov, diff.new_links, ids, degree, identity)

    outcome = solve_stationary(
        p0,
        influence_matrix(hops, degree),
        damping=cfg.damping,
        damping_decay=cfg.damping_decay,
        threshold=cfg.convergence_threshold,
        max_iterations=cfg.max_iterations,
    )
    mobility = linear_rescale(
        outcome.totals,
        lo=cfg.mobility_floor,
        hi=cfg.mobility_ceiling,
        degenerate=cfg.degenerate_mobility,
        label="mobility",
    )

    records = {
        nid: MobilityRecord(pos=float(pos[i]), mov=float(mov[i]), mobility=float(mobility[i]))
        for i, nid in enumerate(ids)
    }
    _log(
        "mobility_update",
        nodes=len(ids),
        links=len(current_links),
        new_nodes=int(is_new.sum()),
        new_links=len(diff.new_links),
        initial_run=diff.is_initial_run,
        state=outcome.state,
        iterations=outcome.iterations,
    )
    return MobilityResult(records=records, is_initial_run=diff.is_initial_run, outcome=outcome)


def mobility_update(
    previous_nodes: Sequence[Any],
    previous_links: Sequence[Any],
    current_nodes: Sequence[MutableMapping[str, Any]],
    current_links: Sequence[Any],
    identity: IdentityExtractor = default_identity,
    config: Optional[MobilityConfig] = None,
) -> MobilityResult:
    """Compute mobility and write ``pos``, ``mov`` and ``mobility`` onto the current nodes."""
    result = compute_mobility(previous_nodes, previous_links, current_nodes, current_links, identity, config)
    result.apply(current_nodes, identity)
    return result
