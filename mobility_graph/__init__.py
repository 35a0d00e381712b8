from .deviation import positional_deviation
from .engine import MobilityRecord, MobilityResult, compute_mobility, mobility_update
from .graph_index import GraphIndex, build_index
from .novelty import move_seed, seed_vector
from .shortest_paths import distance_matrix, hop_graph, shortest_path_table, single_source_hops
from .snapshot_diff import SnapshotDiff, diff_snapshots
from .stationary import CAP_EXCEEDED, CONVERGED, ITERATING, StationaryOutcome, solve_stationary
from .transition import influence_matrix

__all__ = [
    "positional_deviation",
    "MobilityRecord",
    "MobilityResult",
    "compute_mobility",
    "mobility_update",
    "GraphIndex",
    "build_index",
    "move_seed",
    "seed_vector",
    "distance_matrix",
    "hop_graph",
    "shortest_path_table",
    "single_source_hops",
    "SnapshotDiff",
    "diff_snapshots",
    "CAP_EXCEEDED",
    "CONVERGED",
    "ITERATING",
    "StationaryOutcome",
    "solve_stationary",
    "influence_matrix",
]
