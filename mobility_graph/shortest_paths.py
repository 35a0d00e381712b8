from __future__ import annotations

from typing import Dict, Hashable, Mapping, Sequence

import networkx as nx
import numpy as np

HopTable = Dict[Hashable, Dict[Hashable, int]]


def hop_graph(adjacency: Mapping[Hashable, Mapping[Hashable, int]]) -> nx.Graph:
    graph = nx.Graph()
    graph.add_nodes_from(adjacency)
    for src, row in adjacency.items():
        graph.add_edges_from((src, tgt) for tgt in row)
    return graph


def single_source_hops(graph: nx.Graph, source: Hashable) -> Dict[Hashable, int]:
    if source not in graph:
        return {}
    return dict(nx.single_source_shortest_path_length(graph, source))


def shortest_path_table(
    adjacency: Mapping[Hashable, Mapping[Hashable, int]],
    all_pairs: bool = False,
) -> HopTable:
    """
    Unweighted hop distance from every node in ``adjacency``.

    Unreachable targets are simply absent. ``all_pairs`` swaps the per-source
    BFS loop for networkx's all-pairs generator; distances are identical.
    """
    graph = hop_graph(adjacency)
    if all_pairs:
        return {src: dict(row) for src, row in nx.all_pairs_shortest_path_length(graph)}
    return {src: single_source_hops(graph, src) for src in graph.nodes}


def distance_matrix(table: Mapping[Hashable, Mapping[Hashable, int]], ids: Sequence[Hashable]) -> np.ndarray:
    pos = {nid: i for i, nid in enumerate(ids)}
    matrix = np.full((len(ids), len(ids)), np.inf)
    for src, row in table.items():
        i = pos.get(src)
        if i is None:
            continue
        for tgt, hops in row.items():
            j = pos.get(tgt)
            if j is not None:
                matrix[i, j] = hops
    return matrix
