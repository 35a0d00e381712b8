import numpy as np
import pytest

from mobility_graph.graph_index import build_index
from mobility_graph.shortest_paths import distance_matrix, shortest_path_table
from mobility_graph.transition import influence_matrix


def _influence(links, ids):
    graph = build_index(links)
    hops = distance_matrix(shortest_path_table(graph.adjacency), ids)
    return influence_matrix(hops, graph.degree_vector(ids))


def test_entries_are_inverse_degree_of_row():
    links = [
        {"id": "l1", "source": "hub", "target": "a"},
        {"id": "l2", "source": "hub", "target": "b"},
        {"id": "l3", "source": "hub", "target": "c"},
    ]
    matrix = _influence(links, ["hub", "a", "b", "c"])
    assert matrix[0].tolist() == pytest.approx([0.0, 1 / 3, 1 / 3, 1 / 3])
    assert matrix[1].tolist() == [1.0, 0.0, 0.0, 0.0]
    assert matrix[1, 2] == 0.0


def test_rows_sum_to_one_for_connected_nodes():
    links = [
        {"id": "l1", "source": "a", "target": "b"},
        {"id": "l2", "source": "b", "target": "c"},
        {"id": "l3", "source": "c", "target": "a"},
        {"id": "l4", "source": "c", "target": "d"},
        {"id": "l5", "source": "d", "target": "d"},
    ]
    matrix = _influence(links, ["a", "b", "c", "d", "lonely"])
    sums = matrix.sum(axis=1)
    assert sums[:4] == pytest.approx([1.0, 1.0, 1.0, 1.0])
    assert sums[4] == 0.0


def test_self_entries_are_zero():
    links = [{"id": "l1", "source": "a", "target": "b"}, {"id": "l2", "source": "a", "target": "a"}]
    matrix = _influence(links, ["a", "b"])
    assert np.diag(matrix).tolist() == [0.0, 0.0]


def test_two_hop_pairs_have_no_influence():
    links = [{"id": "l1", "source": "a", "target": "b"}, {"id": "l2", "source": "b", "target": "c"}]
    matrix = _influence(links, ["a", "b", "c"])
    assert matrix[0, 2] == 0.0
    assert matrix[2, 0] == 0.0
