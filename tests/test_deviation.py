import numpy as np
import pytest

from mobility_graph.deviation import positional_deviation
from mobility_graph.graph_index import build_index
from mobility_graph.shortest_paths import distance_matrix, shortest_path_table

LINKS = [
    {"id": "ab", "source": "a", "target": "b"},
    {"id": "ac", "source": "a", "target": "c"},
]


def _score(nodes, links=LINKS, mode="last", spacing=50.0):
    ids = [n["id"] for n in nodes]
    graph = build_index(links)
    hops = distance_matrix(shortest_path_table(graph.adjacency), ids)
    pos = positional_deviation(
        nodes,
        graph.adjacency_matrix(ids),
        graph.degree_vector(ids),
        hops,
        base_spacing=spacing,
        mode=mode,
    )
    return dict(zip(ids, pos.tolist()))


def _star():
    return [
        {"id": "a", "x": 0.0, "y": 0.0},
        {"id": "b", "x": 0.0, "y": 75.0},
        {"id": "c", "x": 0.0, "y": 150.0},
    ]


def test_perfect_spacing_scores_zero():
    nodes = [{"id": "a", "x": 0.0, "y": 0.0}, {"id": "b", "x": 30.0, "y": 40.0}]
    pos = _score(nodes, [{"id": "ab", "source": "a", "target": "b"}])
    assert pos == {"a": 0.0, "b": 0.0}


def test_last_adjacent_node_wins_before_degree_division():
    # a-b deviates by 0.5, a-c by 2.0; c comes last in node order.
    pos = _score(_star())
    assert pos["a"] == pytest.approx(2.0 / 2)
    assert pos["b"] == pytest.approx(0.5)
    assert pos["c"] == pytest.approx(2.0)


def test_last_adjacent_follows_node_order():
    a, b, c = _star()
    pos = _score([a, c, b])
    assert pos["a"] == pytest.approx(0.5 / 2)


def test_mean_mode_averages_over_degree():
    pos = _score(_star(), mode="mean")
    assert pos["a"] == pytest.approx((0.5 + 2.0) / 2)
    assert pos["b"] == pytest.approx(0.5)


def test_spacing_scales_ideal_distance():
    pos = _score(_star(), spacing=75.0)
    assert pos["b"] == pytest.approx(0.0)
    assert pos["c"] == pytest.approx(1.0)


def test_unplaced_pairs_are_skipped():
    a, b, c = _star()
    del c["x"]
    pos = _score([a, b, c])
    # a falls back to its only scored neighbour b.
    assert pos["a"] == pytest.approx(0.5 / 2)
    assert pos["c"] == 0.0
    assert all(np.isfinite(v) for v in pos.values())


def test_isolated_node_scores_zero():
    nodes = _star() + [{"id": "d", "x": 500.0, "y": 500.0}]
    pos = _score(nodes)
    assert pos["d"] == 0.0


def test_empty_nodes():
    empty = np.zeros((0, 0))
    assert positional_deviation([], empty.astype(bool), np.zeros(0), empty).size == 0
