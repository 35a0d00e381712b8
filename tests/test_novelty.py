import numpy as np

from mobility_graph.novelty import move_seed, seed_vector


def test_new_nodes_get_boost():
    mov = move_seed(np.array([0.25, 0.25, 0.0]), np.array([False, True, True]))
    assert mov.tolist() == [0.25, 1.25, 1.0]
    assert mov[1] > mov[0]


def test_new_links_inject_inverse_degree():
    ids = ["a", "b", "c"]
    degree = np.array([1.0, 2.0, 1.0])
    links = [{"id": "l2", "source": "b", "target": "c"}]
    p0 = seed_vector(np.zeros(3), links, ids, degree)
    assert p0.tolist() == [0.0, 0.5, 1.0]


def test_injection_accumulates_then_adds_mov():
    ids = ["a", "b"]
    degree = np.array([1.0, 1.0])
    links = [{"id": "l1", "source": "a", "target": "b"}]
    p0 = seed_vector(np.array([1.0, 1.0]), links, ids, degree)
    assert p0.tolist() == [2.0, 2.0]


def test_repeated_endpoint_accumulates():
    ids = ["hub", "x", "y"]
    degree = np.array([2.0, 1.0, 1.0])
    links = [
        {"id": "l1", "source": "hub", "target": "x"},
        {"id": "l2", "source": {"id": "y"}, "target": "hub"},
    ]
    p0 = seed_vector(np.zeros(3), links, ids, degree)
    assert p0.tolist() == [1.0, 1.0, 1.0]


def test_zero_degree_and_foreign_endpoints_skipped():
    ids = ["a", "b"]
    degree = np.array([0.0, 1.0])
    links = [
        {"id": "l1", "source": "a", "target": "a"},
        {"id": "l2", "source": "b", "target": "outside"},
    ]
    p0 = seed_vector(np.zeros(2), links, ids, degree)
    assert p0.tolist() == [0.0, 1.0]
