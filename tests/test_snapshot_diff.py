import pytest

from mobility_core.errors import IdentityError
from mobility_core.identity import field_identity
from mobility_graph.snapshot_diff import diff_snapshots


def test_empty_previous_is_initial_run():
    diff = diff_snapshots([], [], [{"id": "a"}], [])
    assert diff.is_initial_run
    assert diff.current_node_ids == ("a",)
    assert diff.is_new_node("a")


def test_previous_links_alone_disable_initial_run():
    diff = diff_snapshots([], [{"id": "l1", "source": "a", "target": "b"}], [], [])
    assert not diff.is_initial_run


def test_classifies_carried_over_and_new():
    prev_nodes = [{"id": "a"}, {"id": "b"}]
    prev_links = [{"id": "l1", "source": "a", "target": "b"}]
    cur_nodes = [{"id": "a"}, {"id": "b"}, {"id": "c"}]
    cur_links = [
        {"id": "l1", "source": "a", "target": "b"},
        {"id": "l2", "source": "b", "target": "c"},
    ]
    diff = diff_snapshots(prev_nodes, prev_links, cur_nodes, cur_links)
    assert not diff.is_initial_run
    assert set(diff.previous_nodes_by_id) == {"a", "b"}
    assert set(diff.previous_links_by_id) == {"l1"}
    assert not diff.is_new_node("a")
    assert diff.is_new_node("c")
    assert [link["id"] for link in diff.new_links] == ["l2"]


def test_duplicate_current_ids_keep_first_record():
    first = {"id": "a", "x": 1.0}
    diff = diff_snapshots([], [], [first, {"id": "a", "x": 2.0}, {"id": "b"}], [])
    assert diff.current_node_ids == ("a", "b")
    assert diff.current_nodes[0] is first


def test_missing_node_identity_raises():
    with pytest.raises(IdentityError):
        diff_snapshots([{"id": "a"}], [], [{"name": "b"}], [])


def test_missing_link_identity_raises():
    with pytest.raises(IdentityError):
        diff_snapshots([], [], [{"id": "a"}], [{"source": "a", "target": "a"}])


def test_custom_identity_field():
    diff = diff_snapshots([{"name": "a"}], [], [{"name": "a"}, {"name": "b"}], [], field_identity("name"))
    assert diff.current_node_ids == ("a", "b")
    assert not diff.is_new_node("a")
    assert diff.is_new_node("b")
