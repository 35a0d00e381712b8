from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Mapping, Sequence, Tuple

from mobility_core.identity import IdentityExtractor, default_identity, link_identity


@dataclass(frozen=True)
class SnapshotDiff:
    previous_nodes_by_id: Dict[Hashable, Mapping[str, Any]]
    previous_links_by_id: Dict[Hashable, Mapping[str, Any]]
    is_initial_run: bool
    # Unique current node ids in first-seen order, paired with the record that introduced them.
    current_node_ids: Tuple[Hashable, ...]
    current_nodes: Tuple[Mapping[str, Any], ...]
    new_links: Tuple[Mapping[str, Any], ...]

    def is_new_node(self, node_id: Hashable) -> bool:
        return node_id not in self.previous_nodes_by_id


def diff_snapshots(
    previous_nodes: Sequence[Mapping[str, Any]],
    previous_links: Sequence[Mapping[str, Any]],
    current_nodes: Sequence[Mapping[str, Any]],
    current_links: Sequence[Mapping[str, Any]],
    identity: IdentityExtractor = default_identity,
) -> SnapshotDiff:
    """
    Index the previous snapshot by identity and classify the current one.

    Every identity is extracted here, so a record without one raises
    IdentityError before any matrix work starts.
    """
    previous_nodes_by_id = {identity(node): node for node in previous_nodes}
    previous_links_by_id = {link_identity(link): link for link in previous_links}

    ids: List[Hashable] = []
    records: List[Mapping[str, Any]] = []
    seen = set()
    for node in current_nodes:
        nid = identity(node)
        if nid in seen:
            continue
        seen.add(nid)
        ids.append(nid)
        records.append(node)

    new_links = tuple(link for link in current_links if link_identity(link) not in previous_links_by_id)

    return SnapshotDiff(
        previous_nodes_by_id=previous_nodes_by_id,
        previous_links_by_id=previous_links_by_id,
        is_initial_run=not previous_nodes and not previous_links,
        current_node_ids=tuple(ids),
        current_nodes=tuple(records),
        new_links=new_links,
    )
