from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

from mobility_core.config import MobilityConfig
from mobility_core.errors import GraphDataError
from mobility_core.identity import field_identity
from mobility_graph.engine import MobilityResult, mobility_update
from timeline.schema import DEFAULT_REGISTRY
from timeline.validation import validate_records

LOG = logging.getLogger(__name__)


def _payload(el: Dict[str, Any]) -> Dict[str, Any]:
    data = el.get("data")
    return data if isinstance(data, dict) else el


def _bound(value: Any, default: float) -> float:
    if value is None:
        return default
    try:
        v = float(value)
    except Exception:
        return default
    if math.isnan(v):
        return default
    return v


def in_window(record: Mapping[str, Any], time: float) -> bool:
    return _bound(record.get("start"), -1.0) <= time <= _bound(record.get("end"), math.inf)


def _endpoint(value: Any, key: str) -> Optional[str]:
    if isinstance(value, dict):
        value = _payload(value).get(key)
    if value is None:
        return None
    return str(value)


def load_graph_data(path: Path) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Read ``{"nodes": [...], "links": [...]}`` from disk.

    ``edges`` is accepted in place of ``links`` and cytoscape-style
    ``{"data": {...}}`` wrappers are unwrapped.
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
        data = json.loads(raw) if raw.strip() else {}
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise GraphDataError(f"Cannot read graph data from {path}: {exc}") from exc
    if isinstance(data, dict) and isinstance(data.get("elements"), dict):
        data = data["elements"]
    if not isinstance(data, dict):
        raise GraphDataError(f"Unsupported graph data structure in {path}")
    nodes = data.get("nodes") or []
    links = data.get("links")
    if links is None:
        links = data.get("edges") or []
    if not isinstance(nodes, list) or not isinstance(links, list):
        raise GraphDataError(f"nodes and links must be lists in {path}")
    return (
        [_payload(n) for n in nodes if isinstance(n, dict)],
        [_payload(e) for e in links if isinstance(e, dict)],
    )


def load_positions(path: Path) -> Dict[str, Dict[str, float]]:
    positions: Dict[str, Dict[str, float]] = {}
    path = Path(path)
    if not path.exists():
        return positions
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except Exception:
        LOG.warning("positions-unreadable", extra={"path": str(path)})
        return positions
    if isinstance(payload, dict) and all(isinstance(v, dict) for v in payload.values()):
        for nid, pos in payload.items():
            if "x" in pos and "y" in pos:
                positions[str(nid)] = {"x": float(pos["x"]), "y": float(pos["y"])}
        return positions
    elements = payload.get("elements") if isinstance(payload, dict) else payload
    if not isinstance(elements, list):
        return positions
    for el in elements:
        if not isinstance(el, dict):
            continue
        nid = _payload(el).get("id")
        pos = el.get("position")
        if nid is not None and isinstance(pos, dict) and "x" in pos and "y" in pos:
            positions[str(nid)] = {"x": float(pos["x"]), "y": float(pos["y"])}
    return positions


@dataclass(frozen=True)
class TimelineSnapshot:
    nodes: List[Dict[str, Any]]
    links: List[Dict[str, Any]]
    node_ids: Set[str]
    orphan_links: int
    kept_links: int
    time: Optional[float] = None

    @property
    def meta(self) -> Dict[str, Any]:
        return {
            "nodes": len(self.nodes),
            "links": len(self.links),
            "orphan_links": self.orphan_links,
            "kept_links": self.kept_links,
        }


@dataclass(frozen=True)
class MobilityFrame:
    time: float
    snapshot: TimelineSnapshot
    result: MobilityResult


EMPTY_SNAPSHOT = TimelineSnapshot(nodes=[], links=[], node_ids=set(), orphan_links=0, kept_links=0)


class TimelineState:
    """
    Loads the time-indexed graph once and serves per-time-index windows.

    ``step`` re-runs the mobility engine against the previously stepped
    window; only that one window is retained.
    """

    def __init__(
        self,
        graph_path: Path,
        key: str = "id",
        positions: Optional[Mapping[str, Mapping[str, float]]] = None,
        config: Optional[MobilityConfig] = None,
        quarantine_dir: Optional[Path] = None,
    ) -> None:
        self.graph_path = Path(graph_path)
        self.key = key
        self.config = config
        self.quarantine_dir = quarantine_dir
        self._positions: Dict[str, Dict[str, float]] = {}
        if positions:
            self.update_positions(positions)
        self._full: Optional[TimelineSnapshot] = None
        self._last_mtime: float = 0.0
        self._previous: TimelineSnapshot = EMPTY_SNAPSHOT
        self.loaded = False

    def load_full(self, force: bool = False) -> TimelineSnapshot:
        p = self.graph_path
        mtime = p.stat().st_mtime if p.exists() else 0.0
        if self._full is not None and not force and mtime <= self._last_mtime:
            return self._full

        if not p.exists():
            LOG.warning("graph-data-missing", extra={"path": str(p)})
            self._full = EMPTY_SNAPSHOT
            self._last_mtime = 0.0
            self.loaded = True
            return self._full

        raw_nodes, raw_links = load_graph_data(p)
        raw_nodes, _ = validate_records(
            raw_nodes, DEFAULT_REGISTRY.record_validator("graph_data", "NodeRecord"), "nodes", self.quarantine_dir
        )
        raw_links, _ = validate_records(
            raw_links, DEFAULT_REGISTRY.record_validator("graph_data", "LinkRecord"), "links", self.quarantine_dir
        )

        nodes: List[Dict[str, Any]] = []
        node_ids: Set[str] = set()
        unidentified = 0
        for n in raw_nodes:
            nid = n.get(self.key)
            if nid is None:
                unidentified += 1
                continue
            nodes.append({**n, "id": str(nid)})
            node_ids.add(str(nid))
        if unidentified:
            LOG.warning("nodes-without-identity", extra={"key": self.key, "count": unidentified})

        kept: List[Dict[str, Any]] = []
        orphan = 0
        for e in raw_links:
            s = _endpoint(e.get("source"), self.key)
            t = _endpoint(e.get("target"), self.key)
            if s is None or t is None or s not in node_ids or t not in node_ids:
                orphan += 1
                continue
            kept.append({**e, "id": str(e.get("id")), "source": s, "target": t})

        snap = TimelineSnapshot(
            nodes=nodes,
            links=kept,
            node_ids=node_ids,
            orphan_links=orphan,
            kept_links=len(kept),
        )
        self._full = snap
        self._last_mtime = mtime
        self.loaded = True
        return snap

    @property
    def full(self) -> TimelineSnapshot:
        return self.load_full()

    @property
    def time_restriction(self) -> float:
        """Largest ``end`` bound declared by any node, -1 when none is."""
        latest = -1.0
        for n in self.full.nodes:
            end = n.get("end")
            if end is None:
                continue
            latest = max(latest, _bound(end, -1.0))
        return latest

    @property
    def previous(self) -> TimelineSnapshot:
        return self._previous

    def window(self, time: float) -> TimelineSnapshot:
        full = self.load_full()
        kept_nodes = [dict(n) for n in full.nodes if in_window(n, time)]
        kept_ids = {n["id"] for n in kept_nodes}

        kept_links: List[Dict[str, Any]] = []
        orphan = 0
        for e in full.links:
            if not in_window(e, time):
                continue
            if e["source"] in kept_ids and e["target"] in kept_ids:
                kept_links.append(dict(e))
            else:
                orphan += 1

        return TimelineSnapshot(
            nodes=kept_nodes,
            links=kept_links,
            node_ids=kept_ids,
            orphan_links=orphan,
            kept_links=len(kept_links),
            time=time,
        )

    def update_positions(self, positions: Mapping[str, Mapping[str, float]]) -> None:
        for nid, pos in positions.items():
            self._positions[str(nid)] = {"x": float(pos["x"]), "y": float(pos["y"])}

    def _place(self, nodes: List[Dict[str, Any]]) -> None:
        for node in nodes:
            pos = self._positions.get(node["id"])
            if pos is not None:
                node["x"] = pos["x"]
                node["y"] = pos["y"]

    def step(self, time: float) -> MobilityFrame:
        snap = self.window(time)
        self._place(snap.nodes)
        previous = self._previous
        result = mobility_update(
            previous.nodes,
            previous.links,
            snap.nodes,
            snap.links,
            identity=field_identity("id"),
            config=self.config,
        )
        self._previous = snap
        LOG.info(
            "timeline-step",
            extra={"time": time, "nodes": len(snap.nodes), "links": len(snap.links), "initial_run": result.is_initial_run},
        )
        return MobilityFrame(time=time, snapshot=snap, result=result)

    def reset(self) -> None:
        self._previous = EMPTY_SNAPSHOT
