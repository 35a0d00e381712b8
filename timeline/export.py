from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List

from timeline.state import MobilityFrame


def mobility_frames(frames: Iterable[MobilityFrame]) -> List[Dict[str, Any]]:
    payload: List[Dict[str, Any]] = []
    for frame in frames:
        outcome = frame.result.outcome
        payload.append(
            {
                "time": frame.time,
                "meta": frame.snapshot.meta,
                "initial_run": frame.result.is_initial_run,
                "state": outcome.state if outcome else None,
                "iterations": outcome.iterations if outcome else 0,
                "nodes": [
                    {"id": nid, **rec.to_dict()}
                    for nid, rec in frame.result.records.items()
                ],
            }
        )
    return payload


def write_mobility(path: Path, frames: Iterable[MobilityFrame]) -> None:
    payload = mobility_frames(frames)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
