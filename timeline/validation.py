from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from jsonschema import ValidationError

LOG = logging.getLogger(__name__)


def _quarantine_path(quarantine_dir: Path, label: str) -> Path:
    ts = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S%fZ")
    return Path(quarantine_dir) / f"{label}_{ts}.json"


def validate_records(
    records: Iterable[Dict[str, Any]],
    validator,
    label: str,
    quarantine_dir: Optional[Path] = None,
) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    valid: List[Dict[str, Any]] = []
    invalid: List[Dict[str, Any]] = []
    for record in records:
        try:
            validator.validate(record)
            valid.append(record)
        except ValidationError as exc:
            invalid.append({"record": record, "error": exc.message})
    if invalid:
        LOG.warning("invalid-graph-records", extra={"label": label, "count": len(invalid)})
        if quarantine_dir is not None:
            path = _quarantine_path(quarantine_dir, label)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(invalid, indent=2, default=str), encoding="utf-8")
            LOG.info("quarantined-graph-records", extra={"label": label, "path": str(path)})
    return valid, invalid
