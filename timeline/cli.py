from __future__ import annotations

import argparse
import datetime as dt
import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from mobility_core.config import load_config
from mobility_core.errors import MobilityError
from timeline.export import write_mobility
from timeline.state import MobilityFrame, TimelineState, load_positions

LOG = logging.getLogger(__name__)

_RESERVED = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "message",
}


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        created = dt.datetime.fromtimestamp(record.created, tz=dt.timezone.utc)
        payload = {
            "time": created.replace(tzinfo=None).isoformat(timespec="seconds") + "Z",
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        for key, value in record.__dict__.items():
            if key in _RESERVED:
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(log_dir: Optional[Path] = None, level: int = logging.INFO) -> None:
    formatter = JsonFormatter()
    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [console_handler]
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_dir / "mobility.log", encoding="utf-8")
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)


def run_timeline(state: TimelineState, start: int, end: int) -> List[MobilityFrame]:
    if end < start:
        LOG.warning("empty-time-range", extra={"start": start, "end": end})
        return []
    return [state.step(t) for t in range(start, end + 1)]


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Compute per-node layout mobility across a time-indexed graph.")
    parser.add_argument("--graph", required=True, help="Path to graph JSON with nodes and links")
    parser.add_argument("--key", default="id", help="Node field used as identity")
    parser.add_argument("--config", default=None, help="Path to YAML mobility config")
    parser.add_argument("--positions", default=None, help="Path to cached node positions JSON")
    parser.add_argument("--start", type=int, default=1, help="First time index")
    parser.add_argument("--end", type=int, default=None, help="Last time index (default: latest node end)")
    parser.add_argument("--output", default="mobility.json", help="Where to write mobility frames")
    parser.add_argument("--log-dir", default=None, help="Directory for mobility.log")
    parser.add_argument("--verbose", action="store_true", help="Enable debug event logging")
    args = parser.parse_args(argv)

    setup_logging(Path(args.log_dir) if args.log_dir else None, logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = load_config(Path(args.config) if args.config else None)
        positions = load_positions(Path(args.positions)) if args.positions else None
        state = TimelineState(Path(args.graph), key=args.key, positions=positions, config=config)
        end = args.end if args.end is not None else max(args.start, int(state.time_restriction))
        frames = run_timeline(state, args.start, end)
    except MobilityError as exc:
        LOG.error("mobility-run-failed", extra={"error": str(exc)})
        return 1

    output = Path(args.output)
    write_mobility(output, frames)
    LOG.info("mobility-written", extra={"path": str(output), "frames": len(frames)})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
