from __future__ import annotations

from typing import Any


class MobilityError(RuntimeError):
    """Base error for the mobility engine."""


class IdentityError(MobilityError):
    """A node or edge record has no usable identity."""

    def __init__(self, message: str, record: Any = None) -> None:
        super().__init__(message)
        self.record = record


class ConfigError(MobilityError):
    """Invalid mobility configuration."""


class GraphDataError(MobilityError):
    """Graph file is unreadable or not shaped like ``{"nodes": [...], "links": [...]}``."""
