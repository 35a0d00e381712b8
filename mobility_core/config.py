from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from mobility_core.errors import ConfigError

DEVIATION_MODES = ("last", "mean")

ENV_OVERRIDES = {
    "MOBILITY_BASE_SPACING": ("base_spacing", float),
    "MOBILITY_CONVERGENCE_THRESHOLD": ("convergence_threshold", float),
    "MOBILITY_MAX_ITERATIONS": ("max_iterations", int),
    "MOBILITY_DEVIATION_MODE": ("deviation_mode", str),
}


@dataclass(frozen=True)
class MobilityConfig:
    base_spacing: float = 50.0
    damping: float = 0.8
    damping_decay: float = 0.8
    convergence_threshold: float = 0.1
    max_iterations: int = 1000
    mobility_floor: float = 0.2
    mobility_ceiling: float = 1.0
    degenerate_mobility: float = 0.6
    deviation_mode: str = "last"

    def validate(self) -> "MobilityConfig":
        if self.base_spacing <= 0:
            raise ConfigError(f"base_spacing must be positive, got {self.base_spacing}")
        for name in ("damping", "damping_decay"):
            value = getattr(self, name)
            if not 0.0 < value < 1.0:
                raise ConfigError(f"{name} must lie in (0, 1), got {value}")
        if self.convergence_threshold < 0:
            raise ConfigError(f"convergence_threshold must be >= 0, got {self.convergence_threshold}")
        if self.max_iterations < 1:
            raise ConfigError(f"max_iterations must be >= 1, got {self.max_iterations}")
        if self.mobility_floor >= self.mobility_ceiling:
            raise ConfigError(
                f"mobility_floor ({self.mobility_floor}) must be below mobility_ceiling ({self.mobility_ceiling})"
            )
        if not self.mobility_floor <= self.degenerate_mobility <= self.mobility_ceiling:
            raise ConfigError(f"degenerate_mobility {self.degenerate_mobility} is outside the mobility range")
        if self.deviation_mode not in DEVIATION_MODES:
            raise ConfigError(f"Unknown deviation_mode: {self.deviation_mode!r}")
        return self

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "MobilityConfig":
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        defaults = cls()
        for key, value in data.items():
            if key not in known or value is None:
                continue
            kwargs[key] = _coerce(key, value, type(getattr(defaults, key)))
        return cls(**kwargs).validate()


def _coerce(key: str, value: Any, caster: type) -> Any:
    # bool is an int subclass, so check it before any numeric cast.
    if isinstance(value, bool):
        raise ConfigError(f"Invalid value for {key}: {value!r}")
    if caster is int and isinstance(value, float) and not value.is_integer():
        raise ConfigError(f"{key} must be a whole number, got {value!r}")
    try:
        return caster(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid value for {key}: {value!r}") from exc


DEFAULT_CONFIG = MobilityConfig()


def apply_env_overrides(config: MobilityConfig, environ: Optional[Mapping[str, str]] = None) -> MobilityConfig:
    env = os.environ if environ is None else environ
    changes: Dict[str, Any] = {}
    for var, (name, caster) in ENV_OVERRIDES.items():
        raw = env.get(var)
        if raw is None or raw == "":
            continue
        try:
            changes[name] = caster(raw)
        except ValueError as exc:
            raise ConfigError(f"Invalid {var}={raw!r}") from exc
    if not changes:
        return config
    return replace(config, **changes).validate()


def load_config(config_path: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> MobilityConfig:
    data: Dict[str, Any] = {}
    if config_path is not None:
        try:
            text = Path(config_path).read_text(encoding="utf-8")
        except OSError as exc:
            raise ConfigError(f"Cannot read config {config_path}: {exc}") from exc
        try:
            raw = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Failed to parse config: {exc}") from exc
        if not isinstance(raw, dict):
            raise ConfigError(f"Config root must be a mapping: {config_path}")
        section = raw.get("mobility", raw)
        if not isinstance(section, dict):
            raise ConfigError("mobility section must be a mapping")
        data = section
    config = MobilityConfig.from_mapping(data)
    return apply_env_overrides(config, environ)
