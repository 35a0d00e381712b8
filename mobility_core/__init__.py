from .config import DEFAULT_CONFIG, MobilityConfig, load_config
from .errors import ConfigError, GraphDataError, IdentityError, MobilityError
from .identity import IdentityExtractor, default_identity, endpoint_identity, field_identity, link_identity
from .mobility_math import linear_rescale, safe_reciprocal

__all__ = [
    "DEFAULT_CONFIG",
    "MobilityConfig",
    "load_config",
    "ConfigError",
    "GraphDataError",
    "IdentityError",
    "MobilityError",
    "IdentityExtractor",
    "default_identity",
    "endpoint_identity",
    "field_identity",
    "link_identity",
    "linear_rescale",
    "safe_reciprocal",
]
