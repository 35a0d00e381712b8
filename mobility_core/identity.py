from __future__ import annotations

from typing import Any, Callable, Hashable, Mapping

from mobility_core.errors import IdentityError

IdentityExtractor = Callable[[Mapping[str, Any]], Hashable]


def field_identity(key: str) -> IdentityExtractor:
    def extract(node: Mapping[str, Any]) -> Hashable:
        try:
            value = node[key]
        except (KeyError, TypeError):
            raise IdentityError(f"{key} is not provided and node.{key} is undefined", node) from None
        if value is None:
            raise IdentityError(f"{key} is not provided and node.{key} is undefined", node)
        return value

    extract.__name__ = f"field_identity_{key}"
    return extract


default_identity: IdentityExtractor = field_identity("id")


def endpoint_identity(endpoint: Any, identity: IdentityExtractor = default_identity) -> Hashable:
    # Edge endpoints arrive either as bare ids or as the node records themselves.
    if isinstance(endpoint, Mapping):
        return identity(endpoint)
    return endpoint


def link_identity(link: Mapping[str, Any]) -> Hashable:
    value = link.get("id") if isinstance(link, Mapping) else None
    if value is None:
        raise IdentityError("link.id is undefined", link)
    return value
