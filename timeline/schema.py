from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict

from jsonschema import Draft202012Validator

_BOUND = {"type": ["number", "null"]}
_IDENT = {"type": ["string", "number"]}
_ENDPOINT = {"anyOf": [{"type": ["string", "number"]}, {"type": "object"}]}

GRAPH_DATA_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "mobility-graph-data",
    "type": "object",
    "properties": {
        "nodes": {"type": "array", "items": {"$ref": "#/$defs/NodeRecord"}},
        "links": {"type": "array", "items": {"$ref": "#/$defs/LinkRecord"}},
    },
    "$defs": {
        "NodeRecord": {
            "type": "object",
            "properties": {
                "id": _IDENT,
                "x": {"type": ["number", "null"]},
                "y": {"type": ["number", "null"]},
                "start": _BOUND,
                "end": _BOUND,
            },
        },
        "LinkRecord": {
            "type": "object",
            "required": ["id", "source", "target"],
            "properties": {
                "id": _IDENT,
                "source": _ENDPOINT,
                "target": _ENDPOINT,
                "start": _BOUND,
                "end": _BOUND,
            },
        },
    },
}


@dataclass
class SchemaRegistry:
    schemas: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    validators: Dict[str, Draft202012Validator] = field(default_factory=dict)

    def register(self, name: str, payload: Dict[str, Any]) -> None:
        Draft202012Validator.check_schema(payload)
        self.schemas[name] = payload
        self.validators[name] = Draft202012Validator(payload)

    def validator(self, name: str) -> Draft202012Validator:
        if name not in self.validators:
            raise KeyError(f"Schema not registered: {name}")
        return self.validators[name]

    def record_validator(self, name: str, record: str) -> Draft202012Validator:
        if name not in self.schemas:
            raise KeyError(f"Schema not registered: {name}")
        schema = self.schemas[name]
        if record not in (schema.get("$defs") or {}):
            raise KeyError(f"Record type not defined in {name}: {record}")
        record_schema = {
            "$schema": schema.get("$schema"),
            "$id": schema.get("$id"),
            "$defs": schema.get("$defs"),
            "$ref": f"#/$defs/{record}",
        }
        Draft202012Validator.check_schema(record_schema)
        return Draft202012Validator(record_schema)


def load_default_registry() -> SchemaRegistry:
    registry = SchemaRegistry()
    registry.register("graph_data", GRAPH_DATA_SCHEMA)
    return registry


DEFAULT_REGISTRY = load_default_registry()
