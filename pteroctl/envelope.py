"""
Generic response envelopes.

The panel wraps every entity as::

    {"object": "server", "attributes": {..., "relationships": {...}}}

where each relationship is either a single wrapped entity or a list::

    "user":        {"object": "user", "attributes": {...}}
    "allocations": {"object": "list", "data": [{"object": ..., "attributes": ...}]}
    "location":    {"object": "null_resource", "attributes": null}

This module turns that JSON into an explicit two-level structure: flat
attributes plus a map of :class:`Relation` values, each ABSENT, SINGLE or
MANY. Anything that does not fit raises :class:`ResponseShapeError`.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from .exceptions import ResponseShapeError

RELATIONSHIPS_KEY = "relationships"


class RelationKind(str, Enum):
    ABSENT = "absent"
    SINGLE = "single"
    MANY = "many"


@dataclass(frozen=True)
class Relation:
    """A relationship slot: absent, one envelope, or an ordered list of them."""
    kind: RelationKind
    items: Tuple["Envelope", ...] = ()

    @classmethod
    def single(cls, envelope: "Envelope") -> "Relation":
        return cls(RelationKind.SINGLE, (envelope,))

    @classmethod
    def many(cls, envelopes: Tuple["Envelope", ...]) -> "Relation":
        return cls(RelationKind.MANY, tuple(envelopes))

    @property
    def is_absent(self) -> bool:
        return self.kind is RelationKind.ABSENT

    @property
    def envelope(self) -> Optional["Envelope"]:
        """The related envelope of a SINGLE relation, otherwise None."""
        if self.kind is RelationKind.SINGLE:
            return self.items[0]
        return None


ABSENT = Relation(RelationKind.ABSENT)


@dataclass(frozen=True)
class Envelope:
    """One decoded entity: its flat attributes and named relationships."""
    object: str
    attributes: Dict[str, Any] = field(default_factory=dict)
    relationships: Dict[str, Relation] = field(default_factory=dict)

    def relation(self, name: str) -> Relation:
        """Get a relationship by name, ABSENT when it was not included."""
        return self.relationships.get(name, ABSENT)


def decode_json(body: Union[bytes, str]) -> Any:
    """
    Parse a raw response body.

    Raises:
        ResponseShapeError: If the body is not valid JSON
    """
    try:
        return json.loads(body)
    except ValueError as e:
        raise ResponseShapeError("Response is not valid JSON", details=str(e))


def parse_relation(name: str, raw: Any) -> Relation:
    """
    Parse one relationship value.

    Raises:
        ResponseShapeError: If the value is neither a single envelope, a
            ``data`` list, nor a null resource
    """
    if raw is None:
        return ABSENT
    if not isinstance(raw, Mapping):
        raise ResponseShapeError(
            f"Relationship '{name}' must be an object, got {type(raw).__name__}"
        )

    if "data" in raw:
        data = raw["data"]
        if not isinstance(data, list):
            raise ResponseShapeError(f"Relationship '{name}' has a non-list 'data' member")
        return Relation.many(tuple(parse_envelope(item) for item in data))

    if "attributes" in raw:
        if raw["attributes"] is None:
            return ABSENT
        return Relation.single(parse_envelope(raw))

    raise ResponseShapeError(f"Relationship '{name}' has neither 'data' nor 'attributes'")


def parse_envelope(raw: Any) -> Envelope:
    """
    Parse a wrapped entity into an :class:`Envelope`.

    Relationships are read from ``attributes.relationships`` and from a
    top-level ``relationships`` member; the former wins on name clashes.

    Raises:
        ResponseShapeError: On any structural mismatch
    """
    if not isinstance(raw, Mapping):
        raise ResponseShapeError(f"Expected an object envelope, got {type(raw).__name__}")

    attributes = raw.get("attributes")
    if not isinstance(attributes, Mapping):
        raise ResponseShapeError("Envelope is missing its 'attributes' object")

    attributes = dict(attributes)
    raw_relationships: Dict[str, Any] = {}
    for source in (raw.get(RELATIONSHIPS_KEY), attributes.pop(RELATIONSHIPS_KEY, None)):
        if source is None:
            continue
        if not isinstance(source, Mapping):
            raise ResponseShapeError("Envelope 'relationships' must be an object")
        raw_relationships.update(source)

    relationships = {
        name: parse_relation(name, value)
        for name, value in raw_relationships.items()
    }

    return Envelope(
        object=str(raw.get("object") or ""),
        attributes=attributes,
        relationships=relationships,
    )
