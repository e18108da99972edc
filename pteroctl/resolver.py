"""
Relationship resolution.

Flattens a decoded :class:`~pteroctl.envelope.Envelope` into a domain
entity whose relationship fields hold ordinary references:

- plural relation present: list of related entities in source order
- plural relation absent: empty list
- singular relation present: the related entity
- singular relation absent: None

Resolution is one level deep. Related entities are built from their own
attributes only; their relationship fields keep their defaults even when
the nested envelope carries relationships. Resolve those with a further
call if needed.
"""

from dataclasses import dataclass
from typing import Any, Iterator, List, Mapping, Optional, Type, TypeVar

from .envelope import Envelope, RelationKind, parse_envelope
from .exceptions import ResponseShapeError
from .models import Entity


E = TypeVar("E", bound=Entity)


@dataclass(frozen=True)
class Pagination:
    """Pagination metadata of a list response."""
    total: int = 0
    count: int = 0
    per_page: int = 0
    current_page: int = 1
    total_pages: int = 1

    @property
    def has_next(self) -> bool:
        return self.current_page < self.total_pages


def resolve(envelope: Envelope, entity_cls: Type[E]) -> E:
    """
    Build an entity from an envelope and fill its declared relationships.

    Relationships carried by the envelope but not declared on the entity
    are ignored.

    Args:
        envelope: Decoded envelope
        entity_cls: Entity class to build

    Returns:
        The resolved entity

    Raises:
        ResponseShapeError: If a relation's kind does not match its
            declaration, or attributes cannot be decoded
    """
    entity = entity_cls.from_attributes(envelope.attributes)

    for field_name, spec in entity_cls.relations():
        rel = envelope.relation(spec.name)
        target = spec.entity_cls

        if spec.many:
            if rel.kind is RelationKind.SINGLE:
                raise ResponseShapeError(
                    f"{entity_cls.__name__}.{field_name}: expected a list relation "
                    f"'{spec.name}', got a single object"
                )
            value: Any = [target.from_attributes(item.attributes) for item in rel.items]
        else:
            if rel.kind is RelationKind.MANY:
                raise ResponseShapeError(
                    f"{entity_cls.__name__}.{field_name}: expected a single relation "
                    f"'{spec.name}', got a list"
                )
            related = rel.envelope
            value = target.from_attributes(related.attributes) if related is not None else None

        setattr(entity, field_name, value)

    return entity


def resolve_item(payload: Any, entity_cls: Type[E]) -> E:
    """Resolve a single-entity response (``{"object": ..., "attributes": ...}``)."""
    return resolve(parse_envelope(payload), entity_cls)


def _list_data(payload: Any) -> List[Any]:
    if not isinstance(payload, Mapping):
        raise ResponseShapeError(f"Expected a list response object, got {type(payload).__name__}")
    data = payload.get("data")
    if not isinstance(data, list):
        raise ResponseShapeError("List response is missing its 'data' array")
    return data


def resolve_list(payload: Any, entity_cls: Type[E]) -> List[E]:
    """Resolve a list response (``{"object": "list", "data": [...]}``), preserving order."""
    return [resolve(parse_envelope(item), entity_cls) for item in _list_data(payload)]


def iter_resolved(payload: Any, entity_cls: Type[E]) -> Iterator[E]:
    """Lazily resolve the items of a list response."""
    for item in _list_data(payload):
        yield resolve(parse_envelope(item), entity_cls)


def parse_pagination(payload: Any) -> Optional[Pagination]:
    """
    Read ``meta.pagination`` from a list response.

    Returns:
        Pagination metadata, or None when the response carries none
    """
    if not isinstance(payload, Mapping):
        return None
    meta = payload.get("meta")
    if not isinstance(meta, Mapping):
        return None
    raw = meta.get("pagination")
    if not isinstance(raw, Mapping):
        return None

    try:
        return Pagination(
            total=int(raw.get("total", 0)),
            count=int(raw.get("count", 0)),
            per_page=int(raw.get("per_page", 0)),
            current_page=int(raw.get("current_page", 1)),
            total_pages=int(raw.get("total_pages", 1)),
        )
    except (TypeError, ValueError) as e:
        raise ResponseShapeError("Invalid pagination metadata", details=str(e))
