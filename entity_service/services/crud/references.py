"""
Entity references.

Callers may pass an entity wherever an identifier is expected. These helpers
replace such references with the values that identify them: the primary
key, and optionally the values of the model's unique columns.

Values are read from the instance's in-memory state only. An expired
attribute is never refreshed from the database; a persistent instance
falls back to its identity key for the primary key, anything else that is
not loaded resolves to None and is dropped by the normalizer.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import InstanceState

from entity_service.shared.utils.exceptions import ValidationError


def is_entity(value: Any) -> bool:
    """True for instances of SQLAlchemy mapped classes."""
    if value is None or isinstance(value, (str, int, float, bytes, type)):
        return False
    return isinstance(sa_inspect(value, raiseerr=False), InstanceState)


def primary_key_of(entity: Any) -> Any:
    """
    Primary key value of ``entity`` without emitting SQL.

    Returns a scalar for single-column keys, a tuple for composite keys and
    None for transient instances whose key has not been assigned.
    """
    state = sa_inspect(entity)
    mapper = state.mapper
    loaded = state.dict

    values = []
    for column in mapper.primary_key:
        key = mapper.get_property_by_column(column).key
        values.append(loaded.get(key))

    if any(v is None for v in values) and state.identity is not None:
        values = list(state.identity)

    if len(values) == 1:
        return values[0]
    if all(v is None for v in values):
        return None
    return tuple(values)


def attribute_of(entity: Any, key: str) -> Any:
    """Loaded value of attribute ``key``, or None when it is not loaded or unknown."""
    return sa_inspect(entity).dict.get(key)


def _check_reference(entity: Any, model: type | None, strict: bool) -> None:
    if not strict:
        return
    if model is not None and not isinstance(entity, model):
        raise ValidationError(
            f"Expected a {model.__name__} reference, got {type(entity).__name__}",
            expected=model.__name__,
            received=type(entity).__name__,
        )


def resolve_id(item: Any, model: type | None = None, strict: bool = False) -> Any:
    """Replace an entity with its primary key; leave scalars unchanged."""
    if not is_entity(item):
        return item

    _check_reference(item, model, strict)
    key = primary_key_of(item)
    if key is None and strict:
        raise ValidationError(
            f"{type(item).__name__} reference has no primary key",
            model=type(item).__name__,
        )
    return key


def resolve_unique(
    item: Any,
    unique_keys: Sequence[str],
    model: type | None = None,
    strict: bool = False,
) -> Any:
    """
    Expand an entity into (primary key, *unique values) in declaration order.

    Scalars pass through unchanged. Missing unique attributes yield None.
    """
    if not is_entity(item):
        return item

    _check_reference(item, model, strict)
    return (primary_key_of(item), *(attribute_of(item, key) for key in unique_keys))


def resolve_ids(
    batch: Iterable[Any], model: type | None = None, strict: bool = False
) -> list[Any]:
    """Apply ``resolve_id`` to every item of a flat batch."""
    return [resolve_id(item, model, strict) for item in batch]


def resolve_unique_keys(
    batch: Iterable[Any],
    unique_keys: Sequence[str],
    model: type | None = None,
    strict: bool = False,
) -> list[Any]:
    """Apply ``resolve_unique`` to every item of a flat batch. Items may become tuples."""
    return [resolve_unique(item, unique_keys, model, strict) for item in batch]
