"""
Input normalization for service operations.

Services accept identifiers and attribute sets in many shapes: a scalar, an
entity, a list or tuple (possibly nested), a set, a generator, a SQLAlchemy
result, a mapping or a pydantic model. The helpers here reduce those shapes
to the two forms the query layer works with:

- a flat, ordered, duplicate-free list of identifiers (``normalize``)
- a plain ``dict`` of attributes (``to_attributes``)

Nothing in this module touches the database.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from pydantic import BaseModel
from sqlalchemy import inspect as sa_inspect

from entity_service.services.crud.references import is_entity
from entity_service.shared.config.logging import get_logger
from entity_service.shared.utils.exceptions import ValidationError

logger = get_logger(__name__)


def _is_leaf(value: Any) -> bool:
    if isinstance(value, (str, bytes, bytearray, BaseModel)):
        return True
    if is_entity(value):
        return True
    return not isinstance(value, Iterable)


def flatten(value: Any) -> list[Any]:
    """
    Recursively flatten ``value`` into a list of leaves.

    Mappings contribute their values. Strings, entities and pydantic models
    are leaves.

    >>> flatten([1, [2, (3, [4])], {"a": 5}])
    [1, 2, 3, 4, 5]
    """
    result: list[Any] = []
    stack: list[Any] = [value]

    # Explicit stack in reverse order keeps first-seen ordering without recursion
    while stack:
        item = stack.pop()
        if _is_leaf(item):
            result.append(item)
            continue
        if isinstance(item, Mapping):
            children = list(item.values())
        else:
            children = list(item)
        stack.extend(reversed(children))

    return result


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


def unique(values: Iterable[Any]) -> list[Any]:
    """Deduplicate preserving first occurrence. ``1``, ``"1"`` and ``True`` stay distinct."""
    seen: set[Any] = set()
    unhashable: list[Any] = []
    result: list[Any] = []

    for value in values:
        try:
            key = (type(value), value)
            if key in seen:
                continue
            seen.add(key)
        except TypeError:
            if value in unhashable:
                continue
            unhashable.append(value)
        result.append(value)

    return result


def normalize(value: Any, resolve: Callable[[Any], Any] | None = None) -> list[Any]:
    """
    Build a normalized identifier batch.

    Args:
        value: Any nesting of scalars, entities and iterables.
        resolve: Optional substitution applied to every leaf (for example
            entity -> primary key). It may return a scalar or an iterable,
            which is flattened again.

    Returns:
        Flat list without ``None``, empty strings or duplicates, in
        first-seen order. An empty list means the caller can skip the query.
    """
    leaves = flatten(value)
    if resolve is not None:
        leaves = flatten([resolve(leaf) for leaf in leaves])
    return unique(leaf for leaf in leaves if not _is_blank(leaf))


def entity_attributes(entity: Any) -> dict[str, Any]:
    """Column attributes already loaded on ``entity``. Expired attributes are skipped."""
    state = sa_inspect(entity)
    loaded = state.dict
    return {
        attr.key: loaded[attr.key]
        for attr in state.mapper.column_attrs
        if attr.key in loaded
    }


def to_attributes(value: Any, *, strict: bool = False) -> dict[str, Any]:
    """
    Coerce an attribute source to a plain dict.

    Accepted sources, in order:
        None -> {}
        Mapping -> dict(value)
        entity -> its loaded column attributes
        pydantic model -> fields explicitly set on it
        iterable of (key, value) pairs -> dict

    Anything else degrades to ``{}``, or raises ``ValidationError`` when
    ``strict`` is set.
    """
    if value is None:
        return {}
    if isinstance(value, Mapping):
        return dict(value)
    if is_entity(value):
        return entity_attributes(value)
    if isinstance(value, BaseModel):
        return value.model_dump(exclude_unset=True)
    if isinstance(value, Iterable) and not isinstance(value, (str, bytes, bytearray)):
        try:
            return dict(value)
        except (TypeError, ValueError):
            pass

    if strict:
        raise ValidationError(
            f"Cannot use {type(value).__name__} as an attribute set",
            value_type=type(value).__name__,
        )
    logger.debug("Ignoring attribute source", value_type=type(value).__name__)
    return {}


def resolve_value(value: Any) -> Any:
    """Evaluate zero-argument callables, return anything else unchanged."""
    if callable(value) and not isinstance(value, type) and not is_entity(value):
        return value()
    return value
