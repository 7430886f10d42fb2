"""
Query composition by primary key, unique columns and column predicates.

An identifier handed to a service may be a primary key or the value of any
unique column (an email, a slug, ...). Lookups therefore match

    pk IN (values) OR unique_1 IN (values) OR unique_2 IN (values) ...

in a single statement, and exclusions use the complement

    pk NOT IN (values) AND (unique_1 IS NULL OR unique_1 NOT IN (values)) ...

An empty value batch matches nothing and excludes nothing.
"""

from __future__ import annotations

import operator as op
import uuid
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from sqlalchemy import and_, false, inspect as sa_inspect, or_, true, UniqueConstraint
from sqlalchemy.exc import IntegrityError
from sqlalchemy.sql.elements import ColumnElement

from entity_service.services.crud.normalize import normalize, unique
from entity_service.services.crud.references import attribute_of, is_entity
from entity_service.shared.utils.exceptions import ConfigurationError, ValidationError


class _Missing:
    def __repr__(self) -> str:
        return "MISSING"


# Distinguishes where("col", None) from where("col")
MISSING: Any = _Missing()

# SQLSTATE for unique_violation
UNIQUE_VIOLATION_SQLSTATE = "23505"


OPERATORS: dict[str, Callable[[Any, Any], ColumnElement[bool]]] = {
    "=": op.eq,
    "==": op.eq,
    "!=": op.ne,
    "<>": op.ne,
    "<": op.lt,
    "<=": op.le,
    ">": op.gt,
    ">=": op.ge,
    "like": lambda column, value: column.like(value),
    "not like": lambda column, value: column.not_like(value),
    "ilike": lambda column, value: column.ilike(value),
    "not ilike": lambda column, value: column.not_ilike(value),
    "in": lambda column, value: column.in_(normalize(value)),
    "not in": lambda column, value: column.not_in(normalize(value)),
}


# =============================================================================
# Model introspection
# =============================================================================


def primary_key_name(model: type) -> str:
    """
    Attribute name of the model's primary key.

    Raises:
        ConfigurationError: If the model has a composite primary key.
    """
    mapper = sa_inspect(model)
    if len(mapper.primary_key) != 1:
        raise ConfigurationError(
            f"{model.__name__} must have a single-column primary key",
            model=model.__name__,
        )
    return mapper.get_property_by_column(mapper.primary_key[0]).key


def declared_unique_keys(model: type) -> tuple[str, ...]:
    """
    Unique, non-primary columns of ``model`` in declaration order.

    An explicit ``__unique_keys__`` attribute (sequence or callable) or a
    ``unique_keys()`` classmethod wins over table introspection.
    """
    explicit = getattr(model, "__unique_keys__", None)
    if explicit is None:
        explicit = getattr(model, "unique_keys", None)
        if explicit is not None and not callable(explicit):
            explicit = None
    if explicit is not None:
        keys = explicit() if callable(explicit) else explicit
        return tuple(keys)

    mapper = sa_inspect(model)
    table = mapper.local_table
    primary = set(table.primary_key.columns)

    unique_columns = {column for column in table.columns if column.unique}
    for constraint in table.constraints:
        if isinstance(constraint, UniqueConstraint) and len(constraint.columns) == 1:
            unique_columns.update(constraint.columns)
    for index in table.indexes:
        if index.unique and len(index.columns) == 1:
            unique_columns.update(index.columns)

    return tuple(
        mapper.get_property_by_column(column).key
        for column in table.columns
        if column in unique_columns and column not in primary
    )


def is_unique_violation(error: IntegrityError) -> bool:
    """
    True when ``error`` was raised by a unique or primary-key constraint.

    Drivers that expose a SQLSTATE (psycopg, asyncpg) are checked by code;
    SQLite and MySQL only report the violation in the message.
    """
    orig = error.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code is not None:
        return code == UNIQUE_VIOLATION_SQLSTATE

    message = str(orig).lower()
    return "unique constraint" in message or "duplicate entry" in message


def identity_columns(model: type, unique_keys: Sequence[str]) -> list[str]:
    """Primary key followed by the unique columns, without repeats."""
    pk = primary_key_name(model)
    return [pk, *(key for key in unique_keys if key != pk)]


def _column(model: type, key: str):
    mapper = sa_inspect(model)
    if key not in mapper.columns:
        raise ValidationError(
            f"Unknown column '{key}' on {model.__name__}",
            model=model.__name__,
            field=key,
        )
    return mapper.columns[key]


def _python_type(column) -> type | None:
    try:
        return column.type.python_type
    except NotImplementedError:
        return None


def values_for_column(column, values: Iterable[Any]) -> list[Any]:
    """
    Keep the values that can be compared with ``column``.

    Integer columns take ints and digit-only strings, string columns take
    strings, UUID columns take UUIDs and parseable strings. Other column
    types take every value.
    """
    python_type = _python_type(column)
    if python_type is None:
        return list(values)

    result: list[Any] = []
    for value in values:
        if isinstance(value, bool):
            if python_type is bool:
                result.append(value)
            continue
        if python_type is bool:
            continue
        if issubclass(python_type, int):
            if isinstance(value, int):
                result.append(value)
            elif isinstance(value, str) and value.strip().lstrip("-").isdigit():
                try:
                    result.append(int(value))
                except ValueError:
                    continue
        elif issubclass(python_type, str):
            if isinstance(value, str):
                result.append(value)
            elif isinstance(value, uuid.UUID):
                result.append(str(value))
        elif issubclass(python_type, uuid.UUID):
            if isinstance(value, uuid.UUID):
                result.append(value)
            elif isinstance(value, str):
                try:
                    result.append(uuid.UUID(value))
                except ValueError:
                    continue
        else:
            result.append(value)

    return unique(result)


# =============================================================================
# Identity clauses
# =============================================================================


def build_match_clause(
    model: type, values: Sequence[Any], unique_keys: Sequence[str]
) -> ColumnElement[bool]:
    """``pk IN values OR unique_col IN values ...``; ``false()`` when nothing can match."""
    clauses = []
    for key in identity_columns(model, unique_keys):
        column_values = values_for_column(_column(model, key), values)
        if column_values:
            clauses.append(getattr(model, key).in_(column_values))

    if not clauses:
        return false()
    return or_(*clauses)


def build_exclusion_clause(
    model: type, values: Sequence[Any], unique_keys: Sequence[str]
) -> ColumnElement[bool]:
    """Complement of ``build_match_clause``; ``true()`` for an empty batch."""
    clauses = []
    for key in identity_columns(model, unique_keys):
        column = _column(model, key)
        column_values = values_for_column(column, values)
        if not column_values:
            continue
        attribute = getattr(model, key)
        clause = attribute.not_in(column_values)
        if column.nullable:
            clause = or_(attribute.is_(None), clause)
        clauses.append(clause)

    if not clauses:
        return true()
    return and_(*clauses)


def build_attribute_clause(
    model: type, attributes: Mapping[str, Any], unique_keys: Sequence[str]
) -> ColumnElement[bool] | None:
    """
    ``pk == attributes[pk] OR unique_col == attributes[unique_col] ...``

    Only identity columns present in ``attributes`` take part. Returns None
    when the attribute set carries no identity value at all.
    """
    clauses = []
    for key in identity_columns(model, unique_keys):
        value = attributes.get(key)
        if value is None or value == "":
            continue
        clauses.append(getattr(model, key) == value)

    if not clauses:
        return None
    return or_(*clauses)


# =============================================================================
# Column predicates
# =============================================================================


def _compare(model: type, key: str, operator: str, value: Any) -> ColumnElement[bool]:
    if not isinstance(key, str):
        raise ValidationError(
            f"Column name must be a string, got {type(key).__name__}",
            model=model.__name__,
        )
    _column(model, key)
    attribute = getattr(model, key)

    if is_entity(value):
        value = attribute_of(value, key)

    operator = operator.lower().strip()
    if operator not in OPERATORS:
        raise ValidationError(
            f"Unknown operator '{operator}'",
            model=model.__name__,
            field=key,
        )

    if value is None:
        if operator in ("=", "=="):
            return attribute.is_(None)
        if operator in ("!=", "<>"):
            return attribute.is_not(None)

    return OPERATORS[operator](attribute, value)


def _from_sequence(model: type, item: Sequence[Any]) -> ColumnElement[bool]:
    if len(item) == 2:
        return _compare(model, item[0], "=", item[1])
    if len(item) == 3:
        return _compare(model, item[0], item[1], item[2])
    raise ValidationError(
        f"Condition must be (column, value) or (column, operator, value), got {len(item)} items",
        model=model.__name__,
    )


def _as_clauses(model: type, result: Any) -> list[ColumnElement[bool]]:
    if isinstance(result, ColumnElement):
        return [result]
    if isinstance(result, Iterable) and not isinstance(result, (str, bytes)):
        clauses = []
        for item in result:
            clauses.extend(_as_clauses(model, item))
        return clauses
    raise ValidationError(
        f"Condition callback must return a SQL expression, got {type(result).__name__}",
        model=model.__name__,
    )


def build_predicates(
    model: type,
    column: Any,
    operator: Any = MISSING,
    value: Any = MISSING,
) -> list[ColumnElement[bool]]:
    """
    Translate the arguments of ``where``-style calls into SQL clauses.

    Shapes, in order of precedence:
        SQL expression              -> used as-is
        mapping {column: value}     -> one equality per pair
        callable(model)             -> clause or iterable of clauses it returns
        list of condition tuples    -> (column, value) or (column, operator, value)
        column                      -> column IS NULL
        column, value               -> equality (None -> IS NULL)
        column, operator, value     -> comparison with a supported operator
    """
    if isinstance(column, ColumnElement):
        return [column]

    if isinstance(column, Mapping):
        return [_compare(model, key, "=", item) for key, item in column.items()]

    if callable(column) and not isinstance(column, str):
        return _as_clauses(model, column(model))

    if isinstance(column, (list, tuple)):
        clauses: list[ColumnElement[bool]] = []
        for item in column:
            if isinstance(item, ColumnElement):
                clauses.append(item)
            elif isinstance(item, Mapping):
                clauses.extend(build_predicates(model, item))
            elif isinstance(item, (list, tuple)):
                clauses.append(_from_sequence(model, item))
            else:
                raise ValidationError(
                    f"Unsupported condition {item!r}",
                    model=model.__name__,
                )
        return clauses

    if operator is MISSING:
        return [_compare(model, column, "=", None)]

    if value is MISSING:
        # Two-argument form: the second argument is always the value
        return [_compare(model, column, "=", operator)]

    if not isinstance(operator, str):
        raise ValidationError(
            f"Operator must be a string, got {type(operator).__name__}",
            model=model.__name__,
            field=column,
        )
    return [_compare(model, column, operator, value)]
