"""
Base Service class: generic data access for one SQLAlchemy model.

A service wraps a session and a model class and exposes lookups, existence
checks, writes, factory generation and seeding with forgiving inputs:
identifiers may be scalars, entities or nested collections of either, and
attribute sets may be mappings, entities or pydantic models.

Identifiers are matched against the primary key and against the model's
unique columns (see ``unique_keys``), so ``find_or_fail`` takes ids while
``where_unique_key("a@example.com")`` also finds a user by email.

Usage:
    from entity_service.services import Service

    class UserService(Service[User]):
        model_class = User
        factory_class = UserFactory
        seeder_class = UserSeeder

    users = UserService(db)
    user = users.find(42)
    admins = users.where("role", "admin")
    users.has_all([user, "b@example.com"])
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping, Sequence
from functools import cached_property, partial
from typing import Any, Generic, TypeVar

from pydantic import BaseModel
from sqlalchemy import and_, delete, func, not_, or_, select, Select
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import ColumnElement

from entity_service.services.crud.factory import ModelFactory
from entity_service.services.crud.normalize import normalize, resolve_value, to_attributes
from entity_service.services.crud.references import (
    attribute_of,
    is_entity,
    primary_key_of,
    resolve_id,
    resolve_unique,
)
from entity_service.services.crud.soft_delete import (
    filter_active,
    filter_trashed,
    hard_delete,
    persist,
    restore_entity,
    soft_delete,
    supports_soft_delete,
)
from entity_service.services.crud.unique_keys import (
    MISSING,
    build_attribute_clause,
    build_exclusion_clause,
    build_match_clause,
    build_predicates,
    declared_unique_keys,
    identity_columns,
    is_unique_violation,
    primary_key_name,
    values_for_column,
)
from entity_service.services.seeding import SeederLike, resolve_seeder
from entity_service.shared.config.logging import get_logger, mask_value
from entity_service.shared.config.settings import get_settings
from entity_service.shared.utils.exceptions import ConfigurationError, NotFoundError, ValidationError

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")


def _pair_distinct(candidates: list[set[int]]) -> bool:
    """
    Whether every value can be given a row of its own.

    ``candidates[i]`` holds the rows value ``i`` matches. Augmenting-path
    bipartite matching; batches are small.
    """
    owner: dict[int, int] = {}

    def claim(value: int, visited: set[int]) -> bool:
        for row in candidates[value]:
            if row in visited:
                continue
            visited.add(row)
            if row not in owner or claim(owner[row], visited):
                owner[row] = value
                return True
        return False

    return all(claim(value, set()) for value in range(len(candidates)))


class Service(Generic[ModelT]):
    """
    Generic service for one model.

    Collaborators are passed to the constructor or declared on a subclass:

    - ``model_class``: the mapped model (required)
    - ``factory_class``: a ``ModelFactory`` subclass for ``factory()``/``generate()``
    - ``seeder_class``: a ``Seeder`` subclass or zero-argument callable for ``seed()``
    - ``unique_key_names``: unique columns used as alternate identifiers;
      resolved from the model when not given

    ``autocommit`` and ``strict`` default to ``Settings.autocommit`` and
    ``Settings.strict_references``.
    """

    model_class: type[ModelT] | None = None
    factory_class: type[ModelFactory] | None = None
    seeder_class: SeederLike | None = None
    unique_key_names: Sequence[str] | None = None

    def __init__(
        self,
        db: Session,
        model: type[ModelT] | None = None,
        *,
        unique_keys: Sequence[str] | None = None,
        factory: type[ModelFactory] | None = None,
        seeder: SeederLike | None = None,
        created_column: str | None = None,
        autocommit: bool | None = None,
        strict: bool | None = None,
    ):
        model = model or type(self).model_class
        if model is None:
            raise ConfigurationError(
                f"{type(self).__name__} has no model configured",
                service=type(self).__name__,
            )

        config = get_settings()

        self._db = db
        self._model = model
        self._pk = primary_key_name(model)
        self._unique_keys_override = (
            unique_keys if unique_keys is not None else type(self).unique_key_names
        )
        self._factory = factory or type(self).factory_class
        self._seeder = seeder if seeder is not None else type(self).seeder_class
        self._created_column = created_column or config.default_created_column
        self._autocommit = config.autocommit if autocommit is None else autocommit
        self._strict = config.strict_references if strict is None else strict

    # =========================================================================
    # Configuration
    # =========================================================================

    @property
    def db(self) -> Session:
        """Database session."""
        return self._db

    @property
    def model(self) -> type[ModelT]:
        """The SQLAlchemy model class."""
        return self._model

    @property
    def entity_name(self) -> str:
        return self._model.__name__

    def get_model(self) -> type[ModelT]:
        return self._model

    def get_factory(self) -> type[ModelFactory] | None:
        return self._factory

    def get_seeder(self) -> SeederLike | None:
        return self._seeder

    @cached_property
    def unique_keys(self) -> tuple[str, ...]:
        """Unique, non-primary columns usable as identifiers. Resolved once."""
        if self._unique_keys_override is not None:
            keys = tuple(self._unique_keys_override)
        else:
            keys = declared_unique_keys(self._model)
        logger.debug("Resolved unique keys", model=self.entity_name, unique_keys=keys)
        return keys

    def query(self, *, with_trashed: bool = False, only_trashed: bool = False) -> Select:
        """
        Base select for the model.

        Soft-deleted rows are excluded unless ``with_trashed`` is set;
        ``only_trashed`` selects nothing but soft-deleted rows.
        """
        query = select(self._model)
        if only_trashed:
            return filter_trashed(query, self._model)
        return filter_active(query, self._model, include_deleted=with_trashed)

    # =========================================================================
    # Internal Helpers
    # =========================================================================

    @property
    def _pk_attribute(self):
        return getattr(self._model, self._pk)

    @property
    def _pk_column(self):
        return sa_inspect(self._model).columns[self._pk]

    def _ids(self, values: Any) -> list[Any]:
        """Normalized batch with entities replaced by their primary keys."""
        return normalize(
            values, resolve=partial(resolve_id, model=self._model, strict=self._strict)
        )

    def _unique_values(self, values: Any) -> list[Any]:
        """Normalized batch with entities expanded to their primary and unique values."""
        return normalize(
            values,
            resolve=partial(
                resolve_unique,
                unique_keys=self.unique_keys,
                model=self._model,
                strict=self._strict,
            ),
        )

    def _attributes(self, value: Any) -> dict[str, Any]:
        """Coerce an attribute source and keep only attributes the model maps."""
        attributes = to_attributes(value, strict=self._strict)
        known = sa_inspect(self._model).attrs.keys()
        unknown = [key for key in attributes if key not in known]

        if unknown:
            if self._strict:
                raise ValidationError(
                    f"Unknown attributes for {self.entity_name}: {', '.join(map(str, unknown))}",
                    model=self.entity_name,
                    fields=unknown,
                )
            logger.debug("Dropping unknown attributes", model=self.entity_name, fields=unknown)

        return {key: item for key, item in attributes.items() if key in known}

    def _equalities(self, attributes: Mapping[str, Any]) -> list[ColumnElement[bool]]:
        if not attributes:
            return []
        return build_predicates(self._model, attributes)

    def _all(self, query: Select) -> list[ModelT]:
        return list(self._db.scalars(query).all())

    def _first(self, query: Select) -> ModelT | None:
        return self._db.scalars(query.limit(1)).first()

    def _exists(self, clause: ColumnElement[bool], *, with_trashed: bool = False) -> bool:
        """Single EXISTS round trip."""
        query = self.query(with_trashed=with_trashed).where(clause)
        return bool(self._db.scalar(select(query.exists())))

    def _persist(self) -> None:
        persist(self._db, self._autocommit)

    def _missing_ids(self, ids: Sequence[Any], found: Iterable[ModelT]) -> list[Any]:
        found_keys = {primary_key_of(entity) for entity in found}
        missing = []
        for identifier in ids:
            coerced = values_for_column(self._pk_column, [identifier])
            if not coerced or coerced[0] not in found_keys:
                missing.append(identifier)
        return missing

    # =========================================================================
    # Read Operations
    # =========================================================================

    def all(self) -> list[ModelT]:
        """All rows of the table."""
        return self._all(self.query())

    def random(self) -> ModelT | None:
        """A random row, or None for an empty table."""
        return self._first(self.query().order_by(func.random()))

    def _created_attribute(self):
        attribute = getattr(self._model, self._created_column, None)
        if attribute is None:
            raise ConfigurationError(
                f"{self.entity_name} has no '{self._created_column}' column",
                model=self.entity_name,
            )
        return attribute

    def latest(self) -> ModelT | None:
        """Most recently created row."""
        created = self._created_attribute()
        return self._first(self.query().order_by(created.desc(), self._pk_attribute.desc()))

    def oldest(self) -> ModelT | None:
        """Earliest created row."""
        created = self._created_attribute()
        return self._first(self.query().order_by(created.asc(), self._pk_attribute.asc()))

    def find(
        self, *ids: Any, with_trashed: bool = False, only_trashed: bool = False
    ) -> ModelT | list[ModelT] | None:
        """
        Find by primary key.

        Returns the entity when the arguments resolve to a single id, a list
        when they resolve to several, and None without querying when they
        resolve to nothing (no arguments, None, empty collections).
        """
        ids = self._ids(ids)

        if not ids:
            logger.debug("Skipping lookup without identifiers", model=self.entity_name)
            return None

        if len(ids) > 1:
            return self.find_many(ids, with_trashed=with_trashed, only_trashed=only_trashed)

        query = self.query(with_trashed=with_trashed, only_trashed=only_trashed)
        return self._first(query.where(build_match_clause(self._model, ids, ())))

    def find_many(
        self, *ids: Any, with_trashed: bool = False, only_trashed: bool = False
    ) -> list[ModelT]:
        """Find every row whose primary key is among ``ids``."""
        ids = self._ids(ids)

        if not ids:
            logger.debug("Skipping lookup without identifiers", model=self.entity_name)
            return []

        query = self.query(with_trashed=with_trashed, only_trashed=only_trashed)
        return self._all(query.where(build_match_clause(self._model, ids, ())))

    def find_or_fail(self, ids: Any, all: bool = True) -> ModelT | list[ModelT]:
        """
        Like ``find`` but raises instead of returning nothing.

        Args:
            ids: Identifier(s) in any supported shape.
            all: With several ids, require every one of them to resolve.
                When False, one match is enough.

        Raises:
            NotFoundError: With the unresolved ids in ``missing``.
        """
        ids = self._ids(ids)

        if len(ids) > 1:
            return self.find_many_or_fail(ids, all=all)

        if not ids:
            raise NotFoundError(self.entity_name)

        entity = self.find(ids[0])
        if entity is None:
            raise NotFoundError(self.entity_name, ids[0])
        return entity

    def find_many_or_fail(self, ids: Any, all: bool = True) -> list[ModelT]:
        """
        Like ``find_many`` but raises when ids do not resolve.

        With ``all`` every id must resolve (an empty batch trivially does);
        otherwise at least one row must be found.

        Raises:
            NotFoundError: With the unresolved ids in ``missing``.
        """
        ids = self._ids(ids)
        found = self.find_many(ids)

        if all:
            missing = self._missing_ids(ids, found)
            if missing:
                raise NotFoundError(self.entity_name, ids, missing=missing)
        elif not found:
            raise NotFoundError(self.entity_name, ids, missing=ids)

        return found

    def find_or_new(self, id: Any) -> ModelT:
        """Entity with the given id, or a new unsaved instance."""
        ids = self._ids(id)
        entity = self.find(ids[0]) if ids else None
        return entity if entity is not None else self._model()

    def find_or(self, id: Any, callback: Callable[[], Any]) -> Any:
        """Entity with the given id, or the result of ``callback()``."""
        ids = self._ids(id)
        entity = self.find(ids[0]) if ids else None
        return entity if entity is not None else callback()

    def find_trashed(self, id: Any) -> ModelT | None:
        """Soft-deleted entity with the given id."""
        ids = self._ids(id)
        if not ids:
            return None
        return self._first(
            self.query(only_trashed=True).where(build_match_clause(self._model, ids[:1], ()))
        )

    # =========================================================================
    # Key Lookups
    # =========================================================================

    def where_key(self, *ids: Any) -> list[ModelT]:
        """Rows whose primary key is among ``ids``."""
        return self.find_many(*ids)

    def where_key_not(self, *ids: Any) -> list[ModelT]:
        """Rows whose primary key is not among ``ids``. No ids means all rows."""
        ids = self._ids(ids)
        return self._all(self.query().where(build_exclusion_clause(self._model, ids, ())))

    def where_unique_key(self, *values: Any) -> list[ModelT]:
        """Rows matching any value by primary key or by any unique column."""
        values = self._unique_values(values)
        if not values:
            logger.debug("Skipping lookup without identifiers", model=self.entity_name)
            return []
        clause = build_match_clause(self._model, values, self.unique_keys)
        return self._all(self.query().where(clause))

    def where_unique_key_not(self, *values: Any) -> list[ModelT]:
        """Rows matching none of the values on any identity column. No values means all rows."""
        values = self._unique_values(values)
        clause = build_exclusion_clause(self._model, values, self.unique_keys)
        return self._all(self.query().where(clause))

    def first_where_unique_key(self, *values: Any) -> ModelT | None:
        values = self._unique_values(values)
        if not values:
            return None
        clause = build_match_clause(self._model, values, self.unique_keys)
        return self._first(self.query().where(clause))

    # =========================================================================
    # Column Conditions
    # =========================================================================

    def where(self, column: Any, operator: Any = MISSING, value: Any = MISSING) -> list[ModelT]:
        """
        Rows satisfying a condition.

        Examples:
            where("email", "a@example.com")
            where("age", ">=", 18)
            where({"role": "admin", "is_active": True})
            where([("age", ">", 18), ("name", "like", "A%")])
            where(lambda User: User.email.endswith("@example.com"))
        """
        clauses = build_predicates(self._model, column, operator, value)
        return self._all(self.query().where(*clauses))

    def first_where(self, column: Any, operator: Any = MISSING, value: Any = MISSING) -> ModelT | None:
        clauses = build_predicates(self._model, column, operator, value)
        return self._first(self.query().where(*clauses))

    def where_not(self, column: Any, operator: Any = MISSING, value: Any = MISSING) -> list[ModelT]:
        """
        Rows failing a condition.

        A mapping is negated pair by pair, so ``where_not({"a": 1, "b": 2})``
        returns rows where a != 1 and b != 2.
        """
        clauses = build_predicates(self._model, column, operator, value)
        return self._all(self.query().where(*(not_(clause) for clause in clauses)))

    def has_where(self, column: Any, operator: Any = MISSING, value: Any = MISSING) -> bool:
        """Whether any row satisfies the condition."""
        clauses = build_predicates(self._model, column, operator, value)
        return self._exists(and_(*clauses))

    # =========================================================================
    # Attribute Lookups
    # =========================================================================

    def first_or_new(self, attributes: Any = None, values: Any = None) -> ModelT:
        """
        First row matching ``attributes``, or an unsaved instance built from
        ``attributes`` merged with ``values``. No attributes returns the first row.
        """
        attributes = self._attributes(attributes)
        values = self._attributes(values)

        entity = self._first(self.query().where(*self._equalities(attributes)))
        if entity is not None:
            return entity
        return self.make({**attributes, **values})

    def first_or_create(self, attributes: Any = None, values: Any = None) -> ModelT:
        """First row matching ``attributes``, or a new persisted one."""
        attributes = self._attributes(attributes)
        values = self._attributes(values)

        entity = self._first(self.query().where(*self._equalities(attributes)))
        if entity is not None:
            return entity
        return self.create({**attributes, **values})

    def create_or_first(self, attributes: Any = None, values: Any = None) -> ModelT:
        """
        Insert first, read on conflict.

        The insert runs inside a SAVEPOINT. When it violates a unique
        constraint the savepoint is rolled back and the conflicting row
        (soft-deleted or not) matching ``attributes`` is returned. Any other
        constraint violation, a conflict without search ``attributes`` or a
        conflict no row matches re-raises the original error.
        """
        attributes = self._attributes(attributes)
        values = self._attributes(values)
        entity = self.make({**attributes, **values})

        try:
            with self._db.begin_nested():
                self._db.add(entity)
        except IntegrityError as exc:
            if not attributes or not is_unique_violation(exc):
                raise

            existing = self._first(
                self.query(with_trashed=True).where(*self._equalities(attributes))
            )
            if existing is None:
                raise

            logger.warning(
                "Create conflicted with an existing row, returning it instead",
                model=self.entity_name,
                identity=[mask_value(value) for value in attributes.values()],
                error=str(exc.orig),
            )
            return existing

        self._persist()
        return entity

    def update_or_create(self, attributes: Any, values: Any = None) -> ModelT:
        """
        Update the first row matching ``attributes`` with ``values``, or create one.

        Read and write are separate round trips; wrap the call in a
        transaction when concurrent writers are possible.
        """
        attributes = self._attributes(attributes)
        values = self._attributes(values)

        entity = self._first(self.query().where(*self._equalities(attributes)))
        if entity is None:
            return self.create({**attributes, **values})
        return self.update(entity, values)

    # =========================================================================
    # Existence
    # =========================================================================

    def has_one(self, *values: Any, column: str | None = None) -> bool:
        """
        Whether at least one row matches.

        Values are matched against the primary key and the unique columns,
        or only against ``column`` when given. Mappings check their
        ``column == value`` pairs. Always a single query.
        """
        mappings = [item for item in values if isinstance(item, Mapping)]
        others = [item for item in values if not isinstance(item, Mapping)]
        clauses: list[ColumnElement[bool]] = []

        for mapping in mappings:
            clauses.extend(build_predicates(self._model, mapping))

        if column is not None:
            column_values = normalize(
                others,
                resolve=lambda item: attribute_of(item, column) if is_entity(item) else item,
            )
            if column_values:
                clauses.extend(build_predicates(self._model, column, "in", column_values))
        else:
            identifiers = self._unique_values(others)
            if identifiers:
                clauses.append(build_match_clause(self._model, identifiers, self.unique_keys))

        if not clauses:
            return False
        return self._exists(or_(*clauses))

    def has_all(self, *values: Any) -> bool:
        """
        Whether every value resolves to its own row.

        Entities count by primary key, scalars by primary key or unique
        column. The identity columns of all candidate rows are read in one
        query; every distinct value must then be paired with a row of its
        own, so one row cannot stand in for two values and a value given
        twice counts once. An empty request is False.
        """
        identifiers = self._ids(values)
        if not identifiers:
            return False

        keys = identity_columns(self._model, self.unique_keys)
        columns = sa_inspect(self._model).columns
        query = filter_active(
            select(*(getattr(self._model, key) for key in keys)), self._model
        ).where(build_match_clause(self._model, identifiers, self.unique_keys))
        rows = self._db.execute(query).all()

        candidates: list[set[int]] = []
        for identifier in identifiers:
            matches: set[int] = set()
            for position, key in enumerate(keys):
                coerced = values_for_column(columns[key], [identifier])
                if coerced:
                    matches.update(
                        index for index, row in enumerate(rows) if row[position] == coerced[0]
                    )
            if not matches:
                return False
            candidates.append(matches)

        return _pair_distinct(candidates)

    def has(self, values: Any, all: bool = False) -> bool:
        return self.has_all(values) if all else self.has_one(values)

    # =========================================================================
    # Building
    # =========================================================================

    def make(self, attributes: Any = None) -> ModelT:
        """Unsaved instance. Never touches the database."""
        return self._model(**self._attributes(attributes))

    def _exists_by_identity(self, attributes: Mapping[str, Any]) -> bool:
        clause = build_attribute_clause(self._model, attributes, self.unique_keys)
        if clause is None:
            return False
        return self._exists(clause, with_trashed=True)

    def make_if_not_exists(self, attributes: Any = None) -> ModelT | None:
        """Unsaved instance, or None when a row already holds its primary or unique values."""
        attributes = self._attributes(attributes)
        if self._exists_by_identity(attributes):
            return None
        return self._model(**attributes)

    @staticmethod
    def _group_items(group: Iterable[Any]) -> list[Any]:
        if isinstance(group, Mapping):
            group = group.values()
        return [item for item in group if isinstance(item, (Mapping, BaseModel))]

    def make_group(self, group: Iterable[Any], if_not_exists: bool = False) -> list[ModelT]:
        """Unsaved instances for every attribute set in ``group``. Other items are skipped."""
        result = []
        for attributes in self._group_items(group):
            entity = self.make_if_not_exists(attributes) if if_not_exists else self.make(attributes)
            if entity is not None:
                result.append(entity)
        return result

    def make_group_if_not_exists(self, group: Iterable[Any]) -> list[ModelT]:
        return self.make_group(group, if_not_exists=True)

    # =========================================================================
    # Write Operations
    # =========================================================================

    def create(self, attributes: Any = None) -> ModelT:
        """Insert a row."""
        entity = self.make(attributes)
        self._db.add(entity)
        self._persist()
        return entity

    def store(self, attributes: Any = None) -> ModelT:
        return self.create(attributes)

    def create_if_not_exists(self, attributes: Any = None) -> ModelT | None:
        """Insert a row unless one already holds its primary or unique values."""
        entity = self.make_if_not_exists(attributes)
        if entity is None:
            return None
        self._db.add(entity)
        self._persist()
        return entity

    def store_if_not_exists(self, attributes: Any = None) -> ModelT | None:
        return self.create_if_not_exists(attributes)

    def create_group(self, group: Iterable[Any], if_not_exists: bool = False) -> list[ModelT]:
        """Insert a row for every attribute set in ``group``."""
        result = []
        for attributes in self._group_items(group):
            entity = (
                self.create_if_not_exists(attributes) if if_not_exists else self.create(attributes)
            )
            if entity is not None:
                result.append(entity)
        return result

    def store_group(self, group: Iterable[Any], if_not_exists: bool = False) -> list[ModelT]:
        return self.create_group(group, if_not_exists)

    def create_group_if_not_exists(self, group: Iterable[Any]) -> list[ModelT]:
        return self.create_group(group, if_not_exists=True)

    def store_group_if_not_exists(self, group: Iterable[Any]) -> list[ModelT]:
        return self.create_group_if_not_exists(group)

    def update(self, entity: ModelT, attributes: Any) -> ModelT:
        """Assign attributes and save."""
        for field_name, value in self._attributes(attributes).items():
            setattr(entity, field_name, value)
        self._persist()
        return entity

    def fill(self, entity: ModelT, attributes: Any) -> ModelT:
        return self.update(entity, attributes)

    def delete(self, entity: ModelT) -> bool:
        """Soft delete when the model supports it, hard delete otherwise."""
        if supports_soft_delete(entity):
            soft_delete(self._db, entity, commit=self._autocommit)
        else:
            hard_delete(self._db, entity, commit=self._autocommit)
        return True

    def force_delete(self, entity: ModelT) -> bool:
        """Remove the row even when the model supports soft delete."""
        hard_delete(self._db, entity, commit=self._autocommit)
        return True

    def restore(self, entity: ModelT) -> bool:
        """Undo a soft delete. False for models without soft delete."""
        if not supports_soft_delete(entity):
            return False
        restore_entity(self._db, entity, commit=self._autocommit)
        return True

    def truncate(self) -> None:
        """Delete every row, soft-deleted ones included."""
        self._db.execute(delete(self._model))
        self._persist()
        logger.info("Truncated table", model=self.entity_name)

    # =========================================================================
    # Factories and Seeding
    # =========================================================================

    def factory(self, count: Any = None, state: Any = None) -> ModelFactory:
        """
        Factory for the model, bound to this service's session.

        ``count`` may also be an attribute set or a state callable, in which
        case it is used as the state.
        """
        if self._factory is None:
            raise ConfigurationError(
                f"{type(self).__name__} has no factory for {self.entity_name}",
                model=self.entity_name,
            )

        if count is not None and not isinstance(count, int):
            count, state = None, count

        factory = self._factory(self._db, commit=self._autocommit)
        return factory.count(count).state(state)

    def _resolve_generate_args(
        self, attributes: Any, count: Any, create: bool
    ) -> tuple[Any, int | None, bool]:
        """
        Disambiguate ``generate`` arguments.

        Callables are evaluated first. A bool in either position is the
        create flag, and an int ``attributes`` is the count.
        """
        attributes = resolve_value(attributes)
        count = resolve_value(count)

        if isinstance(count, bool):
            create, count = count, None

        if isinstance(attributes, bool):
            create, attributes = attributes, None
        elif isinstance(attributes, int):
            count, attributes = attributes, None

        return attributes, count, create

    def generate(
        self, attributes: Any = None, count: Any = None, create: bool = True
    ) -> ModelT | list[ModelT]:
        """
        Build rows with the model factory.

        Examples:
            generate()                     one persisted row
            generate(3)                    three persisted rows
            generate(False)                one unsaved instance
            generate({"name": "A"}, 3)     three persisted rows named A
            generate(3, False)             three unsaved instances
        """
        attributes, count, create = self._resolve_generate_args(attributes, count, create)
        factory = self.factory(count)
        return factory.create(attributes) if create else factory.make(attributes)

    def seed(self) -> None:
        """Run the configured seeder."""
        run = resolve_seeder(self._seeder, self._db)
        logger.info("Seeding", model=self.entity_name)
        run()
