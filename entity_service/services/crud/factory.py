"""
Model factories.

A factory knows how to build plausible attribute sets for one model and turns
them into unsaved instances (``make``) or persisted rows (``create``).
Concrete factories implement ``definition()``:

    class UserFactory(ModelFactory[User]):
        model = User

        def definition(self) -> dict[str, Any]:
            token = uuid.uuid4().hex[:8]
            return {"name": f"User {token}", "email": f"{token}@example.com"}

    UserFactory(db).count(3).state({"name": "Admin"}).create()

Factories are immutable: ``count()`` and ``state()`` return new instances.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any, Generic, TypeVar

from sqlalchemy.orm import Session

from entity_service.services.crud.normalize import to_attributes
from entity_service.services.crud.soft_delete import persist
from entity_service.shared.config.logging import get_logger
from entity_service.shared.utils.exceptions import ConfigurationError

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")

State = Mapping[str, Any] | Callable[[dict[str, Any]], Mapping[str, Any]]


class ModelFactory(Generic[ModelT]):
    """Base class for model factories."""

    model: type[ModelT]

    def __init__(
        self,
        session: Session | None = None,
        *,
        count: int | None = None,
        states: tuple[State, ...] = (),
        commit: bool = True,
    ):
        self._session = session
        self._count = count
        self._states = states
        self._commit = commit

    def definition(self) -> dict[str, Any]:
        """Default attribute set for one instance. Override in subclasses."""
        raise NotImplementedError(f"{type(self).__name__} must implement definition()")

    # =========================================================================
    # Configuration (returns new factories)
    # =========================================================================

    def _copy(self, **changes: Any) -> "ModelFactory[ModelT]":
        options = {
            "count": self._count,
            "states": self._states,
            "commit": self._commit,
        }
        options.update(changes)
        return type(self)(self._session, **options)

    def count(self, count: int | None) -> "ModelFactory[ModelT]":
        """Build ``count`` instances instead of one."""
        return self._copy(count=count)

    def state(self, state: Any) -> "ModelFactory[ModelT]":
        """
        Add an attribute override.

        ``state`` may be a mapping (or anything ``to_attributes`` accepts) or a
        callable receiving the attributes built so far.
        """
        if state is None:
            return self
        if not callable(state):
            state = to_attributes(state)
            if not state:
                return self
        return self._copy(states=(*self._states, state))

    # =========================================================================
    # Building
    # =========================================================================

    def raw(self, attributes: Any = None) -> dict[str, Any]:
        """Attribute set for one instance, with states and overrides applied."""
        data = dict(self.definition())
        for state in self._states:
            data.update(state(dict(data)) if callable(state) else state)
        data.update(to_attributes(attributes))
        return data

    def _make_one(self, attributes: Any) -> ModelT:
        return self.model(**self.raw(attributes))

    def make(self, attributes: Any = None) -> ModelT | list[ModelT]:
        """Build unsaved instances. A list is returned whenever a count was set."""
        if self._count is None:
            return self._make_one(attributes)
        return [self._make_one(attributes) for _ in range(self._count)]

    def create(self, attributes: Any = None) -> ModelT | list[ModelT]:
        """Build and persist instances."""
        if self._session is None:
            raise ConfigurationError(
                f"{type(self).__name__} needs a session to create {self.model.__name__} rows",
                factory=type(self).__name__,
            )

        made = self.make(attributes)
        entities = made if isinstance(made, list) else [made]

        self._session.add_all(entities)
        persist(self._session, self._commit)

        logger.debug(
            "Factory created rows",
            model=self.model.__name__,
            count=len(entities),
        )
        return made
