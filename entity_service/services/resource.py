"""
Resource adapter: the standard collection actions mapped onto a Service.

    users = ResourceAdapter(UserService(db))
    users.index()
    users.store({"name": "Ana", "email": "ana@example.com"})
    users.update(user_id, {"name": "Ana M."})
    users.destroy(user_id)
    users.restore(user_id)

Actions that need an existing row accept the entity itself or any
identifier ``Service.find`` understands, and raise ``NotFoundError`` when
nothing matches.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from entity_service.services.base_service import Service
from entity_service.services.crud.references import is_entity, primary_key_of
from entity_service.shared.config.logging import get_logger, mask_value
from entity_service.shared.utils.exceptions import NotFoundError

logger = get_logger(__name__)

ModelT = TypeVar("ModelT")


class ResourceAdapter(Generic[ModelT]):
    """Index/store/show/update/destroy/restore on top of a service."""

    def __init__(self, service: Service[ModelT]):
        self._service = service

    @property
    def service(self) -> Service[ModelT]:
        return self._service

    def _resolve(self, ref: Any, *, with_trashed: bool = False) -> ModelT:
        if is_entity(ref) and isinstance(ref, self._service.model):
            return ref

        entity = self._service.find(ref, with_trashed=with_trashed)
        if entity is None or isinstance(entity, list):
            raise NotFoundError(self._service.entity_name, ref)
        return entity

    def index(self) -> list[ModelT]:
        return self._service.all()

    def store(self, attributes: Any) -> ModelT:
        return self._service.store(attributes)

    def show(self, ref: Any) -> ModelT | None:
        """The entity itself, or the row found by id. Never raises."""
        if is_entity(ref) and isinstance(ref, self._service.model):
            return ref
        entity = self._service.find(ref)
        return None if isinstance(entity, list) else entity

    def update(self, ref: Any, attributes: Any) -> ModelT:
        """
        Raises:
            NotFoundError: If ``ref`` does not resolve to a row.
        """
        return self._service.update(self._resolve(ref), attributes)

    def destroy(self, ref: Any) -> None:
        """Soft delete when supported, hard delete otherwise."""
        entity = self._resolve(ref)
        entity_id = primary_key_of(entity)
        self._service.delete(entity)
        logger.info(
            "Resource destroyed",
            model=self._service.entity_name,
            entity_id=mask_value(entity_id),
        )

    def restore(self, ref: Any) -> ModelT:
        """
        Restore a soft-deleted row.

        Entities are looked up again by key among soft-deleted rows, so an
        active row or a model without soft delete is not found.

        Raises:
            NotFoundError: If ``ref`` is not a soft-deleted row.
        """
        entity = self._service.find_trashed(ref)
        if entity is None:
            key = primary_key_of(ref) if is_entity(ref) else ref
            raise NotFoundError(self._service.entity_name, key)

        self._service.restore(entity)
        return entity

    def force_destroy(self, ref: Any) -> None:
        """Remove the row permanently, even when it is soft-deleted."""
        entity = self._resolve(ref, with_trashed=True)
        entity_id = primary_key_of(entity)
        self._service.force_delete(entity)
        logger.info(
            "Resource permanently destroyed",
            model=self._service.entity_name,
            entity_id=mask_value(entity_id),
        )
