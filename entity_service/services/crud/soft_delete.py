"""
Soft delete helpers shared by services and the resource adapter.

A model supports soft delete when it carries an ``is_active`` flag and
``soft_delete()``/``restore()`` methods (see ``SoftDeleteMixin``). Models
without them are hard-deleted.
"""

from typing import Any, TypeVar

from sqlalchemy import Select, false
from sqlalchemy.orm import Session

from entity_service.shared.infrastructure.db import safe_commit

T = TypeVar("T")


def supports_soft_delete(model: type | Any) -> bool:
    """True when the model (class or instance) can be soft-deleted."""
    return (
        hasattr(model, "is_active")
        and callable(getattr(model, "soft_delete", None))
        and callable(getattr(model, "restore", None))
    )


def filter_active(query: Select, model: type, include_deleted: bool = False) -> Select:
    """
    Apply the is_active filter to a query.

    Models without soft delete are returned unfiltered.
    """
    if include_deleted or not supports_soft_delete(model):
        return query
    return query.where(model.is_active.is_(True))


def filter_trashed(query: Select, model: type) -> Select:
    """Restrict a query to soft-deleted rows. Models without soft delete match nothing."""
    if not supports_soft_delete(model):
        return query.where(false())
    return query.where(model.is_active.is_(False))


def persist(db: Session, commit: bool) -> None:
    """Commit (rolling back on failure) or just flush pending changes."""
    if commit:
        safe_commit(db)
    else:
        db.flush()


def soft_delete(db: Session, entity: T, commit: bool = True) -> T:
    """
    Perform soft delete on an entity.

    Raises:
        Exception: Re-raises any exception after rollback
    """
    entity.soft_delete()
    persist(db, commit)
    return entity


def restore_entity(db: Session, entity: T, commit: bool = True) -> T:
    """
    Restore a soft-deleted entity.

    Raises:
        ValueError: If entity is None
        Exception: Re-raises any exception after rollback
    """
    if entity is None:
        raise ValueError("Cannot restore None entity")

    entity.restore()
    persist(db, commit)
    return entity


def hard_delete(db: Session, entity: T, commit: bool = True) -> T:
    """Remove the entity's row."""
    db.delete(entity)
    persist(db, commit)
    return entity
