"""
Base class and SoftDeleteMixin for models managed by services.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class TimestampMixin:
    """
    Creation and update timestamps.

    ``created_at`` is assigned client-side so rows created within the same
    second still order deterministically in latest()/oldest().
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, nullable=False, index=True
    )
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), onupdate=utcnow, nullable=True
    )


class SoftDeleteMixin(TimestampMixin):
    """
    Mixin providing soft delete for models.

    Fields added:
    - is_active: Soft delete flag (False = deleted, True = active)
    - created_at, updated_at, deleted_at: Audit timestamps

    Methods:
    - soft_delete(): Mark entity as deleted
    - restore(): Restore a soft-deleted entity
    """

    # Soft delete flag (False = deleted/inactive, True = active)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False, index=True)

    deleted_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    def soft_delete(self) -> None:
        """Mark the entity as deleted without removing its row."""
        self.is_active = False
        self.deleted_at = utcnow()

    def restore(self) -> None:
        """Restore a soft-deleted record."""
        self.is_active = True
        self.deleted_at = None
        self.updated_at = utcnow()

    @property
    def is_trashed(self) -> bool:
        return self.is_active is False

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        id_val = getattr(self, 'id', None)
        active = 'deleted' if self.is_trashed else 'active'
        return f"<{class_name}(id={id_val}, {active})>"
