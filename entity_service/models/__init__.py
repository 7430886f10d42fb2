"""
Declarative base and mixins for models served by entity services.
"""

from entity_service.models.base import Base, SoftDeleteMixin, TimestampMixin, utcnow

__all__ = [
    "Base",
    "SoftDeleteMixin",
    "TimestampMixin",
    "utcnow",
]
