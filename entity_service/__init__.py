"""
Entity services: a generic service layer over SQLAlchemy models.

    from entity_service import Service

    users = Service(db, User)
    users.where_unique_key("ana@example.com", 42)
"""

from entity_service.models import Base, SoftDeleteMixin, TimestampMixin
from entity_service.services import ModelFactory, ResourceAdapter, Seeder, Service

__version__ = "1.0.0"

__all__ = [
    "Base",
    "SoftDeleteMixin",
    "TimestampMixin",
    "ModelFactory",
    "ResourceAdapter",
    "Seeder",
    "Service",
]
