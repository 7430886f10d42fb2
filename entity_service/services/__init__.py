"""
Services module: generic data access over SQLAlchemy models.

- base_service.py: Service, the per-model facade
- resource.py: ResourceAdapter, collection actions on top of a Service
- seeding.py: Seeder base class
- crud/: normalization, key resolution, clause builders, soft delete, factories

Usage:
    from entity_service.services import Service, ResourceAdapter

    users = Service(db, User)
    users.find_or_fail([1, 2, 3])
"""

from .base_service import Service
from .resource import ResourceAdapter
from .seeding import Seeder, SeederLike, resolve_seeder
from .crud import ModelFactory, MISSING

__all__ = [
    # Facade
    "Service",
    "ResourceAdapter",
    # Generation
    "ModelFactory",
    "Seeder",
    "SeederLike",
    "resolve_seeder",
    # Sentinels
    "MISSING",
]
