"""
Seeders populate a table with baseline data.

    class UserSeeder(Seeder):
        def run(self) -> None:
            UserFactory(self.session).count(20).create()

Seeders are idempotent only if they choose to be; ``run()`` is called as-is.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from sqlalchemy.orm import Session

from entity_service.shared.config.logging import get_logger
from entity_service.shared.utils.exceptions import ConfigurationError

logger = get_logger(__name__)


class Seeder:
    """Base class for seeders."""

    def __init__(self, session: Session):
        self.session = session

    def run(self) -> None:
        raise NotImplementedError(f"{type(self).__name__} must implement run()")

    def call(self, *seeders: type["Seeder"]) -> None:
        """Run other seeders with this seeder's session."""
        for seeder_cls in seeders:
            logger.info("Seeding", seeder=seeder_cls.__name__)
            seeder_cls(self.session).run()


SeederLike = type[Seeder] | Seeder | Callable[[], Any]


def resolve_seeder(seeder: SeederLike | None, session: Session) -> Callable[[], Any]:
    """
    Turn a seeder reference into a zero-argument callable.

    Accepts a Seeder subclass (instantiated with ``session``), a Seeder
    instance or any zero-argument callable.
    """
    if seeder is None:
        raise ConfigurationError("No seeder configured")
    if isinstance(seeder, type) and issubclass(seeder, Seeder):
        return seeder(session).run
    if isinstance(seeder, Seeder):
        return seeder.run
    if callable(seeder):
        return seeder
    raise ConfigurationError(
        f"Unsupported seeder {seeder!r}",
        seeder_type=type(seeder).__name__,
    )
