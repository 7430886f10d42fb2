"""
Models, factories and services used by the test suite.
"""

import uuid
from typing import Any, Optional

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from entity_service.models import Base, SoftDeleteMixin
from entity_service.services import ModelFactory, Seeder, Service


def new_uuid() -> str:
    return uuid.uuid4().hex


class User(SoftDeleteMixin, Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(32), primary_key=True, default=new_uuid)
    name: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)


class Tag(Base):
    """Integer key, no soft delete, no timestamps."""

    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    label: Mapped[Optional[str]] = mapped_column(String(120), nullable=True)


class Account(Base):
    """Unique keys declared on the model instead of introspected."""

    __tablename__ = "accounts"
    __unique_keys__ = ("username",)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)


class Membership(Base):
    """Composite primary key."""

    __tablename__ = "memberships"

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id"), primary_key=True)
    tag_id: Mapped[int] = mapped_column(ForeignKey("tags.id"), primary_key=True)


class UserFactory(ModelFactory[User]):
    model = User

    def definition(self) -> dict[str, Any]:
        token = uuid.uuid4().hex[:10]
        return {
            "name": f"User {token}",
            "email": f"{token}@example.com",
            "password": "secret",
        }


class UserSeeder(Seeder):
    def run(self) -> None:
        UserFactory(self.session).count(5).create()


class UserService(Service[User]):
    model_class = User
    factory_class = UserFactory
    seeder_class = UserSeeder
