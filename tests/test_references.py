"""
Tests for entity reference resolution.
"""

import pytest

from entity_service.services.crud.references import (
    attribute_of,
    is_entity,
    primary_key_of,
    resolve_id,
    resolve_ids,
    resolve_unique,
)
from entity_service.shared.utils.exceptions import ValidationError
from tests.models import Tag, User


class TestIsEntity:
    def test_mapped_instances(self):
        assert is_entity(User())
        assert is_entity(Tag(slug="x"))

    def test_non_entities(self):
        assert not is_entity(User)
        assert not is_entity("user")
        assert not is_entity(5)
        assert not is_entity({"id": 1})
        assert not is_entity(None)


class TestPrimaryKey:
    def test_transient_entity_has_no_key(self):
        assert primary_key_of(User(email="a@example.com")) is None

    def test_persisted_entity(self, users):
        assert primary_key_of(users[0]) == users[0].id

    def test_expired_entity_uses_identity(self, db_session, users):
        user = users[0]
        db_session.expire(user)
        assert primary_key_of(user) == user.id

    def test_attribute_of(self, users):
        assert attribute_of(users[0], "email") == users[0].email
        assert attribute_of(users[0], "nickname") is None


class TestResolveId:
    def test_scalars_pass_through(self):
        assert resolve_id(5) == 5
        assert resolve_id("abc") == "abc"

    def test_entity_becomes_key(self, users):
        assert resolve_id(users[0], User) == users[0].id
        assert resolve_ids([users[0], 7], User) == [users[0].id, 7]

    def test_transient_entity_resolves_to_none(self):
        assert resolve_id(User(), User) is None

    def test_transient_entity_strict(self):
        with pytest.raises(ValidationError):
            resolve_id(User(), User, strict=True)

    def test_foreign_model(self, tags):
        assert resolve_id(tags[0], User) == tags[0].id
        with pytest.raises(ValidationError):
            resolve_id(tags[0], User, strict=True)


class TestResolveUnique:
    def test_entity_expands_to_key_and_unique_values(self, users):
        user = users[0]
        assert resolve_unique(user, ("email",), User) == (user.id, user.email)

    def test_scalars_pass_through(self):
        assert resolve_unique("a@example.com", ("email",), User) == "a@example.com"
