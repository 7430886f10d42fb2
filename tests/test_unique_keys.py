"""
Tests for model introspection and clause building.
"""

import uuid

import pytest
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import IntegrityError

from entity_service.services.crud.unique_keys import (
    build_attribute_clause,
    build_predicates,
    declared_unique_keys,
    identity_columns,
    is_unique_violation,
    primary_key_name,
    values_for_column,
)
from entity_service.shared.utils.exceptions import ConfigurationError, ValidationError
from tests.models import Account, Membership, Tag, User


class TestIntrospection:
    def test_primary_key_name(self):
        assert primary_key_name(User) == "id"
        assert primary_key_name(Tag) == "id"

    def test_composite_primary_key_is_rejected(self):
        with pytest.raises(ConfigurationError):
            primary_key_name(Membership)

    def test_unique_columns_from_table(self):
        assert declared_unique_keys(User) == ("email",)
        assert declared_unique_keys(Tag) == ("slug",)

    def test_declared_unique_keys_win(self):
        assert declared_unique_keys(Account) == ("username",)

    def test_identity_columns(self):
        assert identity_columns(User, ("email",)) == ["id", "email"]
        assert identity_columns(User, ("id", "email")) == ["id", "email"]


class TestValuesForColumn:
    def test_integer_column(self):
        column = sa_inspect(Tag).columns["id"]
        assert values_for_column(column, [1, "2", "abc", True, 1]) == [1, 2]

    def test_malformed_digit_strings_are_dropped(self):
        column = sa_inspect(Tag).columns["id"]
        assert values_for_column(column, ["--5", "\u00b2", " 7 "]) == [7]

    def test_value_fitting_no_column(self):
        assert values_for_column(sa_inspect(Tag).columns["id"], [2.5, b"x"]) == []
        assert values_for_column(sa_inspect(Tag).columns["slug"], [2.5, b"x"]) == []

    def test_string_column(self):
        column = sa_inspect(User).columns["email"]
        key = uuid.uuid4()
        assert values_for_column(column, ["a@example.com", 5, key]) == ["a@example.com", str(key)]


class TestBuildPredicates:
    def test_mapping_gives_one_clause_per_pair(self):
        assert len(build_predicates(User, {"name": "Ana", "email": "a@example.com"})) == 2

    def test_condition_list(self):
        clauses = build_predicates(User, [("name", "Ana"), ("email", "like", "%@example.com")])
        assert len(clauses) == 2

    def test_callable_receives_model(self):
        received = []

        def condition(model):
            received.append(model)
            return model.name == "Ana"

        assert len(build_predicates(User, condition)) == 1
        assert received == [User]

    def test_unknown_column(self):
        with pytest.raises(ValidationError):
            build_predicates(User, "nickname", "Ana")

    def test_unknown_operator(self):
        with pytest.raises(ValidationError):
            build_predicates(User, "name", "between", "A")

    def test_operator_must_be_a_string(self):
        with pytest.raises(ValidationError):
            build_predicates(User, "name", 5, "A")

    def test_malformed_condition_tuple(self):
        with pytest.raises(ValidationError):
            build_predicates(User, [("name",)])

    def test_callable_must_return_sql(self):
        with pytest.raises(ValidationError):
            build_predicates(User, lambda model: 42)


class TestAttributeClause:
    def test_no_identity_values(self):
        assert build_attribute_clause(User, {"name": "Ana"}, ("email",)) is None

    def test_identity_values_present(self):
        assert build_attribute_clause(User, {"email": "a@example.com"}, ("email",)) is not None


class TestUniqueViolation:
    def _error(self, message, **attributes):
        orig = type("DriverError", (Exception,), attributes)(message)
        return IntegrityError("INSERT ...", {}, orig)

    def test_sqlite_message(self):
        assert is_unique_violation(self._error("UNIQUE constraint failed: users.email"))
        assert not is_unique_violation(self._error("NOT NULL constraint failed: tags.slug"))

    def test_sqlstate(self):
        assert is_unique_violation(self._error("duplicate key", sqlstate="23505"))
        assert not is_unique_violation(self._error("unique constraint", sqlstate="23503"))
