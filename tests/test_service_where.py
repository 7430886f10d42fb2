"""
Tests for Service key lookups and column conditions.
"""

import pytest

from entity_service.services import Service
from entity_service.shared.utils.exceptions import ValidationError
from tests.models import Account, Tag, User


def ids_of(entities):
    return {entity.id for entity in entities}


class TestWhereKey:
    def test_ids_and_entities(self, service, users):
        assert ids_of(service.where_key(users[0].id, users[1])) == ids_of(users[:2])

    def test_empty_input_skips_query(self, service, users, query_counter):
        query_counter.reset()
        assert service.where_key() == []
        assert service.where_key(None, []) == []
        assert query_counter.count == 0

    def test_where_key_not(self, service, users):
        assert ids_of(service.where_key_not(users[0])) == ids_of(users[1:])

    def test_where_key_not_without_ids_returns_everything(self, service, users):
        assert ids_of(service.where_key_not()) == ids_of(users)

    def test_integer_keys_accept_digit_strings(self, tag_service, tags):
        assert ids_of(tag_service.where_key("1", 2)) == {1, 2}


class TestWhereUniqueKey:
    def test_mixed_identifiers(self, service, users):
        found = service.where_unique_key(users[0].email, users[1].id, "nobody@example.com")
        assert ids_of(found) == ids_of(users[:2])

    def test_entity_matches_itself(self, service, users):
        assert ids_of(service.where_unique_key(users[2])) == {users[2].id}

    def test_key_and_unique_value_of_one_row(self, service, users):
        found = service.where_unique_key(users[0].id, users[0].email)
        assert [user.id for user in found] == [users[0].id]

    def test_no_match(self, service, users):
        assert service.where_unique_key("nobody@example.com") == []

    def test_empty_input(self, service, users):
        assert service.where_unique_key([]) == []

    def test_where_unique_key_not(self, service, users):
        found = service.where_unique_key_not(users[0].email, users[1].id)
        assert ids_of(found) == {users[2].id}

    def test_where_unique_key_not_without_values(self, service, users):
        assert ids_of(service.where_unique_key_not()) == ids_of(users)

    def test_first_where_unique_key(self, service, users):
        found = service.first_where_unique_key([28374, users[0].id, "nobody@example.com"])
        assert found.id == users[0].id

    def test_first_where_unique_key_missing(self, service, users):
        assert service.first_where_unique_key("nobody@example.com") is None
        assert service.first_where_unique_key(None) is None

    def test_integer_key_and_slug(self, tag_service, tags):
        assert ids_of(tag_service.where_unique_key("two", 3)) == {2, 3}

    def test_slug_exclusion(self, tag_service, tags):
        assert ids_of(tag_service.where_unique_key_not("one")) == {2, 3}

    def test_declared_unique_keys(self, db_session):
        accounts = Service(db_session, Account)
        account = accounts.create({"username": "ana", "email": "ana@example.com"})

        assert accounts.first_where_unique_key("ana").id == account.id
        assert accounts.first_where_unique_key("ana@example.com") is None

    def test_soft_deleted_rows_are_hidden(self, service, users):
        service.delete(users[0])
        assert service.where_unique_key(users[0].email) == []


class TestWhere:
    def test_column_value(self, service, users):
        assert ids_of(service.where("name", users[0].name)) == {users[0].id}

    def test_operator(self, service, users):
        assert len(service.where("name", "like", "User %")) == 3
        assert len(service.where("email", "in", [users[0].email, users[1].email])) == 2
        assert len(service.where("email", "not in", [users[0].email])) == 2

    def test_mapping(self, service, users):
        found = service.where({"name": users[0].name, "email": users[0].email})
        assert ids_of(found) == {users[0].id}

        assert service.where({"name": users[0].name, "email": users[1].email}) == []

    def test_condition_list(self, service, users):
        found = service.where([("name", "like", "User %"), ("email", "!=", users[0].email)])
        assert ids_of(found) == ids_of(users[1:])

    def test_callable(self, service, users):
        found = service.where(lambda model: model.email == users[1].email)
        assert ids_of(found) == {users[1].id}

    def test_sql_expression(self, service, users):
        assert ids_of(service.where(User.email == users[2].email)) == {users[2].id}

    def test_column_only_means_null(self, service, users):
        nameless = service.create({"email": "nameless@example.com"})
        assert ids_of(service.where("name")) == {nameless.id}

    def test_two_arguments_compare_for_equality(self, service, users):
        # The second argument is a value even when it looks like an operator
        service.create({"email": "op@example.com", "name": ">="})
        assert [user.email for user in service.where("name", ">=")] == ["op@example.com"]

    def test_none_value_means_null(self, service, users):
        service.create({"email": "nameless@example.com"})
        assert len(service.where("name", None)) == 1
        assert len(service.where("name", "!=", None)) == 3

    def test_entity_value_uses_same_attribute(self, service, users):
        assert ids_of(service.where("email", users[0])) == {users[0].id}

    def test_first_where(self, service, users):
        assert service.first_where("email", users[1].email).id == users[1].id
        assert service.first_where("email", "nobody@example.com") is None

    def test_invalid_conditions(self, service, users):
        with pytest.raises(ValidationError):
            service.where("nickname", "x")
        with pytest.raises(ValidationError):
            service.where("name", "between", "x")


class TestWhereNot:
    def test_single_condition(self, service, users):
        assert ids_of(service.where_not("email", users[0].email)) == ids_of(users[1:])

    def test_every_pair_is_negated(self, service, users):
        found = service.where_not({"name": users[0].name, "email": users[1].email})
        assert ids_of(found) == {users[2].id}


class TestHasWhere:
    def test_match(self, service, users):
        assert service.has_where("email", users[0].email)
        assert service.has_where({"name": users[1].name})

    def test_no_match(self, service, users):
        assert not service.has_where("email", "nobody@example.com")

    def test_single_query(self, service, users, query_counter):
        query_counter.reset()
        service.has_where("email", users[0].email)
        assert query_counter.count == 1


class TestIdentityEdgeCases:
    def test_malformed_integer_strings_match_nothing(self, tag_service, tags):
        assert tag_service.where_unique_key("--5") == []
        assert tag_service.find("--5") is None
        assert tag_service.find_many("--5", "²") == []
        assert not tag_service.has_one("--5")
        assert ids_of(tag_service.where_key_not("--5")) == {1, 2, 3}

    def test_value_fitting_no_column(self, tag_service, tags):
        assert tag_service.where_unique_key(2.5) == []
        assert ids_of(tag_service.where_unique_key_not(2.5)) == {1, 2, 3}

    def test_exclusion_keeps_null_unique_values(self, db_session, tags):
        by_label = Service(db_session, Tag, unique_keys=["slug", "label"])

        # Tag 3 has no label and must survive the label exclusion
        assert ids_of(by_label.where_unique_key_not("One")) == {2, 3}
        assert ids_of(by_label.where_unique_key_not("One", "Two")) == {3}

    def test_exclusion_complement(self, service):
        rows = service.generate(5)

        remaining = service.where_unique_key_not(rows[0].id)
        assert ids_of(remaining) == ids_of(rows[1:])
        assert len(service.where_unique_key_not()) == 5
        assert ids_of(service.where_unique_key(rows[0].id)) == {rows[0].id}
