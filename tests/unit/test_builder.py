"""Unit Tests for the query builder

Tests statement assembly without a database:
- WHERE / ORDER BY / projection fragments
- Placeholder numbering and parameter order
- Identifier and sort direction validation
"""

import pytest

from pg_crud.core.builder import (
    QueryBuilder,
    create_database_query,
    order_by_clause,
    projection,
    quote_identifier,
    validate_table_name,
    where_clause,
)
from pg_crud.exceptions import ValidationFailure
from pg_crud.models.query import QueryOptions


class TestFragments:
    """Test the condition/option translators."""

    def test_where_clause_numbers_in_map_order(self):
        where, params = where_clause({"name": "Alice", "age": 30, "active": True})

        assert where == "WHERE name = $1 AND age = $2 AND active = $3"
        assert params == ["Alice", 30, True]

    def test_where_clause_empty(self):
        assert where_clause({}) == ("", [])

    def test_where_clause_custom_start(self):
        where, params = where_clause({"id": 7}, start=3)

        assert where == "WHERE id = $3"
        assert params == [7]

    def test_where_clause_serializes_mappings(self):
        _, params = where_clause({"meta": {"a": 1}})

        assert params == ['{"a":1}']

    def test_order_by(self):
        assert order_by_clause({"name": "asc", "id": "DESC"}) == (
            "ORDER BY name ASC, id DESC"
        )

    def test_order_by_empty(self):
        assert order_by_clause({}) == ""
        assert order_by_clause(None) == ""

    def test_order_by_rejects_unknown_direction(self):
        with pytest.raises(ValidationFailure):
            order_by_clause({"name": "asc; DROP TABLE users"})

    def test_projection(self):
        assert projection(None) == "*"
        assert projection([]) == "*"
        assert projection("name") == "name"
        assert projection(["id", "name"]) == "id, name"
        assert projection("id, name") == "id, name"

    def test_projection_rejects_expressions(self):
        with pytest.raises(ValidationFailure):
            projection(["id", "pg_sleep(10)"])

    def test_table_names(self):
        assert validate_table_name("users") == "users"
        assert validate_table_name("public.users") == "public.users"

        for bad in ["users; DROP TABLE x", "a.b.c", "", "1users", "users--"]:
            with pytest.raises(ValidationFailure):
                validate_table_name(bad)

    def test_quote_identifier(self):
        assert quote_identifier("my db") == '"my db"'
        assert quote_identifier('we"ird') == '"we""ird"'


class TestSelect:
    """Test SELECT assembly."""

    def test_defaults_to_all_fields_and_limit_one(self):
        query = QueryBuilder("users").select({"id": 1})

        assert query.text == "SELECT * FROM users WHERE id = $1 LIMIT 1"
        assert query.params == (1,)

    def test_full_options(self):
        options = QueryOptions(
            fields=["id", "name"], sort={"name": "desc"}, max_entries=10
        )
        query = QueryBuilder("users").select({"active": True}, options)

        assert query.text == (
            "SELECT id, name FROM users WHERE active = $1 ORDER BY name DESC LIMIT 10"
        )
        assert query.params == (True,)

    def test_no_conditions(self):
        query = QueryBuilder("users").select({}, QueryOptions(maxEntries=5))

        assert query.text == "SELECT * FROM users LIMIT 5"
        assert query.params == ()

    @pytest.mark.parametrize("max_entries", [0, -3])
    def test_non_positive_limit_falls_back_to_one(self, max_entries):
        query = QueryBuilder("users").select({}, QueryOptions(max_entries=max_entries))

        assert query.text.endswith("LIMIT 1")

    def test_select_all(self):
        assert QueryBuilder("users").select_all().text == "SELECT * FROM users"


class TestWrites:
    """Test INSERT / UPDATE / DELETE / CREATE assembly."""

    def test_insert_binds_values(self):
        query = QueryBuilder("users").insert({"name": "O'Brien", "age": 41})

        assert query.text == (
            "INSERT INTO users (name, age) VALUES ($1, $2) RETURNING *"
        )
        # The quote character travels as a parameter, never in the text
        assert query.params == ("O'Brien", 41)
        assert "O'Brien" not in query.text

    def test_insert_empty_uses_default_values(self):
        query = QueryBuilder("users").insert({})

        assert query.text == "INSERT INTO users DEFAULT VALUES RETURNING *"
        assert query.params == ()

    def test_insert_rejects_bad_column(self):
        with pytest.raises(ValidationFailure):
            QueryBuilder("users").insert({"name) VALUES ('x'); --": "y"})

    def test_update_continues_numbering(self):
        query = QueryBuilder("users").update(
            {"id": 1, "org": 4}, {"name": "Bob", "age": 5}
        )

        assert query.text == (
            "UPDATE users SET name = $1, age = $2 WHERE id = $3 AND org = $4 RETURNING *"
        )
        assert query.params == ("Bob", 5, 1, 4)

    def test_update_without_conditions_has_no_where(self):
        query = QueryBuilder("users").update({}, {"name": "Bob"})

        assert query.text == "UPDATE users SET name = $1 RETURNING *"
        assert query.params == ("Bob",)

    def test_update_requires_updates(self):
        with pytest.raises(ValidationFailure):
            QueryBuilder("users").update({"id": 1}, {})

    def test_delete(self):
        query = QueryBuilder("users").delete({"id": 1, "name": "Alice"})

        assert query.text == "DELETE FROM users WHERE id = $1 AND name = $2"
        assert query.params == (1, "Alice")

    def test_delete_returning(self):
        query = QueryBuilder("users").delete({"id": 1}, returning=True)

        assert query.text == "DELETE FROM users WHERE id = $1 RETURNING *"

    def test_delete_requires_conditions(self):
        with pytest.raises(ValidationFailure, match="required for safety"):
            QueryBuilder("users").delete({})

    def test_create_table(self):
        query = QueryBuilder("users").create_table("id SERIAL PRIMARY KEY, name TEXT")

        assert query.text == (
            "CREATE TABLE IF NOT EXISTS users (id SERIAL PRIMARY KEY, name TEXT)"
        )

    def test_create_database(self):
        assert create_database_query("shop").text == 'CREATE DATABASE "shop"'
