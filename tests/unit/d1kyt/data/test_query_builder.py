"""Tests for the compile-only query builder."""

import pytest

from d1kyt.data.query_builder import CompiledQuery, QueryBuilder, create_query_builder
from d1kyt.domain.exceptions import QueryBuilderError
from d1kyt.migrate import use_table


class TestCreateQueryBuilder:
    """Verify the builder entry point."""

    def test_returns_builder(self):
        """create_query_builder returns a QueryBuilder."""
        assert isinstance(create_query_builder(), QueryBuilder)


class TestSelect:
    """Verify SELECT compilation."""

    def test_select_all(self, qb):
        """select_all compiles to SELECT * without parameters."""
        q = qb.select_from("User").select_all().compile()
        assert q == CompiledQuery('SELECT * FROM "User"', ())

    def test_where_binds_parameter(self, qb):
        """where() values become positional parameters."""
        q = qb.select_from("User").select_all().where("id", "=", 1).compile()
        assert q.sql == 'SELECT * FROM "User" WHERE "id" = ?'
        assert q.parameters == (1,)

    def test_select_columns(self, qb):
        """Selected columns are quoted."""
        q = qb.select_from("User").select("id", "name").compile()
        assert q.sql == 'SELECT "id", "name" FROM "User"'

    def test_multiple_conditions_and(self, qb):
        """Several where() calls are ANDed in order."""
        q = (
            qb.select_from("User")
            .select_all()
            .where("name", "=", "a")
            .where("id", ">", 3)
            .compile()
        )
        assert q.sql == 'SELECT * FROM "User" WHERE "name" = ? AND "id" > ?'
        assert q.parameters == ("a", 3)

    def test_in_operator(self, qb):
        """IN binds one placeholder per value."""
        q = qb.select_from("User").select_all().where("id", "in", [1, 2, 3]).compile()
        assert q.sql == 'SELECT * FROM "User" WHERE "id" IN (?, ?, ?)'
        assert q.parameters == (1, 2, 3)

    def test_is_null(self, qb):
        """IS compares against NULL without a parameter."""
        q = qb.select_from("User").select_all().where("name", "is", None).compile()
        assert q.sql == 'SELECT * FROM "User" WHERE "name" IS NULL'
        assert q.parameters == ()

    def test_table_reference(self, qb):
        """Table references are accepted in place of names."""
        q = qb.select_from(use_table("Place")).select_all().compile()
        assert q.sql == 'SELECT * FROM "Place"'

    def test_builder_immutable(self, qb):
        """Chained calls do not modify the original builder."""
        base = qb.select_from("User").select_all()
        base.where("id", "=", 1)
        assert base.compile().parameters == ()

    def test_unknown_operator(self, qb):
        """Unsupported operators raise QueryBuilderError."""
        with pytest.raises(QueryBuilderError, match="Unsupported operator"):
            qb.select_from("User").where("id", "~", 1)

    def test_is_requires_none(self, qb):
        """IS only accepts None."""
        with pytest.raises(QueryBuilderError):
            qb.select_from("User").where("id", "is", 1)

    def test_empty_in_list(self, qb):
        """IN with no values cannot compile."""
        with pytest.raises(QueryBuilderError, match="Empty IN"):
            qb.select_from("User").where("id", "in", []).compile()


class TestInsert:
    """Verify INSERT compilation."""

    def test_insert_values(self, qb):
        """Columns follow mapping order, values are bound."""
        q = (
            qb.insert_into("User")
            .values({"id": 1, "name": "Test", "email": "test@example.com"})
            .compile()
        )
        assert q.sql == 'INSERT INTO "User" ("id", "name", "email") VALUES (?, ?, ?)'
        assert q.parameters == (1, "Test", "test@example.com")

    def test_insert_many(self, qb):
        """Several rows produce several value tuples."""
        q = qb.insert_into("User").values([{"name": "a"}, {"name": "b"}]).compile()
        assert q.sql == 'INSERT INTO "User" ("name") VALUES (?), (?)'
        assert q.parameters == ("a", "b")

    def test_insert_without_values(self, qb):
        """INSERT needs values."""
        with pytest.raises(QueryBuilderError):
            qb.insert_into("User").compile()

    def test_mismatched_rows(self, qb):
        """All rows must share columns."""
        with pytest.raises(QueryBuilderError, match="columns"):
            qb.insert_into("User").values([{"a": 1}, {"b": 2}]).compile()


class TestUpdate:
    """Verify UPDATE compilation."""

    def test_update(self, qb):
        """SET parameters precede WHERE parameters."""
        q = qb.update_table("User").set({"name": "Updated"}).where("id", "=", 1).compile()
        assert q.sql == 'UPDATE "User" SET "name" = ? WHERE "id" = ?'
        assert q.parameters == ("Updated", 1)

    def test_update_without_set(self, qb):
        """UPDATE needs at least one assignment."""
        with pytest.raises(QueryBuilderError, match="SET"):
            qb.update_table("User").where("id", "=", 1).compile()


class TestDelete:
    """Verify DELETE compilation."""

    def test_delete(self, qb):
        """DELETE with a filter."""
        q = qb.delete_from("User").where("id", "=", 1).compile()
        assert q.sql == 'DELETE FROM "User" WHERE "id" = ?'
        assert q.parameters == (1,)

    def test_delete_all(self, qb):
        """DELETE without filter has no WHERE."""
        assert qb.delete_from("User").compile().sql == 'DELETE FROM "User"'
