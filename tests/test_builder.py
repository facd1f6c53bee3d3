"""Tests for the schema builder against SQLite."""

from __future__ import annotations

import pytest

from migrakit.errors import ConfigError
from migrakit.schema.blueprint import Blueprint
from migrakit.schema.builder import SchemaBuilder
from migrakit.schema.grammars import SQLiteGrammar


@pytest.fixture
def schema(sqlite_connection) -> SchemaBuilder:
    return SchemaBuilder(sqlite_connection, SQLiteGrammar())


def create_users(table: Blueprint) -> None:
    table.id()
    table.string("email").unique()
    table.string("name", 100).nullable()
    table.index("name")


class TestSchemaBuilder:
    """Test table operations executed through the builder."""

    def test_create_and_has_table(self, schema: SchemaBuilder) -> None:
        """create() runs the table and its trailing index statements."""
        schema.create("users", create_users)

        assert schema.has_table("users")
        assert schema.has_column("users", "email")
        assert not schema.has_column("users", "missing")
        index = schema.executor.query_row(
            "SELECT name FROM sqlite_master WHERE type = 'index' AND name = 'idx_users_name'"
        )
        assert index == ("idx_users_name",)

    def test_alter_adds_and_renames(self, schema: SchemaBuilder) -> None:
        """alter() runs each statement in order."""
        schema.create("users", create_users)

        def change(table: Blueprint) -> None:
            table.integer("age").nullable()
            table.rename_column("name", "full_name")

        schema.alter("users", change)

        assert schema.has_column("users", "age")
        assert schema.has_column("users", "full_name")
        assert not schema.has_column("users", "name")

    def test_rename_and_drop(self, schema: SchemaBuilder) -> None:
        """rename(), drop() and drop_if_exists()."""
        schema.create("users", create_users)

        schema.rename("users", "members")
        assert not schema.has_table("users")
        assert schema.has_table("members")

        schema.drop("members")
        assert not schema.has_table("members")
        schema.drop_if_exists("members")

    def test_create_rejected_by_database(self, schema: SchemaBuilder) -> None:
        """Database errors propagate unchanged."""
        schema.create("users", create_users)

        with pytest.raises(Exception, match="already exists"):
            schema.create("users", create_users)

    def test_raw_execute(self, schema: SchemaBuilder) -> None:
        """execute() runs raw SQL on the bound executor."""
        schema.execute("CREATE TABLE raw_table (id INTEGER)")
        assert schema.has_table("raw_table")

    def test_missing_grammar(self, sqlite_connection) -> None:
        """Schema operations need a grammar."""
        schema = SchemaBuilder(sqlite_connection, None)

        with pytest.raises(ConfigError, match="no grammar"):
            schema.create("users", create_users)
