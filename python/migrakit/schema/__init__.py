"""Schema definition and SQL compilation."""

from __future__ import annotations

from migrakit.schema.blueprint import (
    Blueprint,
    ColumnDefinition,
    ColumnType,
    Command,
    CommandType,
    ForeignKeyDefinition,
    IndexDefinition,
)
from migrakit.schema.builder import SchemaBuilder
from migrakit.schema.grammars import (
    Grammar,
    MySQLGrammar,
    PostgresGrammar,
    SQLiteGrammar,
    get_grammar,
)

__all__ = [
    # Blueprint
    "Blueprint",
    "ColumnDefinition",
    "ColumnType",
    "Command",
    "CommandType",
    "ForeignKeyDefinition",
    "IndexDefinition",
    # Builder
    "SchemaBuilder",
    # Grammars
    "Grammar",
    "MySQLGrammar",
    "PostgresGrammar",
    "SQLiteGrammar",
    "get_grammar",
]
