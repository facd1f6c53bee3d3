"""SQLite grammar."""

from __future__ import annotations

from migrakit.schema.blueprint import ColumnDefinition, ColumnType
from migrakit.schema.grammars.base import Grammar

_INTEGER_TYPES = (ColumnType.INTEGER, ColumnType.BIG_INTEGER)


class SQLiteGrammar(Grammar):
    """Compile blueprints into SQLite SQL.

    SQLite stores most logical types as TEXT, INTEGER, REAL or BLOB. An
    auto-increment integer primary key is declared inline as
    ``INTEGER PRIMARY KEY AUTOINCREMENT`` and takes no further modifiers.

    Dropping a foreign key compiles to ``ALTER TABLE ... DROP CONSTRAINT``,
    which SQLite itself rejects; the statement is still emitted so the
    failure is visible when it runs.
    """

    dialect = "sqlite"

    def _type_for(self, column: ColumnDefinition, column_type: ColumnType) -> str:
        if column_type in (ColumnType.STRING, ColumnType.TEXT):
            return "TEXT"
        if column_type in _INTEGER_TYPES:
            if column.is_primary and column.is_auto_increment:
                return "INTEGER PRIMARY KEY AUTOINCREMENT"
            return "INTEGER"
        if column_type == ColumnType.BOOLEAN:
            return "INTEGER"
        if column_type in (ColumnType.TIMESTAMP, ColumnType.DATE):
            return "TEXT"
        if column_type in (ColumnType.DECIMAL, ColumnType.FLOAT):
            return "REAL"
        if column_type in (ColumnType.UUID, ColumnType.JSON):
            return "TEXT"
        if column_type == ColumnType.BINARY:
            return "BLOB"
        raise self._unsupported(column)

    def inline_primary_key(self, column: ColumnDefinition) -> bool:
        return column.is_primary and column.is_auto_increment and column.type in _INTEGER_TYPES

    def implicit_not_null(self, column: ColumnDefinition) -> bool:
        return self.inline_primary_key(column)

    def compile_column(self, column: ColumnDefinition) -> str:
        if self.inline_primary_key(column):
            return f"{self.quote(column.name)} {self.compile_column_type(column)}"
        return super().compile_column(column)

    def compile_has_table(self, table: str) -> str:
        return (
            "SELECT COUNT(*) FROM sqlite_master "
            f"WHERE type = 'table' AND name = {self._string_literal(table)}"
        )

    def compile_has_column(self, table: str, column: str) -> str:
        return (
            f"SELECT COUNT(*) FROM pragma_table_info({self._string_literal(table)}) "
            f"WHERE name = {self._string_literal(column)}"
        )

    def compile_drop_all_tables(self) -> str:
        return "PRAGMA foreign_keys = OFF"

    def compile_get_all_tables(self) -> str:
        return "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%'"

    def compile_enable_foreign_keys(self) -> str:
        return "PRAGMA foreign_keys = ON"
