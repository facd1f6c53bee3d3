"""PostgreSQL grammar."""

from __future__ import annotations

from migrakit.schema.blueprint import ColumnDefinition, ColumnType
from migrakit.schema.grammars.base import Grammar

_SERIAL_TYPES = (ColumnType.INTEGER, ColumnType.BIG_INTEGER)


class PostgresGrammar(Grammar):
    """Compile blueprints into PostgreSQL SQL.

    Auto-increment integers become SERIAL/BIGSERIAL, which PostgreSQL already
    treats as NOT NULL. Unique indexes are inline constraints, plain indexes
    trailing CREATE INDEX statements.
    """

    dialect = "postgresql"

    def _type_for(self, column: ColumnDefinition, column_type: ColumnType) -> str:
        if column_type == ColumnType.STRING:
            return self._varchar(column)
        if column_type == ColumnType.TEXT:
            return "TEXT"
        if column_type == ColumnType.INTEGER:
            return "SERIAL" if column.is_auto_increment else "INTEGER"
        if column_type == ColumnType.BIG_INTEGER:
            return "BIGSERIAL" if column.is_auto_increment else "BIGINT"
        if column_type == ColumnType.BOOLEAN:
            return "BOOLEAN"
        if column_type == ColumnType.TIMESTAMP:
            return "TIMESTAMPTZ"
        if column_type == ColumnType.DATE:
            return "DATE"
        if column_type == ColumnType.DECIMAL:
            return self._decimal(column)
        if column_type == ColumnType.FLOAT:
            return "DOUBLE PRECISION"
        if column_type == ColumnType.UUID:
            return "UUID"
        if column_type == ColumnType.JSON:
            return "JSONB"
        if column_type == ColumnType.BINARY:
            return "BYTEA"
        raise self._unsupported(column)

    def implicit_not_null(self, column: ColumnDefinition) -> bool:
        return column.is_auto_increment and column.type in _SERIAL_TYPES

    def compile_has_table(self, table: str) -> str:
        return (
            "SELECT COUNT(*) FROM information_schema.tables "
            f"WHERE table_schema = 'public' AND table_name = {self._string_literal(table)}"
        )

    def compile_has_column(self, table: str, column: str) -> str:
        return (
            "SELECT COUNT(*) FROM information_schema.columns "
            f"WHERE table_schema = 'public' AND table_name = {self._string_literal(table)} "
            f"AND column_name = {self._string_literal(column)}"
        )

    def compile_drop_all_tables(self) -> str:
        return "DROP SCHEMA public CASCADE; CREATE SCHEMA public"
