"""MySQL grammar."""

from __future__ import annotations

from migrakit.schema.blueprint import ColumnDefinition, ColumnType, IndexDefinition
from migrakit.schema.grammars.base import Grammar


class MySQLGrammar(Grammar):
    """Compile blueprints into MySQL SQL.

    Identifiers are backtick-quoted and every index is declared inside
    CREATE TABLE (``UNIQUE KEY`` / ``KEY``).
    """

    dialect = "mysql"
    inline_indexes = True

    def quote(self, name: str) -> str:
        return f"`{name}`"

    def _type_for(self, column: ColumnDefinition, column_type: ColumnType) -> str:
        if column_type == ColumnType.STRING:
            return self._varchar(column)
        if column_type == ColumnType.TEXT:
            return "TEXT"
        if column_type == ColumnType.INTEGER:
            return self._integer("INT", column)
        if column_type == ColumnType.BIG_INTEGER:
            return self._integer("BIGINT", column)
        if column_type == ColumnType.BOOLEAN:
            return "TINYINT(1)"
        if column_type == ColumnType.TIMESTAMP:
            return "TIMESTAMP"
        if column_type == ColumnType.DATE:
            return "DATE"
        if column_type == ColumnType.DECIMAL:
            return self._decimal(column)
        if column_type == ColumnType.FLOAT:
            return "DOUBLE"
        if column_type == ColumnType.UUID:
            return "CHAR(36)"
        if column_type == ColumnType.JSON:
            return "JSON"
        if column_type == ColumnType.BINARY:
            return "BLOB"
        raise self._unsupported(column)

    @staticmethod
    def _integer(base: str, column: ColumnDefinition) -> str:
        if column.is_unsigned:
            base += " UNSIGNED"
        if column.is_auto_increment:
            base += " AUTO_INCREMENT"
        return base

    def compile_unique_constraint(self, index: IndexDefinition) -> str:
        return f"UNIQUE KEY {self.quote(index.name)} ({self.quote_columns(index.columns)})"

    def compile_inline_index(self, index: IndexDefinition) -> str:
        return f"KEY {self.quote(index.name)} ({self.quote_columns(index.columns)})"

    def compile_drop_index(self, table: str, name: str) -> str:
        return f"ALTER TABLE {self.quote(table)} DROP INDEX {self.quote(name)}"

    def compile_drop_foreign(self, table: str, name: str) -> str:
        return f"ALTER TABLE {self.quote(table)} DROP FOREIGN KEY {self.quote(name)}"

    def compile_rename(self, old: str, new: str) -> str:
        return f"RENAME TABLE {self.quote(old)} TO {self.quote(new)}"

    def compile_has_table(self, table: str) -> str:
        return (
            "SELECT COUNT(*) FROM information_schema.tables "
            f"WHERE table_schema = DATABASE() AND table_name = {self._string_literal(table)}"
        )

    def compile_has_column(self, table: str, column: str) -> str:
        return (
            "SELECT COUNT(*) FROM information_schema.columns "
            f"WHERE table_schema = DATABASE() AND table_name = {self._string_literal(table)} "
            f"AND column_name = {self._string_literal(column)}"
        )

    def compile_drop_all_tables(self) -> str:
        return "SET FOREIGN_KEY_CHECKS = 0"

    def compile_get_all_tables(self) -> str:
        return (
            "SELECT table_name FROM information_schema.tables "
            "WHERE table_schema = DATABASE() AND table_type = 'BASE TABLE'"
        )

    def compile_enable_foreign_keys(self) -> str:
        return "SET FOREIGN_KEY_CHECKS = 1"
