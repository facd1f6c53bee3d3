"""Shared compilation logic for the SQL grammars."""

from __future__ import annotations

from typing import Any

from migrakit.errors import SchemaError, UnsupportedTypeError
from migrakit.schema.blueprint import (
    Blueprint,
    ColumnDefinition,
    ColumnType,
    Command,
    CommandType,
    ForeignKeyDefinition,
    IndexDefinition,
)


class Grammar:
    """Compile blueprints into SQL for one dialect.

    Grammars are pure: they never touch a connection. Subclasses provide the
    identifier quoting, the column type mapping and the statements that
    differ between dialects; the clause ordering lives here so all dialects
    agree on structure.
    """

    dialect: str = ""
    """Dialect name (``postgresql``, ``mysql`` or ``sqlite``)."""

    inline_indexes: bool = False
    """Emit non-unique indexes inside CREATE TABLE instead of as trailing statements."""

    # Identifiers and literals

    def quote(self, name: str) -> str:
        return f'"{name}"'

    def quote_columns(self, names: list[str]) -> str:
        return ", ".join(self.quote(name) for name in names)

    def format_default(self, value: Any) -> str:
        """Render a DEFAULT literal."""
        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"
        if isinstance(value, str):
            return self._string_literal(value)
        return str(value)

    def _string_literal(self, value: str) -> str:
        escaped = value.replace("'", "''")
        return f"'{escaped}'"

    # Column types

    def compile_column_type(self, column: ColumnDefinition) -> str:
        """Return the dialect type for ``column``.

        Raises:
            UnsupportedTypeError: If the logical type has no mapping.
        """
        try:
            column_type = ColumnType(column.type)
        except ValueError:
            raise self._unsupported(column) from None
        return self._type_for(column, column_type)

    def _type_for(self, column: ColumnDefinition, column_type: ColumnType) -> str:
        raise NotImplementedError

    def _unsupported(self, column: ColumnDefinition) -> UnsupportedTypeError:
        type_name = column.type.value if isinstance(column.type, ColumnType) else column.type
        return UnsupportedTypeError(
            f"column {column.name!r}: type {type_name!r}: unsupported column type"
        )

    @staticmethod
    def _varchar(column: ColumnDefinition) -> str:
        length = column.length if column.length and column.length > 0 else 255
        return f"VARCHAR({length})"

    @staticmethod
    def _decimal(column: ColumnDefinition) -> str:
        precision = column.precision if column.precision and column.precision > 0 else 10
        scale = column.scale if column.scale and column.scale > 0 else 0
        return f"DECIMAL({precision}, {scale})"

    # Column clauses

    def implicit_not_null(self, column: ColumnDefinition) -> bool:
        """Whether the dialect already makes this column NOT NULL."""
        return False

    def inline_primary_key(self, column: ColumnDefinition) -> bool:
        """Whether the column type already carries PRIMARY KEY."""
        return False

    def compile_column(self, column: ColumnDefinition) -> str:
        """Compile ``name TYPE [NOT NULL] [DEFAULT x] [UNIQUE]``."""
        parts = [self.quote(column.name), self.compile_column_type(column)]

        if not column.is_nullable and not self.implicit_not_null(column):
            parts.append("NOT NULL")

        if column.default_value is not None:
            parts.append(f"DEFAULT {self.format_default(column.default_value)}")

        if column.is_unique:
            parts.append("UNIQUE")

        return " ".join(parts)

    def compile_foreign_key(self, foreign_key: ForeignKeyDefinition) -> str:
        sql = (
            f"CONSTRAINT {self.quote(foreign_key.name)} "
            f"FOREIGN KEY ({self.quote(foreign_key.column)}) "
            f"REFERENCES {self.quote(foreign_key.ref_table)} ({self.quote(foreign_key.ref_column)})"
        )
        if foreign_key.delete_action:
            sql += f" ON DELETE {foreign_key.delete_action}"
        if foreign_key.update_action:
            sql += f" ON UPDATE {foreign_key.update_action}"
        return sql

    def compile_unique_constraint(self, index: IndexDefinition) -> str:
        return f"CONSTRAINT {self.quote(index.name)} UNIQUE ({self.quote_columns(index.columns)})"

    def compile_inline_index(self, index: IndexDefinition) -> str:
        raise NotImplementedError

    def compile_create_index(self, table: str, index: IndexDefinition) -> str:
        unique = "UNIQUE " if index.unique else ""
        return (
            f"CREATE {unique}INDEX {self.quote(index.name)} "
            f"ON {self.quote(table)} ({self.quote_columns(index.columns)})"
        )

    # Blueprint compilation

    def compile_create(self, blueprint: Blueprint) -> str:
        """Generate CREATE TABLE SQL.

        Non-unique indexes on dialects without inline index syntax follow as
        ``; CREATE INDEX`` statements in the same string.

        Raises:
            SchemaError: If the blueprint defines no columns.
            UnsupportedTypeError: If a column type cannot be represented.
        """
        columns = blueprint.columns
        if not columns:
            raise SchemaError(f"table {blueprint.table!r}: no columns defined")

        parts = [self.compile_column(column) for column in columns]

        primary = [c.name for c in columns if c.is_primary and not self.inline_primary_key(c)]
        if primary:
            parts.append(f"PRIMARY KEY ({self.quote_columns(primary)})")

        indexes = blueprint.indexes
        for index in indexes:
            if index.unique:
                parts.append(self.compile_unique_constraint(index))
        if self.inline_indexes:
            parts.extend(self.compile_inline_index(i) for i in indexes if not i.unique)

        parts.extend(self.compile_foreign_key(fk) for fk in blueprint.foreign_keys)

        sql = f"CREATE TABLE {self.quote(blueprint.table)} ({', '.join(parts)})"

        if not self.inline_indexes:
            for index in indexes:
                if not index.unique:
                    sql += "; " + self.compile_create_index(blueprint.table, index)

        return sql

    def compile_alter(self, blueprint: Blueprint) -> list[str]:
        """Generate ALTER statements, one per change.

        Order: added columns, commands, new indexes, new foreign keys.
        """
        table = self.quote(blueprint.table)
        statements = [
            f"ALTER TABLE {table} ADD COLUMN {self.compile_column(column)}"
            for column in blueprint.columns
        ]
        statements.extend(self.compile_command(blueprint.table, c) for c in blueprint.commands)
        statements.extend(self.compile_create_index(blueprint.table, i) for i in blueprint.indexes)
        statements.extend(
            f"ALTER TABLE {table} ADD {self.compile_foreign_key(fk)}"
            for fk in blueprint.foreign_keys
        )
        return statements

    def compile_command(self, table: str, command: Command) -> str:
        quoted = self.quote(table)
        if command.type == CommandType.DROP_COLUMN:
            return f"ALTER TABLE {quoted} DROP COLUMN {self.quote(command.name)}"
        if command.type == CommandType.RENAME_COLUMN:
            return (
                f"ALTER TABLE {quoted} RENAME COLUMN "
                f"{self.quote(command.name)} TO {self.quote(command.to or '')}"
            )
        if command.type == CommandType.DROP_INDEX:
            return self.compile_drop_index(table, command.name)
        if command.type == CommandType.DROP_FOREIGN:
            return self.compile_drop_foreign(table, command.name)
        raise SchemaError(f"table {table!r}: unknown alter command {command.type!r}")

    def compile_drop_index(self, table: str, name: str) -> str:
        return f"DROP INDEX {self.quote(name)}"

    def compile_drop_foreign(self, table: str, name: str) -> str:
        return f"ALTER TABLE {self.quote(table)} DROP CONSTRAINT {self.quote(name)}"

    # Table statements

    def compile_drop(self, table: str) -> str:
        return f"DROP TABLE {self.quote(table)}"

    def compile_drop_if_exists(self, table: str) -> str:
        return f"DROP TABLE IF EXISTS {self.quote(table)}"

    def compile_rename(self, old: str, new: str) -> str:
        return f"ALTER TABLE {self.quote(old)} RENAME TO {self.quote(new)}"

    def compile_has_table(self, table: str) -> str:
        raise NotImplementedError

    def compile_has_column(self, table: str, column: str) -> str:
        raise NotImplementedError

    def compile_drop_all_tables(self) -> str:
        raise NotImplementedError

    def compile_get_all_tables(self) -> str | None:
        """Listing query for dialects whose drop-all statement does not drop tables itself."""
        return None

    def compile_enable_foreign_keys(self) -> str | None:
        """Statement undoing what :meth:`compile_drop_all_tables` disabled, if anything."""
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
