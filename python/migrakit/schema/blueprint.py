"""Dialect-agnostic table definitions consumed by the grammars."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ColumnType(str, Enum):
    """Logical column types understood by every grammar."""

    STRING = "string"
    TEXT = "text"
    INTEGER = "integer"
    BIG_INTEGER = "big_integer"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    DATE = "date"
    DECIMAL = "decimal"
    FLOAT = "float"
    UUID = "uuid"
    JSON = "json"
    BINARY = "binary"


@dataclass
class ColumnDefinition:
    """A column on a blueprint.

    Modifiers are plain mutable state. Each modifier method updates this
    instance and returns it so calls can be chained:

        table.string("email").unique().default("")

    Nothing is validated here; a combination the target dialect cannot
    express surfaces when the blueprint is compiled.
    """

    name: str
    type: ColumnType | str
    length: int | None = None
    precision: int | None = None
    scale: int | None = None
    is_nullable: bool = False
    default_value: Any | None = None
    is_primary: bool = False
    is_unique: bool = False
    is_unsigned: bool = False
    is_auto_increment: bool = False

    def nullable(self, value: bool = True) -> ColumnDefinition:
        self.is_nullable = value
        return self

    def default(self, value: Any) -> ColumnDefinition:
        self.default_value = value
        return self

    def primary(self) -> ColumnDefinition:
        self.is_primary = True
        return self

    def unique(self) -> ColumnDefinition:
        self.is_unique = True
        return self

    def unsigned(self) -> ColumnDefinition:
        self.is_unsigned = True
        return self

    def auto_increment(self) -> ColumnDefinition:
        self.is_auto_increment = True
        return self


@dataclass
class IndexDefinition:
    """An index over one or more columns."""

    name: str
    columns: list[str]
    unique: bool = False


@dataclass
class ForeignKeyDefinition:
    """A foreign key from ``column`` to ``ref_table.ref_column``.

    Example:
        table.foreign("user_id").references("id").on("users").on_delete("CASCADE")
    """

    column: str
    name: str
    ref_table: str = ""
    ref_column: str = ""
    delete_action: str = ""
    update_action: str = ""

    def references(self, column: str) -> ForeignKeyDefinition:
        self.ref_column = column
        return self

    def on(self, table: str) -> ForeignKeyDefinition:
        self.ref_table = table
        return self

    def on_delete(self, action: str) -> ForeignKeyDefinition:
        self.delete_action = action
        return self

    def on_update(self, action: str) -> ForeignKeyDefinition:
        self.update_action = action
        return self


class CommandType(str, Enum):
    """Alter-table commands that remove or rename existing objects."""

    DROP_COLUMN = "drop_column"
    RENAME_COLUMN = "rename_column"
    DROP_INDEX = "drop_index"
    DROP_FOREIGN = "drop_foreign"


@dataclass(frozen=True)
class Command:
    """A single alter-table command."""

    type: CommandType
    name: str
    """Column, index or constraint name (the old name for a rename)."""

    to: str | None = None
    """New name for a rename."""


@dataclass
class Blueprint:
    """Description of one CREATE or ALTER operation on ``table``.

    A blueprint is built inside a :class:`~migrakit.schema.builder.SchemaBuilder`
    callback, compiled once by a grammar and then discarded.

    Example:
        def build(table: Blueprint) -> None:
            table.id()
            table.string("name", 100)
            table.foreign("team_id").references("id").on("teams")
    """

    table: str
    _columns: list[ColumnDefinition] = field(default_factory=list, repr=False)
    _indexes: list[IndexDefinition] = field(default_factory=list, repr=False)
    _foreign_keys: list[ForeignKeyDefinition] = field(default_factory=list, repr=False)
    _commands: list[Command] = field(default_factory=list, repr=False)

    @property
    def columns(self) -> list[ColumnDefinition]:
        return list(self._columns)

    @property
    def indexes(self) -> list[IndexDefinition]:
        return list(self._indexes)

    @property
    def foreign_keys(self) -> list[ForeignKeyDefinition]:
        return list(self._foreign_keys)

    @property
    def commands(self) -> list[Command]:
        return list(self._commands)

    # Columns

    def add_column(self, name: str, type_: ColumnType | str, **modifiers: Any) -> ColumnDefinition:
        """Append a column of any logical type.

        Keyword arguments are set directly on the new :class:`ColumnDefinition`.
        """
        column = ColumnDefinition(name=name, type=type_, **modifiers)
        self._columns.append(column)
        return column

    def id(self, name: str = "id") -> ColumnDefinition:
        """Auto-incrementing unsigned big integer primary key."""
        return self.add_column(
            name,
            ColumnType.BIG_INTEGER,
            is_primary=True,
            is_auto_increment=True,
            is_unsigned=True,
        )

    def string(self, name: str, length: int | None = None) -> ColumnDefinition:
        return self.add_column(name, ColumnType.STRING, length=length)

    def text(self, name: str) -> ColumnDefinition:
        return self.add_column(name, ColumnType.TEXT)

    def integer(self, name: str) -> ColumnDefinition:
        return self.add_column(name, ColumnType.INTEGER)

    def big_integer(self, name: str) -> ColumnDefinition:
        return self.add_column(name, ColumnType.BIG_INTEGER)

    def boolean(self, name: str) -> ColumnDefinition:
        return self.add_column(name, ColumnType.BOOLEAN)

    def timestamp(self, name: str) -> ColumnDefinition:
        return self.add_column(name, ColumnType.TIMESTAMP)

    def date(self, name: str) -> ColumnDefinition:
        return self.add_column(name, ColumnType.DATE)

    def decimal(
        self,
        name: str,
        precision: int | None = None,
        scale: int | None = None,
    ) -> ColumnDefinition:
        return self.add_column(name, ColumnType.DECIMAL, precision=precision, scale=scale)

    def float(self, name: str) -> ColumnDefinition:
        return self.add_column(name, ColumnType.FLOAT)

    def uuid(self, name: str) -> ColumnDefinition:
        return self.add_column(name, ColumnType.UUID)

    def json(self, name: str) -> ColumnDefinition:
        return self.add_column(name, ColumnType.JSON)

    def binary(self, name: str) -> ColumnDefinition:
        return self.add_column(name, ColumnType.BINARY)

    def timestamps(self) -> None:
        """Nullable ``created_at`` and ``updated_at`` columns."""
        self.timestamp("created_at").nullable()
        self.timestamp("updated_at").nullable()

    def soft_deletes(self) -> None:
        """Nullable ``deleted_at`` column."""
        self.timestamp("deleted_at").nullable()

    # Indexes and foreign keys

    def index(self, *columns: str) -> IndexDefinition:
        index = IndexDefinition(self._index_name(columns, unique=False), list(columns))
        self._indexes.append(index)
        return index

    def unique_index(self, *columns: str) -> IndexDefinition:
        index = IndexDefinition(self._index_name(columns, unique=True), list(columns), unique=True)
        self._indexes.append(index)
        return index

    def foreign(self, column: str) -> ForeignKeyDefinition:
        foreign_key = ForeignKeyDefinition(column=column, name=f"fk_{self.table}_{column}")
        self._foreign_keys.append(foreign_key)
        return foreign_key

    def _index_name(self, columns: tuple[str, ...], unique: bool) -> str:
        prefix = "uniq" if unique else "idx"
        return "_".join([prefix, self.table, *columns])

    # Alter commands

    def drop_column(self, name: str) -> None:
        self._commands.append(Command(CommandType.DROP_COLUMN, name))

    def rename_column(self, old: str, new: str) -> None:
        self._commands.append(Command(CommandType.RENAME_COLUMN, old, new))

    def drop_index(self, name: str) -> None:
        self._commands.append(Command(CommandType.DROP_INDEX, name))

    def drop_foreign(self, name: str) -> None:
        self._commands.append(Command(CommandType.DROP_FOREIGN, name))
