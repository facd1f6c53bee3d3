"""Schema builder - compile blueprints and execute them."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from migrakit.errors import ConfigError
from migrakit.schema.blueprint import Blueprint

if TYPE_CHECKING:
    from migrakit.database.connection import Executor
    from migrakit.schema.grammars.base import Grammar


class SchemaBuilder:
    """Schema operations bound to one executor and one grammar.

    The executor is either an open transaction or a plain connection, so the
    same migration code runs with or without transaction wrapping.

    Example:
        def up(schema: SchemaBuilder) -> None:
            def users(table: Blueprint) -> None:
                table.id()
                table.string("email").unique()
                table.timestamps()

            schema.create("users", users)
    """

    def __init__(self, executor: Executor, grammar: Grammar | None) -> None:
        self.executor = executor
        self._grammar = grammar

    @property
    def grammar(self) -> Grammar:
        if self._grammar is None:
            raise ConfigError("schema builder has no grammar configured")
        return self._grammar

    def create(self, table: str, build: Callable[[Blueprint], None]) -> None:
        """Create a table from the blueprint filled in by ``build``."""
        blueprint = Blueprint(table)
        build(blueprint)
        self.executor.execute(self.grammar.compile_create(blueprint))

    def alter(self, table: str, build: Callable[[Blueprint], None]) -> None:
        """Alter a table, running statements in order and stopping at the first failure."""
        blueprint = Blueprint(table)
        build(blueprint)
        for statement in self.grammar.compile_alter(blueprint):
            self.executor.execute(statement)

    def drop(self, table: str) -> None:
        self.executor.execute(self.grammar.compile_drop(table))

    def drop_if_exists(self, table: str) -> None:
        self.executor.execute(self.grammar.compile_drop_if_exists(table))

    def rename(self, old: str, new: str) -> None:
        self.executor.execute(self.grammar.compile_rename(old, new))

    def has_table(self, table: str) -> bool:
        return self._count(self.grammar.compile_has_table(table)) > 0

    def has_column(self, table: str, column: str) -> bool:
        return self._count(self.grammar.compile_has_column(table, column)) > 0

    def execute(self, sql: str) -> None:
        """Run raw SQL on the bound executor."""
        self.executor.execute(sql)

    def _count(self, sql: str) -> int:
        row = self.executor.query_row(sql)
        return int(row[0]) if row else 0
