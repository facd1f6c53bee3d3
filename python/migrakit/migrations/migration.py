"""Migration base class."""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from migrakit.schema.builder import SchemaBuilder


class Direction(str, Enum):
    """Direction a migration is executed in."""

    UP = "up"
    DOWN = "down"


class Migration:
    """A reversible schema change.

    Subclasses implement :meth:`up` and :meth:`down`. Set ``transactional``
    to ``False`` for statements that cannot run inside a transaction (for
    example ``CREATE INDEX CONCURRENTLY`` on PostgreSQL).

    Example:
        class CreateUsersTable(Migration):
            def up(self, schema):
                schema.create("users", lambda table: (table.id(), table.string("name")))

            def down(self, schema):
                schema.drop_if_exists("users")
    """

    transactional: ClassVar[bool] = True

    def up(self, schema: SchemaBuilder) -> None:
        raise NotImplementedError

    def down(self, schema: SchemaBuilder) -> None:
        raise NotImplementedError
