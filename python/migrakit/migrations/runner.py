"""Migration runner - executes one migration against a database."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from migrakit.errors import TransactionFailedError
from migrakit.migrations.migration import Direction
from migrakit.schema.builder import SchemaBuilder

if TYPE_CHECKING:
    from migrakit.database.connection import Connection, Transaction
    from migrakit.migrations.registry import RegisteredMigration
    from migrakit.schema.grammars.base import Grammar


class Runner:
    """Execute a migration's ``up`` or ``down``.

    Transactional migrations run inside a transaction that is committed on
    success and rolled back on failure. Migrations registered with
    ``transactional = False`` run directly on the connection.

    Example:
        runner = Runner(connection, SQLiteGrammar())
        runner.execute(registry.get("20240101000000_create_users"), "up")
    """

    def __init__(
        self,
        connection: Connection,
        grammar: Grammar | None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the runner.

        Args:
            connection: Connection migrations run against
            grammar: Grammar handed to each migration's schema builder
            logger: Logger to use instead of the module logger
        """
        self.connection = connection
        self.grammar = grammar
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def execute(self, entry: RegisteredMigration, direction: Direction | str) -> None:
        """Run ``entry`` in ``direction``.

        Raises:
            TransactionFailedError: If the transaction cannot begin or commit.
            Exception: Whatever the migration body raised, unchanged.
        """
        direction = Direction(direction)
        if not entry.transactional:
            self.logger.debug("Running %s (%s) without a transaction", entry.name, direction.value)
            self._run(entry, SchemaBuilder(self.connection, self.grammar), direction)
            return
        self.execute_in_transaction(entry, direction)

    def execute_in_transaction(self, entry: RegisteredMigration, direction: Direction | str) -> None:
        """Run ``entry`` inside a transaction.

        A body failure rolls back and re-raises the body's exception; a failed
        rollback at that point is only logged. A commit failure attempts a
        rollback and raises :class:`TransactionFailedError` either way.
        """
        direction = Direction(direction)
        try:
            transaction = self.connection.begin()
        except Exception as e:
            raise TransactionFailedError(f"begin transaction: {e}") from e

        try:
            self._run(entry, SchemaBuilder(transaction, self.grammar), direction)
        except Exception:
            self._rollback_after_error(transaction, entry.name)
            raise

        try:
            transaction.commit()
        except Exception as e:
            try:
                transaction.rollback()
            except Exception as rollback_error:
                raise TransactionFailedError(
                    f"commit: {e}; rollback after commit failure: {rollback_error}"
                ) from e
            raise TransactionFailedError(f"commit: {e}") from e

    def _run(self, entry: RegisteredMigration, schema: SchemaBuilder, direction: Direction) -> None:
        if direction is Direction.UP:
            entry.migration.up(schema)
        else:
            entry.migration.down(schema)

    def _rollback_after_error(self, transaction: Transaction, name: str) -> None:
        try:
            transaction.rollback()
        except Exception as e:
            self.logger.error("Rollback after error in %s failed: %s", name, e)
