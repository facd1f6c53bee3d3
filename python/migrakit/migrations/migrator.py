"""Migrator - lifecycle operations over the registered migration set."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from migrakit.errors import ConfigError, error_context
from migrakit.migrations.hooks import AfterHook, BeforeHook, HookManager
from migrakit.migrations.migration import Direction
from migrakit.migrations.registry import MigrationRegistry, RegisteredMigration
from migrakit.migrations.runner import Runner
from migrakit.migrations.script import load_migrations
from migrakit.migrations.tracker import DEFAULT_TABLE, BatchManager, MigrationRecord, Tracker

if TYPE_CHECKING:
    from migrakit.database.connection import Connection
    from migrakit.schema.grammars.base import Grammar


@dataclass(frozen=True)
class MigrationStatus:
    """Applied state of one registered migration."""

    name: str
    applied: bool
    batch: int = 0
    applied_at: datetime | None = None


class Migrator:
    """Run, roll back and report on migrations.

    Operations stop at the first failure. Migrations that completed before the
    failure stay recorded (or removed, when rolling back); nothing is undone
    retroactively.

    Example:
        migrator = Migrator(connection, grammar=SQLiteGrammar())
        migrator.register("20240101000000_create_users", CreateUsers())
        migrator.up()
        migrator.rollback()
    """

    def __init__(
        self,
        connection: Connection,
        *,
        grammar: Grammar | None = None,
        table_name: str = DEFAULT_TABLE,
        logger: logging.Logger | None = None,
    ) -> None:
        """Initialize the migrator.

        Args:
            connection: Connection holding the tracking table and the schema
            grammar: Dialect grammar used by schema builders and :meth:`fresh`
            table_name: Name of the tracking table
            logger: Logger to use instead of the module logger
        """
        self.connection = connection
        self.grammar = grammar
        self.logger = logger if logger is not None else logging.getLogger(__name__)
        self.registry = MigrationRegistry()
        self.tracker = Tracker(connection, table_name)
        self.batches = BatchManager(self.tracker)
        self.hooks = HookManager()
        self.runner = Runner(connection, grammar, logger=self.logger)

    # Registration

    def register(self, name: str, migration: Any) -> RegisteredMigration:
        return self.registry.register(name, migration)

    def load(self, directory: str | Path) -> list[str]:
        """Register every migration file found in ``directory``.

        Returns:
            Names registered, in ascending order
        """
        return [self.register(script.name, script).name for script in load_migrations(directory)]

    def before_migrate(self, hook: BeforeHook) -> BeforeHook:
        """Register a before hook; usable as a decorator."""
        return self.hooks.register_before(hook)

    def after_migrate(self, hook: AfterHook) -> AfterHook:
        """Register an after hook; usable as a decorator."""
        return self.hooks.register_after(hook)

    # Lifecycle

    def up(self) -> list[str]:
        """Apply every pending migration as one batch.

        Returns:
            Names applied, in ascending order
        """
        self.tracker.ensure_table()
        applied = {record.name for record in self.tracker.get_applied()}
        pending = [entry for entry in self.registry.get_all() if entry.name not in applied]
        if not pending:
            self.logger.info("Nothing to migrate")
            return []

        batch = self.batches.next_batch_number()
        self.logger.info("Running %d migration(s) in batch %d", len(pending), batch)
        done = []
        for entry in pending:
            self._migrate(entry, Direction.UP, batch)
            done.append(entry.name)
        return done

    def rollback(self, steps: int = 0) -> list[str]:
        """Roll back the last batch, or the last ``steps`` migrations when ``steps > 0``.

        Returns:
            Names rolled back, most recent first
        """
        self.tracker.ensure_table()
        if steps > 0:
            records = self.batches.get_last_n_migrations(steps)
        else:
            records = list(reversed(self.batches.get_last_batch()))
        return self._roll_back(records)

    def reset(self) -> list[str]:
        """Roll back every applied migration in descending name order."""
        self.tracker.ensure_table()
        return self._roll_back(list(reversed(self.tracker.get_applied())))

    def refresh(self) -> list[str]:
        """Reset, then migrate again.

        Returns:
            Names applied by the up phase
        """
        with error_context("refresh reset phase"):
            self.reset()
        with error_context("refresh up phase"):
            return self.up()

    def fresh(self) -> list[str]:
        """Drop every table, tracking table included, then migrate.

        Raises:
            ConfigError: If the migrator has no grammar. Nothing is dropped.
        """
        if self.grammar is None:
            raise ConfigError("fresh: no grammar configured")
        grammar = self.grammar

        self.logger.info("Dropping all tables")
        with error_context("fresh drop all tables"):
            self.connection.execute(grammar.compile_drop_all_tables())
            listing = grammar.compile_get_all_tables()
            if listing is not None:
                for row in self.connection.execute(listing).all():
                    self.connection.execute(grammar.compile_drop_if_exists(row[0]))
            enable = grammar.compile_enable_foreign_keys()
            if enable is not None:
                self.connection.execute(enable)
        return self.up()

    def status(self) -> list[MigrationStatus]:
        """One entry per registered migration, in ascending name order."""
        self.tracker.ensure_table()
        applied = {record.name: record for record in self.tracker.get_applied()}
        statuses = []
        for entry in self.registry.get_all():
            record = applied.get(entry.name)
            if record is None:
                statuses.append(MigrationStatus(entry.name, applied=False))
            else:
                statuses.append(
                    MigrationStatus(
                        entry.name,
                        applied=True,
                        batch=record.batch,
                        applied_at=record.created_at,
                    )
                )
        return statuses

    # Internals

    def _roll_back(self, records: list[MigrationRecord]) -> list[str]:
        if not records:
            self.logger.info("Nothing to roll back")
            return []
        done = []
        for record in records:
            with error_context(f"rollback {record.name!r}"):
                entry = self.registry.get(record.name)
            self._migrate(entry, Direction.DOWN)
            done.append(entry.name)
        return done

    def _migrate(self, entry: RegisteredMigration, direction: Direction, batch: int = 0) -> None:
        name = entry.name
        with error_context(f"before hook for {name!r}"):
            self.hooks.run_before(name, direction.value)

        verb = "Migrating" if direction is Direction.UP else "Rolling back"
        self.logger.info("%s: %s", verb, name)
        start = time.perf_counter()
        try:
            with error_context(f"migration {name!r} {direction.value}"):
                self.runner.execute(entry, direction)
        except Exception as e:
            self.logger.error("%s failed: %s", name, e)
            raise

        if direction is Direction.UP:
            self.tracker.record(name, batch)
        else:
            self.tracker.remove(name)

        duration = time.perf_counter() - start
        self.hooks.run_after(name, direction.value, duration)
        done = "Migrated" if direction is Direction.UP else "Rolled back"
        self.logger.info("%s: %s (%.2fms)", done, name, duration * 1000)

