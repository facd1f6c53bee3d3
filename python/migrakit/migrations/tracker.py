"""Bookkeeping of applied migrations in the tracking table."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Any

from migrakit.errors import ConfigError, TrackingTableError

if TYPE_CHECKING:
    from migrakit.database.connection import Executor

DEFAULT_TABLE = "migrations"

_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class MigrationRecord:
    """One row of the tracking table."""

    name: str
    batch: int
    created_at: datetime | None = None


def _to_datetime(value: Any) -> datetime | None:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


class Tracker:
    """Read and write the migration tracking table.

    The table has a fixed shape: ``migration`` (unique), ``batch`` and
    ``created_at``. Rows are only ever inserted or deleted. Every database
    failure is raised as :class:`TrackingTableError`.
    """

    def __init__(self, executor: Executor, table_name: str = DEFAULT_TABLE) -> None:
        if not _TABLE_NAME.match(table_name):
            raise ConfigError(f"invalid tracking table name: {table_name!r}")
        self.executor = executor
        self.table_name = table_name

    def ensure_table(self) -> None:
        """Create the tracking table if it does not exist."""
        sql = (
            f"CREATE TABLE IF NOT EXISTS {self.table_name} ("
            "migration VARCHAR(255) NOT NULL UNIQUE, "
            "batch INTEGER NOT NULL, "
            "created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP)"
        )
        try:
            self.executor.execute(sql)
        except Exception as e:
            raise TrackingTableError(f"ensure tracking table {self.table_name!r}: {e}") from e

    def get_applied(self) -> list[MigrationRecord]:
        """All records ordered by name ascending."""
        sql = (
            f"SELECT migration, batch, created_at FROM {self.table_name} "
            "ORDER BY migration ASC"
        )
        return self._select(sql, (), "get applied migrations")

    def get_by_batch(self, batch: int) -> list[MigrationRecord]:
        """Records of one batch ordered by name ascending."""
        sql = (
            f"SELECT migration, batch, created_at FROM {self.table_name} "
            f"WHERE batch = {self._param} ORDER BY migration ASC"
        )
        return self._select(sql, (batch,), f"get migrations for batch {batch}")

    def get_last_batch_number(self) -> int:
        """Highest batch number, or 0 when nothing is applied."""
        sql = f"SELECT COALESCE(MAX(batch), 0) FROM {self.table_name}"
        try:
            row = self.executor.query_row(sql)
        except Exception as e:
            raise TrackingTableError(f"get last batch number: {e}") from e
        return int(row[0]) if row and row[0] is not None else 0

    def record(self, name: str, batch: int) -> None:
        """Insert a record; inserting an existing name fails."""
        sql = (
            f"INSERT INTO {self.table_name} (migration, batch) "
            f"VALUES ({self._param}, {self._param})"
        )
        try:
            self.executor.execute(sql, (name, batch))
        except Exception as e:
            raise TrackingTableError(f"record migration {name!r}: {e}") from e

    def remove(self, name: str) -> None:
        """Delete the record for ``name``."""
        sql = f"DELETE FROM {self.table_name} WHERE migration = {self._param}"
        try:
            self.executor.execute(sql, (name,))
        except Exception as e:
            raise TrackingTableError(f"remove migration {name!r}: {e}") from e

    @property
    def _param(self) -> str:
        return self.executor.placeholder

    def _select(self, sql: str, params: tuple[Any, ...], action: str) -> list[MigrationRecord]:
        try:
            rows = self.executor.execute(sql, params).all()
            return [
                MigrationRecord(name=row[0], batch=int(row[1]), created_at=_to_datetime(row[2]))
                for row in rows
            ]
        except Exception as e:
            raise TrackingTableError(f"{action}: {e}") from e


class BatchManager:
    """Batch arithmetic on top of a :class:`Tracker`."""

    def __init__(self, tracker: Tracker) -> None:
        self.tracker = tracker

    def next_batch_number(self) -> int:
        return self.tracker.get_last_batch_number() + 1

    def get_last_batch(self) -> list[MigrationRecord]:
        """Records of the most recent batch in ascending name order (empty if none)."""
        last = self.tracker.get_last_batch_number()
        if last == 0:
            return []
        return self.tracker.get_by_batch(last)

    def get_last_n_migrations(self, n: int) -> list[MigrationRecord]:
        """The last ``n`` applied migrations, most recent first.

        Clamped to the number applied; empty for ``n <= 0``.
        """
        if n <= 0:
            return []
        applied = self.tracker.get_applied()
        return list(reversed(applied[-n:])) if applied else []
