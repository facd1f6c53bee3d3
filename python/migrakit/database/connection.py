"""SQL execution capabilities used by the schema builder, tracker and runner.

The engine only needs three things from a database: execute a statement,
read one row, and open a transaction. :class:`DBAPIConnection` provides them
for any PEP 249 driver; :class:`SQLiteConnection` adapts the standard
library ``sqlite3`` module so that DDL runs inside real transactions.
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from migrakit.errors import TransactionFailedError

logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    """Rows and row count produced by one statement."""

    rows: list[tuple[Any, ...]] = field(default_factory=list)
    rowcount: int = -1

    def first(self) -> tuple[Any, ...] | None:
        return self.rows[0] if self.rows else None

    def all(self) -> list[tuple[Any, ...]]:
        return list(self.rows)

    def scalar(self) -> Any:
        """First column of the first row, or None."""
        row = self.first()
        return row[0] if row else None


@runtime_checkable
class Executor(Protocol):
    """Anything that can run SQL: a connection or an open transaction."""

    dialect: str
    placeholder: str
    """Parameter marker understood by the driver (``?`` or ``%s``)."""

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> QueryResult:
        ...

    def query_row(self, sql: str, params: Sequence[Any] | None = None) -> tuple[Any, ...] | None:
        ...


@runtime_checkable
class Transaction(Executor, Protocol):
    """An open transaction."""

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...


@runtime_checkable
class Connection(Executor, Protocol):
    """A connection that can start transactions."""

    def begin(self) -> Transaction:
        ...

    def close(self) -> None:
        ...


def split_statements(sql: str) -> list[str]:
    """Split SQL text on top-level semicolons.

    Semicolons inside quoted strings or quoted identifiers are kept.
    ``--`` line comments and ``/* */`` block comments are dropped.
    """
    statements: list[str] = []
    current: list[str] = []
    quote: str | None = None
    i = 0

    while i < len(sql):
        char = sql[i]
        if quote:
            current.append(char)
            if char == quote:
                quote = None
        elif char in ("'", '"', "`"):
            quote = char
            current.append(char)
        elif sql.startswith("--", i):
            end = sql.find("\n", i)
            i = len(sql) if end == -1 else end
            continue
        elif sql.startswith("/*", i):
            end = sql.find("*/", i + 2)
            i = len(sql) if end == -1 else end + 2
            current.append(" ")
            continue
        elif char == ";":
            statements.append("".join(current))
            current = []
        else:
            current.append(char)
        i += 1
    statements.append("".join(current))

    return [s.strip() for s in statements if s.strip()]


class DBAPITransaction:
    """Transaction on a :class:`DBAPIConnection`."""

    def __init__(self, connection: DBAPIConnection) -> None:
        self.connection = connection
        self.dialect = connection.dialect
        self.placeholder = connection.placeholder
        self.finished = False

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> QueryResult:
        if self.finished:
            raise TransactionFailedError("transaction already committed or rolled back")
        return self.connection._run(sql, params)

    def query_row(self, sql: str, params: Sequence[Any] | None = None) -> tuple[Any, ...] | None:
        return self.execute(sql, params).first()

    def commit(self) -> None:
        if self.finished:
            raise TransactionFailedError("transaction already committed or rolled back")
        self.finished = True
        self.connection._commit()

    def rollback(self) -> None:
        if self.finished:
            raise TransactionFailedError("transaction already committed or rolled back")
        self.finished = True
        self.connection._rollback()


class DBAPIConnection:
    """Adapt a PEP 249 connection (psycopg2, PyMySQL, ...).

    The driver runs in autocommit mode outside :meth:`begin`, so statements
    that refuse to run in a transaction block (``CREATE INDEX CONCURRENTLY``)
    work from non-transactional migrations. :meth:`begin` turns autocommit
    off until the transaction commits or rolls back.

    Example:
        raw = psycopg2.connect("postgresql://localhost/app")
        connection = DBAPIConnection(raw, dialect="postgresql", placeholder="%s")
    """

    def __init__(self, raw: Any, *, dialect: str, placeholder: str = "%s") -> None:
        self.raw = raw
        self.dialect = dialect
        self.placeholder = placeholder
        self._set_autocommit(True)

    def execute(self, sql: str, params: Sequence[Any] | None = None) -> QueryResult:
        return self._run(sql, params)

    def query_row(self, sql: str, params: Sequence[Any] | None = None) -> tuple[Any, ...] | None:
        return self.execute(sql, params).first()

    def begin(self) -> DBAPITransaction:
        self._set_autocommit(False)
        return DBAPITransaction(self)

    def close(self) -> None:
        self.raw.close()

    def _run(self, sql: str, params: Sequence[Any] | None) -> QueryResult:
        logger.debug("SQL: %s %s", sql, params or "")
        cursor = self.raw.cursor()
        try:
            # pyformat drivers only treat % as a marker when parameters are passed
            if params:
                cursor.execute(sql, tuple(params))
            else:
                cursor.execute(sql)
            rows = [tuple(row) for row in cursor.fetchall()] if cursor.description else []
            return QueryResult(rows=rows, rowcount=cursor.rowcount)
        finally:
            cursor.close()

    def _commit(self) -> None:
        try:
            self.raw.commit()
        finally:
            self._set_autocommit(True)

    def _rollback(self) -> None:
        try:
            self.raw.rollback()
        finally:
            self._set_autocommit(True)

    def _set_autocommit(self, enabled: bool) -> None:
        setting = getattr(self.raw, "autocommit", None)
        if callable(setting):
            # PyMySQL
            setting(enabled)
        else:
            # psycopg2
            self.raw.autocommit = enabled

    def __repr__(self) -> str:
        return f"{type(self).__name__}(dialect={self.dialect!r})"


class SQLiteConnection(DBAPIConnection):
    """``sqlite3`` connection in autocommit mode with explicit transactions.

    ``sqlite3`` executes one statement per call, so multi-statement text
    (such as CREATE TABLE followed by CREATE INDEX) is split first.

    Example:
        connection = SQLiteConnection.open(":memory:")
    """

    def __init__(self, raw: sqlite3.Connection) -> None:
        raw.isolation_level = None
        super().__init__(raw, dialect="sqlite", placeholder="?")

    @classmethod
    def open(cls, path: str) -> SQLiteConnection:
        return cls(sqlite3.connect(path, check_same_thread=False))

    def begin(self) -> DBAPITransaction:
        self._run("BEGIN", None)
        return DBAPITransaction(self)

    def _run(self, sql: str, params: Sequence[Any] | None) -> QueryResult:
        if params:
            return super()._run(sql, params)
        result = QueryResult()
        for statement in split_statements(sql):
            result = super()._run(statement, None)
        return result

    def _commit(self) -> None:
        if self.raw.in_transaction:
            super()._run("COMMIT", None)

    def _rollback(self) -> None:
        if self.raw.in_transaction:
            super()._run("ROLLBACK", None)

    def _set_autocommit(self, enabled: bool) -> None:
        # isolation_level=None already gives autocommit; BEGIN is issued explicitly
        pass
