"""Database connections."""

from __future__ import annotations

from migrakit.database.connection import (
    Connection,
    DBAPIConnection,
    DBAPITransaction,
    Executor,
    QueryResult,
    SQLiteConnection,
    Transaction,
    split_statements,
)
from migrakit.database.manager import ConnectionManager, connect

__all__ = [
    "Connection",
    "ConnectionManager",
    "DBAPIConnection",
    "DBAPITransaction",
    "Executor",
    "QueryResult",
    "SQLiteConnection",
    "Transaction",
    "connect",
    "split_statements",
]
