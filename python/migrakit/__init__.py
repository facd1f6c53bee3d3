"""migrakit - schema migrations and seeding for PostgreSQL, MySQL and SQLite."""

from __future__ import annotations

from migrakit.database import ConnectionManager, DBAPIConnection, SQLiteConnection, connect
from migrakit.errors import (
    CircularDependencyError,
    ConfigError,
    ConnectionNotFoundError,
    DuplicateNameError,
    InvalidNameError,
    MigrakitError,
    MigrationError,
    MigrationNotFoundError,
    NotFoundError,
    SchemaError,
    SeederError,
    SeederNotFoundError,
    TrackingTableError,
    TransactionFailedError,
    UnsupportedTypeError,
)
from migrakit.migrations import MigrakitConfig, Migration, MigrationStatus, Migrator
from migrakit.schema import (
    Blueprint,
    MySQLGrammar,
    PostgresGrammar,
    SchemaBuilder,
    SQLiteGrammar,
    get_grammar,
)
from migrakit.seeding import Factory, Seeder, SeederRegistry, SeederRunner

__version__ = "0.1.0"

__all__ = [
    # Core
    "Migrator",
    "Migration",
    "MigrationStatus",
    "MigrakitConfig",
    "Factory",
    "Seeder",
    "SeederRegistry",
    "SeederRunner",
    # Schema
    "Blueprint",
    "SchemaBuilder",
    "get_grammar",
    "PostgresGrammar",
    "MySQLGrammar",
    "SQLiteGrammar",
    # Connections
    "connect",
    "ConnectionManager",
    "DBAPIConnection",
    "SQLiteConnection",
    # Errors
    "MigrakitError",
    "InvalidNameError",
    "DuplicateNameError",
    "NotFoundError",
    "MigrationNotFoundError",
    "SeederNotFoundError",
    "ConnectionNotFoundError",
    "CircularDependencyError",
    "TrackingTableError",
    "TransactionFailedError",
    "UnsupportedTypeError",
    "SchemaError",
    "MigrationError",
    "SeederError",
    "ConfigError",
]
