"""migrakit migrations - registry, tracking and lifecycle operations.

This module provides:
- Configuration parsing (migrakit.ini, MIGRAKIT_* environment)
- Migration registration and file loading
- The tracking table and batch bookkeeping
- Transactional execution and the Migrator lifecycle
"""

from __future__ import annotations

from migrakit.migrations.config import ConnectionConfig, MigrakitConfig
from migrakit.migrations.hooks import AfterHook, BeforeHook, HookManager
from migrakit.migrations.migration import Direction, Migration
from migrakit.migrations.migrator import MigrationStatus, Migrator
from migrakit.migrations.registry import MigrationRegistry, RegisteredMigration
from migrakit.migrations.runner import Runner
from migrakit.migrations.script import MigrationScript, load_migrations
from migrakit.migrations.tracker import BatchManager, MigrationRecord, Tracker

__all__ = [
    # Config
    "ConnectionConfig",
    "MigrakitConfig",
    # Migrations
    "Direction",
    "Migration",
    "MigrationScript",
    "load_migrations",
    # Registry
    "MigrationRegistry",
    "RegisteredMigration",
    # Tracking
    "BatchManager",
    "MigrationRecord",
    "Tracker",
    # Execution
    "AfterHook",
    "BeforeHook",
    "HookManager",
    "MigrationStatus",
    "Migrator",
    "Runner",
]
