"""migrakit CLI - Command-line interface for migrations and seeding."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

from migrakit.database.manager import connect
from migrakit.errors import MigrakitError
from migrakit.log import setup_logging
from migrakit.migrations.config import MigrakitConfig
from migrakit.migrations.migrator import Migrator
from migrakit.schema.grammars import get_grammar
from migrakit.seeding.registry import SeederRegistry
from migrakit.seeding.runner import SeederRunner

if TYPE_CHECKING:
    from migrakit.database.connection import Connection


def main(args: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        args: Command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success)
    """
    parser = _build_parser()
    parsed = parser.parse_args(args)

    if parsed.command is None:
        parser.print_help()
        return 1

    try:
        config = _load_config(parsed)
        setup_logging("debug" if parsed.verbose else config.log_level, use_colors=sys.stderr.isatty())
        return _COMMANDS[parsed.command](parsed, config)
    except (MigrakitError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="migrakit",
        description="migrakit - schema migrations and seeding for PostgreSQL, MySQL and SQLite",
    )
    parser.add_argument(
        "-c", "--config",
        help="Path to migrakit.ini (default: auto-detect, then MIGRAKIT_* environment)",
    )
    parser.add_argument(
        "--url",
        help="Database URL (overrides config)",
    )
    parser.add_argument(
        "--connection",
        help="Named connection from the config file",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log debug output, including every SQL statement",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    subparsers.add_parser("migrate", help="Apply pending migrations")
    subparsers.add_parser("migrate:install", help="Create the migration tracking table")

    rollback_parser = subparsers.add_parser("migrate:rollback", help="Roll back migrations")
    rollback_parser.add_argument(
        "--step",
        type=int,
        default=0,
        help="Number of migrations to roll back (default: the last batch)",
    )

    subparsers.add_parser("migrate:reset", help="Roll back all migrations")
    subparsers.add_parser("migrate:refresh", help="Roll back all migrations and migrate again")
    subparsers.add_parser("migrate:fresh", help="Drop all tables and migrate again")
    subparsers.add_parser("migrate:status", help="Show the status of each migration")

    seed_parser = subparsers.add_parser("db:seed", help="Run seeders")
    seed_parser.add_argument(
        "name",
        nargs="?",
        help="Seeder to run together with its dependencies (default: all)",
    )
    return parser


def _load_config(args: Any) -> MigrakitConfig:
    """Load config from --config, a detected migrakit.ini, or the environment."""
    if args.config:
        return MigrakitConfig.from_ini(Path(args.config))
    return MigrakitConfig.auto_detect() or MigrakitConfig.from_env()


def _open(args: Any, config: MigrakitConfig) -> Connection:
    return connect(config.get_url(args.connection, args.url))


def _migrator(connection: Connection, config: MigrakitConfig) -> Migrator:
    migrator = Migrator(
        connection,
        grammar=get_grammar(connection.dialect),
        table_name=config.migration_table,
    )
    if config.migration_dir.is_dir():
        migrator.load(config.migration_dir)
    return migrator


def _print_names(names: list[str], done: str, none: str, arrow: str) -> None:
    if not names:
        print(none)
        return
    print(f"{done} {len(names)} migration(s):")
    for name in names:
        print(f"  {arrow} {name}")


def _handle_migrate(args: Any, config: MigrakitConfig) -> int:
    connection = _open(args, config)
    try:
        applied = _migrator(connection, config).up()
        _print_names(applied, "Applied", "Nothing to migrate.", "->")
    finally:
        connection.close()
    return 0


def _handle_install(args: Any, config: MigrakitConfig) -> int:
    connection = _open(args, config)
    try:
        _migrator(connection, config).tracker.ensure_table()
        print(f"Migration table {config.migration_table!r} is ready.")
    finally:
        connection.close()
    return 0


def _handle_rollback(args: Any, config: MigrakitConfig) -> int:
    connection = _open(args, config)
    try:
        rolled_back = _migrator(connection, config).rollback(args.step)
        _print_names(rolled_back, "Rolled back", "Nothing to roll back.", "<-")
    finally:
        connection.close()
    return 0


def _handle_reset(args: Any, config: MigrakitConfig) -> int:
    connection = _open(args, config)
    try:
        rolled_back = _migrator(connection, config).reset()
        _print_names(rolled_back, "Rolled back", "Nothing to roll back.", "<-")
    finally:
        connection.close()
    return 0


def _handle_refresh(args: Any, config: MigrakitConfig) -> int:
    connection = _open(args, config)
    try:
        applied = _migrator(connection, config).refresh()
        _print_names(applied, "Applied", "Nothing to migrate.", "->")
    finally:
        connection.close()
    return 0


def _handle_fresh(args: Any, config: MigrakitConfig) -> int:
    connection = _open(args, config)
    try:
        applied = _migrator(connection, config).fresh()
        print("Dropped all tables.")
        _print_names(applied, "Applied", "Nothing to migrate.", "->")
    finally:
        connection.close()
    return 0


def _handle_status(args: Any, config: MigrakitConfig) -> int:
    connection = _open(args, config)
    try:
        statuses = _migrator(connection, config).status()
    finally:
        connection.close()

    if not statuses:
        print("No migrations found.")
        return 0

    width = max(len(status.name) for status in statuses)
    print(f"{'Migration':<{width}}  {'Ran?':<4}  Batch")
    for status in statuses:
        ran = "Yes" if status.applied else "No"
        batch = str(status.batch) if status.applied else "-"
        print(f"{status.name:<{width}}  {ran:<4}  {batch}")
    return 0


def _handle_seed(args: Any, config: MigrakitConfig) -> int:
    connection = _open(args, config)
    try:
        runner = SeederRunner(SeederRegistry(), connection)
        if config.seeder_dir.is_dir():
            runner.load(config.seeder_dir)
        executed = runner.run(args.name) if args.name else runner.run_all()
    finally:
        connection.close()

    if not executed:
        print("No seeders found.")
    else:
        print(f"Ran {len(executed)} seeder(s):")
        for name in executed:
            print(f"  -> {name}")
    return 0


_COMMANDS = {
    "migrate": _handle_migrate,
    "migrate:install": _handle_install,
    "migrate:rollback": _handle_rollback,
    "migrate:reset": _handle_reset,
    "migrate:refresh": _handle_refresh,
    "migrate:fresh": _handle_fresh,
    "migrate:status": _handle_status,
    "db:seed": _handle_seed,
}


if __name__ == "__main__":
    sys.exit(main())
