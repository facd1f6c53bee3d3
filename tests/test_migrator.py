"""Tests for the Migrator lifecycle operations."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from migrakit.errors import (
    ConfigError,
    MigrakitError,
    MigrationError,
    MigrationNotFoundError,
    TrackingTableError,
)
from migrakit.migrations.migration import Migration
from migrakit.migrations.migrator import Migrator
from migrakit.schema.blueprint import Blueprint
from migrakit.schema.grammars import SQLiteGrammar


def table_names(connection) -> list[str]:
    """User tables in a SQLite database, sorted."""
    rows = connection.execute(
        "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
    ).all()
    return [row[0] for row in rows]


class Recording(Migration):
    """No-op migration that records its calls."""

    def __init__(self, name: str, calls: list[tuple[str, str]]) -> None:
        self.name = name
        self.calls = calls

    def up(self, schema) -> None:
        self.calls.append(("up", self.name))

    def down(self, schema) -> None:
        self.calls.append(("down", self.name))


class CreateTable(Migration):
    """Creates and drops one table."""

    def __init__(self, table: str) -> None:
        self.table = table

    def up(self, schema) -> None:
        def build(table: Blueprint) -> None:
            table.id()
            table.string("name")

        schema.create(self.table, build)

    def down(self, schema) -> None:
        schema.drop(self.table)


class Failing(Migration):
    def up(self, schema) -> None:
        raise RuntimeError("boom")

    def down(self, schema) -> None:
        raise RuntimeError("cannot undo")


@pytest.fixture
def migrator(sqlite_connection) -> Migrator:
    return Migrator(sqlite_connection, grammar=SQLiteGrammar())


@pytest.fixture
def calls() -> list[tuple[str, str]]:
    return []


def register(migrator: Migrator, calls: list, *names: str) -> None:
    for name in names:
        migrator.register(name, Recording(name, calls))


def applied(migrator: Migrator) -> list[tuple[str, int]]:
    return [(r.name, r.batch) for r in migrator.tracker.get_applied()]


class TestUp:
    """Test applying pending migrations."""

    def test_up_then_rollback_scenario(self, migrator: Migrator, calls: list) -> None:
        """Two no-ops are recorded in batch 1, then rolled back b before a."""
        register(migrator, calls, "20240102000000_b", "20240101000000_a")

        assert migrator.up() == ["20240101000000_a", "20240102000000_b"]
        assert applied(migrator) == [("20240101000000_a", 1), ("20240102000000_b", 1)]

        assert migrator.rollback() == ["20240102000000_b", "20240101000000_a"]
        assert calls == [
            ("up", "20240101000000_a"),
            ("up", "20240102000000_b"),
            ("down", "20240102000000_b"),
            ("down", "20240101000000_a"),
        ]
        assert applied(migrator) == []

    def test_nothing_pending_is_a_no_op(self, migrator: Migrator, calls: list) -> None:
        register(migrator, calls, "20240101000000_a")
        migrator.up()

        assert migrator.up() == []
        assert applied(migrator) == [("20240101000000_a", 1)]

    def test_each_run_gets_a_new_batch(self, migrator: Migrator, calls: list) -> None:
        """Every migration applied by one up() call shares one batch number."""
        register(migrator, calls, "20240101000000_a")
        migrator.up()
        register(migrator, calls, "20240102000000_b", "20240103000000_c")
        migrator.up()

        assert applied(migrator) == [
            ("20240101000000_a", 1),
            ("20240102000000_b", 2),
            ("20240103000000_c", 2),
        ]

    def test_failure_stops_later_migrations(self, migrator: Migrator, calls: list) -> None:
        """Earlier successes stay recorded; later migrations never run."""
        register(migrator, calls, "20240101000000_a", "20240103000000_c")
        migrator.register("20240102000000_b", Failing())

        with pytest.raises(MigrationError) as exc_info:
            migrator.up()

        assert "20240102000000_b" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert applied(migrator) == [("20240101000000_a", 1)]
        assert calls == [("up", "20240101000000_a")]

    def test_failed_migration_leaves_no_schema(self, migrator: Migrator, sqlite_connection) -> None:
        """The failing migration's transaction is rolled back."""

        class HalfDone(Migration):
            def up(self, schema) -> None:
                schema.create("half", lambda table: table.id())
                raise RuntimeError("boom")

            def down(self, schema) -> None:
                pass

        migrator.register("20240101000000_users", CreateTable("users"))
        migrator.register("20240102000000_half", HalfDone())

        with pytest.raises(MigrationError):
            migrator.up()

        assert table_names(sqlite_connection) == ["migrations", "users"]

    def test_creates_real_tables(self, migrator: Migrator, sqlite_connection) -> None:
        migrator.register("20240101000000_users", CreateTable("users"))
        migrator.register("20240102000000_posts", CreateTable("posts"))

        migrator.up()

        assert table_names(sqlite_connection) == ["migrations", "posts", "users"]


class TestRollback:
    """Test rolling back batches and steps."""

    def test_rollback_last_batch_only(self, migrator: Migrator, calls: list) -> None:
        register(migrator, calls, "20240101000000_a")
        migrator.up()
        register(migrator, calls, "20240102000000_b", "20240103000000_c")
        migrator.up()

        assert migrator.rollback() == ["20240103000000_c", "20240102000000_b"]
        assert applied(migrator) == [("20240101000000_a", 1)]

    def test_rollback_steps(self, migrator: Migrator, calls: list) -> None:
        """rollback(n) undoes the last n migrations across batches."""
        register(migrator, calls, "20240101000000_a")
        migrator.up()
        register(migrator, calls, "20240102000000_b", "20240103000000_c")
        migrator.up()

        assert migrator.rollback(steps=2) == ["20240103000000_c", "20240102000000_b"]
        assert migrator.rollback(steps=5) == ["20240101000000_a"]
        assert migrator.rollback(steps=1) == []

    def test_rollback_failure_stops(self, migrator: Migrator, calls: list) -> None:
        """A failing down() stops the rollback; earlier removals stay removed."""
        register(migrator, calls, "20240101000000_a", "20240103000000_c")
        migrator.register("20240102000000_b", Failing())
        migrator.tracker.ensure_table()
        for name in ("20240101000000_a", "20240102000000_b", "20240103000000_c"):
            migrator.tracker.record(name, 1)

        with pytest.raises(MigrationError, match="20240102000000_b"):
            migrator.rollback()

        assert applied(migrator) == [("20240101000000_a", 1), ("20240102000000_b", 1)]
        assert calls == [("down", "20240103000000_c")]

    def test_rollback_of_unregistered_migration(self, migrator: Migrator) -> None:
        """A tracked migration missing from the registry raises NotFound."""
        migrator.tracker.ensure_table()
        migrator.tracker.record("20240101000000_gone", 1)

        with pytest.raises(MigrationNotFoundError, match="20240101000000_gone"):
            migrator.rollback()


class TestResetAndRefresh:
    """Test reset() and refresh()."""

    def test_reset_undoes_everything(self, migrator: Migrator, calls: list) -> None:
        register(migrator, calls, "20240101000000_a")
        migrator.up()
        register(migrator, calls, "20240102000000_b")
        migrator.up()

        assert migrator.reset() == ["20240102000000_b", "20240101000000_a"]
        assert applied(migrator) == []

    def test_reset_runs_hooks(self, migrator: Migrator, calls: list) -> None:
        """Before and after hooks run for every migration reset."""
        register(migrator, calls, "20240101000000_a", "20240102000000_b")
        migrator.up()
        seen = []
        migrator.before_migrate(lambda name, direction: seen.append(("before", name, direction)))
        migrator.after_migrate(lambda name, direction, duration: seen.append(("after", name, direction)))

        migrator.reset()

        assert seen == [
            ("before", "20240102000000_b", "down"),
            ("after", "20240102000000_b", "down"),
            ("before", "20240101000000_a", "down"),
            ("after", "20240101000000_a", "down"),
        ]

    def test_refresh(self, migrator: Migrator, calls: list) -> None:
        """refresh() resets then applies everything as batch 1."""
        register(migrator, calls, "20240101000000_a")
        migrator.up()
        register(migrator, calls, "20240102000000_b")
        migrator.up()
        calls.clear()

        assert migrator.refresh() == ["20240101000000_a", "20240102000000_b"]
        assert calls == [
            ("down", "20240102000000_b"),
            ("down", "20240101000000_a"),
            ("up", "20240101000000_a"),
            ("up", "20240102000000_b"),
        ]
        assert applied(migrator) == [("20240101000000_a", 1), ("20240102000000_b", 1)]

    def test_refresh_labels_failing_phase(self, migrator: Migrator, calls: list) -> None:
        """Errors name the phase and keep the failing migration's name."""
        migrator.register("20240101000000_bad", Failing())

        with pytest.raises(MigrationError) as exc_info:
            migrator.refresh()

        message = str(exc_info.value)
        assert message.startswith("refresh up phase: ")
        assert "20240101000000_bad" in message

    def test_refresh_reset_phase(self, migrator: Migrator) -> None:
        migrator.register("20240101000000_bad", Failing())
        migrator.tracker.ensure_table()
        migrator.tracker.record("20240101000000_bad", 1)

        with pytest.raises(MigrationError, match="^refresh reset phase: .*20240101000000_bad"):
            migrator.refresh()


class TestFresh:
    """Test dropping everything and migrating again."""

    def test_fresh_drops_unknown_tables(self, migrator: Migrator, sqlite_connection) -> None:
        """Tables not created by migrations are dropped too."""
        sqlite_connection.execute("CREATE TABLE stray (id INTEGER)")
        migrator.register("20240101000000_users", CreateTable("users"))
        migrator.up()

        assert migrator.fresh() == ["20240101000000_users"]

        assert table_names(sqlite_connection) == ["migrations", "users"]
        assert applied(migrator) == [("20240101000000_users", 1)]

    def test_fresh_drops_tables_with_foreign_keys(self, migrator: Migrator, sqlite_connection) -> None:
        sqlite_connection.execute("PRAGMA foreign_keys = ON")
        sqlite_connection.execute("CREATE TABLE parents (id INTEGER PRIMARY KEY)")
        sqlite_connection.execute(
            "CREATE TABLE children (id INTEGER PRIMARY KEY, parent_id INTEGER REFERENCES parents (id))"
        )
        sqlite_connection.execute("INSERT INTO parents (id) VALUES (1)")
        sqlite_connection.execute("INSERT INTO children (id, parent_id) VALUES (1, 1)")

        migrator.fresh()

        assert table_names(sqlite_connection) == ["migrations"]
        assert sqlite_connection.query_row("PRAGMA foreign_keys") == (1,)

    def test_fresh_requires_grammar(self, sqlite_connection, calls: list) -> None:
        """Without a grammar nothing is dropped and up() never runs."""
        migrator = Migrator(sqlite_connection)
        register(migrator, calls, "20240101000000_a")
        sqlite_connection.execute("CREATE TABLE keep_me (id INTEGER)")

        with pytest.raises(ConfigError, match="grammar"):
            migrator.fresh()

        assert calls == []
        assert table_names(sqlite_connection) == ["keep_me"]

    def test_drop_failure_skips_up(self, migrator: Migrator, calls: list) -> None:
        class BrokenGrammar(SQLiteGrammar):
            def compile_drop_all_tables(self) -> str:
                return "DROP EVERYTHING"

        migrator.grammar = BrokenGrammar()
        register(migrator, calls, "20240101000000_a")

        with pytest.raises(MigrakitError, match="fresh drop all tables"):
            migrator.fresh()
        assert calls == []


class TestStatus:
    """Test status reporting."""

    def test_status(self, migrator: Migrator, calls: list) -> None:
        """One entry per registered migration in name order."""
        register(migrator, calls, "20240101000000_a")
        migrator.up()
        register(migrator, calls, "20240102000000_b")

        statuses = migrator.status()

        assert [(s.name, s.applied, s.batch) for s in statuses] == [
            ("20240101000000_a", True, 1),
            ("20240102000000_b", False, 0),
        ]
        assert statuses[0].applied_at is not None
        assert statuses[1].applied_at is None


class TestHooks:
    """Test hooks around migrations."""

    def test_hooks_around_up(self, migrator: Migrator, calls: list) -> None:
        register(migrator, calls, "20240101000000_a")
        seen = []

        @migrator.before_migrate
        def before(name: str, direction: str) -> None:
            seen.append(("before", name, direction))

        @migrator.after_migrate
        def after(name: str, direction: str, duration: float) -> None:
            assert duration >= 0
            seen.append(("after", name, direction))

        migrator.up()

        assert seen == [("before", "20240101000000_a", "up"), ("after", "20240101000000_a", "up")]

    def test_before_hook_failure_aborts(self, migrator: Migrator, calls: list) -> None:
        """A failing before hook stops the migration before it runs."""
        register(migrator, calls, "20240101000000_a")

        def deny(name: str, direction: str) -> None:
            raise PermissionError("read-only window")

        migrator.before_migrate(deny)

        with pytest.raises(MigrationError, match="before hook for '20240101000000_a'"):
            migrator.up()
        assert calls == []
        assert applied(migrator) == []

    def test_after_hook_failure_is_ignored(self, migrator: Migrator, calls: list) -> None:
        register(migrator, calls, "20240101000000_a")

        def broken(name: str, direction: str, duration: float) -> None:
            raise RuntimeError("metrics down")

        migrator.after_migrate(broken)

        assert migrator.up() == ["20240101000000_a"]
        assert applied(migrator) == [("20240101000000_a", 1)]


class TestTrackingFailures:
    """Test tracking-table errors surfacing through the migrator."""

    def test_broken_tracking_table(self, sqlite_connection, calls: list) -> None:
        sqlite_connection.execute("CREATE TABLE migrations (unrelated TEXT)")
        migrator = Migrator(sqlite_connection, grammar=SQLiteGrammar())
        register(migrator, calls, "20240101000000_a")

        with pytest.raises(TrackingTableError):
            migrator.up()


class TestLoad:
    """Test registering migrations from a directory."""

    def test_load_directory(self, migrator: Migrator, tmp_path: Path, sqlite_connection) -> None:
        (tmp_path / "20240101000000_create_users.py").write_text(
            dedent('''
                def up(schema):
                    schema.create("users", lambda table: table.id())

                def down(schema):
                    schema.drop("users")
            ''')
        )

        assert migrator.load(tmp_path) == ["20240101000000_create_users"]
        migrator.up()

        assert "users" in table_names(sqlite_connection)


class TestPostgres:
    """Test the lifecycle against a real PostgreSQL database."""

    def test_up_and_rollback(self, postgres_connection) -> None:
        from migrakit.schema.builder import SchemaBuilder
        from migrakit.schema.grammars import PostgresGrammar

        grammar = PostgresGrammar()
        schema = SchemaBuilder(postgres_connection, grammar)
        schema.drop_if_exists("migrakit_test_migrations")
        schema.drop_if_exists("migrakit_test_widgets")
        migrator = Migrator(
            postgres_connection, grammar=grammar, table_name="migrakit_test_migrations"
        )
        migrator.register("20240101000000_create_widgets", CreateTable("migrakit_test_widgets"))

        try:
            assert migrator.up() == ["20240101000000_create_widgets"]
            assert schema.has_table("migrakit_test_widgets")
            assert applied(migrator) == [("20240101000000_create_widgets", 1)]

            assert migrator.rollback() == ["20240101000000_create_widgets"]
            assert not schema.has_table("migrakit_test_widgets")
            assert applied(migrator) == []
        finally:
            schema.drop_if_exists("migrakit_test_widgets")
            schema.drop_if_exists("migrakit_test_migrations")
