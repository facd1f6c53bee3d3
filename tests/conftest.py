"""Pytest configuration and fixtures."""

import os

import pytest

from migrakit.database.connection import SQLiteConnection


@pytest.fixture
def sqlite_connection():
    """Create an in-memory SQLite connection."""
    connection = SQLiteConnection.open(":memory:")
    yield connection
    connection.close()


@pytest.fixture
def postgres_connection():
    """Create a PostgreSQL connection.

    Set DATABASE_URL environment variable to use a real PostgreSQL database.
    Otherwise, this fixture is skipped.
    """
    from migrakit.database.manager import connect

    url = os.environ.get("DATABASE_URL")
    if not url:
        pytest.skip("DATABASE_URL not set")

    connection = connect(url)
    yield connection
    connection.close()
