"""In-memory catalog of migrations kept in name order."""

from __future__ import annotations

import bisect
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING

from migrakit.errors import DuplicateNameError, InvalidNameError, MigrationNotFoundError

if TYPE_CHECKING:
    from migrakit.migrations.migration import Migration

NAME_PATTERN = re.compile(r"^\d{14}_[a-z][a-z0-9_]*$")
"""``YYYYMMDDHHMMSS_snake_case_description``, e.g. ``20240215120000_create_users_table``."""


@dataclass(frozen=True)
class RegisteredMigration:
    """A migration paired with its name and transaction setting."""

    name: str
    migration: Migration
    transactional: bool = True


class MigrationRegistry:
    """Migrations sorted by name, which orders them by timestamp.

    Entries are inserted at their sorted position; the list is never
    re-sorted.
    """

    def __init__(self) -> None:
        self._names: list[str] = []
        self._entries: list[RegisteredMigration] = []

    def register(self, name: str, migration: Migration) -> RegisteredMigration:
        """Add a migration.

        Raises:
            InvalidNameError: If ``name`` does not match :data:`NAME_PATTERN`.
            DuplicateNameError: If ``name`` is already registered.
        """
        if not NAME_PATTERN.match(name):
            raise InvalidNameError(f"migration name {name!r}: invalid migration name")

        index = bisect.bisect_left(self._names, name)
        if index < len(self._names) and self._names[index] == name:
            raise DuplicateNameError(f"migration name {name!r}: duplicate migration name")

        entry = RegisteredMigration(
            name=name,
            migration=migration,
            transactional=bool(getattr(migration, "transactional", True)),
        )
        self._names.insert(index, name)
        self._entries.insert(index, entry)
        return entry

    def get(self, name: str) -> RegisteredMigration:
        """Look up a migration by name.

        Raises:
            MigrationNotFoundError: If ``name`` is not registered.
        """
        index = bisect.bisect_left(self._names, name)
        if index < len(self._names) and self._names[index] == name:
            return self._entries[index]
        raise MigrationNotFoundError(f"migration name {name!r}: migration not found")

    def get_all(self) -> list[RegisteredMigration]:
        """Independent copy of all entries in ascending name order."""
        return list(self._entries)

    def names(self) -> list[str]:
        return list(self._names)

    def count(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._names
