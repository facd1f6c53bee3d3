"""Catalog of seeders keyed by name."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from migrakit.errors import DuplicateNameError, InvalidNameError, SeederNotFoundError

if TYPE_CHECKING:
    from migrakit.seeding.seeder import Seeder


@dataclass(frozen=True)
class RegisteredSeeder:
    """A seeder paired with its name and declared dependencies."""

    name: str
    seeder: Seeder
    dependencies: tuple[str, ...] = ()


class SeederRegistry:
    """Seeders keyed by name.

    Dependencies are read once, at registration: from ``depends_on`` when
    given, otherwise from the seeder's own ``depends_on`` attribute.
    """

    def __init__(self) -> None:
        self._seeders: dict[str, RegisteredSeeder] = {}

    def register(
        self,
        name: str,
        seeder: Seeder,
        depends_on: Iterable[str] | None = None,
    ) -> RegisteredSeeder:
        """Add a seeder.

        Raises:
            InvalidNameError: If ``name`` is empty or whitespace.
            DuplicateNameError: If ``name`` is already registered.
        """
        if not name or not name.strip():
            raise InvalidNameError(f"seeder name {name!r}: invalid seeder name")
        if name in self._seeders:
            raise DuplicateNameError(f"seeder name {name!r}: duplicate seeder name")

        if depends_on is None:
            depends_on = getattr(seeder, "depends_on", None) or ()
        if isinstance(depends_on, str):
            depends_on = (depends_on,)
        entry = RegisteredSeeder(name=name, seeder=seeder, dependencies=tuple(depends_on))
        self._seeders[name] = entry
        return entry

    def get(self, name: str) -> RegisteredSeeder:
        """Look up a seeder by name.

        Raises:
            SeederNotFoundError: If ``name`` is not registered.
        """
        try:
            return self._seeders[name]
        except KeyError:
            raise SeederNotFoundError(f"seeder name {name!r}: seeder not found") from None

    def get_all(self) -> dict[str, RegisteredSeeder]:
        """Independent copy of all entries keyed by name, in name order."""
        return {name: self._seeders[name] for name in sorted(self._seeders)}

    def names(self) -> list[str]:
        return sorted(self._seeders)

    def __len__(self) -> int:
        return len(self._seeders)

    def __contains__(self, name: object) -> bool:
        return name in self._seeders
