"""Seeder base class."""

from __future__ import annotations

from typing import Any, ClassVar


class Seeder:
    """Populates tables with data.

    Subclasses implement :meth:`run`. ``depends_on`` names seeders that must
    run first.

    Example:
        class UserSeeder(Seeder):
            depends_on = ("role_seeder",)

            def run(self, db):
                db.execute("INSERT INTO users (name) VALUES ('admin')")
    """

    depends_on: ClassVar[tuple[str, ...]] = ()

    def run(self, db: Any) -> None:
        raise NotImplementedError
