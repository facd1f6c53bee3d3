"""Seeder runner - resolves dependencies and executes seeders."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from migrakit.errors import SeederError, error_context
from migrakit.seeding.registry import SeederRegistry
from migrakit.seeding.resolver import resolve_order
from migrakit.seeding.script import load_seeders


class SeederRunner:
    """Run seeders in dependency order.

    The whole order is resolved before any seeder runs, so a cycle or a
    missing dependency leaves the database untouched. Execution stops at
    the first failing seeder.

    Example:
        runner = SeederRunner(registry, connection)
        runner.run("user_seeder")  # runs role_seeder first
    """

    def __init__(
        self,
        registry: SeederRegistry,
        db: Any,
        logger: logging.Logger | None = None,
    ) -> None:
        self.registry = registry
        self.db = db
        self.logger = logger if logger is not None else logging.getLogger(__name__)

    def load(self, directory: str | Path) -> list[str]:
        """Register every seeder file found in ``directory``."""
        return [self.registry.register(script.name, script).name for script in load_seeders(directory)]

    def run_all(self) -> list[str]:
        """Run every registered seeder.

        Returns:
            Names executed, in execution order
        """
        seeders = self.registry.get_all()
        if not seeders:
            return []
        return self._execute(resolve_order(seeders, sorted(seeders)))

    def run(self, name: str) -> list[str]:
        """Run ``name`` and its transitive dependencies, nothing else.

        Raises:
            SeederNotFoundError: If ``name`` is not registered.
        """
        self.registry.get(name)
        return self._execute(resolve_order(self.registry.get_all(), [name]))

    def _execute(self, order: list[str]) -> list[str]:
        for name in order:
            entry = self.registry.get(name)
            self.logger.info("Running seeder: %s", name)
            try:
                with error_context(f"seeder {name!r}", SeederError):
                    entry.seeder.run(self.db)
            except Exception as e:
                self.logger.error("Seeder %s failed: %s", name, e)
                raise
            self.logger.info("Seeder %s completed", name)
        return order
