"""Migration script loading from a directory of Python files."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from migrakit.schema.builder import SchemaBuilder

FILENAME_PATTERN = re.compile(r"^\d{14}_[a-z][a-z0-9_]*\.py$")


@dataclass
class MigrationScript:
    """A migration defined as a plain module.

    Migration file format (``20240101000000_create_users.py``):

        transactional = True  # optional

        def up(schema):
            schema.create("users", lambda table: table.id())

        def down(schema):
            schema.drop("users")
    """

    name: str
    """Migration name (the file stem)."""

    path: Path | None = None
    """Path to the migration file."""

    transactional: bool = True
    """Whether the runner wraps the migration in a transaction."""

    _up_fn: Callable[[SchemaBuilder], None] | None = None
    _down_fn: Callable[[SchemaBuilder], None] | None = None

    @classmethod
    def load(cls, path: Path | str) -> MigrationScript:
        """Load a migration script from a Python file.

        Args:
            path: Path to the migration .py file

        Returns:
            MigrationScript instance

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file is not valid Python or lacks ``up``/``down``
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Migration file not found: {path}")

        source = path.read_text()
        try:
            code = compile(source, str(path), "exec")
        except SyntaxError as e:
            raise ValueError(f"Invalid Python in {path}: {e}") from e

        module_dict: dict[str, Any] = {"__file__": str(path), "__name__": f"migrations.{path.stem}"}
        exec(code, module_dict)

        missing = [fn for fn in ("up", "down") if not callable(module_dict.get(fn))]
        if missing:
            raise ValueError(f"No {' or '.join(f'{m}()' for m in missing)} function in {path}")

        return cls(
            name=path.stem,
            path=path,
            transactional=bool(module_dict.get("transactional", True)),
            _up_fn=module_dict["up"],
            _down_fn=module_dict["down"],
        )

    def up(self, schema: SchemaBuilder) -> None:
        if self._up_fn is None:
            raise RuntimeError(f"No up() function in migration {self.name}")
        self._up_fn(schema)

    def down(self, schema: SchemaBuilder) -> None:
        if self._down_fn is None:
            raise RuntimeError(f"No down() function in migration {self.name}")
        self._down_fn(schema)

    def __repr__(self) -> str:
        return f"MigrationScript(name='{self.name}', transactional={self.transactional})"


def load_migrations(directory: Path | str) -> list[MigrationScript]:
    """Load every migration file in ``directory``, sorted by name.

    Files starting with ``_`` and files that do not match
    ``YYYYMMDDHHMMSS_snake_name.py`` are skipped.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Migration directory not found: {directory}")

    return [
        MigrationScript.load(path)
        for path in sorted(directory.glob("*.py"))
        if not path.name.startswith("_") and FILENAME_PATTERN.match(path.name)
    ]
