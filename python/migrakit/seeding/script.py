"""Seeder loading from a directory of Python files."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any


@dataclass
class SeederScript:
    """A seeder defined as a plain module.

    Seeder file format (``user_seeder.py``):

        depends_on = ["role_seeder"]  # optional

        def run(db):
            db.execute("INSERT INTO users (name) VALUES ('admin')")
    """

    name: str
    path: Path | None = None
    depends_on: tuple[str, ...] = ()
    _run_fn: Callable[[Any], None] | None = None

    @classmethod
    def load(cls, path: Path | str) -> SeederScript:
        """Load a seeder from a Python file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If the file is not valid Python or lacks ``run``
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Seeder file not found: {path}")

        try:
            code = compile(path.read_text(), str(path), "exec")
        except SyntaxError as e:
            raise ValueError(f"Invalid Python in {path}: {e}") from e

        module_dict: dict[str, Any] = {"__file__": str(path), "__name__": f"seeders.{path.stem}"}
        exec(code, module_dict)

        if not callable(module_dict.get("run")):
            raise ValueError(f"No run() function in {path}")

        depends_on = module_dict.get("depends_on") or ()
        if isinstance(depends_on, str):
            depends_on = (depends_on,)

        return cls(
            name=path.stem,
            path=path,
            depends_on=tuple(depends_on),
            _run_fn=module_dict["run"],
        )

    def run(self, db: Any) -> None:
        if self._run_fn is None:
            raise RuntimeError(f"No run() function in seeder {self.name}")
        self._run_fn(db)


def load_seeders(directory: Path | str) -> list[SeederScript]:
    """Load every ``*_seeder.py`` file in ``directory``, sorted by name."""
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Seeder directory not found: {directory}")

    return [
        SeederScript.load(path)
        for path in sorted(directory.glob("*_seeder.py"))
        if not path.name.startswith("_")
    ]
