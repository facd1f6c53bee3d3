"""Per-dialect SQL grammars."""

from __future__ import annotations

from migrakit.errors import ConfigError
from migrakit.schema.grammars.base import Grammar
from migrakit.schema.grammars.mysql import MySQLGrammar
from migrakit.schema.grammars.postgres import PostgresGrammar
from migrakit.schema.grammars.sqlite import SQLiteGrammar

_GRAMMARS: dict[str, type[Grammar]] = {
    "postgresql": PostgresGrammar,
    "postgres": PostgresGrammar,
    "mysql": MySQLGrammar,
    "sqlite": SQLiteGrammar,
    "sqlite3": SQLiteGrammar,
}

__all__ = [
    "Grammar",
    "MySQLGrammar",
    "PostgresGrammar",
    "SQLiteGrammar",
    "get_grammar",
]


def get_grammar(dialect: str) -> Grammar:
    """Return a grammar instance for ``dialect``.

    Raises:
        ConfigError: If the dialect is not supported.
    """
    try:
        return _GRAMMARS[dialect.lower()]()
    except KeyError:
        raise ConfigError(f"unsupported dialect: {dialect!r}") from None
