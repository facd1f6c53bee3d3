"""Exception hierarchy for migrakit.

Every error raised by the engine derives from :class:`MigrakitError`. Context is
added in place with :meth:`MigrakitError.add_context` and the same exception is
re-raised, so ``isinstance`` checks keep working no matter how many layers of
context were prepended:

    try:
        migrator.up()
    except TrackingTableError as exc:
        print(exc)  # "record migration '20240101000000_a': ..."
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager


class MigrakitError(Exception):
    """Base class for all migrakit errors."""

    def add_context(self, context: str) -> MigrakitError:
        """Prefix ``context`` onto the message and return ``self`` for re-raising."""
        if self.args:
            self.args = (f"{context}: {self.args[0]}", *self.args[1:])
        else:
            self.args = (context,)
        return self


class InvalidNameError(MigrakitError, ValueError):
    """A migration or seeder name does not satisfy the naming rules."""


class DuplicateNameError(MigrakitError, ValueError):
    """A migration or seeder with the same name is already registered."""


class NotFoundError(MigrakitError, LookupError):
    """A named item is not registered."""


class MigrationNotFoundError(NotFoundError):
    """No migration is registered under the requested name."""


class SeederNotFoundError(NotFoundError):
    """No seeder is registered under the requested name."""


class ConnectionNotFoundError(NotFoundError):
    """No connection is configured under the requested name."""


class CircularDependencyError(MigrakitError):
    """Seeder dependencies form a cycle."""

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = list(cycle)
        super().__init__(f"{' -> '.join(self.cycle)}: circular seeder dependency")


class TrackingTableError(MigrakitError):
    """Reading or writing the migration tracking table failed."""


class TransactionFailedError(MigrakitError):
    """Beginning, committing or rolling back a transaction failed."""


class UnsupportedTypeError(MigrakitError, TypeError):
    """A grammar cannot represent a column's logical type."""


class SchemaError(MigrakitError, ValueError):
    """A blueprint cannot be compiled (for example a table without columns)."""


class MigrationError(MigrakitError):
    """A migration body or lifecycle step failed; the cause is chained."""


class SeederError(MigrakitError):
    """A seeder body failed; the cause is chained."""


class ConfigError(MigrakitError, ValueError):
    """Configuration is missing or invalid."""


@contextmanager
def error_context(context: str, wrapper: type[MigrakitError] = MigrationError) -> Iterator[None]:
    """Add ``context`` to any error raised inside the block.

    migrakit errors keep their type and gain the prefix; any other exception
    is wrapped in ``wrapper`` with the original chained as ``__cause__``.

    Example:
        with error_context(f"migration {name!r} up"):
            runner.execute(entry, "up")
    """
    try:
        yield
    except MigrakitError as e:
        e.add_context(context)
        raise
    except Exception as e:
        raise wrapper(f"{context}: {e}") from e
