"""Build seed rows from a definition plus optional named states."""

from __future__ import annotations

import copy
from collections.abc import Callable
from typing import Generic, TypeVar

from faker import Faker

T = TypeVar("T")

Definition = Callable[[Faker], T]
StateFunction = Callable[[Faker, T], T]


class Factory(Generic[T]):
    """Generate instances with fake data.

    A definition builds the base instance; named states modify it. States are
    registered on the factory itself, while :meth:`with_state` and
    :meth:`with_faker` return copies so the original keeps producing plain
    instances.

    Example:
        users = Factory(lambda fake: {"name": fake.name(), "email": fake.email()})
        users.state("admin", lambda fake, row: {**row, "role": "admin"})

        class UserSeeder(Seeder):
            def run(self, db):
                for row in users.with_state("admin").make_many(3):
                    db.execute(
                        "INSERT INTO users (name, email, role) VALUES (?, ?, ?)",
                        (row["name"], row["email"], row["role"]),
                    )
    """

    def __init__(self, definition: Definition[T], faker: Faker | None = None) -> None:
        self.definition = definition
        self.faker = faker if faker is not None else Faker()
        self._states: dict[str, StateFunction[T]] = {}
        self._active_states: list[str] = []

    def state(self, name: str, modifier: StateFunction[T]) -> Factory[T]:
        """Register a named state; returns this factory for chaining."""
        self._states[name] = modifier
        return self

    def with_state(self, name: str) -> Factory[T]:
        """Copy of this factory that also applies the state ``name``.

        States unknown at :meth:`make` time are skipped.
        """
        clone = self._copy()
        clone._active_states.append(name)
        return clone

    def with_faker(self, faker: Faker) -> Factory[T]:
        """Copy of this factory that draws values from ``faker``."""
        clone = self._copy()
        clone.faker = faker
        return clone

    def make(self) -> T:
        """Build one instance, then apply active states in the order added."""
        instance = self.definition(self.faker)
        for name in self._active_states:
            modifier = self._states.get(name)
            if modifier is not None:
                instance = modifier(self.faker, instance)
        return instance

    def make_many(self, count: int) -> list[T]:
        """Build ``count`` independent instances (none when ``count <= 0``)."""
        return [self.make() for _ in range(max(count, 0))]

    def _copy(self) -> Factory[T]:
        # states are shared with the original; active states are not
        clone = copy.copy(self)
        clone._active_states = list(self._active_states)
        return clone

    def __repr__(self) -> str:
        return f"Factory(states={sorted(self._states)}, active={self._active_states})"


def seeded_faker(seed: int, locale: str | None = None) -> Faker:
    """Faker with its own deterministic random generator."""
    faker = Faker(locale)
    faker.seed_instance(seed)
    return faker
