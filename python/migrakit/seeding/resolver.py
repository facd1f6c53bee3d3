"""Dependency ordering of seeders."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING

from migrakit.errors import CircularDependencyError, SeederNotFoundError

if TYPE_CHECKING:
    from migrakit.seeding.registry import RegisteredSeeder


def resolve_order(seeders: Mapping[str, RegisteredSeeder], roots: Iterable[str]) -> list[str]:
    """Order ``roots`` and their transitive dependencies so dependencies come first.

    Depth-first: each node is marked in progress while its dependencies are
    visited, then done. Dependencies are visited in name order and roots in
    the order given, so the result is deterministic.

    Raises:
        CircularDependencyError: If a cycle is reachable, self-dependency included.
        SeederNotFoundError: If a dependency is not registered.
    """
    order: list[str] = []
    done: set[str] = set()
    path: list[str] = []

    def visit(name: str) -> None:
        if name in done:
            return
        if name in path:
            raise CircularDependencyError(path[path.index(name):] + [name])

        entry = seeders.get(name)
        if entry is None:
            raise SeederNotFoundError(f"dependency {name!r}: seeder not found")

        path.append(name)
        for dependency in sorted(entry.dependencies):
            visit(dependency)
        path.pop()

        done.add(name)
        order.append(name)

    for root in roots:
        visit(root)
    return order
