"""Database seeding with dependency ordering."""

from __future__ import annotations

from migrakit.seeding.factory import Factory, seeded_faker
from migrakit.seeding.registry import RegisteredSeeder, SeederRegistry
from migrakit.seeding.resolver import resolve_order
from migrakit.seeding.runner import SeederRunner
from migrakit.seeding.script import SeederScript, load_seeders
from migrakit.seeding.seeder import Seeder

__all__ = [
    "Factory",
    "RegisteredSeeder",
    "Seeder",
    "SeederRegistry",
    "SeederRunner",
    "SeederScript",
    "load_seeders",
    "resolve_order",
    "seeded_faker",
]
