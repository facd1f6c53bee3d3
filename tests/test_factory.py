"""Tests for building seed rows with Factory."""

from __future__ import annotations

from dataclasses import dataclass, replace

from migrakit.seeding import Factory, seeded_faker


@dataclass
class User:
    name: str
    email: str
    age: int


def define_user(fake) -> User:
    return User(name=fake.name(), email=fake.email(), age=fake.pyint(min_value=18, max_value=65))


def user_factory() -> Factory[User]:
    return Factory(define_user).with_faker(seeded_faker(42))


class TestMake:
    """Test building single instances and batches."""

    def test_make_populates_fields(self) -> None:
        user = user_factory().make()

        assert user.name
        assert "@" in user.email
        assert 18 <= user.age <= 65

    def test_make_many(self) -> None:
        users = user_factory().make_many(5)

        assert len(users) == 5
        assert all(user.name and user.email for user in users)

    def test_make_many_non_positive(self) -> None:
        """Zero or a negative count builds nothing."""
        factory = user_factory()

        assert factory.make_many(0) == []
        assert factory.make_many(-1) == []

    def test_same_seed_same_values(self) -> None:
        """Factories sharing a seed produce identical instances."""
        factory = Factory(define_user)

        first = factory.with_faker(seeded_faker(123)).make()
        second = factory.with_faker(seeded_faker(123)).make()

        assert first == second


class TestStates:
    """Test named state modifiers."""

    def test_state_overrides_fields(self) -> None:
        factory = user_factory()
        factory.state("admin", lambda fake, user: replace(user, name="Admin User"))

        admin = factory.with_state("admin").make()

        assert admin.name == "Admin User"
        assert admin.email
        assert 18 <= admin.age <= 65

    def test_with_state_leaves_original_untouched(self) -> None:
        factory = user_factory()
        factory.state("senior", lambda fake, user: replace(user, age=99))

        senior_factory = factory.with_state("senior")

        assert 18 <= factory.make().age <= 65
        assert senior_factory.make().age == 99

    def test_unknown_state_is_skipped(self) -> None:
        user = user_factory().with_state("nonexistent").make()

        assert user.name

    def test_states_apply_in_order(self) -> None:
        factory = user_factory()
        factory.state("named", lambda fake, user: replace(user, name="Custom Name"))
        factory.state("aged", lambda fake, user: replace(user, age=100))
        factory.state("renamed", lambda fake, user: replace(user, name=user.name + " Jr"))

        user = factory.with_state("named").with_state("aged").with_state("renamed").make()

        assert user.name == "Custom Name Jr"
        assert user.age == 100

    def test_state_returns_same_factory(self) -> None:
        factory = user_factory()

        result = factory.state("a", lambda fake, user: user).state("b", lambda fake, user: user)

        assert result is factory

    def test_state_registered_after_copy_is_visible(self) -> None:
        """Copies share the state table with the factory they came from."""
        factory = user_factory()
        derived = factory.with_state("late")
        factory.state("late", lambda fake, user: replace(user, age=1))

        assert derived.make().age == 1


class TestSeederUsage:
    """Test inserting factory rows from a seeder."""

    def test_rows_inserted(self, sqlite_connection) -> None:
        sqlite_connection.execute("CREATE TABLE users (name TEXT, email TEXT, age INTEGER)")

        for user in user_factory().make_many(3):
            sqlite_connection.execute(
                "INSERT INTO users (name, email, age) VALUES (?, ?, ?)",
                (user.name, user.email, user.age),
            )

        assert sqlite_connection.query_row("SELECT COUNT(*) FROM users") == (3,)
