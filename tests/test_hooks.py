"""Tests for before and after hooks."""

from __future__ import annotations

import pytest

from migrakit.migrations.hooks import HookManager


class TestHookManager:
    """Test hook ordering and error handling."""

    def test_before_hooks_run_in_order(self) -> None:
        hooks = HookManager()
        calls = []
        hooks.register_before(lambda name, direction: calls.append(("first", name, direction)))
        hooks.register_before(lambda name, direction: calls.append(("second", name, direction)))

        hooks.run_before("20240101000000_a", "up")

        assert calls == [("first", "20240101000000_a", "up"), ("second", "20240101000000_a", "up")]

    def test_before_hook_failure_stops_later_hooks(self) -> None:
        """The first failing before hook raises and later hooks do not run."""
        hooks = HookManager()
        calls = []

        def fail(name: str, direction: str) -> None:
            raise RuntimeError("not allowed")

        hooks.register_before(fail)
        hooks.register_before(lambda name, direction: calls.append(name))

        with pytest.raises(RuntimeError, match="not allowed"):
            hooks.run_before("20240101000000_a", "up")
        assert calls == []

    def test_after_hook_errors_are_collected(self) -> None:
        """All after hooks run; their errors are returned, not raised."""
        hooks = HookManager()
        calls = []

        def fail(name: str, direction: str, duration: float) -> None:
            raise RuntimeError("metrics down")

        hooks.register_after(fail)
        hooks.register_after(lambda name, direction, duration: calls.append((name, direction, duration)))

        errors = hooks.run_after("20240101000000_a", "down", 0.25)

        assert len(errors) == 1
        assert str(errors[0]) == "metrics down"
        assert calls == [("20240101000000_a", "down", 0.25)]

    def test_register_returns_hook(self) -> None:
        """Registration returns the hook so it can be used as a decorator."""
        hooks = HookManager()

        def hook(name: str, direction: str) -> None:
            pass

        assert hooks.register_before(hook) is hook
