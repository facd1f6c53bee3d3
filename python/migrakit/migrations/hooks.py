"""Before/after callbacks around each migration."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

BeforeHook = Callable[[str, str], None]
"""``(migration_name, direction)``; raising aborts the migration."""

AfterHook = Callable[[str, str, float], None]
"""``(migration_name, direction, duration_seconds)``; errors are discarded."""


class HookManager:
    """Ordered before and after hooks.

    Before hooks run in registration order and the first exception stops the
    migration. After hooks all run; their exceptions are collected, logged and
    returned to the caller instead of being raised, so a failing after hook
    never changes the outcome of the migration itself.
    """

    def __init__(self) -> None:
        self._before: list[BeforeHook] = []
        self._after: list[AfterHook] = []

    def register_before(self, hook: BeforeHook) -> BeforeHook:
        self._before.append(hook)
        return hook

    def register_after(self, hook: AfterHook) -> AfterHook:
        self._after.append(hook)
        return hook

    def run_before(self, name: str, direction: str) -> None:
        for hook in self._before:
            hook(name, direction)

    def run_after(self, name: str, direction: str, duration: float) -> list[Exception]:
        """Invoke every after hook and return the exceptions they raised."""
        errors: list[Exception] = []
        for hook in self._after:
            try:
                hook(name, direction, duration)
            except Exception as e:
                logger.warning("After hook for %s (%s) failed: %s", name, direction, e)
                errors.append(e)
        return errors
