"""Run-scoped execution context shared with the external parsers."""

from __future__ import annotations

from typing import Any, Callable, Optional

MAVEN_SETTINGS_KEY = "buildscan.maven.settings"
ACTIVE_PROFILES_KEY = "buildscan.maven.activeProfiles"


class ExecutionContext:
    """Message store and error sink for one invocation.

    Parsers may report recoverable failures through ``on_error``; they are
    collected in ``errors`` unless a custom handler is given.
    """

    def __init__(self, on_error: Optional[Callable[[Exception], None]] = None):
        self._messages: dict[str, Any] = {}
        self.errors: list[Exception] = []
        self._on_error = on_error or self.errors.append

    def put_message(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any earlier value."""
        self._messages[key] = value

    def get_message(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key``, or ``default``."""
        return self._messages.get(key, default)

    def on_error(self, error: Exception) -> None:
        """Report a recoverable failure to the configured handler."""
        self._on_error(error)

    # Maven-specific view

    def set_maven_settings(self, settings) -> None:
        """Record the user settings the descriptor parser should honour."""
        self.put_message(MAVEN_SETTINGS_KEY, settings)

    def get_maven_settings(self):
        """Settings recorded for this run, or None when none were loaded."""
        return self.get_message(MAVEN_SETTINGS_KEY)

    def set_active_profiles(self, profiles: list[str]) -> None:
        """Record the explicitly activated profile ids. The list is copied."""
        self.put_message(ACTIVE_PROFILES_KEY, list(profiles))

    def get_active_profiles(self) -> list[str]:
        """Copy of the recorded profile ids; empty when none were set."""
        return list(self.get_message(ACTIVE_PROFILES_KEY, []))
