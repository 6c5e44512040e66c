"""
Error types raised by the configuration store.

Every failure a user can trigger from a panel is a ``ConfigError``; the
wizard controller catches those and reports them instead of crashing.
"""

from __future__ import annotations


class ConfigError(Exception):
    """Base class for configuration store failures."""


class ConfigValidationError(ConfigError):
    """A value is outside the allowed domain of its key."""

    def __init__(self, key: str, value: object, reason: str) -> None:
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value {value!r} for '{key}': {reason}")


class PersistenceError(ConfigError):
    """The persistence backend could not store or load the configuration."""


class MissingKeyError(ConfigError, KeyError):
    """A panel read a key that was never seeded into the store."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(key)

    def __str__(self) -> str:
        return f"Configuration key '{self.key}' is not set"


class IncompleteConfigurationError(ConfigError):
    """The collected answers do not form an installable configuration."""

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__("Configuration errors:\n" + "\n".join(f"• {p}" for p in problems))
