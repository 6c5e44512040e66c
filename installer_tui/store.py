"""
Configuration store shared by every wizard step.

The store is a string-to-string mapping seeded with defaults. Writes are
validated against the key's domain and persisted through a backend before
they are committed in memory, so a failed write leaves the store exactly as
it was. Failures are raised to the caller; the wizard controller publishes
them on the store's error channel for the UI to display.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping

from loguru import logger
from pydantic import ValidationError

from installer_tui.config_io import MemoryBackend, PersistenceBackend
from installer_tui.exceptions import ConfigError, ConfigValidationError, MissingKeyError, PersistenceError
from installer_tui.menu.models import InstallerConfig, default_config_map
from installer_tui.shared import CONFIG_KEYS

ErrorListener = Callable[[ConfigError], None]


class ConfigStore(Mapping[str, str]):
    def __init__(self, backend: PersistenceBackend | None = None, values: Mapping[str, str] | None = None) -> None:
        self._backend: PersistenceBackend = backend if backend is not None else MemoryBackend()
        self._values: dict[str, str] = default_config_map()
        if values:
            self._values.update(values)
        # Keys whose last write was final; a non-final write marks the key as not yet complete
        self._final: set[str] = set()
        self._listeners: list[ErrorListener] = []
        self.last_error: ConfigError | None = None

    @classmethod
    def load(cls, backend: PersistenceBackend) -> ConfigStore:
        """Seed a store with defaults overlaid by the answers the backend already holds.

        Unknown keys and non-string values are dropped. Known keys keep their
        stored value even when it is outside the key's domain; panels fall back
        to their defaults when rendering such values.
        """
        prior = backend.load()
        values: dict[str, str] = {}
        for key, value in prior.items():
            if key not in CONFIG_KEYS:
                logger.debug(f"Ignoring unknown configuration key '{key}'")
                continue
            if not isinstance(value, str):
                logger.warning(f"Ignoring non-string value for '{key}': {value!r}")
                continue
            values[key] = value
        logger.info(f"Configuration store seeded with {len(values)} prior answers")
        return cls(backend, values)

    def __getitem__(self, key: str) -> str:
        try:
            return self._values[key]
        except KeyError:
            raise MissingKeyError(key) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def write(self, key: str, value: str, is_final: bool = False) -> None:
        """Validate, persist and commit a single value.

        The writer never navigates; callers advance the wizard after a
        successful final write.

        Raises:
            ConfigValidationError: unknown key or value outside the key's domain
            PersistenceError: the backend failed to store the new snapshot
        """
        try:
            normalized = InstallerConfig.validate_setting(key, value)
        except ValueError as e:
            raise ConfigValidationError(key, value, _describe(e)) from e

        candidate = {**self._values, key: normalized}
        self._persist(candidate)

        self._values = candidate
        if is_final:
            self._final.add(key)
        else:
            self._final.discard(key)
        logger.debug(f"Stored {key}={normalized!r} (final={is_final})")

    def save(self) -> None:
        """Persist the full current snapshot."""
        self._persist(dict(self._values))
        logger.info("Configuration saved")

    def is_final(self, key: str) -> bool:
        return key in self._final

    def snapshot(self) -> dict[str, str]:
        return dict(self._values)

    def subscribe(self, listener: ErrorListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: ErrorListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def report_error(self, error: ConfigError) -> None:
        """Publish a failed write to everyone listening on the error channel."""
        self.last_error = error
        for listener in self._listeners:
            listener(error)

    def _persist(self, values: Mapping[str, str]) -> None:
        try:
            self._backend.persist(values)
        except PersistenceError:
            raise
        except OSError as e:
            raise PersistenceError(f"Failed to persist configuration: {e!s}") from e


def _describe(error: ValueError) -> str:
    if isinstance(error, ValidationError):
        return error.errors()[0]["msg"]
    return str(error)
