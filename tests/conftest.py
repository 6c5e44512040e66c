from collections.abc import Mapping

import pytest

from installer_tui.config_io import MemoryBackend, PersistenceBackend
from installer_tui.exceptions import PersistenceError
from installer_tui.store import ConfigStore


class FailingBackend(PersistenceBackend):
    """Backend whose writes always fail."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self.initial = dict(initial or {})
        self.attempts = 0

    def load(self) -> dict:
        return dict(self.initial)

    def persist(self, values: Mapping[str, str]) -> None:
        self.attempts += 1
        raise PersistenceError("disk full")


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def store(backend: MemoryBackend) -> ConfigStore:
    return ConfigStore(backend)


@pytest.fixture
def failing_store() -> ConfigStore:
    return ConfigStore(FailingBackend(), {"filesystem-type": "EXT4"})


@pytest.fixture
def failing_backend() -> FailingBackend:
    return FailingBackend()
