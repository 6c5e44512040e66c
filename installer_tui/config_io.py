from __future__ import annotations

import json
import os
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from loguru import logger

from installer_tui.exceptions import PersistenceError

INSTALLER_CONFIG_KEY = "installer"
SCHEMA_VERSION = 1


def _parse_config(config_json: str) -> dict[str, Any]:
    data = json.loads(config_json) if config_json else {}
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object at the top level, got {type(data).__name__}")
    return data


def _installer_block(data: Mapping[str, Any]) -> dict[str, Any]:
    block = data.get(INSTALLER_CONFIG_KEY, {})
    if not isinstance(block, dict):
        raise ValueError(f"'{INSTALLER_CONFIG_KEY}' must be a JSON object, got {type(block).__name__}")
    return {key: value for key, value in block.items() if key != "schema_version"}


def merge_installer_into_config(config_json: str, installer_block: Mapping[str, Any]) -> str:
    data = _parse_config(config_json)
    data[INSTALLER_CONFIG_KEY] = {"schema_version": SCHEMA_VERSION, **installer_block}
    return json.dumps(data, indent=4, sort_keys=True)


def save_combined_configuration(dest_path: Path, installer_block: Mapping[str, Any]) -> None:
    """Write the installer block into ``dest_path``, keeping any other top-level keys.

    The file is replaced atomically so a failed write never leaves a partial file.

    Raises:
        ValueError: the existing file is not a JSON object
    """
    existing = dest_path.read_text() if dest_path.exists() else ""
    combined = merge_installer_into_config(existing, installer_block)

    dest_path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = dest_path.with_name(dest_path.name + ".tmp")
    tmp_path.write_text(combined)
    os.replace(tmp_path, dest_path)


def load_installer_configuration(config_path: Path) -> dict[str, Any]:
    """Return the installer block of ``config_path``; empty when the file does not exist.

    Raises:
        ValueError: the file is not JSON, or the file or its installer block is not an object
    """
    if not config_path.exists():
        return {}
    return _installer_block(_parse_config(config_path.read_text()))


class PersistenceBackend(ABC):
    """Durable side of the configuration store."""

    @abstractmethod
    def load(self) -> dict[str, Any]:
        """Return previously persisted answers (empty when there are none)."""

    @abstractmethod
    def persist(self, values: Mapping[str, str]) -> None:
        """Store a full snapshot of the answers or raise PersistenceError."""


class MemoryBackend(PersistenceBackend):
    """Keeps the answers for the lifetime of the session only."""

    def __init__(self, initial: Mapping[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def load(self) -> dict[str, Any]:
        return dict(self.data)

    def persist(self, values: Mapping[str, str]) -> None:
        self.data = dict(values)


class JsonFileBackend(PersistenceBackend):
    """Stores the answers in the ``installer`` block of a combined JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = path

    def load(self) -> dict[str, Any]:
        try:
            block = load_installer_configuration(self.path)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Cannot read configuration file {self.path}: {e!s}") from e
        logger.debug(f"Loaded {len(block)} installer settings from {self.path}")
        return block

    def persist(self, values: Mapping[str, str]) -> None:
        try:
            save_combined_configuration(self.path, values)
        except (OSError, ValueError) as e:
            raise PersistenceError(f"Cannot write configuration file {self.path}: {e!s}") from e
