"""
Loguru configuration for the installer.

The console handler writes to stderr, which the Textual UI owns while it is
running, so it can be suspended around the UI session. The optional file
handler keeps recording everything.
"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from loguru import logger

LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"

_state: dict[str, int | str | None] = {"console_id": None, "console_level": "INFO"}


def _add_console_handler(level: str) -> int:
    return logger.add(sys.stderr, level=level, format=LOG_FORMAT, colorize=True)


def setup_logging(log_file: Path | None = None, debug: bool = False) -> None:
    """Replace loguru's default handler with the installer's handlers.

    Args:
        log_file: Optional file that receives every record at DEBUG level
        debug: Lower the console level from INFO to DEBUG
    """
    logger.remove()
    level = "DEBUG" if debug else "INFO"
    _state["console_level"] = level
    _state["console_id"] = _add_console_handler(level)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        logger.add(log_file, level="DEBUG", format=LOG_FORMAT, rotation="10 MB")


@contextmanager
def console_logging_suspended() -> Iterator[None]:
    """Silence the stderr handler while a full-screen UI is running."""
    console_id = _state["console_id"]
    if console_id is None:
        yield
        return

    logger.remove(console_id)
    _state["console_id"] = None
    try:
        yield
    finally:
        _state["console_id"] = _add_console_handler(str(_state["console_level"]))
