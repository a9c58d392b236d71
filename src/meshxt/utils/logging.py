"""Logging setup shared by the CLI subcommands."""

from __future__ import annotations

import logging
import os
from typing import Union

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LOG_LEVEL = "INFO"
LOG_LEVEL_ENV = "MESHXT_LOG_LEVEL"


def resolve_level(level: Union[str, int, None] = None) -> int:
    """Return the numeric level from *level*, ``$MESHXT_LOG_LEVEL`` or the default."""

    if isinstance(level, int):
        return level
    name = (level or os.getenv(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).upper()
    return getattr(logging, name, logging.INFO)


def configure_logging(level: Union[str, int, None] = None) -> int:
    """Send log records to stderr through rich so packet hex on stdout stays clean."""

    resolved = resolve_level(level)
    handler = RichHandler(console=Console(stderr=True), show_path=False)
    logging.basicConfig(level=resolved, format="%(message)s", datefmt="[%X]", handlers=[handler])
    return resolved


__all__ = ["DEFAULT_LOG_LEVEL", "LOG_LEVEL_ENV", "configure_logging", "resolve_level"]
