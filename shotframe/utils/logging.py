"""Root logger setup for the ``shotframe`` command.

``--log-level`` accepts a level name or number; ``SHOTFRAME_LOG_LEVEL`` wins
over it, and a truthy ``SHOTFRAME_DEBUG`` / ``SHOTFRAME_DEBUG_LOGGING`` forces
DEBUG when no explicit level is set.
"""

from __future__ import annotations

import argparse
import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"
LEVEL_ENV_VAR = "SHOTFRAME_LOG_LEVEL"
DEBUG_ENV_VARS = ("SHOTFRAME_DEBUG", "SHOTFRAME_DEBUG_LOGGING")

# Pillow logs every chunk of every PNG it parses at DEBUG.
_NOISY_LOGGERS = ("PIL",)


def parse_level(value: str) -> int:
    """argparse ``type`` for ``--log-level``."""
    text = value.strip().upper()
    if text.isdigit():
        return int(text)
    level = logging.getLevelName(text)
    if not isinstance(level, int):
        raise argparse.ArgumentTypeError(f"unknown log level: {value!r}")
    return level


def env_level() -> Optional[int]:
    """Level forced through the environment, if any."""
    explicit = os.getenv(LEVEL_ENV_VAR)
    if explicit:
        try:
            return parse_level(explicit)
        except argparse.ArgumentTypeError:
            logging.getLogger(__name__).warning(
                "Ignoring %s=%r: not a log level.", LEVEL_ENV_VAR, explicit
            )
    for var in DEBUG_ENV_VARS:
        if os.getenv(var, "").strip().lower() in {"1", "true", "yes", "on"}:
            return logging.DEBUG
    return None


def configure_root(level: int = logging.WARNING) -> int:
    """Configure the root logger once and return the effective level."""
    forced = env_level()
    effective = forced if forced is not None else level
    logging.basicConfig(level=effective, format=LOG_FORMAT, datefmt=DATE_FORMAT)
    logging.getLogger().setLevel(effective)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(effective, logging.INFO))
    return effective


__all__ = ["configure_root", "env_level", "parse_level"]
