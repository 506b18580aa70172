"""
Startup configuration for daily log files.

The host application reads this once at startup and passes the result to
``LogFile.for_today`` or ``DailyLogHandler``. Log operations themselves
never look at the environment.
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from log_facade import DEFAULT_DIR_NAME

DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class LogConfig:
    """Default log directory for a host application."""

    log_dir: Path

    @classmethod
    def from_env(cls, base_dir=None) -> "LogConfig":
        """Build config from ``LOG_DIR`` (``.env`` files are honoured).

        Falls back to a ``logs`` directory under ``base_dir``, or under the
        working directory when no base is given.
        """
        load_dotenv()
        log_dir = os.getenv("LOG_DIR")
        if log_dir:
            return cls(log_dir=Path(log_dir))
        base = Path(base_dir) if base_dir else Path.cwd()
        return cls(log_dir=base / DEFAULT_DIR_NAME)


def get_log_level() -> str:
    """``LOG_LEVEL`` from the environment, ``INFO`` if unset or invalid."""
    load_dotenv()
    return _normalize_level(os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL))


def _normalize_level(level: str) -> str:
    level = level.upper()
    if not isinstance(getattr(logging, level, None), int):
        return DEFAULT_LOG_LEVEL
    return level


def setup_logging(level: Optional[str] = None) -> None:
    """Configure console logging for the host process.

    Unknown level names fall back to ``INFO``.
    """
    level = _normalize_level(level) if level else get_log_level()
    logging.basicConfig(
        level=getattr(logging, level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        handlers=[logging.StreamHandler()],
    )
