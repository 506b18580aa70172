"""
Log Facade - Timestamped daily log files.

Appends messages to a daily log file, searches log contents, clears a log
file and overwrites the most recently written line for progress-style
logging. Every line is prefixed with the local date and time:

    [17.12.2020 18:00:00] update record: 123

Static methods can be called from anywhere without wiring. ``LogFile``
binds a single log file path for callers that pass a handle around.
"""

import logging
import os
import re
from pathlib import Path
from datetime import datetime
from typing import Optional

from log_utils import tail_lock

logger = logging.getLogger(__name__)

# Trailing byte range scanned for the last newline when truncating
TAIL_WINDOW = 4096

DEFAULT_DIR_NAME = "logs"
DIR_MODE = 0o755


class LogError(Exception):
    """Base class for log file errors."""


class DirectoryNotWritableError(LogError):
    """Raised when the target log directory cannot be written to."""

    def __init__(self, path):
        self.path = Path(path)
        super().__init__(f"Log directory is not writable: '{self.path}'")


class LogFileNotFoundError(LogError, FileNotFoundError):
    """Raised when an operation targets a log file that does not exist."""

    def __init__(self, path):
        self.path = Path(path)
        super().__init__(f"Log file does not exist: '{self.path}'")


def _now() -> datetime:
    return datetime.now()


def format_date(moment: datetime) -> str:
    """Day and month without leading zeros, e.g. ``7.3.2021``."""
    return f"{moment.day}.{moment.month}.{moment.year}"


def format_timestamp(moment: datetime) -> str:
    return f"{format_date(moment)} {moment.strftime('%H:%M:%S')}"


def default_filename(moment: Optional[datetime] = None) -> str:
    """Daily log filename, e.g. ``17.12.2020.log``."""
    return f"{format_date(moment or _now())}.log"


def default_log_dir() -> Path:
    """The ``logs`` directory under the host's working directory."""
    return Path.cwd() / DEFAULT_DIR_NAME


class LogFacade:
    """Static log file operations.

    All methods take explicit paths; nothing is cached between calls.
    """

    @staticmethod
    def write(
        message: str,
        filename: str = "",
        path="",
        overwrite_last_line: bool = False,
    ) -> Path:
        """Append a timestamped message to a log file.

        Args:
            message: Text to log, written as-is.
            filename: Log filename. Defaults to today's date, e.g. ``17.12.2020.log``.
            path: Directory holding the log file. Defaults to ``<cwd>/logs``.
            overwrite_last_line: Remove the file's last line before appending.

        Returns:
            The path of the log file written to.

        Raises:
            DirectoryNotWritableError: If the log directory is not writable.
        """
        log_dir = Path(path) if path else default_log_dir()
        if not log_dir.exists():
            try:
                log_dir.mkdir(mode=DIR_MODE, parents=True, exist_ok=True)
            except OSError as e:
                raise DirectoryNotWritableError(log_dir) from e
            logger.debug(f"Created log directory: {log_dir}")

        if not os.access(log_dir, os.W_OK):
            raise DirectoryNotWritableError(log_dir)

        now = _now()
        log_path = log_dir / (filename or default_filename(now))

        if overwrite_last_line and log_path.exists():
            LogFacade.truncate_last_line(log_path)

        line = f"[{format_timestamp(now)}] {message}\n"
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(line)
        return log_path

    @staticmethod
    def truncate_last_line(log_path) -> None:
        """Remove the last line of a log file.

        Only the final ``TAIL_WINDOW`` bytes are scanned. If they hold no
        newline before the last line, the file is left unchanged.
        """
        log_path = Path(log_path)
        with tail_lock(log_path):
            with open(log_path, "r+b") as f:
                size = f.seek(0, os.SEEK_END)
                start = max(size - TAIL_WINDOW, 0)
                f.seek(start)
                tail = f.read(TAIL_WINDOW).rstrip(b"\n")
                cut = tail.rfind(b"\n")
                if cut == -1:
                    logger.debug(
                        f"No line break in last {TAIL_WINDOW} bytes of {log_path.name}, "
                        "leaving file unchanged"
                    )
                    return
                f.truncate(start + cut + 1)
        logger.debug(f"Truncated last line of {log_path.name}")

    @staticmethod
    def find(log_path, needle: str) -> list[str]:
        """Find the first line fragment starting with ``needle``.

        ``needle`` is used as a regex fragment, not escaped. The match runs
        from the needle to the end of its line.

        Returns:
            ``[full_match, *groups]`` for the first match, or ``[]``.
        """
        LogFacade._check_log_file_exists(log_path)
        contents = Path(log_path).read_text(encoding="utf-8", errors="replace")
        match = re.search(needle + ".*", contents)
        if match is None:
            return []
        return [match.group(0), *match.groups(default="")]

    @staticmethod
    def find_all(log_path, needle: str) -> list[str]:
        """Like ``find`` but return every full match, in file order."""
        LogFacade._check_log_file_exists(log_path)
        contents = Path(log_path).read_text(encoding="utf-8", errors="replace")
        return [m.group(0) for m in re.finditer(needle + ".*", contents)]

    @staticmethod
    def clear(log_path) -> None:
        """Empty a log file, keeping the file itself."""
        LogFacade._check_log_file_exists(log_path)
        with open(log_path, "w", encoding="utf-8"):
            pass
        logger.debug(f"Cleared log file: {log_path}")

    @staticmethod
    def _check_log_file_exists(log_path) -> None:
        if not Path(log_path).is_file():
            raise LogFileNotFoundError(log_path)


class LogFile:
    """Handle bound to a single log file.

    Construct once per target file and pass it where logging is needed.
    """

    def __init__(self, path):
        self.path = Path(path)

    @classmethod
    def for_today(cls, config) -> "LogFile":
        """Handle for today's daily log file under ``config.log_dir``."""
        return cls(Path(config.log_dir) / default_filename())

    def exists(self) -> bool:
        return self.path.is_file()

    def write(self, message: str, overwrite_last_line: bool = False) -> Path:
        return LogFacade.write(
            message,
            filename=self.path.name,
            path=self.path.parent,
            overwrite_last_line=overwrite_last_line,
        )

    def progress(self, message: str) -> Path:
        """Replace the previous line with ``message``."""
        return self.write(message, overwrite_last_line=True)

    def find(self, needle: str) -> list[str]:
        return LogFacade.find(self.path, needle)

    def find_all(self, needle: str) -> list[str]:
        return LogFacade.find_all(self.path, needle)

    def clear(self) -> None:
        LogFacade.clear(self.path)

    def __repr__(self) -> str:
        return f"LogFile({str(self.path)!r})"
