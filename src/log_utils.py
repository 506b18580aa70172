"""Shared locking utilities for log file truncation.

Truncating the last line of a log file is a read-modify-write on the tail
of the file, so it must hold an exclusive lock for its whole duration.
Plain appends do not take this lock.
"""

import threading
from contextlib import contextmanager
from pathlib import Path

from filelock import FileLock

# Single shared lock for ALL tail truncations in this process
log_file_lock = threading.Lock()


def lock_path_for(log_path) -> Path:
    """Path of the advisory lock file kept beside the log file."""
    log_path = Path(log_path)
    return log_path.with_name(log_path.name + ".lock")


@contextmanager
def tail_lock(log_path):
    """Hold the exclusive advisory lock for ``log_path``.

    Blocks until both the in-process lock and the cross-process file lock
    are acquired.

    The file lock is taken on the ``<log>.lock`` sidecar returned by
    ``lock_path_for``, not on the log file itself. Other processes only
    coordinate with truncation if they lock the same sidecar. Sidecars are
    left in place after release; remove them together with old logs.
    """
    with log_file_lock:
        with FileLock(str(lock_path_for(log_path))):
            yield
