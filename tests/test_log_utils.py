"""Tests for the truncation lock helpers."""

import threading
import time

import pytest
from filelock import FileLock, Timeout

from log_facade import LogFacade
from log_utils import lock_path_for, log_file_lock, tail_lock


class TestLockPath:

    def test_lock_file_sits_beside_log(self, tmp_path):
        assert lock_path_for(tmp_path / "17.12.2020.log") == tmp_path / "17.12.2020.log.lock"

    def test_accepts_string_path(self, tmp_path):
        assert lock_path_for(str(tmp_path / "app.log")).name == "app.log.lock"


class TestTailLock:

    def test_holds_in_process_lock(self, tmp_path):
        with tail_lock(tmp_path / "app.log"):
            assert log_file_lock.locked()
        assert not log_file_lock.locked()

    def test_creates_lock_file(self, tmp_path):
        with tail_lock(tmp_path / "app.log"):
            assert (tmp_path / "app.log.lock").exists()

    def test_released_on_error(self, tmp_path):
        try:
            with tail_lock(tmp_path / "app.log"):
                raise RuntimeError("boom")
        except RuntimeError:
            pass
        assert not log_file_lock.locked()

    def test_serializes_threads(self, tmp_path):
        events = []

        def worker(name):
            with tail_lock(tmp_path / "app.log"):
                events.append(f"{name}-in")
                time.sleep(0.05)
                events.append(f"{name}-out")

        threads = [threading.Thread(target=worker, args=(n,)) for n in ("a", "b")]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=5)

        assert len(events) == 4
        # Each holder exits before the next enters
        assert events[0][0] == events[1][0]
        assert events[2][0] == events[3][0]


class TestFileLockCoordination:
    """Holders of the sidecar file lock and truncation exclude each other."""

    def test_second_file_lock_times_out_while_held(self, tmp_path):
        log_path = tmp_path / "app.log"
        with tail_lock(log_path):
            with pytest.raises(Timeout):
                FileLock(str(lock_path_for(log_path)), timeout=0.1).acquire()

    def test_truncation_waits_for_external_holder(self, tmp_path):
        log_path = tmp_path / "app.log"
        log_path.write_bytes(b"A\nB\n")
        external = FileLock(str(lock_path_for(log_path)))

        external.acquire()
        try:
            worker = threading.Thread(target=LogFacade.truncate_last_line, args=(log_path,))
            worker.start()
            time.sleep(0.2)
            assert worker.is_alive()
            assert log_path.read_bytes() == b"A\nB\n"
        finally:
            external.release()

        worker.join(timeout=5)
        assert not worker.is_alive()
        assert log_path.read_bytes() == b"A\n"
