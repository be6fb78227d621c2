"""Log file that rolls over by size and by day."""

from __future__ import annotations

import threading
import time
from typing import Optional

from tinynet.file_util import FileUtil

ROLL_PER_SECONDS = 60 * 60 * 24


def log_file_name(basename: str, now: float) -> str:
    """File name for a log started at ``now``: basename.YYYYmmdd-HHMMSS.log."""
    return basename + time.strftime(".%Y%m%d-%H%M%S", time.localtime(now)) + ".log"


class LogFile:
    """Writes log data to a file, starting a new one when it grows too large
    or a new day begins."""

    def __init__(
        self,
        basename: str,
        roll_size: int,
        flush_interval: int = 3,
        check_every_n: int = 1024,
    ) -> None:
        self.basename = basename
        self.roll_size = roll_size
        self.flush_interval = flush_interval
        self.check_every_n = check_every_n
        self._count = 0
        self._lock = threading.Lock()
        self._start_of_period = 0
        self._last_roll = 0
        self._last_flush = 0
        self._file: Optional[FileUtil] = None
        self.roll_file()

    @property
    def current_file_name(self) -> str:
        assert self._file is not None
        return self._file.file_name

    def append(self, data: bytes) -> None:
        with self._lock:
            self._append_in_lock(data)

    def _append_in_lock(self, data: bytes) -> None:
        assert self._file is not None
        self._file.append(data)
        if self._file.written_bytes > self.roll_size:
            self.roll_file()
            return
        self._count += 1
        if self._count >= self.check_every_n:
            self._count = 0
            now = int(time.time())
            this_period = now // ROLL_PER_SECONDS * ROLL_PER_SECONDS
            if this_period != self._start_of_period:
                self.roll_file()
            elif now - self._last_flush > self.flush_interval:
                self._last_flush = now
                self._file.flush()

    def flush(self) -> None:
        if self._file is not None:
            self._file.flush()

    def roll_file(self) -> bool:
        """Start a new file unless one was already started this second."""
        now = int(time.time())
        filename = log_file_name(self.basename, now)
        start = now // ROLL_PER_SECONDS * ROLL_PER_SECONDS
        if now > self._last_roll:
            self._last_roll = now
            self._last_flush = now
            self._start_of_period = start
            if self._file is not None:
                self._file.close()
            self._file = FileUtil(filename)
            return True
        return False

    def close(self) -> None:
        if self._file is not None:
            self._file.close()