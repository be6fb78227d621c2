"""Asynchronous log back end: front ends append, a thread writes to disk."""

from __future__ import annotations

import threading
from typing import List, Optional

from tinynet.fixed_buffer import LARGE_BUFFER, FixedBuffer
from tinynet.log_file import LogFile
from tinynet.thread import Thread


class AsyncLogging:
    """Double-buffered logger writing to a rolling LogFile on its own thread."""

    def __init__(self, basename: str, roll_size: int, flush_interval: float = 3) -> None:
        self.basename = basename
        self.roll_size = roll_size
        self.flush_interval = flush_interval
        self._running = False
        self._cond = threading.Condition()
        self._current: Optional[FixedBuffer] = FixedBuffer(LARGE_BUFFER)
        self._next: Optional[FixedBuffer] = FixedBuffer(LARGE_BUFFER)
        self._buffers: List[FixedBuffer] = []
        self._thread = Thread(self._thread_func, "Logging")

    @property
    def running(self) -> bool:
        return self._running

    def append(self, data: bytes) -> None:
        """Queue ``data`` for writing; wakes the writer when a buffer fills."""
        with self._cond:
            assert self._current is not None
            if self._current.avail() > len(data):
                self._current.append(data)
                return
            self._buffers.append(self._current)
            if self._next is not None:
                self._current, self._next = self._next, None
            else:
                self._current = FixedBuffer(LARGE_BUFFER)
            self._current.append(data)
            self._cond.notify()

    def start(self) -> None:
        self._running = True
        self._thread.start()

    def stop(self) -> None:
        with self._cond:
            self._running = False
            self._cond.notify()
        self._thread.join()

    def _swap_out(
        self, spare1: Optional[FixedBuffer], spare2: Optional[FixedBuffer], wait: bool
    ):
        with self._cond:
            if wait and not self._buffers:
                self._cond.wait(self.flush_interval)
            assert self._current is not None
            self._buffers.append(self._current)
            self._current = spare1 if spare1 is not None else FixedBuffer(LARGE_BUFFER)
            spare1 = None
            to_write, self._buffers = self._buffers, []
            if self._next is None:
                self._next = spare2 if spare2 is not None else FixedBuffer(LARGE_BUFFER)
                spare2 = None
        return to_write, spare1, spare2

    def _thread_func(self) -> None:
        output = LogFile(self.basename, self.roll_size, 0)
        spare1: Optional[FixedBuffer] = FixedBuffer(LARGE_BUFFER)
        spare2: Optional[FixedBuffer] = FixedBuffer(LARGE_BUFFER)
        try:
            while self._running:
                to_write, spare1, spare2 = self._swap_out(spare1, spare2, wait=True)
                for buffer in to_write:
                    output.append(buffer.to_bytes())
                del to_write[2:]
                if spare1 is None:
                    spare1 = to_write.pop()
                    spare1.reset()
                if spare2 is None:
                    spare2 = to_write.pop()
                    spare2.reset()
                output.flush()
            to_write, _, _ = self._swap_out(spare1, spare2, wait=False)
            for buffer in to_write:
                output.append(buffer.to_bytes())
            output.flush()
        finally:
            output.close()

    def __enter__(self) -> AsyncLogging:
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._running:
            self.stop()
        return False