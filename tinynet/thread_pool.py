"""A fixed-size pool of worker threads fed from a task queue."""

from __future__ import annotations

import threading
from collections import deque
from typing import Callable, Deque, List, Optional

from tinynet import logger
from tinynet.thread import Thread

Task = Callable[[], None]


class ThreadPool:
    """Workers take tasks in FIFO order; on stop they drain the queue and exit."""

    def __init__(
        self,
        name: str = "ThreadPool",
        thread_size: int = 0,
        thread_init_callback: Optional[Task] = None,
    ) -> None:
        self.name = name
        self.thread_size = thread_size
        self.thread_init_callback = thread_init_callback
        self._cond = threading.Condition()
        self._queue: Deque[Task] = deque()
        self._threads: List[Thread] = []
        self._running = False

    def start(self) -> None:
        self._running = True
        for index in range(self.thread_size):
            worker = Thread(self._run_in_thread, f"{self.name}{index + 1}")
            self._threads.append(worker)
            worker.start()
        if self.thread_size == 0 and self.thread_init_callback is not None:
            self.thread_init_callback()

    def stop(self) -> None:
        with self._cond:
            self._running = False
            self._cond.notify_all()

    def close(self) -> None:
        """Stop the pool and wait for every worker to finish."""
        self.stop()
        for worker in self._threads:
            worker.join()

    def queue_size(self) -> int:
        with self._cond:
            return len(self._queue)

    def add(self, task: Task) -> None:
        with self._cond:
            self._queue.append(task)
            self._cond.notify()

    def _take(self) -> Optional[Task]:
        with self._cond:
            while not self._queue:
                if not self._running:
                    return None
                self._cond.wait()
            return self._queue.popleft()

    def _run_in_thread(self) -> None:
        try:
            if self.thread_init_callback is not None:
                self.thread_init_callback()
            while True:
                task = self._take()
                if task is None:
                    return
                task()
        except Exception:
            logger.warn("run_in_thread raised an exception")

    def __enter__(self) -> ThreadPool:
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False