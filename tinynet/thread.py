"""A named thread that reports its native id once started."""

from __future__ import annotations

import threading
from typing import Callable, Optional

from tinynet.current_thread import tid as _current_tid

_created_lock = threading.Lock()
_num_created = 0


def num_created() -> int:
    """How many Thread objects have been constructed."""
    return _num_created


class Thread:
    """Runs ``func`` on a daemon thread; ``start`` returns once its id is known."""

    def __init__(self, func: Callable[[], None], name: str = "") -> None:
        global _num_created
        with _created_lock:
            _num_created += 1
            number = _num_created
        self._func = func
        self._name = name or f"Thread{number}"
        self._started = False
        self._joined = False
        self._tid = 0
        self._thread: Optional[threading.Thread] = None

    @property
    def name(self) -> str:
        return self._name

    @property
    def started(self) -> bool:
        return self._started

    @property
    def tid(self) -> int:
        return self._tid

    def start(self) -> None:
        if self._started:
            raise RuntimeError(f"thread {self._name} already started")
        self._started = True
        ready = threading.Event()

        def run() -> None:
            self._tid = _current_tid()
            ready.set()
            self._func()

        self._thread = threading.Thread(target=run, name=self._name, daemon=True)
        self._thread.start()
        ready.wait()

    def join(self) -> None:
        if self._thread is None:
            raise RuntimeError(f"thread {self._name} was never started")
        self._joined = True
        self._thread.join()