"""A pool of database connections that grows on demand and trims idle ones."""

from __future__ import annotations

import json
import os
import threading
from collections import deque
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Deque, Iterator, Union

import pymysql

from tinynet import logger
from tinynet.mysql_conn import MysqlConn

RECYCLE_INTERVAL = 0.5

_CONFIG_KEYS = {
    "ip": "ip",
    "user": "userName",
    "password": "password",
    "db_name": "dbName",
    "port": "port",
    "min_size": "minSize",
    "max_size": "maxSize",
    "timeout": "timeout",
    "max_idle_time": "maxIdleTime",
}


@dataclass(frozen=True)
class PoolConfig:
    """Connection settings; ``timeout`` and ``max_idle_time`` are milliseconds."""

    ip: str
    user: str
    password: str
    db_name: str
    port: int
    min_size: int
    max_size: int
    timeout: int
    max_idle_time: int


def load_config(path: Union[str, os.PathLike] = "conf.json") -> PoolConfig:
    """Read a pool configuration from a JSON file."""
    with open(path, encoding="utf-8") as handle:
        data = json.load(handle)
    try:
        values = {name: data[key] for name, key in _CONFIG_KEYS.items()}
    except KeyError as exc:
        raise ValueError(f"missing key {exc.args[0]!r} in {os.fspath(path)}") from None
    return PoolConfig(**values)


class ConnectionPool:
    """Keeps between ``min_size`` and ``max_size`` open connections.

    A producer thread opens a connection whenever none is idle; a recycler
    thread closes idle connections beyond ``min_size`` once they have been
    idle for ``max_idle_time`` milliseconds.
    """

    def __init__(self, config: PoolConfig) -> None:
        self.config = config
        self._cond = threading.Condition()
        self._queue: Deque[MysqlConn] = deque()
        self._current_size = 0
        self._closed = False
        self._stop = threading.Event()
        for _ in range(config.min_size):
            self._add_connection()
        self._producer = threading.Thread(
            target=self._produce_connection, name="ConnectionProducer", daemon=True
        )
        self._recycler = threading.Thread(
            target=self._recycle_connection, name="ConnectionRecycler", daemon=True
        )
        self._producer.start()
        self._recycler.start()

    @classmethod
    def from_json_file(cls, path: Union[str, os.PathLike] = "conf.json") -> ConnectionPool:
        return cls(load_config(path))

    @property
    def current_size(self) -> int:
        """Open connections, idle or in use."""
        with self._cond:
            return self._current_size

    @property
    def idle_count(self) -> int:
        """Connections waiting in the pool."""
        with self._cond:
            return len(self._queue)

    def _add_connection(self) -> None:
        cfg = self.config
        conn = MysqlConn()
        conn.connect(cfg.user, cfg.password, cfg.db_name, cfg.ip, cfg.port)
        conn.refresh_alive_time()
        self._queue.append(conn)
        self._current_size += 1

    def _produce_connection(self) -> None:
        with self._cond:
            while True:
                while self._queue and not self._closed:
                    self._cond.wait()
                if self._closed:
                    return
                if self._current_size < self.config.max_size:
                    try:
                        self._add_connection()
                    except pymysql.MySQLError as exc:
                        logger.warn("cannot open database connection: ", str(exc))
                        self._cond.wait(self.config.timeout / 1000)
                        continue
                    self._cond.notify_all()
                else:
                    self._cond.wait()

    def _recycle_connection(self) -> None:
        while not self._stop.wait(RECYCLE_INTERVAL):
            with self._cond:
                while len(self._queue) > self.config.min_size:
                    conn = self._queue[0]
                    if conn.alive_time() < self.config.max_idle_time:
                        break
                    self._queue.popleft()
                    conn.close()
                    self._current_size -= 1

    def _give_back(self, conn: MysqlConn) -> None:
        with self._cond:
            if self._closed:
                conn.close()
                self._current_size -= 1
                return
            conn.refresh_alive_time()
            self._queue.append(conn)
            self._cond.notify_all()

    @contextmanager
    def get_connection(self) -> Iterator[MysqlConn]:
        """Borrow a connection, waiting until one is free.

        The connection goes back to the pool when the ``with`` block ends.
        Raises RuntimeError if the pool is closed.
        """
        with self._cond:
            while not self._queue:
                if self._closed:
                    raise RuntimeError("connection pool is closed")
                self._cond.wait(self.config.timeout / 1000)
            if self._closed:
                raise RuntimeError("connection pool is closed")
            conn = self._queue.popleft()
            self._cond.notify_all()
        try:
            yield conn
        finally:
            self._give_back(conn)

    def close(self) -> None:
        """Stop the background threads and close every idle connection."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._stop.set()
            self._cond.notify_all()
        self._producer.join()
        self._recycler.join()
        with self._cond:
            while self._queue:
                self._queue.popleft().close()
                self._current_size -= 1