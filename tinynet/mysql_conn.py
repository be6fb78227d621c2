"""A single MySQL connection with a row cursor over query results."""

from __future__ import annotations

import time
from typing import Any, Iterator, Optional, Sequence, Union

import pymysql

DEFAULT_PORT = 3306
CHARSET = "utf8"


class MysqlConn:
    """Wraps one database connection and the result set of its last query."""

    def __init__(self) -> None:
        self._conn: Optional[Any] = None
        self._rows: Optional[Iterator[Sequence[Any]]] = None
        self._row: Optional[Sequence[Any]] = None
        self._alive_since = time.monotonic_ns()

    def _connection(self) -> Any:
        if self._conn is None:
            raise RuntimeError("not connected to a database")
        return self._conn

    def connect(
        self,
        user: str,
        passwd: str,
        db_name: str,
        ip: str,
        port: int = DEFAULT_PORT,
    ) -> None:
        """Open the connection; database errors propagate."""
        self.close()
        self._conn = pymysql.connect(
            host=ip,
            user=user,
            password=passwd,
            database=db_name,
            port=port,
            charset=CHARSET,
            autocommit=True,
        )

    def update(self, sql: str) -> int:
        """Run an insert, update or delete; return the affected row count."""
        with self._connection().cursor() as cursor:
            return cursor.execute(sql)

    def query(self, sql: str) -> None:
        """Run a query and keep its result set for :meth:`next`."""
        self._free_result()
        with self._connection().cursor() as cursor:
            cursor.execute(sql)
            rows = cursor.fetchall()
        self._rows = iter(list(rows or ()))

    def next(self) -> bool:
        """Move to the next row of the result set; False when none is left."""
        if self._rows is None:
            return False
        self._row = next(self._rows, None)
        return self._row is not None

    def value(self, index: int) -> Union[str, bytes]:
        """Field ``index`` of the current row as text (binary data as bytes).

        An index out of range, a missing row or a NULL field gives "".
        """
        row = self._row
        if row is None or not 0 <= index < len(row):
            return ""
        field = row[index]
        if field is None:
            return ""
        if isinstance(field, (bytes, bytearray)):
            return bytes(field)
        return str(field)

    def transaction(self) -> None:
        """Switch to manual commit."""
        self._connection().autocommit(False)

    def commit(self) -> None:
        self._connection().commit()

    def rollback(self) -> None:
        self._connection().rollback()

    def refresh_alive_time(self) -> None:
        """Mark now as the start of the idle period."""
        self._alive_since = time.monotonic_ns()

    def alive_time(self) -> int:
        """Milliseconds since the last :meth:`refresh_alive_time`."""
        return (time.monotonic_ns() - self._alive_since) // 1_000_000

    def _free_result(self) -> None:
        self._rows = None
        self._row = None

    def close(self) -> None:
        """Close the connection and drop any result set."""
        self._free_result()
        if self._conn is not None:
            conn, self._conn = self._conn, None
            conn.close()