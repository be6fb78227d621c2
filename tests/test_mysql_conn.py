from unittest import mock

import pymysql
import pytest

from tinynet.mysql_conn import CHARSET, DEFAULT_PORT, MysqlConn

INSERT_SQL = "insert into user values(1, 'zhang san', '221B')"


class FakeCursor:
    def __init__(self, connection):
        self.connection = connection
        self.rows = ()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, sql):
        if sql.startswith("bad"):
            raise pymysql.err.ProgrammingError(1064, "syntax error")
        self.connection.executed.append(sql)
        if sql.startswith("select"):
            self.rows = self.connection.table
            return len(self.rows)
        return 1

    def fetchall(self):
        return self.rows


class FakeConnection:
    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.executed = []
        self.table = ()
        self.autocommit_calls = []
        self.commits = 0
        self.rollbacks = 0
        self.closed = False

    def cursor(self):
        return FakeCursor(self)

    def autocommit(self, flag):
        self.autocommit_calls.append(flag)

    def commit(self):
        self.commits += 1

    def rollback(self):
        self.rollbacks += 1

    def close(self):
        self.closed = True


@pytest.fixture
def fake_connect():
    created = []

    def factory(**kwargs):
        conn = FakeConnection(**kwargs)
        created.append(conn)
        return conn

    with mock.patch("pymysql.connect", side_effect=factory):
        yield created


@pytest.fixture
def conn(fake_connect):
    password = "password"
    c = MysqlConn()
    c.connect("root", password, "test", "127.0.0.1")
    yield c
    c.close()


def test_connect_passes_settings(fake_connect):
    password = "password"
    c = MysqlConn()
    c.connect("root", password, "test", "127.0.0.1")
    try:
        kwargs = fake_connect[0].kwargs
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["user"] == "root"
        assert kwargs["password"] == password
        assert kwargs["database"] == "test"
        assert kwargs["port"] == DEFAULT_PORT == 3306
        assert kwargs["charset"] == CHARSET == "utf8"
        assert kwargs["autocommit"] is True
        assert c.update(INSERT_SQL) == 1
    finally:
        c.close()


def test_update_runs_sql(fake_connect, conn):
    assert conn.update(INSERT_SQL) == 1
    assert fake_connect[0].executed == [INSERT_SQL]


def test_update_error_raises(conn):
    with pytest.raises(pymysql.MySQLError):
        conn.update("bad statement")


def test_use_before_connect_raises():
    with pytest.raises(RuntimeError):
        MysqlConn().update(INSERT_SQL)


def test_query_and_iterate_rows(fake_connect, conn):
    fake_connect[0].table = ((1, "zhang san", "221B", None), (2, "li si", "42", 7))
    conn.query("select * from user")
    assert conn.next() is True
    assert [conn.value(i) for i in range(4)] == ["1", "zhang san", "221B", ""]
    assert conn.next() is True
    assert [conn.value(i) for i in range(4)] == ["2", "li si", "42", "7"]
    assert conn.next() is False


def test_value_out_of_range_is_empty(fake_connect, conn):
    fake_connect[0].table = ((1, "zhang san"),)
    conn.query("select * from user")
    conn.next()
    assert conn.value(2) == ""
    assert conn.value(-1) == ""


def test_value_without_row_is_empty(conn):
    assert conn.next() is False
    assert conn.value(0) == ""


def test_binary_value_kept_as_bytes(fake_connect, conn):
    fake_connect[0].table = ((b"\x00ab",),)
    conn.query("select data from blobs")
    conn.next()
    assert conn.value(0) == b"\x00ab"


def test_query_replaces_previous_result(fake_connect, conn):
    fake_connect[0].table = ((1,), (2,))
    conn.query("select id from user")
    conn.next()
    fake_connect[0].table = ((9,),)
    conn.query("select id from other")
    assert conn.next() is True
    assert conn.value(0) == "9"
    assert conn.next() is False


def test_transaction_commit_rollback(fake_connect, conn):
    conn.transaction()
    assert conn.update(INSERT_SQL) == 1
    conn.commit()
    conn.rollback()
    fake = fake_connect[0]
    assert fake.executed == [INSERT_SQL]
    assert fake.autocommit_calls == [False]
    assert (fake.commits, fake.rollbacks) == (1, 1)


def test_alive_time_counts_from_refresh():
    c = MysqlConn()
    with mock.patch("time.monotonic_ns", side_effect=[1_000_000_000, 1_250_000_000]):
        c.refresh_alive_time()
        assert c.alive_time() == 250


def test_alive_time_resets_on_refresh():
    c = MysqlConn()
    c.refresh_alive_time()
    assert 0 <= c.alive_time() < 1000


def test_close_closes_connection(fake_connect, conn):
    conn.close()
    assert fake_connect[0].closed is True
    with pytest.raises(RuntimeError):
        conn.commit()


def test_reconnect_closes_old_connection(fake_connect, conn):
    password = "password"
    conn.connect("root", password, "test", "127.0.0.1")
    assert conn.update(INSERT_SQL) == 1
    assert len(fake_connect) == 2
    assert fake_connect[0].closed is True
    assert fake_connect[0].executed == []
    assert fake_connect[1].closed is False
    assert fake_connect[1].executed == [INSERT_SQL]