import json
import threading
import time
from contextlib import ExitStack
from unittest import mock

import pytest

from tinynet.connection_pool import ConnectionPool, PoolConfig, load_config
from tinynet.mysql_conn import MysqlConn


class FakeCursor:
    def __init__(self, connection):
        self.connection = connection

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, sql):
        self.connection.executed.append(sql)
        return 1

    def fetchall(self):
        return ()


class FakeConnection:
    def __init__(self, executed, **kwargs):
        self.kwargs = kwargs
        self.executed = executed
        self.closed = False

    def cursor(self):
        return FakeCursor(self)

    def close(self):
        self.closed = True


class FakeServer:
    def __init__(self):
        self.created = []
        self.executed = []
        self.lock = threading.Lock()

    def connect(self, **kwargs):
        conn = FakeConnection(self.executed, **kwargs)
        with self.lock:
            self.created.append(conn)
        return conn


@pytest.fixture
def server():
    fake = FakeServer()
    with mock.patch("pymysql.connect", side_effect=fake.connect):
        yield fake


def make_config(min_size=2, max_size=3, max_idle_time=60000):
    password = "password"
    return PoolConfig(
        ip="127.0.0.1",
        user="root",
        password=password,
        db_name="test",
        port=3306,
        min_size=min_size,
        max_size=max_size,
        timeout=100,
        max_idle_time=max_idle_time,
    )


@pytest.fixture
def pool(server):
    p = ConnectionPool(make_config())
    yield p
    p.close()


def wait_until(predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.02)
    return predicate()


def test_starts_with_min_size_connections(server, pool):
    assert len(server.created) == 2
    assert pool.current_size == 2
    assert pool.idle_count == 2
    assert server.created[0].kwargs["user"] == "root"
    assert server.created[0].kwargs["database"] == "test"


def test_connection_returns_to_pool(pool):
    with pool.get_connection() as conn:
        assert isinstance(conn, MysqlConn)
        assert pool.idle_count == 1
    assert pool.idle_count == 2


def test_grows_up_to_max_size(server, pool):
    with ExitStack() as stack:
        conns = [stack.enter_context(pool.get_connection()) for _ in range(3)]
        assert len({id(c) for c in conns}) == 3
        assert pool.current_size == 3
    assert pool.idle_count == 3
    assert len(server.created) == 3


def test_concurrent_inserts_through_pool(server, pool):
    def op2(begin, end):
        for i in range(begin, end):
            with pool.get_connection() as conn:
                conn.update(f"insert into user values({i}, 'zhang san', '221B')")

    threads = [threading.Thread(target=op2, args=(i * 10, i * 10 + 10)) for i in range(5)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(10)
    expected = sorted(f"insert into user values({i}, 'zhang san', '221B')" for i in range(50))
    assert sorted(server.executed) == expected
    assert len(server.created) <= 3
    assert pool.current_size <= 3


def test_idle_connections_are_recycled(server):
    p = ConnectionPool(make_config(min_size=1, max_size=3, max_idle_time=0))
    try:
        with ExitStack() as stack:
            for _ in range(3):
                stack.enter_context(p.get_connection())
            assert p.current_size == 3
        assert wait_until(lambda: p.idle_count == 1)
        assert p.current_size == 1
        assert sum(c.closed for c in server.created) == 2
    finally:
        p.close()


def test_close_shuts_connections_and_rejects_gets(server):
    p = ConnectionPool(make_config())
    p.close()
    assert all(c.closed for c in server.created)
    assert p.current_size == 0
    with pytest.raises(RuntimeError):
        with p.get_connection():
            pass


def test_connection_in_use_closed_when_returned_after_close(server):
    p = ConnectionPool(make_config(min_size=1, max_size=1))
    with p.get_connection():
        p.close()
        assert server.created[0].closed is False
    assert server.created[0].closed is True
    assert p.current_size == 0


def write_conf(path, **overrides):
    data = {
        "ip": "127.0.0.1",
        "userName": "root",
        "password": "password",
        "dbName": "test",
        "port": 3306,
        "minSize": 1,
        "maxSize": 2,
        "timeout": 100,
        "maxIdleTime": 5000,
    }
    data.update(overrides)
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_load_config_reads_fields(tmp_path):
    cfg = load_config(write_conf(tmp_path / "conf.json"))
    assert cfg == make_config(min_size=1, max_size=2, max_idle_time=5000)


def test_load_config_missing_key(tmp_path):
    path = tmp_path / "conf.json"
    path.write_text(json.dumps({"ip": "127.0.0.1"}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(path)


def test_from_json_file_opens_connections(server, tmp_path):
    p = ConnectionPool.from_json_file(write_conf(tmp_path / "conf.json"))
    try:
        assert len(server.created) == 1
        kwargs = server.created[0].kwargs
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 3306
        assert p.config.max_size == 2
    finally:
        p.close()