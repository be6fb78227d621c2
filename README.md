# tinynet

Building blocks for small network services, in plain Python:

- `tinynet.timestamp`: microsecond timestamps (`Timestamp`, `add_time`).
- `tinynet.current_thread`: the native id of the calling thread, cached per
  thread (`tid`).
- `tinynet.thread` and `tinynet.thread_pool`: named threads (`Thread`,
  `num_created`) and a thread pool fed from a FIFO task queue (`ThreadPool`).
- `tinynet.fixed_buffer`, `tinynet.log_stream` and `tinynet.logger`: a
  fixed-capacity byte buffer (`FixedBuffer`), a `<<`-style line builder
  (`LogStream`) and a leveled logger with pluggable output (`debug`, `info`,
  `warn`, `error`, `fatal`, `set_log_level`, `set_output`, `set_flush`).
- `tinynet.file_util`, `tinynet.log_file` and `tinynet.async_logging`:
  appending to a file (`FileUtil`), size- and day-based log rolling
  (`LogFile`, `log_file_name`) and a background thread that writes batched
  log buffers to disk (`AsyncLogging`).
- `tinynet.http_request`, `tinynet.http_context`, `tinynet.http_response`
  and `tinynet.http_app`: HTTP requests (`HttpRequest`, `Method`,
  `Version`), a request-line and header parser (`HttpContext`,
  `ParseState`), responses (`HttpResponse`, `HttpStatusCode`) and request
  handling (`handle_message`, `handle_request`, `default_http_callback`,
  `on_request`).
- `tinynet.memory_pool`: a page-based pool allocator over a simulated
  address space (`MemoryPool`, `SmallNode`, `LargeNode`).
- `tinynet.mysql_conn` and `tinynet.connection_pool`: a MySQL connection
  with a row cursor (`MysqlConn`) and a pool of such connections
  (`ConnectionPool`, `PoolConfig`, `load_config`).

Python 3.10 or later is required. The MySQL parts use `pymysql`.

## Timestamps

```python
from tinynet.timestamp import Timestamp, add_time

now = Timestamp.now()
later = add_time(now, 1.5)                        # 1.5 seconds after now
print(later.to_formatted_string(True))            # e.g. 2024/05/01 12:00:01.250000
print(Timestamp.invalid().seconds_since_epoch())  # 0
```

Timestamps are frozen dataclasses ordered by `micro_seconds_since_epoch`.
`to_formatted_string` uses local time.

## Logging

Each record holds the local time with microseconds, the level, the message
and the source file name and line. `debug` records also name the calling
function. `debug` and `info` records below the current level are dropped;
`warn`, `error` and `fatal` are always written. A `fatal` record is written,
the output is flushed and `RuntimeError` is raised.

```python
from tinynet import logger
from tinynet.logger import LogLevel

logger.set_log_level(LogLevel.INFO)
logger.info("Connection UP : ", "127.0.0.1:8080")
logger.debug("not shown at INFO level")
```

Output goes to standard output by default. Any callable that takes the
formatted bytes can be used instead; `set_output(None)` restores standard
output:

```python
lines = []
logger.set_output(lines.append)
logger.warn("disk almost full")
logger.set_output(None)
```

A `Logger` can also be used directly as a context manager; the record is
emitted when the block ends:

```python
from tinynet.logger import Logger, LogLevel

with Logger(__file__, 42, LogLevel.WARN) as stream:
    stream << "queue length " << 17
```

### Asynchronous logging to rolling files

`AsyncLogging` collects records in large in-memory buffers and writes them to
a `LogFile` from a background thread, at least every `flush_interval`
seconds (3 by default). Files are named `<basename>.YYYYmmdd-HHMMSS.log`
after the time they were opened; a new file is started when the current one
passes the roll size, or when a new day has begun (checked every
`check_every_n` appends).

```python
from tinynet import logger
from tinynet.async_logging import AsyncLogging

with AsyncLogging("server", 500 * 1000 * 1000) as log:
    logger.set_output(log.append)
    for i in range(1024):
        logger.info("Hello, ", i, " abc...xyz")
    logger.set_output(None)
```

Entering the `with` block starts the writer thread; leaving it stops the
thread after writing what is still buffered.

## Threads and the thread pool

`Thread(func, name)` runs `func` on a daemon thread; `start` returns once the
new thread's id is known (`Thread.tid`). Unnamed threads are called
`Thread<n>`, where `n` counts every `Thread` made so far (`num_created`).

```python
from tinynet.thread_pool import ThreadPool

with ThreadPool("Worker", 4) as pool:
    for n in range(10):
        pool.add(lambda n=n: print(n * n))
    pool.start()
```

Tasks added before `start` wait in the queue. Workers are named after the
pool (`Worker1`, `Worker2`, ...) and run `thread_init_callback` first if one
is given; with `thread_size` 0 the callback runs once in `start` instead.
Leaving the `with` block (or calling `close`) stops the pool and joins the
workers after they have drained the queue. An exception in a task ends that
worker and is logged as a warning.

## HTTP

`HttpContext.parse_request` consumes complete lines from a `bytearray`: the
request line (`GET`, `POST`, `HEAD`, `PUT` or `DELETE`, a path with an
optional query, `HTTP/1.0` or `HTTP/1.1`) and then headers up to the blank
line. Request bodies are not read.

```python
from tinynet.http_context import HttpContext
from tinynet.timestamp import Timestamp

buf = bytearray(b"GET /hello?x=1 HTTP/1.1\r\nHost: example.com\r\n\r\n")
context = HttpContext()
context.parse_request(buf, Timestamp.now())      # True
context.got_all()                                # True
context.request.path, context.request.query      # ('/hello', '?x=1')
context.request.get_header("Host")               # 'example.com'
```

`HttpResponse` renders the status line, then `Connection: close` or
`Content-Length` with `Connection: Keep-Alive`, then its headers and body:

```python
from tinynet.http_response import HttpResponse, HttpStatusCode

response = HttpResponse(False)
response.status_code = HttpStatusCode.OK
response.status_message = "OK"
response.set_content_type("text/plain")
response.body = "hello, world!\n"
raw = response.to_bytes()
```

`tinynet.http_app.handle_message(buf, receive_time, callback)` parses a
buffer and returns the bytes to send back and whether to close the
connection. A malformed request line gives `400 Bad Request`; a complete
request is passed to the callback, and the connection is always marked for
closing after the response. `default_http_callback` answers 404 Not Found;
`on_request` prints the method, path and headers and serves `/`, `/hello`
and `/favicon.ico`, answering anything else with 404.

## Memory pool

```python
from tinynet.memory_pool import MemoryPool

pool = MemoryPool()
pool.create_pool()
blocks = [pool.malloc(512) for _ in range(50)]
for block in blocks:
    pool.free_memory(block)
pool.reset_pool()
pool.destroy_pool()
```

Addresses are integers in a simulated address space; `view(address, size)`
gives a `memoryview` of the bytes behind them. Requests of up to a page
(4096 bytes) less the node header are carved from pages at 16-byte
alignment; larger ones get a block of their own. `malloc` returns `None` for
a size of 0 or less, `calloc` zeroes the bytes, and a page whose references
all have been freed becomes empty again. Calling any of these before
`create_pool` raises `RuntimeError`.

## MySQL

`MysqlConn` wraps one connection:

```python
from tinynet.mysql_conn import MysqlConn

password = "password"
conn = MysqlConn()
conn.connect("root", password, "test", "127.0.0.1")
conn.update("insert into user values(1, 'zhang san', '221B')")
conn.query("select * from user")
while conn.next():
    print(conn.value(0), conn.value(1))
conn.close()
```

`value` returns `""` for an index out of range or a NULL field, and binary
fields as `bytes`.

`ConnectionPool` reads its settings from a JSON file (`conf.json` by
default); `timeout` and `maxIdleTime` are in milliseconds:

```json
{
    "ip": "127.0.0.1",
    "port": 3306,
    "userName": "root",
    "password": "password",
    "dbName": "test",
    "minSize": 10,
    "maxSize": 100,
    "timeout": 1000,
    "maxIdleTime": 5000
}
```

```python
from tinynet.connection_pool import ConnectionPool

pool = ConnectionPool.from_json_file("conf.json")
with pool.get_connection() as conn:
    conn.update("insert into user values(1, 'zhang san', '221B')")
pool.close()
```

The pool opens `minSize` connections at once. A background thread opens
another whenever none is idle, up to `maxSize`; another closes idle
connections beyond `minSize` once they have been idle for `maxIdleTime`.
A borrowed connection goes back when its `with` block ends. After `close`,
`get_connection` raises `RuntimeError`.

## What the package does not do

There is no event loop, TCP server or command-line program here. The HTTP
modules work on bytes you hand them and return the bytes to send; listening
on a socket, accepting connections and writing replies to them is left to
the caller.

## Running the tests

Install the package with its `test` extra and run pytest from the project
directory. Tests of the MySQL parts do not need a running server.