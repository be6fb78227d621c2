"""Leveled logging that writes one formatted line per record."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Callable, Optional

from tinynet.log_stream import LogStream
from tinynet.timestamp import MICROSECONDS_PER_SECOND, Timestamp


class LogLevel(IntEnum):
    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    FATAL = 5


_LEVEL_NAMES = {
    LogLevel.TRACE: "TRACE ",
    LogLevel.DEBUG: "DEBUG ",
    LogLevel.INFO: "INFO  ",
    LogLevel.WARN: "WARN  ",
    LogLevel.ERROR: "ERROR ",
    LogLevel.FATAL: "FATAL ",
}

OutputFunc = Callable[[bytes], None]
FlushFunc = Callable[[], None]


def _default_output(data: bytes) -> None:
    out = sys.stdout
    binary = getattr(out, "buffer", None)
    if binary is not None:
        out.flush()
        binary.write(data)
    else:
        out.write(data.decode("utf-8", "replace"))


def _default_flush() -> None:
    sys.stdout.flush()


@dataclass
class _Settings:
    level: LogLevel = LogLevel.INFO
    output: OutputFunc = _default_output
    flush: FlushFunc = _default_flush


_settings = _Settings()


def source_basename(filename: str) -> str:
    """The part of a path after its last '/'."""
    return filename.rpartition("/")[2]


def log_level() -> LogLevel:
    return _settings.level


def set_log_level(level: LogLevel) -> None:
    _settings.level = LogLevel(level)


def set_output(output: Optional[OutputFunc]) -> None:
    """Send finished records to ``output``; ``None`` restores stdout."""
    _settings.output = output if output is not None else _default_output


def set_flush(flush: Optional[FlushFunc]) -> None:
    """Use ``flush`` before a fatal record aborts; ``None`` restores stdout."""
    _settings.flush = flush if flush is not None else _default_flush


def get_errno_msg(saved_errno: int) -> str:
    return os.strerror(saved_errno)


class Logger:
    """One log record; the line is emitted by :meth:`finish`."""

    def __init__(
        self,
        file: str,
        line: int,
        level: LogLevel = LogLevel.INFO,
        func: Optional[str] = None,
    ) -> None:
        self.level = LogLevel(level)
        self.line = line
        self.basename = source_basename(file)
        self.time = Timestamp.now()
        self.stream = LogStream()
        self._finished = False
        self._format_time()
        self.stream << _LEVEL_NAMES[self.level]
        if func:
            self.stream << func << " "

    def _format_time(self) -> None:
        seconds = self.time.seconds_since_epoch()
        micro = self.time.micro_seconds_since_epoch - seconds * MICROSECONDS_PER_SECOND
        self.stream << self.time.to_formatted_string() << f" {micro:06d} "

    def finish(self) -> None:
        """Terminate the record and hand it to the output function.

        A FATAL record flushes the output and raises RuntimeError.
        """
        if self._finished:
            return
        self._finished = True
        self.stream << " - " << self.basename << ":" << self.line << "\n"
        data = self.stream.buffer.to_bytes()
        _settings.output(data)
        if self.level is LogLevel.FATAL:
            _settings.flush()
            raise RuntimeError(data.decode("utf-8", "replace").rstrip("\n"))

    def __enter__(self) -> LogStream:
        return self.stream

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.finish()
        return False


def _log(level: LogLevel, args: tuple, with_func: bool = False) -> None:
    frame = sys._getframe(2)
    code = frame.f_code
    record = Logger(code.co_filename, frame.f_lineno, level, code.co_name if with_func else None)
    for arg in args:
        record.stream << arg
    record.finish()


def debug(*args: Any) -> None:
    if log_level() <= LogLevel.DEBUG:
        _log(LogLevel.DEBUG, args, with_func=True)


def info(*args: Any) -> None:
    if log_level() <= LogLevel.INFO:
        _log(LogLevel.INFO, args)


def warn(*args: Any) -> None:
    _log(LogLevel.WARN, args)


def error(*args: Any) -> None:
    _log(LogLevel.ERROR, args)


def fatal(*args: Any) -> None:
    _log(LogLevel.FATAL, args)