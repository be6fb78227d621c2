"""State machine that parses an HTTP request out of a byte buffer."""

from __future__ import annotations

from enum import Enum

from tinynet.http_request import HttpRequest, Version
from tinynet.timestamp import Timestamp

_CRLF = b"\r\n"
_VERSION_PREFIX = b"HTTP/1."


class ParseState(Enum):
    EXPECT_REQUEST_LINE = 0
    EXPECT_HEADERS = 1
    EXPECT_BODY = 2
    GOT_ALL = 3


def _text(data: bytes) -> str:
    return data.decode("latin-1")


class HttpContext:
    """Parses the request line and headers; bodies are not read."""

    def __init__(self) -> None:
        self.state = ParseState.EXPECT_REQUEST_LINE
        self.request = HttpRequest()

    def got_all(self) -> bool:
        return self.state is ParseState.GOT_ALL

    def reset(self) -> None:
        """Start over with an empty request."""
        self.state = ParseState.EXPECT_REQUEST_LINE
        self.request = HttpRequest()

    def _process_request_line(self, line: bytes) -> bool:
        method, space, rest = line.partition(b" ")
        if not space or not self.request.set_method(_text(method)):
            return False
        target, space, version = rest.partition(b" ")
        if not space:
            return False
        path, question, query = target.partition(b"?")
        self.request.path = _text(path)
        if question:
            self.request.query = _text(question + query)
        if len(version) != 8 or not version.startswith(_VERSION_PREFIX):
            return False
        minor = version[-1:]
        if minor == b"1":
            self.request.version = Version.HTTP11
        elif minor == b"0":
            self.request.version = Version.HTTP10
        else:
            return False
        return True

    def parse_request(self, buf: bytearray, receive_time: Timestamp) -> bool:
        """Consume complete lines from ``buf``.

        Returns False if the request line is missing or malformed; parsed
        lines are removed from ``buf``.
        """
        ok = False
        while True:
            if self.state is ParseState.EXPECT_REQUEST_LINE:
                crlf = buf.find(_CRLF)
                if crlf < 0:
                    break
                ok = self._process_request_line(bytes(buf[:crlf]))
                if not ok:
                    break
                self.request.receive_time = receive_time
                del buf[: crlf + 2]
                self.state = ParseState.EXPECT_HEADERS
            elif self.state is ParseState.EXPECT_HEADERS:
                crlf = buf.find(_CRLF)
                if crlf < 0:
                    break
                line = bytes(buf[:crlf])
                del buf[: crlf + 2]
                field, colon, value = line.partition(b":")
                if not colon:
                    self.state = ParseState.GOT_ALL
                    break
                self.request.add_header(_text(field), _text(value))
            else:
                break
        return ok