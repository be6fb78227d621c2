"""An HTTP response and its wire encoding."""

from __future__ import annotations

from enum import IntEnum
from typing import Dict, Union


class HttpStatusCode(IntEnum):
    UNKNOWN = 0
    OK = 200
    MOVED_PERMANENTLY = 301
    BAD_REQUEST = 400
    NOT_FOUND = 404


def _encode(value: Union[str, bytes]) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else bytes(value)


class HttpResponse:
    """Status, headers and body of an HTTP/1.1 response."""

    def __init__(self, close: bool) -> None:
        self.headers: Dict[str, str] = {}
        self.status_code = HttpStatusCode.UNKNOWN
        self.status_message = ""
        self.close_connection = close
        self.body: Union[str, bytes] = b""

    def set_content_type(self, content_type: str) -> None:
        self.add_header("Content-Type", content_type)

    def add_header(self, key: str, value: str) -> None:
        self.headers[key] = value

    def append_to_buffer(self, output: bytearray) -> None:
        """Append the encoded response to ``output``."""
        body = _encode(self.body)
        output += f"HTTP/1.1 {int(self.status_code)} ".encode("ascii")
        output += _encode(self.status_message)
        output += b"\r\n"
        if self.close_connection:
            output += b"Connection: close\r\n"
        else:
            output += f"Content-Length: {len(body)}\r\n".encode("ascii")
            output += b"Connection: Keep-Alive\r\n"
        for key, value in self.headers.items():
            output += _encode(key) + b": " + _encode(value) + b"\r\n"
        output += b"\r\n"
        output += body

    def to_bytes(self) -> bytes:
        out = bytearray()
        self.append_to_buffer(out)
        return bytes(out)