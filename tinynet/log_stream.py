"""A stream that formats values into a small fixed buffer."""

from __future__ import annotations

from typing import Any

from tinynet.fixed_buffer import SMALL_BUFFER, FixedBuffer

_MAX_NUMERIC_SIZE = 48


class LogStream:
    """Collects formatted values with ``<<`` into a fixed-size buffer."""

    def __init__(self) -> None:
        self.buffer = FixedBuffer(SMALL_BUFFER)

    def append(self, data: bytes) -> None:
        self.buffer.append(data)

    def reset_buffer(self) -> None:
        self.buffer.reset()

    def __lshift__(self, value: Any) -> LogStream:
        if isinstance(value, int):
            if self.buffer.avail() >= _MAX_NUMERIC_SIZE:
                self.buffer.append(str(int(value)).encode("ascii"))
        elif isinstance(value, float):
            if self.buffer.avail() >= _MAX_NUMERIC_SIZE:
                self.buffer.append(("%.12g" % value).encode("ascii"))
        elif value is None:
            self.buffer.append(b"(null)")
        elif isinstance(value, (bytes, bytearray, memoryview)):
            self.buffer.append(bytes(value))
        elif isinstance(value, FixedBuffer):
            self.buffer.append(value.to_bytes())
        else:
            self.buffer.append(str(value).encode("utf-8"))
        return self