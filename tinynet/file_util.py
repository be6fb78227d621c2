"""Append-only log file with a large write buffer."""

from __future__ import annotations

import os
from typing import Union

_BUFFER_SIZE = 64 * 1024


class FileUtil:
    """A file opened for appending that counts the bytes written through it."""

    def __init__(self, file_name: Union[str, os.PathLike]) -> None:
        self.file_name = os.fspath(file_name)
        self._file = open(self.file_name, "ab", buffering=_BUFFER_SIZE)
        self.written_bytes = 0

    def append(self, data: bytes) -> None:
        """Write all of ``data`` and add its length to ``written_bytes``."""
        view = memoryview(data)
        written = 0
        while written < len(view):
            count = self._file.write(view[written:])
            written += count if count is not None else len(view) - written
        self.written_bytes += written

    def flush(self) -> None:
        self._file.flush()

    def close(self) -> None:
        if not self._file.closed:
            self._file.close()

    @property
    def closed(self) -> bool:
        return self._file.closed

    def __enter__(self) -> FileUtil:
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self.close()
        return False