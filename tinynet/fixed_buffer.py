"""Fixed-capacity byte buffer used by the logging front end."""

SMALL_BUFFER = 4000
LARGE_BUFFER = 4000 * 1000


class FixedBuffer:
    """A byte buffer of fixed capacity; appends that do not fit are dropped."""

    def __init__(self, size: int) -> None:
        self._data = bytearray(size)
        self._cur = 0

    @property
    def size(self) -> int:
        return len(self._data)

    def append(self, data: bytes) -> bool:
        """Copy ``data`` in if it fits; return whether it was written."""
        if self.avail() > len(data):
            end = self._cur + len(data)
            self._data[self._cur:end] = data
            self._cur = end
            return True
        return False

    def length(self) -> int:
        """Number of bytes written so far."""
        return self._cur

    def avail(self) -> int:
        """Bytes of free space left."""
        return len(self._data) - self._cur

    def reset(self) -> None:
        """Forget the written bytes without clearing them."""
        self._cur = 0

    def bzero(self) -> None:
        """Zero the whole storage; the write position is kept."""
        self._data[:] = bytes(len(self._data))

    def to_bytes(self) -> bytes:
        """The written bytes."""
        return bytes(self._data[: self._cur])

    def __len__(self) -> int:
        return self._cur

    def __bytes__(self) -> bytes:
        return self.to_bytes()