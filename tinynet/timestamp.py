"""Microsecond-resolution timestamps."""

from __future__ import annotations

import time
from dataclasses import dataclass

MICROSECONDS_PER_SECOND = 1000 * 1000


def _truncating_div(numerator: int, denominator: int) -> int:
    """Integer division that rounds toward zero."""
    quotient = abs(numerator) // denominator
    return quotient if numerator >= 0 else -quotient


@dataclass(frozen=True, order=True)
class Timestamp:
    """A point in time, counted in microseconds since the epoch."""

    micro_seconds_since_epoch: int = 0

    @classmethod
    def now(cls) -> Timestamp:
        """Return the current wall-clock time."""
        return cls(time.time_ns() // 1000)

    @classmethod
    def invalid(cls) -> Timestamp:
        """Return the zero timestamp used to mark 'no time'."""
        return cls()

    def seconds_since_epoch(self) -> int:
        """Whole seconds since the epoch, truncated toward zero."""
        return _truncating_div(self.micro_seconds_since_epoch, MICROSECONDS_PER_SECOND)

    def _microsecond_part(self) -> int:
        seconds = self.seconds_since_epoch()
        return self.micro_seconds_since_epoch - seconds * MICROSECONDS_PER_SECOND

    def to_formatted_string(self, show_microseconds: bool = False) -> str:
        """Format as local time: ``YYYY/MM/DD HH:MM:SS[.uuuuuu]``."""
        tm = time.localtime(self.seconds_since_epoch())
        text = (
            f"{tm.tm_year:4d}/{tm.tm_mon:02d}/{tm.tm_mday:02d} "
            f"{tm.tm_hour:02d}:{tm.tm_min:02d}:{tm.tm_sec:02d}"
        )
        if show_microseconds:
            text += f".{self._microsecond_part():06d}"
        return text


def add_time(timestamp: Timestamp, seconds: float) -> Timestamp:
    """Return ``timestamp`` moved forward by ``seconds``."""
    delta = int(seconds * MICROSECONDS_PER_SECOND)
    return Timestamp(timestamp.micro_seconds_since_epoch + delta)