"""
Day partitioning for the score ledger.

Maps wall-clock time to an integer day index that increases by exactly one
every DAY_LENGTH_SECONDS from the Unix epoch. All ledger entries are bucketed
by this index.
"""

import time
from datetime import datetime, timezone
from typing import Callable, Optional

from baselume.config import Config


class DayClock:
    """Clock that stamps entries with their day index.

    The time source is injectable so tests can drive day rollover
    deterministically. Nothing is cached; every call reads the source.
    """

    def __init__(self, time_source: Callable[[], float] = time.time,
                 day_length: Optional[int] = None):
        self._time_source = time_source
        self.day_length = day_length or Config.DAY_LENGTH_SECONDS
        if self.day_length <= 0:
            raise ValueError("day_length must be positive")

    def now(self) -> float:
        """Current POSIX timestamp in seconds."""
        return float(self._time_source())

    def day_of(self, timestamp: float) -> int:
        """Day index containing the given timestamp. Times before the epoch map to negative days."""
        return int(timestamp // self.day_length)

    def current_day(self) -> int:
        return self.day_of(self.now())

    def day_start(self, day: int) -> datetime:
        """UTC datetime at which the given day index begins."""
        return datetime.fromtimestamp(day * self.day_length, tz=timezone.utc)

    def seconds_until_next_day(self) -> float:
        now = self.now()
        return (self.day_of(now) + 1) * self.day_length - now


class ManualClock:
    """Time source whose value only changes when advanced explicitly."""

    def __init__(self, start: float = 0.0):
        self.current = float(start)

    def __call__(self) -> float:
        return self.current

    def advance(self, seconds: float):
        self.current += seconds

    def set(self, timestamp: float):
        self.current = float(timestamp)
