# File: src/parkinglot/infrastructure/clock.py
"""
Time sources for the entry and exit flows

The flows read "now" from a Clock instead of calling datetime.now()
directly, so a stay of any length can be replayed with ManualClock.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Optional
from threading import Lock


class Clock(ABC):
    """Abstract time source"""

    @abstractmethod
    def now(self) -> datetime:
        """Current timestamp (timezone-aware)"""
        pass


class SystemClock(Clock):
    """Wall-clock time in UTC"""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class ManualClock(Clock):
    """
    Clock that only moves when told to
    Used by the demo driver and by tests to simulate parking durations
    """

    def __init__(self, start: Optional[datetime] = None):
        self._now = start or datetime.fromtimestamp(0, tz=timezone.utc)
        self._lock = Lock()

    def now(self) -> datetime:
        with self._lock:
            return self._now

    def advance(self, seconds: float = 0, **kwargs) -> datetime:
        """Move forward by seconds plus any timedelta keyword arguments"""
        delta = timedelta(seconds=seconds, **kwargs)
        with self._lock:
            self._now = self._now + delta
            return self._now
