"""Time sources for the ledger.

Timestamps are integer seconds and never decrease.
"""

from __future__ import annotations

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    def now(self) -> int: ...


class SystemClock:
    """Wall-clock seconds."""

    def __init__(self) -> None:
        self._last = 0

    def now(self) -> int:
        # Clamp so a wall-clock step backwards never reaches the pairs
        self._last = max(self._last, int(time.time()))
        return self._last


class ManualClock:
    """Clock advanced explicitly, for tests and simulations."""

    def __init__(self, start: int = 0) -> None:
        if start < 0:
            raise ValueError(f"start must be non-negative: {start}")
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        """Move time forward by `seconds` and return the new time."""
        if seconds < 0:
            raise ValueError(f"Cannot move clock backwards by {seconds}s")
        self._now += seconds
        return self._now

    def set(self, timestamp: int) -> None:
        if timestamp < self._now:
            raise ValueError(f"Cannot move clock back from {self._now} to {timestamp}")
        self._now = timestamp

    def __repr__(self) -> str:
        return f"ManualClock(now={self._now})"
