from __future__ import annotations

"""Wall-clock abstraction.

Core logic takes the current time (and through it the current calendar year)
from this interface rather than reading the system clock directly.
"""

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime:
        """Return an aware UTC datetime."""
        ...


class SystemClock:
    """Production clock backed by datetime.now(timezone.utc)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """Clock pinned to one instant (tests, replays)."""

    def __init__(self, at: datetime) -> None:
        if at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)
        self._at = at

    def now(self) -> datetime:
        return self._at

    @classmethod
    def for_year(cls, year: int) -> "FixedClock":
        return cls(datetime(int(year), 6, 1, 12, 0, tzinfo=timezone.utc))


def current_year(clock: Clock) -> int:
    # Recomputed per call; never cached at import time.
    return clock.now().year
