"""Injectable clock so "now" and "today" are controllable in tests."""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone


class Clock(ABC):
    """Source of the current time for ``created_at``, ``paid_at`` and default due dates."""

    @abstractmethod
    def now(self) -> datetime:
        """Get the current time (timezone-aware)."""
        ...

    def today(self) -> date:
        """Get the current calendar date."""
        return self.now().date()


class SystemClock(Clock):
    """Production clock that returns actual system time in UTC."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """Test clock frozen at a given instant until advanced.

    Parameters
    ----------
    at : datetime
        Initial instant. Naive values are treated as UTC.
    """

    def __init__(self, at: datetime) -> None:
        if at.tzinfo is None:
            at = at.replace(tzinfo=timezone.utc)
        self._now = at

    def now(self) -> datetime:
        return self._now

    def advance(self, **kwargs: float) -> None:
        """Move the clock forward, e.g. ``clock.advance(days=30)``."""
        self._now = self._now + timedelta(**kwargs)
