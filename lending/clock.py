# lending/clock.py
from datetime import datetime, timedelta, UTC
from typing import Optional

class SystemClock:
    """Wall clock in UTC"""

    def now(self) -> datetime:
        return datetime.now(UTC)

class FixedClock:
    """Clock that only moves when told to. Used by tests and replays."""

    def __init__(self, current: Optional[datetime] = None):
        self.current = current or datetime.now(UTC)
        if self.current.tzinfo is None:
            self.current = self.current.replace(tzinfo=UTC)

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs) -> datetime:
        """Move the clock forward, e.g. ``clock.advance(days=3)``"""
        self.current = self.current + timedelta(**kwargs)
        return self.current

    def set(self, current: datetime) -> None:
        if current.tzinfo is None:
            current = current.replace(tzinfo=UTC)
        self.current = current
