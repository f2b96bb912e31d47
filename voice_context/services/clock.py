"""
voice_context/services/clock.py
-------------------------------
The engine's notion of "now". Every tier derives its window from a Clock so
tests can pin "today" instead of depending on wall-clock time.
"""
from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from typing import Callable, Optional
from zoneinfo import ZoneInfo


class Clock:
    """Timezone-aware clock. ``now_fn`` overrides the wall clock (tests)."""

    def __init__(
        self,
        tz: str | tzinfo = "UTC",
        now_fn: Optional[Callable[[], datetime]] = None,
    ):
        self.tz = ZoneInfo(tz) if isinstance(tz, str) else tz
        self._now_fn = now_fn

    @classmethod
    def fixed(cls, moment: datetime) -> "Clock":
        """A clock frozen at ``moment`` (must be timezone aware)."""
        if moment.tzinfo is None:
            raise ValueError("Clock.fixed() needs a timezone-aware datetime")
        return cls(tz=moment.tzinfo, now_fn=lambda: moment)

    def now(self) -> datetime:
        if self._now_fn is not None:
            return self._now_fn().astimezone(self.tz)
        return datetime.now(self.tz)

    def today(self) -> date:
        return self.now().date()

    def start_of_today(self) -> datetime:
        return datetime.combine(self.today(), time.min, tzinfo=self.tz)

    def days_ago(self, days: int) -> date:
        return self.today() - timedelta(days=days)

    def local(self, moment: datetime) -> datetime:
        """Convert a stored timestamp into this clock's timezone."""
        return moment.astimezone(self.tz)
