"""
Time window classification for scheduled ticks.

The hourly trigger fires at the top of every hour.  The 19:00 tick also
runs the daily rollup and, on Mondays, the weekly one.  Matching is
exact to the minute: a tick delayed to 19:01 is treated as an ordinary
hourly tick and that day's rollup is skipped.  There is no catch-up.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo

from ..models import TaskKind

MONDAY = 0


class TimeWindowEvaluator:
    """Pure functions of the timestamp they are given."""

    def __init__(self, daily_hour: int = 19, daily_minute: int = 0,
                 timezone: str = "Asia/Seoul") -> None:
        self.daily_hour = daily_hour
        self.daily_minute = daily_minute
        self.tz = ZoneInfo(timezone)

    def local(self, now: Optional[datetime] = None) -> datetime:
        """Return `now` as local wall-clock time.

        Naive timestamps are taken to already be local; aware ones are
        converted.  Without an argument the current time is used.
        """
        if now is None:
            return datetime.now(self.tz)
        if now.tzinfo is None:
            return now.replace(tzinfo=self.tz)
        return now.astimezone(self.tz)

    def should_run_daily(self, now: Optional[datetime] = None) -> bool:
        local = self.local(now)
        return local.hour == self.daily_hour and local.minute == self.daily_minute

    def is_weekly_boundary(self, now: Optional[datetime] = None) -> bool:
        return self.local(now).weekday() == MONDAY

    def plan(self, now: Optional[datetime] = None) -> List[TaskKind]:
        """Task sets to run for a tick at `now`, in execution order."""
        now = self.local(now)
        tasks = [TaskKind.HOURLY]
        if self.should_run_daily(now):
            tasks.append(TaskKind.DAILY)
            if self.is_weekly_boundary(now):
                tasks.append(TaskKind.WEEKLY)
        return tasks
