# -*- coding: utf-8 -*-
# backend/core/schedule.py – weekly interval matching (all times in UTC)
from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

from backend.core.models import Interval

MINUTES_PER_DAY = 24 * 60


class ScheduleValidationError(ValueError):
    """Raised when a schedule value (interval, temperature, name) is invalid."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


def validate_interval(day_of_week, start_minutes, end_minutes, field: Optional[str] = None) -> Interval:
    """Check a single interval and return it as an ``Interval``.

    Intervals never wrap past midnight: overnight coverage needs two entries.
    """
    for value in (day_of_week, start_minutes, end_minutes):
        if isinstance(value, bool) or not isinstance(value, int):
            raise ScheduleValidationError("Interval values must be integers", field)
    if not 0 <= day_of_week <= 6:
        raise ScheduleValidationError(
            "dayOfWeek must be an integer between 0 (Sunday) and 6 (Saturday)", field
        )
    if not 0 <= start_minutes <= MINUTES_PER_DAY - 1:
        raise ScheduleValidationError("start must be between 00:00 and 23:59", field)
    if not 1 <= end_minutes <= MINUTES_PER_DAY:
        raise ScheduleValidationError("end must be between 00:01 and 24:00", field)
    if end_minutes <= start_minutes:
        raise ScheduleValidationError("end time must be after start time", field)
    return Interval(day_of_week=day_of_week, start_time_minutes=start_minutes, end_time_minutes=end_minutes)


def is_within_schedule(intervals: Iterable[Interval], day_of_week: int, minute_of_day: int) -> bool:
    # any match is enough; overlapping intervals carry no priority
    return any(
        interval.day_of_week == day_of_week
        and interval.start_time_minutes <= minute_of_day < interval.end_time_minutes
        for interval in intervals
    )


def utc_day_and_minute(now: datetime) -> Tuple[int, int]:
    """Return ``(day_of_week, minute_of_day)`` for ``now`` in UTC, Sunday = 0.

    Naive datetimes are taken to already be in UTC.
    """
    if now.tzinfo is not None:
        now = now.astimezone(timezone.utc)
    # datetime.weekday() is Monday = 0
    day_of_week = (now.weekday() + 1) % 7
    return day_of_week, now.hour * 60 + now.minute


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
