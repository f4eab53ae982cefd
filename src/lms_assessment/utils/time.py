# File: src/lms_assessment/utils/time.py
from datetime import datetime, timedelta
from typing import Protocol

import pytz

from ..config.settings import TIMEZONE


class Clock(Protocol):
    def now(self) -> datetime:
        """Return the current, timezone-aware time."""
        ...


class SystemClock:
    """Wall-clock time in the institution's timezone."""

    def __init__(self, tz_name: str | None = None):
        self.tz = pytz.timezone(tz_name or TIMEZONE)

    def now(self) -> datetime:
        return datetime.now(self.tz)


class FixedClock:
    """A clock pinned to one instant. Used for replays and tests."""

    def __init__(self, instant: datetime):
        if instant.tzinfo is None:
            instant = pytz.UTC.localize(instant)
        self.instant = instant

    def now(self) -> datetime:
        return self.instant

    def set(self, instant: datetime) -> None:
        if instant.tzinfo is None:
            instant = pytz.UTC.localize(instant)
        self.instant = instant

    def advance(self, **kwargs) -> datetime:
        self.instant = self.instant + timedelta(**kwargs)
        return self.instant


system_clock = SystemClock()


def to_storage_time(value: datetime) -> datetime:
    """
    Normalize a datetime to naive UTC, the form every timestamp is stored in.
    Naive input is taken to already be UTC.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(pytz.UTC).replace(tzinfo=None)


def storage_now(clock: Clock) -> datetime:
    return to_storage_time(clock.now())


def utc_now() -> datetime:
    """Row default for created_at/updated_at when no clock is involved."""
    return to_storage_time(datetime.now(pytz.UTC))


def derive_academic_year(now: datetime) -> str:
    """
    Academic years start in September: September 2024 through August 2025
    is "2024-2025".
    """
    year = now.year
    if now.month >= 9:
        return f"{year}-{year + 1}"
    return f"{year - 1}-{year}"
