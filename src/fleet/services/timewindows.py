"""Clock and HH:MM time-window helpers shared by the compliance rules."""

from __future__ import annotations

from datetime import datetime
from typing import Callable
from zoneinfo import ZoneInfo

from ..config import settings

Clock = Callable[[], datetime]

MINUTES_PER_DAY = 24 * 60

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")


def system_clock() -> datetime:
    """Current wall-clock time in the configured timezone."""

    return datetime.now(ZoneInfo(settings.timezone))


def local_time(moment: datetime) -> datetime:
    """Express ``moment`` in the configured timezone.

    Naive datetimes are already taken to be local and are returned unchanged.
    """

    if moment.tzinfo is None:
        return moment
    return moment.astimezone(ZoneInfo(settings.timezone))


def time_to_minutes(value: str) -> int:
    """Convert an ``HH:MM`` string into minutes since midnight."""

    hours, sep, minutes = value.partition(":")
    if not sep or not hours.isdigit() or not minutes.isdigit():
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    hours_int, minutes_int = int(hours), int(minutes)
    if hours_int > 23 or minutes_int > 59:
        raise ValueError(f"Invalid time '{value}', expected HH:MM")
    return hours_int * 60 + minutes_int


def clock_string(moment: datetime) -> str:
    return moment.strftime("%H:%M")


def weekday_name(moment: datetime) -> str:
    return WEEKDAYS[moment.weekday()]


def is_overnight(start: str, end: str) -> bool:
    return time_to_minutes(start) > time_to_minutes(end)


def is_time_in_range(current: str, start: str, end: str) -> bool:
    """Return True if ``current`` lies in the half-open window [start, end).

    Windows whose start is later than their end wrap past midnight.
    """

    now = time_to_minutes(current)
    start_minutes = time_to_minutes(start)
    end_minutes = time_to_minutes(end)
    if start_minutes > end_minutes:
        return now >= start_minutes or now < end_minutes
    return start_minutes <= now < end_minutes
