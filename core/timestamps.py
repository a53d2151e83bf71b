"""UTC timestamps from epoch seconds using plain Gregorian arithmetic."""

from __future__ import annotations

import time

_SECONDS_PER_DAY = 86400
_DAYS_IN_MONTH = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def is_leap_year(year: int) -> bool:
    return (year % 4 == 0 and year % 100 != 0) or year % 400 == 0


def days_to_date(days_since_epoch: int) -> tuple[int, int, int]:
    """Convert a day count since 1970-01-01 to (year, month, day)."""
    year = 1970
    remaining = days_since_epoch
    while True:
        days_in_year = 366 if is_leap_year(year) else 365
        if remaining < days_in_year:
            break
        remaining -= days_in_year
        year += 1

    month = 1
    for index, days_in_month in enumerate(_DAYS_IN_MONTH):
        if index == 1 and is_leap_year(year):
            days_in_month += 1
        if remaining < days_in_month:
            break
        remaining -= days_in_month
        month += 1
    return year, month, remaining + 1


def format_timestamp(epoch_seconds: int | float | None = None) -> str:
    """Format epoch seconds as ``YYYY-MM-DDTHH:MM:SSZ``; defaults to now."""
    if epoch_seconds is None:
        epoch_seconds = time.time()
    secs = max(0, int(epoch_seconds))
    days, time_of_day = divmod(secs, _SECONDS_PER_DAY)
    hours, rest = divmod(time_of_day, 3600)
    minutes, seconds = divmod(rest, 60)
    year, month, day = days_to_date(days)
    return f"{year:04d}-{month:02d}-{day:02d}T{hours:02d}:{minutes:02d}:{seconds:02d}Z"
