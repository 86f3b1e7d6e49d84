from __future__ import annotations

from datetime import date, timedelta

from dateutil.relativedelta import relativedelta


def first_of_next_month(d: date) -> date:
    return d.replace(day=1) + relativedelta(months=1)


def days_in_month(d: date) -> int:
    """Number of days in d's month: first day of the next month minus one day."""
    return (first_of_next_month(d) - timedelta(days=1)).day


def last_or_penultimate_day(year: int, month: int, which: int) -> date:
    """
    Summary:
    which=-1 -> last calendar day of year/month, which=-2 -> the day before it.
    Any other value is a caller bug, not a user error.
    """
    last = first_of_next_month(date(year, month, 1)) - timedelta(days=1)
    if which == -1:
        return last
    if which == -2:
        return last - timedelta(days=1)
    raise ValueError(f"which must be -1 or -2, got {which}")
