# planner/recurrence.py
"""
Summary:
Recurrence engine for scheduler tasks.

A task stores its rule as text:
  d <interval>          every <interval> days (1..400), counted from the task date
  y                     every year on the task date's month/day
  w <days>              weekdays 1=Monday .. 7=Sunday, e.g. "w 1,4,5"
  m <days> [<months>]   days of month (-1 last, -2 penultimate), optional months 1..12

next_date(now, date_text, repeat) turns (reference date, task date, rule) into the
YYYYMMDD text of the next occurrence strictly after `now`. It is pure: no I/O,
no logging, nothing shared between calls.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Union

from dateutil.relativedelta import relativedelta

from planner.calendar_utils import days_in_month, first_of_next_month, last_or_penultimate_day

DATE_FORMAT = "%Y%m%d"
MAX_DAILY_INTERVAL = 400
MAX_ITERATIONS = 1000

_DATE_RE = re.compile(r"[0-9]{8}")
_INT_RE = re.compile(r"[+-]?[0-9]+")


class RecurrenceError(ValueError):
    """Summary: Base class for every failure reported by next_date."""


class DateSyntaxError(RecurrenceError):
    """Summary: The task date is not a real day in YYYYMMDD form."""


class RuleSyntaxError(RecurrenceError):
    """Summary: Empty rule, unknown family, wrong field count or a field out of range."""


class IterationLimitExceeded(RecurrenceError):
    """Summary: Advancing the task date never got past `now` within the allowed steps."""


def parse_date(text: str) -> date:
    if not _DATE_RE.fullmatch(text or ""):
        raise DateSyntaxError(f"invalid date format {text!r}, expected YYYYMMDD")
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as e:
        raise DateSyntaxError(f"invalid date {text!r}: {e}") from e


def format_date(d: date) -> str:
    # strftime drops the zero padding of years below 1000 on some platforms
    return f"{d.year:04d}{d.month:02d}{d.day:02d}"


@dataclass(frozen=True)
class Daily:
    interval: int

    def next_after(self, now: date, start: date) -> date:
        current = start
        for _ in range(MAX_ITERATIONS):
            try:
                current += timedelta(days=self.interval)
            except OverflowError as e:
                raise IterationLimitExceeded("date out of range while calculating the next date") from e
            if current > now:
                return current
        raise IterationLimitExceeded("exceeded iteration limit while calculating the next date")


@dataclass(frozen=True)
class Annual:
    def next_after(self, now: date, start: date) -> date:
        """
        Summary:
        First anniversary of `start` after `now`. Every candidate is computed from
        `start` itself, so Feb 29 becomes Feb 28 in common years and stays Feb 29
        in leap years.
        """
        # anniversaries in years before now.year cannot be after now
        years = max(1, now.year - start.year)
        while True:
            try:
                candidate = start + relativedelta(years=years)
            except ValueError as e:
                raise IterationLimitExceeded("date out of range while calculating the next date") from e
            if candidate > now:
                return candidate
            years += 1


@dataclass(frozen=True)
class Weekly:
    days: frozenset[int]

    def next_after(self, now: date, start: date) -> date:
        # Counts from `now`; the task date plays no part for weekly rules.
        today = now.isoweekday()
        later = [d for d in self.days if d > today]
        if later:
            offset = min(later) - today
        else:
            offset = min(self.days) + 7 - today
        try:
            return now + timedelta(days=offset)
        except OverflowError as e:
            raise IterationLimitExceeded("date out of range while calculating the next date") from e


@dataclass(frozen=True)
class Monthly:
    days: tuple[int, ...]
    months: frozenset[int] = frozenset()

    def next_after(self, now: date, start: date) -> date:
        try:
            if self.months:
                return self._next_in_months(now, start)
            return self._next_by_days(now, start)
        except (ValueError, OverflowError) as e:
            raise IterationLimitExceeded("date out of range while calculating the next date") from e

    def _year_candidates(self, year: int) -> list[date]:
        """
        Summary:
        Every (month, day) pair of the rule resolved in `year`, sorted.
        A day past the end of its month lands on that day of the next month
        (31 in April -> May 31).
        """
        candidates = []
        for month in self.months:
            first = date(year, month, 1)
            for day in self.days:
                if day < 0:
                    candidates.append(last_or_penultimate_day(year, month, day))
                elif day > days_in_month(first):
                    # months shorter than 31 days are always followed by a 31-day month
                    candidates.append(first_of_next_month(first).replace(day=day))
                else:
                    candidates.append(first.replace(day=day))
        candidates.sort()
        return candidates

    def _next_in_months(self, now: date, start: date) -> date:
        """
        Summary:
        Earliest candidate of now.year after both `now` and `start`. Failing that,
        the earliest candidate of min(now.year, start.year) + 1, moving to later
        years only while that candidate is not after `now`.
        """
        for candidate in self._year_candidates(now.year):
            if candidate > now and candidate > start:
                return candidate

        # candidates of years before now.year are never after now
        year = max(min(now.year, start.year) + 1, now.year)
        while True:
            earliest = self._year_candidates(year)[0]
            if earliest > now:
                return earliest
            year += 1

    def _month_dates(self, first: date) -> list[date]:
        """Rule days that exist in the month starting at `first`, sorted."""
        length = days_in_month(first)
        dates = set()
        for day in self.days:
            if day < 0:
                dates.add(last_or_penultimate_day(first.year, first.month, day))
            elif day <= length:
                dates.add(first.replace(day=day))
        return sorted(dates)

    def _month_floor(self, first: date) -> date | None:
        """
        Summary:
        Opening date of a new month: the smallest positive rule day that exists in
        the month, else the earliest of the rule's -1/-2, else None.
        """
        length = days_in_month(first)
        positive = [day for day in self.days if 0 < day <= length]
        if positive:
            return first.replace(day=min(positive))
        negative = [day for day in self.days if day < 0]
        if negative:
            return last_or_penultimate_day(first.year, first.month, min(negative))
        return None

    def _first_from_month(self, first: date) -> date:
        # any day up to 31 fits within two consecutive months
        while True:
            floor = self._month_floor(first)
            if floor is not None:
                return floor
            first = first_of_next_month(first)

    def _next_by_days(self, now: date, start: date) -> date:
        closest = next((d for d in self._month_dates(start.replace(day=1)) if d > start), None)
        if closest is None:
            closest = self._first_from_month(first_of_next_month(start))
        if closest > now:
            return closest

        for candidate in self._month_dates(now.replace(day=1)):
            if candidate > now:
                return candidate
        return self._first_from_month(first_of_next_month(now))


Rule = Union[Daily, Annual, Weekly, Monthly]


def _parse_int(token: str, what: str, low: int, high: int) -> int:
    if not _INT_RE.fullmatch(token):
        raise RuleSyntaxError(f"invalid {what}: {token!r}")
    value = int(token)
    if not low <= value <= high:
        raise RuleSyntaxError(f"{what} out of range [{low}, {high}]: {value}")
    return value


def _parse_list(field: str, what: str, low: int, high: int) -> list[int]:
    return [_parse_int(token, what, low, high) for token in field.split(",")]


def parse_rule(text: str) -> Rule:
    """
    Summary:
    Validates rule text and returns the matching rule. All shape and range
    checks happen here, before any date arithmetic.
    """
    fields = (text or "").split()
    if not fields:
        raise RuleSyntaxError("empty repeat rule")

    kind, args = fields[0], fields[1:]

    if kind == "d":
        if len(args) != 1:
            raise RuleSyntaxError(f"daily rule needs exactly one interval: {text!r}")
        return Daily(_parse_int(args[0], "day interval", 1, MAX_DAILY_INTERVAL))

    if kind == "y":
        if args:
            raise RuleSyntaxError(f"annual rule takes no arguments: {text!r}")
        return Annual()

    if kind == "w":
        if len(args) != 1:
            raise RuleSyntaxError(f"weekly rule needs exactly one list of weekdays: {text!r}")
        return Weekly(frozenset(_parse_list(args[0], "day of week", 1, 7)))

    if kind == "m":
        if len(args) not in (1, 2):
            raise RuleSyntaxError(f"monthly rule needs days and optional months: {text!r}")
        days = _parse_list(args[0], "day of month", -2, 31)
        if 0 in days:
            raise RuleSyntaxError("day of month cannot be 0")
        months = _parse_list(args[1], "month", 1, 12) if len(args) == 2 else []
        return Monthly(tuple(days), frozenset(months))

    raise RuleSyntaxError(f"unsupported repeat rule: {text!r}")


def next_date(now: date, date_text: str, repeat: str) -> str:
    """
    Summary:
    Next occurrence of a task strictly after `now`, as YYYYMMDD text.
    The task date is parsed before the rule, so a bad date wins over a bad rule.
    """
    if isinstance(now, datetime):
        now = now.date()
    start = parse_date(date_text)
    rule = parse_rule(repeat)
    return format_date(rule.next_after(now, start))
