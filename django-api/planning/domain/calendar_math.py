"""Pure calendar helpers for the planning engine.

Weekdays are numbered 0 = Sunday through 6 = Saturday everywhere in this
module, matching the way recurring rules store them. Use ``day_of_week`` to
convert a ``date`` instead of ``date.weekday()``.
"""

import calendar
from collections.abc import Iterator
from datetime import date, timedelta

SUNDAY = 0
SATURDAY = 6

DEFAULT_YEAR_NAME_FORMAT = "Operating year {start_year}/{end_year}"


def _check_weekday(weekday: int) -> None:
    if not 0 <= weekday <= 6:
        raise ValueError(f"weekday must be between 0 and 6, got {weekday}")


def day_of_week(day: date) -> int:
    """Return the weekday of ``day`` with 0 = Sunday."""
    return (day.weekday() + 1) % 7


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def add_weeks(day: date, weeks: int) -> date:
    return day + timedelta(weeks=weeks)


def nth_weekday_of_month(year: int, month: int, weekday: int, n: int) -> date | None:
    """Return the n-th ``weekday`` of the month, counting from day 1.

    Returns None when the month has fewer than ``n`` such weekdays.
    """
    _check_weekday(weekday)
    if n < 1:
        return None
    count = 0
    for day_number in range(1, days_in_month(year, month) + 1):
        current = date(year, month, day_number)
        if day_of_week(current) == weekday:
            count += 1
            if count == n:
                return current
    return None


def last_weekday_of_month(year: int, month: int, weekday: int) -> date:
    """Return the last ``weekday`` of the month, scanning back from its last day."""
    _check_weekday(weekday)
    for day_number in range(days_in_month(year, month), 0, -1):
        current = date(year, month, day_number)
        if day_of_week(current) == weekday:
            return current
    raise AssertionError("every month contains every weekday")


def first_business_like_day(year: int, month: int) -> date:
    """Return day 1 of the month, moved to Monday if it falls on a weekend.

    No holiday awareness; this is only a reasonable first suggestion.
    """
    first = date(year, month, 1)
    weekday = day_of_week(first)
    if weekday == SUNDAY:
        return add_days(first, 1)
    if weekday == SATURDAY:
        return add_days(first, 2)
    return first


def iter_months(start: date, end: date) -> Iterator[tuple[int, int]]:
    """Yield ``(year, month)`` from the month of ``start`` to the month of ``end``."""
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        yield year, month
        month += 1
        if month > 12:
            year, month = year + 1, 1


def default_year_window(today: date, first_month: int = 7) -> tuple[date, date]:
    """Return the window of the next operating year as seen from ``today``.

    Once ``first_month`` has begun, the next year starts a calendar year later.
    The window ends on the day before the same start date one year on.
    """
    start_year = today.year + 1 if today.month >= first_month else today.year
    start = date(start_year, first_month, 1)
    end = date(start_year + 1, first_month, 1) - timedelta(days=1)
    return start, end


def default_year_name(start: date, end: date, name_format: str = DEFAULT_YEAR_NAME_FORMAT) -> str:
    return name_format.format(start_year=start.year, end_year=end.year)
