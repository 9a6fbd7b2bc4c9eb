"""
Date utilities for accrual calculations.

Dates are plain ``datetime.date`` values. A ``datetime.datetime`` carries an
intraday component that day counters add as a fraction of a day.
"""

import calendar as _gregorian
from datetime import date, datetime, timedelta
from typing import Union

from dateutil import parser
from dateutil.easter import easter
from dateutil.relativedelta import relativedelta

SECONDS_PER_DAY = 86400.0

MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY, SUNDAY = range(7)

# Accept various date-like inputs
DateLike = Union[date, datetime, str]


def to_date(d: DateLike) -> date:
    """Convert any date-like input to a date.

    A ``datetime`` with a non-zero time of day is returned unchanged so its
    intraday fraction survives; otherwise the result is a plain ``date``.
    Strings are parsed as ISO ``YYYY-MM-DD`` or day-first ``DD/MM/YYYY``.
    """
    if isinstance(d, datetime):
        if d.time() == datetime.min.time():
            return d.date()
        return d.replace(tzinfo=None)
    if isinstance(d, date):
        return d
    if isinstance(d, str):
        text = d.strip()
        try:
            parsed = parser.isoparse(text)
        except ValueError:
            try:
                parsed = parser.parse(text, dayfirst=True)
            except (ValueError, OverflowError) as exc:
                raise ValueError(f'Cannot parse date: {d}') from exc
        return to_date(parsed)
    raise TypeError(f'Expected date, datetime, or string, got {type(d)}')


# Alias for backward compatibility
parse_date = to_date


def split_intraday(d: date) -> tuple[date, float]:
    """Split a date-like value into its calendar day and seconds since midnight."""
    if isinstance(d, datetime):
        seconds = (
            d.hour * 3600 + d.minute * 60 + d.second + d.microsecond / 1e6
        )
        return d.date(), seconds
    return d, 0.0


def fraction_of_day(d: date) -> float:
    """Elapsed fraction of the day at ``d`` (0 for plain dates)."""
    return split_intraday(d)[1] / SECONDS_PER_DAY


def days_between(d1: date, d2: date) -> int:
    """Whole calendar days from d1 to d2 (negative when d2 < d1)."""
    return (split_intraday(d2)[0] - split_intraday(d1)[0]).days


def add_days(d: DateLike, days: int) -> date:
    """Add calendar days to a date."""
    return to_date(d) + timedelta(days=days)


def add_weeks(d: DateLike, weeks: int) -> date:
    """Add calendar weeks to a date."""
    return to_date(d) + timedelta(weeks=weeks)


def add_months(d: DateLike, months: int) -> date:
    """Add months to a date, clamping to the last day of the target month."""
    return to_date(d) + relativedelta(months=months)


def add_years(d: DateLike, years: int) -> date:
    """Add years to a date (29 February rolls to 28 February)."""
    return to_date(d) + relativedelta(years=years)


def is_leap_year(year: int) -> bool:
    """Check if a year is a leap year."""
    return _gregorian.isleap(year)


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def days_in_month(year: int, month: int) -> int:
    return _gregorian.monthrange(year, month)[1]


def end_of_month(d: date) -> date:
    """Last calendar day of the month containing ``d``."""
    return date(d.year, d.month, days_in_month(d.year, d.month))


def is_end_of_month(d: date) -> bool:
    """True when ``d`` is the last calendar day of its month."""
    return d.day == days_in_month(d.year, d.month)


def is_last_of_february(d: date) -> bool:
    return d.month == 2 and is_end_of_month(d)


def nth_weekday(n: int, weekday: int, month: int, year: int) -> date:
    """
    The n-th given weekday of a month.

    Args:
        n: Occurrence, 1 for the first
        weekday: Day of week, Monday=0 through Sunday=6
        month: Month number
        year: Year

    Returns
        Date of the n-th weekday
    """
    if not 1 <= n <= 5:
        raise ValueError(f'Weekday occurrence must be in [1, 5], got {n}')
    first = date(year, month, 1)
    offset = (weekday - first.weekday()) % 7
    result = first + timedelta(days=offset + 7 * (n - 1))
    if result.month != month:
        raise ValueError(f'No {n}th weekday {weekday} in {year}-{month:02d}')
    return result


def day_of_year(d: date) -> int:
    return d.timetuple().tm_yday


def easter_monday(year: int) -> int:
    """Day of the year (1-based) of Western Easter Monday."""
    return day_of_year(easter(year) + timedelta(days=1))
