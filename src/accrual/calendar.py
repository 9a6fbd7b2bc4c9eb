"""
Business day calendars and date adjustment.

A Calendar pairs a weekend definition with a holiday rule and is backed by an
opendate ``CustomCalendar``, which does the business day snapping, stepping
and counting. Calendars are immutable; the market calendars live in
``accrual.calendars``.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, timedelta
from functools import lru_cache

from opendate import CustomCalendar, Date, register_calendar
from opendate import set_default_calendar
from opendate.constants import MAX_YEAR, MIN_YEAR

from . import dates as _dates
from .dates import SATURDAY, SUNDAY, DateLike, split_intraday, to_date
from .enums import BusinessDayConvention, TimeUnit
from .exceptions import ConfigurationError
from .tenor import Period

ONE_DAY = timedelta(days=1)

WEEKDAY_NAMES = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')

HolidayRule = Callable[[date], bool]


def _no_holidays(d: date) -> bool:
    return False


@dataclass(frozen=True, eq=False)
class Calendar:
    """
    A business day calendar.

    Attributes
        name: Calendar name, also its identity for equality
        holiday_rule: Predicate returning True on (non-weekend) holidays
        weekend: Weekday numbers (Monday=0) that are never business days
        business_calendar: The opendate calendar built from the two above
    """

    name: str
    holiday_rule: HolidayRule = field(default=_no_holidays, repr=False)
    weekend: frozenset[int] = frozenset({SATURDAY, SUNDAY})
    business_calendar: CustomCalendar = field(init=False, repr=False)

    def __post_init__(self):
        weekmask = ' '.join(
            WEEKDAY_NAMES[i] for i in range(7) if i not in self.weekend
        )
        object.__setattr__(self, 'business_calendar', CustomCalendar(
            name=self.name,
            holidays=self._holidays_between,
            weekmask=weekmask,
        ))

    def __eq__(self, other) -> bool:
        if not isinstance(other, Calendar):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __str__(self) -> str:
        return self.name

    def _holidays_between(self, begdate: date, enddate: date) -> set[date]:
        return {
            h
            for year in range(begdate.year, enddate.year + 1)
            for h in _holidays_in_year(self, year)
            if begdate <= h <= enddate
        }

    def _check_range(self, d: date) -> None:
        if not MIN_YEAR <= d.year <= MAX_YEAR:
            raise ConfigurationError(
                f'{d} is outside the {self.name} calendar range {MIN_YEAR}-{MAX_YEAR}'
            )

    def _on_calendar(self, d: date) -> Date:
        """``d`` as an opendate Date bound to this calendar."""
        self._check_range(d)
        return Date(d.year, d.month, d.day).calendar(self.business_calendar)

    def is_weekend(self, d: date) -> bool:
        return d.weekday() in self.weekend

    def is_business_day(self, d: date) -> bool:
        return self._on_calendar(d).is_business_day()

    def is_holiday(self, d: date) -> bool:
        """True on weekends and holidays."""
        return not self.is_business_day(d)

    def _following(self, d: date) -> date:
        return _plain(self._on_calendar(d).b.add(days=0))

    def _preceding(self, d: date) -> date:
        return _plain(self._on_calendar(d).b.subtract(days=0))

    def adjust(
        self,
        d: date,
        convention: BusinessDayConvention = BusinessDayConvention.FOLLOWING,
    ) -> date:
        """
        Adjust a date according to a business day convention.

        Uses opendate's business day snapping:
        - .b.add(days=0) snaps forward to the next business day
        - .b.subtract(days=0) snaps backward to the previous business day

        MODIFIED_* variants check the month boundary and reverse direction if
        crossed. HALF_MONTH_MODIFIED_FOLLOWING also reverses when following
        would cross the 15th. NEAREST prefers the following date on a tie.

        Args:
            d: Date to adjust
            convention: Business day convention to apply

        Returns
            Adjusted date
        """
        if convention == BusinessDayConvention.UNADJUSTED or self.is_business_day(d):
            return d

        if convention == BusinessDayConvention.FOLLOWING:
            return self._following(d)

        if convention == BusinessDayConvention.PRECEDING:
            return self._preceding(d)

        if convention == BusinessDayConvention.MODIFIED_FOLLOWING:
            adjusted = self._following(d)
            return self._preceding(d) if adjusted.month != d.month else adjusted

        if convention == BusinessDayConvention.HALF_MONTH_MODIFIED_FOLLOWING:
            adjusted = self._following(d)
            if adjusted.month != d.month or d.day <= 15 < adjusted.day:
                return self._preceding(d)
            return adjusted

        if convention == BusinessDayConvention.MODIFIED_PRECEDING:
            adjusted = self._preceding(d)
            return self._following(d) if adjusted.month != d.month else adjusted

        if convention == BusinessDayConvention.NEAREST:
            later, earlier = self._following(d), self._preceding(d)
            return later if later - d <= d - earlier else earlier

        raise ValueError(f'Unknown business day convention: {convention}')

    def advance(
        self,
        d: date,
        n: 'int | Period',
        unit: TimeUnit = TimeUnit.DAYS,
        convention: BusinessDayConvention = BusinessDayConvention.FOLLOWING,
        end_of_month: bool = False,
    ) -> date:
        """
        Advance a date by a number of units or by a Period.

        Day units step over business days. Week units add calendar weeks and
        then adjust. Month and year units add calendar months; when
        ``end_of_month`` is set and ``d`` is the last business day of its
        month, the result is the last business day of the target month.

        Args:
            d: Starting date
            n: Number of units, or a Period (``unit`` is then ignored)
            unit: Time unit of ``n``
            convention: Business day convention applied to the result
            end_of_month: Apply the end-of-month rule

        Returns
            Advanced date
        """
        period = n if isinstance(n, Period) else Period(n, unit)

        if period.length == 0:
            return self.adjust(d, convention)

        if period.unit == TimeUnit.DAYS:
            od = self._on_calendar(d)
            if period.length > 0:
                return _plain(od.b.add(days=period.length))
            return _plain(od.b.subtract(days=-period.length))

        result = period.add_to(d)
        if period.unit == TimeUnit.WEEKS:
            return self.adjust(result, convention)

        if end_of_month and self.is_end_of_month(d):
            return self.end_of_month(result)

        return self.adjust(result, convention)

    def end_of_month(self, d: date) -> date:
        """Last business day of the month containing ``d``."""
        return self.adjust(_dates.end_of_month(d), BusinessDayConvention.PRECEDING)

    def is_end_of_month(self, d: date) -> bool:
        """True when ``d`` is on or after the last business day of its month."""
        return d.month != self.adjust(d + ONE_DAY).month

    def business_days_between(
        self,
        start: date,
        end: date,
        include_first: bool = True,
        include_last: bool = False,
    ) -> int:
        """
        Count business days between two dates.

        The count is negative when ``end`` precedes ``start``.

        Args:
            start: First date
            end: Second date
            include_first: Count ``start`` if it is a business day
            include_last: Count ``end`` if it is a business day

        Returns
            Signed number of business days
        """
        start, _ = split_intraday(start)
        end, _ = split_intraday(end)

        if start == end:
            if include_first and include_last and self.is_business_day(start):
                return 1
            return 0

        lo, hi = (start, end) if start < end else (end, start)
        self._check_range(lo)
        self._check_range(hi)
        # both ends inclusive, then drop whichever the flags exclude
        count = _count_business_days(self, lo, hi)
        if not include_first and self.is_business_day(start):
            count -= 1
        if not include_last and self.is_business_day(end):
            count -= 1
        return count if start < end else -count

    def holiday_list(
        self,
        start: date,
        end: date,
        include_weekends: bool = False,
    ) -> list[date]:
        """Holidays between two dates, both included."""
        if start > end:
            return []
        if include_weekends:
            open_days = {_plain(d) for d in self.business_calendar.business_days(start, end)}
            days = (start + timedelta(days=i) for i in range((end - start).days + 1))
            return [d for d in days if d not in open_days]
        return sorted(
            _plain(h) for h in self.business_calendar.business_holidays(start, end)
            if not self.is_weekend(h)
        )


def _plain(d: date) -> date:
    return date(d.year, d.month, d.day)


@lru_cache(maxsize=4096)
def _count_business_days(calendar: Calendar, lo: date, hi: date) -> int:
    return len(calendar.business_calendar.business_days(lo, hi))


@lru_cache(maxsize=1024)
def _holidays_in_year(calendar: Calendar, year: int) -> tuple[date, ...]:
    first = date(year, 1, 1)
    days = (first + timedelta(days=i) for i in range(_dates.days_in_year(year)))
    return tuple(d for d in days if calendar.holiday_rule(d))


# Every day is a business day
NULL_CALENDAR = Calendar(name='Null', weekend=frozenset())

# Saturdays and Sundays only
WEEKENDS_ONLY = Calendar(name='Weekends only')
register_calendar('WEEKENDS_ONLY', WEEKENDS_ONLY.business_calendar)
set_default_calendar('WEEKENDS_ONLY')


def adjust_date(
    d: DateLike,
    convention: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
    calendar: Calendar = WEEKENDS_ONLY,
) -> date:
    """
    Adjust a date according to a business day convention.

    Args:
        d: Date to adjust
        convention: Business day convention to apply
        calendar: Calendar defining business days

    Returns
        Adjusted date
    """
    return calendar.adjust(to_date(d), convention)


def is_business_day(d: DateLike, calendar: Calendar = WEEKENDS_ONLY) -> bool:
    """Check if a date is a business day."""
    return calendar.is_business_day(to_date(d))


def add_business_days(
    d: DateLike,
    days: int,
    calendar: Calendar = WEEKENDS_ONLY,
) -> date:
    """Add business days to a date."""
    d = to_date(d)
    if days == 0:
        return d
    return calendar.advance(d, days, TimeUnit.DAYS)
