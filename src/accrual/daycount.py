"""
Day count conventions.

Each convention is registered as a pair of functions: one counting the days
between two dates and one turning two dates into a year fraction. Both are
only ever called with ``d1 < d2`` on whole calendar days; ``DayCounter``
handles equal dates, reversed dates and the intraday part of a datetime.

Usage:
    >>> from datetime import date
    >>> dc = DayCounter(DayCountConvention.THIRTY_360_BOND_BASIS)
    >>> dc.day_count(date(2006, 8, 31), date(2007, 2, 28))
    178
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import TYPE_CHECKING, Optional

from .calendar import Calendar
from .calendars import BRAZIL_SETTLEMENT
from .dates import SECONDS_PER_DAY, DateLike, add_months, add_years, days_in_year
from .dates import is_end_of_month, is_last_of_february, is_leap_year, split_intraday
from .dates import to_date
from .enums import DayCountConvention
from .exceptions import ConfigurationError

if TYPE_CHECKING:
    from .schedule import Schedule

logger = logging.getLogger(__name__)

DCC = DayCountConvention

ONE_DAY = timedelta(days=1)

# Cumulative days before each month in a 365-day year
_MONTH_OFFSET = (0, 31, 59, 90, 120, 151, 181, 212, 243, 273, 304, 334)


@dataclass(frozen=True)
class _Context:
    """Per-call inputs some conventions need beyond the two dates."""

    ref_start: Optional[date] = None
    ref_end: Optional[date] = None
    termination_date: Optional[date] = None
    schedule: Optional['Schedule'] = None
    calendar: Optional[Calendar] = None


DayCountFunc = Callable[[date, date, _Context], int]
YearFractionFunc = Callable[[date, date, _Context], float]


@dataclass(frozen=True)
class DayCountRule:
    """
    Registered implementation of a convention.

    Attributes
        day_count: Days between two dates under the convention
        year_fraction: Year fraction between two dates
        denominator: Fixed days-per-year, used to weight intraday fractions.
            None means the weight is the year fraction of the first day.
    """

    day_count: DayCountFunc
    year_fraction: YearFractionFunc
    denominator: Optional[float] = None


_REGISTRY: dict[DayCountConvention, DayCountRule] = {}


def register_day_count(
    convention: DayCountConvention,
    day_count: DayCountFunc,
    year_fraction: YearFractionFunc,
    denominator: Optional[float] = None,
    replace_existing: bool = False,
) -> None:
    """Register the implementation of a day count convention."""
    if convention in _REGISTRY and not replace_existing:
        raise ConfigurationError(f"Day count '{convention.value}' already registered")
    _REGISTRY[convention] = DayCountRule(day_count, year_fraction, denominator)


def get_day_count_rule(convention: DayCountConvention) -> DayCountRule:
    try:
        return _REGISTRY[convention]
    except KeyError as exc:
        raise ConfigurationError(f'Unsupported day count convention: {convention}') from exc


# -- actual day conventions --------------------------------------------------

def _actual_days(d1: date, d2: date, ctx: _Context) -> int:
    return (d2 - d1).days


def _fixed_denominator(denominator: float) -> YearFractionFunc:
    def year_fraction(d1: date, d2: date, ctx: _Context) -> float:
        return (d2 - d1).days / denominator
    return year_fraction


def _no_leap_serial(d: date) -> int:
    serial = d.day + _MONTH_OFFSET[d.month - 1] + d.year * 365
    if d.month == 2 and d.day == 29:
        serial -= 1
    return serial


def _no_leap_days(d1: date, d2: date, ctx: _Context) -> int:
    return _no_leap_serial(d2) - _no_leap_serial(d1)


def _no_leap_year_fraction(d1: date, d2: date, ctx: _Context) -> float:
    return _no_leap_days(d1, d2, ctx) / 365.0


def _canadian_year_fraction(d1: date, d2: date, ctx: _Context) -> float:
    """
    Actual/365 (Fixed) Canadian Bond.

    Inside a coupon period the fraction is actual/365; a full period is
    worth exactly ``1 / frequency``.
    """
    if ctx.ref_start is None or ctx.ref_end is None:
        raise ConfigurationError(
            'Actual/365 (Fixed) Canadian Bond requires a reference period'
        )
    days = (d2 - d1).days
    ref_days = (ctx.ref_end - ctx.ref_start).days
    months = int(0.5 + 12 * ref_days / 365.0)
    if months == 0:
        raise ConfigurationError(
            f'invalid reference period ({ctx.ref_start}, {ctx.ref_end}) for '
            f'Actual/365 Canadian; must be longer than a month'
        )
    frequency = 12 // months
    if frequency == 0:
        raise ConfigurationError(
            f'invalid reference period ({ctx.ref_start}, {ctx.ref_end}) for '
            f'Actual/365 Canadian; must not be longer than a year'
        )
    if days < 365 // frequency:
        return days / 365.0
    return 1.0 / frequency - (ref_days - days) / 365.0


# -- 30/360 family -------------------------------------------------------------

def _thirty_360(dd1: int, dd2: int, mm1: int, mm2: int, yy1: int, yy2: int) -> int:
    return 360 * (yy2 - yy1) + 30 * (mm2 - mm1) + (dd2 - dd1)


def _thirty_360_us_days(d1: date, d2: date, ctx: _Context) -> int:
    dd1, dd2 = d1.day, d2.day
    if dd1 == 31:
        dd1 = 30
    if dd2 == 31 and dd1 >= 30:
        dd2 = 30
    if is_last_of_february(d2) and is_last_of_february(d1):
        dd2 = 30
    if is_last_of_february(d1):
        dd1 = 30
    return _thirty_360(dd1, dd2, d1.month, d2.month, d1.year, d2.year)


def _thirty_360_bond_basis_days(d1: date, d2: date, ctx: _Context) -> int:
    dd1, dd2 = d1.day, d2.day
    if dd1 == 31:
        dd1 = 30
    if dd2 == 31 and dd1 == 30:
        dd2 = 30
    return _thirty_360(dd1, dd2, d1.month, d2.month, d1.year, d2.year)


def _thirty_360_eurobond_days(d1: date, d2: date, ctx: _Context) -> int:
    dd1, dd2 = min(d1.day, 30), min(d2.day, 30)
    return _thirty_360(dd1, dd2, d1.month, d2.month, d1.year, d2.year)


def _thirty_360_italian_days(d1: date, d2: date, ctx: _Context) -> int:
    dd1, dd2 = min(d1.day, 30), min(d2.day, 30)
    if d1.month == 2 and dd1 > 27:
        dd1 = 30
    if d2.month == 2 and dd2 > 27:
        dd2 = 30
    return _thirty_360(dd1, dd2, d1.month, d2.month, d1.year, d2.year)


def _thirty_360_isda_days(d1: date, d2: date, ctx: _Context) -> int:
    dd1, dd2 = min(d1.day, 30), min(d2.day, 30)
    if is_last_of_february(d1):
        dd1 = 30
    # the end of February is kept as-is when it is the maturity date
    if is_last_of_february(d2) and d2 != ctx.termination_date:
        dd2 = 30
    return _thirty_360(dd1, dd2, d1.month, d2.month, d1.year, d2.year)


def _thirty_360_nasd_days(d1: date, d2: date, ctx: _Context) -> int:
    dd1, dd2, mm2 = d1.day, d2.day, d2.month
    if dd1 == 31:
        dd1 = 30
    if dd2 == 31:
        if dd1 >= 30:
            dd2 = 30
        else:
            dd2, mm2 = 1, mm2 + 1
    return _thirty_360(dd1, dd2, d1.month, mm2, d1.year, d2.year)


def _over_360(day_count: DayCountFunc) -> YearFractionFunc:
    def year_fraction(d1: date, d2: date, ctx: _Context) -> float:
        return day_count(d1, d2, ctx) / 360.0
    return year_fraction


# -- business days -----------------------------------------------------------

def _business_days(d1: date, d2: date, ctx: _Context) -> int:
    calendar = ctx.calendar if ctx.calendar is not None else BRAZIL_SETTLEMENT
    return calendar.business_days_between(d1, d2)


def _business_252_year_fraction(d1: date, d2: date, ctx: _Context) -> float:
    return _business_days(d1, d2, ctx) / 252.0


# -- Actual/Actual -------------------------------------------------------------

def _act_act_isda_year_fraction(d1: date, d2: date, ctx: _Context) -> float:
    y1, y2 = d1.year, d2.year
    total = y2 - y1 - 1.0
    total += (date(y1 + 1, 1, 1) - d1).days / days_in_year(y1)
    total += (d2 - date(y2, 1, 1)).days / days_in_year(y2)
    return total


def _act_act_afb_year_fraction(d1: date, d2: date, ctx: _Context) -> float:
    """Whole years counted back from d2, the remainder over 365 or 366."""
    new_d2 = temp = d2
    whole_years = 0.0
    while temp > d1:
        temp = add_years(new_d2, -1)
        if temp.day == 28 and temp.month == 2 and is_leap_year(temp.year):
            temp += ONE_DAY
        if temp >= d1:
            whole_years += 1.0
            new_d2 = temp

    denominator = 365.0
    if is_leap_year(new_d2.year):
        feb29 = date(new_d2.year, 2, 29)
        if new_d2 > feb29 and d1 <= feb29:
            denominator += 1.0
    elif is_leap_year(d1.year):
        feb29 = date(d1.year, 2, 29)
        if new_d2 > feb29 and d1 <= feb29:
            denominator += 1.0

    return whole_years + (new_d2 - d1).days / denominator


def _isma_with_reference(d1: date, d2: date, ref_start: date, ref_end: date) -> float:
    if d1 == d2:
        return 0.0
    if d1 > d2:
        return -_isma_with_reference(d2, d1, ref_start, ref_end)

    if not (ref_end > ref_start and ref_end > d1):
        raise ConfigurationError(
            f'Invalid reference period: date 1: {d1}, date 2: {d2}, '
            f'reference period start: {ref_start}, reference period end: {ref_end}'
        )

    # rough length of the reference period in months
    months = int(0.5 + 12 * (ref_end - ref_start).days / 365.0)
    if months == 0:
        ref_start, ref_end = d1, add_years(d1, 1)
        months = 12
    period = months / 12.0

    if d2 <= ref_end:
        if d1 >= ref_start:
            return period * (d2 - d1).days / (ref_end - ref_start).days
        # long first coupon
        previous_ref = add_months(ref_start, -months)
        if d2 > ref_start:
            return (_isma_with_reference(d1, ref_start, previous_ref, ref_start)
                    + _isma_with_reference(ref_start, d2, ref_start, ref_end))
        return _isma_with_reference(d1, d2, previous_ref, ref_start)

    # long final coupon or several periods
    if ref_start > d1:
        raise ConfigurationError(
            f'invalid dates: d1 ({d1}) < reference period start ({ref_start}) '
            f'for d2 ({d2}) > reference period end ({ref_end})'
        )
    total = _isma_with_reference(d1, ref_end, ref_start, ref_end)
    i = 0
    while True:
        new_ref_start = add_months(ref_end, months * i)
        new_ref_end = add_months(ref_end, months * (i + 1))
        if d2 < new_ref_end:
            break
        total += period
        i += 1
    return total + _isma_with_reference(new_ref_start, d2, new_ref_start, new_ref_end)


def _coupon_dates_with_quasi_payments(schedule: 'Schedule') -> list[date]:
    """Schedule dates with the issue date replaced by notional coupon dates."""
    advance = schedule.calendar.advance
    tenor = schedule.tenor
    convention = schedule.convention
    eom = schedule.end_of_month

    issue_date = schedule[0]
    notional_coupon = advance(schedule[1], -tenor, convention=convention, end_of_month=eom)

    coupon_dates = schedule.dates
    coupon_dates[0] = notional_coupon
    # long first coupon
    if notional_coupon > issue_date:
        prior = advance(notional_coupon, -tenor, convention=convention, end_of_month=eom)
        coupon_dates.insert(0, prior)
    return coupon_dates


def _isma_reference_fraction(d1: date, d2: date, ref_start: date, ref_end: date) -> float:
    ref_days = (ref_end - ref_start).days
    if ref_days < 16:
        coupons_per_year = 1
        ref_days = (add_years(d1, 1) - d1).days
    else:
        months = int(0.5 + 12 * ref_days / 365.0)
        coupons_per_year = int(0.5 + 12.0 / months)
    return (d2 - d1).days / (ref_days * coupons_per_year)


def _extend_past_schedule(coupon_dates: list[date], d1: date, d2: date,
                          schedule: 'Schedule') -> list[date]:
    """Add one quasi-coupon on either side the dates fall outside of."""
    advance = schedule.calendar.advance
    step = dict(convention=schedule.convention, end_of_month=schedule.end_of_month)
    if d1 < coupon_dates[0]:
        coupon_dates.insert(0, advance(coupon_dates[0], -schedule.tenor, **step))
    if d2 > coupon_dates[-1]:
        coupon_dates.append(advance(coupon_dates[-1], schedule.tenor, **step))
    if d1 < coupon_dates[0] or d2 > coupon_dates[-1]:
        raise ConfigurationError(
            f'Dates out of range of schedule: date 1: {d1}, date 2: {d2}, '
            f'first date: {coupon_dates[0]}, last date: {coupon_dates[-1]}'
        )
    return coupon_dates


def _act_act_isma_year_fraction(d1: date, d2: date, ctx: _Context) -> float:
    if ctx.schedule is not None:
        coupon_dates = _coupon_dates_with_quasi_payments(ctx.schedule)
        coupon_dates = _extend_past_schedule(coupon_dates, d1, d2, ctx.schedule)
        total = 0.0
        for start, end in zip(coupon_dates[:-1], coupon_dates[1:]):
            if d1 < end and d2 > start:
                total += _isma_reference_fraction(max(d1, start), min(d2, end), start, end)
        return total

    if ctx.ref_start is None and ctx.ref_end is None:
        raise ConfigurationError(
            'Actual/Actual (ISMA) needs either a schedule or reference period dates'
        )
    ref_start = ctx.ref_start if ctx.ref_start is not None else d1
    ref_end = ctx.ref_end if ctx.ref_end is not None else d2
    return _isma_with_reference(d1, d2, ref_start, ref_end)


# -- other conventions ---------------------------------------------------------

def _one_days(d1: date, d2: date, ctx: _Context) -> int:
    return 1


def _one_year_fraction(d1: date, d2: date, ctx: _Context) -> float:
    return 1.0


def _simple_year_fraction(d1: date, d2: date, ctx: _Context) -> float:
    """Whole months over 12 when the dates line up, 30/360 otherwise."""
    dm1, dm2 = d1.day, d2.day
    if (dm1 == dm2
            # e.g. Aug 30 -> Feb 28
            or (dm1 > dm2 and is_end_of_month(d2))
            # e.g. Feb 28 -> Aug 30
            or (dm1 < dm2 and is_end_of_month(d1))):
        return (d2.year - d1.year) + (d2.month - d1.month) / 12.0
    return _thirty_360_bond_basis_days(d1, d2, ctx) / 360.0


register_day_count(DCC.ACT_360, _actual_days, _fixed_denominator(360.0), 360.0)
register_day_count(DCC.ACT_365_FIXED, _actual_days, _fixed_denominator(365.0), 365.0)
register_day_count(DCC.ACT_365_CANADIAN, _actual_days, _canadian_year_fraction, 365.0)
register_day_count(DCC.ACT_365_NO_LEAP, _no_leap_days, _no_leap_year_fraction, 365.0)
register_day_count(DCC.ACT_366, _actual_days, _fixed_denominator(366.0), 366.0)
register_day_count(DCC.ACT_365_25, _actual_days, _fixed_denominator(365.25), 365.25)

for _convention, _days in (
    (DCC.THIRTY_360_US, _thirty_360_us_days),
    (DCC.THIRTY_360_BOND_BASIS, _thirty_360_bond_basis_days),
    (DCC.THIRTY_360_EUROBOND, _thirty_360_eurobond_days),
    (DCC.THIRTY_360_ITALIAN, _thirty_360_italian_days),
    (DCC.THIRTY_360_ISDA, _thirty_360_isda_days),
    (DCC.THIRTY_360_NASD, _thirty_360_nasd_days),
):
    register_day_count(_convention, _days, _over_360(_days), 360.0)

register_day_count(DCC.BUSINESS_252, _business_days, _business_252_year_fraction, 252.0)
register_day_count(DCC.ACT_ACT_ISDA, _actual_days, _act_act_isda_year_fraction)
register_day_count(DCC.ACT_ACT_ISMA, _actual_days, _act_act_isma_year_fraction)
register_day_count(DCC.ACT_ACT_AFB, _actual_days, _act_act_afb_year_fraction)
register_day_count(DCC.ONE, _one_days, _one_year_fraction)
register_day_count(DCC.SIMPLE, _thirty_360_bond_basis_days, _simple_year_fraction)


def _day(d: Optional[DateLike]) -> Optional[date]:
    return split_intraday(to_date(d))[0] if d is not None else None


class DayCounter:
    """
    Day counter for a single convention.

    A schedule can be attached for Actual/Actual (ISMA), in which case the
    reference periods come from the schedule and explicit reference dates
    are ignored. Business/252 counts business days of ``calendar`` (Brazil
    settlement by default). The termination date is the default maturity
    for 30E/360 (ISDA) and can be overridden per call.
    """

    def __init__(
        self,
        convention: 'DayCountConvention | str' = DCC.ACT_360,
        schedule: Optional['Schedule'] = None,
        calendar: Optional[Calendar] = None,
        termination_date: Optional[DateLike] = None,
    ):
        if isinstance(convention, str):
            convention = DayCountConvention.from_string(convention)
        self._rule = get_day_count_rule(convention)
        self._convention = convention
        self._schedule = schedule
        if calendar is None and convention == DCC.BUSINESS_252:
            calendar = BRAZIL_SETTLEMENT
        self._calendar = calendar
        self._termination_date = _day(termination_date)

    @property
    def convention(self) -> DayCountConvention:
        return self._convention

    @property
    def name(self) -> str:
        if self._convention == DCC.BUSINESS_252:
            return f'Business/252({self._calendar.name})'
        return self._convention.value

    @property
    def schedule(self) -> Optional['Schedule']:
        return self._schedule

    @property
    def calendar(self) -> Optional[Calendar]:
        return self._calendar

    @property
    def termination_date(self) -> Optional[date]:
        return self._termination_date

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f'DayCounter({self.name!r})'

    def __eq__(self, other) -> bool:
        if not isinstance(other, DayCounter):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def _context(self, ref_start, ref_end, termination_date) -> _Context:
        return _Context(
            ref_start=_day(ref_start),
            ref_end=_day(ref_end),
            termination_date=(_day(termination_date) if termination_date is not None
                              else self._termination_date),
            schedule=self._schedule,
            calendar=self._calendar,
        )

    def day_count(
        self,
        d1: DateLike,
        d2: DateLike,
        termination_date: Optional[DateLike] = None,
    ) -> int:
        """
        Number of days between two dates under the convention.

        Only the calendar days of datetimes are counted. The result is
        negative when ``d2`` precedes ``d1``.
        """
        day1, day2 = _day(d1), _day(d2)
        if day1 == day2:
            return 0
        ctx = self._context(None, None, termination_date)
        if day1 > day2:
            return -self._rule.day_count(day2, day1, ctx)
        return self._rule.day_count(day1, day2, ctx)

    def year_fraction(
        self,
        d1: DateLike,
        d2: DateLike,
        ref_start: Optional[DateLike] = None,
        ref_end: Optional[DateLike] = None,
        termination_date: Optional[DateLike] = None,
    ) -> float:
        """
        Year fraction between two dates.

        Args:
            d1: Start date (a datetime adds its time of day)
            d2: End date
            ref_start: Start of the reference coupon period
            ref_end: End of the reference coupon period
            termination_date: Maturity for 30E/360 (ISDA), overriding the
                instance default

        Returns
            Year fraction, negative when ``d2`` precedes ``d1``
        """
        day1, seconds1 = split_intraday(to_date(d1))
        day2, seconds2 = split_intraday(to_date(d2))

        if (day1, seconds1) == (day2, seconds2):
            return 0.0
        if (day1, seconds1) > (day2, seconds2):
            logger.debug('Swapping start/end for %s: %s, %s', self.name, d1, d2)
            return -self.year_fraction(d2, d1, ref_start, ref_end, termination_date)

        ctx = self._context(ref_start, ref_end, termination_date)
        result = self._whole_days_fraction(day1, day2, ctx)
        if seconds1 != seconds2:
            result += (seconds2 - seconds1) / SECONDS_PER_DAY * self._day_weight(day1, ctx)
        return result

    def _whole_days_fraction(self, day1: date, day2: date, ctx: _Context) -> float:
        if day1 == day2:
            return 0.0
        return self._rule.year_fraction(day1, day2, ctx)

    def _day_weight(self, day: date, ctx: _Context) -> float:
        """Year fraction of one full day starting at ``day``."""
        if self._rule.denominator is not None:
            return 1.0 / self._rule.denominator
        return self._whole_days_fraction(day, day + ONE_DAY, ctx)


def day_count(
    start: DateLike,
    end: DateLike,
    convention: 'DayCountConvention | str' = DCC.ACT_360,
    calendar: Optional[Calendar] = None,
    termination_date: Optional[DateLike] = None,
) -> int:
    """Number of days between two dates under a convention."""
    return DayCounter(convention, calendar=calendar,
                      termination_date=termination_date).day_count(start, end)


def year_fraction(
    start: DateLike,
    end: DateLike,
    convention: 'DayCountConvention | str' = DCC.ACT_360,
    ref_start: Optional[DateLike] = None,
    ref_end: Optional[DateLike] = None,
    schedule: Optional['Schedule'] = None,
    calendar: Optional[Calendar] = None,
    termination_date: Optional[DateLike] = None,
) -> float:
    """
    Calculate the year fraction between two dates.

    Args:
        start: Start date
        end: End date
        convention: Day count convention to use
        ref_start: Reference period start (Actual/Actual ISMA, Canadian)
        ref_end: Reference period end
        schedule: Schedule providing reference periods (Actual/Actual ISMA)
        calendar: Business day calendar (Business/252)
        termination_date: Maturity date (30E/360 ISDA)

    Returns
        Year fraction as a float
    """
    counter = DayCounter(convention, schedule=schedule, calendar=calendar,
                         termination_date=termination_date)
    return counter.year_fraction(start, end, ref_start, ref_end)
