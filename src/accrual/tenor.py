"""
Tenor parsing and manipulation.

A tenor is a time period like "3M" (3 months) or "1Y" (1 year). Periods can
be negated and scaled, which is how schedules step backward from maturity.
"""

import re
from dataclasses import dataclass
from datetime import date
from typing import TYPE_CHECKING

from .dates import DateLike, add_days, add_months, add_weeks, add_years
from .dates import parse_date
from .enums import BusinessDayConvention, Frequency, TimeUnit

if TYPE_CHECKING:
    from .calendar import Calendar


@dataclass(frozen=True)
class Period:
    """
    Represents a time period.

    Attributes
        length: Signed number of units (e.g., 3 for "3M", -6 for "-6M")
        unit: Time unit
    """

    length: int
    unit: TimeUnit

    def __post_init__(self):
        if isinstance(self.unit, str):
            object.__setattr__(self, 'unit', TimeUnit(self.unit.upper()))
        if not isinstance(self.unit, TimeUnit):
            raise ValueError(f'Invalid tenor unit: {self.unit}')

    def __str__(self) -> str:
        return f'{self.length}{self.unit.value}'

    def __repr__(self) -> str:
        return f"Period({self.length}, '{self.unit.value}')"

    def __neg__(self) -> 'Period':
        return Period(-self.length, self.unit)

    def __mul__(self, n: int) -> 'Period':
        return Period(self.length * n, self.unit)

    __rmul__ = __mul__

    @classmethod
    def from_frequency(cls, frequency: Frequency) -> 'Period':
        """The period between two events of a frequency."""
        if frequency == Frequency.NO_FREQUENCY:
            return cls(0, TimeUnit.DAYS)
        if frequency == Frequency.ONCE:
            return cls(0, TimeUnit.YEARS)
        if frequency == Frequency.ANNUAL:
            return cls(1, TimeUnit.YEARS)
        n = frequency.value
        if 12 % n == 0:
            return cls(12 // n, TimeUnit.MONTHS)
        if 52 % n == 0:
            return cls(52 // n, TimeUnit.WEEKS)
        if frequency == Frequency.DAILY:
            return cls(1, TimeUnit.DAYS)
        raise ValueError(f'Unknown frequency: {frequency}')

    @property
    def frequency(self) -> Frequency:
        """Frequency implied by the period, e.g. 6M is semiannual."""
        length = abs(self.length)
        if length == 0:
            return Frequency.ONCE if self.unit == TimeUnit.YEARS else Frequency.NO_FREQUENCY
        if self.unit == TimeUnit.YEARS:
            if length == 1:
                return Frequency.ANNUAL
        elif self.unit == TimeUnit.MONTHS:
            if 12 % length == 0 and length <= 12:
                return Frequency(12 // length)
        elif self.unit == TimeUnit.WEEKS:
            if length == 1:
                return Frequency.WEEKLY
            if length == 2:
                return Frequency.BIWEEKLY
            if length == 4:
                return Frequency.EVERY_FOURTH_WEEK
        elif length == 1:
            return Frequency.DAILY
        raise ValueError(f'No frequency corresponds to {self}')

    @property
    def months(self) -> int:
        """Length in months (0 for day and week periods)."""
        if self.unit == TimeUnit.MONTHS:
            return self.length
        if self.unit == TimeUnit.YEARS:
            return self.length * 12
        return 0

    @property
    def days(self) -> int:
        """Convert tenor to approximate number of days."""
        if self.unit == TimeUnit.DAYS:
            return self.length
        if self.unit == TimeUnit.WEEKS:
            return self.length * 7
        if self.unit == TimeUnit.MONTHS:
            return self.length * 30  # Approximate
        return self.length * 365  # Approximate

    @property
    def years(self) -> float:
        """Convert tenor to approximate number of years."""
        if self.unit == TimeUnit.DAYS:
            return self.length / 365.0
        if self.unit == TimeUnit.WEEKS:
            return self.length * 7 / 365.0
        if self.unit == TimeUnit.MONTHS:
            return self.length / 12.0
        return float(self.length)

    def add_to(self, d: DateLike) -> date:
        """Add this period to a date in calendar terms (no business-day rolling)."""
        if self.unit == TimeUnit.DAYS:
            return add_days(d, self.length)
        if self.unit == TimeUnit.WEEKS:
            return add_weeks(d, self.length)
        if self.unit == TimeUnit.MONTHS:
            return add_months(d, self.length)
        return add_years(d, self.length)


def parse_tenor(s: str) -> Period:
    """
    Parse a tenor string.

    Supported formats:
        - "1D", "7D" (days)
        - "1W", "2W" (weeks)
        - "1M", "3M", "6M" (months)
        - "1Y", "5Y", "10Y" (years)
        - a leading minus sign, e.g. "-6M"

    Also supports:
        - "ON" (overnight) = 1D
        - "TN" (tomorrow-next) = 2D
        - "SN" (spot-next) = 1D

    Args:
        s: Tenor string

    Returns
        Period object
    """
    s = s.strip().upper()

    # Special cases
    if s == 'ON':  # Overnight
        return Period(1, TimeUnit.DAYS)
    if s == 'TN':  # Tomorrow-next
        return Period(2, TimeUnit.DAYS)
    if s == 'SN':  # Spot-next
        return Period(1, TimeUnit.DAYS)

    match = re.match(r'^(-?\d+)([DWMY])$', s)
    if match:
        return Period(int(match.group(1)), TimeUnit(match.group(2)))

    raise ValueError(f'Cannot parse tenor: {s}')


def to_period(tenor: 'str | Period | Frequency') -> Period:
    """Coerce a tenor string, Period or Frequency into a Period."""
    if isinstance(tenor, Period):
        return tenor
    if isinstance(tenor, Frequency):
        return Period.from_frequency(tenor)
    if isinstance(tenor, str):
        return parse_tenor(tenor)
    raise TypeError(f'Expected Period, Frequency, or string, got {type(tenor)}')


def tenor_to_date(
    tenor: 'str | Period',
    reference_date: DateLike,
    calendar: 'Calendar | None' = None,
    convention: BusinessDayConvention = BusinessDayConvention.MODIFIED_FOLLOWING,
    end_of_month: bool = False,
) -> date:
    """
    Convert a tenor to a date relative to a reference date.

    Args:
        tenor: Tenor string or Period object
        reference_date: Base date for calculation
        calendar: Calendar used to roll the result (weekends only if omitted)
        convention: Business day convention
        end_of_month: Keep month-end reference dates on month ends

    Returns
        Resulting date
    """
    from .calendar import WEEKENDS_ONLY

    period = to_period(tenor)
    cal = calendar if calendar is not None else WEEKENDS_ONLY
    return cal.advance(parse_date(reference_date), period, convention=convention,
                       end_of_month=end_of_month)


def tenor_to_years(tenor: 'str | Period') -> float:
    """Convert a tenor to approximate number of years."""
    return to_period(tenor).years
