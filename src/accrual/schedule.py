"""
Coupon schedule generation.

Builds the ordered coupon date sequence of a fixed income instrument from an
effective date, a termination date and a tenor, following the date
generation rule, stub dates, end-of-month rule and business day conventions
of the instrument.
"""

import copy
import logging
from bisect import bisect_left
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

from . import dates as _dates
from .calendar import NULL_CALENDAR, Calendar
from .dates import WEDNESDAY, DateLike, split_intraday, to_date
from .enums import BusinessDayConvention, DateGenerationRule, Frequency
from .enums import TimeUnit
from .exceptions import ConfigurationError
from .imm import is_imm_date, next_twentieth, previous_twentieth
from .tenor import Period, to_period

logger = logging.getLogger(__name__)

Rule = DateGenerationRule
Convention = BusinessDayConvention

# Rules whose dates snap to the 20th of the month
TWENTIETH_RULES = frozenset({
    Rule.TWENTIETH, Rule.TWENTIETH_IMM, Rule.OLD_CDS, Rule.CDS, Rule.CDS2015,
})

# Minimum front stub length (calendar days) for the OldCDS rule
OLD_CDS_STUB_DAYS = 30


def _day(d: DateLike) -> date:
    return split_intraday(to_date(d))[0]


def _allows_end_of_month(tenor: Period) -> bool:
    return tenor.unit in {TimeUnit.MONTHS, TimeUnit.YEARS} and tenor.length >= 1


@dataclass
class CouponPeriod:
    """
    A single accrual period of a schedule.

    Attributes
        accrual_start: Adjusted start of the period
        accrual_end: Adjusted end of the period
        unadjusted_start: Start before business day adjustment
        unadjusted_end: End before business day adjustment
        is_regular: False for stub periods
    """

    accrual_start: date
    accrual_end: date
    unadjusted_start: date
    unadjusted_end: date
    is_regular: Optional[bool]

    def __repr__(self) -> str:
        flag = {True: 'regular', False: 'stub', None: 'unknown'}[self.is_regular]
        return f'CouponPeriod({self.accrual_start}, {self.accrual_end}, {flag})'


class Schedule:
    """
    A coupon date schedule.

    Holds the adjusted dates, the unadjusted dates they came from, one
    regularity flag per period and the metadata used to generate them.
    """

    def __init__(
        self,
        effective_date: DateLike,
        termination_date: DateLike,
        tenor: 'str | Period | Frequency',
        calendar: Calendar = NULL_CALENDAR,
        convention: BusinessDayConvention = Convention.UNADJUSTED,
        termination_convention: Optional[BusinessDayConvention] = None,
        rule: DateGenerationRule = Rule.BACKWARD,
        end_of_month: bool = False,
        first_date: Optional[DateLike] = None,
        next_to_last_date: Optional[DateLike] = None,
    ):
        """
        Generate a schedule.

        Args:
            effective_date: Start of the first period
            termination_date: End of the last period
            tenor: Coupon tenor ('6M', Period or Frequency)
            calendar: Calendar used for business day adjustment
            convention: Adjustment of the accrual dates
            termination_convention: Adjustment of the termination date
                (defaults to ``convention``)
            rule: Date generation rule
            end_of_month: Keep dates on month ends when the seed date is one
            first_date: Explicit end of an irregular first period
            next_to_last_date: Explicit start of an irregular last period

        Raises
            ConfigurationError: On inconsistent dates, tenor or rule
        """
        effective = _day(effective_date)
        termination = _day(termination_date)
        first = _day(first_date) if first_date is not None else None
        next_to_last = _day(next_to_last_date) if next_to_last_date is not None else None

        self._tenor: Optional[Period] = to_period(tenor)
        self._calendar = calendar if calendar is not None else NULL_CALENDAR
        self._convention = convention
        self._termination_convention: Optional[BusinessDayConvention] = (
            termination_convention if termination_convention is not None else convention
        )
        self._rule: Optional[DateGenerationRule] = rule
        self._end_of_month: Optional[bool] = _allows_end_of_month(self._tenor) and end_of_month
        self._first_date = None if first == effective else first
        self._next_to_last_date = None if next_to_last == termination else next_to_last

        self._validate(effective, termination, end_of_month)
        self._generate(effective, termination)

        logger.debug(
            'Generated %d dates from %s to %s (%s, %s, %s)',
            len(self._dates), self._dates[0], self._dates[-1],
            self._tenor, self._rule.name, self._convention.name,
        )

    @classmethod
    def from_dates(
        cls,
        dates: list[DateLike],
        calendar: Calendar = NULL_CALENDAR,
        convention: BusinessDayConvention = Convention.UNADJUSTED,
        termination_convention: Optional[BusinessDayConvention] = None,
        tenor: 'str | Period | Frequency | None' = None,
        rule: Optional[DateGenerationRule] = None,
        end_of_month: Optional[bool] = None,
        is_regular: Optional[list[bool]] = None,
    ) -> 'Schedule':
        """
        Wrap an explicit, already-computed date sequence.

        The dates are stored as given (they are both the adjusted and the
        unadjusted dates). Metadata is optional; accessors for metadata that
        was not supplied raise ConfigurationError.

        Raises
            ConfigurationError: If ``is_regular`` is given with a length other
                than ``len(dates) - 1``
        """
        days = [_day(d) for d in dates]
        flags = list(is_regular) if is_regular is not None else []
        if flags and len(flags) != len(days) - 1:
            raise ConfigurationError(
                f'is_regular has {len(flags)} entries, expected {len(days) - 1} '
                f'(one per period)'
            )

        schedule = cls.__new__(cls)
        schedule._tenor = to_period(tenor) if tenor is not None else None
        schedule._calendar = calendar if calendar is not None else NULL_CALENDAR
        schedule._convention = convention
        schedule._termination_convention = termination_convention
        schedule._rule = rule
        schedule._end_of_month = end_of_month
        schedule._first_date = None
        schedule._next_to_last_date = None
        schedule._dates = days
        schedule._unadjusted = list(days)
        schedule._is_regular = flags
        return schedule

    def _validate(self, effective: date, termination: date, end_of_month: bool) -> None:
        if effective >= termination:
            raise ConfigurationError(
                f'effective date ({effective}) later than or equal to '
                f'termination date ({termination})'
            )

        if self._tenor.length == 0:
            self._rule = Rule.ZERO
        elif self._tenor.length < 0:
            raise ConfigurationError(f'non positive tenor ({self._tenor}) not allowed')

        for label, d in (('first date', self._first_date),
                         ('next to last date', self._next_to_last_date)):
            if d is None:
                continue
            if self._rule in {Rule.BACKWARD, Rule.FORWARD}:
                if not effective < d < termination:
                    raise ConfigurationError(
                        f'{label} ({d}) out of effective-termination date range '
                        f'({effective}, {termination})'
                    )
            elif self._rule == Rule.THIRD_WEDNESDAY:
                if not is_imm_date(d, main_cycle=False):
                    raise ConfigurationError(f'{label} ({d}) is not an IMM date')
            else:
                raise ConfigurationError(
                    f'{label} incompatible with {self._rule.name} date generation rule'
                )

        if end_of_month and (self._rule in TWENTIETH_RULES
                             or self._rule == Rule.THIRD_WEDNESDAY):
            raise ConfigurationError(
                f'end of month convention incompatible with {self._rule.name} '
                f'date generation rule'
            )

    def _generate(self, effective: date, termination: date) -> None:
        rule = self._rule
        calendar = self._calendar
        convention = self._convention
        termination_convention = self._termination_convention
        end_of_month = self._end_of_month
        first = self._first_date
        next_to_last = self._next_to_last_date

        def adjusted(d: date, conv: BusinessDayConvention = convention) -> date:
            return calendar.adjust(d, conv)

        def walk(seed: date, periods: int) -> date:
            # generation steps ignore holidays; adjustment comes afterwards
            return NULL_CALENDAR.advance(seed, self._tenor * periods,
                                         convention=convention, end_of_month=end_of_month)

        dates: list[date] = []
        regular: list[bool] = []
        seed: Optional[date] = None

        if rule == Rule.ZERO:
            self._tenor = Period(0, TimeUnit.YEARS)
            dates = [effective, termination]
            regular = [True]

        elif rule == Rule.BACKWARD:
            dates.append(termination)
            seed = termination
            if next_to_last is not None:
                dates.insert(0, next_to_last)
                regular.insert(0, walk(seed, -1) == next_to_last)
                seed = next_to_last

            exit_date = first if first is not None else effective
            periods = 1
            while True:
                temp = walk(seed, -periods)
                if temp < exit_date:
                    if first is not None and adjusted(dates[0]) != adjusted(first):
                        dates.insert(0, first)
                        regular.insert(0, False)
                    break
                # skip dates that would duplicate after adjustment
                if adjusted(dates[0]) != adjusted(temp):
                    dates.insert(0, temp)
                    regular.insert(0, True)
                periods += 1

            if adjusted(dates[0]) != adjusted(effective):
                dates.insert(0, effective)
                regular.insert(0, False)

        else:
            if rule in {Rule.CDS, Rule.CDS2015}:
                dates.append(previous_twentieth(effective, rule))
            else:
                dates.append(effective)
            seed = dates[-1]

            if first is not None:
                dates.append(first)
                regular.append(walk(seed, 1) == first)
                seed = first
            elif rule in TWENTIETH_RULES:
                next20th = next_twentieth(effective, rule)
                if rule == Rule.OLD_CDS and (next20th - effective).days < OLD_CDS_STUB_DAYS:
                    next20th = next_twentieth(next20th + timedelta(days=1), rule)
                if next20th != effective:
                    dates.append(next20th)
                    regular.append(False)
                    seed = next20th

            exit_date = next_to_last if next_to_last is not None else termination
            if (rule == Rule.CDS2015
                    and next_twentieth(termination, rule) == termination
                    and termination.month % 2 == 1):
                exit_date = next_twentieth(termination + timedelta(days=1), rule)

            periods = 1
            while True:
                temp = walk(seed, periods)
                if temp > exit_date:
                    if next_to_last is not None and adjusted(dates[-1]) != adjusted(next_to_last):
                        dates.append(next_to_last)
                        regular.append(False)
                    break
                if adjusted(dates[-1]) != adjusted(temp):
                    dates.append(temp)
                    regular.append(True)
                periods += 1

            if (adjusted(dates[-1], termination_convention)
                    != adjusted(termination, termination_convention)):
                if rule in {Rule.TWENTIETH, Rule.TWENTIETH_IMM, Rule.OLD_CDS, Rule.CDS}:
                    dates.append(next_twentieth(termination, rule))
                    regular.append(True)
                elif rule == Rule.CDS2015:
                    tentative = next_twentieth(termination, rule)
                    if tentative.month % 2 == 0:
                        dates.append(tentative)
                        regular.append(True)
                else:
                    dates.append(termination)
                    regular.append(False)

        last = len(dates) - 1

        if rule == Rule.THIRD_WEDNESDAY:
            for i in range(1, last):
                dates[i] = _dates.nth_weekday(3, WEDNESDAY, dates[i].month, dates[i].year)

        unadjusted = list(dates)

        if end_of_month and seed is not None and calendar.is_end_of_month(seed):
            for i in range(1, last):
                unadjusted[i] = _dates.end_of_month(dates[i])
                if convention == Convention.UNADJUSTED:
                    dates[i] = _dates.end_of_month(dates[i])
                else:
                    dates[i] = calendar.end_of_month(dates[i])
            if termination_convention != Convention.UNADJUSTED:
                dates[0] = calendar.end_of_month(dates[0])
                dates[last] = calendar.end_of_month(dates[last])
            elif rule == Rule.BACKWARD:
                # the termination date is the last date when going backward
                dates[last] = _dates.end_of_month(dates[last])
            else:
                dates[0] = _dates.end_of_month(dates[0])
        else:
            # first date not adjusted for old CDS schedules
            if rule != Rule.OLD_CDS:
                dates[0] = adjusted(dates[0])
            for i in range(1, last):
                dates[i] = adjusted(dates[i])
            # termination date is left alone unless a convention is given
            if (termination_convention != Convention.UNADJUSTED
                    and rule not in {Rule.CDS, Rule.CDS2015}):
                dates[last] = adjusted(dates[last], termination_convention)

        def degenerate(remaining: date) -> ConfigurationError:
            return ConfigurationError(
                f'degenerate single date ({remaining}) schedule: effective date {effective}, '
                f'termination date {termination}, first date {first}, '
                f'next to last date {next_to_last}, rule {rule.name}, '
                f'end of month {end_of_month}'
            )

        # EOM snapping can push the next-to-last date onto or past the end
        if len(dates) >= 2 and dates[-2] >= dates[-1]:
            if len(regular) < 2:
                raise degenerate(dates[-1])
            regular[-2] = dates[-2] == dates[-1]
            del dates[-2], unadjusted[-2], regular[-1]

        if len(dates) >= 2 and dates[1] <= dates[0]:
            if len(regular) < 2:
                raise degenerate(dates[0])
            regular[1] = dates[1] == dates[0]
            del dates[1], unadjusted[1], regular[0]

        if len(dates) < 2:
            raise degenerate(dates[0])

        self._dates = dates
        self._unadjusted = unadjusted
        self._is_regular = regular

    # -- inspectors --------------------------------------------------------

    @property
    def dates(self) -> list[date]:
        """Adjusted schedule dates."""
        return list(self._dates)

    @property
    def unadjusted_dates(self) -> list[date]:
        """Schedule dates before business day adjustment."""
        return list(self._unadjusted)

    def __len__(self) -> int:
        return len(self._dates)

    def __iter__(self):
        return iter(self._dates)

    def __getitem__(self, idx: int) -> date:
        return self._dates[idx]

    def __repr__(self) -> str:
        return (
            f'Schedule({self._dates[0]} -> {self._dates[-1]}, '
            f'{len(self._dates)} dates, tenor={self._tenor})'
        )

    @property
    def start_date(self) -> date:
        return self._dates[0]

    @property
    def end_date(self) -> date:
        return self._dates[-1]

    @property
    def calendar(self) -> Calendar:
        return self._calendar

    @property
    def convention(self) -> BusinessDayConvention:
        return self._convention

    @property
    def tenor(self) -> Period:
        if self._tenor is None:
            raise ConfigurationError('full interface (tenor) not available')
        return self._tenor

    @property
    def termination_convention(self) -> BusinessDayConvention:
        if self._termination_convention is None:
            raise ConfigurationError(
                'full interface (termination date convention) not available'
            )
        return self._termination_convention

    @property
    def rule(self) -> DateGenerationRule:
        if self._rule is None:
            raise ConfigurationError('full interface (rule) not available')
        return self._rule

    @property
    def end_of_month(self) -> bool:
        if self._end_of_month is None:
            raise ConfigurationError('full interface (end of month) not available')
        return self._end_of_month

    @property
    def is_regular_flags(self) -> list[bool]:
        """Regularity of each period, in order."""
        if not self._is_regular:
            raise ConfigurationError('full interface (is_regular) not available')
        return list(self._is_regular)

    def is_regular(self, i: int) -> bool:
        """
        Whether the i-th period is regular.

        Args:
            i: Period number, 1 for the period ending at ``dates[1]``
        """
        flags = self.is_regular_flags
        if not 1 <= i <= len(flags):
            raise ConfigurationError(f'index ({i}) must be in [1, {len(flags)}]')
        return flags[i - 1]

    @property
    def periods(self) -> list[CouponPeriod]:
        """Accrual periods between consecutive dates."""
        return [
            CouponPeriod(
                accrual_start=self._dates[i],
                accrual_end=self._dates[i + 1],
                unadjusted_start=self._unadjusted[i],
                unadjusted_end=self._unadjusted[i + 1],
                is_regular=self._is_regular[i] if self._is_regular else None,
            )
            for i in range(len(self._dates) - 1)
        ]

    def previous_date(self, d: DateLike) -> Optional[date]:
        """Last schedule date strictly before ``d``, or None."""
        i = bisect_left(self._dates, _day(d))
        return self._dates[i - 1] if i > 0 else None

    def next_date(self, d: DateLike) -> Optional[date]:
        """First schedule date on or after ``d``, or None."""
        i = bisect_left(self._dates, _day(d))
        return self._dates[i] if i < len(self._dates) else None

    def until(self, truncation_date: DateLike) -> 'Schedule':
        """
        A copy of the schedule truncated at ``truncation_date``.

        Dates after the truncation date are dropped; if it is not already a
        schedule date it becomes an unadjusted, irregular final date.
        """
        truncation = _day(truncation_date)
        if truncation <= self._dates[0]:
            raise ConfigurationError(
                f'truncation date {truncation} must be later than schedule '
                f'first date {self._dates[0]}'
            )

        result = copy.copy(self)
        result._dates = list(self._dates)
        result._unadjusted = list(self._unadjusted)
        result._is_regular = list(self._is_regular)

        if truncation < result._dates[-1]:
            while result._dates[-1] > truncation:
                result._dates.pop()
                result._unadjusted.pop()
                if result._is_regular:
                    result._is_regular.pop()
            if truncation != result._dates[-1]:
                result._dates.append(truncation)
                result._unadjusted.append(truncation)
                if self._is_regular:
                    result._is_regular.append(False)
                result._termination_convention = Convention.UNADJUSTED
            else:
                result._termination_convention = self._convention
            if result._next_to_last_date is not None and result._next_to_last_date >= truncation:
                result._next_to_last_date = None
            if result._first_date is not None and result._first_date >= truncation:
                result._first_date = None

        return result


def make_schedule(
    effective_date: DateLike,
    termination_date: DateLike,
    tenor: 'str | Period | Frequency',
    calendar: Optional[Calendar] = None,
    convention: Optional[BusinessDayConvention] = None,
    termination_convention: Optional[BusinessDayConvention] = None,
    rule: DateGenerationRule = Rule.BACKWARD,
    end_of_month: bool = False,
    first_date: Optional[DateLike] = None,
    next_to_last_date: Optional[DateLike] = None,
) -> Schedule:
    """
    Generate a schedule with market defaults.

    Without a calendar the null calendar is used. The accrual convention
    defaults to Following when a calendar is given and Unadjusted otherwise;
    the termination convention defaults to the accrual convention.

    Args:
        effective_date: Start of the first period (date or string)
        termination_date: End of the last period (date or string)
        tenor: Coupon tenor ('6M', Period or Frequency)
        calendar: Calendar used for business day adjustment
        convention: Adjustment of the accrual dates
        termination_convention: Adjustment of the termination date
        rule: Date generation rule (default: backward)
        end_of_month: Apply the end-of-month rule
        first_date: Explicit end of an irregular first period
        next_to_last_date: Explicit start of an irregular last period

    Returns
        Schedule
    """
    if convention is None:
        convention = Convention.FOLLOWING if calendar is not None else Convention.UNADJUSTED
    return Schedule(
        effective_date=effective_date,
        termination_date=termination_date,
        tenor=tenor,
        calendar=calendar if calendar is not None else NULL_CALENDAR,
        convention=convention,
        termination_convention=termination_convention,
        rule=rule,
        end_of_month=end_of_month,
        first_date=first_date,
        next_to_last_date=next_to_last_date,
    )
