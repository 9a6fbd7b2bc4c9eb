"""
accrual - Calendars, coupon schedules, day counts and a 1-D solver

Building blocks for fixed income accrual: business day calendars for the
major markets, coupon schedule generation, the standard day count
conventions, and a safeguarded root finder used to solve for yields.

Basic Usage:
    >>> from accrual import make_schedule, DayCounter, get_calendar
    >>> from accrual import DayCountConvention, Frequency
    >>>
    >>> schedule = make_schedule(
    ...     effective_date='2020-01-15',
    ...     termination_date='2030-01-15',
    ...     tenor=Frequency.SEMIANNUAL,
    ...     calendar=get_calendar('TARGET'),
    ... )
    >>>
    >>> dc = DayCounter(DayCountConvention.ACT_ACT_ISMA, schedule=schedule)
    >>> dc.year_fraction(schedule[0], schedule[1])
    0.5
"""

__version__ = '1.0.0'

# Calendar
from .calendar import NULL_CALENDAR, WEEKENDS_ONLY, Calendar, add_business_days
from .calendar import adjust_date, is_business_day
from .calendars import BRAZIL_EXCHANGE, BRAZIL_SETTLEMENT, CALENDARS
from .calendars import CANADA_SETTLEMENT, TARGET, UK_SETTLEMENT, US_GOVERNMENT_BOND
from .calendars import US_NYSE, US_SETTLEMENT, get_calendar
# Cash flows
from .cashflows import CashFlow, accrued_amount, clean_price, dirty_price
from .cashflows import fixed_rate_cashflows, present_value, yield_from_price
# Date utilities
from .dates import add_days, add_months, add_years, parse_date
# Day counting
from .daycount import DayCounter, day_count, register_day_count, year_fraction
# Enumerations
from .enums import BusinessDayConvention, Compounding, DateGenerationRule
from .enums import DayCountConvention, Frequency, TimeUnit
# Exceptions
from .exceptions import AccrualError, ConfigurationError, ConvergenceError
from .exceptions import MaxEvaluationsExceededError, NotTradableError
from .exceptions import RootNotBracketedError, UnknownCalendarError
# IMM dates
from .imm import is_imm_date, next_imm_date, previous_imm_date
# Root finding
from .root_finding import RootResult, brent, solve
# Schedule
from .schedule import CouponPeriod, Schedule, make_schedule
# Tenor parsing
from .tenor import Period, parse_tenor, tenor_to_date

__all__ = [
    # Version
    '__version__',
    # Calendars
    'Calendar',
    'NULL_CALENDAR',
    'WEEKENDS_ONLY',
    'TARGET',
    'US_SETTLEMENT',
    'US_GOVERNMENT_BOND',
    'US_NYSE',
    'UK_SETTLEMENT',
    'BRAZIL_SETTLEMENT',
    'BRAZIL_EXCHANGE',
    'CANADA_SETTLEMENT',
    'CALENDARS',
    'get_calendar',
    'is_business_day',
    'adjust_date',
    'add_business_days',
    # Enums
    'BusinessDayConvention',
    'Compounding',
    'DateGenerationRule',
    'DayCountConvention',
    'Frequency',
    'TimeUnit',
    # Dates
    'parse_date',
    'add_days',
    'add_months',
    'add_years',
    # Tenor
    'Period',
    'parse_tenor',
    'tenor_to_date',
    # IMM
    'is_imm_date',
    'next_imm_date',
    'previous_imm_date',
    # Schedule
    'Schedule',
    'CouponPeriod',
    'make_schedule',
    # Day counting
    'DayCounter',
    'day_count',
    'year_fraction',
    'register_day_count',
    # Root finding
    'RootResult',
    'solve',
    'brent',
    # Cash flows
    'CashFlow',
    'fixed_rate_cashflows',
    'present_value',
    'accrued_amount',
    'dirty_price',
    'clean_price',
    'yield_from_price',
    # Exceptions
    'AccrualError',
    'ConfigurationError',
    'UnknownCalendarError',
    'ConvergenceError',
    'NotTradableError',
    'RootNotBracketedError',
    'MaxEvaluationsExceededError',
]
