"""
IMM and CDS roll date helpers.

IMM dates are the third Wednesday of March, June, September and December
(any month when the main cycle is not required). CDS roll dates are the
20th of the month, restricted to the IMM months for the CDS-style schedule
rules.
"""

from datetime import date

from .dates import WEDNESDAY, add_months, nth_weekday
from .enums import DateGenerationRule

# Standard IMM months
IMM_MONTHS = (3, 6, 9, 12)

# CDS roll day of month
CDS_DAY = 20

_QUARTERLY_TWENTIETH_RULES = frozenset({
    DateGenerationRule.TWENTIETH_IMM,
    DateGenerationRule.OLD_CDS,
    DateGenerationRule.CDS,
    DateGenerationRule.CDS2015,
})


def is_imm_date(d: date, main_cycle: bool = True) -> bool:
    """
    Check if a date is an IMM date.

    Args:
        d: Date to check
        main_cycle: Only accept March, June, September and December

    Returns
        True if the date is the third Wednesday of a qualifying month
    """
    if d.weekday() != WEDNESDAY or not 15 <= d.day <= 21:
        return False
    return not main_cycle or d.month in IMM_MONTHS


def _imm_date_of(year: int, month: int) -> date:
    return nth_weekday(3, WEDNESDAY, month, year)


def next_imm_date(d: date, main_cycle: bool = True) -> date:
    """
    Find the next IMM date strictly after a given date.

    Args:
        d: Reference date
        main_cycle: Restrict to March, June, September and December

    Returns
        Next IMM date
    """
    year, month = d.year, d.month
    while True:
        if not main_cycle or month in IMM_MONTHS:
            candidate = _imm_date_of(year, month)
            if candidate > d:
                return candidate
        month += 1
        if month > 12:
            month, year = 1, year + 1


def previous_imm_date(d: date, main_cycle: bool = True) -> date:
    """
    Find the previous IMM date strictly before a given date.

    Args:
        d: Reference date
        main_cycle: Restrict to March, June, September and December

    Returns
        Previous IMM date
    """
    year, month = d.year, d.month
    while True:
        if not main_cycle or month in IMM_MONTHS:
            candidate = _imm_date_of(year, month)
            if candidate < d:
                return candidate
        month -= 1
        if month < 1:
            month, year = 12, year - 1


def is_cds_date(d: date) -> bool:
    """True for the 20th of March, June, September or December."""
    return d.day == CDS_DAY and d.month in IMM_MONTHS


def next_twentieth(d: date, rule: DateGenerationRule) -> date:
    """
    First 20th of the month on or after ``d``.

    For the quarterly rules (TwentiethIMM, OldCDS, CDS, CDS2015) the result
    is pushed forward to the next IMM month.
    """
    result = date(d.year, d.month, CDS_DAY)
    if result < d:
        result = add_months(result, 1)
    if rule in _QUARTERLY_TWENTIETH_RULES and result.month % 3 != 0:
        result = add_months(result, 3 - result.month % 3)
    return result


def previous_twentieth(d: date, rule: DateGenerationRule) -> date:
    """
    Last 20th of the month on or before ``d``.

    For the quarterly rules the result is pulled back to the previous IMM
    month.
    """
    result = date(d.year, d.month, CDS_DAY)
    if result > d:
        result = add_months(result, -1)
    if rule in _QUARTERLY_TWENTIETH_RULES and result.month % 3 != 0:
        result = add_months(result, -(result.month % 3))
    return result
