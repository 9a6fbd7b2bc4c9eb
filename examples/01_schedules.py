#!/usr/bin/env python3
"""
Coupon Schedules
================

This example demonstrates how to generate coupon schedules, including:

1. A regular semiannual bond schedule on a market calendar
2. Front and back stub periods
3. End-of-month rolling
4. CDS (twentieth of the IMM months) schedules
"""

from datetime import date

from accrual import BusinessDayConvention, DateGenerationRule, Frequency
from accrual import get_calendar, make_schedule


def fmt(d) -> str:
    """Format date as MM/DD/YYYY."""
    return f'{d.month:02d}/{d.day:02d}/{d.year}'


def show(schedule) -> None:
    print(f"{'#':<4} {'Start':>12} {'End':>12} {'Unadj. End':>12} {'Regular':>9}")
    print('-' * 53)
    for i, period in enumerate(schedule.periods, 1):
        print(f'{i:<4} {fmt(period.accrual_start):>12} {fmt(period.accrual_end):>12} '
              f'{fmt(period.unadjusted_end):>12} {str(period.is_regular):>9}')
    print()


print('=' * 70)
print('Coupon Schedules')
print('=' * 70)
print()

# =============================================================================
# Regular Schedule
# =============================================================================

print('-' * 70)
print('Semiannual schedule on the TARGET calendar')
print('-' * 70)
print()

schedule = make_schedule(
    effective_date='2020-01-15',
    termination_date='2023-01-15',
    tenor=Frequency.SEMIANNUAL,
    calendar=get_calendar('TARGET'),
    convention=BusinessDayConvention.MODIFIED_FOLLOWING,
)
show(schedule)

# =============================================================================
# Stub Periods
# =============================================================================

print('-' * 70)
print('Front stub (backward generation) and back stub (forward generation)')
print('-' * 70)
print()

show(make_schedule(date(2020, 3, 1), date(2022, 1, 15), '6M'))
show(make_schedule(date(2020, 1, 15), date(2021, 3, 1), '6M',
                   rule=DateGenerationRule.FORWARD))

# =============================================================================
# End of Month
# =============================================================================

print('-' * 70)
print('End-of-month roll on the US government bond calendar')
print('-' * 70)
print()

show(make_schedule(
    date(2009, 9, 30), date(2012, 6, 15), '6M',
    calendar=get_calendar('US_GOVERNMENT_BOND'),
    convention=BusinessDayConvention.UNADJUSTED,
    rule=DateGenerationRule.FORWARD,
    end_of_month=True,
))

# =============================================================================
# CDS Schedule
# =============================================================================

print('-' * 70)
print('Quarterly CDS schedule')
print('-' * 70)
print()

cds = make_schedule(
    date(2020, 1, 10), date(2021, 6, 20), '3M',
    calendar=get_calendar('WEEKENDS_ONLY'),
    convention=BusinessDayConvention.FOLLOWING,
    termination_convention=BusinessDayConvention.UNADJUSTED,
    rule=DateGenerationRule.CDS,
)
show(cds)
print(f'Next coupon after 02/01/2020: {fmt(cds.next_date(date(2020, 2, 1)))}')
