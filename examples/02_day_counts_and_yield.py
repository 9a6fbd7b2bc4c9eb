#!/usr/bin/env python3
"""
Day Counts and Bond Yields
==========================

This example demonstrates:
1. Year fractions under the common day count conventions
2. Actual/Actual (ISMA) with reference periods taken from a schedule
3. Clean/dirty prices and accrued interest of a fixed-rate bond
4. Solving the yield back from a clean price
"""

from datetime import date

from accrual import Compounding, DayCountConvention, DayCounter, Frequency
from accrual import NotTradableError, clean_price, dirty_price, make_schedule
from accrual import accrued_amount, solve, yield_from_price


print('=' * 70)
print('Day Counts and Bond Yields')
print('=' * 70)
print()

# =============================================================================
# Year Fractions
# =============================================================================

print('-' * 70)
print('Year fraction from 08/31/2006 to 02/28/2007')
print('-' * 70)
print()

start, end = date(2006, 8, 31), date(2007, 2, 28)
conventions = [
    DayCountConvention.ACT_360,
    DayCountConvention.ACT_365_FIXED,
    DayCountConvention.ACT_ACT_ISDA,
    DayCountConvention.ACT_ACT_AFB,
    DayCountConvention.THIRTY_360_BOND_BASIS,
    DayCountConvention.THIRTY_360_EUROBOND,
    DayCountConvention.THIRTY_360_ISDA,
    DayCountConvention.BUSINESS_252,
]

print(f"{'Convention':<34} {'Days':>6} {'Year Frac':>12}")
print('-' * 54)
for convention in conventions:
    dc = DayCounter(convention)
    print(f'{dc.name:<34} {dc.day_count(start, end):>6} {dc.year_fraction(start, end):>12.8f}')
print()

# =============================================================================
# Actual/Actual (ISMA) with a Schedule
# =============================================================================

print('-' * 70)
print('Actual/Actual (ISMA) with a long first coupon')
print('-' * 70)
print()

schedule = make_schedule(
    date(2017, 1, 17), date(2026, 2, 28), Frequency.SEMIANNUAL,
    first_date=date(2017, 8, 31), end_of_month=True,
)
isma = DayCounter(DayCountConvention.ACT_ACT_ISMA, schedule=schedule)
print(f'First coupon fraction:  {isma.year_fraction(schedule[0], schedule[1]):.10f}')
print(f'Second coupon fraction: {isma.year_fraction(schedule[1], schedule[2]):.10f}')
print()

# =============================================================================
# Bond Pricing
# =============================================================================

print('-' * 70)
print('10Y 5% semiannual bond, 30/360')
print('-' * 70)
print()

bond = make_schedule(date(2020, 1, 15), date(2030, 1, 15), Frequency.SEMIANNUAL)
dc = DayCounter(DayCountConvention.THIRTY_360_BOND_BASIS)
coupon = 0.05
settlement = date(2020, 4, 15)

print(f"{'Yield':>8} {'Clean':>12} {'Dirty':>12} {'Accrued':>10}")
print('-' * 46)
for y in (0.03, 0.04, 0.05, 0.06, 0.07):
    clean = clean_price(bond, coupon, dc, y, settlement, Compounding.COMPOUNDED,
                        Frequency.SEMIANNUAL)
    dirty = dirty_price(bond, coupon, dc, y, settlement, Compounding.COMPOUNDED,
                        Frequency.SEMIANNUAL)
    accrued = accrued_amount(bond, coupon, dc, settlement)
    print(f'{y:>8.2%} {clean:>12.6f} {dirty:>12.6f} {accrued:>10.6f}')
print()

# =============================================================================
# Yield from Price
# =============================================================================

print('-' * 70)
print('Yield from clean price')
print('-' * 70)
print()

for price in (90.0, 100.0, 110.0):
    y = yield_from_price(price, bond, coupon, dc, settlement, Compounding.COMPOUNDED,
                         Frequency.SEMIANNUAL)
    print(f'Clean {price:>7.2f} -> yield {y:.8%}')

try:
    yield_from_price(1.0, bond, coupon, dc, settlement)
except NotTradableError as exc:
    print(f'Clean    1.00 -> {exc}')
print()

# =============================================================================
# Generic Solver
# =============================================================================

print('-' * 70)
print('Generic solver')
print('-' * 70)
print()

result = solve(lambda x: x ** 3 - 2.0, guess=1.0)
print(f'Cube root of 2: {result.root:.12f} '
      f'({result.method}, {result.evaluations} evaluations)')
