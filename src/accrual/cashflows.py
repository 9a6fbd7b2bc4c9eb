"""
Fixed-rate cash flows, pricing and yield.

Coupons accrue over the schedule periods under a day counter; stub periods
use the notional regular period next to them as reference period. Prices
are quoted per 100 of notional as of an explicit settlement date.
"""

import math
from dataclasses import dataclass
from datetime import date
from typing import Optional

import numpy as np

from .dates import DateLike, parse_date
from .daycount import DayCounter
from .enums import Compounding, Frequency
from .exceptions import NotTradableError
from .root_finding import MAX_FUNCTION_EVALUATIONS, solve
from .schedule import Schedule

# Yield search range
MIN_YIELD = -0.99
MAX_YIELD = 1.0


@dataclass(frozen=True)
class CashFlow:
    date: date
    amount: float


def reference_period(schedule: Schedule, i: int) -> tuple[date, date]:
    """
    Reference period of the i-th schedule period (0-based).

    Regular periods are their own reference. An irregular first period is
    measured against the regular period ending on its end date, an irregular
    last period against the regular period starting on its start date.
    """
    period = schedule.periods[i]
    ref_start, ref_end = period.accrual_start, period.accrual_end
    if period.is_regular is False:
        calendar = schedule.calendar
        tenor = schedule.tenor
        eom = schedule.end_of_month
        if i == 0:
            ref_start = calendar.advance(ref_end, -tenor, convention=schedule.convention,
                                         end_of_month=eom)
        elif i == len(schedule) - 2:
            ref_end = calendar.advance(ref_start, tenor, convention=schedule.convention,
                                       end_of_month=eom)
    return ref_start, ref_end


def fixed_rate_cashflows(
    schedule: Schedule,
    rate: float,
    day_counter: DayCounter,
    notional: float = 100.0,
    redemption: float = 100.0,
) -> list[CashFlow]:
    """
    Coupon and redemption flows of a fixed-rate bullet bond.

    Args:
        schedule: Coupon schedule
        rate: Annual coupon rate (e.g., 0.05 for 5%)
        day_counter: Accrual day counter
        notional: Face amount
        redemption: Redemption per 100 of face

    Returns
        Coupons on each adjusted period end, then the redemption flow
    """
    flows = []
    for i, period in enumerate(schedule.periods):
        ref_start, ref_end = reference_period(schedule, i)
        accrual = day_counter.year_fraction(period.accrual_start, period.accrual_end,
                                            ref_start, ref_end)
        flows.append(CashFlow(period.accrual_end, notional * rate * accrual))
    flows.append(CashFlow(schedule.end_date, notional * redemption / 100.0))
    return flows


def discount_factors(
    yield_rate: float,
    times: np.ndarray,
    compounding: Compounding = Compounding.COMPOUNDED,
    frequency: Frequency = Frequency.ANNUAL,
) -> np.ndarray:
    """Discount factors at a flat yield for an array of year fractions."""
    times = np.asarray(times, dtype=float)
    if compounding == Compounding.SIMPLE:
        return 1.0 / (1.0 + yield_rate * times)
    if compounding == Compounding.CONTINUOUS:
        return np.exp(-yield_rate * times)
    f = float(frequency.value)
    return (1.0 + yield_rate / f) ** (-f * times)


def present_value(
    cashflows: list[CashFlow],
    yield_rate: float,
    day_counter: DayCounter,
    settlement_date: DateLike,
    compounding: Compounding = Compounding.COMPOUNDED,
    frequency: Frequency = Frequency.ANNUAL,
) -> float:
    """
    Present value at a flat yield of the flows paid after settlement.

    Args:
        cashflows: Cash flows to discount
        yield_rate: Flat yield
        day_counter: Day counter measuring time from settlement
        settlement_date: Valuation date; flows on or before it are ignored
        compounding: Compounding rule of the yield
        frequency: Compounding frequency (COMPOUNDED only)

    Returns
        Sum of discounted amounts
    """
    settlement = parse_date(settlement_date)
    pending = [cf for cf in cashflows if cf.date > settlement]
    if not pending:
        return 0.0
    times = np.array([day_counter.year_fraction(settlement, cf.date) for cf in pending])
    amounts = np.array([cf.amount for cf in pending])
    return float(np.dot(amounts, discount_factors(yield_rate, times, compounding, frequency)))


def accrued_amount(
    schedule: Schedule,
    rate: float,
    day_counter: DayCounter,
    settlement_date: DateLike,
    notional: float = 100.0,
) -> float:
    """Coupon accrued from the start of the current period to settlement."""
    settlement = parse_date(settlement_date)
    for i, period in enumerate(schedule.periods):
        if period.accrual_start <= settlement < period.accrual_end:
            ref_start, ref_end = reference_period(schedule, i)
            return notional * rate * day_counter.year_fraction(
                period.accrual_start, settlement, ref_start, ref_end,
            )
    return 0.0


def dirty_price(
    schedule: Schedule,
    rate: float,
    day_counter: DayCounter,
    yield_rate: float,
    settlement_date: DateLike,
    compounding: Compounding = Compounding.COMPOUNDED,
    frequency: Frequency = Frequency.ANNUAL,
    redemption: float = 100.0,
) -> float:
    """Price per 100 of face including accrued coupon."""
    flows = fixed_rate_cashflows(schedule, rate, day_counter, redemption=redemption)
    return present_value(flows, yield_rate, day_counter, settlement_date,
                         compounding, frequency)


def clean_price(
    schedule: Schedule,
    rate: float,
    day_counter: DayCounter,
    yield_rate: float,
    settlement_date: DateLike,
    compounding: Compounding = Compounding.COMPOUNDED,
    frequency: Frequency = Frequency.ANNUAL,
    redemption: float = 100.0,
) -> float:
    """Price per 100 of face excluding accrued coupon."""
    dirty = dirty_price(schedule, rate, day_counter, yield_rate, settlement_date,
                        compounding, frequency, redemption)
    return dirty - accrued_amount(schedule, rate, day_counter, settlement_date)


def _yield_floor(times: list[float], compounding: Compounding) -> float:
    # 1 + y t must stay positive under simple compounding
    if compounding == Compounding.SIMPLE and times:
        return max(MIN_YIELD, MIN_YIELD / max(times))
    return MIN_YIELD


def yield_from_price(
    price: float,
    schedule: Schedule,
    rate: float,
    day_counter: DayCounter,
    settlement_date: DateLike,
    compounding: Compounding = Compounding.COMPOUNDED,
    frequency: Frequency = Frequency.ANNUAL,
    redemption: float = 100.0,
    accuracy: float = 1e-10,
    max_evaluations: int = MAX_FUNCTION_EVALUATIONS,
    guess: Optional[float] = None,
) -> float:
    """
    Flat yield that reprices a bond to a clean price.

    Args:
        price: Clean price per 100 of face
        schedule: Coupon schedule
        rate: Annual coupon rate
        day_counter: Accrual and discounting day counter
        settlement_date: Settlement date
        compounding: Compounding rule of the yield
        frequency: Compounding frequency
        redemption: Redemption per 100 of face
        accuracy: Accuracy on the yield
        max_evaluations: Solver evaluation budget
        guess: Starting yield (the coupon rate if omitted)

    Returns
        Yield

    Raises
        NotTradableError: If no yield in [MIN_YIELD, MAX_YIELD] reaches the price
    """
    settlement = parse_date(settlement_date)
    if not math.isfinite(price) or price <= 0.0:
        raise NotTradableError(f'price must be positive, got {price}')

    flows = fixed_rate_cashflows(schedule, rate, day_counter, redemption=redemption)
    target = price + accrued_amount(schedule, rate, day_counter, settlement)

    def pv(y: float) -> float:
        return present_value(flows, y, day_counter, settlement, compounding, frequency)

    times = [day_counter.year_fraction(settlement, cf.date)
             for cf in flows if cf.date > settlement]
    if not times:
        raise NotTradableError(f'no cash flows after settlement date {settlement}')
    lo = _yield_floor(times, compounding)
    hi = MAX_YIELD

    floor_price, cap_price = pv(hi), pv(lo)
    if target < floor_price or target > cap_price:
        raise NotTradableError(
            f'dirty price {target:.6f} outside attainable range '
            f'[{floor_price:.6f}, {cap_price:.6f}] for yields in [{lo}, {hi}]'
        )

    start = rate if guess is None else guess
    start = min(max(start, lo), hi)
    result = solve(lambda y: pv(y) - target, start, accuracy=accuracy,
                   x_min=lo, x_max=hi, max_evaluations=max_evaluations)
    return result.root
