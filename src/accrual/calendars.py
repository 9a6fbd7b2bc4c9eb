"""
Market holiday calendars.

Each market is a fixed rule table evaluated on weekdays; weekends are handled
by the Calendar itself. Moveable feasts are located relative to Easter Monday
(``em``, as a day of the year).

Calendars are looked up by market identifier through ``get_calendar``. Each
identifier is also registered with opendate, so ``Date.calendar('TARGET')``
resolves to the same business days.
"""

from datetime import date
from types import MappingProxyType

from opendate import register_calendar

from .calendar import NULL_CALENDAR, WEEKENDS_ONLY, Calendar
from .dates import FRIDAY, MONDAY, THURSDAY, TUESDAY, day_of_year
from .dates import easter_monday
from .exceptions import UnknownCalendarError


def _target_holiday(d: date) -> bool:
    day, m, y = d.day, d.month, d.year
    dd, em = day_of_year(d), easter_monday(d.year)
    return (
        (day == 1 and m == 1)
        # Good Friday and Easter Monday
        or ((dd == em - 3 or dd == em) and y >= 2000)
        # Labour Day
        or (day == 1 and m == 5 and y >= 2000)
        or (day == 25 and m == 12)
        # Day of Goodwill
        or (day == 26 and m == 12 and y >= 2000)
        or (day == 31 and m == 12 and y in {1998, 1999, 2001})
    )


def _us_common_holiday(d: date) -> bool:
    """Holidays shared by the US settlement and government bond calendars."""
    day, m, y, w = d.day, d.month, d.year, d.weekday()
    return (
        # New Year's Day (possibly moved to Monday if on Sunday)
        ((day == 1 or (day == 2 and w == MONDAY)) and m == 1)
        # Martin Luther King's birthday (third Monday in January)
        or (15 <= day <= 21 and w == MONDAY and m == 1)
        # Washington's birthday (third Monday in February)
        or (15 <= day <= 21 and w == MONDAY and m == 2)
        # Memorial Day (last Monday in May)
        or (day >= 25 and w == MONDAY and m == 5)
        # Juneteenth (moved to Monday if Sunday or Friday if Saturday)
        or ((day == 19 or (day == 20 and w == MONDAY) or (day == 18 and w == FRIDAY))
            and m == 6 and y >= 2022)
        # Independence Day (moved to Monday if Sunday or Friday if Saturday)
        or ((day == 4 or (day == 5 and w == MONDAY) or (day == 3 and w == FRIDAY))
            and m == 7)
        # Labor Day (first Monday in September)
        or (day <= 7 and w == MONDAY and m == 9)
        # Columbus Day (second Monday in October)
        or (8 <= day <= 14 and w == MONDAY and m == 10)
        # Veterans' Day (moved to Monday if Sunday or Friday if Saturday)
        or ((day == 11 or (day == 12 and w == MONDAY) or (day == 10 and w == FRIDAY))
            and m == 11)
        # Thanksgiving Day (fourth Thursday in November)
        or (22 <= day <= 28 and w == THURSDAY and m == 11)
        # Christmas (moved to Monday if Sunday or Friday if Saturday)
        or ((day == 25 or (day == 26 and w == MONDAY) or (day == 24 and w == FRIDAY))
            and m == 12)
    )


def _us_settlement_holiday(d: date) -> bool:
    # New Year's Day observed on the preceding Friday
    return _us_common_holiday(d) or (d.day == 31 and d.weekday() == FRIDAY and d.month == 12)


def _us_government_bond_holiday(d: date) -> bool:
    # Good Friday
    return _us_common_holiday(d) or day_of_year(d) == easter_monday(d.year) - 3


def _nyse_holiday(d: date) -> bool:
    day, m, y, w = d.day, d.month, d.year, d.weekday()
    dd, em = day_of_year(d), easter_monday(y)
    if (
        ((day == 1 or (day == 2 and w == MONDAY)) and m == 1)
        or (15 <= day <= 21 and w == MONDAY and m == 2)
        or dd == em - 3
        or (day >= 25 and w == MONDAY and m == 5)
        or ((day == 19 or (day == 20 and w == MONDAY) or (day == 18 and w == FRIDAY))
            and m == 6 and y >= 2022)
        or ((day == 4 or (day == 5 and w == MONDAY) or (day == 3 and w == FRIDAY))
            and m == 7)
        or (day <= 7 and w == MONDAY and m == 9)
        or (22 <= day <= 28 and w == THURSDAY and m == 11)
        or ((day == 25 or (day == 26 and w == MONDAY) or (day == 24 and w == FRIDAY))
            and m == 12)
    ):
        return True
    if y >= 1998:
        return (
            (15 <= day <= 21 and w == MONDAY and m == 1)
            # Reagan's funeral
            or (y == 2004 and m == 6 and day == 11)
            # September 11, 2001
            or (y == 2001 and m == 9 and 11 <= day <= 14)
            # President Ford's funeral
            or (y == 2007 and m == 1 and day == 2)
            # Hurricane Sandy
            or (y == 2012 and m == 10 and day in {29, 30})
        )
    if y <= 1980:
        # Presidential election days
        return y % 4 == 0 and m == 11 and day <= 7 and w == TUESDAY
    # Nixon's funeral
    return y == 1994 and m == 4 and day == 27


def _uk_bank_holiday(day: int, w: int, m: int, y: int) -> bool:
    return (
        # first Monday of May, moved for VE day anniversaries
        (day <= 7 and w == MONDAY and m == 5 and y not in {1995, 2020})
        or (day == 8 and m == 5 and y in {1995, 2020})
        # last Monday of May, moved for jubilees
        or (day >= 25 and w == MONDAY and m == 5 and y not in {2002, 2012, 2022})
        or (day in {3, 4} and m == 6 and y == 2002)
        or (day in {4, 5} and m == 6 and y == 2012)
        or (day in {2, 3} and m == 6 and y == 2022)
        # last Monday of August
        or (day >= 25 and w == MONDAY and m == 8)
        # Royal wedding
        or (day == 29 and m == 4 and y == 2011)
    )


def _uk_settlement_holiday(d: date) -> bool:
    day, m, y, w = d.day, d.month, d.year, d.weekday()
    dd, em = day_of_year(d), easter_monday(y)
    return (
        ((day == 1 or (day in {2, 3} and w == MONDAY)) and m == 1)
        or dd == em - 3
        or dd == em
        or _uk_bank_holiday(day, w, m, y)
        # Christmas and Boxing Day (possibly moved to Monday or Tuesday)
        or ((day == 25 or (day == 27 and w in {MONDAY, TUESDAY})) and m == 12)
        or ((day == 26 or (day == 28 and w in {MONDAY, TUESDAY})) and m == 12)
        # Millennium
        or (day == 31 and m == 12 and y == 1999)
    )


def _brazil_settlement_holiday(d: date) -> bool:
    day, m = d.day, d.month
    dd, em = day_of_year(d), easter_monday(d.year)
    return (
        (day, m) in {(1, 1), (21, 4), (1, 5), (7, 9), (12, 10), (2, 11), (15, 11), (25, 12)}
        # Passion of Christ
        or dd == em - 3
        # Carnival
        or dd in {em - 49, em - 48}
        # Corpus Christi
        or dd == em + 59
    )


def _brazil_exchange_holiday(d: date) -> bool:
    day, m, y, w = d.day, d.month, d.year, d.weekday()
    return (
        _brazil_settlement_holiday(d)
        # Sao Paulo City Day and Revolution Day
        or (day, m) in {(25, 1), (9, 7)}
        # Black Consciousness Day
        or (day == 20 and m == 11 and y >= 2007)
        # last business day of the year
        or (m == 12 and (day == 31 or (day >= 29 and w == FRIDAY)))
    )


def _canada_settlement_holiday(d: date) -> bool:
    day, m, y, w = d.day, d.month, d.year, d.weekday()
    dd, em = day_of_year(d), easter_monday(y)
    return (
        # New Year's Day (possibly moved to Monday)
        ((day == 1 or (day in {2, 3} and w == MONDAY)) and m == 1)
        # Family Day (third Monday in February, since 2008)
        or (15 <= day <= 21 and w == MONDAY and m == 2 and y >= 2008)
        or dd == em - 3
        or dd == em
        # Victoria Day (the Monday on or preceding 24 May)
        or (17 < day <= 24 and w == MONDAY and m == 5)
        # Canada Day (possibly moved to Monday)
        or ((day == 1 or (day in {2, 3} and w == MONDAY)) and m == 7)
        # Provincial Holiday (first Monday of August)
        or (day <= 7 and w == MONDAY and m == 8)
        # Labour Day (first Monday of September)
        or (day <= 7 and w == MONDAY and m == 9)
        # National Day for Truth and Reconciliation (since 2021)
        or (((day == 30 and m == 9) or (day <= 2 and m == 10 and w == MONDAY)) and y >= 2021)
        # Thanksgiving (second Monday of October)
        or (7 < day <= 14 and w == MONDAY and m == 10)
        # Remembrance Day (possibly moved to Monday)
        or ((day == 11 or (day in {12, 13} and w == MONDAY)) and m == 11)
        # Christmas and Boxing Day (possibly moved to Monday or Tuesday)
        or ((day == 25 or (day == 27 and w in {MONDAY, TUESDAY})) and m == 12)
        or ((day == 26 or (day == 28 and w in {MONDAY, TUESDAY})) and m == 12)
    )


TARGET = Calendar(name='TARGET', holiday_rule=_target_holiday)
US_SETTLEMENT = Calendar(name='US settlement', holiday_rule=_us_settlement_holiday)
US_GOVERNMENT_BOND = Calendar(
    name='US government bond market', holiday_rule=_us_government_bond_holiday,
)
US_NYSE = Calendar(name='New York stock exchange', holiday_rule=_nyse_holiday)
UK_SETTLEMENT = Calendar(name='UK settlement', holiday_rule=_uk_settlement_holiday)
BRAZIL_SETTLEMENT = Calendar(name='Brazil', holiday_rule=_brazil_settlement_holiday)
BRAZIL_EXCHANGE = Calendar(name='BOVESPA', holiday_rule=_brazil_exchange_holiday)
CANADA_SETTLEMENT = Calendar(name='Canada', holiday_rule=_canada_settlement_holiday)

CALENDARS = MappingProxyType({
    'NULL': NULL_CALENDAR,
    'WEEKENDS_ONLY': WEEKENDS_ONLY,
    'TARGET': TARGET,
    'US': US_SETTLEMENT,
    'US_SETTLEMENT': US_SETTLEMENT,
    'US_GOVERNMENT_BOND': US_GOVERNMENT_BOND,
    'NYSE': US_NYSE,
    'UK': UK_SETTLEMENT,
    'UK_SETTLEMENT': UK_SETTLEMENT,
    'BRAZIL': BRAZIL_SETTLEMENT,
    'BRAZIL_SETTLEMENT': BRAZIL_SETTLEMENT,
    'BOVESPA': BRAZIL_EXCHANGE,
    'BRAZIL_EXCHANGE': BRAZIL_EXCHANGE,
    'CANADA': CANADA_SETTLEMENT,
    'CANADA_SETTLEMENT': CANADA_SETTLEMENT,
})

for _market, _calendar in CALENDARS.items():
    register_calendar(_market, _calendar.business_calendar)


def get_calendar(market: str) -> Calendar:
    """
    Look up a market calendar by identifier.

    Args:
        market: Market identifier, e.g. 'TARGET', 'US_GOVERNMENT_BOND', 'BRAZIL'

    Returns
        The registered Calendar

    Raises
        UnknownCalendarError: If no calendar is registered under ``market``
    """
    key = market.strip().upper().replace(' ', '_').replace('-', '_')
    try:
        return CALENDARS[key]
    except KeyError as exc:
        raise UnknownCalendarError(
            f'Unknown calendar: {market} (known: {", ".join(sorted(CALENDARS))})'
        ) from exc
