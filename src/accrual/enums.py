"""
Enumeration types for the accrual library.

These enums define the market conventions used when rolling dates,
generating coupon schedules and counting accrual periods.
"""

from enum import Enum, auto


def _normalize(s: str) -> str:
    return s.upper().replace(' ', '').replace('_', '').replace('-', '')


class BusinessDayConvention(Enum):
    """Business day adjustment conventions."""

    FOLLOWING = auto()                      # Move to next business day
    MODIFIED_FOLLOWING = auto()             # Following, unless it crosses month boundary
    PRECEDING = auto()                      # Move to previous business day
    MODIFIED_PRECEDING = auto()             # Preceding, unless it crosses month boundary
    UNADJUSTED = auto()                     # No adjustment
    HALF_MONTH_MODIFIED_FOLLOWING = auto()  # Modified following, also bounded by the 15th
    NEAREST = auto()                        # Nearest business day, following on ties

    @classmethod
    def from_string(cls, s: str) -> 'BusinessDayConvention':
        """Parse a business day convention from string."""
        mapping = {
            'FOLLOWING': cls.FOLLOWING,
            'F': cls.FOLLOWING,
            'MODIFIEDFOLLOWING': cls.MODIFIED_FOLLOWING,
            'MODFOLLOWING': cls.MODIFIED_FOLLOWING,
            'MF': cls.MODIFIED_FOLLOWING,
            'PRECEDING': cls.PRECEDING,
            'P': cls.PRECEDING,
            'MODIFIEDPRECEDING': cls.MODIFIED_PRECEDING,
            'MODPRECEDING': cls.MODIFIED_PRECEDING,
            'MP': cls.MODIFIED_PRECEDING,
            'UNADJUSTED': cls.UNADJUSTED,
            'NONE': cls.UNADJUSTED,
            'N': cls.UNADJUSTED,
            'U': cls.UNADJUSTED,
            'HALFMONTHMODIFIEDFOLLOWING': cls.HALF_MONTH_MODIFIED_FOLLOWING,
            'HMMF': cls.HALF_MONTH_MODIFIED_FOLLOWING,
            'NEAREST': cls.NEAREST,
        }
        key = _normalize(s)
        if key not in mapping:
            raise ValueError(f'Unknown business day convention: {s}')
        return mapping[key]


class TimeUnit(Enum):
    """Units a Period can be expressed in."""

    DAYS = 'D'
    WEEKS = 'W'
    MONTHS = 'M'
    YEARS = 'Y'


class Frequency(Enum):
    """Coupon frequency, expressed as events per year."""

    NO_FREQUENCY = -1
    ONCE = 0
    ANNUAL = 1
    SEMIANNUAL = 2
    EVERY_FOURTH_MONTH = 3
    QUARTERLY = 4
    BIMONTHLY = 6
    MONTHLY = 12
    EVERY_FOURTH_WEEK = 13
    BIWEEKLY = 26
    WEEKLY = 52
    DAILY = 365

    @classmethod
    def from_string(cls, s: str) -> 'Frequency':
        """Parse a frequency from string."""
        mapping = {
            'ONCE': cls.ONCE,
            'A': cls.ANNUAL,
            'ANNUAL': cls.ANNUAL,
            'S': cls.SEMIANNUAL,
            'SEMIANNUAL': cls.SEMIANNUAL,
            'Q': cls.QUARTERLY,
            'QUARTERLY': cls.QUARTERLY,
            'BIMONTHLY': cls.BIMONTHLY,
            'M': cls.MONTHLY,
            'MONTHLY': cls.MONTHLY,
            'BIWEEKLY': cls.BIWEEKLY,
            'W': cls.WEEKLY,
            'WEEKLY': cls.WEEKLY,
            'D': cls.DAILY,
            'DAILY': cls.DAILY,
        }
        key = _normalize(s)
        if key not in mapping:
            raise ValueError(f'Unknown frequency: {s}')
        return mapping[key]


class DateGenerationRule(Enum):
    """Rules for generating the dates of a schedule."""

    BACKWARD = auto()         # From termination date back to effective date
    FORWARD = auto()          # From effective date forward to termination date
    ZERO = auto()             # No intermediate dates
    THIRD_WEDNESDAY = auto()  # Interior dates on the third Wednesday of their month
    TWENTIETH = auto()        # Interior dates on the 20th of their month
    TWENTIETH_IMM = auto()    # 20th of March, June, September, December
    OLD_CDS = auto()          # Twentieth IMM with a minimum 30-day front stub
    CDS = auto()              # Standard CDS dates (pre-2015)
    CDS2015 = auto()          # Standard CDS dates with semiannual roll

    @classmethod
    def from_string(cls, s: str) -> 'DateGenerationRule':
        """Parse a date generation rule from string."""
        mapping = {
            'BACKWARD': cls.BACKWARD,
            'FORWARD': cls.FORWARD,
            'ZERO': cls.ZERO,
            'THIRDWEDNESDAY': cls.THIRD_WEDNESDAY,
            'IMM': cls.THIRD_WEDNESDAY,
            'TWENTIETH': cls.TWENTIETH,
            'TWENTIETHIMM': cls.TWENTIETH_IMM,
            'OLDCDS': cls.OLD_CDS,
            'CDS': cls.CDS,
            'CDS2015': cls.CDS2015,
        }
        key = _normalize(s)
        if key not in mapping:
            raise ValueError(f'Unknown date generation rule: {s}')
        return mapping[key]


class DayCountConvention(Enum):
    """Day count conventions for calculating year fractions.

    Values are the published names of the conventions, so alternative
    names of the same convention are enum aliases.
    """

    ACT_360 = 'Actual/360'
    ACT_365_FIXED = 'Actual/365 (Fixed)'
    ACT_365_CANADIAN = 'Actual/365 (Fixed) Canadian Bond'
    ACT_365_NO_LEAP = 'Actual/365 (No Leap)'
    ACT_366 = 'Actual/366'
    ACT_365_25 = 'Actual/365.25'

    THIRTY_360_US = '30/360 (US)'
    THIRTY_360_BOND_BASIS = '30/360 (Bond Basis)'
    THIRTY_360_ISMA = '30/360 (Bond Basis)'
    THIRTY_360_EUROBOND = '30E/360 (Eurobond Basis)'
    THIRTY_360_EUROPEAN = '30E/360 (Eurobond Basis)'
    THIRTY_360_ITALIAN = '30/360 (Italian)'
    THIRTY_360_ISDA = '30E/360 (ISDA)'
    THIRTY_360_GERMAN = '30E/360 (ISDA)'
    THIRTY_360_NASD = '30/360 (NASD)'

    BUSINESS_252 = 'Business/252'

    ACT_ACT_ISDA = 'Actual/Actual (ISDA)'
    ACT_ACT_HISTORICAL = 'Actual/Actual (ISDA)'
    ACT_ACT_ISMA = 'Actual/Actual (ISMA)'
    ACT_ACT_BOND = 'Actual/Actual (ISMA)'
    ACT_ACT_AFB = 'Actual/Actual (AFB)'
    ACT_ACT_EURO = 'Actual/Actual (AFB)'

    ONE = '1/1'
    SIMPLE = 'Simple'

    @classmethod
    def from_string(cls, s: str) -> 'DayCountConvention':
        """Parse a day count convention from string."""
        mapping = {
            'ACT/360': cls.ACT_360,
            'ACT360': cls.ACT_360,
            'A360': cls.ACT_360,
            'ACT/365F': cls.ACT_365_FIXED,
            'ACT/365': cls.ACT_365_FIXED,
            'ACT365': cls.ACT_365_FIXED,
            'ACT365F': cls.ACT_365_FIXED,
            'A365': cls.ACT_365_FIXED,
            'A365F': cls.ACT_365_FIXED,
            'ACT/365CANADIAN': cls.ACT_365_CANADIAN,
            'ACT/365NL': cls.ACT_365_NO_LEAP,
            'ACT/365NOLEAP': cls.ACT_365_NO_LEAP,
            'NL/365': cls.ACT_365_NO_LEAP,
            'ACT/366': cls.ACT_366,
            'ACT/365.25': cls.ACT_365_25,
            '30/360': cls.THIRTY_360_BOND_BASIS,
            '30360': cls.THIRTY_360_BOND_BASIS,
            '30/360US': cls.THIRTY_360_US,
            '30U/360': cls.THIRTY_360_US,
            '30/360BONDBASIS': cls.THIRTY_360_BOND_BASIS,
            '30/360ISMA': cls.THIRTY_360_ISMA,
            '30E/360': cls.THIRTY_360_EUROBOND,
            '30E/360EUROBONDBASIS': cls.THIRTY_360_EUROBOND,
            '30/360ITALIAN': cls.THIRTY_360_ITALIAN,
            '30E/360ISDA': cls.THIRTY_360_ISDA,
            '30/360GERMAN': cls.THIRTY_360_GERMAN,
            '30/360NASD': cls.THIRTY_360_NASD,
            'BUS/252': cls.BUSINESS_252,
            'BUSINESS/252': cls.BUSINESS_252,
            'ACT/ACT': cls.ACT_ACT_ISDA,
            'ACT/ACTISDA': cls.ACT_ACT_ISDA,
            'ACT/ACTHISTORICAL': cls.ACT_ACT_HISTORICAL,
            'ACT/ACTISMA': cls.ACT_ACT_ISMA,
            'ACT/ACTICMA': cls.ACT_ACT_ISMA,
            'ACT/ACTBOND': cls.ACT_ACT_BOND,
            'ACT/ACTAFB': cls.ACT_ACT_AFB,
            'ACT/ACTEURO': cls.ACT_ACT_EURO,
            '1/1': cls.ONE,
            'SIMPLE': cls.SIMPLE,
        }
        key = _normalize(s).replace('(', '').replace(')', '')
        key = key.replace('ACTUAL', 'ACT').replace('FIXED', 'F')
        if key in mapping:
            return mapping[key]
        for member in cls:
            if _normalize(member.value) == _normalize(s):
                return member
        raise ValueError(f'Unknown day count convention: {s}')


class Compounding(Enum):
    """Interest compounding rules used when discounting at a yield."""

    SIMPLE = auto()      # 1 + r t
    COMPOUNDED = auto()  # (1 + r / f) ** (f t)
    CONTINUOUS = auto()  # exp(r t)
