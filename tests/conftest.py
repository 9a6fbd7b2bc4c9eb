"""
Shared test fixtures for accrual tests.
"""

import os
import sys
from datetime import date

import pytest
import pathlib

# Add src to path for imports
sys.path.insert(0, os.path.join(pathlib.Path(__file__).parent, '..', 'src'))


@pytest.fixture
def bond_basis_dates():
    """ISDA 2006 30/360 Bond Basis examples with their expected day counts."""
    pairs = [
        # Example 1: end dates do not involve the last day of February
        (date(2006, 8, 20), date(2007, 2, 20), 180),
        (date(2007, 2, 20), date(2007, 8, 20), 180),
        (date(2007, 8, 20), date(2008, 2, 20), 180),
        (date(2008, 2, 20), date(2008, 8, 20), 180),
        (date(2008, 8, 20), date(2009, 2, 20), 180),
        (date(2009, 2, 20), date(2009, 8, 20), 180),
        # Example 2: end dates include some end-February dates
        (date(2006, 8, 31), date(2007, 2, 28), 178),
        (date(2007, 2, 28), date(2007, 8, 31), 183),
        (date(2007, 8, 31), date(2008, 2, 29), 179),
        (date(2008, 2, 29), date(2008, 8, 31), 182),
        (date(2008, 8, 31), date(2009, 2, 28), 178),
        (date(2009, 2, 28), date(2009, 8, 31), 183),
        # Example 3: miscellaneous calculations
        (date(2006, 1, 31), date(2006, 2, 28), 28),
        (date(2006, 1, 30), date(2006, 2, 28), 28),
        (date(2006, 2, 28), date(2006, 3, 3), 5),
        (date(2006, 2, 14), date(2006, 2, 28), 14),
        (date(2006, 9, 30), date(2006, 10, 31), 30),
        (date(2006, 10, 31), date(2006, 11, 28), 28),
        (date(2007, 8, 31), date(2008, 2, 28), 178),
        (date(2008, 2, 28), date(2008, 8, 28), 180),
        (date(2008, 2, 28), date(2008, 8, 30), 182),
        (date(2008, 2, 28), date(2008, 8, 31), 183),
        (date(2007, 2, 26), date(2008, 2, 28), 362),
        (date(2007, 2, 26), date(2008, 2, 29), 363),
        (date(2008, 2, 29), date(2009, 2, 28), 359),
        (date(2008, 2, 28), date(2008, 3, 30), 32),
        (date(2008, 2, 28), date(2008, 3, 31), 33),
    ]
    return pairs


@pytest.fixture
def eurobond_dates():
    """ISDA 2006 30E/360 Eurobond examples with their expected day counts."""
    return [
        (date(2006, 8, 20), date(2007, 2, 20), 180),
        (date(2007, 2, 20), date(2007, 8, 20), 180),
        (date(2007, 8, 20), date(2008, 2, 20), 180),
        (date(2008, 2, 20), date(2008, 8, 20), 180),
        (date(2008, 8, 20), date(2009, 2, 20), 180),
        (date(2009, 2, 20), date(2009, 8, 20), 180),
        (date(2006, 2, 28), date(2006, 8, 31), 182),
        (date(2006, 8, 31), date(2007, 2, 28), 178),
        (date(2007, 2, 28), date(2007, 8, 31), 182),
        (date(2007, 8, 31), date(2008, 2, 29), 179),
        (date(2008, 2, 29), date(2008, 8, 31), 181),
        (date(2008, 8, 31), date(2009, 2, 28), 178),
        (date(2009, 2, 28), date(2009, 8, 31), 182),
        (date(2009, 8, 31), date(2010, 2, 28), 178),
        (date(2010, 2, 28), date(2010, 8, 31), 182),
        (date(2010, 8, 31), date(2011, 2, 28), 178),
        (date(2011, 2, 28), date(2011, 8, 31), 182),
        (date(2011, 8, 31), date(2012, 2, 29), 179),
        (date(2006, 1, 31), date(2006, 2, 28), 28),
        (date(2006, 1, 30), date(2006, 2, 28), 28),
        (date(2006, 2, 28), date(2006, 3, 3), 5),
        (date(2006, 2, 14), date(2006, 2, 28), 14),
        (date(2006, 9, 30), date(2006, 10, 31), 30),
        (date(2006, 10, 31), date(2006, 11, 28), 28),
        (date(2007, 8, 31), date(2008, 2, 28), 178),
        (date(2008, 2, 28), date(2008, 8, 28), 180),
        (date(2008, 2, 28), date(2008, 8, 30), 182),
        (date(2008, 2, 28), date(2008, 8, 31), 182),
        (date(2007, 2, 26), date(2008, 2, 28), 362),
        (date(2007, 2, 26), date(2008, 2, 29), 363),
        (date(2008, 2, 29), date(2009, 2, 28), 359),
        (date(2008, 2, 28), date(2008, 3, 30), 32),
        (date(2008, 2, 28), date(2008, 3, 31), 32),
    ]


@pytest.fixture
def brazil_business_dates():
    """Consecutive date pairs and Business/252 (Brazil) year fractions."""
    dates = [
        date(2002, 2, 1), date(2002, 2, 4), date(2003, 5, 16), date(2003, 12, 17),
        date(2004, 12, 17), date(2005, 12, 19), date(2006, 1, 2), date(2006, 3, 13),
        date(2006, 5, 15), date(2006, 3, 17), date(2006, 5, 15), date(2006, 7, 26),
        date(2007, 6, 28), date(2009, 9, 16), date(2016, 7, 26),
    ]
    expected = [
        0.0039682539683, 1.2738095238095, 0.6031746031746, 0.9960317460317,
        1.0000000000000, 0.0396825396825, 0.1904761904762, 0.1666666666667,
        -0.1507936507937, 0.1507936507937, 0.2023809523810, 0.912698412698,
        2.214285714286, 6.84126984127,
    ]
    return list(zip(dates[:-1], dates[1:], expected))


@pytest.fixture
def settlement_date():
    """Sample bond settlement date."""
    return date(2020, 1, 15)


@pytest.fixture
def ten_year_semiannual(settlement_date):
    """10Y semiannual unadjusted schedule starting on the settlement date."""
    from accrual import Frequency, make_schedule

    return make_schedule(
        effective_date=settlement_date,
        termination_date=date(2030, 1, 15),
        tenor=Frequency.SEMIANNUAL,
    )
