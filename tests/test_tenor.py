"""
Tests for tenor parsing and manipulation.
"""

from datetime import date

import pytest

from accrual.enums import Frequency, TimeUnit
from accrual.tenor import Period, parse_tenor, tenor_to_date, tenor_to_years, to_period


class TestPeriod:
    """Tests for Period class."""

    def test_create_period(self):
        """Test creating period objects."""
        t = Period(3, 'M')
        assert t.length == 3
        assert t.unit == TimeUnit.MONTHS

    def test_period_unit_uppercase(self):
        """Test period unit is uppercased."""
        assert Period(3, 'm').unit == TimeUnit.MONTHS

    def test_period_invalid_unit(self):
        """Test invalid unit raises error."""
        with pytest.raises(ValueError):
            Period(3, 'X')

    def test_period_str(self):
        """Test string representation."""
        assert str(Period(3, 'M')) == '3M'
        assert str(-Period(6, 'M')) == '-6M'

    def test_period_scaling(self):
        """Periods scale by integers on either side."""
        assert Period(6, 'M') * 3 == Period(18, 'M')
        assert -2 * Period(1, 'Y') == Period(-2, 'Y')

    def test_period_months(self):
        """Test month lengths."""
        assert Period(30, 'D').months == 0
        assert Period(2, 'W').months == 0
        assert Period(3, 'M').months == 3
        assert Period(2, 'Y').months == 24

    def test_period_days(self):
        """Test approximate day lengths."""
        assert Period(30, 'D').days == 30
        assert Period(2, 'W').days == 14
        assert Period(3, 'M').days == 90
        assert Period(1, 'Y').days == 365

    def test_period_years(self):
        """Test approximate year lengths."""
        assert abs(Period(365, 'D').years - 1.0) < 0.01
        assert abs(Period(52, 'W').years - 1.0) < 0.01
        assert Period(6, 'M').years == 0.5
        assert Period(5, 'Y').years == 5.0

    def test_add_to_date(self):
        """Test adding periods to dates in calendar terms."""
        assert Period(7, 'D').add_to(date(2020, 1, 1)) == date(2020, 1, 8)
        assert Period(2, 'W').add_to(date(2020, 1, 1)) == date(2020, 1, 15)
        assert Period(3, 'M').add_to(date(2020, 1, 15)) == date(2020, 4, 15)
        assert Period(2, 'Y').add_to(date(2020, 1, 15)) == date(2022, 1, 15)

    def test_add_to_date_month_end(self):
        """Jan 31 + 1M = Feb 28 in a non-leap year."""
        assert Period(1, 'M').add_to(date(2019, 1, 31)) == date(2019, 2, 28)


class TestFrequencyConversion:
    """Tests for converting between periods and frequencies."""

    @pytest.mark.parametrize('frequency,expected', [
        (Frequency.ANNUAL, Period(1, 'Y')),
        (Frequency.SEMIANNUAL, Period(6, 'M')),
        (Frequency.QUARTERLY, Period(3, 'M')),
        (Frequency.MONTHLY, Period(1, 'M')),
        (Frequency.BIWEEKLY, Period(2, 'W')),
        (Frequency.WEEKLY, Period(1, 'W')),
        (Frequency.DAILY, Period(1, 'D')),
        (Frequency.ONCE, Period(0, 'Y')),
    ])
    def test_from_frequency(self, frequency, expected):
        """Each frequency maps to its period."""
        assert Period.from_frequency(frequency) == expected

    def test_frequency_of_period(self):
        """Test frequency inferred from a period."""
        assert Period(6, 'M').frequency == Frequency.SEMIANNUAL
        assert Period(1, 'Y').frequency == Frequency.ANNUAL
        assert Period(4, 'W').frequency == Frequency.EVERY_FOURTH_WEEK

    def test_frequency_of_irregular_period(self):
        """Five months is not a frequency."""
        with pytest.raises(ValueError):
            _ = Period(5, 'M').frequency

    def test_to_period(self):
        """Strings, frequencies and periods all coerce to a Period."""
        assert to_period('6M') == Period(6, 'M')
        assert to_period(Frequency.QUARTERLY) == Period(3, 'M')
        assert to_period(Period(1, 'Y')) == Period(1, 'Y')
        with pytest.raises(TypeError):
            to_period(6)


class TestParseTenor:
    """Tests for tenor parsing."""

    @pytest.mark.parametrize('text,length,unit', [
        ('7D', 7, TimeUnit.DAYS),
        ('2W', 2, TimeUnit.WEEKS),
        ('3M', 3, TimeUnit.MONTHS),
        ('5Y', 5, TimeUnit.YEARS),
        ('10Y', 10, TimeUnit.YEARS),
        ('3m', 3, TimeUnit.MONTHS),
        ('  3M  ', 3, TimeUnit.MONTHS),
        ('-6M', -6, TimeUnit.MONTHS),
    ])
    def test_parse(self, text, length, unit):
        """Test parsing numeric tenors."""
        t = parse_tenor(text)
        assert t.length == length
        assert t.unit == unit

    def test_parse_money_market_tenors(self):
        """Test parsing ON, TN and SN."""
        assert parse_tenor('ON') == Period(1, 'D')
        assert parse_tenor('TN') == Period(2, 'D')
        assert parse_tenor('SN') == Period(1, 'D')

    def test_parse_invalid(self):
        """Test parsing invalid tenor raises error."""
        with pytest.raises(ValueError):
            parse_tenor('3X')

    def test_parse_no_number(self):
        """Test parsing tenor without number raises error."""
        with pytest.raises(ValueError):
            parse_tenor('M')


class TestTenorConversion:
    """Tests for tenor conversion functions."""

    def test_tenor_to_date_string(self):
        """Test tenor_to_date with string tenor."""
        assert tenor_to_date('3M', date(2020, 1, 15)) == date(2020, 4, 15)

    def test_tenor_to_date_object(self):
        """Test tenor_to_date with a Period."""
        assert tenor_to_date(Period(3, 'M'), date(2020, 1, 15)) == date(2020, 4, 15)

    def test_tenor_to_date_rolls(self):
        """A weekend result is rolled with modified following."""
        # 2020-02-29 is a Saturday; following would leave February
        assert tenor_to_date('1M', date(2020, 1, 29)) == date(2020, 2, 28)

    def test_tenor_to_years(self):
        """Test tenor_to_years with strings and periods."""
        assert tenor_to_years('6M') == 0.5
        assert tenor_to_years(Period(6, 'M')) == 0.5
