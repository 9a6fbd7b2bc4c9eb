"""
Tests for coupon schedule generation.
"""

import pytest
from datetime import date

from accrual.calendar import NULL_CALENDAR, WEEKENDS_ONLY
from accrual.calendars import TARGET, US_GOVERNMENT_BOND
from accrual.enums import BusinessDayConvention, DateGenerationRule, Frequency
from accrual.exceptions import ConfigurationError
from accrual.schedule import CouponPeriod, Schedule, make_schedule
from accrual.tenor import Period

Convention = BusinessDayConvention
Rule = DateGenerationRule


@pytest.fixture
def semiannual():
    """Five-year semiannual schedule on the null calendar."""
    return make_schedule(date(2020, 1, 15), date(2025, 1, 15), '6M')


class TestBackwardGeneration:
    """Tests for the backward rule."""

    def test_regular_schedule(self, semiannual):
        """Whole periods only: every period is regular."""
        assert len(semiannual) == 11
        assert semiannual.start_date == date(2020, 1, 15)
        assert semiannual.end_date == date(2025, 1, 15)
        assert all(semiannual.is_regular_flags)

    def test_short_front_stub(self):
        """Rolling back from maturity leaves a stub at the start."""
        schedule = make_schedule(date(2020, 3, 1), date(2022, 1, 15), '6M')
        assert schedule.dates[:2] == [date(2020, 3, 1), date(2020, 7, 15)]
        assert not schedule.is_regular(1)
        assert schedule.is_regular(2)

    def test_next_to_last_date(self):
        """An explicit next-to-last date creates an irregular last period."""
        schedule = make_schedule(
            date(2020, 1, 15), date(2025, 3, 15), '6M',
            next_to_last_date=date(2024, 12, 15),
        )
        assert schedule.dates[-2:] == [date(2024, 12, 15), date(2025, 3, 15)]
        assert schedule.dates[1] == date(2020, 6, 15)
        flags = schedule.is_regular_flags
        assert flags[0] is False
        assert flags[-1] is False
        assert all(flags[1:-1])

    def test_next_to_last_date_one_tenor_before_end(self):
        """A next-to-last date exactly one tenor before maturity is regular."""
        schedule = make_schedule(
            date(2020, 1, 15), date(2025, 3, 15), '6M',
            next_to_last_date=date(2024, 9, 15),
        )
        assert schedule.is_regular_flags[-1] is True

    def test_first_date(self):
        """An explicit first date creates an irregular first period."""
        schedule = make_schedule(
            date(2020, 1, 1), date(2022, 1, 15), '6M',
            first_date=date(2020, 3, 1),
        )
        assert schedule.dates[:3] == [date(2020, 1, 1), date(2020, 3, 1), date(2020, 7, 15)]
        assert schedule.is_regular_flags[:2] == [False, False]

    def test_daily_schedule_skips_duplicates(self):
        """Weekend dates that adjust onto the same business day are skipped."""
        schedule = make_schedule(
            date(2012, 1, 17), date(2012, 2, 7), Frequency.DAILY,
            calendar=TARGET, convention=Convention.PRECEDING,
        )
        assert schedule.dates[:6] == [
            date(2012, 1, 17), date(2012, 1, 18), date(2012, 1, 19),
            date(2012, 1, 20), date(2012, 1, 23), date(2012, 1, 24),
        ]

    def test_end_of_month_unadjusted(self):
        """Month-end maturity keeps interior dates on month ends."""
        schedule = Schedule(
            date(1996, 8, 22), date(1997, 8, 31), '6M',
            calendar=US_GOVERNMENT_BOND,
            convention=Convention.UNADJUSTED,
            termination_convention=Convention.UNADJUSTED,
            rule=Rule.BACKWARD,
            end_of_month=True,
        )
        assert schedule.dates == [
            date(1996, 8, 22), date(1996, 8, 31), date(1997, 2, 28), date(1997, 8, 31),
        ]

    def test_end_of_month_merges_double_first_date(self):
        """A stub collapsing onto the first coupon is merged away."""
        schedule = Schedule(
            date(1996, 8, 22), date(1997, 8, 31), '6M',
            calendar=US_GOVERNMENT_BOND,
            convention=Convention.FOLLOWING,
            termination_convention=Convention.FOLLOWING,
            rule=Rule.BACKWARD,
            end_of_month=True,
        )
        assert schedule.dates == [date(1996, 8, 30), date(1997, 2, 28), date(1997, 8, 29)]
        assert schedule.is_regular_flags == [True, True]


class TestForwardGeneration:
    """Tests for the forward rule."""

    def test_back_stub(self):
        """Rolling forward from the start leaves a stub at the end."""
        schedule = make_schedule(date(2020, 1, 15), date(2021, 3, 1), '6M', rule=Rule.FORWARD)
        assert schedule.dates == [
            date(2020, 1, 15), date(2020, 7, 15), date(2021, 1, 15), date(2021, 3, 1),
        ]
        assert schedule.is_regular_flags == [True, True, False]

    def test_end_of_month(self):
        """Month-end start date keeps coupons on month ends."""
        schedule = Schedule(
            date(1996, 8, 31), date(1997, 9, 15), '6M',
            calendar=US_GOVERNMENT_BOND,
            convention=Convention.UNADJUSTED,
            termination_convention=Convention.UNADJUSTED,
            rule=Rule.FORWARD,
            end_of_month=True,
        )
        assert schedule.dates == [
            date(1996, 8, 31), date(1997, 2, 28), date(1997, 8, 31), date(1997, 9, 15),
        ]

    def test_end_of_month_past_end_date(self):
        """A date snapped past maturity is dropped."""
        schedule = Schedule(
            date(2013, 3, 28), date(2015, 3, 30), '1Y',
            calendar=TARGET,
            convention=Convention.UNADJUSTED,
            termination_convention=Convention.UNADJUSTED,
            rule=Rule.FORWARD,
            end_of_month=True,
        )
        assert schedule.dates == [date(2013, 3, 31), date(2014, 3, 31), date(2015, 3, 30)]
        assert not schedule.is_regular(2)

    def test_end_of_month_same_as_end_date(self):
        """A date snapped onto maturity is merged into a regular period."""
        schedule = Schedule(
            date(2013, 3, 28), date(2015, 3, 31), '1Y',
            calendar=TARGET,
            convention=Convention.UNADJUSTED,
            termination_convention=Convention.UNADJUSTED,
            rule=Rule.FORWARD,
            end_of_month=True,
        )
        assert schedule.dates == [date(2013, 3, 31), date(2014, 3, 31), date(2015, 3, 31)]
        assert schedule.is_regular(2)


class TestOtherRules:
    """Tests for the zero, IMM and CDS rules."""

    def test_zero_rule(self):
        """A zero tenor gives a single period."""
        schedule = make_schedule(date(2020, 1, 15), date(2025, 1, 15), Period(0, 'Y'))
        assert schedule.dates == [date(2020, 1, 15), date(2025, 1, 15)]
        assert schedule.rule == Rule.ZERO
        assert schedule.is_regular(1)

    def test_third_wednesday(self):
        """Interior dates snap to the third Wednesday."""
        schedule = make_schedule(
            date(2020, 3, 18), date(2021, 3, 17), '3M', rule=Rule.THIRD_WEDNESDAY,
        )
        assert schedule.dates == [
            date(2020, 3, 18), date(2020, 6, 17), date(2020, 9, 16),
            date(2020, 12, 16), date(2021, 3, 17),
        ]

    def test_cds_rule(self):
        """CDS schedules start on the previous roll date and end on a roll date."""
        schedule = make_schedule(
            date(2020, 1, 15), date(2025, 6, 20), '3M', rule=Rule.CDS,
        )
        assert schedule.dates[:2] == [date(2019, 12, 20), date(2020, 3, 20)]
        assert schedule.end_date == date(2025, 6, 20)
        assert all(d.day == 20 for d in schedule)
        assert len(schedule) == 23

    def test_twentieth_rule(self):
        """Monthly dates on the 20th after a short front stub."""
        schedule = Schedule(date(2020, 1, 10), date(2020, 6, 15), '1M', NULL_CALENDAR,
                            Convention.UNADJUSTED, Convention.UNADJUSTED, Rule.TWENTIETH)
        assert schedule.dates == [
            date(2020, 1, 10), date(2020, 1, 20), date(2020, 2, 20), date(2020, 3, 20),
            date(2020, 4, 20), date(2020, 5, 20), date(2020, 6, 20),
        ]
        assert schedule.is_regular_flags == [False, True, True, True, True, True]

    def test_twentieth_imm_rule(self):
        """Dates on the 20th of the IMM months, termination rolled to the next one."""
        schedule = Schedule(date(2020, 1, 10), date(2020, 11, 15), '3M', NULL_CALENDAR,
                            Convention.UNADJUSTED, Convention.UNADJUSTED, Rule.TWENTIETH_IMM)
        assert schedule.dates == [
            date(2020, 1, 10), date(2020, 3, 20), date(2020, 6, 20),
            date(2020, 9, 20), date(2020, 12, 20),
        ]
        assert schedule.is_regular_flags == [False, True, True, True]

    def test_old_cds_minimum_stub(self):
        """A front stub shorter than 30 days rolls to the following IMM 20th."""
        schedule = Schedule(date(2020, 3, 1), date(2021, 3, 20), '3M', NULL_CALENDAR,
                            Convention.UNADJUSTED, Convention.UNADJUSTED, Rule.OLD_CDS)
        assert schedule.dates == [
            date(2020, 3, 1), date(2020, 6, 20), date(2020, 9, 20),
            date(2020, 12, 20), date(2021, 3, 20),
        ]

        long_enough = Schedule(date(2020, 2, 15), date(2021, 3, 20), '3M', NULL_CALENDAR,
                               Convention.UNADJUSTED, Convention.UNADJUSTED, Rule.OLD_CDS)
        assert long_enough.dates[:2] == [date(2020, 2, 15), date(2020, 3, 20)]

    def test_old_cds_effective_date_not_adjusted(self):
        """Only the accrual dates after the first are moved to business days."""
        schedule = Schedule(date(2020, 3, 1), date(2021, 3, 20), '3M', WEEKENDS_ONLY,
                            Convention.FOLLOWING, Convention.UNADJUSTED, Rule.OLD_CDS)
        assert schedule.dates == [
            date(2020, 3, 1), date(2020, 6, 22), date(2020, 9, 21),
            date(2020, 12, 21), date(2021, 3, 20),
        ]

    def test_cds2015_odd_month_termination(self):
        """A March 20th maturity rolls out to June 20th."""
        schedule = Schedule(date(2020, 1, 10), date(2021, 3, 20), '3M', NULL_CALENDAR,
                            Convention.UNADJUSTED, Convention.UNADJUSTED, Rule.CDS2015)
        assert schedule.dates == [
            date(2019, 12, 20), date(2020, 3, 20), date(2020, 6, 20), date(2020, 9, 20),
            date(2020, 12, 20), date(2021, 3, 20), date(2021, 6, 20),
        ]

    def test_cds2015_termination_between_roll_dates(self):
        """The last date snaps to the next IMM 20th only in an even month."""
        to_june = Schedule(date(2020, 1, 10), date(2021, 5, 10), '3M', NULL_CALENDAR,
                           Convention.UNADJUSTED, Convention.UNADJUSTED, Rule.CDS2015)
        assert to_june.end_date == date(2021, 6, 20)
        assert to_june[-2] == date(2021, 3, 20)

        # September is odd, so the schedule stops at the last June 20th
        before_sept = Schedule(date(2020, 1, 10), date(2021, 8, 1), '3M', NULL_CALENDAR,
                               Convention.UNADJUSTED, Convention.UNADJUSTED, Rule.CDS2015)
        assert before_sept.end_date == date(2021, 6, 20)
        assert before_sept[-2] == date(2021, 3, 20)


class TestValidation:
    """Tests for rejected schedule inputs."""

    def test_effective_after_termination(self):
        """Termination must be after the effective date."""
        with pytest.raises(ConfigurationError, match='effective date'):
            make_schedule(date(2025, 1, 15), date(2020, 1, 15), '6M')

    def test_negative_tenor(self):
        """Negative tenors are rejected."""
        with pytest.raises(ConfigurationError, match='tenor'):
            make_schedule(date(2020, 1, 15), date(2025, 1, 15), '-6M')

    def test_first_date_out_of_range(self):
        """Stub dates must lie inside the schedule."""
        with pytest.raises(ConfigurationError, match='first date'):
            make_schedule(date(2020, 1, 15), date(2025, 1, 15), '6M',
                          first_date=date(2026, 1, 15))

    def test_stub_date_with_cds_rule(self):
        """CDS schedules do not accept explicit stub dates."""
        with pytest.raises(ConfigurationError, match='incompatible'):
            make_schedule(date(2020, 1, 15), date(2025, 6, 20), '3M', rule=Rule.CDS,
                          next_to_last_date=date(2025, 3, 20))

    def test_third_wednesday_stub_must_be_imm(self):
        """Stub dates under the third Wednesday rule are IMM dates."""
        with pytest.raises(ConfigurationError, match='IMM'):
            make_schedule(date(2020, 3, 18), date(2021, 3, 17), '3M',
                          rule=Rule.THIRD_WEDNESDAY, first_date=date(2020, 5, 1))

    def test_end_of_month_with_cds_rule(self):
        """The end-of-month rule does not combine with 20th-of-month rules."""
        with pytest.raises(ConfigurationError, match='end of month'):
            make_schedule(date(2020, 1, 15), date(2025, 6, 20), '3M', rule=Rule.CDS,
                          end_of_month=True)

    def test_collapsing_to_one_date(self):
        """A weekend effective date adjusted past an unadjusted termination."""
        with pytest.raises(ConfigurationError, match='degenerate single date'):
            Schedule(date(2020, 1, 4), date(2020, 1, 5), '1M', WEEKENDS_ONLY,
                     Convention.FOLLOWING, Convention.UNADJUSTED, Rule.FORWARD)
        with pytest.raises(ConfigurationError, match='degenerate single date'):
            Schedule(date(2020, 1, 4), date(2020, 1, 5), '1M', WEEKENDS_ONLY,
                     Convention.FOLLOWING, Convention.UNADJUSTED, Rule.BACKWARD)


class TestDefaults:
    """Tests for make_schedule defaults."""

    def test_no_calendar_is_unadjusted(self, semiannual):
        """Without a calendar nothing is adjusted."""
        assert semiannual.calendar == NULL_CALENDAR
        assert semiannual.convention == Convention.UNADJUSTED
        assert semiannual.rule == Rule.BACKWARD
        assert semiannual.end_of_month is False

    def test_calendar_defaults_to_following(self):
        """With a calendar, dates roll to the following business day."""
        schedule = make_schedule(date(2020, 1, 15), date(2021, 2, 13), '6M',
                                 calendar=WEEKENDS_ONLY)
        assert schedule.convention == Convention.FOLLOWING
        assert schedule.termination_convention == Convention.FOLLOWING
        assert schedule.end_date == date(2021, 2, 15)

    def test_unadjusted_termination_kept(self):
        """A weekend maturity is left alone under Unadjusted."""
        schedule = make_schedule(date(2020, 1, 15), date(2021, 2, 13), '6M',
                                 calendar=WEEKENDS_ONLY, convention=Convention.UNADJUSTED)
        assert schedule.end_date == date(2021, 2, 13)

    def test_end_of_month_needs_month_tenor(self):
        """The end-of-month flag only applies to month and year tenors."""
        schedule = make_schedule(date(2020, 1, 31), date(2020, 3, 31), '1W',
                                 end_of_month=True)
        assert schedule.end_of_month is False

    def test_string_dates(self):
        """Dates may be given as strings."""
        schedule = make_schedule('2020-01-15', '15/01/2021', '6M')
        assert schedule.dates == [date(2020, 1, 15), date(2020, 7, 15), date(2021, 1, 15)]


class TestInspectors:
    """Tests for schedule inspectors."""

    def test_previous_and_next_date(self, semiannual):
        """Previous is strictly before, next is on or after."""
        assert semiannual.previous_date(date(2020, 7, 15)) == date(2020, 1, 15)
        assert semiannual.next_date(date(2020, 7, 15)) == date(2020, 7, 15)
        assert semiannual.next_date(date(2020, 7, 16)) == date(2021, 1, 15)
        assert semiannual.previous_date(date(2020, 1, 15)) is None
        assert semiannual.next_date(date(2030, 1, 1)) is None

    def test_is_regular_index(self, semiannual):
        """Periods are numbered from 1."""
        assert semiannual.is_regular(1)
        with pytest.raises(ConfigurationError):
            semiannual.is_regular(0)
        with pytest.raises(ConfigurationError):
            semiannual.is_regular(len(semiannual))

    def test_periods(self):
        """Periods carry adjusted and unadjusted bounds."""
        schedule = make_schedule(date(2020, 1, 15), date(2021, 2, 13), '6M',
                                 calendar=WEEKENDS_ONLY)
        periods = schedule.periods
        assert len(periods) == len(schedule) - 1
        assert isinstance(periods[0], CouponPeriod)
        assert periods[-1].accrual_end == date(2021, 2, 15)
        assert periods[-1].unadjusted_end == date(2021, 2, 13)
        assert periods[0].is_regular is False

    def test_indexing_and_iteration(self, semiannual):
        """Schedules behave like a sequence of dates."""
        assert semiannual[0] == date(2020, 1, 15)
        assert semiannual[-1] == date(2025, 1, 15)
        assert list(semiannual) == semiannual.dates

    def test_dates_are_copies(self, semiannual):
        """Mutating the returned list does not change the schedule."""
        dates = semiannual.dates
        dates.clear()
        assert len(semiannual) == 11


class TestUntil:
    """Tests for truncating a schedule."""

    def test_truncate_between_dates(self, semiannual):
        """The truncation date becomes an irregular final date."""
        truncated = semiannual.until(date(2022, 3, 1))
        assert truncated.dates[-2:] == [date(2022, 1, 15), date(2022, 3, 1)]
        assert truncated.is_regular_flags[-1] is False
        assert truncated.termination_convention == Convention.UNADJUSTED
        assert len(semiannual) == 11

    def test_truncate_on_a_date(self, semiannual):
        """Truncating on a schedule date keeps it as the last date."""
        truncated = semiannual.until(date(2022, 1, 15))
        assert truncated.end_date == date(2022, 1, 15)
        assert all(truncated.is_regular_flags)

    def test_truncate_before_start(self, semiannual):
        """Truncating at or before the first date is rejected."""
        with pytest.raises(ConfigurationError):
            semiannual.until(date(2020, 1, 15))


class TestFromDates:
    """Tests for schedules built from explicit dates."""

    dates = [date(2015, 5, 16), date(2015, 5, 18), date(2016, 5, 18), date(2017, 12, 31)]

    def test_defaults(self):
        """Dates are stored as given with default metadata."""
        schedule = Schedule.from_dates(self.dates)
        assert schedule.dates == self.dates
        assert schedule.unadjusted_dates == self.dates
        assert schedule.calendar == NULL_CALENDAR
        assert schedule.convention == Convention.UNADJUSTED

    def test_missing_metadata(self):
        """Metadata that was not supplied is not available."""
        schedule = Schedule.from_dates(self.dates)
        with pytest.raises(ConfigurationError):
            _ = schedule.tenor
        with pytest.raises(ConfigurationError):
            _ = schedule.termination_convention
        with pytest.raises(ConfigurationError):
            schedule.is_regular(1)
        assert schedule.periods[0].is_regular is None

    def test_full_metadata(self):
        """Supplied metadata is returned unchanged."""
        schedule = Schedule.from_dates(
            self.dates,
            calendar=TARGET,
            convention=Convention.FOLLOWING,
            termination_convention=Convention.MODIFIED_PRECEDING,
            tenor='1Y',
            rule=Rule.BACKWARD,
            end_of_month=True,
            is_regular=[False, True, False],
        )
        assert schedule.calendar == TARGET
        assert schedule.convention == Convention.FOLLOWING
        assert schedule.termination_convention == Convention.MODIFIED_PRECEDING
        assert schedule.tenor == Period(1, 'Y')
        assert schedule.rule == Rule.BACKWARD
        assert schedule.end_of_month is True
        assert not schedule.is_regular(1)
        assert schedule.is_regular(2)
        assert not schedule.is_regular(3)

    def test_wrong_number_of_flags(self):
        """One regularity flag per period is required."""
        with pytest.raises(ConfigurationError, match='is_regular'):
            Schedule.from_dates(self.dates, is_regular=[True, True])
