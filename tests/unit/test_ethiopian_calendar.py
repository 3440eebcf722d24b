"""
Unit Tests for the Ethiopian Calendar

Tests for:
- Known Gregorian/Ethiopian date pairs
- Round trips over 1900-2100
- Leap year and month length rules
- Formatting, Ge'ez numerals, weekday offsets
- Domain errors
"""

from datetime import date, datetime, timedelta

import pytest
from pydantic import ValidationError

from data_models import EthiopianDate
from ethiopian_calendar import (
    EthiopianDateError,
    days_in_ethiopian_month,
    ethiopian_first_weekday_offset,
    format_ethiopian_date,
    from_ethiopian,
    is_ethiopian_leap_year,
    to_ethiopian,
    to_geez_number,
)


class TestKnownDates:
    """Conversions checked against published calendar dates"""

    @pytest.mark.parametrize("gregorian,ethiopian", [
        (date(2000, 1, 1), (1992, 4, 22)),
        (date(2023, 9, 12), (2016, 1, 1)),
        (date(2023, 9, 11), (2015, 13, 6)),
        (date(2024, 9, 11), (2017, 1, 1)),
    ])
    def test_to_ethiopian(self, gregorian, ethiopian):
        """Gregorian -> Ethiopian for known dates"""
        assert to_ethiopian(gregorian).as_tuple() == ethiopian

    @pytest.mark.parametrize("gregorian,ethiopian", [
        (date(2000, 1, 1), (1992, 4, 22)),
        (date(2023, 9, 12), (2016, 1, 1)),
        (date(2023, 9, 11), (2015, 13, 6)),
    ])
    def test_from_ethiopian(self, gregorian, ethiopian):
        """Ethiopian -> Gregorian for known dates"""
        assert from_ethiopian(*ethiopian) == gregorian

    def test_datetime_time_of_day_ignored(self):
        """A datetime converts by its calendar date"""
        late = datetime(2023, 9, 12, 23, 59)
        assert to_ethiopian(late).as_tuple() == (2016, 1, 1)

    def test_new_year_follows_pagume(self):
        """The day after the last Pagume is Meskerem 1"""
        last_pagume = from_ethiopian(2015, 13, 6)
        assert to_ethiopian(last_pagume + timedelta(days=1)).as_tuple() == (2016, 1, 1)


class TestRoundTrip:
    """Gregorian -> Ethiopian -> Gregorian is the identity"""

    def test_every_day_1900_to_2100(self):
        """Round trip every calendar day in the range"""
        day = date(1900, 1, 1)
        end = date(2100, 12, 31)
        while day <= end:
            et = to_ethiopian(day)
            assert from_ethiopian(et.year, et.month, et.day) == day
            day += timedelta(days=1)

    def test_consecutive_days_are_consecutive(self):
        """Successive Gregorian days map to successive Ethiopian days"""
        day = date(2019, 1, 1)
        previous = to_ethiopian(day)
        for _ in range(3 * 366):
            day += timedelta(days=1)
            current = to_ethiopian(day)
            if previous.day < days_in_ethiopian_month(previous.year, previous.month):
                assert current.as_tuple() == (previous.year, previous.month, previous.day + 1)
            elif previous.month < 13:
                assert current.as_tuple() == (previous.year, previous.month + 1, 1)
            else:
                assert current.as_tuple() == (previous.year + 1, 1, 1)
            previous = current

    def test_early_dates(self):
        """Round trip far outside the school range"""
        for day in (date(1, 1, 1), date(100, 3, 1), date(1582, 10, 15), date(9999, 12, 31)):
            et = to_ethiopian(day)
            assert from_ethiopian(et.year, et.month, et.day) == day


class TestLeapYearRules:
    """Leap year and month length rules"""

    @pytest.mark.parametrize("year", range(1990, 2030))
    def test_leap_year_rule(self, year):
        """Leap exactly when year % 4 == 3"""
        assert is_ethiopian_leap_year(year) == (year % 4 == 3)

    @pytest.mark.parametrize("year", range(1990, 2030))
    def test_pagume_length(self, year):
        """Pagume has 6 days in leap years, else 5"""
        expected = 6 if year % 4 == 3 else 5
        assert days_in_ethiopian_month(year, 13) == expected

    @pytest.mark.parametrize("month", range(1, 13))
    def test_regular_months_have_30_days(self, month):
        """Months 1-12 always have 30 days"""
        for year in (2014, 2015, 2016, 2017):
            assert days_in_ethiopian_month(year, month) == 30

    def test_year_length(self):
        """A leap year has 366 days"""
        start = from_ethiopian(2015, 1, 1)
        end = from_ethiopian(2016, 1, 1)
        assert (end - start).days == 366


class TestFormatting:
    """Month names, Ge'ez numerals and weekday offsets"""

    def test_format_meskerem(self):
        assert format_ethiopian_date(EthiopianDate(year=2016, month=1, day=1)) == "Meskerem 1, 2016"

    def test_format_pagume(self):
        assert format_ethiopian_date(EthiopianDate(year=2018, month=13, day=5)) == "Pagume 5, 2018"

    def test_format_amharic(self):
        result = format_ethiopian_date(EthiopianDate(year=2016, month=1, day=1), amharic=True)
        assert result == "መስከረም 1, 2016"

    @pytest.mark.parametrize("num,expected", [
        (0, "0"),
        (1, "፩"),
        (9, "፱"),
        (10, "፲"),
        (21, "፳፩"),
        (30, "፴"),
        (99, "፺፱"),
        (100, "100"),
    ])
    def test_geez_numbers(self, num, expected):
        assert to_geez_number(num) == expected

    def test_first_weekday_offset(self):
        """Meskerem 1, 2016 fell on Tuesday 12 September 2023"""
        assert ethiopian_first_weekday_offset(2016, 1) == 2

    def test_first_weekday_offset_matches_gregorian(self):
        """Offset agrees with the converted date's weekday"""
        for month in range(1, 14):
            first = from_ethiopian(2017, month, 1)
            assert ethiopian_first_weekday_offset(2017, month) == (first.weekday() + 1) % 7


class TestDomainErrors:
    """Out-of-range input fails fast instead of wrapping"""

    @pytest.mark.parametrize("month", [0, 14, -1])
    def test_bad_month(self, month):
        with pytest.raises(EthiopianDateError):
            days_in_ethiopian_month(2016, month)
        with pytest.raises(EthiopianDateError):
            from_ethiopian(2016, month, 1)

    @pytest.mark.parametrize("year,month,day", [
        (2016, 1, 0),
        (2016, 1, 31),
        (2016, 1, -3),
        (2016, 13, 6),
        (2015, 13, 7),
    ])
    def test_bad_day(self, year, month, day):
        with pytest.raises(EthiopianDateError):
            from_ethiopian(year, month, day)

    def test_error_is_value_error(self):
        with pytest.raises(ValueError):
            from_ethiopian(2016, 14, 1)

    def test_model_rejects_short_pagume(self):
        """EthiopianDate refuses Pagume 6 in a common year"""
        with pytest.raises(ValidationError):
            EthiopianDate(year=2016, month=13, day=6)
        assert EthiopianDate(year=2015, month=13, day=6).day == 6
