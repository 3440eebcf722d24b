#!/usr/bin/env python3
"""
ETHIOPIAN CALENDAR - Gregorian <-> Ethiopian (Ge'ez) date conversion
Pure conversion and formatting helpers for dual-calendar school dates

CALENDAR RULES:
✅ 13 months: Meskerem..Nehase have 30 days, Pagume has 5 (6 in leap years)
✅ Leap year: Ethiopian year % 4 == 3
✅ Epoch: Amete Mihret, conversions run through the Julian Day Number

DOMAIN POLICY:
Out-of-range months and days raise EthiopianDateError. Nothing wraps
around; callers that want clamping clamp before calling (see
dual_date_input.DualDateInput).

Dependencies: data_models.py for EthiopianDate
"""

from datetime import date, datetime
from typing import Union

from data_models import EthiopianDate

# Meskerem 1, year 1 (Amete Mihret) is JDN 1724221; offset is that less 365
JD_EPOCH_OFFSET_AMETE_MIHRET = 1723856

# date.toordinal() + this == Julian Day Number
JD_ORDINAL_OFFSET = 1721425

DAYS_IN_FOUR_YEAR_CYCLE = 1461

MONTH_NAMES = [
    "Meskerem", "Tikimt", "Hidar", "Tahsas", "Tir", "Yekatit", "Megabit",
    "Miazia", "Genbot", "Sene", "Hamle", "Nehase", "Pagume",
]

AMHARIC_MONTH_NAMES = [
    "መስከረም", "ጥቅምት", "ህዳር", "ታህሣሥ", "ጥር", "የካቲት", "መጋቢት",
    "ሚያዝያ", "ግንቦት", "ሰኔ", "ሐምሌ", "ነሐሴ", "ጳጉሜን",
]

GEEZ_NUMERALS = {
    1: "፩", 2: "፪", 3: "፫", 4: "፬", 5: "፭", 6: "፮", 7: "፯", 8: "፰", 9: "፱",
    10: "፲", 20: "፳", 30: "፴", 40: "፵", 50: "፶", 60: "፷", 70: "፸", 80: "፹", 90: "፺",
}


class EthiopianDateError(ValueError):
    """Month or day outside the Ethiopian calendar"""


def is_ethiopian_leap_year(year: int) -> bool:
    """Ethiopian leap years are those with year % 4 == 3"""
    return year % 4 == 3


def days_in_ethiopian_month(year: int, month: int) -> int:
    """
    Number of days in an Ethiopian month

    Args:
        year: Ethiopian year
        month: Ethiopian month, 1-13

    Returns:
        30 for months 1-12; 6 or 5 for Pagume depending on the leap rule

    Raises:
        EthiopianDateError: month outside 1-13
    """
    if 1 <= month <= 12:
        return 30
    if month == 13:
        return 6 if is_ethiopian_leap_year(year) else 5
    raise EthiopianDateError(f"Ethiopian month must be 1-13, got: {month}")


def _ethiopian_to_jdn(year: int, month: int, day: int) -> int:
    return (
        JD_EPOCH_OFFSET_AMETE_MIHRET
        + 365
        + 365 * (year - 1)
        + year // 4
        + 30 * month
        + day
        - 31
    )


def _jdn_to_ethiopian(jdn: int) -> EthiopianDate:
    offset = jdn - JD_EPOCH_OFFSET_AMETE_MIHRET
    r = offset % DAYS_IN_FOUR_YEAR_CYCLE
    n = (r % 365) + 365 * (r // 1460)

    year = 4 * (offset // DAYS_IN_FOUR_YEAR_CYCLE) + r // 365 - r // 1460
    month = n // 30 + 1
    day = n % 30 + 1
    return EthiopianDate(year=year, month=month, day=day)


def to_ethiopian(gregorian_date: Union[date, datetime]) -> EthiopianDate:
    """
    Convert a Gregorian calendar date to its Ethiopian equivalent

    Only the calendar date matters; the time of day of a datetime is ignored.
    """
    if isinstance(gregorian_date, datetime):
        gregorian_date = gregorian_date.date()
    return _jdn_to_ethiopian(gregorian_date.toordinal() + JD_ORDINAL_OFFSET)


def from_ethiopian(year: int, month: int, day: int) -> date:
    """
    Convert an Ethiopian year/month/day to a Gregorian date

    Raises:
        EthiopianDateError: month outside 1-13 or day outside the month
    """
    max_day = days_in_ethiopian_month(year, month)
    if day < 1 or day > max_day:
        raise EthiopianDateError(
            f"Day {day} outside Ethiopian month {month}/{year} (1-{max_day})"
        )

    jdn = _ethiopian_to_jdn(year, month, day)
    return date.fromordinal(jdn - JD_ORDINAL_OFFSET)


def format_ethiopian_date(ethiopian_date: EthiopianDate, amharic: bool = False) -> str:
    """Render as '<MonthName> <day>, <year>', e.g. 'Meskerem 1, 2016'"""
    names = AMHARIC_MONTH_NAMES if amharic else MONTH_NAMES
    return f"{names[ethiopian_date.month - 1]} {ethiopian_date.day}, {ethiopian_date.year}"


def ethiopian_first_weekday_offset(year: int, month: int) -> int:
    """Weekday of the first day of an Ethiopian month (0=Sunday .. 6=Saturday)"""
    first_day = from_ethiopian(year, month, 1)
    return (first_day.weekday() + 1) % 7


def to_geez_number(num: int) -> str:
    """Render 1-99 in Ge'ez numerals; anything else falls back to decimal"""
    if num == 0:
        return "0"
    if 1 <= num <= 9:
        return GEEZ_NUMERALS[num]
    if 10 <= num <= 99:
        tens = (num // 10) * 10
        ones = num % 10
        return GEEZ_NUMERALS[tens] + GEEZ_NUMERALS.get(ones, "")
    return str(num)

