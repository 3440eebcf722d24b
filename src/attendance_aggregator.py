#!/usr/bin/env python3
"""
ATTENDANCE AGGREGATOR - Count present days inside a trailing window
Turns monthly attendance grids into dated records and counts active days

COUNTING RULES:
✅ Window is [as_of - window_days, as_of], both ends inclusive
✅ Only records marked present count; missing days never count
✅ Duplicate records for one date collapse, presence wins
✅ Input order does not matter

Dependencies: data_models.py for AttendanceRecord and MonthlyAttendanceGrid
"""

import calendar
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple, Union

from data_models import AttendanceRecord, MonthlyAttendanceGrid

# day of month -> present, for one subject and one month
AttendanceDayMap = Dict[int, bool]

RecordLike = Union[AttendanceRecord, Tuple[date, bool]]


def _as_date(value: Union[date, datetime]) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def count_active_days(
    records: Iterable[RecordLike],
    window_days: int,
    as_of: Optional[Union[date, datetime]] = None,
) -> int:
    """
    Count distinct present days inside a trailing window

    Args:
        records: AttendanceRecord objects or (date, present) pairs
        window_days: Length of the trailing window in days
        as_of: End of the window, defaults to today

    Returns:
        Number of distinct dates d with as_of - window_days <= d <= as_of
        that have at least one present record
    """
    end = _as_date(as_of) if as_of is not None else date.today()
    start = end - timedelta(days=window_days)

    present_dates = set()
    for record in records:
        if isinstance(record, AttendanceRecord):
            record_date, present = record.record_date, record.present
        else:
            record_date, present = record
        record_date = _as_date(record_date)

        if present and start <= record_date <= end:
            present_dates.add(record_date)

    return len(present_dates)


def parse_month_key(month_key: str) -> Tuple[int, int]:
    """Split 'YYYY-MM' into (year, month)"""
    year_part, month_part = month_key.split("-")
    year, month = int(year_part), int(month_part)
    if not 1 <= month <= 12:
        raise ValueError(f"Month key must be in format 'YYYY-MM', got: {month_key}")
    return year, month


def day_map_from_present_days(present_days: Iterable[int]) -> AttendanceDayMap:
    """Every listed day becomes a present entry"""
    return {int(day): True for day in present_days}


def records_from_day_map(month_key: str, day_map: AttendanceDayMap) -> List[AttendanceRecord]:
    """
    Expand a day map for one month into dated records

    Raises:
        ValueError: a day that does not exist in that month
    """
    year, month = parse_month_key(month_key)
    last_day = calendar.monthrange(year, month)[1]

    records = []
    for day, present in sorted(day_map.items()):
        if not 1 <= day <= last_day:
            raise ValueError(f"{month_key} has no day {day}")
        records.append(AttendanceRecord(record_date=date(year, month, day), present=present))
    return records


def records_from_grids(grids: Iterable[MonthlyAttendanceGrid]) -> List[AttendanceRecord]:
    """Flatten monthly grids (any course, any month) into dated records"""
    records = []
    for grid in grids:
        day_map = day_map_from_present_days(grid.present_days)
        records.extend(records_from_day_map(grid.month_key, day_map))
    return records


def merge_present_days(existing: Iterable[int], new: Iterable[int]) -> List[int]:
    """Union of present days when a grid is saved again"""
    return sorted(set(existing) | set(new))
