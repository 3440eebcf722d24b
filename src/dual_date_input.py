#!/usr/bin/env python3
"""
DUAL DATE INPUT - Keeps a Gregorian date and its Ethiopian fields in sync
One canonical Gregorian date, with the Ethiopian triple always derived from it

EDIT STREAMS:
✅ Gregorian edit: store the date, recompute the Ethiopian triple
✅ Ethiopian edit: merge the changed field(s), clamp the day to the month,
   convert to Gregorian, then recompute the triple from that date
✅ Every edit emits the canonical Gregorian date to the on_change callback

Dependencies: ethiopian_calendar.py for conversions
"""

from datetime import date, datetime
from typing import Callable, Optional

from data_models import EthiopianDate
from ethiopian_calendar import (
    days_in_ethiopian_month,
    from_ethiopian,
    to_ethiopian,
)


class DualDateInput:
    """Synchronized Gregorian/Ethiopian date value"""

    def __init__(
        self,
        value: Optional[date] = None,
        on_change: Optional[Callable[[date], None]] = None,
    ):
        """
        Initialize the input

        Args:
            value: Starting Gregorian date, defaults to today
            on_change: Called with the canonical Gregorian date after every edit
        """
        if isinstance(value, datetime):
            value = value.date()
        self._gregorian = value or date.today()
        self._ethiopian = to_ethiopian(self._gregorian)
        self._on_change = on_change

    @property
    def gregorian(self) -> date:
        return self._gregorian

    @property
    def ethiopian(self) -> EthiopianDate:
        return self._ethiopian

    @property
    def days_in_current_month(self) -> int:
        """Day limit for the Ethiopian month being edited"""
        return days_in_ethiopian_month(self._ethiopian.year, self._ethiopian.month)

    def set_gregorian(self, value: date) -> date:
        """Apply a Gregorian edit and emit the result"""
        if isinstance(value, datetime):
            value = value.date()
        self._gregorian = value
        self._ethiopian = to_ethiopian(value)
        self._emit()
        return self._gregorian

    def set_gregorian_iso(self, iso_value: str) -> date:
        """Apply a Gregorian edit given as 'YYYY-MM-DD'"""
        return self.set_gregorian(date.fromisoformat(iso_value))

    def set_ethiopian(
        self,
        year: Optional[int] = None,
        month: Optional[int] = None,
        day: Optional[int] = None,
    ) -> date:
        """
        Apply an Ethiopian edit to any subset of year, month and day

        The day is clamped into the new month (e.g. Meskerem 30 -> Pagume 5).
        An out-of-range month raises EthiopianDateError.

        Returns:
            The new canonical Gregorian date
        """
        new_year = self._ethiopian.year if year is None else year
        new_month = self._ethiopian.month if month is None else month
        new_day = self._ethiopian.day if day is None else day

        safe_day = max(1, min(new_day, days_in_ethiopian_month(new_year, new_month)))

        self._gregorian = from_ethiopian(new_year, new_month, safe_day)
        # Re-derive so the triple can never drift from the stored date
        self._ethiopian = to_ethiopian(self._gregorian)
        self._emit()
        return self._gregorian

    def _emit(self):
        if self._on_change is not None:
            self._on_change(self._gregorian)
