"""
Core business logic for laying out calendar days.

This is the heart of the application - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional

import pendulum
from pendulum import Date

from .gap_filler import DISPLAY_INCREMENT, GapFiller
from .models import DayWindow, PositionedSlot
from .normalizer import IntervalNormalizer, TimezoneConverter, to_display_time
from .ooo_merger import OutOfOfficeMerger


def visible_days(start_date: Date, end_date: Date) -> List[Date]:
    """All calendar dates from start_date to end_date, both inclusive."""
    days: List[Date] = []
    current = start_date
    while current <= end_date:
        days.append(current)
        current = current.add(days=1)
    return days


def build_windows(
    start_date: Date,
    end_date: Date,
    start_hour: int,
    end_hour: int,
    timezone: str
) -> List[DayWindow]:
    """One day window per visible date."""
    return [
        DayWindow(date=day, start_hour=start_hour, end_hour=end_hour, timezone=timezone)
        for day in visible_days(start_date, end_date)
    ]


class SlotLayoutEngine:
    """
    Computes the positioned slot stack of a calendar day.

    Algorithm:
    1. Normalize the day's raw records into the window's timezone
    2. Infer the day's minimum slot duration
    3. If every interval is away (and merging is enabled), emit one merged
       out-of-office slot, or nothing when there is no substitute host
    4. Otherwise fill the gaps around the available intervals

    The engine only holds configuration, so one instance can serve any
    number of days and callers.
    """

    def __init__(
        self,
        display_increment: int = DISPLAY_INCREMENT,
        default_slot_duration: int = 60,
        enable_out_of_office_merging: bool = True,
        converter: TimezoneConverter = to_display_time
    ):
        if default_slot_duration <= 0:
            raise ValueError("default_slot_duration must be greater than zero")
        self.display_increment = display_increment
        self.default_slot_duration = default_slot_duration
        self.enable_out_of_office_merging = enable_out_of_office_merging
        self._converter = converter
        self._gap_filler = GapFiller(display_increment=display_increment)
        self._merger = OutOfOfficeMerger(display_increment=display_increment)

    def layout_day(
        self,
        window: DayWindow,
        records: Optional[Iterable[Any]]
    ) -> List[PositionedSlot]:
        """
        Lay out a single day.

        Args:
            window: Visible hours and display timezone of the day
            records: Raw availability records for that date (any order)

        Returns:
            Positioned slots in emission order
        """
        normalizer = IntervalNormalizer(window.timezone, converter=self._converter)
        intervals = normalizer.normalize(records)
        min_duration = normalizer.min_slot_duration(intervals, self.default_slot_duration)

        if self.enable_out_of_office_merging and self._merger.applies(intervals):
            return self._merger.merge(window, intervals, min_duration)

        return self._gap_filler.fill(window, intervals, min_duration)

    def layout_days(
        self,
        windows: Iterable[DayWindow],
        availability: Mapping[str, Optional[Iterable[Any]]]
    ) -> Dict[str, List[PositionedSlot]]:
        """
        Lay out several days from one availability map.

        Dates missing from the map are laid out as empty days.
        """
        return {
            window.date_key(): self.layout_day(window, availability.get(window.date_key()))
            for window in windows
        }

    def layout_range(
        self,
        start_date: Date,
        end_date: Date,
        availability: Mapping[str, Optional[Iterable[Any]]],
        *,
        start_hour: int,
        end_hour: int,
        timezone: str
    ) -> Dict[str, List[PositionedSlot]]:
        """Lay out every visible day between two dates."""
        windows = build_windows(start_date, end_date, start_hour, end_hour, timezone)
        return self.layout_days(windows, availability)


def parse_date(value: str, timezone: str) -> Date:
    """Parse a YYYY-MM-DD string into a calendar date in the given timezone."""
    return pendulum.from_format(value, "YYYY-MM-DD", tz=timezone).date()
