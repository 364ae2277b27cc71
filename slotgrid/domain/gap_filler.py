"""
Gap filling: turns a day's available intervals into a contiguous slot stack.

Pure domain logic, no I/O.
"""

from datetime import timedelta
from typing import List

from pendulum import DateTime

from .models import DayWindow, PositionedSlot, SlotKind, TimeInterval

DISPLAY_INCREMENT = 60  # minutes per visual row


class GapFiller:
    """
    Inserts synthetic unavailable slots into every gap of a day.

    Algorithm:
    1. Start at the window's start hour with offset 0
    2. Before each available interval, step through the gap in
       ``min_duration`` increments emitting unavailable slots
    3. Emit the available interval at its own start and jump to its end
    4. Fill the remainder of the day with unavailable slots

    Every emitted slot advances the offset by one display row, whatever its
    calendar length. The cursor walks the window's wall clock, so a day on
    which the clocks change still gets one row per visible step.
    """

    def __init__(self, display_increment: int = DISPLAY_INCREMENT):
        if display_increment <= 0:
            raise ValueError("display_increment must be greater than zero")
        self.display_increment = display_increment

    def fill(
        self,
        window: DayWindow,
        available: List[TimeInterval],
        min_duration: int
    ) -> List[PositionedSlot]:
        """
        Lay out one day.

        Args:
            window: Visible hours of the day
            available: Normalized intervals, ascending by start
            min_duration: Step size in minutes for synthetic unavailable slots

        Returns:
            Slots in emission order
        """
        self._check_duration(min_duration)

        slots: List[PositionedSlot] = []
        cursor = timedelta(hours=window.start_hour)
        offset = 0

        for interval in available:
            cursor, offset = self._fill_gap(
                slots, window, cursor, offset, window.wall_offset(interval.start), min_duration
            )

            # Intervals starting above the window are not clamped.
            # Away intervals keep their row but are not bookable.
            slots.append(
                PositionedSlot(
                    kind=SlotKind.UNAVAILABLE if interval.away else SlotKind.AVAILABLE,
                    anchor=interval.start,
                    offset_minutes=offset,
                    duration_minutes=interval.duration_minutes(),
                    payload=interval,
                )
            )
            cursor = window.wall_offset(interval.end)
            offset += self.display_increment

        self._fill_gap(slots, window, cursor, offset, timedelta(hours=window.end_hour), min_duration)
        return slots

    def leading_offset(self, window: DayWindow, first_start: DateTime, min_duration: int) -> int:
        """Offset ``fill`` would assign to a first interval starting at ``first_start``."""
        self._check_duration(min_duration)

        step = timedelta(minutes=min_duration)
        cursor = timedelta(hours=window.start_hour)
        target = window.wall_offset(first_start)
        offset = 0
        while cursor < target:
            cursor += step
            offset += self.display_increment
        return offset

    def _fill_gap(
        self,
        slots: List[PositionedSlot],
        window: DayWindow,
        cursor: timedelta,
        offset: int,
        target: timedelta,
        min_duration: int
    ):
        step = timedelta(minutes=min_duration)
        while cursor < target:
            anchor = window.at_wall_offset(cursor)
            slots.append(
                PositionedSlot(
                    kind=SlotKind.UNAVAILABLE,
                    anchor=anchor,
                    offset_minutes=offset,
                    duration_minutes=min_duration,
                    payload=TimeInterval(start=anchor, end=anchor.add(minutes=min_duration)),
                )
            )
            cursor += step
            offset += self.display_increment
        return cursor, offset

    @staticmethod
    def _check_duration(min_duration: int) -> None:
        if min_duration <= 0:
            raise ValueError(f"min_duration must be greater than zero, got {min_duration}")
