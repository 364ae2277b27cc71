"""
Out-of-office merging for days on which the host is away the whole time.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from .gap_filler import DISPLAY_INCREMENT, GapFiller
from .models import DayWindow, PositionedSlot, SlotKind, TimeInterval

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AwayRun:
    """Result of scanning a day for away intervals."""
    first_away_index: Optional[int]
    last_away_index: Optional[int]
    all_away: bool

    @property
    def length(self) -> int:
        if self.first_away_index is None or self.last_away_index is None:
            return 0
        return self.last_away_index - self.first_away_index + 1


class OutOfOfficeMerger:
    """
    Collapses a fully-away day into a single out-of-office slot.

    Only days where every interval is away are merged. Partial-day absences
    are left to the gap filler.
    """

    def __init__(self, display_increment: int = DISPLAY_INCREMENT):
        self.display_increment = display_increment
        self._gap_filler = GapFiller(display_increment=display_increment)

    @staticmethod
    def scan(intervals: List[TimeInterval]) -> AwayRun:
        first: Optional[int] = None
        last: Optional[int] = None
        all_away = bool(intervals)

        for index, interval in enumerate(intervals):
            if interval.away:
                if first is None:
                    first = index
                last = index
            else:
                all_away = False

        return AwayRun(first_away_index=first, last_away_index=last, all_away=all_away)

    def applies(self, intervals: List[TimeInterval]) -> bool:
        """True if the day has intervals and all of them are away."""
        return self.scan(intervals).all_away

    def merge(
        self,
        window: DayWindow,
        intervals: List[TimeInterval],
        min_duration: int
    ) -> List[PositionedSlot]:
        """
        Build the merged out-of-office slot for a fully-away day.

        Returns an empty list when the first away interval names no
        substitute host: such days stay blank in the grid.
        """
        run = self.scan(intervals)
        if not run.all_away:
            raise ValueError("merge() requires a day on which every interval is away")

        first = intervals[run.first_away_index]
        meta = first.away_meta
        if meta is None or meta.to_user is None:
            logger.debug("No substitute host on %s, leaving day blank", window.date_key())
            return []

        offset = self._gap_filler.leading_offset(window, first.start, min_duration)
        return [
            PositionedSlot(
                kind=SlotKind.OUT_OF_OFFICE,
                anchor=first.start,
                offset_minutes=offset,
                duration_minutes=self.display_increment * run.length,
                payload=meta,
            )
        ]
