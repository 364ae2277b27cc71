"""
Domain layer - Pure layout logic without external dependencies.
"""

from .exceptions import AvailabilityDataError, InvalidDayWindowError, SlotGridError
from .gap_filler import DISPLAY_INCREMENT, GapFiller
from .layout_engine import SlotLayoutEngine, build_windows, parse_date, visible_days
from .models import AwayInfo, DayWindow, PositionedSlot, SlotKind, TimeInterval, UserRef
from .normalizer import IntervalNormalizer, to_display_time
from .ooo_merger import AwayRun, OutOfOfficeMerger

__all__ = [
    "AvailabilityDataError",
    "AwayInfo",
    "AwayRun",
    "DISPLAY_INCREMENT",
    "DayWindow",
    "GapFiller",
    "IntervalNormalizer",
    "InvalidDayWindowError",
    "OutOfOfficeMerger",
    "PositionedSlot",
    "SlotGridError",
    "SlotKind",
    "SlotLayoutEngine",
    "TimeInterval",
    "UserRef",
    "build_windows",
    "parse_date",
    "to_display_time",
    "visible_days",
]
