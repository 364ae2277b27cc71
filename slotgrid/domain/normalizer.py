"""
Normalization of raw availability records into display-timezone intervals.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

import pendulum
from pendulum import DateTime

from .models import AwayInfo, TimeInterval, UserRef

logger = logging.getLogger(__name__)

TimezoneConverter = Callable[[Any, str], DateTime]


def to_display_time(value: Any, timezone: str) -> DateTime:
    """
    Convert an absolute instant into the given display timezone.

    Accepts pendulum/stdlib datetimes and ISO-8601 strings. Naive values
    are interpreted as UTC.
    """
    if isinstance(value, DateTime):
        return value.in_timezone(timezone)
    if isinstance(value, datetime):
        return pendulum.instance(value).in_timezone(timezone)
    if isinstance(value, str):
        parsed = pendulum.parse(value)
        if not isinstance(parsed, DateTime):
            raise ValueError(f"Not a timestamp: {value!r}")
        return parsed.in_timezone(timezone)
    raise TypeError(f"Unsupported timestamp type: {type(value).__name__}")


def _parse_user(value: Any) -> Optional[UserRef]:
    if value is None:
        return None
    if isinstance(value, UserRef):
        return value
    if isinstance(value, str):
        return UserRef(name=value)
    if isinstance(value, Mapping):
        name = value.get("name") or value.get("displayName") or value.get("username")
        if not name:
            raise ValueError(f"User reference without a name: {value!r}")
        return UserRef(name=name, username=value.get("username"), id=value.get("id"))
    raise TypeError(f"Unsupported user reference: {value!r}")


def _parse_away_meta(record: Mapping[str, Any]) -> Optional[AwayInfo]:
    meta = record.get("away_meta", record.get("awayMeta"))
    if isinstance(meta, AwayInfo):
        return meta
    if meta is None:
        # cal.com style records carry the OOO fields at the top level
        if "fromUser" not in record and "from_user" not in record:
            return None
        meta = record

    from_user = _parse_user(meta.get("from_user", meta.get("fromUser")))
    if from_user is None:
        return None
    return AwayInfo(
        from_user=from_user,
        to_user=_parse_user(meta.get("to_user", meta.get("toUser"))),
        reason=meta.get("reason"),
        emoji=meta.get("emoji"),
    )


class IntervalNormalizer:
    """
    Converts raw availability records into sorted ``TimeInterval`` objects.

    Records that cannot be parsed, or whose start is not before their end,
    are dropped with a warning so the rest of the day can still be laid out.
    """

    def __init__(self, timezone: str, converter: TimezoneConverter = to_display_time):
        self.timezone = timezone
        self._convert = converter

    def normalize(self, records: Optional[Iterable[Any]]) -> List[TimeInterval]:
        """Convert, validate and sort one day's raw records."""
        intervals: List[TimeInterval] = []

        for record in records or []:
            interval = self._to_interval(record)
            if interval is not None:
                intervals.append(interval)

        # Keyed on the instant so repeated wall times keep their real order.
        # sorted() is stable, so overlapping intervals keep their arrival order
        return sorted(intervals, key=lambda interval: interval.start.timestamp())

    def normalize_map(
        self,
        availability: Mapping[str, Optional[Iterable[Any]]]
    ) -> Dict[str, List[TimeInterval]]:
        """Normalize every date of an availability map."""
        return {
            date_key: self.normalize(records)
            for date_key, records in availability.items()
        }

    def _to_interval(self, record: Any) -> Optional[TimeInterval]:
        if isinstance(record, TimeInterval):
            start = self._convert(record.start, self.timezone)
            end = self._convert(record.end, self.timezone)
            away, away_meta = record.away, record.away_meta
        else:
            try:
                start = self._convert(record["start"], self.timezone)
                end = self._convert(record["end"], self.timezone)
                away = bool(record.get("away", False))
                away_meta = _parse_away_meta(record)
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                logger.warning("Skipping unparseable availability record %r: %s", record, exc)
                return None

        if start.timestamp() >= end.timestamp():
            logger.warning("Skipping availability record with start %s not before end %s", start, end)
            return None

        return TimeInterval(start=start, end=end, away=away, away_meta=away_meta)

    @staticmethod
    def min_slot_duration(intervals: List[TimeInterval], default: int) -> int:
        """
        Smallest interval length of the day in minutes.

        Away intervals count too. A day with a single interval uses that
        interval's length; an empty day falls back to ``default``.
        Sub-minute intervals count as one minute.
        """
        if not intervals:
            return default
        return max(1, min(interval.duration_minutes() for interval in intervals))
