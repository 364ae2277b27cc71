"""
Domain models for availability intervals and positioned calendar slots.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Dict, List, Optional, Union

import pendulum
from pendulum import Date, DateTime

from .exceptions import InvalidDayWindowError


@dataclass(frozen=True)
class UserRef:
    """A user mentioned by an out-of-office marker."""
    name: str
    username: Optional[str] = None
    id: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "username": self.username, "id": self.id}


@dataclass(frozen=True)
class AwayInfo:
    """
    Out-of-office metadata: who is away, who substitutes, why.

    A missing ``to_user`` means there is no substitute host.
    """
    from_user: UserRef
    to_user: Optional[UserRef] = None
    reason: Optional[str] = None
    emoji: Optional[str] = None

    @property
    def has_substitute(self) -> bool:
        return self.to_user is not None

    def describe(self) -> str:
        """
        Format the absence for display.
        Format: EMOJI FROM → TO (REASON)
        """
        substitute = self.to_user.name if self.to_user else "-"
        text = f"{self.emoji or ''} {self.from_user.name} → {substitute}".strip()
        if self.reason:
            text += f" ({self.reason})"
        return text

    def to_dict(self) -> Dict[str, Any]:
        return {
            "from_user": self.from_user.to_dict(),
            "to_user": self.to_user.to_dict() if self.to_user else None,
            "reason": self.reason,
            "emoji": self.emoji,
        }


@dataclass(frozen=True)
class TimeInterval:
    """
    An immutable availability interval.

    Invariant: start must be before end, compared as absolute instants.
    """
    start: DateTime
    end: DateTime
    away: bool = False
    away_meta: Optional[AwayInfo] = None

    def __post_init__(self):
        # Same-zone datetimes compare by wall clock and ignore fold
        if self.start.timestamp() >= self.end.timestamp():
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end.timestamp() - self.start.timestamp()) / 60)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "away": self.away,
            "away_meta": self.away_meta.to_dict() if self.away_meta else None,
        }


class SlotKind(str, Enum):
    """What a positioned slot represents in the grid."""
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    OUT_OF_OFFICE = "out_of_office"


KIND_LABELS = {
    SlotKind.AVAILABLE: "verfügbar",
    SlotKind.UNAVAILABLE: "nicht verfügbar",
    SlotKind.OUT_OF_OFFICE: "abwesend",
}


@dataclass(frozen=True)
class PositionedSlot:
    """
    One visual cell of a day column.

    ``offset_minutes`` is the vertical coordinate measured from the day's
    start hour; ``duration_minutes`` is the true calendar length and only
    drives the rendered height.
    """
    kind: SlotKind
    anchor: DateTime
    offset_minutes: int
    duration_minutes: int
    payload: Union[TimeInterval, AwayInfo]

    def format_display(self) -> str:
        """
        Format the slot for display.
        Format: +OFFSET | HH:MM Uhr | Art (N Min.) [Abwesenheit]
        """
        line = (
            f"+{self.offset_minutes:>4} | {self.anchor.format('HH:mm')} Uhr | "
            f"{KIND_LABELS[self.kind]} ({self.duration_minutes} Min.)"
        )
        if isinstance(self.payload, AwayInfo):
            line += f" | {self.payload.describe()}"
        return line

    def to_dict(self) -> Dict[str, Any]:
        """Serialize into a JSON-safe mapping for an external renderer."""
        return {
            "kind": self.kind.value,
            "anchor": self.anchor.isoformat(),
            "offset_minutes": self.offset_minutes,
            "duration_minutes": self.duration_minutes,
            "payload": self.payload.to_dict(),
        }


@dataclass(frozen=True)
class DayWindow:
    """
    The visible hour range and timezone a single day is laid out against.

    Invariant: 0 <= start_hour < end_hour <= 24 and timezone is a known
    IANA name.

    The grid is measured in wall-clock time: every day has
    ``end_hour - start_hour`` hours of rows, including days on which the
    clocks change.
    """
    date: Date
    start_hour: int
    end_hour: int
    timezone: str

    def __post_init__(self):
        if not (0 <= self.start_hour <= 24 and 0 <= self.end_hour <= 24):
            raise InvalidDayWindowError(
                f"Hours must be between 0 and 24, got {self.start_hour}-{self.end_hour}"
            )
        if self.start_hour >= self.end_hour:
            raise InvalidDayWindowError(
                f"start_hour {self.start_hour} must be before end_hour {self.end_hour}"
            )
        try:
            pendulum.timezone(self.timezone)
        except (KeyError, ValueError) as exc:
            raise InvalidDayWindowError(f"Unknown timezone: {self.timezone!r}") from exc

    def _midnight_wall(self) -> datetime:
        return datetime(self.date.year, self.date.month, self.date.day)

    def wall_offset(self, instant: DateTime) -> timedelta:
        """Wall-clock distance of an instant from local midnight of this date."""
        local = instant.in_timezone(self.timezone)
        wall = datetime(
            local.year, local.month, local.day,
            local.hour, local.minute, local.second, local.microsecond
        )
        return wall - self._midnight_wall()

    def at_wall_offset(self, offset: timedelta) -> DateTime:
        """
        The instant shown at a wall-clock offset from local midnight.

        Repeated times resolve to their first occurrence; skipped times are
        shifted by pendulum onto a real instant.
        """
        wall = self._midnight_wall() + offset
        return pendulum.datetime(
            wall.year, wall.month, wall.day,
            wall.hour, wall.minute, wall.second, wall.microsecond,
            tz=self.timezone,
            fold=0,
        )

    def day_start(self) -> DateTime:
        """The visual origin of the day (start_hour:00 local time)."""
        return self.at_wall_offset(timedelta(hours=self.start_hour))

    def day_end(self) -> DateTime:
        """The exclusive end of the visible day (end_hour:00 local time)."""
        return self.at_wall_offset(timedelta(hours=self.end_hour))

    def date_key(self) -> str:
        return self.date.to_date_string()

    def visible_minutes(self) -> int:
        return (self.end_hour - self.start_hour) * 60

    def row_count(self, display_increment: int = 60) -> int:
        """Number of fixed-height rows the visible hours split into."""
        return self.visible_minutes() // display_increment

    def hours_to_display(self) -> List[DateTime]:
        """Hour marks for the grid gutter, start_hour through end_hour inclusive."""
        return [
            self.at_wall_offset(timedelta(hours=hour))
            for hour in range(self.start_hour, self.end_hour + 1)
        ]
