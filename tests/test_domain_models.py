"""
Tests for domain models.
"""

from datetime import timedelta

import pendulum
import pytest

from slotgrid.domain.exceptions import InvalidDayWindowError
from slotgrid.domain.models import (
    AwayInfo,
    DayWindow,
    PositionedSlot,
    SlotKind,
    TimeInterval,
    UserRef,
)


class TestTimeInterval:
    """Tests for TimeInterval model."""

    def test_create_valid_interval(self):
        """Test creating a valid interval."""
        start = pendulum.parse("2024-11-25 09:00", tz="Europe/Berlin")
        end = pendulum.parse("2024-11-25 09:30", tz="Europe/Berlin")

        interval = TimeInterval(start=start, end=end)

        assert interval.start == start
        assert interval.end == end
        assert interval.away is False
        assert interval.away_meta is None
        assert interval.duration_minutes() == 30

    def test_invalid_interval_raises_error(self):
        """Test that an interval ending before it starts raises ValueError."""
        start = pendulum.parse("2024-11-25 17:00", tz="Europe/Berlin")
        end = pendulum.parse("2024-11-25 09:00", tz="Europe/Berlin")

        with pytest.raises(ValueError, match="Start time .* must be before end time"):
            TimeInterval(start=start, end=end)

    def test_zero_length_interval_raises_error(self):
        """Test that start == end is rejected."""
        moment = pendulum.parse("2024-11-25 09:00", tz="Europe/Berlin")

        with pytest.raises(ValueError):
            TimeInterval(start=moment, end=moment)

    def test_interval_across_repeated_hour(self):
        """Test an interval whose start and end show the same wall time."""
        start = pendulum.parse("2024-10-27T00:00:00Z").in_timezone("Europe/Berlin")
        end = pendulum.parse("2024-10-27T01:00:00Z").in_timezone("Europe/Berlin")

        interval = TimeInterval(start=start, end=end)

        assert start.format("HH:mm") == end.format("HH:mm") == "02:00"
        assert interval.duration_minutes() == 60


class TestAwayInfo:
    """Tests for AwayInfo model."""

    def test_describe_with_substitute(self):
        info = AwayInfo(
            from_user=UserRef(name="Anna"),
            to_user=UserRef(name="Max"),
            reason="Urlaub",
            emoji="🏝️",
        )

        assert info.has_substitute
        assert info.describe() == "🏝️ Anna → Max (Urlaub)"

    def test_describe_without_substitute(self):
        info = AwayInfo(from_user=UserRef(name="Anna"))

        assert not info.has_substitute
        assert info.describe() == "Anna → -"


class TestDayWindow:
    """Tests for DayWindow model."""

    def test_day_bounds(self):
        """Test day start and end in the window's timezone."""
        window = DayWindow(
            date=pendulum.date(2024, 11, 25),
            start_hour=9,
            end_hour=17,
            timezone="Europe/Berlin"
        )

        assert window.day_start() == pendulum.parse("2024-11-25 09:00", tz="Europe/Berlin")
        assert window.day_end() == pendulum.parse("2024-11-25 17:00", tz="Europe/Berlin")
        assert window.date_key() == "2024-11-25"
        assert window.visible_minutes() == 480
        assert window.row_count() == 8
        assert window.row_count(30) == 16

    def test_end_hour_24_is_next_midnight(self):
        window = DayWindow(
            date=pendulum.date(2024, 11, 25),
            start_hour=0,
            end_hour=24,
            timezone="Europe/Berlin"
        )

        assert window.day_end() == pendulum.parse("2024-11-26 00:00", tz="Europe/Berlin")
        assert window.row_count() == 24

    def test_hours_to_display(self):
        """Test the gutter hours include both the start and end hour."""
        window = DayWindow(
            date=pendulum.date(2024, 11, 25),
            start_hour=9,
            end_hour=12,
            timezone="Europe/Berlin"
        )

        hours = [hour.hour for hour in window.hours_to_display()]

        assert hours == [9, 10, 11, 12]

    def test_row_count_on_clock_change_days(self):
        """Test that days with a clock change keep one row per wall-clock hour."""
        for day in (pendulum.date(2024, 3, 31), pendulum.date(2024, 10, 27)):
            window = DayWindow(date=day, start_hour=0, end_hour=24, timezone="Europe/Berlin")

            assert window.row_count() == 24
            assert len(window.hours_to_display()) == 25

    def test_wall_offset_on_fall_back_day(self):
        window = DayWindow(
            date=pendulum.date(2024, 10, 27),
            start_hour=0,
            end_hour=24,
            timezone="Europe/Berlin"
        )
        first_two = pendulum.parse("2024-10-27T00:00:00Z")
        second_two = pendulum.parse("2024-10-27T01:00:00Z")

        assert window.wall_offset(first_two) == timedelta(hours=2)
        assert window.wall_offset(second_two) == timedelta(hours=2)
        assert window.at_wall_offset(timedelta(hours=2)).timestamp() == first_two.timestamp()
        assert window.at_wall_offset(timedelta(hours=3)) == pendulum.parse("2024-10-27T02:00:00Z")

    @pytest.mark.parametrize("start_hour,end_hour", [(17, 9), (9, 9), (-1, 9), (9, 25)])
    def test_degenerate_window_fails_fast(self, start_hour, end_hour):
        """Test that impossible hour ranges are rejected at construction."""
        with pytest.raises(InvalidDayWindowError):
            DayWindow(
                date=pendulum.date(2024, 11, 25),
                start_hour=start_hour,
                end_hour=end_hour,
                timezone="Europe/Berlin"
            )

    def test_unknown_timezone_rejected(self):
        with pytest.raises(InvalidDayWindowError, match="Unknown timezone"):
            DayWindow(
                date=pendulum.date(2024, 11, 25),
                start_hour=9,
                end_hour=17,
                timezone="Mars/Olympus_Mons"
            )

    def test_invalid_window_is_a_value_error(self):
        """Callers catching ValueError also see window errors."""
        with pytest.raises(ValueError):
            DayWindow(
                date=pendulum.date(2024, 11, 25),
                start_hour=12,
                end_hour=8,
                timezone="UTC"
            )


class TestPositionedSlot:
    """Tests for PositionedSlot serialization."""

    def test_to_dict_available(self):
        start = pendulum.parse("2024-11-25 10:00", tz="Europe/Berlin")
        interval = TimeInterval(start=start, end=start.add(minutes=30))
        slot = PositionedSlot(
            kind=SlotKind.AVAILABLE,
            anchor=start,
            offset_minutes=60,
            duration_minutes=30,
            payload=interval,
        )

        data = slot.to_dict()

        assert data["kind"] == "available"
        assert data["anchor"] == "2024-11-25T10:00:00+01:00"
        assert data["offset_minutes"] == 60
        assert data["duration_minutes"] == 30
        assert data["payload"]["away"] is False

    def test_to_dict_out_of_office(self):
        start = pendulum.parse("2024-11-25 10:00", tz="Europe/Berlin")
        info = AwayInfo(from_user=UserRef(name="Anna", id=1), to_user=UserRef(name="Max", id=2))
        slot = PositionedSlot(
            kind=SlotKind.OUT_OF_OFFICE,
            anchor=start,
            offset_minutes=0,
            duration_minutes=120,
            payload=info,
        )

        data = slot.to_dict()

        assert data["kind"] == "out_of_office"
        assert data["payload"]["from_user"]["name"] == "Anna"
        assert data["payload"]["to_user"]["id"] == 2

    def test_format_display_available(self):
        start = pendulum.parse("2024-11-25 10:00", tz="Europe/Berlin")
        slot = PositionedSlot(
            kind=SlotKind.AVAILABLE,
            anchor=start,
            offset_minutes=120,
            duration_minutes=30,
            payload=TimeInterval(start=start, end=start.add(minutes=30)),
        )

        assert slot.format_display() == "+ 120 | 10:00 Uhr | verfügbar (30 Min.)"

    def test_format_display_out_of_office(self):
        """Test that a merged absence shows who is away and who substitutes."""
        start = pendulum.parse("2024-11-25 09:00", tz="Europe/Berlin")
        info = AwayInfo(from_user=UserRef(name="Anna"), to_user=UserRef(name="Max"), reason="Urlaub")
        slot = PositionedSlot(
            kind=SlotKind.OUT_OF_OFFICE,
            anchor=start,
            offset_minutes=0,
            duration_minutes=480,
            payload=info,
        )

        assert slot.format_display() == "+   0 | 09:00 Uhr | abwesend (480 Min.) | Anna → Max (Urlaub)"
