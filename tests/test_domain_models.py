"""
Tests for domain models.
"""

from datetime import date, datetime

import pendulum
import pytest

from slotwindow.domain.exceptions import InvalidBookingDateError, MalformedSlotError
from slotwindow.domain.models import (
    DEFAULT_SLOT_LABELS,
    AvailabilitySnapshot,
    ReschedulePolicy,
    SlotCatalog,
    TimeSlot,
    to_booking_date,
)


class TestTimeSlot:
    """Tests for TimeSlot parsing and construction."""

    def test_parse_morning_slot(self):
        """AM hours 1-11 stay as-is."""
        slot = TimeSlot.parse("09:00 AM")

        assert slot.hour == 9
        assert slot.minute == 0
        assert slot.label == "09:00 AM"

    def test_parse_noon_and_midnight(self):
        """12 PM stays 12, 12 AM becomes 0."""
        assert TimeSlot.parse("12:00 PM").hour == 12
        assert TimeSlot.parse("12:00 AM").hour == 0
        assert TimeSlot.parse("12:30 AM").minute == 30

    def test_parse_afternoon_adds_twelve(self):
        assert TimeSlot.parse("01:00 PM").hour == 13
        assert TimeSlot.parse("05:00 PM").hour == 17
        assert TimeSlot.parse("11:45 PM").hour == 23

    def test_parse_is_lenient_about_case_and_padding(self):
        slot = TimeSlot.parse("  9:15 pm ")

        assert slot.hour == 21
        assert slot.minute == 15
        assert slot.label == "9:15 pm"

    @pytest.mark.parametrize(
        "label",
        ["", "09:00", "9 AM", "13:00 PM", "00:30 AM", "10:60 AM", "ten o'clock", "09:00 XM"],
    )
    def test_parse_rejects_malformed_labels(self, label):
        with pytest.raises(MalformedSlotError):
            TimeSlot.parse(label)

    def test_parse_rejects_non_string(self):
        with pytest.raises(MalformedSlotError):
            TimeSlot.parse(None)

    def test_malformed_slot_error_is_value_error(self):
        with pytest.raises(ValueError):
            TimeSlot.parse("later")

    def test_from_time_builds_canonical_label(self):
        assert TimeSlot.from_time(9).label == "09:00 AM"
        assert TimeSlot.from_time(12).label == "12:00 PM"
        assert TimeSlot.from_time(13, 30).label == "01:30 PM"
        assert TimeSlot.from_time(0).label == "12:00 AM"

    def test_starts_on_uses_same_calendar_day(self):
        now = pendulum.datetime(2024, 1, 15, 10, 5, 42, tz="Asia/Kolkata")

        start = TimeSlot.parse("02:00 PM").starts_on(now)

        assert start == pendulum.datetime(2024, 1, 15, 14, 0, tz="Asia/Kolkata")


class TestSlotCatalog:
    """Tests for SlotCatalog."""

    def test_default_catalog(self):
        catalog = SlotCatalog.default()

        assert len(catalog) == 9
        assert catalog.labels() == list(DEFAULT_SLOT_LABELS)
        assert catalog.labels()[0] == "09:00 AM"
        assert catalog.labels()[-1] == "05:00 PM"

    def test_hourly_matches_default(self):
        assert SlotCatalog.hourly(9, 17).labels() == SlotCatalog.default().labels()

    def test_hourly_with_half_hour_step(self):
        catalog = SlotCatalog.hourly(9, 10, step_minutes=30)

        assert catalog.labels() == ["09:00 AM", "09:30 AM", "10:00 AM"]

    def test_catalog_must_be_ascending(self):
        with pytest.raises(ValueError, match="strictly ascending"):
            SlotCatalog.from_labels(["10:00 AM", "09:00 AM"])

    def test_catalog_rejects_duplicates(self):
        with pytest.raises(ValueError):
            SlotCatalog.from_labels(["10:00 AM", "10:00 AM"])

    def test_catalog_must_not_be_empty(self):
        with pytest.raises(ValueError, match="at least one slot"):
            SlotCatalog(slots=())


class TestReschedulePolicy:
    """Tests for the display-only reschedule policy."""

    def test_remaining(self):
        policy = ReschedulePolicy()

        assert policy.remaining(0) == 3
        assert policy.remaining(2) == 1
        assert policy.remaining(3) == 0
        assert policy.remaining(5) == 0

    def test_headline(self):
        policy = ReschedulePolicy()

        assert policy.headline(0) == "You have 3 reschedules remaining"
        assert policy.headline(2) == "You have 1 reschedule remaining"
        assert policy.headline(3) == "This is your last reschedule"

    def test_notes_follow_limits(self):
        notes = ReschedulePolicy(min_lead_hours=6, max_reschedules=2).notes()

        assert "New date must be at least 6 hours from now" in notes
        assert "Maximum 2 reschedules allowed per booking" in notes


class TestAvailabilitySnapshot:

    def test_next_available_and_fully_booked(self):
        now = pendulum.datetime(2024, 1, 15, 16, 35, tz="Asia/Kolkata")

        empty = AvailabilitySnapshot(booking_date=now.date(), now=now, disabled=["05:00 PM"])
        open_day = AvailabilitySnapshot(booking_date=now.date(), now=now, available=["11:00 AM", "12:00 PM"])

        assert empty.next_available is None
        assert empty.is_fully_booked
        assert open_day.next_available == "11:00 AM"
        assert not open_day.is_fully_booked

    def test_slot_lists_are_frozen_as_tuples(self):
        now = pendulum.datetime(2024, 1, 15, 10, 5, tz="Asia/Kolkata")
        available = ["11:00 AM", "12:00 PM"]

        snapshot = AvailabilitySnapshot(booking_date=now.date(), now=now, available=available)
        available.append("01:00 PM")

        assert snapshot.available == ("11:00 AM", "12:00 PM")
        assert snapshot.disabled == ()


class TestToBookingDate:
    """Tests for booking date normalization."""

    def test_string(self):
        assert to_booking_date("2024-01-16") == pendulum.date(2024, 1, 16)

    def test_none_uses_default(self):
        today = pendulum.date(2024, 1, 15)

        assert to_booking_date(None, default=today) == today
        assert to_booking_date("", default=today) == today
        assert to_booking_date(None) is None

    def test_date_and_datetime(self):
        assert to_booking_date(date(2024, 1, 16)) == pendulum.date(2024, 1, 16)
        assert to_booking_date(datetime(2024, 1, 16, 23, 30)) == pendulum.date(2024, 1, 16)

    @pytest.mark.parametrize("value", ["16-01-2024", "2024-02-30", "tomorrow", 20240116])
    def test_invalid_values(self, value):
        with pytest.raises(InvalidBookingDateError):
            to_booking_date(value)
