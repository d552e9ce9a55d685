"""
Slot availability rules for same-day and future bookings.

Pure domain logic: every result is a function of the slot catalog, the
reference instant and the requested booking date. The caller owns the clock.
"""

import logging
from datetime import datetime
from typing import List, Optional, Union

import pendulum
from pendulum import DateTime

from .exceptions import InvalidBookingDateError, MalformedSlotError
from .models import AvailabilitySnapshot, SlotCatalog, SlotValidation, TimeSlot, to_booking_date

logger = logging.getLogger(__name__)

DEFAULT_LEAD_TIME_MINUTES = 30
DEFAULT_TIMEZONE = "Asia/Kolkata"

MISSING_SLOT_MESSAGE = "Please select a time slot"
MISSING_DATE_MESSAGE = "Please select a date"
UNAVAILABLE_SLOT_MESSAGE = "This time slot is not available. Please select another time."
VALID_SLOT_MESSAGE = "Slot selection is valid"

SlotLike = Union[str, TimeSlot]


class SlotAvailabilityEngine:
    """
    Classifies catalog slots as selectable or disabled for a booking date.

    Rules:
    1. Malformed slot labels and unreadable dates count as disabled
    2. A booking date other than today leaves every slot selectable
    3. For today (or no date), a slot is disabled when it starts less than
       ``lead_time_minutes`` after ``now``, past slots included
    """

    def __init__(
        self,
        catalog: Optional[SlotCatalog] = None,
        lead_time_minutes: int = DEFAULT_LEAD_TIME_MINUTES,
        timezone: str = DEFAULT_TIMEZONE,
    ):
        if lead_time_minutes < 0:
            raise ValueError("lead_time_minutes must not be negative")

        self.catalog = catalog or SlotCatalog.default()
        self.lead_time_minutes = lead_time_minutes
        self.timezone = timezone

    def is_slot_disabled(self, slot: SlotLike, now: datetime, selected_date=None) -> bool:
        """
        Check whether a slot can no longer be booked.

        Args:
            slot: Slot label (e.g. "09:00 AM") or TimeSlot
            now: Reference instant; naive values use the engine timezone
            selected_date: YYYY-MM-DD string, date, or None for today

        Returns:
            True if the slot must not be offered
        """
        current = self._normalize_now(now)

        try:
            time_slot = self._resolve_slot(slot)
            booking_date = to_booking_date(selected_date, default=current.date())
        except (MalformedSlotError, InvalidBookingDateError) as exc:
            logger.warning("Treating slot %r as disabled: %s", slot, exc)
            return True

        if booking_date != current.date():
            return False

        return self.minutes_until(time_slot, current) < self.lead_time_minutes

    def minutes_until(self, slot: SlotLike, now: datetime) -> float:
        """
        Minutes from ``now`` until the slot starts on the same calendar day.

        Negative for slots that already started.

        Raises:
            MalformedSlotError: If the slot label cannot be parsed
        """
        current = self._normalize_now(now)
        time_slot = self._resolve_slot(slot)
        slot_start = time_slot.starts_on(current)

        return (slot_start.timestamp() - current.timestamp()) / 60

    def get_available_slots(self, selected_date, now: datetime) -> List[str]:
        """Return selectable slot labels in catalog order."""
        current = self._normalize_now(now)

        if self._is_other_day(selected_date, current):
            return self.catalog.labels()

        return [
            slot.label for slot in self.catalog
            if not self.is_slot_disabled(slot, current, selected_date)
        ]

    def get_disabled_slots(self, selected_date, now: datetime) -> List[str]:
        """Return disabled slot labels in catalog order."""
        current = self._normalize_now(now)

        if self._is_other_day(selected_date, current):
            return []

        return [
            slot.label for slot in self.catalog
            if self.is_slot_disabled(slot, current, selected_date)
        ]

    def get_next_available_slot(self, selected_date, now: datetime) -> Optional[str]:
        """Return the earliest selectable slot, or None when the day is full."""
        available = self.get_available_slots(selected_date, now)
        return available[0] if available else None

    def validate_slot_selection(self, slot: Optional[SlotLike], selected_date, now: datetime) -> SlotValidation:
        """
        Presence checks plus the disabled-slot rule, as a user-facing result.
        """
        if not slot:
            return SlotValidation(is_valid=False, message=MISSING_SLOT_MESSAGE)

        if not selected_date:
            return SlotValidation(is_valid=False, message=MISSING_DATE_MESSAGE)

        if self.is_slot_disabled(slot, now, selected_date):
            return SlotValidation(is_valid=False, message=UNAVAILABLE_SLOT_MESSAGE)

        return SlotValidation(is_valid=True, message=VALID_SLOT_MESSAGE)

    def snapshot(self, selected_date, now: datetime) -> AvailabilitySnapshot:
        """
        Evaluate the whole catalog once for a booking date.

        An unreadable date yields a snapshot of today with every slot disabled.
        """
        current = self._normalize_now(now)

        try:
            booking_date = to_booking_date(selected_date, default=current.date())
        except InvalidBookingDateError:
            booking_date = current.date()

        return AvailabilitySnapshot(
            booking_date=booking_date,
            now=current,
            available=tuple(self.get_available_slots(selected_date, current)),
            disabled=tuple(self.get_disabled_slots(selected_date, current)),
        )

    def _is_other_day(self, selected_date, current: DateTime) -> bool:
        try:
            booking_date = to_booking_date(selected_date, default=current.date())
        except InvalidBookingDateError:
            return False
        return booking_date != current.date()

    def _normalize_now(self, now: datetime) -> DateTime:
        """Express ``now`` in the business timezone; naive values are taken as local."""
        if not isinstance(now, datetime):
            raise TypeError(f"now must be a datetime, got {type(now).__name__}")
        return pendulum.instance(now, tz=self.timezone).in_timezone(self.timezone)

    @staticmethod
    def _resolve_slot(slot: SlotLike) -> TimeSlot:
        if isinstance(slot, TimeSlot):
            return slot
        return TimeSlot.parse(slot)


_default_engine = SlotAvailabilityEngine()


def is_slot_disabled(slot: SlotLike, now: datetime, selected_date=None) -> bool:
    return _default_engine.is_slot_disabled(slot, now, selected_date)


def get_available_slots(selected_date, now: datetime) -> List[str]:
    return _default_engine.get_available_slots(selected_date, now)


def get_disabled_slots(selected_date, now: datetime) -> List[str]:
    return _default_engine.get_disabled_slots(selected_date, now)


def get_next_available_slot(selected_date, now: datetime) -> Optional[str]:
    return _default_engine.get_next_available_slot(selected_date, now)


def validate_slot_selection(slot: Optional[SlotLike], selected_date, now: datetime) -> SlotValidation:
    return _default_engine.validate_slot_selection(slot, selected_date, now)
