"""
Domain models for booking slots and booking-window policies.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterator, List, Optional, Sequence, Tuple

import pendulum
from pendulum import Date, DateTime

from .exceptions import InvalidBookingDateError, MalformedSlotError

SLOT_LABEL_PATTERN = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*(AM|PM)\s*$", re.IGNORECASE)

DEFAULT_SLOT_LABELS = (
    "09:00 AM",
    "10:00 AM",
    "11:00 AM",
    "12:00 PM",
    "01:00 PM",
    "02:00 PM",
    "03:00 PM",
    "04:00 PM",
    "05:00 PM",
)


@dataclass(frozen=True)
class TimeSlot:
    """
    A fixed point in the business day at which a booking may begin.

    Invariant: hour is 0-23 and minute is 0-59 (24-hour clock).
    """
    hour: int
    minute: int
    label: str

    def __post_init__(self):
        if not 0 <= self.hour <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {self.hour}")
        if not 0 <= self.minute <= 59:
            raise ValueError(f"Minute must be between 0 and 59, got {self.minute}")

    @classmethod
    def parse(cls, label: str) -> "TimeSlot":
        """
        Parse a 12-hour label such as ``"09:00 AM"``.

        12 AM maps to hour 0, 12 PM stays 12, other PM hours add 12.

        Raises:
            MalformedSlotError: If the label is not ``HH:MM AM|PM``
        """
        if not isinstance(label, str):
            raise MalformedSlotError(f"Slot label must be a string, got {label!r}")

        match = SLOT_LABEL_PATTERN.match(label)
        if not match:
            raise MalformedSlotError(f"Unrecognized slot label: {label!r}")

        hour_12 = int(match.group(1))
        minute = int(match.group(2))
        period = match.group(3).upper()

        if not 1 <= hour_12 <= 12 or minute > 59:
            raise MalformedSlotError(f"Slot label out of range: {label!r}")

        hour = hour_12 % 12
        if period == "PM":
            hour += 12

        return cls(hour=hour, minute=minute, label=label.strip())

    @classmethod
    def from_time(cls, hour: int, minute: int = 0) -> "TimeSlot":
        """Build a slot from a 24-hour time, generating the canonical label."""
        if not 0 <= hour <= 23:
            raise ValueError(f"Hour must be between 0 and 23, got {hour}")
        period = "PM" if hour >= 12 else "AM"
        hour_12 = hour % 12 or 12
        return cls(hour=hour, minute=minute, label=f"{hour_12:02d}:{minute:02d} {period}")

    def minutes_of_day(self) -> int:
        return self.hour * 60 + self.minute

    def starts_on(self, day: DateTime) -> DateTime:
        """Return the slot's start instant on the calendar day of ``day``."""
        return day.set(hour=self.hour, minute=self.minute, second=0, microsecond=0)

    def __str__(self) -> str:
        return self.label


@dataclass(frozen=True)
class SlotCatalog:
    """
    The fixed, ordered list of bookable slots.

    Invariant: non-empty, strictly ascending by start time.
    """
    slots: Tuple[TimeSlot, ...]

    def __post_init__(self):
        if not self.slots:
            raise ValueError("Slot catalog must contain at least one slot")
        for previous, current in zip(self.slots, self.slots[1:]):
            if current.minutes_of_day() <= previous.minutes_of_day():
                raise ValueError(
                    f"Slot catalog must be strictly ascending: "
                    f"{current.label} does not follow {previous.label}"
                )

    @classmethod
    def from_labels(cls, labels: Sequence[str]) -> "SlotCatalog":
        return cls(slots=tuple(TimeSlot.parse(label) for label in labels))

    @classmethod
    def hourly(cls, start_hour: int, end_hour: int, step_minutes: int = 60) -> "SlotCatalog":
        """
        Generate slots from start_hour up to and including end_hour.

        Example: hourly(9, 17) -> 09:00 AM ... 05:00 PM (9 slots)
        """
        if step_minutes <= 0:
            raise ValueError("step_minutes must be greater than zero")

        slots: List[TimeSlot] = []
        current = start_hour * 60
        last = end_hour * 60

        while current <= last:
            slots.append(TimeSlot.from_time(current // 60, current % 60))
            current += step_minutes

        return cls(slots=tuple(slots))

    @classmethod
    def default(cls) -> "SlotCatalog":
        return cls.from_labels(DEFAULT_SLOT_LABELS)

    def labels(self) -> List[str]:
        return [slot.label for slot in self.slots]

    def __iter__(self) -> Iterator[TimeSlot]:
        return iter(self.slots)

    def __len__(self) -> int:
        return len(self.slots)


@dataclass(frozen=True)
class SlotValidation:
    """Outcome of validating a slot selection, shown under the slot picker."""
    is_valid: bool
    message: str


@dataclass(frozen=True)
class AvailabilitySnapshot:
    """
    One evaluation of the slot catalog for a booking date at a given instant.
    """
    booking_date: Date
    now: DateTime
    available: Tuple[str, ...] = ()
    disabled: Tuple[str, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "available", tuple(self.available))
        object.__setattr__(self, "disabled", tuple(self.disabled))

    @property
    def next_available(self) -> Optional[str]:
        return self.available[0] if self.available else None

    @property
    def is_fully_booked(self) -> bool:
        return not self.available


@dataclass(frozen=True)
class ReschedulePolicy:
    """
    Reschedule limits as communicated to the customer.

    The booking backend enforces these; this class only derives display
    values from a booking's reschedule count.
    """
    min_lead_hours: int = 4
    max_reschedules: int = 3

    def remaining(self, reschedule_count: int) -> int:
        return max(0, self.max_reschedules - max(0, reschedule_count))

    def headline(self, reschedule_count: int) -> str:
        remaining = self.remaining(reschedule_count)
        if remaining > 0:
            suffix = "s" if remaining > 1 else ""
            return f"You have {remaining} reschedule{suffix} remaining"
        return "This is your last reschedule"

    def notes(self) -> List[str]:
        return [
            f"New date must be at least {self.min_lead_hours} hours from now",
            f"Maximum {self.max_reschedules} reschedules allowed per booking",
            "No additional charges for rescheduling",
        ]


def to_booking_date(value, default: Optional[Date] = None) -> Optional[Date]:
    """
    Normalize a booking date to a pendulum Date.

    Args:
        value: None, a ``YYYY-MM-DD`` string, a date or a datetime
        default: Returned when value is None or an empty string

    Returns:
        pendulum Date (or default)

    Raises:
        InvalidBookingDateError: If the value cannot be read as a date
    """
    if value is None or value == "":
        return default

    # datetime is a subclass of date, so it must be checked first
    if isinstance(value, datetime):
        return pendulum.instance(value).date()

    if isinstance(value, date):
        return pendulum.date(value.year, value.month, value.day)

    if isinstance(value, str):
        try:
            return pendulum.from_format(value.strip(), "YYYY-MM-DD").date()
        except ValueError as exc:
            raise InvalidBookingDateError(
                f"Invalid booking date {value!r}, expected YYYY-MM-DD"
            ) from exc

    raise InvalidBookingDateError(f"Unsupported booking date value: {value!r}")
