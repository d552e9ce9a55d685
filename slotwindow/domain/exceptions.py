"""
Domain-specific exception hierarchy for the slotwindow application.
"""


class SlotWindowError(Exception):
    """Base class for all application-level errors."""


class MalformedSlotError(SlotWindowError, ValueError):
    """Raised when a slot label does not match the ``HH:MM AM|PM`` pattern."""


class InvalidBookingDateError(SlotWindowError, ValueError):
    """Raised when a booking date cannot be read as ``YYYY-MM-DD``."""


class BookingAPIError(SlotWindowError):
    """Raised when booking data cannot be fetched or parsed."""
