"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .booking_window import BookingClientProtocol, BookingWindowService, RescheduleStatus

__all__ = ["BookingClientProtocol", "BookingWindowService", "RescheduleStatus"]
