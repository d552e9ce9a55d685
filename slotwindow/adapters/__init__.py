"""
Adapters layer - External integrations (booking backend API).
"""

from .booking_api import BookingApiClient
from .mock_booking_client import MockBookingClient

__all__ = ["BookingApiClient", "MockBookingClient"]
