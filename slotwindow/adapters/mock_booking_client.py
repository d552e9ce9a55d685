"""
Mock booking backend client for running without a backend.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..domain.exceptions import BookingAPIError
from .booking_api import extract_reschedule_count


class MockBookingClient:
    """
    Mock client that serves bookings from mock_bookings.json.

    Mirrors the read interface of BookingApiClient.
    """

    def __init__(self, data_file: Optional[Path] = None):
        """
        Initialize the mock client.

        Args:
            data_file: Optional JSON file with a list of bookings
        """
        self.data_file = data_file or Path(__file__).parent / "mock_bookings.json"
        self.bookings = self._load_bookings()

    def _load_bookings(self) -> List[Dict[str, Any]]:
        """Load mock bookings from JSON file."""
        if not self.data_file.exists():
            return []

        with open(self.data_file, "r", encoding="utf-8") as f:
            return json.load(f)

    def get_booking(self, booking_id: str) -> Dict[str, Any]:
        for booking in self.bookings:
            if booking.get("_id") == booking_id:
                return booking

        raise BookingAPIError(f"Booking not found: {booking_id}")

    def get_reschedule_count(self, booking_id: str) -> int:
        return extract_reschedule_count(self.get_booking(booking_id))
