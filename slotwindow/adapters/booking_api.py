"""
Booking backend API client for reading booking details.
"""

import logging
from typing import Any, Dict, Optional

import requests

from ..domain.exceptions import BookingAPIError

logger = logging.getLogger(__name__)


def extract_reschedule_count(booking: Dict[str, Any]) -> int:
    """Read ``reschedulingDetails.rescheduleCount`` from a booking, defaulting to 0."""
    details = booking.get("reschedulingDetails") or {}
    count = details.get("rescheduleCount", 0)

    try:
        return max(0, int(count or 0))
    except (TypeError, ValueError):
        logger.warning("Ignoring unreadable reschedule count: %r", count)
        return 0


class BookingApiClient:
    """
    Client for the booking backend's read endpoints.

    Reschedule limits are enforced by the backend; this client only reads
    the current state of a booking.
    """

    BOOKINGS_PATH = "/api/bookings"

    def __init__(self, base_url: str, access_token: Optional[str] = None, timeout: float = 10):
        """
        Initialize the booking API client.

        Args:
            base_url: Backend root URL, e.g. https://api.example.com
            access_token: Optional bearer token sent with every request
            timeout: Request timeout in seconds
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.headers = {"Content-Type": "application/json"}
        if access_token:
            self.headers["Authorization"] = f"Bearer {access_token}"

    def get_booking(self, booking_id: str) -> Dict[str, Any]:
        """
        Fetch one booking.

        Raises:
            BookingAPIError: If the request fails or the response is not a booking
        """
        url = f"{self.base_url}{self.BOOKINGS_PATH}/{booking_id}"
        logger.debug("Fetching booking %s from %s", booking_id, url)

        try:
            response = requests.get(url, headers=self.headers, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()

        except requests.exceptions.RequestException as e:
            raise BookingAPIError(f"Failed to fetch booking {booking_id}: {e}") from e

        except ValueError as e:
            raise BookingAPIError(f"Booking API returned invalid JSON: {e}") from e

        return self._unwrap(data, booking_id)

    def get_reschedule_count(self, booking_id: str) -> int:
        return extract_reschedule_count(self.get_booking(booking_id))

    @staticmethod
    def _unwrap(data: Any, booking_id: str) -> Dict[str, Any]:
        """
        Accept either a bare booking or the ``{"success": ..., "data": {...}}`` envelope.
        """
        if isinstance(data, dict) and isinstance(data.get("data"), dict):
            return data["data"]

        if isinstance(data, dict) and "data" not in data:
            return data

        raise BookingAPIError(f"Unexpected response for booking {booking_id}: {data!r}")
