"""
Application services for the booking window.

The service owns the clock and the booking-backend client, and delegates the
availability rules to the domain-level ``SlotAvailabilityEngine``. Callers
such as the CLI re-invoke it on every refresh tick; it keeps no selection
state of its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Protocol

import pendulum
from pendulum import DateTime

from ..domain.exceptions import BookingAPIError
from ..domain.models import AvailabilitySnapshot, ReschedulePolicy, SlotValidation
from ..domain.slot_engine import SlotAvailabilityEngine, SlotLike

logger = logging.getLogger(__name__)

Clock = Callable[[], DateTime]


class BookingClientProtocol(Protocol):
    """Protocol describing the booking client behaviour needed by the service."""

    def get_booking(self, booking_id: str) -> Dict[str, Any]:
        """Return the raw booking record."""

    def get_reschedule_count(self, booking_id: str) -> int:
        """Return how many times the booking has been rescheduled."""


@dataclass(frozen=True)
class RescheduleStatus:
    booking_id: str
    reschedule_count: int
    remaining: int
    headline: str


class BookingWindowService:
    """
    Evaluates slot availability against the current time.

    Dependency inversion toward a clock callable and a client protocol makes
    it easy to plug in a fixed instant or the mock backend in tests.
    """

    def __init__(
        self,
        engine: SlotAvailabilityEngine,
        clock: Optional[Clock] = None,
        booking_client: Optional[BookingClientProtocol] = None,
        reschedule_policy: Optional[ReschedulePolicy] = None,
    ) -> None:
        self._engine = engine
        self._clock = clock or (lambda: pendulum.now(engine.timezone))
        self._booking_client = booking_client
        self._reschedule_policy = reschedule_policy or ReschedulePolicy()

    @property
    def engine(self) -> SlotAvailabilityEngine:
        return self._engine

    @property
    def reschedule_policy(self) -> ReschedulePolicy:
        return self._reschedule_policy

    def current_time(self) -> DateTime:
        return self._clock()

    def snapshot(self, selected_date=None, now: Optional[DateTime] = None) -> AvailabilitySnapshot:
        """
        Evaluate the catalog for a date.

        Pass ``now`` when the caller already read the clock (e.g. to resolve
        "today"), so both decisions use the same instant.
        """
        if now is None:
            now = self.current_time()
        snapshot = self._engine.snapshot(selected_date, now)
        logger.debug(
            "Availability for %s at %s: %d available, %d disabled",
            snapshot.booking_date,
            snapshot.now.to_datetime_string(),
            len(snapshot.available),
            len(snapshot.disabled),
        )
        return snapshot

    def validate(self, slot: Optional[SlotLike], selected_date, now: Optional[DateTime] = None) -> SlotValidation:
        if now is None:
            now = self.current_time()
        return self._engine.validate_slot_selection(slot, selected_date, now)

    def reschedule_status(self, booking_id: str) -> RescheduleStatus:
        """
        Read a booking's reschedule count and derive what to tell the customer.

        Raises:
            BookingAPIError: If no client is configured or the lookup fails
        """
        if self._booking_client is None:
            raise BookingAPIError("No booking client configured")

        count = self._booking_client.get_reschedule_count(booking_id)
        policy = self._reschedule_policy

        return RescheduleStatus(
            booking_id=booking_id,
            reschedule_count=count,
            remaining=policy.remaining(count),
            headline=policy.headline(count),
        )
