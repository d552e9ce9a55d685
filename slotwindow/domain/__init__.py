"""
Domain layer - Pure business logic without external dependencies.
"""

from .models import AvailabilitySnapshot, ReschedulePolicy, SlotCatalog, SlotValidation, TimeSlot
from .slot_engine import SlotAvailabilityEngine

__all__ = [
    "AvailabilitySnapshot",
    "ReschedulePolicy",
    "SlotCatalog",
    "SlotValidation",
    "TimeSlot",
    "SlotAvailabilityEngine",
]
