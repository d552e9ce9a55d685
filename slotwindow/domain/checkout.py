"""
Client-side checkout pre-checks.

The booking backend re-validates everything; these checks only decide
whether the checkout form is worth submitting.
"""

import re
from datetime import datetime
from typing import List, Optional

from .pricing import validate_amount
from .slot_engine import SlotAvailabilityEngine, SlotLike

UPI_ID_PATTERN = re.compile(r"^[a-zA-Z0-9._-]+@[a-zA-Z]{2,}$")
INDIAN_PHONE_PATTERN = re.compile(r"^[6-9]\d{9}$")

INVALID_PHONE_MESSAGE = "Please enter a valid 10-digit mobile number"


def validate_indian_phone(phone: Optional[str]) -> bool:
    """Ten digits starting with 6-9, ignoring spaces, dashes and the like."""
    if not phone or not isinstance(phone, str):
        return False

    digits = re.sub(r"\D", "", phone)
    return bool(INDIAN_PHONE_PATTERN.match(digits))


def validate_upi_id(upi_id: Optional[str]) -> bool:
    if not upi_id or not isinstance(upi_id, str):
        return False
    return bool(UPI_ID_PATTERN.match(upi_id))


def validate_checkout(
    slot: Optional[SlotLike],
    selected_date,
    now: datetime,
    phone: Optional[str],
    amount,
    engine: Optional[SlotAvailabilityEngine] = None,
) -> List[str]:
    """
    Collect every user-facing error for a checkout form.

    Returns:
        Error messages in form order; empty when the form can be submitted
    """
    engine = engine or SlotAvailabilityEngine()
    errors: List[str] = []

    slot_result = engine.validate_slot_selection(slot, selected_date, now)
    if not slot_result.is_valid:
        errors.append(slot_result.message)

    if not validate_indian_phone(phone):
        errors.append(INVALID_PHONE_MESSAGE)

    amount_result = validate_amount(amount)
    if not amount_result.is_valid:
        errors.append(amount_result.error)

    return errors
