"""
Payment amount computation for checkout.

Amounts are rupees as Decimal; the payment processor expects paise.
"""

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import List, Optional, Sequence

DEFAULT_TAX_RATE = 18
DEFAULT_SERVICE_DURATION_MINUTES = 60
MAX_PAYMENT_AMOUNT = Decimal("1000000")

CURRENCY_SYMBOLS = {
    "INR": "₹",
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
}


@dataclass(frozen=True)
class CartItem:
    """A service line in the cart."""
    name: str
    price: Decimal
    quantity: int = 1
    duration_minutes: Optional[int] = DEFAULT_SERVICE_DURATION_MINUTES

    def line_total(self) -> Decimal:
        return Decimal(self.price) * self.quantity


@dataclass(frozen=True)
class AmountValidation:
    is_valid: bool
    amount: Optional[Decimal] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class PaymentQuote:
    """Subtotal, tax and total for an order."""
    subtotal: Decimal
    tax_rate: Decimal
    tax: Decimal
    total: Decimal

    @property
    def total_paise(self) -> int:
        return to_paise(self.total)


def _to_decimal(value) -> Optional[Decimal]:
    # bool is an int subclass but never a valid amount
    if isinstance(value, bool) or value is None:
        return None
    try:
        amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return None
    if not amount.is_finite():
        return None
    return amount


def _round_whole(amount: Decimal) -> Decimal:
    return amount.quantize(Decimal("1"), rounding=ROUND_HALF_UP)


def to_paise(rupees) -> int:
    """Convert rupees to whole paise; invalid input yields 0."""
    amount = _to_decimal(rupees)
    if amount is None:
        return 0
    return int(_round_whole(amount * 100))


def to_rupees(paise) -> Decimal:
    """Convert paise to rupees; invalid input yields 0."""
    amount = _to_decimal(paise)
    if amount is None:
        return Decimal("0")
    return amount / 100


def calculate_tax(subtotal, tax_rate=DEFAULT_TAX_RATE) -> Decimal:
    """Tax on a subtotal, rounded half-up to whole rupees."""
    amount = _to_decimal(subtotal)
    rate = _to_decimal(tax_rate)
    if amount is None or rate is None:
        return Decimal("0")
    return _round_whole(amount * rate / 100)


def calculate_total(subtotal, tax_rate=DEFAULT_TAX_RATE) -> Decimal:
    amount = _to_decimal(subtotal) or Decimal("0")
    return amount + calculate_tax(amount, tax_rate)


def quote(subtotal, tax_rate=DEFAULT_TAX_RATE) -> PaymentQuote:
    amount = _to_decimal(subtotal) or Decimal("0")
    rate = _to_decimal(tax_rate) or Decimal("0")
    tax = calculate_tax(amount, rate)
    return PaymentQuote(subtotal=amount, tax_rate=rate, tax=tax, total=amount + tax)


def validate_amount(amount) -> AmountValidation:
    """
    Check that an amount can be charged.

    Returns the amount rounded to whole rupees when valid.
    """
    value = _to_decimal(amount)

    if value is None:
        return AmountValidation(is_valid=False, error="Amount must be a valid number")

    if value <= 0:
        return AmountValidation(is_valid=False, error="Amount must be greater than zero")

    if value > MAX_PAYMENT_AMOUNT:
        return AmountValidation(
            is_valid=False,
            error=f"Amount cannot exceed {format_amount(MAX_PAYMENT_AMOUNT)}",
        )

    return AmountValidation(is_valid=True, amount=_round_whole(value))


def _group_indian(digits: str) -> str:
    """Group integer digits the Indian way: 12,34,567."""
    if len(digits) <= 3:
        return digits

    head, tail = digits[:-3], digits[-3:]
    groups: List[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)

    return ",".join(groups) + "," + tail


def format_amount(amount, currency: str = "INR") -> str:
    """
    Format an amount for display with 0-2 fraction digits.

    Example: 123456.5 -> "₹1,23,456.5"
    """
    symbol = CURRENCY_SYMBOLS.get(currency.upper(), f"{currency.upper()} ")
    value = _to_decimal(amount)
    if value is None:
        return f"{symbol}0"

    value = value.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    integer_part, _, fraction = f"{abs(value):.2f}".partition(".")
    fraction = fraction.rstrip("0")

    text = _group_indian(integer_part)
    if fraction:
        text = f"{text}.{fraction}"

    return f"{sign}{symbol}{text}"


def cart_subtotal(items: Sequence[CartItem]) -> Decimal:
    return sum((item.line_total() for item in items), Decimal("0"))


def total_service_duration(items: Sequence[CartItem]) -> int:
    """Total minutes of service time; items without a duration count as an hour."""
    return sum(
        (item.duration_minutes or DEFAULT_SERVICE_DURATION_MINUTES) * item.quantity
        for item in items
    )


def format_duration(minutes) -> str:
    if isinstance(minutes, bool) or not isinstance(minutes, int):
        return "0 min"

    if minutes < 60:
        return f"{minutes} min"

    hours, remainder = divmod(minutes, 60)
    if remainder == 0:
        return f"{hours} hr"
    return f"{hours} hr {remainder} min"


def order_summary(items: Sequence[CartItem]) -> str:
    if not items:
        return "No services selected"
    if len(items) == 1:
        return items[0].name
    if len(items) == 2:
        return f"{items[0].name} and {items[1].name}"
    return f"{items[0].name} and {len(items) - 1} other services"


def mask_sensitive(value: Optional[str], visible_start: int = 4, visible_end: int = 4) -> Optional[str]:
    """Mask the middle of a payment identifier, keeping both ends readable."""
    if not value or len(value) <= visible_start + visible_end:
        return value

    hidden = len(value) - visible_start - visible_end
    return value[:visible_start] + "*" * hidden + value[len(value) - visible_end:]
