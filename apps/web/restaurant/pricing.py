"""
Order pricing - subtotal, tax and total for a cart.

subtotal = sum(price * quantity)
tax      = subtotal * tax rate, rounded half-up to cents
total    = subtotal + tax
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings

TWO_PLACES = Decimal("0.01")
MAX_AMOUNT = Decimal("99999999.99")  # DECIMAL(10, 2)
DEFAULT_TAX_RATE = Decimal("0.07")


def to_cents(value: Decimal) -> Decimal:
    """Round a money amount half-up to two decimal places."""
    return value.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def get_tax_rate() -> Decimal:
    """Tax rate from settings (RESTAURANT_TAX_RATE), 7% if unset."""
    return Decimal(str(getattr(settings, "RESTAURANT_TAX_RATE", DEFAULT_TAX_RATE)))


@dataclass(frozen=True)
class OrderTotals:
    """Computed money amounts for an order."""

    subtotal: Decimal
    tax: Decimal
    total: Decimal


def calculate_totals(
    lines: Iterable[tuple[Decimal, int]],
    tax_rate: Decimal | None = None,
) -> OrderTotals:
    """
    Calculate order totals.

    Args:
        lines: (unit_price, quantity) pairs
        tax_rate: Tax rate as a decimal (0.07 for 7%); defaults to settings

    Returns:
        OrderTotals with every amount rounded to cents
    """
    if tax_rate is None:
        tax_rate = get_tax_rate()

    subtotal = Decimal("0")
    for unit_price, quantity in lines:
        subtotal += unit_price * quantity
    subtotal = to_cents(subtotal)

    tax = to_cents(subtotal * tax_rate)
    return OrderTotals(subtotal=subtotal, tax=tax, total=subtotal + tax)


def mismatched_fields(claimed: OrderTotals, computed: OrderTotals) -> list[str]:
    """Names of the amounts where the claimed totals differ from the computed ones."""
    return [
        field
        for field in ("subtotal", "tax", "total")
        if to_cents(getattr(claimed, field)) != getattr(computed, field)
    ]


def exceeds_max_amount(totals: OrderTotals) -> list[str]:
    """Names of the amounts that do not fit a DECIMAL(10, 2) money column."""
    return [
        field
        for field in ("subtotal", "tax", "total")
        if getattr(totals, field) > MAX_AMOUNT
    ]
