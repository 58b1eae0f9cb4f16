"""Decimal money helpers.

Prices and totals are Decimal with two fractional digits, matching the
NUMERIC(12, 2) columns. No float anywhere on the money path.
"""

from decimal import ROUND_HALF_UP, Decimal

_CENT = Decimal("0.01")

ZERO = Decimal("0.00")


def quantize_money(amount: Decimal) -> Decimal:
    """Round to whole cents, half-up: Decimal('2.345') -> Decimal('2.35')."""
    return amount.quantize(_CENT, rounding=ROUND_HALF_UP)


def line_total(unit_price: Decimal, quantity: int) -> Decimal:
    """unit_price * quantity, rounded to cents."""
    return quantize_money(unit_price * quantity)


def money_to_display(amount: Decimal) -> str:
    """Convert to display string: Decimal('1234.5') -> '$1,234.50', Decimal('-12') -> '-$12.00'."""
    amount = quantize_money(amount)
    if amount < 0:
        return f"-${-amount:,.2f}"
    return f"${amount:,.2f}"
