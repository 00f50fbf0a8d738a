"""
Money helpers.

Amounts are stored as integer minor units (cents). Decimal strings are
accepted at the HTTP boundary and converted exactly.
"""

from decimal import Decimal, InvalidOperation
from typing import Optional, Union

CENTS = Decimal('0.01')

# Largest value a PositiveIntegerField column holds on every backend.
MAX_CENTS = 2147483647

CURRENCY_SYMBOLS = {
    'USD': '$',
    'EUR': '€',
    'GBP': '£',
    'CAD': 'CA$',
    'AUD': 'A$',
    'CZK': 'Kč',
}


def to_cents(value: Union[str, int, Decimal]) -> int:
    """
    Convert a non-negative decimal amount to integer cents.

    Args:
        value: Amount such as "12.34", 5 or Decimal("0.5")

    Returns:
        Amount in cents (e.g. 1234 for "12.34")

    Raises:
        ValueError: If the value is not a non-negative number with at most
            two decimal places, or is larger than MAX_CENTS cents
    """
    if isinstance(value, float):
        raise ValueError("Amounts must be given as decimal strings, not floats")

    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {value!r}")

    if not amount.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    if amount < 0:
        raise ValueError("Amount cannot be negative")
    if amount > Decimal(MAX_CENTS) / 100:
        raise ValueError("Amount is too large")
    try:
        quantized = amount.quantize(CENTS)
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {value!r}")
    if amount != quantized:
        raise ValueError("Amount cannot have more than two decimal places")

    return int(amount * 100)


def cents_to_decimal(amount_cents: Optional[int]) -> Optional[Decimal]:
    if amount_cents is None:
        return None
    return (Decimal(amount_cents) / 100).quantize(CENTS)


def format_cents(amount_cents: int, unit: Optional[str] = None) -> str:
    """
    Format an amount in cents for display.

    Known currency codes get their symbol ("$5.00"); any other unit is
    appended ("2.00 beers").
    """
    amount = cents_to_decimal(amount_cents)
    if unit in CURRENCY_SYMBOLS:
        symbol = CURRENCY_SYMBOLS[unit]
        if amount < 0:
            return f"-{symbol}{abs(amount)}"
        return f"{symbol}{amount}"
    if unit:
        return f"{amount} {unit}"
    return str(amount)
