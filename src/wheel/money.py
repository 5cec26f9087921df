"""Fixed-point money helpers.

Every persisted money value is an integer number of cents. Decimal dollars
exist only where values cross the API or CLI boundary.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional, Union

SHARES_PER_CONTRACT = 100

Number = Union[int, float, str, Decimal]


def to_cents(dollars: Optional[Number]) -> Optional[int]:
    """Convert decimal dollars to integer cents.

    Rounds half away from zero at the cent. The value is routed through its
    string form so that binary float noise (2.675 is stored as 2.67499...)
    does not change the rounding direction.

    Args:
        dollars: Dollar amount, or None

    Returns:
        Integer cents, or None when dollars is None

    Raises:
        ValueError: If dollars is not numeric
    """
    if dollars is None:
        return None
    try:
        value = Decimal(str(dollars))
        cents = (value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise ValueError(f"Not a money amount: {dollars!r}") from e
    return int(cents)


def to_dollars(cents: Optional[int]) -> Optional[float]:
    """Convert integer cents to decimal dollars (None passes through)."""
    if cents is None:
        return None
    return cents / 100


def round_cents(value: Union[int, float, Decimal]) -> int:
    """Round a derived cent amount to the nearest whole cent."""
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def contract_value(per_share_cents: int, quantity: int) -> int:
    """Total cents for a per-share amount across option contracts."""
    return per_share_cents * quantity * SHARES_PER_CONTRACT


def option_pnl(entry_price: int, close_price: int, quantity: int) -> int:
    """Realized option P/L in cents: premium received minus cost to close."""
    return contract_value(entry_price - (close_price or 0), quantity)


def format_dollars(cents: Optional[int]) -> str:
    """Format cents for display, e.g. ``-$1,234.50``."""
    if cents is None:
        return "N/A"
    sign = "-" if cents < 0 else ""
    return f"{sign}${abs(cents) / 100:,.2f}"
