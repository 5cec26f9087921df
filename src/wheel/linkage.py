"""Share-lot math for option assignments.

Cost basis and realized gains are computed here in cents and persisted
at write time, so later changes to premium handling never rewrite
historical results.
"""

from collections.abc import Iterable
from datetime import date
from typing import Optional, Protocol

from .money import SHARES_PER_CONTRACT


class LotLike(Protocol):
    """Anything with the fields FIFO selection needs."""

    id: int
    acquired_date: date
    sold_date: Optional[date]


def assignment_cost_basis(strike: int, entry_price: int) -> int:
    """
    Per-share cost basis of shares received from a CSP assignment.

    The premium collected lowers the effective purchase price, so
    a $220.00 put sold for $2.80 yields a $217.20 basis.
    """
    return strike - entry_price


def assignment_shares(quantity: int) -> int:
    """Shares delivered or called away for a number of contracts."""
    return quantity * SHARES_PER_CONTRACT


def capital_gain(sale_price: int, cost_basis: int, shares: int) -> int:
    """Realized gain in cents for selling a lot at sale_price per share."""
    return (sale_price - cost_basis) * shares


def fifo_key(lot: LotLike) -> tuple[date, int]:
    """Sort key for FIFO: oldest acquired date first, then lowest id."""
    return (lot.acquired_date, lot.id)


def select_fifo(lots: Iterable[LotLike]) -> Optional[LotLike]:
    """
    Pick the lot a covered-call assignment should close.

    Only open lots (no sold date) are candidates; the ordering never
    depends on the order the store returned rows in.

    Returns:
        The oldest open lot, or None when nothing is open.
    """
    open_lots = [lot for lot in lots if lot.sold_date is None]
    if not open_lots:
        return None
    return min(open_lots, key=fifo_key)
