"""Boundary conversion from request payloads to stored column values.

Payloads carry decimal dollars and YYYY-MM-DD strings; columns hold
integer cents and dates. Callers validate before converting.
"""

from typing import Any

from src.wheel.money import to_cents
from src.wheel.validation import parse_date

TRADE_MONEY = ("strike", "entry_price", "close_price")
TRADE_DATES = ("opened_date", "expiration_date", "closed_date")
LOT_MONEY = ("cost_basis", "sale_price")
LOT_DATES = ("acquired_date", "sold_date")


def to_columns(
    data: dict[str, Any],
    money: tuple[str, ...] = (),
    dates: tuple[str, ...] = (),
) -> dict[str, Any]:
    """Convert the money and date fields present in a payload.

    Fields not named in money or dates are copied unchanged; absent
    fields stay absent so partial updates remain partial.
    """
    columns = dict(data)
    for name in money:
        if name in columns:
            columns[name] = to_cents(columns[name])
    for name in dates:
        if name in columns:
            columns[name] = parse_date(columns[name])
    if isinstance(columns.get("ticker"), str):
        columns["ticker"] = columns["ticker"].strip().upper()
    return columns
