"""Field rule validation for trades, lots, cash flows and accounts.

Each entity has one validator shared by the create and update paths. A
validator never raises; it returns every violated rule so callers can
report the full list at once. ``is_update`` relaxes the required-field
checks so partial payloads only have their present fields checked.
"""

import logging
import math
import re
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Optional

from .state import FundTransactionType, TradeStatus, TradeType

logger = logging.getLogger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

VALID_TYPES = [t.value for t in TradeType]
VALID_STATUSES = [s.value for s in TradeStatus]
VALID_FUND_TRANSACTION_TYPES = [t.value for t in FundTransactionType]


def parse_date(value: Any) -> Optional[date]:
    """
    Parse a YYYY-MM-DD string (or pass through a date).

    Returns:
        The date, or None when value is None or empty.

    Raises:
        ValueError: If the value is not a real calendar date in that format.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not DATE_PATTERN.match(value.strip()):
        raise ValueError(f"Not a YYYY-MM-DD date: {value!r}")
    return date.fromisoformat(value.strip())


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _check_positive(data: Mapping, name: str, errors: list[str]) -> None:
    if data.get(name) is not None:
        number = _as_number(data[name])
        if number is None or number <= 0:
            errors.append(f"{name} must be a positive number")


def _check_non_negative(data: Mapping, name: str, errors: list[str]) -> None:
    if data.get(name) is not None:
        number = _as_number(data[name])
        if number is None or number < 0:
            errors.append(f"{name} must be a non-negative number")


def _check_positive_int(data: Mapping, name: str, errors: list[str]) -> None:
    if data.get(name) is not None:
        number = _as_number(data[name])
        if number is None or number < 1 or not float(number).is_integer():
            errors.append(f"{name} must be a positive integer")


def _check_date(data: Mapping, name: str, errors: list[str]) -> Optional[date]:
    if _is_blank(data.get(name)):
        return None
    try:
        return parse_date(data[name])
    except ValueError:
        errors.append(f"{name} must be in YYYY-MM-DD format")
        return None


def _check_required(data: Mapping, names: list[str], errors: list[str]) -> None:
    for name in names:
        if _is_blank(data.get(name)):
            errors.append(f"{name} is required")


def premium_errors(strike: Any, entry_price: Any) -> list[str]:
    """A put premium above its strike would assign shares at a negative basis."""
    strike, entry_price = _as_number(strike), _as_number(entry_price)
    if strike is not None and entry_price is not None and entry_price > strike:
        return ["entry_price must not exceed strike for a CSP"]
    return []


def validate_trade(data: Mapping, is_update: bool = False) -> list[str]:
    """
    Validate an option trade payload (money in decimal dollars).

    Args:
        data: Trade fields keyed by field name
        is_update: Only check fields that are present

    Returns:
        List of violated rules (empty when valid)
    """
    errors: list[str] = []

    if not is_update:
        _check_required(
            data,
            ["ticker", "type", "strike", "entry_price", "opened_date", "expiration_date"],
            errors,
        )
    elif "ticker" in data and _is_blank(data.get("ticker")):
        errors.append("ticker must be a non-empty string")

    if data.get("ticker") is not None and not isinstance(data["ticker"], str):
        errors.append("ticker must be a string")

    if data.get("type") is not None and data["type"] not in VALID_TYPES:
        errors.append(f"type must be one of: {', '.join(VALID_TYPES)}")

    if data.get("status") is not None and data["status"] not in VALID_STATUSES:
        errors.append(f"status must be one of: {', '.join(VALID_STATUSES)}")

    _check_positive(data, "strike", errors)
    _check_positive_int(data, "quantity", errors)
    _check_non_negative(data, "entry_price", errors)
    _check_non_negative(data, "close_price", errors)

    if data.get("type") == TradeType.CSP.value:
        errors.extend(premium_errors(data.get("strike"), data.get("entry_price")))

    if not _is_blank(data.get("delta")):
        delta = _as_number(data["delta"])
        if delta is None or delta < 0 or delta > 1:
            errors.append("delta must be between 0 and 1")

    opened = _check_date(data, "opened_date", errors)
    expiration = _check_date(data, "expiration_date", errors)
    _check_date(data, "closed_date", errors)

    if opened and expiration and opened > expiration:
        errors.append("expiration_date must be on or after opened_date")

    if data.get("parent_trade_id") is not None:
        _check_positive_int(data, "parent_trade_id", errors)

    return errors


def validate_position(data: Mapping, is_update: bool = False) -> list[str]:
    """Validate a share lot created by assignment or entered by hand."""
    errors: list[str] = []

    if not is_update:
        _check_required(data, ["ticker", "shares", "cost_basis", "acquired_date"], errors)

    _check_positive_int(data, "shares", errors)
    _check_non_negative(data, "cost_basis", errors)
    _check_non_negative(data, "sale_price", errors)
    _check_date(data, "acquired_date", errors)
    _check_date(data, "sold_date", errors)

    if "sold_date" in data or "sale_price" in data:
        if _is_blank(data.get("sold_date")) != (data.get("sale_price") is None):
            errors.append("sold_date and sale_price must be set together")

    return errors


def validate_stock(data: Mapping, is_update: bool = False) -> list[str]:
    """Validate a manually entered stock lot."""
    errors: list[str] = []

    if not is_update:
        _check_required(
            data, ["account_id", "ticker", "shares", "cost_basis", "acquired_date"], errors
        )

    errors.extend(
        e for e in validate_position(data, is_update=True) if e not in errors
    )
    return errors


def validate_fund_transaction(data: Mapping, is_update: bool = False) -> list[str]:
    """Validate a cash-flow journal entry (amount is a positive magnitude)."""
    errors: list[str] = []

    if not is_update:
        _check_required(data, ["account_id", "type", "amount", "date"], errors)

    if data.get("type") is not None and data["type"] not in VALID_FUND_TRANSACTION_TYPES:
        errors.append(
            f"type must be one of: {', '.join(VALID_FUND_TRANSACTION_TYPES)}"
        )

    _check_positive(data, "amount", errors)
    _check_date(data, "date", errors)
    return errors


def validate_account(data: Mapping, is_update: bool = False) -> list[str]:
    """Validate an account payload."""
    errors: list[str] = []
    if "name" in data and data["name"] is not None:
        if not isinstance(data["name"], str) or data["name"].strip() == "":
            errors.append("name must be a non-empty string")
    elif not is_update:
        errors.append("name is required")
    elif "name" in data:
        errors.append("name must be a non-empty string")
    return errors
