"""Tests for field rule validation."""

from datetime import date

import pytest

from src.wheel.validation import (
    parse_date,
    validate_account,
    validate_fund_transaction,
    validate_position,
    validate_stock,
    validate_trade,
)


def trade(**overrides) -> dict:
    data = {
        "ticker": "AAPL",
        "type": "CSP",
        "strike": 220.0,
        "entry_price": 2.8,
        "opened_date": "2025-01-06",
        "expiration_date": "2025-01-17",
    }
    data.update(overrides)
    return data


class TestParseDate:
    def test_parses_iso_date(self) -> None:
        assert parse_date("2025-01-17") == date(2025, 1, 17)
        assert parse_date(date(2025, 1, 17)) == date(2025, 1, 17)
        assert parse_date("") is None

    @pytest.mark.parametrize("value", ["2025-1-17", "17/01/2025", "2025-02-30", 20250117])
    def test_rejects_other_formats(self, value) -> None:
        with pytest.raises(ValueError):
            parse_date(value)


class TestValidateTrade:
    """Tests for validate_trade."""

    def test_valid_trade(self) -> None:
        assert validate_trade(trade()) == []

    def test_collects_every_error(self) -> None:
        errors = validate_trade(
            trade(type="PUT", strike=0, quantity=1.5, entry_price=-1, delta=1.2)
        )

        assert errors == [
            "type must be one of: CSP, CC",
            "strike must be a positive number",
            "quantity must be a positive integer",
            "entry_price must be a non-negative number",
            "delta must be between 0 and 1",
        ]

    def test_required_fields(self) -> None:
        errors = validate_trade({})
        assert "ticker is required" in errors
        assert "expiration_date is required" in errors

    def test_expiration_same_day_allowed(self) -> None:
        assert validate_trade(trade(expiration_date="2025-01-06")) == []

    def test_expiration_before_open(self) -> None:
        errors = validate_trade(trade(expiration_date="2025-01-05"))
        assert errors == ["expiration_date must be on or after opened_date"]

    def test_csp_premium_above_strike(self) -> None:
        errors = validate_trade(trade(strike=1.0, entry_price=1.5))
        assert errors == ["entry_price must not exceed strike for a CSP"]

        assert validate_trade(trade(strike=1.0, entry_price=1.0)) == []
        assert validate_trade(trade(type="CC", strike=1.0, entry_price=1.5)) == []

    def test_update_checks_present_fields_only(self) -> None:
        assert validate_trade({"close_price": 1.1}, is_update=True) == []
        assert validate_trade({"status": "Won"}, is_update=True) == [
            "status must be one of: Open, Expired, Assigned, Closed, Rolled"
        ]
        assert validate_trade({"ticker": " "}, is_update=True) == [
            "ticker must be a non-empty string"
        ]


class TestValidateLots:
    """Tests for positions, stocks, fund transactions and accounts."""

    def test_position_sale_pair(self) -> None:
        base = {"ticker": "AAPL", "shares": 100, "cost_basis": 217.2, "acquired_date": "2025-01-17"}
        assert validate_position(base) == []
        assert validate_position({**base, "sold_date": "2025-02-21"}) == [
            "sold_date and sale_price must be set together"
        ]
        assert validate_position({**base, "sold_date": None, "sale_price": None}) == []

    def test_stock_requires_account(self) -> None:
        errors = validate_stock(
            {"ticker": "VTI", "shares": 10, "cost_basis": 250, "acquired_date": "2025-02-03"}
        )
        assert errors == ["account_id is required"]

    def test_fund_transaction(self) -> None:
        valid = {"account_id": 1, "type": "dividend", "amount": 12.5, "date": "2025-03-10"}
        assert validate_fund_transaction(valid) == []
        assert validate_fund_transaction({**valid, "amount": 0}) == [
            "amount must be a positive number"
        ]

    def test_account(self) -> None:
        assert validate_account({"name": "IRA"}) == []
        assert validate_account({}) == ["name is required"]
        assert validate_account({}, is_update=True) == []
        assert validate_account({"name": ""}, is_update=True) == [
            "name must be a non-empty string"
        ]
