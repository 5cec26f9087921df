"""Tests for money helpers."""

from decimal import Decimal

import pytest

from src.wheel.money import (
    contract_value,
    format_dollars,
    option_pnl,
    round_cents,
    to_cents,
    to_dollars,
)


class TestToCents:
    """Tests for dollar to cent conversion."""

    @pytest.mark.parametrize(
        "dollars,cents",
        [
            (2.8, 280),
            (217.2, 21720),
            ("1.005", 101),
            (2.675, 268),
            (-0.125, -13),
            (Decimal("10"), 1000),
            (0, 0),
        ],
    )
    def test_rounds_half_away_from_zero(self, dollars, cents) -> None:
        assert to_cents(dollars) == cents

    def test_none_passes_through(self) -> None:
        assert to_cents(None) is None
        assert to_dollars(None) is None

    def test_rejects_non_numeric(self) -> None:
        with pytest.raises(ValueError, match="Not a money amount"):
            to_cents("abc")

    def test_to_dollars(self) -> None:
        assert to_dollars(21720) == 217.2


class TestOptionMath:
    """Tests for contract arithmetic."""

    def test_contract_value(self) -> None:
        assert contract_value(280, 2) == 56000

    def test_option_pnl(self) -> None:
        assert option_pnl(280, 110, 1) == 17000
        assert option_pnl(100, 140, 1) == -4000
        assert option_pnl(280, None, 1) == 28000

    def test_round_cents(self) -> None:
        assert round_cents(12.5) == 13
        assert round_cents(-12.5) == -13


class TestFormatDollars:
    def test_format(self) -> None:
        assert format_dollars(138000) == "$1,380.00"
        assert format_dollars(-4000) == "-$40.00"
        assert format_dollars(None) == "N/A"
