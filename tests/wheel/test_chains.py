"""Tests for roll chain reconstruction and chain statistics."""

from datetime import date

import pytest

from src.wheel.chains import build_chains, chain_win_rate, find_chain
from src.wheel.exceptions import ChainIntegrityError
from src.wheel.models import TradeRecord
from src.wheel.state import TradeStatus, TradeType


def make_trade(trade_id: int, parent: int = None, **overrides) -> TradeRecord:
    fields = dict(
        id=trade_id,
        ticker="AAPL",
        type=TradeType.CSP,
        strike=22000,
        entry_price=280,
        opened_date=date(2025, 1, 6),
        expiration_date=date(2025, 1, 17),
        parent_trade_id=parent,
    )
    fields.update(overrides)
    return TradeRecord(**fields)


class TestBuildChains:
    """Tests for build_chains."""

    def test_three_trade_chain(self) -> None:
        trades = [
            make_trade(3, parent=2, strike=21000, entry_price=200, status=TradeStatus.EXPIRED),
            make_trade(1, strike=22000, entry_price=280, close_price=110, status=TradeStatus.ROLLED),
            make_trade(2, parent=1, strike=21500, entry_price=240, close_price=100, status=TradeStatus.ROLLED),
        ]

        chains = build_chains(trades)

        assert len(chains) == 1
        chain = chains[0]
        assert chain.trade_ids == [1, 2, 3]
        assert chain.pnl == 17000 + 14000 + 20000
        assert chain.collateral == 6450000
        assert chain.final_status is TradeStatus.EXPIRED
        assert chain.resolved
        assert chain.winning
        assert chain.roi == pytest.approx(51000 / 6450000 * 100)

    def test_standalone_trades_are_chains(self) -> None:
        chains = build_chains([make_trade(2), make_trade(1)])
        assert [c.root_id for c in chains] == [1, 2]

    def test_chain_ending_in_rolled_is_unresolved(self) -> None:
        chain = build_chains([make_trade(1, status=TradeStatus.ROLLED, close_price=100)])[0]
        assert not chain.resolved
        assert not chain.winning

    def test_cross_ticker_chain(self) -> None:
        chain = build_chains([make_trade(1), make_trade(2, parent=1, ticker="MSFT")])[0]
        assert chain.tickers == ["AAPL", "MSFT"]

    def test_multiple_children_follow_lowest_id(self) -> None:
        trades = [make_trade(1), make_trade(3, parent=1), make_trade(2, parent=1)]

        chains = build_chains(trades)

        assert chains[0].trade_ids == [1, 2]
        assert [c.trade_ids for c in chains[1:]] == [[3]]

    def test_multiple_children_strict(self) -> None:
        trades = [make_trade(1), make_trade(3, parent=1), make_trade(2, parent=1)]
        with pytest.raises(ChainIntegrityError, match="has 2 children"):
            build_chains(trades, strict=True)

    def test_cycle_is_cut(self) -> None:
        """Trades on a cycle have no root and come back as single-trade chains."""
        trades = [make_trade(1, parent=2), make_trade(2, parent=1)]

        chains = build_chains(trades)

        assert [c.trade_ids for c in chains] == [[1], [2]]

    def test_missing_parent_is_orphan(self) -> None:
        chains = build_chains([make_trade(5, parent=4)])
        assert [c.trade_ids for c in chains] == [[5]]

    def test_find_chain(self) -> None:
        chains = build_chains([make_trade(1), make_trade(2, parent=1), make_trade(3)])
        assert find_chain(chains, 2).root_id == 1
        assert find_chain(chains, 99) is None


class TestChainWinRate:
    def test_win_rate(self) -> None:
        trades = [
            make_trade(1, status=TradeStatus.EXPIRED),
            make_trade(2, status=TradeStatus.CLOSED, entry_price=100, close_price=140),
            make_trade(3, status=TradeStatus.EXPIRED),
            make_trade(4),
        ]

        stats = chain_win_rate(build_chains(trades))

        assert stats.total_chains == 4
        assert stats.resolved_chains == 3
        assert stats.winning_chains == 2
        assert stats.win_rate == pytest.approx(66.67, abs=0.01)

    def test_no_resolved_chains(self) -> None:
        assert chain_win_rate(build_chains([make_trade(1)])).win_rate == 0.0
