"""Tests for trade statistics and portfolio aggregation."""

from datetime import date

import pytest

from src.wheel.aggregation import (
    DateWindow,
    cash_totals,
    monthly_breakdown,
    portfolio_summary,
    trade_roi,
    trade_statistics,
    unrealized_gains,
)
from src.wheel.models import FundTransactionRecord, ShareLot, TradeRecord
from src.wheel.state import FundTransactionType, TradeStatus, TradeType


def make_trade(trade_id: int, **overrides) -> TradeRecord:
    fields = dict(
        id=trade_id,
        ticker="AAPL",
        type=TradeType.CSP,
        strike=22000,
        entry_price=280,
        opened_date=date(2025, 1, 6),
        expiration_date=date(2025, 1, 17),
    )
    fields.update(overrides)
    return TradeRecord(**fields)


def make_tx(tx_id: int, tx_type: FundTransactionType, amount: int, day: date) -> FundTransactionRecord:
    return FundTransactionRecord(id=tx_id, type=tx_type, amount=amount, date=day)


def make_lot(lot_id: int, ticker: str = "AAPL", **overrides) -> ShareLot:
    fields = dict(
        id=lot_id,
        ticker=ticker,
        shares=100,
        cost_basis=21720,
        acquired_date=date(2025, 1, 17),
    )
    fields.update(overrides)
    return ShareLot(**fields)


@pytest.fixture
def march_losing_close() -> TradeRecord:
    return make_trade(
        1,
        entry_price=100,
        close_price=140,
        opened_date=date(2025, 3, 3),
        expiration_date=date(2025, 3, 21),
        closed_date=date(2025, 3, 14),
        status=TradeStatus.CLOSED,
    )


class TestCashTotals:
    def test_types_sum_independently(self) -> None:
        totals = cash_totals(
            [
                make_tx(1, FundTransactionType.DEPOSIT, 1000000, date(2025, 1, 2)),
                make_tx(2, FundTransactionType.WITHDRAWAL, 200000, date(2025, 2, 2)),
                make_tx(3, FundTransactionType.DIVIDEND, 12000, date(2025, 3, 10)),
                make_tx(4, FundTransactionType.INTEREST, 500, date(2025, 3, 31)),
                make_tx(5, FundTransactionType.FEE, 2000, date(2025, 3, 28)),
            ]
        )

        assert totals.net_deposited == 800000
        assert totals.cash_balance == 800000 - 2000 + 12000 + 500
        assert totals.income == 10500

    def test_window_is_inclusive(self) -> None:
        window = DateWindow(start=date(2025, 3, 10), end=date(2025, 3, 28))
        totals = cash_totals(
            [
                make_tx(1, FundTransactionType.DIVIDEND, 12000, date(2025, 3, 10)),
                make_tx(2, FundTransactionType.FEE, 2000, date(2025, 3, 28)),
                make_tx(3, FundTransactionType.INTEREST, 500, date(2025, 3, 31)),
            ],
            window,
        )

        assert totals.dividends == 12000
        assert totals.fees == 2000
        assert totals.interest == 0


class TestMonthlyBreakdown:
    def test_march_row(self, march_losing_close) -> None:
        rows = monthly_breakdown(
            [march_losing_close],
            [],
            [],
            [
                make_tx(1, FundTransactionType.DEPOSIT, 1000000, date(2025, 1, 2)),
                make_tx(2, FundTransactionType.INTEREST, 12000, date(2025, 3, 31)),
                make_tx(3, FundTransactionType.FEE, 2000, date(2025, 3, 5)),
            ],
        )

        assert len(rows) == 1
        row = rows[0]
        assert (row.month, row.options, row.stocks, row.income) == ("2025-03", -4000, 0, 10000)

    def test_lot_sales_and_ordering(self) -> None:
        rows = monthly_breakdown(
            [make_trade(1, status=TradeStatus.EXPIRED, closed_date=date(2025, 1, 17))],
            [make_lot(1, sold_date=date(2025, 2, 21), sale_price=23100, capital_gain_loss=138000)],
            [make_lot(2, ticker="VTI", sold_date=date(2025, 2, 3), capital_gain_loss=-9500)],
            [],
        )

        assert [(r.month, r.options, r.stocks) for r in rows] == [
            ("2025-01", 28000, 0),
            ("2025-02", 0, 138000 - 9500),
        ]

    def test_open_trades_excluded(self) -> None:
        assert monthly_breakdown([make_trade(1)], [], [], []) == []


class TestPortfolioSummary:
    def test_totals_and_rate_of_return(self, march_losing_close) -> None:
        summary = portfolio_summary(
            [march_losing_close, make_trade(2)],
            [make_lot(1, sold_date=date(2025, 2, 21), sale_price=23100, capital_gain_loss=138000)],
            [make_lot(2, ticker="VTI")],
            [
                make_tx(1, FundTransactionType.DEPOSIT, 1000000, date(2025, 1, 2)),
                make_tx(2, FundTransactionType.DIVIDEND, 10000, date(2025, 3, 10)),
            ],
        )

        assert summary.options_pnl == -4000
        assert summary.position_gains == 138000
        assert summary.manual_stock_gains == 0
        assert summary.total_pnl == -4000 + 138000 + 10000
        assert summary.rate_of_return == pytest.approx(144000 / 1000000 * 100)
        assert summary.closed_trades_count == 1
        assert summary.closed_stock_positions == 1

    def test_no_deposits_means_zero_return(self, march_losing_close) -> None:
        summary = portfolio_summary([march_losing_close], [], [], [])
        assert summary.rate_of_return == 0.0


class TestTradeStatistics:
    def test_empty(self) -> None:
        stats = trade_statistics([])

        assert stats.total_pnl == 0
        assert stats.win_rate == 0.0
        assert stats.avg_roi == 0.0
        assert stats.best_ticker is None
        assert stats.status_counts == {s.value: 0 for s in TradeStatus}

    def test_figures(self, march_losing_close) -> None:
        trades = [
            make_trade(10, status=TradeStatus.EXPIRED, closed_date=date(2025, 1, 17)),
            march_losing_close,
            make_trade(11, ticker="NVDA", status=TradeStatus.EXPIRED, closed_date=date(2025, 1, 17)),
            make_trade(12, ticker="AMD"),
        ]
        positions = [
            make_lot(1, sold_date=date(2025, 2, 21), sale_price=23100, capital_gain_loss=138000),
            make_lot(2),
        ]

        stats = trade_statistics(trades, positions)

        assert stats.total_pnl == 28000 - 4000 + 28000 + 28000
        assert stats.total_premium_collected == 28000 * 3 + 10000
        assert stats.capital_at_risk == 2200000
        assert stats.open_trades_count == 1
        assert stats.completed_trades_count == 3
        assert stats.win_rate == pytest.approx(66.67, abs=0.01)
        assert stats.monthly_pnl == {"2025-03": -4000, "2025-01": 56000}
        assert stats.best_ticker == ("AMD", 28000)
        assert stats.realized_capital_gl == 138000
        assert stats.open_positions == 1
        assert stats.closed_positions == 1
        assert stats.total_pnl_with_capital_gains == stats.total_pnl + 138000

    def test_trade_roi(self) -> None:
        assert trade_roi(make_trade(1)) == pytest.approx(280 * 100 / 22000)


class TestUnrealizedGains:
    def test_priced_and_missing(self) -> None:
        result = unrealized_gains(
            [
                make_lot(1, ticker="VTI", shares=10, cost_basis=25000),
                make_lot(2),
                make_lot(3, ticker="MSFT", sold_date=date(2025, 2, 1)),
            ],
            {"VTI": 26000},
        )

        assert result.total == 10000
        assert result.priced_lots == 1
        assert result.missing_tickers == ["AAPL"]
