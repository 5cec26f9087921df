"""
Portfolio and trade performance aggregation.

Read-side calculations over trades, share lots and cash flows. All inputs
and outputs are integer cents; every function degrades to zeros or empty
collections on missing data instead of raising.
"""

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .chains import build_chains, chain_win_rate
from .models import FundTransactionRecord, ShareLot, TradeRecord
from .state import FundTransactionType, TradeStatus, is_realized, is_resolved

logger = logging.getLogger(__name__)


def month_key(day: date) -> str:
    """Calendar month bucket, e.g. ``2025-03``."""
    return day.strftime("%Y-%m")


@dataclass
class DateWindow:
    """Inclusive date range; an open end matches everything on that side."""

    start: Optional[date] = None
    end: Optional[date] = None

    def contains(self, day: Optional[date]) -> bool:
        if day is None:
            return False
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True


def _in_window(window: Optional[DateWindow], day: Optional[date]) -> bool:
    return window is None or window.contains(day)


@dataclass
class CashTotals:
    """Fund transaction totals per type, in cents."""

    deposits: int = 0
    withdrawals: int = 0
    dividends: int = 0
    interest: int = 0
    fees: int = 0

    @property
    def net_deposited(self) -> int:
        return self.deposits - self.withdrawals

    @property
    def cash_balance(self) -> int:
        return self.deposits - self.withdrawals - self.fees + self.dividends + self.interest

    @property
    def income(self) -> int:
        """Dividends plus interest, less fees."""
        return self.dividends + self.interest - self.fees


def cash_totals(
    fund_transactions: Iterable[FundTransactionRecord],
    window: Optional[DateWindow] = None,
) -> CashTotals:
    """Sum each fund transaction type independently."""
    totals = CashTotals()
    for tx in fund_transactions:
        if not _in_window(window, tx.date):
            continue
        tx_type = FundTransactionType(tx.type)
        if tx_type is FundTransactionType.DEPOSIT:
            totals.deposits += tx.amount
        elif tx_type is FundTransactionType.WITHDRAWAL:
            totals.withdrawals += tx.amount
        elif tx_type is FundTransactionType.DIVIDEND:
            totals.dividends += tx.amount
        elif tx_type is FundTransactionType.INTEREST:
            totals.interest += tx.amount
        elif tx_type is FundTransactionType.FEE:
            totals.fees += tx.amount
        else:
            raise ValueError(f"Unhandled fund transaction type: {tx_type!r}")
    return totals


def realized_lot_gains(
    lots: Iterable[ShareLot], window: Optional[DateWindow] = None
) -> int:
    """Sum of stored capital gains over sold lots."""
    return sum(
        lot.capital_gain_loss or 0
        for lot in lots
        if lot.sold_date is not None and _in_window(window, lot.sold_date)
    )


@dataclass
class PortfolioSummary:
    """Portfolio-level totals, in cents except the rate of return."""

    cash: CashTotals
    options_pnl: int = 0
    position_gains: int = 0
    manual_stock_gains: int = 0
    closed_trades_count: int = 0
    closed_stock_positions: int = 0

    @property
    def stock_gains(self) -> int:
        return self.position_gains + self.manual_stock_gains

    @property
    def total_pnl(self) -> int:
        return self.options_pnl + self.stock_gains + self.cash.income

    @property
    def rate_of_return(self) -> float:
        """Total P/L as a percentage of net deposits (0 unless deposits are positive)."""
        net = self.cash.net_deposited
        if net <= 0:
            return 0.0
        return self.total_pnl / net * 100


def portfolio_summary(
    trades: Iterable[TradeRecord],
    positions: Iterable[ShareLot],
    stocks: Iterable[ShareLot],
    fund_transactions: Iterable[FundTransactionRecord],
    window: Optional[DateWindow] = None,
) -> PortfolioSummary:
    """
    Combine options P/L, realized stock gains and cash flows.

    Args:
        trades: Option trades
        positions: Lots created by assignments
        stocks: Manually entered lots
        fund_transactions: Cash-flow journal entries
        window: Optional date range, applied with the same dates the
            monthly breakdown buckets by

    Returns:
        PortfolioSummary with every total filled (zeros when empty)
    """
    trades = list(trades)
    positions = list(positions)
    stocks = list(stocks)

    realized = [
        t for t in trades if is_realized(t.status) and _in_window(window, t.pnl_date)
    ]
    closed_positions = [
        p for p in positions if p.sold_date is not None and _in_window(window, p.sold_date)
    ]
    closed_stocks = [
        s for s in stocks if s.sold_date is not None and _in_window(window, s.sold_date)
    ]

    return PortfolioSummary(
        cash=cash_totals(fund_transactions, window),
        options_pnl=sum(t.pnl for t in realized),
        position_gains=realized_lot_gains(closed_positions),
        manual_stock_gains=realized_lot_gains(closed_stocks),
        closed_trades_count=len(realized),
        closed_stock_positions=len(closed_positions) + len(closed_stocks),
    )


@dataclass
class MonthlyRow:
    """One month of realized results by source, in cents."""

    month: str
    options: int = 0
    stocks: int = 0
    income: int = 0


def monthly_breakdown(
    trades: Iterable[TradeRecord],
    positions: Iterable[ShareLot],
    stocks: Iterable[ShareLot],
    fund_transactions: Iterable[FundTransactionRecord],
    window: Optional[DateWindow] = None,
) -> list[MonthlyRow]:
    """
    Group realized results by calendar month.

    Options book under their close date (open date when there is none),
    lot gains under the sale date and income under the transaction date.
    Deposits and withdrawals are not income and are left out. Months with
    no activity in a source get a zero for it.

    Returns:
        Rows sorted by month ascending
    """
    rows: dict[str, MonthlyRow] = {}

    def row_for(day: date) -> MonthlyRow:
        key = month_key(day)
        if key not in rows:
            rows[key] = MonthlyRow(month=key)
        return rows[key]

    for trade in trades:
        if is_realized(trade.status) and _in_window(window, trade.pnl_date):
            row_for(trade.pnl_date).options += trade.pnl

    for lot in [*positions, *stocks]:
        if lot.sold_date is not None and _in_window(window, lot.sold_date):
            row_for(lot.sold_date).stocks += lot.capital_gain_loss or 0

    for tx in fund_transactions:
        if not _in_window(window, tx.date):
            continue
        tx_type = FundTransactionType(tx.type)
        if tx_type in (FundTransactionType.DIVIDEND, FundTransactionType.INTEREST):
            row_for(tx.date).income += tx.amount
        elif tx_type is FundTransactionType.FEE:
            row_for(tx.date).income -= tx.amount

    return [rows[key] for key in sorted(rows)]


@dataclass
class TradeStatistics:
    """Trade-level performance figures, in cents unless noted."""

    total_pnl: int = 0
    total_premium_collected: int = 0
    total_trades: int = 0
    open_trades_count: int = 0
    completed_trades_count: int = 0
    capital_at_risk: int = 0
    total_chains: int = 0
    resolved_chains: int = 0
    winning_chains: int = 0
    win_rate: float = 0.0
    avg_roi: float = 0.0  # percent
    status_counts: dict[str, int] = field(default_factory=dict)
    monthly_pnl: dict[str, int] = field(default_factory=dict)
    ticker_pnl: dict[str, int] = field(default_factory=dict)
    best_ticker: Optional[tuple[str, int]] = None
    realized_capital_gl: int = 0
    open_positions: int = 0
    closed_positions: int = 0

    @property
    def total_pnl_with_capital_gains(self) -> int:
        return self.total_pnl + self.realized_capital_gl


def trade_roi(trade: TradeRecord) -> float:
    """Per-share premium kept as a percentage of strike (0 for a zero strike)."""
    if trade.strike <= 0 or trade.quantity <= 0:
        return 0.0
    return (trade.entry_price - trade.close_price) * 100 / trade.strike


def trade_statistics(
    trades: Iterable[TradeRecord], positions: Iterable[ShareLot] = ()
) -> TradeStatistics:
    """
    Summarize trade performance.

    ``total_pnl`` covers every trade as stored, including the interim P/L
    of Rolled trades and the premium of Open ones. Win rate, average ROI
    and monthly P/L only count resolved results, so a chain or trade
    ending in Rolled is excluded there.
    """
    trades = list(trades)
    stats = TradeStatistics(total_trades=len(trades))
    stats.status_counts = {s.value: 0 for s in TradeStatus}

    rois = []
    ticker_pnl: dict[str, int] = defaultdict(int)
    monthly: dict[str, int] = defaultdict(int)

    for trade in trades:
        status = TradeStatus(trade.status)
        stats.status_counts[status.value] += 1
        stats.total_pnl += trade.pnl
        stats.total_premium_collected += trade.premium
        ticker_pnl[trade.ticker] += trade.pnl

        if status is TradeStatus.OPEN:
            stats.capital_at_risk += trade.collateral
        if is_resolved(status):
            rois.append(trade_roi(trade))
            monthly[month_key(trade.pnl_date)] += trade.pnl

    stats.open_trades_count = stats.status_counts[TradeStatus.OPEN.value]
    stats.completed_trades_count = sum(
        stats.status_counts[s.value]
        for s in (TradeStatus.EXPIRED, TradeStatus.ASSIGNED, TradeStatus.CLOSED)
    )

    chain_stats = chain_win_rate(build_chains(trades))
    stats.total_chains = chain_stats.total_chains
    stats.resolved_chains = chain_stats.resolved_chains
    stats.winning_chains = chain_stats.winning_chains
    stats.win_rate = chain_stats.win_rate

    stats.avg_roi = sum(rois) / len(rois) if rois else 0.0
    stats.monthly_pnl = {k: monthly[k] for k in sorted(monthly, reverse=True)}
    stats.ticker_pnl = dict(sorted(ticker_pnl.items(), key=lambda kv: (-kv[1], kv[0])))
    if stats.ticker_pnl:
        stats.best_ticker = next(iter(stats.ticker_pnl.items()))

    for lot in positions:
        if lot.sold_date is not None:
            stats.closed_positions += 1
            stats.realized_capital_gl += lot.capital_gain_loss or 0
        else:
            stats.open_positions += 1

    return stats


@dataclass
class UnrealizedGains:
    """Paper gains on open lots at the latest known prices, in cents."""

    total: int = 0
    priced_lots: int = 0
    missing_tickers: list[str] = field(default_factory=list)


def unrealized_gains(
    open_lots: Iterable[ShareLot], prices: Mapping[str, int]
) -> UnrealizedGains:
    """
    Sum (price - basis) x shares over open lots with a known price.

    Lots whose ticker has no price are skipped and their tickers listed.
    """
    result = UnrealizedGains()
    missing = set()
    for lot in open_lots:
        if lot.sold_date is not None:
            continue
        price = prices.get(lot.ticker)
        if price is None:
            missing.add(lot.ticker)
            continue
        result.total += (price - lot.cost_basis) * lot.shares
        result.priced_lots += 1
    result.missing_tickers = sorted(missing)
    return result
