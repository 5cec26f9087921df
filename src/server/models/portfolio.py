"""Pydantic models for portfolio totals and the monthly breakdown."""

from pydantic import Field

from src.server.models.common import CamelModel, dollars
from src.server.services.portfolio_service import PortfolioStats
from src.wheel.aggregation import MonthlyRow


class PortfolioStatsResponse(CamelModel):
    """Portfolio totals in dollars.

    Attributes:
        net_deposited: Deposits less withdrawals
        cash_balance: Deposits - withdrawals - fees + dividends + interest
        total_pnl: Options P/L + stock gains + dividends + interest - fees
        rate_of_return: Total P/L as a percentage of net deposits
        unrealized_gains: Open lots valued at cached prices
        unpriced_tickers: Open-lot tickers with no cached price
    """

    net_deposited: float
    total_deposits: float
    total_withdrawals: float
    cash_balance: float
    total_pnl: float = Field(..., alias="totalPnL")
    rate_of_return: float
    options_pnl: float = Field(..., alias="optionsPnL")
    stock_gains: float
    position_gains: float
    manual_stock_gains: float
    dividends: float
    interest: float
    fees: float
    closed_trades_count: int
    closed_stock_positions: int
    unrealized_gains: float
    unpriced_tickers: list[str]

    @classmethod
    def from_stats(cls, stats: PortfolioStats) -> "PortfolioStatsResponse":
        summary = stats.summary
        cash = summary.cash
        return cls(
            net_deposited=dollars(cash.net_deposited),
            total_deposits=dollars(cash.deposits),
            total_withdrawals=dollars(cash.withdrawals),
            cash_balance=dollars(cash.cash_balance),
            total_pnl=dollars(summary.total_pnl),
            rate_of_return=summary.rate_of_return,
            options_pnl=dollars(summary.options_pnl),
            stock_gains=dollars(summary.stock_gains),
            position_gains=dollars(summary.position_gains),
            manual_stock_gains=dollars(summary.manual_stock_gains),
            dividends=dollars(cash.dividends),
            interest=dollars(cash.interest),
            fees=dollars(cash.fees),
            closed_trades_count=summary.closed_trades_count,
            closed_stock_positions=summary.closed_stock_positions,
            unrealized_gains=dollars(stats.unrealized.total),
            unpriced_tickers=stats.unrealized.missing_tickers,
        )


class MonthlyRowResponse(CamelModel):
    """One month of realized results by source, in dollars."""

    month: str
    options: float
    stocks: float
    income: float

    @classmethod
    def from_row(cls, row: MonthlyRow) -> "MonthlyRowResponse":
        return cls(
            month=row.month,
            options=dollars(row.options),
            stocks=dollars(row.stocks),
            income=dollars(row.income),
        )
