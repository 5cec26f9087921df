"""Pydantic models for trade statistics and roll chains."""

from typing import Optional

from pydantic import Field

from src.server.models.common import CamelModel, dollars
from src.server.models.trade import TradeResponse
from src.wheel.aggregation import TradeStatistics
from src.wheel.models import Chain
from src.wheel.state import TradeStatus


class TickerPnL(CamelModel):
    ticker: str
    pnl: float


class TradeStatsResponse(CamelModel):
    """Trade performance figures, money in dollars.

    Attributes:
        total_pnl: P/L over every trade as stored (Rolled and Open included)
        win_rate: Winning chains as a percentage of resolved chains
        avg_roi: Mean per-trade ROI over resolved trades, in percent
        monthly_stats: Month -> P/L of resolved trades, newest first
        ticker_stats: Ticker -> P/L over every trade, best first
    """

    total_pnl: float = Field(..., alias="totalPnL")
    total_premium_collected: float
    total_trades: int
    open_trades_count: int
    completed_trades_count: int
    capital_at_risk: float
    winning_chains: int
    total_chains: int
    resolved_chains: int
    win_rate: float
    avg_roi: float
    total_assigned: int
    total_expired: int
    total_rolled: int
    status_counts: dict[str, int]
    monthly_stats: dict[str, float]
    ticker_stats: dict[str, float]
    best_ticker: Optional[TickerPnL] = None
    realized_capital_gl: float = Field(..., alias="realizedCapitalGL")
    open_positions: int
    closed_positions: int
    total_pnl_with_capital_gains: float = Field(..., alias="totalPnLWithCapitalGains")

    @classmethod
    def from_stats(cls, stats: TradeStatistics) -> "TradeStatsResponse":
        best = None
        if stats.best_ticker is not None:
            best = TickerPnL(ticker=stats.best_ticker[0], pnl=dollars(stats.best_ticker[1]))
        return cls(
            total_pnl=dollars(stats.total_pnl),
            total_premium_collected=dollars(stats.total_premium_collected),
            total_trades=stats.total_trades,
            open_trades_count=stats.open_trades_count,
            completed_trades_count=stats.completed_trades_count,
            capital_at_risk=dollars(stats.capital_at_risk),
            winning_chains=stats.winning_chains,
            total_chains=stats.total_chains,
            resolved_chains=stats.resolved_chains,
            win_rate=stats.win_rate,
            avg_roi=stats.avg_roi,
            total_assigned=stats.status_counts.get(TradeStatus.ASSIGNED.value, 0),
            total_expired=stats.status_counts.get(TradeStatus.EXPIRED.value, 0),
            total_rolled=stats.status_counts.get(TradeStatus.ROLLED.value, 0),
            status_counts=stats.status_counts,
            monthly_stats={k: dollars(v) for k, v in stats.monthly_pnl.items()},
            ticker_stats={k: dollars(v) for k, v in stats.ticker_pnl.items()},
            best_ticker=best,
            realized_capital_gl=dollars(stats.realized_capital_gl),
            open_positions=stats.open_positions,
            closed_positions=stats.closed_positions,
            total_pnl_with_capital_gains=dollars(stats.total_pnl_with_capital_gains),
        )


class ChainResponse(CamelModel):
    """A roll chain, root first."""

    root_id: int
    ticker: str
    tickers: list[str]
    trade_ids: list[int]
    pnl: float
    collateral: float
    roi: float
    final_status: str
    resolved: bool
    winning: bool
    trades: list[TradeResponse] = Field(default_factory=list)

    @classmethod
    def from_chain(cls, chain: Chain) -> "ChainResponse":
        return cls(
            root_id=chain.root_id,
            ticker=chain.ticker,
            tickers=chain.tickers,
            trade_ids=chain.trade_ids,
            pnl=dollars(chain.pnl),
            collateral=dollars(chain.collateral),
            roi=chain.roi,
            final_status=chain.final_status.value,
            resolved=chain.resolved,
            winning=chain.winning,
            trades=[TradeResponse.from_model(t) for t in chain.trades],
        )
