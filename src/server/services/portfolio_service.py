"""
Read-side service for portfolio totals.

Combines options P/L, realized stock gains and the cash-flow journal,
and values open lots at the cached share prices.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from src.server.repositories.fund_transaction import FundTransactionRepository
from src.server.repositories.position import PositionRepository
from src.server.repositories.price_cache import PriceCacheRepository
from src.server.repositories.stock import StockRepository
from src.server.repositories.trade import TradeRepository
from src.wheel.aggregation import (
    DateWindow,
    MonthlyRow,
    PortfolioSummary,
    UnrealizedGains,
    monthly_breakdown,
    portfolio_summary,
    unrealized_gains,
)
from src.wheel.exceptions import ValidationFailed

logger = logging.getLogger(__name__)


@dataclass
class PortfolioStats:
    """Portfolio summary plus paper gains on open lots."""

    summary: PortfolioSummary
    unrealized: UnrealizedGains


def date_window(start: Optional[date], end: Optional[date]) -> Optional[DateWindow]:
    if start is None and end is None:
        return None
    if start is not None and end is not None and end < start:
        raise ValidationFailed(["end_date must be on or after start_date"])
    return DateWindow(start=start, end=end)


class PortfolioService:
    """Portfolio figures over trades, positions, stocks and cash flows."""

    def __init__(self, db: Session):
        self.db = db
        self.trade_repo = TradeRepository(db)
        self.position_repo = PositionRepository(db)
        self.stock_repo = StockRepository(db)
        self.fund_repo = FundTransactionRepository(db)
        self.cache_repo = PriceCacheRepository(db)

    def _records(self, account_id: Optional[int]):
        trades = [t.to_record() for t in self.trade_repo.list_all(account_id=account_id)]
        positions = [p.to_record() for p in self.position_repo.list_positions(account_id=account_id)]
        stocks = [s.to_record() for s in self.stock_repo.list_stocks(account_id=account_id)]
        funds = [f.to_record() for f in self.fund_repo.list_transactions(account_id=account_id)]
        return trades, positions, stocks, funds

    def stats(
        self,
        account_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> PortfolioStats:
        """Portfolio totals for an account (or all), optionally in a date range."""
        window = date_window(start, end)
        trades, positions, stocks, funds = self._records(account_id)
        summary = portfolio_summary(trades, positions, stocks, funds, window=window)

        open_lots = [lot for lot in [*positions, *stocks] if lot.is_open]
        tickers = sorted({lot.ticker for lot in open_lots})
        prices = {t: row.price for t, row in self.cache_repo.get_many(tickers).items()}
        unrealized = unrealized_gains(open_lots, prices)
        if unrealized.missing_tickers:
            logger.debug(f"No cached price for {', '.join(unrealized.missing_tickers)}")
        return PortfolioStats(summary=summary, unrealized=unrealized)

    def monthly(
        self,
        account_id: Optional[int] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> list[MonthlyRow]:
        window = date_window(start, end)
        trades, positions, stocks, funds = self._records(account_id)
        return monthly_breakdown(trades, positions, stocks, funds, window=window)
