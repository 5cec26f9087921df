"""Read-side service for trade performance statistics."""

from typing import Optional

from sqlalchemy.orm import Session

from src.server.repositories.position import PositionRepository
from src.server.repositories.trade import TradeRepository
from src.wheel.aggregation import TradeStatistics, trade_statistics


class StatsService:
    """Computes trade statistics from the current data."""

    def __init__(self, db: Session):
        self.db = db
        self.trade_repo = TradeRepository(db)
        self.position_repo = PositionRepository(db)

    def trade_statistics(self, account_id: Optional[int] = None) -> TradeStatistics:
        trades = [t.to_record() for t in self.trade_repo.list_all(account_id=account_id)]
        positions = [p.to_record() for p in self.position_repo.list_positions(account_id=account_id)]
        return trade_statistics(trades, positions)
