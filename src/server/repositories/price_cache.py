"""Repository for cached quotes."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from src.server.database.models.price_cache import PriceCache

logger = logging.getLogger(__name__)


class PriceCacheRepository:
    """Repository for the last successful quote per ticker.

    Attributes:
        db: SQLAlchemy database session
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, ticker: str) -> Optional[PriceCache]:
        return self.db.query(PriceCache).filter(PriceCache.ticker == ticker.upper()).first()

    def get_many(self, tickers: list[str]) -> dict[str, PriceCache]:
        if not tickers:
            return {}
        rows = self.db.query(PriceCache).filter(
            PriceCache.ticker.in_([t.upper() for t in tickers])
        )
        return {row.ticker: row for row in rows}

    def upsert(
        self,
        ticker: str,
        price: int,
        change: Optional[int],
        change_percent: Optional[float],
        name: Optional[str],
    ) -> PriceCache:
        """Store a quote, replacing any previous one for the ticker."""
        row = self.get(ticker)
        if row is None:
            row = PriceCache(ticker=ticker.upper())
            self.db.add(row)
        row.price = price
        row.change = change
        row.change_percent = change_percent
        row.name = name
        row.updated_at = datetime.utcnow()
        self.db.flush()
        return row
