"""Repository for manual stock lot data access."""

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from src.server.database.models.stock import Stock

logger = logging.getLogger(__name__)


class StockRepository:
    """Repository for manual stock lots.

    Attributes:
        db: SQLAlchemy database session
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, **fields: Any) -> Stock:
        stock = Stock(**fields)
        self.db.add(stock)
        self.db.flush()
        return stock

    def get(self, stock_id: int) -> Optional[Stock]:
        return self.db.query(Stock).filter(Stock.id == stock_id).first()

    def update(self, stock: Stock, fields: dict[str, Any]) -> Stock:
        for name, value in fields.items():
            setattr(stock, name, value)
        self.db.flush()
        return stock

    def delete(self, stock: Stock) -> None:
        self.db.delete(stock)
        self.db.flush()

    def list_stocks(
        self,
        account_id: Optional[int] = None,
        status: Optional[str] = None,
        ticker: Optional[str] = None,
    ) -> list[Stock]:
        """List stock lots, newest acquisitions first."""
        query = self.db.query(Stock)
        if account_id is not None:
            query = query.filter(Stock.account_id == account_id)
        if status == "open":
            query = query.filter(Stock.sold_date.is_(None))
        elif status == "closed":
            query = query.filter(Stock.sold_date.isnot(None))
        if ticker:
            query = query.filter(Stock.ticker == ticker.upper())
        return query.order_by(Stock.acquired_date.desc(), Stock.id.desc()).all()

    def count_by_account(self, account_id: int) -> int:
        return self.db.query(Stock).filter(Stock.account_id == account_id).count()
