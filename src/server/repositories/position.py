"""Repository for share position data access.

Positions are written by the assignment linkage and by manual edits.
Writes only flush; the calling service owns the transaction.
"""

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from src.server.database.models.position import Position

logger = logging.getLogger(__name__)


class PositionRepository:
    """Repository for position data access.

    Attributes:
        db: SQLAlchemy database session
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, **fields: Any) -> Position:
        position = Position(**fields)
        self.db.add(position)
        self.db.flush()
        return position

    def get(self, position_id: int) -> Optional[Position]:
        return self.db.query(Position).filter(Position.id == position_id).first()

    def update(self, position: Position, fields: dict[str, Any]) -> Position:
        for name, value in fields.items():
            setattr(position, name, value)
        self.db.flush()
        return position

    def delete(self, position: Position) -> None:
        self.db.delete(position)
        self.db.flush()

    def list_positions(
        self,
        status: Optional[str] = None,
        account_id: Optional[int] = None,
        ticker: Optional[str] = None,
    ) -> list[Position]:
        """List positions, newest acquisitions first.

        Args:
            status: "open", "closed" or None/"all"
            account_id: Owning account
            ticker: Exact ticker

        Returns:
            List of positions
        """
        query = self.db.query(Position)
        if status == "open":
            query = query.filter(Position.sold_date.is_(None))
        elif status == "closed":
            query = query.filter(Position.sold_date.isnot(None))
        if account_id is not None:
            query = query.filter(Position.account_id == account_id)
        if ticker:
            query = query.filter(Position.ticker == ticker.upper())
        return query.order_by(Position.acquired_date.desc(), Position.id.desc()).all()

    def open_for_ticker(self, ticker: str, account_id: Optional[int] = None) -> list[Position]:
        """Open positions for a ticker, scoped to the account when one is given."""
        query = self.db.query(Position).filter(
            Position.ticker == ticker.upper(),
            Position.sold_date.is_(None),
        )
        if account_id is not None:
            query = query.filter(Position.account_id == account_id)
        return query.all()

    def acquired_from(self, trade_id: int) -> list[Position]:
        return self.db.query(Position).filter(Position.acquired_from_trade_id == trade_id).all()

    def sold_via(self, trade_id: int) -> list[Position]:
        return self.db.query(Position).filter(Position.sold_via_trade_id == trade_id).all()

    def count_by_account(self, account_id: int) -> int:
        return self.db.query(Position).filter(Position.account_id == account_id).count()
