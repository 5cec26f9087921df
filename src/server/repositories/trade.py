"""Repository for trade data access operations.

This module provides data access methods for trade CRUD operations,
filtered listing with pagination, and roll-chain link maintenance.
Writes only flush; the calling service owns the transaction.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import asc, desc
from sqlalchemy.orm import Query, Session

from src.server.database.models.trade import Trade
from src.wheel.state import TradeStatus

logger = logging.getLogger(__name__)

# API sort names mapped to columns
SORT_COLUMNS = {
    "openedDate": Trade.opened_date,
    "expirationDate": Trade.expiration_date,
    "closedDate": Trade.closed_date,
    "ticker": Trade.ticker,
    "strike": Trade.strike,
    "status": Trade.status,
    "entryPrice": Trade.entry_price,
    "closePrice": Trade.close_price,
    "type": Trade.type,
    "id": Trade.id,
}


@dataclass
class TradeFilters:
    """Filters for trade listings.

    Attributes:
        status: "all", "open", "closed" or an exact status value
        ticker: Exact ticker (upper-cased before matching)
        account_id: Owning account
    """

    status: Optional[str] = None
    ticker: Optional[str] = None
    account_id: Optional[int] = None


class TradeRepository:
    """Repository for trade data access.

    Attributes:
        db: SQLAlchemy database session
    """

    def __init__(self, db: Session):
        """Initialize trade repository.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db

    def create(self, **fields: Any) -> Trade:
        """Insert a trade and return it with its new id."""
        trade = Trade(**fields)
        self.db.add(trade)
        self.db.flush()
        return trade

    def get(self, trade_id: int) -> Optional[Trade]:
        """Get trade by ID.

        Returns:
            Trade instance if found, None otherwise
        """
        return self.db.query(Trade).filter(Trade.id == trade_id).first()

    def exists(self, trade_id: int) -> bool:
        return self.db.query(Trade.id).filter(Trade.id == trade_id).first() is not None

    def update(self, trade: Trade, fields: dict[str, Any]) -> Trade:
        """Apply field changes to a trade."""
        for name, value in fields.items():
            setattr(trade, name, value)
        self.db.flush()
        return trade

    def delete(self, trade: Trade) -> None:
        self.db.delete(trade)
        self.db.flush()

    def children_of(self, trade_id: int, exclude_id: Optional[int] = None) -> list[Trade]:
        """Trades whose parent is trade_id, lowest id first."""
        query = self.db.query(Trade).filter(Trade.parent_trade_id == trade_id)
        if exclude_id is not None:
            query = query.filter(Trade.id != exclude_id)
        return query.order_by(Trade.id).all()

    def unlink_children(self, trade_id: int) -> int:
        """Detach every child of a trade; returns the number unlinked."""
        count = (
            self.db.query(Trade)
            .filter(Trade.parent_trade_id == trade_id)
            .update({Trade.parent_trade_id: None}, synchronize_session="fetch")
        )
        self.db.flush()
        return count

    def ancestor_ids(self, trade_id: int) -> list[int]:
        """Walk parent links upward from a trade (the trade itself excluded)."""
        ids: list[int] = []
        seen = {trade_id}
        current = self.get(trade_id)
        while current is not None and current.parent_trade_id is not None:
            parent_id = current.parent_trade_id
            if parent_id in seen:
                break
            ids.append(parent_id)
            seen.add(parent_id)
            current = self.get(parent_id)
        return ids

    def find_duplicate(self, key: dict[str, Any]) -> Optional[Trade]:
        """Find an existing trade matching every field of an import key."""
        query = self.db.query(Trade)
        for name, value in key.items():
            column = getattr(Trade, name)
            query = query.filter(column.is_(None) if value is None else column == value)
        return query.order_by(Trade.id).first()

    def _filtered(self, filters: TradeFilters) -> Query:
        query = self.db.query(Trade)
        status = filters.status
        if status and status != "all":
            if status == "open":
                query = query.filter(Trade.status == TradeStatus.OPEN.value)
            elif status == "closed":
                query = query.filter(Trade.status != TradeStatus.OPEN.value)
            else:
                query = query.filter(Trade.status == status)
        if filters.ticker:
            query = query.filter(Trade.ticker == filters.ticker.upper())
        if filters.account_id is not None:
            query = query.filter(Trade.account_id == filters.account_id)
        return query

    def list_trades(
        self,
        filters: Optional[TradeFilters] = None,
        sort: str = "openedDate",
        order: str = "asc",
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> tuple[list[Trade], int]:
        """List trades with filtering, sorting and optional paging.

        Args:
            filters: Status/ticker/account filters
            sort: Key of SORT_COLUMNS (unknown keys fall back to openedDate)
            order: "asc" or "desc"
            offset: Rows to skip
            limit: Maximum rows to return (None for all)

        Returns:
            Tuple of (trades, total matching count)
        """
        query = self._filtered(filters or TradeFilters())
        total = query.count()

        column = SORT_COLUMNS.get(sort, Trade.opened_date)
        direction = asc if order == "asc" else desc
        query = query.order_by(direction(column), Trade.id.asc())

        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        return query.all(), total

    def list_all(self, account_id: Optional[int] = None, ticker: Optional[str] = None) -> list[Trade]:
        """All trades for read-side computations, ordered by id."""
        filters = TradeFilters(account_id=account_id, ticker=ticker)
        return self._filtered(filters).order_by(Trade.id).all()

    def count_by_account(self, account_id: int) -> int:
        return self.db.query(Trade).filter(Trade.account_id == account_id).count()
