"""Service layer for manually entered stock lots."""

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from src.server.database.models.stock import Stock
from src.server.database.session import atomic
from src.server.repositories.account import AccountRepository
from src.server.repositories.stock import StockRepository
from src.server.services.conversions import LOT_DATES, LOT_MONEY, to_columns
from src.server.services.position_service import check_lot_status, sale_columns
from src.wheel.exceptions import NotFoundError, ValidationFailed
from src.wheel.validation import validate_stock

logger = logging.getLogger(__name__)

STOCK_FIELDS = (
    "account_id",
    "ticker",
    "shares",
    "cost_basis",
    "acquired_date",
    "sold_date",
    "sale_price",
    "notes",
)


class StockService:
    """Service for manual stock lots.

    Attributes:
        db: SQLAlchemy database session
        stock_repo: Repository for stocks
        account_repo: Repository for account lookups
    """

    def __init__(self, db: Session):
        self.db = db
        self.stock_repo = StockRepository(db)
        self.account_repo = AccountRepository(db)

    def get_stock(self, stock_id: int) -> Stock:
        stock = self.stock_repo.get(stock_id)
        if stock is None:
            raise NotFoundError("Stock", stock_id)
        return stock

    def list_stocks(
        self, account_id: Optional[int] = None, status: Optional[str] = None
    ) -> list[Stock]:
        check_lot_status(status)
        return self.stock_repo.list_stocks(account_id=account_id, status=status)

    def validate(self, data: dict[str, Any], is_update: bool = False) -> list[str]:
        errors = validate_stock(data, is_update=is_update)
        account_id = data.get("account_id")
        if account_id is not None and self.account_repo.get(account_id) is None:
            errors.append(f"account_id {account_id} does not exist")
        return errors

    def insert_stock(self, data: dict[str, Any]) -> Stock:
        """Insert a validated stock inside the caller's transaction."""
        columns = to_columns(
            {k: v for k, v in data.items() if k in STOCK_FIELDS},
            money=LOT_MONEY,
            dates=LOT_DATES,
        )
        columns["shares"] = int(columns["shares"])
        return self.stock_repo.create(**sale_columns(None, columns))

    def create_stock(self, data: dict[str, Any]) -> Stock:
        """Record a stock lot.

        Raises:
            ValidationFailed: If any field rule is violated
        """
        errors = self.validate(data)
        if errors:
            raise ValidationFailed(errors)

        with atomic(self.db):
            stock = self.insert_stock(data)
        logger.info(f"Created stock {stock.id}: {stock.shares} {stock.ticker}")
        return stock

    def update_stock(self, stock_id: int, data: dict[str, Any]) -> Stock:
        """Edit, sell or reopen a stock lot; the gain is recomputed at write time.

        Raises:
            NotFoundError: If the stock does not exist
            ValidationFailed: If any present field is invalid
        """
        stock = self.get_stock(stock_id)
        data = {k: v for k, v in data.items() if k in STOCK_FIELDS}
        errors = self.validate(data, is_update=True)
        if errors:
            raise ValidationFailed(errors)

        columns = sale_columns(stock, to_columns(data, money=LOT_MONEY, dates=LOT_DATES))
        with atomic(self.db):
            self.stock_repo.update(stock, columns)
        self.db.refresh(stock)
        logger.info(f"Updated stock {stock.id}")
        return stock

    def delete_stock(self, stock_id: int) -> None:
        stock = self.get_stock(stock_id)
        with atomic(self.db):
            self.stock_repo.delete(stock)
        logger.info(f"Deleted stock {stock_id}")
