"""Service layer for share positions.

Manual position entry, sale and reopening, plus the positions summary.
Assignment-driven changes live in the linkage service.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from sqlalchemy.orm import Session

from src.server.database.models.position import Position
from src.server.database.session import atomic
from src.server.repositories.account import AccountRepository
from src.server.repositories.position import PositionRepository
from src.server.services.conversions import LOT_DATES, LOT_MONEY, to_columns
from src.wheel.exceptions import NotFoundError, ValidationFailed
from src.wheel.linkage import capital_gain
from src.wheel.validation import validate_position

logger = logging.getLogger(__name__)

POSITION_FIELDS = (
    "ticker",
    "shares",
    "cost_basis",
    "acquired_date",
    "acquired_from_trade_id",
    "sold_date",
    "sale_price",
    "sold_via_trade_id",
    "account_id",
)

LOT_STATUSES = ("all", "open", "closed")


def sale_columns(lot: Any, columns: dict[str, Any]) -> dict[str, Any]:
    """Recompute the stored gain when a lot is sold, edited or reopened.

    A sold lot (date and price both set) stores its gain in cents;
    clearing both reopens the lot and clears the gain.
    """
    touched = ("sold_date", "sale_price", "shares", "cost_basis")
    if not any(name in columns for name in touched):
        return columns

    def merged(name: str) -> Any:
        return columns[name] if name in columns else getattr(lot, name, None)

    sale_price = merged("sale_price")
    if merged("sold_date") is None or sale_price is None:
        if "sold_date" in columns or "sale_price" in columns:
            columns["capital_gain_loss"] = None
            if hasattr(lot, "sold_via_trade_id") and "sold_via_trade_id" not in columns:
                columns["sold_via_trade_id"] = None
        return columns

    columns["capital_gain_loss"] = capital_gain(sale_price, merged("cost_basis"), merged("shares"))
    return columns


def check_lot_status(status: Optional[str]) -> None:
    if status is not None and status not in LOT_STATUSES:
        raise ValidationFailed([f"status must be one of: {', '.join(LOT_STATUSES)}"])


@dataclass
class PositionSummary:
    """Realized gains and open position listing, in cents."""

    realized_gain_loss: int = 0
    closed_positions: int = 0
    open_positions: int = 0
    open_positions_list: list[Position] = field(default_factory=list)


class PositionService:
    """Service for manual position management.

    Attributes:
        db: SQLAlchemy database session
        position_repo: Repository for positions
        account_repo: Repository for account lookups
    """

    def __init__(self, db: Session):
        self.db = db
        self.position_repo = PositionRepository(db)
        self.account_repo = AccountRepository(db)

    def get_position(self, position_id: int) -> Position:
        position = self.position_repo.get(position_id)
        if position is None:
            raise NotFoundError("Position", position_id)
        return position

    def list_positions(
        self, status: Optional[str] = None, account_id: Optional[int] = None
    ) -> list[Position]:
        check_lot_status(status)
        return self.position_repo.list_positions(status=status, account_id=account_id)

    def create_position(self, data: dict[str, Any]) -> Position:
        """Enter a position by hand.

        Raises:
            ValidationFailed: If any field rule is violated
        """
        data = {k: v for k, v in data.items() if k in POSITION_FIELDS}
        errors = validate_position(data)
        account_id = data.get("account_id")
        if account_id is not None and self.account_repo.get(account_id) is None:
            errors.append(f"account_id {account_id} does not exist")
        if errors:
            raise ValidationFailed(errors)

        columns = to_columns(data, money=LOT_MONEY, dates=LOT_DATES)
        columns["shares"] = int(columns["shares"])
        with atomic(self.db):
            position = self.position_repo.create(**sale_columns(None, columns))

        logger.info(f"Created position {position.id}: {position.shares} {position.ticker}")
        return position

    def update_position(self, position_id: int, data: dict[str, Any]) -> Position:
        """Sell (sold_date + sale_price) or reopen (both null) a position.

        Raises:
            NotFoundError: If the position does not exist
            ValidationFailed: If the sale fields are inconsistent
        """
        position = self.get_position(position_id)
        data = {k: v for k, v in data.items() if k in POSITION_FIELDS and k != "account_id"}
        errors = validate_position(data, is_update=True)
        if errors:
            raise ValidationFailed(errors)

        columns = sale_columns(position, to_columns(data, money=LOT_MONEY, dates=LOT_DATES))
        with atomic(self.db):
            self.position_repo.update(position, columns)

        self.db.refresh(position)
        state = "reopened" if position.sold_date is None else "closed"
        logger.info(f"Position {position.id} {state}")
        return position

    def delete_position(self, position_id: int) -> None:
        position = self.get_position(position_id)
        with atomic(self.db):
            self.position_repo.delete(position)
        logger.info(f"Deleted position {position_id}")

    def summary(self, account_id: Optional[int] = None) -> PositionSummary:
        """Realized gain over closed positions plus the open list."""
        positions = self.position_repo.list_positions(account_id=account_id)
        result = PositionSummary()
        for position in positions:
            if position.sold_date is None:
                result.open_positions += 1
                result.open_positions_list.append(position)
            else:
                result.closed_positions += 1
                result.realized_gain_loss += position.capital_gain_loss or 0
        return result
