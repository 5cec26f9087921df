"""Service layer for trade lifecycle commands.

Each command validates its whole input before writing and runs as one
transaction: the trade change and every position side effect it
triggers are committed together or not at all.
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy.orm import Session

from src.server.database.models.trade import Trade
from src.server.database.session import atomic
from src.server.repositories.account import AccountRepository
from src.server.repositories.trade import SORT_COLUMNS, TradeFilters, TradeRepository
from src.server.services.conversions import TRADE_DATES, TRADE_MONEY, to_columns
from src.server.services.linkage_service import PositionLinkageService
from src.wheel.exceptions import InvalidTransitionError, NotFoundError, ValidationFailed
from src.wheel.money import to_cents
from src.wheel.state import TradeStatus, TradeType, can_transition
from src.wheel.validation import VALID_STATUSES, parse_date, premium_errors, validate_trade

logger = logging.getLogger(__name__)

TRADE_FIELDS = (
    "ticker",
    "type",
    "strike",
    "quantity",
    "delta",
    "entry_price",
    "close_price",
    "opened_date",
    "expiration_date",
    "closed_date",
    "status",
    "parent_trade_id",
    "notes",
    "account_id",
)

# Fields a roll's new trade takes from the original unless given
ROLL_INHERITED = ("ticker", "type", "quantity", "account_id")

STATUS_FILTERS = ["all", "open", "closed", *VALID_STATUSES]

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


@dataclass
class Page:
    """One page of a listing plus its pagination metadata."""

    items: list
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages

    @property
    def has_prev(self) -> bool:
        return self.page > 1

    def meta(self) -> dict[str, Any]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "totalPages": self.total_pages,
            "hasNext": self.has_next,
            "hasPrev": self.has_prev,
        }


def clamp_limit(limit: Optional[int]) -> int:
    """Page size clamped to 1..100 (default 50)."""
    if limit is None:
        return DEFAULT_PAGE_SIZE
    return min(MAX_PAGE_SIZE, max(1, int(limit)))


class TradeService:
    """Service layer for trade lifecycle commands.

    Attributes:
        db: SQLAlchemy database session
        trade_repo: Repository for trade operations
        account_repo: Repository for account lookups
        linkage: Position side-effect engine
    """

    def __init__(self, db: Session):
        """Initialize trade service.

        Args:
            db: SQLAlchemy database session
        """
        self.db = db
        self.trade_repo = TradeRepository(db)
        self.account_repo = AccountRepository(db)
        self.linkage = PositionLinkageService(db)

    def get_trade(self, trade_id: int) -> Trade:
        """Get a trade or raise NotFoundError."""
        trade = self.trade_repo.get(trade_id)
        if trade is None:
            raise NotFoundError("Trade", trade_id)
        return trade

    def list_trades(
        self,
        filters: Optional[TradeFilters] = None,
        sort: str = "openedDate",
        order: str = "asc",
        page: int = 1,
        limit: Optional[int] = None,
    ) -> Page:
        """List trades with filtering, whitelisted sorting and paging.

        Raises:
            ValidationFailed: If the status filter or sort key is unknown
        """
        filters = filters or TradeFilters()
        errors = []
        if filters.status and filters.status not in STATUS_FILTERS:
            errors.append(f"status must be one of: {', '.join(STATUS_FILTERS)}")
        if sort not in SORT_COLUMNS:
            errors.append(f"sortBy must be one of: {', '.join(SORT_COLUMNS)}")
        if errors:
            raise ValidationFailed(errors)

        page = max(1, int(page or 1))
        limit = clamp_limit(limit)
        trades, total = self.trade_repo.list_trades(
            filters,
            sort=sort,
            order="desc" if str(order).lower() == "desc" else "asc",
            offset=(page - 1) * limit,
            limit=limit,
        )
        return Page(items=trades, page=page, limit=limit, total=total)

    def create_trade(self, data: dict[str, Any]) -> Trade:
        """Create a trade.

        Defaults quantity to 1, close price to 0 and status to Open. A CC
        created without a parent is linked to the chain that produced the
        shares it is written against. A trade created already Assigned
        fires its assignment side effect.

        Args:
            data: Trade fields in dollars and YYYY-MM-DD dates

        Returns:
            Created trade

        Raises:
            ValidationFailed: If any field rule is violated
        """
        errors = validate_trade(data)
        if errors:
            raise ValidationFailed(errors)

        with atomic(self.db):
            trade = self.insert_trade(self.trade_columns(data))
        self.db.refresh(trade)
        return trade

    def insert_trade(
        self, columns: dict[str, Any], auto_link: bool = True, apply_assignment: bool = True
    ) -> Trade:
        """Insert a converted trade inside the caller's transaction.

        Raises:
            ValidationFailed: If the parent or account reference is invalid
        """
        errors = self._reference_errors(columns)
        if errors:
            raise ValidationFailed(errors)

        if (
            auto_link
            and columns.get("parent_trade_id") is None
            and columns["type"] == TradeType.CC.value
        ):
            columns["parent_trade_id"] = self.linkage.auto_link_parent(
                columns["ticker"], columns.get("account_id")
            )

        trade = self.trade_repo.create(**columns)
        logger.info(
            f"Created trade {trade.id}: {trade.ticker} {trade.type} "
            f"x{trade.quantity} status={trade.status}"
        )

        if apply_assignment and trade.status == TradeStatus.ASSIGNED.value:
            self.linkage.apply_assignment(trade)
        return trade

    def update_trade(self, trade_id: int, data: dict[str, Any]) -> Trade:
        """Apply a partial update.

        Only a change into Assigned (from anything else) fires the
        assignment side effect. Status edits outside the forward state
        machine are accepted as corrections and logged.

        Raises:
            NotFoundError: If the trade does not exist
            ValidationFailed: If a present field, the merged dates or the
                parent link is invalid
        """
        trade = self.get_trade(trade_id)

        data = {k: v for k, v in data.items() if k in TRADE_FIELDS and k != "account_id"}
        errors = validate_trade(data, is_update=True)
        if not errors:
            opened = parse_date(data["opened_date"]) if "opened_date" in data else trade.opened_date
            expiration = (
                parse_date(data["expiration_date"])
                if "expiration_date" in data
                else trade.expiration_date
            )
            if opened and expiration and opened > expiration:
                errors.append("expiration_date must be on or after opened_date")
        if errors:
            raise ValidationFailed(errors)

        columns = to_columns(data, money=TRADE_MONEY, dates=TRADE_DATES)
        for name in ("quantity", "close_price", "status", "type", "ticker", "strike",
                     "entry_price", "opened_date", "expiration_date"):
            if name in columns and columns[name] is None:
                del columns[name]

        if columns.get("type", trade.type) == TradeType.CSP.value:
            errors = premium_errors(
                columns.get("strike", trade.strike),
                columns.get("entry_price", trade.entry_price),
            )
            if errors:
                raise ValidationFailed(errors)

        new_parent = columns.get("parent_trade_id")
        if new_parent is not None and new_parent != trade.parent_trade_id:
            errors = self._parent_errors(new_parent, child_id=trade.id)
            if errors:
                raise ValidationFailed(errors)

        previous = trade.status
        new_status = columns.get("status", previous)
        if new_status != previous and not can_transition(TradeStatus(previous), TradeStatus(new_status)):
            logger.warning(f"Trade {trade.id} status corrected {previous} -> {new_status}")

        with atomic(self.db):
            self.trade_repo.update(trade, columns)
            if previous != TradeStatus.ASSIGNED.value and new_status == TradeStatus.ASSIGNED.value:
                self.linkage.apply_assignment(trade)

        self.db.refresh(trade)
        logger.info(f"Updated trade {trade.id}: {sorted(columns)}")
        return trade

    def roll_trade(
        self, original_id: int, close_price: Any, new_trade: dict[str, Any]
    ) -> tuple[Trade, Trade]:
        """Close a trade as Rolled and open its successor atomically.

        The original gets the close price, a closed date equal to the new
        trade's opened date, and status Rolled. The new trade takes the
        original's ticker, type, quantity and account unless given.

        Returns:
            Tuple of (original trade, new trade)

        Raises:
            NotFoundError: If the original trade does not exist
            ValidationFailed: If the close price or new trade is invalid,
                or the original already has a successor
            InvalidTransitionError: If the original is not Open
        """
        original = self.get_trade(original_id)

        payload = {k: v for k, v in new_trade.items() if k in TRADE_FIELDS}
        payload.pop("parent_trade_id", None)
        for name in ROLL_INHERITED:
            if payload.get(name) is None:
                payload[name] = getattr(original, name)

        errors = []
        if close_price is None:
            errors.append("close_price is required")
        errors.extend(validate_trade({"close_price": close_price}, is_update=True))
        errors.extend(validate_trade(payload))
        if errors:
            raise ValidationFailed(errors)

        if not can_transition(TradeStatus(original.status), TradeStatus.ROLLED):
            raise InvalidTransitionError(
                f"Trade {original.id} is {original.status}; only Open trades can be rolled"
            )
        existing = self.trade_repo.children_of(original.id)
        if existing:
            raise ValidationFailed(
                [f"trade {original.id} already has a successor trade {existing[0].id}"]
            )

        columns = self.trade_columns(payload)
        columns["parent_trade_id"] = original.id

        with atomic(self.db):
            self.trade_repo.update(
                original,
                {
                    "close_price": to_cents(close_price),
                    "closed_date": columns["opened_date"],
                    "status": TradeStatus.ROLLED.value,
                },
            )
            child = self.insert_trade(columns, auto_link=False)

        self.db.refresh(original)
        self.db.refresh(child)
        logger.info(f"Rolled trade {original.id} into {child.id}")
        return original, child

    def delete_trade(self, trade_id: int) -> dict[str, int]:
        """Delete a trade and reverse its effects.

        Children are unlinked (their chains are truncated, not deleted),
        positions acquired from the trade are deleted and positions it
        sold are reopened.

        Returns:
            Counts of unlinked children, deleted and reopened positions

        Raises:
            NotFoundError: If the trade does not exist
        """
        trade = self.get_trade(trade_id)

        with atomic(self.db):
            unlinked = self.trade_repo.unlink_children(trade.id)
            deleted, reopened = self.linkage.reverse_assignment(trade.id)
            self.trade_repo.delete(trade)

        logger.info(
            f"Deleted trade {trade_id} ({unlinked} children unlinked, "
            f"{deleted} positions deleted, {reopened} reopened)"
        )
        return {
            "unlinkedChildren": unlinked,
            "positionsDeleted": deleted,
            "positionsReopened": reopened,
        }

    def trade_columns(self, data: dict[str, Any]) -> dict[str, Any]:
        """Column values for a new trade, with defaults filled in."""
        columns = to_columns(
            {k: v for k, v in data.items() if k in TRADE_FIELDS},
            money=TRADE_MONEY,
            dates=TRADE_DATES,
        )
        if columns.get("quantity") is None:
            columns["quantity"] = 1
        else:
            columns["quantity"] = int(columns["quantity"])
        if columns.get("close_price") is None:
            columns["close_price"] = 0
        if not columns.get("status"):
            columns["status"] = TradeStatus.OPEN.value
        if columns.get("delta") == "":
            columns["delta"] = None
        return columns

    def _reference_errors(self, columns: dict[str, Any]) -> list[str]:
        errors = []
        parent_id = columns.get("parent_trade_id")
        if parent_id is not None:
            errors.extend(self._parent_errors(parent_id))
        account_id = columns.get("account_id")
        if account_id is not None and self.account_repo.get(account_id) is None:
            errors.append(f"account_id {account_id} does not exist")
        return errors

    def _parent_errors(self, parent_id: int, child_id: Optional[int] = None) -> list[str]:
        """Rules for linking a trade under parent_id (one child per parent, no cycles)."""
        if child_id is not None and parent_id == child_id:
            return ["parent_trade_id cannot reference the trade itself"]
        if not self.trade_repo.exists(parent_id):
            return [f"parent_trade_id {parent_id} does not exist"]
        if child_id is not None and child_id in self.trade_repo.ancestor_ids(parent_id):
            return [f"parent_trade_id {parent_id} would create a cycle"]
        siblings = self.trade_repo.children_of(parent_id, exclude_id=child_id)
        if siblings:
            return [f"trade {parent_id} already has a successor trade {siblings[0].id}"]
        return []
