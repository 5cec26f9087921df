"""Pydantic models for Trade API requests and responses.

Request models only check the shape of a payload; field rules (positive
strike, date order, known status) are enforced by the trade service so
every violation is reported together.
"""

from enum import Enum
from typing import Any, Optional, Union

from pydantic import Field

from src.server.database.models.trade import Trade
from src.server.models.common import CamelModel, dollars, iso
from src.wheel.importer import ImportResult
from src.wheel.models import TradeRecord
from src.wheel.money import option_pnl


def _value(field: Any) -> Any:
    return field.value if isinstance(field, Enum) else field


class TradeCreate(CamelModel):
    """Request schema for recording a new trade.

    Attributes:
        ticker: Underlying symbol
        type: 'CSP' or 'CC'
        strike: Strike price in dollars
        quantity: Number of contracts (default 1)
        entry_price: Premium received per share
        close_price: Cost to close per share (default 0)
        opened_date: YYYY-MM-DD
        expiration_date: YYYY-MM-DD
        closed_date: YYYY-MM-DD when no longer open
        status: Open, Expired, Assigned, Closed or Rolled (default Open)
        parent_trade_id: Trade this one was rolled from
        account_id: Owning account

    Example:
        >>> TradeCreate(ticker="AAPL", type="CSP", strike=220.0, entry_price=2.8,
        >>>             opened_date="2025-01-06", expiration_date="2025-01-17")
    """

    ticker: Optional[str] = Field(None, description="Underlying symbol")
    type: Optional[str] = Field(None, description="CSP or CC")
    strike: Optional[float] = Field(None, description="Strike price")
    quantity: Optional[int] = Field(None, description="Contracts (100 shares each)")
    delta: Optional[float] = Field(None, description="Delta at entry (0-1)")
    entry_price: Optional[float] = Field(None, description="Premium received per share")
    close_price: Optional[float] = Field(None, description="Cost to close per share")
    opened_date: Optional[str] = Field(None, description="Open date (YYYY-MM-DD)")
    expiration_date: Optional[str] = Field(None, description="Expiration date (YYYY-MM-DD)")
    closed_date: Optional[str] = Field(None, description="Close date (YYYY-MM-DD)")
    status: Optional[str] = Field(None, description="Trade status")
    parent_trade_id: Optional[int] = Field(None, description="Trade rolled from")
    notes: Optional[str] = Field(None, description="Free-form notes")
    account_id: Optional[int] = Field(None, description="Owning account")

    model_config = {
        "json_schema_extra": {
            "example": {
                "ticker": "AAPL",
                "type": "CSP",
                "strike": 220.0,
                "quantity": 1,
                "entryPrice": 2.8,
                "openedDate": "2025-01-06",
                "expirationDate": "2025-01-17",
            }
        }
    }


class TradeUpdate(TradeCreate):
    """Request schema for a partial trade update.

    Only fields present in the payload are changed; an explicit null
    parentTradeId unlinks the trade from its parent.
    """


class TradeImportItem(TradeCreate):
    """One trade in an import batch, keyed by its id in the source system."""

    id: Optional[int] = Field(None, description="Id in the source system")


class TradeRollRequest(CamelModel):
    """Request schema for rolling an open trade into a new one.

    Attributes:
        original_trade_id: Trade being rolled
        close_price: Per-share cost to close the original
        new_trade: The replacement trade; ticker, type, quantity and
            account default to the original's
    """

    original_trade_id: int = Field(..., description="Trade being rolled")
    close_price: Optional[float] = Field(None, description="Cost to close the original")
    new_trade: TradeCreate = Field(..., description="Replacement trade")

    model_config = {
        "json_schema_extra": {
            "example": {
                "originalTradeId": 1,
                "closePrice": 1.1,
                "newTrade": {
                    "strike": 215.0,
                    "entryPrice": 2.4,
                    "openedDate": "2025-01-17",
                    "expirationDate": "2025-01-31",
                },
            }
        }
    }


class TradeImportRequest(CamelModel):
    """Batch of trades to import, optionally forced into one account."""

    trades: list[TradeImportItem] = Field(..., description="Trades to import")
    account_id: Optional[int] = Field(None, description="Account for every trade")


class TradeResponse(CamelModel):
    """Response schema for trade data, money in dollars."""

    id: int
    ticker: str
    type: str
    strike: float
    quantity: int
    delta: Optional[float] = None
    entry_price: float
    close_price: float
    opened_date: str
    expiration_date: str
    closed_date: Optional[str] = None
    status: str
    parent_trade_id: Optional[int] = None
    notes: Optional[str] = None
    account_id: Optional[int] = None
    pnl: float = Field(..., description="(entry - close) x quantity x 100")
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @classmethod
    def from_model(cls, trade: Union[Trade, TradeRecord]) -> "TradeResponse":
        """Build from a stored trade or a domain record."""
        created_at = getattr(trade, "created_at", None)
        updated_at = getattr(trade, "updated_at", None)
        return cls(
            id=trade.id,
            ticker=trade.ticker,
            type=_value(trade.type),
            strike=dollars(trade.strike),
            quantity=trade.quantity,
            delta=trade.delta,
            entry_price=dollars(trade.entry_price),
            close_price=dollars(trade.close_price or 0),
            opened_date=iso(trade.opened_date),
            expiration_date=iso(trade.expiration_date),
            closed_date=iso(trade.closed_date),
            status=_value(trade.status),
            parent_trade_id=trade.parent_trade_id,
            notes=trade.notes,
            account_id=trade.account_id,
            pnl=dollars(option_pnl(trade.entry_price, trade.close_price or 0, trade.quantity)),
            created_at=created_at.isoformat() if created_at else None,
            updated_at=updated_at.isoformat() if updated_at else None,
        )


class RollResponse(CamelModel):
    """Both sides of a roll."""

    original_trade: TradeResponse
    new_trade: TradeResponse


class TradeDeleteResponse(CamelModel):
    """Delete acknowledgement with the side effects that were reversed."""

    deleted: bool = True
    id: int
    unlinked_children: int = 0
    positions_deleted: int = 0
    positions_reopened: int = 0


class ImportResultResponse(CamelModel):
    """Outcome of a bulk import."""

    imported: int
    skipped: int
    failed: list[dict[str, Any]]
    unresolved: list[dict[str, Any]]
    unlinked: list[dict[str, Any]]
    total: int

    @classmethod
    def from_result(cls, result: ImportResult) -> "ImportResultResponse":
        return cls(
            imported=result.imported,
            skipped=result.skipped,
            failed=result.failed,
            unresolved=result.unresolved,
            unlinked=result.unlinked,
            total=result.total,
        )
