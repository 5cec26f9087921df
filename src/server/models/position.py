"""Pydantic models for Position API requests and responses.

Positions are share lots created by CSP assignment or entered by hand.
Selling sets soldDate and salePrice together; clearing both reopens.
"""

from typing import Optional

from pydantic import Field

from src.server.database.models.position import Position
from src.server.models.common import CamelModel, dollars, iso
from src.server.services.position_service import PositionSummary


class PositionCreate(CamelModel):
    """Request schema for entering a position by hand.

    Example:
        >>> PositionCreate(ticker="AAPL", shares=100, cost_basis=217.2,
        >>>                acquired_date="2025-01-17")
    """

    ticker: Optional[str] = Field(None, description="Underlying symbol")
    shares: Optional[int] = Field(None, description="Number of shares")
    cost_basis: Optional[float] = Field(None, description="Per-share basis in dollars")
    acquired_date: Optional[str] = Field(None, description="Acquired date (YYYY-MM-DD)")
    sold_date: Optional[str] = Field(None, description="Sold date (YYYY-MM-DD)")
    sale_price: Optional[float] = Field(None, description="Per-share sale price")
    account_id: Optional[int] = Field(None, description="Owning account")

    model_config = {
        "json_schema_extra": {
            "example": {
                "ticker": "AAPL",
                "shares": 100,
                "costBasis": 217.2,
                "acquiredDate": "2025-01-17",
            }
        }
    }


class PositionUpdate(CamelModel):
    """Request schema for selling, reopening or correcting a position.

    Example:
        >>> PositionUpdate(sold_date="2025-03-21", sale_price=230.0)
    """

    ticker: Optional[str] = None
    shares: Optional[int] = None
    cost_basis: Optional[float] = None
    acquired_date: Optional[str] = None
    sold_date: Optional[str] = None
    sale_price: Optional[float] = None


class PositionResponse(CamelModel):
    """Response schema for a position, money in dollars."""

    id: int
    ticker: str
    shares: int
    cost_basis: float
    acquired_date: str
    acquired_from_trade_id: Optional[int] = None
    sold_date: Optional[str] = None
    sale_price: Optional[float] = None
    sold_via_trade_id: Optional[int] = None
    capital_gain_loss: Optional[float] = None
    account_id: Optional[int] = None

    @classmethod
    def from_model(cls, position: Position) -> "PositionResponse":
        return cls(
            id=position.id,
            ticker=position.ticker,
            shares=position.shares,
            cost_basis=dollars(position.cost_basis),
            acquired_date=iso(position.acquired_date),
            acquired_from_trade_id=position.acquired_from_trade_id,
            sold_date=iso(position.sold_date),
            sale_price=dollars(position.sale_price),
            sold_via_trade_id=position.sold_via_trade_id,
            capital_gain_loss=dollars(position.capital_gain_loss),
            account_id=position.account_id,
        )


class PositionSummaryResponse(CamelModel):
    """Realized gains and the open positions list."""

    realized_gain_loss: float
    closed_positions: int
    open_positions: int
    open_positions_list: list[PositionResponse]

    @classmethod
    def from_summary(cls, summary: PositionSummary) -> "PositionSummaryResponse":
        return cls(
            realized_gain_loss=dollars(summary.realized_gain_loss),
            closed_positions=summary.closed_positions,
            open_positions=summary.open_positions,
            open_positions_list=[
                PositionResponse.from_model(p) for p in summary.open_positions_list
            ],
        )
