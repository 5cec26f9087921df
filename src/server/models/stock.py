"""Pydantic models for manually entered stock lots."""

from typing import Optional

from pydantic import Field

from src.server.database.models.stock import Stock
from src.server.models.common import CamelModel, dollars, iso


class StockCreate(CamelModel):
    """Request schema for a stock lot; update payloads use the same fields."""

    account_id: Optional[int] = Field(None, description="Owning account")
    ticker: Optional[str] = Field(None, description="Symbol")
    shares: Optional[int] = Field(None, description="Number of shares")
    cost_basis: Optional[float] = Field(None, description="Per-share basis in dollars")
    acquired_date: Optional[str] = Field(None, description="Acquired date (YYYY-MM-DD)")
    sold_date: Optional[str] = Field(None, description="Sold date (YYYY-MM-DD)")
    sale_price: Optional[float] = Field(None, description="Per-share sale price")
    notes: Optional[str] = Field(None, description="Free-form notes")

    model_config = {
        "json_schema_extra": {
            "example": {
                "accountId": 1,
                "ticker": "VTI",
                "shares": 10,
                "costBasis": 250.0,
                "acquiredDate": "2025-02-03",
            }
        }
    }


class StockImportRequest(CamelModel):
    stocks: list[StockCreate]
    account_id: Optional[int] = None


class StockResponse(CamelModel):
    """Response schema for a stock lot, money in dollars."""

    id: int
    account_id: int
    ticker: str
    shares: int
    cost_basis: float
    acquired_date: str
    sold_date: Optional[str] = None
    sale_price: Optional[float] = None
    capital_gain_loss: Optional[float] = None
    notes: Optional[str] = None

    @classmethod
    def from_model(cls, stock: Stock) -> "StockResponse":
        return cls(
            id=stock.id,
            account_id=stock.account_id,
            ticker=stock.ticker,
            shares=stock.shares,
            cost_basis=dollars(stock.cost_basis),
            acquired_date=iso(stock.acquired_date),
            sold_date=iso(stock.sold_date),
            sale_price=dollars(stock.sale_price),
            capital_gain_loss=dollars(stock.capital_gain_loss),
            notes=stock.notes,
        )
