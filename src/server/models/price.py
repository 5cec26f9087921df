"""Pydantic models for share price quotes."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from src.server.models.common import CamelModel, dollars
from src.server.services.price_service import Quote


class PriceBatchRequest(CamelModel):
    """Tickers to quote; only the first 20 are looked up."""

    tickers: list[str] = Field(..., description="Ticker symbols")

    model_config = {"json_schema_extra": {"example": {"tickers": ["AAPL", "SPY"]}}}


class PriceResponse(CamelModel):
    """A quote in dollars, flagged live or cached."""

    ticker: str
    price: float
    change: Optional[float] = None
    change_percent: Optional[float] = None
    name: Optional[str] = None
    source: str
    live: bool
    cached_at: Optional[datetime] = None

    @classmethod
    def from_quote(cls, quote: Quote) -> "PriceResponse":
        return cls(
            ticker=quote.ticker,
            price=dollars(quote.price),
            change=dollars(quote.change),
            change_percent=quote.change_percent,
            name=quote.name,
            source=quote.source,
            live=quote.live,
            cached_at=quote.cached_at,
        )
