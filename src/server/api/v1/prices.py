"""Share price API endpoints.

Quotes come from the live source when enabled and reachable, and from
the last cached quote otherwise.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.server.database.session import get_db
from src.server.models.common import Envelope, ok
from src.server.models.price import PriceBatchRequest, PriceResponse
from src.server.services.price_service import PriceService, StockPriceSource

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/prices", tags=["prices"])


def get_price_source() -> StockPriceSource:
    """Live quote source dependency (overridden in tests)."""
    return StockPriceSource()


@router.post(
    "/batch",
    response_model=Envelope,
    summary="Quote several tickers",
    description="Quotes up to 20 unique tickers; tickers with no data are omitted",
)
def get_prices(
    request: PriceBatchRequest,
    db: Session = Depends(get_db),
    source: StockPriceSource = Depends(get_price_source),
) -> Envelope:
    quotes = PriceService(db, source).get_prices(request.tickers)
    return ok({ticker: PriceResponse.from_quote(q) for ticker, q in quotes.items()})


@router.get("/{ticker}", response_model=Envelope, summary="Quote one ticker")
def get_price(
    ticker: str,
    db: Session = Depends(get_db),
    source: StockPriceSource = Depends(get_price_source),
) -> Envelope:
    return ok(PriceResponse.from_quote(PriceService(db, source).get_price(ticker)))
