"""Trade API endpoints.

This module provides REST API endpoints for the trade lifecycle:
recording, editing, rolling, deleting and bulk importing trades. Field
rule violations surface as 400 responses through the exception handlers
registered in main.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from src.server.database.session import get_db
from src.server.models.common import Envelope, ok
from src.server.models.trade import (
    ImportResultResponse,
    RollResponse,
    TradeCreate,
    TradeDeleteResponse,
    TradeImportRequest,
    TradeResponse,
    TradeRollRequest,
    TradeUpdate,
)
from src.server.repositories.trade import TradeFilters
from src.server.services.import_service import ImportService
from src.server.services.trade_service import TradeService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/trades", tags=["trades"])


@router.get(
    "",
    response_model=Envelope,
    summary="List trades",
    description="Lists trades with status/ticker/account filters, sorting and pagination",
)
def list_trades(
    status_filter: Optional[str] = Query(
        None, alias="status", description="all, open, closed or an exact status"
    ),
    ticker: Optional[str] = Query(None, description="Exact ticker"),
    account_id: Optional[int] = Query(None, alias="accountId", description="Owning account"),
    sort_by: str = Query("openedDate", alias="sortBy", description="Sort column"),
    sort_order: str = Query("asc", alias="sortOrder", description="asc or desc"),
    page: int = Query(1, ge=1, description="Page number (1-based)"),
    limit: Optional[int] = Query(None, description="Page size (1-100)"),
    db: Session = Depends(get_db),
) -> Envelope:
    """List trades.

    Example:
        >>> GET /api/v1/trades?status=open&sortBy=expirationDate&page=1&limit=20
    """
    service = TradeService(db)
    filters = TradeFilters(
        status=None if status_filter == "all" else status_filter,
        ticker=ticker,
        account_id=account_id,
    )
    result = service.list_trades(filters, sort=sort_by, order=sort_order, page=page, limit=limit)
    return ok(
        [TradeResponse.from_model(t) for t in result.items],
        pagination=result.meta(),
    )


@router.post(
    "/roll",
    response_model=Envelope,
    status_code=status.HTTP_201_CREATED,
    summary="Roll a trade",
    description="Closes an open trade as Rolled and opens its successor in one transaction",
)
def roll_trade(request: TradeRollRequest, db: Session = Depends(get_db)) -> Envelope:
    """Roll a trade.

    Example:
        >>> POST /api/v1/trades/roll
        >>> {"originalTradeId": 1, "closePrice": 1.1,
        >>>  "newTrade": {"strike": 215, "entryPrice": 2.4,
        >>>               "openedDate": "2025-01-17", "expirationDate": "2025-01-31"}}
    """
    service = TradeService(db)
    original, new_trade = service.roll_trade(
        request.original_trade_id,
        request.close_price,
        request.new_trade.model_dump(exclude_unset=True),
    )
    return ok(
        RollResponse(
            original_trade=TradeResponse.from_model(original),
            new_trade=TradeResponse.from_model(new_trade),
        )
    )


@router.post(
    "/import",
    response_model=Envelope,
    summary="Import trades",
    description="Imports a batch of trades parents-first, skipping duplicates",
)
def import_trades(request: TradeImportRequest, db: Session = Depends(get_db)) -> Envelope:
    service = ImportService(db)
    items = [item.model_dump(exclude_unset=True) for item in request.trades]
    result = service.import_trades(items, account_id=request.account_id)
    return ok(ImportResultResponse.from_result(result))


@router.get(
    "/{trade_id}",
    response_model=Envelope,
    summary="Get trade",
)
def get_trade(trade_id: int, db: Session = Depends(get_db)) -> Envelope:
    trade = TradeService(db).get_trade(trade_id)
    return ok(TradeResponse.from_model(trade))


@router.post(
    "",
    response_model=Envelope,
    status_code=status.HTTP_201_CREATED,
    summary="Record a trade",
    description="Records a trade; a CC without a parent is linked to its CSP chain",
)
def create_trade(trade: TradeCreate, db: Session = Depends(get_db)) -> Envelope:
    """Record a new option trade.

    Example:
        >>> POST /api/v1/trades
        >>> {"ticker": "AAPL", "type": "CSP", "strike": 220, "entryPrice": 2.8,
        >>>  "openedDate": "2025-01-06", "expirationDate": "2025-01-17"}
    """
    created = TradeService(db).create_trade(trade.model_dump(exclude_unset=True))
    return ok(TradeResponse.from_model(created))


@router.put(
    "/{trade_id}",
    response_model=Envelope,
    summary="Update trade",
    description="Partial update; moving into Assigned opens or closes a position",
)
def update_trade(trade_id: int, trade: TradeUpdate, db: Session = Depends(get_db)) -> Envelope:
    updated = TradeService(db).update_trade(trade_id, trade.model_dump(exclude_unset=True))
    return ok(TradeResponse.from_model(updated))


@router.delete(
    "/{trade_id}",
    response_model=Envelope,
    summary="Delete trade",
    description="Deletes a trade, unlinking its children and reversing assignment effects",
)
def delete_trade(trade_id: int, db: Session = Depends(get_db)) -> Envelope:
    effects = TradeService(db).delete_trade(trade_id)
    return ok(TradeDeleteResponse(id=trade_id, **effects))
