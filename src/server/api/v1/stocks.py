"""Stock API endpoints for manually entered share lots."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from src.server.database.session import get_db
from src.server.models.common import DeletedResponse, Envelope, ok
from src.server.models.stock import StockCreate, StockImportRequest, StockResponse
from src.server.models.trade import ImportResultResponse
from src.server.services.import_service import ImportService
from src.server.services.stock_service import StockService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stocks", tags=["stocks"])


@router.get("", response_model=Envelope, summary="List stocks")
def list_stocks(
    account_id: Optional[int] = Query(None, alias="accountId"),
    status_filter: Optional[str] = Query(None, alias="status", description="open, closed or all"),
    db: Session = Depends(get_db),
) -> Envelope:
    stocks = StockService(db).list_stocks(account_id=account_id, status=status_filter)
    return ok([StockResponse.from_model(s) for s in stocks])


@router.post("/import", response_model=Envelope, summary="Import stocks")
def import_stocks(request: StockImportRequest, db: Session = Depends(get_db)) -> Envelope:
    items = [s.model_dump(exclude_unset=True) for s in request.stocks]
    result = ImportService(db).import_stocks(items, account_id=request.account_id)
    return ok(ImportResultResponse.from_result(result))


@router.get("/{stock_id}", response_model=Envelope, summary="Get stock")
def get_stock(stock_id: int, db: Session = Depends(get_db)) -> Envelope:
    return ok(StockResponse.from_model(StockService(db).get_stock(stock_id)))


@router.post(
    "", response_model=Envelope, status_code=status.HTTP_201_CREATED, summary="Add stock"
)
def create_stock(stock: StockCreate, db: Session = Depends(get_db)) -> Envelope:
    created = StockService(db).create_stock(stock.model_dump(exclude_unset=True))
    return ok(StockResponse.from_model(created))


@router.put(
    "/{stock_id}",
    response_model=Envelope,
    summary="Update stock",
    description="Edit, sell (soldDate + salePrice) or reopen (both null) a stock lot",
)
def update_stock(stock_id: int, stock: StockCreate, db: Session = Depends(get_db)) -> Envelope:
    updated = StockService(db).update_stock(stock_id, stock.model_dump(exclude_unset=True))
    return ok(StockResponse.from_model(updated))


@router.delete("/{stock_id}", response_model=Envelope, summary="Delete stock")
def delete_stock(stock_id: int, db: Session = Depends(get_db)) -> Envelope:
    StockService(db).delete_stock(stock_id)
    return ok(DeletedResponse(id=stock_id))
