"""Fund transaction API endpoints (the cash-flow journal)."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from src.server.database.session import get_db
from src.server.models.common import DeletedResponse, Envelope, ok
from src.server.models.fund_transaction import (
    FundTransactionCreate,
    FundTransactionImportRequest,
    FundTransactionResponse,
)
from src.server.models.trade import ImportResultResponse
from src.server.services.fund_service import FundTransactionService
from src.server.services.import_service import ImportService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/fund-transactions", tags=["fund-transactions"])


@router.get(
    "",
    response_model=Envelope,
    summary="List fund transactions",
    description="Newest first, optionally filtered by account and type",
)
def list_transactions(
    account_id: Optional[int] = Query(None, alias="accountId"),
    tx_type: Optional[str] = Query(None, alias="type", description="Transaction type"),
    db: Session = Depends(get_db),
) -> Envelope:
    txs = FundTransactionService(db).list_transactions(account_id=account_id, tx_type=tx_type)
    return ok([FundTransactionResponse.from_model(t) for t in txs])


@router.post("/import", response_model=Envelope, summary="Import fund transactions")
def import_transactions(
    request: FundTransactionImportRequest, db: Session = Depends(get_db)
) -> Envelope:
    items = [t.model_dump(exclude_unset=True) for t in request.transactions]
    result = ImportService(db).import_fund_transactions(items, account_id=request.account_id)
    return ok(ImportResultResponse.from_result(result))


@router.get("/{tx_id}", response_model=Envelope, summary="Get fund transaction")
def get_transaction(tx_id: int, db: Session = Depends(get_db)) -> Envelope:
    return ok(FundTransactionResponse.from_model(FundTransactionService(db).get_transaction(tx_id)))


@router.post(
    "",
    response_model=Envelope,
    status_code=status.HTTP_201_CREATED,
    summary="Record fund transaction",
)
def create_transaction(tx: FundTransactionCreate, db: Session = Depends(get_db)) -> Envelope:
    created = FundTransactionService(db).create_transaction(tx.model_dump(exclude_unset=True))
    return ok(FundTransactionResponse.from_model(created))


@router.put("/{tx_id}", response_model=Envelope, summary="Update fund transaction")
def update_transaction(
    tx_id: int, tx: FundTransactionCreate, db: Session = Depends(get_db)
) -> Envelope:
    updated = FundTransactionService(db).update_transaction(
        tx_id, tx.model_dump(exclude_unset=True)
    )
    return ok(FundTransactionResponse.from_model(updated))


@router.delete("/{tx_id}", response_model=Envelope, summary="Delete fund transaction")
def delete_transaction(tx_id: int, db: Session = Depends(get_db)) -> Envelope:
    FundTransactionService(db).delete_transaction(tx_id)
    return ok(DeletedResponse(id=tx_id))
