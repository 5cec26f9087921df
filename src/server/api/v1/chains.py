"""Roll chain API endpoints.

Chains are rebuilt from the stored trades on every request.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.server.database.session import get_db
from src.server.models.common import Envelope, ok
from src.server.models.stats import ChainResponse
from src.server.services.chain_service import ChainService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chains", tags=["chains"])


@router.get("", response_model=Envelope, summary="List roll chains")
def list_chains(
    account_id: Optional[int] = Query(None, alias="accountId"),
    ticker: Optional[str] = Query(None, description="Ticker anywhere in the chain"),
    status_filter: Optional[str] = Query(None, alias="status", description="all, open or resolved"),
    db: Session = Depends(get_db),
) -> Envelope:
    chains = ChainService(db).list_chains(account_id=account_id, ticker=ticker, status=status_filter)
    return ok([ChainResponse.from_chain(c) for c in chains])


@router.get("/{trade_id}", response_model=Envelope, summary="Chain containing a trade")
def get_chain(trade_id: int, db: Session = Depends(get_db)) -> Envelope:
    return ok(ChainResponse.from_chain(ChainService(db).get_chain(trade_id)))
