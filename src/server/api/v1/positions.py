"""Position API endpoints.

Share lots created by CSP assignment or entered by hand, plus the
realized-gain summary.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from src.server.database.session import get_db
from src.server.models.common import DeletedResponse, Envelope, ok
from src.server.models.position import (
    PositionCreate,
    PositionResponse,
    PositionSummaryResponse,
    PositionUpdate,
)
from src.server.services.position_service import PositionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/positions", tags=["positions"])


@router.get("", response_model=Envelope, summary="List positions")
def list_positions(
    status_filter: Optional[str] = Query(None, alias="status", description="open, closed or all"),
    account_id: Optional[int] = Query(None, alias="accountId", description="Owning account"),
    db: Session = Depends(get_db),
) -> Envelope:
    positions = PositionService(db).list_positions(status=status_filter, account_id=account_id)
    return ok([PositionResponse.from_model(p) for p in positions])


@router.get(
    "/summary",
    response_model=Envelope,
    summary="Position summary",
    description="Realized capital gains over closed positions and the open positions list",
)
def position_summary(
    account_id: Optional[int] = Query(None, alias="accountId"),
    db: Session = Depends(get_db),
) -> Envelope:
    summary = PositionService(db).summary(account_id=account_id)
    return ok(PositionSummaryResponse.from_summary(summary))


@router.get("/{position_id}", response_model=Envelope, summary="Get position")
def get_position(position_id: int, db: Session = Depends(get_db)) -> Envelope:
    return ok(PositionResponse.from_model(PositionService(db).get_position(position_id)))


@router.post(
    "",
    response_model=Envelope,
    status_code=status.HTTP_201_CREATED,
    summary="Enter a position by hand",
)
def create_position(position: PositionCreate, db: Session = Depends(get_db)) -> Envelope:
    created = PositionService(db).create_position(position.model_dump(exclude_unset=True))
    return ok(PositionResponse.from_model(created))


@router.put(
    "/{position_id}",
    response_model=Envelope,
    summary="Sell or reopen a position",
    description="Set soldDate and salePrice to sell; set both to null to reopen",
)
def update_position(
    position_id: int, position: PositionUpdate, db: Session = Depends(get_db)
) -> Envelope:
    updated = PositionService(db).update_position(
        position_id, position.model_dump(exclude_unset=True)
    )
    return ok(PositionResponse.from_model(updated))


@router.delete("/{position_id}", response_model=Envelope, summary="Delete position")
def delete_position(position_id: int, db: Session = Depends(get_db)) -> Envelope:
    PositionService(db).delete_position(position_id)
    return ok(DeletedResponse(id=position_id))
