"""Portfolio API endpoints.

Totals over options, stock gains and the cash-flow journal, overall or
within a date range.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.server.database.session import get_db
from src.server.models.common import Envelope, ok
from src.server.models.portfolio import MonthlyRowResponse, PortfolioStatsResponse
from src.server.services.portfolio_service import PortfolioService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/portfolio", tags=["portfolio"])


@router.get("/stats", response_model=Envelope, summary="Portfolio totals")
def portfolio_stats(
    account_id: Optional[int] = Query(None, alias="accountId"),
    start_date: Optional[date] = Query(None, alias="startDate", description="YYYY-MM-DD"),
    end_date: Optional[date] = Query(None, alias="endDate", description="YYYY-MM-DD"),
    db: Session = Depends(get_db),
) -> Envelope:
    stats = PortfolioService(db).stats(account_id=account_id, start=start_date, end=end_date)
    return ok(PortfolioStatsResponse.from_stats(stats))


@router.get(
    "/monthly",
    response_model=Envelope,
    summary="Monthly breakdown",
    description="Realized options P/L, stock gains and income per month, oldest first",
)
def portfolio_monthly(
    account_id: Optional[int] = Query(None, alias="accountId"),
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: Session = Depends(get_db),
) -> Envelope:
    rows = PortfolioService(db).monthly(account_id=account_id, start=start_date, end=end_date)
    return ok([MonthlyRowResponse.from_row(r) for r in rows])
