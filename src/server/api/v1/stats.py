"""Trade statistics API endpoint."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.server.database.session import get_db
from src.server.models.common import Envelope, ok
from src.server.models.stats import TradeStatsResponse
from src.server.services.stats_service import StatsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/stats", tags=["stats"])


@router.get(
    "",
    response_model=Envelope,
    summary="Trade statistics",
    description="P/L, chain win rate, ROI, monthly and per-ticker breakdowns",
)
def get_stats(
    account_id: Optional[int] = Query(None, alias="accountId"),
    db: Session = Depends(get_db),
) -> Envelope:
    """Trade statistics.

    Example:
        >>> GET /api/v1/stats?accountId=1
        >>> {"success": true, "data": {"totalPnL": 240.0, "winRate": 66.67, ...}}
    """
    stats = StatsService(db).trade_statistics(account_id=account_id)
    return ok(TradeStatsResponse.from_stats(stats))
