"""API v1 router with core endpoints.

This module provides version 1 of the API: the resource routers plus
system information.
"""

import logging
from datetime import datetime

from fastapi import APIRouter, status

from src.server.api.v1 import (
    accounts,
    chains,
    fund_transactions,
    portfolio,
    positions,
    prices,
    settings as settings_api,
    stats,
    stocks,
    trades,
)
from src.server.config import settings
from src.server.database.session import check_database_connection
from src.server.models.common import InfoResponse

logger = logging.getLogger(__name__)

# Create v1 router
router = APIRouter(
    prefix="/api/v1",
    tags=["v1"],
)

# Include sub-routers
router.include_router(trades.router)
router.include_router(chains.router)
router.include_router(positions.router)
router.include_router(stocks.router)
router.include_router(fund_transactions.router)
router.include_router(accounts.router)
router.include_router(stats.router)
router.include_router(portfolio.router)
router.include_router(prices.router)
router.include_router(settings_api.router)


@router.get(
    "/info",
    response_model=InfoResponse,
    status_code=status.HTTP_200_OK,
    summary="Get system information",
    description="Returns system information including version and database status",
)
async def get_info() -> InfoResponse:
    """Get system information endpoint.

    Example:
        >>> GET /api/v1/info
        >>> {
        >>>     "app_name": "Wheel Tracker API",
        >>>     "version": "1.0.0",
        >>>     "status": "running",
        >>>     "database_connected": true,
        >>>     "timestamp": "2026-01-31T10:00:00"
        >>> }
    """
    return InfoResponse(
        app_name=settings.app_name,
        version=settings.version,
        status="running",
        database_connected=check_database_connection(),
        timestamp=datetime.utcnow(),
    )
