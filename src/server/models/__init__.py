"""Pydantic request and response models."""

from src.server.models.common import (
    Envelope,
    ErrorEnvelope,
    HealthResponse,
    InfoResponse,
    ok,
)
from src.server.models.trade import (
    TradeCreate,
    TradeResponse,
    TradeRollRequest,
    TradeUpdate,
)

__all__ = [
    # Common models
    "Envelope",
    "ErrorEnvelope",
    "HealthResponse",
    "InfoResponse",
    "ok",
    # Trade models
    "TradeCreate",
    "TradeUpdate",
    "TradeRollRequest",
    "TradeResponse",
]
