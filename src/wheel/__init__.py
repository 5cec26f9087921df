"""
Wheel Tracker - Record option trades and track wheel performance.

This package holds the storage-independent core: money handling, the
trade status machine, field validation, roll chains, position linkage
rules and the aggregation behind the statistics and portfolio reports.

Public API:
    TradeRecord: A single option sale
    ShareLot: Shares from an assignment or entered by hand
    FundTransactionRecord: A cash-flow journal entry
    Chain: A root trade and its successive rolls
    TradeStatus / TradeType / FundTransactionType: Enumerations
    build_chains: Rebuild roll chains from trades
    trade_statistics / portfolio_summary / monthly_breakdown: Reports
"""

from .aggregation import (
    DateWindow,
    MonthlyRow,
    PortfolioSummary,
    TradeStatistics,
    monthly_breakdown,
    portfolio_summary,
    trade_statistics,
)
from .chains import build_chains, chain_win_rate, find_chain
from .exceptions import (
    ChainIntegrityError,
    ConflictError,
    ExternalUnavailableError,
    InvalidTransitionError,
    NotFoundError,
    ValidationFailed,
    WheelError,
)
from .models import Chain, ChainStats, FundTransactionRecord, ShareLot, TradeRecord
from .state import (
    VALID_TRANSITIONS,
    FundTransactionType,
    TradeStatus,
    TradeType,
    can_transition,
    get_next_status,
)

__all__ = [
    # Records
    "TradeRecord",
    "ShareLot",
    "FundTransactionRecord",
    "Chain",
    "ChainStats",
    # State machine
    "TradeStatus",
    "TradeType",
    "FundTransactionType",
    "VALID_TRANSITIONS",
    "can_transition",
    "get_next_status",
    # Chains
    "build_chains",
    "chain_win_rate",
    "find_chain",
    # Aggregation
    "DateWindow",
    "MonthlyRow",
    "PortfolioSummary",
    "TradeStatistics",
    "monthly_breakdown",
    "portfolio_summary",
    "trade_statistics",
    # Exceptions
    "WheelError",
    "ValidationFailed",
    "NotFoundError",
    "ConflictError",
    "InvalidTransitionError",
    "ChainIntegrityError",
    "ExternalUnavailableError",
]
