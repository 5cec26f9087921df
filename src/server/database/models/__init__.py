"""Database models for the backend server.

This module exports all SQLAlchemy ORM models used by the backend server.

Models:
    Account: Scoping entity for all other rows
    Trade: Option sales (CSP and CC) linked into roll chains
    Position: Share lots created and closed by assignments
    Stock: Manually entered share lots
    FundTransaction: Cash-flow journal entries
    PriceCache: Last successful quote per ticker
    Setting: Flat key/value settings
"""

from .account import Account
from .fund_transaction import FundTransaction
from .position import Position
from .price_cache import PriceCache
from .setting import Setting
from .stock import Stock
from .trade import Trade

__all__ = [
    "Account",
    "Trade",
    "Position",
    "Stock",
    "FundTransaction",
    "PriceCache",
    "Setting",
]
