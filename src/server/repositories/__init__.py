"""Data access layer repositories."""

from src.server.repositories.account import AccountRepository
from src.server.repositories.fund_transaction import FundTransactionRepository
from src.server.repositories.position import PositionRepository
from src.server.repositories.price_cache import PriceCacheRepository
from src.server.repositories.setting import SettingRepository
from src.server.repositories.stock import StockRepository
from src.server.repositories.trade import TradeFilters, TradeRepository

__all__ = [
    "AccountRepository",
    "FundTransactionRepository",
    "PositionRepository",
    "PriceCacheRepository",
    "SettingRepository",
    "StockRepository",
    "TradeFilters",
    "TradeRepository",
]
