"""Repository for account data access."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from src.server.database.models.account import Account
from src.server.repositories.fund_transaction import FundTransactionRepository
from src.server.repositories.position import PositionRepository
from src.server.repositories.stock import StockRepository
from src.server.repositories.trade import TradeRepository

logger = logging.getLogger(__name__)


class AccountRepository:
    """Repository for accounts.

    Attributes:
        db: SQLAlchemy database session
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, name: str) -> Account:
        account = Account(name=name)
        self.db.add(account)
        self.db.flush()
        return account

    def get(self, account_id: int) -> Optional[Account]:
        return self.db.query(Account).filter(Account.id == account_id).first()

    def list_accounts(self) -> list[Account]:
        return self.db.query(Account).order_by(Account.id).all()

    def rename(self, account: Account, name: str) -> Account:
        account.name = name
        self.db.flush()
        return account

    def delete(self, account: Account) -> None:
        self.db.delete(account)
        self.db.flush()

    def dependent_counts(self, account_id: int) -> dict[str, int]:
        """Rows per entity type that still reference an account."""
        return {
            "trades": TradeRepository(self.db).count_by_account(account_id),
            "positions": PositionRepository(self.db).count_by_account(account_id),
            "fundTransactions": FundTransactionRepository(self.db).count_by_account(account_id),
            "stocks": StockRepository(self.db).count_by_account(account_id),
        }
