"""Repository for cash-flow journal data access."""

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from src.server.database.models.fund_transaction import FundTransaction

logger = logging.getLogger(__name__)


class FundTransactionRepository:
    """Repository for fund transactions.

    Attributes:
        db: SQLAlchemy database session
    """

    def __init__(self, db: Session):
        self.db = db

    def create(self, **fields: Any) -> FundTransaction:
        tx = FundTransaction(**fields)
        self.db.add(tx)
        self.db.flush()
        return tx

    def get(self, tx_id: int) -> Optional[FundTransaction]:
        return self.db.query(FundTransaction).filter(FundTransaction.id == tx_id).first()

    def update(self, tx: FundTransaction, fields: dict[str, Any]) -> FundTransaction:
        for name, value in fields.items():
            setattr(tx, name, value)
        self.db.flush()
        return tx

    def delete(self, tx: FundTransaction) -> None:
        self.db.delete(tx)
        self.db.flush()

    def list_transactions(
        self, account_id: Optional[int] = None, tx_type: Optional[str] = None
    ) -> list[FundTransaction]:
        """List transactions, most recent date first (id breaks ties)."""
        query = self.db.query(FundTransaction)
        if account_id is not None:
            query = query.filter(FundTransaction.account_id == account_id)
        if tx_type:
            query = query.filter(FundTransaction.type == tx_type)
        return query.order_by(FundTransaction.date.desc(), FundTransaction.id.desc()).all()

    def count_by_account(self, account_id: int) -> int:
        return (
            self.db.query(FundTransaction)
            .filter(FundTransaction.account_id == account_id)
            .count()
        )
