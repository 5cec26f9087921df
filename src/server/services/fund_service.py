"""Service layer for the cash-flow journal."""

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from src.server.database.models.fund_transaction import FundTransaction
from src.server.database.session import atomic
from src.server.repositories.account import AccountRepository
from src.server.repositories.fund_transaction import FundTransactionRepository
from src.server.services.conversions import to_columns
from src.wheel.exceptions import NotFoundError, ValidationFailed
from src.wheel.validation import VALID_FUND_TRANSACTION_TYPES, validate_fund_transaction

logger = logging.getLogger(__name__)

FUND_FIELDS = ("account_id", "type", "amount", "date", "description")


class FundTransactionService:
    """Service for deposits, withdrawals, dividends, interest and fees.

    Attributes:
        db: SQLAlchemy database session
        fund_repo: Repository for fund transactions
        account_repo: Repository for account lookups
    """

    def __init__(self, db: Session):
        self.db = db
        self.fund_repo = FundTransactionRepository(db)
        self.account_repo = AccountRepository(db)

    def get_transaction(self, tx_id: int) -> FundTransaction:
        tx = self.fund_repo.get(tx_id)
        if tx is None:
            raise NotFoundError("Fund transaction", tx_id)
        return tx

    def list_transactions(
        self, account_id: Optional[int] = None, tx_type: Optional[str] = None
    ) -> list[FundTransaction]:
        if tx_type and tx_type not in VALID_FUND_TRANSACTION_TYPES:
            raise ValidationFailed(
                [f"type must be one of: {', '.join(VALID_FUND_TRANSACTION_TYPES)}"]
            )
        return self.fund_repo.list_transactions(account_id=account_id, tx_type=tx_type)

    def validate(self, data: dict[str, Any], is_update: bool = False) -> list[str]:
        errors = validate_fund_transaction(data, is_update=is_update)
        account_id = data.get("account_id")
        if account_id is not None and self.account_repo.get(account_id) is None:
            errors.append(f"account_id {account_id} does not exist")
        return errors

    def insert_transaction(self, data: dict[str, Any]) -> FundTransaction:
        """Insert a validated transaction inside the caller's transaction."""
        columns = to_columns(
            {k: v for k, v in data.items() if k in FUND_FIELDS},
            money=("amount",),
            dates=("date",),
        )
        return self.fund_repo.create(**columns)

    def create_transaction(self, data: dict[str, Any]) -> FundTransaction:
        """Record a cash-flow entry.

        Raises:
            ValidationFailed: If any field rule is violated
        """
        errors = self.validate(data)
        if errors:
            raise ValidationFailed(errors)

        with atomic(self.db):
            tx = self.insert_transaction(data)
        logger.info(f"Created fund transaction {tx.id}: {tx.type} {tx.amount}c on {tx.date}")
        return tx

    def update_transaction(self, tx_id: int, data: dict[str, Any]) -> FundTransaction:
        tx = self.get_transaction(tx_id)
        data = {k: v for k, v in data.items() if k in FUND_FIELDS}
        errors = self.validate(data, is_update=True)
        if errors:
            raise ValidationFailed(errors)

        columns = to_columns(data, money=("amount",), dates=("date",))
        columns = {k: v for k, v in columns.items() if v is not None or k == "description"}
        with atomic(self.db):
            self.fund_repo.update(tx, columns)
        self.db.refresh(tx)
        logger.info(f"Updated fund transaction {tx.id}")
        return tx

    def delete_transaction(self, tx_id: int) -> None:
        tx = self.get_transaction(tx_id)
        with atomic(self.db):
            self.fund_repo.delete(tx)
        logger.info(f"Deleted fund transaction {tx_id}")
