"""Service layer for accounts."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from src.server.database.models.account import Account
from src.server.database.session import atomic
from src.server.repositories.account import AccountRepository
from src.wheel.exceptions import ConflictError, NotFoundError, ValidationFailed
from src.wheel.validation import validate_account

logger = logging.getLogger(__name__)


class AccountService:
    """Service for account management.

    Attributes:
        db: SQLAlchemy database session
        account_repo: Repository for accounts
    """

    def __init__(self, db: Session):
        self.db = db
        self.account_repo = AccountRepository(db)

    def get_account(self, account_id: int) -> Account:
        account = self.account_repo.get(account_id)
        if account is None:
            raise NotFoundError("Account", account_id)
        return account

    def list_accounts(self) -> list[Account]:
        return self.account_repo.list_accounts()

    def create_account(self, data: dict[str, Any]) -> Account:
        errors = validate_account(data)
        if errors:
            raise ValidationFailed(errors)
        with atomic(self.db):
            account = self.account_repo.create(data["name"].strip())
        logger.info(f"Created account {account.id}: {account.name}")
        return account

    def rename_account(self, account_id: int, data: dict[str, Any]) -> Account:
        account = self.get_account(account_id)
        errors = validate_account(data, is_update=True)
        if errors:
            raise ValidationFailed(errors)
        if data.get("name") is None:
            return account
        with atomic(self.db):
            self.account_repo.rename(account, data["name"].strip())
        logger.info(f"Renamed account {account.id} to {account.name}")
        return account

    def delete_account(self, account_id: int) -> None:
        """Delete an account that nothing references any more.

        Raises:
            NotFoundError: If the account does not exist
            ConflictError: If trades, positions, fund transactions or
                stocks still reference it (counts attached)
        """
        account = self.get_account(account_id)
        counts = self.account_repo.dependent_counts(account_id)
        if sum(counts.values()) > 0:
            raise ConflictError(
                f"Cannot delete account with existing data ({counts['trades']} trades, "
                f"{counts['positions']} positions, {counts['fundTransactions']} transactions, "
                f"{counts['stocks']} stocks). Move or delete the data first.",
                counts=counts,
            )
        with atomic(self.db):
            self.account_repo.delete(account)
        logger.info(f"Deleted account {account_id}")
