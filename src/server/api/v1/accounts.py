"""Account API endpoints."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from src.server.database.session import get_db
from src.server.models.account import AccountCreate, AccountResponse
from src.server.models.common import DeletedResponse, Envelope, ok
from src.server.services.account_service import AccountService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/accounts", tags=["accounts"])


@router.get("", response_model=Envelope, summary="List accounts")
def list_accounts(db: Session = Depends(get_db)) -> Envelope:
    return ok([AccountResponse.model_validate(a) for a in AccountService(db).list_accounts()])


@router.get("/{account_id}", response_model=Envelope, summary="Get account")
def get_account(account_id: int, db: Session = Depends(get_db)) -> Envelope:
    return ok(AccountResponse.model_validate(AccountService(db).get_account(account_id)))


@router.post(
    "", response_model=Envelope, status_code=status.HTTP_201_CREATED, summary="Create account"
)
def create_account(account: AccountCreate, db: Session = Depends(get_db)) -> Envelope:
    created = AccountService(db).create_account(account.model_dump(exclude_unset=True))
    return ok(AccountResponse.model_validate(created))


@router.put("/{account_id}", response_model=Envelope, summary="Rename account")
def rename_account(
    account_id: int, account: AccountCreate, db: Session = Depends(get_db)
) -> Envelope:
    updated = AccountService(db).rename_account(account_id, account.model_dump(exclude_unset=True))
    return ok(AccountResponse.model_validate(updated))


@router.delete(
    "/{account_id}",
    response_model=Envelope,
    summary="Delete account",
    description="Fails with 409 while trades, positions, transactions or stocks reference it",
)
def delete_account(account_id: int, db: Session = Depends(get_db)) -> Envelope:
    AccountService(db).delete_account(account_id)
    return ok(DeletedResponse(id=account_id))
