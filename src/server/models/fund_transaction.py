"""Pydantic models for the cash-flow journal."""

from typing import Optional

from pydantic import Field

from src.server.database.models.fund_transaction import FundTransaction
from src.server.models.common import CamelModel, dollars, iso


class FundTransactionCreate(CamelModel):
    """Request schema for a cash-flow entry.

    Attributes:
        type: deposit, withdrawal, dividend, interest or fee
        amount: Positive magnitude in dollars
        date: YYYY-MM-DD
    """

    account_id: Optional[int] = Field(None, description="Owning account")
    type: Optional[str] = Field(None, description="Transaction type")
    amount: Optional[float] = Field(None, description="Positive amount in dollars")
    date: Optional[str] = Field(None, description="Transaction date (YYYY-MM-DD)")
    description: Optional[str] = Field(None, description="Free-form description")

    model_config = {
        "json_schema_extra": {
            "example": {
                "accountId": 1,
                "type": "deposit",
                "amount": 10000.0,
                "date": "2025-01-02",
            }
        }
    }


class FundTransactionImportRequest(CamelModel):
    transactions: list[FundTransactionCreate]
    account_id: Optional[int] = None


class FundTransactionResponse(CamelModel):
    id: int
    account_id: int
    type: str
    amount: float
    date: str
    description: Optional[str] = None

    @classmethod
    def from_model(cls, tx: FundTransaction) -> "FundTransactionResponse":
        return cls(
            id=tx.id,
            account_id=tx.account_id,
            type=tx.type,
            amount=dollars(tx.amount),
            date=iso(tx.date),
            description=tx.description,
        )
