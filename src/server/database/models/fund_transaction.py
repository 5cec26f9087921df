"""Cash-flow journal database model."""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
)

from src.server.database.session import Base
from src.wheel.models import FundTransactionRecord
from src.wheel.state import FundTransactionType


class FundTransaction(Base):
    """Deposit, withdrawal, dividend, interest or fee entry.

    The amount is a positive magnitude in cents; the type decides the
    sign when totals are aggregated.
    """

    __tablename__ = "fund_transactions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(
        Integer,
        ForeignKey("accounts.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    type = Column(String, nullable=False)
    amount = Column(Integer, nullable=False)
    date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint(
            "type IN ('deposit', 'withdrawal', 'dividend', 'interest', 'fee')",
            name="ck_fund_transactions_type",
        ),
        CheckConstraint("amount > 0", name="ck_fund_transactions_amount"),
    )

    def to_record(self) -> FundTransactionRecord:
        return FundTransactionRecord(
            id=self.id,
            type=FundTransactionType(self.type),
            amount=self.amount,
            date=self.date,
            description=self.description,
            account_id=self.account_id,
        )

    def __repr__(self) -> str:
        return (
            f"<FundTransaction(id={self.id}, type={self.type}, "
            f"amount={self.amount}, date={self.date})>"
        )
