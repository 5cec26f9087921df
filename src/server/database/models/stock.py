"""Manual stock lot database model.

Shares entered by hand, independent of option assignments.
"""

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
from src.wheel.models import ShareLot


class Stock(Base):
    """Manually entered stock lot.

    Same shape as Position without the trade links, plus notes. Money
    columns are integer cents.
    """

    __tablename__ = "stocks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(
        Integer,
        ForeignKey("accounts.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    ticker = Column(String, nullable=False, index=True)
    shares = Column(Integer, nullable=False)
    cost_basis = Column(Integer, nullable=False)
    acquired_date = Column(Date, nullable=False)
    sold_date = Column(Date, nullable=True)
    sale_price = Column(Integer, nullable=True)
    capital_gain_loss = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("length(ticker) > 0", name="ck_stocks_ticker"),
        CheckConstraint("shares >= 1", name="ck_stocks_shares"),
        CheckConstraint("cost_basis >= 0", name="ck_stocks_cost_basis"),
        CheckConstraint(
            "sale_price IS NULL OR sale_price >= 0", name="ck_stocks_sale_price"
        ),
    )

    def to_record(self) -> ShareLot:
        return ShareLot(
            id=self.id,
            ticker=self.ticker,
            shares=self.shares,
            cost_basis=self.cost_basis,
            acquired_date=self.acquired_date,
            sold_date=self.sold_date,
            sale_price=self.sale_price,
            capital_gain_loss=self.capital_gain_loss,
            account_id=self.account_id,
        )

    def __repr__(self) -> str:
        return f"<Stock(id={self.id}, ticker={self.ticker}, shares={self.shares})>"
