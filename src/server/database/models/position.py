"""Share position database model.

A lot of shares acquired through CSP assignment (or entered by hand),
optionally closed by a CC assignment.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, String

from src.server.database.session import Base
from src.wheel.models import ShareLot


class Position(Base):
    """Share lot model linked to the trades that opened and closed it.

    Attributes:
        id: Unique identifier
        account_id: Owning account (nullable)
        ticker: Underlying symbol
        shares: Number of shares
        cost_basis: Per-share basis in cents (premium-adjusted for assignments)
        acquired_date: Date the shares were received
        acquired_from_trade_id: CSP trade whose assignment created the lot
        sold_date: Date the shares were sold (None while open)
        sale_price: Per-share sale price in cents
        sold_via_trade_id: CC trade whose assignment sold the lot
        capital_gain_loss: Realized gain in cents, stored at sale time
    """

    __tablename__ = "positions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(
        Integer,
        ForeignKey("accounts.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    ticker = Column(String, nullable=False, index=True)
    shares = Column(Integer, nullable=False)
    cost_basis = Column(Integer, nullable=False)
    acquired_date = Column(Date, nullable=False)
    acquired_from_trade_id = Column(
        Integer,
        ForeignKey("trades.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    sold_date = Column(Date, nullable=True, index=True)
    sale_price = Column(Integer, nullable=True)
    sold_via_trade_id = Column(
        Integer,
        ForeignKey("trades.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    capital_gain_loss = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("length(ticker) > 0", name="ck_positions_ticker"),
        CheckConstraint("shares >= 1", name="ck_positions_shares"),
        CheckConstraint("cost_basis >= 0", name="ck_positions_cost_basis"),
        CheckConstraint(
            "sale_price IS NULL OR sale_price >= 0", name="ck_positions_sale_price"
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
            acquired_from_trade_id=self.acquired_from_trade_id,
            sold_via_trade_id=self.sold_via_trade_id,
            account_id=self.account_id,
        )

    def __repr__(self) -> str:
        return (
            f"<Position(id={self.id}, ticker={self.ticker}, shares={self.shares}, "
            f"cost_basis={self.cost_basis}, sold_date={self.sold_date})>"
        )
