"""Trade record database model.

Records individual option sales (cash-secured puts and covered calls).
Money columns hold integer cents.
"""

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)

from src.server.database.session import Base
from src.wheel.models import TradeRecord
from src.wheel.state import TradeStatus, TradeType


class Trade(Base):
    """Trade record model for option trades.

    Attributes:
        id: Unique identifier (auto-incrementing integer)
        account_id: Owning account (nullable)
        ticker: Underlying symbol, upper case
        type: "CSP" or "CC"
        strike: Strike price in cents
        quantity: Number of contracts (100 shares each)
        delta: Delta at entry, 0..1 (optional)
        entry_price: Premium received per share, in cents
        close_price: Cost to close per share, in cents (0 while open)
        opened_date: Date the option was sold
        expiration_date: Option expiration date
        closed_date: Date the trade left Open (if applicable)
        status: "Open", "Expired", "Assigned", "Closed" or "Rolled"
        parent_trade_id: Trade this one was rolled from (or linked to)
        notes: Free text
    """

    __tablename__ = "trades"

    id = Column(Integer, primary_key=True, autoincrement=True)
    account_id = Column(
        Integer,
        ForeignKey("accounts.id", ondelete="RESTRICT"),
        nullable=True,
        index=True,
    )
    ticker = Column(String, nullable=False, index=True)
    type = Column(String, nullable=False)
    strike = Column(Integer, nullable=False)
    quantity = Column(Integer, nullable=False, default=1)
    delta = Column(Float, nullable=True)
    entry_price = Column(Integer, nullable=False)
    close_price = Column(Integer, nullable=False, default=0)
    opened_date = Column(Date, nullable=False, index=True)
    expiration_date = Column(Date, nullable=False, index=True)
    closed_date = Column(Date, nullable=True, index=True)
    status = Column(String, nullable=False, default=TradeStatus.OPEN.value, index=True)
    parent_trade_id = Column(
        Integer,
        ForeignKey("trades.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("length(ticker) > 0", name="ck_trades_ticker"),
        CheckConstraint("type IN ('CSP', 'CC')", name="ck_trades_type"),
        CheckConstraint("strike > 0", name="ck_trades_strike"),
        CheckConstraint("quantity >= 1", name="ck_trades_quantity"),
        CheckConstraint("entry_price >= 0", name="ck_trades_entry_price"),
        CheckConstraint("close_price >= 0", name="ck_trades_close_price"),
        CheckConstraint(
            "delta IS NULL OR (delta >= 0 AND delta <= 1)", name="ck_trades_delta"
        ),
        CheckConstraint(
            "expiration_date >= opened_date", name="ck_trades_expiration"
        ),
        Index("ix_trades_status_opened_date", "status", "opened_date"),
    )

    def to_record(self) -> TradeRecord:
        """Convert to the domain record used by chain and stats code."""
        return TradeRecord(
            id=self.id,
            ticker=self.ticker,
            type=TradeType(self.type),
            strike=self.strike,
            entry_price=self.entry_price,
            opened_date=self.opened_date,
            expiration_date=self.expiration_date,
            quantity=self.quantity,
            close_price=self.close_price or 0,
            status=TradeStatus(self.status),
            closed_date=self.closed_date,
            parent_trade_id=self.parent_trade_id,
            delta=self.delta,
            notes=self.notes,
            account_id=self.account_id,
        )

    def __repr__(self) -> str:
        return (
            f"<Trade(id={self.id}, ticker={self.ticker}, type={self.type}, "
            f"strike={self.strike}, status={self.status}, "
            f"parent={self.parent_trade_id})>"
        )
