"""Account database model.

Accounts scope trades, positions, stocks and fund transactions. An
account cannot be deleted while any of those rows reference it.
"""

from datetime import datetime

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String

from src.server.database.session import Base


class Account(Base):
    """Named brokerage account.

    Attributes:
        id: Unique identifier
        name: Display name (non-empty)
        created_at: Creation timestamp
        updated_at: Last modification timestamp
    """

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    __table_args__ = (CheckConstraint("length(name) > 0", name="ck_accounts_name"),)

    def __repr__(self) -> str:
        return f"<Account(id={self.id}, name={self.name})>"
