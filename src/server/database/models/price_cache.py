"""Last successful quote per ticker."""

from datetime import datetime

from sqlalchemy import Column, DateTime, Float, Integer, String

from src.server.database.session import Base


class PriceCache(Base):
    """Cached quote, served when the live source is disabled or down.

    Attributes:
        ticker: Symbol (primary key)
        price: Last price in cents
        change: Day change in cents
        change_percent: Day change in percent
        name: Security name reported by the source
        updated_at: When the quote was fetched
    """

    __tablename__ = "price_cache"

    ticker = Column(String, primary_key=True)
    price = Column(Integer, nullable=False)
    change = Column(Integer, nullable=True)
    change_percent = Column(Float, nullable=True)
    name = Column(String, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<PriceCache(ticker={self.ticker}, price={self.price})>"
