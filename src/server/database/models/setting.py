"""Key/value settings database model."""

import logging
from datetime import datetime

from sqlalchemy import Column, DateTime, String
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from src.server.database.session import Base

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    "live_prices_enabled": "true",
    "portfolio_mode_enabled": "false",
    "pagination_enabled": "true",
    "trades_per_page": "5",
}


class Setting(Base):
    """Flat string setting (feature toggles and UI preferences)."""

    __tablename__ = "settings"

    key = Column(String, primary_key=True)
    value = Column(String, nullable=False)
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )

    def __repr__(self) -> str:
        return f"<Setting(key={self.key}, value={self.value})>"


def seed_default_settings(engine: Engine) -> None:
    """Insert any default setting that is not stored yet."""
    with Session(engine) as db:
        existing = {key for (key,) in db.query(Setting.key).all()}
        missing = {k: v for k, v in DEFAULT_SETTINGS.items() if k not in existing}
        for key, value in missing.items():
            db.add(Setting(key=key, value=value))
        db.commit()
    if missing:
        logger.info(f"Seeded default settings: {sorted(missing)}")
