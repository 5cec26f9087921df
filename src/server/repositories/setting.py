"""Repository for key/value settings."""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from src.server.database.models.setting import Setting

logger = logging.getLogger(__name__)


class SettingRepository:
    """Repository for settings.

    Attributes:
        db: SQLAlchemy database session
    """

    def __init__(self, db: Session):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        row = self.db.query(Setting).filter(Setting.key == key).first()
        return row.value if row else None

    def get_all(self) -> dict[str, str]:
        return {row.key: row.value for row in self.db.query(Setting).order_by(Setting.key)}

    def set(self, key: str, value: str) -> Setting:
        row = self.db.query(Setting).filter(Setting.key == key).first()
        if row is None:
            row = Setting(key=key, value=value)
            self.db.add(row)
        else:
            row.value = value
        self.db.flush()
        return row

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        if value is None:
            return default
        return value.strip().lower() == "true"
