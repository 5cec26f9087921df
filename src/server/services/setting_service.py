"""Service layer for key/value settings."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from src.server.database.session import atomic
from src.server.repositories.setting import SettingRepository
from src.wheel.exceptions import NotFoundError, ValidationFailed

logger = logging.getLogger(__name__)


class SettingService:
    """Reads and writes flat string settings."""

    def __init__(self, db: Session):
        self.db = db
        self.setting_repo = SettingRepository(db)

    def get_all(self) -> dict[str, str]:
        return self.setting_repo.get_all()

    def get(self, key: str) -> str:
        value = self.setting_repo.get(key)
        if value is None:
            raise NotFoundError("Setting", key)
        return value

    def set(self, key: str, value: Any) -> str:
        """Store a setting; booleans and numbers are kept as their string form."""
        if value is None:
            raise ValidationFailed(["value is required"])
        if isinstance(value, bool):
            value = "true" if value else "false"
        with atomic(self.db):
            self.setting_repo.set(key, str(value))
        logger.info(f"Setting {key} = {value}")
        return str(value)

    def live_prices_enabled(self) -> bool:
        return self.setting_repo.get_bool("live_prices_enabled", default=True)
