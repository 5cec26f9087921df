"""Settings API endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from src.server.database.session import get_db
from src.server.models.common import Envelope, ok
from src.server.models.setting import SettingUpdate
from src.server.services.setting_service import SettingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=Envelope, summary="All settings")
def get_settings(db: Session = Depends(get_db)) -> Envelope:
    return ok(SettingService(db).get_all())


@router.put(
    "",
    response_model=Envelope,
    summary="Update several settings",
    description="Body is a flat object of key/value pairs",
)
def update_settings(values: dict[str, Any], db: Session = Depends(get_db)) -> Envelope:
    service = SettingService(db)
    for key, value in values.items():
        service.set(key, value)
    return ok(service.get_all())


@router.get("/{key}", response_model=Envelope, summary="Get setting")
def get_setting(key: str, db: Session = Depends(get_db)) -> Envelope:
    return ok({"key": key, "value": SettingService(db).get(key)})


@router.put("/{key}", response_model=Envelope, summary="Update setting")
def update_setting(key: str, update: SettingUpdate, db: Session = Depends(get_db)) -> Envelope:
    value = SettingService(db).set(key, update.value)
    return ok({"key": key, "value": value})
