"""Pydantic models for accounts."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from src.server.models.common import CamelModel


class AccountCreate(CamelModel):
    """Request schema for creating or renaming an account."""

    name: Optional[str] = Field(None, description="Display name")

    model_config = {"json_schema_extra": {"example": {"name": "Roth IRA"}}}


class AccountResponse(CamelModel):
    id: int
    name: str
    created_at: datetime
    updated_at: datetime
