"""Pydantic models for settings."""

from typing import Any

from pydantic import BaseModel, Field


class SettingUpdate(BaseModel):
    """New value for one setting; booleans and numbers are stored as text."""

    value: Any = Field(..., description="Setting value")

    model_config = {"json_schema_extra": {"example": {"value": "true"}}}
