"""Common Pydantic models for API requests and responses.

This module contains the response envelope shared by every endpoint and
the base model that maps snake_case fields to camelCase JSON.
"""

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.wheel.money import to_dollars


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys.

    Requests are accepted with either camelCase or snake_case keys.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def dollars(cents: Optional[int]) -> Optional[float]:
    """Stored cents to response dollars (None passes through)."""
    return to_dollars(cents)


def iso(day: Optional[date]) -> Optional[str]:
    return day.isoformat() if day else None


class Meta(BaseModel):
    """Response metadata; endpoints may add keys such as pagination."""

    model_config = ConfigDict(extra="allow")

    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Response time")


class Envelope(BaseModel):
    """Success envelope wrapping every payload.

    Example:
        >>> {"success": true, "data": {...}, "meta": {"timestamp": "..."}}
    """

    success: bool = Field(default=True, description="Always true for success")
    data: Any = Field(..., description="Response payload")
    meta: Meta = Field(default_factory=Meta, description="Response metadata")


def ok(data: Any, **meta: Any) -> Envelope:
    """Wrap a payload in the success envelope."""
    return Envelope(data=data, meta=Meta(**meta))


class ErrorBody(BaseModel):
    """Error details.

    Attributes:
        message: Human-readable error message
        details: Every violated rule, for validation failures
        counts: Blocking rows per entity, for conflicts
    """

    message: str = Field(..., description="Human-readable error message")
    details: Optional[Any] = Field(default=None, description="Additional error details")
    counts: Optional[dict[str, int]] = Field(default=None, description="Blocking row counts")


class ErrorEnvelope(BaseModel):
    """Failure envelope returned by the exception handlers."""

    success: bool = Field(default=False, description="Always false for errors")
    error: ErrorBody
    meta: Meta = Field(default_factory=Meta)


class DeletedResponse(CamelModel):
    """Acknowledgement of a delete."""

    deleted: bool = True
    id: Any


class HealthResponse(BaseModel):
    """Health check response model.

    Attributes:
        status: Service health status
        timestamp: Current server timestamp
        database_connected: Whether the database answers queries
    """

    status: str = Field(default="healthy", description="Service health status")
    timestamp: datetime = Field(
        default_factory=datetime.utcnow, description="Current server timestamp"
    )
    database_connected: Optional[bool] = Field(
        default=None, description="Whether the database answers queries"
    )


class InfoResponse(BaseModel):
    """System information response model.

    Attributes:
        app_name: Application name
        version: Application version
        status: Service status
        database_connected: Whether database connection is working
        timestamp: Current server timestamp
    """

    app_name: str = Field(..., description="Application name")
    version: str = Field(..., description="Application version")
    status: str = Field(default="running", description="Service status")
    database_connected: bool = Field(..., description="Database connection status")
    timestamp: datetime = Field(
        default_factory=datetime.utcnow, description="Current server timestamp"
    )
