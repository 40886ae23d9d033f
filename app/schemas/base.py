"""Shared schema bases and the response envelopes."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """Schemas read straight from ORM objects."""

    model_config = ConfigDict(from_attributes=True)


class BaseModelSchema(BaseSchema):
    """Fields every persisted row carries."""

    id: UUID
    created_at: datetime
    updated_at: datetime


class ResponseSchema(BaseSchema):
    """Success envelope: ``data`` holds the entity or a named list of them."""

    status: str = "success"
    message: Optional[str] = None
    data: Optional[dict] = None


class ErrorResponseSchema(BaseSchema):
    """Error envelope rendered by the global exception handlers."""

    status: str = "error"
    message: str
    error_code: str
    details: Any = None
    timestamp: datetime
    request_id: Optional[str] = None
