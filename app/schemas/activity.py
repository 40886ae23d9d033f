"""Activity feed schemas."""

from typing import Any
from uuid import UUID

from pydantic import ConfigDict, Field

from .base import BaseModelSchema, BaseSchema
from .user import UserResponse


class ActivityResponse(BaseModelSchema):
    """Schema for a single activity record."""

    type: str
    description: str
    project_id: UUID
    task_id: UUID | None = None
    user_id: UUID
    user: UserResponse | None = None
    metadata: dict[str, Any] = Field(default_factory=dict, validation_alias="activity_metadata")

    model_config = ConfigDict(from_attributes=True)


class ActivityListResponse(BaseSchema):
    """Schema for a page of the activity feed."""

    activities: list[ActivityResponse]
    total: int
    page: int
    size: int
    has_next: bool
    has_prev: bool
