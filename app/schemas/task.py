"""Task and attachment schemas for request/response serialization."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import ConfigDict, Field, field_validator

from models.task import TaskPriority, TaskStatus

from .base import BaseModelSchema, BaseSchema
from .user import UserResponse


def _check_title(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Task title is required")
    if len(v) < 3:
        raise ValueError("Task title must be at least 3 characters")
    if len(v) > 200:
        raise ValueError("Task title must be less than 200 characters")
    return v


def _check_description(v: str | None) -> str | None:
    if v is not None and len(v) > 1000:
        raise ValueError("Description must be less than 1000 characters")
    return v


class TaskCreate(BaseSchema):
    """Schema for creating a new task."""

    project_id: str = Field(..., description="Owning project identifier")
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.todo
    priority: TaskPriority = TaskPriority.medium
    due_date: datetime | None = None
    assignee_id: str | None = None
    position: float = 0

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        return _check_title(v)

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return _check_description(v)


class TaskUpdate(BaseSchema):
    """Schema for updating a task.

    Only fields present in the request are applied; ``description``,
    ``due_date``, ``assignee_id`` and ``position`` may be sent as null.
    """

    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    assignee_id: str | None = None
    position: float | None = None

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str | None) -> str | None:
        if v is not None:
            return _check_title(v)
        return v

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str | None) -> str | None:
        return _check_description(v)


class TaskFilter(BaseSchema):
    """Schema for filtering tasks."""

    project_id: str | None = None
    assignee_id: str | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    search: str | None = None
    due_date: str | None = Field(
        None, pattern="^(overdue|today|this_week|upcoming|no_date)$"
    )
    sort_by: str = Field(
        default="created_at", pattern="^(created_at|updated_at|due_date|title|priority|status)$"
    )
    sort_order: str = Field(default="desc", pattern="^(asc|desc)$")


class AttachmentResponse(BaseSchema):
    """Schema for attachment metadata."""

    id: UUID
    filename: str
    original_name: str
    url: str
    key: str | None = None
    size: int
    content_type: str | None = None
    uploaded_at: datetime


class TaskResponse(BaseModelSchema):
    """Schema for task response."""

    title: str
    description: str | None = None
    status: str
    priority: str
    due_date: datetime | None = None
    position: float
    project_id: UUID
    assignee_id: UUID | None = None
    created_by_id: UUID
    assignee: UserResponse | None = None
    created_by: UserResponse | None = None
    attachments: list[AttachmentResponse] = []

    model_config = ConfigDict(from_attributes=True)


class PresignedUrlResponse(BaseSchema):
    """Schema for a temporary download URL."""

    url: str
    expires_in: int
