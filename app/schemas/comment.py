"""Comment schemas."""

from uuid import UUID

from pydantic import ConfigDict, Field, field_validator

from .base import BaseModelSchema, BaseSchema
from .user import UserResponse


def _check_content(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Comment content is required")
    return v


class CommentCreate(BaseSchema):
    """Schema for creating a comment."""

    content: str
    task_id: str = Field(..., description="Task the comment belongs to")

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _check_content(v)

    @field_validator("task_id")
    @classmethod
    def validate_task_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Task ID is required")
        return v


class CommentUpdate(BaseSchema):
    """Schema for editing a comment."""

    content: str

    @field_validator("content")
    @classmethod
    def validate_content(cls, v: str) -> str:
        return _check_content(v)


class CommentResponse(BaseModelSchema):
    """Schema for comment response."""

    content: str
    task_id: UUID
    author_id: UUID
    author: UserResponse | None = None

    model_config = ConfigDict(from_attributes=True)
