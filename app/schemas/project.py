"""Project schemas for request/response serialization."""

from __future__ import annotations

from uuid import UUID

from pydantic import ConfigDict, Field, field_validator

from .base import BaseModelSchema, BaseSchema
from .user import UserResponse


def _check_project_name(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Project name is required")
    if len(v) < 3:
        raise ValueError("Project name must be at least 3 characters")
    if len(v) > 100:
        raise ValueError("Project name must be less than 100 characters")
    return v


class ProjectBase(BaseSchema):
    """Base project schema with common fields."""

    name: str
    description: str | None = None
    color: str | None = Field(None, max_length=20)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate and clean the project name."""
        return _check_project_name(v)


class ProjectCreate(ProjectBase):
    """Schema for creating a new project."""


class ProjectUpdate(BaseSchema):
    """Schema for updating a project."""

    name: str | None = None
    description: str | None = None
    color: str | None = Field(None, max_length=20)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        """Validate and clean the project name."""
        if v is not None:
            return _check_project_name(v)
        return v


class MemberAddRequest(BaseSchema):
    """Schema for adding a member to a project."""

    user_id: str = Field(..., description="Identifier of the user to add")

    @field_validator("user_id")
    @classmethod
    def validate_user_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("User ID is required")
        return v


class ProjectResponse(BaseModelSchema):
    """Schema for project response."""

    name: str
    description: str | None = None
    color: str | None = None
    owner_id: UUID
    owner: UserResponse | None = None
    members: list[UserResponse] = []

    model_config = ConfigDict(from_attributes=True)
