"""User-related Pydantic schemas for request/response validation."""

from typing import Optional

from pydantic import EmailStr, Field, field_validator

from .base import BaseModelSchema, BaseSchema


class UserRegisterRequest(BaseSchema):
    """Schema for user registration request."""

    name: str = Field(..., description="Display name")
    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., description="Plain password, hashed before storage")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name is required")
        if len(v) < 2:
            raise ValueError("Name must be at least 2 characters")
        if len(v) > 50:
            raise ValueError("Name must be less than 50 characters")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < 6:
            raise ValueError("Password must be at least 6 characters")
        return v


class UserLoginRequest(BaseSchema):
    """Schema for user login request."""

    email: EmailStr = Field(..., description="User's email address")
    password: str = Field(..., min_length=1, description="Plain password")

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return v.strip().lower()


class UserResponse(BaseModelSchema):
    """Schema for user response data."""

    name: str
    email: str
    role: str


class AuthResponse(BaseSchema):
    """Schema for authentication response."""

    token: str
    token_type: str = "bearer"
    user: UserResponse


class RoleUpdateRequest(BaseSchema):
    """Schema for updating a user's global role."""

    role: Optional[str] = Field(None, description="Either 'user' or 'admin'")
