"""User directory and administration endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_user, require_admin, validate_token
from app.database import get_db
from app.domains.user.service import UserService
from app.schemas.base import ResponseSchema
from app.schemas.user import RoleUpdateRequest, UserResponse
from models.user import User

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    dependencies=[Depends(validate_token)],
)


@router.get("", response_model=ResponseSchema)
async def search_users(
    search: Optional[str] = Query(None, description="Match against name or email"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Search users to add to projects."""
    users = await UserService(db).search_users(search)

    return ResponseSchema(
        status="success",
        message="Users retrieved successfully",
        data={"users": [UserResponse.model_validate(user).model_dump() for user in users]},
    )


@router.get("/admin/all", response_model=ResponseSchema)
async def get_all_users(
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """List every user with their role (admin only)."""
    users = await UserService(db).list_all_users()

    return ResponseSchema(
        status="success",
        message="Users retrieved successfully",
        data={"users": [UserResponse.model_validate(user).model_dump() for user in users]},
    )


@router.get("/{user_id}", response_model=ResponseSchema)
async def get_user(
    user_id: str = Path(..., description="User ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get a single user."""
    user = await UserService(db).get_user(user_id)

    return ResponseSchema(
        status="success",
        message="User retrieved successfully",
        data=UserResponse.model_validate(user).model_dump(),
    )


@router.put("/{user_id}/role", response_model=ResponseSchema)
async def update_user_role(
    role_data: RoleUpdateRequest,
    user_id: str = Path(..., description="User ID"),
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Change a user's global role (admin only)."""
    user = await UserService(db).update_role(current_user, user_id, role_data.role)

    return ResponseSchema(
        status="success",
        message="User role updated successfully",
        data=UserResponse.model_validate(user).model_dump(),
    )
