"""Authentication controller endpoints."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_user
from app.database import get_db
from app.domains.auth.service import AuthService
from app.schemas.base import ResponseSchema
from app.schemas.user import AuthResponse, UserLoginRequest, UserRegisterRequest, UserResponse
from models.user import User

router = APIRouter(prefix="/api/auth", tags=["Authentication"])


@router.post("/register", response_model=ResponseSchema, status_code=status.HTTP_201_CREATED)
async def register(register_data: UserRegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register a new user and return an access token."""
    user, token = await AuthService(db).register(register_data)

    return ResponseSchema(
        status="success",
        message="User registered successfully",
        data=AuthResponse(token=token, user=UserResponse.model_validate(user)).model_dump(),
    )


@router.post("/login", response_model=ResponseSchema)
async def login(login_data: UserLoginRequest, db: AsyncSession = Depends(get_db)):
    """Authenticate with email and password."""
    user, token = await AuthService(db).login(login_data)

    return ResponseSchema(
        status="success",
        message="Login successful",
        data=AuthResponse(token=token, user=UserResponse.model_validate(user)).model_dump(),
    )


@router.get("/me", response_model=ResponseSchema)
async def get_current_user_info(current_user: User = Depends(get_current_user)):
    """Get current authenticated user information."""
    return ResponseSchema(
        status="success",
        message="User retrieved successfully",
        data=UserResponse.model_validate(current_user).model_dump(),
    )
