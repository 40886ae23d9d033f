# app/core/dependencies.py
import logging

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.permissions import is_admin
from app.database import get_db
from app.domains.auth.service import AuthService
from app.exceptions.base import AppPermissionError, AuthenticationError
from app.services.notification_service import NotificationDispatcher, notification_dispatcher
from app.services.storage_service import BlobStore, blob_store
from models import User

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def validate_token(
    token: HTTPAuthorizationCredentials | None = Depends(security),
) -> str:
    """Extract the bearer token from the Authorization header.

    Returns:
        str: The raw token

    Raises:
        AuthenticationError: If no bearer token was sent
    """
    if not token or not token.credentials:
        raise AuthenticationError("Not authorized, no token")
    return token.credentials


async def get_current_user(
    request: Request,
    token: str = Depends(validate_token),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get current authenticated user from the bearer token.

    Returns:
        User: Current authenticated user

    Raises:
        AuthenticationError: If the token is invalid, expired or its user is gone
    """
    user = await AuthService(db).authenticate(token)

    # Add user info to request state for logging
    request.state.user_id = user.id
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Allow only users with the global ``admin`` role."""
    if not is_admin(current_user):
        logger.info(f"User {current_user.id} denied admin-only route")
        raise AppPermissionError("Access denied. Required role: admin")
    return current_user


def get_blob_store() -> BlobStore:
    return blob_store


def get_notification_dispatcher() -> NotificationDispatcher:
    return notification_dispatcher
