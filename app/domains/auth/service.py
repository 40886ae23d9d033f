"""Registration, login and bearer-token resolution."""

import logging
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import TokenInvalidError, TokenManager, hash_password, token_manager, verify_password
from app.domains.user.service import UserService
from app.exceptions.project import InvalidCredentialsError, UserAlreadyExistsError
from app.schemas.user import UserLoginRequest, UserRegisterRequest
from models.user import User

logger = logging.getLogger(__name__)


class AuthService:
    """Identity and credential store operations."""

    def __init__(self, db: AsyncSession, tokens: Optional[TokenManager] = None):
        self.db = db
        self.tokens = tokens or token_manager
        self.users = UserService(db)

    async def register(self, data: UserRegisterRequest) -> Tuple[User, str]:
        """Create a ``user`` account and return it with a fresh token."""
        if await self.users.get_user_by_email(data.email):
            raise UserAlreadyExistsError()

        user = User(
            name=data.name,
            email=data.email,
            password_hash=hash_password(data.password),
            role="user",
        )
        try:
            self.db.add(user)
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise UserAlreadyExistsError()

        logger.info(f"👤 Registered user {user.id}")
        return user, self.tokens.create_access_token(user.id)

    async def login(self, data: UserLoginRequest) -> Tuple[User, str]:
        user = await self.users.get_user_by_email(data.email)
        if not user or not verify_password(data.password, user.password_hash):
            raise InvalidCredentialsError()
        return user, self.tokens.create_access_token(user.id)

    async def authenticate(self, token: str) -> User:
        """Resolve a bearer token to its user.

        Raises:
            TokenExpiredError: If the token has expired
            TokenInvalidError: If the token is bad or its user no longer exists
        """
        user_id: UUID = self.tokens.verify_token(token)
        user = await self.users.get_user_by_id(user_id)
        if not user:
            raise TokenInvalidError("Not authorized, user not found")
        return user
