# app/domains/user/service.py
import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.security import hash_password
from app.exceptions.base import ValidationError
from app.exceptions.project import SelfDemotionError, UserNotFoundError
from app.shared.identifiers import parse_uuid
from models import USER_ROLES, User

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_PASSWORD = "admin123"


class UserService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_id(self, user_id: UUID) -> Optional[User]:
        """Get a user by ID."""
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        """Get a user by email (stored lowercase)."""
        result = await self.db.execute(select(User).where(User.email == email.strip().lower()))
        return result.scalar_one_or_none()

    async def get_user(self, user_id: str | UUID) -> User:
        """Get a user by a client-supplied id, or raise ``UserNotFoundError``."""
        user = await self.get_user_by_id(parse_uuid(user_id, UserNotFoundError))
        if not user:
            raise UserNotFoundError()
        return user

    async def search_users(self, search: Optional[str] = None) -> List[User]:
        """Directory lookup by name or email, for adding members to projects."""
        stmt = select(User)
        term = (search or "").strip()
        if term:
            pattern = f"%{term}%"
            stmt = stmt.where(or_(User.name.ilike(pattern), User.email.ilike(pattern)))
        stmt = stmt.order_by(User.name).limit(settings.user_search_limit)
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def list_all_users(self) -> List[User]:
        """All users, newest first."""
        result = await self.db.execute(select(User).order_by(desc(User.created_at)))
        return list(result.scalars().all())

    async def update_role(self, actor: User, user_id: str | UUID, role: Optional[str]) -> User:
        """Set a user's global role. Callers must already have checked that ``actor`` is an admin."""
        if not role or role not in USER_ROLES:
            raise ValidationError('Invalid role. Must be "user" or "admin"')

        target_id = parse_uuid(user_id, UserNotFoundError)
        if target_id == actor.id and role == "user":
            logger.info(f"Admin {actor.id} attempted to remove their own admin role")
            raise SelfDemotionError()

        user = await self.get_user_by_id(target_id)
        if not user:
            raise UserNotFoundError()

        try:
            user.role = role
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise e
        logger.info(f"🔑 User {user.id} role set to {role} by {actor.id}")
        return user

    async def ensure_admin(
        self, email: str, password: Optional[str] = None, name: Optional[str] = None
    ) -> Tuple[User, str]:
        """
        Create an admin account or promote an existing user.

        The password of an existing user is replaced only when a non-default
        one is given. Running it again for an existing admin changes nothing.

        Returns:
            The user and one of ``"exists"``, ``"promoted"`` or ``"created"``
        """
        user = await self.get_user_by_email(email)
        if user and user.role == "admin":
            return user, "exists"

        try:
            if user:
                user.role = "admin"
                if password and password != DEFAULT_ADMIN_PASSWORD:
                    user.password_hash = hash_password(password)
                outcome = "promoted"
            else:
                user = User(
                    name=name or "Admin User",
                    email=email.strip().lower(),
                    password_hash=hash_password(password or DEFAULT_ADMIN_PASSWORD),
                    role="admin",
                )
                self.db.add(user)
                outcome = "created"
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise e
        return user, outcome
