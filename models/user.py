"""
Provides the User model for the application's database schema.

A user is an identity that can own projects, belong to projects as a member,
create and be assigned tasks, and author comments. The ``role`` column drives
the global admin bypass of the access-control layer.

Attributes
----------
name : sqlalchemy.Column
    Display name used in activity descriptions and notification emails.
email : sqlalchemy.Column
    The email address of the user, which must be unique.
password_hash : sqlalchemy.Column
    Argon2 hash of the user's password.
role : sqlalchemy.Column
    Either ``user`` or ``admin``. Defaults to ``user``.
"""

from sqlalchemy import Column, String
from sqlalchemy.orm import relationship

from .base import BaseModel

USER_ROLES = ("user", "admin")


class User(BaseModel):
    """
    Represents a user entity in the application.

    :ivar name: Display name of the user.
    :type name: str
    :ivar email: Email address of the user. It must be unique.
    :type email: str
    :ivar password_hash: Hashed password, never serialized.
    :type password_hash: str
    :ivar role: Global role, ``user`` or ``admin``.
    :type role: str
    """

    __tablename__ = "users"

    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user")

    # Relationships
    owned_projects = relationship("Project", back_populates="owner")
