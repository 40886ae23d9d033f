"""
Declarative base, the portable UUID column type and shared row columns.

Every table uses a UUID primary key and naive-UTC ``created_at`` /
``updated_at`` timestamps. UUIDs are native on PostgreSQL and stored as
36-character strings elsewhere (SQLite in tests).
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CHAR, Column, DateTime, TypeDecorator
from sqlalchemy.dialects.postgresql import UUID as PostgreSQLUUID
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def utcnow() -> datetime:
    """Current UTC time without tzinfo, matching the DateTime columns."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class UUID(TypeDecorator):
    """UUID column that round-trips ``uuid.UUID`` on any dialect."""

    impl = CHAR(36)
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == "postgresql":
            return dialect.type_descriptor(PostgreSQLUUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is None or dialect.name == "postgresql":
            return value
        return str(value if isinstance(value, uuid.UUID) else uuid.UUID(str(value)))

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


class BaseModel(Base):
    """
    Abstract parent of every table.

    :ivar id: Random UUID primary key.
    :type id: uuid.UUID
    :ivar created_at: Insert time (UTC).
    :type created_at: datetime
    :ivar updated_at: Last update time (UTC), refreshed on every UPDATE.
    :type updated_at: datetime
    """

    __abstract__ = True

    id = Column(UUID(), primary_key=True, default=uuid.uuid4)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
