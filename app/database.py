"""Async engine, session factory and the ``get_db`` dependency.

Test runs (``TESTING=true``) connect to ``TEST_DATABASE_URL`` instead of
``DATABASE_URL``. Tables are declared on ``models.base.Base``.
"""

import os
from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.core.config import settings


def resolve_database_url() -> str:
    if os.getenv("TESTING") == "true":
        url = os.getenv("TEST_DATABASE_URL") or settings.test_database_url
    else:
        url = settings.database_url
    url = (url or "").strip()
    if not url:
        raise RuntimeError(
            "DATABASE_URL is not configured. Set it in the environment or .env file "
            "(e.g., DATABASE_URL=postgresql+asyncpg://<user>:<pass>@<host>/<db>)."
        )
    return url


DB_URL = resolve_database_url()

# Pool sizing only applies to server databases
engine_options = {} if DB_URL.startswith("sqlite") else {
    "pool_size": settings.db_pool_size,
    "max_overflow": settings.db_max_overflow,
    "pool_pre_ping": True,
}

engine = create_async_engine(DB_URL, echo=settings.debug, **engine_options)

# Objects stay usable after commit; services re-query when they need fresh state
AsyncSessionLocal = async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with AsyncSessionLocal() as session:
        yield session
