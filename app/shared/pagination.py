"""Offset pagination for list endpoints."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.sql import Select


class PaginationParams(BaseModel):
    """1-based page number and page size from the query string."""

    page: int = Field(default=1, ge=1, description="Page number (1-based)")
    size: int = Field(default=20, ge=1, le=100, description="Page size")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    def capped(self, limit: Optional[int]) -> "PaginationParams":
        """Return a copy whose page size does not exceed ``limit``."""
        if limit is None or self.size <= limit:
            return self
        return self.model_copy(update={"size": limit})


async def paginate(db: AsyncSession, query: Select, pagination: PaginationParams) -> Dict[str, Any]:
    """
    Run ``query`` for one page and count the full result set.

    Returns:
        Dictionary with ``items``, ``total``, ``page``, ``size``,
        ``has_next``, ``has_prev`` and ``total_pages``
    """
    # Ordering does not change the count
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0
    total_pages = -(-total // pagination.size)

    result = await db.execute(query.offset(pagination.offset).limit(pagination.size))

    return {
        "items": list(result.scalars().all()),
        "total": total,
        "page": pagination.page,
        "size": pagination.size,
        "has_next": pagination.page < total_pages,
        "has_prev": pagination.page > 1,
        "total_pages": total_pages,
    }
