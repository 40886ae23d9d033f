"""Project activity feed endpoint."""

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_user, validate_token
from app.database import get_db
from app.domains.activity.service import ActivityService
from app.schemas.activity import ActivityListResponse, ActivityResponse
from app.schemas.base import ResponseSchema
from app.shared.pagination import PaginationParams
from models.user import User

router = APIRouter(
    prefix="/api/activities",
    tags=["activities"],
    dependencies=[Depends(validate_token)],
)


@router.get("/project/{project_id}", response_model=ResponseSchema)
async def get_project_activities(
    project_id: str = Path(..., description="Project ID"),
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=100, description="Page size, capped at 50"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Newest-first activity feed of a project."""
    result = await ActivityService(db).list_for_project(
        current_user, project_id, PaginationParams(page=page, size=size)
    )

    return ResponseSchema(
        status="success",
        message="Activities retrieved successfully",
        data=ActivityListResponse(
            activities=[ActivityResponse.model_validate(a) for a in result["items"]],
            total=result["total"],
            page=result["page"],
            size=result["size"],
            has_next=result["has_next"],
            has_prev=result["has_prev"],
        ).model_dump(),
    )
