"""Project API controller with FastAPI endpoints."""

import logging

from fastapi import APIRouter, Body, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_blob_store, get_current_user, validate_token
from app.database import get_db
from app.domains.project.service import ProjectService
from app.schemas.base import ResponseSchema
from app.schemas.project import MemberAddRequest, ProjectCreate, ProjectResponse, ProjectUpdate
from app.services.storage_service import BlobStore
from models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/projects",
    tags=["projects"],
    dependencies=[Depends(validate_token)],  # Global token validation for all routes
)


def get_project_service(
    db: AsyncSession = Depends(get_db),
    storage: BlobStore = Depends(get_blob_store),
) -> ProjectService:
    return ProjectService(db, storage=storage)


@router.get("", response_model=ResponseSchema)
async def get_projects(
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    """Get the projects the current user owns or belongs to."""
    projects = await service.list_projects(current_user)

    return ResponseSchema(
        status="success",
        message="Projects retrieved successfully",
        data={"projects": [ProjectResponse.model_validate(p).model_dump() for p in projects]},
    )


@router.post("", response_model=ResponseSchema, status_code=201)
async def create_project(
    project_data: ProjectCreate,
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    """Create a new project."""
    project = await service.create_project(current_user, project_data)

    return ResponseSchema(
        status="success",
        message="Project created successfully",
        data=ProjectResponse.model_validate(project).model_dump(),
    )


@router.get("/{project_id}", response_model=ResponseSchema)
async def get_project(
    project_id: str = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    """Get a specific project by ID."""
    project = await service.get_project(current_user, project_id)

    return ResponseSchema(
        status="success",
        message="Project retrieved successfully",
        data=ProjectResponse.model_validate(project).model_dump(),
    )


@router.put("/{project_id}", response_model=ResponseSchema)
async def update_project(
    project_id: str = Path(..., description="Project ID"),
    project_data: ProjectUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    """Update a specific project."""
    project = await service.update_project(current_user, project_id, project_data)

    return ResponseSchema(
        status="success",
        message="Project updated successfully",
        data=ProjectResponse.model_validate(project).model_dump(),
    )


@router.delete("/{project_id}", response_model=ResponseSchema)
async def delete_project(
    project_id: str = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    """Delete a specific project with its tasks and activity feed."""
    await service.delete_project(current_user, project_id)

    return ResponseSchema(status="success", message="Project deleted successfully", data=None)


@router.post("/{project_id}/members", response_model=ResponseSchema)
async def add_member(
    member_data: MemberAddRequest,
    project_id: str = Path(..., description="Project ID"),
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    """Add a user to the project members."""
    project = await service.add_member(current_user, project_id, member_data.user_id)

    return ResponseSchema(
        status="success",
        message="Member added successfully",
        data=ProjectResponse.model_validate(project).model_dump(),
    )


@router.delete("/{project_id}/members/{user_id}", response_model=ResponseSchema)
async def remove_member(
    project_id: str = Path(..., description="Project ID"),
    user_id: str = Path(..., description="User ID of the member to remove"),
    current_user: User = Depends(get_current_user),
    service: ProjectService = Depends(get_project_service),
):
    """Remove a user from the project members."""
    project = await service.remove_member(current_user, project_id, user_id)

    return ResponseSchema(
        status="success",
        message="Member removed successfully",
        data=ProjectResponse.model_validate(project).model_dump(),
    )
