"""Task API controller with FastAPI endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import (
    get_blob_store,
    get_current_user,
    get_notification_dispatcher,
    validate_token,
)
from app.database import get_db
from app.domains.task.service import TaskService
from app.schemas.base import ResponseSchema
from app.schemas.task import TaskCreate, TaskFilter, TaskResponse, TaskUpdate
from app.services.notification_service import NotificationDispatcher
from app.services.storage_service import BlobStore
from models.task import TaskPriority, TaskStatus
from models.user import User

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/tasks",
    tags=["tasks"],
    dependencies=[Depends(validate_token)],
)


def get_task_service(
    db: AsyncSession = Depends(get_db),
    storage: BlobStore = Depends(get_blob_store),
    dispatcher: NotificationDispatcher = Depends(get_notification_dispatcher),
) -> TaskService:
    return TaskService(db, dispatcher=dispatcher, storage=storage)


@router.get("", response_model=ResponseSchema)
async def get_tasks(
    project_id: Optional[str] = Query(None),
    assignee: Optional[str] = Query(None, description="Assignee user ID"),
    status: Optional[TaskStatus] = Query(None),
    priority: Optional[TaskPriority] = Query(None),
    search: Optional[str] = Query(None, description="Case-insensitive match on title or description"),
    due_date: Optional[str] = Query(None, pattern="^(overdue|today|this_week|upcoming|no_date)$"),
    sort_by: str = Query("created_at", pattern="^(created_at|updated_at|due_date|title|priority|status)$"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    current_user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """List tasks visible to the current user, ordered by position first."""
    filters = TaskFilter(
        project_id=project_id,
        assignee_id=assignee,
        status=status,
        priority=priority,
        search=search,
        due_date=due_date,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    tasks = await service.list_tasks(current_user, filters)

    return ResponseSchema(
        status="success",
        message="Tasks retrieved successfully",
        data={"tasks": [TaskResponse.model_validate(task).model_dump() for task in tasks]},
    )


@router.post("", response_model=ResponseSchema, status_code=201)
async def create_task(
    task_data: TaskCreate,
    current_user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Create a new task."""
    task = await service.create_task(current_user, task_data)

    return ResponseSchema(
        status="success",
        message="Task created successfully",
        data=TaskResponse.model_validate(task).model_dump(),
    )


@router.get("/{task_id}", response_model=ResponseSchema)
async def get_task(
    task_id: str = Path(..., description="Task ID"),
    current_user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Get a specific task by ID."""
    task = await service.get_task(current_user, task_id)

    return ResponseSchema(
        status="success",
        message="Task retrieved successfully",
        data=TaskResponse.model_validate(task).model_dump(),
    )


@router.put("/{task_id}", response_model=ResponseSchema)
async def update_task(
    task_id: str = Path(..., description="Task ID"),
    task_data: TaskUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Update a specific task."""
    task = await service.update_task(current_user, task_id, task_data)

    return ResponseSchema(
        status="success",
        message="Task updated successfully",
        data=TaskResponse.model_validate(task).model_dump(),
    )


@router.delete("/{task_id}", response_model=ResponseSchema)
async def delete_task(
    task_id: str = Path(..., description="Task ID"),
    current_user: User = Depends(get_current_user),
    service: TaskService = Depends(get_task_service),
):
    """Delete a specific task."""
    await service.delete_task(current_user, task_id)

    return ResponseSchema(status="success", message="Task deleted successfully", data=None)
