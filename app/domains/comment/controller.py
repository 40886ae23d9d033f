"""Comment API controller."""

from fastapi import APIRouter, Body, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.dependencies import get_current_user, validate_token
from app.database import get_db
from app.domains.comment.service import CommentService
from app.schemas.base import ResponseSchema
from app.schemas.comment import CommentCreate, CommentResponse, CommentUpdate
from models.user import User

router = APIRouter(
    prefix="/api/comments",
    tags=["comments"],
    dependencies=[Depends(validate_token)],
)


@router.get("/task/{task_id}", response_model=ResponseSchema)
async def get_task_comments(
    task_id: str = Path(..., description="Task ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Get the comments of a task, newest first."""
    comments = await CommentService(db).list_for_task(current_user, task_id)

    return ResponseSchema(
        status="success",
        message="Comments retrieved successfully",
        data={"comments": [CommentResponse.model_validate(c).model_dump() for c in comments]},
    )


@router.post("", response_model=ResponseSchema, status_code=201)
async def create_comment(
    comment_data: CommentCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Add a comment to a task."""
    comment = await CommentService(db).create_comment(current_user, comment_data)

    return ResponseSchema(
        status="success",
        message="Comment created successfully",
        data=CommentResponse.model_validate(comment).model_dump(),
    )


@router.put("/{comment_id}", response_model=ResponseSchema)
async def update_comment(
    comment_id: str = Path(..., description="Comment ID"),
    comment_data: CommentUpdate = Body(...),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Edit a comment."""
    comment = await CommentService(db).update_comment(current_user, comment_id, comment_data)

    return ResponseSchema(
        status="success",
        message="Comment updated successfully",
        data=CommentResponse.model_validate(comment).model_dump(),
    )


@router.delete("/{comment_id}", response_model=ResponseSchema)
async def delete_comment(
    comment_id: str = Path(..., description="Comment ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Delete a comment."""
    await CommentService(db).delete_comment(current_user, comment_id)

    return ResponseSchema(status="success", message="Comment deleted successfully", data=None)
