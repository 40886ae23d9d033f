"""Comment service layer with business logic."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.permissions import Action, CommentResource, ProjectResource, require
from app.domains.activity.service import ActivityService
from app.domains.task.service import TaskService
from app.exceptions.base import ValidationError
from app.exceptions.task import CommentNotFoundError, CommentPermissionError
from app.schemas.comment import CommentCreate, CommentUpdate
from app.services.effects import required, run_effects
from app.shared.identifiers import parse_uuid
from models.activity import ActivityType
from models.comment import Comment
from models.user import User

logger = logging.getLogger(__name__)


class CommentService:
    """Service class for comment business logic."""

    def __init__(
        self,
        db: AsyncSession,
        activities: Optional[ActivityService] = None,
        tasks: Optional[TaskService] = None,
    ):
        self.db = db
        self.activities = activities or ActivityService(db)
        self.tasks = tasks or TaskService(db, activities=self.activities)

    async def _load_comment(self, comment_id: str | UUID) -> Comment:
        comment_uuid = parse_uuid(comment_id, CommentNotFoundError)
        stmt = select(Comment).where(Comment.id == comment_uuid).execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        comment = result.scalar_one_or_none()
        if not comment:
            raise CommentNotFoundError()
        return comment

    async def _comment_resource(self, comment: Comment) -> CommentResource:
        task = await self.tasks.load_task(comment.task_id)
        project = await self.tasks.projects.load_project(task.project_id)
        return CommentResource(author_id=comment.author_id, project=ProjectResource.from_project(project))

    async def list_for_task(self, actor: User, task_id: str | UUID) -> List[Comment]:
        """Comments of a task, newest first."""
        task = await self.tasks.load_task(task_id)
        await self.tasks.authorize_task(actor, Action.comment_view, task)

        stmt = (
            select(Comment)
            .where(Comment.task_id == task.id)
            .order_by(desc(Comment.created_at))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create_comment(self, actor: User, comment_data: CommentCreate) -> Comment:
        task = await self.tasks.load_task(comment_data.task_id)
        project = await self.tasks.authorize_task(actor, Action.comment_create, task)

        comment = Comment(content=comment_data.content, task_id=task.id, author_id=actor.id)

        async def save_comment():
            try:
                self.db.add(comment)
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                raise ValidationError(f"Failed to create comment: {str(e)}")

        async def record_added():
            await self.activities.record(
                ActivityType.comment_added,
                f"{actor.name} added a comment",
                project_id=project.id,
                user_id=actor.id,
                task_id=task.id,
                metadata={"commentId": str(comment.id)},
            )

        await run_effects([required("save comment", save_comment), required("record comment_added", record_added)])
        return await self._load_comment(comment.id)

    async def update_comment(self, actor: User, comment_id: str | UUID, comment_data: CommentUpdate) -> Comment:
        """Edit a comment; only its author (or an admin) may do so."""
        comment = await self._load_comment(comment_id)
        require(actor, Action.comment_edit, await self._comment_resource(comment), CommentPermissionError)

        comment.content = comment_data.content
        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to update comment: {str(e)}")
        return await self._load_comment(comment.id)

    async def delete_comment(self, actor: User, comment_id: str | UUID) -> None:
        """Delete a comment as its author or as the owner of the task's project."""
        comment = await self._load_comment(comment_id)
        require(actor, Action.comment_delete, await self._comment_resource(comment), CommentPermissionError)

        try:
            await self.db.delete(comment)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to delete comment: {str(e)}")
        logger.info(f"🗑️ Comment {comment.id} deleted by {actor.id}")
