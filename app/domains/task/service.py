"""Task service layer with business logic."""

import logging
from datetime import timedelta
from typing import List, Optional
from uuid import UUID

from sqlalchemy import and_, asc, delete, desc, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.permissions import Action, ProjectResource, is_admin, require
from app.domains.activity.service import ActivityService
from app.domains.project.service import ProjectService
from app.exceptions.base import NotFoundError, ValidationError
from app.exceptions.task import TaskNotFoundError, TaskPermissionError
from app.schemas.task import TaskCreate, TaskFilter, TaskUpdate
from app.services.effects import Effect, best_effort, required, run_effects
from app.services.notification_service import NotificationDispatcher, notification_dispatcher
from app.services.storage_service import BlobStore, blob_store
from app.shared.identifiers import parse_uuid
from models.activity import ActivityType
from models.base import utcnow
from models.comment import Comment
from models.project import Project, project_members
from models.task import Task, TaskStatus
from models.user import User

logger = logging.getLogger(__name__)

SORTABLE_FIELDS = {
    "created_at": Task.created_at,
    "updated_at": Task.updated_at,
    "due_date": Task.due_date,
    "title": Task.title,
    "priority": Task.priority,
    "status": Task.status,
}


class TaskService:
    """Task mutations and queries.

    Every call resolves the task's project and checks access on it; tasks have
    no permissions of their own. Activity records and assignment notices are
    issued as an ordered effect list after the primary write.
    """

    def __init__(
        self,
        db: AsyncSession,
        dispatcher: Optional[NotificationDispatcher] = None,
        storage: Optional[BlobStore] = None,
        activities: Optional[ActivityService] = None,
        projects: Optional[ProjectService] = None,
    ):
        self.db = db
        self.dispatcher = dispatcher or notification_dispatcher
        self.storage = storage or blob_store
        self.activities = activities or ActivityService(db)
        self.projects = projects or ProjectService(db, storage=self.storage, activities=self.activities)

    async def load_task(self, task_id: str | UUID) -> Task:
        """Fetch a task by id with assignee, creator and attachments, or raise ``TaskNotFoundError``."""
        task_uuid = parse_uuid(task_id, TaskNotFoundError)
        stmt = select(Task).where(Task.id == task_uuid).execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        task = result.scalar_one_or_none()
        if not task:
            raise TaskNotFoundError()
        return task

    async def authorize_task(self, actor: User, action: Action, task: Task) -> Project:
        """Check ``action`` against the task's project and return that project."""
        project = await self.projects.load_project(task.project_id)
        require(actor, action, ProjectResource.from_project(project), TaskPermissionError)
        return project

    async def get_task(self, actor: User, task_id: str | UUID) -> Task:
        task = await self.load_task(task_id)
        await self.authorize_task(actor, Action.task_view, task)
        return task

    async def list_tasks(self, actor: User, filters: Optional[TaskFilter] = None) -> List[Task]:
        """List tasks in projects visible to the actor, ordered by position first."""
        filters = filters or TaskFilter()
        stmt = select(Task)

        if not is_admin(actor):
            member_of = select(project_members.c.project_id).where(project_members.c.user_id == actor.id)
            owned = select(Project.id).where(Project.owner_id == actor.id)
            stmt = stmt.where(or_(Task.project_id.in_(member_of), Task.project_id.in_(owned)))

        if filters.project_id:
            stmt = stmt.where(Task.project_id == parse_uuid(filters.project_id))
        if filters.assignee_id:
            stmt = stmt.where(Task.assignee_id == parse_uuid(filters.assignee_id))
        if filters.status:
            stmt = stmt.where(Task.status == filters.status.value)
        if filters.priority:
            stmt = stmt.where(Task.priority == filters.priority.value)

        if filters.due_date:
            stmt = self._apply_due_date_bucket(stmt, filters.due_date)

        search = (filters.search or "").strip()
        if search:
            term = f"%{search}%"
            stmt = stmt.where(or_(Task.title.ilike(term), Task.description.ilike(term)))

        sort_column = SORTABLE_FIELDS.get(filters.sort_by, Task.created_at)
        direction = asc if filters.sort_order == "asc" else desc
        stmt = stmt.order_by(asc(Task.position), direction(sort_column)).execution_options(
            populate_existing=True
        )

        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    def _apply_due_date_bucket(stmt, bucket: str):
        today = utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
        tomorrow = today + timedelta(days=1)
        next_week = today + timedelta(days=7)

        if bucket == "overdue":
            return stmt.where(and_(Task.due_date < today, Task.status != TaskStatus.done.value))
        if bucket == "today":
            return stmt.where(and_(Task.due_date >= today, Task.due_date < tomorrow))
        if bucket == "this_week":
            return stmt.where(and_(Task.due_date >= today, Task.due_date < next_week))
        if bucket == "upcoming":
            return stmt.where(Task.due_date >= next_week)
        if bucket == "no_date":
            return stmt.where(Task.due_date.is_(None))
        return stmt

    async def _resolve_assignee(self, assignee_id: str | UUID | None) -> Optional[User]:
        """Look up an assignee; an unknown or malformed id resolves to nobody."""
        if assignee_id is None or (isinstance(assignee_id, str) and not assignee_id.strip()):
            return None
        try:
            user = await self.db.get(User, parse_uuid(assignee_id))
        except NotFoundError:
            user = None
        if not user:
            logger.warning(f"Assignee {assignee_id} could not be resolved; task left unassigned")
        return user

    def _assignment_effects(self, actor: User, task: Task, project: Project, assignee: User) -> List[Effect]:
        async def record_assigned():
            await self.activities.record(
                ActivityType.task_assigned,
                f'{actor.name} assigned task "{task.title}" to {assignee.name}',
                project_id=project.id,
                user_id=actor.id,
                task_id=task.id,
                metadata={"assigneeId": str(assignee.id)},
            )

        async def notify_assignee():
            await self.dispatcher.dispatch_assignment(
                to_email=assignee.email,
                task_title=task.title,
                project_name=project.name,
                assigner_name=actor.name,
            )

        return [
            required("record task_assigned", record_assigned),
            best_effort("notify assignee", notify_assignee),
        ]

    async def create_task(self, actor: User, task_data: TaskCreate) -> Task:
        """Create a task in a project the actor can access."""
        project = await self.projects.load_project(task_data.project_id)
        require(actor, Action.task_create, ProjectResource.from_project(project), TaskPermissionError)

        assignee = await self._resolve_assignee(task_data.assignee_id)
        task = Task(
            title=task_data.title,
            description=task_data.description or "",
            status=task_data.status.value,
            priority=task_data.priority.value,
            due_date=task_data.due_date,
            position=task_data.position if task_data.position is not None else 0,
            project_id=project.id,
            assignee_id=assignee.id if assignee else None,
            created_by_id=actor.id,
        )

        try:
            self.db.add(task)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to create task: {str(e)}")

        async def record_created():
            await self.activities.record(
                ActivityType.task_created,
                f'{actor.name} created task "{task.title}"',
                project_id=project.id,
                user_id=actor.id,
                task_id=task.id,
            )

        effects = [required("record task_created", record_created)]
        if assignee:
            effects.extend(self._assignment_effects(actor, task, project, assignee))
        await run_effects(effects)

        logger.info(f"✅ Task {task.id} created in project {project.id}")
        return await self.load_task(task.id)

    async def update_task(self, actor: User, task_id: str | UUID, task_data: TaskUpdate) -> Task:
        """Apply a partial update; only fields present in the request change."""
        task = await self.load_task(task_id)
        project = await self.authorize_task(actor, Action.task_edit, task)

        old_status = task.status
        old_assignee_id = task.assignee_id
        update_data = task_data.model_dump(exclude_unset=True)

        assignee = None
        if "assignee_id" in update_data:
            assignee = await self._resolve_assignee(update_data.pop("assignee_id"))
            task.assignee_id = assignee.id if assignee else None

        for field, value in update_data.items():
            if field in ("title", "status", "priority") and value is None:
                continue
            if field in ("status", "priority"):
                value = value.value
            elif field == "description":
                value = value or ""
            elif field == "position" and value is None:
                value = 0
            setattr(task, field, value)

        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to update task: {str(e)}")

        effects: List[Effect] = []
        if task.status != old_status:
            new_status = task.status

            async def record_status_change():
                await self.activities.record(
                    ActivityType.task_status_changed,
                    f'{actor.name} changed task status from "{old_status}" to "{new_status}"',
                    project_id=project.id,
                    user_id=actor.id,
                    task_id=task.id,
                    metadata={"oldStatus": old_status, "newStatus": new_status},
                )

            effects.append(required("record task_status_changed", record_status_change))

        if assignee and assignee.id != old_assignee_id:
            effects.extend(self._assignment_effects(actor, task, project, assignee))

        async def record_updated():
            await self.activities.record(
                ActivityType.task_updated,
                f'{actor.name} updated task "{task.title}"',
                project_id=project.id,
                user_id=actor.id,
                task_id=task.id,
            )

        # Recorded on every update, even when nothing changed
        effects.append(required("record task_updated", record_updated))
        await run_effects(effects)

        return await self.load_task(task.id)

    async def delete_task(self, actor: User, task_id: str | UUID) -> None:
        """Delete a task, its comments and attachments.

        ``task_deleted`` is recorded first; blob cleanup is best-effort and
        never stops the task row from being removed.
        """
        task = await self.load_task(task_id)
        project = await self.authorize_task(actor, Action.task_delete, task)
        keys = [attachment.key for attachment in task.attachments if attachment.key]

        async def record_deleted():
            await self.activities.record(
                ActivityType.task_deleted,
                f'{actor.name} deleted task "{task.title}"',
                project_id=project.id,
                user_id=actor.id,
                task_id=task.id,
            )

        async def remove_task():
            try:
                await self.db.execute(delete(Comment).where(Comment.task_id == task.id))
                await self.db.delete(task)
                await self.db.commit()
            except SQLAlchemyError as e:
                await self.db.rollback()
                raise ValidationError(f"Failed to delete task: {str(e)}")

        effects = [required("record task_deleted", record_deleted)]
        effects.extend(
            best_effort(f"delete blob {key}", lambda key=key: self.storage.delete(key)) for key in keys
        )
        effects.append(required("remove task", remove_task))
        report = await run_effects(effects)

        if report.failed:
            logger.warning(f"Task {task.id} deleted with {len(report.failed)} blob(s) left behind")
        logger.info(f"🗑️ Task {task.id} deleted by {actor.id}")
