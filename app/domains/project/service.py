"""Project service layer with business logic."""

import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, desc, insert, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.permissions import Action, MemberResource, ProjectResource, require
from app.domains.activity.service import ActivityService
from app.exceptions.base import ValidationError
from app.exceptions.project import (
    DuplicateMemberError,
    ProjectNotFoundError,
    ProjectPermissionError,
    UserNotFoundError,
)
from app.schemas.project import ProjectCreate, ProjectUpdate
from app.services.effects import best_effort, required, run_effects
from app.services.storage_service import BlobStore, blob_store
from app.shared.identifiers import parse_uuid
from models.activity import Activity, ActivityType
from models.attachment import TaskAttachment
from models.comment import Comment
from models.project import DEFAULT_PROJECT_COLOR, Project, project_members
from models.task import Task
from models.user import User

logger = logging.getLogger(__name__)


class ProjectService:
    """Service class for project business logic."""

    def __init__(
        self,
        db: AsyncSession,
        storage: Optional[BlobStore] = None,
        activities: Optional[ActivityService] = None,
    ):
        self.db = db
        self.storage = storage or blob_store
        self.activities = activities or ActivityService(db)

    async def load_project(self, project_id: str | UUID) -> Project:
        """Fetch a project by id with owner and members, or raise ``ProjectNotFoundError``."""
        project_uuid = parse_uuid(project_id, ProjectNotFoundError)
        stmt = (
            select(Project)
            .where(Project.id == project_uuid)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        project = result.scalar_one_or_none()
        if not project:
            raise ProjectNotFoundError()
        return project

    async def get_project(self, actor: User, project_id: str | UUID) -> Project:
        project = await self.load_project(project_id)
        require(actor, Action.project_view, ProjectResource.from_project(project), ProjectPermissionError)
        return project

    async def list_projects(self, actor: User) -> List[Project]:
        """Projects the actor owns or belongs to, most recently updated first."""
        stmt = (
            select(Project)
            .outerjoin(project_members, project_members.c.project_id == Project.id)
            .where(or_(Project.owner_id == actor.id, project_members.c.user_id == actor.id))
            .distinct()
            .order_by(desc(Project.updated_at))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def create_project(self, actor: User, project_data: ProjectCreate) -> Project:
        """Create a project owned by ``actor``, who is also added as a member."""
        project = Project(
            name=project_data.name,
            description=project_data.description or "",
            color=project_data.color or DEFAULT_PROJECT_COLOR,
            owner_id=actor.id,
        )
        project.members = [actor]

        try:
            self.db.add(project)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to create project: {str(e)}")

        await self.activities.record(
            ActivityType.member_added,
            f"{actor.name} created the project",
            project_id=project.id,
            user_id=actor.id,
        )
        logger.info(f"✅ Project {project.id} created by {actor.id}")
        return await self.load_project(project.id)

    async def update_project(
        self, actor: User, project_id: str | UUID, project_data: ProjectUpdate
    ) -> Project:
        """Partially update name, description and color."""
        project = await self.load_project(project_id)
        require(actor, Action.project_edit, ProjectResource.from_project(project), ProjectPermissionError)

        update_data = project_data.model_dump(exclude_unset=True)
        if update_data.get("name"):
            project.name = update_data["name"]
        if "description" in update_data:
            project.description = update_data["description"] or ""
        if update_data.get("color"):
            project.color = update_data["color"]

        try:
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to update project: {str(e)}")
        return await self.load_project(project.id)

    async def delete_project(self, actor: User, project_id: str | UUID) -> None:
        """Delete a project with its tasks, comments, attachments and activity feed.

        Stored attachment blobs are removed best-effort before the rows go.
        """
        project = await self.load_project(project_id)
        require(actor, Action.project_delete, ProjectResource.from_project(project), ProjectPermissionError)

        task_ids = select(Task.id).where(Task.project_id == project.id)
        result = await self.db.execute(
            select(TaskAttachment.key).where(
                TaskAttachment.task_id.in_(task_ids), TaskAttachment.key.isnot(None)
            )
        )
        keys = [key for key in result.scalars().all() if key]

        await run_effects(
            [best_effort(f"delete blob {key}", lambda key=key: self.storage.delete(key)) for key in keys]
        )

        try:
            await self.db.execute(delete(Comment).where(Comment.task_id.in_(task_ids)))
            await self.db.execute(delete(TaskAttachment).where(TaskAttachment.task_id.in_(task_ids)))
            await self.db.execute(delete(Task).where(Task.project_id == project.id))
            await self.db.execute(delete(Activity).where(Activity.project_id == project.id))
            await self.db.delete(project)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to delete project: {str(e)}")
        logger.info(f"🗑️ Project {project.id} deleted by {actor.id} ({len(keys)} attachments)")

    async def add_member(self, actor: User, project_id: str | UUID, user_id: str | UUID) -> Project:
        """Add an existing user to the project's members."""
        project = await self.load_project(project_id)
        resource = ProjectResource.from_project(project)
        require(actor, Action.member_add, resource, ProjectPermissionError)

        user_uuid = parse_uuid(user_id, UserNotFoundError)
        user = await self.db.get(User, user_uuid)
        if not user:
            raise UserNotFoundError()

        if resource.is_member(user.id):
            raise DuplicateMemberError()

        async def insert_member():
            try:
                await self.db.execute(
                    insert(project_members).values(project_id=project.id, user_id=user.id)
                )
                await self.db.commit()
            except IntegrityError:
                await self.db.rollback()
                raise DuplicateMemberError()

        async def record_added():
            await self.activities.record(
                ActivityType.member_added,
                f"{actor.name} added {user.name} to the project",
                project_id=project.id,
                user_id=actor.id,
            )

        await run_effects([required("add member", insert_member), required("record member_added", record_added)])
        return await self.load_project(project.id)

    async def remove_member(self, actor: User, project_id: str | UUID, user_id: str | UUID) -> Project:
        """Remove a user from the members. The owner can never be removed."""
        project = await self.load_project(project_id)
        user_uuid = parse_uuid(user_id, UserNotFoundError)
        require(
            actor,
            Action.member_remove,
            MemberResource(project=ProjectResource.from_project(project), target_user_id=user_uuid),
            ProjectPermissionError,
        )

        await self.db.execute(
            delete(project_members).where(
                project_members.c.project_id == project.id,
                project_members.c.user_id == user_uuid,
            )
        )
        await self.db.commit()

        # The removed user may no longer exist
        removed = await self.db.get(User, user_uuid)
        removed_name = removed.name if removed else "a member"
        await self.activities.record(
            ActivityType.member_removed,
            f"{actor.name} removed {removed_name} from the project",
            project_id=project.id,
            user_id=actor.id,
            metadata={"removed_user_id": str(user_uuid)},
        )
        return await self.load_project(project.id)
