"""Activity recorder and project activity feed."""

import logging
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from app.core.config import settings
from app.core.permissions import Action, ProjectResource, require
from app.exceptions.project import ProjectNotFoundError, ProjectPermissionError
from app.shared.identifiers import parse_uuid
from app.shared.pagination import PaginationParams, paginate
from models.activity import Activity, ActivityType
from models.project import Project
from models.user import User

logger = logging.getLogger(__name__)


class ActivityService:
    """Appends audit records and serves the per-project feed.

    Records are never updated or deleted here; they disappear only when the
    owning project is deleted.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record(
        self,
        activity_type: ActivityType,
        description: str,
        project_id: UUID,
        user_id: UUID,
        task_id: Optional[UUID] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Activity:
        """Persist one activity record and return it."""
        activity = Activity(
            type=ActivityType(activity_type).value,
            description=description,
            project_id=project_id,
            task_id=task_id,
            user_id=user_id,
            activity_metadata=metadata or {},
        )
        self.db.add(activity)
        await self.db.commit()
        logger.debug(f"📝 Recorded {activity.type} for project {project_id}")
        return activity

    async def list_for_project(
        self,
        actor: User,
        project_id: str | UUID,
        pagination: Optional[PaginationParams] = None,
    ) -> Dict[str, Any]:
        """Newest-first page of a project's activities, page size capped by settings."""
        project_uuid = parse_uuid(project_id, ProjectNotFoundError)
        result = await self.db.execute(select(Project).where(Project.id == project_uuid))
        project = result.scalar_one_or_none()
        if not project:
            raise ProjectNotFoundError()

        require(actor, Action.activity_view, ProjectResource.from_project(project), ProjectPermissionError)

        pagination = (pagination or PaginationParams()).capped(settings.activity_feed_limit)
        stmt = (
            select(Activity)
            .where(Activity.project_id == project_uuid)
            .order_by(desc(Activity.created_at), desc(Activity.id))
            .execution_options(populate_existing=True)
        )
        return await paginate(self.db, stmt, pagination)
