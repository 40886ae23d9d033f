"""
Models package initialization.
"""

from .activity import Activity, ActivityType
from .attachment import TaskAttachment
from .base import Base, BaseModel
from .comment import Comment
from .project import Project, project_members
from .task import Task, TaskPriority, TaskStatus
from .user import USER_ROLES, User

__all__ = [
    "Base",
    "BaseModel",
    "User",
    "USER_ROLES",
    "Project",
    "project_members",
    "Task",
    "TaskStatus",
    "TaskPriority",
    "TaskAttachment",
    "Comment",
    "Activity",
    "ActivityType",
]
