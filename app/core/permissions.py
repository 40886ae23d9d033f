"""
Access control decisions for projects, tasks, comments and attachments.

Every mutation and read in the domain services goes through ``authorize``
(or its raising wrapper ``require``). The decision itself is pure: callers
load the project/comment first and pass lightweight resource descriptors, so
the same rules apply uniformly across routes.

Precedence:
1. Owner removal is denied to everyone, admins included.
2. Global admin role allows every project/task/comment action.
3. Project and task actions require ownership or membership; project
   deletion requires ownership.
4. Comment edit requires authorship; comment delete allows the author or
   the owner of the comment's project.
"""

import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Union
from uuid import UUID

from app.exceptions.base import AppPermissionError

logger = logging.getLogger(__name__)


class Action(str, enum.Enum):
    project_view = "project:view"
    project_edit = "project:edit"
    project_delete = "project:delete"
    member_add = "project:member_add"
    member_remove = "project:member_remove"
    activity_view = "project:activity_view"
    task_view = "task:view"
    task_create = "task:create"
    task_edit = "task:edit"
    task_delete = "task:delete"
    attachment_upload = "task:attachment_upload"
    attachment_delete = "task:attachment_delete"
    comment_view = "comment:view"
    comment_create = "comment:create"
    comment_edit = "comment:edit"
    comment_delete = "comment:delete"


# Actions granted to anyone who owns or belongs to the project
MEMBER_ACTIONS = frozenset(
    {
        Action.project_view,
        Action.project_edit,
        Action.member_add,
        Action.member_remove,
        Action.activity_view,
        Action.task_view,
        Action.task_create,
        Action.task_edit,
        Action.task_delete,
        Action.attachment_upload,
        Action.attachment_delete,
        Action.comment_view,
        Action.comment_create,
    }
)

OWNER_ACTIONS = frozenset({Action.project_delete})


@dataclass(frozen=True)
class ProjectResource:
    """What the evaluator needs to know about a project."""

    project_id: UUID
    owner_id: UUID
    member_ids: frozenset = field(default_factory=frozenset)

    @classmethod
    def from_project(cls, project: Any) -> "ProjectResource":
        return cls(
            project_id=project.id,
            owner_id=project.owner_id,
            member_ids=frozenset(project.member_ids),
        )

    def is_owner(self, user_id: UUID) -> bool:
        return self.owner_id == user_id

    def is_member(self, user_id: UUID) -> bool:
        # Owner counts as a member regardless of the explicit list
        return self.is_owner(user_id) or user_id in self.member_ids


@dataclass(frozen=True)
class MemberResource:
    """A membership change: the project plus the user being removed or added."""

    project: ProjectResource
    target_user_id: UUID


@dataclass(frozen=True)
class CommentResource:
    """A comment together with the project that owns its task."""

    author_id: UUID
    project: ProjectResource


Resource = Union[ProjectResource, MemberResource, CommentResource]


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


def deny(reason: str) -> Decision:
    return Decision(False, reason)


def _project_of(resource: Resource) -> ProjectResource:
    if isinstance(resource, ProjectResource):
        return resource
    return resource.project


def authorize(actor: Any, action: Action, resource: Resource) -> Decision:
    """
    Decide whether ``actor`` may perform ``action`` on ``resource``.

    Args:
        actor: Authenticated user; needs ``id`` and ``role`` attributes.
        action: The action being attempted.
        resource: Descriptor of the target (project, membership change or comment).

    Returns:
        Decision that is truthy when allowed; a denial carries a human-readable reason.

    Example:
        >>> decision = authorize(user, Action.task_edit, ProjectResource.from_project(project))
        >>> if not decision:
        ...     raise AppPermissionError(decision.reason)
    """
    project = _project_of(resource)

    if action == Action.member_remove and isinstance(resource, MemberResource):
        if resource.target_user_id == project.owner_id:
            logger.info(f"User {actor.id} attempted to remove owner of project {project.project_id}")
            return deny("Cannot remove project owner")

    if getattr(actor, "role", "user") == "admin":
        logger.debug(f"User {actor.id} is admin, granting {action.value}")
        return ALLOW

    if action in OWNER_ACTIONS:
        if project.is_owner(actor.id):
            return ALLOW
        logger.info(f"User {actor.id} is not the owner of project {project.project_id}")
        return deny("Only project owner can delete the project")

    if action in MEMBER_ACTIONS:
        if project.is_member(actor.id):
            return ALLOW
        logger.info(f"User {actor.id} has no membership in project {project.project_id}")
        return deny("Access denied. You are not a member of this project")

    if action == Action.comment_edit:
        if not isinstance(resource, CommentResource):
            raise TypeError("comment_edit requires a CommentResource")
        if resource.author_id == actor.id:
            return ALLOW
        return deny("You can only edit your own comments")

    if action == Action.comment_delete:
        if not isinstance(resource, CommentResource):
            raise TypeError("comment_delete requires a CommentResource")
        if resource.author_id == actor.id or project.is_owner(actor.id):
            return ALLOW
        return deny("You can only delete your own comments")

    return deny(f"Action {action.value} is not permitted")


def require(
    actor: Any,
    action: Action,
    resource: Resource,
    error_class: type[AppPermissionError] = AppPermissionError,
) -> None:
    """Raise ``error_class`` (a 403) with the denial reason unless allowed."""
    decision = authorize(actor, action, resource)
    if not decision:
        raise error_class(decision.reason)


def is_admin(actor: Any) -> bool:
    return getattr(actor, "role", "user") == "admin"
