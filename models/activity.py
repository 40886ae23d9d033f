"""
Activity model: append-only audit records of a project.
"""

import enum

from sqlalchemy import JSON, Column, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class ActivityType(str, enum.Enum):
    task_created = "task_created"
    task_updated = "task_updated"
    task_deleted = "task_deleted"
    task_assigned = "task_assigned"
    task_status_changed = "task_status_changed"
    comment_added = "comment_added"
    member_added = "member_added"
    member_removed = "member_removed"


class Activity(BaseModel):
    __tablename__ = "activities"
    __table_args__ = (
        Index("ix_activities_project_created", "project_id", "created_at"),
    )

    type = Column(String(50), nullable=False)
    description = Column(Text, nullable=False)
    project_id = Column(UUID(), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    # Not a foreign key: the record outlives a deleted task
    task_id = Column(UUID())
    user_id = Column(UUID(), ForeignKey("users.id"), nullable=False)
    activity_metadata = Column("metadata", JSON, default=dict)

    # Relationships
    project = relationship("Project", back_populates="activities")
    user = relationship("User", lazy="selectin")
