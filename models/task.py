"""
Task model and its enumerations.

A task lives in exactly one project and has no ACL of its own: visibility and
mutation rights are inherited from the project.
"""

import enum

from sqlalchemy import Column, DateTime, Float, ForeignKey, Index, String, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class TaskStatus(str, enum.Enum):
    todo = "To Do"
    in_progress = "In Progress"
    done = "Done"


class TaskPriority(str, enum.Enum):
    low = "Low"
    medium = "Medium"
    high = "High"


class Task(BaseModel):
    __tablename__ = "tasks"
    __table_args__ = (
        Index("ix_tasks_project_status", "project_id", "status"),
    )

    title = Column(String(200), nullable=False)
    description = Column(Text, default="")
    status = Column(String(20), nullable=False, default=TaskStatus.todo.value)
    priority = Column(String(20), nullable=False, default=TaskPriority.medium.value)
    due_date = Column(DateTime)
    position = Column(Float, nullable=False, default=0)

    project_id = Column(UUID(), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    assignee_id = Column(UUID(), ForeignKey("users.id", ondelete="SET NULL"), index=True)
    created_by_id = Column(UUID(), ForeignKey("users.id"), nullable=False)

    # Relationships
    project = relationship("Project", back_populates="tasks")
    assignee = relationship("User", foreign_keys=[assignee_id], lazy="selectin")
    created_by = relationship("User", foreign_keys=[created_by_id], lazy="selectin")
    attachments = relationship(
        "TaskAttachment",
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="TaskAttachment.uploaded_at",
        lazy="selectin",
    )
    comments = relationship(
        "Comment", back_populates="task", cascade="all, delete-orphan", passive_deletes=True
    )
