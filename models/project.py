"""
Project model grouping tasks, members and the activity feed.
"""

from sqlalchemy import Column, ForeignKey, String, Table, Text
from sqlalchemy.orm import relationship

from .base import UUID, Base, BaseModel

# Composite primary key makes a duplicate membership row impossible
project_members = Table(
    "project_members",
    Base.metadata,
    Column("project_id", UUID(), ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", UUID(), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)

DEFAULT_PROJECT_COLOR = "#3B82F6"


class Project(BaseModel):
    """
    Represents a project entity in the application.

    The owner is always an implicit member for access checks, whether or not
    it appears in ``members``.
    """

    __tablename__ = "projects"

    name = Column(String(100), nullable=False)
    description = Column(Text, default="")
    color = Column(String(20), default=DEFAULT_PROJECT_COLOR)
    owner_id = Column(UUID(), ForeignKey("users.id"), nullable=False, index=True)

    # Relationships
    owner = relationship("User", back_populates="owned_projects", lazy="selectin")
    members = relationship("User", secondary=project_members, lazy="selectin")
    tasks = relationship(
        "Task", back_populates="project", cascade="all, delete-orphan", passive_deletes=True
    )
    activities = relationship(
        "Activity", back_populates="project", cascade="all, delete-orphan", passive_deletes=True
    )

    @property
    def member_ids(self) -> set:
        return {member.id for member in self.members}
