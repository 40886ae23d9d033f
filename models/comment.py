"""
Comment model.
"""

from sqlalchemy import Column, ForeignKey, Text
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel


class Comment(BaseModel):
    __tablename__ = "comments"

    content = Column(Text, nullable=False)
    task_id = Column(UUID(), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(UUID(), ForeignKey("users.id"), nullable=False)

    # Relationships
    task = relationship("Task", back_populates="comments")
    author = relationship("User", lazy="selectin")
