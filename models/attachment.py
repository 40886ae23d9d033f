"""
Attachment model for files stored in the blob store.
"""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from .base import UUID, BaseModel, utcnow


class TaskAttachment(BaseModel):
    """
    Represents file metadata owned by exactly one task.

    Rows are inserted only after the bytes were stored successfully; ``key`` is
    the object key used to delete the blob.
    """

    __tablename__ = "task_attachments"

    task_id = Column(UUID(), ForeignKey("tasks.id", ondelete="CASCADE"), nullable=False, index=True)
    filename = Column(String(255), nullable=False)
    original_name = Column(String(255), nullable=False)
    url = Column(String(1024), nullable=False)
    key = Column(String(512))
    size = Column(Integer, nullable=False)
    content_type = Column(String(100))
    uploaded_at = Column(DateTime, default=utcnow)

    # Relationships
    task = relationship("Task", back_populates="attachments")
