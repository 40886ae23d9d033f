"""Attachment lifecycle: validate, store, record and remove task files."""

import logging
import os
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.permissions import Action
from app.domains.task.service import TaskService
from app.exceptions.base import ValidationError
from app.exceptions.task import AttachmentNotFoundError, AttachmentValidationError
from app.services.effects import best_effort, run_effects
from app.services.storage_service import BlobStore, blob_store, build_storage_key
from app.shared.identifiers import parse_uuid
from models.attachment import TaskAttachment
from models.base import utcnow
from models.task import Task
from models.user import User

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = frozenset(
    {
        "jpeg", "jpg", "png", "gif",
        "pdf", "doc", "docx", "txt",
        "zip", "rar", "7z",
        "mp4", "mov", "avi",
        "mp3", "wav",
    }
)

ALLOWED_CONTENT_TYPES = frozenset(
    {
        "image/jpeg",
        "image/jpg",
        "image/png",
        "image/gif",
        "application/pdf",
        "application/msword",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "text/plain",
        "application/zip",
        "application/x-zip-compressed",
        "application/x-rar-compressed",
        "application/vnd.rar",
        "application/x-7z-compressed",
        "video/mp4",
        "video/quicktime",
        "video/x-msvideo",
        "audio/mpeg",
        "audio/mp3",
        "audio/wav",
        "audio/x-wav",
        "audio/wave",
    }
)

INVALID_TYPE_MESSAGE = (
    "Invalid file type. Only images, documents, archives, videos, and audio are allowed."
)


def validate_upload(original_name: str, content_type: Optional[str], size: int) -> None:
    """
    Reject a file that must never reach the blob store.

    Both the extension and the declared MIME type have to be on the allow-list.

    Raises:
        ValidationError: If no file was sent
        AttachmentValidationError: If the file is too large or of a disallowed type
    """
    if not original_name:
        raise ValidationError("No file uploaded")

    if size > settings.max_attachment_size:
        limit_mb = settings.max_attachment_size // (1024 * 1024)
        raise AttachmentValidationError(f"File too large. Maximum size is {limit_mb}MB.")

    extension = os.path.splitext(original_name)[1].lower().lstrip(".")
    mime = (content_type or "").split(";")[0].strip().lower()
    if extension not in ALLOWED_EXTENSIONS or mime not in ALLOWED_CONTENT_TYPES:
        raise AttachmentValidationError(INVALID_TYPE_MESSAGE)


class AttachmentService:
    """Keeps task attachment rows consistent with the blob store.

    A row is inserted only after the bytes were stored; on removal the blob
    delete is attempted first and its failure never blocks the row removal.
    """

    def __init__(
        self,
        db: AsyncSession,
        storage: Optional[BlobStore] = None,
        tasks: Optional[TaskService] = None,
    ):
        self.db = db
        self.storage = storage or blob_store
        self.tasks = tasks or TaskService(db, storage=self.storage)

    async def upload(
        self,
        actor: User,
        task_id: str | UUID,
        original_name: str,
        content_type: Optional[str],
        data: bytes,
    ) -> Task:
        """Store a file for a task and append its metadata. Returns the updated task."""
        task = await self.tasks.load_task(task_id)
        await self.tasks.authorize_task(actor, Action.attachment_upload, task)

        validate_upload(original_name, content_type, len(data))

        filename, key = build_storage_key(original_name)
        stored = await self.storage.put(key, data, content_type)

        attachment = TaskAttachment(
            task_id=task.id,
            filename=filename,
            original_name=original_name,
            url=stored.url,
            key=stored.key,
            size=stored.size,
            content_type=content_type,
            uploaded_at=utcnow(),
        )
        try:
            self.db.add(attachment)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"❌ Could not save attachment {key} for task {task.id}: {str(e)}")
            await run_effects(
                [best_effort(f"delete orphaned blob {key}", lambda: self.storage.delete(key))]
            )
            raise ValidationError(f"Failed to save attachment: {str(e)}")

        logger.info(f"📎 Attached {original_name} to task {task.id}")
        return await self.tasks.load_task(task.id)

    def _find(self, task: Task, attachment_id: str | UUID) -> TaskAttachment:
        attachment_uuid = parse_uuid(attachment_id, AttachmentNotFoundError)
        for attachment in task.attachments:
            if attachment.id == attachment_uuid:
                return attachment
        raise AttachmentNotFoundError()

    async def delete(self, actor: User, task_id: str | UUID, attachment_id: str | UUID) -> Task:
        """Remove an attachment. Returns the updated task."""
        task = await self.tasks.load_task(task_id)
        await self.tasks.authorize_task(actor, Action.attachment_delete, task)
        attachment = self._find(task, attachment_id)

        if attachment.key:
            key = attachment.key
            await run_effects([best_effort(f"delete blob {key}", lambda: self.storage.delete(key))])

        try:
            await self.db.delete(attachment)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise ValidationError(f"Failed to delete attachment: {str(e)}")

        logger.info(f"🗑️ Removed attachment {attachment.id} from task {task.id}")
        return await self.tasks.load_task(task.id)

    async def presigned_url(
        self,
        actor: User,
        task_id: str | UUID,
        attachment_id: str | UUID,
        ttl: Optional[int] = None,
    ) -> str:
        """Temporary download URL for an attachment the actor can see."""
        task = await self.tasks.load_task(task_id)
        await self.tasks.authorize_task(actor, Action.task_view, task)
        attachment = self._find(task, attachment_id)
        if not attachment.key:
            raise AttachmentNotFoundError("Attachment has no stored file")
        return await self.storage.presign(attachment.key, ttl or settings.presigned_url_ttl)
