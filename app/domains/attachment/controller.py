"""Task attachment endpoints."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Path, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.dependencies import get_blob_store, get_current_user, validate_token
from app.database import get_db
from app.domains.attachment.service import AttachmentService
from app.exceptions.base import ValidationError
from app.schemas.base import ResponseSchema
from app.schemas.task import PresignedUrlResponse, TaskResponse
from app.services.storage_service import BlobStore
from models.user import User

router = APIRouter(
    prefix="/api/tasks",
    tags=["attachments"],
    dependencies=[Depends(validate_token)],
)


def get_attachment_service(
    db: AsyncSession = Depends(get_db),
    storage: BlobStore = Depends(get_blob_store),
) -> AttachmentService:
    return AttachmentService(db, storage=storage)


@router.post("/{task_id}/attachments", response_model=ResponseSchema)
async def upload_attachment(
    task_id: str = Path(..., description="Task ID"),
    file: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    service: AttachmentService = Depends(get_attachment_service),
):
    """Upload a file and attach it to the task."""
    if file is None or not file.filename:
        raise ValidationError("No file uploaded")

    # One byte past the limit is enough to reject an oversized file
    data = await file.read(settings.max_attachment_size + 1)
    task = await service.upload(current_user, task_id, file.filename, file.content_type, data)

    return ResponseSchema(
        status="success",
        message="File uploaded successfully",
        data=TaskResponse.model_validate(task).model_dump(),
    )


@router.delete("/{task_id}/attachments/{attachment_id}", response_model=ResponseSchema)
async def delete_attachment(
    task_id: str = Path(..., description="Task ID"),
    attachment_id: str = Path(..., description="Attachment ID"),
    current_user: User = Depends(get_current_user),
    service: AttachmentService = Depends(get_attachment_service),
):
    """Remove an attachment from the task and from storage."""
    task = await service.delete(current_user, task_id, attachment_id)

    return ResponseSchema(
        status="success",
        message="Attachment deleted successfully",
        data=TaskResponse.model_validate(task).model_dump(),
    )


@router.get("/{task_id}/attachments/{attachment_id}/url", response_model=ResponseSchema)
async def get_attachment_url(
    task_id: str = Path(..., description="Task ID"),
    attachment_id: str = Path(..., description="Attachment ID"),
    expires_in: Optional[int] = Query(None, ge=60, le=7 * 24 * 3600, description="Seconds the URL stays valid"),
    current_user: User = Depends(get_current_user),
    service: AttachmentService = Depends(get_attachment_service),
):
    """Get a temporary download URL for an attachment."""
    ttl = expires_in or settings.presigned_url_ttl
    url = await service.presigned_url(current_user, task_id, attachment_id, ttl)

    return ResponseSchema(
        status="success",
        message="Download URL generated",
        data=PresignedUrlResponse(url=url, expires_in=ttl).model_dump(),
    )
