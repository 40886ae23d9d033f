"""
Unit tests for AttachmentService and upload validation.
"""

import uuid

import pytest
from sqlalchemy import select

from app.domains.attachment.service import AttachmentService, validate_upload
from app.exceptions.base import ValidationError
from app.exceptions.task import (
    AttachmentNotFoundError,
    AttachmentValidationError,
    StorageUploadError,
    TaskPermissionError,
)
from models import TaskAttachment
from tests.factories import AttachmentFactory
from tests.fakes import FakeBlobStore

PDF_BYTES = b"%PDF-1.4 test document"


@pytest.fixture
def service(test_db, blob_store):
    return AttachmentService(test_db, storage=blob_store)


async def attachment_rows(db, task_id):
    result = await db.execute(select(TaskAttachment).where(TaskAttachment.task_id == task_id))
    return list(result.scalars().all())


class TestValidateUpload:
    @pytest.mark.parametrize(
        "name,content_type",
        [
            ("photo.JPG", "image/jpeg"),
            ("notes.txt", "text/plain"),
            ("brief.docx", "application/vnd.openxmlformats-officedocument.wordprocessingml.document"),
            ("archive.7z", "application/x-7z-compressed"),
            ("clip.mov", "video/quicktime"),
            ("voice.mp3", "audio/mpeg"),
        ],
    )
    def test_allowed(self, name, content_type):
        validate_upload(name, content_type, 100)

    @pytest.mark.parametrize(
        "name,content_type",
        [
            ("setup.exe", "application/x-msdownload"),
            ("setup.exe", "application/pdf"),
            ("report.pdf", "application/x-msdownload"),
            ("page.html", "text/html"),
            ("noextension", "text/plain"),
        ],
    )
    def test_extension_and_mime_must_both_match(self, name, content_type):
        with pytest.raises(AttachmentValidationError, match="Invalid file type"):
            validate_upload(name, content_type, 100)

    def test_too_large(self):
        with pytest.raises(AttachmentValidationError, match="File too large"):
            validate_upload("big.pdf", "application/pdf", 15 * 1024 * 1024)

    def test_exactly_at_limit_is_allowed(self):
        validate_upload("edge.pdf", "application/pdf", 10 * 1024 * 1024)

    def test_missing_file(self):
        with pytest.raises(ValidationError, match="No file uploaded"):
            validate_upload("", None, 0)


class TestUpload:
    @pytest.mark.asyncio
    async def test_upload_appends_metadata(self, service, test_db, blob_store, test_user, test_task):
        task = await service.upload(test_user, test_task.id, "Report.PDF", "application/pdf", PDF_BYTES)

        assert len(task.attachments) == 1
        attachment = task.attachments[0]
        assert attachment.original_name == "Report.PDF"
        assert attachment.filename.endswith(".pdf")
        assert attachment.key == f"attachments/{attachment.filename}"
        assert attachment.size == len(PDF_BYTES)
        assert blob_store.objects[attachment.key] == PDF_BYTES

    @pytest.mark.asyncio
    async def test_keys_are_unique(self, service, test_user, test_task):
        await service.upload(test_user, test_task.id, "a.pdf", "application/pdf", PDF_BYTES)
        task = await service.upload(test_user, test_task.id, "a.pdf", "application/pdf", PDF_BYTES)

        keys = [a.key for a in task.attachments]
        assert len(keys) == 2
        assert len(set(keys)) == 2

    @pytest.mark.asyncio
    async def test_disallowed_extension_never_reaches_storage(
        self, service, test_db, blob_store, test_user, test_task
    ):
        with pytest.raises(AttachmentValidationError):
            await service.upload(test_user, test_task.id, "virus.exe", "application/x-msdownload", b"MZ")

        assert blob_store.call_count == 0
        assert await attachment_rows(test_db, test_task.id) == []

    @pytest.mark.asyncio
    async def test_oversized_file_never_reaches_storage(
        self, service, test_db, blob_store, test_user, test_task
    ):
        data = b"0" * (15 * 1024 * 1024)

        with pytest.raises(AttachmentValidationError) as exc_info:
            await service.upload(test_user, test_task.id, "huge.pdf", "application/pdf", data)

        assert exc_info.value.status_code == 400
        assert blob_store.call_count == 0
        assert await attachment_rows(test_db, test_task.id) == []

    @pytest.mark.asyncio
    async def test_upload_failure_leaves_no_record(self, test_db, test_user, test_task):
        failing_store = FakeBlobStore(fail_put=True)
        service = AttachmentService(test_db, storage=failing_store)

        with pytest.raises(StorageUploadError) as exc_info:
            await service.upload(test_user, test_task.id, "a.pdf", "application/pdf", PDF_BYTES)

        assert exc_info.value.status_code == 503
        assert len(failing_store.put_calls) == 1
        assert await attachment_rows(test_db, test_task.id) == []

    @pytest.mark.asyncio
    async def test_outsider_forbidden_before_storage(self, service, blob_store, test_user_2, test_task):
        with pytest.raises(TaskPermissionError):
            await service.upload(test_user_2, test_task.id, "a.pdf", "application/pdf", PDF_BYTES)

        assert blob_store.call_count == 0


class TestDelete:
    @pytest.mark.asyncio
    async def test_delete_removes_blob_then_metadata(self, service, test_db, blob_store, test_user, test_task):
        attachment = AttachmentFactory.build(task_id=test_task.id)
        test_db.add(attachment)
        await test_db.commit()

        task = await service.delete(test_user, test_task.id, attachment.id)

        assert task.attachments == []
        assert blob_store.delete_calls == [attachment.key]
        assert await attachment_rows(test_db, test_task.id) == []

    @pytest.mark.asyncio
    async def test_blob_failure_still_removes_metadata(self, test_db, test_user, test_task):
        failing_store = FakeBlobStore(fail_delete=True)
        service = AttachmentService(test_db, storage=failing_store)
        attachment = AttachmentFactory.build(task_id=test_task.id)
        test_db.add(attachment)
        await test_db.commit()

        task = await service.delete(test_user, test_task.id, attachment.id)

        assert task.attachments == []
        assert failing_store.delete_calls == [attachment.key]

    @pytest.mark.asyncio
    async def test_only_the_named_attachment_is_removed(self, service, test_db, test_user, test_task):
        keep = AttachmentFactory.build(task_id=test_task.id)
        drop = AttachmentFactory.build(task_id=test_task.id)
        test_db.add_all([keep, drop])
        await test_db.commit()

        task = await service.delete(test_user, test_task.id, drop.id)

        assert [a.id for a in task.attachments] == [keep.id]

    @pytest.mark.asyncio
    async def test_unknown_attachment(self, service, blob_store, test_user, test_task):
        with pytest.raises(AttachmentNotFoundError):
            await service.delete(test_user, test_task.id, uuid.uuid4())
        with pytest.raises(AttachmentNotFoundError):
            await service.delete(test_user, test_task.id, "not-an-id")

        assert blob_store.call_count == 0


class TestPresign:
    @pytest.mark.asyncio
    async def test_presigned_url(self, service, test_db, blob_store, test_user, test_task):
        attachment = AttachmentFactory.build(task_id=test_task.id)
        test_db.add(attachment)
        await test_db.commit()

        url = await service.presigned_url(test_user, test_task.id, attachment.id, 600)

        assert url == f"https://files.example.com/{attachment.key}?expires=600"
        assert blob_store.presign_calls == [(attachment.key, 600)]
