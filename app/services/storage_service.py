"""Blob storage for task attachments (Cloudflare R2, S3 compatible)."""

import asyncio
import logging
import os
import uuid
from dataclasses import dataclass
from typing import Protocol

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import settings
from app.exceptions.base import UpstreamUnavailableError
from app.exceptions.task import StorageNotConfiguredError, StorageUploadError

logger = logging.getLogger(__name__)


@dataclass
class StoredObject:
    key: str
    url: str
    size: int


class BlobStore(Protocol):
    """Object storage used by the attachment lifecycle.

    ``delete`` must be idempotent and must not raise for a missing key.
    """

    async def put(self, key: str, data: bytes, content_type: str) -> StoredObject: ...

    async def delete(self, key: str) -> None: ...

    async def presign(self, key: str, ttl: int) -> str: ...


def build_storage_key(original_name: str, prefix: str | None = None) -> tuple[str, str]:
    """Generate a globally unique object key for an upload.

    Returns ``(filename, key)`` where filename is a random UUID plus the
    original extension and key is the filename under the attachment prefix.
    """
    _, extension = os.path.splitext(original_name)
    filename = f"{uuid.uuid4()}{extension.lower()}"
    prefix = (prefix if prefix is not None else settings.attachment_prefix).strip("/")
    key = f"{prefix}/{filename}" if prefix else filename
    return filename, key


class R2BlobStore:
    """BlobStore backed by a Cloudflare R2 bucket through boto3.

    When credentials are missing the store stays importable: uploads and
    presigning raise ``StorageNotConfiguredError`` and deletes are skipped.
    """

    def __init__(
        self,
        endpoint: str | None = None,
        access_key_id: str | None = None,
        secret_access_key: str | None = None,
        bucket_name: str | None = None,
        public_url: str | None = None,
    ):
        self.endpoint = endpoint if endpoint is not None else settings.r2_endpoint
        self.access_key_id = access_key_id if access_key_id is not None else settings.r2_access_key_id
        self.secret_access_key = (
            secret_access_key if secret_access_key is not None else settings.r2_secret_access_key
        )
        self.bucket_name = bucket_name if bucket_name is not None else settings.r2_bucket_name
        self.public_url = public_url if public_url is not None else settings.r2_public_url
        self._client = None

    @property
    def is_configured(self) -> bool:
        return bool(self.endpoint and self.access_key_id and self.secret_access_key and self.bucket_name)

    def _get_client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                endpoint_url=self.endpoint,
                aws_access_key_id=self.access_key_id,
                aws_secret_access_key=self.secret_access_key,
                region_name="auto",
                # R2 requires path-style addressing
                config=Config(s3={"addressing_style": "path"}),
            )
        return self._client

    def public_url_for(self, key: str) -> str:
        if self.public_url:
            return f"{self.public_url.rstrip('/')}/{key}"
        if self.endpoint:
            host = self.endpoint.replace("https://", "").replace("http://", "").rstrip("/")
            return f"https://{self.bucket_name}.{host}/{key}"
        return f"https://{self.bucket_name}.r2.dev/{key}"

    async def put(self, key: str, data: bytes, content_type: str) -> StoredObject:
        if not self.is_configured:
            raise StorageNotConfiguredError()

        client = self._get_client()
        try:
            await asyncio.to_thread(
                client.put_object,
                Bucket=self.bucket_name,
                Key=key,
                Body=data,
                ContentType=content_type,
            )
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            logger.error(f"❌ Error uploading {key} to R2: {code} {str(e)}")
            if code in ("InvalidAccessKeyId", "SignatureDoesNotMatch", "AccessDenied"):
                raise StorageUploadError(
                    "Invalid Cloudflare R2 credentials. Please check your environment variables."
                ) from e
            raise StorageUploadError(f"Failed to upload file to Cloudflare R2: {str(e)}") from e
        except BotoCoreError as e:
            logger.error(f"❌ Error uploading {key} to R2: {str(e)}")
            raise StorageUploadError(f"Failed to upload file to Cloudflare R2: {str(e)}") from e

        logger.info(f"✅ Uploaded {key} ({len(data)} bytes)")
        return StoredObject(key=key, url=self.public_url_for(key), size=len(data))

    async def delete(self, key: str) -> None:
        if not self.is_configured:
            logger.warning(f"Cloudflare R2 not configured. Skipping deletion of {key}.")
            return

        client = self._get_client()
        try:
            # DeleteObject succeeds for keys that do not exist
            await asyncio.to_thread(client.delete_object, Bucket=self.bucket_name, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.error(f"❌ Error deleting {key} from R2: {str(e)}")
            return
        logger.info(f"🗑️ Deleted {key} from R2")

    async def presign(self, key: str, ttl: int | None = None) -> str:
        if not self.is_configured:
            raise StorageNotConfiguredError()

        client = self._get_client()
        try:
            return await asyncio.to_thread(
                client.generate_presigned_url,
                "get_object",
                Params={"Bucket": self.bucket_name, "Key": key},
                ExpiresIn=ttl or settings.presigned_url_ttl,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"❌ Error generating presigned URL for {key}: {str(e)}")
            raise UpstreamUnavailableError("Failed to generate file URL") from e


# Create singleton instance
blob_store = R2BlobStore()
