import asyncio
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Final

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import Settings

CHUNK_SIZE: Final[int] = 64 * 1024

_MISSING_CODES = frozenset({"404", "NoSuchKey", "NoSuchBucket", "NotFound"})


class StorageError(Exception):
    """Raised when the object store rejects or fails an operation."""


class ObjectNotFoundError(StorageError):
    """Raised when the requested bucket or object does not exist."""


@dataclass(frozen=True)
class ObjectInfo:
    key: str
    size: int
    content_type: str
    etag: str | None = None
    last_modified: datetime | None = None


@dataclass
class StoredObject:
    """An object body opened for reading."""

    key: str
    body: Any

    def iter_chunks(self, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
        yield from self.body.iter_chunks(chunk_size)

    def close(self) -> None:
        self.body.close()


def _error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


def _translate(exc: Exception, action: str, bucket: str, key: str | None = None) -> StorageError:
    target = f"{bucket}/{key}" if key else bucket
    if isinstance(exc, ClientError) and _error_code(exc) in _MISSING_CODES:
        return ObjectNotFoundError(f"{target} not found")
    return StorageError(f"Failed to {action} {target}: {exc}")


class StorageService:
    """S3-compatible object store client (MinIO in the reference deployment)."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        session = boto3.session.Session()
        self.client = session.client(
            "s3",
            endpoint_url=settings.storage_endpoint_url,
            aws_access_key_id=settings.minio_access_key,
            aws_secret_access_key=settings.minio_secret_key,
            region_name=settings.minio_region,
            config=Config(
                signature_version="s3v4",
                s3={"addressing_style": "path"},
                connect_timeout=settings.storage_timeout,
                read_timeout=settings.storage_timeout,
                retries={"max_attempts": settings.storage_max_attempts, "mode": "standard"},
            ),
        )

    async def bucket_exists(self, bucket: str) -> bool:
        def _head() -> bool:
            try:
                self.client.head_bucket(Bucket=bucket)
            except ClientError as exc:
                if _error_code(exc) in _MISSING_CODES:
                    return False
                raise
            return True

        try:
            return await asyncio.to_thread(_head)
        except (BotoCoreError, ClientError) as exc:
            raise _translate(exc, "check bucket", bucket) from exc

    async def make_bucket(self, bucket: str) -> None:
        try:
            await asyncio.to_thread(self.client.create_bucket, Bucket=bucket)
        except (BotoCoreError, ClientError) as exc:
            raise _translate(exc, "create bucket", bucket) from exc

    async def put_object(
        self,
        bucket: str,
        key: str,
        data: bytes,
        size: int,
        content_type: str,
    ) -> str | None:
        """Store ``data`` under ``key`` and return the ETag reported by the store."""
        if size != len(data):
            raise ValueError(f"size {size} does not match payload length {len(data)}")

        def _upload() -> dict[str, Any]:
            return self.client.put_object(
                Bucket=bucket,
                Key=key,
                Body=data,
                ContentLength=size,
                ContentType=content_type,
            )

        try:
            response = await asyncio.to_thread(_upload)
        except (BotoCoreError, ClientError) as exc:
            raise _translate(exc, "upload", bucket, key) from exc
        return response.get("ETag")

    async def get_object(self, bucket: str, key: str) -> StoredObject:
        try:
            response = await asyncio.to_thread(self.client.get_object, Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise _translate(exc, "get", bucket, key) from exc
        return StoredObject(key=key, body=response["Body"])

    async def stat_object(self, bucket: str, key: str) -> ObjectInfo:
        try:
            response = await asyncio.to_thread(self.client.head_object, Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as exc:
            raise _translate(exc, "stat", bucket, key) from exc
        return ObjectInfo(
            key=key,
            size=int(response["ContentLength"]),
            content_type=response.get("ContentType") or "application/octet-stream",
            etag=response.get("ETag"),
            last_modified=response.get("LastModified"),
        )
