from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Callable, Final
from urllib.parse import quote

from app.core.config import Settings
from app.core.errors import (
    BadRequestError,
    ContentTooLongError,
    ObjectStatError,
    ObjectUnavailableError,
    UploadFailedError,
)
from app.services.addressing import generate_key
from app.services.storage import ObjectInfo, StorageError, StorageService, StoredObject

logger = logging.getLogger(__name__)

TEXT_CONTENT_TYPE: Final[str] = "text/plain"

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _sanitize_filename(filename: str) -> str:
    name = re.sub(r"[^A-Za-z0-9._-]+", "_", filename)
    return name or "file"


@dataclass(frozen=True)
class UploadResult:
    key: str
    url: str


@dataclass
class TextDownload:
    stored: StoredObject
    info: ObjectInfo

    @property
    def filename(self) -> str:
        return PurePosixPath(self.info.key).name

    @property
    def content_disposition(self) -> str:
        name = self.filename
        fallback = _sanitize_filename(name)
        if fallback == name:
            return f'attachment; filename="{name}"'
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(name, safe='')}"


class TextService:
    """Stores submitted text and serves it back by storage key."""

    def __init__(
        self,
        storage: StorageService,
        settings: Settings,
        clock: Clock = _utcnow,
    ) -> None:
        self.storage = storage
        self.settings = settings
        self.bucket = settings.minio_bucket_name
        self.clock = clock

    def build_url(self, key: str) -> str:
        return f"{self.settings.public_base_url}/{key.lstrip('/')}"

    async def upload(self, content: str) -> UploadResult:
        max_length = self.settings.content_max_length
        if len(content) > max_length:
            raise ContentTooLongError(max_length)

        key = generate_key(self.clock())
        logger.info("Storing text as %s", key)

        data = content.encode("utf-8")
        try:
            await self.storage.put_object(
                self.bucket,
                key,
                data,
                len(data),
                TEXT_CONTENT_TYPE,
            )
        except StorageError as exc:
            logger.error("Failed to upload %s: %s", key, exc)
            raise UploadFailedError() from exc

        return UploadResult(key=key, url=self.build_url(key))

    async def download(self, path: str) -> TextDownload:
        key = path.lstrip("/")
        if not key:
            raise BadRequestError()

        try:
            stored = await self.storage.get_object(self.bucket, key)
        except StorageError as exc:
            logger.warning("Failed to get object %s: %s", key, exc)
            raise ObjectUnavailableError() from exc

        try:
            info = await self.storage.stat_object(self.bucket, key)
        except StorageError as exc:
            logger.error("Failed to get object stat for %s: %s", key, exc)
            stored.close()
            raise ObjectStatError() from exc

        return TextDownload(stored=stored, info=info)
