import io
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from botocore.response import StreamingBody
from httpx import ASGITransport, AsyncClient

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config import Settings
from app.main import create_app
from app.services import storage as storage_service
from app.services.texts import TextService


class InMemoryStorage(storage_service.StorageService):
    """Dict-backed stand-in for the S3 client with switchable failures."""

    def __init__(self, buckets: set[str] | None = None) -> None:  # type: ignore[super-init-not-called]
        self.buckets: set[str] = set(buckets or ())
        self.objects: dict[tuple[str, str], tuple[bytes, str]] = {}
        self.calls: list[str] = []
        self.fail_on: set[str] = set()
        self.closed: list[str] = []

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            raise storage_service.StorageError(f"{operation} failed")

    def count(self, operation: str) -> int:
        return self.calls.count(operation)

    async def bucket_exists(self, bucket: str) -> bool:  # type: ignore[override]
        self._record("bucket_exists")
        return bucket in self.buckets

    async def make_bucket(self, bucket: str) -> None:  # type: ignore[override]
        self._record("make_bucket")
        self.buckets.add(bucket)

    async def put_object(self, bucket, key, data, size, content_type):  # type: ignore[override]
        self._record("put_object")
        assert bucket in self.buckets, f"bucket {bucket} missing"
        assert size == len(data)
        self.objects[(bucket, key)] = (data, content_type)
        return '"etag"'

    async def get_object(self, bucket, key):  # type: ignore[override]
        self._record("get_object")
        if (bucket, key) not in self.objects:
            raise storage_service.ObjectNotFoundError(f"{bucket}/{key} not found")
        data, _ = self.objects[(bucket, key)]
        body = _TrackedBody(io.BytesIO(data), len(data), on_close=lambda: self.closed.append(key))
        return storage_service.StoredObject(key=key, body=body)

    async def stat_object(self, bucket, key):  # type: ignore[override]
        self._record("stat_object")
        if (bucket, key) not in self.objects:
            raise storage_service.ObjectNotFoundError(f"{bucket}/{key} not found")
        data, content_type = self.objects[(bucket, key)]
        return storage_service.ObjectInfo(key=key, size=len(data), content_type=content_type)


class _TrackedBody(StreamingBody):
    def __init__(self, raw_stream, content_length, on_close) -> None:
        super().__init__(raw_stream, content_length)
        self._on_close = on_close

    def close(self) -> None:
        self._on_close()
        super().close()


FIXED_NOW = datetime(2024, 3, 5, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        app_url="",
        minio_bucket_name="test-bucket",
        minio_access_key="test",
        minio_secret_key="test",
        content_max_length=10000,
    )


@pytest.fixture
def storage(settings) -> InMemoryStorage:
    return InMemoryStorage(buckets={settings.minio_bucket_name})


@pytest.fixture
def text_service(storage, settings) -> TextService:
    return TextService(storage, settings, clock=lambda: FIXED_NOW)


@pytest.fixture
def app_instance(settings, storage):
    return create_app(settings, storage=storage)


@pytest_asyncio.fixture
async def client(app_instance):
    async with app_instance.router.lifespan_context(app_instance):
        transport = ASGITransport(app=app_instance)
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client


@pytest.fixture
def make_storage():
    return InMemoryStorage
