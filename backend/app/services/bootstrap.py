import enum
import logging

from app.services.storage import StorageError, StorageService

logger = logging.getLogger(__name__)


class BucketState(str, enum.Enum):
    EXISTING = "existing"
    CREATED = "created"


class BootstrapError(RuntimeError):
    """Raised when the bucket cannot be verified or provisioned at startup."""


async def ensure_bucket(storage: StorageService, bucket: str) -> BucketState:
    """Make sure ``bucket`` exists, creating it on first run.

    A single attempt is made. Failures raise ``BootstrapError`` so the caller
    can refuse to start serving traffic.
    """
    try:
        exists = await storage.bucket_exists(bucket)
    except StorageError as exc:
        logger.error("Failed to check whether bucket %s exists: %s", bucket, exc)
        raise BootstrapError(f"Unable to check bucket {bucket!r}") from exc

    if exists:
        logger.debug("Bucket %s already exists", bucket)
        return BucketState.EXISTING

    logger.info("Creating bucket %s", bucket)
    try:
        await storage.make_bucket(bucket)
    except StorageError as exc:
        logger.error("Failed to create bucket %s: %s", bucket, exc)
        raise BootstrapError(f"Unable to create bucket {bucket!r}") from exc
    return BucketState.CREATED
