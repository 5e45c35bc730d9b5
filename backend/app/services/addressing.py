from datetime import datetime, timezone
from typing import Final
from uuid import uuid4

KEY_SUFFIX: Final[str] = ".txt"


def generate_key(now: datetime | None = None) -> str:
    """Build a storage key of the form ``YYYY/MM/DD/<uuid4>.txt``."""
    moment = now or datetime.now(timezone.utc)
    return f"{moment:%Y/%m/%d}/{uuid4()}{KEY_SUFFIX}"
