from datetime import UTC, datetime
from typing import Optional


def utcnow() -> datetime:
    """Naive UTC now; every TIMESTAMP column stores naive UTC."""
    return datetime.now(UTC).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(UTC).replace(tzinfo=None)
    return value
