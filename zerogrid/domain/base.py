import uuid
from datetime import UTC, datetime


def generate_uuid() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how the DateTime columns are stored"""
    return datetime.now(UTC).replace(tzinfo=None)
