"""
Serialization utilities for storage plugins.

Timestamps are persisted as ISO-8601 text and read back as naive datetimes.
"""

from datetime import datetime
from typing import Any, Optional


def serialize_datetime(obj: Any) -> Any:
    """
    Handle datetime serialization for storage and JSON.

    Args:
        obj: Object to serialize

    Returns:
        ISO format string if obj is datetime, otherwise unchanged obj
    """
    if isinstance(obj, datetime):
        return obj.isoformat()
    return obj


def deserialize_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO format timestamp read from storage.

    Args:
        value: ISO string, or None for an unset column

    Returns:
        Parsed datetime, or None
    """
    if value is None:
        return None
    return datetime.fromisoformat(value)

