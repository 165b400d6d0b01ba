"""
Utility functions for storage plugins.

- serialize_datetime: Write datetimes as ISO strings
- deserialize_datetime: Parse ISO strings read from storage
- validate_pagination: Validate pagination parameters
"""

from .serialization import deserialize_datetime, serialize_datetime
from .validation import validate_pagination

__all__ = [
    "serialize_datetime",
    "deserialize_datetime",
    "validate_pagination",
]
