"""
Shared helpers for the content graph models.

Every persisted model carries created/updated timestamps and a nullable
``deleted`` timestamp used as the soft-delete marker. The helpers here keep
that lifecycle and the public (camelCase) serialization in one place.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, Iterable, Optional

from ...utils.validation import validate_dataclass

__all__ = [
    "validate_dataclass",
    "validate_date_order",
    "validate_identifier",
    "to_camel",
    "public_dict",
]


def validate_date_order(created: datetime, updated: datetime) -> None:
    """Validate that ``updated`` is not before ``created``."""
    if updated < created:
        raise ValueError("updated cannot be before created")


def validate_identifier(name: str, value: Any) -> None:
    """Validate that an id/key field holds a non-empty string."""
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be a non-empty string")


def to_camel(name: str) -> str:
    """Convert a snake_case field name into camelCase."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _serialize(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value


def public_dict(
    obj: Any,
    hidden: Iterable[str] = ("deleted",),
    renames: Optional[Dict[str, str]] = None,
) -> Dict[str, Any]:
    """
    Build the public representation of a model.

    Field names are converted to camelCase, datetimes to ISO strings and
    enums to their values. Fields named in ``hidden`` are left out.

    Args:
        obj: Dataclass instance
        hidden: Field names excluded from the output
        renames: Explicit output names for specific fields

    Returns:
        Dictionary suitable for JSON encoding
    """
    renames = renames or {}
    hidden = set(hidden)
    return {
        renames.get(name, to_camel(name)): _serialize(value)
        for name, value in vars(obj).items()
        if name not in hidden
    }
