"""
Tag models for the content graph.

Tags are lowercase kebab-case labels attached to exactly one
(resource type, resource id) pair. One table serves every taggable resource;
the resource type is a key, not a subclass.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from ...utils.validation import RegexRule
from ..enums import ResourceType
from ..exceptions import ValidationError
from .base import public_dict, validate_dataclass, validate_date_order, validate_identifier

LABEL_PATTERN = r"[a-z0-9-]{1,50}"

LABEL_RULE = RegexRule(
    LABEL_PATTERN,
    "Each tag label must be 1-50 characters of lowercase letters, numbers and hyphens",
)


def normalize_label(label: Any) -> str:
    """
    Lowercase a label and check it against the kebab-case pattern.

    Args:
        label: Raw label supplied by a caller

    Returns:
        The normalized label

    Raises:
        ValidationError: If the label is not a string or fails the pattern
    """
    if not isinstance(label, str):
        raise ValidationError(f"Tag label must be a string, got {type(label).__name__}")
    normalized = label.lower()
    error = LABEL_RULE.check(normalized)
    if error:
        raise ValidationError(f"{error}: '{label}'")
    return normalized


def normalize_labels(labels: Iterable[Any]) -> List[str]:
    """Normalize every label, dropping duplicates while keeping first-seen order."""
    seen: Dict[str, None] = {}
    for label in labels:
        seen.setdefault(normalize_label(label), None)
    return list(seen)


@validate_dataclass
@dataclass
class Tag:
    """
    A label applied to one resource.

    Attributes:
        id (str): Internal identifier
        key (str): Public short key
        resource_type (ResourceType): Kind of resource tagged
        resource_id (str): Identifier of the tagged resource
        label (str): Normalized label
        author_id (str): Author who applied the tag
        home_id (str): Owning home (tenant)
        created (datetime): Creation timestamp
        updated (datetime): Last modification timestamp
        system (bool): Platform-provided tag, hidden from public output
        deleted (Optional[datetime]): Soft-delete timestamp
    """

    id: str
    key: str
    resource_type: ResourceType
    resource_id: str
    label: str
    author_id: str
    home_id: str
    created: datetime
    updated: datetime
    system: bool = False
    deleted: Optional[datetime] = None

    def __post_init__(self):
        """Validate tag after initialization."""
        for name in ("id", "key", "resource_id", "author_id", "home_id"):
            validate_identifier(name, getattr(self, name))
        if not isinstance(self.resource_type, ResourceType):
            raise TypeError("resource_type must be a ResourceType enum")
        if LABEL_RULE.check(self.label):
            raise ValueError(f"label must be lowercase kebab-case: '{self.label}'")
        validate_date_order(self.created, self.updated)

    @property
    def is_active(self) -> bool:
        return self.deleted is None

    def to_dict(self) -> Dict[str, Any]:
        """Public representation; the deletion marker and system flag are hidden."""
        return public_dict(self, hidden=("deleted", "system"))


@dataclass
class LabelCount:
    """Tag directory entry: a label and how many live tags carry it."""

    label: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "count": self.count}
