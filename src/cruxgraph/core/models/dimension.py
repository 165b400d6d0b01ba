"""
Dimension models for the content graph.

A dimension is a typed, directed edge from a source crux to a target crux.
This module defines the persisted Dimension and the set of fields an author
may change after creation.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from ..enums import DimensionType
from .base import public_dict, validate_dataclass, validate_date_order, validate_identifier

# Fields an author may change on an existing dimension
UPDATABLE_FIELDS = frozenset({"type", "weight", "note"})


@validate_dataclass
@dataclass
class Dimension:
    """
    Directed, typed relationship between two cruxes.

    Attributes:
        id (str): Internal identifier
        key (str): Public short key
        source_id (str): Id of the crux the edge starts from
        target_id (str): Id of the crux the edge points to
        dimension_type (DimensionType): Kind of relationship
        author_id (str): Author who created the edge
        home_id (str): Owning home (tenant)
        created (datetime): Creation timestamp
        updated (datetime): Last modification timestamp
        weight (Optional[int]): Non-negative strength of the relationship
        note (Optional[str]): Free-text note
        deleted (Optional[datetime]): Soft-delete timestamp
    """

    id: str
    key: str
    source_id: str
    target_id: str
    dimension_type: DimensionType
    author_id: str
    home_id: str
    created: datetime
    updated: datetime
    weight: Optional[int] = None
    note: Optional[str] = None
    deleted: Optional[datetime] = None

    def __post_init__(self):
        """Validate dimension after initialization."""
        for name in ("id", "key", "author_id", "home_id"):
            validate_identifier(name, getattr(self, name))
        if not isinstance(self.source_id, str) or not self.source_id.strip():
            raise ValueError("source crux must be a non-empty string")
        if not isinstance(self.target_id, str) or not self.target_id.strip():
            raise ValueError("target crux must be a non-empty string")
        if not isinstance(self.dimension_type, DimensionType):
            raise TypeError("dimension_type must be a DimensionType enum")
        if isinstance(self.weight, int) and self.weight < 0:
            raise ValueError("weight must be non-negative")
        validate_date_order(self.created, self.updated)

    @property
    def is_active(self) -> bool:
        return self.deleted is None

    def touches(self, crux_id: str) -> bool:
        """Return True if the crux is either endpoint of this dimension."""
        return crux_id in (self.source_id, self.target_id)

    def to_dict(self) -> Dict[str, Any]:
        """Public representation; the deletion marker is never exposed."""
        return public_dict(self, renames={"dimension_type": "type"})
