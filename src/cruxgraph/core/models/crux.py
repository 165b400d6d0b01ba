"""
Crux (content node) model.

Cruxes are owned by single-table CRUD elsewhere; the graph engine only needs
them as addressable endpoints for dimensions and tags, plus their author for
ownership checks and the deletion cascade.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from .base import public_dict, validate_dataclass, validate_date_order, validate_identifier


@validate_dataclass
@dataclass
class Crux:
    """
    A unit of content that can be linked and tagged.

    Attributes:
        id (str): Internal identifier
        key (str): Public short key
        author_id (str): Author who owns the crux
        home_id (str): Owning home (tenant)
        title (str): Display title
        created (datetime): Creation timestamp
        updated (datetime): Last modification timestamp
        slug (Optional[str]): URL slug
        deleted (Optional[datetime]): Soft-delete timestamp
    """

    id: str
    key: str
    author_id: str
    home_id: str
    title: str
    created: datetime
    updated: datetime
    slug: Optional[str] = None
    deleted: Optional[datetime] = None

    def __post_init__(self):
        """Validate crux after initialization."""
        for name in ("id", "key", "author_id", "home_id"):
            validate_identifier(name, getattr(self, name))
        validate_date_order(self.created, self.updated)

    @property
    def is_active(self) -> bool:
        return self.deleted is None

    def to_dict(self) -> Dict[str, Any]:
        return public_dict(self)
