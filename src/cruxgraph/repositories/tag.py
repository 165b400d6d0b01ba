"""
Tag repository implementation for the content graph.

One repository serves every taggable resource; the resource type travels as
part of the lookup key rather than selecting a subclass.
"""

import logging
from datetime import datetime
from typing import List, Optional

from ..core.enums import ResourceType, TagSort
from ..core.models import LabelCount, Tag
from ..infrastructure.storage import StorageService
from ..utils.validation.integrity import DataIntegrityValidator
from .base import BaseRepository, Connection, ModelValidator

logger = logging.getLogger(__name__)


class TagRepository(BaseRepository[Tag]):
    """
    Repository for managing Tag objects.

    Attributes:
        storage (StorageService): The underlying storage service for persistence
        validator (ModelValidator): Validator run before every insert
    """

    def __init__(self, storage: StorageService):
        super().__init__(storage)
        self.validator: ModelValidator[Tag] = ModelValidator(
            DataIntegrityValidator.validate_tag_integrity
        )

    async def create(self, item: Tag, conn: Connection = None) -> Tag:
        """Persist a single tag."""
        created = await self.create_many([item], conn=conn)
        return created[0]

    async def create_many(self, items: List[Tag], conn: Connection = None) -> List[Tag]:
        """
        Persist several tags at once.

        Raises:
            ValidationError: If any tag fails validation; nothing is written
            StorageError: If the insert fails
        """
        for item in items:
            await self.validator.require_valid(item, "Tag")
        return await self.storage.tag_storage.create_many(items, conn=conn)

    async def get(self, id: str, include_deleted: bool = False, conn: Connection = None) -> Tag:
        return await self.storage.tag_storage.get("id", id, include_deleted, conn=conn)

    async def get_by_key(
        self, key: str, include_deleted: bool = False, conn: Connection = None
    ) -> Tag:
        return await self.storage.tag_storage.get("key", key, include_deleted, conn=conn)

    async def list_for_resource(
        self,
        resource_type: ResourceType,
        resource_id: str,
        include_deleted: bool = False,
        conn: Connection = None,
    ) -> List[Tag]:
        """Tags of one resource ordered by creation ascending."""
        return await self.storage.tag_storage.list_for_resource(
            resource_type, resource_id, include_deleted, conn=conn
        )

    async def relabel(self, item: Tag, label: str, when: datetime, conn: Connection = None) -> Tag:
        """
        Change a tag's label in place.

        Raises:
            ValidationError: If the new label is malformed
            TagNotFoundError: If the tag is deleted
            StorageError: If the update fails
        """
        item.label = label
        item.updated = when
        await self.validator.require_valid(item, "Tag")
        await self.storage.tag_storage.update_label(item.id, label, when, conn=conn)
        return item

    async def soft_delete(self, item: Tag, when: datetime, conn: Connection = None) -> Tag:
        await self.storage.tag_storage.soft_delete(item.id, when, conn=conn)
        item.deleted = when
        item.updated = when
        return item

    async def soft_delete_many(
        self, items: List[Tag], when: datetime, conn: Connection = None
    ) -> int:
        """Mark several tags deleted and return how many rows changed."""
        return await self.storage.tag_storage.soft_delete_many(
            [item.id for item in items], when, conn=conn
        )

    async def soft_delete_for_resource(
        self,
        resource_type: ResourceType,
        resource_id: str,
        when: datetime,
        conn: Connection = None,
    ) -> int:
        return await self.storage.tag_storage.soft_delete_for_resource(
            resource_type, resource_id, when, conn=conn
        )

    async def label_directory(
        self,
        resource_type: Optional[ResourceType] = None,
        search: Optional[str] = None,
        label: Optional[str] = None,
        sort: TagSort = TagSort.COUNT,
        limit: int = 100,
        offset: int = 0,
    ) -> List[LabelCount]:
        """Distinct live labels with usage counts."""
        return await self.storage.tag_storage.label_directory(
            resource_type, search, label, sort, limit, offset
        )

    async def count_labels(
        self,
        resource_type: Optional[ResourceType] = None,
        search: Optional[str] = None,
        label: Optional[str] = None,
    ) -> int:
        return await self.storage.tag_storage.count_labels(resource_type, search, label)

    async def validate(self, item: Tag) -> bool:
        return await self.validator.validate(item)
