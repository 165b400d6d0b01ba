"""SQLite implementation for tag storage."""

import logging
import sqlite3
from datetime import datetime
from typing import List, Optional

from ......core.enums import ResourceType, TagSort
from ......core.exceptions import NotFoundError, StorageError, TagNotFoundError
from ......core.models import LabelCount, Tag
from ...base import TagStoragePlugin
from ...base.interfaces import Connection
from ...utils import serialize_datetime, validate_pagination
from ..constants import (
    INSERT_TAG,
    LOOKUP_FIELDS,
    SOFT_DELETE_RESOURCE_TAGS,
    SOFT_DELETE_TAG,
    TAG_INDEXES,
    TAG_SCHEMA,
    UPDATE_TAG_LABEL,
)
from ..utils import (
    TAG_FILTERS,
    add_ordering,
    add_pagination,
    build_filter_query,
    build_label_directory_query,
    connection,
    count_query,
    initialize_schema,
    row_to_label_count,
    row_to_tag,
    tag_to_row,
)

logger = logging.getLogger(__name__)


class SqliteTagStorage(TagStoragePlugin):
    """
    SQLite implementation for tag storage.

    A partial unique index keeps at most one live row per label on a
    resource, so a failed insert surfaces as StorageError rather than a
    silent duplicate.

    Attributes:
        storage_dir (str): Directory where SQLite database is stored
        db_path (str): Full path to SQLite database file
    """

    async def initialize(self) -> None:
        """
        Create the tags table and its indexes.

        Raises:
            StorageError: If initialization fails
        """
        await initialize_schema(self.db_path, (TAG_SCHEMA, *TAG_INDEXES))
        logger.info("Initialized SQLite tag storage")

    async def cleanup(self) -> None:
        """Clean up resources."""
        pass  # SQLite connection is managed per operation

    async def create_many(self, tags: List[Tag], conn: Connection = None) -> List[Tag]:
        """Insert several tags. See base class for details."""
        if not tags:
            return []
        try:
            async with connection(self.db_path, conn) as db:
                await db.executemany(INSERT_TAG, [tag_to_row(tag) for tag in tags])
            return tags
        except sqlite3.IntegrityError as e:
            logger.error(f"Tag rejected by constraints: {str(e)}")
            raise StorageError(f"Tag rejected by constraints: {str(e)}")
        except Exception as e:
            logger.error(f"Failed to create tags: {str(e)}")
            raise StorageError(f"Failed to create tags: {str(e)}")

    async def get(
        self, field: str, value: str, include_deleted: bool = False, conn: Connection = None
    ) -> Tag:
        """Get a tag by id or key. See base class for details."""
        if field not in LOOKUP_FIELDS:
            raise ValueError(f"Cannot look up a tag by {field}")
        try:
            query, params = build_filter_query("tags", {field: value}, TAG_FILTERS, include_deleted)
            async with connection(self.db_path, conn) as db:
                async with db.execute(query, params) as cursor:
                    row = await cursor.fetchone()
            if not row:
                raise TagNotFoundError(f"Tag not found: {value}")
            return row_to_tag(row)
        except NotFoundError:
            raise
        except Exception as e:
            logger.error(f"Failed to get tag: {str(e)}")
            raise StorageError(f"Failed to get tag: {str(e)}")

    async def list_for_resource(
        self,
        resource_type: ResourceType,
        resource_id: str,
        include_deleted: bool = False,
        conn: Connection = None,
    ) -> List[Tag]:
        """List the tags of one resource, oldest first. See base class for details."""
        try:
            query, params = build_filter_query(
                "tags",
                {"resource_type": resource_type, "resource_id": resource_id},
                TAG_FILTERS,
                include_deleted,
            )
            async with connection(self.db_path, conn) as db:
                async with db.execute(add_ordering(query), params) as cursor:
                    return [row_to_tag(row) async for row in cursor]
        except Exception as e:
            logger.error(f"Failed to list tags for {resource_type.value} {resource_id}: {str(e)}")
            raise StorageError(f"Failed to list tags: {str(e)}")

    async def update_label(
        self, tag_id: str, label: str, when: datetime, conn: Connection = None
    ) -> None:
        """Change the label of a live tag. See base class for details."""
        try:
            async with connection(self.db_path, conn) as db:
                cursor = await db.execute(
                    UPDATE_TAG_LABEL, (label, serialize_datetime(when), tag_id)
                )
                if cursor.rowcount == 0:
                    raise TagNotFoundError(f"Tag not found: {tag_id}")
        except NotFoundError:
            raise
        except Exception as e:
            logger.error(f"Failed to update tag: {str(e)}")
            raise StorageError(f"Failed to update tag: {str(e)}")

    async def soft_delete(self, tag_id: str, when: datetime, conn: Connection = None) -> None:
        """Mark a tag deleted. See base class for details."""
        stamp = serialize_datetime(when)
        try:
            async with connection(self.db_path, conn) as db:
                cursor = await db.execute(SOFT_DELETE_TAG, (stamp, stamp, tag_id))
                if cursor.rowcount == 0:
                    raise TagNotFoundError(f"Tag not found: {tag_id}")
        except NotFoundError:
            raise
        except Exception as e:
            logger.error(f"Failed to delete tag: {str(e)}")
            raise StorageError(f"Failed to delete tag: {str(e)}")

    async def soft_delete_many(
        self, tag_ids: List[str], when: datetime, conn: Connection = None
    ) -> int:
        """Mark several tags deleted. See base class for details."""
        if not tag_ids:
            return 0
        stamp = serialize_datetime(when)
        try:
            removed = 0
            async with connection(self.db_path, conn) as db:
                for tag_id in tag_ids:
                    cursor = await db.execute(SOFT_DELETE_TAG, (stamp, stamp, tag_id))
                    removed += cursor.rowcount
            return removed
        except Exception as e:
            logger.error(f"Failed to delete tags: {str(e)}")
            raise StorageError(f"Failed to delete tags: {str(e)}")

    async def soft_delete_for_resource(
        self,
        resource_type: ResourceType,
        resource_id: str,
        when: datetime,
        conn: Connection = None,
    ) -> int:
        """Mark deleted every live tag of one resource. See base class for details."""
        stamp = serialize_datetime(when)
        try:
            async with connection(self.db_path, conn) as db:
                cursor = await db.execute(
                    SOFT_DELETE_RESOURCE_TAGS,
                    (stamp, stamp, resource_type.value, resource_id),
                )
                return cursor.rowcount
        except Exception as e:
            logger.error(f"Failed to delete tags for {resource_type.value} {resource_id}: {str(e)}")
            raise StorageError(f"Failed to delete tags: {str(e)}")

    async def label_directory(
        self,
        resource_type: Optional[ResourceType] = None,
        search: Optional[str] = None,
        label: Optional[str] = None,
        sort: TagSort = TagSort.COUNT,
        limit: int = 100,
        offset: int = 0,
    ) -> List[LabelCount]:
        """List distinct live labels with usage counts. See base class for details."""
        try:
            validate_pagination(offset, limit)

            query, params = build_label_directory_query(resource_type, search, label, sort)
            query, page_params = add_pagination(query, limit, offset)

            async with connection(self.db_path) as db:
                async with db.execute(query, params + page_params) as cursor:
                    return [row_to_label_count(row) async for row in cursor]

        except ValueError as e:
            raise StorageError(f"Invalid pagination parameters: {str(e)}")
        except Exception as e:
            logger.error(f"Failed to list tag labels: {str(e)}")
            raise StorageError(f"Failed to list tag labels: {str(e)}")

    async def count_labels(
        self,
        resource_type: Optional[ResourceType] = None,
        search: Optional[str] = None,
        label: Optional[str] = None,
    ) -> int:
        """Count distinct live labels. See base class for details."""
        try:
            query, params = build_label_directory_query(resource_type, search, label)
            async with connection(self.db_path) as db:
                async with db.execute(count_query(query), params) as cursor:
                    row = await cursor.fetchone()
            return int(row[0])
        except Exception as e:
            logger.error(f"Failed to count tag labels: {str(e)}")
            raise StorageError(f"Failed to count tag labels: {str(e)}")
