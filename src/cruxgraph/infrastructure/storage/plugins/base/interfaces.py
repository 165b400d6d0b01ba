"""
Core interfaces for storage plugins.

This module defines the base interfaces that all storage plugins must implement:
- StoragePlugin: Generic base interface with lifecycle operations
- CruxStoragePlugin: Interface for content node storage
- DimensionStoragePlugin: Interface for dimension (typed edge) storage
- TagStoragePlugin: Interface for tag storage

Every mutating and reading method accepts an optional ``conn``. When given,
the call runs on that connection as one step of an enclosing unit of work;
otherwise the plugin opens and commits its own connection.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, TypeVar

import aiosqlite

from .....core.enums import ResourceType, TagSort
from .....core.models import Crux, Dimension, LabelCount, Tag

T = TypeVar("T")

Connection = Optional[aiosqlite.Connection]


class StoragePlugin(Generic[T], ABC):
    """
    Abstract base class for storage plugins.

    Attributes:
        storage_dir (str): Base directory for storage operations
        db_path (str): Full path to the database file
    """

    def __init__(self, storage_dir: str, db_path: str):
        """
        Initialize the storage plugin.

        Args:
            storage_dir: Directory for storage operations
            db_path: Path to the database file shared by all plugins
        """
        self.storage_dir = storage_dir
        self.db_path = db_path

    @abstractmethod
    async def initialize(self) -> None:
        """
        Create the plugin's tables and indexes if they don't exist.

        Raises:
            StorageError: If initialization fails
        """
        pass

    @abstractmethod
    async def cleanup(self) -> None:
        """Release any resources held by the plugin."""
        pass


class CruxStoragePlugin(StoragePlugin[Crux]):
    """Abstract base class for content node storage."""

    @abstractmethod
    async def create(self, crux: Crux, conn: Connection = None) -> Crux:
        """
        Insert a new crux.

        Raises:
            StorageError: If the insert fails or the id/key already exists
        """
        pass

    @abstractmethod
    async def get(
        self, field: str, value: str, include_deleted: bool = False, conn: Connection = None
    ) -> Crux:
        """
        Get a crux by ``id`` or ``key``.

        Raises:
            CruxNotFoundError: If no matching (live) crux exists
            StorageError: If retrieval fails
        """
        pass

    @abstractmethod
    async def soft_delete(self, crux_id: str, when: datetime, conn: Connection = None) -> None:
        """
        Mark a crux deleted.

        Raises:
            CruxNotFoundError: If the crux is absent or already deleted
            StorageError: If the update fails
        """
        pass

    @abstractmethod
    async def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 100,
        offset: int = 0,
        conn: Connection = None,
    ) -> List[Crux]:
        """
        List live cruxes ordered by creation ascending.

        Raises:
            StorageError: If listing fails or pagination parameters are invalid
        """
        pass


class DimensionStoragePlugin(StoragePlugin[Dimension]):
    """Abstract base class for dimension storage."""

    @abstractmethod
    async def create(self, dimension: Dimension, conn: Connection = None) -> Dimension:
        """
        Insert a new dimension.

        Raises:
            StorageError: If the insert fails
        """
        pass

    @abstractmethod
    async def get(
        self, field: str, value: str, include_deleted: bool = False, conn: Connection = None
    ) -> Dimension:
        """
        Get a dimension by ``id`` or ``key``.

        Raises:
            DimensionNotFoundError: If no matching (live) dimension exists
            StorageError: If retrieval fails
        """
        pass

    @abstractmethod
    async def update(self, dimension: Dimension, conn: Connection = None) -> Dimension:
        """
        Persist the mutable fields (type, weight, note, updated) of a live dimension.

        Raises:
            DimensionNotFoundError: If the dimension is absent or deleted
            StorageError: If the update fails
        """
        pass

    @abstractmethod
    async def soft_delete(self, dimension_id: str, when: datetime, conn: Connection = None) -> None:
        """
        Mark a dimension deleted.

        Raises:
            DimensionNotFoundError: If the dimension is absent or already deleted
            StorageError: If the update fails
        """
        pass

    @abstractmethod
    async def soft_delete_for_node(
        self, node_id: str, author_id: str, when: datetime, conn: Connection = None
    ) -> int:
        """
        Mark deleted every live dimension touching ``node_id`` created by ``author_id``.

        Returns:
            Number of dimensions affected

        Raises:
            StorageError: If the update fails
        """
        pass

    @abstractmethod
    async def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 100,
        offset: int = 0,
        include_deleted: bool = False,
        conn: Connection = None,
    ) -> List[Dimension]:
        """
        List dimensions ordered by creation descending.

        Raises:
            StorageError: If listing fails or pagination parameters are invalid
        """
        pass

    @abstractmethod
    async def count(
        self,
        filters: Optional[Dict[str, Any]] = None,
        include_deleted: bool = False,
        conn: Connection = None,
    ) -> int:
        """
        Count dimensions matching the filters.

        Raises:
            StorageError: If the query fails
        """
        pass


class TagStoragePlugin(StoragePlugin[Tag]):
    """Abstract base class for tag storage."""

    @abstractmethod
    async def create_many(self, tags: List[Tag], conn: Connection = None) -> List[Tag]:
        """
        Insert several tags in one call.

        Raises:
            StorageError: If any insert fails, including a live-label collision
        """
        pass

    @abstractmethod
    async def get(
        self, field: str, value: str, include_deleted: bool = False, conn: Connection = None
    ) -> Tag:
        """
        Get a tag by ``id`` or ``key``.

        Raises:
            TagNotFoundError: If no matching (live) tag exists
            StorageError: If retrieval fails
        """
        pass

    @abstractmethod
    async def list_for_resource(
        self,
        resource_type: ResourceType,
        resource_id: str,
        include_deleted: bool = False,
        conn: Connection = None,
    ) -> List[Tag]:
        """
        List the tags of one resource ordered by creation ascending.

        Raises:
            StorageError: If the query fails
        """
        pass

    @abstractmethod
    async def update_label(
        self, tag_id: str, label: str, when: datetime, conn: Connection = None
    ) -> None:
        """
        Change the label of a live tag.

        Raises:
            TagNotFoundError: If the tag is absent or deleted
            StorageError: If the update fails
        """
        pass

    @abstractmethod
    async def soft_delete(self, tag_id: str, when: datetime, conn: Connection = None) -> None:
        """
        Mark a tag deleted.

        Raises:
            TagNotFoundError: If the tag is absent or already deleted
            StorageError: If the update fails
        """
        pass

    @abstractmethod
    async def soft_delete_many(
        self, tag_ids: List[str], when: datetime, conn: Connection = None
    ) -> int:
        """
        Mark several tags deleted.

        Returns:
            Number of tags affected

        Raises:
            StorageError: If the update fails
        """
        pass

    @abstractmethod
    async def soft_delete_for_resource(
        self,
        resource_type: ResourceType,
        resource_id: str,
        when: datetime,
        conn: Connection = None,
    ) -> int:
        """
        Mark deleted every live tag of one resource.

        Returns:
            Number of tags affected

        Raises:
            StorageError: If the update fails
        """
        pass

    @abstractmethod
    async def label_directory(
        self,
        resource_type: Optional[ResourceType] = None,
        search: Optional[str] = None,
        label: Optional[str] = None,
        sort: TagSort = TagSort.COUNT,
        limit: int = 100,
        offset: int = 0,
    ) -> List[LabelCount]:
        """
        List distinct live labels with their usage counts.

        Raises:
            StorageError: If the query fails
        """
        pass

    @abstractmethod
    async def count_labels(
        self,
        resource_type: Optional[ResourceType] = None,
        search: Optional[str] = None,
        label: Optional[str] = None,
    ) -> int:
        """
        Count distinct live labels matching the directory filters.

        Raises:
            StorageError: If the query fails
        """
        pass
