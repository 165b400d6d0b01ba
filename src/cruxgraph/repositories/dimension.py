"""
Dimension repository implementation for the content graph.

This module implements the repository pattern for Dimension objects:
- CRUD operations with soft deletion
- Type-filtered, newest-first listing by source crux
- The author-scoped cascade run when a crux is deleted
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..core.models import Dimension
from ..infrastructure.storage import StorageService
from ..utils.validation.integrity import DataIntegrityValidator
from .base import BaseRepository, Connection, ModelValidator

logger = logging.getLogger(__name__)


class DimensionRepository(BaseRepository[Dimension]):
    """
    Repository for managing Dimension objects.

    Attributes:
        storage (StorageService): The underlying storage service for persistence
        validator (ModelValidator): Validator run before every insert and update
    """

    def __init__(self, storage: StorageService):
        """
        Initialize the dimension repository.

        Args:
            storage: Storage service for data persistence
        """
        super().__init__(storage)
        self.validator: ModelValidator[Dimension] = ModelValidator(
            DataIntegrityValidator.validate_dimension_integrity
        )

    def register_validator(self, validator_func) -> None:
        """
        Register a custom validation function.

        Args:
            validator_func: Async function that takes a Dimension and returns bool
        """
        self.validator.register_validator(validator_func)

    async def create(self, item: Dimension, conn: Connection = None) -> Dimension:
        """
        Persist a new dimension.

        Raises:
            ValidationError: If dimension validation fails
            StorageError: If there's an error with storage operations
        """
        await self.validator.require_valid(item, "Dimension")
        return await self.storage.dimension_storage.create(item, conn=conn)

    async def get(
        self, id: str, include_deleted: bool = False, conn: Connection = None
    ) -> Dimension:
        """
        Retrieve a dimension by id.

        Raises:
            DimensionNotFoundError: If dimension doesn't exist or is deleted
            StorageError: If there's an error with storage operations
        """
        return await self.storage.dimension_storage.get("id", id, include_deleted, conn=conn)

    async def get_by_key(
        self, key: str, include_deleted: bool = False, conn: Connection = None
    ) -> Dimension:
        """
        Retrieve a dimension by its public key.

        Raises:
            DimensionNotFoundError: If dimension doesn't exist or is deleted
            StorageError: If there's an error with storage operations
        """
        return await self.storage.dimension_storage.get("key", key, include_deleted, conn=conn)

    async def update(self, item: Dimension, conn: Connection = None) -> Dimension:
        """
        Persist changed type, weight and note.

        Raises:
            ValidationError: If dimension validation fails
            DimensionNotFoundError: If dimension doesn't exist or is deleted
            StorageError: If there's an error with storage operations
        """
        await self.validator.require_valid(item, "Dimension")
        return await self.storage.dimension_storage.update(item, conn=conn)

    async def soft_delete(
        self, item: Dimension, when: datetime, conn: Connection = None
    ) -> Dimension:
        """
        Mark a dimension deleted; the row is kept.

        Raises:
            DimensionNotFoundError: If dimension is already deleted
            StorageError: If there's an error with storage operations
        """
        await self.storage.dimension_storage.soft_delete(item.id, when, conn=conn)
        item.deleted = when
        item.updated = when
        return item

    async def cascade(
        self, node_id: str, author_id: str, when: datetime, conn: Connection = None
    ) -> int:
        """
        Soft-delete the live dimensions touching a node that ``author_id`` created.

        Returns:
            Number of dimensions affected
        """
        return await self.storage.dimension_storage.soft_delete_for_node(
            node_id, author_id, when, conn=conn
        )

    async def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 100,
        offset: int = 0,
        include_deleted: bool = False,
    ) -> List[Dimension]:
        """
        List dimensions, newest first.

        Args:
            filters: Column filters, plus ``node_id`` for either endpoint
            limit: Maximum number of dimensions to return
            offset: Number of dimensions to skip
            include_deleted: Whether soft-deleted rows are returned

        Returns:
            List of dimensions matching the criteria
        """
        return await self.storage.dimension_storage.list(filters, limit, offset, include_deleted)

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """Count live dimensions matching the filters."""
        return await self.storage.dimension_storage.count(filters)

    async def validate(self, item: Dimension) -> bool:
        """
        Validate a dimension using the dedicated validator.

        Returns:
            True if validation passes, False otherwise
        """
        return await self.validator.validate(item)
