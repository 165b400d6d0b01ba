"""SQLite implementation for dimension storage."""

import logging
import sqlite3
from datetime import datetime
from typing import Any, Dict, List, Optional

from ......core.exceptions import DimensionNotFoundError, NotFoundError, StorageError
from ......core.models import Dimension
from ...base import DimensionStoragePlugin
from ...base.interfaces import Connection
from ...utils import serialize_datetime, validate_pagination
from ..constants import (
    CASCADE_DIMENSIONS,
    DIMENSION_INDEXES,
    DIMENSION_SCHEMA,
    INSERT_DIMENSION,
    LOOKUP_FIELDS,
    SOFT_DELETE_DIMENSION,
    UPDATE_DIMENSION,
)
from ..utils import (
    DIMENSION_FILTERS,
    add_ordering,
    add_pagination,
    build_filter_query,
    connection,
    count_query,
    dimension_to_row,
    initialize_schema,
    row_to_dimension,
)

logger = logging.getLogger(__name__)


class SqliteDimensionStorage(DimensionStoragePlugin):
    """
    SQLite implementation for dimension storage.

    Dimensions are never removed; deletion stamps the ``deleted`` column and
    every default read filters those rows out.

    Attributes:
        storage_dir (str): Directory where SQLite database is stored
        db_path (str): Full path to SQLite database file
    """

    async def initialize(self) -> None:
        """
        Create the dimensions table and its indexes.

        Raises:
            StorageError: If initialization fails
        """
        await initialize_schema(self.db_path, (DIMENSION_SCHEMA, *DIMENSION_INDEXES))
        logger.info("Initialized SQLite dimension storage")

    async def cleanup(self) -> None:
        """Clean up resources."""
        pass  # SQLite connection is managed per operation

    async def create(self, dimension: Dimension, conn: Connection = None) -> Dimension:
        """Insert a new dimension. See base class for details."""
        try:
            async with connection(self.db_path, conn) as db:
                await db.execute(INSERT_DIMENSION, dimension_to_row(dimension))
            logger.debug(
                f"Created {dimension.dimension_type.value} dimension "
                f"{dimension.source_id} -> {dimension.target_id}"
            )
            return dimension
        except sqlite3.IntegrityError as e:
            logger.error(f"Dimension rejected by constraints: {dimension.key}: {str(e)}")
            raise StorageError(f"Dimension rejected by constraints: {str(e)}")
        except Exception as e:
            logger.error(f"Failed to create dimension: {str(e)}")
            raise StorageError(f"Failed to create dimension: {str(e)}")

    async def get(
        self, field: str, value: str, include_deleted: bool = False, conn: Connection = None
    ) -> Dimension:
        """Get a dimension by id or key. See base class for details."""
        if field not in LOOKUP_FIELDS:
            raise ValueError(f"Cannot look up a dimension by {field}")
        try:
            query, params = build_filter_query(
                "dimensions", {field: value}, DIMENSION_FILTERS, include_deleted
            )
            async with connection(self.db_path, conn) as db:
                async with db.execute(query, params) as cursor:
                    row = await cursor.fetchone()
            if not row:
                raise DimensionNotFoundError(f"Dimension not found: {value}")
            return row_to_dimension(row)
        except NotFoundError:
            raise
        except Exception as e:
            logger.error(f"Failed to get dimension: {str(e)}")
            raise StorageError(f"Failed to get dimension: {str(e)}")

    async def update(self, dimension: Dimension, conn: Connection = None) -> Dimension:
        """Persist the mutable fields of a dimension. See base class for details."""
        try:
            async with connection(self.db_path, conn) as db:
                cursor = await db.execute(
                    UPDATE_DIMENSION,
                    (
                        dimension.dimension_type.value,
                        dimension.weight,
                        dimension.note,
                        serialize_datetime(dimension.updated),
                        dimension.id,
                    ),
                )
                if cursor.rowcount == 0:
                    raise DimensionNotFoundError(f"Dimension not found: {dimension.key}")
            return dimension
        except NotFoundError:
            raise
        except Exception as e:
            logger.error(f"Failed to update dimension: {str(e)}")
            raise StorageError(f"Failed to update dimension: {str(e)}")

    async def soft_delete(self, dimension_id: str, when: datetime, conn: Connection = None) -> None:
        """Mark a dimension deleted. See base class for details."""
        stamp = serialize_datetime(when)
        try:
            async with connection(self.db_path, conn) as db:
                cursor = await db.execute(SOFT_DELETE_DIMENSION, (stamp, stamp, dimension_id))
                if cursor.rowcount == 0:
                    raise DimensionNotFoundError(f"Dimension not found: {dimension_id}")
        except NotFoundError:
            raise
        except Exception as e:
            logger.error(f"Failed to delete dimension: {str(e)}")
            raise StorageError(f"Failed to delete dimension: {str(e)}")

    async def soft_delete_for_node(
        self, node_id: str, author_id: str, when: datetime, conn: Connection = None
    ) -> int:
        """Cascade a node deletion onto its author's dimensions. See base class for details."""
        stamp = serialize_datetime(when)
        try:
            async with connection(self.db_path, conn) as db:
                cursor = await db.execute(
                    CASCADE_DIMENSIONS, (stamp, stamp, node_id, node_id, author_id)
                )
                return cursor.rowcount
        except Exception as e:
            logger.error(f"Failed to cascade dimensions for {node_id}: {str(e)}")
            raise StorageError(f"Failed to cascade dimensions for {node_id}: {str(e)}")

    async def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 100,
        offset: int = 0,
        include_deleted: bool = False,
        conn: Connection = None,
    ) -> List[Dimension]:
        """List dimensions, newest first. See base class for details."""
        try:
            validate_pagination(offset, limit)

            query, params = build_filter_query(
                "dimensions", filters or {}, DIMENSION_FILTERS, include_deleted
            )
            query = add_ordering(query, descending=True)
            query, page_params = add_pagination(query, limit, offset)

            async with connection(self.db_path, conn) as db:
                async with db.execute(query, params + page_params) as cursor:
                    return [row_to_dimension(row) async for row in cursor]

        except ValueError as e:
            raise StorageError(f"Invalid query parameters: {str(e)}")
        except Exception as e:
            logger.error(f"Failed to list dimensions: {str(e)}")
            raise StorageError(f"Failed to list dimensions: {str(e)}")

    async def count(
        self,
        filters: Optional[Dict[str, Any]] = None,
        include_deleted: bool = False,
        conn: Connection = None,
    ) -> int:
        """Count dimensions matching the filters. See base class for details."""
        try:
            query, params = build_filter_query(
                "dimensions", filters or {}, DIMENSION_FILTERS, include_deleted
            )
            async with connection(self.db_path, conn) as db:
                async with db.execute(count_query(query), params) as cursor:
                    row = await cursor.fetchone()
            return int(row[0])
        except ValueError as e:
            raise StorageError(f"Invalid query parameters: {str(e)}")
        except Exception as e:
            logger.error(f"Failed to count dimensions: {str(e)}")
            raise StorageError(f"Failed to count dimensions: {str(e)}")
