"""SQLite implementation for content node (crux) storage."""

import logging
import sqlite3
from datetime import datetime
from typing import Any, Dict, List, Optional

from ......core.exceptions import CruxNotFoundError, NotFoundError, StorageError
from ......core.models import Crux
from ...base import CruxStoragePlugin
from ...base.interfaces import Connection
from ...utils import serialize_datetime, validate_pagination
from ..constants import (
    CRUX_INDEXES,
    CRUX_SCHEMA,
    INSERT_CRUX,
    LOOKUP_FIELDS,
    SOFT_DELETE_CRUX,
)
from ..utils import (
    CRUX_FILTERS,
    add_ordering,
    add_pagination,
    build_filter_query,
    connection,
    crux_to_row,
    initialize_schema,
    row_to_crux,
)

logger = logging.getLogger(__name__)


class SqliteCruxStorage(CruxStoragePlugin):
    """
    SQLite implementation for crux storage.

    Attributes:
        storage_dir (str): Directory where SQLite database is stored
        db_path (str): Full path to SQLite database file
    """

    async def initialize(self) -> None:
        """
        Create the cruxes table and its indexes.

        Raises:
            StorageError: If initialization fails
        """
        await initialize_schema(self.db_path, (CRUX_SCHEMA, *CRUX_INDEXES))
        logger.info("Initialized SQLite crux storage")

    async def cleanup(self) -> None:
        """Clean up resources."""
        pass  # SQLite connection is managed per operation

    async def create(self, crux: Crux, conn: Connection = None) -> Crux:
        """Insert a new crux. See base class for details."""
        try:
            async with connection(self.db_path, conn) as db:
                await db.execute(INSERT_CRUX, crux_to_row(crux))
            logger.debug(f"Created crux {crux.key}")
            return crux
        except sqlite3.IntegrityError as e:
            logger.error(f"Crux already exists: {crux.key}: {str(e)}")
            raise StorageError(f"Crux already exists: {crux.key}")
        except Exception as e:
            logger.error(f"Failed to create crux: {str(e)}")
            raise StorageError(f"Failed to create crux: {str(e)}")

    async def get(
        self, field: str, value: str, include_deleted: bool = False, conn: Connection = None
    ) -> Crux:
        """Get a crux by id or key. See base class for details."""
        if field not in LOOKUP_FIELDS:
            raise ValueError(f"Cannot look up a crux by {field}")
        try:
            query, params = build_filter_query("cruxes", {field: value}, CRUX_FILTERS, include_deleted)
            async with connection(self.db_path, conn) as db:
                async with db.execute(query, params) as cursor:
                    row = await cursor.fetchone()
            if not row:
                raise CruxNotFoundError(f"Crux not found: {value}")
            return row_to_crux(row)
        except NotFoundError:
            raise
        except Exception as e:
            logger.error(f"Failed to get crux: {str(e)}")
            raise StorageError(f"Failed to get crux: {str(e)}")

    async def soft_delete(self, crux_id: str, when: datetime, conn: Connection = None) -> None:
        """Mark a crux deleted. See base class for details."""
        stamp = serialize_datetime(when)
        try:
            async with connection(self.db_path, conn) as db:
                cursor = await db.execute(SOFT_DELETE_CRUX, (stamp, stamp, crux_id))
                if cursor.rowcount == 0:
                    raise CruxNotFoundError(f"Crux not found: {crux_id}")
        except NotFoundError:
            raise
        except Exception as e:
            logger.error(f"Failed to delete crux: {str(e)}")
            raise StorageError(f"Failed to delete crux: {str(e)}")

    async def list(
        self,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 100,
        offset: int = 0,
        conn: Connection = None,
    ) -> List[Crux]:
        """List live cruxes. See base class for details."""
        try:
            validate_pagination(offset, limit)

            query, params = build_filter_query("cruxes", filters or {}, CRUX_FILTERS)
            query, page_params = add_pagination(add_ordering(query), limit, offset)

            async with connection(self.db_path, conn) as db:
                async with db.execute(query, params + page_params) as cursor:
                    return [row_to_crux(row) async for row in cursor]

        except ValueError as e:
            raise StorageError(f"Invalid query parameters: {str(e)}")
        except Exception as e:
            logger.error(f"Failed to list cruxes: {str(e)}")
            raise StorageError(f"Failed to list cruxes: {str(e)}")
