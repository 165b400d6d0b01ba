"""
Storage service for the content graph.

This module provides a facade over the crux, dimension and tag storage
plugins. It offers:
- One SQLite database file shared by every plugin
- Units of work spanning several plugin calls
- Backup and restore of the database file
- JSON export of computed data

Repositories talk to the plugins through this service and never open
connections themselves.
"""

import json
import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Optional

import aiofiles
import aiosqlite

from ...core.exceptions import StorageError
from .plugins import (
    CruxStoragePlugin,
    DimensionStoragePlugin,
    SqliteCruxStorage,
    SqliteDimensionStorage,
    SqliteTagStorage,
    TagStoragePlugin,
)
from .plugins.sqlite.constants import STORAGEDB
from .plugins.sqlite.utils import backup_database, restore_database, transaction

logger = logging.getLogger(__name__)


class StorageService:
    """
    Storage facade for cruxes, dimensions and tags.

    Attributes:
        storage_dir (str): Directory holding the database file
        db_name (str): Database file name
        db_path (str): Full path to the database file
        crux_storage (CruxStoragePlugin): Plugin for crux rows
        dimension_storage (DimensionStoragePlugin): Plugin for dimension rows
        tag_storage (TagStoragePlugin): Plugin for tag rows
    """

    def __init__(self, storage_dir: str = "data", db_name: str = STORAGEDB):
        """
        Initialize the storage service.

        Args:
            storage_dir: Directory for persistent storage, created if missing
            db_name: Name of the SQLite database file
        """
        os.makedirs(storage_dir, exist_ok=True)
        self.storage_dir = storage_dir
        self.db_name = db_name
        self.db_path = os.path.join(storage_dir, db_name)

        self.crux_storage: CruxStoragePlugin = SqliteCruxStorage(storage_dir, self.db_path)
        self.dimension_storage: DimensionStoragePlugin = SqliteDimensionStorage(
            storage_dir, self.db_path
        )
        self.tag_storage: TagStoragePlugin = SqliteTagStorage(storage_dir, self.db_path)

    def _plugins(self):
        return (self.crux_storage, self.dimension_storage, self.tag_storage)

    async def initialize(self) -> None:
        """
        Create tables and indexes for every plugin.

        Must be called once before the service is used; safe to call again.

        Raises:
            StorageError: If schema creation fails
        """
        for plugin in self._plugins():
            await plugin.initialize()
        logger.info(f"Storage ready at {self.db_path}")

    async def cleanup(self) -> None:
        """Release plugin resources."""
        for plugin in self._plugins():
            await plugin.cleanup()

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """
        Run several plugin calls as one unit of work.

        Pass the yielded connection as ``conn`` to each plugin call. Everything
        commits when the block exits and rolls back if it raises.

        Example:
            >>> async with storage.transaction() as conn:
            ...     await storage.tag_storage.soft_delete(tag_id, now, conn=conn)
        """
        async with transaction(self.db_path) as conn:
            yield conn

    async def backup(self, backup_dir: Optional[str] = None) -> str:
        """
        Create a backup of the database.

        Args:
            backup_dir: Directory for the backup file. If not provided, a
                       timestamped directory next to the storage directory is used.

        Returns:
            The directory the backup was written to

        Raises:
            StorageError: If backup operation fails
        """
        if not backup_dir:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            backup_dir = f"{self.storage_dir}_backup_{timestamp}"

        os.makedirs(backup_dir, exist_ok=True)
        backup_database(self.db_path, backup_dir, self.db_name)
        logger.info(f"Created backup in directory: {backup_dir}")
        return backup_dir

    async def restore_backup(self, backup_dir: str) -> None:
        """
        Restore the database from a backup directory.

        Args:
            backup_dir: Directory containing the backup file

        Raises:
            StorageError: If backup directory doesn't exist or restore fails
        """
        if not os.path.exists(backup_dir):
            raise StorageError(f"Backup directory not found: {backup_dir}")

        restore_database(backup_dir, self.db_path, self.db_name)
        logger.info(f"Successfully restored from backup: {backup_dir}")

    async def export_json(self, path: str, data: Any) -> None:
        """
        Write data to a JSON file.

        Args:
            path: Destination file
            data: JSON-serializable data

        Raises:
            StorageError: If the file can't be written
        """
        try:
            directory = os.path.dirname(path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            async with aiofiles.open(path, "w") as f:
                await f.write(json.dumps(data, indent=2))
            logger.info(f"Exported JSON to {path}")
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Failed to export JSON: {str(e)}")
            raise StorageError(f"Failed to export JSON: {str(e)}")
