"""Utilities for SQLite database operations."""

import logging
import os
import sqlite3
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Optional

import aiosqlite

from cruxgraph.core.exceptions import StorageError

logger = logging.getLogger(__name__)


async def initialize_schema(db_path: str, statements: Iterable[str]) -> None:
    """
    Create tables and indexes in the SQLite database.

    Args:
        db_path: Path to SQLite database
        statements: CREATE statements, executed in order

    Raises:
        StorageError: If initialization fails
    """
    try:
        async with aiosqlite.connect(db_path) as db:
            for statement in statements:
                await db.execute(statement)
            await db.commit()
    except Exception as e:
        logger.error(f"Failed to initialize schema: {str(e)}")
        raise StorageError(f"Failed to initialize schema: {str(e)}")


@asynccontextmanager
async def connection(
    db_path: str, conn: Optional[aiosqlite.Connection] = None
) -> AsyncIterator[aiosqlite.Connection]:
    """
    Yield a connection for one storage call.

    When ``conn`` belongs to an open unit of work it is yielded as-is and the
    caller's transaction decides whether the statements commit. Otherwise a
    fresh connection is opened and committed when the block exits cleanly.

    Args:
        db_path: Path to SQLite database
        conn: Connection of an enclosing transaction, if any
    """
    if conn is not None:
        yield conn
        return

    async with aiosqlite.connect(db_path) as db:
        db.row_factory = aiosqlite.Row
        yield db
        await db.commit()


@asynccontextmanager
async def transaction(db_path: str) -> AsyncIterator[aiosqlite.Connection]:
    """
    Open a unit of work: one connection, one write transaction.

    The transaction commits when the block exits cleanly and rolls back when
    it raises; the exception is always re-raised.

    Args:
        db_path: Path to SQLite database

    Raises:
        StorageError: If the transaction can't be started or committed
    """
    try:
        db = await aiosqlite.connect(db_path)
    except Exception as e:
        logger.error(f"Failed to open transaction: {str(e)}")
        raise StorageError(f"Failed to open transaction: {str(e)}")

    try:
        db.row_factory = aiosqlite.Row
        await db.execute("BEGIN IMMEDIATE")
        try:
            yield db
        except BaseException:
            await db.rollback()
            logger.warning("Rolled back transaction")
            raise
        try:
            await db.commit()
        except Exception as e:
            logger.error(f"Failed to commit transaction: {str(e)}")
            raise StorageError(f"Failed to commit transaction: {str(e)}")
    finally:
        await db.close()


def backup_database(source_path: str, backup_dir: str, filename: str) -> None:
    """
    Create a backup of SQLite database.

    Uses SQLite's built-in backup functionality for atomic backups.

    Args:
        source_path: Path to source database
        backup_dir: Directory to store backup
        filename: Name of backup file

    Raises:
        StorageError: If backup fails
    """
    try:
        backup_path = os.path.join(backup_dir, filename)
        with (
            sqlite3.connect(source_path) as src,
            sqlite3.connect(backup_path) as dst,
        ):
            src.backup(dst)
    except Exception as e:
        logger.error(f"Failed to backup database: {str(e)}")
        raise StorageError(f"Failed to backup database: {str(e)}")


def restore_database(backup_dir: str, target_path: str, filename: str) -> None:
    """
    Restore SQLite database from backup.

    Args:
        backup_dir: Directory containing backup
        target_path: Path to target database
        filename: Name of backup file

    Raises:
        StorageError: If the backup is missing or restore fails
    """
    backup_path = os.path.join(backup_dir, filename)
    if not os.path.exists(backup_path):
        raise StorageError(f"Backup file not found: {backup_path}")
    try:
        with (
            sqlite3.connect(backup_path) as src,
            sqlite3.connect(target_path) as dst,
        ):
            src.backup(dst)
    except Exception as e:
        logger.error(f"Failed to restore database: {str(e)}")
        raise StorageError(f"Failed to restore database: {str(e)}")
