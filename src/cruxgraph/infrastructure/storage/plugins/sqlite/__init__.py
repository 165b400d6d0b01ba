"""
SQLite storage plugin.

Three plugins share one database file; each owns its table and indexes.
"""

from .storage import SqliteCruxStorage, SqliteDimensionStorage, SqliteTagStorage

__all__ = ["SqliteCruxStorage", "SqliteDimensionStorage", "SqliteTagStorage"]
