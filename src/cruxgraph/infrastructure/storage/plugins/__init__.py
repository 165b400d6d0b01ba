"""
Storage plugins for the content graph.

- base: abstract plugin interfaces
- sqlite: aiosqlite implementations
- utils: helpers shared by plugins
"""

from .base import CruxStoragePlugin, DimensionStoragePlugin, StoragePlugin, TagStoragePlugin
from .sqlite import SqliteCruxStorage, SqliteDimensionStorage, SqliteTagStorage

__all__ = [
    "StoragePlugin",
    "CruxStoragePlugin",
    "DimensionStoragePlugin",
    "TagStoragePlugin",
    "SqliteCruxStorage",
    "SqliteDimensionStorage",
    "SqliteTagStorage",
]
