"""
Base plugin interfaces for storage implementations.

- StoragePlugin: Base interface for all storage plugins
- CruxStoragePlugin: Interface for content node storage
- DimensionStoragePlugin: Interface for dimension storage
- TagStoragePlugin: Interface for tag storage
"""

from .interfaces import (
    CruxStoragePlugin,
    DimensionStoragePlugin,
    StoragePlugin,
    TagStoragePlugin,
)

__all__ = [
    "StoragePlugin",
    "CruxStoragePlugin",
    "DimensionStoragePlugin",
    "TagStoragePlugin",
]
