"""SQLite storage plugin implementations."""

from .crux_storage import SqliteCruxStorage
from .dimension_storage import SqliteDimensionStorage
from .tag_storage import SqliteTagStorage

__all__ = ["SqliteCruxStorage", "SqliteDimensionStorage", "SqliteTagStorage"]
