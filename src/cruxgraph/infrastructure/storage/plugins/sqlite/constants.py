"""
Constants for SQLite storage plugin.

This module defines constants used by the SQLite storage implementation:
- File names
- SQL schema definitions and indexes
- Common SQL statements

Every table uses a nullable ``deleted`` timestamp as its soft-delete marker.
Timestamps are stored as ISO-8601 text.
"""

# Database file name
STORAGEDB = "cruxgraph.db"

# SQL Schema Definitions

CRUX_SCHEMA = """
CREATE TABLE IF NOT EXISTS cruxes (
    id TEXT PRIMARY KEY,
    key TEXT NOT NULL UNIQUE,
    author_id TEXT NOT NULL,
    home_id TEXT NOT NULL,
    title TEXT NOT NULL,
    slug TEXT,
    created TEXT NOT NULL,
    updated TEXT NOT NULL,
    deleted TEXT
)
"""

CRUX_INDEXES = (
    "CREATE INDEX IF NOT EXISTS cruxes_author_id ON cruxes (author_id)",
)

DIMENSION_SCHEMA = """
CREATE TABLE IF NOT EXISTS dimensions (
    id TEXT PRIMARY KEY,
    key TEXT NOT NULL UNIQUE,
    source_id TEXT NOT NULL,
    target_id TEXT NOT NULL,
    type TEXT NOT NULL CHECK (type IN ('gate', 'garden', 'growth', 'graft')),
    weight INTEGER CHECK (weight IS NULL OR weight >= 0),
    note TEXT,
    author_id TEXT NOT NULL,
    home_id TEXT NOT NULL,
    created TEXT NOT NULL,
    updated TEXT NOT NULL,
    deleted TEXT
)
"""

DIMENSION_INDEXES = (
    "CREATE INDEX IF NOT EXISTS dimensions_source_id ON dimensions (source_id)",
    "CREATE INDEX IF NOT EXISTS dimensions_target_id ON dimensions (target_id)",
    "CREATE INDEX IF NOT EXISTS dimensions_author_id ON dimensions (author_id)",
)

TAG_SCHEMA = """
CREATE TABLE IF NOT EXISTS tags (
    id TEXT PRIMARY KEY,
    key TEXT NOT NULL UNIQUE,
    resource_type TEXT NOT NULL,
    resource_id TEXT NOT NULL,
    label TEXT NOT NULL,
    author_id TEXT NOT NULL,
    home_id TEXT NOT NULL,
    system INTEGER NOT NULL DEFAULT 0,
    created TEXT NOT NULL,
    updated TEXT NOT NULL,
    deleted TEXT
)
"""

TAG_INDEXES = (
    "CREATE INDEX IF NOT EXISTS tags_resource ON tags (resource_type, resource_id)",
    "CREATE INDEX IF NOT EXISTS tags_label ON tags (label)",
    # One live row per label on a resource; deleted rows are kept as history
    """
    CREATE UNIQUE INDEX IF NOT EXISTS tags_resource_label_active
    ON tags (resource_type, resource_id, label)
    WHERE deleted IS NULL
    """,
)

# Columns that may be used to look up a single row
LOOKUP_FIELDS = frozenset({"id", "key"})

# Crux statements
INSERT_CRUX = """
INSERT INTO cruxes (
    id, key, author_id, home_id, title,
    slug, created, updated, deleted
)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
"""
SOFT_DELETE_CRUX = """
UPDATE cruxes
SET deleted = ?, updated = ?
WHERE id = ? AND deleted IS NULL
"""

# Dimension statements
INSERT_DIMENSION = """
INSERT INTO dimensions (
    id, key, source_id, target_id, type,
    weight, note, author_id, home_id,
    created, updated, deleted
)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""
UPDATE_DIMENSION = """
UPDATE dimensions
SET type = ?, weight = ?, note = ?, updated = ?
WHERE id = ? AND deleted IS NULL
"""
SOFT_DELETE_DIMENSION = """
UPDATE dimensions
SET deleted = ?, updated = ?
WHERE id = ? AND deleted IS NULL
"""
CASCADE_DIMENSIONS = """
UPDATE dimensions
SET deleted = ?, updated = ?
WHERE (source_id = ? OR target_id = ?)
  AND author_id = ?
  AND deleted IS NULL
"""

# Tag statements
INSERT_TAG = """
INSERT INTO tags (
    id, key, resource_type, resource_id, label,
    author_id, home_id, system, created,
    updated, deleted
)
VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""
UPDATE_TAG_LABEL = """
UPDATE tags
SET label = ?, updated = ?
WHERE id = ? AND deleted IS NULL
"""
SOFT_DELETE_TAG = """
UPDATE tags
SET deleted = ?, updated = ?
WHERE id = ? AND deleted IS NULL
"""
SOFT_DELETE_RESOURCE_TAGS = """
UPDATE tags
SET deleted = ?, updated = ?
WHERE resource_type = ? AND resource_id = ? AND deleted IS NULL
"""
