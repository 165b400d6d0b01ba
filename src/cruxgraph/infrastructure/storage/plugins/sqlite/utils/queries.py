"""Utilities for building SQL queries.

All default reads go through ``active_clause`` so the soft-delete predicate is
written once rather than repeated in every query.
"""

from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from cruxgraph.core.enums import TagSort

CRUX_FILTERS = frozenset({"id", "key", "author_id", "home_id", "slug"})
DIMENSION_FILTERS = frozenset({"id", "key", "source_id", "target_id", "type", "author_id", "home_id"})
TAG_FILTERS = frozenset({"id", "key", "resource_type", "resource_id", "label", "author_id", "home_id"})


def active_clause(include_deleted: bool = False) -> Optional[str]:
    """Return the soft-delete predicate, or None when deleted rows are wanted."""
    return None if include_deleted else "deleted IS NULL"


def _param(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def build_filter_query(
    table: str,
    filters: Dict[str, Any],
    allowed: FrozenSet[str],
    include_deleted: bool = False,
    select: str = "*",
) -> Tuple[str, List[Any]]:
    """
    Build a SELECT with equality filters on whitelisted columns.

    Besides plain column names, two composite filters are understood:
    ``node_id`` (matches either endpoint of a dimension) and ``*_in``
    (membership in a list, e.g. ``source_id_in``).

    Args:
        table: Table to select from
        filters: Column name to value
        allowed: Columns that may be filtered on
        include_deleted: Whether soft-deleted rows are returned
        select: Column list

    Returns:
        Tuple of (query string, parameter list)

    Raises:
        ValueError: If a filter names an unknown column
    """
    conditions: List[str] = []
    params: List[Any] = []

    for key, value in filters.items():
        if key == "node_id" and "source_id" in allowed:
            conditions.append("(source_id = ? OR target_id = ?)")
            params.extend([value, value])
        elif key.endswith("_in") and key[:-3] in allowed:
            values = [_param(v) for v in value]
            if not values:
                conditions.append("0")
                continue
            placeholders = ", ".join("?" for _ in values)
            conditions.append(f"{key[:-3]} IN ({placeholders})")
            params.extend(values)
        elif key in allowed:
            conditions.append(f"{key} = ?")
            params.append(_param(value))
        else:
            raise ValueError(f"Unsupported filter for {table}: {key}")

    active = active_clause(include_deleted)
    if active:
        conditions.append(active)

    query = f"SELECT {select} FROM {table}"
    if conditions:
        query = f"{query} WHERE {' AND '.join(conditions)}"
    return query, params


def add_ordering(query: str, column: str = "created", descending: bool = False) -> str:
    """Order by ``column``; rowid breaks ties between rows created in the same instant."""
    direction = "DESC" if descending else "ASC"
    return f"{query} ORDER BY {column} {direction}, rowid {direction}"


def add_pagination(query: str, limit: int, offset: int) -> Tuple[str, List[Any]]:
    """
    Add pagination to a SQL query.

    Returns:
        Tuple of (query string with pagination, parameter list)
    """
    return f"{query} LIMIT ? OFFSET ?", [limit, offset]


def build_label_directory_query(
    resource_type: Optional[Enum] = None,
    search: Optional[str] = None,
    label: Optional[str] = None,
    sort: TagSort = TagSort.COUNT,
) -> Tuple[str, List[Any]]:
    """
    Build the tag directory query: live labels with their usage counts.

    Args:
        resource_type: Restrict to one resource type
        search: Case-insensitive substring the label must contain
        label: Exact label to match
        sort: COUNT (usage desc, label asc) or ALPHA (label asc)

    Returns:
        Tuple of (query string, parameter list)
    """
    conditions = [active_clause()]
    params: List[Any] = []
    if resource_type is not None:
        conditions.append("resource_type = ?")
        params.append(_param(resource_type))
    if search:
        conditions.append("label LIKE ? ESCAPE '\\'")
        escaped = search.lower().replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        params.append(f"%{escaped}%")
    if label:
        conditions.append("label = ?")
        params.append(label.lower())

    query = f"SELECT label, COUNT(*) AS count FROM tags WHERE {' AND '.join(conditions)} GROUP BY label"
    if sort == TagSort.ALPHA:
        query = f"{query} ORDER BY label ASC"
    else:
        query = f"{query} ORDER BY count DESC, label ASC"
    return query, params


def count_query(query: str) -> str:
    """Wrap a SELECT so it returns its row count."""
    return f"SELECT COUNT(*) FROM ({query})"
