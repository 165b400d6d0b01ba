"""Utilities for the SQLite storage plugins."""

from .conversion import (
    crux_to_row,
    dimension_to_row,
    row_to_crux,
    row_to_dimension,
    row_to_label_count,
    row_to_tag,
    tag_to_row,
)
from .persistence import (
    backup_database,
    connection,
    initialize_schema,
    restore_database,
    transaction,
)
from .queries import (
    CRUX_FILTERS,
    DIMENSION_FILTERS,
    TAG_FILTERS,
    active_clause,
    add_ordering,
    add_pagination,
    build_filter_query,
    build_label_directory_query,
    count_query,
)

__all__ = [
    "CRUX_FILTERS",
    "DIMENSION_FILTERS",
    "TAG_FILTERS",
    "active_clause",
    "add_ordering",
    "add_pagination",
    "backup_database",
    "build_filter_query",
    "build_label_directory_query",
    "connection",
    "count_query",
    "crux_to_row",
    "dimension_to_row",
    "initialize_schema",
    "restore_database",
    "row_to_crux",
    "row_to_dimension",
    "row_to_label_count",
    "row_to_tag",
    "tag_to_row",
    "transaction",
]
