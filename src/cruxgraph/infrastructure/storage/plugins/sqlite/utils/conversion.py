"""Utilities for converting between database rows and model objects."""

from datetime import datetime
from typing import Any, Mapping, Optional, Tuple

from cruxgraph.core.enums import DimensionType, ResourceType
from cruxgraph.core.models import Crux, Dimension, LabelCount, Tag
from ...utils import deserialize_datetime, serialize_datetime


def _row(row: Any) -> Mapping[str, Any]:
    """Access a row by column name whether it is an aiosqlite.Row or a dict."""
    return row if isinstance(row, Mapping) else dict(row)


def _optional_datetime(value: Optional[str]) -> Optional[datetime]:
    return deserialize_datetime(value) if value else None


def crux_to_row(crux: Crux) -> Tuple:
    """Convert crux to database row matching INSERT_CRUX."""
    return (
        crux.id,
        crux.key,
        crux.author_id,
        crux.home_id,
        crux.title,
        crux.slug,
        serialize_datetime(crux.created),
        serialize_datetime(crux.updated),
        serialize_datetime(crux.deleted),
    )


def row_to_crux(row: Any) -> Crux:
    """Convert database row to crux."""
    data = _row(row)
    return Crux(
        id=data["id"],
        key=data["key"],
        author_id=data["author_id"],
        home_id=data["home_id"],
        title=data["title"],
        slug=data["slug"],
        created=deserialize_datetime(data["created"]),
        updated=deserialize_datetime(data["updated"]),
        deleted=_optional_datetime(data["deleted"]),
    )


def dimension_to_row(dimension: Dimension) -> Tuple:
    """Convert dimension to database row matching INSERT_DIMENSION."""
    return (
        dimension.id,
        dimension.key,
        dimension.source_id,
        dimension.target_id,
        dimension.dimension_type.value,
        dimension.weight,
        dimension.note,
        dimension.author_id,
        dimension.home_id,
        serialize_datetime(dimension.created),
        serialize_datetime(dimension.updated),
        serialize_datetime(dimension.deleted),
    )


def row_to_dimension(row: Any) -> Dimension:
    """Convert database row to dimension."""
    data = _row(row)
    return Dimension(
        id=data["id"],
        key=data["key"],
        source_id=data["source_id"],
        target_id=data["target_id"],
        dimension_type=DimensionType(data["type"]),
        weight=data["weight"],
        note=data["note"],
        author_id=data["author_id"],
        home_id=data["home_id"],
        created=deserialize_datetime(data["created"]),
        updated=deserialize_datetime(data["updated"]),
        deleted=_optional_datetime(data["deleted"]),
    )


def tag_to_row(tag: Tag) -> Tuple:
    """Convert tag to database row matching INSERT_TAG."""
    return (
        tag.id,
        tag.key,
        tag.resource_type.value,
        tag.resource_id,
        tag.label,
        tag.author_id,
        tag.home_id,
        int(tag.system),
        serialize_datetime(tag.created),
        serialize_datetime(tag.updated),
        serialize_datetime(tag.deleted),
    )


def row_to_tag(row: Any) -> Tag:
    """Convert database row to tag."""
    data = _row(row)
    return Tag(
        id=data["id"],
        key=data["key"],
        resource_type=ResourceType(data["resource_type"]),
        resource_id=data["resource_id"],
        label=data["label"],
        author_id=data["author_id"],
        home_id=data["home_id"],
        system=bool(data["system"]),
        created=deserialize_datetime(data["created"]),
        updated=deserialize_datetime(data["updated"]),
        deleted=_optional_datetime(data["deleted"]),
    )


def row_to_label_count(row: Any) -> LabelCount:
    """Convert a tag directory row to a LabelCount."""
    data = _row(row)
    return LabelCount(label=data["label"], count=int(data["count"]))
