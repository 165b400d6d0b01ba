"""
Tests for the SQLite dimension storage plugin.
"""

from datetime import datetime

import pytest

from cruxgraph.core.enums import DimensionType
from cruxgraph.core.exceptions import DimensionNotFoundError, StorageError


@pytest.mark.asyncio
async def test_create_and_get(storage, dimension_factory):
    """Test inserting a dimension and reading it back by key and id."""
    dimension = dimension_factory(weight=4, note="related")
    await storage.dimension_storage.create(dimension)

    by_key = await storage.dimension_storage.get("key", dimension.key)
    by_id = await storage.dimension_storage.get("id", dimension.id)

    assert by_key == by_id
    assert by_key.dimension_type == DimensionType.GATE
    assert by_key.weight == 4
    assert by_key.note == "related"
    assert by_key.created == dimension.created


@pytest.mark.asyncio
async def test_get_missing(storage):
    """Test lookup of an unknown key."""
    with pytest.raises(DimensionNotFoundError):
        await storage.dimension_storage.get("key", "missing")


@pytest.mark.asyncio
async def test_get_rejects_unknown_lookup_field(storage):
    """Test that only id and key can be used for lookups."""
    with pytest.raises(ValueError):
        await storage.dimension_storage.get("note", "x")


@pytest.mark.asyncio
async def test_duplicate_key_is_storage_error(storage, dimension_factory):
    """Test that a constraint violation becomes a StorageError."""
    dimension = dimension_factory()
    await storage.dimension_storage.create(dimension)

    with pytest.raises(StorageError):
        await storage.dimension_storage.create(dimension_factory(key=dimension.key))


@pytest.mark.asyncio
async def test_soft_delete_hides_row(storage, dimension_factory):
    """Test that soft-deleted rows are hidden but kept."""
    dimension = dimension_factory()
    await storage.dimension_storage.create(dimension)
    await storage.dimension_storage.soft_delete(dimension.id, datetime.now())

    with pytest.raises(DimensionNotFoundError):
        await storage.dimension_storage.get("key", dimension.key)
    kept = await storage.dimension_storage.get("key", dimension.key, include_deleted=True)
    assert kept.deleted is not None

    with pytest.raises(DimensionNotFoundError):
        await storage.dimension_storage.soft_delete(dimension.id, datetime.now())


@pytest.mark.asyncio
async def test_list_newest_first_with_type_filter(storage, dimension_factory):
    """Test newest-first listing and filtering by type."""
    first = dimension_factory(dimension_type=DimensionType.GATE)
    second = dimension_factory(dimension_type=DimensionType.GROWTH)
    third = dimension_factory(dimension_type=DimensionType.GATE)
    for dimension in (first, second, third):
        await storage.dimension_storage.create(dimension)

    listed = await storage.dimension_storage.list({"source_id": "crux-1"})
    assert [d.key for d in listed] == [third.key, second.key, first.key]

    gates = await storage.dimension_storage.list(
        {"source_id": "crux-1", "type": DimensionType.GATE}
    )
    assert [d.key for d in gates] == [third.key, first.key]
    assert await storage.dimension_storage.count({"source_id": "crux-1"}) == 3


@pytest.mark.asyncio
async def test_list_rejects_bad_pagination(storage):
    """Test that invalid limits are reported as storage errors."""
    with pytest.raises(StorageError, match="Invalid query parameters"):
        await storage.dimension_storage.list(limit=0)


@pytest.mark.asyncio
async def test_cascade_scope(storage, dimension_factory):
    """Test that the cascade only removes the node author's dimensions."""
    outgoing = dimension_factory(source_id="n", target_id="m", author_id="a")
    incoming_other = dimension_factory(source_id="p", target_id="n", author_id="b")
    incoming_same = dimension_factory(source_id="q", target_id="n", author_id="a")
    unrelated = dimension_factory(source_id="x", target_id="y", author_id="a")
    for dimension in (outgoing, incoming_other, incoming_same, unrelated):
        await storage.dimension_storage.create(dimension)

    removed = await storage.dimension_storage.soft_delete_for_node("n", "a", datetime.now())

    assert removed == 2
    remaining = {d.key for d in await storage.dimension_storage.list()}
    assert remaining == {incoming_other.key, unrelated.key}


@pytest.mark.asyncio
async def test_update_persists_mutable_fields(storage, dimension_factory):
    """Test updating type, weight and note."""
    dimension = dimension_factory()
    await storage.dimension_storage.create(dimension)

    dimension.dimension_type = DimensionType.GRAFT
    dimension.weight = 9
    dimension.note = "changed"
    await storage.dimension_storage.update(dimension)

    fetched = await storage.dimension_storage.get("id", dimension.id)
    assert fetched.dimension_type == DimensionType.GRAFT
    assert fetched.weight == 9
    assert fetched.note == "changed"
