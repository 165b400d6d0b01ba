"""
Tests for the SQLite tag storage plugin.
"""

from datetime import datetime

import pytest

from cruxgraph.core.enums import ResourceType, TagSort
from cruxgraph.core.exceptions import StorageError, TagNotFoundError


@pytest.mark.asyncio
async def test_create_many_and_list(storage, tag_factory):
    """Test bulk insert and oldest-first listing."""
    tags = [tag_factory(label="python"), tag_factory(label="async"), tag_factory(label="web")]
    await storage.tag_storage.create_many(tags)

    listed = await storage.tag_storage.list_for_resource(ResourceType.CRUX, "crux-1")
    assert [t.label for t in listed] == ["python", "async", "web"]


@pytest.mark.asyncio
async def test_create_many_empty(storage):
    """Test that an empty batch is a no-op."""
    assert await storage.tag_storage.create_many([]) == []


@pytest.mark.asyncio
async def test_live_label_is_unique_per_resource(storage, tag_factory):
    """Test that a label can be live only once per resource."""
    await storage.tag_storage.create_many([tag_factory(label="python")])

    with pytest.raises(StorageError):
        await storage.tag_storage.create_many([tag_factory(label="python")])

    # A different resource may reuse the label
    await storage.tag_storage.create_many([tag_factory(label="python", resource_id="crux-2")])


@pytest.mark.asyncio
async def test_deleted_label_can_be_reapplied(storage, tag_factory):
    """Test that a soft-deleted label frees the slot for a new row."""
    original = tag_factory(label="python")
    await storage.tag_storage.create_many([original])
    await storage.tag_storage.soft_delete(original.id, datetime.now())

    await storage.tag_storage.create_many([tag_factory(label="python")])
    history = await storage.tag_storage.list_for_resource(
        ResourceType.CRUX, "crux-1", include_deleted=True
    )
    assert len(history) == 2


@pytest.mark.asyncio
async def test_system_flag_round_trips(storage, tag_factory):
    """Test that the system flag survives storage."""
    tag = tag_factory(system=True)
    await storage.tag_storage.create_many([tag])

    assert (await storage.tag_storage.get("key", tag.key)).system is True


@pytest.mark.asyncio
async def test_update_label_and_soft_delete(storage, tag_factory):
    """Test relabelling and soft deletion of one tag."""
    tag = tag_factory()
    await storage.tag_storage.create_many([tag])

    await storage.tag_storage.update_label(tag.id, "renamed", datetime.now())
    assert (await storage.tag_storage.get("id", tag.id)).label == "renamed"

    await storage.tag_storage.soft_delete(tag.id, datetime.now())
    with pytest.raises(TagNotFoundError):
        await storage.tag_storage.get("id", tag.id)
    with pytest.raises(TagNotFoundError):
        await storage.tag_storage.update_label(tag.id, "again", datetime.now())


@pytest.mark.asyncio
async def test_soft_delete_for_resource(storage, tag_factory):
    """Test removing every tag of one resource."""
    await storage.tag_storage.create_many(
        [tag_factory(label="a"), tag_factory(label="b"), tag_factory(label="c", resource_id="x")]
    )

    removed = await storage.tag_storage.soft_delete_for_resource(
        ResourceType.CRUX, "crux-1", datetime.now()
    )

    assert removed == 2
    assert await storage.tag_storage.list_for_resource(ResourceType.CRUX, "crux-1") == []
    assert len(await storage.tag_storage.list_for_resource(ResourceType.CRUX, "x")) == 1


@pytest.mark.asyncio
async def test_label_directory(storage, tag_factory):
    """Test label counts, sorting and search."""
    await storage.tag_storage.create_many(
        [
            tag_factory(label="python", resource_id="r1"),
            tag_factory(label="python", resource_id="r2"),
            tag_factory(label="async", resource_id="r1"),
            tag_factory(label="web", resource_id="r3", resource_type=ResourceType.THEME),
        ]
    )

    by_count = await storage.tag_storage.label_directory()
    assert [(e.label, e.count) for e in by_count] == [("python", 2), ("async", 1), ("web", 1)]

    alpha = await storage.tag_storage.label_directory(sort=TagSort.ALPHA)
    assert [e.label for e in alpha] == ["async", "python", "web"]

    themes = await storage.tag_storage.label_directory(resource_type=ResourceType.THEME)
    assert [e.label for e in themes] == ["web"]

    searched = await storage.tag_storage.label_directory(search="YTH")
    assert [e.label for e in searched] == ["python"]

    paged = await storage.tag_storage.label_directory(limit=1, offset=1)
    assert [e.label for e in paged] == ["async"]

    assert await storage.tag_storage.count_labels() == 3
    assert await storage.tag_storage.count_labels(label="python") == 1
