"""
Tests for tag synchronization and the tag directory.
"""

import pytest

from factories import make_tag
from cruxgraph.core.enums import ResourceType
from cruxgraph.core.exceptions import (
    InternalError,
    StorageError,
    TagNotFoundError,
    ValidationError,
)
from cruxgraph.repositories import TagRepository
from cruxgraph.services import TagSynchronizer, plan_sync


@pytest.fixture
def synchronizer(storage):
    return TagSynchronizer(TagRepository(storage), storage, home_id="home-1")


def labels(tags):
    return [tag.label for tag in tags]


def test_plan_sync_diff():
    """Test additions and removals computed by the diff."""
    current = [make_tag(label="a"), make_tag(label="b")]
    plan = plan_sync(current, ["B", "c", "C"])

    assert plan.desired == ["b", "c"]
    assert plan.to_add == ["c"]
    assert labels(plan.to_remove) == ["a"]
    assert not plan.is_noop


def test_plan_sync_noop():
    """Test that an equal set plans nothing."""
    assert plan_sync([make_tag(label="a")], ["A"]).is_noop


@pytest.mark.asyncio
async def test_synchronize_adds_in_order(synchronizer):
    """Test that new tags keep the requested order."""
    tags = await synchronizer.synchronize("crux", "c1", ["python", "async"], "author-a")

    assert labels(tags) == ["python", "async"]
    assert all(tag.home_id == "home-1" for tag in tags)
    assert all(tag.author_id == "author-a" for tag in tags)
    assert not any(tag.system for tag in tags)


@pytest.mark.asyncio
async def test_synchronize_normalizes_and_collapses(synchronizer):
    """Test that case variants collapse into one tag."""
    tags = await synchronizer.synchronize(
        ResourceType.CRUX, "c1", ["JavaScript", "javascript"], "author-a"
    )

    assert labels(tags) == ["javascript"]


@pytest.mark.asyncio
async def test_synchronize_is_idempotent(synchronizer, storage):
    """Test that repeating a sync writes nothing."""
    first = await synchronizer.synchronize("crux", "c1", ["a", "b"], "author-a")
    second = await synchronizer.synchronize("crux", "c1", ["b", "a"], "author-a")

    assert [t.id for t in second] == [t.id for t in first]
    history = await storage.tag_storage.list_for_resource(
        ResourceType.CRUX, "c1", include_deleted=True
    )
    assert len(history) == 2


@pytest.mark.asyncio
async def test_synchronize_replaces_removed_labels(synchronizer, storage):
    """Test that dropped labels are soft-deleted."""
    await synchronizer.synchronize("crux", "c1", ["a", "b"], "author-a")
    tags = await synchronizer.synchronize("crux", "c1", ["b", "c"], "author-a")

    assert labels(tags) == ["b", "c"]
    history = await storage.tag_storage.list_for_resource(
        ResourceType.CRUX, "c1", include_deleted=True
    )
    deleted = [tag.label for tag in history if tag.deleted is not None]
    assert deleted == ["a"]


@pytest.mark.asyncio
async def test_synchronize_to_empty_removes_everything(synchronizer):
    """Test syncing to an empty set."""
    await synchronizer.synchronize("crux", "c1", ["a", "b"], "author-a")

    assert await synchronizer.synchronize("crux", "c1", [], "author-a") == []


@pytest.mark.asyncio
async def test_synchronize_rejects_bad_label(synchronizer):
    """Test that one bad label leaves the tag set unchanged."""
    await synchronizer.synchronize("crux", "c1", ["keep"], "author-a")

    with pytest.raises(ValidationError):
        await synchronizer.synchronize("crux", "c1", ["fine", "not fine"], "author-a")

    assert labels(await synchronizer.get_tags("crux", "c1")) == ["keep"]


@pytest.mark.asyncio
async def test_synchronize_rejects_unknown_resource_type(synchronizer):
    """Test that unknown resource types are rejected."""
    with pytest.raises(ValidationError):
        await synchronizer.synchronize("planet", "c1", ["a"], "author-a")


@pytest.mark.asyncio
async def test_synchronize_rolls_back_on_failure(synchronizer, storage, monkeypatch):
    """Test that a storage failure changes nothing."""
    await synchronizer.synchronize("crux", "c1", ["a", "b"], "author-a")

    async def failing_create_many(tags, conn=None):
        raise StorageError("disk full")

    monkeypatch.setattr(storage.tag_storage, "create_many", failing_create_many)

    with pytest.raises(InternalError):
        await synchronizer.synchronize("crux", "c1", ["b", "c"], "author-a")

    assert labels(await synchronizer.get_tags("crux", "c1")) == ["a", "b"]


@pytest.mark.asyncio
async def test_get_tags_filter(synchronizer):
    """Test case-insensitive label filtering."""
    await synchronizer.synchronize("theme", "t1", ["python", "pytest", "rust"], "author-a")

    filtered = await synchronizer.get_tags("theme", "t1", filter="PY")
    assert labels(filtered) == ["python", "pytest"]


@pytest.mark.asyncio
async def test_find_update_and_delete(synchronizer):
    """Test lookup, relabel with collision check, and delete."""
    tags = await synchronizer.synchronize("crux", "c1", ["python", "rust"], "author-a")
    python = tags[0]

    assert (await synchronizer.find_by_key(python.key)).id == python.id
    assert (await synchronizer.find_by_id(python.id)).key == python.key

    updated = await synchronizer.update(python.key, "Python3")
    assert updated.label == "python3"

    with pytest.raises(ValidationError, match="already applied"):
        await synchronizer.update(python.key, "rust")

    await synchronizer.delete(python.key)
    with pytest.raises(TagNotFoundError):
        await synchronizer.find_by_key(python.key)


@pytest.mark.asyncio
async def test_update_to_same_label_is_noop(synchronizer):
    """Test that relabelling to the current label writes nothing."""
    tag = (await synchronizer.synchronize("crux", "c1", ["python"], "author-a"))[0]

    assert (await synchronizer.update(tag.key, "PYTHON")).updated == tag.updated


@pytest.mark.asyncio
async def test_list_labels(synchronizer):
    """Test the tag directory with counts, sorting and paging."""
    await synchronizer.synchronize("crux", "c1", ["python", "async"], "author-a")
    await synchronizer.synchronize("crux", "c2", ["python"], "author-a")
    await synchronizer.synchronize("theme", "t1", ["zen"], "author-a")

    page = await synchronizer.list_labels()
    assert [(e.label, e.count) for e in page.items] == [("python", 2), ("async", 1), ("zen", 1)]
    assert page.total == 3

    alpha = await synchronizer.list_labels(sort="alpha", per_page=2, page=2)
    assert [e.label for e in alpha.items] == ["zen"]
    assert alpha.last_page == 2

    crux_only = await synchronizer.list_labels(resource_type="crux", search="syn")
    assert [e.label for e in crux_only.items] == ["async"]


@pytest.mark.asyncio
async def test_list_labels_rejects_bad_sort(synchronizer):
    """Test that unknown sort orders are rejected."""
    with pytest.raises(ValidationError):
        await synchronizer.list_labels(sort="popularity")


@pytest.mark.asyncio
async def test_remove_all(synchronizer):
    """Test removing every tag of a resource."""
    await synchronizer.synchronize("crux", "c1", ["a", "b"], "author-a")

    assert await synchronizer.remove_all("crux", "c1") == 2
    assert await synchronizer.get_tags("crux", "c1") == []
