"""
Tests for the dimension graph manager.
"""

import pytest

from cruxgraph.core.enums import DimensionType
from cruxgraph.core.exceptions import (
    DimensionNotFoundError,
    ForbiddenError,
    ValidationError,
)
from cruxgraph.core.pagination import Page
from cruxgraph.repositories import DimensionRepository
from cruxgraph.services import DimensionGraphManager


@pytest.fixture
def repository(storage):
    return DimensionRepository(storage)


@pytest.fixture
def manager(repository):
    return DimensionGraphManager(repository)


async def link(manager, source="n1", target="n2", dimension_type="gate", author="a", **kwargs):
    return await manager.create(source, target, dimension_type, author, "home-1", **kwargs)


@pytest.mark.asyncio
@pytest.mark.parametrize("value", ["gate", "garden", "growth", "graft"])
async def test_create_accepts_every_type(manager, value):
    """Test creation with each dimension type."""
    dimension = await link(manager, dimension_type=value)

    assert dimension.dimension_type == DimensionType(value)
    assert len(dimension.key) == 11


@pytest.mark.asyncio
async def test_create_rejects_unknown_type(manager):
    """Test that types outside the four variants are rejected."""
    with pytest.raises(ValidationError, match="orbit"):
        await link(manager, dimension_type="orbit")


@pytest.mark.asyncio
@pytest.mark.parametrize("weight", [-1, 2.5, "3", True])
async def test_create_rejects_bad_weight(manager, weight):
    """Test weight validation on create."""
    with pytest.raises(ValidationError):
        await link(manager, weight=weight)


@pytest.mark.asyncio
async def test_create_rejects_empty_endpoint(manager):
    """Test that empty endpoints are rejected."""
    with pytest.raises(ValidationError, match="source crux"):
        await link(manager, source="")


@pytest.mark.asyncio
async def test_create_does_not_check_endpoints(manager):
    """Test that endpoint existence is left to the caller."""
    dimension = await link(manager, source="nowhere", target="elsewhere")

    assert (await manager.find_by_id(dimension.id)).key == dimension.key


@pytest.mark.asyncio
async def test_custom_validator_blocks_create(manager, repository):
    """Test that registered validators run before insert."""
    async def no_self_links(dimension):
        return dimension.source_id != dimension.target_id

    repository.register_validator(no_self_links)

    with pytest.raises(ValidationError, match="no_self_links"):
        await link(manager, source="same", target="same")


@pytest.mark.asyncio
async def test_list_by_source(manager):
    """Test newest-first listing by source, with and without a type."""
    gate = await link(manager, dimension_type="gate")
    growth = await link(manager, dimension_type="growth")
    await link(manager, source="other")

    listed = await manager.list_by_source("n1")
    assert [d.key for d in listed] == [growth.key, gate.key]

    gates = await manager.list_by_source("n1", "gate")
    assert [d.key for d in gates] == [gate.key]


@pytest.mark.asyncio
async def test_list_by_source_paged(manager):
    """Test that paging returns a Page with the total."""
    created = [await link(manager) for _ in range(5)]

    page = await manager.list_by_source("n1", page=2, per_page=2)

    assert isinstance(page, Page)
    assert page.total == 5
    assert [d.key for d in page.items] == [created[2].key, created[1].key]


@pytest.mark.asyncio
async def test_list_by_source_empty(manager):
    """Test listing a source with no dimensions."""
    assert await manager.list_by_source("empty") == []


@pytest.mark.asyncio
async def test_update_by_owner(manager):
    """Test that the creator can update all mutable fields."""
    dimension = await link(manager, weight=1)

    updated = await manager.update(
        dimension.key, {"type": "graft", "weight": 7, "note": "n"}, "a"
    )

    assert updated.dimension_type == DimensionType.GRAFT
    assert updated.weight == 7
    assert updated.note == "n"
    assert updated.updated >= dimension.updated
    stored = await manager.find_by_key(dimension.key)
    assert stored.weight == 7


@pytest.mark.asyncio
async def test_update_by_other_author_forbidden(manager):
    """Test that another author may not update."""
    dimension = await link(manager)

    with pytest.raises(ForbiddenError):
        await manager.update(dimension.key, {"note": "mine now"}, "b")


@pytest.mark.asyncio
async def test_update_absent_key_forbidden(manager):
    """Test that updating a missing dimension is forbidden, not not-found."""
    with pytest.raises(ForbiddenError):
        await manager.update("no-such-key", {"note": "x"}, "a")


@pytest.mark.asyncio
async def test_update_rejects_other_fields(manager):
    """Test that only type, weight and note may change."""
    dimension = await link(manager)

    with pytest.raises(ValidationError, match="source_id"):
        await manager.update(dimension.key, {"source_id": "elsewhere"}, "a")


@pytest.mark.asyncio
async def test_update_rejects_bad_values(manager):
    """Test value validation on update."""
    dimension = await link(manager)

    with pytest.raises(ValidationError):
        await manager.update(dimension.key, {"weight": -2}, "a")
    with pytest.raises(ValidationError):
        await manager.update(dimension.key, {"type": "orbit"}, "a")


@pytest.mark.asyncio
async def test_delete_soft_deletes(manager, repository):
    """Test owner-only soft deletion."""
    dimension = await link(manager)

    with pytest.raises(ForbiddenError):
        await manager.delete(dimension.key, "b")

    await manager.delete(dimension.key, "a")

    with pytest.raises(DimensionNotFoundError):
        await manager.find_by_key(dimension.key)
    assert await manager.list_by_source("n1") == []
    kept = await repository.get_by_key(dimension.key, include_deleted=True)
    assert kept.deleted is not None


@pytest.mark.asyncio
async def test_delete_absent_key_forbidden(manager):
    """Test that deleting a missing dimension is forbidden."""
    with pytest.raises(ForbiddenError):
        await manager.delete("no-such-key", "a")


@pytest.mark.asyncio
async def test_cascade_on_node_deletion(manager):
    """Test that the cascade keeps other authors' dimensions."""
    d1 = await link(manager, source="n", target="m", author="A")
    d2 = await link(manager, source="p", target="n", author="B")

    removed = await manager.cascade_on_node_deletion("n", "A")

    assert removed == 1
    with pytest.raises(DimensionNotFoundError):
        await manager.find_by_key(d1.key)
    assert (await manager.find_by_key(d2.key)).target_id == "n"
