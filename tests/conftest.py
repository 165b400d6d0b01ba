"""Shared test fixtures."""

import pytest
import pytest_asyncio

from cruxgraph.config import Settings
from cruxgraph.infrastructure.storage import StorageService
from cruxgraph.services import ResourceGraphService
from factories import make_crux, make_dimension, make_tag


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a throwaway data directory."""
    return Settings(
        data_dir=str(tmp_path / "data"),
        base_url="http://test.local",
        primary_home_id="home-1",
        default_per_page=25,
    )


@pytest_asyncio.fixture
async def storage(settings):
    """Initialized storage service backed by a temporary SQLite file."""
    service = StorageService(storage_dir=settings.data_dir, db_name=settings.db_name)
    await service.initialize()
    yield service
    await service.cleanup()


@pytest_asyncio.fixture
async def service(storage, settings) -> ResourceGraphService:
    """Resource graph service over the temporary storage."""
    return ResourceGraphService(storage, settings)


@pytest.fixture
def crux_factory():
    return make_crux


@pytest.fixture
def dimension_factory():
    return make_dimension


@pytest.fixture
def tag_factory():
    return make_tag
