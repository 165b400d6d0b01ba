"""Repositories for cruxes, dimensions and tags."""

from .base import BaseRepository, ModelValidator
from .crux import CruxRepository
from .dimension import DimensionRepository
from .tag import TagRepository

__all__ = [
    "BaseRepository",
    "ModelValidator",
    "CruxRepository",
    "DimensionRepository",
    "TagRepository",
]
