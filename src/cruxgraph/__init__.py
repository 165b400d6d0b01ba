"""
cruxgraph - Relationship graph and tag engine for a content backend

This package links content nodes ("cruxes") with typed, directed edges
("dimensions") and annotates any resource with normalized labels ("tags").
It includes:

- Core models, enums, exceptions and page-link computation
- SQLite persistence through aiosqlite storage plugins
- Repositories and services for dimensions, tag synchronization and cruxes
- A command-line interface
"""

__version__ = "0.1.0"
__author__ = "cruxgraph Team"

# Version compatibility check
import sys

if sys.version_info < (3, 10):
    raise RuntimeError("cruxgraph requires Python 3.10 or higher")

from .core.enums import DimensionType, ResourceType
from .core.models import Crux, Dimension, Tag

__all__ = [
    "Crux",
    "Dimension",
    "DimensionType",
    "ResourceType",
    "Tag",
]
