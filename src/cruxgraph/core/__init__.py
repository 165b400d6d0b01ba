"""Core content graph functionality."""

from .enums import DimensionType, ResourceType, TagSort
from .exceptions import (
    ConfigurationError,
    CruxNotFoundError,
    DimensionNotFoundError,
    ForbiddenError,
    InternalError,
    NotFoundError,
    StorageError,
    TagNotFoundError,
    ValidationError,
    http_status,
)
from .keys import KeyMaster
from .models import Crux, Dimension, LabelCount, Tag
from .pagination import Page, PageLinks, PageParams, build_page_links, resolve_page_params

__all__ = [
    "ConfigurationError",
    "Crux",
    "CruxNotFoundError",
    "Dimension",
    "DimensionNotFoundError",
    "DimensionType",
    "ForbiddenError",
    "InternalError",
    "KeyMaster",
    "LabelCount",
    "NotFoundError",
    "Page",
    "PageLinks",
    "PageParams",
    "ResourceType",
    "StorageError",
    "Tag",
    "TagNotFoundError",
    "TagSort",
    "ValidationError",
    "build_page_links",
    "http_status",
    "resolve_page_params",
]
