"""
Core domain models package for the content graph.

This package provides the data structures for cruxes, the dimensions that
link them and the tags attached to any taggable resource.
"""

from .base import public_dict, to_camel, validate_date_order
from .crux import Crux
from .dimension import UPDATABLE_FIELDS, Dimension
from .tag import LABEL_PATTERN, LabelCount, Tag, normalize_label, normalize_labels

__all__ = [
    # Base utilities
    "public_dict",
    "to_camel",
    "validate_date_order",
    # Crux models
    "Crux",
    # Dimension models
    "Dimension",
    "UPDATABLE_FIELDS",
    # Tag models
    "Tag",
    "LabelCount",
    "LABEL_PATTERN",
    "normalize_label",
    "normalize_labels",
]
