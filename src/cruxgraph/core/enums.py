"""
Enumerations for dimension and resource types in the content graph.

This module defines the closed vocabularies used throughout the system:
- DimensionType: The four kinds of directed relationship between cruxes
- ResourceType: The kinds of resource that can carry tags
- TagSort: Ordering modes for the tag directory
"""

from enum import Enum

from .exceptions import ValidationError


class DimensionType(Enum):
    """
    Enumeration of relationship types between two cruxes.

    A dimension always points from a source crux to a target crux; the type
    describes how the target relates to the source.
    """

    GATE = "gate"  # Target is an entry point into the source
    GARDEN = "garden"  # Target belongs to the same cultivated area
    GROWTH = "growth"  # Target develops the source further
    GRAFT = "graft"  # Target is joined onto the source from elsewhere

    @classmethod
    def parse(cls, value) -> "DimensionType":
        """
        Convert a raw value into a DimensionType.

        Args:
            value: DimensionType member or its string value

        Returns:
            The matching DimensionType

        Raises:
            ValidationError: If the value is not one of the four variants
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValidationError(f"Invalid dimension type '{value}', expected one of: {allowed}")


class ResourceType(Enum):
    """Enumeration of resources that can be tagged."""

    AUTHOR = "author"
    CRUX = "crux"
    DIMENSION = "dimension"
    PATH = "path"
    TAG = "tag"
    THEME = "theme"

    @classmethod
    def parse(cls, value) -> "ResourceType":
        """Convert a raw value into a ResourceType, raising ValidationError if unknown."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValidationError(f"Invalid resource type '{value}', expected one of: {allowed}")


class TagSort(Enum):
    """Ordering of the tag directory."""

    ALPHA = "alpha"  # By label ascending
    COUNT = "count"  # By usage count descending, then label
