"""
Tests for exceptions, status mapping and enum parsing.
"""

import pytest

from cruxgraph.core.enums import DimensionType, ResourceType
from cruxgraph.core.exceptions import (
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


def test_validation_error_message():
    """Test validation error message formatting."""
    error = ValidationError("test message")
    assert str(error) == "Validation Error: test message"


def test_not_found_hierarchy():
    """Test that every lookup failure is a NotFoundError."""
    for error_type in (CruxNotFoundError, DimensionNotFoundError, TagNotFoundError):
        assert issubclass(error_type, NotFoundError)


def test_storage_error_is_internal():
    """Test that storage failures surface as internal errors."""
    assert issubclass(StorageError, InternalError)


@pytest.mark.parametrize(
    "error, status",
    [
        (ValidationError("bad"), 400),
        (ForbiddenError("nope"), 403),
        (DimensionNotFoundError("gone"), 404),
        (StorageError("disk"), 500),
        (ConfigurationError("cfg"), 500),
        (RuntimeError("other"), 500),
    ],
)
def test_http_status(error, status):
    """Test mapping of each error kind to a response status."""
    assert http_status(error) == status


@pytest.mark.parametrize("value", ["gate", "garden", "growth", "graft"])
def test_dimension_type_accepts_all_variants(value):
    """Test that all four dimension types parse."""
    assert DimensionType.parse(value).value == value


def test_dimension_type_rejects_unknown():
    """Test that an unknown dimension type is a validation error."""
    with pytest.raises(ValidationError, match="orbit"):
        DimensionType.parse("orbit")


def test_dimension_type_parse_passes_members_through():
    """Test that enum members are returned unchanged."""
    assert DimensionType.parse(DimensionType.GRAFT) is DimensionType.GRAFT


def test_resource_type_parse():
    """Test resource type parsing."""
    assert ResourceType.parse("theme") is ResourceType.THEME
    with pytest.raises(ValidationError):
        ResourceType.parse("planet")
