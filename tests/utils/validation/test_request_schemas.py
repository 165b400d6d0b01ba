"""
Tests for JSON schema validation of request bodies.
"""

import pytest
from jsonschema import SchemaError

from cruxgraph.core.exceptions import ValidationError
from cruxgraph.utils.validation.schema import RequestValidator


@pytest.fixture
def validator():
    return RequestValidator()


def test_valid_create_dimension(validator):
    """Test a complete create-dimension body."""
    result = validator.validate(
        "create_dimension", {"targetId": "abc", "type": "growth", "weight": 2, "note": "n"}
    )
    assert result.is_valid
    assert result.errors == []


def test_create_dimension_missing_type(validator):
    """Test that type is required."""
    result = validator.validate("create_dimension", {"targetId": "abc"})

    assert not result.is_valid
    assert any("'type' is a required property" in error for error in result.errors)


def test_create_dimension_unknown_type(validator):
    """Test the type enumeration."""
    result = validator.validate("create_dimension", {"targetId": "abc", "type": "orbit"})

    assert not result.is_valid
    assert result.errors[0].startswith("type:")


@pytest.mark.parametrize("weight", [-1, 1.5, "3"])
def test_create_dimension_bad_weight(validator, weight):
    """Test weight constraints."""
    result = validator.validate(
        "create_dimension", {"targetId": "abc", "type": "gate", "weight": weight}
    )
    assert not result.is_valid
    assert result.errors[0].startswith("weight:")


def test_create_dimension_rejects_extra_fields(validator):
    """Test that caller-injected fields are refused."""
    result = validator.validate(
        "create_dimension", {"targetId": "abc", "type": "gate", "authorId": "x"}
    )
    assert not result.is_valid


def test_update_dimension_allows_partial_body(validator):
    """Test partial update bodies."""
    assert validator.validate("update_dimension", {"note": "only the note"}).is_valid
    assert not validator.validate("update_dimension", {"sourceId": "x"}).is_valid


def test_sync_tags_items_checked(validator):
    """Test that each label is checked."""
    assert validator.validate("sync_tags", {"labels": ["python", "web-3"]}).is_valid

    result = validator.validate("sync_tags", {"labels": ["ok", "not ok"]})
    assert not result.is_valid
    assert result.errors[0].startswith("labels.1:")


def test_update_tag_requires_label(validator):
    """Test that label is required."""
    result = validator.validate("update_tag", {})
    assert not result.is_valid
    assert result.errors[0].startswith("body:")


def test_unknown_schema_is_a_warning(validator):
    """Test validation against an unregistered schema."""
    result = validator.validate("missing", {"anything": True})

    assert result.is_valid
    assert result.warnings


def test_require_valid_raises(validator):
    """Test that require_valid raises ValidationError."""
    with pytest.raises(ValidationError, match="weight"):
        validator.require_valid("create_dimension", {"targetId": "a", "type": "gate", "weight": -5})


def test_require_valid_returns_body(validator):
    """Test that a valid body is returned unchanged."""
    body = {"label": "python"}
    assert validator.require_valid("update_tag", body) is body


def test_register_rejects_malformed_schema(validator):
    """Test that malformed schemas can't be registered."""
    with pytest.raises(SchemaError):
        validator.register_schema("broken", {"type": 12})
