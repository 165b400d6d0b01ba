"""
Tests for the Tag model and label normalization.
"""

import pytest

from factories import make_tag
from cruxgraph.core.exceptions import ValidationError
from cruxgraph.core.models import LabelCount, normalize_label, normalize_labels


def test_normalize_label_lowercases():
    """Test that labels are lowercased and kebab-case is kept."""
    assert normalize_label("JavaScript") == "javascript"
    assert normalize_label("web-3") == "web-3"


@pytest.mark.parametrize("label", ["", "has space", "under_score", "a" * 51, "émoji"])
def test_normalize_label_rejects(label):
    """Test labels that stay invalid after lowercasing."""
    with pytest.raises(ValidationError):
        normalize_label(label)


def test_normalize_label_rejects_non_string():
    """Test that non-string labels are rejected."""
    with pytest.raises(ValidationError, match="must be a string"):
        normalize_label(42)


def test_normalize_labels_collapses_duplicates_in_order():
    """Test that duplicates collapse while first-seen order is kept."""
    assert normalize_labels(["JavaScript", "python", "javascript"]) == ["javascript", "python"]


def test_tag_rejects_uppercase_label():
    """Test that a tag cannot be built with an unnormalized label."""
    with pytest.raises(ValueError, match="kebab-case"):
        make_tag(label="Python")


def test_tag_to_dict_hides_system_and_deleted():
    """Test that internal flags are left out of the public form."""
    tag = make_tag(system=True)
    data = tag.to_dict()

    assert "system" not in data
    assert "deleted" not in data
    assert data["resourceType"] == "crux"
    assert data["resourceId"] == "crux-1"
    assert data["label"] == "python"


def test_label_count_to_dict():
    """Test directory entry serialization."""
    assert LabelCount("python", 3).to_dict() == {"label": "python", "count": 3}
