"""
Tests for the Crux model.
"""

import pytest

from factories import make_crux


def test_crux_creation():
    """Test basic crux creation and its public representation."""
    crux = make_crux(slug="intro")

    assert crux.is_active
    assert crux.slug == "intro"
    assert crux.to_dict()["authorId"] == "author-a"
    assert "deleted" not in crux.to_dict()


def test_crux_requires_author():
    """Test that a crux without an author is rejected."""
    with pytest.raises(ValueError, match="author_id must be a non-empty string"):
        make_crux(author_id="")


def test_crux_title_type_checked():
    """Test that a non-string title fails the dataclass type check."""
    with pytest.raises(TypeError, match="title"):
        make_crux(title=None)
