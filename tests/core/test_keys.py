"""
Tests for id and key generation.
"""

import uuid

import pytest

from cruxgraph.core.keys import KEY_ALPHABET, KEY_LEADING_ALPHABET, KeyMaster


def test_alphabet_is_url_safe_and_64_long():
    """Test the key alphabet size and uniqueness."""
    assert len(KEY_ALPHABET) == 64
    assert len(set(KEY_ALPHABET)) == 64


def test_generate_id_is_uuid4():
    """Test that ids are version 4 UUIDs."""
    generated = KeyMaster().generate_id()
    assert uuid.UUID(generated).version == 4


def test_generate_key_default_length():
    """Test default key length and alphabet."""
    key = KeyMaster().generate_key()
    assert len(key) == 11
    assert set(key) <= set(KEY_ALPHABET)


def test_generate_key_custom_length():
    """Test per-call and per-instance key lengths."""
    assert len(KeyMaster().generate_key(5)) == 5
    assert len(KeyMaster(key_length=20).generate_key()) == 20


def test_keys_are_distinct():
    """Test that consecutive keys don't collide."""
    master = KeyMaster()
    assert len({master.generate_key() for _ in range(200)}) == 200


def test_invalid_key_length():
    """Test that a zero key length is refused."""
    with pytest.raises(ValueError):
        KeyMaster(key_length=0)


def test_leading_alphabet_has_no_punctuation():
    """The first key character is drawn from letters and digits only."""
    assert "-" not in KEY_LEADING_ALPHABET
    assert "_" not in KEY_LEADING_ALPHABET
    assert len(KEY_LEADING_ALPHABET) == 62


def test_keys_never_start_with_punctuation(monkeypatch):
    """Keys are never read as command-line options, even when the draw favours '-'."""
    from cruxgraph.core import keys

    monkeypatch.setattr(keys.secrets, "choice", lambda alphabet: alphabet[-1])

    key = KeyMaster().generate_key()

    assert key[0] == "9"
    assert key[1:] == "_" * 10


def test_generated_keys_start_with_letter_or_digit():
    """Many fresh keys all begin with an alphanumeric character."""
    master = KeyMaster()
    assert all(master.generate_key()[0] in KEY_LEADING_ALPHABET for _ in range(1000))
