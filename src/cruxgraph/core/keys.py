"""
Identifier generation for persisted rows.

Every row carries two identifiers: an internal id (uuid4) and a short,
URL-safe public key used in request paths.
"""

import secrets
import uuid

# 64 characters (A-Z, a-z, 0-9, -, _), safe for direct use in paths
KEY_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789-_"

# Keys never start with "-" or "_" so they can be passed as command-line values
KEY_LEADING_ALPHABET = KEY_ALPHABET[:62]

DEFAULT_KEY_LENGTH = 11


class KeyMaster:
    """Generates row ids and public keys."""

    def __init__(self, key_length: int = DEFAULT_KEY_LENGTH):
        if key_length < 1:
            raise ValueError("key_length must be positive")
        self.key_length = key_length

    def generate_id(self) -> str:
        """Return a new uuid4 string."""
        return str(uuid.uuid4())

    def generate_key(self, length: int = 0) -> str:
        """Return a new random key of ``length`` characters (default key_length)."""
        length = length or self.key_length
        head = secrets.choice(KEY_LEADING_ALPHABET)
        return head + "".join(secrets.choice(KEY_ALPHABET) for _ in range(length - 1))
