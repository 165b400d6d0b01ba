"""Validation utilities for storage plugins."""


def validate_pagination(offset: int, limit: int) -> None:
    """
    Validate pagination parameters.

    Args:
        offset: Number of items to skip
        limit: Maximum number of items to return

    Raises:
        ValueError: If offset is negative or limit is not positive
    """
    if offset < 0:
        raise ValueError("Offset must be non-negative")
    if limit < 1:
        raise ValueError("Limit must be positive")
