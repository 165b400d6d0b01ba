"""
Custom exceptions for the content graph system.

This module defines the hierarchy of exceptions raised by the graph and tag
engine. Each exception type corresponds to a category of failure that a
request boundary must be able to tell apart:

- ValidationError: the caller supplied malformed input
- NotFoundError: a referenced crux, dimension or tag is absent or soft-deleted
- ForbiddenError: the acting author does not own the target resource
- InternalError: persistence failed
"""


class ValidationError(Exception):
    """
    Raised when data validation fails.

    Examples:
        * Unknown dimension type
        * Negative or non-integer weight
        * Tag label that is not lowercase kebab-case
    """

    def __str__(self) -> str:
        """Format validation error message."""
        return f"Validation Error: {super().__str__()}"


class NotFoundError(Exception):
    """
    Raised when a requested resource is not found.

    Soft-deleted rows are reported as not found; callers never see the
    difference between a row that never existed and one that was deleted.
    """


class CruxNotFoundError(NotFoundError):
    """Raised when a crux lookup by id or key yields nothing."""


class DimensionNotFoundError(NotFoundError):
    """Raised when a dimension lookup by id or key yields nothing."""


class TagNotFoundError(NotFoundError):
    """Raised when a tag lookup by id or key yields nothing."""


class ForbiddenError(Exception):
    """
    Raised when the acting author is not allowed to modify a resource.

    Examples:
        * Updating a dimension created by another author
        * Deleting a crux owned by another author
        * Synchronizing tags on a crux owned by another author
    """


class InternalError(Exception):
    """
    Raised when an operation fails for reasons outside the caller's control.

    The enclosing operation is aborted; nothing is retried.
    """


class StorageError(InternalError):
    """
    Raised when storage operations fail.

    Examples:
        * Database connection failures
        * Constraint violations on insert
        * Malformed rows on read
    """


class ConfigurationError(Exception):
    """
    Raised when configuration is invalid.

    Examples:
        * Non-numeric page size
        * Unknown log level
    """


_STATUS_CODES = (
    (ValidationError, 400),
    (ForbiddenError, 403),
    (NotFoundError, 404),
    (InternalError, 500),
)


def http_status(error: Exception) -> int:
    """
    Map an exception to the HTTP status code a request boundary should return.

    Args:
        error: Exception raised by the engine

    Returns:
        400, 403, 404 or 500
    """
    for error_type, status in _STATUS_CODES:
        if isinstance(error, error_type):
            return status
    return 500
