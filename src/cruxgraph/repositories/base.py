"""
Base repository pattern implementation for the content graph.

Repositories sit between the services and the storage plugins. They validate
models before anything is written and translate key/id lookups into plugin
calls. Every method that writes accepts an optional ``conn`` so a service can
run several repository calls as one unit of work.
"""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Generic, List, Optional, TypeVar

import aiosqlite

from ..core.exceptions import ValidationError
from ..infrastructure.storage import StorageService
from ..utils.validation import ValidationResult

T = TypeVar("T")

Connection = Optional[aiosqlite.Connection]


class ModelValidator(Generic[T]):
    """
    Validator combining a built-in integrity check with custom rules.

    Attributes:
        custom_validators (List[Callable]): Async callables returning True when the item is valid
    """

    def __init__(self, integrity_check: Callable[[T], ValidationResult]):
        self._integrity_check = integrity_check
        self.custom_validators: List[Callable[[T], Awaitable[bool]]] = []

    def register_validator(self, validator_func: Callable[[T], Awaitable[bool]]) -> None:
        """
        Register a custom validation function.

        Args:
            validator_func: Async function that takes an item and returns bool
        """
        self.custom_validators.append(validator_func)

    async def check(self, item: T) -> ValidationResult:
        """
        Run the integrity check and then every custom validator.

        Returns:
            ValidationResult with one error per failed rule
        """
        result = self._integrity_check(item)
        if not result.is_valid:
            return result
        errors = [
            f"custom validator {getattr(validator, '__name__', 'validator')} rejected the item"
            for validator in self.custom_validators
            if not await validator(item)
        ]
        return ValidationResult.from_errors(errors, context=result.context)

    async def validate(self, item: T) -> bool:
        """Return True if the item passes every check."""
        return (await self.check(item)).is_valid

    async def require_valid(self, item: T, label: str) -> None:
        """
        Raise if the item fails validation.

        Raises:
            ValidationError: Listing every violated rule
        """
        result = await self.check(item)
        if not result.is_valid:
            raise ValidationError(f"{label} validation failed: {'; '.join(result.errors)}")


class BaseRepository(ABC, Generic[T]):
    """
    Abstract base repository implementing common functionality for all repositories.

    Attributes:
        storage (StorageService): The underlying storage service for persistence
    """

    def __init__(self, storage: StorageService):
        """
        Initialize the repository with storage.

        Args:
            storage: Storage service for data persistence
        """
        self.storage = storage

    @abstractmethod
    async def create(self, item: T, conn: Connection = None) -> T:
        """
        Create a new item in the repository.

        Args:
            item: The item to create
            conn: Connection of an enclosing unit of work, if any

        Returns:
            The created item

        Raises:
            ValidationError: If the item fails validation
            StorageError: If there's an error during storage operation
        """
        pass

    @abstractmethod
    async def get(self, id: str, include_deleted: bool = False, conn: Connection = None) -> T:
        """
        Retrieve an item by its internal identifier.

        Raises:
            NotFoundError: If the item doesn't exist or is soft-deleted
            StorageError: If there's an error during storage operation
        """
        pass

    @abstractmethod
    async def get_by_key(
        self, key: str, include_deleted: bool = False, conn: Connection = None
    ) -> T:
        """
        Retrieve an item by its public key.

        Raises:
            NotFoundError: If the item doesn't exist or is soft-deleted
            StorageError: If there's an error during storage operation
        """
        pass

    @abstractmethod
    async def validate(self, item: T) -> bool:
        """
        Validate an item before creation or update.

        Args:
            item: The item to validate

        Returns:
            True if validation passes, False otherwise
        """
        pass
