"""
Crux repository implementation for the content graph.

Cruxes only need enough persistence to act as addressable endpoints for
dimensions and tags: creation, lookup by id or key, listing by author and
soft deletion.
"""

import logging
from datetime import datetime
from typing import List

from ..core.exceptions import ValidationError
from ..core.models import Crux
from ..infrastructure.storage import StorageService
from ..utils.validation import ValidationResult
from .base import BaseRepository, Connection, ModelValidator

logger = logging.getLogger(__name__)


def _crux_integrity(crux: Crux) -> ValidationResult:
    if not isinstance(crux, Crux):
        return ValidationResult.from_errors(["Invalid crux type"])
    errors = []
    if not crux.title or not crux.title.strip():
        errors.append("title is required")
    return ValidationResult.from_errors(errors, context={"crux": crux.key})


class CruxRepository(BaseRepository[Crux]):
    """
    Repository for managing Crux objects.

    Attributes:
        storage (StorageService): The underlying storage service for persistence
        validator (ModelValidator): Validator run before every insert
    """

    def __init__(self, storage: StorageService):
        super().__init__(storage)
        self.validator: ModelValidator[Crux] = ModelValidator(_crux_integrity)

    async def create(self, item: Crux, conn: Connection = None) -> Crux:
        """
        Persist a new crux.

        Raises:
            ValidationError: If the crux has no title
            StorageError: If the insert fails
        """
        await self.validator.require_valid(item, "Crux")
        return await self.storage.crux_storage.create(item, conn=conn)

    async def get(self, id: str, include_deleted: bool = False, conn: Connection = None) -> Crux:
        return await self.storage.crux_storage.get("id", id, include_deleted, conn=conn)

    async def get_by_key(
        self, key: str, include_deleted: bool = False, conn: Connection = None
    ) -> Crux:
        return await self.storage.crux_storage.get("key", key, include_deleted, conn=conn)

    async def soft_delete(self, crux: Crux, when: datetime, conn: Connection = None) -> Crux:
        """
        Mark a crux deleted and return it with its deletion timestamp set.

        Raises:
            CruxNotFoundError: If the crux is already deleted
            StorageError: If the update fails
        """
        await self.storage.crux_storage.soft_delete(crux.id, when, conn=conn)
        crux.deleted = when
        crux.updated = when
        return crux

    async def list_by_author(
        self, author_id: str, limit: int = 100, offset: int = 0
    ) -> List[Crux]:
        """List an author's live cruxes, oldest first."""
        if not author_id:
            raise ValidationError("author_id is required")
        return await self.storage.crux_storage.list({"author_id": author_id}, limit, offset)

    async def validate(self, item: Crux) -> bool:
        return await self.validator.validate(item)
