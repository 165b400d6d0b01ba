"""
Management of dimensions, the typed edges between cruxes.

Only the author who created a dimension may change or delete it. When a crux
is deleted, the dimensions its author created on either side of it are
soft-deleted with it; dimensions other authors attached to the crux are left
in place and readers must tolerate their missing endpoint.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from ..core.enums import DimensionType
from ..core.exceptions import ForbiddenError, NotFoundError, ValidationError
from ..core.keys import KeyMaster
from ..core.models import UPDATABLE_FIELDS, Dimension
from ..core.pagination import DEFAULT_PER_PAGE, Page
from ..repositories import DimensionRepository
from ..repositories.base import Connection
from ..utils.validation.integrity import WEIGHT_RULE

logger = logging.getLogger(__name__)


def _check_weight(weight: Any) -> Optional[int]:
    if weight is not None and WEIGHT_RULE.check(weight):
        raise ValidationError(f"{WEIGHT_RULE.error_message}, got {weight!r}")
    return weight


def _check_note(note: Any) -> Optional[str]:
    if note is not None and not isinstance(note, str):
        raise ValidationError("note must be a string")
    return note


class DimensionGraphManager:
    """
    Create, query, update and delete dimensions.

    Attributes:
        dimensions (DimensionRepository): Dimension persistence
        keys (KeyMaster): Generates ids and keys for new dimensions
    """

    def __init__(self, dimensions: DimensionRepository, keys: Optional[KeyMaster] = None):
        self.dimensions = dimensions
        self.keys = keys or KeyMaster()

    async def create(
        self,
        source_id: str,
        target_id: str,
        dimension_type: Any,
        author_id: str,
        home_id: str,
        weight: Optional[int] = None,
        note: Optional[str] = None,
        conn: Connection = None,
    ) -> Dimension:
        """
        Create a dimension from ``source_id`` to ``target_id``.

        Endpoint existence is not checked here.

        Args:
            source_id: Id of the source crux
            target_id: Id of the target crux
            dimension_type: DimensionType or its string value
            author_id: Creating author
            home_id: Owning home
            weight: Optional non-negative integer weight
            note: Optional free-text note
            conn: Connection of an enclosing unit of work, if any

        Returns:
            The persisted dimension

        Raises:
            ValidationError: On an unknown type, a bad weight or empty endpoints
            InternalError: If persistence fails
        """
        dimension_type = DimensionType.parse(dimension_type)
        weight = _check_weight(weight)
        note = _check_note(note)
        now = datetime.now()
        try:
            dimension = Dimension(
                id=self.keys.generate_id(),
                key=self.keys.generate_key(),
                source_id=source_id,
                target_id=target_id,
                dimension_type=dimension_type,
                author_id=author_id,
                home_id=home_id,
                created=now,
                updated=now,
                weight=weight,
                note=note,
            )
        except (TypeError, ValueError) as e:
            raise ValidationError(str(e))

        created = await self.dimensions.create(dimension, conn=conn)
        logger.info(
            f"Created {dimension_type.value} dimension {created.key}: {source_id} -> {target_id}"
        )
        return created

    async def find_by_key(self, key: str) -> Dimension:
        """Raises DimensionNotFoundError when the dimension is absent or deleted."""
        return await self.dimensions.get_by_key(key)

    async def find_by_id(self, id: str) -> Dimension:
        """Raises DimensionNotFoundError when the dimension is absent or deleted."""
        return await self.dimensions.get(id)

    async def list_by_source(
        self,
        source_id: str,
        dimension_type: Optional[Any] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
    ) -> Union[List[Dimension], Page[Dimension]]:
        """
        Live dimensions leaving ``source_id``, newest first.

        Args:
            source_id: Id of the source crux
            dimension_type: Optional type filter
            page: Page number; when this or ``per_page`` is given a Page is returned
            per_page: Items per page (default 25 when only ``page`` is given)

        Returns:
            List of dimensions, or a Page when paging was requested

        Raises:
            ValidationError: On an unknown type or non-positive paging values
        """
        filters: Dict[str, Any] = {"source_id": source_id}
        if dimension_type is not None:
            filters["type"] = DimensionType.parse(dimension_type)

        total = await self.dimensions.count(filters)
        if page is None and per_page is None:
            return await self.dimensions.list(filters, limit=max(total, 1))

        page = page or 1
        per_page = per_page or DEFAULT_PER_PAGE
        if page < 1 or per_page < 1:
            raise ValidationError("page and per_page must be positive")
        items = await self.dimensions.list(filters, limit=per_page, offset=(page - 1) * per_page)
        return Page(items=items, total=total, page=page, per_page=per_page)

    async def require_owner(self, key: str, acting_author_id: str) -> Dimension:
        """Load a live dimension the actor created, hiding absence behind ForbiddenError."""
        try:
            dimension = await self.dimensions.get_by_key(key)
        except NotFoundError:
            raise ForbiddenError(f"Author {acting_author_id} may not modify dimension {key}")
        if dimension.author_id != acting_author_id:
            raise ForbiddenError(f"Author {acting_author_id} may not modify dimension {key}")
        return dimension

    async def update(
        self, key: str, fields: Dict[str, Any], acting_author_id: str
    ) -> Dimension:
        """
        Change the type, weight or note of a dimension.

        Args:
            key: Public key of the dimension
            fields: Mapping with any of ``type``, ``weight``, ``note``
            acting_author_id: Author performing the change

        Returns:
            The updated dimension

        Raises:
            ForbiddenError: If the actor did not create the dimension, or it doesn't exist
            ValidationError: On unknown fields or invalid values
        """
        dimension = await self.require_owner(key, acting_author_id)

        unknown = sorted(set(fields) - UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Fields cannot be updated: {', '.join(unknown)}")

        changes: Dict[str, Any] = {"updated": datetime.now()}
        if "type" in fields:
            changes["dimension_type"] = DimensionType.parse(fields["type"])
        if "weight" in fields:
            changes["weight"] = _check_weight(fields["weight"])
        if "note" in fields:
            changes["note"] = _check_note(fields["note"])

        updated = await self.dimensions.update(replace(dimension, **changes))
        logger.info(f"Updated dimension {key}: {sorted(fields)}")
        return updated

    async def delete(self, key: str, acting_author_id: str) -> Dimension:
        """
        Soft-delete a dimension.

        Raises:
            ForbiddenError: If the actor did not create the dimension, or it doesn't exist
        """
        dimension = await self.require_owner(key, acting_author_id)
        deleted = await self.dimensions.soft_delete(dimension, datetime.now())
        logger.info(f"Deleted dimension {key}")
        return deleted

    async def cascade_on_node_deletion(
        self, node_id: str, node_author_id: str, conn: Connection = None
    ) -> int:
        """
        Soft-delete the dimensions touching a deleted crux that its author created.

        A dimension is removed when the crux is its source or its target and the
        dimension's author is the crux's author.

        Args:
            node_id: Id of the deleted crux
            node_author_id: Author of the deleted crux
            conn: Connection of the enclosing deletion, if any

        Returns:
            Number of dimensions soft-deleted
        """
        removed = await self.dimensions.cascade(node_id, node_author_id, datetime.now(), conn=conn)
        logger.info(f"Cascaded deletion of {node_id} to {removed} dimensions")
        return removed
