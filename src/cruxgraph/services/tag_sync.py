"""
Tag synchronization for every taggable resource.

A resource's tags are replaced by diffing: the caller supplies the complete
desired label set, and only the labels that differ from the current set are
touched. Removed labels are soft-deleted and added labels get new rows; a
label is never rewritten in place by synchronization.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, List, Optional

from ..core.enums import ResourceType, TagSort
from ..core.exceptions import ValidationError
from ..core.keys import KeyMaster
from ..core.models import LabelCount, Tag, normalize_label, normalize_labels
from ..core.pagination import DEFAULT_PER_PAGE, Page
from ..infrastructure.storage import StorageService
from ..repositories import TagRepository
from ..repositories.base import Connection

logger = logging.getLogger(__name__)


@dataclass
class SyncPlan:
    """
    Difference between a resource's current tags and a desired label set.

    Attributes:
        desired (List[str]): Normalized desired labels in first-seen order
        to_add (List[str]): Labels with no live tag yet
        to_remove (List[Tag]): Live tags whose label is no longer desired
    """

    desired: List[str]
    to_add: List[str] = field(default_factory=list)
    to_remove: List[Tag] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not self.to_add and not self.to_remove


def plan_sync(current: Iterable[Tag], desired_labels: Iterable[Any]) -> SyncPlan:
    """
    Compute the minimal set of changes that turns ``current`` into ``desired_labels``.

    Args:
        current: Live tags of the resource
        desired_labels: Raw labels supplied by the caller

    Returns:
        SyncPlan with additions in the caller's order and removals in storage order

    Raises:
        ValidationError: If any label fails validation after lowercasing
    """
    desired = normalize_labels(desired_labels)
    current = list(current)
    existing = {tag.label for tag in current}
    wanted = set(desired)
    return SyncPlan(
        desired=desired,
        to_add=[label for label in desired if label not in existing],
        to_remove=[tag for tag in current if tag.label not in wanted],
    )


class TagSynchronizer:
    """
    Attach, detach and query tags of any resource.

    Attributes:
        tags (TagRepository): Tag persistence
        storage (StorageService): Provides the unit of work for synchronization
        keys (KeyMaster): Generates ids and keys for new tags
        home_id (str): Home assigned to tags created here
    """

    def __init__(
        self,
        tags: TagRepository,
        storage: StorageService,
        keys: Optional[KeyMaster] = None,
        home_id: str = "home",
    ):
        self.tags = tags
        self.storage = storage
        self.keys = keys or KeyMaster()
        self.home_id = home_id

    def _new_tag(
        self,
        resource_type: ResourceType,
        resource_id: str,
        label: str,
        author_id: str,
        when: datetime,
    ) -> Tag:
        return Tag(
            id=self.keys.generate_id(),
            key=self.keys.generate_key(),
            resource_type=resource_type,
            resource_id=resource_id,
            label=label,
            author_id=author_id,
            home_id=self.home_id,
            created=when,
            updated=when,
        )

    async def synchronize(
        self,
        resource_type: Any,
        resource_id: str,
        desired_labels: Iterable[Any],
        acting_author_id: str,
    ) -> List[Tag]:
        """
        Make the live tags of a resource equal to ``desired_labels``.

        Removals, additions and the final read run in one transaction; if any
        step fails nothing is changed.

        Args:
            resource_type: ResourceType or its string value
            resource_id: Identifier of the tagged resource
            desired_labels: Complete desired label set; case is ignored
            acting_author_id: Author recorded on newly created tags

        Returns:
            Live tags of the resource ordered by creation ascending

        Raises:
            ValidationError: If a label, the resource type or the author is invalid
            InternalError: If persistence fails; the transaction is rolled back
        """
        resource_type = ResourceType.parse(resource_type)
        if not resource_id:
            raise ValidationError("resource_id is required")
        if not acting_author_id:
            raise ValidationError("acting_author_id is required")
        desired = normalize_labels(desired_labels)
        now = datetime.now()

        async with self.storage.transaction() as conn:
            current = await self.tags.list_for_resource(resource_type, resource_id, conn=conn)
            plan = plan_sync(current, desired)
            if plan.to_remove:
                await self.tags.soft_delete_many(plan.to_remove, now, conn=conn)
            if plan.to_add:
                await self.tags.create_many(
                    [
                        self._new_tag(resource_type, resource_id, label, acting_author_id, now)
                        for label in plan.to_add
                    ],
                    conn=conn,
                )
            result = await self.tags.list_for_resource(resource_type, resource_id, conn=conn)

        if plan.is_noop:
            logger.debug(f"Tags of {resource_type.value} {resource_id} already in sync")
        else:
            logger.info(
                f"Synchronized tags of {resource_type.value} {resource_id}: "
                f"added {plan.to_add}, removed {[tag.label for tag in plan.to_remove]}"
            )
        return result

    async def get_tags(
        self, resource_type: Any, resource_id: str, filter: Optional[str] = None
    ) -> List[Tag]:
        """
        Live tags of a resource, oldest first.

        Args:
            resource_type: ResourceType or its string value
            resource_id: Identifier of the tagged resource
            filter: Optional case-insensitive substring the label must contain
        """
        resource_type = ResourceType.parse(resource_type)
        tags = await self.tags.list_for_resource(resource_type, resource_id)
        if filter:
            needle = filter.lower()
            tags = [tag for tag in tags if needle in tag.label]
        return tags

    async def find_by_key(self, key: str) -> Tag:
        """Raises TagNotFoundError when the tag is absent or deleted."""
        return await self.tags.get_by_key(key)

    async def find_by_id(self, id: str) -> Tag:
        """Raises TagNotFoundError when the tag is absent or deleted."""
        return await self.tags.get(id)

    async def update(self, key: str, label: Any) -> Tag:
        """
        Relabel a single tag.

        Args:
            key: Public key of the tag
            label: New label; lowercased and validated

        Returns:
            The updated tag

        Raises:
            ValidationError: If the label is malformed or already live on the same resource
            TagNotFoundError: If the tag is absent or deleted
        """
        normalized = normalize_label(label)
        async with self.storage.transaction() as conn:
            tag = await self.tags.get_by_key(key, conn=conn)
            if tag.label == normalized:
                return tag
            siblings = await self.tags.list_for_resource(
                tag.resource_type, tag.resource_id, conn=conn
            )
            if any(other.label == normalized and other.id != tag.id for other in siblings):
                raise ValidationError(
                    f"Label '{normalized}' is already applied to "
                    f"{tag.resource_type.value} {tag.resource_id}"
                )
            tag = await self.tags.relabel(tag, normalized, datetime.now(), conn=conn)
        logger.info(f"Relabelled tag {key} to '{normalized}'")
        return tag

    async def delete(self, key: str) -> Tag:
        """
        Soft-delete a single tag.

        Raises:
            TagNotFoundError: If the tag is absent or already deleted
        """
        tag = await self.tags.get_by_key(key)
        tag = await self.tags.soft_delete(tag, datetime.now())
        logger.info(f"Deleted tag {key}")
        return tag

    async def list_labels(
        self,
        resource_type: Optional[Any] = None,
        search: Optional[str] = None,
        sort: Any = TagSort.COUNT,
        label: Optional[str] = None,
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> Page[LabelCount]:
        """
        Tag directory: distinct live labels with usage counts.

        Args:
            resource_type: Restrict to one resource type
            search: Case-insensitive substring filter
            sort: ``count`` (usage descending, then label) or ``alpha``
            label: Exact label filter
            page: Page number (1-based)
            per_page: Labels per page

        Returns:
            Page of LabelCount entries

        Raises:
            ValidationError: If the resource type, sort or paging is invalid
        """
        if resource_type is not None:
            resource_type = ResourceType.parse(resource_type)
        try:
            sort = TagSort(sort)
        except ValueError:
            raise ValidationError(f"Invalid tag sort '{sort}', expected 'count' or 'alpha'")
        if page < 1 or per_page < 1:
            raise ValidationError("page and per_page must be positive")

        items = await self.tags.label_directory(
            resource_type, search, label, sort, limit=per_page, offset=(page - 1) * per_page
        )
        total = await self.tags.count_labels(resource_type, search, label)
        return Page(items=items, total=total, page=page, per_page=per_page)

    async def remove_all(
        self, resource_type: Any, resource_id: str, conn: Connection = None
    ) -> int:
        """
        Soft-delete every live tag of a resource.

        Returns:
            Number of tags removed
        """
        resource_type = ResourceType.parse(resource_type)
        removed = await self.tags.soft_delete_for_resource(
            resource_type, resource_id, datetime.now(), conn=conn
        )
        logger.debug(f"Removed {removed} tags from {resource_type.value} {resource_id}")
        return removed
