"""
Resource graph service: the entry point callers use.

This module ties the crux store, the dimension graph manager and the tag
synchronizer together. Callers address resources by their public keys; this
service translates keys to internal ids, enforces authorship and runs the
multi-step mutations inside one unit of work.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional

from ..config import Settings
from ..core.enums import ResourceType
from ..core.exceptions import ForbiddenError, ValidationError
from ..core.keys import KeyMaster
from ..core.models import Crux, Dimension, Tag
from ..core.pagination import PageLinks, build_page_links, resolve_page_params
from ..infrastructure.storage import StorageService
from ..repositories import CruxRepository, DimensionRepository, TagRepository
from ..utils.validation.schema import RequestValidator
from .dimension_graph import DimensionGraphManager
from .tag_sync import TagSynchronizer

logger = logging.getLogger(__name__)

# Resources whose public key must be translated to an internal id
KEYED_RESOURCES = frozenset({ResourceType.CRUX, ResourceType.DIMENSION})


@dataclass
class DimensionListing:
    """One page of dimensions and the navigation links for it."""

    items: List[Dimension]
    links: PageLinks

    @property
    def headers(self) -> Dict[str, str]:
        return self.links.headers()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [dimension.to_dict() for dimension in self.items],
            "pagination": self.links.summary,
        }


@dataclass
class CruxDeletion:
    """Outcome of deleting a crux."""

    crux: Crux
    dimensions_removed: int
    tags_removed: int


class ResourceGraphService:
    """
    Composition root for cruxes, dimensions and tags.

    Attributes:
        storage (StorageService): Shared storage facade
        settings (Settings): Runtime configuration
        cruxes (CruxRepository): Crux persistence
        graph (DimensionGraphManager): Dimension operations
        tag_sync (TagSynchronizer): Tag operations
        requests (RequestValidator): JSON schema checks for request bodies
    """

    def __init__(self, storage: StorageService, settings: Optional[Settings] = None):
        self.storage = storage
        self.settings = settings or Settings()
        self.keys = KeyMaster()
        self.cruxes = CruxRepository(storage)
        self.graph = DimensionGraphManager(DimensionRepository(storage), self.keys)
        self.tag_sync = TagSynchronizer(
            TagRepository(storage), storage, self.keys, self.settings.primary_home_id
        )
        self.requests = RequestValidator()

    # Crux operations
    async def create_crux(
        self,
        author_id: str,
        title: str,
        slug: Optional[str] = None,
        home_id: Optional[str] = None,
    ) -> Crux:
        """
        Create a crux owned by ``author_id``.

        Raises:
            ValidationError: If the author or title is missing
        """
        now = datetime.now()
        try:
            crux = Crux(
                id=self.keys.generate_id(),
                key=self.keys.generate_key(),
                author_id=author_id,
                home_id=home_id or self.settings.primary_home_id,
                title=title,
                slug=slug,
                created=now,
                updated=now,
            )
        except (TypeError, ValueError) as e:
            raise ValidationError(str(e))
        created = await self.cruxes.create(crux)
        logger.info(f"Created crux {created.key} for author {author_id}")
        return created

    async def get_crux(self, key: str) -> Crux:
        """Raises CruxNotFoundError when the crux is absent or deleted."""
        return await self.cruxes.get_by_key(key)

    async def delete_crux(self, key: str, acting_author_id: str) -> CruxDeletion:
        """
        Delete a crux together with its author's dimensions and its tags.

        The three steps run in one transaction.

        Args:
            key: Public key of the crux
            acting_author_id: Author performing the deletion

        Returns:
            CruxDeletion with the number of dimensions and tags removed

        Raises:
            CruxNotFoundError: If the crux is absent or already deleted
            ForbiddenError: If the actor is not the crux's author
            InternalError: If persistence fails; nothing is changed
        """
        crux = await self.cruxes.get_by_key(key)
        if crux.author_id != acting_author_id:
            raise ForbiddenError(f"Author {acting_author_id} may not delete crux {key}")

        async with self.storage.transaction() as conn:
            crux = await self.cruxes.soft_delete(crux, datetime.now(), conn=conn)
            dimensions_removed = await self.graph.cascade_on_node_deletion(
                crux.id, crux.author_id, conn=conn
            )
            tags_removed = await self.tag_sync.remove_all(ResourceType.CRUX, crux.id, conn=conn)

        logger.info(
            f"Deleted crux {key}: {dimensions_removed} dimensions, {tags_removed} tags removed"
        )
        return CruxDeletion(crux, dimensions_removed, tags_removed)

    # Dimension operations
    async def link(
        self,
        source_key: str,
        dimension_type: Any,
        author_id: str,
        target_id: Optional[str] = None,
        target_key: Optional[str] = None,
        weight: Optional[int] = None,
        note: Optional[str] = None,
    ) -> Dimension:
        """
        Create a dimension leaving the crux ``source_key``.

        Exactly one of ``target_id`` and ``target_key`` identifies the target.

        Raises:
            ValidationError: If no target is given, or on a bad type or weight
            CruxNotFoundError: If the source or target crux doesn't exist
            ForbiddenError: If the actor is not the source crux's author
        """
        if bool(target_id) == bool(target_key):
            raise ValidationError("Exactly one of target_id and target_key is required")

        source = await self.cruxes.get_by_key(source_key)
        if target_key:
            target = await self.cruxes.get_by_key(target_key)
        else:
            target = await self.cruxes.get(target_id)
        if source.author_id != author_id:
            raise ForbiddenError(f"Author {author_id} may not link from crux {source_key}")

        return await self.graph.create(
            source.id,
            target.id,
            dimension_type,
            author_id,
            source.home_id,
            weight=weight,
            note=note,
        )

    async def link_from_body(
        self, source_key: str, body: Mapping[str, Any], author_id: str
    ) -> Dimension:
        """
        Create a dimension from a ``{targetId, type, weight?, note?}`` request body.

        Raises:
            ValidationError: If the body violates the create-dimension schema
        """
        self.requests.require_valid("create_dimension", body)
        return await self.link(
            source_key,
            body["type"],
            author_id,
            target_id=body["targetId"],
            weight=body.get("weight"),
            note=body.get("note"),
        )

    def _dimensions_url(self, source_key: str) -> str:
        return f"{self.settings.base_url}/cruxes/{source_key}/dimensions"

    async def get_dimensions(
        self,
        source_key: str,
        dimension_type: Optional[Any] = None,
        query: Optional[Mapping[str, Any]] = None,
        request_url: Optional[str] = None,
    ) -> DimensionListing:
        """
        One page of the dimensions leaving a crux, newest first.

        Args:
            source_key: Public key of the source crux
            dimension_type: Optional type filter
            query: Query parameters carrying ``page`` and ``perPage``/``per_page``
            request_url: URL the links are derived from; defaults to the
                         crux's dimensions URL under the configured base URL

        Returns:
            DimensionListing with items and page links

        Raises:
            CruxNotFoundError: If the source crux doesn't exist
            ValidationError: On an unknown type
        """
        params = resolve_page_params(query or {}, self.settings.default_per_page)
        source = await self.cruxes.get_by_key(source_key)
        page = await self.graph.list_by_source(
            source.id, dimension_type, page=params.page, per_page=params.per_page
        )
        links = build_page_links(
            params.page,
            params.per_page,
            page.total,
            request_url or self._dimensions_url(source_key),
            params.per_page_param,
        )
        return DimensionListing(items=page.items, links=links)

    async def update_dimension(
        self, key: str, fields: Mapping[str, Any], acting_author_id: str
    ) -> Dimension:
        """
        Change a dimension's type, weight or note.

        Ownership is checked before the body, so a non-owner is refused
        whatever the body contains.

        Raises:
            ForbiddenError: If the actor did not create the dimension, or it doesn't exist
            ValidationError: If the fields violate the update-dimension schema
        """
        await self.graph.require_owner(key, acting_author_id)
        self.requests.require_valid("update_dimension", dict(fields))
        return await self.graph.update(key, dict(fields), acting_author_id)

    async def delete_dimension(self, key: str, acting_author_id: str) -> Dimension:
        return await self.graph.delete(key, acting_author_id)

    # Tag operations
    async def _resolve_resource(self, resource_type: ResourceType, key: str):
        """Return (resource id, owning author or None) for a tag target."""
        if resource_type == ResourceType.CRUX:
            crux = await self.cruxes.get_by_key(key)
            return crux.id, crux.author_id
        if resource_type == ResourceType.DIMENSION:
            dimension = await self.graph.find_by_key(key)
            return dimension.id, dimension.author_id
        return key, None

    async def get_tags(
        self, resource_type: Any, key: str, filter: Optional[str] = None
    ) -> List[Tag]:
        """
        Live tags of a resource.

        Cruxes and dimensions are addressed by key; other resource types by the
        identifier given.

        Raises:
            NotFoundError: If a crux or dimension key doesn't resolve
        """
        resource_type = ResourceType.parse(resource_type)
        resource_id, _ = await self._resolve_resource(resource_type, key)
        return await self.tag_sync.get_tags(resource_type, resource_id, filter)

    async def sync_tags(
        self, resource_type: Any, key: str, labels: List[Any], author_id: str
    ) -> List[Tag]:
        """
        Replace the tags of a resource with ``labels``.

        Raises:
            ValidationError: If a label is malformed
            NotFoundError: If a crux or dimension key doesn't resolve
            ForbiddenError: If the actor doesn't own the crux or dimension
        """
        resource_type = ResourceType.parse(resource_type)
        resource_id, owner = await self._resolve_resource(resource_type, key)
        if owner is not None and owner != author_id:
            raise ForbiddenError(
                f"Author {author_id} may not tag {resource_type.value} {key}"
            )
        return await self.tag_sync.synchronize(resource_type, resource_id, labels, author_id)

    async def update_tag(self, key: str, label: Any) -> Tag:
        """
        Relabel a tag from an administrative request.

        Raises:
            ValidationError: If the label is malformed or collides
        """
        self.requests.require_valid("update_tag", {"label": label})
        return await self.tag_sync.update(key, label)

    async def delete_tag(self, key: str) -> Tag:
        return await self.tag_sync.delete(key)

    # Graph export
    async def _all_cruxes(self, author_id: str) -> List[Crux]:
        batch_size = 100
        cruxes: List[Crux] = []
        while True:
            batch = await self.cruxes.list_by_author(author_id, batch_size, len(cruxes))
            cruxes.extend(batch)
            if len(batch) < batch_size:
                return cruxes

    async def author_graph(self, author_id: str) -> Dict[str, Any]:
        """
        An author's cruxes and the dimensions between them.

        Only dimensions with both endpoints among the author's live cruxes are
        included.

        Returns:
            Dictionary with ``cruxes`` and ``dimensions`` in public form
        """
        cruxes = await self._all_cruxes(author_id)
        ids = [crux.id for crux in cruxes]
        dimensions: List[Dimension] = []
        if ids:
            filters = {"source_id_in": ids, "target_id_in": ids}
            total = await self.graph.dimensions.count(filters)
            dimensions = await self.graph.dimensions.list(filters, limit=max(total, 1))

        logger.debug(
            f"Graph for author {author_id}: {len(cruxes)} cruxes, {len(dimensions)} dimensions"
        )
        return {
            "cruxes": [crux.to_dict() for crux in cruxes],
            "dimensions": [dimension.to_dict() for dimension in dimensions],
        }


async def create_resource_graph(settings: Optional[Settings] = None) -> ResourceGraphService:
    """
    Build and initialize a ResourceGraphService from settings.

    Args:
        settings: Configuration; read from the environment when omitted

    Returns:
        Service with storage initialized
    """
    settings = settings or Settings.from_env()
    storage = StorageService(storage_dir=settings.data_dir, db_name=settings.db_name)
    await storage.initialize()
    return ResourceGraphService(storage, settings)
