"""Services implementing the content graph operations."""

from .dimension_graph import DimensionGraphManager
from .resource_graph import (
    CruxDeletion,
    DimensionListing,
    ResourceGraphService,
    create_resource_graph,
)
from .tag_sync import SyncPlan, TagSynchronizer, plan_sync

__all__ = [
    "CruxDeletion",
    "DimensionGraphManager",
    "DimensionListing",
    "ResourceGraphService",
    "SyncPlan",
    "TagSynchronizer",
    "create_resource_graph",
    "plan_sync",
]
