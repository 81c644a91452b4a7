"""Domain port definitions for adapters."""

from __future__ import annotations

from .authorization import Authorizer
from .fetching import MetadataFetcher
from .persistence import CollectionRepository, GraphicRepository
from .snapshot import SnapshotStore
from .unit_of_work import RegistryRepositories, RegistryUnitOfWork

__all__ = [
    "Authorizer",
    "CollectionRepository",
    "GraphicRepository",
    "MetadataFetcher",
    "RegistryRepositories",
    "RegistryUnitOfWork",
    "SnapshotStore",
]
