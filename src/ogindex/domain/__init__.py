"""Registry domain: records, validation, reconciliation and orchestration."""

from __future__ import annotations

from .errors import (
    ConflictError,
    NoChangeError,
    NotFoundError,
    ParseError,
    RegistryError,
    RetrievalError,
    SnapshotError,
    UnauthorizedError,
)
from .identifiers import IdentifierGenerator, MonotonicClock
from .metadata import parse_metadata
from .model import (
    CollectionProposal,
    CollectionRecord,
    GraphicProposal,
    GraphicRecord,
    MetadataProposal,
    RegistryState,
)
from .reconciliation import Reconciliation, reconcile
from .service import CollectionInfo, RegistryService
from .store import RegistryStore

__all__ = [
    "CollectionInfo",
    "CollectionProposal",
    "CollectionRecord",
    "ConflictError",
    "GraphicProposal",
    "GraphicRecord",
    "IdentifierGenerator",
    "MetadataProposal",
    "MonotonicClock",
    "NoChangeError",
    "NotFoundError",
    "ParseError",
    "Reconciliation",
    "RegistryError",
    "RegistryService",
    "RegistryState",
    "RegistryStore",
    "RetrievalError",
    "SnapshotError",
    "UnauthorizedError",
    "parse_metadata",
    "reconcile",
]
