"""Application wiring and lifecycle entry points."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from ogindex.adapters.authorization import ControllerAuthorizer
from ogindex.adapters.metadata import HttpMetadataFetcher
from ogindex.adapters.sqlalchemy import SqlAlchemySnapshotStore
from ogindex.config import get_registry_config, get_snapshot_database_config
from ogindex.domain.service import RegistryService
from ogindex.domain.store import RegistryStore

if TYPE_CHECKING:
    from ogindex.config import RegistryConfig
    from ogindex.domain.ports import Authorizer, MetadataFetcher, SnapshotStore

log = getLogger(__name__)


def build_registry_service(
    config: RegistryConfig | None = None,
    *,
    fetch_metadata: MetadataFetcher | None = None,
    authorize: Authorizer | None = None,
) -> RegistryService:
    """Wire a service with an empty store and the configured adapters."""

    effective_config = config or get_registry_config()
    effective_fetcher = fetch_metadata or HttpMetadataFetcher(
        metadata_path=effective_config.metadata_path,
        resilience=effective_config.resilience,
    )
    effective_authorizer = authorize or ControllerAuthorizer(effective_config.controllers)
    return RegistryService(
        store=RegistryStore(),
        fetch_metadata=effective_fetcher,
        authorize=effective_authorizer,
    )


def build_snapshot_store(database_uri: str | None = None) -> SqlAlchemySnapshotStore:
    uri = database_uri or get_snapshot_database_config().uri
    return SqlAlchemySnapshotStore.from_uri(uri)


def resume(service: RegistryService, snapshots: SnapshotStore) -> None:
    """Restore the registry from its last snapshot.

    A snapshot that cannot be read or violates the registry invariants raises
    ``SnapshotError``; callers must treat that as fatal.
    """

    state = snapshots.load()
    if state is None:
        log.info("No registry snapshot found, starting empty")
        return
    service.import_state(state)


def suspend(service: RegistryService, snapshots: SnapshotStore) -> None:
    """Persist the full registry state."""

    snapshots.save(service.export_state())
