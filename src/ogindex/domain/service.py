"""Registry orchestration: register, update and unregister collections.

Each mutating operation runs in two phases. The prepare phase awaits the
metadata fetcher and validates the document; other requests may run while it
is suspended. The commit phase never awaits: it re-checks its preconditions
against the live store, mints identifiers, reconciles, and commits one unit of
work. An update whose collection was removed or replaced during the prepare
phase fails with ``ConflictError`` instead of resurrecting stale data.
"""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .errors import ConflictError, NoChangeError, NotFoundError, UnauthorizedError
from .identifiers import IdentifierGenerator
from .metadata import parse_metadata
from .reconciliation import reconcile

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .identifiers import Clock
    from .model import (
        CollectionId,
        CollectionRecord,
        GraphicId,
        GraphicRecord,
        MetadataProposal,
        RegistryState,
        Timestamp,
    )
    from .ports import Authorizer, MetadataFetcher
    from .reconciliation import Reconciliation
    from .store import RegistryStore

log = getLogger(__name__)


@dataclass(frozen=True, slots=True, kw_only=True)
class CollectionInfo:
    """Collection fields as exposed to readers, without the member list."""

    collection_id: CollectionId
    title: str
    description: str | None
    artist: str | None
    external_link: str | None
    created_at: Timestamp
    updated_at: Timestamp | None

    @classmethod
    def from_record(cls, record: CollectionRecord) -> CollectionInfo:
        return cls(
            collection_id=record.collection_id,
            title=record.title,
            description=record.description,
            artist=record.artist,
            external_link=record.external_link,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )


class RegistryService:
    """Sole writer of a :class:`RegistryStore`."""

    def __init__(
        self,
        *,
        store: RegistryStore,
        fetch_metadata: MetadataFetcher,
        authorize: Authorizer,
        identifiers: IdentifierGenerator | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.store = store
        self._fetch_metadata = fetch_metadata
        self._authorize = authorize
        self.identifiers = identifiers or IdentifierGenerator(clock=clock)
        self._clock = clock or self.identifiers.clock

    # Mutations -----------------------------------------------------------------

    async def register(self, caller: str, service_address: str) -> CollectionRecord:
        await self._require_authorized(caller)
        log.info("Registering collection published by %s", service_address)

        proposal = await self._prepare(service_address)

        collection_id = self.identifiers.next_collection_id(
            service_address,
            is_taken=self.store.has_collection_id,
        )
        result = self._reconcile(
            proposal,
            existing_graphics=(),
            existing_collection=None,
            collection_id=collection_id,
            service_address=service_address,
        )
        self._commit(result, replaces=None)

        log.info(
            "Registered collection %s with %s graphics",
            collection_id,
            len(result.graphics),
        )
        return result.collection

    async def update(
        self,
        caller: str,
        collection_id: CollectionId,
        service_address: str,
    ) -> CollectionRecord:
        await self._require_authorized(caller)
        observed = self._require_collection(collection_id)
        log.info("Updating collection %s from %s", collection_id, service_address)

        proposal = await self._prepare(service_address)

        current = self.store.find_collection(collection_id)
        if current is None:
            raise ConflictError(
                f"Collection {collection_id} was unregistered while its metadata was retrieved"
            )
        if current is not observed:
            raise ConflictError(
                f"Collection {collection_id} was modified while its metadata was retrieved"
            )

        result = self._reconcile(
            proposal,
            existing_graphics=self.store.graphics_for(collection_id),
            existing_collection=current,
            collection_id=collection_id,
            service_address=service_address,
        )
        if not result.changed:
            log.info("Collection %s is unchanged", collection_id)
            raise NoChangeError(f"Collection {collection_id} is already up to date")

        self._commit(result, replaces=collection_id)
        log.info(
            "Updated collection %s: collection_changed=%s, changed=%s, dropped=%s",
            collection_id,
            result.collection_changed,
            len(result.changed_assets),
            len(result.dropped_assets),
        )
        return result.collection

    async def unregister(self, caller: str, collection_id: CollectionId) -> CollectionRecord:
        await self._require_authorized(caller)
        collection = self._require_collection(collection_id)

        with self.store.unit_of_work() as uow:
            removed = uow.repositories.graphics.remove_for_collection(collection_id)
            uow.repositories.collections.remove(collection_id)
            uow.commit()

        log.info("Unregistered collection %s and %s graphics", collection_id, removed)
        return collection

    # Queries -------------------------------------------------------------------

    def find(self, collection_id: CollectionId) -> CollectionRecord | None:
        return self.store.find_collection(collection_id)

    def list_collections(self) -> list[CollectionId]:
        return self.store.collection_ids()

    def get_collection(self, collection_id: CollectionId) -> CollectionInfo:
        return CollectionInfo.from_record(self._require_collection(collection_id))

    def list_graphics(self, collection_id: CollectionId) -> list[GraphicId]:
        return list(self._require_collection(collection_id).graphics)

    def get_graphic(self, graphic_id: GraphicId) -> GraphicRecord:
        graphic = self.store.find_graphic(graphic_id)
        if graphic is None:
            raise NotFoundError(f"Graphic {graphic_id} not found")
        return graphic

    # Persistence ---------------------------------------------------------------

    def export_state(self) -> RegistryState:
        return self.store.export_state()

    def import_state(self, state: RegistryState) -> None:
        self.store.import_state(state)

    # Internals -----------------------------------------------------------------

    async def _require_authorized(self, caller: str) -> None:
        if not await self._authorize(caller):
            log.warning("Rejected registry mutation from %r", caller)
            raise UnauthorizedError(f"Caller {caller!r} may not modify the registry")

    def _require_collection(self, collection_id: CollectionId) -> CollectionRecord:
        collection = self.store.find_collection(collection_id)
        if collection is None:
            raise NotFoundError(f"Collection {collection_id} not found")
        return collection

    async def _prepare(self, service_address: str) -> MetadataProposal:
        blob = await self._fetch_metadata(service_address)
        return parse_metadata(blob)

    def _reconcile(
        self,
        proposal: MetadataProposal,
        *,
        existing_graphics: Sequence[GraphicRecord],
        existing_collection: CollectionRecord | None,
        collection_id: CollectionId,
        service_address: str,
    ) -> Reconciliation:
        minted: set[GraphicId] = set()

        def is_taken(candidate: GraphicId) -> bool:
            return candidate in minted or self.store.has_graphic_id(candidate)

        def mint_graphic_id(asset: str) -> GraphicId:
            graphic_id = self.identifiers.next_id(service_address, asset, is_taken=is_taken)
            minted.add(graphic_id)
            return graphic_id

        return reconcile(
            proposal.graphics,
            proposal.collection,
            existing_graphics,
            existing_collection,
            collection_id=collection_id,
            service_address=service_address,
            now=self._clock(),
            mint_graphic_id=mint_graphic_id,
        )

    def _commit(self, result: Reconciliation, *, replaces: CollectionId | None) -> None:
        with self.store.unit_of_work() as uow:
            if replaces is not None:
                # the collection keeps its slot; its graphics are rebuilt
                uow.repositories.graphics.remove_for_collection(replaces)
            for graphic in result.graphics:
                uow.repositories.graphics.add(graphic)
            uow.repositories.collections.add(result.collection)
            uow.commit()
