"""In-memory registry state with all-or-nothing commits.

The store is the only shared mutable resource. Reads go straight to the live
state. Writes go through :meth:`RegistryStore.unit_of_work`, whose
repositories operate on a staged copy; ``commit`` swaps the staged copy in
with a single assignment, so readers never observe a half-applied change.
"""

from __future__ import annotations

import copy
from logging import getLogger
from typing import TYPE_CHECKING, Literal

from ogindex.domain.errors import SnapshotError
from ogindex.domain.model import RegistryState
from ogindex.domain.ports.unit_of_work import RegistryRepositories

if TYPE_CHECKING:
    from types import TracebackType

    from ogindex.domain.model import CollectionId, CollectionRecord, GraphicId, GraphicRecord

log = getLogger(__name__)


class UnitOfWorkError(RuntimeError):
    """Raised when a unit of work is used outside of its ``with`` block."""


class _Tables:
    """Collections and graphics keyed by id, in registration order."""

    __slots__ = ("collections", "graphics")

    def __init__(
        self,
        collections: dict[CollectionId, CollectionRecord] | None = None,
        graphics: dict[GraphicId, GraphicRecord] | None = None,
    ) -> None:
        self.collections = collections if collections is not None else {}
        self.graphics = graphics if graphics is not None else {}

    def copy(self) -> _Tables:
        # records are immutable, so shallow copies of the indexes suffice
        return _Tables(dict(self.collections), dict(self.graphics))


class InMemoryCollectionRepository:
    def __init__(self, tables: _Tables) -> None:
        self._tables = tables

    def get(self, collection_id: CollectionId) -> CollectionRecord | None:
        return self._tables.collections.get(collection_id)

    def add(self, collection: CollectionRecord) -> None:
        self._tables.collections[collection.collection_id] = collection

    def remove(self, collection_id: CollectionId) -> None:
        self._tables.collections.pop(collection_id, None)

    def list(self) -> list[CollectionRecord]:
        return list(self._tables.collections.values())


class InMemoryGraphicRepository:
    def __init__(self, tables: _Tables) -> None:
        self._tables = tables

    def get(self, graphic_id: GraphicId) -> GraphicRecord | None:
        return self._tables.graphics.get(graphic_id)

    def add(self, graphic: GraphicRecord) -> None:
        self._tables.graphics[graphic.graphic_id] = graphic

    def for_collection(self, collection_id: CollectionId) -> list[GraphicRecord]:
        return [g for g in self._tables.graphics.values() if g.collection_id == collection_id]

    def remove_for_collection(self, collection_id: CollectionId) -> int:
        doomed = [
            graphic_id
            for graphic_id, graphic in self._tables.graphics.items()
            if graphic.collection_id == collection_id
        ]
        for graphic_id in doomed:
            del self._tables.graphics[graphic_id]
        return len(doomed)

    def list(self) -> list[GraphicRecord]:
        return list(self._tables.graphics.values())


class InMemoryRegistryUnitOfWork:
    """Unit of work staging changes against a copy of the store's tables."""

    def __init__(self, store: RegistryStore) -> None:
        self._store = store
        self._staged: _Tables | None = None
        self._repositories: RegistryRepositories | None = None

    def __enter__(self) -> InMemoryRegistryUnitOfWork:
        if self._staged is not None:
            raise UnitOfWorkError("Unit of work already entered")
        self._staged = self._store._tables.copy()  # noqa: SLF001
        self._repositories = RegistryRepositories(
            collections=InMemoryCollectionRepository(self._staged),
            graphics=InMemoryGraphicRepository(self._staged),
        )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> Literal[False]:
        if exc_type is not None:
            self.rollback()
        self._staged = None
        self._repositories = None
        return False  # don't swallow exceptions

    @property
    def repositories(self) -> RegistryRepositories:
        if self._repositories is None:
            raise UnitOfWorkError("Unit of work not entered")
        return self._repositories

    def commit(self) -> None:
        if self._staged is None:
            raise UnitOfWorkError("Unit of work not entered")
        self._store._replace_tables(self._staged)  # noqa: SLF001
        self._staged = self._staged.copy()
        self._repositories = RegistryRepositories(
            collections=InMemoryCollectionRepository(self._staged),
            graphics=InMemoryGraphicRepository(self._staged),
        )

    def rollback(self) -> None:
        if self._staged is None:
            return
        self._staged = self._store._tables.copy()  # noqa: SLF001
        self._repositories = RegistryRepositories(
            collections=InMemoryCollectionRepository(self._staged),
            graphics=InMemoryGraphicRepository(self._staged),
        )


class RegistryStore:
    """Authoritative in-memory registry state."""

    def __init__(self, state: RegistryState | None = None) -> None:
        self._tables = _Tables()
        self._revision = 0
        if state is not None:
            self.import_state(state)

    @property
    def revision(self) -> int:
        """Number of commits applied since the store was created."""
        return self._revision

    def unit_of_work(self) -> InMemoryRegistryUnitOfWork:
        return InMemoryRegistryUnitOfWork(self)

    def find_collection(self, collection_id: CollectionId) -> CollectionRecord | None:
        return self._tables.collections.get(collection_id)

    def find_graphic(self, graphic_id: GraphicId) -> GraphicRecord | None:
        return self._tables.graphics.get(graphic_id)

    def graphics_for(self, collection_id: CollectionId) -> list[GraphicRecord]:
        return [g for g in self._tables.graphics.values() if g.collection_id == collection_id]

    def collection_ids(self) -> list[CollectionId]:
        return list(self._tables.collections)

    def has_collection_id(self, collection_id: CollectionId) -> bool:
        return collection_id in self._tables.collections

    def has_graphic_id(self, graphic_id: GraphicId) -> bool:
        return graphic_id in self._tables.graphics

    def export_state(self) -> RegistryState:
        return RegistryState(
            collections=list(self._tables.collections.values()),
            graphics=list(self._tables.graphics.values()),
        )

    def import_state(self, state: RegistryState) -> None:
        """Replace the whole state with ``state`` after checking its invariants."""

        tables = _Tables()
        for collection in state.collections:
            if collection.collection_id in tables.collections:
                raise SnapshotError(f"Duplicate collection id {collection.collection_id}")
            tables.collections[collection.collection_id] = copy.copy(collection)
        for graphic in state.graphics:
            if graphic.graphic_id in tables.graphics:
                raise SnapshotError(f"Duplicate graphic id {graphic.graphic_id}")
            if graphic.collection_id not in tables.collections:
                raise SnapshotError(
                    f"Graphic {graphic.graphic_id} references unknown collection "
                    f"{graphic.collection_id}"
                )
            tables.graphics[graphic.graphic_id] = copy.copy(graphic)
        for collection in tables.collections.values():
            for graphic_id in collection.graphics:
                member = tables.graphics.get(graphic_id)
                if member is None or member.collection_id != collection.collection_id:
                    raise SnapshotError(
                        f"Collection {collection.collection_id} lists graphic {graphic_id} "
                        "it does not own"
                    )

        self._replace_tables(tables)
        log.info(
            "Imported registry state: %s collections, %s graphics",
            len(tables.collections),
            len(tables.graphics),
        )

    def _replace_tables(self, tables: _Tables) -> None:
        self._tables = tables
        self._revision += 1
