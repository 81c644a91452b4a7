"""Ports for reading and staging registry records."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ogindex.domain.model import CollectionId, CollectionRecord, GraphicId, GraphicRecord


@runtime_checkable
class CollectionRepository(Protocol):
    """Collection records keyed by collection id."""

    def get(self, collection_id: CollectionId) -> CollectionRecord | None: ...

    def add(self, collection: CollectionRecord) -> None: ...

    def remove(self, collection_id: CollectionId) -> None: ...

    def list(self) -> list[CollectionRecord]: ...


@runtime_checkable
class GraphicRepository(Protocol):
    """Graphic records keyed by graphic id."""

    def get(self, graphic_id: GraphicId) -> GraphicRecord | None: ...

    def add(self, graphic: GraphicRecord) -> None: ...

    def for_collection(self, collection_id: CollectionId) -> list[GraphicRecord]: ...

    def remove_for_collection(self, collection_id: CollectionId) -> int: ...

    def list(self) -> list[GraphicRecord]: ...
