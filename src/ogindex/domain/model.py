"""Registry records and proposals.

Records are immutable. Every commit replaces a record object instead of
mutating it, so holding a reference to a record is enough to notice later that
the stored state has moved on.
"""

from __future__ import annotations

from dataclasses import dataclass, field

type CollectionId = int
type GraphicId = int
type Timestamp = int  # nanoseconds since the epoch


@dataclass(frozen=True, slots=True, kw_only=True)
class GraphicRecord:
    graphic_id: GraphicId
    collection_id: CollectionId
    asset: str
    title: str
    description: str | None = None
    asset_hash: str | None = None
    created_at: Timestamp
    updated_at: Timestamp | None = None
    service_address: str


@dataclass(frozen=True, slots=True, kw_only=True)
class CollectionRecord:
    collection_id: CollectionId
    title: str
    description: str | None = None
    artist: str | None = None
    external_link: str | None = None
    graphics: tuple[GraphicId, ...] = ()
    created_at: Timestamp
    updated_at: Timestamp | None = None


@dataclass(slots=True)
class RegistryState:
    """The complete registry contents, as handed to snapshot persistence."""

    collections: list[CollectionRecord] = field(default_factory=list["CollectionRecord"])
    graphics: list[GraphicRecord] = field(default_factory=list["GraphicRecord"])


@dataclass(frozen=True, slots=True, kw_only=True)
class CollectionProposal:
    title: str
    description: str | None = None
    artist: str | None = None
    external_link: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class GraphicProposal:
    asset: str
    title: str
    description: str | None = None
    asset_hash: str | None = None


@dataclass(frozen=True, slots=True)
class MetadataProposal:
    """Validated content of one metadata document."""

    collection: CollectionProposal
    graphics: tuple[GraphicProposal, ...] = ()
