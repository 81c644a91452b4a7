"""Differential reconciliation of proposals against stored records.

Responsibilities of this stage:
- match proposed graphics to stored graphics by asset path
- decide per entity whether tracked content changed
- carry creation timestamps forward and stamp modification timestamps
- build the merged collection record with its ordered member list

Out of scope for this stage:
- fetching or validating metadata
- any read or write of the registry store

Every output graphic receives a freshly minted identifier, also when its
content is unchanged. External references to a graphic id therefore do not
survive an update of the owning collection.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING

from .model import CollectionRecord, GraphicRecord

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .model import CollectionId, CollectionProposal, GraphicProposal, Timestamp

log = getLogger(__name__)

type MintGraphicId = Callable[[str], int]


@dataclass(slots=True, kw_only=True)
class Reconciliation:
    """Merged records plus what the merge detected."""

    collection: CollectionRecord
    graphics: tuple[GraphicRecord, ...]
    collection_changed: bool
    changed_assets: tuple[str, ...] = ()
    dropped_assets: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return self.collection_changed or bool(self.changed_assets) or bool(self.dropped_assets)


def reconcile(  # noqa: PLR0913
    graphic_proposals: Iterable[GraphicProposal],
    collection_proposal: CollectionProposal,
    existing_graphics: Sequence[GraphicRecord],
    existing_collection: CollectionRecord | None,
    *,
    collection_id: CollectionId,
    service_address: str,
    now: Timestamp,
    mint_graphic_id: MintGraphicId,
) -> Reconciliation:
    """Merge proposals with the stored state of one collection.

    With no ``existing_collection`` this is a first registration: every record
    is new and no modification timestamp is set. Otherwise:
    - matched graphic, same content -> timestamps carried forward
    - matched graphic, content differs -> ``updated_at = now``
    - unmatched proposal -> ``created_at = updated_at = now``
    - stored graphic without proposal -> dropped
    """

    first_registration = existing_collection is None
    existing_by_asset = {graphic.asset: graphic for graphic in existing_graphics}

    graphics: list[GraphicRecord] = []
    changed_assets: list[str] = []
    for proposal in deduplicate_proposals(graphic_proposals):
        previous = existing_by_asset.get(proposal.asset)
        if previous is None:
            created_at = now
            updated_at = None if first_registration else now
            changed_assets.append(proposal.asset)
        elif graphic_differs(previous, proposal):
            created_at = previous.created_at
            updated_at = now
            changed_assets.append(proposal.asset)
        else:
            created_at = previous.created_at
            updated_at = previous.updated_at

        graphics.append(
            GraphicRecord(
                graphic_id=mint_graphic_id(proposal.asset),
                collection_id=collection_id,
                asset=proposal.asset,
                title=proposal.title,
                description=proposal.description,
                asset_hash=proposal.asset_hash,
                created_at=created_at,
                updated_at=updated_at,
                service_address=service_address,
            )
        )

    proposed_assets = {graphic.asset for graphic in graphics}
    dropped_assets = tuple(
        graphic.asset for graphic in existing_graphics if graphic.asset not in proposed_assets
    )

    if existing_collection is None:
        collection_changed = True
        collection_created_at = now
        collection_updated_at = None
    else:
        collection_changed = collection_differs(existing_collection, collection_proposal)
        collection_created_at = existing_collection.created_at
        collection_updated_at = now if collection_changed else existing_collection.updated_at

    collection = CollectionRecord(
        collection_id=collection_id,
        title=collection_proposal.title,
        description=collection_proposal.description,
        artist=collection_proposal.artist,
        external_link=collection_proposal.external_link,
        graphics=tuple(graphic.graphic_id for graphic in graphics),
        created_at=collection_created_at,
        updated_at=collection_updated_at,
    )

    return Reconciliation(
        collection=collection,
        graphics=tuple(graphics),
        collection_changed=collection_changed,
        changed_assets=tuple(changed_assets),
        dropped_assets=dropped_assets,
    )


def deduplicate_proposals(proposals: Iterable[GraphicProposal]) -> list[GraphicProposal]:
    """Collapse proposals sharing an asset path; the last one wins.

    The surviving proposal keeps the position of the first occurrence.
    """

    by_asset: dict[str, GraphicProposal] = {}
    for proposal in proposals:
        if proposal.asset in by_asset:
            log.warning("Duplicate asset %r in metadata, keeping the last entry", proposal.asset)
        by_asset[proposal.asset] = proposal
    return list(by_asset.values())


def graphic_differs(record: GraphicRecord, proposal: GraphicProposal) -> bool:
    return (
        record.title != proposal.title
        or record.description != proposal.description
        or record.asset_hash != proposal.asset_hash
    )


def collection_differs(record: CollectionRecord, proposal: CollectionProposal) -> bool:
    return (
        record.title != proposal.title
        or record.description != proposal.description
        or record.artist != proposal.artist
        or record.external_link != proposal.external_link
    )
