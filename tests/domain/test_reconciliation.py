from __future__ import annotations

import itertools
import logging
from typing import TYPE_CHECKING

import pytest

from ogindex.domain.model import CollectionProposal, GraphicProposal
from ogindex.domain.reconciliation import (
    collection_differs,
    deduplicate_proposals,
    graphic_differs,
    reconcile,
)
from tests.helpers.registry import SERVICE, make_collection, make_graphic

if TYPE_CHECKING:
    from collections.abc import Callable

NOW = 500


def _minter(start: int = 900) -> Callable[[str], int]:
    counter = itertools.count(start)

    def mint(_asset: str) -> int:
        return next(counter)

    return mint


def test_first_registration_creates_everything_without_modification_time() -> None:
    result = reconcile(
        [GraphicProposal(asset="/a.png", title="A"), GraphicProposal(asset="/b.png", title="B")],
        CollectionProposal(title="Foo"),
        (),
        None,
        collection_id=7,
        service_address=SERVICE,
        now=NOW,
        mint_graphic_id=_minter(),
    )

    assert result.changed
    assert result.collection_changed
    assert result.collection.collection_id == 7
    assert result.collection.graphics == (900, 901)
    assert result.collection.created_at == NOW
    assert result.collection.updated_at is None
    assert [graphic.asset for graphic in result.graphics] == ["/a.png", "/b.png"]
    assert all(graphic.created_at == NOW for graphic in result.graphics)
    assert all(graphic.updated_at is None for graphic in result.graphics)
    assert all(graphic.collection_id == 7 for graphic in result.graphics)
    assert all(graphic.service_address == SERVICE for graphic in result.graphics)


def test_identical_proposal_reports_no_change_but_mints_fresh_ids() -> None:
    existing_graphic = make_graphic(1, 7, "/a.png", title="A", created_at=10)
    existing = make_collection(7, [1], title="Foo", created_at=10)

    result = reconcile(
        [GraphicProposal(asset="/a.png", title="A")],
        CollectionProposal(title="Foo"),
        [existing_graphic],
        existing,
        collection_id=7,
        service_address=SERVICE,
        now=NOW,
        mint_graphic_id=_minter(),
    )

    assert not result.changed
    assert result.changed_assets == ()
    (graphic,) = result.graphics
    assert graphic.graphic_id == 900
    assert graphic.created_at == 10
    assert graphic.updated_at is None
    assert result.collection.updated_at is None


def test_changed_graphic_keeps_creation_time_and_stamps_update() -> None:
    existing_graphic = make_graphic(1, 7, "/a.png", title="A", created_at=10, updated_at=20)
    existing = make_collection(7, [1], created_at=10)

    result = reconcile(
        [GraphicProposal(asset="/a.png", title="A", description="now described")],
        CollectionProposal(title="Foo"),
        [existing_graphic],
        existing,
        collection_id=7,
        service_address=SERVICE,
        now=NOW,
        mint_graphic_id=_minter(),
    )

    assert result.changed
    assert not result.collection_changed
    assert result.changed_assets == ("/a.png",)
    (graphic,) = result.graphics
    assert graphic.created_at == 10
    assert graphic.updated_at == NOW
    assert result.collection.updated_at is None


def test_new_graphic_on_update_is_stamped_created_and_updated() -> None:
    existing_graphic = make_graphic(1, 7, "/a.png")
    existing = make_collection(7, [1])

    result = reconcile(
        [GraphicProposal(asset="/a.png", title="A"), GraphicProposal(asset="/b.png", title="B")],
        CollectionProposal(title="Foo"),
        [existing_graphic],
        existing,
        collection_id=7,
        service_address=SERVICE,
        now=NOW,
        mint_graphic_id=_minter(),
    )

    new_graphic = result.graphics[1]
    assert result.changed_assets == ("/b.png",)
    assert new_graphic.created_at == NOW
    assert new_graphic.updated_at == NOW


def test_dropped_graphic_counts_as_change() -> None:
    existing_graphics = [make_graphic(1, 7, "/a.png"), make_graphic(2, 7, "/b.png", title="B")]
    existing = make_collection(7, [1, 2])

    result = reconcile(
        [GraphicProposal(asset="/a.png", title="A")],
        CollectionProposal(title="Foo"),
        existing_graphics,
        existing,
        collection_id=7,
        service_address=SERVICE,
        now=NOW,
        mint_graphic_id=_minter(),
    )

    assert result.changed
    assert result.dropped_assets == ("/b.png",)
    assert [graphic.asset for graphic in result.graphics] == ["/a.png"]
    assert len(result.collection.graphics) == 1


def test_collection_change_stamps_collection_only() -> None:
    existing_graphic = make_graphic(1, 7, "/a.png")
    existing = make_collection(7, [1], title="Foo", created_at=10)

    result = reconcile(
        [GraphicProposal(asset="/a.png", title="A")],
        CollectionProposal(title="Foo2"),
        [existing_graphic],
        existing,
        collection_id=7,
        service_address=SERVICE,
        now=NOW,
        mint_graphic_id=_minter(),
    )

    assert result.collection_changed
    assert result.collection.title == "Foo2"
    assert result.collection.created_at == 10
    assert result.collection.updated_at == NOW
    assert result.graphics[0].updated_at is None


def test_unchanged_collection_keeps_previous_modification_time() -> None:
    existing_graphic = make_graphic(1, 7, "/a.png")
    existing = make_collection(7, [1], created_at=10, updated_at=40)

    result = reconcile(
        [GraphicProposal(asset="/a.png", title="A2")],
        CollectionProposal(title="Foo"),
        [existing_graphic],
        existing,
        collection_id=7,
        service_address=SERVICE,
        now=NOW,
        mint_graphic_id=_minter(),
    )

    assert result.collection.updated_at == 40


def test_deduplicate_proposals_last_wins_at_first_position(
    caplog: pytest.LogCaptureFixture,
) -> None:
    proposals = [
        GraphicProposal(asset="/a.png", title="A"),
        GraphicProposal(asset="/b.png", title="B"),
        GraphicProposal(asset="/a.png", title="A2"),
    ]

    with caplog.at_level(logging.WARNING, logger="ogindex.domain.reconciliation"):
        result = deduplicate_proposals(proposals)

    assert [(proposal.asset, proposal.title) for proposal in result] == [
        ("/a.png", "A2"),
        ("/b.png", "B"),
    ]
    assert any("/a.png" in record.message for record in caplog.records)


def test_field_comparisons_cover_tracked_fields() -> None:
    graphic = make_graphic(1, 7, "/a.png", title="A")
    collection = make_collection(7, [1], title="Foo")

    assert not graphic_differs(graphic, GraphicProposal(asset="/a.png", title="A"))
    assert graphic_differs(graphic, GraphicProposal(asset="/a.png", title="A", asset_hash="h"))
    assert not collection_differs(collection, CollectionProposal(title="Foo"))
    assert collection_differs(collection, CollectionProposal(title="Foo", artist="Ada"))
    assert collection_differs(
        collection, CollectionProposal(title="Foo", external_link="https://x")
    )
