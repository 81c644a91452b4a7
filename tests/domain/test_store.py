from __future__ import annotations

import pytest

from ogindex.domain.errors import SnapshotError
from ogindex.domain.model import RegistryState
from ogindex.domain.ports import CollectionRepository, GraphicRepository, RegistryUnitOfWork
from ogindex.domain.store import RegistryStore, UnitOfWorkError
from tests.helpers.registry import make_collection, make_graphic


def _sample_state() -> RegistryState:
    return RegistryState(
        collections=[make_collection(7, [1, 2]), make_collection(8, [3], title="Bar")],
        graphics=[
            make_graphic(1, 7, "/a.png"),
            make_graphic(2, 7, "/b.png", title="B", updated_at=30),
            make_graphic(3, 8, "/c.png", title="C"),
        ],
    )


def test_unit_of_work_commit_publishes_changes() -> None:
    store = RegistryStore()

    with store.unit_of_work() as uow:
        uow.repositories.graphics.add(make_graphic(1, 7))
        uow.repositories.collections.add(make_collection(7, [1]))
        assert store.find_collection(7) is None
        uow.commit()

    assert store.collection_ids() == [7]
    assert store.find_graphic(1) is not None
    assert store.revision == 1


def test_unit_of_work_without_commit_discards_changes() -> None:
    store = RegistryStore()

    with store.unit_of_work() as uow:
        uow.repositories.collections.add(make_collection(7))

    assert store.collection_ids() == []
    assert store.revision == 0


def test_unit_of_work_rolls_back_on_error() -> None:
    store = RegistryStore(_sample_state())
    before = store.export_state()

    with pytest.raises(RuntimeError), store.unit_of_work() as uow:
        uow.repositories.graphics.remove_for_collection(7)
        uow.repositories.collections.remove(7)
        raise RuntimeError("boom")

    assert store.export_state() == before


def test_unit_of_work_rollback_restores_staged_copy() -> None:
    store = RegistryStore(_sample_state())

    with store.unit_of_work() as uow:
        uow.repositories.collections.remove(7)
        uow.rollback()
        assert uow.repositories.collections.get(7) is not None


def test_repositories_require_entered_unit_of_work() -> None:
    uow = RegistryStore().unit_of_work()

    with pytest.raises(UnitOfWorkError):
        _ = uow.repositories
    with pytest.raises(UnitOfWorkError):
        uow.commit()


def test_remove_for_collection_reports_removed_count() -> None:
    store = RegistryStore(_sample_state())

    with store.unit_of_work() as uow:
        removed = uow.repositories.graphics.remove_for_collection(7)
        remaining = uow.repositories.graphics.list()
        uow.commit()

    assert removed == 2
    assert [graphic.graphic_id for graphic in remaining] == [3]
    assert store.graphics_for(7) == []


def test_export_import_round_trip_preserves_every_field() -> None:
    original = RegistryStore(_sample_state())

    restored = RegistryStore()
    restored.import_state(original.export_state())

    assert restored.export_state() == original.export_state()
    assert restored.collection_ids() == [7, 8]


def test_export_state_is_detached_from_store() -> None:
    store = RegistryStore(_sample_state())

    exported = store.export_state()
    exported.collections.clear()

    assert store.collection_ids() == [7, 8]


@pytest.mark.parametrize(
    "state",
    [
        RegistryState(collections=[make_collection(7), make_collection(7)]),
        RegistryState(
            collections=[make_collection(7, [1])],
            graphics=[make_graphic(1, 7), make_graphic(1, 7, "/b.png")],
        ),
        RegistryState(collections=[make_collection(7)], graphics=[make_graphic(1, 9)]),
        RegistryState(collections=[make_collection(7, [5])]),
        RegistryState(
            collections=[make_collection(7, [1]), make_collection(8, [1])],
            graphics=[make_graphic(1, 7)],
        ),
    ],
)
def test_import_state_rejects_inconsistent_snapshots(state: RegistryState) -> None:
    store = RegistryStore(_sample_state())
    before = store.export_state()

    with pytest.raises(SnapshotError):
        store.import_state(state)

    assert store.export_state() == before


def test_in_memory_unit_of_work_satisfies_ports() -> None:
    store = RegistryStore()

    with store.unit_of_work() as uow:
        assert isinstance(uow, RegistryUnitOfWork)
        assert isinstance(uow.repositories.collections, CollectionRepository)
        assert isinstance(uow.repositories.graphics, GraphicRepository)
