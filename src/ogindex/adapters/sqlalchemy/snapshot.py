"""Snapshot persistence of the registry state in a relational database."""

from __future__ import annotations

import time
from collections import defaultdict
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy import create_engine, delete, insert, select
from sqlalchemy.exc import SQLAlchemyError

from ogindex.domain.errors import SnapshotError
from ogindex.domain.model import CollectionRecord, GraphicRecord, RegistryState

from .tables import (
    SNAPSHOT_FORMAT_VERSION,
    collection_member_table,
    collection_table,
    graphic_table,
    metadata,
    snapshot_table,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine, RowMapping

log = getLogger(__name__)


class SqlAlchemySnapshotStore:
    """Store the full registry state, replacing the previous snapshot on save."""

    def __init__(self, engine: Engine, *, create_schema: bool = True) -> None:
        self.engine = engine
        if create_schema:
            try:
                metadata.create_all(engine)
            except SQLAlchemyError as exc:
                raise SnapshotError(f"Failed to prepare snapshot schema: {exc}") from exc

    @classmethod
    def from_uri(cls, database_uri: str) -> SqlAlchemySnapshotStore:
        try:
            engine = create_engine(database_uri, future=True)
        except SQLAlchemyError as exc:
            raise SnapshotError(f"Invalid snapshot database URI: {exc}") from exc
        return cls(engine)

    def dispose(self) -> None:
        self.engine.dispose()

    def save(self, state: RegistryState) -> None:
        try:
            with self.engine.begin() as connection:
                _clear(connection)
                _write(connection, state)
        except SQLAlchemyError as exc:
            raise SnapshotError(f"Failed to save registry snapshot: {exc}") from exc
        log.info(
            "Saved registry snapshot: %s collections, %s graphics",
            len(state.collections),
            len(state.graphics),
        )

    def load(self) -> RegistryState | None:
        try:
            with self.engine.connect() as connection:
                header = connection.execute(select(snapshot_table)).mappings().first()
                if header is None:
                    return None
                if header["format_version"] != SNAPSHOT_FORMAT_VERSION:
                    raise SnapshotError(
                        f"Unsupported snapshot format version {header['format_version']}"
                    )
                return _read(connection)
        except SQLAlchemyError as exc:
            raise SnapshotError(f"Failed to load registry snapshot: {exc}") from exc


def _clear(connection: Connection) -> None:
    connection.execute(delete(collection_member_table))
    connection.execute(delete(graphic_table))
    connection.execute(delete(collection_table))
    connection.execute(delete(snapshot_table))


def _write(connection: Connection, state: RegistryState) -> None:
    connection.execute(
        insert(snapshot_table),
        [{"id": 1, "format_version": SNAPSHOT_FORMAT_VERSION, "saved_at": time.time_ns()}],
    )
    if state.collections:
        connection.execute(
            insert(collection_table),
            [
                {
                    "collection_id": collection.collection_id,
                    "position": position,
                    "title": collection.title,
                    "description": collection.description,
                    "artist": collection.artist,
                    "external_link": collection.external_link,
                    "created_at": collection.created_at,
                    "updated_at": collection.updated_at,
                }
                for position, collection in enumerate(state.collections)
            ],
        )
    members = [
        {"collection_id": collection.collection_id, "position": position, "graphic_id": graphic_id}
        for collection in state.collections
        for position, graphic_id in enumerate(collection.graphics)
    ]
    if members:
        connection.execute(insert(collection_member_table), members)
    if state.graphics:
        connection.execute(
            insert(graphic_table),
            [
                {
                    "graphic_id": graphic.graphic_id,
                    "position": position,
                    "collection_id": graphic.collection_id,
                    "asset": graphic.asset,
                    "title": graphic.title,
                    "description": graphic.description,
                    "asset_hash": graphic.asset_hash,
                    "created_at": graphic.created_at,
                    "updated_at": graphic.updated_at,
                    "service_address": graphic.service_address,
                }
                for position, graphic in enumerate(state.graphics)
            ],
        )


def _read(connection: Connection) -> RegistryState:
    members: defaultdict[int, list[int]] = defaultdict(list)
    member_rows = connection.execute(
        select(collection_member_table).order_by(
            collection_member_table.c.collection_id,
            collection_member_table.c.position,
        )
    ).mappings()
    for row in member_rows:
        members[row["collection_id"]].append(row["graphic_id"])

    collection_rows = connection.execute(
        select(collection_table).order_by(collection_table.c.position)
    ).mappings().all()
    graphic_rows = connection.execute(
        select(graphic_table).order_by(graphic_table.c.position)
    ).mappings().all()

    return RegistryState(
        collections=[
            _collection_from_row(row, tuple(members.get(row["collection_id"], ())))
            for row in collection_rows
        ],
        graphics=[_graphic_from_row(row) for row in graphic_rows],
    )


def _collection_from_row(row: RowMapping, graphics: tuple[int, ...]) -> CollectionRecord:
    return CollectionRecord(
        collection_id=row["collection_id"],
        title=row["title"],
        description=row["description"],
        artist=row["artist"],
        external_link=row["external_link"],
        graphics=graphics,
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _graphic_from_row(row: RowMapping) -> GraphicRecord:
    return GraphicRecord(
        graphic_id=row["graphic_id"],
        collection_id=row["collection_id"],
        asset=row["asset"],
        title=row["title"],
        description=row["description"],
        asset_hash=row["asset_hash"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
        service_address=row["service_address"],
    )
