"""SQLAlchemy adapter package for registry snapshots."""

from __future__ import annotations

from .snapshot import SqlAlchemySnapshotStore
from .tables import (
    SNAPSHOT_FORMAT_VERSION,
    collection_member_table,
    collection_table,
    graphic_table,
    metadata,
    snapshot_table,
)

__all__ = [
    "SNAPSHOT_FORMAT_VERSION",
    "SqlAlchemySnapshotStore",
    "collection_member_table",
    "collection_table",
    "graphic_table",
    "metadata",
    "snapshot_table",
]
