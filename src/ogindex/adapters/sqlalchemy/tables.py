"""SQLAlchemy table metadata for registry snapshots."""

from __future__ import annotations

from sqlalchemy import (
    BigInteger,
    Column,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
)

SNAPSHOT_FORMAT_VERSION = 1

metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

snapshot_table = Table(
    "snapshot",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=False),
    Column("format_version", Integer, nullable=False),
    Column("saved_at", BigInteger, nullable=False),
)

# ``position`` keeps registration order, which the in-memory store exposes.
collection_table = Table(
    "collection",
    metadata,
    Column("collection_id", BigInteger, primary_key=True, autoincrement=False),
    Column("position", Integer, nullable=False),
    Column("title", String, nullable=False),
    Column("description", String, nullable=True),
    Column("artist", String, nullable=True),
    Column("external_link", String, nullable=True),
    Column("created_at", BigInteger, nullable=False),
    Column("updated_at", BigInteger, nullable=True),
)

graphic_table = Table(
    "graphic",
    metadata,
    Column("graphic_id", BigInteger, primary_key=True, autoincrement=False),
    Column("position", Integer, nullable=False),
    Column(
        "collection_id",
        BigInteger,
        ForeignKey("collection.collection_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("asset", String, nullable=False),
    Column("title", String, nullable=False),
    Column("description", String, nullable=True),
    Column("asset_hash", String, nullable=True),
    Column("created_at", BigInteger, nullable=False),
    Column("updated_at", BigInteger, nullable=True),
    Column("service_address", String, nullable=False),
)

collection_member_table = Table(
    "collection_member",
    metadata,
    Column(
        "collection_id",
        BigInteger,
        ForeignKey("collection.collection_id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column("position", Integer, primary_key=True, autoincrement=False),
    Column("graphic_id", BigInteger, nullable=False),
)
