from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine

from tests.helpers.registry import (
    SERVICE,
    FakeMetadataFetcher,
    StaticAuthorizer,
    StepClock,
    make_service,
    metadata_blob,
)

os.environ.setdefault("DATABASE_URI", "sqlite+pysqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sqlalchemy.engine import Engine

    from ogindex.domain.service import RegistryService


@pytest.fixture
def sqlite_engine() -> Iterator[Engine]:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def fetcher() -> FakeMetadataFetcher:
    return FakeMetadataFetcher({SERVICE: metadata_blob()})


@pytest.fixture
def authorizer() -> StaticAuthorizer:
    return StaticAuthorizer()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def service(
    fetcher: FakeMetadataFetcher,
    authorizer: StaticAuthorizer,
    clock: StepClock,
) -> RegistryService:
    return make_service(fetcher, authorizer=authorizer, clock=clock)
