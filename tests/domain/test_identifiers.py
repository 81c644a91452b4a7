from __future__ import annotations

import hashlib
import logging

import pytest

from ogindex.domain.identifiers import (
    COLLECTION_DISCRIMINATOR,
    ID_COMPRESSION_DIVISOR,
    IdentifierGenerator,
    MonotonicClock,
)
from tests.helpers.registry import StepClock


def test_candidate_uses_leading_digest_bytes() -> None:
    generator = IdentifierGenerator(clock=StepClock())

    expected_digest = hashlib.sha256(b"gallery.example/a.png42").digest()
    expected = int.from_bytes(expected_digest[:8], "big") // ID_COMPRESSION_DIVISOR

    assert generator.candidate("gallery.example", "/a.png", 42) == expected


def test_candidate_fits_in_unsigned_64_bits() -> None:
    generator = IdentifierGenerator(clock=StepClock())

    value = generator.candidate("seed", "x", 1)

    assert 0 <= value < 2**64 // ID_COMPRESSION_DIVISOR + 1


def test_next_id_returns_first_free_candidate() -> None:
    clock = StepClock(start=0)
    generator = IdentifierGenerator(clock=clock)

    minted = generator.next_id("svc", "/a.png", is_taken=lambda _candidate: False)

    assert minted == generator.candidate("svc", "/a.png", 1)


def test_next_id_retries_after_forced_collision(caplog: pytest.LogCaptureFixture) -> None:
    digests = iter([b"\x00" * 32, b"\x00" * 32, b"\xff" * 32])

    def scripted_digest(_payload: bytes) -> bytes:
        return next(digests)

    generator = IdentifierGenerator(clock=StepClock(), digest=scripted_digest)
    taken = {0}

    with caplog.at_level(logging.DEBUG, logger="ogindex.domain.identifiers"):
        minted = generator.next_id("svc", "/a.png", is_taken=taken.__contains__)

    assert minted == (2**64 - 1) // ID_COMPRESSION_DIVISOR
    assert sum("collision" in record.message for record in caplog.records) == 2


def test_next_id_resamples_with_fresh_timestamp() -> None:
    seen: list[bytes] = []

    def recording_digest(payload: bytes) -> bytes:
        seen.append(payload)
        return hashlib.sha256(payload).digest()

    generator = IdentifierGenerator(clock=StepClock(start=0), digest=recording_digest)
    first = generator.candidate("svc", COLLECTION_DISCRIMINATOR, 1)
    seen.clear()

    minted = generator.next_collection_id("svc", is_taken=lambda candidate: candidate == first)

    assert minted != first
    assert seen == [b"svcseed1", b"svcseed2"]


def test_monotonic_clock_never_repeats() -> None:
    clock = MonotonicClock(source=lambda: 5)

    values = [clock() for _ in range(4)]

    assert values == [5, 6, 7, 8]


def test_monotonic_clock_follows_advancing_source() -> None:
    readings = iter([10, 30, 20])
    clock = MonotonicClock(source=lambda: next(readings))

    assert [clock(), clock(), clock()] == [10, 30, 31]
