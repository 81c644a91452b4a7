"""Collision-free identifier minting.

Identifiers are derived from a SHA-256 digest over the namespace seed, a
discriminator and the current time. The first eight bytes are read as a
big-endian integer and divided by 10,000 to keep the human-facing number
short. On collision the digest is recomputed with a fresh timestamp.
"""

from __future__ import annotations

import hashlib
import time
from collections.abc import Callable
from logging import getLogger

log = getLogger(__name__)

ID_COMPRESSION_DIVISOR = 10_000
COLLECTION_DISCRIMINATOR = "seed"

type Clock = Callable[[], int]
type Digest = Callable[[bytes], bytes]
type IsTaken = Callable[[int], bool]


class MonotonicClock:
    """Wall clock in nanoseconds that never returns the same value twice."""

    def __init__(self, source: Clock = time.time_ns) -> None:
        self._source = source
        self._last = 0

    def __call__(self) -> int:
        now = self._source()
        if now <= self._last:
            now = self._last + 1
        self._last = now
        return now


def sha256_digest(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


class IdentifierGenerator:
    """Mint identifiers that do not collide with any live identifier.

    ``clock`` must return a strictly increasing value per call; the retry loop
    relies on it to change the digest input on every attempt.
    """

    def __init__(self, *, clock: Clock | None = None, digest: Digest = sha256_digest) -> None:
        self.clock: Clock = clock or MonotonicClock()
        self._digest = digest

    def candidate(self, namespace_seed: str, discriminator: str, timestamp: int) -> int:
        payload = f"{namespace_seed}{discriminator}{timestamp}".encode()
        head = self._digest(payload)[:8]
        return int.from_bytes(head, "big") // ID_COMPRESSION_DIVISOR

    def next_id(self, namespace_seed: str, discriminator: str, *, is_taken: IsTaken) -> int:
        attempts = 0
        while True:
            attempts += 1
            candidate = self.candidate(namespace_seed, discriminator, self.clock())
            if not is_taken(candidate):
                if attempts > 1:
                    log.debug("Minted id %s after %s attempts", candidate, attempts)
                return candidate
            log.debug("Identifier collision on %s for %r, resampling", candidate, discriminator)

    def next_collection_id(self, namespace_seed: str, *, is_taken: IsTaken) -> int:
        return self.next_id(namespace_seed, COLLECTION_DISCRIMINATOR, is_taken=is_taken)
