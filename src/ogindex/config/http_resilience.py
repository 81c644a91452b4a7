"""Settings for the HTTP client that retrieves metadata documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

import httpx

DEFAULT_USER_AGENT = "ogindex-metadata-fetcher"
DEFAULT_MAX_DOCUMENT_BYTES = 4 * 1024 * 1024


@dataclass(slots=True, frozen=True)
class RetryPolicy:
    """Retries for GET requests answered with transient failures."""

    total: int = 3
    backoff_factor: float = 0.5
    max_backoff_wait: float = 10.0
    backoff_jitter: float = 1.0
    respect_retry_after_header: bool = True
    retry_statuses: frozenset[int] = frozenset({408, 425, 429, 500, 502, 503, 504})
    retry_on_exceptions: tuple[type[httpx.HTTPError], ...] = (
        httpx.TimeoutException,
        httpx.NetworkError,
        httpx.RemoteProtocolError,
    )


@dataclass(slots=True, frozen=True)
class RateLimit:
    max_calls: int
    per_seconds: float


@dataclass(slots=True, frozen=True)
class CacheConfig:
    backend: Literal["sqlite", "memory"] = "memory"
    sqlite_path: str | None = None
    ttl_seconds: float | None = None


@dataclass(slots=True, frozen=True)
class ResilienceConfig:
    name: str
    timeout_seconds: float = 10.0
    retry: RetryPolicy = field(default_factory=RetryPolicy)
    ratelimit: RateLimit | None = None
    cache: CacheConfig | None = None
    user_agent: str = DEFAULT_USER_AGENT
    follow_redirects: bool = True
    max_document_bytes: int = DEFAULT_MAX_DOCUMENT_BYTES
