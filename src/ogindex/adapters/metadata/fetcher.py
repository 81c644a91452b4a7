"""HTTP retrieval of service metadata documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx

from ogindex.adapters.http_resilience import ResilientClient
from ogindex.config.registry import DEFAULT_METADATA_PATH, metadata_resilience_config
from ogindex.domain.errors import RetrievalError

if TYPE_CHECKING:
    from collections.abc import Callable

    from ogindex.config.http_resilience import ResilienceConfig

log = getLogger(__name__)


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def metadata_url(service_address: str, metadata_path: str = DEFAULT_METADATA_PATH) -> str:
    """Join a service address and the metadata path, tolerating stray slashes."""

    address = service_address.strip()
    if not address:
        raise RetrievalError("Service address is empty")
    if "://" not in address:
        address = f"https://{address}"
    return f"{address.rstrip('/')}/{metadata_path.lstrip('/')}"


@dataclass(slots=True)
class HttpMetadataFetcher:
    """Fetch ``{service_address}{metadata_path}`` and return the raw body."""

    metadata_path: str = DEFAULT_METADATA_PATH
    resilience: ResilienceConfig = field(default_factory=metadata_resilience_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    async def __call__(self, service_address: str) -> bytes:
        url = metadata_url(service_address, self.metadata_path)
        log.debug("Retrieving metadata from %s", url)
        try:
            async with self.client_factory(self.resilience) as client:
                response = await client.get(url)
                response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise RetrievalError(f"Metadata request to {url} failed with HTTP {status}") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise RetrievalError(f"Metadata request to {url} failed: {exc}") from exc

        size = len(response.content)
        if size > self.resilience.max_document_bytes:
            raise RetrievalError(
                f"Metadata document at {url} is {size} bytes, "
                f"limit is {self.resilience.max_document_bytes}"
            )
        log.debug("Retrieved %s bytes of metadata from %s", size, url)
        return response.content
