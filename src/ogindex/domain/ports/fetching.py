"""Ports for fetching external metadata."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetadataFetcher(Protocol):
    """Retrieve the raw metadata document published by a service.

    Implementations raise ``RetrievalError`` when the document cannot be read.
    """

    async def __call__(self, service_address: str) -> bytes: ...


__all__ = ["MetadataFetcher"]
