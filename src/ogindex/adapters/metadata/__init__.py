"""Metadata retrieval adapter."""

from __future__ import annotations

from .fetcher import HttpMetadataFetcher, metadata_url

__all__ = ["HttpMetadataFetcher", "metadata_url"]
