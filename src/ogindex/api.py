"""Tagged response envelopes around :class:`RegistryService`.

Every call returns a JSON-ready dict, either ``{"ok": payload}`` or
``{"error": {"code": ..., "message": ...}}``. Registry errors become error
envelopes; anything else propagates.
"""

from __future__ import annotations

import dataclasses
import json
from logging import getLogger
from typing import TYPE_CHECKING, Any

from ogindex.domain.errors import RegistryError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from ogindex.domain.model import CollectionId, GraphicId
    from ogindex.domain.service import RegistryService

log = getLogger(__name__)

type Envelope = dict[str, Any]


def ok(payload: object) -> Envelope:
    return {"ok": _plain(payload)}


def error(exc: RegistryError) -> Envelope:
    return {"error": exc.to_dict()}


def to_json(envelope: Envelope) -> str:
    return json.dumps(envelope, indent=2, sort_keys=False)


def _plain(value: object) -> object:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {key: _plain(item) for key, item in dataclasses.asdict(value).items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    return value


class RegistryApi:
    """Front door for callers that expect tagged results instead of exceptions."""

    def __init__(self, service: RegistryService) -> None:
        self.service = service

    async def register_collection(self, caller: str, service_address: str) -> Envelope:
        async def run() -> object:
            record = await self.service.register(caller, service_address)
            return {
                "message": "Collection registered successfully.",
                "collection_id": record.collection_id,
            }

        return await self._guard(run)

    async def update_collection(
        self,
        caller: str,
        collection_id: CollectionId,
        service_address: str,
    ) -> Envelope:
        async def run() -> object:
            record = await self.service.update(caller, collection_id, service_address)
            return {
                "message": "Collection updated successfully.",
                "collection_id": record.collection_id,
            }

        return await self._guard(run)

    async def unregister_collection(self, caller: str, collection_id: CollectionId) -> Envelope:
        async def run() -> object:
            await self.service.unregister(caller, collection_id)
            return {
                "message": "Collection unregistered successfully.",
                "collection_id": collection_id,
            }

        return await self._guard(run)

    def fetch_collections(self) -> Envelope:
        return ok(self.service.list_collections())

    def fetch_collection(self, collection_id: CollectionId) -> Envelope:
        try:
            return ok(self.service.get_collection(collection_id))
        except RegistryError as exc:
            return error(exc)

    def fetch_graphics(self, collection_id: CollectionId) -> Envelope:
        try:
            return ok(self.service.list_graphics(collection_id))
        except RegistryError as exc:
            return error(exc)

    def fetch_graphic(self, graphic_id: GraphicId) -> Envelope:
        try:
            return ok(self.service.get_graphic(graphic_id))
        except RegistryError as exc:
            return error(exc)

    async def _guard(self, operation: Callable[[], Awaitable[object]]) -> Envelope:
        try:
            return ok(await operation())
        except RegistryError as exc:
            log.info("Registry operation failed: %s %s", exc.code, exc)
            return error(exc)
