"""Validation of metadata documents published by a service.

A document looks like::

    {
        "collection": {"title": "...", "description": "...", "artist": "...",
                       "external_link": "..."},
        "graphics": [{"asset": "/a.png", "title": "...", "description": "...",
                      "asset_hash": "..."}]
    }

``collection.title``, ``graphics[i].asset`` and ``graphics[i].title`` are
mandatory strings. Optional fields holding anything other than a string are
treated as absent. Duplicate asset paths pass validation unchanged.
"""

from __future__ import annotations

from logging import getLogger

from pydantic import BaseModel, ConfigDict, StrictStr, ValidationError, field_validator

from .errors import ParseError
from .model import CollectionProposal, GraphicProposal, MetadataProposal

log = getLogger(__name__)


def _string_or_none(value: object) -> str | None:
    return value if isinstance(value, str) else None


class MetadataBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class CollectionPayload(MetadataBaseModel):
    title: StrictStr
    description: str | None = None
    artist: str | None = None
    external_link: str | None = None

    @field_validator("description", "artist", "external_link", mode="before")
    @classmethod
    def _optional_text(cls, value: object) -> str | None:
        return _string_or_none(value)


class GraphicPayload(MetadataBaseModel):
    asset: StrictStr
    title: StrictStr
    description: str | None = None
    asset_hash: str | None = None

    @field_validator("description", "asset_hash", mode="before")
    @classmethod
    def _optional_text(cls, value: object) -> str | None:
        return _string_or_none(value)


class MetadataDocument(MetadataBaseModel):
    collection: CollectionPayload
    graphics: list[GraphicPayload]


def parse_metadata(blob: bytes | str) -> MetadataProposal:
    """Validate ``blob`` and return the collection and graphic proposals.

    Raises ``ParseError`` naming the offending field, or with ``field=None``
    when the blob is not a JSON object at all.
    """

    if isinstance(blob, bytes):
        try:
            blob = blob.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ParseError(f"Metadata document is not valid UTF-8: {exc}") from exc
    try:
        document = MetadataDocument.model_validate_json(blob)
    except ValidationError as exc:
        raise _parse_error(exc) from exc

    collection = document.collection
    return MetadataProposal(
        collection=CollectionProposal(
            title=collection.title,
            description=collection.description,
            artist=collection.artist,
            external_link=collection.external_link,
        ),
        graphics=tuple(
            GraphicProposal(
                asset=graphic.asset,
                title=graphic.title,
                description=graphic.description,
                asset_hash=graphic.asset_hash,
            )
            for graphic in document.graphics
        ),
    )


def _parse_error(exc: ValidationError) -> ParseError:
    error = exc.errors()[0]
    field = _field_path(error["loc"])
    if field is None:
        log.debug("Metadata document rejected: %s", error["msg"])
        return ParseError(f"Invalid metadata document: {error['msg']}")
    if error["type"] == "missing":
        return ParseError(f"Missing required field '{field}'", field=field)
    return ParseError(f"Invalid value for '{field}': {error['msg']}", field=field)


def _field_path(loc: tuple[int | str, ...]) -> str | None:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = part
    return path or None
