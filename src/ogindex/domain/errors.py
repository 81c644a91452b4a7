"""Error taxonomy for registry operations.

Every failure a caller can observe is one of these. ``code`` is the stable tag
used by the response envelopes in :mod:`ogindex.api`.
"""

from __future__ import annotations

from typing import ClassVar


class RegistryError(Exception):
    """Base class for registry failures surfaced to callers."""

    code: ClassVar[str] = "REGISTRY_ERROR"

    def to_dict(self) -> dict[str, object]:
        return {"code": self.code, "message": str(self)}


class UnauthorizedError(RegistryError):
    """Caller is not permitted to mutate the registry."""

    code = "UNAUTHORIZED"


class RetrievalError(RegistryError):
    """Fetching the metadata document from a service failed."""

    code = "RETRIEVAL_FAILED"


class ParseError(RegistryError):
    """Metadata document is malformed or lacks a mandatory field."""

    code = "PARSE_FAILED"

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, object]:
        payload = super().to_dict()
        if self.field is not None:
            payload["field"] = self.field
        return payload


class NotFoundError(RegistryError):
    """Referenced collection or graphic does not exist."""

    code = "NOT_FOUND"


class NoChangeError(RegistryError):
    """Update proposal matches the stored collection exactly."""

    code = "NO_CHANGE"


class ConflictError(RegistryError):
    """Stored state changed while an operation was waiting on metadata."""

    code = "CONFLICT"


class SnapshotError(RegistryError):
    """A snapshot could not be written, read, or trusted."""

    code = "SNAPSHOT_FAILED"
