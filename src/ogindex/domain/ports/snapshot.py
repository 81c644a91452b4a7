"""Ports for persisting registry snapshots across restarts."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ogindex.domain.model import RegistryState


@runtime_checkable
class SnapshotStore(Protocol):
    """Opaque storage for the complete registry state."""

    def save(self, state: RegistryState) -> None: ...

    def load(self) -> RegistryState | None:
        """Return the last saved state, or ``None`` if nothing was saved yet."""
        ...


__all__ = ["SnapshotStore"]
