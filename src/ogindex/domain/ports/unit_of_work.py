"""Unit-of-work port for all-or-nothing registry writes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, Self, runtime_checkable

if TYPE_CHECKING:
    from types import TracebackType

    from ogindex.domain.ports.persistence import CollectionRepository, GraphicRepository


@dataclass(frozen=True, slots=True)
class RegistryRepositories:
    collections: CollectionRepository
    graphics: GraphicRepository


@runtime_checkable
class RegistryUnitOfWork(Protocol):
    """Stage repository changes and publish them together.

    Readers see staged changes only after ``commit``. Leaving the ``with``
    block without committing, or with an exception, discards them.
    """

    @property
    def repositories(self) -> RegistryRepositories: ...

    def __enter__(self) -> Self: ...

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        traceback: TracebackType | None,
    ) -> bool: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...
