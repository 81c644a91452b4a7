"""Ports for authorizing registry mutations."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Authorizer(Protocol):
    """Decide whether ``caller`` may mutate the registry."""

    async def __call__(self, caller: str) -> bool: ...


__all__ = ["Authorizer"]
