"""Controller-list authorization."""

from __future__ import annotations

from dataclasses import dataclass
from logging import getLogger

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ControllerAuthorizer:
    """Allow mutations only from callers listed as controllers."""

    controllers: frozenset[str]

    async def __call__(self, caller: str) -> bool:
        allowed = caller in self.controllers
        if not allowed:
            log.debug("Caller %r not in controllers list", caller)
        return allowed
