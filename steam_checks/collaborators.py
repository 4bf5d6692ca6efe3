"""
Steam Checks - Host Collaborators.

Interfaces the hosting game server implements:
- PermissionProvider: whitelist / bypass permission lookup
- PlayerConnection: removes a player from the server
"""

import logging
from abc import ABC, abstractmethod
from typing import Iterable, List, Optional, Set, Tuple


logger = logging.getLogger(__name__)


SKIP_PERMISSION = "steamchecks.skip"


class PermissionProvider(ABC):
    """Answers whether a player may skip all checks."""

    @abstractmethod
    def has_bypass_permission(self, identity: str) -> bool:
        pass


class StaticPermissionProvider(PermissionProvider):
    """Fixed set of whitelisted identities."""

    def __init__(self, identities: Optional[Iterable[str]] = None):
        self._identities: Set[str] = set(identities or ())

    def grant(self, identity: str) -> None:
        self._identities.add(identity)

    def revoke(self, identity: str) -> None:
        self._identities.discard(identity)

    def has_bypass_permission(self, identity: str) -> bool:
        return identity in self._identities


class PlayerConnection(ABC):
    """Removes a connected player from the server."""

    @abstractmethod
    async def kick(self, identity: str, message: str) -> None:
        pass


class LoggingPlayerConnection(PlayerConnection):
    """
    Records kicks instead of performing them.

    Used by the CLI and by hosts without a kick hook.
    """

    def __init__(self) -> None:
        self.kicked: List[Tuple[str, str]] = []

    async def kick(self, identity: str, message: str) -> None:
        self.kicked.append((identity, message))
        logger.info(f"Kick requested for {identity}: {message}")
