"""
Steam Checks - Membership Cache.

Process-lifetime memory of players that already passed or failed.

- Two disjoint sets: passed and failed
- Each kind can be switched off independently
- No expiry and no size bound; reset() on (re)initialization
- Safe for concurrent use from several evaluations
"""

import logging
import threading
from typing import Dict, Set

from .types import CacheStatus


logger = logging.getLogger(__name__)


class MembershipCache:
    """
    Passed/failed identity sets.

    Recording one kind removes the identity from the other, so an
    identity is in at most one set at a time.
    """

    def __init__(
        self,
        cache_passed: bool = True,
        cache_denied: bool = False,
    ):
        self._cache_passed = cache_passed
        self._cache_denied = cache_denied
        self._passed: Set[str] = set()
        self._failed: Set[str] = set()
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls, config) -> "MembershipCache":
        return cls(
            cache_passed=config.cache_passed_players,
            cache_denied=config.cache_denied_players,
        )

    def lookup(self, identity: str) -> CacheStatus:
        with self._lock:
            if self._cache_passed and identity in self._passed:
                return CacheStatus.PREVIOUSLY_PASSED
            if self._cache_denied and identity in self._failed:
                return CacheStatus.PREVIOUSLY_FAILED
        return CacheStatus.UNKNOWN

    def record_pass(self, identity: str) -> None:
        if not self._cache_passed:
            return
        with self._lock:
            self._failed.discard(identity)
            self._passed.add(identity)

    def record_fail(self, identity: str) -> None:
        if not self._cache_denied:
            return
        with self._lock:
            self._passed.discard(identity)
            self._failed.add(identity)

    def forget(self, identity: str) -> None:
        """Drop one identity from both sets."""
        with self._lock:
            self._passed.discard(identity)
            self._failed.discard(identity)

    def reset(self) -> None:
        """Clear both sets. Called when the gate is (re)initialized."""
        with self._lock:
            passed, failed = len(self._passed), len(self._failed)
            self._passed.clear()
            self._failed.clear()
        logger.info(f"Membership cache reset ({passed} passed, {failed} failed dropped)")

    def stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                "passed": len(self._passed),
                "failed": len(self._failed),
            }

    def __contains__(self, identity: object) -> bool:
        with self._lock:
            return identity in self._passed or identity in self._failed

    def __len__(self) -> int:
        with self._lock:
            return len(self._passed) + len(self._failed)
