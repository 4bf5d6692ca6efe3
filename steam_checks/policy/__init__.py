"""
Steam Checks - Policies.

Pure checks, one per fetched fact. No I/O.
"""

from .base import (
    BasePolicy,
    PolicyMeta,
    PolicyOutcome,
    PolicyResult,
    create_allow_result,
    create_continue_result,
    create_deny_result,
    rule_active,
)
from .bans import BanPolicy
from .profile import AccountAgePolicy, LevelPolicy, VisibilityPolicy
from .playtime import GameCountPolicy, HiddenPlaytimePolicy, PlaytimePolicy


__all__ = [
    # Base
    "BasePolicy",
    "PolicyMeta",
    "PolicyOutcome",
    "PolicyResult",
    "create_allow_result",
    "create_continue_result",
    "create_deny_result",
    "rule_active",
    # Policies
    "BanPolicy",
    "VisibilityPolicy",
    "AccountAgePolicy",
    "LevelPolicy",
    "PlaytimePolicy",
    "HiddenPlaytimePolicy",
    "GameCountPolicy",
]
