"""
Steam Checks - Base Policy.

============================================================
PURPOSE
============================================================
Abstract base class for all admission policies.

Each policy judges exactly one fetched fact. Policies are:
- Pure (no I/O, no side effects)
- Deterministic (same fact + config = same result)
- Short-circuiting (first failing rule decides)

============================================================
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, Optional, TypeVar

from ..config import SteamChecksConfig
from ..types import ReasonKey, Stage


logger = logging.getLogger(__name__)

FactT = TypeVar("FactT")


# ============================================================
# POLICY RESULT
# ============================================================

class PolicyOutcome(str, Enum):
    """What the pipeline should do after a policy check."""

    CONTINUE = "CONTINUE"
    """Fact is acceptable; run the next check."""

    DENY = "DENY"
    """Fact violates a rule; stop with a reason."""

    ALLOW = "ALLOW"
    """Stop now and admit; later checks are meaningless."""


@dataclass(frozen=True)
class PolicyResult:
    """
    Result of a single policy check.
    """

    outcome: PolicyOutcome
    reason_key: Optional[ReasonKey] = None
    policy_name: str = ""

    @property
    def is_continue(self) -> bool:
        return self.outcome == PolicyOutcome.CONTINUE

    @property
    def is_terminal(self) -> bool:
        return self.outcome != PolicyOutcome.CONTINUE


@dataclass(frozen=True)
class PolicyMeta:
    """
    Metadata about a policy.
    """
    name: str
    """Policy name."""

    stage: Stage
    """Pipeline stage whose fact this policy judges."""

    description: str
    """What this policy checks."""


# ============================================================
# POLICY INTERFACE
# ============================================================

class BasePolicy(ABC, Generic[FactT]):
    """
    Abstract base class for admission policies.

    Each policy:
    1. Receives one fetched fact
    2. Applies its rules in a fixed order
    3. Returns a PolicyResult
    """

    def __init__(self, config: SteamChecksConfig):
        self._config = config

    @property
    @abstractmethod
    def meta(self) -> PolicyMeta:
        """Get policy metadata."""
        pass

    @abstractmethod
    def _check(self, fact: FactT) -> PolicyResult:
        """
        Internal check logic.

        Subclasses implement this method.
        """
        pass

    def check(self, fact: FactT) -> PolicyResult:
        """Run the policy against one fact."""
        result = self._check(fact)
        if result.is_terminal:
            logger.debug(
                f"{self.meta.name}: {result.outcome.value}"
                f"{' (' + result.reason_key.value + ')' if result.reason_key else ''}"
            )
        return result


# ============================================================
# HELPER FUNCTIONS
# ============================================================

def create_continue_result(policy_name: str) -> PolicyResult:
    return PolicyResult(outcome=PolicyOutcome.CONTINUE, policy_name=policy_name)


def create_deny_result(policy_name: str, reason_key: ReasonKey) -> PolicyResult:
    """
    Create a denying result.

    Args:
        policy_name: Name of the policy
        reason_key: The single reason reported to the player
    """
    return PolicyResult(
        outcome=PolicyOutcome.DENY,
        reason_key=reason_key,
        policy_name=policy_name,
    )


def create_allow_result(policy_name: str) -> PolicyResult:
    return PolicyResult(outcome=PolicyOutcome.ALLOW, policy_name=policy_name)


def rule_active(threshold: Any) -> bool:
    """A threshold is active when it is positive."""
    return threshold > 0
