"""
Steam Checks - Profile Policies.

CHECKS:
- VisibilityPolicy: non-public profiles are denied or admitted outright
- AccountAgePolicy: accounts created after the configured cutoff
- LevelPolicy: Steam level below the configured minimum
"""

from ..client.models import PlayerSummary
from ..types import ReasonKey, Stage
from .base import (
    BasePolicy,
    PolicyMeta,
    PolicyResult,
    create_allow_result,
    create_continue_result,
    create_deny_result,
)


class VisibilityPolicy(BasePolicy[PlayerSummary]):
    """
    Every later check needs a public profile.

    A non-public profile either fails here or ends the
    evaluation as admitted; it never reaches later stages.
    """

    @property
    def meta(self) -> PolicyMeta:
        return PolicyMeta(
            name="VisibilityPolicy",
            stage=Stage.SUMMARY,
            description="Profile must be public",
        )

    def _check(self, summary: PlayerSummary) -> PolicyResult:
        if summary.is_public:
            return create_continue_result(self.meta.name)
        if self._config.kicking.private_profile:
            return create_deny_result(self.meta.name, ReasonKey.PRIVATE_PROFILE)
        return create_allow_result(self.meta.name)


class AccountAgePolicy(BasePolicy[PlayerSummary]):

    @property
    def meta(self) -> PolicyMeta:
        return PolicyMeta(
            name="AccountAgePolicy",
            stage=Stage.SUMMARY,
            description="Account must be created before the cutoff",
        )

    def _check(self, summary: PlayerSummary) -> PolicyResult:
        cutoff = self._config.thresholds.max_account_creation_time
        if cutoff <= 0:
            return create_continue_result(self.meta.name)

        # Unknown creation time is not evidence of a new account
        created_at = summary.account_created_at
        if created_at is not None and created_at > cutoff:
            return create_deny_result(self.meta.name, ReasonKey.MAX_ACCOUNT_CREATION_TIME)
        return create_continue_result(self.meta.name)


class LevelPolicy(BasePolicy[int]):

    @property
    def meta(self) -> PolicyMeta:
        return PolicyMeta(
            name="LevelPolicy",
            stage=Stage.LEVEL,
            description="Minimum Steam level",
        )

    def _check(self, level: int) -> PolicyResult:
        thresholds = self._config.thresholds
        if thresholds.level_check_enabled and level < thresholds.min_steam_level:
            return create_deny_result(self.meta.name, ReasonKey.MIN_STEAM_LEVEL)
        return create_continue_result(self.meta.name)
