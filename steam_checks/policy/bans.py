"""
Steam Checks - Ban Policy.

CHECKS (in order):
- KickCommunityBan: community ban, if toggled
- KickTradeBan: economy ban or probation, if toggled
- KickGameBan: more game bans than allowed
- KickVacBan: more VAC bans than allowed, or any VAC flag when none are allowed
"""

from ..client.models import PlayerBans
from ..types import ReasonKey, Stage
from .base import (
    BasePolicy,
    PolicyMeta,
    PolicyResult,
    create_continue_result,
    create_deny_result,
)


class BanPolicy(BasePolicy[PlayerBans]):
    """
    Judges the ban record. Runs for every player, public or not.
    """

    @property
    def meta(self) -> PolicyMeta:
        return PolicyMeta(
            name="BanPolicy",
            stage=Stage.BANS,
            description="Community, trade, game and VAC bans",
        )

    def _check(self, bans: PlayerBans) -> PolicyResult:
        kicking = self._config.kicking
        thresholds = self._config.thresholds

        if bans.community_banned and kicking.community_ban:
            return create_deny_result(self.meta.name, ReasonKey.COMMUNITY_BAN)

        if bans.economy_banned and kicking.trade_ban:
            return create_deny_result(self.meta.name, ReasonKey.TRADE_BAN)

        if bans.game_ban_count > thresholds.max_game_bans:
            return create_deny_result(self.meta.name, ReasonKey.GAME_BAN)

        # Upstream count and flag can disagree, so both are checked
        if bans.vac_ban_count > thresholds.max_vac_bans or (
            bans.vac_banned and thresholds.max_vac_bans == 0
        ):
            return create_deny_result(self.meta.name, ReasonKey.VAC_BAN)

        return create_continue_result(self.meta.name)
