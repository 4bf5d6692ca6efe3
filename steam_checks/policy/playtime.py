"""
Steam Checks - Playtime Policies.

============================================================
CHECKS
============================================================
PlaytimePolicy (playtime visible), in order:
- KickMinRustHoursPlayed: too little Rust
- KickMaxRustHoursPlayed: too much Rust
- KickMinSteamHoursPlayed: too little across all games
- KickMinNonRustPlayed: too little besides Rust (only with > 1 game)
- KickGameCount: too few games

HiddenPlaytimePolicy (playtime hidden):
- KickHoursPrivate: hours hidden while an hour rule is active
  and the force toggle is on

GameCountPolicy (playtime hidden, badge fallback):
- KickGameCount: games-owned badge level below the minimum

============================================================
"""

from ..client.models import BadgeInfo, HiddenPlaytime, PlaytimeInformation
from ..types import ReasonKey, Stage
from .base import (
    BasePolicy,
    PolicyMeta,
    PolicyResult,
    create_continue_result,
    create_deny_result,
    rule_active,
)


class PlaytimePolicy(BasePolicy[PlaytimeInformation]):
    """
    Hour and game-count rules against visible playtime.

    All minute thresholds come from hour settings (x60).
    """

    @property
    def meta(self) -> PolicyMeta:
        return PolicyMeta(
            name="PlaytimePolicy",
            stage=Stage.PLAYTIME,
            description="Hours played and number of games",
        )

    def _check(self, playtime: PlaytimeInformation) -> PolicyResult:
        t = self._config.thresholds
        name = self.meta.name

        if rule_active(t.min_rust_minutes_played) and playtime.primary_game_minutes < t.min_rust_minutes_played:
            return create_deny_result(name, ReasonKey.MIN_RUST_HOURS_PLAYED)

        if rule_active(t.max_rust_minutes_played) and playtime.primary_game_minutes > t.max_rust_minutes_played:
            return create_deny_result(name, ReasonKey.MAX_RUST_HOURS_PLAYED)

        if rule_active(t.min_all_games_minutes_played) and playtime.total_minutes < t.min_all_games_minutes_played:
            return create_deny_result(name, ReasonKey.MIN_STEAM_HOURS_PLAYED)

        # Only meaningful when there are other games in the list
        if (
            rule_active(t.min_other_games_minutes_played)
            and playtime.other_games_minutes < t.min_other_games_minutes_played
            and playtime.game_count > 1
        ):
            return create_deny_result(name, ReasonKey.MIN_NON_RUST_PLAYED)

        if t.game_count_check_enabled and playtime.game_count < t.min_game_count:
            return create_deny_result(name, ReasonKey.GAME_COUNT)

        return create_continue_result(name)


class HiddenPlaytimePolicy(BasePolicy[HiddenPlaytime]):
    """
    Resolves hidden playtime.

    With the force toggle on and any hour rule active, hidden hours
    are a denial. Otherwise hour rules are skipped without judgement.
    """

    @property
    def meta(self) -> PolicyMeta:
        return PolicyMeta(
            name="HiddenPlaytimePolicy",
            stage=Stage.PLAYTIME,
            description="Hidden hours with forced hour checks",
        )

    def _check(self, hidden: HiddenPlaytime) -> PolicyResult:
        if self._config.kicking.force_hours_played_kick and self._config.thresholds.hour_checks_enabled:
            return create_deny_result(self.meta.name, ReasonKey.HOURS_PRIVATE)
        return create_continue_result(self.meta.name)


class GameCountPolicy(BasePolicy[BadgeInfo]):
    """
    Game count from the games-owned badge.

    The badge level equals the number of owned games. A missing
    badge counts as level 0.
    """

    @property
    def meta(self) -> PolicyMeta:
        return PolicyMeta(
            name="GameCountPolicy",
            stage=Stage.BADGES,
            description="Games owned, read from badges",
        )

    def _check(self, badges: BadgeInfo) -> PolicyResult:
        t = self._config.thresholds
        games_owned = badges.level_of(self._config.api.games_owned_badge_id)
        if t.game_count_check_enabled and games_owned < t.min_game_count:
            return create_deny_result(self.meta.name, ReasonKey.GAME_COUNT)
        return create_continue_result(self.meta.name)
