"""
Steam Web API Models - Typed results of profile lookups.

Every upstream payload is converted into one of these structures
at the client boundary. Policy and pipeline code never touch raw JSON.
"""

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Dict, Optional


class StatusCode(IntEnum):
    """
    HTTP status codes (positive) and locally synthesized codes (negative).

    200 is the only success status.
    """
    SUCCESS = 200
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    METHOD_NOT_ALLOWED = 405
    TOO_MANY_REQUESTS = 429
    INTERNAL_ERROR = 500
    UNAVAILABLE = 503

    GAME_INFO_HIDDEN = -100
    PLAYER_NOT_FOUND = -101
    MALFORMED_RESPONSE = -102
    TRANSPORT_ERROR = -103

    @classmethod
    def describe(cls, code: int) -> str:
        """Name of a status code, or the number itself if unknown."""
        try:
            return cls(code).name
        except ValueError:
            return str(code)


class ServiceGroup(Enum):
    """
    Upstream service groups.

    IPlayerService accepts a single steamid per request;
    ISteamUser accepts several but is always called with one.
    """
    PLAYER_SERVICE = "IPlayerService"
    STEAM_USER = "ISteamUser"

    @property
    def identity_param(self) -> str:
        return "steamid" if self is ServiceGroup.PLAYER_SERVICE else "steamids"


class Visibility(IntEnum):
    """Community visibility state of a profile."""
    PRIVATE = 1
    FRIENDS_ONLY = 2
    PUBLIC = 3


def visibility_name(value: int) -> str:
    try:
        return Visibility(value).name
    except ValueError:
        return str(value)


@dataclass(frozen=True)
class PlayerBans:
    """Result of GetPlayerBans. Visible even on private profiles."""
    community_banned: bool
    vac_banned: bool
    vac_ban_count: int
    game_ban_count: int
    economy_banned: bool
    days_since_last_ban: int

    def __str__(self) -> str:
        return (
            f"Community Ban: {self.community_banned} - VAC Ban: {self.vac_banned} - "
            f"VAC Ban Count: {self.vac_ban_count} - Last Ban: {self.days_since_last_ban} - "
            f"Game Ban Count: {self.game_ban_count} - Economy Ban: {self.economy_banned}"
        )


@dataclass(frozen=True)
class PlayerSummary:
    """
    Result of GetPlayerSummaries.

    account_created_at is only known for public profiles;
    None means unknown, never epoch zero.
    """
    visibility: int
    profile_url: str
    account_created_at: Optional[int] = None

    @property
    def is_public(self) -> bool:
        return self.visibility == Visibility.PUBLIC

    def __str__(self) -> str:
        return (
            f"Steam profile visibility: {visibility_name(self.visibility)} - "
            f"Profile URL: {self.profile_url} - Account created: {self.account_created_at}"
        )


@dataclass(frozen=True)
class PlaytimeInformation:
    """Result of GetOwnedGames when playtime is visible."""
    game_count: int
    primary_game_minutes: int
    total_minutes: int

    @property
    def other_games_minutes(self) -> int:
        return self.total_minutes - self.primary_game_minutes

    def __str__(self) -> str:
        return (
            f"Gamescount: {self.game_count} - Playtime in Rust: {self.primary_game_minutes} - "
            f"Playtime all Steam games: {self.total_minutes}"
        )


class HiddenPlaytimeCause(Enum):
    """Why playtime could not be read."""
    MISSING_GAME_COUNT = "missing_game_count"
    MISSING_PRIMARY_GAME = "missing_primary_game"
    ZERO_PLAYTIME = "zero_playtime"


@dataclass(frozen=True)
class HiddenPlaytime:
    """
    Sentinel for hidden playtime.

    All causes are treated identically by the policy layer;
    the cause is kept for diagnostics only.
    """
    cause: HiddenPlaytimeCause
    game_count: Optional[int] = None

    def __str__(self) -> str:
        return f"Playtime hidden ({self.cause.value})"


@dataclass(frozen=True)
class BadgeInfo:
    """Result of GetBadges: badge id -> level."""
    levels: Dict[int, int] = field(default_factory=dict)

    def level_of(self, badge_id: int) -> int:
        """Level of a badge, 0 if the player does not have it."""
        return self.levels.get(badge_id, 0)

    def __str__(self) -> str:
        return f"Badges: {len(self.levels)}"

    def to_dict(self) -> Dict[str, Any]:
        return {str(badge_id): level for badge_id, level in self.levels.items()}
