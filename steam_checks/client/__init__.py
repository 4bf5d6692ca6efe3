"""
Steam Web API client.

Typed, fail-classified access to the five profile lookups
used by the admission pipeline.
"""

from steam_checks.client.exceptions import (
    GameInfoHiddenError,
    HttpStatusError,
    MalformedResponseError,
    PlayerNotFoundError,
    SteamApiError,
    TransportError,
)
from steam_checks.client.models import (
    BadgeInfo,
    HiddenPlaytime,
    HiddenPlaytimeCause,
    PlayerBans,
    PlayerSummary,
    PlaytimeInformation,
    ServiceGroup,
    StatusCode,
    Visibility,
)
from steam_checks.client.steam_api import (
    DEFAULT_BASE_URL,
    GAMES_OWNED_BADGE_ID,
    RUST_APP_ID,
    SteamWebApiClient,
    parse_badges,
    parse_player_bans,
    parse_player_summary,
    parse_playtime,
    parse_steam_level,
)


__all__ = [
    # Client
    "SteamWebApiClient",
    "DEFAULT_BASE_URL",
    "GAMES_OWNED_BADGE_ID",
    "RUST_APP_ID",
    # Parsing
    "parse_badges",
    "parse_player_bans",
    "parse_player_summary",
    "parse_playtime",
    "parse_steam_level",
    # Models
    "BadgeInfo",
    "HiddenPlaytime",
    "HiddenPlaytimeCause",
    "PlayerBans",
    "PlayerSummary",
    "PlaytimeInformation",
    "ServiceGroup",
    "StatusCode",
    "Visibility",
    # Exceptions
    "SteamApiError",
    "HttpStatusError",
    "TransportError",
    "PlayerNotFoundError",
    "GameInfoHiddenError",
    "MalformedResponseError",
]
