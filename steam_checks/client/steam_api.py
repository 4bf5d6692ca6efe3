"""
Steam Web API Client - Typed lookups against api.steampowered.com.

Each lookup issues exactly one GET and either returns a typed model
or raises a classified SteamApiError. The client knows nothing about
admission policy.

Wire format:
    {base}/{group}/{endpoint}/?key={api_key}&{steamid|steamids}={identity}{extra}
"""

import asyncio
import json
import logging
import time
from collections.abc import Mapping
from typing import Any, Optional, Union

import aiohttp

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


logger = logging.getLogger(__name__)


DEFAULT_BASE_URL = "https://api.steampowered.com"
RUST_APP_ID = 252490
GAMES_OWNED_BADGE_ID = 13

BANS_ENDPOINT = "GetPlayerBans/v1"
SUMMARIES_ENDPOINT = "GetPlayerSummaries/v2"
LEVEL_ENDPOINT = "GetSteamLevel/v1"
OWNED_GAMES_ENDPOINT = "GetOwnedGames/v1"
BADGES_ENDPOINT = "GetBadges/v1"


class SteamWebApiClient:
    """
    Async client for the five profile lookups used by the admission pipeline.

    Usage:
        async with SteamWebApiClient(api_key) as client:
            bans = await client.fetch_bans(steamid)

    Notes:
    - No retries: a failed call is reported, not repeated
    - The only timeout is the aiohttp client timeout
    """

    DEFAULT_TIMEOUT = 30.0

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        primary_app_id: int = RUST_APP_ID,
        games_owned_badge_id: int = GAMES_OWNED_BADGE_ID,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None
        self.primary_app_id = primary_app_id
        self.games_owned_badge_id = games_owned_badge_id

        self._request_count = 0
        self._error_count = 0

    @classmethod
    def from_config(
        cls,
        config: Any,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> "SteamWebApiClient":
        """Build a client from a SteamChecksConfig."""
        return cls(
            api_key=config.api_key,
            base_url=config.api.base_url,
            timeout=config.api.request_timeout_seconds,
            primary_app_id=config.api.primary_app_id,
            games_owned_badge_id=config.api.games_owned_badge_id,
            session=session,
        )

    async def __aenter__(self) -> "SteamWebApiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()
        self._session = None

    # --------------------------------------------------------
    # Public lookups
    # --------------------------------------------------------

    async def fetch_bans(self, identity: str) -> PlayerBans:
        """Bans are readable even for private profiles."""
        payload = await self._request_json(ServiceGroup.STEAM_USER, BANS_ENDPOINT, identity)
        return parse_player_bans(payload)

    async def fetch_summary(self, identity: str) -> PlayerSummary:
        payload = await self._request_json(ServiceGroup.STEAM_USER, SUMMARIES_ENDPOINT, identity)
        return parse_player_summary(payload)

    async def fetch_level(self, identity: str) -> int:
        payload = await self._request_json(ServiceGroup.PLAYER_SERVICE, LEVEL_ENDPOINT, identity)
        return parse_steam_level(payload)

    async def fetch_playtime(
        self,
        identity: str,
    ) -> Union[PlaytimeInformation, HiddenPlaytime]:
        """
        Owned games and minutes played.

        Hidden playtime is an expected condition and comes back in-band
        as HiddenPlaytime, never as an exception.
        """
        payload = await self._request_json(
            ServiceGroup.PLAYER_SERVICE,
            OWNED_GAMES_ENDPOINT,
            identity,
            extra="&include_appinfo=false",
        )
        try:
            return parse_playtime(payload, self.primary_app_id)
        except GameInfoHiddenError as e:
            logger.debug(f"Playtime hidden for {identity}: {e.message}")
            return HiddenPlaytime(
                cause=e.context.get("cause", HiddenPlaytimeCause.MISSING_GAME_COUNT),
                game_count=e.context.get("game_count"),
            )

    async def fetch_badges(self, identity: str) -> BadgeInfo:
        payload = await self._request_json(ServiceGroup.PLAYER_SERVICE, BADGES_ENDPOINT, identity)
        return parse_badges(payload)

    # --------------------------------------------------------
    # Transport
    # --------------------------------------------------------

    def build_request_url(
        self,
        group: ServiceGroup,
        endpoint: str,
        identity: str,
        extra: str = "",
    ) -> str:
        """Build the request URL exactly as the Web API expects it."""
        return (
            f"{self._base_url}/{group.value}/{endpoint}/"
            f"?key={self._api_key}&{group.identity_param}={identity}{extra}"
        )

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create HTTP session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self._timeout),
                headers={"Accept": "application/json"},
            )
            self._owns_session = True
        return self._session

    async def _request_json(
        self,
        group: ServiceGroup,
        endpoint: str,
        identity: str,
        extra: str = "",
    ) -> Any:
        """Issue one GET and decode the JSON body of a 200 response."""
        url = self.build_request_url(group, endpoint, identity, extra)
        session = await self._get_session()
        self._request_count += 1

        start_time = time.time()
        try:
            async with session.get(url) as response:
                if response.status != StatusCode.SUCCESS:
                    body = await response.read()
                    raise HttpStatusError(
                        status_code=response.status,
                        endpoint=endpoint,
                        response_body=body[:1000].decode("utf-8", errors="replace"),
                    )
                body = await response.read()
        except SteamApiError:
            self._error_count += 1
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            self._error_count += 1
            raise TransportError(
                f"Connection error: {e}",
                endpoint=endpoint,
                original_error=e,
            ) from e

        latency_ms = (time.time() - start_time) * 1000
        logger.debug(f"[{endpoint}] Request completed in {latency_ms:.1f}ms")

        try:
            return json.loads(body)
        except ValueError as e:
            self._error_count += 1
            raise MalformedResponseError(
                "Response body is not valid JSON",
                endpoint=endpoint,
                original_error=e,
            ) from e

    def get_stats(self) -> dict[str, int]:
        """Request counters since the client was created."""
        return {
            "request_count": self._request_count,
            "error_count": self._error_count,
        }


# ============================================================
# PAYLOAD PARSING
# ============================================================

def _field(data: Any, key: str, endpoint: str) -> Any:
    if not isinstance(data, Mapping) or key not in data:
        raise MalformedResponseError(
            f"Missing field '{key}'",
            endpoint=endpoint,
            field_name=key,
        )
    return data[key]


def _as_int(value: Any, key: str, endpoint: str) -> int:
    if isinstance(value, bool):
        raise MalformedResponseError(f"Field '{key}' is not an integer", endpoint=endpoint, field_name=key)
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            pass
    raise MalformedResponseError(f"Field '{key}' is not an integer", endpoint=endpoint, field_name=key)


def _as_bool(value: Any, key: str, endpoint: str) -> bool:
    if isinstance(value, bool):
        return value
    raise MalformedResponseError(f"Field '{key}' is not a boolean", endpoint=endpoint, field_name=key)


def _single_player(players: Any, endpoint: str) -> Mapping:
    if not isinstance(players, list):
        raise MalformedResponseError("Field 'players' is not a list", endpoint=endpoint, field_name="players")
    if len(players) != 1:
        raise PlayerNotFoundError(
            f"Expected exactly one player, got {len(players)}",
            endpoint=endpoint,
        )
    player = players[0]
    if not isinstance(player, Mapping):
        raise MalformedResponseError("Player entry is not an object", endpoint=endpoint)
    return player


def parse_player_bans(payload: Any) -> PlayerBans:
    """Parse a GetPlayerBans payload."""
    endpoint = BANS_ENDPOINT
    player = _single_player(_field(payload, "players", endpoint), endpoint)

    economy = _field(player, "EconomyBan", endpoint)
    if not isinstance(economy, str):
        raise MalformedResponseError("Field 'EconomyBan' is not a string", endpoint=endpoint, field_name="EconomyBan")

    return PlayerBans(
        community_banned=_as_bool(_field(player, "CommunityBanned", endpoint), "CommunityBanned", endpoint),
        vac_banned=_as_bool(_field(player, "VACBanned", endpoint), "VACBanned", endpoint),
        vac_ban_count=_as_int(_field(player, "NumberOfVACBans", endpoint), "NumberOfVACBans", endpoint),
        game_ban_count=_as_int(_field(player, "NumberOfGameBans", endpoint), "NumberOfGameBans", endpoint),
        # "none", "probation" or "banned"
        economy_banned=economy != "none",
        days_since_last_ban=_as_int(_field(player, "DaysSinceLastBan", endpoint), "DaysSinceLastBan", endpoint),
    )


def parse_player_summary(payload: Any) -> PlayerSummary:
    """Parse a GetPlayerSummaries payload."""
    endpoint = SUMMARIES_ENDPOINT
    response = _field(payload, "response", endpoint)
    player = _single_player(_field(response, "players", endpoint), endpoint)

    visibility = _as_int(
        _field(player, "communityvisibilitystate", endpoint),
        "communityvisibilitystate",
        endpoint,
    )
    profile_url = player.get("profileurl", "")
    if not isinstance(profile_url, str):
        profile_url = str(profile_url)

    # Creation time is only exposed on public profiles
    created_at: Optional[int] = None
    if visibility == Visibility.PUBLIC and player.get("timecreated") is not None:
        created_at = _as_int(player["timecreated"], "timecreated", endpoint)

    return PlayerSummary(
        visibility=visibility,
        profile_url=profile_url,
        account_created_at=created_at,
    )


def parse_steam_level(payload: Any) -> int:
    """Parse a GetSteamLevel payload."""
    endpoint = LEVEL_ENDPOINT
    response = _field(payload, "response", endpoint)
    level = _as_int(_field(response, "player_level", endpoint), "player_level", endpoint)
    if level < 0:
        raise MalformedResponseError("Negative steam level", endpoint=endpoint, field_name="player_level")
    return level


def parse_playtime(payload: Any, primary_app_id: int = RUST_APP_ID) -> PlaytimeInformation:
    """
    Parse a GetOwnedGames payload.

    Raises:
        GameInfoHiddenError: game list or playtime is hidden by the player
        MalformedResponseError: anything else unexpected
    """
    endpoint = OWNED_GAMES_ENDPOINT
    if not isinstance(payload, Mapping):
        raise MalformedResponseError("Payload is not an object", endpoint=endpoint)

    response = payload.get("response")
    if not isinstance(response, Mapping) or response.get("game_count") is None:
        raise GameInfoHiddenError(
            "Game count missing",
            endpoint=endpoint,
            context={"cause": HiddenPlaytimeCause.MISSING_GAME_COUNT},
        )
    game_count = _as_int(response["game_count"], "game_count", endpoint)

    games = response.get("games")
    if not isinstance(games, list):
        games = []

    primary_minutes: Optional[int] = None
    total_minutes = 0
    for game in games:
        if not isinstance(game, Mapping):
            raise MalformedResponseError("Game entry is not an object", endpoint=endpoint)
        minutes = _as_int(game.get("playtime_forever", 0), "playtime_forever", endpoint)
        total_minutes += minutes
        if primary_minutes is None and game.get("appid") == primary_app_id:
            primary_minutes = minutes

    if primary_minutes is None:
        raise GameInfoHiddenError(
            f"App {primary_app_id} missing from games list",
            endpoint=endpoint,
            context={"cause": HiddenPlaytimeCause.MISSING_PRIMARY_GAME, "game_count": game_count},
        )

    # Upstream reports zero minutes when only playtime (not the list) is hidden
    if primary_minutes == 0 or total_minutes == 0:
        raise GameInfoHiddenError(
            "Playtime reported as zero",
            endpoint=endpoint,
            context={"cause": HiddenPlaytimeCause.ZERO_PLAYTIME, "game_count": game_count},
        )

    return PlaytimeInformation(
        game_count=game_count,
        primary_game_minutes=primary_minutes,
        total_minutes=total_minutes,
    )


def parse_badges(payload: Any) -> BadgeInfo:
    """Parse a GetBadges payload. Entries without an integer id or level are skipped."""
    endpoint = BADGES_ENDPOINT
    if not isinstance(payload, Mapping):
        raise MalformedResponseError("Payload is not an object", endpoint=endpoint)

    response = payload.get("response")
    badges = response.get("badges") if isinstance(response, Mapping) else None
    if not isinstance(badges, list):
        return BadgeInfo()

    levels: dict[int, int] = {}
    for badge in badges:
        if not isinstance(badge, Mapping):
            continue
        badge_id = badge.get("badgeid")
        level = badge.get("level")
        if isinstance(badge_id, bool) or isinstance(level, bool):
            continue
        if isinstance(badge_id, int) and isinstance(level, int):
            levels.setdefault(badge_id, level)
    return BadgeInfo(levels=levels)
