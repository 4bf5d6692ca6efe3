"""
Steam Checks - Configuration.

============================================================
PURPOSE
============================================================
All toggles and thresholds of the admission pipeline.

The configuration is loaded once at startup and is an
immutable snapshot afterwards; no evaluation mutates it.

============================================================
CONFIGURATION PHILOSOPHY
============================================================
1. A threshold <= 0 disables its rule
2. Count and level thresholds are active only when > 1
3. Hour thresholds are configured in hours, compared in minutes
4. Externally configurable via dictionary, file, or environment

============================================================
FILE FORMAT
============================================================
The dictionary layout matches the plugin's JSON config:

    {
        "ApiKey": "...",
        "LogInsteadofKick": false,
        "AdditionalKickMessage": "",
        "CachePassedPlayers": true,
        "CacheDeniedPlayers": false,
        "Kicking": {"CommunityBan": true, ...},
        "Thresholds": {"MaxVACBans": 1, ...},
        "Api": {"BaseUrl": "...", "RequestTimeoutSeconds": 30},
        "Messages": {"KickVacBan": "..."}
    }

============================================================
"""

import logging
import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from dotenv import load_dotenv

from .types import ConfigurationError


logger = logging.getLogger(__name__)


MINUTES_PER_HOUR = 60


# ============================================================
# KICKING TOGGLES
# ============================================================

@dataclass(frozen=True)
class KickingConfig:
    """
    Boolean denial toggles.
    """

    community_ban: bool = True
    """Deny players with a Steam Community ban."""

    trade_ban: bool = True
    """Deny players with an economy (trade) ban or probation."""

    private_profile: bool = True
    """
    Deny players whose profile is not public.

    Most checks depend on a public profile. When this is off,
    non-public profiles are admitted without further checks.
    """

    force_hours_played_kick: bool = False
    """
    Deny players whose playtime is hidden when any hour rule is active.

    A lot of players hide their hours, so this is off by default.
    """


# ============================================================
# THRESHOLDS
# ============================================================

@dataclass(frozen=True)
class ThresholdConfig:
    """
    Numeric thresholds. Defaults match the plugin defaults.
    """

    max_vac_bans: int = 1
    """
    Maximum VAC bans allowed.
    At 0 the VAC flag is checked as well, since count and flag can disagree.
    """

    max_game_bans: int = 1
    """Maximum game bans allowed."""

    min_steam_level: int = 2
    """Minimum Steam level. Active when > 1."""

    max_account_creation_time: int = -1
    """Unix seconds; accounts created later are denied. Active when > 0."""

    min_game_count: int = 3
    """Minimum number of owned games. Active when > 1."""

    min_rust_hours_played: int = -1
    max_rust_hours_played: int = -1
    min_other_games_played: int = 2
    """Hours in games other than Rust."""

    min_all_games_hours_played: int = -1

    @property
    def min_rust_minutes_played(self) -> int:
        return self.min_rust_hours_played * MINUTES_PER_HOUR

    @property
    def max_rust_minutes_played(self) -> int:
        return self.max_rust_hours_played * MINUTES_PER_HOUR

    @property
    def min_other_games_minutes_played(self) -> int:
        return self.min_other_games_played * MINUTES_PER_HOUR

    @property
    def min_all_games_minutes_played(self) -> int:
        return self.min_all_games_hours_played * MINUTES_PER_HOUR

    @property
    def level_check_enabled(self) -> bool:
        return self.min_steam_level > 1

    @property
    def account_age_check_enabled(self) -> bool:
        return self.max_account_creation_time > 0

    @property
    def game_count_check_enabled(self) -> bool:
        return self.min_game_count > 1

    @property
    def hour_checks_enabled(self) -> bool:
        return (
            self.min_rust_hours_played > 0
            or self.max_rust_hours_played > 0
            or self.min_other_games_played > 0
            or self.min_all_games_hours_played > 0
        )

    @property
    def playtime_stage_enabled(self) -> bool:
        return self.game_count_check_enabled or self.hour_checks_enabled


# ============================================================
# WEB API
# ============================================================

@dataclass(frozen=True)
class ApiConfig:
    """
    Steam Web API connection settings.
    """

    base_url: str = "https://api.steampowered.com"

    request_timeout_seconds: float = 30.0
    """Total aiohttp timeout per request."""

    primary_app_id: int = 252490
    """App id whose playtime is checked (Rust)."""

    games_owned_badge_id: int = 13
    """Badge whose level equals the number of games owned."""


# ============================================================
# MASTER CONFIGURATION
# ============================================================

@dataclass(frozen=True)
class SteamChecksConfig:
    """
    Complete Steam Checks configuration.
    """

    api_key: str = ""
    """
    Steam Web API key (https://steamcommunity.com/dev/apikey).
    Empty disables the whole subsystem: every player is admitted.
    """

    log_instead_of_kick: bool = False
    """Only log denials; never kick."""

    additional_kick_message: str = ""
    """Appended to every kick message."""

    cache_passed_players: bool = True
    cache_denied_players: bool = False

    kicking: KickingConfig = field(default_factory=KickingConfig)
    thresholds: ThresholdConfig = field(default_factory=ThresholdConfig)
    api: ApiConfig = field(default_factory=ApiConfig)

    messages: Dict[str, str] = field(default_factory=dict)
    """Overrides for the message catalog."""

    @property
    def enabled(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls, base: Optional["SteamChecksConfig"] = None) -> "SteamChecksConfig":
        """
        Load configuration from environment variables.

        Environment variables:
        - STEAM_CHECKS_CONFIG: path of a YAML/JSON config file
        - STEAM_API_KEY
        - STEAM_CHECKS_LOG_ONLY
        - STEAM_CHECKS_KICK_MESSAGE

        Values from the environment override values from the file.
        """
        load_dotenv()

        config = base
        if config is None:
            path = os.getenv("STEAM_CHECKS_CONFIG")
            config = load_config_from_file(path) if path else get_default_config()

        overrides: Dict[str, Any] = {}
        if os.getenv("STEAM_API_KEY"):
            overrides["api_key"] = os.getenv("STEAM_API_KEY")
        if os.getenv("STEAM_CHECKS_LOG_ONLY"):
            overrides["log_instead_of_kick"] = _parse_bool(os.getenv("STEAM_CHECKS_LOG_ONLY"))
        if os.getenv("STEAM_CHECKS_KICK_MESSAGE") is not None:
            overrides["additional_kick_message"] = os.getenv("STEAM_CHECKS_KICK_MESSAGE")

        return replace(config, **overrides) if overrides else config

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the plugin's dictionary layout. The API key is masked."""
        return {
            "ApiKey": "***" if self.api_key else "",
            "LogInsteadofKick": self.log_instead_of_kick,
            "AdditionalKickMessage": self.additional_kick_message,
            "CachePassedPlayers": self.cache_passed_players,
            "CacheDeniedPlayers": self.cache_denied_players,
            "Kicking": {
                "CommunityBan": self.kicking.community_ban,
                "TradeBan": self.kicking.trade_ban,
                "PrivateProfile": self.kicking.private_profile,
                "ForceHoursPlayedKick": self.kicking.force_hours_played_kick,
            },
            "Thresholds": {
                "MaxVACBans": self.thresholds.max_vac_bans,
                "MaxGameBans": self.thresholds.max_game_bans,
                "MinSteamLevel": self.thresholds.min_steam_level,
                "MaxAccountCreationTime": self.thresholds.max_account_creation_time,
                "MinGameCount": self.thresholds.min_game_count,
                "MinRustHoursPlayed": self.thresholds.min_rust_hours_played,
                "MaxRustHoursPlayed": self.thresholds.max_rust_hours_played,
                "MinOtherGamesPlayed": self.thresholds.min_other_games_played,
                "MinAllGamesHoursPlayed": self.thresholds.min_all_games_hours_played,
            },
            "Api": {
                "BaseUrl": self.api.base_url,
                "RequestTimeoutSeconds": self.api.request_timeout_seconds,
                "PrimaryAppId": self.api.primary_app_id,
                "GamesOwnedBadgeId": self.api.games_owned_badge_id,
            },
        }


# ============================================================
# STARTUP WARNINGS
# ============================================================

def collect_configuration_warnings(config: SteamChecksConfig) -> List[str]:
    """
    Message keys for thresholds that private profiles silently bypass.

    When private-profile kicking is off, non-public profiles are admitted
    before any of these rules can run.
    """
    if config.kicking.private_profile:
        return []

    thresholds = config.thresholds
    warnings: List[str] = []
    if thresholds.hour_checks_enabled:
        warnings.append("WarningPrivateProfileHours")
    if thresholds.game_count_check_enabled:
        warnings.append("WarningPrivateProfileGames")
    if thresholds.account_age_check_enabled:
        warnings.append("WarningPrivateProfileCreationTime")
    if thresholds.level_check_enabled:
        warnings.append("WarningPrivateProfileSteamLevel")
    return warnings


def log_configuration_warnings(config: SteamChecksConfig, messages: Any) -> List[str]:
    """
    Log startup problems once. Returns the keys that were logged.

    Args:
        config: Loaded configuration
        messages: MessageCatalog used for the text
    """
    logged: List[str] = []
    if not config.enabled:
        logger.error(messages.get("ErrorAPIConfig"))
        logged.append("ErrorAPIConfig")

    for key in collect_configuration_warnings(config):
        logger.warning(messages.get(key))
        logged.append(key)
    return logged


# ============================================================
# LOADERS
# ============================================================

def get_default_config() -> SteamChecksConfig:
    """Get default configuration (no API key, so disabled)."""
    return SteamChecksConfig()


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    section = data.get(key) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"Config section '{key}' must be a mapping")
    return section


def _int_setting(section: Dict[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Config value '{key}' must be an integer, got {value!r}")


def _float_setting(section: Dict[str, Any], key: str, default: float) -> float:
    value = section.get(key, default)
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"Config value '{key}' must be a number, got {value!r}")


def load_config_from_dict(data: Dict[str, Any]) -> SteamChecksConfig:
    """
    Load configuration from dictionary.

    Missing keys keep their defaults.

    Args:
        data: Configuration dictionary in the plugin layout

    Returns:
        SteamChecksConfig instance
    """
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration root must be a mapping")

    defaults = get_default_config()

    k = _section(data, "Kicking")
    kicking = KickingConfig(
        community_ban=_parse_bool(k.get("CommunityBan", defaults.kicking.community_ban)),
        trade_ban=_parse_bool(k.get("TradeBan", defaults.kicking.trade_ban)),
        private_profile=_parse_bool(k.get("PrivateProfile", defaults.kicking.private_profile)),
        force_hours_played_kick=_parse_bool(
            k.get("ForceHoursPlayedKick", defaults.kicking.force_hours_played_kick)
        ),
    )

    t = _section(data, "Thresholds")
    d = defaults.thresholds
    thresholds = ThresholdConfig(
        max_vac_bans=_int_setting(t, "MaxVACBans", d.max_vac_bans),
        max_game_bans=_int_setting(t, "MaxGameBans", d.max_game_bans),
        min_steam_level=_int_setting(t, "MinSteamLevel", d.min_steam_level),
        max_account_creation_time=_int_setting(t, "MaxAccountCreationTime", d.max_account_creation_time),
        min_game_count=_int_setting(t, "MinGameCount", d.min_game_count),
        min_rust_hours_played=_int_setting(t, "MinRustHoursPlayed", d.min_rust_hours_played),
        max_rust_hours_played=_int_setting(t, "MaxRustHoursPlayed", d.max_rust_hours_played),
        min_other_games_played=_int_setting(t, "MinOtherGamesPlayed", d.min_other_games_played),
        min_all_games_hours_played=_int_setting(t, "MinAllGamesHoursPlayed", d.min_all_games_hours_played),
    )

    a = _section(data, "Api")
    api = ApiConfig(
        base_url=str(a.get("BaseUrl", defaults.api.base_url)),
        request_timeout_seconds=_float_setting(a, "RequestTimeoutSeconds", defaults.api.request_timeout_seconds),
        primary_app_id=_int_setting(a, "PrimaryAppId", defaults.api.primary_app_id),
        games_owned_badge_id=_int_setting(a, "GamesOwnedBadgeId", defaults.api.games_owned_badge_id),
    )

    messages = {str(key): str(value) for key, value in _section(data, "Messages").items()}

    return SteamChecksConfig(
        api_key=str(data.get("ApiKey") or ""),
        log_instead_of_kick=_parse_bool(data.get("LogInsteadofKick", defaults.log_instead_of_kick)),
        additional_kick_message=str(data.get("AdditionalKickMessage") or ""),
        cache_passed_players=_parse_bool(data.get("CachePassedPlayers", defaults.cache_passed_players)),
        cache_denied_players=_parse_bool(data.get("CacheDeniedPlayers", defaults.cache_denied_players)),
        kicking=kicking,
        thresholds=thresholds,
        api=api,
        messages=messages,
    )


def load_config_from_file(path: Union[str, Path]) -> SteamChecksConfig:
    """Load configuration from a YAML file (JSON files are valid YAML)."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}")
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}")

    logger.info(f"Loaded configuration from {path}")
    return load_config_from_dict(data or {})
