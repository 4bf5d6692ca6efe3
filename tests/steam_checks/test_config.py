"""
Configuration and Message Catalog Tests.
"""

import pytest

from steam_checks.config import (
    KickingConfig,
    SteamChecksConfig,
    ThresholdConfig,
    collect_configuration_warnings,
    get_default_config,
    load_config_from_dict,
    load_config_from_file,
)
from steam_checks.messages import MessageCatalog
from steam_checks.types import ConfigurationError, ReasonKey


# ============================================================
# DEFAULTS
# ============================================================

class TestDefaults:

    def test_default_config_is_disabled(self):
        config = get_default_config()

        assert config.api_key == ""
        assert not config.enabled

    def test_default_thresholds(self):
        t = ThresholdConfig()

        assert t.max_vac_bans == 1
        assert t.max_game_bans == 1
        assert t.min_steam_level == 2
        assert t.min_game_count == 3
        assert t.min_other_games_played == 2
        assert not t.account_age_check_enabled
        assert t.level_check_enabled
        assert t.game_count_check_enabled
        assert t.hour_checks_enabled

    def test_hours_to_minutes(self):
        t = ThresholdConfig(min_rust_hours_played=50, max_rust_hours_played=100, min_all_games_hours_played=3)

        assert t.min_rust_minutes_played == 3000
        assert t.max_rust_minutes_played == 6000
        assert t.min_all_games_minutes_played == 180
        assert t.min_other_games_minutes_played == 120

    def test_playtime_stage_disabled_when_no_rules(self):
        t = ThresholdConfig(min_game_count=1, min_other_games_played=0)

        assert not t.playtime_stage_enabled

    def test_config_is_frozen(self):
        config = SteamChecksConfig(api_key="KEY")

        with pytest.raises(Exception):
            config.api_key = "OTHER"


# ============================================================
# LOADERS
# ============================================================

class TestLoadConfigFromDict:

    def test_plugin_layout(self):
        config = load_config_from_dict({
            "ApiKey": "KEY",
            "LogInsteadofKick": True,
            "AdditionalKickMessage": "Appeal on discord.",
            "CacheDeniedPlayers": True,
            "Kicking": {"CommunityBan": False, "ForceHoursPlayedKick": True},
            "Thresholds": {"MaxVACBans": 0, "MinRustHoursPlayed": 50},
            "Api": {"RequestTimeoutSeconds": 5, "PrimaryAppId": 440},
            "Messages": {"KickVacBan": "No VAC bans allowed."},
        })

        assert config.enabled
        assert config.log_instead_of_kick
        assert config.additional_kick_message == "Appeal on discord."
        assert config.cache_denied_players
        assert config.cache_passed_players
        assert config.kicking == KickingConfig(community_ban=False, force_hours_played_kick=True)
        assert config.thresholds.max_vac_bans == 0
        assert config.thresholds.min_rust_hours_played == 50
        assert config.thresholds.min_steam_level == 2
        assert config.api.request_timeout_seconds == 5.0
        assert config.api.primary_app_id == 440
        assert config.messages == {"KickVacBan": "No VAC bans allowed."}

    def test_empty_dict_gives_defaults(self):
        assert load_config_from_dict({}) == get_default_config()

    def test_non_integer_threshold_rejected(self):
        with pytest.raises(ConfigurationError, match="MinSteamLevel"):
            load_config_from_dict({"Thresholds": {"MinSteamLevel": "high"}})

    def test_non_numeric_timeout_rejected(self):
        with pytest.raises(ConfigurationError, match="RequestTimeoutSeconds"):
            load_config_from_dict({"Api": {"RequestTimeoutSeconds": "soon"}})

    def test_section_must_be_mapping(self):
        with pytest.raises(ConfigurationError):
            load_config_from_dict({"Kicking": [1, 2]})

    def test_string_booleans(self):
        config = load_config_from_dict({"LogInsteadofKick": "true", "Kicking": {"TradeBan": "no"}})

        assert config.log_instead_of_kick
        assert not config.kicking.trade_ban

    def test_round_trip_through_to_dict_masks_key(self):
        config = load_config_from_dict({"ApiKey": "SECRET"})

        assert config.to_dict()["ApiKey"] == "***"
        assert config.to_dict()["Thresholds"]["MinGameCount"] == 3


class TestLoadConfigFromFile:

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "steamchecks.yaml"
        path.write_text(
            "ApiKey: KEY\n"
            "Thresholds:\n"
            "  MinSteamLevel: 10\n",
            encoding="utf-8",
        )

        config = load_config_from_file(path)

        assert config.api_key == "KEY"
        assert config.thresholds.min_steam_level == 10

    def test_json_file(self, tmp_path):
        path = tmp_path / "SteamChecks.json"
        path.write_text('{"ApiKey": "KEY", "Kicking": {"PrivateProfile": false}}', encoding="utf-8")

        config = load_config_from_file(path)

        assert not config.kicking.private_profile

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_config_from_file(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("ApiKey: [unclosed", encoding="utf-8")

        with pytest.raises(ConfigurationError):
            load_config_from_file(path)


class TestFromEnv:

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("STEAM_API_KEY", "ENVKEY")
        monkeypatch.setenv("STEAM_CHECKS_LOG_ONLY", "1")
        monkeypatch.setenv("STEAM_CHECKS_KICK_MESSAGE", "Bye.")

        config = SteamChecksConfig.from_env(base=SteamChecksConfig(api_key="FILEKEY"))

        assert config.api_key == "ENVKEY"
        assert config.log_instead_of_kick
        assert config.additional_kick_message == "Bye."

    def test_config_file_from_environment(self, monkeypatch, tmp_path):
        path = tmp_path / "steamchecks.yaml"
        path.write_text("ApiKey: FILEKEY\n", encoding="utf-8")
        monkeypatch.setenv("STEAM_CHECKS_CONFIG", str(path))
        monkeypatch.delenv("STEAM_API_KEY", raising=False)
        monkeypatch.delenv("STEAM_CHECKS_LOG_ONLY", raising=False)
        monkeypatch.delenv("STEAM_CHECKS_KICK_MESSAGE", raising=False)

        config = SteamChecksConfig.from_env()

        assert config.api_key == "FILEKEY"


# ============================================================
# STARTUP WARNINGS
# ============================================================

class TestConfigurationWarnings:

    def test_no_warnings_when_private_profiles_kicked(self):
        assert collect_configuration_warnings(SteamChecksConfig(api_key="KEY")) == []

    def test_all_warnings(self):
        config = SteamChecksConfig(
            api_key="KEY",
            kicking=KickingConfig(private_profile=False),
            thresholds=ThresholdConfig(max_account_creation_time=1_500_000_000),
        )

        assert collect_configuration_warnings(config) == [
            "WarningPrivateProfileHours",
            "WarningPrivateProfileGames",
            "WarningPrivateProfileCreationTime",
            "WarningPrivateProfileSteamLevel",
        ]


# ============================================================
# MESSAGES
# ============================================================

class TestMessageCatalog:

    def test_every_reason_has_text(self):
        catalog = MessageCatalog()

        for key in ReasonKey:
            assert key in catalog
            assert catalog.get(key) != key.value

    def test_override(self):
        catalog = MessageCatalog({"KickGameBan": "Game bans are not welcome."})

        assert catalog.get(ReasonKey.GAME_BAN) == "Game bans are not welcome."
        assert catalog.get(ReasonKey.VAC_BAN) == "You have too many VAC bans on record."

    def test_unknown_key_returns_key(self):
        assert MessageCatalog().get("NoSuchKey") == "NoSuchKey"

    def test_kick_message_suffix(self):
        catalog = MessageCatalog()

        assert catalog.kick_message(ReasonKey.GAME_COUNT, "Visit example.com") == (
            "You don't have enough Steam games. Visit example.com"
        )
        assert catalog.kick_message(ReasonKey.GAME_COUNT) == "You don't have enough Steam games."

    def test_format(self):
        assert MessageCatalog().format("Console", "Garry", "private") == "Kicking Garry... (private)"
