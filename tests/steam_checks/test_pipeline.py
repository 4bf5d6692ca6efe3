"""
Evaluation Pipeline Tests.

============================================================
PURPOSE
============================================================
Tests for stage ordering, stage gating and terminal states.

TEST CATEGORIES:
- Scenario tests: end-to-end verdicts for typical accounts
- Gating tests: which lookups run for which configuration
- API error tests: failures abandon the run without a verdict
- Callback tests: check_player scheduling

============================================================
"""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from steam_checks.client import (
    BadgeInfo,
    HiddenPlaytime,
    HiddenPlaytimeCause,
    HttpStatusError,
    PlayerBans,
    PlayerNotFoundError,
    PlayerSummary,
    PlaytimeInformation,
    TransportError,
)
from steam_checks.config import KickingConfig, SteamChecksConfig, ThresholdConfig
from steam_checks.pipeline import EvaluationPipeline, StageFailed
from steam_checks.types import PipelineOutcome, PipelineState, ReasonKey, Stage


STEAMID = "76561197960287930"

CLEAN_BANS = PlayerBans(
    community_banned=False,
    vac_banned=False,
    vac_ban_count=0,
    game_ban_count=0,
    economy_banned=False,
    days_since_last_ban=0,
)
PUBLIC = PlayerSummary(visibility=3, profile_url="https://steamcommunity.com/id/a/", account_created_at=1_000_000_000)
PRIVATE = PlayerSummary(visibility=1, profile_url="https://steamcommunity.com/id/b/")
HIDDEN = HiddenPlaytime(cause=HiddenPlaytimeCause.MISSING_GAME_COUNT)
HIDDEN_CAUSES = [HiddenPlaytimeCause.MISSING_GAME_COUNT, HiddenPlaytimeCause.ZERO_PLAYTIME]


def make_client(
    bans=CLEAN_BANS,
    summary=PUBLIC,
    level=10,
    playtime=None,
    badges=None,
):
    """Client double whose lookups return fixed facts."""
    client = MagicMock()
    client.fetch_bans = AsyncMock(return_value=bans)
    client.fetch_summary = AsyncMock(return_value=summary)
    client.fetch_level = AsyncMock(return_value=level)
    client.fetch_playtime = AsyncMock(
        return_value=playtime or PlaytimeInformation(game_count=5, primary_game_minutes=6000, total_minutes=9000)
    )
    client.fetch_badges = AsyncMock(return_value=badges or BadgeInfo())
    return client


def make_config(kicking=None, **thresholds):
    return SteamChecksConfig(
        api_key="KEY",
        kicking=kicking or KickingConfig(),
        thresholds=ThresholdConfig(**thresholds),
    )


def disabled_thresholds(**overrides):
    values = dict(
        min_steam_level=-1,
        max_account_creation_time=-1,
        min_game_count=-1,
        min_rust_hours_played=-1,
        max_rust_hours_played=-1,
        min_other_games_played=-1,
        min_all_games_hours_played=-1,
    )
    values.update(overrides)
    return values


# ============================================================
# SCENARIO TESTS
# ============================================================

class TestScenarios:
    """End-to-end verdicts."""

    @pytest.mark.asyncio
    async def test_public_account_with_enough_hours_allowed(self):
        config = make_config(min_steam_level=-1, min_rust_hours_played=50)
        client = make_client()

        outcome = await EvaluationPipeline(config, client).run(STEAMID)

        assert outcome.state == PipelineState.ALLOWED
        assert outcome.verdict.allowed
        assert outcome.stages_run == [Stage.BANS, Stage.SUMMARY, Stage.PLAYTIME]
        client.fetch_level.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_private_profile_denied_and_stops(self):
        client = make_client(summary=PRIVATE)

        outcome = await EvaluationPipeline(make_config(), client).run(STEAMID)

        assert outcome.state == PipelineState.DENIED
        assert outcome.reason_key == ReasonKey.PRIVATE_PROFILE
        assert outcome.stages_run == [Stage.BANS, Stage.SUMMARY]
        client.fetch_level.assert_not_awaited()
        client.fetch_playtime.assert_not_awaited()
        client.fetch_badges.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_private_profile_allowed_when_toggle_off(self):
        config = make_config(kicking=KickingConfig(private_profile=False), **disabled_thresholds())
        client = make_client(summary=PRIVATE)

        outcome = await EvaluationPipeline(config, client).run(STEAMID)

        assert outcome.state == PipelineState.ALLOWED
        assert outcome.stages_run == [Stage.BANS, Stage.SUMMARY]

    @pytest.mark.asyncio
    async def test_private_profile_skips_active_thresholds_when_toggle_off(self):
        config = make_config(kicking=KickingConfig(private_profile=False), min_steam_level=50, min_game_count=100)
        client = make_client(summary=PRIVATE)

        outcome = await EvaluationPipeline(config, client).run(STEAMID)

        assert outcome.state == PipelineState.ALLOWED
        client.fetch_level.assert_not_awaited()
        client.fetch_playtime.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("cause", HIDDEN_CAUSES)
    async def test_hidden_hours_denied_when_forced(self, cause):
        config = make_config(kicking=KickingConfig(force_hours_played_kick=True), min_rust_hours_played=10)
        client = make_client(playtime=HiddenPlaytime(cause=cause))

        outcome = await EvaluationPipeline(config, client).run(STEAMID)

        assert outcome.reason_key == ReasonKey.HOURS_PRIVATE
        client.fetch_badges.assert_not_awaited()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("cause", HIDDEN_CAUSES)
    async def test_hidden_hours_allowed_via_badge_fallback(self, cause):
        config = make_config(min_rust_hours_played=10, min_game_count=5)
        client = make_client(playtime=HiddenPlaytime(cause=cause), badges=BadgeInfo(levels={13: 7}))

        outcome = await EvaluationPipeline(config, client).run(STEAMID)

        assert outcome.state == PipelineState.ALLOWED
        assert outcome.stages_run == [Stage.BANS, Stage.SUMMARY, Stage.LEVEL, Stage.PLAYTIME, Stage.BADGES]

    @pytest.mark.asyncio
    async def test_hidden_hours_denied_via_badge_fallback(self):
        config = make_config(min_game_count=5)
        client = make_client(playtime=HIDDEN, badges=BadgeInfo(levels={13: 4}))

        outcome = await EvaluationPipeline(config, client).run(STEAMID)

        assert outcome.reason_key == ReasonKey.GAME_COUNT

    @pytest.mark.asyncio
    async def test_all_thresholds_disabled_allows_clean_public(self):
        config = make_config(**disabled_thresholds())
        client = make_client()

        outcome = await EvaluationPipeline(config, client).run(STEAMID)

        assert outcome.state == PipelineState.ALLOWED
        assert outcome.stages_run == [Stage.BANS, Stage.SUMMARY]


# ============================================================
# GATING TESTS
# ============================================================

class TestStageGating:
    """Tests for which stages run."""

    @pytest.mark.asyncio
    async def test_ban_denial_stops_before_summary(self):
        bans = PlayerBans(
            community_banned=True,
            vac_banned=True,
            vac_ban_count=3,
            game_ban_count=0,
            economy_banned=False,
            days_since_last_ban=10,
        )
        client = make_client(bans=bans)

        outcome = await EvaluationPipeline(make_config(), client).run(STEAMID)

        assert outcome.reason_key == ReasonKey.COMMUNITY_BAN
        assert outcome.stages_run == [Stage.BANS]
        client.fetch_summary.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_vac_flag_with_zero_count_denied_when_none_allowed(self):
        bans = PlayerBans(
            community_banned=False,
            vac_banned=True,
            vac_ban_count=0,
            game_ban_count=0,
            economy_banned=False,
            days_since_last_ban=100,
        )
        client = make_client(bans=bans)

        outcome = await EvaluationPipeline(make_config(max_vac_bans=0), client).run(STEAMID)

        assert outcome.reason_key == ReasonKey.VAC_BAN

    @pytest.mark.asyncio
    async def test_account_age_checked_before_level(self):
        config = make_config(max_account_creation_time=900_000_000, min_steam_level=50)
        client = make_client()

        outcome = await EvaluationPipeline(config, client).run(STEAMID)

        assert outcome.reason_key == ReasonKey.MAX_ACCOUNT_CREATION_TIME
        client.fetch_level.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_level_denial_stops_before_playtime(self):
        client = make_client(level=1)

        outcome = await EvaluationPipeline(make_config(min_steam_level=5), client).run(STEAMID)

        assert outcome.reason_key == ReasonKey.MIN_STEAM_LEVEL
        client.fetch_playtime.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_level_passes_without_playtime_rules_allows(self):
        config = make_config(**disabled_thresholds(min_steam_level=5))
        client = make_client(level=10)

        outcome = await EvaluationPipeline(config, client).run(STEAMID)

        assert outcome.state == PipelineState.ALLOWED
        assert outcome.stages_run == [Stage.BANS, Stage.SUMMARY, Stage.LEVEL]

    @pytest.mark.asyncio
    async def test_hidden_playtime_without_game_count_rule_allows(self):
        config = make_config(**disabled_thresholds(min_rust_hours_played=10))
        client = make_client(playtime=HIDDEN)

        outcome = await EvaluationPipeline(config, client).run(STEAMID)

        assert outcome.state == PipelineState.ALLOWED
        client.fetch_badges.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_visible_playtime_never_fetches_badges(self):
        config = make_config(min_game_count=10)
        client = make_client()

        outcome = await EvaluationPipeline(config, client).run(STEAMID)

        assert outcome.reason_key == ReasonKey.GAME_COUNT
        client.fetch_badges.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_lookups_receive_identity(self):
        client = make_client()

        await EvaluationPipeline(make_config(), client).run(STEAMID)

        client.fetch_bans.assert_awaited_once_with(STEAMID)
        client.fetch_summary.assert_awaited_once_with(STEAMID)


# ============================================================
# API ERROR TESTS
# ============================================================

class TestApiErrors:
    """Tests for abandoned runs."""

    @pytest.mark.asyncio
    async def test_http_error_in_bans(self, caplog):
        client = make_client()
        client.fetch_bans = AsyncMock(side_effect=HttpStatusError(403, "GetPlayerBans/v1"))

        with caplog.at_level(logging.WARNING):
            outcome = await EvaluationPipeline(make_config(), client).run(STEAMID)

        assert outcome.state == PipelineState.API_ERROR
        assert outcome.verdict is None
        assert outcome.api_error.stage == Stage.BANS
        assert outcome.api_error.status_code == 403
        assert (
            f"Error while contacting the SteamAPI. Error:  SteamID: {STEAMID} - "
            f"Function: GetPlayerBans - ErrorCode: FORBIDDEN."
        ) in caplog.text
        client.fetch_summary.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_player_not_found_in_summary(self):
        client = make_client()
        client.fetch_summary = AsyncMock(side_effect=PlayerNotFoundError("no players"))

        outcome = await EvaluationPipeline(make_config(), client).run(STEAMID)

        assert outcome.state == PipelineState.API_ERROR
        assert outcome.api_error.status_name == "PLAYER_NOT_FOUND"
        assert outcome.api_error.function_name == "GetSteamPlayerSummaries"

    @pytest.mark.asyncio
    async def test_transport_error_in_badges(self):
        config = make_config(min_game_count=5)
        client = make_client(playtime=HIDDEN)
        client.fetch_badges = AsyncMock(side_effect=TransportError("timeout"))

        outcome = await EvaluationPipeline(config, client).run(STEAMID)

        assert outcome.state == PipelineState.API_ERROR
        assert outcome.api_error.stage == Stage.BADGES
        assert outcome.api_error.status_code == -103

    @pytest.mark.asyncio
    async def test_stage_failure_keeps_original_error(self):
        error = HttpStatusError(503, "GetPlayerBans/v1")
        pipeline = EvaluationPipeline(make_config(), make_client())
        outcome = PipelineOutcome(identity=STEAMID, state=PipelineState.ALLOWED)

        with pytest.raises(StageFailed) as exc_info:
            await pipeline._fetch(Stage.BANS, STEAMID, outcome, AsyncMock(side_effect=error))

        assert exc_info.value.__cause__ is error
        assert exc_info.value.record.status_code == 503
        assert outcome.stages_run == [Stage.BANS]


# ============================================================
# CALLBACK TESTS
# ============================================================

class TestCheckPlayer:

    @pytest.mark.asyncio
    async def test_callback_receives_verdict(self):
        callback = MagicMock()
        client = make_client(summary=PRIVATE)

        task = EvaluationPipeline(make_config(), client).check_player(STEAMID, callback)
        outcome = await task

        assert isinstance(task, asyncio.Task)
        assert outcome.state == PipelineState.DENIED
        callback.assert_called_once_with(False, ReasonKey.PRIVATE_PROFILE)

    @pytest.mark.asyncio
    async def test_callback_not_called_on_api_error(self):
        callback = MagicMock()
        client = make_client()
        client.fetch_bans = AsyncMock(side_effect=TransportError("down"))

        await EvaluationPipeline(make_config(), client).check_player(STEAMID, callback)

        callback.assert_not_called()

    @pytest.mark.asyncio
    async def test_concurrent_evaluations_are_independent(self):
        client = make_client()
        pipeline = EvaluationPipeline(make_config(), client)

        outcomes = await asyncio.gather(*(pipeline.run(str(i)) for i in range(5)))

        assert all(outcome.state == PipelineState.ALLOWED for outcome in outcomes)
        assert sorted(outcome.identity for outcome in outcomes) == ["0", "1", "2", "3", "4"]
        assert client.fetch_bans.await_count == 5
