"""
Steam Checks - Evaluation Pipeline.

============================================================
PURPOSE
============================================================
Runs the remote lookups for one player in order and feeds
each fact to its policy.

============================================================
STAGES
============================================================
1. BANS      - always
2. SUMMARY   - visibility, then account age
3. LEVEL     - only if a level threshold is active
4. PLAYTIME  - only if any playtime/count threshold is active
5. BADGES    - only when playtime is hidden and a game-count
               threshold is active

Each stage starts only after the previous one finished and
did not end the evaluation. Stages never run in parallel:
later lookups depend on earlier facts.

============================================================
TERMINAL STATES
============================================================
- ALLOWED:   verdict allow
- DENIED:    verdict deny with exactly one reason key
- API_ERROR: no verdict; the failing stage and status code
             are logged for the operator

============================================================
"""

import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional, TypeVar, Union

from .client import (
    BadgeInfo,
    HiddenPlaytime,
    PlayerBans,
    PlayerSummary,
    PlaytimeInformation,
    SteamApiError,
    SteamWebApiClient,
)
from .config import SteamChecksConfig
from .messages import MessageCatalog
from .policy import (
    AccountAgePolicy,
    BanPolicy,
    GameCountPolicy,
    HiddenPlaytimePolicy,
    LevelPolicy,
    PlaytimePolicy,
    PolicyOutcome,
    PolicyResult,
    VisibilityPolicy,
)
from .types import (
    ApiErrorRecord,
    PipelineOutcome,
    PipelineState,
    ReasonKey,
    Stage,
    Verdict,
)


logger = logging.getLogger(__name__)

T = TypeVar("T")

VerdictCallback = Callable[[bool, Optional[ReasonKey]], None]


class StageFailed(Exception):
    """Internal signal: a remote lookup failed and the run is abandoned."""

    def __init__(self, record: ApiErrorRecord):
        super().__init__(record.format_detail())
        self.record = record


class EvaluationPipeline:
    """
    The admission decision pipeline.

    Usage:
        pipeline = EvaluationPipeline(config, client)
        outcome = await pipeline.run(steamid)

        if outcome.state == PipelineState.DENIED:
            print(outcome.verdict.reason_key)
    """

    def __init__(
        self,
        config: SteamChecksConfig,
        client: SteamWebApiClient,
        messages: Optional[MessageCatalog] = None,
    ):
        self._config = config
        self._client = client
        self._messages = messages or MessageCatalog(config.messages)

        self._ban_policy = BanPolicy(config)
        self._visibility_policy = VisibilityPolicy(config)
        self._account_age_policy = AccountAgePolicy(config)
        self._level_policy = LevelPolicy(config)
        self._playtime_policy = PlaytimePolicy(config)
        self._hidden_playtime_policy = HiddenPlaytimePolicy(config)
        self._game_count_policy = GameCountPolicy(config)

    @property
    def config(self) -> SteamChecksConfig:
        return self._config

    async def run(self, identity: str) -> PipelineOutcome:
        """
        Evaluate one identity.

        Never raises for upstream failures; those end in API_ERROR.
        """
        start_time = time.perf_counter()
        outcome = PipelineOutcome(identity=identity, state=PipelineState.ALLOWED)

        try:
            verdict = await self._evaluate(identity, outcome)
        except StageFailed as e:
            outcome.state = PipelineState.API_ERROR
            outcome.api_error = e.record
            logger.warning(self._messages.format("ErrorHttp", e.record.format_detail()))
        else:
            outcome.verdict = verdict
            outcome.state = PipelineState.ALLOWED if verdict.allowed else PipelineState.DENIED

        outcome.duration_ms = (time.perf_counter() - start_time) * 1000
        logger.debug(
            f"Pipeline for {identity} ended {outcome.state.value} after "
            f"{[stage.value for stage in outcome.stages_run]} in {outcome.duration_ms:.1f}ms"
        )
        return outcome

    def check_player(
        self,
        identity: str,
        callback: VerdictCallback,
    ) -> "asyncio.Task[PipelineOutcome]":
        """
        Schedule an evaluation and return immediately.

        The callback receives (allowed, reason_key) once a verdict
        exists. It is not called when the run ends in API_ERROR.
        """
        async def _run() -> PipelineOutcome:
            outcome = await self.run(identity)
            if outcome.verdict is not None:
                callback(outcome.verdict.allowed, outcome.verdict.reason_key)
            return outcome

        return asyncio.create_task(_run())

    # --------------------------------------------------------
    # Stages
    # --------------------------------------------------------

    async def _evaluate(self, identity: str, outcome: PipelineOutcome) -> Verdict:
        # Stage 1: bans are visible even on private profiles
        bans: PlayerBans = await self._fetch(Stage.BANS, identity, outcome, self._client.fetch_bans)
        result = self._ban_policy.check(bans)
        if result.is_terminal:
            return self._to_verdict(result)

        # Stage 2: visibility, then account age
        summary: PlayerSummary = await self._fetch(Stage.SUMMARY, identity, outcome, self._client.fetch_summary)
        for policy in (self._visibility_policy, self._account_age_policy):
            result = policy.check(summary)
            if result.is_terminal:
                return self._to_verdict(result)

        thresholds = self._config.thresholds

        # Stage 3: level, only reached for public profiles
        if thresholds.level_check_enabled:
            level: int = await self._fetch(Stage.LEVEL, identity, outcome, self._client.fetch_level)
            result = self._level_policy.check(level)
            if result.is_terminal:
                return self._to_verdict(result)

        # Stage 4: playtime and game count
        if thresholds.playtime_stage_enabled:
            return await self._evaluate_playtime(identity, outcome)

        return Verdict.allow()

    async def _evaluate_playtime(self, identity: str, outcome: PipelineOutcome) -> Verdict:
        playtime: Union[PlaytimeInformation, HiddenPlaytime] = await self._fetch(
            Stage.PLAYTIME, identity, outcome, self._client.fetch_playtime
        )

        if isinstance(playtime, PlaytimeInformation):
            return self._to_verdict(self._playtime_policy.check(playtime))

        result = self._hidden_playtime_policy.check(playtime)
        if result.is_terminal:
            return self._to_verdict(result)

        # Stage 5: game count from badges when the list is hidden
        if self._config.thresholds.game_count_check_enabled:
            badges: BadgeInfo = await self._fetch(Stage.BADGES, identity, outcome, self._client.fetch_badges)
            return self._to_verdict(self._game_count_policy.check(badges))

        return Verdict.allow()

    async def _fetch(
        self,
        stage: Stage,
        identity: str,
        outcome: PipelineOutcome,
        lookup: Callable[[str], Awaitable[T]],
    ) -> T:
        outcome.stages_run.append(stage)
        try:
            return await lookup(identity)
        except SteamApiError as e:
            raise StageFailed(
                ApiErrorRecord(
                    identity=identity,
                    stage=stage,
                    status_code=int(e.status_code),
                    status_name=e.status_name,
                    message=e.message,
                )
            ) from e

    @staticmethod
    def _to_verdict(result: PolicyResult) -> Verdict:
        if result.outcome == PolicyOutcome.DENY:
            return Verdict.deny(result.reason_key)
        return Verdict.allow()
