"""
Steam Checks - Admission Gate.

============================================================
PURPOSE
============================================================
Entry point called once per connecting player, before the
player is fully active on the server.

============================================================
DECISION FLOW
============================================================
1. No API key           -> ADMIT (subsystem disabled)
2. Bypass permission    -> ADMIT
3. Cache (kick mode)    -> ADMIT if passed before,
                           KICK (generic reason) if failed before
4. Evaluation pipeline  -> ADMIT / KICK / LOG_ONLY
   API error            -> ADMIT, nothing cached

============================================================
OUTPUT
============================================================
- ADMIT:    player stays
- KICK:     player is removed with the first violated reason
            plus the configured suffix
- LOG_ONLY: player would have been removed; only logged

============================================================
"""

import asyncio
import logging
from typing import Any, Dict, Optional, Set

from .cache import MembershipCache
from .client import SteamWebApiClient
from .collaborators import (
    SKIP_PERMISSION,
    LoggingPlayerConnection,
    PermissionProvider,
    PlayerConnection,
    StaticPermissionProvider,
)
from .config import SteamChecksConfig, log_configuration_warnings
from .messages import MessageCatalog
from .pipeline import EvaluationPipeline
from .types import (
    AdmissionAction,
    AdmissionDecision,
    CacheStatus,
    DecisionSource,
    PipelineState,
    ReasonKey,
)


logger = logging.getLogger(__name__)


class AdmissionGate:
    """
    Admits or removes connecting players.

    Usage:
        gate = AdmissionGate(config, client)
        gate.on_user_connected(steamid, name)      # from a sync hook
        decision = await gate.evaluate(steamid, name)
    """

    def __init__(
        self,
        config: SteamChecksConfig,
        client: Optional[SteamWebApiClient] = None,
        cache: Optional[MembershipCache] = None,
        permissions: Optional[PermissionProvider] = None,
        connection: Optional[PlayerConnection] = None,
        messages: Optional[MessageCatalog] = None,
        pipeline: Optional[EvaluationPipeline] = None,
    ):
        """
        Initialize the gate.

        Args:
            config: Loaded configuration snapshot
            client: Web API client (built from config if None)
            cache: Membership cache (built from config if None)
            permissions: Whitelist lookup (empty whitelist if None)
            connection: Kick hook (logging-only if None)
            messages: Message catalog (defaults plus config overrides)
            pipeline: Evaluation pipeline (built from the above if None)
        """
        self._config = config
        self._messages = messages or MessageCatalog(config.messages)
        self._client = client or SteamWebApiClient.from_config(config)
        self._cache = cache or MembershipCache.from_config(config)
        self._permissions = permissions or StaticPermissionProvider()
        self._connection = connection or LoggingPlayerConnection()
        self._pipeline = pipeline or EvaluationPipeline(config, self._client, self._messages)
        self._pending: Set["asyncio.Task[AdmissionDecision]"] = set()

        self._stats: Dict[str, int] = {action.value: 0 for action in AdmissionAction}
        self._stats["api_errors"] = 0

        self.startup_warnings = log_configuration_warnings(config, self._messages)
        logger.info(f"AdmissionGate initialized (enabled={config.enabled})")

    @property
    def config(self) -> SteamChecksConfig:
        return self._config

    @property
    def cache(self) -> MembershipCache:
        return self._cache

    @property
    def pipeline(self) -> EvaluationPipeline:
        return self._pipeline

    def reset(self) -> None:
        """Forget all cached results, as on a plugin reload."""
        self._cache.reset()

    async def close(self) -> None:
        """Wait for in-flight evaluations and close the client."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        await self._client.close()

    # --------------------------------------------------------
    # Entry points
    # --------------------------------------------------------

    def on_user_connected(
        self,
        identity: str,
        display_name: str,
    ) -> "asyncio.Task[AdmissionDecision]":
        """
        Connection hook. Schedules the evaluation and returns at once.
        """
        task = asyncio.create_task(self.evaluate(identity, display_name))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def evaluate(
        self,
        identity: str,
        display_name: str,
    ) -> AdmissionDecision:
        """
        Decide what happens to one connecting player.

        Args:
            identity: SteamID64
            display_name: Name shown in logs

        Returns:
            AdmissionDecision describing the action taken
        """
        who = f"{display_name} / {identity}"

        if not self._config.enabled:
            return self._record(AdmissionDecision(
                identity=identity,
                display_name=display_name,
                action=AdmissionAction.ADMIT,
                source=DecisionSource.DISABLED,
            ))

        if self._permissions.has_bypass_permission(identity):
            logger.info(f"{who} in whitelist (via permission {SKIP_PERMISSION})")
            return self._record(AdmissionDecision(
                identity=identity,
                display_name=display_name,
                action=AdmissionAction.ADMIT,
                source=DecisionSource.BYPASS,
            ))

        # Log-only mode always re-evaluates so every run shows up in the log
        if not self._config.log_instead_of_kick:
            cached = await self._apply_cached(identity, display_name)
            if cached is not None:
                return cached

        outcome = await self._pipeline.run(identity)

        if outcome.state == PipelineState.API_ERROR:
            return self._record(AdmissionDecision(
                identity=identity,
                display_name=display_name,
                action=AdmissionAction.ADMIT,
                source=DecisionSource.API_ERROR,
                api_error=outcome.api_error,
            ))

        verdict = outcome.verdict
        if verdict.allowed:
            logger.info(f"{who} passed all checks")
            self._cache.record_pass(identity)
            return self._record(AdmissionDecision(
                identity=identity,
                display_name=display_name,
                action=AdmissionAction.ADMIT,
                source=DecisionSource.PIPELINE,
                verdict=verdict,
            ))

        message = self._messages.kick_message(verdict.reason_key, self._config.additional_kick_message)

        if self._config.log_instead_of_kick:
            logger.info(f"{who} would have been kicked. Reason: {self._messages.get(verdict.reason_key)}")
            return self._record(AdmissionDecision(
                identity=identity,
                display_name=display_name,
                action=AdmissionAction.LOG_ONLY,
                source=DecisionSource.PIPELINE,
                verdict=verdict,
                reason_key=verdict.reason_key,
                message=message,
            ))

        logger.info(f"{who} kicked. Reason: {self._messages.get(verdict.reason_key)}")
        logger.info(self._messages.format("Console", who, verdict.reason_key.value))
        self._cache.record_fail(identity)
        await self._kick(identity, message)
        return self._record(AdmissionDecision(
            identity=identity,
            display_name=display_name,
            action=AdmissionAction.KICK,
            source=DecisionSource.PIPELINE,
            verdict=verdict,
            reason_key=verdict.reason_key,
            message=message,
        ))

    # --------------------------------------------------------
    # Internals
    # --------------------------------------------------------

    async def _apply_cached(
        self,
        identity: str,
        display_name: str,
    ) -> Optional[AdmissionDecision]:
        who = f"{display_name} / {identity}"
        status = self._cache.lookup(identity)

        if status == CacheStatus.PREVIOUSLY_PASSED:
            logger.info(f"{who} passed all checks already previously")
            return self._record(AdmissionDecision(
                identity=identity,
                display_name=display_name,
                action=AdmissionAction.ADMIT,
                source=DecisionSource.CACHE_PASSED,
            ))

        if status == CacheStatus.PREVIOUSLY_FAILED:
            logger.info(f"{who} failed a check already previously")
            message = self._messages.kick_message(ReasonKey.GENERIC, self._config.additional_kick_message)
            await self._kick(identity, message)
            return self._record(AdmissionDecision(
                identity=identity,
                display_name=display_name,
                action=AdmissionAction.KICK,
                source=DecisionSource.CACHE_FAILED,
                reason_key=ReasonKey.GENERIC,
                message=message,
            ))

        return None

    async def _kick(self, identity: str, message: str) -> None:
        try:
            await self._connection.kick(identity, message)
        except Exception:
            logger.error(f"Kicking {identity} failed", exc_info=True)
            raise

    def _record(self, decision: AdmissionDecision) -> AdmissionDecision:
        self._stats[decision.action.value] += 1
        if decision.source == DecisionSource.API_ERROR:
            self._stats["api_errors"] += 1
        logger.debug(decision.format_summary())
        return decision

    def get_stats(self) -> Dict[str, Any]:
        """Decision counters and cache sizes."""
        return {
            "decisions": dict(self._stats),
            "cache": self._cache.stats(),
            "client": self._client.get_stats(),
        }
