"""
Steam Checks - Operator Diagnostics.

Two operator commands:
- run_api_diagnostics: calls every Web API lookup for one identity
  and reports status and parsed result per function
- check_identity: runs the full pipeline for one identity, without
  caching or kicking, and reports whether it would pass
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Tuple

from .client import (
    BadgeInfo,
    HiddenPlaytime,
    StatusCode,
    SteamApiError,
    SteamWebApiClient,
)
from .messages import MessageCatalog
from .pipeline import EvaluationPipeline
from .types import PipelineState, Stage


logger = logging.getLogger(__name__)


GAMES_OWNED_FUNCTION = "GetSteamBadges - Badge 13, Games owned"


@dataclass(frozen=True)
class DiagnosticEntry:
    """One line of the lookup report."""
    function: str
    status_name: str
    result: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status_name == StatusCode.SUCCESS.name

    def format(self) -> str:
        if self.result is None:
            return f"{self.function} - Status {self.status_name}"
        return f"{self.function} - Status {self.status_name} - Response {self.result}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "function": self.function,
            "status": self.status_name,
            "result": self.result,
        }


async def _probe(
    stage: Stage,
    lookup: Callable[[str], Awaitable[Any]],
    identity: str,
) -> Tuple[DiagnosticEntry, Any]:
    try:
        value = await lookup(identity)
    except SteamApiError as e:
        logger.debug(f"{stage.function_name} failed for {identity}: {e}")
        return DiagnosticEntry(stage.function_name, e.status_name), None

    if isinstance(value, HiddenPlaytime):
        return DiagnosticEntry(stage.function_name, StatusCode.GAME_INFO_HIDDEN.name, str(value)), value
    return DiagnosticEntry(stage.function_name, StatusCode.SUCCESS.name, str(value)), value


async def run_api_diagnostics(
    client: SteamWebApiClient,
    identity: str,
) -> List[DiagnosticEntry]:
    """
    Call all five lookups for one identity.

    The lookups are independent of each other here and run
    concurrently. A failing lookup does not stop the others.

    Returns:
        One entry per function, plus the games-owned badge level
        when the badge lookup succeeded
    """
    lookups = [
        (Stage.LEVEL, client.fetch_level),
        (Stage.PLAYTIME, client.fetch_playtime),
        (Stage.SUMMARY, client.fetch_summary),
        (Stage.BADGES, client.fetch_badges),
        (Stage.BANS, client.fetch_bans),
    ]
    probes = await asyncio.gather(*(_probe(stage, lookup, identity) for stage, lookup in lookups))

    entries: List[DiagnosticEntry] = []
    for (stage, _), (entry, value) in zip(lookups, probes):
        if stage == Stage.BADGES and isinstance(value, BadgeInfo):
            entries.append(DiagnosticEntry(stage.function_name, entry.status_name, str(value.to_dict())))
            entries.append(DiagnosticEntry(
                GAMES_OWNED_FUNCTION,
                entry.status_name,
                str(value.level_of(client.games_owned_badge_id)),
            ))
        else:
            entries.append(entry)
    return entries


async def check_identity(
    pipeline: EvaluationPipeline,
    identity: str,
    messages: Optional[MessageCatalog] = None,
) -> str:
    """
    Report whether an identity would pass, the same way a join is judged.

    Nothing is cached and nobody is kicked.
    """
    messages = messages or MessageCatalog(pipeline.config.messages)
    outcome = await pipeline.run(identity)

    if outcome.state == PipelineState.API_ERROR:
        return messages.format("ErrorHttp", outcome.api_error.format_detail())
    if outcome.verdict.allowed:
        return "The player would pass the checks"
    return f"The player would not pass the checks. Reason: {messages.get(outcome.verdict.reason_key)}"
