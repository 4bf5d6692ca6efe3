"""
Steam Checks - Type Definitions.

============================================================
PURPOSE
============================================================
Shared types for the admission pipeline.

The pipeline answers one question per connecting player:
may this Steam account join the server?

============================================================
DESIGN PRINCIPLES
============================================================
1. Binary verdicts only: ALLOW or DENY
2. A denial always carries exactly one reason key
3. An API failure is NOT a verdict
4. Reason keys are stable; display text lives elsewhere

============================================================
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


def utc_now() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


# ============================================================
# REASON KEYS
# ============================================================

class ReasonKey(str, Enum):
    """
    Stable identifiers for every denial cause.

    The values double as message catalog keys.
    """

    COMMUNITY_BAN = "KickCommunityBan"
    TRADE_BAN = "KickTradeBan"
    GAME_BAN = "KickGameBan"
    VAC_BAN = "KickVacBan"
    PRIVATE_PROFILE = "KickPrivateProfile"
    MAX_ACCOUNT_CREATION_TIME = "KickMaxAccountCreationTime"
    MIN_STEAM_LEVEL = "KickMinSteamLevel"
    MIN_RUST_HOURS_PLAYED = "KickMinRustHoursPlayed"
    MAX_RUST_HOURS_PLAYED = "KickMaxRustHoursPlayed"
    MIN_STEAM_HOURS_PLAYED = "KickMinSteamHoursPlayed"
    MIN_NON_RUST_PLAYED = "KickMinNonRustPlayed"
    GAME_COUNT = "KickGameCount"
    HOURS_PRIVATE = "KickHoursPrivate"

    GENERIC = "KickGeneric"
    """Used only when a cached failure is replayed."""


# ============================================================
# VERDICT
# ============================================================

@dataclass(frozen=True)
class Verdict:
    """
    Terminal output of the evaluation pipeline.

    Invariant: allowed <=> reason_key is None.
    """

    allowed: bool
    reason_key: Optional[ReasonKey] = None

    def __post_init__(self) -> None:
        if self.allowed and self.reason_key is not None:
            raise ValueError("An allowed verdict cannot carry a reason key")
        if not self.allowed and self.reason_key is None:
            raise ValueError("A denied verdict requires a reason key")

    @classmethod
    def allow(cls) -> "Verdict":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason_key: ReasonKey) -> "Verdict":
        return cls(allowed=False, reason_key=reason_key)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "allowed": self.allowed,
            "reason_key": self.reason_key.value if self.reason_key else None,
        }


# ============================================================
# PIPELINE STAGES
# ============================================================

class Stage(str, Enum):
    """
    Ordered steps of the evaluation pipeline.

    Each stage is tied to one remote fact.
    """

    BANS = "BANS"
    SUMMARY = "SUMMARY"
    LEVEL = "LEVEL"
    PLAYTIME = "PLAYTIME"
    BADGES = "BADGES"

    @property
    def function_name(self) -> str:
        """Name of the Web API function behind this stage."""
        return _STAGE_FUNCTIONS[self]


_STAGE_FUNCTIONS = {
    Stage.BANS: "GetPlayerBans",
    Stage.SUMMARY: "GetSteamPlayerSummaries",
    Stage.LEVEL: "GetSteamLevel",
    Stage.PLAYTIME: "GetPlaytimeInformation",
    Stage.BADGES: "GetSteamBadges",
}


class PipelineState(str, Enum):
    """Terminal states of one pipeline run."""

    ALLOWED = "ALLOWED"
    DENIED = "DENIED"
    API_ERROR = "API_ERROR"
    """No verdict. The evaluation was abandoned."""


@dataclass(frozen=True)
class ApiErrorRecord:
    """
    Diagnostic record for an abandoned evaluation.

    Operator-facing only; never shown to the player.
    """

    identity: str
    stage: Stage
    status_code: int
    status_name: str
    message: str = ""

    @property
    def function_name(self) -> str:
        return self.stage.function_name

    def format_detail(self) -> str:
        """Format the detail part of the operator warning."""
        return (
            f" SteamID: {self.identity} - Function: {self.function_name}"
            f" - ErrorCode: {self.status_name}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "identity": self.identity,
            "stage": self.stage.value,
            "function": self.function_name,
            "status_code": self.status_code,
            "status_name": self.status_name,
            "message": self.message,
        }


@dataclass
class PipelineOutcome:
    """
    Result of one pipeline run.

    Exactly one of verdict / api_error is set.
    """

    identity: str
    state: PipelineState
    verdict: Optional[Verdict] = None
    api_error: Optional[ApiErrorRecord] = None
    stages_run: List[Stage] = field(default_factory=list)
    started_at: datetime = field(default_factory=utc_now)
    duration_ms: float = 0.0

    @property
    def has_verdict(self) -> bool:
        return self.verdict is not None

    @property
    def reason_key(self) -> Optional[ReasonKey]:
        return self.verdict.reason_key if self.verdict else None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "identity": self.identity,
            "state": self.state.value,
            "verdict": self.verdict.to_dict() if self.verdict else None,
            "api_error": self.api_error.to_dict() if self.api_error else None,
            "stages_run": [stage.value for stage in self.stages_run],
            "started_at": self.started_at.isoformat(),
            "duration_ms": self.duration_ms,
        }


# ============================================================
# ADMISSION OUTPUT
# ============================================================

class CacheStatus(str, Enum):
    """Membership cache lookup result."""

    UNKNOWN = "UNKNOWN"
    PREVIOUSLY_PASSED = "PREVIOUSLY_PASSED"
    PREVIOUSLY_FAILED = "PREVIOUSLY_FAILED"


class AdmissionAction(str, Enum):
    """
    Final action applied to a connecting player.
    """

    ADMIT = "ADMIT"
    """Player stays connected."""

    KICK = "KICK"
    """Player is excluded with a message."""

    LOG_ONLY = "LOG_ONLY"
    """Player would have been excluded; only logged."""


class DecisionSource(str, Enum):
    """What produced an admission decision."""

    DISABLED = "DISABLED"
    BYPASS = "BYPASS"
    CACHE_PASSED = "CACHE_PASSED"
    CACHE_FAILED = "CACHE_FAILED"
    PIPELINE = "PIPELINE"
    API_ERROR = "API_ERROR"


@dataclass
class AdmissionDecision:
    """
    Output of the admission gate for one connection.
    """

    identity: str
    display_name: str
    action: AdmissionAction
    source: DecisionSource
    verdict: Optional[Verdict] = None
    reason_key: Optional[ReasonKey] = None
    message: Optional[str] = None
    """Kick message shown (or that would be shown) to the player."""

    api_error: Optional[ApiErrorRecord] = None
    decided_at: datetime = field(default_factory=utc_now)

    @property
    def is_kicked(self) -> bool:
        return self.action == AdmissionAction.KICK

    def format_summary(self) -> str:
        """Format a one-line, human-readable summary."""
        who = f"{self.display_name} / {self.identity}"
        if self.action == AdmissionAction.ADMIT:
            return f"ADMIT | {who} | {self.source.value}"
        reason = self.reason_key.value if self.reason_key else "UNKNOWN"
        return f"{self.action.value} | {who} | Reason: {reason}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "identity": self.identity,
            "display_name": self.display_name,
            "action": self.action.value,
            "source": self.source.value,
            "verdict": self.verdict.to_dict() if self.verdict else None,
            "reason_key": self.reason_key.value if self.reason_key else None,
            "message": self.message,
            "api_error": self.api_error.to_dict() if self.api_error else None,
            "decided_at": self.decided_at.isoformat(),
        }


# ============================================================
# ERROR TYPES
# ============================================================

class SteamChecksError(Exception):
    """Base exception for Steam Checks errors."""
    pass


class ConfigurationError(SteamChecksError):
    """Raised when configuration cannot be loaded."""
    pass
