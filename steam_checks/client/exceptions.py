"""
Steam Web API Exceptions - Classified failures of profile lookups.

Every failure carries a numeric status code so the pipeline can
report it in one diagnostic channel, whether the transport failed
or the payload had an unexpected shape.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from steam_checks.client.models import StatusCode


class SteamApiError(Exception):
    """Base exception for all Steam Web API failures."""

    default_status_code: int = StatusCode.MALFORMED_RESPONSE

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code if status_code is not None else self.default_status_code
        self.endpoint = endpoint
        self.original_error = original_error
        self.context = context or {}
        self.timestamp = datetime.now(timezone.utc)

    @property
    def status_name(self) -> str:
        return StatusCode.describe(self.status_code)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "status_code": self.status_code,
            "status_name": self.status_name,
            "endpoint": self.endpoint,
            "original_error": str(self.original_error) if self.original_error else None,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def __str__(self) -> str:
        parts = [f"{self.__class__.__name__}: {self.message}"]
        if self.endpoint:
            parts.append(f"[endpoint={self.endpoint}]")
        if self.original_error:
            parts.append(f"(caused by: {self.original_error})")
        return " ".join(parts)


class HttpStatusError(SteamApiError):
    """Upstream answered with a non-200 status. The body is never parsed."""

    def __init__(
        self,
        status_code: int,
        endpoint: Optional[str] = None,
        response_body: Optional[str] = None,
    ) -> None:
        super().__init__(
            f"HTTP {status_code}",
            status_code=status_code,
            endpoint=endpoint,
        )
        self.response_body = response_body

    def is_rate_limited(self) -> bool:
        return self.status_code == StatusCode.TOO_MANY_REQUESTS

    def is_server_error(self) -> bool:
        return 500 <= self.status_code < 600

    def is_client_error(self) -> bool:
        return 400 <= self.status_code < 500


class TransportError(SteamApiError):
    """Connection-level failure (DNS, reset, timeout)."""

    default_status_code = StatusCode.TRANSPORT_ERROR


class PlayerNotFoundError(SteamApiError):
    """A players array did not contain exactly one entry."""

    default_status_code = StatusCode.PLAYER_NOT_FOUND


class GameInfoHiddenError(SteamApiError):
    """
    Owned-games payload lacks game count or the primary game.

    Never escapes the client: fetch_playtime turns it into HiddenPlaytime.
    """

    default_status_code = StatusCode.GAME_INFO_HIDDEN


class MalformedResponseError(SteamApiError):
    """Payload was not JSON or had an unexpected structure."""

    default_status_code = StatusCode.MALFORMED_RESPONSE

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        field_name: Optional[str] = None,
        original_error: Optional[Exception] = None,
    ) -> None:
        super().__init__(
            message,
            endpoint=endpoint,
            original_error=original_error,
            context={"field_name": field_name} if field_name else None,
        )
        self.field_name = field_name
