"""
Steam Checks.

============================================================
THE ADMISSION GATE
============================================================

Decides, once per connecting player, whether a Steam account
may stay on the server, based on public Steam Web API data:
bans, profile visibility, account age, Steam level,
playtime and number of games owned.

============================================================
DECISION FLOW
============================================================

Player connects → ADMISSION GATE → Membership Cache
                        ↓
               Evaluation Pipeline → Steam Web API
                        ↓
              ADMIT / KICK / LOG_ONLY

============================================================
FAIL-OPEN BEHAVIOR
============================================================

- No API key → every player is admitted
- Any Web API failure → player is admitted, nothing cached

An unreachable Steam API never locks players out.

============================================================
USAGE
============================================================

```python
from steam_checks import AdmissionGate, SteamChecksConfig

config = SteamChecksConfig.from_env()
gate = AdmissionGate(config, connection=my_server_connection)

# From the server's connect hook
gate.on_user_connected(steamid, display_name)

# Or awaited directly
decision = await gate.evaluate(steamid, display_name)
if decision.is_kicked:
    print(decision.message)
```

============================================================
"""

from .types import (
    AdmissionAction,
    AdmissionDecision,
    ApiErrorRecord,
    CacheStatus,
    ConfigurationError,
    DecisionSource,
    PipelineOutcome,
    PipelineState,
    ReasonKey,
    Stage,
    SteamChecksError,
    Verdict,
)
from .config import (
    ApiConfig,
    KickingConfig,
    SteamChecksConfig,
    ThresholdConfig,
    collect_configuration_warnings,
    get_default_config,
    load_config_from_dict,
    load_config_from_file,
)
from .messages import DEFAULT_MESSAGES, MessageCatalog
from .client import SteamApiError, SteamWebApiClient
from .pipeline import EvaluationPipeline
from .cache import MembershipCache
from .collaborators import (
    SKIP_PERMISSION,
    LoggingPlayerConnection,
    PermissionProvider,
    PlayerConnection,
    StaticPermissionProvider,
)
from .gate import AdmissionGate
from .diagnostics import DiagnosticEntry, check_identity, run_api_diagnostics


__version__ = "1.0.0"

__all__ = [
    # Types
    "AdmissionAction",
    "AdmissionDecision",
    "ApiErrorRecord",
    "CacheStatus",
    "DecisionSource",
    "PipelineOutcome",
    "PipelineState",
    "ReasonKey",
    "Stage",
    "Verdict",
    # Errors
    "SteamChecksError",
    "ConfigurationError",
    "SteamApiError",
    # Config
    "ApiConfig",
    "KickingConfig",
    "SteamChecksConfig",
    "ThresholdConfig",
    "collect_configuration_warnings",
    "get_default_config",
    "load_config_from_dict",
    "load_config_from_file",
    # Messages
    "DEFAULT_MESSAGES",
    "MessageCatalog",
    # Components
    "SteamWebApiClient",
    "EvaluationPipeline",
    "MembershipCache",
    "AdmissionGate",
    # Host collaborators
    "SKIP_PERMISSION",
    "PermissionProvider",
    "PlayerConnection",
    "StaticPermissionProvider",
    "LoggingPlayerConnection",
    # Diagnostics
    "DiagnosticEntry",
    "check_identity",
    "run_api_diagnostics",
    "__version__",
]
