"""
Steam Checks - Message Catalog.

Maps reason, warning and error keys to display text.
The pipeline only deals in keys; text is resolved here.
"""

from typing import Dict, Mapping, Optional, Union

from .types import ReasonKey


DEFAULT_MESSAGES: Dict[str, str] = {
    "Console": "Kicking {0}... ({1})",

    "ErrorAPIConfig": (
        "The API key you supplied in the config is empty.. "
        "register one here https://steamcommunity.com/dev/apikey"
    ),
    "WarningPrivateProfileHours": (
        "**** WARNING: Private profile-kick is off. "
        "However a option to kick for minimim amount of hours is on."
    ),
    "WarningPrivateProfileGames": (
        "**** WARNING: Private profile-kick is off. "
        "However the option to kick for minimim amount of games is on (MinGameCount)."
    ),
    "WarningPrivateProfileCreationTime": (
        "**** WARNING: Private profile-kick is off. "
        "However the option to kick for account age is on (MinAccountCreationTime)."
    ),
    "WarningPrivateProfileSteamLevel": (
        "**** WARNING: Private profile-kick is off. "
        "However the option to kick for steam level is on (MinSteamLevel)."
    ),

    "ErrorHttp": "Error while contacting the SteamAPI. Error: {0}.",

    ReasonKey.COMMUNITY_BAN.value: "You have a Steam Community ban on record.",
    ReasonKey.VAC_BAN.value: "You have too many VAC bans on record.",
    ReasonKey.GAME_BAN.value: "You have too many Game bans on record.",
    ReasonKey.TRADE_BAN.value: "You have a Steam Trade ban on record.",
    ReasonKey.PRIVATE_PROFILE.value: "Your Steam profile state is set to private.",
    ReasonKey.MIN_STEAM_LEVEL.value: "Your Steam level is not high enough.",
    ReasonKey.MIN_RUST_HOURS_PLAYED.value: "You haven't played enough hours.",
    ReasonKey.MAX_RUST_HOURS_PLAYED.value: "You have played too much Rust.",
    ReasonKey.MIN_STEAM_HOURS_PLAYED.value: "You didn't play enough Steam games (hours).",
    ReasonKey.MIN_NON_RUST_PLAYED.value: "You didn't play enough Steam games besides Rust (hours).",
    ReasonKey.HOURS_PRIVATE.value: "Your Steam profile is public, but the hours you played is hidden'.",
    ReasonKey.GAME_COUNT.value: "You don't have enough Steam games.",
    ReasonKey.MAX_ACCOUNT_CREATION_TIME.value: "Your Steam account is too new.",

    ReasonKey.GENERIC.value: "Your Steam account fails our test.",
}


class MessageCatalog:
    """
    Resolves message keys to text, with per-server overrides.

    Unknown keys resolve to the key itself.
    """

    def __init__(self, overrides: Optional[Mapping[str, str]] = None):
        self._messages: Dict[str, str] = dict(DEFAULT_MESSAGES)
        if overrides:
            self._messages.update(overrides)

    def get(self, key: Union[str, ReasonKey]) -> str:
        if isinstance(key, ReasonKey):
            key = key.value
        return self._messages.get(key, key)

    def format(self, key: Union[str, ReasonKey], *args: object) -> str:
        return self.get(key).format(*args)

    def kick_message(self, reason_key: ReasonKey, suffix: str = "") -> str:
        """Reason text followed by the configured suffix."""
        text = self.get(reason_key)
        return f"{text} {suffix}" if suffix else text

    def __contains__(self, key: object) -> bool:
        if isinstance(key, ReasonKey):
            key = key.value
        return key in self._messages
