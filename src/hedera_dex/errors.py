"""Exception types raised by the DEX plugin.

Every error carries a short machine-readable ``reason`` tag next to the
human-readable message so that actions can report failures without leaking
tracebacks to the end user.
"""

from typing import List


class HederaDexError(Exception):
    """Base exception for the Hedera DEX plugin."""

    reason = "HEDERA_DEX_ERROR"

    def __init__(self, message: str, reason: str | None = None):
        super().__init__(message)
        self.message = message
        if reason is not None:
            self.reason = reason


class ConfigurationError(HederaDexError):
    """Raised for unsupported networks or missing contract mappings."""

    reason = "CONFIGURATION_ERROR"


class MirrorNodeError(HederaDexError):
    """Raised when the mirror node cannot be reached or answers garbage."""

    reason = "MIRROR_NODE_UNAVAILABLE"


class PoolNotFoundError(HederaDexError):
    """Raised when no pool matches a requested token pair."""

    reason = "POOL_NOT_FOUND"

    def __init__(self, token_pair: str, available_symbols: List[str]):
        shown = ", ".join(available_symbols[:20])
        if len(available_symbols) > 20:
            shown += "..."
        super().__init__(
            f"No pools found for {token_pair}. Available tokens: {shown or 'none'}"
        )
        self.token_pair = token_pair
        self.available_symbols = available_symbols


class MessageParseError(HederaDexError):
    """Raised when a chat message does not carry the expected parameters."""

    reason = "INVALID_REQUEST"
