"""Bridge domain exceptions."""

from __future__ import annotations


class BridgeError(Exception):
    """Base for bridge domain errors."""

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: dict[str, object] | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.details = details or {}
        self.original_error = original_error


class BridgeConfigurationError(BridgeError):
    """Config validation or load failure."""


class MalformedPayload(BridgeError):
    """MQTT payload is not a valid key-value notification."""


class ChannelNotFound(BridgeError):
    """No visible Discord channel matches the configured guild and channel."""


class DestinationUnresolved(BridgeError):
    """Group chat arrived before the Discord channel was resolved."""
