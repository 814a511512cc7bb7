"""Event bus shared by the relay filters and both transports.

Events carry the name of whoever published them: ``corrade`` for MQTT
payloads, ``discord`` for channel messages and ``relay`` for filtered output
on its way to a transport.
"""

from __future__ import annotations

from loguru import logger

from corrade_bridge.events import Dispatcher, EventTarget

__all__ = ["SOURCE_CORRADE", "SOURCE_DISCORD", "SOURCE_RELAY", "Bus", "EventTarget"]

SOURCE_CORRADE = "corrade"
SOURCE_DISCORD = "discord"
SOURCE_RELAY = "relay"


def _describe(target: EventTarget) -> str:
    return getattr(target, "name", None) or type(target).__name__


class Bus:
    """Carries raw transport events to the relay and relayed text back out."""

    def __init__(self) -> None:
        self._dispatcher = Dispatcher()

    def register(self, target: EventTarget) -> None:
        self._dispatcher.register(target)
        logger.debug("Bus target attached: {}", _describe(target))

    def unregister(self, target: EventTarget) -> None:
        self._dispatcher.unregister(target)
        logger.debug("Bus target detached: {}", _describe(target))

    def publish(self, source: str, evt: object) -> None:
        """Hand evt to every target that accepts it, in registration order."""
        self._dispatcher.dispatch(source, evt)
