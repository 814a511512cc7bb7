"""Group chat -> Discord: filter Corrade notifications and format them for Discord."""

from __future__ import annotations

from loguru import logger

from corrade_bridge.errors import DestinationUnresolved, MalformedPayload
from corrade_bridge.events import GroupMessageIn, discord_message_out
from corrade_bridge.formatting import group_to_discord, is_relayed_from_discord
from corrade_bridge.gateway.bus import SOURCE_RELAY, Bus
from corrade_bridge.gateway.channel import ChannelHandle
from corrade_bridge.protocol import GROUP_NOTIFICATION, GroupCredential, GroupNotification


class GroupToDiscord:
    """Relays group chat notifications to the Discord channel."""

    def __init__(self, bus: Bus, credential: GroupCredential, channel: ChannelHandle) -> None:
        self._bus = bus
        self._group = credential.group_name.casefold()
        self._channel = channel

    def accept_event(self, source: str, evt: object) -> bool:
        return isinstance(evt, GroupMessageIn)

    def push_event(self, source: str, evt: object) -> None:
        if isinstance(evt, GroupMessageIn):
            self.handle(evt.payload)

    def handle(self, payload: bytes | str) -> bool:
        """Filter one MQTT payload; publish it for Discord if it passes. Return True if sent."""
        try:
            notification = GroupNotification.from_payload(payload)
        except MalformedPayload as exc:
            logger.debug("Ignoring malformed Corrade payload: {}", exc)
            return False

        if notification.type != GROUP_NOTIFICATION:
            return False

        if notification.group is None or notification.group.casefold() != self._group:
            return False

        if notification.message is None:
            return False

        # Our own Discord relays coming back from the group broadcast.
        if is_relayed_from_discord(notification.message):
            return False

        if not self._channel.resolved:
            exc = DestinationUnresolved(
                "Message received from Corrade but Discord channel could not be retrieved.",
                details={"group": notification.group},
            )
            logger.error("Dropping group message: {}", exc)
            return False

        content = group_to_discord(notification.firstname, notification.lastname, notification.message)
        _, out_evt = discord_message_out(channel_id=self._channel.channel_id, content=content)
        self._bus.publish(SOURCE_RELAY, out_evt)
        return True
