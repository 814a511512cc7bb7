"""Discord -> group chat: filter Discord messages and turn them into Corrade commands."""

from __future__ import annotations

from loguru import logger

from corrade_bridge.events import DiscordMessageIn, group_command_out
from corrade_bridge.formatting import build_message_content, discord_to_group
from corrade_bridge.gateway.bus import SOURCE_RELAY, Bus
from corrade_bridge.gateway.channel import ChannelHandle, RelayTarget
from corrade_bridge.protocol import GroupCredential, RelayedCommand

TEXT_CHANNEL = "text"


class DiscordToGroup:
    """Relays Discord channel messages to the group chat via Corrade."""

    def __init__(
        self,
        bus: Bus,
        credential: GroupCredential,
        target: RelayTarget,
        channel: ChannelHandle,
    ) -> None:
        self._bus = bus
        self._credential = credential
        self._target = target
        self._channel = channel

    def accept_event(self, source: str, evt: object) -> bool:
        return isinstance(evt, DiscordMessageIn)

    def push_event(self, source: str, evt: object) -> None:
        if isinstance(evt, DiscordMessageIn):
            self.handle(evt)

    def handle(self, message: DiscordMessageIn) -> bool:
        """Filter one Discord message; publish a tell command if it passes. Return True if sent."""
        # Bots include the bridge itself.
        if message.author_is_bot:
            return False

        message_content = build_message_content(message.content, message.attachment_urls)
        if not message_content.strip():
            return False

        if message.channel_id != self._channel.channel_id:
            return False

        if message.guild_name != self._target.guild_name:
            return False

        if message.channel_type != TEXT_CHANNEL:
            return False

        reply = discord_to_group(message.author_name, message.author_discriminator, message_content)
        command = RelayedCommand.tell(self._credential, reply)
        _, out_evt = group_command_out(topic=self._credential.topic, payload=command.encode())
        logger.debug("Relaying Discord message from {} to group", message.author_name)
        self._bus.publish(SOURCE_RELAY, out_evt)
        return True
