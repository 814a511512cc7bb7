"""Relay: wires both relay directions to the bus around one channel handle."""

from __future__ import annotations

from corrade_bridge.gateway.bus import Bus
from corrade_bridge.gateway.channel import ChannelHandle, ChannelResolver, RelayTarget
from corrade_bridge.gateway.inbound import GroupToDiscord
from corrade_bridge.gateway.outbound import DiscordToGroup
from corrade_bridge.protocol import GroupCredential


class Relay:
    """Owns the Discord channel handle; no adapter-to-adapter coupling."""

    def __init__(self, bus: Bus, credential: GroupCredential, target: RelayTarget) -> None:
        self._bus = bus
        self.channel = ChannelHandle()
        self.resolver = ChannelResolver(target, self.channel)
        self.group_to_discord = GroupToDiscord(bus, credential, self.channel)
        self.discord_to_group = DiscordToGroup(bus, credential, target, self.channel)

    def register(self) -> None:
        """Subscribe both directions to the bus."""
        self._bus.register(self.group_to_discord)
        self._bus.register(self.discord_to_group)

    def unregister(self) -> None:
        self._bus.unregister(self.group_to_discord)
        self._bus.unregister(self.discord_to_group)
