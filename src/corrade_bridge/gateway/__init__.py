"""Gateway: event bus, channel resolution, relay filters."""

from corrade_bridge.gateway.bus import Bus
from corrade_bridge.gateway.channel import ChannelHandle, ChannelResolver, RelayTarget
from corrade_bridge.gateway.inbound import GroupToDiscord
from corrade_bridge.gateway.outbound import DiscordToGroup
from corrade_bridge.gateway.relay import Relay

__all__ = [
    "Bus",
    "ChannelHandle",
    "ChannelResolver",
    "DiscordToGroup",
    "GroupToDiscord",
    "Relay",
    "RelayTarget",
]
