"""Message formatting for relaying between the group chat and Discord."""

from corrade_bridge.formatting.discord_to_group import build_message_content, discord_to_group
from corrade_bridge.formatting.group_to_discord import group_to_discord
from corrade_bridge.formatting.markers import ECHO_LOOP_PATTERN, is_relayed_from_discord

__all__ = [
    "ECHO_LOOP_PATTERN",
    "build_message_content",
    "discord_to_group",
    "group_to_discord",
    "is_relayed_from_discord",
]
