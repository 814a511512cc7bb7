"""Format group chat notifications for Discord."""

from __future__ import annotations

from corrade_bridge.formatting.markers import GROUP_MESSAGE_FORMAT


def group_to_discord(firstname: str | None, lastname: str | None, message: str) -> str:
    """Prefix message with the avatar's legacy name and the group marker."""
    return GROUP_MESSAGE_FORMAT.format(
        firstname=firstname or "",
        lastname=lastname or "",
        message=message,
    )
