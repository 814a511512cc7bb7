"""Format Discord messages for the group chat."""

from __future__ import annotations

from collections.abc import Sequence

from corrade_bridge.formatting.markers import DISCORD_REPLY_FORMAT


def build_message_content(content: str, attachment_urls: Sequence[str]) -> str:
    """Append attachment URLs to the text, space separated, in attachment order.

    The group chat has no attachments, so links are the only way to share media.
    """
    message_content = content or ""
    for url in attachment_urls:
        message_content = f"{message_content} {url}"
    return message_content


def discord_to_group(author_name: str, discriminator: str, message_content: str) -> str:
    """Prefix message_content with the Discord tag and marker.

    Anyone can type a line of this shape themselves; the echo-loop filter will
    then drop it on its way back, and the group sees a forged origin.
    TODO: escape user text that already matches the echo-loop pattern.
    """
    return DISCORD_REPLY_FORMAT.format(
        name=author_name,
        discriminator=discriminator,
        content=message_content.strip(),
    )
