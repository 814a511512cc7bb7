"""Origin markers appended to relayed names, and the echo-loop pattern.

Discord messages land in the group as ``Name#1234 [Discord]: text``. Corrade
then broadcasts them back to every group member, the bridge included, so any
group line of that shape is one of ours and must not travel to Discord again.
The reply format and the pattern are built from the same marker and change
together.
"""

from __future__ import annotations

import re

DISCORD_MARKER = "[Discord]"
GROUP_MARKER = "[SL]"

DISCORD_REPLY_FORMAT = "{name}#{discriminator} " + DISCORD_MARKER + ": {content}"
GROUP_MESSAGE_FORMAT = "{firstname} {lastname} " + GROUP_MARKER + ": {message}"

ECHO_LOOP_PATTERN = re.compile(
    r"^.+?#[0-9]+? " + re.escape(DISCORD_MARKER) + r":.+?$",
    re.MULTILINE,
)


def is_relayed_from_discord(message: str) -> bool:
    """True if any line of message looks like a Discord relay line."""
    return ECHO_LOOP_PATTERN.search(message) is not None
