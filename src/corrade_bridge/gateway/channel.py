"""Destination channel: the resolved Discord channel id and its resolver."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from loguru import logger

from corrade_bridge.errors import ChannelNotFound


@dataclass(frozen=True)
class RelayTarget:
    """Configured Discord guild and channel names."""

    guild_name: str
    channel_name: str


class ChannelHandle:
    """Discord channel id, written once and read by both relay directions."""

    def __init__(self) -> None:
        self._channel_id: str | None = None

    @property
    def channel_id(self) -> str | None:
        return self._channel_id

    @property
    def resolved(self) -> bool:
        return self._channel_id is not None

    def set(self, channel_id: str) -> bool:
        """Store channel_id. Return False, leaving the handle unchanged, if already set."""
        if self._channel_id is not None:
            return False
        self._channel_id = str(channel_id)
        return True

    def __repr__(self) -> str:
        return f"ChannelHandle({self._channel_id!r})"


def find_channel(channels: Iterable[Any], target: RelayTarget) -> Any:
    """First channel named target.channel_name inside guild target.guild_name."""
    for channel in channels:
        guild = getattr(channel, "guild", None)
        if (
            getattr(channel, "name", None) == target.channel_name
            and guild is not None
            and getattr(guild, "name", None) == target.guild_name
        ):
            return channel
    raise ChannelNotFound(
        f"Channel {target.channel_name!r} not found in guild {target.guild_name!r}",
        details={"guild": target.guild_name, "channel": target.channel_name},
    )


class ChannelResolver:
    """Resolves the configured channel once the Discord client is ready."""

    def __init__(self, target: RelayTarget, handle: ChannelHandle) -> None:
        self._target = target
        self._handle = handle

    @property
    def target(self) -> RelayTarget:
        return self._target

    def resolve(self, channels: Iterable[Any]) -> str | None:
        """Look up the channel among channels and store its id.

        Idempotent: once the handle holds an id later calls return it unchanged.
        When nothing matches the error is logged and None returned; the bridge
        then relays nothing until a later ready event finds the channel.
        """
        if self._handle.resolved:
            logger.debug("Discord channel already resolved: {}", self._handle.channel_id)
            return self._handle.channel_id

        try:
            channel = find_channel(channels, self._target)
        except ChannelNotFound as exc:
            logger.error("The channel could not be found on Discord: {}", exc)
            return None

        self._handle.set(str(channel.id))
        logger.info(
            "Discord channel ID retrieved successfully: #{} ({}) in {}",
            self._target.channel_name,
            self._handle.channel_id,
            self._target.guild_name,
        )
        return self._handle.channel_id
