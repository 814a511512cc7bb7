"""Discord adapter: discord.py client, channel resolution on ready, queue for outbound."""

from __future__ import annotations

import asyncio
import contextlib

import discord
from discord import AllowedMentions, Intents, LoginFailure, Message, TextChannel
from loguru import logger

from corrade_bridge.adapters.base import AdapterBase
from corrade_bridge.events import DiscordMessageIn, DiscordMessageOut, discord_message_in
from corrade_bridge.gateway.bus import SOURCE_DISCORD, Bus
from corrade_bridge.gateway.channel import ChannelResolver

# Discord rejects longer messages
MAX_MESSAGE_LEN = 2000


def message_to_event(message: Message) -> DiscordMessageIn:
    """Flatten a discord.py message into the fields the relay filters on."""
    channel = message.channel
    guild = getattr(channel, "guild", None)
    _, evt = discord_message_in(
        author_name=message.author.name,
        author_discriminator=str(message.author.discriminator),
        channel_id=str(channel.id),
        guild_name=guild.name if guild is not None else "",
        content=message.content or "",
        author_is_bot=bool(message.author.bot),
        channel_type=str(channel.type),
        attachment_urls=[attachment.url for attachment in message.attachments],
    )
    return evt


class DiscordAdapter(AdapterBase):
    """Discord adapter: receives channel messages, sends relayed group chat with a queue."""

    outbound = DiscordMessageOut

    def __init__(self, bus: Bus, resolver: ChannelResolver, token: str | None = None) -> None:
        super().__init__(bus)
        self._resolver = resolver
        self._token = token
        self._client: discord.Client | None = None
        self._client_task: asyncio.Task | None = None

    @property
    def name(self) -> str:
        return SOURCE_DISCORD

    async def _deliver(self, evt: DiscordMessageOut) -> None:
        """Send one message to its channel. Failures are logged, never retried."""
        client = self._client
        if not client:
            logger.warning("Discord client not running; dropping message")
            return

        channel = client.get_channel(int(evt.channel_id))
        if not channel or not isinstance(channel, TextChannel):
            logger.warning("Discord channel {} not found or not a text channel", evt.channel_id)
            return

        try:
            await channel.send(
                content=evt.content[:MAX_MESSAGE_LEN],
                allowed_mentions=AllowedMentions.none(),
            )
        except discord.HTTPException as exc:
            logger.error("Failed to send message to Discord channel {}: {}", evt.channel_id, exc)

    def _on_ready(self) -> None:
        """Resolve the relay channel among everything the bot can see."""
        client = self._client
        if not client:
            return
        logger.info("Connected to Discord as {}", client.user)
        self._resolver.resolve(client.get_all_channels())

    def _on_message(self, message: Message) -> None:
        """Publish every message to the bus; the relay decides what to forward."""
        self._publish(message_to_event(message))

    async def _run_client(self, client: discord.Client, token: str) -> None:
        """Login, then stay connected. A failed login leaves the bridge inert."""
        try:
            await client.login(token)
        except LoginFailure as exc:
            logger.error("Failed to login to Discord: {}", exc)
            return
        except Exception as exc:
            logger.exception("Failed to login to Discord: {}", exc)
            return
        logger.info("Logged-in to Discord.")

        try:
            await client.connect(reconnect=True)
        except Exception as exc:
            logger.exception("Discord connection closed: {}", exc)

    async def start(self) -> None:
        """Start Discord client and queue consumer."""
        if not self._token:
            logger.warning("Discord bot key not set; Discord adapter disabled")
            return

        intents = Intents.default()
        intents.message_content = True
        intents.guilds = True

        client = discord.Client(intents=intents, allowed_mentions=AllowedMentions.none())

        @client.event
        async def on_ready() -> None:
            self._on_ready()

        @client.event
        async def on_message(message: Message) -> None:
            self._on_message(message)

        @client.event
        async def on_disconnect() -> None:
            logger.warning("Disconnected from Discord, reconnecting...")

        @client.event
        async def on_resumed() -> None:
            logger.info("Discord session resumed")

        @client.event
        async def on_error(event_method: str, *args: object, **kwargs: object) -> None:
            logger.exception("Error occurred in Discord event {}", event_method)

        self._client = client
        self._attach()
        self._client_task = asyncio.create_task(self._run_client(client, self._token))

    async def stop(self) -> None:
        """Stop Discord client and consumer."""
        await self._detach()
        if self._client:
            await self._client.close()
        if self._client_task:
            self._client_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._client_task
        self._client = None
        self._client_task = None
