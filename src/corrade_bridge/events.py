"""Event types and dispatcher: typed events, central dispatcher."""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from typing import Any, Protocol


@dataclass
class GroupMessageIn:
    """Raw MQTT message received from Corrade."""

    topic: str
    payload: bytes


@dataclass
class DiscordMessageIn:
    """Message posted in Discord, as seen by the bot."""

    author_name: str
    author_discriminator: str
    author_is_bot: bool
    channel_id: str
    guild_name: str
    channel_type: str
    content: str
    attachment_urls: list[str] = field(default_factory=list)


@dataclass
class DiscordMessageOut:
    """Text to be posted to a Discord channel."""

    channel_id: str
    content: str


@dataclass
class GroupCommandOut:
    """Encoded Corrade command to publish on MQTT."""

    topic: str
    payload: str


class EventTarget(Protocol):
    """Target interface: accept_event + push_event."""

    def accept_event(self, source: str, evt: object) -> bool:
        """Return True if this target wants the event."""
        ...

    def push_event(self, source: str, evt: object) -> None:
        """Handle the event (may be async via queue)."""
        ...


def event(type_name: str):
    """Decorator to mark a factory as producing an event with a given type."""

    def decorator(f: Any) -> Any:
        @functools.wraps(f)
        def wrapper(*args: Any, **kwargs: Any) -> tuple[str, object]:
            evt = f(*args, **kwargs)
            return (type_name, evt)

        wrapper.TYPE = type_name
        return wrapper

    return decorator


@event("group_message_in")
def group_message_in(topic: str, payload: bytes | str) -> GroupMessageIn:
    if isinstance(payload, str):
        payload = payload.encode("utf-8")
    return GroupMessageIn(topic=topic, payload=bytes(payload))


@event("discord_message_in")
def discord_message_in(
    author_name: str,
    author_discriminator: str,
    channel_id: str,
    guild_name: str,
    content: str,
    *,
    author_is_bot: bool = False,
    channel_type: str = "text",
    attachment_urls: list[str] | None = None,
) -> DiscordMessageIn:
    return DiscordMessageIn(
        author_name=author_name,
        author_discriminator=author_discriminator,
        author_is_bot=author_is_bot,
        channel_id=channel_id,
        guild_name=guild_name,
        channel_type=channel_type,
        content=content,
        attachment_urls=list(attachment_urls or []),
    )


@event("discord_message_out")
def discord_message_out(channel_id: str, content: str) -> DiscordMessageOut:
    return DiscordMessageOut(channel_id=channel_id, content=content)


@event("group_command_out")
def group_command_out(topic: str, payload: str) -> GroupCommandOut:
    return GroupCommandOut(topic=topic, payload=payload)


class Dispatcher:
    """Central event dispatcher; targets filter by type and receive events."""

    def __init__(self) -> None:
        self._targets: list[EventTarget] = []

    def register(self, target: EventTarget) -> None:
        """Register an event target (filter or adapter)."""
        self._targets.append(target)

    def unregister(self, target: EventTarget) -> None:
        """Unregister an event target."""
        if target in self._targets:
            self._targets.remove(target)

    def dispatch(self, source: str, evt: object) -> None:
        """Dispatch event to all targets that accept it."""
        from loguru import logger

        for target in list(self._targets):
            try:
                if target.accept_event(source, evt):
                    target.push_event(source, evt)
            except Exception as exc:
                logger.exception("Failed to pass event to target {}: {}", target, exc)
