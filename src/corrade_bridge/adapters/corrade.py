"""Corrade adapter: aiomqtt client for the group's MQTT topic, queue for outbound commands."""

from __future__ import annotations

import asyncio
import contextlib
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote, urlsplit

import aiomqtt
from loguru import logger

from corrade_bridge.adapters.base import AdapterBase
from corrade_bridge.errors import BridgeConfigurationError
from corrade_bridge.events import GroupCommandOut, group_message_in
from corrade_bridge.gateway.bus import SOURCE_CORRADE, Bus
from corrade_bridge.protocol import GroupCredential

# Backoff: min 2s, max 60s, jitter
_BACKOFF_MIN = 2
_BACKOFF_MAX = 60
_MAX_EXPONENT = 10

# URI scheme -> TLS
_SCHEMES = {"mqtt": False, "tcp": False, "mqtts": True, "ssl": True, "tls": True}


@dataclass(frozen=True)
class BrokerAddress:
    """Where and how to reach the Corrade MQTT broker."""

    hostname: str
    port: int
    tls: bool = False
    username: str | None = None
    password: str | None = field(default=None, repr=False)

    def client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {"hostname": self.hostname, "port": self.port}
        if self.username:
            kwargs["username"] = self.username
            kwargs["password"] = self.password
        if self.tls:
            kwargs["tls_params"] = aiomqtt.TLSParameters()
        return kwargs


def parse_broker_uri(uri: str) -> BrokerAddress:
    """Parse mqtt://[user:pass@]host[:port] (mqtts:// for TLS)."""
    parts = urlsplit(uri)
    scheme = parts.scheme.lower()
    if scheme not in _SCHEMES:
        raise BridgeConfigurationError(
            f"Unsupported MQTT URI scheme: {parts.scheme!r}",
            code="mqtt_uri",
            details={"scheme": parts.scheme},
        )
    if not parts.hostname:
        raise BridgeConfigurationError("MQTT URI has no host", code="mqtt_uri")
    try:
        port = parts.port
    except ValueError as exc:
        raise BridgeConfigurationError(f"Invalid MQTT port: {exc}", code="mqtt_uri", original_error=exc) from exc

    tls = _SCHEMES[scheme]
    return BrokerAddress(
        hostname=parts.hostname,
        port=port or (8883 if tls else 1883),
        tls=tls,
        username=unquote(parts.username) if parts.username else None,
        password=unquote(parts.password) if parts.password else None,
    )


def _payload_bytes(payload: object) -> bytes:
    """aiomqtt hands out bytes, bytearray, str, numbers or None."""
    if payload is None:
        return b""
    if isinstance(payload, (bytes, bytearray)):
        return bytes(payload)
    return str(payload).encode("utf-8")


def _backoff_delay(attempt: int) -> float:
    delay = min(_BACKOFF_MAX, _BACKOFF_MIN * (2 ** (min(attempt, _MAX_EXPONENT) - 1)))
    return delay * random.uniform(0.5, 1.5)


async def _connect_with_backoff(session: Callable[[], Awaitable[None]]) -> None:
    """Run session; reconnect with exponential backoff and jitter whenever it ends."""
    attempt = 0
    while True:
        try:
            await session()
            attempt = 0
            wait = _BACKOFF_MIN * random.uniform(0.5, 1.5)
            logger.info("Corrade MQTT connection closed, reconnecting in {:.1f}s", wait)
        except aiomqtt.MqttError as exc:
            attempt += 1
            wait = _backoff_delay(attempt)
            logger.error("Error found while connecting to Corrade MQTT: {}", exc)
            logger.info("Reconnecting to Corrade MQTT server (attempt {}) in {:.1f}s...", attempt, wait)
        except Exception as exc:
            attempt += 1
            wait = _backoff_delay(attempt)
            logger.exception("Corrade MQTT session failed: {}", exc)
            logger.info("Reconnecting to Corrade MQTT server (attempt {}) in {:.1f}s...", attempt, wait)
        await asyncio.sleep(wait)


class CorradeAdapter(AdapterBase):
    """Corrade adapter: group notifications in, tell commands out."""

    outbound = GroupCommandOut

    def __init__(self, bus: Bus, credential: GroupCredential, broker_uri: str) -> None:
        super().__init__(bus)
        self._credential = credential
        self._broker = parse_broker_uri(broker_uri)
        self._client: aiomqtt.Client | None = None
        self._task: asyncio.Task | None = None

    @property
    def name(self) -> str:
        return SOURCE_CORRADE

    @property
    def connected(self) -> bool:
        return self._client is not None

    def _on_message(self, topic: str, payload: object) -> None:
        """Hand an MQTT message to the bus."""
        _, evt = group_message_in(topic, _payload_bytes(payload))
        self._publish(evt)

    async def _session(self) -> None:
        """One broker connection: subscribe, then pump messages until it drops."""
        try:
            async with aiomqtt.Client(**self._broker.client_kwargs()) as client:
                self._client = client
                logger.info(
                    "Connected to Corrade MQTT server {}:{}",
                    self._broker.hostname,
                    self._broker.port,
                )
                try:
                    await client.subscribe(self._credential.topic)
                except aiomqtt.MqttError as exc:
                    logger.error("Error subscribing to Corrade MQTT group messages: {}", exc)
                    raise
                logger.info("Subscribed to Corrade MQTT group messages for {}", self._credential.group_name)

                async for message in client.messages:
                    self._on_message(str(message.topic), message.payload)
        finally:
            self._client = None

    async def _deliver(self, evt: GroupCommandOut) -> None:
        """Publish one command to the broker. Dropped when not connected."""
        client = self._client
        if client is None:
            logger.warning("Not connected to Corrade MQTT; dropping group message")
            return
        try:
            await client.publish(evt.topic, payload=evt.payload)
        except aiomqtt.MqttError as exc:
            logger.error("Failed to publish to Corrade MQTT: {}", exc)

    async def start(self) -> None:
        """Start broker connection loop and queue consumer."""
        self._attach()
        self._task = asyncio.create_task(_connect_with_backoff(self._session))
        logger.info(
            "Corrade MQTT connection started: {}:{} (tls={})",
            self._broker.hostname,
            self._broker.port,
            self._broker.tls,
        )

    async def stop(self) -> None:
        """Stop connection loop and consumer."""
        await self._detach()
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        self._task = None
        self._client = None
