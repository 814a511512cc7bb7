"""Corrade group protocol: credentials, MQTT topic and key-value codec.

Corrade exchanges notifications and commands as URL query strings, e.g.::

    type=group&group=MyGroup&firstname=Jane&lastname=Doe&message=hello

Commands sent back use the same encoding with a fixed key order.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from urllib.parse import parse_qsl, quote, urlencode

from corrade_bridge.errors import MalformedPayload

GROUP_ENTITY = "group"
GROUP_NOTIFICATION = "group"
TELL_COMMAND = "tell"


@dataclass(frozen=True)
class GroupCredential:
    """Group name and shared password used by Corrade."""

    group_name: str
    password: str = field(repr=False)

    @property
    def topic(self) -> str:
        """MQTT topic for group messages. Used to subscribe and to publish."""
        return f"{self.group_name}/{self.password}/{GROUP_ENTITY}"


def encode(fields: Iterable[tuple[str, str]]) -> str:
    """Encode ordered key-value pairs; everything but unreserved chars is escaped."""
    return urlencode(list(fields), quote_via=quote, safe="")


def decode(payload: bytes | str) -> dict[str, str]:
    """Decode a key-value payload.

    Empty fields are skipped and a field without '=' decodes to an empty value.
    Raise MalformedPayload when the bytes or a percent escape are not UTF-8, or a key repeats.
    """
    if isinstance(payload, (bytes, bytearray)):
        try:
            payload = bytes(payload).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedPayload("Payload is not UTF-8", original_error=exc) from exc

    text = payload.strip()
    if not text:
        return {}

    try:
        pairs = parse_qsl(
            text,
            keep_blank_values=True,
            errors="strict",
        )
    except ValueError as exc:
        raise MalformedPayload(f"Invalid key-value payload: {exc}", original_error=exc) from exc

    result: dict[str, str] = {}
    for key, value in pairs:
        if key in result:
            raise MalformedPayload(f"Duplicate key in payload: {key}", details={"key": key})
        result[key] = value
    return result


@dataclass(frozen=True)
class GroupNotification:
    """Group message notification published by Corrade. Unknown keys are dropped."""

    type: str | None
    group: str | None
    firstname: str | None
    lastname: str | None
    message: str | None

    @classmethod
    def from_payload(cls, payload: bytes | str) -> GroupNotification:
        data = decode(payload)
        return cls(
            type=data.get("type"),
            group=data.get("group"),
            firstname=data.get("firstname"),
            lastname=data.get("lastname"),
            message=data.get("message"),
        )


@dataclass(frozen=True)
class RelayedCommand:
    """Command sent to Corrade over MQTT."""

    command: str
    group: str
    password: str = field(repr=False)
    entity: str
    message: str

    @classmethod
    def tell(cls, credential: GroupCredential, message: str) -> RelayedCommand:
        """Build a 'tell' command that says message in the group chat."""
        return cls(
            command=TELL_COMMAND,
            group=credential.group_name,
            password=credential.password,
            entity=GROUP_ENTITY,
            message=message,
        )

    def encode(self) -> str:
        """Payload for the group topic, keys in the order Corrade expects."""
        return encode(
            [
                ("command", self.command),
                ("group", self.group),
                ("password", self.password),
                ("entity", self.entity),
                ("message", self.message),
            ]
        )
