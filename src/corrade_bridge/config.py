"""Configuration: YAML + env overlay."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

from corrade_bridge.errors import BridgeConfigurationError
from corrade_bridge.gateway.channel import RelayTarget
from corrade_bridge.protocol import GroupCredential

DEFAULT_LOG_FILE = "log/corrade-group-discord-bridge.log"

# Environment variable -> dotted config key
ENV_OVERRIDES: dict[str, str] = {
    "CORRADE_MQTT": "corrade.mqtt",
    "CORRADE_GROUP": "corrade.group",
    "CORRADE_PASSWORD": "corrade.password",
    "DISCORD_TOKEN": "discord.botKey",
    "DISCORD_SERVER": "discord.server",
    "DISCORD_CHANNEL": "discord.channel",
    "BRIDGE_LOG_FILE": "log_file",
}


def _deep_update(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base."""
    result = dict(base)
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_update(result[key], value)
        else:
            result[key] = value
    return result


def _env_overlay(environ: dict[str, str]) -> dict[str, Any]:
    """Nested dict of config values set through the environment."""
    overlay: dict[str, Any] = {}
    for var, dotted in ENV_OVERRIDES.items():
        value = environ.get(var)
        if not value:
            continue
        node = overlay
        *parents, leaf = dotted.split(".")
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value
    return overlay


def load_config(path: str | Path) -> dict[str, Any]:
    """Load config from YAML file. Use SafeLoader. Returns raw dict."""
    path = Path(path)
    if not path.exists():
        return {}

    with open(path) as f:
        data = yaml.safe_load(f)
    return data if isinstance(data, dict) else {}


def load_config_with_env(path: str | Path) -> dict[str, Any]:
    """Load config from YAML and overlay env-derived values.

    Loads .env via python-dotenv when present; variables listed in
    ENV_OVERRIDES win over the file.
    """
    from dotenv import load_dotenv

    load_dotenv()
    return _deep_update(load_config(path), _env_overlay(dict(os.environ)))


class Config:
    """Read-only view of the merged bridge settings."""

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data = data or {}

    @classmethod
    def from_file(cls, path: str | Path) -> Config:
        """Load path, then .env and the environment on top. Loaded once at startup."""
        return cls(load_config_with_env(path))

    def get(self, key: str, default: Any = None) -> Any:
        """Get value by dot-separated path (e.g. 'corrade.group')."""
        parts = key.split(".")
        obj: Any = self._data
        for part in parts:
            if isinstance(obj, dict) and part in obj:
                obj = obj[part]
            else:
                return default
        return obj

    def _str(self, key: str) -> str:
        value = self.get(key)
        return "" if value is None else str(value)

    @property
    def corrade_mqtt(self) -> str:
        """Corrade MQTT broker URI."""
        return self._str("corrade.mqtt")

    @property
    def corrade_group(self) -> str:
        return self._str("corrade.group")

    @property
    def corrade_password(self) -> str:
        return self._str("corrade.password")

    @property
    def discord_bot_key(self) -> str:
        return self._str("discord.botKey")

    @property
    def discord_server(self) -> str:
        """Discord guild name."""
        return self._str("discord.server")

    @property
    def discord_channel(self) -> str:
        return self._str("discord.channel")

    @property
    def log_file(self) -> str:
        """Append-only log file; empty string disables it."""
        value = self.get("log_file", DEFAULT_LOG_FILE)
        return "" if value is None else str(value)

    def _require(self, *keys: str) -> None:
        missing = [key for key in keys if not self._str(key)]
        if missing:
            raise BridgeConfigurationError(
                f"Missing config keys: {', '.join(missing)}",
                code="missing_keys",
                details={"missing": missing},
            )

    def credential(self) -> GroupCredential:
        """Corrade group credentials."""
        self._require("corrade.group", "corrade.password")
        return GroupCredential(group_name=self.corrade_group, password=self.corrade_password)

    def relay_target(self) -> RelayTarget:
        """Discord guild and channel to relay into."""
        self._require("discord.server", "discord.channel")
        return RelayTarget(guild_name=self.discord_server, channel_name=self.discord_channel)

    def validate(self) -> None:
        """Raise BridgeConfigurationError unless every required key is set."""
        self._require(
            "corrade.mqtt",
            "corrade.group",
            "corrade.password",
            "discord.server",
            "discord.channel",
        )

