"""Bridge entrypoint. Loads config, wires the relay, starts the Corrade and Discord adapters."""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import sys
from pathlib import Path

from loguru import logger

from corrade_bridge import __version__
from corrade_bridge.adapters.corrade import CorradeAdapter, parse_broker_uri
from corrade_bridge.adapters.disc import DiscordAdapter
from corrade_bridge.config import Config
from corrade_bridge.errors import BridgeConfigurationError
from corrade_bridge.gateway import Bus, Relay


def setup_logging(verbose: bool = False) -> None:
    """Configure loguru. Replace default logging."""
    logger.remove()
    logger.add(
        sys.stderr,
        level="DEBUG" if verbose else "INFO",
        format=(
            "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
            "<cyan>{name}</cyan> | {message}"
        ),
    )


def add_file_sink(path: str | Path, verbose: bool = False) -> None:
    """Append plain-text log lines to path; parent directories are created."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        path,
        level="DEBUG" if verbose else "INFO",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name} | {message}",
        mode="a",
        encoding="utf-8",
    )


def main() -> None:
    """Main entrypoint."""
    parser = argparse.ArgumentParser(
        description="Corrade Bridge — Second Life group chat to Discord channel relay"
    )
    parser.add_argument(
        "--config",
        "-c",
        type=Path,
        default=Path("config.yml"),
        help="Path to config file (default: config.yml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    args = parser.parse_args()

    setup_logging(args.verbose)

    if not args.config.exists():
        logger.error("Config file not found: {}", args.config)
        sys.exit(1)

    config = Config.from_file(args.config)
    if config.log_file:
        add_file_sink(config.log_file, args.verbose)
    logger.info("Config loaded from {}", args.config)

    try:
        config.validate()
        parse_broker_uri(config.corrade_mqtt)
        credential = config.credential()
        target = config.relay_target()
    except BridgeConfigurationError as exc:
        logger.error("Invalid configuration: {}", exc)
        sys.exit(1)

    bus = Bus()
    relay = Relay(bus, credential, target)
    relay.register()

    logger.info(
        "Bridge ready — group {} <-> #{} in {}",
        credential.group_name,
        target.channel_name,
        target.guild_name,
    )

    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_run(bus, relay, config))


async def _run(bus: Bus, relay: Relay, config: Config) -> None:
    """Async run loop. Start adapters and wait."""
    corrade_adapter = CorradeAdapter(bus, config.credential(), config.corrade_mqtt)
    discord_adapter = DiscordAdapter(bus, relay.resolver, token=config.discord_bot_key)
    adapters = [corrade_adapter, discord_adapter]
    await corrade_adapter.start()
    await discord_adapter.start()

    try:
        while True:
            await asyncio.sleep(60)
    except asyncio.CancelledError:
        logger.info("Bridge shutting down")
        for adapter in adapters:
            await adapter.stop()


if __name__ == "__main__":
    main()
