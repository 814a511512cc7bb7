"""Transport adapters. Each implements base.AdapterBase."""

from corrade_bridge.adapters.base import AdapterBase
from corrade_bridge.adapters.corrade import CorradeAdapter
from corrade_bridge.adapters.disc import DiscordAdapter

__all__ = ["AdapterBase", "CorradeAdapter", "DiscordAdapter"]
