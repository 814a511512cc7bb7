"""Transport adapter base: bus registration and an ordered outbound queue."""

from __future__ import annotations

import asyncio
import contextlib
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from loguru import logger

from corrade_bridge.gateway.bus import Bus


class AdapterBase(ABC):
    """One transport. Publishes what it receives; delivers its outbound events one at a time.

    Subclasses set ``outbound`` to the event type they deliver and implement
    ``_deliver``. Delivery failures are logged and the next event is taken.
    """

    outbound: ClassVar[type]

    def __init__(self, bus: Bus) -> None:
        self._bus = bus
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._consumer_task: asyncio.Task | None = None

    @property
    @abstractmethod
    def name(self) -> str:
        """Bus source name ('corrade' or 'discord')."""
        ...

    def accept_event(self, source: str, evt: object) -> bool:
        return isinstance(evt, self.outbound)

    def push_event(self, source: str, evt: object) -> None:
        if isinstance(evt, self.outbound):
            self._queue.put_nowait(evt)

    def _publish(self, evt: object) -> None:
        self._bus.publish(self.name, evt)

    @abstractmethod
    async def _deliver(self, evt: Any) -> None:
        """Send one outbound event. No retry."""
        ...

    async def _queue_consumer(self) -> None:
        """Pop outbound events and deliver them in arrival order."""
        while True:
            try:
                evt = await self._queue.get()
                await self._deliver(evt)
            except asyncio.CancelledError:
                break
            except Exception as exc:
                logger.exception("{} delivery failed: {}", self.name, exc)

    def _attach(self) -> None:
        """Register on the bus and start draining the outbound queue."""
        self._bus.register(self)
        self._consumer_task = asyncio.create_task(self._queue_consumer())

    async def _detach(self) -> None:
        self._bus.unregister(self)
        if self._consumer_task:
            self._consumer_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._consumer_task
        self._consumer_task = None

    @abstractmethod
    async def start(self) -> None:
        ...

    @abstractmethod
    async def stop(self) -> None:
        ...
