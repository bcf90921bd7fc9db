"""
In-process publish/subscribe channel for GraphQL subscriptions.

Mutations publish newly created books on the ``BOOK_ADDED`` channel and
every open ``bookAdded`` subscription receives them. Publishing never
waits: each subscriber owns an unbounded ``asyncio.Queue`` and the
payload is handed over with ``put_nowait``. Nothing is buffered for
subscribers that are not attached yet, so a stream only sees what is
published after :meth:`BookEventBus.subscribe` returns.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List

logger = logging.getLogger(__name__)

BOOK_ADDED = "BOOK_ADDED"

_CLOSED = object()


class EventStream:
    """Receive handle for one subscriber on one channel.

    Iterate it with ``async for``. The iteration ends when the bus is
    closed; :meth:`close` (or leaving ``async with``) detaches it.
    """

    def __init__(self, bus: "BookEventBus", channel: str):
        self.channel = channel
        self._bus = bus
        self._queue: asyncio.Queue = asyncio.Queue()
        self._finished = False

    def _deliver(self, payload: Any) -> None:
        self._queue.put_nowait(payload)

    def _end(self) -> None:
        self._queue.put_nowait(_CLOSED)

    def __aiter__(self) -> "EventStream":
        return self

    async def __anext__(self) -> Any:
        if self._finished and self._queue.empty():
            raise StopAsyncIteration
        payload = await self._queue.get()
        if payload is _CLOSED:
            self.close()
            raise StopAsyncIteration
        return payload

    async def __aenter__(self) -> "EventStream":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._bus._detach(self)


class BookEventBus:
    """Fan-out broadcast keyed by channel name."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[EventStream]] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, channel: str) -> EventStream:
        """Attach a new stream to *channel* and return it."""
        stream = EventStream(self, channel)
        if self._closed:
            stream._finished = True
            stream._end()
            return stream
        self._subscribers.setdefault(channel, []).append(stream)
        logger.debug(
            "Subscriber attached to %s (%d active)",
            channel,
            len(self._subscribers[channel]),
        )
        return stream

    def publish(self, channel: str, payload: Any) -> int:
        """Hand *payload* to every stream on *channel*.

        Returns the number of subscribers reached; zero means the event
        was dropped.
        """
        if self._closed:
            return 0
        streams = list(self._subscribers.get(channel, []))
        for stream in streams:
            stream._deliver(payload)
        logger.debug("Published on %s to %d subscriber(s)", channel, len(streams))
        return len(streams)

    def subscriber_count(self, channel: str) -> int:
        return len(self._subscribers.get(channel, []))

    def close(self) -> None:
        """End every open stream and refuse further deliveries."""
        if self._closed:
            return
        self._closed = True
        total = 0
        for streams in self._subscribers.values():
            for stream in streams:
                stream._end()
                total += 1
        self._subscribers.clear()
        logger.info("Event bus closed, %d stream(s) ended", total)

    def _detach(self, stream: EventStream) -> None:
        streams = self._subscribers.get(stream.channel)
        if streams and stream in streams:
            streams.remove(stream)
            logger.debug(
                "Subscriber detached from %s (%d active)",
                stream.channel,
                len(streams),
            )
