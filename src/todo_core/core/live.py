# src/todo_core/core/live.py

from __future__ import annotations

"""
Live sequences: push-based publish/subscribe over a current value.

A subscription yields the current value immediately, then every value
published afterwards, until either side closes it.

Each subscriber gets its own unbounded queue, so publishing never waits on a
slow consumer and one subscriber cannot hold up another.
"""

import asyncio
import logging
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CLOSED = object()


class Subscription(Generic[T]):
    """Async iterator over the values of one LiveSequence."""

    def __init__(self, source: LiveSequence[T]) -> None:
        self._source = source
        self._queue: asyncio.Queue[object] = asyncio.Queue()
        self._finished = False

    def _push(self, value: T) -> None:
        if not self._finished:
            self._queue.put_nowait(value)

    def _finish(self) -> None:
        if self._finished:
            return
        self._finished = True
        self._queue.put_nowait(_CLOSED)

    @property
    def closed(self) -> bool:
        return self._finished

    def pending(self) -> int:
        """Number of values delivered but not yet consumed."""
        n = self._queue.qsize()
        return n - 1 if self._finished and n else n

    def close(self) -> None:
        """Unsubscribe. Values already queued are still yielded."""
        self._source._unsubscribe(self)
        self._finish()

    def __aiter__(self) -> Subscription[T]:
        return self

    async def __anext__(self) -> T:
        item = await self._queue.get()
        if item is _CLOSED:
            # keep the sentinel so repeated iteration stays terminated
            self._queue.put_nowait(_CLOSED)
            raise StopAsyncIteration
        return item  # type: ignore[return-value]

    async def __aenter__(self) -> Subscription[T]:
        return self

    async def __aexit__(self, *exc: object) -> None:
        self.close()


class LiveSequence(Generic[T]):
    """Holds a current value and fans every published value out to subscribers."""

    def __init__(self, initial: T) -> None:
        self._value = initial
        self._subscribers: set[Subscription[T]] = set()
        self._closed = False

    @property
    def value(self) -> T:
        return self._value

    @property
    def closed(self) -> bool:
        return self._closed

    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self) -> Subscription[T]:
        sub: Subscription[T] = Subscription(self)
        if self._closed:
            sub._finish()
            return sub
        sub._push(self._value)
        self._subscribers.add(sub)
        return sub

    def publish(self, value: T) -> None:
        if self._closed:
            logger.debug("publish on closed live sequence ignored")
            return
        self._value = value
        for sub in list(self._subscribers):
            sub._push(value)

    def close(self) -> None:
        """End every subscription; later publishes are ignored."""
        if self._closed:
            return
        self._closed = True
        for sub in list(self._subscribers):
            sub._finish()
        self._subscribers.clear()

    def _unsubscribe(self, sub: Subscription[T]) -> None:
        self._subscribers.discard(sub)


class LiveValue(LiveSequence[T]):
    """A LiveSequence that only emits when the value actually changes."""

    def set(self, value: T) -> bool:
        """Publish `value` if it differs from the current one. Returns True if emitted."""
        if self._closed or value == self._value:
            return False
        self.publish(value)
        return True
