"""In-process fan-out of draft messages to connected viewers.

Each WebSocket subscribes to one draft id and gets a bounded queue. A
viewer that falls behind loses its oldest queued message instead of
slowing the publisher; every message is a full state snapshot, so the next
one (or a ``request_sync``) brings it back in line.
"""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

logger = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 32


class DraftBroadcaster:
    def __init__(self, queue_size: int = DEFAULT_QUEUE_SIZE) -> None:
        self._queue_size = queue_size
        self._subscribers: dict[int, set[asyncio.Queue[dict[str, Any]]]] = defaultdict(set)

    def subscriber_count(self, draft_id: int) -> int:
        return len(self._subscribers.get(draft_id, ()))

    def subscribe(self, draft_id: int) -> asyncio.Queue[dict[str, Any]]:
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=self._queue_size)
        self._subscribers[draft_id].add(queue)
        return queue

    def unsubscribe(self, draft_id: int, queue: asyncio.Queue[dict[str, Any]]) -> None:
        subscribers = self._subscribers.get(draft_id)
        if not subscribers:
            return
        subscribers.discard(queue)
        if not subscribers:
            del self._subscribers[draft_id]

    @asynccontextmanager
    async def subscription(self, draft_id: int) -> AsyncIterator[asyncio.Queue[dict[str, Any]]]:
        queue = self.subscribe(draft_id)
        try:
            yield queue
        finally:
            self.unsubscribe(draft_id, queue)

    def publish(self, draft_id: int, message: dict[str, Any]) -> int:
        """Queue ``message`` for every subscriber of ``draft_id``. Returns the fan-out count."""
        subscribers = list(self._subscribers.get(draft_id, ()))
        for queue in subscribers:
            if queue.full():
                try:
                    queue.get_nowait()
                except asyncio.QueueEmpty:
                    pass
                logger.debug("draft_subscriber_lagging", extra={"draft_id": draft_id})
            queue.put_nowait(message)
        return len(subscribers)


draft_broadcaster = DraftBroadcaster()


def get_broadcaster() -> DraftBroadcaster:
    """FastAPI dependency; overridden in tests."""
    return draft_broadcaster
