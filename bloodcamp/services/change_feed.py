"""In-process fan-out of registration inserts to dashboard subscribers."""

from __future__ import annotations

import json
import logging
import queue
import threading
from typing import Iterator

logger = logging.getLogger("bloodcamp.feed")

TABLE = "blood_donations"
SUBSCRIBER_QUEUE_SIZE = 100
KEEPALIVE_SECONDS = 15.0


class ChangeFeed:
    def __init__(self, maxsize: int = SUBSCRIBER_QUEUE_SIZE):
        self._maxsize = maxsize
        self._lock = threading.Lock()
        self._subscribers: set[queue.Queue] = set()

    def subscribe(self) -> queue.Queue:
        q: queue.Queue = queue.Queue(maxsize=self._maxsize)
        with self._lock:
            self._subscribers.add(q)
        return q

    def unsubscribe(self, q: queue.Queue) -> None:
        with self._lock:
            self._subscribers.discard(q)

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def publish_insert(self, record: dict) -> int:
        """Queue an INSERT event for every subscriber; never blocks."""
        event = {"type": "INSERT", "table": TABLE, "record": record}
        with self._lock:
            targets = list(self._subscribers)
        delivered = 0
        for q in targets:
            try:
                q.put_nowait(event)
                delivered += 1
            except queue.Full:
                logger.warning("[FEED-DROP] record=%s reason=subscriber-full", record.get("id"))
        return delivered


def format_sse(event: dict) -> str:
    return f"event: {event['type']}\ndata: {json.dumps(event, ensure_ascii=False)}\n\n"


def stream_events(
    feed: ChangeFeed,
    keepalive: float = KEEPALIVE_SECONDS,
    max_events: int | None = None,
) -> Iterator[str]:
    """Yield SSE frames for a single subscriber until closed."""
    q = feed.subscribe()
    sent = 0
    try:
        yield ": connected\n\n"
        while max_events is None or sent < max_events:
            try:
                event = q.get(timeout=keepalive)
            except queue.Empty:
                yield ": keepalive\n\n"
                continue
            yield format_sse(event)
            sent += 1
    finally:
        feed.unsubscribe(q)


registration_feed = ChangeFeed()
