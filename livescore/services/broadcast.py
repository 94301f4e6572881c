"""
In-process publish/subscribe for live innings updates.

Delivery is fire-and-forget: a failing subscriber is logged and skipped, it
never affects the scoring call that produced the event.
"""
import asyncio
import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

Listener = Callable[[dict], None]


class Broadcaster:
    def __init__(self):
        self._lock = threading.Lock()
        # None key holds listeners for every match
        self._listeners: dict[Optional[int], list[Listener]] = {}

    def subscribe(self, listener: Listener, match_id: Optional[int] = None) -> Callable[[], None]:
        """Register a listener; returns a function that removes it again"""
        with self._lock:
            self._listeners.setdefault(match_id, []).append(listener)

        def unsubscribe():
            with self._lock:
                listeners = self._listeners.get(match_id, [])
                if listener in listeners:
                    listeners.remove(listener)

        return unsubscribe

    def subscriber_count(self, match_id: Optional[int] = None) -> int:
        with self._lock:
            return len(self._listeners.get(match_id, []))

    def publish(self, event) -> int:
        """Deliver an event to its match's listeners. Returns how many succeeded."""
        payload = event.to_dict() if hasattr(event, "to_dict") else dict(event)
        match_id = payload.get("match_id")
        with self._lock:
            listeners = list(self._listeners.get(match_id, [])) + list(self._listeners.get(None, []))

        delivered = 0
        for listener in listeners:
            try:
                listener(payload)
                delivered += 1
            except Exception:
                logger.exception(
                    "Failed to deliver %s for match %s", payload.get("event"), match_id
                )
        return delivered


class QueueListener:
    """Hands events to an asyncio queue owned by another thread's event loop"""

    def __init__(self, loop: asyncio.AbstractEventLoop, queue: asyncio.Queue):
        self.loop = loop
        self.queue = queue

    def __call__(self, payload: dict):
        self.loop.call_soon_threadsafe(self.queue.put_nowait, payload)


broadcaster = Broadcaster()
