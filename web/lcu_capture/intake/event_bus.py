"""
In-process EventSource adapter.

A minimal topic -> callback registry. Whatever bridges the external client
(websocket reader, HTTP ingest route, test) calls `publish()`; the subscriber
receives each message synchronously on the publishing thread.

One subscriber per topic, matching `unsubscribe(topic)`. Messages published
on a topic nobody listens to are dropped.
"""

from __future__ import annotations

import threading
from typing import Any, Dict, Mapping

from ..ports import EventCallback, EventSourcePort


class InProcessEventBus(EventSourcePort):
    def __init__(self) -> None:
        self._subscribers: Dict[str, EventCallback] = {}
        self._lock = threading.Lock()

    def subscribe(self, topic: str, callback: EventCallback) -> None:
        with self._lock:
            if topic in self._subscribers:
                raise ValueError(f"Topic '{topic}' already has a subscriber")
            self._subscribers[topic] = callback

    def unsubscribe(self, topic: str) -> None:
        with self._lock:
            self._subscribers.pop(topic, None)

    def is_subscribed(self, topic: str) -> bool:
        with self._lock:
            return topic in self._subscribers

    def publish(self, topic: str, message: Mapping[str, Any]) -> bool:
        """Deliver one message. Returns False when the topic has no subscriber."""
        with self._lock:
            callback = self._subscribers.get(topic)
        if callback is None:
            return False
        callback(message)
        return True
