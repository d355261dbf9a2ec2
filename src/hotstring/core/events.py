"""Observer hooks and the pub/sub bus they can be routed through."""

from __future__ import annotations

import threading
from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from hotstring.core.definition import Definition

EventHandler = Callable[[Any], None]

TOPIC_BUFFER = "hotstring.buffer"
TOPIC_STATUS = "hotstring.status"
TOPIC_FIRED = "hotstring.fired"

STATUS_LOCKED = "Locked"
STATUS_REPLAYING = "Replaying"
STATUS_READY = "Ready"


class EventBus:
    """Minimal event bus; handlers run synchronously in emit order."""

    def __init__(self) -> None:
        self._subscribers: defaultdict[str, list[EventHandler]] = defaultdict(list)
        self._lock = threading.RLock()

    def subscribe(self, topic: str, handler: EventHandler) -> None:
        with self._lock:
            if handler not in self._subscribers[topic]:
                self._subscribers[topic].append(handler)

    def unsubscribe(self, topic: str, handler: EventHandler) -> None:
        with self._lock:
            if handler in self._subscribers[topic]:
                self._subscribers[topic].remove(handler)

    def emit(self, topic: str, payload: Any) -> None:
        with self._lock:
            handlers = list(self._subscribers.get(topic, ()))
        for handler in handlers:
            handler(payload)


@dataclass(frozen=True, slots=True)
class BufferSnapshot:
    buffer: str
    muted: bool
    locked: bool
    reset_reason: str | None = None


class EngineObserver:
    """Debug/status hooks. Every method is a no-op unless overridden."""

    def on_buffer(self, snapshot: BufferSnapshot) -> None:
        pass

    def on_status(self, status: str) -> None:
        pass

    def on_fire(self, definition: Definition) -> None:
        pass


class EventBusObserver(EngineObserver):
    """Republishes engine notifications on an :class:`EventBus`."""

    def __init__(self, events: EventBus) -> None:
        self.events = events

    def on_buffer(self, snapshot: BufferSnapshot) -> None:
        self.events.emit(TOPIC_BUFFER, snapshot)

    def on_status(self, status: str) -> None:
        self.events.emit(TOPIC_STATUS, status)

    def on_fire(self, definition: Definition) -> None:
        self.events.emit(TOPIC_FIRED, definition)
