"""
Bounded, newest-first event store.

Behavior
--------
- `accept(raw)`   -> stamp with the current instant, push to the front, drop the tail
                     beyond capacity (silently; eviction is not reported)
- `replace(evts)` -> install an imported sequence as-is, capacity not applied
- `clear()`       -> empty the store
- `snapshot()`    -> immutable newest-first tuple

Timestamps never go backwards: if the clock steps back, the new event reuses
the previous stamp.
"""

from __future__ import annotations

import time
from typing import Callable, Iterable, List, Optional, Tuple

from ..dto import Event, RawEvent

Clock = Callable[[], int]


def epoch_millis() -> int:
    """Current wall-clock time in milliseconds since epoch."""
    return int(time.time() * 1000)


class IngestionBuffer:
    """
    Parameters
    ----------
    capacity : int
        Maximum number of events kept after each `accept`.
    clock : Callable[[], int]
        Source of capture instants (ms since epoch); injectable for tests.
    """

    def __init__(self, *, capacity: int = 100, clock: Clock = epoch_millis) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        self._capacity = int(capacity)
        self._clock = clock
        self._events: List[Event] = []
        self._last_stamp: Optional[int] = None

    @property
    def capacity(self) -> int:
        return self._capacity

    def __len__(self) -> int:
        return len(self._events)

    def accept(self, raw: RawEvent) -> Event:
        """Stamp, prepend and truncate. Returns the stored event."""
        stamp = int(self._clock())
        if self._last_stamp is not None and stamp < self._last_stamp:
            stamp = self._last_stamp
        self._last_stamp = stamp

        event = Event(uri=raw.uri, event_type=raw.event_type, data=raw.data, timestamp=stamp)
        self._events.insert(0, event)
        del self._events[self._capacity:]
        return event

    def replace(self, events: Iterable[Event]) -> None:
        self._events = list(events)

    def clear(self) -> None:
        self._events = []

    def snapshot(self) -> Tuple[Event, ...]:
        return tuple(self._events)
