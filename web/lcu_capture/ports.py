"""
Hexagonal interfaces (Ports) for the capture pipeline.

These define the boundary between the controller and its collaborators:
the stream that pushes events in, and the clipboard that selected payloads
are copied to. Keep them small so they are easy to fake in tests.
"""

from __future__ import annotations

from typing import Any, Callable, Mapping, Protocol

EventCallback = Callable[[Mapping[str, Any]], None]


class EventSourcePort(Protocol):
    """
    Pushes raw `{uri, eventType, data}` messages for a topic.
    Delivery is in order per connection; reconnects are the source's concern.
    """

    def subscribe(self, topic: str, callback: EventCallback) -> None:
        """Start delivering messages published on `topic` to `callback`."""
        ...

    def unsubscribe(self, topic: str) -> None:
        """Stop delivering messages for `topic`. Unknown topics are ignored."""
        ...


class ClipboardPort(Protocol):
    """Receives text copied by the operator. May raise on failure."""

    def write_text(self, text: str) -> None:
        ...
