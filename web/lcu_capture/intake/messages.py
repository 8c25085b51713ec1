"""
Raw stream message parsing.

The stream hands over plain mappings shaped `{uri, eventType, data}`. Any
`timestamp` the message carries is ignored: capture time is assigned by the
buffer.
"""

from __future__ import annotations

from typing import Any, Mapping

from ..dto import RawEvent


def parse_raw(message: Mapping[str, Any]) -> RawEvent:
    """
    Build a RawEvent from a stream message.

    Raises
    ------
    ValueError
        If the message is not a mapping or `uri` / `eventType` are missing or not strings.
    """
    if not isinstance(message, Mapping):
        raise ValueError("event message must be a JSON object")

    uri = message.get("uri")
    event_type = message.get("eventType")
    if not isinstance(uri, str):
        raise ValueError("event message requires a string 'uri'")
    if not isinstance(event_type, str):
        raise ValueError("event message requires a string 'eventType'")

    return RawEvent(uri=uri, event_type=event_type, data=message.get("data"))
