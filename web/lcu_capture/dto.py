"""
Data Transfer Objects (DTOs) used across the capture pipeline.

These are intentionally small, immutable, and independent of any I/O or
serialization library. The wire format lives in `codec/session.py`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Optional, Tuple

SortKey = Literal["timestamp", "uri", "eventType"]
SortOrder = Literal["asc", "desc"]

SORT_KEYS: Tuple[str, ...] = ("timestamp", "uri", "eventType")
SORT_ORDERS: Tuple[str, ...] = ("asc", "desc")


# === Intake ===
@dataclass(frozen=True)
class RawEvent:
    """One message as delivered by the stream; carries no trusted timestamp."""
    uri: str
    event_type: str
    data: Any = None


# === Captured ===
@dataclass(frozen=True)
class Event:
    """One captured occurrence, stamped once when the buffer accepted it."""
    uri: str
    event_type: str
    data: Any
    timestamp: int           # ms since epoch, capture time


# === View parameters ===
@dataclass(frozen=True)
class FilterCriteria:
    search: str = ""         # case-insensitive substring over uri/eventType/data
    event_type: str = ""     # exact match; "" means all types


@dataclass(frozen=True)
class SortSpec:
    by: SortKey = "timestamp"
    order: SortOrder = "desc"

    def __post_init__(self) -> None:
        if self.by not in SORT_KEYS:
            raise ValueError(f"Unknown sort key '{self.by}'. Expected one of: {', '.join(SORT_KEYS)}")
        if self.order not in SORT_ORDERS:
            raise ValueError(f"Unknown sort order '{self.order}'. Expected 'asc' or 'desc'")

    def toggled(self) -> "SortSpec":
        return SortSpec(by=self.by, order="desc" if self.order == "asc" else "asc")


# === Rendering helper ===
@dataclass(frozen=True)
class ViewRow:
    """A view entry annotated with its position relative to the breakpoint."""
    index: int
    event: Event
    divider_before: bool = False     # render a divider between index-1 and index
    after_breakpoint: bool = False   # row sits below the divider


# === Export / import unit ===
@dataclass(frozen=True)
class SessionDocument:
    events: Tuple[Event, ...]
    filter: FilterCriteria
    sort: SortSpec
    export_timestamp: Optional[int] = None


@dataclass(frozen=True)
class ImportedSession:
    """What an import hands back to the controller (breakpoint is not part of it)."""
    events: Tuple[Event, ...]
    filter: FilterCriteria = field(default_factory=FilterCriteria)
    sort: SortSpec = field(default_factory=SortSpec)
