"""
Positional breakpoint over the current view.

The marker stores an index, not an event identity: after a filter or sort
change the divider may land after a different event, or past the end of a
shorter view. Stale positions are rendered as "no divider" and never raise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from ..dto import Event, ViewRow


@dataclass
class BreakpointMarker:
    position: Optional[int] = None

    @property
    def is_set(self) -> bool:
        return self.position is not None

    def set(self, view_length: int) -> None:
        """Mark the last currently visible row; an empty view leaves no breakpoint."""
        self.position = view_length - 1 if view_length > 0 else None

    def clear(self) -> None:
        self.position = None

    def in_range(self, view_length: int) -> bool:
        return self.position is not None and 0 <= self.position < view_length


def rows(events: Sequence[Event], marker: BreakpointMarker) -> List[ViewRow]:
    """
    Annotate a view with the divider placement.

    The divider sits between `position` and `position + 1`; rows after it are
    flagged `after_breakpoint`. A position outside the view yields plain rows.
    """
    if not marker.in_range(len(events)):
        return [ViewRow(index=i, event=e) for i, e in enumerate(events)]

    pos = marker.position
    return [
        ViewRow(
            index=i,
            event=e,
            divider_before=(i == pos + 1),
            after_breakpoint=(i > pos),
        )
        for i, e in enumerate(events)
    ]
