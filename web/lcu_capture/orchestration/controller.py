"""
Capture controller: one explicit state object plus the operator commands.

The controller is synchronous and single-threaded. Callers that receive
stream pushes and operator commands on different threads must serialize
them (see `lcuapp.managers.capture_manager`). The displayed view is
recomputed eagerly after every change to the buffer, filter or sort.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from ..codec import session as codec
from ..config import CaptureConfig
from ..dto import (
    Event,
    FilterCriteria,
    ImportedSession,
    RawEvent,
    SessionDocument,
    SortKey,
    SortSpec,
    ViewRow,
)
from ..intake.messages import parse_raw
from ..pipeline import breakpoint as bp
from ..pipeline import view as view_engine
from ..pipeline.buffer import Clock, IngestionBuffer, epoch_millis
from ..ports import ClipboardPort, EventCallback, EventSourcePort

logger = logging.getLogger(__name__)


@dataclass
class CaptureState:
    """Everything the inspector knows; owned by exactly one controller."""
    buffer: IngestionBuffer
    paused: bool = False
    filter: FilterCriteria = field(default_factory=FilterCriteria)
    sort: SortSpec = field(default_factory=SortSpec)
    breakpoint: bp.BreakpointMarker = field(default_factory=bp.BreakpointMarker)
    selected: Optional[Event] = None
    last_event_time: Optional[int] = None


class CaptureController:
    """
    Orchestrates capture and exposes the operator command surface.

    Parameters
    ----------
    config : CaptureConfig | None
        Capacity, topic, export prefix and initial sort.
    clock : Callable[[], int]
        Source of instants in ms since epoch (capture stamps and export time).
    """

    def __init__(self, config: CaptureConfig | None = None, *, clock: Clock = epoch_millis) -> None:
        self.config = config or CaptureConfig()
        self._clock = clock
        self.state = CaptureState(
            buffer=IngestionBuffer(capacity=self.config.capacity, clock=clock),
            sort=SortSpec(by=self.config.default_sort_by, order=self.config.default_sort_order),
        )
        self._view: Tuple[Event, ...] = ()

    # ----------------------------- Derived view -----------------------------

    def _refresh(self) -> None:
        self._view = view_engine.view(self.state.buffer.snapshot(), self.state.filter, self.state.sort)

    @property
    def view(self) -> Tuple[Event, ...]:
        return self._view

    def rows(self) -> List[ViewRow]:
        return bp.rows(self._view, self.state.breakpoint)

    def event_types(self) -> List[str]:
        return view_engine.event_types(self.state.buffer.snapshot())

    def status(self) -> Dict[str, object]:
        st = self.state
        return {
            "paused": st.paused,
            "label": "Paused" if st.paused else "Live",
            "buffered": len(st.buffer),
            "visible": len(self._view),
            "capacity": st.buffer.capacity,
            "last_event_time": st.last_event_time,
            "breakpoint": st.breakpoint.position,
        }

    # ----------------------------- Subscription -----------------------------

    @contextmanager
    def subscribed(
        self,
        source: EventSourcePort,
        callback: Optional[EventCallback] = None,
    ) -> Iterator[None]:
        """
        Hold a subscription on `source` for the duration of the block.

        `callback` defaults to `on_event`; pass a wrapper when deliveries must be
        serialized with other commands.
        """
        topic = self.config.topic
        source.subscribe(topic, callback or self.on_event)
        try:
            yield
        finally:
            source.unsubscribe(topic)

    # ------------------------------- Capture --------------------------------

    def on_event(self, message: Union[RawEvent, Mapping[str, Any]]) -> Optional[Event]:
        """
        Capture one pushed event unless paused.

        Returns the stored event, or None when the pause gate dropped it.
        """
        if self.state.paused:
            return None
        raw = message if isinstance(message, RawEvent) else parse_raw(message)
        event = self.state.buffer.accept(raw)
        self.state.last_event_time = event.timestamp
        self._refresh()
        return event

    def toggle_pause(self) -> bool:
        self.state.paused = not self.state.paused
        return self.state.paused

    def clear(self) -> None:
        """Drop every captured event; the breakpoint goes with them."""
        self.state.buffer.clear()
        self.state.breakpoint.clear()
        self._refresh()

    # ------------------------------ Breakpoint ------------------------------

    def set_breakpoint(self) -> Optional[int]:
        self.state.breakpoint.set(len(self._view))
        return self.state.breakpoint.position

    def clear_breakpoint(self) -> None:
        self.state.breakpoint.clear()

    # ---------------------------- Filter / sort -----------------------------

    def set_filter(self, criteria: FilterCriteria) -> None:
        self.state.filter = criteria
        self._refresh()

    def set_search(self, text: str) -> None:
        self.set_filter(FilterCriteria(search=text, event_type=self.state.filter.event_type))

    def set_event_type_filter(self, event_type: str) -> None:
        self.set_filter(FilterCriteria(search=self.state.filter.search, event_type=event_type))

    def reset_filters(self) -> None:
        """Clear search and type filter; the sort is left alone."""
        self.set_filter(FilterCriteria())

    def set_sort(self, spec: SortSpec) -> None:
        self.state.sort = spec
        self._refresh()

    def select_sort_column(self, by: SortKey) -> SortSpec:
        """Same column flips the order; a new column starts ascending."""
        current = self.state.sort
        spec = current.toggled() if current.by == by else SortSpec(by=by, order="asc")
        self.set_sort(spec)
        return spec

    # ---------------------------- Export / import ---------------------------

    def now(self) -> int:
        return int(self._clock())

    def export(self, now: Optional[int] = None) -> SessionDocument:
        """Snapshot the displayed events and the filter/sort that produced them."""
        stamp = self.now() if now is None else now
        return codec.export_session(self._view, self.state.filter, self.state.sort, now=stamp)

    def export_filename(self, now: Optional[int] = None) -> str:
        stamp = self.now() if now is None else now
        return codec.export_filename(stamp, prefix=self.config.export_prefix)

    def import_document(self, doc: Union[SessionDocument, str, bytes]) -> ImportedSession:
        """
        Replace buffer, filter and sort with the document's contents.

        Decoding happens before any state is touched, so a DecodeError leaves
        the controller exactly as it was. The breakpoint is not modified.
        """
        imported = codec.import_session(doc)
        self.state.buffer.replace(imported.events)
        self.state.filter = imported.filter
        self.state.sort = imported.sort
        self._refresh()
        return imported

    # ------------------------------ Inspection ------------------------------

    def select_event(self, index: int) -> Event:
        """Pick a row of the current view for read-only inspection."""
        if not 0 <= index < len(self._view):
            raise IndexError(f"view index {index} out of range (0..{len(self._view) - 1})")
        self.state.selected = self._view[index]
        return self.state.selected

    def close_inspection(self) -> None:
        self.state.selected = None

    def selected_data_text(self) -> Optional[str]:
        """Pretty JSON of the selected payload, as copied to the clipboard."""
        if self.state.selected is None:
            return None
        return json.dumps(self.state.selected.data, indent=2, ensure_ascii=False, default=str)

    def copy_selected(self, clipboard: ClipboardPort) -> bool:
        """
        Copy the selected payload. Failures are logged and reported as False;
        no state changes either way.
        """
        text = self.selected_data_text()
        if text is None:
            return False
        try:
            clipboard.write_text(text)
        except Exception:
            logger.warning("Clipboard write failed", exc_info=True)
            return False
        return True
