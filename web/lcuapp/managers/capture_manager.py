"""
Thread-safe capture orchestration for the web app.

This module owns the single CaptureController of the process and provides:
- start()/stop() to acquire/release the stream subscription,
- a locked delivery callback for pushed events,
- locked wrappers for every operator command,
- JSON-ready snapshots of the view and status for the UI.

Flask serves requests on several threads and the event bus delivers on the
publisher's thread; every touch of the controller goes through `_lock`, so
buffer mutation, pause checks and view recomputation never interleave.
"""

from __future__ import annotations

from contextlib import ExitStack
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple
import logging
import threading

from lcu_capture import (
    CaptureConfig,
    CaptureController,
    DecodeError,
    Event,
    InProcessEventBus,
    SessionDocument,
    SortSpec,
)
from lcu_capture.codec import session as codec

from .clipboard import BrowserClipboard
from ..utils import event_to_json, millis_to_iso


@dataclass
class CaptureManager:
    """
    Serializes stream pushes and operator commands onto one controller.

    Attributes:
        logger: App logger.
        bus: Event source the stream bridge publishes into.
        clipboard: Target of copy-to-clipboard.
        config: Core capture configuration.
    """
    logger: logging.Logger
    bus: InProcessEventBus
    clipboard: BrowserClipboard
    config: CaptureConfig = field(default_factory=CaptureConfig)

    controller: CaptureController = field(init=False)
    _stack: Optional[ExitStack] = field(default=None, init=False, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, init=False, repr=False)

    def __post_init__(self) -> None:
        self.controller = CaptureController(self.config)

    # ---------------------------- Subscription -----------------------------

    @property
    def active(self) -> bool:
        return self._stack is not None

    def start(self) -> Tuple[bool, str]:
        """Subscribe to the event topic. Returns (ok, message)."""
        with self._lock:
            if self._stack is not None:
                return False, "Capture subscription already active"
            stack = ExitStack()
            stack.enter_context(self.controller.subscribed(self.bus, callback=self.deliver))
            self._stack = stack
            self.logger.info("Subscribed to topic '%s'", self.config.topic)
            return True, f"Subscribed to '{self.config.topic}'"

    def stop(self) -> None:
        """Release the subscription (idempotent)."""
        with self._lock:
            if self._stack is None:
                return
            self._stack.close()
            self._stack = None
            self.logger.info("Unsubscribed from topic '%s'", self.config.topic)

    def deliver(self, message: Mapping[str, Any]) -> None:
        """Bus callback: capture one pushed event under the lock."""
        with self._lock:
            event = self.controller.on_event(message)
        if event is None:
            self.logger.debug("Paused: dropped %s", message.get("uri"))

    # ---------------------------- Capture plane ----------------------------

    def toggle_pause(self) -> bool:
        with self._lock:
            paused = self.controller.toggle_pause()
        self.logger.info("Capture %s", "paused" if paused else "resumed")
        return paused

    def clear(self) -> None:
        with self._lock:
            self.controller.clear()
        self.logger.info("Cleared captured events")

    def set_breakpoint(self) -> Optional[int]:
        with self._lock:
            pos = self.controller.set_breakpoint()
        self.logger.info("Breakpoint set at %s", pos)
        return pos

    def clear_breakpoint(self) -> None:
        with self._lock:
            self.controller.clear_breakpoint()
        self.logger.info("Breakpoint cleared")

    # ---------------------------- Filter / sort ----------------------------

    def set_filter(self, search: Optional[str] = None, event_type: Optional[str] = None) -> None:
        with self._lock:
            if search is not None:
                self.controller.set_search(search)
            if event_type is not None:
                self.controller.set_event_type_filter(event_type)

    def reset_filters(self) -> None:
        with self._lock:
            self.controller.reset_filters()

    def set_sort(self, by: str, order: Optional[str] = None) -> SortSpec:
        """Explicit order wins; otherwise same column toggles, new column starts asc."""
        with self._lock:
            if order is None:
                return self.controller.select_sort_column(by)  # type: ignore[arg-type]
            spec = SortSpec(by=by, order=order)  # type: ignore[arg-type]
            self.controller.set_sort(spec)
            return spec

    # ----------------------------- Inspection ------------------------------

    def select(self, index: int) -> Event:
        with self._lock:
            return self.controller.select_event(index)

    def close_inspection(self) -> None:
        with self._lock:
            self.controller.close_inspection()

    def selected(self) -> Optional[Event]:
        with self._lock:
            return self.controller.state.selected

    def copy_selected(self) -> Tuple[bool, Optional[str]]:
        """Copy the selected payload; returns (ok, copied text)."""
        with self._lock:
            ok = self.controller.copy_selected(self.clipboard)
            text = self.clipboard.last_text if ok else None
        if not ok:
            self.logger.warning("Copy to clipboard failed or nothing selected")
        return ok, text

    # --------------------------- Export / import ---------------------------

    def export(self) -> Tuple[str, str]:
        """Return (filename, JSON text) for the current view."""
        with self._lock:
            now = self.controller.now()
            doc: SessionDocument = self.controller.export(now=now)
            name = self.controller.export_filename(now=now)
        self.logger.info("Exported %d events as %s", len(doc.events), name)
        return name, codec.dumps(doc)

    def import_text(self, payload: str | bytes) -> int:
        """
        Replace the session with an uploaded document. Returns the event count.

        Raises DecodeError; state is untouched in that case.
        """
        try:
            with self._lock:
                imported = self.controller.import_document(payload)
        except DecodeError as e:
            self.logger.warning("Import rejected: %s", e)
            raise
        self.logger.info("Imported %d events", len(imported.events))
        return len(imported.events)

    # ------------------------------- UI data -------------------------------

    def status_snapshot(self) -> Dict[str, object]:
        with self._lock:
            status = self.controller.status()
        status["subscribed"] = self.active
        status["last_event_at"] = millis_to_iso(status["last_event_time"])  # type: ignore[arg-type]
        return status

    def view_snapshot(self) -> Dict[str, object]:
        with self._lock:
            rows = self.controller.rows()
            st = self.controller.state
            payload = {
                "events": [
                    {
                        "index": r.index,
                        "divider_before": r.divider_before,
                        "after_breakpoint": r.after_breakpoint,
                        **event_to_json(r.event),
                    }
                    for r in rows
                ],
                "event_types": self.controller.event_types(),
                "filter": {"search": st.filter.search, "eventType": st.filter.event_type},
                "sort": {"by": st.sort.by, "order": st.sort.order},
                "breakpoint": st.breakpoint.position,
                "total": len(st.buffer),
            }
        return payload
