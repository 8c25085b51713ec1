"""
lcu_capture: capture-and-view pipeline for a pushed client event stream.

Public API (stable):
- CaptureConfig            (configuration)
- CaptureController        (owns the state, operator commands)
- CaptureState             (explicit state struct)
- IngestionBuffer          (bounded newest-first store)
- BreakpointMarker         (positional divider)
- view / matches / sort_events / event_types   (filter/sort engine)
- export_session / import_session / dumps / loads / export_filename  (codec)
- EventSourcePort, ClipboardPort  (ports)
- InProcessEventBus        (in-process event source adapter)
- DecodeError
- DTOs: Event, RawEvent, FilterCriteria, SortSpec, SessionDocument, ImportedSession, ViewRow
"""

from __future__ import annotations

# Configuration
from .config import CaptureConfig

# Errors
from .errors import DecodeError

# Orchestration
from .orchestration.controller import CaptureController, CaptureState

# Pipeline
from .pipeline.buffer import IngestionBuffer
from .pipeline.breakpoint import BreakpointMarker
from .pipeline.view import event_types, matches, sort_events, view

# Codec
from .codec.session import dumps, export_filename, export_session, import_session, loads

# Ports / adapters
from .ports import ClipboardPort, EventSourcePort
from .intake.event_bus import InProcessEventBus

# DTOs
from .dto import (
    Event,
    FilterCriteria,
    ImportedSession,
    RawEvent,
    SessionDocument,
    SortSpec,
    ViewRow,
)

__all__ = [
    "CaptureConfig",
    "DecodeError",
    "CaptureController",
    "CaptureState",
    "IngestionBuffer",
    "BreakpointMarker",
    "event_types",
    "matches",
    "sort_events",
    "view",
    "dumps",
    "export_filename",
    "export_session",
    "import_session",
    "loads",
    "ClipboardPort",
    "EventSourcePort",
    "InProcessEventBus",
    "Event",
    "FilterCriteria",
    "ImportedSession",
    "RawEvent",
    "SessionDocument",
    "SortSpec",
    "ViewRow",
]
