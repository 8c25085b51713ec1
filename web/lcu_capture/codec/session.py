"""
Session export/import codec.

Wire format (JSON, UTF-8)
-------------------------
{
  "events": [{"uri": str, "eventType": str, "data": any, "timestamp": number}, ...],
  "metadata": {
    "exportTimestamp": number,
    "filter": {"search": str, "eventType": str},
    "sort": {"by": "timestamp"|"uri"|"eventType", "order": "asc"|"desc"}
  }
}

Export captures the *view* (what passes the filter, in display order), never
the raw buffer. Import restores that view verbatim: no capacity truncation,
and the breakpoint is not part of the document.

Validation is strict: a quoted or boolean timestamp is a shape problem, not
a number. Any parse or shape problem surfaces as `DecodeError`; callers never see
pydantic or json exceptions.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..dto import Event, FilterCriteria, ImportedSession, SessionDocument, SortSpec
from ..errors import DecodeError

Number = Union[int, float]


# --- Wire schema ---------------------------------------------------------------
class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, strict=True)


class EventWire(_WireModel):
    uri: str
    event_type: str = Field(alias="eventType")
    data: Any = None
    timestamp: Number


class FilterWire(_WireModel):
    search: str
    event_type: str = Field(alias="eventType")


class SortWire(_WireModel):
    by: Literal["timestamp", "uri", "eventType"]
    order: Literal["asc", "desc"]


class MetadataWire(_WireModel):
    export_timestamp: Optional[Number] = Field(default=None, alias="exportTimestamp")
    filter: FilterWire
    sort: SortWire


class SessionWire(_WireModel):
    events: List[EventWire]
    metadata: MetadataWire


# --- Export ---------------------------------------------------------------------
def export_session(
    view: Iterable[Event],
    criteria: FilterCriteria,
    spec: SortSpec,
    *,
    now: int,
) -> SessionDocument:
    """Build the document for the currently displayed events."""
    return SessionDocument(
        events=tuple(view),
        filter=criteria,
        sort=spec,
        export_timestamp=int(now),
    )


def to_dict(doc: SessionDocument) -> Dict[str, Any]:
    return {
        "events": [
            {
                "uri": e.uri,
                "eventType": e.event_type,
                "data": e.data,
                "timestamp": e.timestamp,
            }
            for e in doc.events
        ],
        "metadata": {
            "exportTimestamp": doc.export_timestamp,
            "filter": {"search": doc.filter.search, "eventType": doc.filter.event_type},
            "sort": {"by": doc.sort.by, "order": doc.sort.order},
        },
    }


def dumps(doc: SessionDocument) -> str:
    """Pretty-printed JSON text (2-space indent), non-ASCII kept as-is."""
    return json.dumps(to_dict(doc), indent=2, ensure_ascii=False, default=str)


def export_filename(now: int, prefix: str = "lcu-events") -> str:
    """
    `<prefix>-YYYY-MM-DDTHH-MM-SS.json`, UTC.

    This is the ISO-8601 instant truncated to seconds with colons replaced by
    hyphens, so it is safe on every filesystem.
    """
    stamp = datetime.fromtimestamp(now / 1000, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%S")
    return f"{prefix}-{stamp.replace(':', '-')}.json"


# --- Import ---------------------------------------------------------------------
def _describe(exc: ValidationError) -> str:
    first = exc.errors()[0]
    where = ".".join(str(p) for p in first.get("loc", ())) or "document"
    return f"{where}: {first.get('msg', 'invalid')}"


def loads(text: Union[str, bytes]) -> SessionDocument:
    """Parse and validate a document. Raises DecodeError on any problem."""
    try:
        wire = SessionWire.model_validate_json(text)
    except ValidationError as e:
        raise DecodeError(f"Invalid session document ({_describe(e)})") from e
    except UnicodeDecodeError as e:
        raise DecodeError("Session document is not valid UTF-8") from e

    meta = wire.metadata
    return SessionDocument(
        events=tuple(
            Event(uri=w.uri, event_type=w.event_type, data=w.data, timestamp=w.timestamp)
            for w in wire.events
        ),
        filter=FilterCriteria(search=meta.filter.search, event_type=meta.filter.event_type),
        sort=SortSpec(by=meta.sort.by, order=meta.sort.order),
        export_timestamp=meta.export_timestamp,
    )


def import_session(doc: Union[SessionDocument, str, bytes]) -> ImportedSession:
    """
    Return the state an import installs: events, filter and sort.

    Accepts an already decoded document or raw JSON text/bytes.
    """
    if not isinstance(doc, SessionDocument):
        doc = loads(doc)
    return ImportedSession(events=doc.events, filter=doc.filter, sort=doc.sort)
