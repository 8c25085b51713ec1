"""
Filter/sort derivation of the displayed view.

Everything here is a pure function of its arguments: identical inputs give an
identical output tuple, tie order included. The controller recomputes the
view on every buffer, filter or sort change; nothing is cached here.

Notes
-----
- The search text is matched against the compact JSON form of `data`
  (no whitespace, non-ASCII kept, key order kept), i.e. `JSON.stringify` output.
- Text columns use a collation key. Accents and case are ignored first (é sorts
  next to e), then accents decide, then case; lowercase comes first. Identical
  strings tie and keep their input order.
- `sorted(..., reverse=True)` keeps equal keys in input order, so descending
  only flips the key order, never the ties.
"""

from __future__ import annotations

import json
import unicodedata
from typing import Any, Callable, Dict, Iterable, List, Tuple

from ..dto import Event, FilterCriteria, SortSpec


def canonical_json(data: Any) -> str:
    """Compact JSON text of a payload; unknown types fall back to str()."""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False, default=str)


# Root collation order of ASCII punctuation and symbols; all of them sort
# before digits, and digits before letters.
_PUNCT_ORDER = "_-,;:!?.'\"()[]{}@*/\\&#%`^+<=>|~$"
_PUNCT_RANK = {ch: i for i, ch in enumerate(_PUNCT_ORDER)}


def _primary_weight(ch: str) -> Tuple[int, Any]:
    if ch in _PUNCT_RANK:
        return (1, _PUNCT_RANK[ch])
    if ch.isspace():
        return (0, ord(ch))
    if ch.isdigit():
        return (3, ch)
    if ch.isalpha():
        return (4, ch)
    return (2, ord(ch))


def _text_key(value: str) -> Tuple[Tuple[Tuple[int, Any], ...], str, str]:
    """
    Collation key: base letters, then accents, then case (lowercase first).

    Accented letters sort with their base letter (é next to e, before f).
    """
    decomposed = unicodedata.normalize("NFD", value.casefold())
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (
        tuple(_primary_weight(ch) for ch in base),
        decomposed,
        unicodedata.normalize("NFD", value).swapcase(),
    )


_SORT_KEYS: Dict[str, Callable[[Event], Any]] = {
    "timestamp": lambda e: e.timestamp,
    "uri": lambda e: _text_key(e.uri),
    "eventType": lambda e: _text_key(e.event_type),
}


def matches(event: Event, criteria: FilterCriteria) -> bool:
    """Return True if the event passes both the type filter and the search text."""
    if criteria.event_type and event.event_type != criteria.event_type:
        return False

    needle = criteria.search.lower()
    if not needle:
        return True
    return (
        needle in event.uri.lower()
        or needle in event.event_type.lower()
        or needle in canonical_json(event.data).lower()
    )


def sort_events(events: Iterable[Event], spec: SortSpec) -> List[Event]:
    """Stable sort by the spec's column; ties keep their input order in both directions."""
    return sorted(events, key=_SORT_KEYS[spec.by], reverse=spec.order == "desc")


def view(
    snapshot: Iterable[Event],
    criteria: FilterCriteria,
    spec: SortSpec,
) -> Tuple[Event, ...]:
    """
    Derive the displayed sequence from a buffer snapshot.

    Parameters
    ----------
    snapshot : Iterable[Event]
        Buffer contents, newest-first (this is the tie order).
    criteria : FilterCriteria
        Search text and exact type filter.
    spec : SortSpec
        Column and direction.
    """
    kept = [e for e in snapshot if matches(e, criteria)]
    return tuple(sort_events(kept, spec))


def event_types(snapshot: Iterable[Event]) -> List[str]:
    """Distinct event types across the whole buffer, sorted; feeds the type dropdown."""
    return sorted({e.event_type for e in snapshot})
