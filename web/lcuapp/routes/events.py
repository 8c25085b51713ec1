"""
Event view routes: the filtered/sorted list, filter and sort changes,
selection for inspection, and copy-to-clipboard.
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from lcu_capture.dto import SORT_KEYS, SORT_ORDERS
from lcuapp.managers.capture_manager import CaptureManager
from lcuapp.utils import event_to_json

bp = Blueprint("events", __name__, url_prefix="/events")


def _mgr() -> CaptureManager:
    return current_app.extensions["capture_mgr"]


@bp.route("")
def list_events():
    """Return the current view with breakpoint annotations, plus filter/sort state."""
    return jsonify(_mgr().view_snapshot())


@bp.route("/filter", methods=["POST"])
def set_filter():
    """
    Update the search text and/or the event-type filter.

    Body (JSON):
      { "search": "gameflow", "eventType": "Update" }   # either key optional
    """
    data = request.get_json(silent=True) or {}
    search = data.get("search")
    event_type = data.get("eventType")
    for name, value in (("search", search), ("eventType", event_type)):
        if value is not None and not isinstance(value, str):
            return jsonify({"success": False, "error": f"'{name}' must be a string"}), 400

    _mgr().set_filter(search=search, event_type=event_type)
    return jsonify({"success": True, **_mgr().view_snapshot()})


@bp.route("/filter/reset", methods=["POST"])
def reset_filter():
    """Clear search and type filter; sort is kept."""
    _mgr().reset_filters()
    return jsonify({"success": True, **_mgr().view_snapshot()})


@bp.route("/sort", methods=["POST"])
def set_sort():
    """
    Change the sort.

    Body (JSON):
      { "by": "uri" }                    # same column toggles, new column -> asc
      { "by": "uri", "order": "desc" }   # explicit order
    """
    data = request.get_json(silent=True) or {}
    by = data.get("by")
    order = data.get("order")
    if by not in SORT_KEYS:
        return jsonify({"success": False, "error": f"'by' must be one of: {', '.join(SORT_KEYS)}"}), 400
    if order is not None and order not in SORT_ORDERS:
        return jsonify({"success": False, "error": "'order' must be 'asc' or 'desc'"}), 400

    spec = _mgr().set_sort(by, order)
    return jsonify({"success": True, "sort": {"by": spec.by, "order": spec.order}})


@bp.route("/<int:index>/select", methods=["POST"])
def select_event(index: int):
    """Select a row of the current view for read-only inspection."""
    try:
        event = _mgr().select(index)
    except IndexError as e:
        return jsonify({"success": False, "error": str(e)}), 404
    return jsonify({"success": True, "event": event_to_json(event)})


@bp.route("/selected")
def get_selected():
    event = _mgr().selected()
    if event is None:
        return jsonify({"success": False, "error": "No event selected"}), 404
    return jsonify({"success": True, "event": event_to_json(event)})


@bp.route("/selected", methods=["DELETE"])
def close_selected():
    _mgr().close_inspection()
    return jsonify({"success": True})


@bp.route("/selected/copy", methods=["POST"])
def copy_selected():
    """
    Copy the selected event's data (pretty JSON). The text is returned so the
    browser can place it on the operator's clipboard.
    """
    ok, text = _mgr().copy_selected()
    if not ok:
        return jsonify({"success": False, "error": "Nothing copied"}), 409
    return jsonify({"success": True, "text": text})
