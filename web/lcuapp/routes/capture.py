"""
Capture routes: status, pause/resume, clear, and breakpoint set/clear.
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify

from lcuapp.managers.capture_manager import CaptureManager

bp = Blueprint("capture", __name__, url_prefix="/capture")


def _mgr() -> CaptureManager:
    return current_app.extensions["capture_mgr"]


@bp.route("/status")
def capture_status():
    """Live/paused flag, buffer counts, last event time and breakpoint."""
    return jsonify(_mgr().status_snapshot())


@bp.route("/pause", methods=["POST"])
def toggle_pause():
    """Toggle the pause gate. Events pushed while paused are dropped."""
    paused = _mgr().toggle_pause()
    return jsonify({"success": True, "paused": paused, "label": "Paused" if paused else "Live"})


@bp.route("/clear", methods=["POST"])
def clear_events():
    """Drop all captured events (and the breakpoint that indexed them)."""
    _mgr().clear()
    return jsonify({"success": True})


@bp.route("/breakpoint", methods=["POST"])
def set_breakpoint():
    """Mark the current end of the view."""
    pos = _mgr().set_breakpoint()
    return jsonify({"success": True, "breakpoint": pos})


@bp.route("/breakpoint", methods=["DELETE"])
def clear_breakpoint():
    _mgr().clear_breakpoint()
    return jsonify({"success": True, "breakpoint": None})
