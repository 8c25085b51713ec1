"""
Session routes: export the current view as a JSON download, import a
previously exported file.
"""

from __future__ import annotations

from io import BytesIO

from flask import Blueprint, current_app, jsonify, request, send_file

from lcu_capture import DecodeError
from lcuapp.managers.capture_manager import CaptureManager
from lcuapp.utils import allowed_file

bp = Blueprint("session", __name__, url_prefix="/session")


def _mgr() -> CaptureManager:
    return current_app.extensions["capture_mgr"]


@bp.route("/export", methods=["GET"])
def export_session():
    """Download `lcu-events-<timestamp>.json` for the currently displayed events."""
    filename, text = _mgr().export()
    return send_file(
        BytesIO(text.encode("utf-8")),
        mimetype="application/json",
        as_attachment=True,
        download_name=filename,
        max_age=0,
    )


@bp.route("/import", methods=["POST"])
def import_session():
    """
    Replace captured events, filter and sort with an exported document.

    Accepts a multipart upload (`file` part, .json) or a raw JSON body.
    A malformed document is rejected with 400 and leaves the session as it was.
    """
    if "file" in request.files:
        file = request.files["file"]
        if not file or file.filename == "":
            return jsonify({"success": False, "error": "No selected file"}), 400
        if not allowed_file(file.filename, current_app.config["ALLOWED_EXTENSIONS"]):
            return jsonify({"success": False, "error": "Invalid file type"}), 400
        payload = file.read()
    else:
        payload = request.get_data()
        if not payload:
            return jsonify({"success": False, "error": "No file part"}), 400

    try:
        count = _mgr().import_text(payload)
    except DecodeError as e:
        return jsonify({"success": False, "error": str(e)}), 400

    return jsonify({"success": True, "imported": count, "message": "Session imported successfully"})
