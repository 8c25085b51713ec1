"""
Ingest route: the stream bridge pushes client events here.

Each message is published on the event bus; the capture manager's
subscription decides whether it is captured (pause gate).
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from lcu_capture import InProcessEventBus
from lcu_capture.intake.messages import parse_raw

bp = Blueprint("ingest", __name__, url_prefix="/ingest")


@bp.route("", methods=["POST"])
def ingest():
    """
    Body (JSON): one message or a list of them, in delivery order.
      { "uri": "/lol-gameflow/v1/session", "eventType": "Update", "data": {...} }
    """
    body = request.get_json(silent=True)
    if body is None:
        return jsonify({"success": False, "error": "Expected a JSON body"}), 400

    messages = body if isinstance(body, list) else [body]
    try:
        for msg in messages:
            parse_raw(msg)
    except ValueError as e:
        return jsonify({"success": False, "error": str(e)}), 400

    bus: InProcessEventBus = current_app.extensions["event_bus"]
    topic = current_app.config["EVENT_TOPIC"]
    delivered = sum(1 for msg in messages if bus.publish(topic, msg))
    return jsonify({"success": True, "received": len(messages), "delivered": delivered})
