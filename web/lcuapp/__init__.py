"""
Flask app factory: registers config, logging, blueprints, and error handlers.
"""

from __future__ import annotations

import atexit
import os
from pathlib import Path
from typing import Type

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from lcu_capture import CaptureConfig, InProcessEventBus
from lcuapp.config import Config, DevelopmentConfig, ProductionConfig
from lcuapp.utils import ensure_dirs, init_logging
from lcuapp.managers.capture_manager import CaptureManager
from lcuapp.managers.clipboard import BrowserClipboard
from lcuapp.routes import capture as capture_bp
from lcuapp.routes import events as events_bp
from lcuapp.routes import ingest as ingest_bp
from lcuapp.routes import session as session_bp

__version__ = "1.0.0"


def create_app(config_class: Type[Config] | None = None) -> Flask:
    """Create and configure the Flask application."""
    app = Flask(__name__)

    # Config selection
    cfg: Type[Config]
    env = os.getenv("FLASK_ENV", "production").lower()
    if config_class is not None:
        cfg = config_class
    elif env.startswith("dev"):
        cfg = DevelopmentConfig
    else:
        cfg = ProductionConfig
    app.config.from_object(cfg)

    # Ensure folders
    ensure_dirs(Path(app.config["LOG_FOLDER"]))

    app.secret_key = app.config["SECRET_KEY"]

    # Logging
    logger = init_logging(app)
    app.logger = logger  # align Flask's logger with ours

    # Event source + the single capture session, stored in extensions registry
    bus = InProcessEventBus()
    capture_cfg = CaptureConfig(
        capacity=app.config["EVENT_BUFFER_CAPACITY"],
        topic=app.config["EVENT_TOPIC"],
        export_prefix=app.config["EXPORT_PREFIX"],
    )
    mgr = CaptureManager(
        logger=logger,
        bus=bus,
        clipboard=BrowserClipboard(),
        config=capture_cfg,
    )
    app.extensions["event_bus"] = bus
    app.extensions["capture_mgr"] = mgr

    # Subscribe at startup, release at interpreter shutdown
    mgr.start()
    atexit.register(mgr.stop)

    @app.after_request
    def set_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        return resp

    # Error handlers
    @app.errorhandler(RequestEntityTooLarge)
    def handle_file_too_large(_e):
        return jsonify({"success": False, "error": "File too large"}), 413

    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        return jsonify({"success": False, "error": e.description}), e.code

    @app.errorhandler(Exception)
    def handle_unexpected_exception(e: Exception):
        app.logger.exception("Unhandled error")
        return jsonify({"success": False, "error": "Internal server error"}), 500

    # Blueprints
    app.register_blueprint(capture_bp.bp)
    app.register_blueprint(events_bp.bp)
    app.register_blueprint(ingest_bp.bp)
    app.register_blueprint(session_bp.bp)

    # Health
    @app.route("/healthz")
    def healthz():
        return jsonify({"status": "ok", "version": __version__, "subscribed": mgr.active}), 200

    return app
