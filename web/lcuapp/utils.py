"""
Utility helpers: directory setup, logging config, simple validators, and time utils.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from datetime import datetime, timezone
from flask import Flask


def ensure_dirs(*paths: Path) -> None:
    """Ensure each directory exists."""
    for p in paths:
        p.mkdir(parents=True, exist_ok=True)


def init_logging(app: Flask) -> logging.Logger:
    """Configure a console logger + rotating file handler."""
    log_level = getattr(logging, app.config["LOG_LEVEL"].upper(), logging.INFO)
    logger = logging.getLogger("lcuapp")
    logger.setLevel(log_level)
    logger.propagate = False  # avoid duplicate logs if root has handlers

    # Repeated create_app() calls (tests) must not stack handlers
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    fmt = logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")

    # Console
    ch = logging.StreamHandler()
    ch.setLevel(log_level)
    ch.setFormatter(fmt)
    logger.addHandler(ch)

    # File (rotating)
    log_file = Path(app.config["LOG_FILE"])
    ensure_dirs(log_file.parent)
    fh = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=5)
    fh.setLevel(log_level)
    fh.setFormatter(fmt)
    logger.addHandler(fh)

    # Core library logs (clipboard failures) go to the same place
    core = logging.getLogger("lcu_capture")
    core.setLevel(log_level)
    core.propagate = False
    core.handlers = list(logger.handlers)

    if app.config["SECRET_KEY"] == "dev-unsafe-change-this":
        logger.warning("Using default SECRET_KEY. Set FLASK_SECRET_KEY for production.")

    return logger


def allowed_file(filename: str, allowed: set[str]) -> bool:
    """Return True if the filename has an allowed extension."""
    return "." in filename and filename.rsplit(".", 1)[1].lower() in allowed


def millis_to_iso(ms: int | float | None) -> str | None:
    """Render an epoch-millis instant as an ISO-8601 UTC string (None passes through)."""
    if ms is None:
        return None
    return datetime.fromtimestamp(ms / 1000, tz=timezone.utc).isoformat().replace("+00:00", "Z")


def event_to_json(event) -> dict:
    """Wire shape of one captured event (same keys as the export format)."""
    return {
        "uri": event.uri,
        "eventType": event.event_type,
        "data": event.data,
        "timestamp": event.timestamp,
    }
