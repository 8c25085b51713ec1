"""
Configuration objects for the Flask application.

Override via environment variables or a .env file (when using python-dotenv).
"""

from __future__ import annotations
import os


class Config:
    """Base configuration (safe defaults)."""

    # Security
    SECRET_KEY = os.getenv("FLASK_SECRET_KEY", "dev-unsafe-change-this")

    # Storage
    LOG_FOLDER = os.getenv("LOG_FOLDER", "logs")

    # Requests / imports
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(16 * 1024 * 1024)))  # 16 MiB

    # File types accepted by /session/import
    ALLOWED_EXTENSIONS = set(
        (os.getenv("ALLOWED_EXTENSIONS", "json")).split(",")
    )

    # Logging
    LOG_FILE = os.getenv("APP_LOG_FILE", "logs/app.log")
    LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "INFO")

    # Capture
    EVENT_BUFFER_CAPACITY = int(os.getenv("EVENT_BUFFER_CAPACITY", "100"))
    EVENT_TOPIC = os.getenv("EVENT_TOPIC", "event")
    EXPORT_PREFIX = os.getenv("EXPORT_PREFIX", "lcu-events")


class ProductionConfig(Config):
    """Production overrides."""
    LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "INFO")


class DevelopmentConfig(Config):
    """Development overrides."""
    LOG_LEVEL = os.getenv("APP_LOG_LEVEL", "DEBUG")


class TestingConfig(Config):
    """Test overrides; point LOG_FOLDER/LOG_FILE at a temp dir in fixtures."""
    TESTING = True
    LOG_LEVEL = "DEBUG"
    SECRET_KEY = "testing"
