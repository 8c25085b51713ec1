"""Exceptions raised by the capture pipeline."""

from __future__ import annotations


class DecodeError(ValueError):
    """A session document could not be parsed or lacks required fields."""
