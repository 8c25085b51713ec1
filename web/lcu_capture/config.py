"""
Configuration schema for the capture pipeline.

Only the knobs the controller actually consults: buffer capacity, the
subscription topic, the export file prefix, and the initial sort.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CaptureConfig(BaseModel):
    """
    Centralized, validated configuration for one capture session.
    All instants are milliseconds since epoch unless otherwise noted.
    """

    model_config = ConfigDict(frozen=True)

    # === Buffer ===
    capacity: int = Field(
        default=100,
        ge=1,
        description="Maximum events kept live; the oldest are dropped silently beyond this.",
    )

    # === Subscription ===
    topic: str = Field(
        default="event",
        min_length=1,
        description="Topic subscribed on the event source at startup.",
    )

    # === Export ===
    export_prefix: str = Field(
        default="lcu-events",
        min_length=1,
        description="File name prefix for exported sessions.",
    )

    # === Initial view ===
    default_sort_by: Literal["timestamp", "uri", "eventType"] = Field(
        default="timestamp",
        description="Sort column used until the operator picks another one.",
    )
    default_sort_order: Literal["asc", "desc"] = Field(
        default="desc",
        description="Newest-first by default.",
    )
