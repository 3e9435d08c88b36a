"""Normalized feed events.

All ingestion paths (in-memory feeds, MQTT, export replay) convert their
inputs into these events before anything touches the stores.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class IngestionSource(StrEnum):
    MEMORY = "memory"
    MQTT = "mqtt"
    REPLAY = "replay"


class LogEventKind(StrEnum):
    """Log notifications; both kinds carry upsert semantics."""

    ADDED = "child_added"
    CHANGED = "child_changed"


class SampleUpdate(BaseModel):
    """A raw sample payload for one remote log slot."""

    model_config = ConfigDict(frozen=True)

    key: Any = Field(..., description="Remote slot key, as delivered")
    value: Any = Field(default=None, description="Raw sample payload")
    kind: LogEventKind = LogEventKind.ADDED
    source: IngestionSource = IngestionSource.MEMORY
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class ConfigUpdate(BaseModel):
    """A full remote config payload."""

    model_config = ConfigDict(frozen=True)

    value: Any = Field(default=None, description="Raw config payload")
    source: IngestionSource = IngestionSource.MEMORY
    observed_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
