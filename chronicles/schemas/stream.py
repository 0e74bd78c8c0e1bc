"""Basketball stream session record (collection `basketball_streams`)."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .schema_utils import RECORD_MODEL_CONFIG, parse_mongo_datetime, parse_object_id

STREAMS_COLLECTION = "basketball_streams"


class StreamStatus(str, Enum):
    """Stream session lifecycle.

    IDLE → LIVE → ENDED. LIVE is set when the LiveKit room starts and ENDED when
    it finishes; at most one LIVE session exists per game.
    """

    IDLE = "idle"
    LIVE = "live"
    ENDED = "ended"

    def __str__(self) -> str:
        return self.value


class StreamRecord(BaseModel):
    """Validated view of a stored stream session document."""

    model_config = RECORD_MODEL_CONFIG

    id: str = Field(alias="_id")
    game_id: str
    status: StreamStatus
    started_at: datetime | None = None
    ended_at: datetime | None = None
    viewer_peak: int = 0
    current_viewers: int = 0
    room_id: str | None = None
    broadcaster_id: str | None = None
    resolution: str | None = None
    recording_url: str | None = None

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _parse_id(cls, v: Any) -> Any:
        return parse_object_id(v)

    @field_validator("started_at", "ended_at", "created_at", "updated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        return parse_mongo_datetime(v)
