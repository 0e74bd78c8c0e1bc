"""Stream domain models."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from chronicles.schemas import GameRecord, GameStatus, StreamRecord, StreamStatus
from chronicles.schemas.schema_utils import serialize_optional_utc_datetime

ROOM_NAME_PREFIX = "basketball-game-"
BROADCASTER_IDENTITY = "broadcaster-admin"
VIEWER_IDENTITY_PREFIX = "viewer-"


class StreamRole(str, Enum):
    """Who a join token is for. Grants are derived from the role alone."""

    BROADCASTER = "broadcaster"
    VIEWER = "viewer"

    def __str__(self) -> str:
        return self.value


def room_name_for_game(game_id: str) -> str:
    return f"{ROOM_NAME_PREFIX}{game_id}"


def game_id_from_room_name(room_name: str | None) -> str | None:
    """Inverse of room_name_for_game; None for rooms that are not game rooms."""
    if not room_name or not room_name.startswith(ROOM_NAME_PREFIX):
        return None
    return room_name[len(ROOM_NAME_PREFIX) :] or None


class LiveSessionGrant(BaseModel):
    """Capabilities carried by one join token."""

    model_config = ConfigDict(frozen=True)

    room_name: str
    identity: str
    role: StreamRole
    room_create: bool
    room_join: bool
    can_publish: bool
    can_subscribe: bool
    expires_at: datetime


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StreamTokenResult(_CamelModel):
    token: str
    url: str
    room_name: str


class GameLiveStatus(_CamelModel):
    """Game projection returned to pollers; timestamps are ISO 8601 UTC strings."""

    id: str
    status: GameStatus
    home_team_id: str | None = None
    away_team_id: str | None = None
    venue: str | None = None
    home_score: int = 0
    away_score: int = 0
    period: int = 0
    clock: str | None = None
    is_featured: bool = False
    is_streaming: bool = False
    date: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_record(cls, record: GameRecord) -> "GameLiveStatus":
        return cls(
            id=record.id,
            status=record.status,
            home_team_id=record.home_team_id,
            away_team_id=record.away_team_id,
            venue=record.venue,
            home_score=record.home_score,
            away_score=record.away_score,
            period=record.period,
            clock=record.clock,
            is_featured=record.is_featured,
            is_streaming=record.is_streaming,
            date=serialize_optional_utc_datetime(record.date),
            created_at=serialize_optional_utc_datetime(record.created_at),
            updated_at=serialize_optional_utc_datetime(record.updated_at),
        )


class StreamSession(_CamelModel):
    """Stream session projection; timestamps are ISO 8601 UTC strings."""

    id: str
    game_id: str
    status: StreamStatus
    room_id: str | None = None
    broadcaster_id: str | None = None
    resolution: str | None = None
    recording_url: str | None = None
    viewer_peak: int = 0
    current_viewers: int = 0
    started_at: str | None = None
    ended_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None

    @classmethod
    def from_record(cls, record: StreamRecord) -> "StreamSession":
        return cls(
            id=record.id,
            game_id=record.game_id,
            status=record.status,
            room_id=record.room_id,
            broadcaster_id=record.broadcaster_id,
            resolution=record.resolution,
            recording_url=record.recording_url,
            viewer_peak=record.viewer_peak,
            current_viewers=record.current_viewers,
            started_at=serialize_optional_utc_datetime(record.started_at),
            ended_at=serialize_optional_utc_datetime(record.ended_at),
            created_at=serialize_optional_utc_datetime(record.created_at),
            updated_at=serialize_optional_utc_datetime(record.updated_at),
        )


class StreamWebhookResult(BaseModel):
    event: str
    handled: bool
    game_id: str | None = None
    detail: dict[str, int | str] | None = None


class RoomEvent(BaseModel):
    """The parts of a verified LiveKit webhook event that stream bookkeeping uses."""

    event: str
    room_name: str | None = None
    room_sid: str | None = None
    num_participants: int = 0
    participant_identity: str | None = None
