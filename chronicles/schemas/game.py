"""Basketball game record (collection `basketball_games`)."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .schema_utils import RECORD_MODEL_CONFIG, parse_mongo_datetime, parse_object_id

GAMES_COLLECTION = "basketball_games"

# Long spellings written by older admin tools, mapped to the stored short form
STATUS_LONG_SPELLINGS = {"halftime": "ht", "final": "ft"}


class GameStatus(str, Enum):
    """Game lifecycle states as stored by the admin console.

    HALFTIME and FINAL are stored in their short form (`ht`, `ft`); the long
    spellings are accepted on read.
    """

    SCHEDULED = "scheduled"
    LIVE = "live"
    HALFTIME = "ht"
    FINAL = "ft"
    POSTPONED = "postponed"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def _missing_(cls, value: object) -> "GameStatus | None":
        if isinstance(value, str):
            short = STATUS_LONG_SPELLINGS.get(value.strip().lower())
            return cls(short) if short else None
        return None

    def stored_values(self) -> list[str]:
        """Every spelling of this state that may appear in a stored document."""
        return [self.value] + [k for k, v in STATUS_LONG_SPELLINGS.items() if v == self.value]

    @classmethod
    def active_states(cls) -> list["GameStatus"]:
        """States in which a game is currently being played."""
        return [GameStatus.LIVE, GameStatus.HALFTIME]


class GameRecord(BaseModel):
    """Validated view of a stored game document."""

    model_config = RECORD_MODEL_CONFIG

    id: str = Field(alias="_id")
    home_team_id: str | None = None
    away_team_id: str | None = None
    date: datetime | None = None
    venue: str | None = None
    status: GameStatus = GameStatus.SCHEDULED
    game_type: str | None = None
    home_score: int = 0
    away_score: int = 0
    period: int = 0
    clock: str | None = None
    is_featured: bool = False
    is_streaming: bool = False

    created_at: datetime | None = None
    updated_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _parse_id(cls, v: Any) -> Any:
        return parse_object_id(v)

    @field_validator("status", mode="before")
    @classmethod
    def _parse_status(cls, v: Any) -> Any:
        if isinstance(v, str):
            return GameStatus(v)
        return v

    @field_validator("date", "created_at", "updated_at", mode="before")
    @classmethod
    def _parse_datetime(cls, v: Any) -> Any:
        """Parse MongoDB Extended JSON datetime format."""
        return parse_mongo_datetime(v)
