"""Motor-backed access to the game and stream collections."""

from datetime import datetime, timezone
from typing import Any

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING, ReturnDocument

from chronicles.schemas import (
    GAMES_COLLECTION,
    STREAMS_COLLECTION,
    GameRecord,
    GameStatus,
    StreamRecord,
    StreamStatus,
)
from chronicles.schemas.schema_utils import id_filter
from chronicles.services.app_db import get_chronicles_db


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LiveStateRepository:
    """Reads and writes game/stream documents.

    Every document leaving this class has been validated into a record, so callers
    never see raw storage shapes.
    """

    def __init__(self, db: AsyncIOMotorDatabase | None = None):
        self._db = db

    @property
    def db(self) -> AsyncIOMotorDatabase:
        if self._db is None:
            self._db = get_chronicles_db()
        return self._db

    @property
    def games(self):
        return self.db[GAMES_COLLECTION]

    @property
    def streams(self):
        return self.db[STREAMS_COLLECTION]

    # ==================== GAMES ====================

    async def find_games_by_status(self, statuses: list[GameStatus]) -> list[GameRecord]:
        """Games whose status is one of `statuses`, newest game date first."""
        stored = [value for status in statuses for value in status.stored_values()]
        cursor = self.games.find({"status": {"$in": stored}}).sort("date", DESCENDING)
        return [GameRecord.model_validate(doc) async for doc in cursor]

    async def set_game_streaming(self, game_id: str, is_streaming: bool) -> bool:
        """Flip the game's streaming flag. Returns False when the game does not exist."""
        result = await self.games.update_one(
            id_filter(game_id),
            {"$set": {"isStreaming": is_streaming, "updatedAt": utc_now()}},
        )
        return result.matched_count > 0

    # ==================== STREAMS ====================

    async def find_live_stream(self, game_id: str) -> StreamRecord | None:
        doc = await self.streams.find_one(
            {"gameId": game_id, "status": StreamStatus.LIVE.value},
            sort=[("createdAt", DESCENDING)],
        )
        return StreamRecord.model_validate(doc) if doc else None

    async def find_recent_streams(self, limit: int) -> list[StreamRecord]:
        cursor = self.streams.find({}).sort("createdAt", DESCENDING).limit(limit)
        return [StreamRecord.model_validate(doc) async for doc in cursor]

    async def insert_stream(self, fields: dict[str, Any]) -> StreamRecord:
        now = utc_now()
        doc = {**fields, "createdAt": now, "updatedAt": now}
        result = await self.streams.insert_one(doc)
        doc["_id"] = result.inserted_id
        return StreamRecord.model_validate(doc)

    async def end_live_streams(self, game_id: str) -> int:
        """Mark every live session of the game ended. Returns the number updated."""
        now = utc_now()
        result = await self.streams.update_many(
            {"gameId": game_id, "status": StreamStatus.LIVE.value},
            {
                "$set": {
                    "status": StreamStatus.ENDED.value,
                    "endedAt": now,
                    "currentViewers": 0,
                    "updatedAt": now,
                }
            },
        )
        return result.modified_count

    async def update_stream_viewers(
        self, stream_id: str, current_viewers: int
    ) -> StreamRecord | None:
        """Set the current viewer count and raise the peak when exceeded."""
        doc = await self.streams.find_one_and_update(
            id_filter(stream_id),
            {
                "$set": {"currentViewers": current_viewers, "updatedAt": utc_now()},
                "$max": {"viewerPeak": current_viewers},
            },
            return_document=ReturnDocument.AFTER,
        )
        return StreamRecord.model_validate(doc) if doc else None


__all__ = ["LiveStateRepository", "utc_now"]
