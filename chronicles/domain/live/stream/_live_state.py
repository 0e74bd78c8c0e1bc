"""Live game / stream state queries."""

from collections.abc import Awaitable
from typing import TypeVar

from loguru import logger
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from chronicles.schemas import GameStatus
from chronicles.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ._base import BaseService
from .stream_models import GameLiveStatus, StreamSession

T = TypeVar("T")

DEFAULT_RECENT_STREAMS = 50
MAX_RECENT_STREAMS = 200


class LiveStateOperations(BaseService):
    """Read-only queries over games and stream sessions."""

    async def _run_query(self, operation: str, awaitable: Awaitable[T], **inputs) -> T:
        """Await a repository call, mapping store and data failures to AppError.

        A failed read is never reported as an empty result.
        """
        try:
            return await awaitable
        except ValidationError as e:
            logger.error(f"{operation} returned an invalid document: inputs={inputs} error={e}")
            raise AppError(
                errcode=AppErrorCode.E_INTERNAL_ERROR,
                errmesg="Stored document failed validation",
                status_code=HttpStatusCode.INTERNAL_ERROR,
            ) from e
        except (PyMongoError, ValueError) as e:
            logger.error(f"{operation} failed: inputs={inputs} error={type(e).__name__}: {e}")
            raise AppError(
                errcode=AppErrorCode.E_SERVICE_UNAVAILABLE,
                errmesg="Failed to fetch live data",
                status_code=HttpStatusCode.SERVICE_UNAVAILABLE,
            ) from e

    async def list_active_games(self) -> list[GameLiveStatus]:
        """Games in progress (live or halftime), most recent game date first."""
        records = await self._run_query(
            "list_active_games",
            self.repository.find_games_by_status(GameStatus.active_states()),
        )
        return [GameLiveStatus.from_record(r) for r in records]

    async def get_active_stream_for_game(self, game_id: str) -> StreamSession | None:
        """The live stream session for a game, or None when nothing is broadcasting."""
        if not game_id:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_PARAMS,
                errmesg="gameId is required",
                status_code=HttpStatusCode.BAD_REQUEST,
            )
        record = await self._run_query(
            "get_active_stream_for_game",
            self.repository.find_live_stream(game_id),
            game_id=game_id,
        )
        return StreamSession.from_record(record) if record else None

    async def list_recent_streams(self, limit: int = DEFAULT_RECENT_STREAMS) -> list[StreamSession]:
        if not 1 <= limit <= MAX_RECENT_STREAMS:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_PARAMS,
                errmesg=f"limit must be between 1 and {MAX_RECENT_STREAMS}",
                status_code=HttpStatusCode.BAD_REQUEST,
            )
        records = await self._run_query(
            "list_recent_streams",
            self.repository.find_recent_streams(limit),
            limit=limit,
        )
        return [StreamSession.from_record(r) for r in records]
