"""Keeps stream session documents in sync with LiveKit room events."""

from loguru import logger
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from chronicles.schemas import StreamStatus
from chronicles.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ._base import BaseService
from ._repository import utc_now
from .stream_models import RoomEvent, StreamWebhookResult, game_id_from_room_name

DEFAULT_BROADCASTER_ID = "admin"
DEFAULT_RESOLUTION = "1280x720"


class WebhookOperations(BaseService):
    """Room lifecycle and audience bookkeeping."""

    async def handle_room_event(self, event: RoomEvent) -> StreamWebhookResult:
        """Apply one verified room event.

        Events for rooms that are not game rooms, and event types other than room
        start/finish and participant join/leave, are acknowledged without changes.
        """
        game_id = game_id_from_room_name(event.room_name)
        if game_id is None:
            logger.debug(f"Ignoring {event.event} for non-game room {event.room_name!r}")
            return StreamWebhookResult(event=event.event, handled=False)

        try:
            if event.event == "room_started":
                detail = await self._on_room_started(game_id, event)
            elif event.event == "room_finished":
                detail = await self._on_room_finished(game_id)
            elif event.event in ("participant_joined", "participant_left"):
                detail = await self._on_audience_changed(game_id, event)
            else:
                logger.debug(f"Unhandled LiveKit webhook event: {event.event}")
                return StreamWebhookResult(event=event.event, handled=False, game_id=game_id)
        except ValidationError as e:
            logger.error(f"Invalid stream document while applying {event.event}: {e}")
            raise AppError(
                errcode=AppErrorCode.E_INTERNAL_ERROR,
                errmesg="Stored document failed validation",
                status_code=HttpStatusCode.INTERNAL_ERROR,
            ) from e
        except ValueError as e:
            logger.error(f"Stream store unavailable for {event.event} game={game_id}: {e}")
            raise AppError(
                errcode=AppErrorCode.E_SERVICE_UNAVAILABLE,
                errmesg="Stream store unavailable",
                status_code=HttpStatusCode.SERVICE_UNAVAILABLE,
            ) from e
        except PyMongoError as e:
            logger.error(f"Failed to apply {event.event} for game={game_id}: {e}")
            raise AppError(
                errcode=AppErrorCode.E_WEBHOOK_ERROR,
                errmesg="Webhook processing failed",
                status_code=HttpStatusCode.INTERNAL_ERROR,
            ) from e

        return StreamWebhookResult(event=event.event, handled=True, game_id=game_id, detail=detail)

    async def _on_room_started(self, game_id: str, event: RoomEvent) -> dict[str, int | str]:
        existing = await self.repository.find_live_stream(game_id)
        if existing is None:
            stream = await self.repository.insert_stream(
                {
                    "gameId": game_id,
                    "status": StreamStatus.LIVE.value,
                    "startedAt": utc_now(),
                    "endedAt": None,
                    "viewerPeak": 0,
                    "currentViewers": 0,
                    "roomId": event.room_name,
                    "broadcasterId": DEFAULT_BROADCASTER_ID,
                    "resolution": DEFAULT_RESOLUTION,
                    "recordingUrl": None,
                }
            )
            stream_id = stream.id
        else:
            stream_id = existing.id

        if not await self.repository.set_game_streaming(game_id, True):
            logger.warning(f"Room started for unknown game={game_id}")

        logger.info(f"Game {game_id} is now streaming (stream={stream_id})")
        return {"streamId": stream_id}

    async def _on_room_finished(self, game_id: str) -> dict[str, int | str]:
        ended = await self.repository.end_live_streams(game_id)
        if not await self.repository.set_game_streaming(game_id, False):
            logger.warning(f"Room finished for unknown game={game_id}")

        logger.info(f"Game {game_id} stream ended ({ended} session(s) closed)")
        return {"endedSessions": ended}

    async def _on_audience_changed(self, game_id: str, event: RoomEvent) -> dict[str, int | str]:
        # The broadcaster is one of the room's participants
        viewers = max(0, event.num_participants - 1)

        stream = await self.repository.find_live_stream(game_id)
        if stream is None:
            logger.debug(f"No live stream for game={game_id}, viewer count {viewers} dropped")
            return {"currentViewers": viewers}

        updated = await self.repository.update_stream_viewers(stream.id, viewers)
        peak = updated.viewer_peak if updated else max(stream.viewer_peak, viewers)

        logger.info(f"Game {game_id} viewers: {viewers} (peak {peak})")
        return {"currentViewers": viewers, "viewerPeak": peak}
