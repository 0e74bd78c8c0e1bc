"""LiveKit webhook endpoint for basketball game rooms.

LiveKit signs each delivery with a JWT in the Authorization header; the body
hash is checked by `livekit.api.WebhookReceiver` before anything is applied.

Handled events (rooms named `basketball-game-<gameId>` only):
- room_started: open a live stream session and flag the game as streaming
- room_finished: end the live sessions and clear the streaming flag
- participant_joined / participant_left: refresh viewer count and peak

Everything else is acknowledged and ignored.

References:
- https://docs.livekit.io/home/server/webhooks/
"""

from fastapi import APIRouter, Depends, Header, Request
from livekit.protocol.webhook import WebhookEvent
from loguru import logger

from chronicles.api.v1.dependency import get_livekit_service, get_stream_service
from chronicles.api.v1.schemas.basketball import WebhookReceivedOut
from chronicles.domain.live.stream.stream_domain import StreamService
from chronicles.domain.live.stream.stream_models import RoomEvent
from chronicles.services.integrations.livekit_service import LivekitService
from chronicles.shared.api.utils import make_response

router = APIRouter(prefix="/basketball/stream", tags=["Webhooks"])


def to_room_event(event: WebhookEvent) -> RoomEvent:
    has_room = event.HasField("room")
    has_participant = event.HasField("participant")
    return RoomEvent(
        event=event.event,
        room_name=event.room.name if has_room else None,
        room_sid=event.room.sid if has_room else None,
        num_participants=event.room.num_participants if has_room else 0,
        participant_identity=event.participant.identity if has_participant else None,
    )


@router.post("/webhook", response_model=WebhookReceivedOut)
async def livekit_webhook(
    request: Request,
    authorization: str | None = Header(None),
    service: StreamService = Depends(get_stream_service),
    livekit: LivekitService = Depends(get_livekit_service),
):
    """Receive a LiveKit webhook delivery.

    Raises:
        401: signature does not match the body
        503: LiveKit is not configured
        500: the stream documents could not be updated
    """
    body = (await request.body()).decode("utf-8")
    event = livekit.receive_webhook(body, authorization or "")

    room_event = to_room_event(event)
    logger.info(f"LiveKit webhook: {room_event.event} room={room_event.room_name}")

    result = await service.handle_room_event(room_event)
    logger.debug(f"LiveKit webhook result: {result.model_dump()}")

    return make_response(WebhookReceivedOut())
