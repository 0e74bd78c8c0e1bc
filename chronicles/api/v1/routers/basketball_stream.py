from fastapi import APIRouter, Depends, Query

from chronicles.api.v1.dependency import get_stream_service
from chronicles.api.v1.schemas.basketball import StreamTokenOut
from chronicles.domain.live.stream.stream_domain import StreamService
from chronicles.shared.api.utils import make_response

router = APIRouter(prefix="/basketball/stream", tags=["Basketball"])


@router.get("/{game_id}/token", response_model=StreamTokenOut)
async def get_stream_token(
    game_id: str,
    role: str | None = Query(None, description='"broadcaster" or "viewer"'),
    service: StreamService = Depends(get_stream_service),
):
    """Issue a LiveKit join token for the game's room.

    Broadcasters may publish but not subscribe; viewers may subscribe but not
    publish. Tokens expire after six hours.

    Raises:
        400: role is not broadcaster/viewer
        409: a broadcaster is already connected (single-broadcaster guard only)
        503: LiveKit is not configured
        500: token signing failed
    """
    result = await service.issue_token(game_id=game_id, role=role)
    return make_response(StreamTokenOut(**result.model_dump()))
