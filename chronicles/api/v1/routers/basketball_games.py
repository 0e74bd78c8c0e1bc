"""Live game and stream state for the basketball pages (polled by clients)."""

from fastapi import APIRouter, Depends, Query

from chronicles.api.v1.dependency import get_stream_service
from chronicles.api.v1.schemas.basketball import LiveGamesOut, StreamHistoryOut, StreamLookupOut
from chronicles.domain.live.stream._live_state import DEFAULT_RECENT_STREAMS
from chronicles.domain.live.stream.stream_domain import StreamService
from chronicles.shared.api.utils import make_response

router = APIRouter(prefix="/basketball/games", tags=["Basketball"])


@router.get("/live", response_model=LiveGamesOut)
async def list_live_games(
    service: StreamService = Depends(get_stream_service),
):
    """Games currently live or at halftime, newest first."""
    games = await service.list_active_games()
    return make_response(LiveGamesOut(games=games, total=len(games)))


@router.get("/stream", response_model=StreamLookupOut | StreamHistoryOut)
async def get_game_stream(
    game_id: str | None = Query(None, alias="gameId", description="Game to look up"),
    limit: int = Query(DEFAULT_RECENT_STREAMS, description="History size when gameId is omitted"),
    service: StreamService = Depends(get_stream_service),
):
    """Live stream for one game, or the most recent sessions when no game is given.

    `{isLive: false, stream: null}` means the game is not broadcasting; store
    failures are reported as errors, never as an empty result.
    """
    if game_id:
        stream = await service.get_active_stream_for_game(game_id)
        out = StreamLookupOut(is_live=stream is not None, stream=stream)
    else:
        out = StreamHistoryOut(streams=await service.list_recent_streams(limit=limit))

    return make_response(out)
