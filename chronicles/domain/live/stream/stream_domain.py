"""Stream domain service - live state, join tokens and room webhooks."""

from chronicles.app_config import AppEnvironConfig
from chronicles.services.integrations.livekit_service import LivekitService

from ._live_state import DEFAULT_RECENT_STREAMS, LiveStateOperations
from ._repository import LiveStateRepository
from ._tokens import TokenOperations
from ._webhook import WebhookOperations
from .stream_models import (
    GameLiveStatus,
    LiveSessionGrant,
    RoomEvent,
    StreamRole,
    StreamSession,
    StreamTokenResult,
    StreamWebhookResult,
)


class StreamService:
    """Facade over the live-sports stream operations."""

    def __init__(
        self,
        repository: LiveStateRepository | None = None,
        livekit: LivekitService | None = None,
        cfg: AppEnvironConfig | None = None,
    ):
        repository = repository or LiveStateRepository()
        self._live_state = LiveStateOperations(repository, livekit, cfg)
        self._tokens = TokenOperations(repository, livekit, cfg)
        self._webhook = WebhookOperations(repository, livekit, cfg)

    # ==================== LIVE STATE ====================

    async def list_active_games(self) -> list[GameLiveStatus]:
        """Games currently live or at halftime, newest first."""
        return await self._live_state.list_active_games()

    async def get_active_stream_for_game(self, game_id: str) -> StreamSession | None:
        """Live stream session for the game, None when the game is not broadcasting.

        Raises AppError when the store cannot be read.
        """
        return await self._live_state.get_active_stream_for_game(game_id=game_id)

    async def list_recent_streams(self, limit: int = DEFAULT_RECENT_STREAMS) -> list[StreamSession]:
        return await self._live_state.list_recent_streams(limit=limit)

    # ==================== TOKENS ====================

    def build_grant(self, game_id: str, role: StreamRole) -> LiveSessionGrant:
        return self._tokens.build_grant(game_id, role)

    async def issue_token(self, game_id: str, role: str | None) -> StreamTokenResult:
        """Mint a join token for the game's room.

        Raises AppError for an unknown role, missing LiveKit configuration or a
        signing failure.
        """
        return await self._tokens.issue_token(game_id=game_id, role=role)

    # ==================== WEBHOOKS ====================

    async def handle_room_event(self, event: RoomEvent) -> StreamWebhookResult:
        return await self._webhook.handle_room_event(event)
