"""Join-token issuance for game rooms."""

import secrets
import time
from datetime import datetime, timedelta, timezone

from livekit.api.twirp_client import TwirpError
from loguru import logger

from chronicles.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ._base import BaseService
from .stream_models import (
    BROADCASTER_IDENTITY,
    VIEWER_IDENTITY_PREFIX,
    LiveSessionGrant,
    StreamRole,
    StreamTokenResult,
    room_name_for_game,
)

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def new_viewer_identity() -> str:
    """viewer-<epoch ms>-<5 random base36 chars>."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(5))
    return f"{VIEWER_IDENTITY_PREFIX}{int(time.time() * 1000)}-{suffix}"


def parse_role(role: str | None) -> StreamRole:
    try:
        return StreamRole(role)
    except ValueError:
        raise AppError(
            errcode=AppErrorCode.E_INVALID_ROLE,
            errmesg='Invalid role. Must be "broadcaster" or "viewer".',
            status_code=HttpStatusCode.BAD_REQUEST,
        ) from None


class TokenOperations(BaseService):
    """Mints LiveKit credentials. Nothing is persisted."""

    def build_grant(self, game_id: str, role: StreamRole) -> LiveSessionGrant:
        is_broadcaster = role == StreamRole.BROADCASTER
        ttl = timedelta(seconds=self.cfg.LIVEKIT_TOKEN_TTL_SECONDS)
        return LiveSessionGrant(
            room_name=room_name_for_game(game_id),
            identity=BROADCASTER_IDENTITY if is_broadcaster else new_viewer_identity(),
            role=role,
            room_create=is_broadcaster,
            room_join=True,
            can_publish=is_broadcaster,
            can_subscribe=not is_broadcaster,
            expires_at=datetime.now(timezone.utc) + ttl,
        )

    async def _ensure_no_active_broadcaster(self, room_name: str) -> None:
        try:
            participants = await self.livekit.get_room_participants(room_name)
        except AppError:
            raise
        except (TwirpError, OSError) as e:
            logger.error(f"Broadcaster check failed for room={room_name}: {e}")
            raise AppError(
                errcode=AppErrorCode.E_SERVICE_UNAVAILABLE,
                errmesg="Unable to verify the room state",
                status_code=HttpStatusCode.SERVICE_UNAVAILABLE,
            ) from e

        if any(p.identity == BROADCASTER_IDENTITY for p in participants):
            logger.warning(f"Refused broadcaster token, broadcaster already in room={room_name}")
            raise AppError(
                errcode=AppErrorCode.E_BROADCASTER_ACTIVE,
                errmesg="A broadcaster is already live in this room",
                status_code=HttpStatusCode.CONFLICT,
            )

    async def issue_token(self, game_id: str, role: str | None) -> StreamTokenResult:
        """Issue a join token for the game's room.

        Raises:
            AppError: E_INVALID_ROLE (400), E_SERVICE_UNAVAILABLE (503),
                E_BROADCASTER_ACTIVE (409, guard only) or E_TOKEN_SIGNING_FAILED (500)
        """
        stream_role = parse_role(role)
        if not game_id:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_PARAMS,
                errmesg="gameId is required",
                status_code=HttpStatusCode.BAD_REQUEST,
            )

        if not self.livekit.is_configured:
            logger.error("LiveKit credentials missing, cannot issue stream token")
            raise AppError(
                errcode=AppErrorCode.E_SERVICE_UNAVAILABLE,
                errmesg="LiveKit not configured",
                status_code=HttpStatusCode.SERVICE_UNAVAILABLE,
            )

        grant = self.build_grant(game_id, stream_role)

        if stream_role == StreamRole.BROADCASTER and self.cfg.STREAM_SINGLE_BROADCASTER_GUARD:
            await self._ensure_no_active_broadcaster(grant.room_name)

        try:
            token = self.livekit.create_access_token(
                identity=grant.identity,
                room=grant.room_name,
                room_join=grant.room_join,
                room_create=grant.room_create,
                can_publish=grant.can_publish,
                can_subscribe=grant.can_subscribe,
                ttl=timedelta(seconds=self.cfg.LIVEKIT_TOKEN_TTL_SECONDS),
            )
        except AppError:
            raise
        except Exception as e:
            logger.exception(f"Failed to sign token for room={grant.room_name}: {e}")
            raise AppError(
                errcode=AppErrorCode.E_TOKEN_SIGNING_FAILED,
                errmesg="Failed to generate token",
                status_code=HttpStatusCode.INTERNAL_ERROR,
            ) from e

        logger.info(
            f"Issued {stream_role} token identity={grant.identity} room={grant.room_name}"
        )
        return StreamTokenResult(token=token, url=self.livekit.url or "", room_name=grant.room_name)
