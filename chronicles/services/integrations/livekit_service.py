"""LiveKit helper service.

This module provides a thin wrapper around the `livekit-api` package.

Based on the official LiveKit Python SDK:
https://github.com/livekit/python-sdks

Usage:
    from chronicles.services.integrations.livekit_service import livekit_service

    token = livekit_service.create_access_token(
        identity="viewer-123",
        room="basketball-game-42",
        can_publish=False,
        can_subscribe=True,
    )
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta

from livekit import api
from livekit.api.twirp_client import TwirpError, TwirpErrorCode
from livekit.protocol.models import ParticipantInfo
from livekit.protocol.webhook import WebhookEvent
from loguru import logger

from chronicles.app_config import AppEnvironConfig, get_app_environ_config
from chronicles.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


class LivekitService:
    """Service wrapper for LiveKit server SDK (livekit-api package).

    Token signing happens locally with the API key/secret; room queries go to
    the LiveKit server at LIVEKIT_URL.
    """

    def __init__(self, cfg: AppEnvironConfig | None = None) -> None:
        self._cfg = cfg or get_app_environ_config()
        logger.info("LivekitService initialized")

    @property
    def url(self) -> str | None:
        return self._cfg.LIVEKIT_URL

    @property
    def is_configured(self) -> bool:
        cfg = self._cfg
        return bool(cfg.LIVEKIT_URL and cfg.LIVEKIT_API_KEY and cfg.LIVEKIT_API_SECRET)

    def _get_credentials(self) -> tuple[str, str]:
        api_key = self._cfg.LIVEKIT_API_KEY
        api_secret = self._cfg.LIVEKIT_API_SECRET

        if not api_key or not api_secret:
            logger.error("LIVEKIT_API_KEY or LIVEKIT_API_SECRET not configured")
            raise AppError(
                errcode=AppErrorCode.E_SERVICE_UNAVAILABLE,
                errmesg="LiveKit not configured",
                status_code=HttpStatusCode.SERVICE_UNAVAILABLE,
            )

        return api_key, api_secret

    @asynccontextmanager
    async def _get_api_client(self) -> AsyncIterator[api.LiveKitAPI]:
        """Internal method to get LiveKit API client.

        Raises:
            AppError: If LIVEKIT_URL or the credentials are not configured
        """
        url = self._cfg.LIVEKIT_URL
        if not url:
            logger.error("LIVEKIT_URL not configured")
            raise AppError(
                errcode=AppErrorCode.E_SERVICE_UNAVAILABLE,
                errmesg="LiveKit not configured",
                status_code=HttpStatusCode.SERVICE_UNAVAILABLE,
            )

        api_key, api_secret = self._get_credentials()

        logger.debug(f"Creating LiveKit API client for URL={url}")
        async with api.LiveKitAPI(url, api_key, api_secret) as lkapi:
            yield lkapi

    async def get_room_participants(self, room_name: str) -> list[ParticipantInfo]:
        """Get all participants in a room.

        Args:
            room_name: Name of the room

        Returns:
            List of ParticipantInfo objects, empty when the room does not exist
        """
        logger.debug(f"Getting participants for room: {room_name}")
        async with self._get_api_client() as lkapi:
            try:
                response = await lkapi.room.list_participants(
                    api.ListParticipantsRequest(room=room_name)
                )
            except TwirpError as e:
                if e.code == TwirpErrorCode.NOT_FOUND:
                    return []
                raise
            return list(response.participants)

    def create_access_token(
        self,
        identity: str,
        room: str,
        name: str | None = None,
        room_join: bool = True,
        room_create: bool = False,
        can_publish: bool = True,
        can_subscribe: bool = True,
        can_publish_data: bool = True,
        ttl: timedelta | None = None,
    ) -> str:
        """Create and return a LiveKit JWT access token.

        This follows the official LiveKit Python SDK API pattern:
        https://github.com/livekit/python-sdks#generating-an-access-token

        Args:
            identity: Unique identity for the participant
            room: Room name to grant access to
            name: Display name for the participant (optional)
            room_join: Grant permission to join the room (default: True)
            room_create: Grant permission to create the room (default: False)
            can_publish: Grant permission to publish tracks (default: True)
            can_subscribe: Grant permission to subscribe to tracks (default: True)
            can_publish_data: Grant permission to publish data (default: True)
            ttl: Token lifetime (default: LIVEKIT_TOKEN_TTL_SECONDS)

        Returns:
            JWT token string

        Raises:
            AppError: If LIVEKIT_API_KEY or LIVEKIT_API_SECRET is not configured
        """
        api_key, api_secret = self._get_credentials()
        ttl = ttl or timedelta(seconds=self._cfg.LIVEKIT_TOKEN_TTL_SECONDS)

        logger.info(f"Creating LiveKit access token for identity={identity}, room={room}")

        token = api.AccessToken(api_key, api_secret).with_identity(identity).with_ttl(ttl)

        if name:
            token = token.with_name(name)

        grants = api.VideoGrants(
            room_join=room_join,
            room=room,
            room_create=room_create,
            can_publish=can_publish,
            can_subscribe=can_subscribe,
            can_publish_data=can_publish_data,
        )
        token = token.with_grants(grants)

        jwt_token = token.to_jwt()
        logger.debug(f"Successfully created LiveKit access token for identity={identity}")
        return jwt_token

    def receive_webhook(self, body: str, auth_token: str) -> WebhookEvent:
        """Verify a webhook signature and parse the event.

        Args:
            body: Raw request body
            auth_token: Value of the Authorization header

        Returns:
            Parsed WebhookEvent

        Raises:
            AppError: If credentials are not configured (503) or the signature
                does not match the body (401)
        """
        api_key, api_secret = self._get_credentials()
        receiver = api.WebhookReceiver(api.TokenVerifier(api_key, api_secret))

        try:
            return receiver.receive(body, auth_token)
        except Exception as e:
            logger.warning(f"Rejected LiveKit webhook: {type(e).__name__}: {e}")
            raise AppError(
                errcode=AppErrorCode.E_WEBHOOK_UNAUTHORIZED,
                errmesg="Invalid webhook signature",
                status_code=HttpStatusCode.UNAUTHORIZED,
            ) from e


# Module-level singleton
livekit_service = LivekitService()


__all__ = ["LivekitService", "livekit_service"]
