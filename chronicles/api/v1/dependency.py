from typing import Annotated

from fastapi import Depends, Request

from chronicles.domain.live.stream.stream_domain import StreamService
from chronicles.domain.valentines.auth_domain import ValentineAuthService, build_login_rate_limiter
from chronicles.services.integrations.livekit_service import LivekitService, livekit_service
from chronicles.shared.rate_limiter import RateLimiter

UNKNOWN_CLIENT = "unknown"


def get_client_ip(request: Request) -> str:
    """Best-effort client address used as the rate-limit key.

    First hop of X-Forwarded-For, then X-Real-IP, then the socket peer. All of
    these can be set by the client; the key throttles guessing, it does not
    identify anyone.
    """
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    real_ip = (request.headers.get("x-real-ip") or "").strip()
    if real_ip:
        return real_ip

    if request.client and request.client.host:
        return request.client.host

    return UNKNOWN_CLIENT


ClientIP = Annotated[str, Depends(get_client_ip)]


# Singleton instances
_stream_service: StreamService | None = None
_login_rate_limiter: RateLimiter | None = None
_valentine_auth_service: ValentineAuthService | None = None


def get_stream_service() -> StreamService:
    """Get the singleton StreamService instance."""
    global _stream_service
    if _stream_service is None:
        _stream_service = StreamService()
    return _stream_service


def get_login_rate_limiter() -> RateLimiter:
    """The process-wide login limiter (5 attempts per 15 minutes by default)."""
    global _login_rate_limiter
    if _login_rate_limiter is None:
        _login_rate_limiter = build_login_rate_limiter()
    return _login_rate_limiter


def get_valentine_auth_service(
    limiter: RateLimiter = Depends(get_login_rate_limiter),
) -> ValentineAuthService:
    global _valentine_auth_service
    if _valentine_auth_service is None or _valentine_auth_service.limiter is not limiter:
        _valentine_auth_service = ValentineAuthService(limiter)
    return _valentine_auth_service


def get_livekit_service() -> LivekitService:
    return livekit_service
