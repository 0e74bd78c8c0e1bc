from pydantic import BaseModel

from chronicles.shared.config import config


class AppEnvironConfig(BaseModel):
    DEBUG: bool = config.get_bool("DEBUG")

    API_HOST: str = config.get("API_HOST", "0.0.0.0").strip()
    API_PORT: int = int((config.get("API_PORT") or "").strip() or 8000)
    API_WORKERS: int = int((config.get("API_WORKERS") or "").strip() or 1)
    API_CORS_ORIGINS: list[str] = [
        x.strip() for x in config.get("API_CORS_ORIGINS", "*").split(",") if x.strip()
    ]

    # LiveKit configuration
    LIVEKIT_URL: str | None = (config.get("LIVEKIT_URL") or "").strip() or None
    LIVEKIT_API_KEY: str | None = (config.get("LIVEKIT_API_KEY") or "").strip() or None
    LIVEKIT_API_SECRET: str | None = (config.get("LIVEKIT_API_SECRET") or "").strip() or None
    # Broadcast/view tokens stay valid for the length of a game plus overtime
    LIVEKIT_TOKEN_TTL_SECONDS: int = int(
        (config.get("LIVEKIT_TOKEN_TTL_SECONDS") or "").strip() or 6 * 60 * 60
    )
    # Reject a second broadcaster token while the admin broadcaster is in the room
    STREAM_SINGLE_BROADCASTER_GUARD: bool = config.get_bool("STREAM_SINGLE_BROADCASTER_GUARD")

    # Login rate limiting
    LOGIN_RATE_LIMIT_MAX_ATTEMPTS: int = int(
        (config.get("LOGIN_RATE_LIMIT_MAX_ATTEMPTS") or "").strip() or 5
    )
    LOGIN_RATE_LIMIT_WINDOW_MS: int = int(
        (config.get("LOGIN_RATE_LIMIT_WINDOW_MS") or "").strip() or 15 * 60 * 1000
    )
    LOGIN_RATE_LIMIT_SWEEP_THRESHOLD: int = int(
        (config.get("LOGIN_RATE_LIMIT_SWEEP_THRESHOLD") or "").strip() or 10_000
    )

    # Valentines session token
    # No default: logins fail with 503 until a signing secret is configured
    VALENTINES_JWT_SECRET: str | None = (config.get("VALENTINES_JWT_SECRET") or "").strip() or None
    VALENTINES_TOKEN_TTL_SECONDS: int = int(
        (config.get("VALENTINES_TOKEN_TTL_SECONDS") or "").strip() or 24 * 60 * 60
    )
    VALENTINES_COOKIE_NAME: str = config.get("VALENTINES_COOKIE_NAME", "valentine_token").strip()

    # Observability
    LOGFIRE_ENABLE: bool = config.get_bool("LOGFIRE_ENABLE")
    LOGFIRE_TOKEN: str | None = (config.get("LOGFIRE_TOKEN") or "").strip() or None


_app_environ_config = AppEnvironConfig()


def get_app_environ_config() -> AppEnvironConfig:
    return _app_environ_config
