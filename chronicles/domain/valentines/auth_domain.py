"""Valentines login - rate limited credential check and session token."""

import math
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt
from loguru import logger
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from chronicles.app_config import AppEnvironConfig, get_app_environ_config
from chronicles.shared.rate_limiter import RateLimiter
from chronicles.utils.app_errors import AppError, AppErrorCode, HttpStatusCode

from ._passwords import verify_password
from ._repository import ValentineUserRepository
from .auth_models import LoginParams, LoginResult, LoginUser

TOKEN_ALGORITHM = "HS256"
BAD_CREDENTIALS_MESSAGE = "Invalid enrollment number or password"


def build_login_rate_limiter(cfg: AppEnvironConfig | None = None) -> RateLimiter:
    cfg = cfg or get_app_environ_config()
    return RateLimiter(
        cfg.LOGIN_RATE_LIMIT_MAX_ATTEMPTS,
        cfg.LOGIN_RATE_LIMIT_WINDOW_MS,
        sweep_threshold=cfg.LOGIN_RATE_LIMIT_SWEEP_THRESHOLD,
    )


def _validation_fields(exc: ValidationError) -> dict[str, str]:
    fields: dict[str, str] = {}
    for err in exc.errors():
        path = ".".join(str(p) for p in err["loc"]) or "body"
        fields.setdefault(path, err["msg"])
    return fields


class ValentineAuthService:
    def __init__(
        self,
        limiter: RateLimiter,
        repository: ValentineUserRepository | None = None,
        cfg: AppEnvironConfig | None = None,
    ):
        self.limiter = limiter
        self.repository = repository or ValentineUserRepository()
        self.cfg = cfg or get_app_environ_config()

    def create_token(self, enrollment_number: str, token_type: str = "user") -> str:
        secret = self.cfg.VALENTINES_JWT_SECRET
        if not secret:
            logger.error("VALENTINES_JWT_SECRET not configured")
            raise AppError(
                errcode=AppErrorCode.E_SERVICE_UNAVAILABLE,
                errmesg="Login not configured",
                status_code=HttpStatusCode.SERVICE_UNAVAILABLE,
            )

        now = datetime.now(timezone.utc)
        payload = {
            "sub": enrollment_number,
            "type": token_type,
            "iat": now,
            "exp": now + timedelta(seconds=self.cfg.VALENTINES_TOKEN_TTL_SECONDS),
        }
        return jwt.encode(payload, secret, algorithm=TOKEN_ALGORITHM)

    async def login(self, client_ip: str, payload: Any) -> LoginResult:
        """Check the attempt budget, then the credentials.

        The attempt is counted before the body is even looked at, so malformed
        submissions spend budget too. A successful login clears the budget.

        Raises:
            AppError: E_RATE_LIMITED (429), E_INVALID_PARAMS (400),
                E_BAD_CREDENTIALS (401),
                E_SERVICE_UNAVAILABLE (503) or E_INTERNAL_ERROR (500) for store failures
        """
        decision = self.limiter.check(client_ip)
        if not decision.allowed:
            minutes = math.ceil(decision.reset_in_ms / 60_000)
            logger.warning(
                f"Login rate limited for {client_ip}, resets in {decision.reset_in_ms}ms"
            )
            raise AppError(
                errcode=AppErrorCode.E_RATE_LIMITED,
                errmesg=f"Too many login attempts. Please try again in {minutes} minutes.",
                status_code=HttpStatusCode.TOO_MANY_REQUESTS,
                details={"resetInMs": decision.reset_in_ms},
                headers={"Retry-After": str(math.ceil(decision.reset_in_ms / 1000))},
            )

        try:
            params = LoginParams.model_validate(payload)
        except ValidationError as e:
            raise AppError(
                errcode=AppErrorCode.E_INVALID_PARAMS,
                errmesg="Validation failed",
                status_code=HttpStatusCode.BAD_REQUEST,
                details={"fields": _validation_fields(e)},
            ) from e

        try:
            user = await self.repository.get_by_enrollment_number(params.enrollment_number)
        except ValidationError as e:
            logger.error(f"Invalid user document for {params.enrollment_number}: {e}")
            raise AppError(
                errcode=AppErrorCode.E_INTERNAL_ERROR,
                errmesg="Stored document failed validation",
                status_code=HttpStatusCode.INTERNAL_ERROR,
            ) from e
        except (PyMongoError, ValueError) as e:
            logger.error(
                f"User lookup failed for {params.enrollment_number}: {type(e).__name__}: {e}"
            )
            raise AppError(
                errcode=AppErrorCode.E_SERVICE_UNAVAILABLE,
                errmesg="Database connection failed",
                status_code=HttpStatusCode.SERVICE_UNAVAILABLE,
            ) from e

        if user is None or not verify_password(params.password, user.password_hash):
            logger.info(
                f"Failed login for {params.enrollment_number} from {client_ip}, "
                f"{decision.remaining} attempt(s) left"
            )
            raise AppError(
                errcode=AppErrorCode.E_BAD_CREDENTIALS,
                errmesg=BAD_CREDENTIALS_MESSAGE,
                status_code=HttpStatusCode.UNAUTHORIZED,
            )

        token = self.create_token(user.enrollment_number)
        self.limiter.reset(client_ip)

        logger.info(f"Valentines login for {user.enrollment_number}")
        return LoginResult(
            token=token,
            max_age=self.cfg.VALENTINES_TOKEN_TTL_SECONDS,
            user=LoginUser(
                full_name=user.full_name,
                enrollment_number=user.enrollment_number,
                has_spun=user.has_spun,
            ),
        )
