"""Application error type raised by domain code and rendered by the API layer."""

import inspect
from enum import Enum, IntEnum
from typing import Any
from uuid import uuid4


class HttpStatusCode(IntEnum):
    BAD_REQUEST = 400
    UNAUTHORIZED = 401
    FORBIDDEN = 403
    NOT_FOUND = 404
    CONFLICT = 409
    UNPROCESSABLE_ENTITY = 422
    TOO_MANY_REQUESTS = 429
    INTERNAL_ERROR = 500
    SERVICE_UNAVAILABLE = 503


class AppErrorCode(str, Enum):
    E_INTERNAL_ERROR = "E_INTERNAL_ERROR"
    E_INVALID_PARAMS = "E_INVALID_PARAMS"
    E_SERVICE_UNAVAILABLE = "E_SERVICE_UNAVAILABLE"

    # Live streaming
    E_INVALID_ROLE = "E_INVALID_ROLE"
    E_TOKEN_SIGNING_FAILED = "E_TOKEN_SIGNING_FAILED"
    E_BROADCASTER_ACTIVE = "E_BROADCASTER_ACTIVE"

    # Webhooks
    E_WEBHOOK_UNAUTHORIZED = "E_WEBHOOK_UNAUTHORIZED"
    E_WEBHOOK_ERROR = "E_WEBHOOK_ERROR"

    # Login
    E_BAD_CREDENTIALS = "E_BAD_CREDENTIALS"
    E_RATE_LIMITED = "E_RATE_LIMITED"

    def __str__(self) -> str:
        return self.value


class AppError(Exception):
    """Error with an API error code and the HTTP status it should map to.

    The caller location is captured at construction so the handler can log
    where the error originated rather than where it was rendered.
    """

    def __init__(
        self,
        errcode: AppErrorCode | str,
        errmesg: str,
        status_code: HttpStatusCode | int = HttpStatusCode.BAD_REQUEST,
        *,
        details: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(errmesg)
        self.errcode = errcode.value if isinstance(errcode, Enum) else str(errcode)
        self.errmesg = errmesg
        self.status_code = int(status_code)
        self.details = details
        self.headers = headers
        self.erresid = uuid4().hex[:10]

        caller_frame = inspect.stack()[1]
        module = inspect.getmodule(caller_frame.frame)
        module_name = module.__name__ if module else caller_frame.filename
        self.caller_info = f"{module_name}:{caller_frame.function}:{caller_frame.lineno}"

    def __repr__(self) -> str:
        return f"AppError({self.errcode!r}, {self.errmesg!r}, {self.status_code})"


__all__ = ["AppError", "AppErrorCode", "HttpStatusCode"]
