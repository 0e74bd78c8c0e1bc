from typing import Any

from fastapi import APIRouter, Body, Depends

from chronicles.api.v1.dependency import ClientIP, get_valentine_auth_service
from chronicles.api.v1.schemas.valentines import LoginIn, LoginOut
from chronicles.app_config import get_app_environ_config
from chronicles.domain.valentines.auth_domain import ValentineAuthService
from chronicles.shared.api.utils import make_response

router = APIRouter(prefix="/valentines", tags=["Valentines"])


@router.post(
    "/login",
    response_model=LoginOut,
    openapi_extra={
        "requestBody": {"content": {"application/json": {"schema": LoginIn.model_json_schema()}}}
    },
)
async def valentines_login(
    client_ip: ClientIP,
    payload: Any = Body(None),
    service: ValentineAuthService = Depends(get_valentine_auth_service),
):
    """Log a participant in and set the session cookie.

    Raises:
        429: too many attempts from this address in the current window
        400: malformed body
        401: unknown enrollment number or wrong password
    """
    result = await service.login(client_ip, payload)

    cfg = get_app_environ_config()
    response = make_response(LoginOut(user=result.user))
    response.set_cookie(
        key=cfg.VALENTINES_COOKIE_NAME,
        value=result.token,
        max_age=result.max_age,
        path="/",
        httponly=True,
        samesite="lax",
        secure=not cfg.DEBUG,
    )
    return response
