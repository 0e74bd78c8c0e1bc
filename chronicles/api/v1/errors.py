from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from chronicles.shared.api.utils import ApiFailure, api_failure, make_response
from chronicles.utils.app_errors import AppError, AppErrorCode, HttpStatusCode


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """
    Custom exception handler for AppError.
    Converts AppError to ApiFailure and returns via make_response.
    """
    # Log with the caller info captured when AppError was raised
    log_msg = (
        f"{exc.errcode} {exc.erresid} path={request.url.path} "
        f"msg={exc.errmesg} caller={exc.caller_info}"
    )
    if exc.status_code >= HttpStatusCode.INTERNAL_ERROR:
        logger.error(log_msg)
    else:
        logger.warning(log_msg)

    failure = ApiFailure(
        errcode=exc.errcode,
        error=exc.errmesg,
        erresid=exc.erresid,
        details=exc.details,
    )
    return make_response(failure, status_code=exc.status_code, headers=exc.headers)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request validation errors keep FastAPI's 422 but use the failure envelope."""
    failure = api_failure(
        errcode=AppErrorCode.E_INVALID_PARAMS.value,
        errmesg="Request validation failed",
        details={"errors": jsonable_encoder(exc.errors())},
        trace=request.url.path,
    )
    return make_response(failure, status_code=HttpStatusCode.UNPROCESSABLE_ENTITY)
