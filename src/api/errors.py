"""
Exception handlers - Map domain errors to HTTP responses.

Every error body has the shape ``{"message": ...}``. Unexpected exceptions
are logged with their traceback and answered with a generic 500 so no
internal detail reaches the client.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.domain.exceptions import (
    AccountError,
    AccountNotFound,
    EmailAlreadyRegistered,
    EmailNotVerified,
    InvalidCode,
    InvalidCredentials,
    InvalidToken,
    PasswordTooLong,
)

logger = logging.getLogger(__name__)

STATUS_BY_ERROR: dict[type[AccountError], int] = {
    EmailAlreadyRegistered: status.HTTP_409_CONFLICT,
    AccountNotFound: status.HTTP_404_NOT_FOUND,
    InvalidCode: status.HTTP_401_UNAUTHORIZED,
    InvalidCredentials: status.HTTP_401_UNAUTHORIZED,
    EmailNotVerified: status.HTTP_401_UNAUTHORIZED,
    InvalidToken: status.HTTP_401_UNAUTHORIZED,
    PasswordTooLong: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


async def account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
    status_code = STATUS_BY_ERROR.get(type(exc), status.HTTP_400_BAD_REQUEST)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, InvalidToken) else None
    return JSONResponse(status_code=status_code, content={"message": exc.message}, headers=headers)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Unknown routes, wrong methods and other framework errors keep the message shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AccountError, account_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
