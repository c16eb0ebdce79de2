from __future__ import annotations
import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from usergate.authservice.errors import AuthServiceError, InvalidCredentials
from usergate.authservice.middleware import error_response
from usergate.authservice.routes import LOGIN_PATH

logger = logging.getLogger("apigateway")


async def auth_error_handler(request: Request, exc: AuthServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request.auth_error", extra={"code": exc.code, "reason": str(exc)})
    return error_response(request, exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # A login body that is not a JSON object never echoes its input back.
    if request.url.path == LOGIN_PATH:
        err = InvalidCredentials("Malformed login body")
        logger.warning(
            "auth.login.rejected",
            extra={"code": err.code, "reason": str(err), "errors": len(exc.errors())},
        )
        return error_response(request, err)
    return await request_validation_exception_handler(request, exc)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AuthServiceError, auth_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
