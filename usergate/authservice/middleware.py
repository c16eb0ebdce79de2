from __future__ import annotations

import logging
import re
from typing import List, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse

from .contracts import AuthContext, ErrorPayload, MetaPayload, UWFResponse
from .errors import AuthServiceError, MissingToken
from .service import TokenValidator

logger = logging.getLogger("authservice")


def extract_bearer(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an `Authorization: Bearer <token>` value, else None."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    return token.strip() or None


def error_response(request: Request, err: AuthServiceError) -> JSONResponse:
    """UWF error body for `err`; the code is kept on the request for the access log."""
    request.state.auth_error = err.code
    body = UWFResponse(
        ok=False,
        error=ErrorPayload(**err.to_payload()),
        meta=MetaPayload(
            request_id=getattr(request.state, "request_id", None),
            trace_id=getattr(request.state, "trace_id", None),
        ),
    )
    return JSONResponse(
        status_code=err.status_code,
        content=body.model_dump(),
        headers={"WWW-Authenticate": "Bearer"} if err.challenge else None,
    )


class BearerAuthMiddleware(BaseHTTPMiddleware):
    """Hard gate: protected paths only reach their handler with a valid bearer token."""

    def __init__(
        self,
        app,
        validator: TokenValidator,
        protected_paths: Optional[List[str]] = None,
    ):
        super().__init__(app)
        self.validator = validator
        self.protected_paths = [re.compile(p) for p in (protected_paths or [r"^/api/protected(/|$)"])]

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path
        if not any(p.search(path) for p in self.protected_paths):
            return await call_next(request)

        token = extract_bearer(request.headers.get("Authorization"))
        try:
            if token is None:
                raise MissingToken()
            identity = self.validator.validate(token)
        except AuthServiceError as err:
            logger.info(
                "auth.token.rejected",
                extra={"path": path, "code": err.code, "reason": str(err)},
            )
            return error_response(request, err)

        request.state.auth = AuthContext(identity=identity)
        return await call_next(request)
