from __future__ import annotations
import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("apigateway")

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=level.upper(), format=_LOG_FORMAT)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Request/trace ids plus one access line per request with its auth outcome."""

    async def dispatch(self, request: Request, call_next: Callable):
        start = time.perf_counter()
        ids = {
            "request_id": request.headers.get("x-request-id") or str(uuid.uuid4()),
            "trace_id": request.headers.get("x-trace-id") or str(uuid.uuid4()),
        }
        request.state.request_id = ids["request_id"]
        request.state.trace_id = ids["trace_id"]

        try:
            response: Response = await call_next(request)
        except Exception:
            logger.exception(
                "request.exception",
                extra={**ids, "path": request.url.path, "duration_ms": _elapsed_ms(start)},
            )
            raise

        response.headers["x-request-id"] = ids["request_id"]
        response.headers["x-trace-id"] = ids["trace_id"]

        # Set by the bearer gate on success, or by the error responder on rejection.
        auth = getattr(request.state, "auth", None)
        logger.info(
            "request.end",
            extra={
                **ids,
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": _elapsed_ms(start),
                "user_id": auth.identity.id if auth is not None else None,
                "auth_error": getattr(request.state, "auth_error", None),
            },
        )
        return response


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
