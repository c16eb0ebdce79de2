from __future__ import annotations
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from usergate.authservice import (
    AuthService, AuthSettings, BearerAuthMiddleware, SqliteCredentialStore,
    auth_router, load_auth_settings,
)
from usergate.authservice.contracts import ClockPort, CredentialStorePort
from .errors import install_error_handlers
from .observability import RequestContextMiddleware, configure_logging
from .settings import APP_NAME, GatewaySettings

logger = logging.getLogger("apigateway")


def create_app(
    *,
    auth_settings: Optional[AuthSettings] = None,
    settings: Optional[GatewaySettings] = None,
    store: Optional[CredentialStorePort] = None,
    clock: Optional[ClockPort] = None,
) -> FastAPI:
    """
    Build the API. Secrets are read here, once; a missing or invalid secret
    raises ConfigError and the process should not start.
    """
    if settings is None:
        settings = GatewaySettings()
    if auth_settings is None:
        auth_settings = load_auth_settings()

    if store is None:
        sqlite_store = SqliteCredentialStore(settings.DATABASE_PATH)
        sqlite_store.init_schema()
        store = sqlite_store

    auth_service = AuthService.from_settings(auth_settings, store, clock=clock)

    app = FastAPI(title=APP_NAME, version=settings.APP_VERSION)
    app.state.auth_service = auth_service

    # Added innermost first: CORS wraps request context, which wraps the gate.
    app.add_middleware(
        BearerAuthMiddleware,
        validator=auth_service.validator,
        protected_paths=settings.PROTECTED_PATHS,
    )
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ALLOW_ORIGINS,
        allow_credentials=True,
        allow_methods=settings.CORS_ALLOW_METHODS,
        allow_headers=settings.CORS_ALLOW_HEADERS,
    )
    install_error_handlers(app)

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    app.include_router(auth_router)
    logger.info("app.created", extra={"protected_paths": settings.PROTECTED_PATHS})
    return app


def build_app() -> FastAPI:
    """Process entry point for uvicorn (`--factory`)."""
    settings = GatewaySettings()
    configure_logging(settings.LOG_LEVEL)
    return create_app(settings=settings)
