from typing import Optional

from fastapi import Request

from .contracts import AuthContext, Identity
from .errors import NotAuthenticated
from .service import AuthService


def get_auth_service(request: Request) -> AuthService:
    """
    The service is built once by the app factory and parked on `app.state`.
    Tests can swap it with `app.dependency_overrides[get_auth_service]`.
    """
    return request.app.state.auth_service


def get_current_identity(request: Request) -> Identity:
    """
    Identity attached by BearerAuthMiddleware for this request.
    Absence means the route is not behind the gate; that is never anonymous access.
    """
    ctx: Optional[AuthContext] = getattr(request.state, "auth", None)
    if not isinstance(ctx, AuthContext):
        raise NotAuthenticated()
    return ctx.identity
