from __future__ import annotations
from fastapi import APIRouter, Depends

from .contracts import Identity, IdentityResult, LoginRequest, UWFResponse
from .deps import get_auth_service, get_current_identity
from .service import AuthService

router = APIRouter(prefix="/api", tags=["auth"])

# Full path, used by the gateway to classify malformed login bodies.
LOGIN_PATH = "/api/auth/login"

# Plain `def`: FastAPI runs these in its threadpool, so Argon2 never blocks the loop.
@router.post("/auth/login", response_model=UWFResponse)
def login(req: LoginRequest, svc: AuthService = Depends(get_auth_service)):
    return UWFResponse(ok=True, result=svc.login(req))

@router.get("/protected/check", response_model=UWFResponse)
def check(identity: Identity = Depends(get_current_identity)):
    return UWFResponse(ok=True, result=IdentityResult(id=identity.id))
