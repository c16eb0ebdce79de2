from __future__ import annotations
from typing import Any, Dict, Literal, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field, StrictInt, constr

# ---------- Unified Wire Format (UWF) ----------
class ErrorPayload(BaseModel):
    type: Literal["AUTH_ERROR","VALIDATION","UPSTREAM","INTERNAL"]
    code: constr(strip_whitespace=True, min_length=1)
    message: constr(strip_whitespace=True, min_length=1)

class MetaPayload(BaseModel):
    trace_id: Optional[str] = None
    request_id: Optional[str] = None

class UWFResponse(BaseModel):
    ok: bool
    result: Optional[Any] = None
    error: Optional[ErrorPayload] = None
    meta: MetaPayload = Field(default_factory=MetaPayload)

# ---------- Domain Models ----------
class CredentialRecord(BaseModel):
    """Row owned by the users store. Read-only here."""
    id: int
    email: str
    password_hash: str

class Identity(BaseModel):
    """The only fact a verified login or a valid token yields."""
    model_config = ConfigDict(frozen=True)

    id: StrictInt

class IdentityClaims(BaseModel):
    model_config = ConfigDict(extra="forbid")

    id: StrictInt
    exp: Optional[StrictInt] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

class AuthContext(BaseModel):
    """Per-request authentication result, owned by a single request."""
    model_config = ConfigDict(frozen=True)

    identity: Identity

# ---------- Ports (Contracts) ----------
class CredentialStorePort(Protocol):
    """
    Read-only lookup over the user credential store.
    Must be safe to call concurrently; may raise on infrastructure failure.
    """
    def find_by_email(self, email: str) -> Optional[CredentialRecord]: ...

class ClockPort(Protocol):
    def now_utc_ts(self) -> int: ...

# ---------- Service I/O ----------
class LoginRequest(BaseModel):
    # Untyped so that absent or mistyped fields reach the verifier, which
    # classifies them, instead of failing request validation.
    email: Any = None
    password: Any = None

class TokenResult(BaseModel):
    access_token: str
    token_type: Literal["Bearer"] = "Bearer"

class IdentityResult(BaseModel):
    id: int
