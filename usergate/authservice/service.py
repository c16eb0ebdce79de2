from __future__ import annotations
import logging
import time
from typing import Any, Optional

from pydantic import ValidationError

from .config import AuthSettings
from .contracts import (
    ClockPort, CredentialStorePort, Identity, IdentityClaims,
    LoginRequest, TokenResult,
)
from .crypto import HS256TokenSigner
from .errors import (
    InvalidCredentials, InvalidToken, MissingPassword, MissingToken, StoreUnavailable,
)
from .hashing import PasswordHasher

logger = logging.getLogger("authservice")


class SystemClock(ClockPort):
    def now_utc_ts(self) -> int:
        return int(time.time())


class CredentialVerifier:
    """Checks an email/password pair against the store. Read-only."""

    def __init__(self, *, store: CredentialStorePort, hasher: PasswordHasher):
        self.store = store
        self.hasher = hasher

    def verify(self, email: Any, candidate_password: Any) -> Identity:
        if candidate_password is None or candidate_password == "":
            raise MissingPassword()
        if not isinstance(candidate_password, str):
            raise InvalidCredentials("Malformed password")
        if not isinstance(email, str) or not email:
            raise InvalidCredentials("Malformed email")

        try:
            record = self.store.find_by_email(email)
        except Exception as ex:
            logger.exception("auth.store.error", extra={"error": type(ex).__name__})
            raise StoreUnavailable(f"Credential lookup failed: {type(ex).__name__}") from ex

        if record is None:
            # Same Argon2 cost as a real mismatch, so timing does not reveal unknown emails.
            self.hasher.verify_dummy(candidate_password)
            raise InvalidCredentials("Unknown email")
        if not self.hasher.verify(candidate_password, record.password_hash):
            raise InvalidCredentials("Password mismatch")
        return Identity(id=record.id)


class TokenIssuer:
    def __init__(
        self,
        *,
        signer: HS256TokenSigner,
        ttl_seconds: Optional[int] = None,
        clock: Optional[ClockPort] = None,
    ):
        self.signer = signer
        self.ttl_seconds = ttl_seconds
        self.clock = clock or SystemClock()

    def issue(self, identity: Identity) -> str:
        exp = self.clock.now_utc_ts() + self.ttl_seconds if self.ttl_seconds else None
        claims = IdentityClaims(id=identity.id, exp=exp)
        return self.signer.sign(claims.to_payload())


class TokenValidator:
    def __init__(self, *, signer: HS256TokenSigner, clock: Optional[ClockPort] = None):
        self.signer = signer
        self.clock = clock or SystemClock()

    def validate(self, token: Optional[str]) -> Identity:
        if not token:
            raise MissingToken()
        payload = self.signer.verify(token)
        try:
            claims = IdentityClaims.model_validate(payload)
        except ValidationError:
            raise InvalidToken("Undecodable claims")
        if claims.exp is not None and self.clock.now_utc_ts() >= claims.exp:
            raise InvalidToken("Token expired")
        return Identity(id=claims.id)


class AuthService:
    """Login (verify + issue) and token validation, built once from settings."""

    def __init__(
        self,
        *,
        verifier: CredentialVerifier,
        issuer: TokenIssuer,
        validator: TokenValidator,
    ):
        self.verifier = verifier
        self.issuer = issuer
        self.validator = validator

    @classmethod
    def from_settings(
        cls,
        settings: AuthSettings,
        store: CredentialStorePort,
        *,
        clock: Optional[ClockPort] = None,
    ) -> "AuthService":
        hasher = PasswordHasher(
            settings.HASH_SECRET,
            time_cost=settings.ARGON2_TIME_COST,
            memory_cost=settings.ARGON2_MEMORY_COST,
            parallelism=settings.ARGON2_PARALLELISM,
        )
        signer = HS256TokenSigner(settings.JWT_SECRET)
        return cls(
            verifier=CredentialVerifier(store=store, hasher=hasher),
            issuer=TokenIssuer(signer=signer, ttl_seconds=settings.TOKEN_TTL_SECONDS, clock=clock),
            validator=TokenValidator(signer=signer, clock=clock),
        )

    # --------- Core operations ----------
    def login(self, req: LoginRequest) -> TokenResult:
        try:
            identity = self.verifier.verify(req.email, req.password)
        except (MissingPassword, InvalidCredentials) as ex:
            logger.warning("auth.login.rejected", extra={"code": ex.code, "reason": str(ex)})
            raise
        token = self.issuer.issue(identity)
        logger.info("auth.login.success", extra={"user_id": identity.id})
        return TokenResult(access_token=token)
