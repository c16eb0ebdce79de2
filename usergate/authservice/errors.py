from __future__ import annotations
from typing import Dict, Optional


class AuthServiceError(Exception):
    """Base error for the auth component. Carries its own HTTP mapping."""

    type: str = "AUTH_ERROR"
    code: str = "auth_failed"
    message: str = "Authentication failed"
    status_code: int = 401
    # Only token errors answer with a `WWW-Authenticate: Bearer` challenge.
    challenge: bool = False

    def __init__(self, message: Optional[str] = None, *, details: Optional[Dict] = None):
        # `message` here is for logs; clients always see the class-level message.
        super().__init__(message or self.message)
        self.details = details

    def to_payload(self) -> Dict:
        return {
            "type": self.type,
            "code": self.code,
            "message": self.message,
        }


class MissingPassword(AuthServiceError):
    type = "VALIDATION"
    code = "missing_password"
    message = "Password is required"
    status_code = 400


class InvalidCredentials(AuthServiceError):
    code = "invalid_credentials"
    message = "Invalid email or password"


class StoreUnavailable(AuthServiceError):
    type = "UPSTREAM"
    code = "store_unavailable"
    message = "Credential store unavailable"
    status_code = 500


class MissingToken(AuthServiceError):
    code = "missing_token"
    message = "Missing bearer token"
    challenge = True


class InvalidToken(AuthServiceError):
    code = "invalid_token"
    message = "Invalid bearer token"
    challenge = True


class NotAuthenticated(AuthServiceError):
    """Handler expected an identity but the request carries none."""

    code = "unauthorized"
    message = "Not authenticated"
    challenge = True


class SigningUnavailable(AuthServiceError):
    """Token signing has no key. Raised at startup only."""

    type = "INTERNAL"
    code = "signing_unavailable"
    message = "Token signing unavailable"
    status_code = 500


class ConfigError(Exception):
    """Settings could not be loaded. Fatal at process start."""
