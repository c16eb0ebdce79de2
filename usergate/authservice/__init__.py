from .service import AuthService, CredentialVerifier, TokenIssuer, TokenValidator
from .crypto import HS256TokenSigner
from .hashing import PasswordHasher
from .store import InMemoryCredentialStore, SqliteCredentialStore
from .config import AuthSettings, load_auth_settings
from .contracts import AuthContext, CredentialRecord, Identity
from .deps import get_auth_service, get_current_identity
from .middleware import BearerAuthMiddleware
from .routes import router as auth_router

__all__ = [
    "AuthService",
    "CredentialVerifier",
    "TokenIssuer",
    "TokenValidator",
    "HS256TokenSigner",
    "PasswordHasher",
    "InMemoryCredentialStore",
    "SqliteCredentialStore",
    "AuthSettings",
    "load_auth_settings",
    "AuthContext",
    "CredentialRecord",
    "Identity",
    "get_auth_service",
    "get_current_identity",
    "BearerAuthMiddleware",
    "auth_router",
]
