from __future__ import annotations
import base64
import hashlib
import hmac
import logging
import secrets

from argon2 import PasswordHasher as _Argon2Hasher, Type
from argon2.exceptions import InvalidHashError, VerificationError

logger = logging.getLogger("authservice")


class PasswordHasher:
    """
    Argon2id over an HMAC-SHA256 of the password keyed with the server hash secret.

    The secret never lands in the stored PHC string, so a leaked table alone
    is not enough to test password guesses. Rotating the secret invalidates
    every stored hash.
    """

    def __init__(
        self,
        secret: str,
        *,
        time_cost: int = 3,
        memory_cost: int = 65536,
        parallelism: int = 4,
    ):
        if not secret:
            raise ValueError("PasswordHasher requires non-empty secret")
        self._secret = secret.encode("utf-8")
        self._argon2 = _Argon2Hasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            type=Type.ID,
        )
        # Stands in for a stored hash when the email is unknown.
        self._dummy_hash = self._argon2.hash(self._keyed(secrets.token_urlsafe(16)))

    def _keyed(self, password: str) -> str:
        digest = hmac.new(self._secret, password.encode("utf-8"), hashlib.sha256).digest()
        return base64.b64encode(digest).decode("ascii")

    def hash(self, password: str) -> str:
        if not password:
            raise ValueError("password_blank")
        return self._argon2.hash(self._keyed(password))

    def verify(self, password: str, encoded: str) -> bool:
        if not password or not encoded:
            return False
        try:
            return self._argon2.verify(encoded, self._keyed(password))
        except VerificationError:
            return False
        except InvalidHashError:
            logger.warning("auth.hash.unparseable")
            return False

    def verify_dummy(self, password: str) -> bool:
        """Full-cost verify against a random hash; always False."""
        self.verify(password, self._dummy_hash)
        return False
