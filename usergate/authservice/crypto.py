from __future__ import annotations
import base64, binascii, json, hmac, hashlib
from typing import Any, Dict

from .errors import InvalidToken, SigningUnavailable

_HEADER = {"alg": "HS256", "typ": "JWT"}


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")

def _unb64url(s: str) -> bytes:
    pad = '=' * (-len(s) % 4)
    return base64.urlsafe_b64decode(s + pad)

def _canonical_json(obj: Dict[str, Any]) -> bytes:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True).encode("utf-8")


class HS256TokenSigner:
    """
    Compact HS256 token: header.payload.signature, each segment base64url.
    Payloads are encoded with sorted keys so equal claims give equal tokens.
    """
    def __init__(self, secret: str):
        if not secret:
            raise SigningUnavailable("HS256TokenSigner requires non-empty secret")
        self._secret = secret.encode("utf-8")
        self._header_b64 = _b64url(_canonical_json(_HEADER))

    def _signature(self, signing_input: str) -> str:
        return _b64url(hmac.new(self._secret, signing_input.encode("ascii"), hashlib.sha256).digest())

    def sign(self, claims: Dict[str, Any]) -> str:
        payload_b64 = _b64url(_canonical_json(claims))
        signing_input = f"{self._header_b64}.{payload_b64}"
        return f"{signing_input}.{self._signature(signing_input)}"

    def verify(self, token: str) -> Dict[str, Any]:
        """Return the decoded payload or raise InvalidToken."""
        try:
            header_b64, payload_b64, sig_b64 = token.split(".")
        except ValueError:
            raise InvalidToken("Invalid token format")
        try:
            signing_input = f"{header_b64}.{payload_b64}"
            expected_sig = self._signature(signing_input)
        except UnicodeEncodeError:
            raise InvalidToken("Non-ascii token")
        # Compare the canonical text, not decoded bytes: base64 padding bits
        # would otherwise let two different strings decode to the same digest.
        if not hmac.compare_digest(expected_sig.encode("ascii"), sig_b64.encode("utf-8")):
            raise InvalidToken("Signature mismatch")
        try:
            header = json.loads(_unb64url(header_b64))
            payload = json.loads(_unb64url(payload_b64))
        except (binascii.Error, ValueError):
            raise InvalidToken("Undecodable segment")
        if not isinstance(header, dict) or header.get("alg") != "HS256":
            raise InvalidToken("Unexpected header")
        if not isinstance(payload, dict):
            raise InvalidToken("Payload is not an object")
        return payload
